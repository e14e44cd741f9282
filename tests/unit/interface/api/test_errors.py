"""Unit tests for domain error to HTTP status mapping."""

import pytest

from hangout.domain.error import (
    BusinessRuleViolationError,
    DomainError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from hangout.interface.api.errors import to_http_exception


@pytest.mark.parametrize(
    "error,status_code",
    [
        (ValidationError("bad price"), 422),
        (NotFoundError("Invite", "abc"), 404),
        (NotAuthorizedError("invite", "abc", "u1", "accept"), 403),
        (InvalidTransitionError("abc", "pending", "start"), 409),
        (BusinessRuleViolationError("nope"), 409),
        (DomainError("other"), 400),
    ],
)
def test_domain_errors_map_to_status_codes(error, status_code):
    exc = to_http_exception(error)

    assert exc.status_code == status_code
    assert exc.detail == str(error)
