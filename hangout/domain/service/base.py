"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold business logic that spans several aggregates,
    such as an invite transition that also moves both parties' balances.
    """

    pass
