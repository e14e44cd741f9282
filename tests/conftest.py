"""Test configuration and fixtures."""

import logfire

# Keep service logs local during tests
logfire.configure(send_to_logfire=False, console=False)
