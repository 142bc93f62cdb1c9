"""Domain exceptions for WellPump.

The HTTP layer maps these to status codes:

- ConstraintViolationError -> 409
- NotFoundError            -> 404
- MissingParameterError    -> 400

RemoteUnavailableError never reaches the HTTP layer; the advisor turns it
into an error result.
"""


class WellPumpError(Exception):
    """Base class for all WellPump errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConstraintViolationError(WellPumpError, ValueError):
    """A write would break a store constraint (e.g. duplicate pump name)."""


class NotFoundError(WellPumpError, LookupError):
    """The addressed record does not exist."""


class MissingParameterError(WellPumpError, ValueError):
    """A required query or body parameter was not supplied."""


class RemoteUnavailableError(WellPumpError):
    """The LLM service is not configured or the call failed."""
