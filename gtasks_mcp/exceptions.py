class AuthenticationError(Exception):
    """Raised when OAuth credentials are missing or invalid."""


class IntegrationError(Exception):
    """Raised when a Tasks API call fails."""


class RateLimitError(Exception):
    """Raised when the Tasks API rate limit is hit."""


class TaskNotFoundError(Exception):
    """Raised when a task cannot be found in the list(s) searched."""


class TaskValidationError(Exception):
    """Raised when a required argument is missing or has an unsupported value."""


class UnknownOperationError(Exception):
    """Raised when a tool call names an operation that does not exist."""


class DueDateParseError(Exception):
    """Raised when a due date cannot be normalized.

    ``reason`` is ``"malformed"`` when the input is not a recognizable calendar
    date and ``"out_of_range"`` when its year falls outside 1970-2100.
    """

    def __init__(self, value: str, reason: str, message: str):
        super().__init__(message)
        self.value = value
        self.reason = reason


# Failures coming back from the Tasks backend, as opposed to bad input.
BACKEND_ERRORS = (AuthenticationError, IntegrationError, RateLimitError, TaskNotFoundError)
