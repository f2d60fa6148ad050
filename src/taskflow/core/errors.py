"""Domain errors shared by the store, the session and the adapters."""


class TaskFlowError(Exception):
    """Base class for TaskFlow errors."""

    pass


class ValidationError(TaskFlowError):
    """Raised when an intent carries invalid input (empty title, empty message)."""

    pass


class NotFoundError(TaskFlowError):
    """Raised when a task id is not in the store."""

    pass


class TransportError(TaskFlowError):
    """Raised when the assistant service could not be reached."""

    pass


class SoftApiError(TaskFlowError):
    """Raised when the assistant answered but reported a failure."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "assistant reported a failure")
        self.message = message
