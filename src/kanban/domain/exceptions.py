class ValidationError(Exception):
    """Raised when caller input breaks a business rule."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class TaskNotFoundError(Exception):
    """Raised when a task identifier does not exist in the task store."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with ID {task_id} not found")
        self.task_id = task_id


class InvalidCredentialsError(Exception):
    """Raised when a login does not match the configured account."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class StorageError(Exception):
    """Raised by the task store when the underlying database operation fails."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"Database error during {operation}: {cause}")
        self.operation = operation


class PersistenceError(Exception):
    """Raised by the task service when the store could not complete a request."""

    def __init__(self, action: str, cause: BaseException) -> None:
        super().__init__(f"Failed to {action}: {cause}")
        self.action = action
