class TaskError(Exception):
    """Base class for task domain errors."""


class ValidationError(TaskError):
    """A task write was rejected because its fields are invalid."""


class NotFoundError(TaskError):
    """No task matches the requested identifier."""


class StoreError(TaskError):
    """The persistence layer failed (bad identifier, I/O, closed store...)."""
