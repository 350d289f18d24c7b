"""Error kinds raised by the workout services.

Every error is recoverable: the caller decides whether to surface it
(the API renders them through ``app.api.exception_handlers``).
"""


class WorkoutLogError(Exception):
    """Base error carrying a message and the HTTP status it maps to."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    @property
    def code(self) -> str:
        return type(self).__name__


class ValidationError(WorkoutLogError):
    """Empty exercise name or out-of-range sets/reps/weight."""

    status_code = 422


class NotFoundError(WorkoutLogError):
    """Requested record, or replication source day, does not exist."""

    status_code = 404


class StoreError(WorkoutLogError):
    """The record store call failed (database/backend issue)."""

    status_code = 503


class ReplicationFailed(WorkoutLogError):
    """Batch insert of a replicated day was rejected; nothing was committed."""

    status_code = 502
