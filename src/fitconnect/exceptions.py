"""Error taxonomy.

Precondition errors abort a whole batch call. Operation errors are raised
inside a single client's step and always end up in that client's result.
"""

from __future__ import annotations


class FitConnectError(Exception):
    """Base class for all package errors."""


# -- Batch preconditions ------------------------------------------------------


class BatchPreconditionError(FitConnectError):
    """Raised before any per-client work starts."""


class NotAuthenticatedError(BatchPreconditionError):
    def __init__(self) -> None:
        super().__init__("You must be signed in to run bulk actions")


class OperatorNotFoundError(BatchPreconditionError):
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"No coach profile found for user '{user_id}'")


class FeatureDisabledError(BatchPreconditionError):
    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"Bulk actions are disabled ({flag})")


# -- Per-client rejections ----------------------------------------------------


class BatchOperationError(FitConnectError):
    """A single client's operation was rejected.

    The message is user facing and is copied into the client's result.
    """


class MissingFieldError(BatchOperationError):
    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"'{field}' is required")


class AlreadyParticipatingError(BatchOperationError):
    def __init__(self, client_id: str, challenge_id: str) -> None:
        self.client_id = client_id
        self.challenge_id = challenge_id
        super().__init__("Client is already participating in this challenge")


class RelationshipNotFoundError(BatchOperationError):
    def __init__(self, coach_id: str, client_id: str) -> None:
        self.coach_id = coach_id
        self.client_id = client_id
        super().__init__("Client is not linked to this coach")


class UnsupportedOperationError(BatchOperationError):
    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(
            message or f"'{operation}' is not yet supported as a bulk action"
        )


# -- Persistence --------------------------------------------------------------


class StoreError(FitConnectError):
    """The table store could not complete a request."""


class DuplicateRowError(StoreError):
    """An insert would repeat a row on its unique columns."""

    def __init__(self, table: str, columns: tuple[str, ...]):
        self.table = table
        self.columns = columns
        super().__init__(f"Duplicate row in '{table}' on {', '.join(columns)}")
