"""Domain exceptions raised by services and rendered by the API layer."""


class AppError(Exception):
    """Base class for errors that carry a user-facing message."""

    status_code = 500
    error_type = "app_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing field, bad enumeration value, duplicate name, bad price."""

    status_code = 400
    error_type = "validation_error"


class NotFoundError(AppError):
    """Referenced id does not resolve to a live row."""

    status_code = 404
    error_type = "not_found"


class ComputationError(AppError):
    """A cost or nutrient calculation could not be completed for one recipe.

    Handled inside the recompute engine; never reaches a client.
    """

    error_type = "computation_error"


class TransactionError(AppError):
    """The storage commit failed and the whole operation was rolled back."""

    status_code = 500
    error_type = "transaction_error"
