# services/errors.py


class RecordServiceError(Exception):
    """Base class for failures the API layer maps onto an HTTP status."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecordServiceError):
    status_code = 400


class FileTooLargeError(ValidationError):
    status_code = 413


class ConflictError(RecordServiceError):
    status_code = 409


class NotFoundError(RecordServiceError):
    status_code = 404


class StorageError(RecordServiceError):
    """Database or blob store failure. The message is logged, never returned."""
    status_code = 500
