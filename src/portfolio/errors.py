"""Domain errors raised by the content store and upload backends.

Each carries the HTTP status the API maps it to. Auth failures are not part of
this hierarchy; they are raised as HTTPException directly in portfolio.auth.
"""


class ContentError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(ContentError):
    status_code = 400


class UnsupportedMediaType(ValidationFailure):
    pass


class NotFound(ContentError):
    status_code = 404


class Conflict(ContentError):
    status_code = 409


class StorageUnavailable(ContentError):
    """The backing engine failed. The message never includes engine details."""

    def __init__(self, operation: str):
        super().__init__("Storage unavailable")
        self.operation = operation


class UploadFailure(ContentError):
    def __init__(self, key: str):
        super().__init__("Upload failed")
        self.key = key
