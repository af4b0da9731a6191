"""
Client-side error taxonomy.

Every error carries a `user_message` that can be shown as-is:
  - validation errors are raised before any request is sent
  - NetworkError / MalformedResponseError use generic wording
  - ServerError repeats the `error` field of the server envelope verbatim
"""
from typing import Optional

NETWORK_ERROR_MESSAGE = "Network error, try again"
MALFORMED_RESPONSE_MESSAGE = "Unexpected response from server, try again"


class StorefrontError(Exception):
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class FormValidationError(StorefrontError):
    default_message = "Please check the form"


class PermissionDeniedError(StorefrontError):
    default_message = "You are not allowed to do that"


class NetworkError(StorefrontError):
    default_message = NETWORK_ERROR_MESSAGE


class MalformedResponseError(StorefrontError):
    default_message = MALFORMED_RESPONSE_MESSAGE


class ServerError(StorefrontError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UploadValidationError(StorefrontError):
    """A selected file was rejected before the batch started."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"{filename}: {reason}")


class UploadFailedError(StorefrontError):
    """The upload of one file failed; the batch stopped there."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Upload failed for {filename}")


class UploadInProgressError(StorefrontError):
    default_message = "Wait for the current uploads to finish"
