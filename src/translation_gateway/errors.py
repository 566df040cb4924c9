"""
Gateway Errors

Domain error taxonomy shared by the services and the HTTP layer.
Every error carries the status code and short title the HTTP layer
reports in its ``{"error": ..., "message": ...}`` body.
"""

from typing import Optional


class GatewayError(Exception):
    """Base class for errors raised by the translation gateway."""
    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, status_code: Optional[int] = None, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error is not None:
            self.error = error

    def to_dict(self) -> dict:
        return {'error': self.error, 'message': self.message}


class ConfigurationError(GatewayError):
    """Missing or invalid settings."""
    status_code = 500
    error = "Internal Server Error"


class ValidationError(GatewayError):
    """Missing or malformed caller input."""
    status_code = 400
    error = "Bad Request"


class AuthorizationError(GatewayError):
    """Missing or unusable credential."""
    status_code = 401
    error = "Unauthorized"


class PullRequestNotFoundError(GatewayError):
    """No open pull request represents the working branch."""
    status_code = 404
    error = "Not Found"


class NotMergeableError(GatewayError):
    status_code = 400
    error = "Not Mergeable"


class MergeFailedError(GatewayError):
    status_code = 400
    error = "Merge Failed"


class ReviewersManifestNotFoundError(GatewayError):
    status_code = 404
    error = "Reviewers Not Found"


class ReviewersManifestError(GatewayError):
    """The reviewers manifest exists but cannot be used."""
    status_code = 400
    error = "Bad Request"


class DocumentFormatError(GatewayError):
    """A translation file does not have the expected shape."""
    status_code = 400
    error = "Invalid Translation File"


class FileContentError(GatewayError):
    """Content of a changed file could not be retrieved."""
    status_code = 500
    error = "Internal Server Error"

    def __init__(self, filename: str):
        super().__init__(f"Failed to retrieve content for file: {filename}")
        self.filename = filename


class StaleFileError(GatewayError):
    """
    A file write was rejected because the file changed after it was read.

    The caller should re-fetch, re-apply and re-submit.
    """
    status_code = 409
    error = "Conflict"
    retryable = True

    def __init__(self, path: str, branch: str):
        super().__init__(
            f"{path} changed on {branch} while translations were being applied; "
            f"fetch the file again and retry"
        )
        self.path = path
        self.branch = branch
