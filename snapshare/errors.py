"""
Error taxonomy for SnapShare core services.

Every failure raised by the token authority or the media pipeline is a
SnapshareError carrying a closed ErrorKind, so callers can branch on the
kind instead of matching message strings.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Closed set of failure kinds."""
    # Token authority
    MISSING_CREDENTIAL = "missing_credential"
    MALFORMED_CREDENTIAL = "malformed_credential"
    INVALID_CREDENTIAL = "invalid_credential"
    EXPIRED_CREDENTIAL = "expired_credential"
    SIGNING_ERROR = "signing_error"

    # Media pipeline
    MALFORMED_ENVELOPE = "malformed_envelope"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    ENCODING_ERROR = "encoding_error"
    DECODE_ERROR = "decode_error"
    INVALID_FILTER = "invalid_filter"
    STORAGE_ERROR = "storage_error"

    # Artifact lookup
    ARTIFACT_NOT_FOUND = "artifact_not_found"


class SnapshareError(Exception):
    """Base exception for SnapShare services."""
    kind: ErrorKind
    http_status: int = 500
    default_message: str = "Internal error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(detail or self.default_message)

    @property
    def client_error(self) -> bool:
        """True when the caller sent something wrong (4xx)."""
        return 400 <= self.http_status < 500

    @property
    def message(self) -> str:
        return self.default_message


# Authentication errors

class AuthError(SnapshareError):
    """Base exception for credential failures."""
    http_status = 401


class MissingCredential(AuthError):
    kind = ErrorKind.MISSING_CREDENTIAL
    default_message = "Authorization header required"


class MalformedCredential(AuthError):
    kind = ErrorKind.MALFORMED_CREDENTIAL
    default_message = "Invalid authorization format"


class InvalidCredential(AuthError):
    kind = ErrorKind.INVALID_CREDENTIAL
    default_message = "Invalid token"


class ExpiredCredential(AuthError):
    """Signature is valid but the claim has expired; the client should log in again."""
    kind = ErrorKind.EXPIRED_CREDENTIAL
    default_message = "Token expired"


class SigningError(SnapshareError):
    kind = ErrorKind.SIGNING_ERROR
    default_message = "Failed to sign token"


# Media errors

class MediaError(SnapshareError):
    """Base exception for image ingestion failures."""
    http_status = 400


class MalformedEnvelope(MediaError):
    kind = ErrorKind.MALFORMED_ENVELOPE
    default_message = "Unknown image format"


class UnsupportedMediaType(MediaError):
    kind = ErrorKind.UNSUPPORTED_MEDIA_TYPE
    http_status = 415
    default_message = "Only PNG and JPEG images are allowed"


class PayloadTooLarge(MediaError):
    kind = ErrorKind.PAYLOAD_TOO_LARGE
    http_status = 413
    default_message = "Image size exceeds maximum allowed size (5MB)"


class EncodingError(MediaError):
    kind = ErrorKind.ENCODING_ERROR
    default_message = "Invalid base64 data"


class DecodeError(MediaError):
    kind = ErrorKind.DECODE_ERROR
    default_message = "Image not decoded"


class InvalidFilter(MediaError):
    kind = ErrorKind.INVALID_FILTER
    default_message = "Invalid filter name"


class StorageError(SnapshareError):
    """Raised when an artifact cannot be written; not retried."""
    kind = ErrorKind.STORAGE_ERROR
    default_message = "Failed to store image"


class ArtifactNotFound(SnapshareError):
    kind = ErrorKind.ARTIFACT_NOT_FOUND
    http_status = 404
    default_message = "Image not found"
