"""
API response envelopes.

Handlers wrap results in APIResponse and translate SnapshareError instances
into ErrorResponse, keyed by the error kind.
"""

from typing import Dict, Optional, Any, Tuple
from datetime import datetime, timezone
from dataclasses import dataclass, field
from enum import Enum

from ..errors import SnapshareError


class APIStatus(Enum):
    """API response status codes."""
    SUCCESS = "success"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class APIResponse:
    """Standard API response wrapper."""
    status: APIStatus = APIStatus.SUCCESS
    data: Optional[Any] = None
    message: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'status': self.status.value,
            'data': self.data,
            'message': self.message,
            'timestamp': self.timestamp.isoformat()
        }


@dataclass
class ErrorResponse(APIResponse):
    """Error response with additional context."""
    error_code: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None
    http_status: int = 500

    def __post_init__(self):
        self.status = APIStatus.ERROR

    @classmethod
    def from_error(cls, error: SnapshareError) -> 'ErrorResponse':
        """
        Build the envelope for a service error.

        Server-side failures keep their detail out of the response body.

        Args:
            error: Error raised by a SnapShare service

        Returns:
            ErrorResponse carrying the error kind as error_code
        """
        details = None
        if error.client_error and error.detail:
            details = {'detail': error.detail}

        return cls(
            message=error.message,
            error_code=error.kind.value,
            error_details=details,
            http_status=error.http_status
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            'error_code': self.error_code,
            'error_details': self.error_details
        })
        return result

    def to_response(self) -> Tuple[Dict[str, Any], int]:
        """Body and status code pair."""
        return self.to_dict(), self.http_status
