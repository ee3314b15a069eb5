"""
Per-request identity resolution.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ..auth.tokens import TokenAuthority

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = 'Authorization'


def _find_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup over a plain mapping."""
    value = headers.get(name)
    if value is not None:
        return value

    wanted = name.lower()
    for key, candidate in headers.items():
        if key.lower() == wanted:
            return candidate
    return None


@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller of a single request."""
    subject_id: int

    @classmethod
    def from_headers(cls, headers: Mapping[str, str],
                     authority: TokenAuthority) -> 'RequestContext':
        """
        Resolve the caller from request headers.

        Args:
            headers: Request headers
            authority: Token authority used to verify the bearer token

        Returns:
            RequestContext for the authenticated subject

        Raises:
            MissingCredential, MalformedCredential, InvalidCredential,
            ExpiredCredential: Propagated from the authority
        """
        carrier = _find_header(headers, AUTHORIZATION_HEADER)
        subject_id = authority.resolve_from_carrier(carrier)
        return cls(subject_id=subject_id)
