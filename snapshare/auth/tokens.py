"""
Stateless session tokens for SnapShare.

Tokens are HS256 JWTs signed with a process-wide symmetric key. There is no
server-side session store: a token is valid iff its signature verifies and
the current time is before its expiry.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt

from ..errors import (
    ExpiredCredential, InvalidCredential, MalformedCredential,
    MissingCredential, SigningError
)

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(hours=1)
JWT_ALGORITHM = "HS256"
BEARER_PREFIX = "Bearer "

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionClaim:
    """Identity embedded in a signed token."""
    subject_id: int
    subject_name: str
    expires_at: datetime
    issued_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        """Check expiry; a claim is dead at its expiry instant."""
        return now >= self.expires_at

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            'userid': self.subject_id,
            'username': self.subject_name,
            'exp': int(self.expires_at.timestamp()),
        }
        if self.issued_at is not None:
            payload['iat'] = int(self.issued_at.timestamp())
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'SessionClaim':
        """
        Build a claim from a decoded token payload.

        Raises:
            InvalidCredential: If a claim is missing or has the wrong type
        """
        subject_id = payload.get('userid')
        subject_name = payload.get('username')
        exp = payload.get('exp')
        iat = payload.get('iat')

        # bool is an int subclass; reject it explicitly
        if not isinstance(subject_id, int) or isinstance(subject_id, bool):
            raise InvalidCredential("Token subject is missing or malformed")
        if not isinstance(subject_name, str):
            raise InvalidCredential("Token subject name is missing or malformed")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise InvalidCredential("Token expiry is missing or malformed")

        issued_at = None
        if isinstance(iat, (int, float)) and not isinstance(iat, bool):
            issued_at = datetime.fromtimestamp(iat, tz=timezone.utc)

        return cls(
            subject_id=subject_id,
            subject_name=subject_name,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
            issued_at=issued_at,
        )


class TokenAuthority:
    """
    Mints and verifies bearer tokens.

    The signing key is injected once and never mutated, so a single instance
    can be shared by any number of concurrent requests without locking.
    """

    def __init__(self, secret_key: str, clock: Optional[Clock] = None):
        """
        Initialize the authority.

        Args:
            secret_key: Symmetric HMAC key
            clock: Callable returning the current aware UTC datetime

        Raises:
            ValueError: If the key is missing or empty
        """
        if not secret_key:
            raise ValueError("A non-empty signing key is required")
        self._secret_key = secret_key
        self._clock = clock or _utcnow

    def issue(self, subject_id: int, subject_name: str) -> str:
        """
        Issue a signed token valid for one hour.

        Args:
            subject_id: Account identifier
            subject_name: Display name snapshot

        Returns:
            Compact JWT string

        Raises:
            SigningError: If the signing primitive fails
        """
        now = self._clock()
        claim = SessionClaim(
            subject_id=subject_id,
            subject_name=subject_name,
            expires_at=now + TOKEN_LIFETIME,
            issued_at=now,
        )

        try:
            token = jwt.encode(claim.to_payload(), self._secret_key, algorithm=JWT_ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            logger.error(f"Token signing failed for subject {subject_id}: {e}")
            raise SigningError(str(e)) from e

        logger.debug(f"Issued token for subject {subject_id}")
        return token

    def verify(self, token: str) -> SessionClaim:
        """
        Verify a token's signature and expiry.

        Args:
            token: Compact JWT string

        Returns:
            The embedded SessionClaim

        Raises:
            ExpiredCredential: Signature is valid but the claim has expired
            InvalidCredential: Any other parse or signature failure
        """
        if not isinstance(token, str) or not token:
            raise InvalidCredential("Empty token")

        try:
            # Expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[JWT_ALGORITHM],
                options={'verify_exp': False, 'verify_iat': False, 'require': ['exp']},
            )
        except jwt.PyJWTError as e:
            logger.warning("Invalid token attempted")
            raise InvalidCredential(str(e)) from e

        claim = SessionClaim.from_payload(payload)
        if claim.is_expired(self._clock()):
            logger.info(f"Expired token attempted for subject {claim.subject_id}")
            raise ExpiredCredential()

        return claim

    def resolve_from_carrier(self, carrier_value: Optional[str]) -> int:
        """
        Resolve the subject id from an Authorization header value.

        Args:
            carrier_value: Raw header value, expected as "Bearer <token>"

        Returns:
            Authenticated subject id

        Raises:
            MissingCredential: Header absent or empty
            MalformedCredential: Header lacks the exact "Bearer " prefix
            ExpiredCredential, InvalidCredential: From verify()
        """
        if not carrier_value:
            raise MissingCredential()
        if not carrier_value.startswith(BEARER_PREFIX):
            raise MalformedCredential()

        token = carrier_value[len(BEARER_PREFIX):]
        return self.verify(token).subject_id

    def resolve_subject_name(self, token: str) -> str:
        """Verify a token and return the display name captured at login."""
        return self.verify(token).subject_name


def generate_verification_token() -> str:
    """Random one-time token for e-mail verification and password reset links."""
    return secrets.token_hex(16)
