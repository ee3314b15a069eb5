"""
SnapShare authentication.

Stateless bearer tokens signed with a process-wide key.
"""

from .tokens import (
    TokenAuthority, SessionClaim, TOKEN_LIFETIME, generate_verification_token
)

__all__ = [
    'TokenAuthority',
    'SessionClaim',
    'TOKEN_LIFETIME',
    'generate_verification_token'
]
