"""
SnapShare request-facing helpers.

Identity resolution for inbound requests and the response envelopes that
error kinds are translated into.
"""

from .context import RequestContext
from .models import APIResponse, APIStatus, ErrorResponse

__all__ = [
    'RequestContext',
    'APIResponse',
    'APIStatus',
    'ErrorResponse'
]
