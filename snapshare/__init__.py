"""
SnapShare: core services for a social photo-sharing backend

Stateless session tokens and the upload pipeline that composites decorative
overlays onto user photos.
"""

__version__ = "0.1.0"

from .config import load_config
from .services import Services, create_services

__all__ = [
    "load_config",
    "Services",
    "create_services",
]
