"""
SnapShare media pipeline.

Validation, decoding and overlay compositing of uploaded photos.
"""

from .compositor import MediaCompositor, MAX_ENCODED_SIZE, sniff_image_type
from .filters import FilterAssetStore, DEFAULT_FILTERS

__all__ = [
    'MediaCompositor',
    'MAX_ENCODED_SIZE',
    'sniff_image_type',
    'FilterAssetStore',
    'DEFAULT_FILTERS'
]
