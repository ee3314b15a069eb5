"""
Image ingestion and overlay compositing.

Turns a client-submitted data URL plus an optional overlay name into a PNG
stored under a random name. Every stage validates before the next one does
any work; nothing touches the filesystem until the final write.
"""

import base64
import binascii
import io
import struct
import uuid
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..errors import (
    DecodeError, EncodingError, MalformedEnvelope, PayloadTooLarge,
    StorageError, UnsupportedMediaType
)
from ..storage.local import ArtifactSink
from ..utils.logging import StructuredLogger
from .filters import FilterAssetStore

logger = StructuredLogger(__name__)

MAX_ENCODED_SIZE = 5 * 1024 * 1024
ACCEPTED_MIME_TOKENS = ('image/png', 'image/jpeg', 'image/jpg')

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
JPEG_SIGNATURE = b'\xff\xd8\xff'


def split_envelope(raw_image: str) -> Tuple[str, str]:
    """
    Split "<header>,<payload>".

    Raises:
        MalformedEnvelope: Unless there is exactly one separator
    """
    if not isinstance(raw_image, str):
        raise MalformedEnvelope("Image data must be a string")
    parts = raw_image.split(',')
    if len(parts) != 2:
        raise MalformedEnvelope()
    return parts[0], parts[1]


def check_declared_type(header: str) -> None:
    lowered = header.lower()
    if not any(token in lowered for token in ACCEPTED_MIME_TOKENS):
        raise UnsupportedMediaType(f"Declared type not accepted: {header[:64]!r}")


def sniff_image_type(data: bytes) -> Optional[str]:
    """Detect PNG or JPEG from leading bytes; None for anything else."""
    if data.startswith(PNG_SIGNATURE):
        return 'image/png'
    if data.startswith(JPEG_SIGNATURE):
        return 'image/jpeg'
    return None


def centered_offset(base_size: Tuple[int, int], overlay_size: Tuple[int, int]) -> Tuple[int, int]:
    """Top-left position that centers the overlay, truncated toward zero."""
    return (
        int((base_size[0] - overlay_size[0]) / 2),
        int((base_size[1] - overlay_size[1]) / 2),
    )


def composite_over(base: Image.Image, overlay: Image.Image) -> None:
    """
    Alpha-blend overlay onto the center of base, in place.

    Overlays larger than the base are clipped to the base bounds.
    """
    x, y = centered_offset(base.size, overlay.size)

    # Shift negative offsets into the source box; alpha_composite needs dest >= 0
    src_left = max(0, -x)
    src_top = max(0, -y)
    dest = (max(0, x), max(0, y))
    src_right = min(overlay.width, src_left + base.width - dest[0])
    src_bottom = min(overlay.height, src_top + base.height - dest[1])
    if src_right <= src_left or src_bottom <= src_top:
        return

    base.alpha_composite(overlay, dest=dest, source=(src_left, src_top, src_right, src_bottom))


class MediaCompositor:
    """
    Validates, composites and persists uploaded images.

    Instances keep no per-call state, so one compositor can serve
    concurrent requests.
    """

    def __init__(self, filters: FilterAssetStore, sink: ArtifactSink,
                 max_encoded_size: int = MAX_ENCODED_SIZE):
        self.filters = filters
        self.sink = sink
        self.max_encoded_size = max_encoded_size

    def compose(self, raw_image: str, filter_selector: Optional[str] = None) -> str:
        """
        Run an upload through the full pipeline.

        Args:
            raw_image: Data URL, "<mime-declaration>,<base64-payload>"
            filter_selector: Optional overlay name

        Returns:
            Forward-slash relative path of the stored PNG

        Raises:
            MalformedEnvelope, UnsupportedMediaType, PayloadTooLarge,
            EncodingError, DecodeError, InvalidFilter: Client errors
            StorageError: The artifact could not be written
        """
        header, payload = split_envelope(raw_image)
        check_declared_type(header)

        if len(payload) > self.max_encoded_size:
            raise PayloadTooLarge(f"Encoded payload is {len(payload)} bytes")

        data = self._decode_payload(payload)

        if sniff_image_type(data) is None:
            raise UnsupportedMediaType("Content is not PNG or JPEG data")

        canvas = self._decode_raster(data)

        overlay_name = None
        if filter_selector:
            overlay_name = self.filters.resolve(filter_selector)
            overlay = self.filters.load_overlay(overlay_name)
            if overlay is not None:
                composite_over(canvas, overlay)

        encoded = self._encode_png(canvas)
        filename = f"{uuid.uuid4()}.png"
        stored_path = self.sink.save(filename, encoded)

        logger.info("Stored composited image", path=stored_path,
                    size=canvas.size, overlay=overlay_name)
        return stored_path

    def _decode_payload(self, payload: str) -> bytes:
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncodingError(str(e)) from e

    def _decode_raster(self, data: bytes) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                return image.convert('RGBA')
        except (UnidentifiedImageError, Image.DecompressionBombError,
                OSError, SyntaxError, ValueError, struct.error) as e:
            raise DecodeError(str(e)) from e

    def _encode_png(self, canvas: Image.Image) -> bytes:
        buffer = io.BytesIO()
        try:
            canvas.save(buffer, format='PNG')
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to encode image: {e}") from e
        return buffer.getvalue()
