"""
Image and clock helpers for SnapShare tests.
"""

import base64
import io
from datetime import datetime, timedelta

from PIL import Image

TEST_SECRET_KEY = "Zq3v8PmX1tR6wYb0KcN4sHj7LdF2gAe9UoIi5rTy"
OTHER_SECRET_KEY = "aB7dE1fG3hJ5kL9mN2pQ4rS6tU8vW0xY1zC3bD5e"


class FrozenClock:
    """Controllable clock for token tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def make_image_bytes(size=(10, 10), color=(255, 255, 255, 255), fmt='PNG') -> bytes:
    mode = 'RGBA' if fmt == 'PNG' else 'RGB'
    image = Image.new(mode, size, color=color if mode == 'RGBA' else color[:3])
    buffer = io.BytesIO()
    image.save(buffer, fmt)
    return buffer.getvalue()


def data_url(data: bytes, mime: str = 'image/png') -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"
