"""
Shared fixtures for SnapShare tests.
"""

from datetime import datetime, timezone

import pytest
from PIL import Image

from snapshare.auth.tokens import TokenAuthority
from snapshare.media.compositor import MediaCompositor
from snapshare.media.filters import FilterAssetStore
from snapshare.storage.local import LocalArtifactStore

from .helpers import FrozenClock, TEST_SECRET_KEY, data_url, make_image_bytes


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def authority(clock):
    return TokenAuthority(TEST_SECRET_KEY, clock=clock)


@pytest.fixture
def filter_dir(tmp_path):
    """Filter directory with an opaque red heart and a large translucent star."""
    directory = tmp_path / "filters"
    directory.mkdir()
    Image.new('RGBA', (4, 4), (255, 0, 0, 255)).save(directory / "heart.png")
    Image.new('RGBA', (30, 30), (0, 0, 255, 128)).save(directory / "star.png")
    return directory


@pytest.fixture
def filters(filter_dir):
    return FilterAssetStore(filter_dir)


@pytest.fixture
def artifacts(tmp_path):
    return LocalArtifactStore(tmp_path / "uploads")


@pytest.fixture
def compositor(filters, artifacts):
    return MediaCompositor(filters, artifacts)


@pytest.fixture
def png_data_url():
    return data_url(make_image_bytes())
