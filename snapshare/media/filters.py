"""
Overlay ("filter") assets.

Overlays are small PNGs kept in a read-only directory. Only names on the
allow-list can be requested; anything else is rejected before the
filesystem is touched.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import FrozenSet, Iterable, List, Optional, Union

from PIL import Image, UnidentifiedImageError

from ..errors import InvalidFilter

logger = logging.getLogger(__name__)

DEFAULT_FILTERS = frozenset({
    'fire.png',
    'thumbs-up.png',
    'camera.png',
    'lightning.png',
    'cool.png',
    'heart.png',
    'star.png',
    'smile.png',
})


def strip_path_components(selector: str) -> str:
    """Reduce a selector to its final path component, for / and \\ alike."""
    return PurePosixPath(selector.replace('\\', '/')).name


class FilterAssetStore:
    """Looks up allow-listed overlay images on disk."""

    def __init__(self, directory: Union[str, Path],
                 allowed: Optional[Iterable[str]] = None):
        self.directory = Path(directory)
        self.allowed: FrozenSet[str] = frozenset(allowed) if allowed is not None else DEFAULT_FILTERS

    def resolve(self, selector: str) -> str:
        """
        Turn a client selector into an allow-listed overlay name.

        Args:
            selector: Filter name as submitted

        Returns:
            Bare overlay file name

        Raises:
            InvalidFilter: If the name is not on the allow-list
        """
        name = strip_path_components(selector)
        if name not in self.allowed:
            raise InvalidFilter(f"Unknown filter: {selector!r}")
        return name

    def load_overlay(self, name: str) -> Optional[Image.Image]:
        """
        Load an overlay as RGBA.

        A missing or unreadable asset yields None so compositing can
        continue without it.

        Args:
            name: Allow-listed overlay name (see resolve())

        Returns:
            RGBA image, or None if the asset is unavailable
        """
        path = self.directory / self.resolve(name)
        if not path.is_file():
            logger.warning(f"Overlay asset missing, skipping: {path}")
            return None

        try:
            with Image.open(path) as overlay:
                return overlay.convert('RGBA')
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            logger.warning(f"Overlay asset unreadable, skipping: {path}: {e}")
            return None

    def available(self) -> List[str]:
        """Allow-listed overlays present on disk, sorted by name."""
        return sorted(name for name in self.allowed if (self.directory / name).is_file())
