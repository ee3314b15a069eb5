"""
Artifact storage for composited images.

Artifacts are written into a single managed directory. Stored paths are
forward-slash relative paths of the form "<directory name>/<file name>",
which is also how they are served back to clients.
"""

import os
import tempfile
import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import List, Union

from ..errors import ArtifactNotFound, StorageError

logger = logging.getLogger(__name__)


class ArtifactSink(ABC):
    """Writable destination for encoded images."""

    @abstractmethod
    def save(self, filename: str, data: bytes) -> str:
        """Persist data under filename and return the stored relative path."""
        pass


class LocalArtifactStore(ArtifactSink):
    """Local filesystem artifact store."""

    def __init__(self, base_path: Union[str, Path]):
        """
        Initialize local storage.

        The directory is created on first write, not here.

        Args:
            base_path: Directory that holds the artifacts
        """
        self.base_path = Path(base_path)

    @property
    def prefix(self) -> str:
        """Leading segment of every stored path."""
        return self.base_path.name

    def _stored_path(self, filename: str) -> str:
        return str(PurePosixPath(self.prefix, filename))

    def _full_path(self, stored_path: str) -> Path:
        """
        Map a stored path onto the directory.

        Only the final path component is used, so nothing outside the
        directory can be addressed.
        """
        name = PurePosixPath(stored_path.replace('\\', '/')).name
        if not name or name in ('.', '..'):
            raise ArtifactNotFound(f"Invalid artifact path: {stored_path!r}")
        return self.base_path / name

    def save(self, filename: str, data: bytes) -> str:
        """
        Write an artifact atomically.

        Data goes to a temporary file in the same directory that is renamed
        into place, so a failed write never leaves a partial artifact.

        Args:
            filename: Generated file name (no path components)
            data: Encoded image bytes

        Returns:
            Forward-slash relative path of the artifact

        Raises:
            StorageError: On any filesystem failure
        """
        if PurePosixPath(filename).name != filename or '\\' in filename:
            raise StorageError(f"Refusing to store artifact with path components: {filename!r}")

        target = self.base_path / filename
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create storage directory: {e}") from e

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.base_path, prefix='.upload-', suffix='.tmp', delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to write image file: {e}") from e

        # Temp files are created 0600; artifacts are served publicly
        try:
            os.chmod(target, 0o644)
        except OSError as e:
            logger.warning(f"Could not set permissions on {target}: {e}")

        stored = self._stored_path(filename)
        logger.debug(f"Stored artifact {stored} ({len(data)} bytes)")
        return stored

    def locate(self, stored_path: str) -> Path:
        """
        Resolve a stored path (or /uploads/ URL path) to a file on disk.

        Raises:
            ArtifactNotFound: If the artifact does not exist
        """
        full_path = self._full_path(stored_path)
        if not full_path.is_file():
            raise ArtifactNotFound(f"Artifact not found: {stored_path}")
        return full_path

    def exists(self, stored_path: str) -> bool:
        try:
            self.locate(stored_path)
        except ArtifactNotFound:
            return False
        return True

    def delete(self, stored_path: str) -> bool:
        """Delete an artifact. Returns True if deleted."""
        try:
            full_path = self.locate(stored_path)
        except ArtifactNotFound:
            return False

        try:
            full_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {stored_path}: {e}") from e

        logger.info(f"Deleted artifact {stored_path}")
        return True

    def list_artifacts(self) -> List[str]:
        """Stored paths of all artifacts, sorted."""
        if not self.base_path.is_dir():
            return []
        return sorted(
            self._stored_path(path.name)
            for path in self.base_path.iterdir()
            if path.is_file() and not path.name.startswith('.')
        )
