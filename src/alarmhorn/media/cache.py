"""Local cache of downloaded speech clips."""

import logging
import os
import tempfile
from pathlib import Path, PurePosixPath

from ..errors import DownloadError
from ..paths import get_cache_dir
from .blobstore import BlobStore

logger = logging.getLogger(__name__)


class MediaCache:
    """Maps remote clip paths to local files, downloading on first use.

    The local file for ``clips/1.mp3`` is ``<cache_dir>/clips/1.mp3``: the
    remote hierarchical name is kept, so the mapping is stable across
    restarts and collision-free. Files are never evicted.

    Example:
        cache = MediaCache(blob_store)
        path = await cache.resolve("clips/1.mp3")  # downloads
        path = await cache.resolve("clips/1.mp3")  # reuses the file
    """

    def __init__(self, blob_store: BlobStore, cache_dir: Path | None = None) -> None:
        """Initialize media cache.

        Args:
            blob_store: Store the clips are downloaded from
            cache_dir: Directory for cached clips (defaults to ~/.cache/alarmhorn/media)
        """
        self.blob_store = blob_store
        self.cache_dir = cache_dir or get_cache_dir()
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def local_path(self, remote_path: str) -> Path:
        """Return the local file path for a remote clip path.

        Raises:
            ValueError: If the path is empty, absolute, or escapes the cache
        """
        if not remote_path or not remote_path.strip():
            raise ValueError("Remote path cannot be empty")

        remote = PurePosixPath(remote_path)
        if remote.is_absolute() or ".." in remote.parts:
            raise ValueError(f"Remote path must stay inside the cache: {remote_path}")

        return self.cache_dir.joinpath(*remote.parts)

    async def resolve(self, remote_path: str) -> Path:
        """Return a local file holding the clip, downloading it if needed.

        Args:
            remote_path: Blob path of the clip

        Returns:
            Path to the complete local file

        Raises:
            ValueError: If the remote path is invalid
            DownloadError: If the download or the write fails
        """
        local_path = self.local_path(remote_path)

        if local_path.is_file():
            logger.debug(f"File {remote_path} already cached at {local_path}")
            return local_path

        logger.debug(f"File {remote_path} not cached, downloading from blob store")
        try:
            audio_bytes = await self.blob_store.download(remote_path)
        except Exception as e:
            raise DownloadError(
                f"Failed to download {remote_path}: {e}", remote_path, e
            ) from e

        if not audio_bytes:
            raise DownloadError(f"Downloaded clip {remote_path} is empty", remote_path)

        try:
            self._write_atomic(local_path, audio_bytes)
        except OSError as e:
            raise DownloadError(
                f"Failed to store {remote_path} at {local_path}: {e}", remote_path, e
            ) from e

        logger.info(f"Cached {remote_path} ({len(audio_bytes)} bytes) at {local_path}")
        return local_path

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        """Write to a temporary file beside ``path`` and rename it into place."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
