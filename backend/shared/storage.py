"""Object storage for generated portfolio assets.

Assets are public: every stored file is served back under a public base URL.
Files are written atomically (temp file then rename) inside the configured
asset root; keys that would resolve outside the root are rejected.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

_ASSET_DIR_MODE = 0o755
_ASSET_FILE_MODE = 0o644


class AssetStorage(Protocol):
    """Protocol for persisting public binary assets."""

    def save_asset(self, key: str, content: bytes, content_type: str) -> str:
        """Store ``content`` under ``key`` (overwriting) and return its public URL."""
        ...


class LocalAssetStorage:
    """Writes assets to the local filesystem and maps keys to public URLs."""

    def __init__(self, asset_dir: str, public_base_url: str) -> None:
        self._asset_dir = Path(asset_dir).resolve()
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def asset_dir(self) -> Path:
        return self._asset_dir

    def public_url(self, key: str) -> str:
        return f"{self._public_base_url}/{key}"

    def save_asset(self, key: str, content: bytes, content_type: str) -> str:
        """Save ``content`` under the asset root and return its public URL.

        Creates parent directories lazily on first write. Rejects path
        traversal attempts that would place the file outside the asset root.
        """
        target = (self._asset_dir / key).resolve()
        if not target.is_relative_to(self._asset_dir):
            raise ValueError(f"Path traversal rejected: '{key}' resolves outside asset directory")

        target.parent.mkdir(mode=_ASSET_DIR_MODE, parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=str(target.parent), suffix=".tmp", prefix=".asset_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _ASSET_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.info("saved asset", key=key, content_type=content_type, size=len(content))
        return self.public_url(key)
