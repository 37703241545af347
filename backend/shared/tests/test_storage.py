"""Tests for generated-asset storage."""

import os
import stat
from unittest.mock import patch

import pytest

from shared.storage import LocalAssetStorage

BASE_URL = "http://localhost:8000/assets"


class TestLocalAssetStorage:
    def test_creates_nested_directory_on_first_write(self, tmp_path):
        asset_dir = tmp_path / "assets"
        storage = LocalAssetStorage(str(asset_dir), BASE_URL)

        storage.save_asset("ai-generated/cover.png", b"\x89PNG", "image/png")

        assert (asset_dir / "ai-generated").is_dir()
        assert (asset_dir / "ai-generated" / "cover.png").read_bytes() == b"\x89PNG"

    def test_returns_public_url_for_key(self, tmp_path):
        storage = LocalAssetStorage(str(tmp_path), BASE_URL + "/")

        url = storage.save_asset("ai-generated/a.png", b"data", "image/png")

        assert url == "http://localhost:8000/assets/ai-generated/a.png"

    def test_overwrites_existing_asset(self, tmp_path):
        storage = LocalAssetStorage(str(tmp_path), BASE_URL)

        storage.save_asset("thumb.png", b"first", "image/png")
        storage.save_asset("thumb.png", b"second", "image/png")

        assert (tmp_path / "thumb.png").read_bytes() == b"second"

    def test_rejects_path_traversal(self, tmp_path):
        storage = LocalAssetStorage(str(tmp_path / "assets"), BASE_URL)

        with pytest.raises(ValueError, match="Path traversal rejected"):
            storage.save_asset("../escape.png", b"x", "image/png")

        assert not (tmp_path / "escape.png").exists()

    def test_asset_file_is_world_readable(self, tmp_path):
        storage = LocalAssetStorage(str(tmp_path), BASE_URL)

        storage.save_asset("public.png", b"x", "image/png")

        mode = stat.S_IMODE((tmp_path / "public.png").stat().st_mode)
        assert mode == 0o644


class TestLocalAssetStorageErrorHandling:
    def test_cleans_up_temp_on_fsync_failure(self, tmp_path):
        storage = LocalAssetStorage(str(tmp_path), BASE_URL)

        with (
            patch("os.fsync", side_effect=OSError("fsync failure")),
            pytest.raises(OSError, match="fsync failure"),
        ):
            storage.save_asset("fail.png", b"x", "image/png")

        assert not (tmp_path / "fail.png").exists()
        assert list(tmp_path.glob(".asset_*.tmp")) == []

    def test_closes_fd_on_fdopen_failure(self, tmp_path):
        storage = LocalAssetStorage(str(tmp_path), BASE_URL)

        with (
            patch("os.fdopen", side_effect=OSError("fdopen failure")) as mock_fdopen,
            patch("os.close", wraps=os.close) as mock_close,
            pytest.raises(OSError, match="fdopen failure"),
        ):
            storage.save_asset("fail.png", b"x", "image/png")

        fd_arg = mock_fdopen.call_args[0][0]
        mock_close.assert_called_once_with(fd_arg)
        assert list(tmp_path.glob(".asset_*.tmp")) == []
