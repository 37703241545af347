"""Tests for shared.build_info module."""

import importlib
import os
import subprocess
from importlib import metadata
from unittest.mock import patch

import shared.build_info as build_info_module


class TestGitShortSha:
    def test_returns_stripped_sha_from_git(self):
        with patch("subprocess.check_output", return_value="abc1234\n") as check_output:
            assert build_info_module._git_short_sha() == "abc1234"
        assert check_output.call_args.args[0] == ["git", "rev-parse", "--short", "HEAD"]

    def test_returns_dev_when_git_not_found(self):
        with patch("subprocess.check_output", side_effect=FileNotFoundError):
            assert build_info_module._git_short_sha() == "dev"

    def test_returns_dev_outside_a_checkout(self):
        with patch(
            "subprocess.check_output",
            side_effect=subprocess.CalledProcessError(128, "git"),
        ):
            assert build_info_module._git_short_sha() == "dev"


class TestPackageVersion:
    def test_reads_installed_version(self):
        with patch("importlib.metadata.version", return_value="0.3.0"):
            assert build_info_module._package_version() == "0.3.0"

    def test_returns_dev_when_not_installed(self):
        with patch("importlib.metadata.version", side_effect=metadata.PackageNotFoundError):
            assert build_info_module._package_version() == "dev"


class TestModuleLevelConstants:
    def test_app_version_reads_from_env(self):
        with patch.dict("os.environ", {"APP_VERSION": "1.2.3"}):
            importlib.reload(build_info_module)
            assert build_info_module.APP_VERSION == "1.2.3"
        importlib.reload(build_info_module)

    def test_git_commit_reads_from_env(self):
        with patch.dict("os.environ", {"GIT_COMMIT": "abc1234"}):
            importlib.reload(build_info_module)
            assert build_info_module.GIT_COMMIT == "abc1234"
        importlib.reload(build_info_module)

    def test_git_commit_falls_back_to_git(self):
        with (
            patch.dict("os.environ", {}, clear=False),
            patch("subprocess.check_output", return_value="def5678\n"),
        ):
            os.environ.pop("GIT_COMMIT", None)
            importlib.reload(build_info_module)
            assert build_info_module.GIT_COMMIT == "def5678"
        importlib.reload(build_info_module)
