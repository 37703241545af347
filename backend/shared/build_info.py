"""Build metadata reported by the health endpoint.

APP_VERSION and GIT_COMMIT are set via environment variables in deployments.
Locally, APP_VERSION falls back to the installed package version and
GIT_COMMIT to the checkout's short SHA.
"""

import os
import subprocess
from importlib import metadata

DISTRIBUTION_NAME = "portfolio-admin"


def _package_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "dev"


def _git_short_sha() -> str:
    """Read short SHA from git for local development."""
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            text=True,
            stderr=subprocess.DEVNULL,
        ).strip()
    except (FileNotFoundError, subprocess.CalledProcessError):
        return "dev"


APP_VERSION: str = os.environ.get("APP_VERSION") or _package_version()
GIT_COMMIT: str = os.environ.get("GIT_COMMIT") or _git_short_sha()
