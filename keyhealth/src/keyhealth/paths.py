"""Shared filesystem path helpers for keyhealth."""
from __future__ import annotations

import sys
from pathlib import Path

from platformdirs import PlatformDirs

_APP_NAME = "Key Health"
_LINUX_APP_NAME = "keyhealth"


def runtime_config_dir() -> Path:
    """Return the per-user configuration directory."""
    if sys.platform in ("win32", "darwin"):
        dirs = PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=True)
    else:
        dirs = PlatformDirs(appname=_LINUX_APP_NAME, appauthor=None, roaming=False)
    return Path(dirs.user_config_path)


def local_config_path() -> Path:
    """Return the project-local configuration file under the working directory."""
    return Path.cwd() / ".keyhealth" / "config.yaml"


def user_config_file() -> Path:
    """Return the per-user configuration file."""
    return runtime_config_dir() / "config.yaml"
