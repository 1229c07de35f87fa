"""XDG path helpers for dive settings and logs."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "dive"
APP_AUTHOR = "dive"


def dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=False)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_root() -> Path:
    return Path(dirs().user_config_path)


def settings_path() -> Path:
    override = os.getenv("DIVE_SETTINGS")
    if override:
        return Path(override).expanduser().resolve()
    return config_root() / "settings.json"
