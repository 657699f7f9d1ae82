"""Filesystem helpers: locating bundled tools and reading stylesheets."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _application_dir() -> Path:
    return Path(sys.argv[0] or ".").resolve().parent


def find_executable_in_app_dir(
    relative_dir: PathLike,
    exe_name: str,
    app_dir: Optional[PathLike] = None,
) -> Optional[Path]:
    """Find ``exe_name`` under ``<app_dir>/<relative_dir>``.

    The file directly inside the directory is preferred; otherwise the
    subdirectories are searched. Returns None when nothing is found.
    """
    base = Path(app_dir) if app_dir is not None else _application_dir()
    search_dir = base / relative_dir
    log.debug("searching %s for %s", search_dir, exe_name)
    if not search_dir.is_dir():
        return None

    direct = search_dir / exe_name
    if direct.exists():
        return direct

    for candidate in sorted(search_dir.rglob(exe_name)):
        if candidate.is_file() and not candidate.is_symlink():
            return candidate
    return None


def read_stylesheet(path: PathLike) -> str:
    """Return the text of a stylesheet file, or an empty string if unreadable."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError:
        log.debug("invalid stylesheet path: %s", path)
        return ""