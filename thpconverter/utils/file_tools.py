"""Filesystem helpers."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist."""

    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)
    return path


def recreate_directory(path: Path) -> Path:
    """Replace ``path`` with a fresh, empty directory."""

    remove_tree(path)
    return ensure_directory(path)


def remove_file(path: Path) -> bool:
    """Delete a file if present; return whether something was removed."""

    try:
        path.unlink()
    except FileNotFoundError:
        return False
    logger.debug("Removed file: %s", path)
    return True


def remove_tree(path: Path) -> bool:
    """Delete a directory tree if present; return whether something was removed."""

    if not path.is_dir():
        return False
    shutil.rmtree(path)
    logger.debug("Removed directory: %s", path)
    return True


def list_files_with_extensions(root: Path, extensions: set[str]) -> list[Path]:
    """Return sorted list of files in root with given extensions."""

    if not root.exists():
        return []
    files = [p for p in root.iterdir() if p.is_file() and p.suffix.lower() in extensions]
    return sorted(files)
