"""Validation helpers for user inputs."""

from __future__ import annotations

from pathlib import Path

from ..core.errors import InvalidVideoError, ValidationError


def validate_video_path(path: Path | None) -> Path:
    """Ensure the video path exists and is a regular file."""

    if not path:
        raise InvalidVideoError(Path("<unset>"), reason="No path provided")
    if not path.exists():
        raise InvalidVideoError(path, reason="File not found")
    if not path.is_file():
        raise InvalidVideoError(path, reason="Not a file")
    return path


def validate_output_path(path: Path) -> Path:
    """Reject output paths that point at a directory or a missing parent."""

    if path.is_dir():
        raise ValidationError(f"Output path is a directory: {path}")
    parent = path.parent
    if str(parent) not in ("", ".") and not parent.is_dir():
        raise ValidationError(f"Output directory does not exist: {parent}")
    return path


def parse_optional_float(value: str | None, field: str) -> float | None:
    """Parse a positive float from a string value, if provided."""

    if value is None or value == "":
        return None
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a number") from exc
    if parsed <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return parsed
