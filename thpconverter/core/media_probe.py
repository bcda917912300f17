"""Source inspection through moviepy's ffmpeg reader."""

from __future__ import annotations

import logging
from pathlib import Path

from . import SourceDescriptor, Stage
from .errors import ExternalToolError, InvalidVideoError
from ..utils import validators

logger = logging.getLogger(__name__)


def probe_source(video_path: Path) -> SourceDescriptor:
    """Report which streams ``video_path`` carries and the primary video size.

    Read-only: nothing is decoded beyond the container headers.
    """

    validated_path = validators.validate_video_path(video_path)
    parse_infos = _resolve_parse_infos()

    try:
        infos = parse_infos(str(validated_path))
    except OSError as exc:
        raise InvalidVideoError(validated_path, reason=f"Could not read metadata: {exc}") from exc

    has_video = bool(infos.get("video_found"))
    has_audio = bool(infos.get("audio_found"))
    width, height = 0, 0
    if has_video:
        width, height = (int(value) for value in infos.get("video_size") or (0, 0))
        if width <= 0 or height <= 0:
            raise InvalidVideoError(validated_path, reason="Could not read video size")

    logger.debug(
        "Probed %s -> video=%s audio=%s size=%sx%s",
        validated_path,
        has_video,
        has_audio,
        width,
        height,
    )
    return SourceDescriptor(has_video_stream=has_video, has_audio_stream=has_audio, width=width, height=height)


def ensure_ffmpeg_available() -> str:
    """Return the ffmpeg binary moviepy resolved, or raise a friendly error."""

    try:
        from moviepy.config import FFMPEG_BINARY  # type: ignore
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise ExternalToolError("moviepy", Stage.PROBE, "moviepy is not installed. Run pip install -e .") from exc

    if not FFMPEG_BINARY:
        raise ExternalToolError("ffmpeg", Stage.PROBE, "ffmpeg not found. Install ffmpeg and ensure it is on PATH.")
    return FFMPEG_BINARY


def _resolve_parse_infos():
    """Import moviepy's ffmpeg header parser."""

    ensure_ffmpeg_available()
    try:
        from moviepy.video.io.ffmpeg_reader import ffmpeg_parse_infos  # type: ignore
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise ExternalToolError("moviepy", Stage.PROBE, "moviepy is not installed. Run pip install -e .") from exc
    return ffmpeg_parse_infos
