"""Audio and frame extraction by running ffmpeg."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from PIL import Image

from . import Stage, TargetResolution
from .errors import ExternalToolError
from .media_probe import ensure_ffmpeg_available
from ..utils import file_tools

logger = logging.getLogger(__name__)

FRAME_EXTENSIONS = {".jpeg", ".jpg"}


class FFmpegTranscoder:
    """Stage intermediate artifacts for THPConv using the ffmpeg binary."""

    def __init__(self, binary: str | None = None):
        self._binary = binary

    @property
    def binary(self) -> str:
        if self._binary is None:
            self._binary = ensure_ffmpeg_available()
        return self._binary

    def audio_command(self, source: Path, destination: Path, sample_rate: int) -> list[str]:
        return [
            self.binary,
            "-y",
            "-i", str(source),
            "-f", "wav",
            "-ar", str(sample_rate),
            "-movflags", "+faststart",
            str(destination),
        ]

    def frames_command(
        self,
        source: Path,
        pattern: Path,
        resolution: TargetResolution,
        frame_rate: str,
        quality: int = 1,
    ) -> list[str]:
        return [
            self.binary,
            "-y",
            "-i", str(source),
            "-q:v", str(quality),
            "-r", frame_rate,
            "-vf", f"scale={resolution.width}:{resolution.height}",
            "-movflags", "+faststart",
            str(pattern),
        ]

    def extract_audio(self, source: Path, destination: Path, sample_rate: int) -> Path:
        """Resample the source's audio track into a WAV file."""

        self._run(self.audio_command(source, destination, sample_rate), Stage.AUDIO)
        return destination

    def extract_frames(
        self,
        source: Path,
        pattern: Path,
        resolution: TargetResolution,
        frame_rate: str,
        quality: int = 1,
    ) -> int:
        """Decode every frame to a numbered JPEG and return how many were written."""

        self._run(self.frames_command(source, pattern, resolution, frame_rate, quality), Stage.FRAMES)
        frames = file_tools.list_files_with_extensions(pattern.parent, FRAME_EXTENSIONS)
        if frames:
            _check_frame_size(frames[0], resolution)
        return len(frames)

    def _run(self, cmd: Sequence[str], stage: Stage) -> None:
        logger.info("Running ffmpeg for %s: %s", stage.value, " ".join(cmd))
        try:
            subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode(errors="replace").strip() if exc.stderr else str(exc)
            logger.error("ffmpeg failed: %s", error_msg)
            raise ExternalToolError("ffmpeg", stage, error_msg.splitlines()[-1] if error_msg else None) from exc
        except OSError as exc:
            raise ExternalToolError("ffmpeg", stage, str(exc)) from exc


def _check_frame_size(frame_path: Path, resolution: TargetResolution) -> None:
    """Log a warning when ffmpeg's output size differs from the fitted size."""

    try:
        with Image.open(frame_path) as image:
            size = image.size
    except OSError as exc:
        logger.warning("Could not inspect %s: %s", frame_path, exc)
        return
    if size != (resolution.width, resolution.height):
        logger.warning("Frame %s is %sx%s, expected %s", frame_path.name, size[0], size[1], resolution)
