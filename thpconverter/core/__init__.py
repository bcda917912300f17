"""Core data model for the video to THP conversion pipeline."""

__all__ = [
    "SourceDescriptor",
    "TargetResolution",
    "ArtifactPaths",
    "Stage",
    "FailureKind",
    "ConversionResult",
]

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass
class SourceDescriptor:
    """Stream presence and geometry of a probed source video."""

    has_video_stream: bool
    has_audio_stream: bool
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class TargetResolution:
    """Frame size accepted by the THP container."""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class ArtifactPaths:
    """Where one run stages its waveform and JPEG frames."""

    work_dir: Path
    audio_path: Path
    frames_dir: Path
    isolated: bool = True

    @property
    def frame_pattern(self) -> Path:
        """ffmpeg output pattern, 5-digit zero padded so frames sort in order."""

        return self.frames_dir / "%05d.jpeg"

    @property
    def frame_glob(self) -> Path:
        return self.frames_dir / "*.jpeg"


class Stage(str, Enum):
    PROBE = "probe"
    SETUP = "setup"
    AUDIO = "audio extraction"
    DIMENSIONS = "dimension fit"
    FRAMES = "frame extraction"
    ENCODE = "encode"
    CLEANUP = "cleanup"


class FailureKind(str, Enum):
    INVALID_SOURCE = "invalid_source"
    MISSING_STREAM = "missing_stream"
    MISSING_ARTIFACT = "missing_artifact"
    MISSING_OUTPUT = "missing_output"
    EXTERNAL_TOOL = "external_tool"


@dataclass
class ConversionResult:
    """Outcome of a conversion run.

    A failed run carries the stage that stopped it, the failure kind and the
    console message shown to the user.
    """

    source_path: Path
    output_path: Path
    stage: Stage
    failure: Optional[FailureKind] = None
    message: str = ""
    resolution: Optional[TargetResolution] = None
    frame_count: int = 0

    @property
    def success(self) -> bool:
        return self.failure is None

    def render(self) -> str:
        if self.success:
            return f"Created {self.output_path}\n"
        return self.message

    def __bool__(self) -> bool:
        return self.success
