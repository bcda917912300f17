"""Domain-specific exceptions for the THP converter."""

from pathlib import Path

from . import FailureKind, Stage


class ConversionError(RuntimeError):
    """Raised when a pipeline stage cannot produce its artifact."""

    kind = FailureKind.EXTERNAL_TOOL

    def __init__(self, message: str, stage: Stage):
        super().__init__(message)
        self.stage = stage


class InvalidVideoError(ConversionError):
    """Raised when the selected video file is missing or unreadable."""

    kind = FailureKind.INVALID_SOURCE

    def __init__(self, path: Path, reason: str | None = None):
        message = f"Error: Invalid video file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message + "\n", Stage.PROBE)
        self.path = path


class MissingStreamError(ConversionError):
    """Raised when the source lacks a video or an audio stream."""

    kind = FailureKind.MISSING_STREAM

    def __init__(self, stream: str):
        super().__init__("Error:Invalid Format\n" f"Input has no {stream} stream\n", Stage.PROBE)
        self.stream = stream


class MissingArtifactError(ConversionError):
    """Raised when a stage finished but the file it should have written is absent."""

    kind = FailureKind.MISSING_ARTIFACT

    def __init__(self, path: Path, stage: Stage, action: str, label: str | None = None):
        super().__init__(f"Error: Could not {action}\n" f"{label or path.name} was not found\n", stage)
        self.path = path


class MissingOutputError(MissingArtifactError):
    """Raised when the encoder exited without writing the THP file."""

    kind = FailureKind.MISSING_OUTPUT

    def __init__(self, path: Path):
        super().__init__(path, Stage.ENCODE, "create THP file", label=str(path))


class ExternalToolError(ConversionError):
    """Raised when ffmpeg, ffprobe or THPConv fails to run."""

    kind = FailureKind.EXTERNAL_TOOL

    def __init__(self, tool: str, stage: Stage, reason: str | None = None):
        message = f"Error: {tool} failed during {stage.value}"
        if reason:
            message = f"{message}\n{reason}"
        super().__init__(message + "\n", stage)
        self.tool = tool


class ValidationError(ValueError):
    """Raised when user-provided settings fail validation."""
