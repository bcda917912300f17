"""Video to THP conversion pipeline.

THP files are built from a folder of JPEG frames and a WAV file. A run goes
through these stages, each of which stops the run if it fails:

1. probe the source for a video and an audio stream
2. set up a fresh working directory
3. extract the audio as a 32 kHz WAV
4. fit the frame size into the THP bounds
5. extract the frames as JPEGs at that size
6. hand both to the encoder and check the THP file appeared

Intermediates are removed on every exit path.
"""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

from . import ArtifactPaths, ConversionResult, SourceDescriptor, Stage, TargetResolution
from .dimension_fitter import fit_dimensions
from .encoder import Encoder, THPConvEncoder
from .errors import (
    ConversionError,
    ExternalToolError,
    InvalidVideoError,
    MissingArtifactError,
    MissingOutputError,
    MissingStreamError,
)
from .media_probe import probe_source
from .settings import DEFAULT_OUTPUT, ConversionSettings
from .transcoder import FFmpegTranscoder
from ..utils import file_tools

logger = logging.getLogger(__name__)

AUDIO_NAME = "audio.wav"
FRAMES_DIR_NAME = "jpegs"


class ConversionPipeline:
    """Run the conversion stages against injectable collaborators."""

    def __init__(
        self,
        settings: Optional[ConversionSettings] = None,
        probe: Callable[[Path], SourceDescriptor] = probe_source,
        transcoder: Optional[FFmpegTranscoder] = None,
        encoder: Optional[Encoder] = None,
        report: Callable[[str], None] = print,
    ):
        self.settings = settings or ConversionSettings()
        self.probe = probe
        self.transcoder = transcoder or FFmpegTranscoder()
        self.encoder = encoder or THPConvEncoder(self.settings.encoder_path)
        self.report = report

    def convert(self, source_path: Path | str, output_path: Path | str = DEFAULT_OUTPUT) -> ConversionResult:
        """Convert ``source_path`` into a THP file at ``output_path``."""

        source = Path(source_path)
        output = Path(output_path)
        result = ConversionResult(source_path=source, output_path=output, stage=Stage.PROBE)

        try:
            self._remove_stale_output(output)
            descriptor = self._probe(source)

            with self.workspace() as paths:
                result.stage = Stage.AUDIO
                self._extract_audio(source, paths)

                result.stage = Stage.DIMENSIONS
                result.resolution = self._fit(descriptor)

                result.stage = Stage.FRAMES
                result.frame_count = self._extract_frames(source, paths, result.resolution)

                result.stage = Stage.ENCODE
                self._encode(paths, output)
                result.stage = Stage.CLEANUP
        except ConversionError as exc:
            logger.error("Conversion of %s failed during %s: %s", source, exc.stage.value, exc)
            result.stage = exc.stage
            result.failure = exc.kind
            result.message = str(exc)
            self.report(result.render())
            return result

        logger.info("Wrote %s (%s, %s frames)", output, result.resolution, result.frame_count)
        return result

    @contextmanager
    def workspace(self) -> Iterator[ArtifactPaths]:
        """Allocate the run's artifact paths and remove them when the run ends."""

        paths = self._allocate_paths()
        try:
            self._clear_stale_intermediates(paths)
            yield paths
        finally:
            if self.settings.keep_intermediates:
                logger.info("Keeping intermediates in %s", paths.work_dir)
            else:
                self._cleanup(paths)

    def _clear_stale_intermediates(self, paths: ArtifactPaths) -> None:
        try:
            file_tools.remove_file(paths.audio_path)
            file_tools.recreate_directory(paths.frames_dir)
        except OSError as exc:
            raise ExternalToolError("filesystem", Stage.SETUP, f"Could not prepare {paths.frames_dir}: {exc}") from exc

    def _remove_stale_output(self, output: Path) -> None:
        # A failed run must never leave a previous run's output behind.
        try:
            file_tools.remove_file(output)
        except OSError as exc:
            raise ExternalToolError("filesystem", Stage.SETUP, f"Could not remove {output}: {exc}") from exc

    def _allocate_paths(self) -> ArtifactPaths:
        base = self.settings.work_dir
        try:
            file_tools.ensure_directory(base)
            if self.settings.isolate_runs:
                run_dir = Path(tempfile.mkdtemp(prefix="thp-", dir=base))
            else:
                run_dir = base
        except OSError as exc:
            raise ExternalToolError("filesystem", Stage.SETUP, f"Could not prepare {base}: {exc}") from exc
        logger.debug("Staging intermediates in %s", run_dir)
        return ArtifactPaths(
            work_dir=run_dir,
            audio_path=run_dir / AUDIO_NAME,
            frames_dir=run_dir / FRAMES_DIR_NAME,
            isolated=self.settings.isolate_runs,
        )

    def _cleanup(self, paths: ArtifactPaths) -> None:
        try:
            if paths.isolated:
                file_tools.remove_tree(paths.work_dir)
            else:
                file_tools.remove_file(paths.audio_path)
                file_tools.remove_tree(paths.frames_dir)
        except OSError as exc:
            logger.warning("Could not remove intermediates in %s: %s", paths.work_dir, exc)

    def _probe(self, source: Path) -> SourceDescriptor:
        descriptor = self.probe(source)
        if not descriptor.has_video_stream:
            raise MissingStreamError("video")
        if not descriptor.has_audio_stream:
            raise MissingStreamError("audio")
        if descriptor.width <= 0 or descriptor.height <= 0:
            raise InvalidVideoError(source, reason="Could not read video size")
        return descriptor

    def _extract_audio(self, source: Path, paths: ArtifactPaths) -> None:
        self.report("Extracting Audio...")
        self.transcoder.extract_audio(source, paths.audio_path, self.settings.sample_rate)
        if not paths.audio_path.exists():
            raise MissingArtifactError(paths.audio_path, Stage.AUDIO, "extract audio")
        self.report("Done\n")

    def _fit(self, descriptor: SourceDescriptor) -> TargetResolution:
        self.report("Getting Dimensions...")
        resolution = fit_dimensions(descriptor.width, descriptor.height)
        self.report(f"New dimensions: {resolution}\n")
        return resolution

    def _extract_frames(self, source: Path, paths: ArtifactPaths, resolution: TargetResolution) -> int:
        self.report("Extracting Frames...")
        frame_count = self.transcoder.extract_frames(
            source,
            paths.frame_pattern,
            resolution,
            self.settings.frame_rate_arg,
            self.settings.jpeg_quality,
        )
        self.report(f"Extracted {frame_count} Frames\nDone\n")
        return frame_count

    def _encode(self, paths: ArtifactPaths, output: Path) -> None:
        self.report("Generating THP...")
        if not self.encoder.encode(paths.frame_glob, paths.audio_path, self.settings.frame_rate_arg, output):
            raise MissingOutputError(output)
        self.report("Done\n")


def convert(
    source_path: Path | str,
    output_path: Path | str = DEFAULT_OUTPUT,
    settings: Optional[ConversionSettings] = None,
    encoder: Optional[Encoder] = None,
    report: Callable[[str], None] = print,
) -> ConversionResult:
    """Convert a video with the default ffmpeg toolchain and THPConv."""

    pipeline = ConversionPipeline(settings=settings, encoder=encoder, report=report)
    return pipeline.convert(source_path, output_path)
