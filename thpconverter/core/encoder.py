"""THP encoder capability and the THPConv subprocess implementation."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from . import Stage
from .errors import ExternalToolError

logger = logging.getLogger(__name__)


class Encoder(Protocol):
    """Anything that can turn a JPEG sequence and a WAV file into a THP file."""

    def encode(self, frame_glob: Path, audio_path: Path, frame_rate: str, output_path: Path) -> bool:
        ...


class THPConvEncoder:
    """Run Nintendo's THPConv command-line tool and wait for it to exit."""

    def __init__(self, binary: Path):
        self.binary = binary

    def command(self, frame_glob: Path, audio_path: Path, frame_rate: str, output_path: Path) -> list[str]:
        # THPConv expands the frame glob itself.
        return [
            str(self.binary),
            "-j", str(frame_glob),
            "-s", str(audio_path),
            "-r", frame_rate,
            "-d", str(output_path),
        ]

    def encode(self, frame_glob: Path, audio_path: Path, frame_rate: str, output_path: Path) -> bool:
        """Return whether THPConv left a file at ``output_path``.

        THPConv's exit status is not reliable, so it is only logged.
        """

        cmd = self.command(frame_glob, audio_path, frame_rate, output_path)
        logger.info("Running THPConv: %s", " ".join(cmd))
        try:
            completed = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as exc:
            raise ExternalToolError("THPConv", Stage.ENCODE, f"{self.binary}: {exc}") from exc
        if completed.returncode != 0:
            logger.warning("THPConv exited with status %s", completed.returncode)
        if completed.stderr:
            logger.debug("THPConv stderr: %s", completed.stderr.decode(errors="replace").strip())
        return output_path.exists()
