"""Conversion settings with environment overrides."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_OUTPUT = Path("DOKAPON.THP")
DEFAULT_ENCODER = Path("THPConv") / "THPConv.exe"
# 29.97 is the most reliable rate in game; 59.94 plays but risks lag.
DEFAULT_FRAME_RATE = 29.97
# 32 kHz is the only sample rate THPConv handles consistently.
AUDIO_SAMPLE_RATE = 32000

_TRUTHY = {"1", "true", "yes", "on"}


class ConversionSettings(BaseModel):
    """Tunables for a conversion run."""

    encoder_path: Path = DEFAULT_ENCODER
    work_dir: Path = Field(default_factory=Path.cwd)
    frame_rate: float = Field(DEFAULT_FRAME_RATE, gt=0, le=59.94)
    sample_rate: int = Field(AUDIO_SAMPLE_RATE, ge=8000, le=48000)
    jpeg_quality: int = Field(1, ge=1, le=31)
    isolate_runs: bool = True
    keep_intermediates: bool = False

    @field_validator("encoder_path", "work_dir", mode="before")
    @classmethod
    def _expand_path(cls, value):
        if value in (None, ""):
            raise ValueError("Path must not be empty")
        return Path(value).expanduser()

    @property
    def frame_rate_arg(self) -> str:
        """Frame rate as passed on the ffmpeg/THPConv command line."""

        return f"{self.frame_rate:g}"

    @classmethod
    def from_env(cls, **overrides) -> "ConversionSettings":
        """Build settings from THPCONV_PATH / V2T_* variables, then explicit overrides."""

        values: dict = {}
        if os.environ.get("THPCONV_PATH"):
            values["encoder_path"] = os.environ["THPCONV_PATH"]
        if os.environ.get("V2T_WORK_DIR"):
            values["work_dir"] = os.environ["V2T_WORK_DIR"]
        if os.environ.get("V2T_KEEP_INTERMEDIATES"):
            values["keep_intermediates"] = os.environ["V2T_KEEP_INTERMEDIATES"].strip().lower() in _TRUTHY
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)
