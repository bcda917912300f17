"""Fit a source resolution into the THP frame bounds.

THP caps width at 672 px, the engine caps height at 480 px, and THP needs both
dimensions to be multiples of 16. The fitter keeps the source aspect ratio as
closely as rounding allows and fills whichever axis is not the limiting one.
"""

from __future__ import annotations

import logging
import math

from . import TargetResolution

logger = logging.getLogger(__name__)

MAX_WIDTH = 672
MAX_HEIGHT = 480
BLOCK = 16


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def snap_to_multiple(value: int, step: int = BLOCK) -> int:
    """Round to the nearest multiple of ``step``; halfway values round up."""

    remainder = value % step
    if remainder < step / 2:
        return value - remainder
    return value + step - remainder


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def fit_dimensions(source_width: int, source_height: int) -> TargetResolution:
    """Return the largest THP-compatible size for a ``source_width`` x ``source_height`` video."""

    aspect_ratio = source_width / source_height

    # Start by assuming the video is wider than it is tall.
    width = MAX_WIDTH
    height = _round_half_up(width / aspect_ratio)
    if height > MAX_HEIGHT:
        height = MAX_HEIGHT
        width = snap_to_multiple(_round_half_up(height * aspect_ratio))
    else:
        height = snap_to_multiple(height)

    # Unreachable for sane sources, but extreme aspect ratios can round to 0.
    fitted = TargetResolution(
        width=_clamp(width, BLOCK, MAX_WIDTH),
        height=_clamp(height, BLOCK, MAX_HEIGHT),
    )
    logger.debug("Fitted %sx%s -> %s", source_width, source_height, fitted)
    return fitted
