"""Stream metadata queries through ffprobe."""

from __future__ import annotations

import json
import subprocess
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict

from loguru import logger

from vc_tool.errors import ProbeError, ProbeUnavailableError

from .models import MediaDimensions

FRAME_RATE_PRECISION = Decimal("0.01")


def _video_stream(ffprobe_bin: str, path: Path) -> Dict[str, Any]:
    """Return the first video stream reported by ffprobe."""
    cmd = [
        ffprobe_bin, "-v", "error",
        "-select_streams", "v:0",
        "-show_entries", "stream=width,height,r_frame_rate",
        "-of", "json",
        str(path),
    ]
    logger.debug(f"ffprobe command: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise ProbeUnavailableError(
            "ffprobe is not installed. Please install it first.",
            f"Could not execute '{ffprobe_bin}'.",
        ) from exc

    if result.returncode != 0:
        raise ProbeError(
            f"Unable to probe {path} (is the file a valid video?).",
            (result.stderr or "").strip() or None,
        )

    try:
        data = json.loads(result.stdout or "{}")
    except json.JSONDecodeError as exc:
        raise ProbeError(f"ffprobe returned unreadable output for {path}.") from exc

    streams = data.get("streams") or []
    if not streams:
        raise ProbeError(f"No video stream found in {path}.")
    return streams[0]


def parse_frame_rate(value: str) -> Decimal:
    """Normalize ``"30"``, ``"29.97"`` or ``"30000/1001"`` to two decimals.

    Truncates rather than rounds, so 30000/1001 becomes 29.97.
    """
    text = (value or "").strip()
    try:
        if "/" in text:
            num, den = text.split("/", 1)
            denominator = Decimal(den)
            if denominator == 0:
                raise ProbeError(f"Invalid frame rate '{value}' reported by ffprobe.")
            rate = Decimal(num) / denominator
        else:
            rate = Decimal(text)
    except (InvalidOperation, ValueError) as exc:
        raise ProbeError(f"Invalid frame rate '{value}' reported by ffprobe.") from exc

    if not rate.is_finite() or rate <= 0:
        raise ProbeError(f"Invalid frame rate '{value}' reported by ffprobe.")
    return rate.quantize(FRAME_RATE_PRECISION, rounding=ROUND_DOWN)


class ProbeMixin:
    """Lazy metadata queries; only crop and fps call these."""

    def probe_dimensions(self, path: Path) -> MediaDimensions:
        stream = _video_stream(self.settings.ffprobe_bin, path)
        try:
            width = int(stream["width"])
            height = int(stream["height"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ProbeError(
                f"Unable to read video dimensions of {path} (is the file valid?)."
            ) from exc
        if width <= 0 or height <= 0:
            raise ProbeError(f"Invalid video dimensions {width}x{height} in {path}.")

        logger.info(f"Probed {path.name}: {width}x{height}")
        return MediaDimensions(width=width, height=height)

    def probe_frame_rate(self, path: Path) -> Decimal:
        stream = _video_stream(self.settings.ffprobe_bin, path)
        raw = stream.get("r_frame_rate")
        if not raw:
            raise ProbeError(f"Unable to read video FPS of {path} (is the file valid?).")

        rate = parse_frame_rate(str(raw))
        logger.info(f"Probed {path.name}: {rate} fps ({raw})")
        return rate
