"""Compile a playback speed factor into ffmpeg setpts/atempo filters."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Tuple

from vc_tool.errors import ValidationError

# atempo only accepts factors in [0.5, 2.0] per stage
ATEMPO_MIN = Decimal("0.5")
ATEMPO_MAX = Decimal("2.0")
PTS_PRECISION = Decimal("0.000001")


def format_decimal(value: Decimal) -> str:
    """Render a Decimal without exponent or trailing zeros (``2`` -> ``2.0``)."""
    if value == value.to_integral_value():
        return f"{value:.1f}"
    return format(value.normalize(), "f")


@dataclass(frozen=True)
class SpeedFilters:
    pts_scale: Decimal
    tempo_chain: Tuple[Decimal, ...]

    @property
    def video_expr(self) -> str:
        return f"setpts={self.pts_scale}*PTS"

    @property
    def audio_chain(self) -> str:
        return ",".join(f"atempo={format_decimal(stage)}" for stage in self.tempo_chain)

    def filter_complex(self) -> str:
        """Video and audio branches mapped to ``[v]`` and ``[a]``."""
        return f"[0:v]{self.video_expr}[v];[0:a]{self.audio_chain}[a]"


def build_tempo_chain(factor: Decimal) -> Tuple[Decimal, ...]:
    """Split ``factor`` into ordered atempo stages inside [0.5, 2.0].

    Stages multiply to ``factor``; the last stage carries the remainder.
    """
    if factor <= 0:
        raise ValidationError(f"Speed factor must be a positive number. Got: {factor}")

    stages = []
    remaining = factor
    while remaining > ATEMPO_MAX:
        stages.append(ATEMPO_MAX)
        remaining = remaining / ATEMPO_MAX
    while remaining < ATEMPO_MIN:
        stages.append(ATEMPO_MIN)
        remaining = remaining / ATEMPO_MIN
    stages.append(remaining)
    return tuple(stages)


def compile_speed(factor: Decimal) -> SpeedFilters:
    if factor <= 0:
        raise ValidationError(f"Speed factor must be a positive number. Got: {factor}")

    try:
        pts_scale = (Decimal(1) / factor).quantize(PTS_PRECISION, rounding=ROUND_DOWN)
    except InvalidOperation as exc:
        raise ValidationError(f"Speed factor {factor} is too small.") from exc
    if pts_scale == 0:
        raise ValidationError(
            f"Speed factor {factor} is too large.",
            "The timestamp scale 1/factor must be at least 0.000001.",
        )
    return SpeedFilters(pts_scale=pts_scale, tempo_chain=build_tempo_chain(factor))
