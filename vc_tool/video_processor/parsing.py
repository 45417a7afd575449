"""Parameter grammars: HH:MM:SS ranges, crop geometry, ratios and seconds."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from vc_tool.errors import ValidationError

from .models import (
    Action,
    CropRegion,
    FormatParam,
    NoParam,
    ParsedParameter,
    RatioParam,
    SecondsParam,
    TimeRange,
)

_TWO_DIGITS = re.compile(r"^[0-9]{2}$")
_UNSIGNED_INT = re.compile(r"^[0-9]+$")
_UNSIGNED_DECIMAL = re.compile(r"^[0-9]+(\.[0-9]+)?$")
_BAD_FORMAT_CHARS = re.compile(r"[\s/\\]")


def hms_to_seconds(value: str) -> int:
    """Convert ``HH:MM:SS`` to total seconds.

    Each field must be exactly two digits. Fields are read as base 10, so
    ``"08"`` and ``"09"`` are valid.
    """
    parts = value.split(":")
    if len(parts) != 3 or not all(_TWO_DIGITS.fullmatch(part) for part in parts):
        raise ValidationError(
            f"Invalid time '{value}'.",
            "Times must be written as HH:MM:SS with two digits per field (e.g., 00:01:23).",
        )
    hours, minutes, seconds = (int(part, 10) for part in parts)
    return hours * 3600 + minutes * 60 + seconds


def parse_time_range(value: str) -> TimeRange:
    parts = value.split("-")
    if len(parts) != 2:
        raise ValidationError(
            f"Invalid time range '{value}'.",
            "Please provide time range as HH:MM:SS-HH:MM:SS (e.g., 00:01:23-00:02:45).",
        )
    start_text, end_text = parts
    start = hms_to_seconds(start_text)
    end = hms_to_seconds(end_text)
    if end <= start:
        raise ValidationError(
            "End time must be greater than start time.",
            f"Got start={start_text} ({start}s) end={end_text} ({end}s).",
        )
    return TimeRange(start=start, end=end, start_text=start_text, end_text=end_text)


def parse_crop(value: str) -> CropRegion:
    usage = (
        "Please provide the cropping zone as starting_x:starting_y-width:height "
        "(e.g., 100:50-1280:720)."
    )
    groups = value.split("-")
    if len(groups) != 2:
        raise ValidationError(f"Invalid crop region '{value}'.", usage)

    offset, size = (group.split(":") for group in groups)
    if len(offset) != 2 or len(size) != 2:
        raise ValidationError(f"Invalid crop region '{value}'.", usage)

    named = dict(zip(("x", "y", "w", "h"), offset + size))
    for name, raw in named.items():
        if not _UNSIGNED_INT.fullmatch(raw):
            raise ValidationError(
                f"All crop values must be non-negative integers. Got {name}='{raw}'.",
                usage,
            )

    x, y, w, h = (int(named[name], 10) for name in ("x", "y", "w", "h"))
    if w == 0 or h == 0:
        raise ValidationError(
            f"Crop width and height must be greater than 0. Got width={w} height={h}."
        )
    return CropRegion(x=x, y=y, w=w, h=h)


def parse_ratio(value: str, label: str = "Value") -> RatioParam:
    """Parse a strictly positive unsigned decimal such as ``2`` or ``0.5``."""
    if not _UNSIGNED_DECIMAL.fullmatch(value):
        raise ValidationError(f"{label} must be a positive number. Got: {value}")
    try:
        number = Decimal(value)
    except InvalidOperation as exc:
        raise ValidationError(f"{label} must be a positive number. Got: {value}") from exc
    if number <= 0:
        raise ValidationError(f"{label} must be a positive number. Got: {value}")
    return RatioParam(value=number, text=value)


def parse_seconds(value: str) -> SecondsParam:
    if not _UNSIGNED_INT.fullmatch(value):
        raise ValidationError(
            f"Invalid capture time '{value}'.",
            "Please provide the capture time in seconds, as an integer.",
        )
    return SecondsParam(seconds=int(value, 10))


def parse_format(value: str) -> FormatParam:
    if not value:
        raise ValidationError("Please specify the target video format (e.g., mp4).")
    if value.startswith(".") or _BAD_FORMAT_CHARS.search(value):
        raise ValidationError(
            f"Invalid target format '{value}'.",
            "Give the bare extension without dots or path separators (e.g., mp4, mkv).",
        )
    return FormatParam(extension=value)


def parse_parameter(action: Action, raw: str) -> ParsedParameter:
    """Validate ``raw`` against the grammar required by ``action``."""
    if action is Action.CONVERT:
        return parse_format(raw)
    if action is Action.VOL:
        return parse_ratio(raw, "Volume multiplier")
    if action is Action.RESIZE:
        return parse_ratio(raw, "Resize ratio")
    if action is Action.SPEED:
        return parse_ratio(raw, "Speed factor")
    if action is Action.FPS:
        return parse_ratio(raw, "FPS")
    if action is Action.CAPTURE:
        return parse_seconds(raw)
    if action is Action.CLIP:
        return parse_time_range(raw)
    if action is Action.CROP:
        return parse_crop(raw)
    return NoParam(raw=raw)
