"""Output naming and ffmpeg argument construction for each action.

Every builder is a pure function of its inputs: the same invocation,
parameter, options and probed data always give the same OutputSpec.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from vc_tool.errors import BoundsError, ValidationError

from .constants import (
    CAPTURE_EXTENSION,
    CAPTURE_QUALITY,
    SDR_AUDIO_BITRATE,
    SDR_CRF,
    SDR_ENCODER,
    SDR_EXTENSION,
    SDR_PRESET,
    TONEMAP_FILTER,
)
from .models import (
    Action,
    CropRegion,
    FormatParam,
    Invocation,
    MediaDimensions,
    OutputSpec,
    ParsedParameter,
    RatioParam,
    SecondsParam,
    TimeRange,
)
from .speed import compile_speed


@dataclass(frozen=True)
class EncodeOptions:
    """Run-wide encoding choices resolved before any command is built."""

    video_encoder: str = "libx264"
    clip_mode: str = "copy"
    overwrite: bool = False


def output_path(input_path: Path, tag: str, extension: Optional[str] = None) -> Path:
    """Derive ``{basename}_{tag}.{ext}`` next to the input file.

    ``extension`` defaults to the input's own extension.
    """
    if extension is None:
        extension = input_path.suffix[1:]
        if not extension:
            raise ValidationError(
                f"Cannot infer the output format of {input_path}.",
                "The input file has no extension.",
            )
    base = input_path.with_suffix("") if input_path.suffix else input_path
    return base.parent / f"{base.name}_{tag}.{extension}"


def compact_time(value: str) -> str:
    """Strip separators from ``HH:MM:SS`` for use in file names."""
    return value.replace(":", "")


def check_crop_bounds(region: CropRegion, dimensions: MediaDimensions) -> None:
    """Raise BoundsError unless ``region`` lies inside the probed frame."""
    width, height = dimensions.width, dimensions.height

    if region.x >= width or region.y >= height:
        raise BoundsError(
            f"Starting point is outside the video frame ({width}x{height}). "
            f"Got x={region.x} y={region.y}.",
        )

    if region.x + region.w > width or region.y + region.h > height:
        max_width = width - region.x
        max_height = height - region.y
        raise BoundsError(
            f"Cropping area exceeds video bounds ({width}x{height}).",
            f"Max allowed width from x={region.x} is {max_width}; "
            f"max allowed height from y={region.y} is {max_height}. "
            f"You provided width={region.w} height={region.h}.",
            max_width=max_width,
            max_height=max_height,
        )


def _head(options: EncodeOptions) -> List[str]:
    return ["-hide_banner", "-y" if options.overwrite else "-n"]


def _spec(path: Path, args: List[str]) -> OutputSpec:
    return OutputSpec(path=path, tool_args=tuple(args))


def build_convert(invocation: Invocation, param: FormatParam, options: EncodeOptions) -> OutputSpec:
    out = output_path(invocation.input_path, "converted", param.extension)
    return _spec(out, _head(options) + [
        "-i", str(invocation.input_path),
        "-c:v", options.video_encoder,
        str(out),
    ])


def build_vol(invocation: Invocation, param: RatioParam, options: EncodeOptions) -> OutputSpec:
    out = output_path(invocation.input_path, "vol_changed")
    return _spec(out, _head(options) + [
        "-i", str(invocation.input_path),
        "-c:v", options.video_encoder,
        "-af", f"volume={param.text}",
        str(out),
    ])


def build_resize(invocation: Invocation, param: RatioParam, options: EncodeOptions) -> OutputSpec:
    # Scaled dimensions are not rounded to even values.
    out = output_path(invocation.input_path, "resized")
    return _spec(out, _head(options) + [
        "-i", str(invocation.input_path),
        "-vf", f"scale=iw*{param.text}:ih*{param.text}",
        str(out),
    ])


def build_mute(invocation: Invocation, param: ParsedParameter, options: EncodeOptions) -> OutputSpec:
    out = output_path(invocation.input_path, "muted")
    return _spec(out, _head(options) + [
        "-i", str(invocation.input_path),
        "-c:v", options.video_encoder,
        "-an",
        str(out),
    ])


def build_capture(invocation: Invocation, param: SecondsParam, options: EncodeOptions) -> OutputSpec:
    out = output_path(
        invocation.input_path, f"frame_at_{param.seconds}s", CAPTURE_EXTENSION
    )
    return _spec(out, _head(options) + [
        "-ss", str(param.seconds),
        "-i", str(invocation.input_path),
        "-frames:v", "1",
        "-q:v", CAPTURE_QUALITY,
        str(out),
    ])


def build_clip(invocation: Invocation, param: TimeRange, options: EncodeOptions) -> OutputSpec:
    tag = f"clip_{compact_time(param.start_text)}-{compact_time(param.end_text)}"
    out = output_path(invocation.input_path, tag)

    if options.clip_mode == "accurate":
        codec = ["-c:v", options.video_encoder, "-c:a", "aac"]
    else:
        # Stream copy cuts land on keyframes
        codec = ["-c", "copy"]

    return _spec(out, _head(options) + [
        "-ss", param.start_text,
        "-i", str(invocation.input_path),
        "-t", str(param.duration),
        *codec,
        str(out),
    ])


def build_crop(
    invocation: Invocation,
    param: CropRegion,
    options: EncodeOptions,
    dimensions: MediaDimensions,
) -> OutputSpec:
    check_crop_bounds(param, dimensions)
    tag = f"crop_{param.x}x{param.y}-{param.w}x{param.h}"
    out = output_path(invocation.input_path, tag)
    return _spec(out, _head(options) + [
        "-i", str(invocation.input_path),
        "-filter:v", f"crop={param.w}:{param.h}:{param.x}:{param.y}",
        "-c:v", options.video_encoder,
        "-c:a", "copy",
        str(out),
    ])


def build_speed(invocation: Invocation, param: RatioParam, options: EncodeOptions) -> OutputSpec:
    filters = compile_speed(param.value)
    out = output_path(invocation.input_path, f"{param.text}x")
    return _spec(out, _head(options) + [
        "-i", str(invocation.input_path),
        "-filter_complex", filters.filter_complex(),
        "-map", "[v]",
        "-map", "[a]",
        "-c:v", options.video_encoder,
        "-c:a", "aac",
        str(out),
    ])


def build_tosdr(invocation: Invocation, param: ParsedParameter, options: EncodeOptions) -> OutputSpec:
    out = output_path(invocation.input_path, "SDR", SDR_EXTENSION)
    return _spec(out, _head(options) + [
        "-i", str(invocation.input_path),
        "-vf", TONEMAP_FILTER,
        "-c:v", SDR_ENCODER,
        "-crf", SDR_CRF,
        "-preset", SDR_PRESET,
        "-c:a", "aac",
        "-b:a", SDR_AUDIO_BITRATE,
        str(out),
    ])


def build_fps(invocation: Invocation, param: RatioParam, options: EncodeOptions) -> OutputSpec:
    out = output_path(invocation.input_path, f"{param.text}fps")
    return _spec(out, _head(options) + [
        "-i", str(invocation.input_path),
        "-filter:v", f"fps=fps={param.text}",
        "-c:v", options.video_encoder,
        "-c:a", "copy",
        str(out),
    ])


_BUILDERS: Dict[Action, Callable[..., OutputSpec]] = {
    Action.CONVERT: build_convert,
    Action.VOL: build_vol,
    Action.RESIZE: build_resize,
    Action.MUTE: build_mute,
    Action.CAPTURE: build_capture,
    Action.CLIP: build_clip,
    Action.SPEED: build_speed,
    Action.TOSDR: build_tosdr,
    Action.FPS: build_fps,
}


def build_output_spec(
    invocation: Invocation,
    param: ParsedParameter,
    options: EncodeOptions,
    dimensions: Optional[MediaDimensions] = None,
) -> OutputSpec:
    """Build the OutputSpec for ``invocation``.

    Crop needs the probed ``dimensions``; every other action ignores them.
    """
    if invocation.action is Action.CROP:
        if dimensions is None:
            raise ValueError("crop requires probed media dimensions")
        return build_crop(invocation, param, options, dimensions)
    return _BUILDERS[invocation.action](invocation, param, options)
