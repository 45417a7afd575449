"""Unit tests for output naming and ffmpeg argument construction."""

from pathlib import Path

import pytest

from vc_tool.errors import BoundsError, ValidationError
from vc_tool.video_processor.commands import (
    EncodeOptions,
    build_output_spec,
    check_crop_bounds,
    output_path,
)
from vc_tool.video_processor.constants import TONEMAP_FILTER
from vc_tool.video_processor.models import Action, Invocation, MediaDimensions
from vc_tool.video_processor.parsing import parse_parameter

SOURCE = Path("/videos/holiday.mov")
OPTIONS = EncodeOptions(video_encoder="h264_videotoolbox")


def build(action: Action, raw: str, options: EncodeOptions = OPTIONS, dimensions=None, source=SOURCE):
    invocation = Invocation(action=action, parameter=raw, input_path=source)
    return build_output_spec(invocation, parse_parameter(action, raw), options, dimensions)


class TestOutputPath:
    """Test {basename}_{tag}.{ext} naming."""

    def test_keeps_directory_and_extension(self):
        assert output_path(SOURCE, "muted") == Path("/videos/holiday_muted.mov")

    def test_only_final_extension_replaced(self):
        assert output_path(Path("a/b.final.mp4"), "x") == Path("a/b.final_x.mp4")

    def test_fixed_extension(self):
        assert output_path(SOURCE, "SDR", "mp4") == Path("/videos/holiday_SDR.mp4")

    def test_missing_extension_rejected(self):
        with pytest.raises(ValidationError, match="Cannot infer the output format"):
            output_path(Path("/videos/holiday"), "muted")

    def test_missing_extension_fine_when_fixed(self):
        assert output_path(Path("/videos/holiday"), "frame_at_1s", "jpg") == Path("/videos/holiday_frame_at_1s.jpg")


class TestActionBuilders:
    """Test the argument vector produced for every action."""

    def test_convert(self):
        spec = build(Action.CONVERT, "mp4")
        assert spec.path == Path("/videos/holiday_converted.mp4")
        assert spec.tool_args == (
            "-hide_banner", "-n",
            "-i", "/videos/holiday.mov",
            "-c:v", "h264_videotoolbox",
            "/videos/holiday_converted.mp4",
        )

    def test_vol(self):
        spec = build(Action.VOL, "1.5")
        assert spec.path == Path("/videos/holiday_vol_changed.mov")
        assert "-af" in spec.tool_args
        assert spec.tool_args[spec.tool_args.index("-af") + 1] == "volume=1.5"
        assert "h264_videotoolbox" in spec.tool_args

    def test_resize_scales_both_dimensions(self):
        spec = build(Action.RESIZE, "0.5")
        assert spec.path == Path("/videos/holiday_resized.mov")
        assert spec.tool_args[spec.tool_args.index("-vf") + 1] == "scale=iw*0.5:ih*0.5"

    def test_mute_strips_audio(self):
        spec = build(Action.MUTE, "-")
        assert spec.path == Path("/videos/holiday_muted.mov")
        assert "-an" in spec.tool_args

    def test_capture(self):
        spec = build(Action.CAPTURE, "90")
        assert spec.path == Path("/videos/holiday_frame_at_90s.jpg")
        assert spec.tool_args == (
            "-hide_banner", "-n",
            "-ss", "90",
            "-i", "/videos/holiday.mov",
            "-frames:v", "1",
            "-q:v", "2",
            "/videos/holiday_frame_at_90s.jpg",
        )

    def test_clip_uses_stream_copy(self):
        spec = build(Action.CLIP, "00:01:23-00:02:45")
        assert spec.path == Path("/videos/holiday_clip_000123-000245.mov")
        assert spec.tool_args == (
            "-hide_banner", "-n",
            "-ss", "00:01:23",
            "-i", "/videos/holiday.mov",
            "-t", "82",
            "-c", "copy",
            "/videos/holiday_clip_000123-000245.mov",
        )

    def test_clip_frame_accurate(self):
        options = EncodeOptions(video_encoder="libx264", clip_mode="accurate")
        spec = build(Action.CLIP, "00:01:23-00:02:45", options)
        assert "copy" not in spec.tool_args
        assert ("-c:v", "libx264") == spec.tool_args[8:10]
        assert ("-c:a", "aac") == spec.tool_args[10:12]

    def test_crop(self):
        spec = build(Action.CROP, "100:50-1280:720", dimensions=MediaDimensions(1920, 1080))
        assert spec.path == Path("/videos/holiday_crop_100x50-1280x720.mov")
        assert spec.tool_args[spec.tool_args.index("-filter:v") + 1] == "crop=1280:720:100:50"
        assert spec.tool_args[spec.tool_args.index("-c:a") + 1] == "copy"

    def test_crop_requires_dimensions(self):
        with pytest.raises(ValueError):
            build(Action.CROP, "100:50-1280:720")

    def test_speed(self):
        spec = build(Action.SPEED, "4")
        assert spec.path == Path("/videos/holiday_4x.mov")
        args = spec.tool_args
        assert args[args.index("-filter_complex") + 1] == (
            "[0:v]setpts=0.250000*PTS[v];[0:a]atempo=2.0,atempo=2.0[a]"
        )
        assert args.count("-map") == 2
        assert "[v]" in args and "[a]" in args
        assert args[args.index("-c:a") + 1] == "aac"

    def test_tosdr_ignores_parameter_and_emits_mp4(self):
        spec = build(Action.TOSDR, "-")
        assert spec.path == Path("/videos/holiday_SDR.mp4")
        assert spec.tool_args[spec.tool_args.index("-vf") + 1] == TONEMAP_FILTER
        assert spec.tool_args[spec.tool_args.index("-c:v") + 1] == "libx264"
        assert ("-crf", "14") == spec.tool_args[8:10]
        assert build(Action.TOSDR, "whatever") == spec

    def test_fps(self):
        spec = build(Action.FPS, "24")
        assert spec.path == Path("/videos/holiday_24fps.mov")
        assert spec.tool_args[spec.tool_args.index("-filter:v") + 1] == "fps=fps=24"

    def test_overwrite_flag(self):
        spec = build(Action.MUTE, "-", EncodeOptions(video_encoder="libx264", overwrite=True))
        assert spec.tool_args[:2] == ("-hide_banner", "-y")

    @pytest.mark.parametrize(
        "action,raw",
        [
            (Action.CONVERT, "mkv"),
            (Action.VOL, "2.0"),
            (Action.RESIZE, "0.5"),
            (Action.MUTE, "-"),
            (Action.CAPTURE, "90"),
            (Action.CLIP, "00:01:23-00:02:45"),
            (Action.CROP, "0:0-640:480"),
            (Action.SPEED, "0.25"),
            (Action.FPS, "60"),
        ],
    )
    def test_builders_are_deterministic(self, action, raw):
        dims = MediaDimensions(1920, 1080)
        assert build(action, raw, dimensions=dims) == build(action, raw, dimensions=dims)


class TestCropBounds:
    """Crop rectangles must sit inside the probed frame."""

    def test_fits(self):
        check_crop_bounds(parse_parameter(Action.CROP, "100:50-1280:720"), MediaDimensions(1920, 1080))

    def test_exact_fit(self):
        check_crop_bounds(parse_parameter(Action.CROP, "0:0-1920:1080"), MediaDimensions(1920, 1080))

    def test_too_wide_reports_max_width(self):
        with pytest.raises(BoundsError) as excinfo:
            check_crop_bounds(parse_parameter(Action.CROP, "100:50-1280:720"), MediaDimensions(1000, 1080))
        assert excinfo.value.max_width == 900
        assert excinfo.value.max_height == 1030
        assert "Max allowed width from x=100 is 900" in excinfo.value.details

    def test_offset_outside_frame(self):
        with pytest.raises(BoundsError, match="Starting point is outside the video frame"):
            check_crop_bounds(parse_parameter(Action.CROP, "1920:0-10:10"), MediaDimensions(1920, 1080))

    def test_bounds_error_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            check_crop_bounds(parse_parameter(Action.CROP, "0:1000-10:100"), MediaDimensions(1920, 1080))
