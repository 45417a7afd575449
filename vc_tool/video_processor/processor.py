from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from vc_tool.errors import ExternalFailure, UsageError, ValidationError

from .base import VideoProcessorBase
from .commands import build_output_spec
from .constants import FPS_TOLERANCE
from .models import (
    Action,
    DispatchResult,
    Invocation,
    MediaDimensions,
    ParsedParameter,
)
from .parsing import parse_parameter
from .probe import ProbeMixin
from .runner import format_command, run_tool

SUCCESS_MESSAGES = {
    Action.CONVERT: "Converted file created",
    Action.VOL: "Volume adjusted file created",
    Action.RESIZE: "Resized file created",
    Action.MUTE: "Muted file created",
    Action.CAPTURE: "Captured frame saved as",
    Action.CLIP: "Clipped file created",
    Action.CROP: "Cropped file created",
    Action.SPEED: "Speed-adjusted file created",
    Action.TOSDR: "SDR tonemapped file created",
    Action.FPS: "FPS-adjusted file created",
}

FAILURE_MESSAGES = {
    Action.CLIP: "Failed to create clip.",
    Action.CROP: "Failed to crop video.",
    Action.FPS: "Failed to change FPS.",
}


def resolve_action(name: str) -> Action:
    """Map an action name onto the closed Action set."""
    try:
        return Action(name)
    except ValueError:
        raise UsageError(f"Unsupported action: {name}") from None


def describe(
    invocation: Invocation,
    param: ParsedParameter,
    dimensions: Optional[MediaDimensions] = None,
    current_fps: Optional[Decimal] = None,
) -> str:
    """One-line summary of what is about to run."""
    name = invocation.input_path
    action = invocation.action

    if action is Action.CONVERT:
        return f"Converting {name} to format {param.extension}..."
    if action is Action.VOL:
        return f"Changing volume of {name} by {param.text} times..."
    if action is Action.RESIZE:
        return f"Resizing {name} by a factor of {param.text}..."
    if action is Action.MUTE:
        return f"Muting {name}..."
    if action is Action.CAPTURE:
        return f"Capturing frame at {param.seconds} seconds..."
    if action is Action.CLIP:
        return (
            f"Clipping {name} from {param.start_text} to {param.end_text} "
            f"(duration {param.duration}s)..."
        )
    if action is Action.CROP:
        source = f" (source {dimensions.width}x{dimensions.height})" if dimensions else ""
        return f"Cropping {name} to {param.w}x{param.h} at offset {param.x},{param.y}{source}..."
    if action is Action.SPEED:
        return f"Changing playback speed of {name} to {param.text}x..."
    if action is Action.TOSDR:
        return f"Converting {name} to SDR using HDR to SDR tonemapping and x264..."
    return f"Changing FPS of {name} from {current_fps} to {param.text}..."


class VideoProcessor(ProbeMixin, VideoProcessorBase):
    """Runs one vc action: parse, probe when needed, build, invoke."""

    def dispatch(
        self,
        action_name: str,
        parameter: str,
        input_path: Union[str, Path],
    ) -> DispatchResult:
        self.ensure_ffmpeg()

        action = resolve_action(action_name)
        invocation = Invocation(action=action, parameter=parameter, input_path=Path(input_path))
        param = parse_parameter(action, parameter)

        if not invocation.input_path.is_file():
            raise ValidationError(f"Input file not found: {invocation.input_path}")

        return self.run(invocation, param)

    def run(self, invocation: Invocation, param: ParsedParameter) -> DispatchResult:
        """Probe, build and execute an already-validated invocation."""
        action = invocation.action
        dimensions = None
        current_fps = None

        if action is Action.CROP:
            dimensions = self.probe_dimensions(invocation.input_path)
        elif action is Action.FPS:
            current_fps = self.probe_frame_rate(invocation.input_path)
            if abs(current_fps - param.value) < Decimal(FPS_TOLERANCE):
                message = (
                    f"Video is already at {current_fps} FPS (target: {param.text}). "
                    "No processing needed."
                )
                logger.info(message)
                return DispatchResult(invocation=invocation, message=message, skipped=True)

        spec = build_output_spec(invocation, param, self.encode_options(action), dimensions)

        if spec.path.exists() and not self.settings.overwrite:
            raise ValidationError(
                f"Output file already exists: {spec.path}",
                "Remove it or pass --overwrite.",
            )

        logger.info(describe(invocation, param, dimensions, current_fps))
        command = format_command([self.settings.ffmpeg_bin, *spec.tool_args])

        if self.dry_run:
            return DispatchResult(
                invocation=invocation,
                message=f"Dry run: {command}",
                output=spec,
            )

        try:
            run_tool(
                self.settings.ffmpeg_bin,
                spec.tool_args,
                capture=not self.show_external_logs,
            )
        except ExternalFailure as exc:
            raise ExternalFailure(
                FAILURE_MESSAGES.get(action, exc.message),
                exc.details,
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc

        logger.info(f"{SUCCESS_MESSAGES[action]}: {spec.path}")
        return DispatchResult(
            invocation=invocation,
            message=SUCCESS_MESSAGES[action],
            output=spec,
            executed=True,
        )
