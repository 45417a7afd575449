"""Typer-based CLI for vc.

Command structure:
    vc <action> <param> <file> [--verbose] [--dry-run] [--overwrite]
                               [--frame-accurate] [--encoder NAME]
"""

from __future__ import annotations

import sys
from typing import List, Optional

import typer
from dotenv import load_dotenv
from loguru import logger

from vc_tool.config import load_settings
from vc_tool.errors import EXIT_USAGE, VcError
from vc_tool.logging_config import configure_logging
from vc_tool.ui import console, print_usage, status_spinner, step_complete, step_error, step_info
from vc_tool.video_processor import DispatchResult, VideoProcessor
from vc_tool.video_processor.processor import resolve_action

app = typer.Typer(
    name="vc",
    help="Short verb/parameter commands for everyday ffmpeg jobs.",
    rich_markup_mode="rich",
    add_completion=False,
)


def report(result: DispatchResult) -> None:
    """Print the outcome of a dispatched action."""
    if result.skipped or not result.executed:
        step_info(result.message)
        return
    step_complete(result.message, result.output.path)


# Unknown dash-prefixed tokens such as "-5" are kept as positional arguments
@app.command(context_settings={"ignore_unknown_options": True})
def run(
    args: Optional[List[str]] = typer.Argument(
        None,
        metavar="ACTION PARAM FILE",
        help="Action (convert, vol, resize, mute, capture, clip, crop, speed, tosdr, fps), its parameter, and the input file",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show INFO logs and ffmpeg output in the terminal",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Validate and print the ffmpeg command without running it",
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        "-y",
        help="Replace the output file if it already exists",
    ),
    frame_accurate: bool = typer.Option(
        False,
        "--frame-accurate",
        help="clip: re-encode for frame-accurate cuts instead of stream copy",
    ),
    encoder: Optional[str] = typer.Option(
        None,
        "--encoder",
        "-e",
        help="Video encoder (default: auto-detect GPU encoder, else libx264)",
    ),
) -> None:
    """Translate ACTION PARAM FILE into an ffmpeg invocation."""
    load_dotenv()

    if not args or len(args) != 3:
        print_usage()
        raise typer.Exit(EXIT_USAGE)

    action, parameter, input_path = args

    try:
        settings = load_settings().with_overrides(
            video_encoder=encoder,
            overwrite=True if overwrite else None,
            clip_mode="accurate" if frame_accurate else None,
        )
    except VcError as exc:
        step_error(exc.message, exc.details)
        raise typer.Exit(exc.exit_code)

    processor = VideoProcessor(settings, show_external_logs=verbose, dry_run=dry_run)

    # Missing ffmpeg and unknown actions fail before any log sink exists
    try:
        processor.ensure_ffmpeg()
        resolve_action(action)
    except VcError as exc:
        step_error(exc.message, exc.details)
        raise typer.Exit(exc.exit_code)

    configure_logging(verbose=verbose, log_file=settings.log_file)

    try:
        if verbose or dry_run:
            result = processor.dispatch(action, parameter, input_path)
        else:
            with status_spinner(f"Running {action}"):
                result = processor.dispatch(action, parameter, input_path)
    except VcError as exc:
        logger.error(f"{action} failed: {exc.message}")
        step_error(exc.message, exc.details)
        raise typer.Exit(exc.exit_code)

    report(result)


def main() -> None:
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Interrupted by user.[/bold yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
