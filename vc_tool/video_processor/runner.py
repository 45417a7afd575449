"""Child-process helpers for ffmpeg and ffprobe."""

from __future__ import annotations

import platform
import shlex
import shutil
import subprocess
from typing import Optional, Sequence

from loguru import logger

from vc_tool.errors import ExternalFailure, ToolUnavailableError

FALLBACK_ENCODER = "libx264"
STDERR_TAIL_LINES = 12


def format_command(argv: Sequence[str]) -> str:
    """Render an argument vector as a copy-pasteable shell line."""
    return " ".join(shlex.quote(str(arg)) for arg in argv)


def require_tool(binary: str, label: str = "ffmpeg") -> str:
    """Return the resolved path of ``binary`` or raise ToolUnavailableError."""
    resolved = shutil.which(binary)
    if resolved is None:
        raise ToolUnavailableError(
            f"{label} is not installed. Please install it first.",
            f"Looked for '{binary}' on PATH.",
        )
    return resolved


def _stderr_tail(stderr: Optional[str]) -> str:
    if not stderr:
        return ""
    lines = [line for line in stderr.strip().splitlines() if line.strip()]
    return "\n".join(lines[-STDERR_TAIL_LINES:])


def run_tool(
    binary: str,
    args: Sequence[str],
    *,
    capture: bool = True,
    label: str = "ffmpeg",
) -> subprocess.CompletedProcess:
    """Run ``binary`` with ``args`` and wait for it to exit.

    Output is captured unless ``capture`` is False, in which case the child
    inherits the terminal. A non-zero exit raises ExternalFailure.
    """
    argv = [binary, *args]
    logger.debug(f"{label} command: {format_command(argv)}")

    kwargs = {"capture_output": True, "text": True} if capture else {}
    try:
        return subprocess.run(argv, check=True, **kwargs)
    except FileNotFoundError as exc:
        raise ToolUnavailableError(
            f"{label} is not installed. Please install it first.",
            f"Could not execute '{binary}'.",
        ) from exc
    except subprocess.CalledProcessError as exc:
        tail = _stderr_tail(exc.stderr)
        logger.error(f"{label} exited with status {exc.returncode}")
        if tail:
            logger.error(f"{label} stderr: {tail}")
        raise ExternalFailure(
            "Process not finished",
            tail or f"{label} exited with status {exc.returncode}",
            returncode=exc.returncode,
            stderr=exc.stderr,
        ) from exc


def detect_video_encoder(ffmpeg_bin: str = "ffmpeg") -> str:
    """Pick a hardware H.264 encoder when one works, else libx264.

    Tries h264_videotoolbox on macOS and h264_nvenc on Linux/Windows with a
    one-frame test encode.
    """
    system = platform.system()

    if system == "Darwin":
        encoder = "h264_videotoolbox"
    elif system in ("Linux", "Windows"):
        encoder = "h264_nvenc"
    else:
        return FALLBACK_ENCODER

    try:
        result = subprocess.run(
            [
                ffmpeg_bin, "-hide_banner", "-f", "lavfi",
                "-i", "testsrc=duration=0.1:size=64x64:rate=1",
                "-c:v", encoder, "-t", "0.1", "-f", "null", "-",
            ],
            capture_output=True,
            timeout=10,
        )
        if result.returncode == 0:
            logger.info(f"Using GPU encoder: {encoder}")
            return encoder
    except (subprocess.TimeoutExpired, FileNotFoundError):
        pass

    logger.info(f"GPU encoder {encoder} not available, using {FALLBACK_ENCODER}")
    return FALLBACK_ENCODER
