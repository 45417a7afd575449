"""Shared constants: usage table rows and fixed encoding settings."""

from __future__ import annotations

from typing import Tuple

# (action, example parameter, description) in usage order
ACTION_TABLE: Tuple[Tuple[str, str, str], ...] = (
    ("convert", "mp4", "Convert video to a new format"),
    ("vol", "2.0", "Adjust audio volume by a multiplier factor"),
    ("resize", "0.5", "Scale video dimensions by a multiplier factor"),
    ("mute", "-", "Remove audio from video"),
    ("capture", "90", "Extract a frame at a specific time in seconds"),
    ("clip", "00:01:23-00:02:45", "Cut a segment from the video"),
    ("crop", "100:50-1280:720", "Crop video to a specific region"),
    ("speed", "2", "Change playback speed"),
    ("tosdr", "-", "Convert HDR video to SDR"),
    ("fps", "30", "Change frames per second"),
)

# Frames are compared at two-decimal precision; closer than this is a no-op.
FPS_TOLERANCE = "0.1"

CAPTURE_EXTENSION = "jpg"
CAPTURE_QUALITY = "2"

# HDR -> SDR: linear light, bt709 primaries, hable tone curve, bt709 re-tag.
TONEMAP_FILTER = (
    "zscale=t=linear:npl=150,format=gbrpf32le,zscale=p=bt709,"
    "tonemap=tonemap=hable:desat=0,zscale=t=bt709:m=bt709:r=tv,format=yuv420p"
)
SDR_EXTENSION = "mp4"
SDR_ENCODER = "libx264"
SDR_CRF = "14"
SDR_PRESET = "medium"
SDR_AUDIO_BITRATE = "192k"
