"""vc: short verb/parameter commands for everyday ffmpeg jobs."""

from vc_tool.video_processor import VideoProcessor

__version__ = "0.1.0"

__all__ = ["VideoProcessor", "__version__"]
