from __future__ import annotations

from typing import Optional

from loguru import logger

from vc_tool.config import AUTO_ENCODER, Settings

from .commands import EncodeOptions
from .models import Action
from .runner import FALLBACK_ENCODER, detect_video_encoder, require_tool

# Actions whose ffmpeg arguments never name the configurable encoder
FIXED_CODEC_ACTIONS = frozenset({Action.RESIZE, Action.CAPTURE, Action.TOSDR})


class VideoProcessorBase:
    """Settings and shared helpers for a single vc run."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        show_external_logs: bool = False,
        dry_run: bool = False,
    ):
        self.settings = settings or Settings()
        self.show_external_logs = show_external_logs
        self.dry_run = dry_run
        self._video_encoder: Optional[str] = None

    def ensure_ffmpeg(self) -> str:
        """Fail fast when ffmpeg is not reachable."""
        return require_tool(self.settings.ffmpeg_bin, "ffmpeg")

    @property
    def video_encoder(self) -> str:
        """Configured encoder, auto-detected once on first use."""
        if self._video_encoder is None:
            configured = self.settings.video_encoder
            if configured == AUTO_ENCODER:
                configured = detect_video_encoder(self.settings.ffmpeg_bin)
            logger.debug(f"Video encoder: {configured}")
            self._video_encoder = configured
        return self._video_encoder

    def encode_options(self, action: Optional[Action] = None) -> EncodeOptions:
        needs_encoder = action not in FIXED_CODEC_ACTIONS and not (
            action is Action.CLIP and self.settings.clip_mode == "copy"
        )
        encoder = self.video_encoder if needs_encoder else FALLBACK_ENCODER
        return EncodeOptions(
            video_encoder=encoder,
            clip_mode=self.settings.clip_mode,
            overwrite=self.settings.overwrite,
        )
