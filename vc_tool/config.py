"""Read-only settings for vc: defaults, optional YAML file, environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import yaml

from vc_tool.errors import UsageError

CONFIG_DIR = Path.home() / ".config" / "vc-tool"
CONFIG_PATH = CONFIG_DIR / "config.yaml"

CLIP_MODES = ("copy", "accurate")
AUTO_ENCODER = "auto"

# Maps setting names to environment variable names
ENV_KEYS = {
    "ffmpeg_bin": "VC_FFMPEG",
    "ffprobe_bin": "VC_FFPROBE",
    "video_encoder": "VC_ENCODER",
    "clip_mode": "VC_CLIP_MODE",
    "overwrite": "VC_OVERWRITE",
    "log_file": "VC_LOG_FILE",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Tool locations and encoding defaults for a single run."""

    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"
    video_encoder: str = AUTO_ENCODER
    clip_mode: str = "copy"
    overwrite: bool = False
    log_file: Optional[str] = None

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


def config_path() -> Path:
    """Config file location, overridable with VC_CONFIG."""
    override = os.getenv("VC_CONFIG")
    return Path(override).expanduser() if override else CONFIG_PATH


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def load_file_config(path: Optional[Path] = None) -> dict:
    """Load the YAML config file; a missing or unreadable file yields {}."""
    path = path or config_path()
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}

    if not isinstance(config, dict):
        return {}
    return {
        key: value
        for key, value in config.items()
        if key in ENV_KEYS and value is not None
    }


def load_settings(path: Optional[Path] = None) -> Settings:
    """Resolve settings: defaults, then the YAML file, then environment variables."""
    values: dict = dict(load_file_config(path))

    for key, env_var in ENV_KEYS.items():
        env_value = os.getenv(env_var)
        if env_value:
            values[key] = env_value

    if "overwrite" in values:
        values["overwrite"] = _as_bool(values["overwrite"])
    for key in ("ffmpeg_bin", "ffprobe_bin", "video_encoder", "clip_mode", "log_file"):
        if key in values and values[key] is not None:
            values[key] = str(values[key])

    settings = Settings(**values)
    if settings.clip_mode not in CLIP_MODES:
        raise UsageError(
            f"Invalid clip_mode '{settings.clip_mode}'.",
            f"Expected one of: {', '.join(CLIP_MODES)}",
        )
    return settings
