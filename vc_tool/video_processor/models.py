"""Value objects passed between the parser, builder and dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union


class Action(str, Enum):
    """The closed set of verbs understood by ``vc``."""

    CONVERT = "convert"
    VOL = "vol"
    RESIZE = "resize"
    MUTE = "mute"
    CAPTURE = "capture"
    CLIP = "clip"
    CROP = "crop"
    SPEED = "speed"
    TOSDR = "tosdr"
    FPS = "fps"

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(member.value for member in cls)


@dataclass(frozen=True)
class Invocation:
    action: Action
    parameter: str
    input_path: Path


@dataclass(frozen=True)
class FormatParam:
    extension: str


@dataclass(frozen=True)
class RatioParam:
    """A positive decimal; ``text`` keeps the spelling used in output names."""

    value: Decimal
    text: str


@dataclass(frozen=True)
class SecondsParam:
    seconds: int


@dataclass(frozen=True)
class TimeRange:
    start: int
    end: int
    start_text: str
    end_text: str

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class CropRegion:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class NoParam:
    """Placeholder for actions that ignore their parameter (mute, tosdr)."""

    raw: str


ParsedParameter = Union[FormatParam, RatioParam, SecondsParam, TimeRange, CropRegion, NoParam]


@dataclass(frozen=True)
class MediaDimensions:
    width: int
    height: int


@dataclass(frozen=True)
class OutputSpec:
    """Output file plus the ffmpeg arguments that produce it (binary excluded)."""

    path: Path
    tool_args: Tuple[str, ...]


@dataclass(frozen=True)
class DispatchResult:
    invocation: Invocation
    message: str
    output: Optional[OutputSpec] = None
    skipped: bool = False
    executed: bool = False
