from .models import Action, DispatchResult, Invocation, OutputSpec
from .processor import VideoProcessor

__all__ = [
    "Action",
    "DispatchResult",
    "Invocation",
    "OutputSpec",
    "VideoProcessor",
]
