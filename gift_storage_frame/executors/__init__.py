"""Frame executors: request classification and HTTP serving of the frame states."""

from .base import FrameBaseExecutor
from .server import FrameServerExecutor

__all__ = [
    "FrameBaseExecutor",
    "FrameServerExecutor"
]
