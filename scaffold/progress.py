"""
進度回報

事件值介於 0-100 且嚴格遞增，100 只會出現一次。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class ProgressEvent:
    progress: int
    message: str


ProgressCallback = Callable[[ProgressEvent], None]


class ProgressReporter:
    """包住呼叫端的 callback，保證遞增；沒有 callback 時只記錄不呼叫"""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.events: list[ProgressEvent] = []

    @property
    def last(self) -> int:
        return self.events[-1].progress if self.events else -1

    def emit(self, progress: int, message: str) -> None:
        if not 0 <= progress <= 100:
            raise ValueError(f"progress out of range: {progress}")
        if progress <= self.last:
            raise ValueError(f"progress must increase: {self.last} -> {progress}")
        event = ProgressEvent(progress, message)
        self.events.append(event)
        if self.callback is not None:
            self.callback(event)
