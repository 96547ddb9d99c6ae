"""Progress events and the fan-out hub that streams them to live listeners.

The pipeline emits ``ProgressEvent`` objects through a callback. The batch
queue forwards them into a ``ProgressHub``; consumers (the SSE endpoint, the
CLI progress bar) subscribe to the hub and read events from their own
bounded buffer, so a slow consumer never blocks the pipeline.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterator


@dataclass
class ProgressEvent:
    """A progress event emitted during pipeline execution.

    Attributes:
        step: Pipeline step name (probing, extracting_audio, transcribing,
            translating_<lang>, merging_subtitles, completed, failed).
        progress: Overall job progress, 0.0 to 1.0.
        message: Human-readable status message.
        data: Optional payload (current file, queue length, result details).
    """

    step: str
    progress: float
    message: str = ""
    data: dict | None = field(default=None)

    def to_dict(self) -> dict:
        payload = {"step": self.step, "progress": round(self.progress, 4), "message": self.message}
        if self.data:
            payload.update(self.data)
        return payload


EventCallback = Callable[[ProgressEvent], None]


class Subscription:
    """A listener's private event buffer.

    When the buffer is full the oldest event is discarded to make room.
    """

    def __init__(self, maxsize: int = 100) -> None:
        self._queue: queue.Queue[ProgressEvent] = queue.Queue(maxsize=maxsize)
        self.dropped = 0
        self.closed = False

    def put(self, event: ProgressEvent) -> None:
        while True:
            try:
                self._queue.put_nowait(event)
                return
            except queue.Full:
                try:
                    self._queue.get_nowait()
                    self.dropped += 1
                except queue.Empty:
                    pass

    def get(self, timeout: float | None = None) -> ProgressEvent | None:
        """Return the next event, or None if nothing arrived within ``timeout``."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[ProgressEvent]:
        events = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def iter(self, poll: float = 1.0) -> Iterator[ProgressEvent | None]:
        """Yield events until closed; yields None on each idle poll interval."""
        while not self.closed:
            yield self.get(timeout=poll)


class ProgressHub:
    """Thread-safe registry of subscriptions with non-blocking publish."""

    def __init__(self, buffer_size: int = 100) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[Subscription] = []
        self._buffer_size = buffer_size

    def subscribe(self) -> Subscription:
        sub = Subscription(maxsize=self._buffer_size)
        with self._lock:
            self._subscribers.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        sub.closed = True
        with self._lock:
            if sub in self._subscribers:
                self._subscribers.remove(sub)

    def publish(self, event: ProgressEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for sub in subscribers:
            sub.put(event)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
