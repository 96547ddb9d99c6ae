"""Single-worker FIFO queue that feeds uploaded videos through the pipeline.

One background thread drains the queue and exits when it is empty; the
next ``enqueue()`` starts a fresh one. Progress from the running job is
re-published on a ``ProgressHub`` for live listeners.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from msub.core.config import MsubConfig
from msub.core.events import ProgressEvent, ProgressHub
from msub.core.models import CompletedRecord, JobResult, JobStatus, StyleConfig, VideoJob
from msub.core.pipeline import process_video
from msub.utils.console import console

Processor = Callable[..., JobResult]


@dataclass
class QueueStatus:
    """Point-in-time view of the queue."""

    queue: list[dict] = field(default_factory=list)
    pending: int = 0
    completed: int = 0
    failed: int = 0
    is_processing: bool = False
    current_file: str | None = None
    completed_videos: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "queue": self.queue,
            "pending": self.pending,
            "completed": self.completed,
            "failed": self.failed,
            "isProcessing": self.is_processing,
            "currentFile": self.current_file,
            "completedVideos": self.completed_videos,
        }


class BatchQueue:
    """Thread-safe job queue with a lazily started worker.

    Args:
        config: Full application config, passed to the processor.
        processor: Callable run for each job as
            ``processor(job, config, on_event=..., completion_log=...)``.
        hub: Progress fan-out; a private one is created when omitted.
    """

    def __init__(
        self,
        config: MsubConfig,
        processor: Processor = process_video,
        hub: ProgressHub | None = None,
    ) -> None:
        self.config = config
        self.processor = processor
        self.hub = hub or ProgressHub()
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._pending: deque[VideoJob] = deque()
        self._current: VideoJob | None = None
        self._worker: threading.Thread | None = None
        self._completed = 0
        self._failed = 0
        self._completed_videos: list[CompletedRecord] = []

    # -- producer side --------------------------------------------------

    def enqueue(self, source_path: Path, original_name: str, style: StyleConfig | None = None) -> VideoJob:
        job = VideoJob(source_path=Path(source_path), original_name=original_name, style=style or StyleConfig())
        with self._lock:
            self._pending.append(job)
            queue_length = len(self._pending)
            if self._worker is None:
                self._worker = threading.Thread(target=self._run, name="msub-worker", daemon=True)
                self._worker.start()

        console.print(f"[dim]Queued {original_name} ({queue_length} pending)[/dim]")
        self.hub.publish(
            ProgressEvent(
                step="queued",
                progress=0.0,
                message=f"Queued {original_name}",
                data={"jobId": job.id, "currentFile": self.current_file, "queueLength": queue_length},
            )
        )
        return job

    def cancel(self, job_id: str) -> bool:
        """Remove a job that has not started yet."""
        with self._lock:
            job = next((j for j in self._pending if j.id == job_id), None)
            if job is None:
                return False
            self._pending.remove(job)
            job.status = JobStatus.CANCELLED
        console.print(f"[yellow]Cancelled:[/yellow] {job.original_name}")
        self._discard_upload(job)
        return True

    # -- worker side ----------------------------------------------------

    def _run(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._current = None
                    self._worker = None
                    self._idle.notify_all()
                    return
                job = self._pending.popleft()
                self._current = job
            self._process(job)

    def _process(self, job: VideoJob) -> None:
        log: list[CompletedRecord] = []
        try:
            result = self.processor(job, self.config, on_event=self._forward, completion_log=log)
        except Exception as e:
            console.print(f"[red]Unexpected error processing {job.original_name}:[/red] {e}")
            result = JobResult(success=False, error=str(e))
        job.finish(result)

        with self._lock:
            if job.status == JobStatus.COMPLETED:
                self._completed += 1
            else:
                self._failed += 1
            self._completed_videos.extend(log)

        self._discard_upload(job)

    def _forward(self, event: ProgressEvent) -> None:
        with self._lock:
            current = self._current.original_name if self._current else None
            queue_length = len(self._pending)
        data = dict(event.data or {})
        data.update(currentFile=current, queueLength=queue_length)
        self.hub.publish(ProgressEvent(step=event.step, progress=event.progress, message=event.message, data=data))

    def _discard_upload(self, job: VideoJob) -> None:
        if not self.config.server.delete_uploads:
            return
        try:
            job.source_path.unlink(missing_ok=True)
        except OSError as e:
            console.print(f"[yellow]Could not delete upload {job.source_path.name}:[/yellow] {e}")

    # -- inspection -----------------------------------------------------

    @property
    def current_file(self) -> str | None:
        job = self._current
        return job.original_name if job else None

    @property
    def is_processing(self) -> bool:
        return self._current is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def snapshot(self) -> QueueStatus:
        """Live jobs only; finished ones are summarised in ``completed_videos``.

        ``pending`` counts every unfinished job, the running one included.
        """
        with self._lock:
            live = ([self._current] if self._current else []) + list(self._pending)
            return QueueStatus(
                queue=[
                    {
                        "id": job.id,
                        "name": job.original_name,
                        "status": job.status.value,
                        "progress": round(job.progress, 4),
                        "addedAt": job.created_at.isoformat(),
                    }
                    for job in live
                ],
                pending=len(live),
                completed=self._completed,
                failed=self._failed,
                is_processing=self._current is not None,
                current_file=self._current.original_name if self._current else None,
                completed_videos=[record.to_dict() for record in self._completed_videos],
            )

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until the queue is drained. Returns False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: not self._pending and self._current is None, timeout)
