"""HTTP front end: upload videos, follow progress over SSE, inspect the queue."""

from __future__ import annotations

import asyncio
import json
import re
import shutil
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import StreamingResponse

from msub import __version__
from msub.core.config import MsubConfig, load_config
from msub.core.events import Subscription
from msub.core.models import StyleConfig
from msub.core.queue import BatchQueue
from msub.utils.console import console

_UNSAFE_CHARS_RE = re.compile(r"[^\w.\- ]")


def format_sse(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def safe_filename(name: str) -> str:
    """Strip directory parts and unusual characters from an uploaded name."""
    name = Path(name or "").name
    return _UNSAFE_CHARS_RE.sub("_", name) or "upload"


def parse_settings(raw: str | None, default_languages: list[str]) -> StyleConfig:
    """Build the style config from the ``subtitleSettings`` form field.

    Invalid JSON or invalid values fall back to the defaults with a warning.
    """
    if not raw:
        return StyleConfig(languages=list(default_languages))
    try:
        return StyleConfig.from_dict(json.loads(raw), default_languages)
    except (ValueError, TypeError, AttributeError) as e:
        console.print(f"[yellow]Ignoring invalid subtitle settings:[/yellow] {e}")
        return StyleConfig(languages=list(default_languages))


async def sse_stream(
    sub: Subscription,
    first: dict,
    is_disconnected: Callable[[], Awaitable[bool]],
    unsubscribe: Callable[[Subscription], None],
    poll: float = 1.0,
) -> AsyncIterator[str]:
    """Yield the connection event, then every event published to ``sub``.

    Ends when the client disconnects or the subscription is closed.
    """
    try:
        yield format_sse(first)
        while not sub.closed:
            if await is_disconnected():
                break
            event = await asyncio.to_thread(sub.get, poll)
            if event is None:
                yield ": keepalive\n\n"
                continue
            yield format_sse(event.to_dict())
    finally:
        unsubscribe(sub)


def create_app(config: MsubConfig | None = None, queue: BatchQueue | None = None) -> FastAPI:
    """Build the FastAPI application around a batch queue."""
    config = config or load_config()
    queue = queue or BatchQueue(config)
    upload_dir = Path(config.server.upload_dir)

    app = FastAPI(title="multisub", version=__version__)
    app.state.config = config
    app.state.queue = queue

    def upload(
        videos: list[UploadFile] = File(...),
        subtitleSettings: Optional[str] = Form(None),  # noqa: N803
    ) -> dict:
        if not videos:
            raise HTTPException(400, "No videos uploaded")
        if len(videos) > config.server.max_files:
            raise HTTPException(400, f"At most {config.server.max_files} videos per upload")

        style = parse_settings(subtitleSettings, config.subtitles.default_languages)
        upload_dir.mkdir(parents=True, exist_ok=True)

        job_ids = []
        for video in videos:
            original_name = safe_filename(video.filename)
            dest = upload_dir / f"{uuid.uuid4().hex[:8]}_{original_name}"
            with open(dest, "wb") as f:
                shutil.copyfileobj(video.file, f)
            job = queue.enqueue(dest, original_name, style)
            job_ids.append(job.id)

        return {
            "message": f"Queued {len(job_ids)} videos for processing",
            "queueLength": len(queue),
            "jobs": job_ids,
        }

    app.post("/upload")(upload)
    app.post("/api/process-videos")(upload)

    @app.get("/api/process-progress")
    async def process_progress(request: Request) -> StreamingResponse:
        sub = queue.hub.subscribe()
        first = {"step": "connected", "queueLength": len(queue), "currentFile": queue.current_file}
        return StreamingResponse(
            sse_stream(sub, first, request.is_disconnected, queue.hub.unsubscribe),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    @app.get("/status")
    def status() -> dict:
        return queue.snapshot().to_dict()

    @app.delete("/queue/{job_id}")
    def cancel(job_id: str) -> dict:
        if not queue.cancel(job_id):
            raise HTTPException(404, f"Job {job_id} is not queued")
        return {"cancelled": job_id}

    @app.get("/health")
    def health() -> dict:
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "queue": len(queue),
            "processing": queue.is_processing,
        }

    return app
