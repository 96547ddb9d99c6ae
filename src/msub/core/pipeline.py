"""Per-video orchestrator: probe, extract, transcribe, localize, burn in, clean up."""

from __future__ import annotations

import time
from pathlib import Path

from msub.core.config import MsubConfig
from msub.core.events import EventCallback, ProgressEvent
from msub.core.models import CompletedRecord, JobResult, JobStatus, VideoJob
from msub.media.audio import extract_audio
from msub.media.probe import probe_video
from msub.notify.channels import send_notifications
from msub.subtitles.burn import burn_in
from msub.transcriber.whisper_cpp import transcribe
from msub.translation.client import TranslationClient
from msub.translation.localize import generate_tracks
from msub.utils.console import console
from msub.utils.paths import create_workspace, output_path_for, workspace_paths
from msub.utils.tempfiles import TempFileTracker

# Overall progress band reserved for subtitle generation.
TRANSLATE_START = 0.4
TRANSLATE_END = 0.8


def process_video(
    job: VideoJob,
    config: MsubConfig,
    on_event: EventCallback | None = None,
    client: TranslationClient | None = None,
    completion_log: list[CompletedRecord] | None = None,
) -> JobResult:
    """Run the full pipeline for one video.

    Never raises for stage failures: any error ends the job as failed and
    is reported in the returned result. Temporary files are released in
    every case.

    Args:
        job: The job to process. Its status and progress are updated in place.
        config: Full application config.
        on_event: Optional callback for streaming progress events.
        client: Translation client; one is created from config when omitted.
        completion_log: Successful runs are appended here.

    Returns:
        The structured outcome, also stored on ``job.result``.
    """
    started = time.monotonic()
    last_progress = 0.0

    def emit(step: str, progress: float, message: str = "", data: dict | None = None) -> None:
        nonlocal last_progress
        last_progress = max(last_progress, min(progress, 1.0))
        job.progress = last_progress
        if on_event:
            on_event(ProgressEvent(step=step, progress=last_progress, message=message, data=data))

    job.status = JobStatus.PROCESSING
    temp = TempFileTracker(keep=config.keep_temp_files)
    own_client = client is None
    client = client or TranslationClient(config.translation)
    source = Path(job.source_path)
    workspace: Path | None = None

    console.rule(f"[bold]{job.original_name}[/bold]")
    try:
        emit("probing", 0.0, "Reading video metadata...")
        metadata = probe_video(source, config.ffmpeg)
        output_path = output_path_for(Path(job.original_name), metadata.container_format, config.output_dir)
        emit("probing", 0.05, f"{metadata.width}x{metadata.height} {metadata.container_format}")

        workspace = create_workspace(Path(job.original_name).stem, job.id, base_dir=config.temp_dir)
        paths = workspace_paths(workspace)

        emit("extracting_audio", 0.1, "Extracting audio...")
        console.print("[bold]Extracting audio...[/bold]")
        audio_path = extract_audio(source, temp.track(paths["audio"]), config.ffmpeg)
        emit("extracting_audio", 0.2, "Audio extracted")

        emit("transcribing", 0.3, "Transcribing...")
        temp.track(paths["transcription_srt"])
        base_segments, _ = transcribe(audio_path, config.whisper, timeout=config.ffmpeg.timeout)
        emit("transcribing", 0.4, f"Transcribed {len(base_segments)} segments")

        languages = job.languages

        def on_translate_progress(frac: float) -> None:
            index = min(int(frac * len(languages)), len(languages) - 1)
            emit(
                f"translating_{languages[index]}",
                TRANSLATE_START + frac * (TRANSLATE_END - TRANSLATE_START),
                f"Generating subtitles ({frac:.0%})...",
            )

        generated = generate_tracks(
            base_segments,
            languages,
            workspace,
            client,
            on_progress=on_translate_progress if languages else None,
        )
        for track in generated.tracks:
            temp.track(track.source_path)
        warnings = generated.skipped + generated.failed

        emit("merging_subtitles", 0.85, f"Burning {len(generated.tracks)} subtitle tracks...")
        burned = burn_in(source, generated.tracks, job.style, metadata, output_path, config, temp)
        if burned.fallback:
            warnings.append(f"Subtitles not burned in, output is a plain copy: {burned.error}")
        emit("merging_subtitles", 1.0, "Subtitles merged")

        result = JobResult(
            success=True,
            output_path=burned.output_path,
            languages=[t.language for t in generated.tracks],
            subtitle_count=len(base_segments),
            duration=time.monotonic() - started,
            warnings=warnings,
            fallback=burned.fallback,
        )
    except Exception as e:
        console.print(f"[red]Processing failed:[/red] {e}")
        result = JobResult(success=False, error=str(e), duration=time.monotonic() - started)
    finally:
        temp.cleanup()
        if workspace is not None:
            temp.remove_empty_dir(workspace)
        if own_client:
            client.close()

    job.finish(result)

    if not result.success:
        emit("failed", last_progress, result.error or "Processing failed", data={"error": result.error})
        return result

    record = CompletedRecord(
        original_file=job.original_name,
        output_file=result.output_path.name,
        languages=result.languages,
        duration=result.duration,
        success=True,
    )
    if completion_log is not None:
        completion_log.append(record)
    console.print(
        f"[bold green]Done![/bold green] {result.output_path} "
        f"({', '.join(result.languages) or 'no subtitles'}, {result.duration:.1f}s)"
    )

    try:
        send_notifications(record, config.notify)
    except Exception as e:
        console.print(f"[yellow]Notifications skipped:[/yellow] {e}")

    emit(
        "completed",
        1.0,
        "Processing complete",
        data={"outputFile": result.output_path.name, "languages": result.languages},
    )
    return result
