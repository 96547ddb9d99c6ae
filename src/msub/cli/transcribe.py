"""msub transcribe command: transcribe a video to a base-language SRT."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from msub.core.config import load_config
from msub.core.errors import MsubError
from msub.media.audio import extract_audio
from msub.subtitles.srt import save_srt
from msub.transcriber.whisper_cpp import sidecar_path, transcribe as run_transcription
from msub.utils.console import console
from msub.utils.paths import create_workspace
from msub.utils.tempfiles import TempFileTracker


def transcribe(
    input_path: Annotated[
        Path,
        typer.Argument(help="Video or audio file to transcribe."),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output SRT path. Default: <input>.<base language>.srt"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="whisper.cpp model file."),
    ] = None,
    keep_temp: Annotated[
        bool,
        typer.Option("--keep-temp", help="Keep the extracted audio."),
    ] = False,
) -> None:
    """Extract audio and transcribe it, without burning anything in."""
    if not input_path.is_file():
        console.print(f"[red]File not found:[/red] {input_path}")
        raise typer.Exit(1)

    config = load_config(**{"whisper.model": model})
    output = output or input_path.with_name(f"{input_path.stem}.{config.subtitles.base_language}.srt")

    workspace = create_workspace(input_path.stem, "cli", base_dir=config.temp_dir)
    temp = TempFileTracker(keep=keep_temp or config.keep_temp_files)
    try:
        console.print("[bold]Extracting audio...[/bold]")
        audio = extract_audio(input_path, temp.track(workspace / "audio.wav"), config.ffmpeg)
        temp.track(sidecar_path(audio))
        segments, _ = run_transcription(audio, config.whisper, timeout=config.ffmpeg.timeout)
        save_srt(segments, output)
    except MsubError as e:
        console.print(f"[red]Transcription failed:[/red] {e}")
        raise typer.Exit(1)
    finally:
        temp.cleanup()
        temp.remove_empty_dir(workspace)

    console.print(f"[green]Saved:[/green] {output} ({len(segments)} segments)")
