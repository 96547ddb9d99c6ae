"""Transcription via a local whisper.cpp binary.

whisper.cpp writes its SRT next to the input, appending ``.srt`` to the
full file name (``audio.wav`` -> ``audio.wav.srt``).
"""

from __future__ import annotations

from pathlib import Path

from msub.core.config import WhisperConfig
from msub.core.errors import TranscriptionOutputMissingError
from msub.core.models import Segment
from msub.subtitles.convert import convert_text
from msub.subtitles.srt import parse_srt
from msub.utils.console import console
from msub.utils.process import run_command


def sidecar_path(audio_path: Path) -> Path:
    audio_path = Path(audio_path)
    return audio_path.with_name(audio_path.name + ".srt")


def build_command(audio_path: Path, config: WhisperConfig) -> list[str]:
    cmd = [
        config.binary,
        "-m",
        config.model,
        "-f",
        str(audio_path),
        "-l",
        config.language,
        "--output-srt",
    ]
    if config.no_gpu:
        cmd.append("--no-gpu")
    cmd.extend(config.extra_args)
    return cmd


def transcribe(
    audio_path: Path,
    config: WhisperConfig,
    timeout: float | None = None,
) -> tuple[list[Segment], Path]:
    """Transcribe a WAV file and return its segments and SRT path.

    Args:
        audio_path: 16 kHz mono WAV produced by the audio extractor.
        config: Whisper configuration.
        timeout: Process timeout in seconds, None to wait indefinitely.

    Returns:
        Parsed segments and the SRT sidecar they were read from. When a
        script conversion is configured, the sidecar has been rewritten
        with the converted text.

    Raises:
        ProcessError: If the binary fails.
        TranscriptionOutputMissingError: If no SRT sidecar was produced.
        ConversionError: If script conversion fails.
    """
    audio_path = Path(audio_path)
    console.print(f"[bold]Transcribing:[/bold] {audio_path.name} (model: {Path(config.model).name})")
    run_command(build_command(audio_path, config), timeout=timeout)

    srt_path = sidecar_path(audio_path)
    if not srt_path.is_file():
        raise TranscriptionOutputMissingError(f"Transcription output not found: {srt_path}")

    content = srt_path.read_text(encoding="utf-8")
    if config.script_conversion:
        content = convert_text(content, config.script_conversion)
        srt_path.write_text(content, encoding="utf-8")

    segments = parse_srt(content)
    console.print(f"[green]Transcription complete:[/green] {len(segments)} segments")
    return segments, srt_path
