"""Audio extraction from video files using ffmpeg."""

from __future__ import annotations

from pathlib import Path

from msub.core.config import FFmpegConfig
from msub.core.errors import EmptyAudioError
from msub.utils.process import run_command

# Smallest possible WAV file: the RIFF header alone.
WAV_HEADER_SIZE = 44


def extract_audio(
    video_path: Path,
    output_path: Path | None = None,
    config: FFmpegConfig | None = None,
    sample_rate: int = 16000,
) -> Path:
    """Extract a mono 16-bit PCM WAV track from a video file.

    Args:
        video_path: Path to the input video file.
        output_path: Path for the output WAV file. Defaults to
            same directory and stem as video with .wav extension.
        config: ffmpeg configuration.
        sample_rate: Audio sample rate in Hz. Whisper expects 16000.

    Returns:
        Path to the extracted audio file.

    Raises:
        FileNotFoundError: If the video doesn't exist.
        ProcessError: If ffmpeg fails.
        EmptyAudioError: If the output is missing or only a header.
    """
    config = config or FFmpegConfig()
    video_path = Path(video_path)
    if not video_path.is_file():
        raise FileNotFoundError(f"Video file not found: {video_path}")

    if output_path is None:
        output_path = video_path.with_suffix(".wav")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        config.ffmpeg,
        "-i",
        str(video_path),
        "-vn",  # no video
        "-acodec",
        "pcm_s16le",  # 16-bit PCM
        "-ar",
        str(sample_rate),  # sample rate
        "-ac",
        "1",  # mono
        "-y",  # overwrite
        str(output_path),
    ]
    run_command(cmd, timeout=config.timeout)

    size = output_path.stat().st_size if output_path.is_file() else 0
    if size < WAV_HEADER_SIZE:
        raise EmptyAudioError(f"Extracted audio is empty or too small ({size} bytes)")
    return output_path
