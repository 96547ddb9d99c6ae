"""Working-directory and output path management for per-video jobs."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

VIDEO_EXTENSIONS = (".mp4", ".mkv", ".webm", ".avi", ".mov", ".ts", ".flv")


def slugify(text: str) -> str:
    """Convert text to a filesystem-safe slug."""
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text[:80].strip("-")


def create_workspace(title: str, job_id: str, base_dir: Path = Path("./msub_workspace/temp")) -> Path:
    """Create a private temp directory for one job.

    Structure: <base_dir>/<slug>/<YYYYMMDD_HHMMSS>_<job_id>/
    Jobs never share a directory, so their temp files cannot collide.
    """
    slug = slugify(title) or "untitled"
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    workspace = Path(base_dir) / slug / f"{timestamp}_{job_id}"
    workspace.mkdir(parents=True, exist_ok=True)
    return workspace


def output_path_for(video_path: Path, container_format: str, output_dir: Path) -> Path:
    """Return ``<output_dir>/<stem>_subtitled.<container>``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / f"{Path(video_path).stem}_subtitled.{container_format}"


def workspace_paths(workspace: Path, audio_stem: str = "audio") -> dict:
    """Generate standard temp paths for a job workspace.

    Returns a dict with keys: audio, transcription_srt.
    """
    audio = workspace / f"{audio_stem}.wav"
    return {
        "audio": audio,
        # whisper.cpp appends .srt to the full input file name
        "transcription_srt": audio.with_name(audio.name + ".srt"),
    }


def subtitle_path(workspace: Path, language: str, ext: str = "srt") -> Path:
    """Path for one language's subtitle file inside a workspace."""
    return workspace / f"subtitles_{language}.{ext}"


def is_video_file(path: Path) -> bool:
    return Path(path).suffix.lower() in VIDEO_EXTENSIONS
