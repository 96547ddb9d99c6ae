"""Video metadata extraction and output verification via ffprobe."""

from __future__ import annotations

import json
from pathlib import Path

from msub.core.config import FFmpegConfig
from msub.core.errors import NoVideoStreamError, ProbeError
from msub.core.models import VideoMetadata
from msub.utils.console import console
from msub.utils.process import run_command


def _ffprobe_json(path: Path, config: FFmpegConfig, show_format: bool = True) -> dict:
    cmd = [config.ffprobe, "-v", "quiet", "-print_format", "json", "-show_streams"]
    if show_format:
        cmd.append("-show_format")
    cmd.append(str(path))

    output = run_command(cmd, timeout=config.timeout)
    try:
        return json.loads(output)
    except json.JSONDecodeError as e:
        raise ProbeError(f"Unreadable ffprobe output for {path}: {e}") from e


def container_format(format_name: str) -> str:
    """Normalize ffprobe's format name to the output container.

    Anything that is not a QuickTime/MOV family container becomes mp4.
    """
    return "mov" if "mov" in (format_name or "") else "mp4"


def probe_video(video_path: Path, config: FFmpegConfig | None = None) -> VideoMetadata:
    """Read width, height and container format of a video.

    Raises:
        NoVideoStreamError: If the file has no video stream.
        ProbeError: If ffprobe output cannot be parsed.
        ProcessError: If ffprobe fails.
    """
    config = config or FFmpegConfig()
    data = _ffprobe_json(Path(video_path), config)

    streams = data.get("streams") or []
    video = next((s for s in streams if s.get("codec_type") == "video"), None)
    if video is None:
        raise NoVideoStreamError(f"No video stream found in {Path(video_path).name}")

    try:
        width, height = int(video["width"]), int(video["height"])
    except (KeyError, TypeError, ValueError) as e:
        raise ProbeError(f"Video stream has no usable dimensions: {e}") from e

    fmt = container_format((data.get("format") or {}).get("format_name", ""))
    console.print(f"[bold]Video:[/bold] {width}x{height}, {fmt}")
    return VideoMetadata(width=width, height=height, container_format=fmt)


def verify_output(video_path: Path, config: FFmpegConfig | None = None) -> dict:
    """Summarize the streams of a produced video.

    Verification is informational: any failure is reported and an empty dict
    is returned.
    """
    config = config or FFmpegConfig()
    video_path = Path(video_path)
    try:
        streams = _ffprobe_json(video_path, config, show_format=False).get("streams") or []
        videos = [s for s in streams if s.get("codec_type") == "video"]
        audios = [s for s in streams if s.get("codec_type") == "audio"]
        attachments = [s for s in streams if s.get("codec_type") == "attachment"]
        first = videos[0] if videos else {}
        size = video_path.stat().st_size

        summary = {
            "video_streams": len(videos),
            "audio_streams": len(audios),
            "attachments": len(attachments),
            "resolution": f"{first.get('width')}x{first.get('height')}" if first else None,
            "bit_rate": first.get("bit_rate"),
            "profile": first.get("profile"),
            "size_bytes": size,
        }
    except Exception as e:
        console.print(f"[yellow]Could not verify output:[/yellow] {e}")
        return {}

    console.print(
        f"[dim]Output: {summary['video_streams']} video, {summary['audio_streams']} audio, "
        f"{summary['attachments']} attachments, {summary['resolution']}, "
        f"bitrate {summary['bit_rate'] or 'N/A'}, profile {summary['profile'] or 'N/A'}, "
        f"{size / 1024 / 1024:.2f} MB[/dim]"
    )
    if not videos:
        console.print("[yellow]Output has no video stream.[/yellow]")
    return summary
