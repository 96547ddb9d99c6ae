"""Burn styled subtitle tracks into a video with a single ffmpeg pass."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from msub.core.config import MsubConfig
from msub.core.models import LanguageSubtitleTrack, StyleConfig, VideoMetadata
from msub.media.probe import verify_output
from msub.subtitles.styling import layout_tracks, render_ass
from msub.utils.console import console
from msub.utils.process import run_command
from msub.utils.tempfiles import TempFileTracker


@dataclass
class BurnResult:
    output_path: Path
    fallback: bool = False
    error: str | None = None


def escape_filter_path(path: Path) -> str:
    """Escape a file path for use as an ffmpeg filter option value."""
    return str(path).replace("\\", "/").replace(":", "\\:").replace("'", "\\'")


def build_filter_chain(ass_paths: list[Path], fonts_dir: Path | None = None) -> tuple[str, str]:
    """Chain one ``ass`` filter per track.

    Returns:
        The filter graph and the label of its final video output.
    """
    parts = []
    label = "0:v"
    for i, ass_path in enumerate(ass_paths):
        options = f"filename={escape_filter_path(ass_path)}"
        if fonts_dir is not None:
            options += f":fontsdir={escape_filter_path(fonts_dir)}"
        parts.append(f"[{label}]ass={options}[v{i}]")
        label = f"v{i}"
    return ";".join(parts), label


def build_burn_command(
    video_path: Path,
    ass_paths: list[Path],
    output_path: Path,
    config: MsubConfig,
    audio_overlay: Path | None = None,
    fonts_dir: Path | None = None,
) -> list[str]:
    """Assemble the ffmpeg invocation that renders every track at once."""
    ffmpeg = config.ffmpeg
    graph, video_label = build_filter_chain(ass_paths, fonts_dir)

    cmd = [ffmpeg.ffmpeg, "-i", str(video_path)]
    if audio_overlay is not None:
        cmd += ["-i", str(audio_overlay)]
        graph += ";[0:a][1:a]amix=inputs=2:duration=longest,volume=2[mixed_a]"

    cmd += ["-filter_complex", graph, "-map", f"[{video_label}]"]
    if audio_overlay is not None:
        cmd += ["-map", "[mixed_a]"]
    else:
        cmd += ["-map", "0:a?"]

    cmd += ["-c:v", ffmpeg.video_codec, "-crf", str(ffmpeg.crf)]
    if ffmpeg.video_bitrate:
        cmd += ["-b:v", ffmpeg.video_bitrate]
    cmd += ["-preset", ffmpeg.preset, "-profile:v", ffmpeg.profile]

    if audio_overlay is not None:
        cmd += ["-c:a", "aac"]
    else:
        cmd += ["-c:a", "copy"]

    cmd += ["-y", str(output_path)]
    return cmd


def copy_video(video_path: Path, output_path: Path, config: MsubConfig) -> Path:
    """Stream-copy the source to the output without subtitles."""
    cmd = [config.ffmpeg.ffmpeg, "-i", str(video_path), "-c", "copy", "-y", str(output_path)]
    run_command(cmd, timeout=config.ffmpeg.timeout)
    return Path(output_path)


def _resolve_fonts_dir(config: MsubConfig) -> Path | None:
    fonts_dir = config.subtitles.fonts_dir
    if fonts_dir is None:
        return None
    if not Path(fonts_dir).is_dir():
        console.print(f"[yellow]Fonts directory not found, using system fonts:[/yellow] {fonts_dir}")
        return None
    return Path(fonts_dir)


def burn_in(
    video_path: Path,
    tracks: list[LanguageSubtitleTrack],
    style: StyleConfig,
    metadata: VideoMetadata,
    output_path: Path,
    config: MsubConfig,
    temp: TempFileTracker,
) -> BurnResult:
    """Render and burn all tracks, falling back to a plain copy on failure.

    Raises:
        ProcessError: Only if the fallback copy itself fails.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if not tracks:
        console.print("[yellow]No subtitle tracks; copying video unchanged.[/yellow]")
        copy_video(video_path, output_path, config)
        verify_output(output_path, config.ffmpeg)
        return BurnResult(output_path=output_path)

    try:
        stages = layout_tracks(tracks, style, metadata.height)
        ass_paths = []
        for stage in stages:
            ass_path = temp.track(stage.track.source_path.with_suffix(".ass"))
            render_ass(stage, metadata, ass_path)
            ass_paths.append(ass_path)
            console.print(
                f"[dim]  {stage.track.display_name}: {stage.position}, "
                f"{stage.offset_from_top}px from top[/dim]"
            )

        cmd = build_burn_command(
            video_path,
            ass_paths,
            output_path,
            config,
            audio_overlay=style.audio_overlay,
            fonts_dir=_resolve_fonts_dir(config),
        )
        console.print(f"[bold]Burning {len(ass_paths)} subtitle tracks...[/bold]")
        run_command(cmd, timeout=config.ffmpeg.timeout)
    except Exception as e:
        console.print(f"[yellow]Burn-in failed, copying original video:[/yellow] {e}")
        copy_video(video_path, output_path, config)
        verify_output(output_path, config.ffmpeg)
        return BurnResult(output_path=output_path, fallback=True, error=str(e))

    console.print(f"[green]Saved:[/green] {output_path}")
    verify_output(output_path, config.ffmpeg)
    return BurnResult(output_path=output_path)
