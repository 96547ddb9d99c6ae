"""Stacking layout and ASS rendering for multi-language subtitle tracks.

Tracks are split into a top and a bottom group. Within a group each track
occupies one line band of ``size + 10`` pixels, stacked away from the
nearest frame edge:

- top group: the first track in order sits closest to the top edge;
- bottom group: the last track in order sits closest to the bottom edge.

The margin of the edge-nearest track is the base for its whole group, and
each band is sized by the font of the track occupying it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pysubs2

from msub.core.models import HEX_COLOR_RE, LanguageSubtitleTrack, StyleConfig, SubtitleStyle, VideoMetadata

LINE_GAP = 10
_UNLISTED = 999

# ASS numpad alignment
ALIGN_TOP_CENTER = 8
ALIGN_BOTTOM_CENTER = 2


@dataclass
class RenderStage:
    """One track with its resolved position on the frame."""

    track: LanguageSubtitleTrack
    style: SubtitleStyle
    position: str
    offset_from_top: int  # pixels from the top edge to the line anchor
    margin_v: int  # ASS MarginV, measured from the anchored edge
    alignment: int


def parse_hex_color(value: str) -> pysubs2.Color:
    """Parse ``#RRGGBB`` into an opaque pysubs2 color."""
    match = HEX_COLOR_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid color: '{value}' (expected #RRGGBB)")
    hex_value = match.group(1)
    return pysubs2.Color(int(hex_value[0:2], 16), int(hex_value[2:4], 16), int(hex_value[4:6], 16), 0)


def hex_to_ass_color(value: str) -> str:
    """``#RRGGBB`` -> ``&H00BBGGRR``."""
    color = parse_hex_color(value)
    return f"&H{color.a:02X}{color.b:02X}{color.g:02X}{color.r:02X}"


def _sort_by_order(tracks: list[LanguageSubtitleTrack], order: list[str]) -> list[LanguageSubtitleTrack]:
    rank = {lang: i for i, lang in enumerate(order)}
    # sorted() is stable, so unlisted languages keep their encounter order
    return sorted(tracks, key=lambda t: rank.get(t.language, _UNLISTED))


def layout_tracks(
    tracks: list[LanguageSubtitleTrack],
    style: StyleConfig,
    height: int,
) -> list[RenderStage]:
    """Assign every track a vertical position, top group first."""
    top = [t for t in tracks if style.style_for(t.language).position == "top"]
    bottom = [t for t in tracks if style.style_for(t.language).position == "bottom"]

    stages: list[RenderStage] = []
    ordered_top = _sort_by_order(top, style.order_top)
    # the edge-nearest track's margin anchors the whole group
    offset = style.style_for(ordered_top[0].language).margin if ordered_top else 0
    for track in ordered_top:
        track_style = style.style_for(track.language)
        stages.append(
            RenderStage(
                track=track,
                style=track_style,
                position="top",
                offset_from_top=offset,
                margin_v=offset,
                alignment=ALIGN_TOP_CENTER,
            )
        )
        offset += track_style.size + LINE_GAP

    ordered_bottom = _sort_by_order(bottom, style.order_bottom)
    bottom_stages: list[RenderStage] = []
    offset = height - style.style_for(ordered_bottom[-1].language).margin if ordered_bottom else height
    for track in reversed(ordered_bottom):
        track_style = style.style_for(track.language)
        bottom_stages.append(
            RenderStage(
                track=track,
                style=track_style,
                position="bottom",
                offset_from_top=offset,
                margin_v=height - offset,
                alignment=ALIGN_BOTTOM_CENTER,
            )
        )
        offset -= track_style.size + LINE_GAP
    stages.extend(reversed(bottom_stages))
    return stages


def build_ass_style(stage: RenderStage) -> pysubs2.SSAStyle:
    return pysubs2.SSAStyle(
        fontname=stage.style.font,
        fontsize=stage.style.size,
        primarycolor=parse_hex_color(stage.style.color),
        outlinecolor=pysubs2.Color(0, 0, 0, 0),
        backcolor=pysubs2.Color(0, 0, 0, 0),
        bold=True,
        outline=2,
        shadow=2,
        alignment=pysubs2.Alignment(stage.alignment),
        marginl=10,
        marginr=10,
        marginv=stage.margin_v,
    )


def render_ass(stage: RenderStage, metadata: VideoMetadata, path: Path) -> Path:
    """Write one track as a styled ASS file sized to the video frame.

    Returns:
        The path the file was written to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    subs = pysubs2.SSAFile()
    subs.info["PlayResX"] = str(metadata.width)
    subs.info["PlayResY"] = str(metadata.height)
    subs.info["WrapStyle"] = "0"
    subs.info["ScaledBorderAndShadow"] = "yes"
    subs.styles["Default"] = build_ass_style(stage)

    for seg in stage.track.segments:
        subs.events.append(
            pysubs2.SSAEvent(
                start=pysubs2.make_time(s=seg.start),
                end=pysubs2.make_time(s=seg.end),
                text=seg.text.replace("\n", "\\N"),
                style="Default",
            )
        )
    subs.save(str(path), format_="ass")
    return path
