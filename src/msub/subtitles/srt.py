"""SRT reading and writing.

Parsing is done by hand so malformed blocks can be dropped individually
instead of failing the whole file.
"""

from __future__ import annotations

import re
from pathlib import Path

from pysubs2.time import make_time, ms_to_times

from msub.core.models import Segment

_TIMESTAMP_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})(?:[,.](\d{1,3}))?$")
_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")


def parse_srt_time(value: str) -> float:
    """Convert ``HH:MM:SS,mmm`` (or ``HH:MM:SS.mmm``) to seconds.

    Raises:
        ValueError: If the value is not a timestamp.
    """
    match = _TIMESTAMP_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid SRT timestamp: {value!r}")
    hours, minutes, seconds, millis = match.groups()
    ms = int((millis or "0").ljust(3, "0"))
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + ms / 1000


def _parse_block(block: str) -> Segment | None:
    lines = [line.strip() for line in block.split("\n")]
    if len(lines) < 2 or "-->" not in lines[1]:
        return None

    start_raw, _, end_raw = lines[1].partition("-->")
    try:
        start = parse_srt_time(start_raw)
        # whisper.cpp never emits positioning, but other tools append it
        end = parse_srt_time(end_raw.split()[0] if end_raw.split() else "")
    except ValueError:
        return None

    text = " ".join(line for line in lines[2:] if line).strip()
    if not text or start >= end:
        return None
    return Segment(start=start, end=end, text=text)


def parse_srt(content: str) -> list[Segment]:
    """Parse SRT text into segments, silently dropping malformed blocks."""
    content = content.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff")
    segments = []
    for block in _BLOCK_SPLIT_RE.split(content.strip()):
        segment = _parse_block(block)
        if segment is not None:
            segments.append(segment)
    return segments


def load_srt(path: Path) -> list[Segment]:
    """Read and parse an SRT file."""
    return parse_srt(Path(path).read_text(encoding="utf-8"))


def format_srt_time(seconds: float) -> str:
    """Convert seconds to ``HH:MM:SS,mmm``."""
    h, m, s, ms = ms_to_times(make_time(s=seconds))
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def format_srt(segments: list[Segment]) -> str:
    """Render segments as SRT text with 1-based indices.

    Text is written verbatim; SRT has no override tags, so braces and
    backslashes are kept as-is.
    """
    blocks = [
        f"{i}\n{format_srt_time(seg.start)} --> {format_srt_time(seg.end)}\n{seg.text}\n"
        for i, seg in enumerate(segments, start=1)
    ]
    return "\n".join(blocks)


def save_srt(segments: list[Segment], path: Path) -> Path:
    """Write segments to an SRT file.

    Returns:
        The path the file was written to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_srt(segments), encoding="utf-8")
    return path
