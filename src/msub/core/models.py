"""Shared data models for multisub."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

POSITIONS = ("top", "bottom")
HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class Segment:
    """A timed span of subtitle text."""

    start: float  # seconds
    end: float  # seconds
    text: str


@dataclass
class LanguageSubtitleTrack:
    """All segments for one language, plus the SRT file they were written to."""

    language: str
    segments: list[Segment]
    display_name: str
    source_path: Path


@dataclass
class VideoMetadata:
    """Facts about a source video, fetched once per job."""

    width: int
    height: int
    container_format: str


@dataclass
class SubtitleStyle:
    """Rendering style for one language's subtitle track."""

    font: str = "Arial"
    size: int = 20
    color: str = "#FFFFFF"
    position: str = "top"
    margin: int = 30

    def __post_init__(self) -> None:
        if self.position not in POSITIONS:
            raise ValueError(f"Invalid subtitle position: '{self.position}' (use top or bottom)")
        if self.size <= 0:
            raise ValueError(f"Font size must be positive, got {self.size}")
        if not HEX_COLOR_RE.match(self.color.strip()):
            raise ValueError(f"Invalid color: '{self.color}' (expected #RRGGBB)")

    @classmethod
    def from_dict(cls, data: dict) -> SubtitleStyle:
        defaults = cls()
        return cls(
            font=data.get("font") or defaults.font,
            size=int(data.get("size") or defaults.size),
            color=data.get("color") or defaults.color,
            position=data.get("position") or defaults.position,
            margin=int(data.get("margin", defaults.margin)),
        )


# Per-language defaults when the caller supplies no style for a language.
DEFAULT_STYLES: dict[str, SubtitleStyle] = {
    "zh-tw": SubtitleStyle(font="Noto Sans TC", size=24, color="#FFFF00"),
    "zh-cn": SubtitleStyle(font="Noto Sans SC", size=24, color="#FFFF00"),
}


@dataclass
class StyleConfig:
    """Caller-supplied subtitle settings for one upload.

    Attributes:
        languages: Requested subtitle languages, base language included.
        styles: Per-language style overrides.
        order_top: Stacking order for top-positioned tracks.
        order_bottom: Stacking order for bottom-positioned tracks.
        audio_overlay: Optional narration track mixed into the output.
    """

    languages: list[str] = field(default_factory=lambda: ["zh-tw"])
    styles: dict[str, SubtitleStyle] = field(default_factory=dict)
    order_top: list[str] = field(default_factory=list)
    order_bottom: list[str] = field(default_factory=list)
    audio_overlay: Path | None = None

    def style_for(self, language: str) -> SubtitleStyle:
        if language in self.styles:
            return self.styles[language]
        return DEFAULT_STYLES.get(language, SubtitleStyle())

    @classmethod
    def from_dict(cls, data: dict | None, default_languages: list[str] | None = None) -> StyleConfig:
        """Build from the upload settings document.

        Accepts ``{"languages": [...], "configs": {lang: {...}},
        "order": {"top": [...], "bottom": [...]}}``. A flat ``order`` list is
        treated as the top order.
        """
        data = data or {}
        languages = list(data.get("languages") or default_languages or ["zh-tw"])
        styles = {
            lang: SubtitleStyle.from_dict(cfg or {})
            for lang, cfg in (data.get("configs") or {}).items()
        }

        order = data.get("order") or {}
        if isinstance(order, list):
            order_top, order_bottom = list(order), []
        else:
            order_top = list(order.get("top") or [])
            order_bottom = list(order.get("bottom") or [])

        overlay = data.get("audio_overlay")
        return cls(
            languages=languages,
            styles=styles,
            order_top=order_top,
            order_bottom=order_bottom,
            audio_overlay=Path(overlay) if overlay else None,
        )


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED)


@dataclass
class JobResult:
    """Structured outcome of one pipeline run."""

    success: bool
    output_path: Path | None = None
    languages: list[str] = field(default_factory=list)
    subtitle_count: int = 0
    duration: float = 0.0
    error: str | None = None
    warnings: list[str] = field(default_factory=list)
    fallback: bool = False


@dataclass
class VideoJob:
    """One uploaded video moving through the queue."""

    source_path: Path
    original_name: str
    style: StyleConfig = field(default_factory=StyleConfig)
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    status: JobStatus = JobStatus.QUEUED
    progress: float = 0.0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: str | None = None
    result: JobResult | None = None

    @property
    def languages(self) -> list[str]:
        return self.style.languages

    def finish(self, result: JobResult) -> None:
        """Move to completed/failed. Only the first terminal transition sticks."""
        if self.status.is_terminal:
            return
        self.result = result
        if result.success:
            self.status = JobStatus.COMPLETED
            self.progress = 1.0
        else:
            self.status = JobStatus.FAILED
            self.error = result.error


@dataclass
class CompletedRecord:
    """Entry in the completion log, kept after a job leaves the queue."""

    original_file: str
    output_file: str | None
    languages: list[str]
    duration: float
    success: bool
    error: str | None = None
    finished_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "originalFile": self.original_file,
            "newFile": self.output_file,
            "languages": self.languages,
            "duration": round(self.duration, 2),
            "success": self.success,
            "error": self.error,
            "finishedAt": self.finished_at.isoformat(),
        }
