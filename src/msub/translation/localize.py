"""Produce one subtitle track per requested language from the base transcription."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from msub.core.languages import BASE, CONVERSION, LANGUAGES, get_language
from msub.core.models import LanguageSubtitleTrack, Segment
from msub.subtitles.convert import convert_segments
from msub.subtitles.srt import save_srt
from msub.translation.client import TranslationClient, is_translation_failure
from msub.utils.console import console
from msub.utils.paths import subtitle_path

ProgressCallback = Callable[[float], None]


@dataclass
class TrackGenerationResult:
    tracks: list[LanguageSubtitleTrack] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # warnings for languages not attempted
    failed: list[str] = field(default_factory=list)  # errors for languages that were attempted


def _translate_segments(
    segments: list[Segment],
    lang: str,
    client: TranslationClient,
    on_progress: ProgressCallback | None,
) -> list[Segment]:
    pause_every = client.config.pause_every
    total = len(segments)
    translated = []
    for i, seg in enumerate(segments, 1):
        text = client.translate_text(seg.text, lang)
        translated.append(Segment(start=seg.start, end=seg.end, text=text))
        if on_progress:
            on_progress(i / total)
        if pause_every and i % pause_every == 0 and i < total:
            client.sleep(client.config.pause_seconds)
    return translated


def localize(
    base_segments: list[Segment],
    language: str,
    client: TranslationClient | None = None,
    on_progress: ProgressCallback | None = None,
) -> list[Segment]:
    """Derive one language's segments from the base transcription.

    Args:
        base_segments: Script-normalized transcription segments.
        language: Target language code.
        client: Translation client, required for translation-mode languages.
        on_progress: Called with the fraction of segments done (0.0-1.0).

    Raises:
        ValueError: If the language is unknown, or needs translation and no
            client was given.
        ConversionError: If script conversion fails.
    """
    spec = get_language(language)

    if spec.mode == BASE:
        segments = list(base_segments)
    elif spec.mode == CONVERSION:
        segments = convert_segments(base_segments, spec.converter)
    else:
        if client is None:
            raise ValueError(f"A translation client is required for '{language}'")
        segments = _translate_segments(base_segments, spec.service_code, client, on_progress)

    if on_progress:
        on_progress(1.0)
    return segments


def generate_tracks(
    base_segments: list[Segment],
    languages: list[str],
    work_dir: Path,
    client: TranslationClient | None = None,
    on_progress: ProgressCallback | None = None,
) -> TrackGenerationResult:
    """Build and save a subtitle track for every requested language.

    A language is skipped (with a warning) when it is unknown or needs the
    translation service while the service is down. A language that fails
    while being localized is recorded and the remaining languages still run.

    Args:
        on_progress: Called with the fraction of all languages done (0.0-1.0).
    """
    result = TrackGenerationResult()
    total = len(languages) or 1

    service_up: bool | None = None
    if any(LANGUAGES[lang].needs_translation for lang in languages if lang in LANGUAGES):
        service_up = client is not None and client.is_available()

    def report(index: int, fraction: float) -> None:
        if on_progress:
            on_progress((index + fraction) / total)

    for index, lang in enumerate(languages):
        spec = LANGUAGES.get(lang)
        if spec is None:
            result.skipped.append(f"Unsupported language skipped: {lang}")
            console.print(f"[yellow]Unsupported language skipped:[/yellow] {lang}")
            report(index, 1.0)
            continue
        if spec.needs_translation and not service_up:
            result.skipped.append(f"Translation service unavailable, skipped: {lang}")
            console.print(f"[yellow]Translation service unavailable, skipping {spec.display_name}[/yellow]")
            report(index, 1.0)
            continue

        console.print(f"[bold]Generating {spec.display_name} subtitles...[/bold]")
        try:
            segments = localize(
                base_segments, lang, client, on_progress=lambda f, i=index: report(i, f)
            )
            if spec.needs_translation and segments and all(is_translation_failure(s.text) for s in segments):
                raise RuntimeError("every segment failed to translate")
            path = save_srt(segments, subtitle_path(Path(work_dir), lang))
        except Exception as e:
            result.failed.append(f"{lang}: {e}")
            console.print(f"[red]Failed to generate {spec.display_name} subtitles:[/red] {e}")
            report(index, 1.0)
            continue

        result.tracks.append(
            LanguageSubtitleTrack(
                language=lang,
                segments=segments,
                display_name=spec.display_name,
                source_path=path,
            )
        )
        console.print(f"[green]Saved:[/green] {path} ({len(segments)} segments)")
    return result
