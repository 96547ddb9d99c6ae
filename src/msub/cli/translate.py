"""msub translate command: derive other languages from an existing SRT."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from msub.core.config import load_config
from msub.core.errors import MsubError
from msub.core.languages import get_language, parse_language_list
from msub.subtitles.srt import load_srt, save_srt
from msub.translation.client import TranslationClient, is_translation_failure
from msub.translation.localize import localize
from msub.utils.console import console


def translate(
    input_path: Annotated[
        Path,
        typer.Argument(help="Base-language SRT file."),
    ],
    to: Annotated[
        str,
        typer.Option("--to", "-t", help="Comma-separated target languages (see 'msub languages')."),
    ],
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory for translated files. Default: next to input."),
    ] = None,
    translation_url: Annotated[
        Optional[str],
        typer.Option("--translation-url", help="Base URL of the translation service."),
    ] = None,
) -> None:
    """Convert or translate an SRT file into each target language."""
    if not input_path.is_file():
        console.print(f"[red]File not found:[/red] {input_path}")
        raise typer.Exit(1)
    try:
        targets = parse_language_list(to)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    config = load_config(**{"translation.base_url": translation_url})
    segments = load_srt(input_path)
    if not segments:
        console.print(f"[red]No subtitles found in:[/red] {input_path}")
        raise typer.Exit(1)
    output_dir = output_dir or input_path.parent

    with TranslationClient(config.translation) as client:
        if any(get_language(lang).needs_translation for lang in targets) and not client.is_available():
            console.print(f"[red]Translation service unavailable at {config.translation.base_url}[/red]")
            raise typer.Exit(1)

        for lang in targets:
            name = get_language(lang).display_name
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console,
            ) as progress:
                task = progress.add_task(f"{name}...", total=1.0)
                try:
                    localized = localize(
                        segments, lang, client, on_progress=lambda f: progress.update(task, completed=f)
                    )
                except MsubError as e:
                    console.print(f"[red]{name} failed:[/red] {e}")
                    continue

            failures = sum(1 for seg in localized if is_translation_failure(seg.text))
            if failures:
                console.print(f"[yellow]{failures}/{len(localized)} segments could not be translated.[/yellow]")
            path = save_srt(localized, output_dir / f"{input_path.stem}.{lang}.srt")
            console.print(f"[green]Saved:[/green] {path}")
