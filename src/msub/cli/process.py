"""msub process command: burn multi-language subtitles into local videos."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from msub.cli.utils import expand_inputs, load_style
from msub.core.config import load_config
from msub.core.languages import parse_language_list
from msub.core.queue import BatchQueue
from msub.utils.console import console
from msub.utils.paths import is_video_file


def process(
    inputs: Annotated[
        list[str],
        typer.Argument(help="Video files or glob patterns. Accepts multiple inputs."),
    ],
    languages: Annotated[
        Optional[str],
        typer.Option("--languages", "-l", help="Comma-separated subtitle languages (see 'msub languages')."),
    ] = None,
    style: Annotated[
        Optional[Path],
        typer.Option("--style", "-s", help="Subtitle settings JSON (configs and order)."),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory for subtitled videos."),
    ] = None,
    translation_url: Annotated[
        Optional[str],
        typer.Option("--translation-url", help="Base URL of the translation service."),
    ] = None,
    keep_temp: Annotated[
        bool,
        typer.Option("--keep-temp", help="Keep intermediate audio and subtitle files."),
    ] = False,
) -> None:
    """Transcribe, translate and burn subtitles into one or more videos.

    Videos are processed one at a time, in the order given.
    """
    overrides: dict[str, object] = {
        "output_dir": output_dir,
        "translation.base_url": translation_url,
        # never delete the caller's own files
        "server.delete_uploads": False,
    }
    if keep_temp:
        overrides["keep_temp_files"] = True
    config = load_config(**overrides)

    try:
        codes = parse_language_list(languages) if languages else config.subtitles.default_languages
        style_config = load_style(style, codes)
    except (ValueError, OSError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    expanded = expand_inputs(inputs)
    missing = [p for p in expanded if not Path(p).is_file()]
    if not expanded or missing:
        for path in missing:
            console.print(f"[red]File not found:[/red] {path}")
        if not expanded:
            console.print("[red]No inputs resolved. Check your paths or patterns.[/red]")
        raise typer.Exit(1)
    for path in expanded:
        if not is_video_file(Path(path)):
            console.print(f"[yellow]Not a recognised video extension, trying anyway:[/yellow] {path}")

    queue = BatchQueue(config)
    sub = queue.hub.subscribe()
    console.print(f"[bold]Processing {len(expanded)} videos[/bold] ({', '.join(style_config.languages)})\n")

    jobs = [queue.enqueue(Path(path), Path(path).name, style_config) for path in expanded]
    steps: dict[str, str] = {}
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        tasks = {job.id: progress.add_task(job.original_name, total=1.0) for job in jobs}
        while not all(job.status.is_terminal for job in jobs):
            event = sub.get(timeout=0.5)
            if event is not None and event.data and event.data.get("currentFile"):
                steps[event.data["currentFile"]] = event.step
            for job in jobs:
                step = steps.get(job.original_name, job.status.value)
                progress.update(
                    tasks[job.id],
                    completed=job.progress,
                    description=f"{job.original_name} [dim]{step}[/dim]",
                )
    queue.hub.unsubscribe(sub)
    queue.wait_idle()

    console.print()
    table = Table(title=f"Results ({len(jobs)} files)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Input", max_width=40, no_wrap=True)
    table.add_column("Status")
    table.add_column("Subtitles")
    table.add_column("Output / Error", max_width=50)

    succeeded = 0
    for i, job in enumerate(jobs, 1):
        result = job.result
        if result is not None and result.success:
            succeeded += 1
            status = "[yellow]copied[/yellow]" if result.fallback else "[green]success[/green]"
            table.add_row(str(i), job.original_name, status, ", ".join(result.languages) or "-", str(result.output_path))
        else:
            table.add_row(str(i), job.original_name, "[red]failed[/red]", "-", job.error or "unknown error")

    console.print(table)
    for job in jobs:
        for warning in job.result.warnings if job.result else []:
            console.print(f"[yellow]{job.original_name}:[/yellow] {warning}")
    console.print(f"\n[bold]{succeeded}/{len(jobs)} succeeded[/bold]")
