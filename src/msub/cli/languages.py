"""msub languages command: list supported subtitle languages."""

from __future__ import annotations

from rich.table import Table

from msub.core.languages import LANGUAGES
from msub.utils.console import console


def languages() -> None:
    """List all subtitle languages and how each one is produced."""
    table = Table(title=f"Supported Languages ({len(LANGUAGES)})")
    table.add_column("Code", style="bold cyan", width=6)
    table.add_column("Language", width=20)
    table.add_column("Mode", width=12)

    for code, spec in LANGUAGES.items():
        mode = spec.mode if spec.converter is None else f"{spec.mode} ({spec.converter})"
        table.add_row(code, spec.display_name, mode)

    console.print(table)
    console.print(
        "\n[dim]base = transcription output, conversion = OpenCC script conversion, "
        "translation = requires the translation service.[/dim]"
    )
