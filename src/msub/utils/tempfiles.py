"""Tracking and release of per-job temporary files."""

from __future__ import annotations

from pathlib import Path

from msub.utils.console import console


class TempFileTracker:
    """Ordered record of temp artifacts created during one pipeline run.

    ``cleanup()`` attempts to delete every tracked path exactly once, in the
    order they were tracked. Failures are reported and never raised.
    """

    def __init__(self, keep: bool = False) -> None:
        self.keep = keep
        self._paths: list[Path] = []
        self.attempted: list[Path] = []
        self.failed: list[Path] = []
        self._released = False

    def track(self, path: Path) -> Path:
        path = Path(path)
        if path not in self._paths:
            self._paths.append(path)
        return path

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def cleanup(self) -> None:
        if self._released:
            return
        self._released = True

        if self.keep:
            console.print(f"[dim]Keeping {len(self._paths)} temp files for inspection.[/dim]")
            return

        console.print("[bold]Cleaning up temporary files...[/bold]")
        for path in self._paths:
            self.attempted.append(path)
            try:
                path.unlink(missing_ok=True)
                console.print(f"[dim]  Cleaned: {path.name}[/dim]")
            except OSError as e:
                self.failed.append(path)
                console.print(f"[yellow]  Failed to clean {path.name}:[/yellow] {e}")

    def remove_empty_dir(self, directory: Path) -> None:
        """Remove the job workspace if cleanup left it empty."""
        if self.keep:
            return
        try:
            directory.rmdir()
        except OSError:
            pass  # not empty, or already gone
