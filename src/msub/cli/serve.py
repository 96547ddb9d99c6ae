"""msub serve command: run the upload and progress HTTP server."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
import uvicorn

from msub.core.config import load_config
from msub.server.app import create_app
from msub.utils.console import console


def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Host to bind to."),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to serve on."),
    ] = None,
    keep_temp: Annotated[
        bool,
        typer.Option("--keep-temp", help="Keep intermediate audio and subtitle files."),
    ] = False,
) -> None:
    """Serve the upload, progress and status endpoints."""
    overrides: dict[str, object] = {"server.host": host, "server.port": port}
    if keep_temp:
        overrides["keep_temp_files"] = True
    config = load_config(**overrides)

    app = create_app(config)
    url = f"http://{config.server.host}:{config.server.port}"
    console.print(f"[bold green]Serving:[/bold green] {url}")
    console.print(f"[bold]Output:[/bold] {config.output_dir}")
    console.print("[dim]Press Ctrl+C to stop.[/dim]")

    uvicorn.run(app, host=config.server.host, port=config.server.port)
