"""multisub CLI entry point."""

from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

from msub import __version__
from msub.cli.languages import languages
from msub.cli.process import process
from msub.cli.serve import serve
from msub.cli.transcribe import transcribe
from msub.cli.translate import translate

app = typer.Typer(
    name="msub",
    help="multisub: burn multi-language subtitles into videos.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"msub {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """multisub: burn multi-language subtitles into videos."""
    # Does not override existing env vars: shell exports take precedence
    load_dotenv(override=False)


app.command("process")(process)
app.command("transcribe")(transcribe)
app.command("translate")(translate)
app.command("serve")(serve)
app.command("languages")(languages)
