"""Run external binaries (ffmpeg, ffprobe, whisper) and capture their output."""

from __future__ import annotations

import shutil
import subprocess

from msub.core.errors import ProcessError
from msub.utils.console import console


def check_binary(name: str) -> bool:
    """Check if an executable is available on the system."""
    return shutil.which(name) is not None


def run_command(cmd: list[str], timeout: float | None = None) -> str:
    """Run a command to completion and return its stripped stdout.

    Args:
        cmd: Program and arguments. Never passed through a shell.
        timeout: Seconds to wait before killing the process, or None to wait
            indefinitely.

    Returns:
        Decoded stdout with surrounding whitespace removed.

    Raises:
        ProcessError: If the program cannot be started, times out, or exits
            with a non-zero code.
    """
    try:
        result = subprocess.run(cmd, capture_output=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        raise ProcessError(cmd, None, f"timed out after {timeout}s")
    except OSError as e:
        raise ProcessError(cmd, None, str(e))

    stderr = result.stderr.decode(errors="replace").strip()
    if result.returncode != 0:
        raise ProcessError(cmd, result.returncode, stderr)
    if stderr:
        console.print(f"{cmd[0]} stderr: {stderr[-500:]}", style="dim", markup=False, highlight=False)
    return result.stdout.decode(errors="replace").strip()
