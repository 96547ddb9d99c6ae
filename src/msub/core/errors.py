"""Exception types raised by pipeline stages.

Stages raise these; the per-video orchestrator catches them at the job
boundary and turns them into a failed job.
"""

from __future__ import annotations


class MsubError(Exception):
    """Base class for all multisub errors."""


class ProcessError(MsubError):
    """An external binary could not be launched or exited non-zero."""

    def __init__(self, command: list[str], exit_code: int | None, stderr: str = "") -> None:
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr
        name = self.command[0] if self.command else "<empty>"
        if exit_code is None:
            message = f"{name} could not be run: {stderr}"
        else:
            message = f"{name} exited with code {exit_code}"
            if stderr:
                message += f": {stderr.strip().splitlines()[-1]}"
        super().__init__(message)


class ProbeError(MsubError):
    """ffprobe output could not be interpreted."""


class NoVideoStreamError(ProbeError):
    """The probed file has no video stream."""


class EmptyAudioError(MsubError):
    """Extracted audio is missing or smaller than a WAV header."""


class TranscriptionOutputMissingError(MsubError):
    """The transcription binary ran but produced no subtitle sidecar."""


class ConversionError(MsubError):
    """Script conversion of subtitle text failed."""
