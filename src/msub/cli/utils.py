"""Shared CLI utilities."""

from __future__ import annotations

import json
from pathlib import Path

from msub.core.models import StyleConfig


def expand_inputs(inputs: list[str]) -> list[str]:
    """Expand glob patterns and path list files into individual paths."""
    expanded = []
    for inp in inputs:
        path = Path(inp)

        # .txt file: read as path list (one per line)
        if path.suffix == ".txt" and path.is_file():
            for line in path.read_text().splitlines():
                line = line.strip()
                if line and not line.startswith("#"):
                    expanded.append(line)
            continue

        # Try as glob pattern if it contains wildcards
        if any(c in inp for c in "*?["):
            matches = sorted(Path(".").glob(inp))
            if matches:
                expanded.extend(str(m) for m in matches)
                continue

        # Regular file/path
        expanded.append(inp)

    return expanded


def load_style(path: Path | None, languages: list[str]) -> StyleConfig:
    """Read a subtitle settings JSON file; ``languages`` wins over its list.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid styles.
    """
    data: dict = {}
    if path is not None:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    if languages:
        data["languages"] = languages
    return StyleConfig.from_dict(data, languages)
