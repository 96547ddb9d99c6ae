"""Chinese script conversion with OpenCC."""

from __future__ import annotations

from functools import lru_cache

from opencc import OpenCC

from msub.core.errors import ConversionError
from msub.core.models import Segment


@lru_cache(maxsize=8)
def _converter(config_name: str) -> OpenCC:
    return OpenCC(config_name)


def convert_text(text: str, config_name: str) -> str:
    """Convert text between Chinese script variants.

    Args:
        text: Input text.
        config_name: OpenCC config, e.g. "s2tw" (simplified to Taiwan
            traditional) or "tw2s".

    Raises:
        ConversionError: If the config is unknown or conversion fails.
    """
    try:
        return _converter(config_name).convert(text)
    except Exception as e:
        raise ConversionError(f"Script conversion '{config_name}' failed: {e}") from e


def convert_segments(segments: list[Segment], config_name: str) -> list[Segment]:
    """Return new segments with converted text and unchanged timing."""
    return [
        Segment(start=seg.start, end=seg.end, text=convert_text(seg.text, config_name))
        for seg in segments
    ]
