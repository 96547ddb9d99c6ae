"""multisub: burn multi-language subtitles into videos."""

__version__ = "0.1.0"
