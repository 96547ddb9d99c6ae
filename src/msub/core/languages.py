"""Subtitle language definitions.

Every language is produced from the base transcription in one of three modes:

- ``base``: the (script-normalized) transcription itself.
- ``conversion``: deterministic OpenCC script conversion of the base text.
- ``translation``: per-segment calls to the translation service.
"""

from __future__ import annotations

from dataclasses import dataclass

BASE = "base"
CONVERSION = "conversion"
TRANSLATION = "translation"


@dataclass(frozen=True)
class LanguageSpec:
    code: str
    display_name: str
    mode: str
    converter: str | None = None  # OpenCC config for conversion mode
    service_code: str | None = None  # language code sent to the translation service

    @property
    def needs_translation(self) -> bool:
        return self.mode == TRANSLATION


def _translated(code: str, name: str) -> LanguageSpec:
    return LanguageSpec(code, name, TRANSLATION, service_code=code)


# fmt: off
LANGUAGES: dict[str, LanguageSpec] = {
    "zh-tw": LanguageSpec("zh-tw", "Traditional Chinese", BASE),
    "zh-cn": LanguageSpec("zh-cn", "Simplified Chinese", CONVERSION, converter="tw2s"),
    "en": _translated("en", "English"),
    "fr": _translated("fr", "French"),
    "de": _translated("de", "German"),
    "es": _translated("es", "Spanish"),
    "it": _translated("it", "Italian"),
    "pt": _translated("pt", "Portuguese"),
    "ru": _translated("ru", "Russian"),
    "ja": _translated("ja", "Japanese"),
    "ko": _translated("ko", "Korean"),
    "vi": _translated("vi", "Vietnamese"),
    "th": _translated("th", "Thai"),
}
# fmt: on


def is_valid_language(code: str) -> bool:
    """Check if a subtitle language code is supported."""
    return code in LANGUAGES


def get_language(code: str) -> LanguageSpec:
    """Return the definition of a language code, raising ValueError if unknown."""
    return LANGUAGES[validate_language(code)]


def display_name(code: str) -> str:
    """Get the display name for a code, or the code itself if unknown."""
    spec = LANGUAGES.get(code)
    return spec.display_name if spec else code


def validate_language(code: str) -> str:
    """Validate a language code and return it, raising ValueError if invalid."""
    if code not in LANGUAGES:
        raise ValueError(
            f"Unsupported language: '{code}'. "
            f"Run 'msub languages' to see all {len(LANGUAGES)} supported languages."
        )
    return code


def parse_language_list(value: str) -> list[str]:
    """Split a comma-separated CLI value into validated codes, keeping order."""
    codes: list[str] = []
    for part in value.split(","):
        code = part.strip().lower()
        if code and code not in codes:
            codes.append(validate_language(code))
    return codes
