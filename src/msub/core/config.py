"""Configuration system for multisub.

Layered config loading (lowest to highest priority):
1. config/default.toml (shipped with package)
2. ~/.config/msub/config.toml (user-level)
3. ./msub.toml (project-level)
4. Environment variables (MSUB_TRANSLATION__BASE_URL, etc.)
5. CLI flags
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent.parent.parent
_DEFAULT_CONFIG = _PACKAGE_ROOT / "config" / "default.toml"
_USER_CONFIG = Path.home() / ".config" / "msub" / "config.toml"
_PROJECT_CONFIG = Path("msub.toml")


class WhisperConfig(BaseModel):
    binary: str = "whisper-cli"  # whisper.cpp executable
    model: str = "models/ggml-large-v3.bin"
    language: str = "zh"  # language hint passed to the binary
    no_gpu: bool = True
    extra_args: list[str] = []
    # OpenCC config applied to the transcription, "" to disable
    script_conversion: str = "s2tw"


class FFmpegConfig(BaseModel):
    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"
    video_codec: str = "libx264"
    crf: int = 10
    preset: str = "medium"
    profile: str = "main"
    video_bitrate: str | None = "9865k"
    timeout: float | None = None  # seconds; None waits for the process to exit


class TranslationConfig(BaseModel):
    base_url: str = "http://localhost:9099"
    timeout: float = 120.0
    max_retries: int = 3
    retry_delay: float = 2.0  # seconds, multiplied by the attempt number
    pause_every: int = 5  # segments between short pauses, 0 disables
    pause_seconds: float = 1.0


class SubtitleConfig(BaseModel):
    base_language: str = "zh-tw"
    default_languages: list[str] = ["zh-tw"]
    fonts_dir: Path | None = None


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 9088
    upload_dir: Path = Path("./uploads")
    max_files: int = 10
    delete_uploads: bool = True


class NotifyChannel(BaseModel):
    name: str
    kind: str = "webhook"  # webhook, telegram, pushplus, wxpusher, resend
    url: str | None = None
    token: str | None = None
    chat_id: str | None = None
    to: str | None = None
    from_address: str | None = None
    enabled: bool = True


class NotifyConfig(BaseModel):
    channels: list[NotifyChannel] = []
    timeout: float = 15.0


class MsubConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MSUB_",
        env_nested_delimiter="__",
    )

    whisper: WhisperConfig = WhisperConfig()
    ffmpeg: FFmpegConfig = FFmpegConfig()
    translation: TranslationConfig = TranslationConfig()
    subtitles: SubtitleConfig = SubtitleConfig()
    server: ServerConfig = ServerConfig()
    notify: NotifyConfig = NotifyConfig()
    temp_dir: Path = Path("./msub_workspace/temp")
    output_dir: Path = Path("./msub_workspace/videos_out")
    keep_temp_files: bool = False


def _load_toml(path: Path) -> dict:
    """Load a TOML file if it exists, return empty dict otherwise."""
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(**cli_overrides: object) -> MsubConfig:
    """Load configuration from all layers and merge.

    Args:
        **cli_overrides: Direct overrides from CLI flags. Keys can be
            dot-separated (e.g. translation.base_url="http://host:9099").
    """
    # Layer 1-3: TOML files
    config_data: dict = {}
    for path in (_DEFAULT_CONFIG, _USER_CONFIG, _PROJECT_CONFIG):
        layer = _load_toml(path)
        config_data = _deep_merge(config_data, layer)

    # Flatten 'general' section into top-level
    if "general" in config_data:
        general = config_data.pop("general")
        config_data = _deep_merge(config_data, general)

    # Apply CLI overrides (dot-separated keys)
    for key, value in cli_overrides.items():
        if value is None:
            continue
        parts = key.split(".")
        target = config_data
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = value

    # Layer 4: env vars are handled by Pydantic BaseSettings
    return MsubConfig(**config_data)
