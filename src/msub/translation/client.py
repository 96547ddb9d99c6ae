"""HTTP client for the external translation service.

The service exposes ``GET /health`` and ``POST /translate/{lang}``. A
segment that still fails after every retry is replaced by a visible
sentinel instead of raising, so one bad line never sinks a whole track.
"""

from __future__ import annotations

import time
from typing import Callable

import httpx

from msub.core.config import TranslationConfig
from msub.utils.console import console

FAILURE_PREFIX = "[Translation Failed: "
_READY_STATES = {"ready", "partial"}


def failure_marker(text: str) -> str:
    return f"{FAILURE_PREFIX}{text}]"


def is_translation_failure(text: str) -> bool:
    return text.startswith(FAILURE_PREFIX) and text.endswith("]")


class TranslationClient:
    """Thin wrapper over ``httpx.Client`` with retry and health probing.

    Args:
        config: Translation service settings.
        http: Optional pre-built client (tests pass one with a mock transport).
        sleep: Sleep function used between retries and pauses.
    """

    def __init__(
        self,
        config: TranslationConfig | None = None,
        http: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or TranslationConfig()
        self._http = http or httpx.Client(timeout=self.config.timeout)
        self._owns_http = http is None
        self.sleep = sleep

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> TranslationClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def is_available(self) -> bool:
        """Probe the health endpoint. Any error counts as unavailable."""
        try:
            response = self._http.get(f"{self.base_url}/health", timeout=10.0)
            response.raise_for_status()
            status = (response.json().get("service_status") or {}).get("status")
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            console.print(f"[yellow]Translation service unreachable:[/yellow] {e}")
            return False

        if status not in _READY_STATES:
            console.print(f"[yellow]Translation service not ready (status: {status})[/yellow]")
            return False
        return True

    def _request(self, text: str, lang: str) -> str:
        response = self._http.post(f"{self.base_url}/translate/{lang}", json={"text": text})
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError:
            return response.text.strip()
        if isinstance(data, dict):
            return str(data.get("translated") or data.get("text") or response.text).strip()
        return str(data).strip()

    def translate_text(self, text: str, lang: str) -> str:
        """Translate one segment, returning the failure marker after exhausting retries."""
        attempts = max(1, self.config.max_retries)
        for attempt in range(1, attempts + 1):
            try:
                return self._request(text, lang)
            except httpx.HTTPError as e:
                console.print(f"[yellow]Translation attempt {attempt}/{attempts} failed:[/yellow] {e}")
                if attempt < attempts:
                    self.sleep(self.config.retry_delay * attempt)
        return failure_marker(text)
