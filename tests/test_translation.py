"""Tests for the translation service client."""

import json

import httpx

from msub.core.config import TranslationConfig
from msub.translation.client import TranslationClient, failure_marker, is_translation_failure


def _client(handler, sleeps=None, **config):
    sleeps = sleeps if sleeps is not None else []
    return TranslationClient(
        TranslationConfig(base_url="http://translator", **config),
        http=httpx.Client(transport=httpx.MockTransport(handler)),
        sleep=sleeps.append,
    )


class TestTranslateText:
    def test_success_reads_translated_field(self):
        def handler(request):
            assert request.url.path == "/translate/en"
            assert json.loads(request.content) == {"text": "你好"}
            return httpx.Response(200, json={"translated": "Hello"})

        assert _client(handler).translate_text("你好", "en") == "Hello"

    def test_falls_back_to_text_field_then_body(self):
        assert _client(lambda r: httpx.Response(200, json={"text": "Bonjour"})).translate_text("x", "fr") == "Bonjour"
        assert _client(lambda r: httpx.Response(200, text="plain body")).translate_text("x", "fr") == "plain body"

    def test_fail_fail_succeed_makes_three_calls(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"translated": "ok"})

        sleeps = []
        assert _client(handler, sleeps).translate_text("x", "en") == "ok"
        assert len(calls) == 3
        assert sleeps == [2.0, 4.0]

    def test_exhausted_retries_return_sentinel(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("refused")

        result = _client(handler).translate_text("原文", "en")
        assert result == "[Translation Failed: 原文]"
        assert is_translation_failure(result)
        assert len(calls) == 3


class TestHealth:
    def test_ready_and_partial_are_available(self):
        for status in ("ready", "partial"):
            client = _client(lambda r, s=status: httpx.Response(200, json={"service_status": {"status": s}}))
            assert client.is_available()

    def test_other_status_unavailable(self):
        client = _client(lambda r: httpx.Response(200, json={"service_status": {"status": "loading"}}))
        assert not client.is_available()

    def test_connection_error_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("refused")

        assert not _client(handler).is_available()

    def test_health_path(self):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, json={"service_status": {"status": "ready"}})

        _client(handler).is_available()
        assert seen == ["/health"]


def test_failure_marker_detection():
    assert is_translation_failure(failure_marker("abc"))
    assert not is_translation_failure("Translation Failed")
