"""Tests for budgetlens.integrations.summarizer."""

from typing import get_type_hints

import pytest
import requests

from budgetlens.config import AnalysisSettings
from budgetlens.domain.analysis import Summarizer
from budgetlens.integrations import summarizer
from budgetlens.integrations.summarizer import make_summarizer, request_summary

SETTINGS = AnalysisSettings(endpoint="https://example.test/summarize", timeout=3.0, token="abc")


class FakeResponse:
    def __init__(self, body=None, text: str = "", status_code: int = 200) -> None:
        self._body = body
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class TestRequestSummary:
    """Tests for request_summary."""

    def test_posts_prompt_with_token(self, monkeypatch) -> None:
        """Should send the prompt, bearer token, and timeout."""
        calls = []

        def fake_post(url, json, headers, timeout):
            calls.append((url, json, headers, timeout))
            return FakeResponse({"response": '{"summary": {}}'})

        monkeypatch.setattr(summarizer.requests, "post", fake_post)

        text = request_summary(SETTINGS, "hello")

        assert text == '{"summary": {}}'
        url, body, headers, timeout = calls[0]
        assert url == SETTINGS.endpoint
        assert body == {"prompt": "hello"}
        assert headers["Authorization"] == "Bearer abc"
        assert timeout == 3.0

    def test_plain_text_body(self, monkeypatch) -> None:
        monkeypatch.setattr(summarizer.requests, "post", lambda *a, **k: FakeResponse(text="raw text"))

        assert make_summarizer(SETTINGS)("prompt") == "raw text"

    def test_http_error_propagates(self, monkeypatch) -> None:
        monkeypatch.setattr(summarizer.requests, "post", lambda *a, **k: FakeResponse(status_code=503))

        with pytest.raises(requests.HTTPError):
            request_summary(SETTINGS, "prompt")


class TestMakeSummarizer:
    """Tests for make_summarizer."""

    def test_returns_prompt_to_text_callable(self, monkeypatch) -> None:
        """Should bind settings and match the analyze summarizer signature."""
        monkeypatch.setattr(summarizer.requests, "post", lambda *a, **k: FakeResponse({"content": "{}"}))

        summarize = make_summarizer(SETTINGS)

        assert get_type_hints(make_summarizer)["return"] == Summarizer
        assert summarize("prompt") == "{}"
