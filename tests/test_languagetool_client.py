from __future__ import annotations

import pytest
import requests

from cbm_writing_scorer.config import LanguageToolSettings
from cbm_writing_scorer.grammar import GrammarCheckError, LanguageToolChecker
from cbm_writing_scorer.grammar import languagetool_client as lt_client
from cbm_writing_scorer.models import IssueCategory
from tests.utils import lt_match


class DummyResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self):
        return self._payload


def test_client_posts_form_data(monkeypatch):
    """Client sends text, language and level to the /v2/check endpoint."""
    captured = {}

    def fake_post(url, data, timeout):
        captured.update(url=url, data=data, timeout=timeout)
        return DummyResponse({"matches": [lt_match(4, 3, ["dog"], category="TYPOS")]})

    monkeypatch.setattr(lt_client.requests, "post", fake_post)
    settings = LanguageToolSettings(
        enabled=True, base_url="http://lt.local/", disabled_rules=["WHITESPACE_RULE"]
    )
    client = lt_client.LanguageToolClient(settings)
    matches = client.check("The dgo ran.", language="en-US", level="picky")

    assert len(matches) == 1
    assert captured["url"] == "http://lt.local/v2/check"
    assert captured["data"]["text"] == "The dgo ran."
    assert captured["data"]["level"] == "picky"
    assert captured["data"]["disabledRules"] == "WHITESPACE_RULE"
    assert "apiKey" not in captured["data"]
    assert captured["timeout"] == settings.request_timeout


def test_client_retries_then_succeeds(monkeypatch):
    attempts = {"count": 0}
    sleeps: list[float] = []

    def flaky_post(url, data, timeout):
        attempts["count"] += 1
        if attempts["count"] < 3:
            raise requests.ConnectionError("down")
        return DummyResponse({"matches": []})

    monkeypatch.setattr(lt_client.requests, "post", flaky_post)
    monkeypatch.setattr(lt_client.time, "sleep", sleeps.append)
    client = lt_client.LanguageToolClient(LanguageToolSettings(max_attempts=3))

    assert client.check("Hello there.") == []
    assert attempts["count"] == 3
    assert sleeps == [1, 2]


def test_client_uses_fallback_url(monkeypatch):
    urls: list[str] = []

    def fake_post(url, data, timeout):
        urls.append(url)
        if url.startswith("http://proxy"):
            return DummyResponse({}, status_code=502)
        return DummyResponse({"matches": []})

    monkeypatch.setattr(lt_client.requests, "post", fake_post)
    settings = LanguageToolSettings(
        base_url="http://proxy", fallback_url="https://public", max_attempts=1
    )
    assert lt_client.LanguageToolClient(settings).check("Hi.") == []
    assert urls == ["http://proxy/v2/check", "https://public/v2/check"]


def test_client_raises_after_exhausting_attempts(monkeypatch):
    def failing_post(url, data, timeout):
        raise requests.Timeout("slow")

    monkeypatch.setattr(lt_client.requests, "post", failing_post)
    monkeypatch.setattr(lt_client.time, "sleep", lambda _: None)
    client = lt_client.LanguageToolClient(LanguageToolSettings(max_attempts=2))
    with pytest.raises(GrammarCheckError) as excinfo:
        client.check("Hello.")
    assert isinstance(excinfo.value.__cause__, requests.Timeout)


def test_api_key_requires_username():
    with pytest.raises(ValueError):
        lt_client.LanguageToolClient(LanguageToolSettings(api_key="secret"))


def test_api_key_from_environment(monkeypatch):
    captured = {}

    def fake_post(url, data, timeout):
        captured.update(data)
        return DummyResponse({"matches": []})

    monkeypatch.setattr(lt_client.requests, "post", fake_post)
    monkeypatch.setenv("LANGUAGETOOL_API_KEY", "from-env")
    client = lt_client.LanguageToolClient(LanguageToolSettings(username="scorer1"))
    client.check("Hello.")
    assert captured["username"] == "scorer1"
    assert captured["apiKey"] == "from-env"


def test_checker_normalizes_matches(monkeypatch):
    monkeypatch.setattr(
        lt_client.requests,
        "post",
        lambda url, data, timeout: DummyResponse(
            {"matches": [lt_match(4, 3, ["dog"], category="TYPOS"), {"bad": "entry"}]}
        ),
    )
    checker = LanguageToolChecker(lt_client.LanguageToolClient(LanguageToolSettings()))
    issues = checker.check("The dgo ran.")
    assert len(issues) == 1
    assert issues[0].category is IssueCategory.SPELLING
    assert checker.check("   ") == []
