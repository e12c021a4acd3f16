from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List

import requests

from ..config import LanguageToolSettings
from .checkers import GrammarCheckError

logger = logging.getLogger(__name__)

CHECK_PATH = "/v2/check"


class LanguageToolClient:
    """Thin wrapper around the LanguageTool ``/v2/check`` API with retries."""

    def __init__(self, settings: LanguageToolSettings, api_key: str | None = None) -> None:
        if settings.api_key and not settings.username:
            raise ValueError("LanguageTool API keys require a username.")
        self._settings = settings
        self._api_key = api_key if api_key is not None else resolve_api_key(settings)
        self._max_attempts = max(1, settings.max_attempts)

    @property
    def settings(self) -> LanguageToolSettings:
        return self._settings

    def check(
        self, text: str, *, language: str = "en-US", level: str | None = None
    ) -> List[Dict[str, Any]]:
        """Send the text and return the raw ``matches`` list."""
        data = self._form_data(text, language, level)
        attempt = 0
        last_error: Exception | None = None
        while attempt < self._max_attempts:
            attempt += 1
            for base_url in self._endpoints():
                try:
                    response = requests.post(
                        base_url.rstrip("/") + CHECK_PATH,
                        data=data,
                        timeout=self._settings.request_timeout,
                    )
                    response.raise_for_status()
                    payload = response.json()
                except (requests.RequestException, ValueError) as exc:
                    last_error = exc
                    logger.warning(
                        "LanguageTool check failed at %s (attempt %s/%s): %s",
                        base_url,
                        attempt,
                        self._max_attempts,
                        exc,
                    )
                    continue
                matches = payload.get("matches") if isinstance(payload, dict) else None
                if not isinstance(matches, list):
                    last_error = GrammarCheckError("LanguageTool response has no matches list.")
                    logger.warning("LanguageTool response from %s has no matches list.", base_url)
                    continue
                return matches
            if attempt >= self._max_attempts:
                break
            time.sleep(min(2 ** (attempt - 1), 5))
        raise GrammarCheckError("LanguageTool check failed after retries.") from last_error

    def _endpoints(self) -> List[str]:
        urls = [self._settings.base_url]
        if self._settings.fallback_url and self._settings.fallback_url != self._settings.base_url:
            urls.append(self._settings.fallback_url)
        return urls

    def _form_data(self, text: str, language: str, level: str | None) -> Dict[str, str]:
        data = {
            "text": text,
            "language": language,
            "enabledOnly": "false",
            "level": level or self._settings.level,
        }
        if self._settings.disabled_rules:
            data["disabledRules"] = ",".join(self._settings.disabled_rules)
        if self._settings.username and self._api_key:
            data["username"] = self._settings.username
            data["apiKey"] = self._api_key
        return data


def resolve_api_key(settings: LanguageToolSettings) -> str | None:
    """Resolve the API key from explicit config or the configured environment variable."""
    if settings.api_key:
        return settings.api_key
    if settings.api_key_env:
        return os.environ.get(settings.api_key_env) or None
    return None
