from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from core.exceptions import ExternalServiceError

from . import SummaryRequest, build_prompt

logger = logging.getLogger(__name__)


class AnthropicProvider:
    """Summary text from the Anthropic messages API."""

    def __init__(
        self,
        url: str = "https://api.anthropic.com/v1/messages",
        api_key: str = "",
        model: str = "claude-3-5-haiku-latest",
        timeout: float = 15,
        max_tokens: int = 300,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls) -> "AnthropicProvider":
        from django.conf import settings

        return cls(
            url=settings.SUMMARY_API_URL,
            api_key=settings.SUMMARY_API_KEY,
            model=settings.SUMMARY_MODEL,
            timeout=settings.SUMMARY_TIMEOUT,
        )

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }
        resp = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _extract_text(body: Dict[str, Any]) -> str:
        blocks = body.get("content") or []
        return "".join(b.get("text", "") for b in blocks if isinstance(b, dict) and b.get("type") == "text").strip()

    def summarize(self, request: SummaryRequest) -> str:
        if not self.api_key:
            raise ExternalServiceError("Summary provider is not configured (SUMMARY_API_KEY is empty)")
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": build_prompt(request)}],
            "temperature": 0.3,
        }
        try:
            body = self._post(payload)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Summary provider call failed: %s", e)
            raise ExternalServiceError("Failed to generate summary. Please try again or enter notes manually.") from e
        text = self._extract_text(body)
        if not text:
            logger.warning("Summary provider returned no text (stop_reason=%s)", body.get("stop_reason"))
            raise ExternalServiceError("The summary provider returned an empty summary.")
        return text
