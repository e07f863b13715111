"""
OpenAI-compatible chat completions client.
Sends the whole conversation in one non-streaming request and validates the
raw response before handing the first choice back to the loop.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, OpenAI

from .config import Settings


class ModelClientError(RuntimeError):
    """The model provider could not be reached or answered with something unusable."""


class LLMClient:
    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        # Protocol failures are fatal to the run, so the SDK must not retry them.
        self.client = OpenAI(
            base_url=settings.base_url,
            api_key=settings.api_key,
            max_retries=0,
            http_client=http_client,
        )
        self.logger = logging.getLogger(__name__)
        self.logger.info("LLMClient initialized with base_url=%s model=%s", settings.base_url, settings.model)

    def chat(
        self,
        messages: List[dict],
        tools: List[dict],
        tool_choice: str = "auto",
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Send a chat completion request and return the first choice's message."""
        self.logger.debug("Sending chat with %d messages and %d tools", len(messages), len(tools))
        try:
            raw = self.client.chat.completions.with_raw_response.create(
                model=model or self.settings.model,
                messages=messages,
                tools=tools,
                tool_choice=tool_choice,
            )
        except APIStatusError as exc:
            self.logger.warning("Provider returned status %s", exc.status_code)
            raise ModelClientError(f"HTTP error: {exc.status_code}\n{exc.response.text}") from exc
        except APIConnectionError as exc:
            self.logger.warning("Provider request failed: %s", exc)
            raise ModelClientError(f"HTTP error: {exc}") from exc

        return parse_completion(raw.http_response.text)


def parse_completion(body: str) -> Dict[str, Any]:
    """Decode a chat completion body and pull out ``choices[0].message``."""
    try:
        result = json.loads(body)
    except json.JSONDecodeError:
        raise ModelClientError("Invalid JSON response") from None

    choices = result.get("choices") if isinstance(result, dict) else None
    if not isinstance(choices, list) or not choices:
        raise ModelClientError("No choices in response")
    first = choices[0]
    if not isinstance(first, dict) or not isinstance(first.get("message"), dict):
        raise ModelClientError("No choices in response")
    return dict(first["message"])
