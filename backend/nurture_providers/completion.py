from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from nurture_core.config import CompletionSettings
from nurture_core.models import PromptPair

from .errors import CompletionError, provider_error_message


def extract_completion_text(response_json: Any) -> str:
    """Pull the first choice's message text out of an untrusted completion body."""
    if not isinstance(response_json, dict):
        raise CompletionError("malformed_body", "Completion body is not a JSON object.")
    choices = response_json.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise CompletionError("malformed_body", "Completion body has no choices.")
    message = choices[0].get("message")
    if not isinstance(message, dict):
        raise CompletionError("malformed_body", "First choice has no message.")
    content = message.get("content")
    if isinstance(content, list):
        parts = [item.get("text") for item in content if isinstance(item, dict)]
        content = "\n".join(part for part in parts if isinstance(part, str))
    if not isinstance(content, str):
        raise CompletionError("malformed_body", "First choice message has no text content.")
    if not content.strip():
        raise CompletionError("empty_text", "Completion text is empty.")
    return content


class CompletionClient:
    def __init__(self, settings: CompletionSettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    def build_payload(self, prompt: PromptPair) -> dict[str, Any]:
        return {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            "temperature": self.settings.temperature,
            "top_p": self.settings.top_p,
            "frequency_penalty": self.settings.frequency_penalty,
            "presence_penalty": self.settings.presence_penalty,
            "max_tokens": self.settings.max_tokens,
        }

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.settings.referer,
            "X-Title": self.settings.app_title,
        }

    async def complete(self, prompt: PromptPair) -> str:
        timeout = httpx.Timeout(self.settings.timeout_seconds, connect=8.0)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(self.settings.url, headers=self._headers(), json=self.build_payload(prompt))
        except httpx.TimeoutException as exc:
            raise CompletionError("timeout", "Completion provider timed out.") from exc
        except httpx.HTTPError as exc:
            raise CompletionError("transport", f"Failed to reach completion provider: {exc}") from exc

        if response.status_code >= 400:
            raise CompletionError(
                "http_status",
                f"Completion provider error {response.status_code}: {provider_error_message(response)}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise CompletionError("invalid_json", "Completion provider returned invalid JSON.") from exc

        text = extract_completion_text(payload)
        logger.debug("completion received chars={} preview={!r}", len(text), text[:100])
        return text
