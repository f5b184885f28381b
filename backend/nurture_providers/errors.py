from __future__ import annotations

import httpx

from nurture_core.errors import ProviderError

__all__ = ["CompletionError", "ProviderError", "SpeechError", "provider_error_message"]


class CompletionError(ProviderError):
    pass


class SpeechError(ProviderError):
    pass


def provider_error_message(response: httpx.Response, limit: int = 300) -> str:
    message = response.text.strip()
    try:
        payload = response.json()
    except Exception:
        payload = None
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            if isinstance(msg, str) and msg.strip():
                return msg.strip()[:limit]
        msg = payload.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()[:limit]
    return message[:limit] or f"HTTP {response.status_code}"
