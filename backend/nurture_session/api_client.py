from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Sequence

import httpx

from .state import ConversationEntry, SessionState


class ApiRequestError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class AnswerPayload:
    text: str
    audio_data: str | None
    is_fallback: bool
    mode: str
    mime_type: str | None = None
    voice_name: str | None = None
    analyzed_symptoms: list[str] = field(default_factory=list)

    @property
    def has_audio(self) -> bool:
        return self.audio_data is not None

    def decode_audio(self) -> bytes | None:
        return decode_audio(self.audio_data)


def decode_audio(audio_data: str | None) -> bytes | None:
    if audio_data is None:
        return None
    return base64.b64decode(audio_data)


class SheNurturesClient:
    """Thin API client that keeps per-session state between calls.

    Works with any ``httpx.Client``, including FastAPI's ``TestClient``.
    """

    def __init__(self, http: httpx.Client, state: SessionState | None = None) -> None:
        self.http = http
        self.state = state or SessionState()

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.state.loading = True
        try:
            response = self.http.post(path, json=payload)
        finally:
            self.state.loading = False
        body = _json_or_empty(response)
        if response.status_code >= 400 or not body.get("success"):
            raise ApiRequestError(response.status_code, str(body.get("error") or f"HTTP {response.status_code}"))
        return body.get("data") or {}

    def _record(self, question: str, answer: AnswerPayload) -> AnswerPayload:
        self.state.history.add(
            ConversationEntry(
                mode=answer.mode,
                question=question,
                response_text=answer.text,
                had_audio=answer.has_audio,
            )
        )
        self.state.retry.reset()
        return answer

    def ask(self, text: str) -> AnswerPayload:
        data = self._post("/api/chat", {"text": text})
        return self._record(text, _answer_from(data, default_mode="general"))

    def check_symptoms(self, codes: Sequence[str] | None = None) -> AnswerPayload:
        selected = list(codes) if codes is not None else list(self.state.selected_symptoms)
        data = self._post("/api/symptom-check", {"symptoms": selected})
        answer = _answer_from(data, default_mode="symptom")
        self.state.clear_symptoms()
        return self._record(", ".join(answer.analyzed_symptoms or selected), answer)

    def symptoms(self) -> dict[str, Any]:
        response = self.http.get("/api/symptoms")
        body = _json_or_empty(response)
        if response.status_code >= 400:
            raise ApiRequestError(response.status_code, str(body.get("error") or f"HTTP {response.status_code}"))
        return body.get("data") or {}

    def health(self) -> dict[str, Any]:
        response = self.http.get("/api/health")
        return _json_or_empty(response)


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _answer_from(data: dict[str, Any], *, default_mode: str) -> AnswerPayload:
    return AnswerPayload(
        text=str(data.get("text") or ""),
        audio_data=data.get("audioData"),
        is_fallback=bool(data.get("isFallback")),
        mode=str(data.get("mode") or default_mode),
        mime_type=data.get("mimeType"),
        voice_name=data.get("voiceName"),
        analyzed_symptoms=list(data.get("analyzedSymptoms") or []),
    )
