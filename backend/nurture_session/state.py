from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

MAX_HISTORY_ENTRIES = 20
MAX_RETRIES = 3


@dataclass(frozen=True)
class ConversationEntry:
    mode: str
    question: str
    response_text: str
    had_audio: bool
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ConversationHistory:
    def __init__(self, max_entries: int = MAX_HISTORY_ENTRIES) -> None:
        self._entries: deque[ConversationEntry] = deque(maxlen=max_entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: ConversationEntry) -> None:
        self._entries.append(entry)

    def recent(self, limit: int = 5) -> list[ConversationEntry]:
        if limit <= 0:
            return []
        return list(self._entries)[-limit:]

    def entries(self) -> list[ConversationEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class RetryPolicy:
    """Bounded retry budget; the caller decides whether to use it."""

    def __init__(self, max_retries: int = MAX_RETRIES) -> None:
        self.max_retries = max_retries
        self.attempts = 0

    def can_retry(self) -> bool:
        return self.attempts < self.max_retries

    def should_offer_retry(self, error_message: str | None = None) -> bool:
        if error_message and "rate limit" in error_message.lower():
            return False
        return self.can_retry()

    def record_retry(self) -> None:
        if not self.can_retry():
            raise RuntimeError("Retry budget exhausted.")
        self.attempts += 1

    def reset(self) -> None:
        self.attempts = 0


@dataclass
class SessionState:
    history: ConversationHistory = field(default_factory=ConversationHistory)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    selected_symptoms: list[str] = field(default_factory=list)
    loading: bool = False

    def toggle_symptom(self, code: str) -> bool:
        if code in self.selected_symptoms:
            self.selected_symptoms.remove(code)
            return False
        self.selected_symptoms.append(code)
        return True

    def clear_symptoms(self) -> None:
        self.selected_symptoms.clear()

    def stats(self) -> dict[str, int]:
        with_audio = sum(1 for entry in self.history.entries() if entry.had_audio)
        return {
            "total_conversations": len(self.history),
            "with_audio": with_audio,
            "text_only": len(self.history) - with_audio,
            "retries_used": self.retry.attempts,
        }
