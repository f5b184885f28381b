from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Mode(str, Enum):
    GENERAL = "general"
    SYMPTOM = "symptom"


PIPELINE_STAGES = (
    "building_prompt",
    "awaiting_completion",
    "sanitizing",
    "validating_response",
    "substituting_fallback",
    "awaiting_speech",
    "assembling_output",
)

RULE_NAMES = (
    "opening_phrase",
    "closing_phrase",
    "word_count",
    "sentence_count",
    "forbidden_characters",
    "off_topic",
)


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


@dataclass(frozen=True)
class ValidationRules:
    opening_phrase: str
    closing_phrases: tuple[str, ...]
    min_words: int
    max_words: int
    max_sentences: int | None = None
    enforce_forbidden_characters: bool = True
    check_off_topic: bool = True


@dataclass(frozen=True)
class ValidationResult:
    word_count: int
    sentence_count: int
    failed_rules: frozenset[str] = frozenset()

    @property
    def is_valid(self) -> bool:
        return not self.failed_rules


@dataclass(frozen=True)
class GeneratedResponse:
    raw_text: str
    sanitized_text: str
    is_valid: bool
    word_count: int
    failed_rules: frozenset[str] = frozenset()


@dataclass(frozen=True)
class AudioResult:
    audio_bytes: bytes
    mime_type: str
    voice_label: str


@dataclass
class PipelineOutcome:
    mode: Mode
    text: str
    text_source: str
    generated: GeneratedResponse | None = None
    audio: AudioResult | None = None
    upstream_error: str | None = None
    stages: list[str] = field(default_factory=list)

    @property
    def text_only(self) -> bool:
        return self.audio is None
