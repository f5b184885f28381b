from __future__ import annotations

import re

from .models import Mode, ValidationResult, ValidationRules

CLOSING_PHRASES = ("healthcare provider", "medical professional", "doctor", "consult")

OFF_TOPIC_INDICATORS = (
    "creative and informative",
    "great challenge",
    "more specific instructions",
    "what topic should",
    "what style should",
    "tailor my response",
    "let me know what you need",
)
# ordinary health prose can contain these, so they only count as the reply's opening
OFF_TOPIC_OPENINGS = (
    "i can help you",
    "we can work together",
    "let's work together",
)

DEFAULT_RULES: dict[Mode, ValidationRules] = {
    Mode.GENERAL: ValidationRules(
        opening_phrase="I understand",
        closing_phrases=CLOSING_PHRASES,
        min_words=30,
        max_words=120,
        max_sentences=6,
    ),
    Mode.SYMPTOM: ValidationRules(
        opening_phrase="Thank you for sharing",
        closing_phrases=CLOSING_PHRASES,
        min_words=50,
        max_words=180,
        max_sentences=8,
    ),
}

_FORBIDDEN_PATTERNS = (
    re.compile(r"\*"),
    re.compile(r"•"),
    # numbered-list marker at the start of the text or right after a sentence end;
    # a bare "1." elsewhere is a decimal or a range, not a list
    re.compile(r"(?:^|[.!?:]\s+)\d{1,2}[.)](?:\s|$)"),
    re.compile(r"^\s*[-+]\s", re.MULTILINE),
)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def count_words(text: str) -> int:
    return len(text.split())


def count_sentences(text: str) -> int:
    return sum(1 for fragment in _SENTENCE_SPLIT_RE.split(text) if fragment.strip())


def has_forbidden_characters(text: str) -> bool:
    return any(pattern.search(text) for pattern in _FORBIDDEN_PATTERNS)


def is_off_topic(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered.startswith(OFF_TOPIC_OPENINGS):
        return True
    return any(indicator in lowered for indicator in OFF_TOPIC_INDICATORS)


class ResponseValidator:
    """Rule-based acceptance check for sanitized model output.

    The opening phrase is compared case-sensitively against the literal start of
    the trimmed text; closing phrases are case-insensitive substrings. A result
    is valid exactly when no enabled rule failed.
    """

    def __init__(self, rules: dict[Mode, ValidationRules] | None = None) -> None:
        self.rules = dict(DEFAULT_RULES)
        if rules:
            self.rules.update(rules)

    def rules_for(self, mode: Mode) -> ValidationRules:
        return self.rules[mode]

    def validate(self, text: str, mode: Mode) -> ValidationResult:
        rules = self.rules[mode]
        trimmed = (text or "").strip()
        word_count = count_words(trimmed)
        sentence_count = count_sentences(trimmed)
        failed: set[str] = set()

        if not trimmed.startswith(rules.opening_phrase):
            failed.add("opening_phrase")
        lowered = trimmed.lower()
        if not any(phrase.lower() in lowered for phrase in rules.closing_phrases):
            failed.add("closing_phrase")
        if not rules.min_words <= word_count <= rules.max_words:
            failed.add("word_count")
        if rules.max_sentences is not None and not 1 <= sentence_count <= rules.max_sentences:
            failed.add("sentence_count")
        if rules.enforce_forbidden_characters and has_forbidden_characters(trimmed):
            failed.add("forbidden_characters")
        if rules.check_off_topic and is_off_topic(trimmed):
            failed.add("off_topic")

        return ValidationResult(
            word_count=word_count,
            sentence_count=sentence_count,
            failed_rules=frozenset(failed),
        )
