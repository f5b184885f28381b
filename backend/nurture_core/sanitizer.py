from __future__ import annotations

import re

_LINE_MARKER_RE = re.compile(r"^[ \t]*(?:(?:[-*•+]|#{1,6}|\d{1,2}[.)])[ \t]+)+", re.MULTILINE)
_UNDERSCORE_EMPHASIS_RE = re.compile(r"(?<!\w)_{1,2}([^_\s](?:[^_]*[^_\s])?)_{1,2}(?!\w)")
_MARKUP_CHARS_RE = re.compile(r"[*•]+")
_INLINE_NUMBERED_RE = re.compile(r"(?<=[.!?:])\s+\d{1,2}[.)]\s+")
_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_NOISE_RE = re.compile(r"^[^\w\"'(]+")
_WRAPPING_QUOTES = (('"', '"'), ("'", "'"), ("“", "”"), ("‘", "’"))


def _strip_wrapping_quotes(text: str) -> str:
    for opening, closing in _WRAPPING_QUOTES:
        if len(text) >= 2 and text.startswith(opening) and text.endswith(closing):
            return text[1:-1].strip()
    return text


def _sanitize_once(text: str) -> str:
    cleaned = _LINE_MARKER_RE.sub("", text)
    cleaned = _UNDERSCORE_EMPHASIS_RE.sub(r"\1", cleaned)
    cleaned = _MARKUP_CHARS_RE.sub("", cleaned)
    cleaned = _INLINE_NUMBERED_RE.sub(" ", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    # a reply quoted as a whole, as in the prompt's example answer
    cleaned = _strip_wrapping_quotes(cleaned)
    return _LEADING_NOISE_RE.sub("", cleaned)


def sanitize_response(text: str | None) -> str:
    """Strip markdown emphasis, list markers, wrapping quotes and line breaks.

    Each pass only deletes characters or shrinks whitespace runs, so the loop
    reaches a fixed point and the result is stable under a second call.
    """
    current = text or ""
    for _ in range(len(current) + 2):
        cleaned = _sanitize_once(current)
        if cleaned == current:
            break
        current = cleaned
    return current
