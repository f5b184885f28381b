from __future__ import annotations

import pytest

from nurture_core.sanitizer import sanitize_response

MESSY_SAMPLES = [
    "**I understand** your concern about *PCOS*.",
    "I understand.\n\n1. Track your cycle\n2. Eat balanced meals\n3) Sleep well",
    "- I understand\n- bullet two\n• bullet three",
    "   \n\n  I understand   this   is   hard.\t\tPlease see a doctor.  ",
    "-1. I understand",
    ": , I understand you.",
    "## Heading\nI understand. 2. Next point.",
    "I understand __this__ and _that_ matter.",
    "",
    "***",
    "Cycles from 21 to 35 days. About 1.5 percent of women are affected.",
    '"I understand your concern. Please see a doctor."',
    "“I understand your concern. Please see a doctor.”",
    "'I understand.'",
    '"**I understand** this."',
    '""',
    '"',
]


def test_strips_bold_and_italic_markers():
    assert sanitize_response("**I understand** your concern about *PCOS*.") == "I understand your concern about PCOS."


def test_removes_list_markers_and_collapses_lines():
    text = "I understand.\n\n1. Track your cycle\n2. Eat balanced meals\n- Sleep well\n• Move daily"
    assert sanitize_response(text) == "I understand. Track your cycle Eat balanced meals Sleep well Move daily"


def test_removes_inline_numbered_markers_after_sentence_end():
    assert sanitize_response("I understand. 2. Next point.") == "I understand. Next point."


def test_keeps_numbers_that_are_not_list_markers():
    text = "Cycles from 21 to 35 days. About 1.5 percent of women are affected."
    assert sanitize_response(text) == text


def test_trims_leading_punctuation_left_by_bad_opening():
    assert sanitize_response(": , I understand you.") == "I understand you."
    assert sanitize_response("-1. I understand") == "I understand"


@pytest.mark.parametrize(
    ("opening", "closing"),
    [('"', '"'), ("'", "'"), ("“", "”"), ("‘", "’")],
)
def test_removes_quotes_wrapping_the_whole_reply(opening, closing):
    text = f"{opening}I understand your concern. Please see a doctor.{closing}"
    assert sanitize_response(text) == "I understand your concern. Please see a doctor."


def test_keeps_quotes_inside_the_reply():
    text = 'I understand why "PCOS" sounds worrying. Please see a doctor.'
    assert sanitize_response(text) == text


def test_handles_empty_and_none():
    assert sanitize_response("") == ""
    assert sanitize_response(None) == ""
    assert sanitize_response("***") == ""


@pytest.mark.parametrize("text", MESSY_SAMPLES)
def test_sanitize_is_idempotent(text):
    once = sanitize_response(text)
    assert sanitize_response(once) == once


@pytest.mark.parametrize("text", MESSY_SAMPLES)
def test_sanitize_never_grows_text(text):
    assert len(sanitize_response(text)) <= len(text)
