from __future__ import annotations

import asyncio

from nurture_core import (
    GENERAL_FALLBACK_TEXT,
    PIPELINE_STAGES,
    SYMPTOM_FALLBACK_TEXT,
    AudioResult,
    FallbackProvider,
    Mode,
    PromptBuilder,
    ProviderError,
    ResponsePipeline,
    ResponseValidator,
    SymptomCatalog,
)
from nurture_providers.errors import CompletionError, SpeechError
from sample_texts import GENERAL_OK_TEXT, SYMPTOM_OK_TEXT


class FakeCompleter:
    def __init__(self, result):
        self.result = result
        self.prompts = []

    async def complete(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeSynthesizer:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls = []

    async def synthesize(self, text, voice_index=0):
        self.calls.append((text, voice_index))
        if self.error is not None:
            raise self.error
        return AudioResult(audio_bytes=b"mp3", mime_type="audio/mpeg", voice_label=f"voice-{voice_index}")


def _pipeline(completer, synthesizer) -> ResponsePipeline:
    catalog = SymptomCatalog()
    validator = ResponseValidator()
    return ResponsePipeline(
        prompts=PromptBuilder(catalog),
        completion=completer,
        speech=synthesizer,
        validator=validator,
        fallback=FallbackProvider(validator, catalog),
        voice_indexes={Mode.GENERAL: 0, Mode.SYMPTOM: 2},
    )


def test_valid_generation_is_spoken_with_mode_voice():
    synthesizer = FakeSynthesizer()
    outcome = asyncio.run(_pipeline(FakeCompleter(SYMPTOM_OK_TEXT), synthesizer).run(Mode.SYMPTOM, ["acne"]))

    assert outcome.text == SYMPTOM_OK_TEXT
    assert outcome.text_source == "generated"
    assert outcome.generated.is_valid
    assert outcome.audio.voice_label == "voice-2"
    assert synthesizer.calls == [(SYMPTOM_OK_TEXT, 2)]
    assert outcome.stages == [
        "building_prompt",
        "awaiting_completion",
        "sanitizing",
        "validating_response",
        "awaiting_speech",
        "assembling_output",
    ]


def test_generation_is_sanitized_before_validation():
    raw = "**" + GENERAL_OK_TEXT.replace("Lifestyle habits", "*Lifestyle* habits")
    outcome = asyncio.run(_pipeline(FakeCompleter(raw), FakeSynthesizer()).run(Mode.GENERAL, "What is PCOS?"))

    assert outcome.text == GENERAL_OK_TEXT
    assert outcome.generated.raw_text == raw
    assert outcome.text_source == "generated"


def test_quoted_generation_is_accepted():
    for raw in ('"' + GENERAL_OK_TEXT + '"', "“" + GENERAL_OK_TEXT + "”"):
        synthesizer = FakeSynthesizer()
        outcome = asyncio.run(_pipeline(FakeCompleter(raw), synthesizer).run(Mode.GENERAL, "What is PCOS?"))

        assert outcome.text_source == "generated"
        assert outcome.text == GENERAL_OK_TEXT
        assert synthesizer.calls == [(GENERAL_OK_TEXT, 0)]


def test_rejected_generation_substitutes_fallback_and_speaks_it():
    synthesizer = FakeSynthesizer()
    outcome = asyncio.run(_pipeline(FakeCompleter("Sure! Let me know what you need."), synthesizer).run(Mode.GENERAL, "Hi"))

    assert outcome.text == GENERAL_FALLBACK_TEXT
    assert outcome.text_source == "fallback"
    assert not outcome.generated.is_valid
    assert "opening_phrase" in outcome.generated.failed_rules
    assert "substituting_fallback" in outcome.stages
    assert [stage for stage in PIPELINE_STAGES if stage in outcome.stages] == outcome.stages
    assert synthesizer.calls == [(GENERAL_FALLBACK_TEXT, 0)]
    assert not outcome.text_only


def test_completion_failure_records_reason_and_skips_validation():
    outcome = asyncio.run(
        _pipeline(FakeCompleter(CompletionError("timeout", "slow")), FakeSynthesizer()).run(Mode.SYMPTOM, ["fatigue"])
    )

    assert outcome.text == SYMPTOM_FALLBACK_TEXT
    assert outcome.generated is None
    assert outcome.upstream_error == "timeout"
    assert "validating_response" not in outcome.stages
    assert outcome.stages[-3:] == ["substituting_fallback", "awaiting_speech", "assembling_output"]


def test_any_provider_error_degrades_through_base_class():
    class QuotaError(ProviderError):
        pass

    assert issubclass(CompletionError, ProviderError)
    assert issubclass(SpeechError, ProviderError)
    outcome = asyncio.run(
        _pipeline(FakeCompleter(QuotaError("quota", "out of credits")), FakeSynthesizer(QuotaError("quota", "no")))
        .run(Mode.GENERAL, "Hi")
    )
    assert outcome.upstream_error == "quota"
    assert outcome.text == GENERAL_FALLBACK_TEXT
    assert outcome.audio is None


def test_unexpected_completion_exception_is_contained():
    outcome = asyncio.run(_pipeline(FakeCompleter(KeyError("boom")), FakeSynthesizer()).run(Mode.GENERAL, "Hi"))
    assert outcome.upstream_error == "unexpected"
    assert outcome.text_source == "fallback"


def test_speech_failures_leave_text_only_outcome():
    for error in (SpeechError("auth", "denied"), ValueError("bad audio")):
        outcome = asyncio.run(
            _pipeline(FakeCompleter(GENERAL_OK_TEXT), FakeSynthesizer(error)).run(Mode.GENERAL, "What is PCOS?")
        )
        assert outcome.audio is None
        assert outcome.text_only
        assert outcome.text == GENERAL_OK_TEXT


def test_completion_receives_mode_prompt():
    completer = FakeCompleter(GENERAL_OK_TEXT)
    asyncio.run(_pipeline(completer, FakeSynthesizer()).run(Mode.GENERAL, "  What is PCOD?  "))
    assert completer.prompts[0].user == "What is PCOD?"
    assert completer.prompts[0].system.startswith("YOU ARE SHE NURTURES.")
