from __future__ import annotations

import time
from typing import Protocol, Sequence

from loguru import logger

from .errors import ProviderError
from .fallback import FallbackProvider
from .models import AudioResult, GeneratedResponse, Mode, PipelineOutcome, PromptPair
from .prompts import PromptBuilder
from .sanitizer import sanitize_response
from .validator import ResponseValidator


class Completer(Protocol):
    async def complete(self, prompt: PromptPair) -> str: ...


class Synthesizer(Protocol):
    async def synthesize(self, text: str, voice_index: int = 0) -> AudioResult: ...


class ResponsePipeline:
    """Prompt -> completion -> sanitize -> validate -> (fallback) -> speech.

    Each upstream call is attempted once. Upstream and shape failures degrade the
    outcome (fallback text, or no audio) instead of failing the request.
    """

    def __init__(
        self,
        *,
        prompts: PromptBuilder,
        completion: Completer,
        speech: Synthesizer,
        validator: ResponseValidator,
        fallback: FallbackProvider,
        voice_indexes: dict[Mode, int] | None = None,
    ) -> None:
        self.prompts = prompts
        self.completion = completion
        self.speech = speech
        self.validator = validator
        self.fallback = fallback
        self.voice_indexes = voice_indexes or {}

    async def run(self, mode: Mode, user_input: str | Sequence[str]) -> PipelineOutcome:
        started = time.monotonic()
        stages: list[str] = ["building_prompt"]
        prompt = self.prompts.build(mode, user_input)
        symptoms = None if isinstance(user_input, str) else list(user_input)

        generated, upstream_error = await self._generate(mode, prompt, stages)
        if generated is not None and generated.is_valid:
            text, text_source = generated.sanitized_text, "generated"
        else:
            stages.append("substituting_fallback")
            text, text_source = self.fallback.text_for(mode, symptoms), "fallback"

        stages.append("awaiting_speech")
        audio = await self._synthesize(mode, text)

        stages.append("assembling_output")
        logger.info(
            "pipeline finished mode={} source={} audio={} failed_rules={} ms={}",
            mode.value,
            text_source,
            audio is not None,
            sorted(generated.failed_rules) if generated else None,
            int((time.monotonic() - started) * 1000),
        )
        return PipelineOutcome(
            mode=mode,
            text=text,
            text_source=text_source,
            generated=generated,
            audio=audio,
            upstream_error=upstream_error,
            stages=stages,
        )

    async def _generate(
        self,
        mode: Mode,
        prompt: PromptPair,
        stages: list[str],
    ) -> tuple[GeneratedResponse | None, str | None]:
        stages.append("awaiting_completion")
        try:
            raw_text = await self.completion.complete(prompt)
        except ProviderError as exc:
            logger.warning("completion failed mode={} reason={}: {}", mode.value, exc.reason, exc)
            return None, exc.reason
        except Exception:
            logger.exception("completion raised unexpectedly mode={}", mode.value)
            return None, "unexpected"

        stages.append("sanitizing")
        sanitized = sanitize_response(raw_text)
        stages.append("validating_response")
        result = self.validator.validate(sanitized, mode)
        if not result.is_valid:
            logger.warning(
                "generated text rejected mode={} failed_rules={} words={} preview={!r}",
                mode.value,
                sorted(result.failed_rules),
                result.word_count,
                sanitized[:100],
            )
        return (
            GeneratedResponse(
                raw_text=raw_text,
                sanitized_text=sanitized,
                is_valid=result.is_valid,
                word_count=result.word_count,
                failed_rules=result.failed_rules,
            ),
            None,
        )

    async def _synthesize(self, mode: Mode, text: str) -> AudioResult | None:
        try:
            return await self.speech.synthesize(text, self.voice_indexes.get(mode, 0))
        except ProviderError as exc:
            logger.warning("speech failed mode={} reason={}: {}", mode.value, exc.reason, exc)
        except Exception:
            logger.exception("speech raised unexpectedly mode={}", mode.value)
        return None
