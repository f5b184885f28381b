from __future__ import annotations

from typing import Sequence

from .catalog import SymptomCatalog
from .errors import FallbackTextError
from .models import Mode
from .prompts import join_naturally
from .validator import ResponseValidator

GENERAL_FALLBACK_TEXT = (
    "I understand you're seeking information about reproductive health, and that's completely natural "
    "when you have concerns about your body. Many women have questions about hormonal balance, menstrual "
    "health, PCOS, and other reproductive wellness topics, and having access to educational information "
    "can leave you feeling more empowered. I'd encourage you to discuss your specific concerns with a "
    "healthcare provider who can give you personalized guidance based on your individual health needs."
)

SYMPTOM_FALLBACK_TEXT = (
    "Thank you for sharing these symptoms with me - I understand how important it is to get clarity about "
    "what your body might be experiencing. The symptoms you've described often suggest hormonal patterns "
    "that many women face, particularly those related to reproductive health conditions where multiple "
    "symptoms can appear together as your body responds to changing hormone levels. You're definitely not "
    "alone in having these concerns, and seeking understanding about these patterns is actually a really "
    "positive step in taking charge of your health. I encourage you to discuss these specific symptoms "
    "with a healthcare provider who can properly evaluate your individual situation and provide "
    "personalized guidance."
)

TAILORED_SYMPTOM_TEMPLATE = (
    "Thank you for sharing these symptoms with me - I understand how concerning it can be when your body "
    "feels different or unpredictable. The combination of {symptoms} you're experiencing often suggests "
    "hormonal patterns that many women face, particularly those related to conditions like PCOS where "
    "multiple symptoms can appear together. You're not alone in experiencing these concerns, and "
    "recognizing these patterns is an important step in understanding your health. Please discuss these "
    "specific symptoms with a healthcare provider who can properly evaluate your situation and guide your "
    "next steps."
)


class FallbackProvider:
    """Pre-approved replacement text, keyed by mode."""

    def __init__(
        self,
        validator: ResponseValidator,
        catalog: SymptomCatalog,
        *,
        tailored: bool = False,
        texts: dict[Mode, str] | None = None,
    ) -> None:
        self.validator = validator
        self.catalog = catalog
        self.tailored = tailored
        self._texts = {Mode.GENERAL: GENERAL_FALLBACK_TEXT, Mode.SYMPTOM: SYMPTOM_FALLBACK_TEXT}
        if texts:
            self._texts.update(texts)

    def verify(self) -> None:
        problems: list[str] = []
        for mode, text in self._texts.items():
            result = self.validator.validate(text, mode)
            if not result.is_valid:
                problems.append(f"{mode.value}: {', '.join(sorted(result.failed_rules))}")
        if problems:
            raise FallbackTextError(f"Fallback text fails validation ({'; '.join(problems)})")

    def text_for(self, mode: Mode, symptoms: Sequence[str] | None = None) -> str:
        if mode is Mode.SYMPTOM and self.tailored and symptoms:
            tailored = self._tailored_symptom_text(symptoms)
            if tailored is not None:
                return tailored
        return self._texts[mode]

    def _tailored_symptom_text(self, symptoms: Sequence[str]) -> str | None:
        known = self.catalog.filter_valid(symptoms)
        if not known:
            return None
        text = TAILORED_SYMPTOM_TEMPLATE.format(symptoms=join_naturally(self.catalog.describe_all(known)))
        if not self.validator.validate(text, Mode.SYMPTOM).is_valid:
            return None
        return text
