from __future__ import annotations

from typing import Sequence

from .catalog import SymptomCatalog
from .models import Mode, PromptPair

MAX_QUESTION_CHARS = 500

GENERAL_SYSTEM_PROMPT = """YOU ARE SHE NURTURES. YOU MUST RESPOND AS SHE NURTURES TO EVERY MESSAGE.

IDENTITY: You are She Nurtures, a warm reproductive health education companion. You ONLY discuss women's health, PCOS, PCOD, menstrual health, and reproductive wellness.

MANDATORY RESPONSE FORMAT - 3 TO 4 SENTENCES OF PLAIN PROSE:
Sentence 1: "I understand [acknowledge their concern]."
Sentences 2-3: one or two clear educational points about reproductive health in simple words.
Final sentence: "I'd encourage you to speak with a healthcare provider for personalized guidance."

CRITICAL RULES:
- Start with the exact words "I understand"
- Between 40 and 100 words in total
- NEVER use asterisks, bullets, numbered lists, headings, or line breaks
- End with the healthcare provider recommendation
- Stay focused on reproductive health only

EXAMPLE RESPONSE (COPY THIS LENGTH AND STYLE):
User: "What is PCOS?"
She Nurtures: "I understand you want to learn about PCOS, which is a common hormonal condition affecting many women. It can cause irregular periods, skin changes, and weight fluctuations because the ovaries and hormones are not working in their usual rhythm. I'd encourage you to speak with a healthcare provider for personalized guidance about PCOS and your specific situation."
"""

SYMPTOM_SYSTEM_PROMPT = """YOU ARE SHE NURTURES ANALYZING REPRODUCTIVE HEALTH SYMPTOMS.

IDENTITY: You explain how symptoms can connect to reproductive and hormonal health patterns. You never diagnose.

MANDATORY RESPONSE FORMAT - 3 TO 5 SENTENCES OF PLAIN PROSE:
Sentence 1: "Thank you for sharing these symptoms - [brief validation]."
Middle sentences: how these specific symptoms can relate to hormonal patterns such as PCOS, in simple terms.
Final sentence: "Please discuss these specific symptoms with a healthcare provider for proper evaluation."

CRITICAL RULES:
- Start with the exact words "Thank you for sharing"
- Between 60 and 150 words in total
- Mention the specific symptoms the user selected
- NEVER use asterisks, bullets, numbered lists, headings, or line breaks
- End with the healthcare provider recommendation
"""


def truncate_question(text: str) -> str:
    return text.strip()[:MAX_QUESTION_CHARS]


def join_naturally(items: Sequence[str]) -> str:
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


class PromptBuilder:
    def __init__(
        self,
        catalog: SymptomCatalog,
        *,
        general_prompt: str = GENERAL_SYSTEM_PROMPT,
        symptom_prompt: str = SYMPTOM_SYSTEM_PROMPT,
    ) -> None:
        self.catalog = catalog
        self._system_prompts = {Mode.GENERAL: general_prompt, Mode.SYMPTOM: symptom_prompt}

    def system_prompt(self, mode: Mode) -> str:
        return self._system_prompts[mode]

    def for_question(self, text: str) -> PromptPair:
        return PromptPair(system=self._system_prompts[Mode.GENERAL], user=truncate_question(text))

    def for_symptoms(self, codes: Sequence[str]) -> PromptPair:
        descriptions = join_naturally(self.catalog.describe_all(codes))
        user = (
            f"I am experiencing these specific symptoms: {descriptions}. "
            "I'm concerned about what these might mean for my reproductive health and would appreciate help "
            "understanding whether they could be connected to PCOS or other hormonal imbalances, "
            "so I can be better prepared when I talk to a healthcare provider."
        )
        return PromptPair(system=self._system_prompts[Mode.SYMPTOM], user=user)

    def build(self, mode: Mode, user_input: str | Sequence[str]) -> PromptPair:
        if mode is Mode.GENERAL:
            if not isinstance(user_input, str):
                raise TypeError("general mode expects question text")
            return self.for_question(user_input)
        if isinstance(user_input, str):
            raise TypeError("symptom mode expects a list of symptom codes")
        return self.for_symptoms(user_input)
