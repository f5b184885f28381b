from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class SymptomCategory:
    key: str
    title: str
    codes: tuple[str, ...]


SYMPTOM_DESCRIPTIONS: dict[str, str] = {
    "irregular_periods": "irregular menstrual cycles",
    "missed_periods": "absent menstruation",
    "heavy_periods": "heavy menstrual bleeding",
    "painful_periods": "severe menstrual pain",
    "weight_gain": "unexplained weight gain or difficulty losing weight",
    "acne": "persistent acne or skin issues",
    "hair_growth": "excess hair growth on face or body",
    "hair_loss": "hair thinning or male-pattern baldness",
    "fatigue": "chronic fatigue or low energy",
    "mood_changes": "mood swings, anxiety, or depression",
    "sleep_issues": "sleep disturbances or insomnia",
    "fertility_issues": "difficulty conceiving or fertility concerns",
    "cravings": "intense food cravings, especially for carbohydrates",
    "headaches": "frequent headaches or migraines",
}

SYMPTOM_CATEGORIES: tuple[SymptomCategory, ...] = (
    SymptomCategory(
        "menstrual",
        "Menstrual Health",
        ("irregular_periods", "missed_periods", "heavy_periods", "painful_periods"),
    ),
    SymptomCategory("physical", "Physical Symptoms", ("weight_gain", "acne", "hair_growth", "hair_loss")),
    SymptomCategory("energy_mood", "Energy & Mood", ("fatigue", "mood_changes", "sleep_issues")),
    SymptomCategory("other", "Other Concerns", ("fertility_issues", "cravings", "headaches")),
)


class SymptomCatalog:
    def __init__(
        self,
        descriptions: dict[str, str] | None = None,
        categories: tuple[SymptomCategory, ...] = SYMPTOM_CATEGORIES,
    ) -> None:
        self._descriptions = dict(descriptions or SYMPTOM_DESCRIPTIONS)
        self._categories = categories

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code in self._descriptions

    def __len__(self) -> int:
        return len(self._descriptions)

    def describe(self, code: str) -> str:
        return self._descriptions[code]

    def filter_valid(self, codes: Iterable[Any]) -> list[str]:
        """Keep known codes in submission order; unknown values and repeats are dropped."""
        valid: list[str] = []
        for code in codes:
            if code in self and code not in valid:
                valid.append(code)
        return valid

    def describe_all(self, codes: Iterable[str]) -> list[str]:
        return [self._descriptions[code] for code in codes]

    def grouped(self) -> dict[str, dict[str, Any]]:
        return {
            category.key: {
                "title": category.title,
                "symptoms": {code: self._descriptions[code] for code in category.codes if code in self._descriptions},
            }
            for category in self._categories
        }
