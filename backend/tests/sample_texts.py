from __future__ import annotations

GENERAL_OK_TEXT = (
    "I understand you want to learn about PCOS, which is a common hormonal condition that affects many "
    "women during their reproductive years. It can cause irregular periods, acne, extra hair growth, and "
    "weight changes because hormone levels such as androgens and insulin are often higher than usual. "
    "Lifestyle habits like balanced meals, regular movement, and good sleep can support hormone health "
    "over time. For guidance about PCOS and your own situation, I'd encourage you to speak with a "
    "healthcare provider."
)

SYMPTOM_OK_TEXT = (
    "Thank you for sharing these symptoms - it makes sense to want clarity about changes like acne and "
    "weight gain. These symptoms often appear together when androgen levels run higher than usual, a "
    "pattern commonly seen in PCOS and related hormonal imbalances. Insulin resistance can also make "
    "weight harder to manage and may worsen skin breakouts over time. Tracking when these changes happen, "
    "along with your cycle, can give helpful context. Please discuss these specific symptoms with a "
    "healthcare provider for proper evaluation."
)


def text_with_words(word_count: int, *, opening: str = "I understand") -> str:
    """Single-sentence text that satisfies every rule except possibly the word band."""
    head = opening.split()
    tail = ["please", "see", "a", "healthcare", "provider."]
    filler = ["hormones"] * (word_count - len(head) - len(tail))
    return " ".join(head + filler + tail)
