"""Review ratings and question styles."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Rating(IntEnum):
    """Self-reported recall quality for a reviewed note."""

    AGAIN = 1
    GOOD = 2
    EASY = 3

    @classmethod
    def parse(cls, value: str | int) -> Rating:
        """Accept ``1``-``3`` or a rating name (case-insensitive).

        Raises:
            ValueError: For anything else.
        """
        if isinstance(value, int):
            return cls(value)
        text = value.strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            msg = f"Invalid rating {value!r}: expected 1-3 or again/good/easy"
            raise ValueError(msg) from None


class QuestionStyle(StrEnum):
    """Kind of question requested from the question provider."""

    FACTUAL = "factual"
    CONCEPTUAL = "conceptual"
    APPLICATION = "application"
    MIXED = "mixed"

    @property
    def guidance(self) -> str:
        return _STYLE_GUIDANCE[self]


_STYLE_GUIDANCE: dict[QuestionStyle, str] = {
    QuestionStyle.FACTUAL: (
        "Ask about a definition, a fact, or a specific detail stated in the text."
    ),
    QuestionStyle.CONCEPTUAL: (
        "Ask about relationships, underlying principles, or why something works."
    ),
    QuestionStyle.APPLICATION: (
        "Ask how a concept from the text would be applied to a realistic scenario."
    ),
    QuestionStyle.MIXED: (
        "Pick whichever kind of question (factual, conceptual, or application) "
        "best tests the main concept."
    ),
}
