from __future__ import annotations

from domain.ports.measurement import TextMeasurer

NARROW_CHARS = "il"
WIDE_CHARS = "mwMW@#"


def heuristic_width(text: str, font_size: float) -> float:
    width = 0.0
    for ch in text:
        if ch.isspace():
            width += font_size * 0.33
        elif ch in NARROW_CHARS:
            width += font_size * 0.3
        elif ch in WIDE_CHARS:
            width += font_size * 0.9
        else:
            width += font_size * 0.6
    return width


class HeuristicTextMeasurer(TextMeasurer):
    """Font-free measurer; widths depend only on character classes."""

    def __init__(self, font_size: float = 14.0) -> None:
        self.font_size = font_size

    def measure(self, word: str) -> float:
        return heuristic_width(word, self.font_size)

    def line_height(self) -> float:
        return self.font_size
