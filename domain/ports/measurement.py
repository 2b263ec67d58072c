from __future__ import annotations

from typing import Protocol


class TextMeasurer(Protocol):
    def measure(self, word: str) -> float: ...

    def line_height(self) -> float: ...
