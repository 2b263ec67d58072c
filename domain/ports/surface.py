from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import Point


class Surface(Protocol):
    """Drawing target. Coordinates are absolute canvas coordinates."""

    def set_size(self, width: float, height: float) -> None: ...

    def fill_background(self, color: str) -> None: ...

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None: ...

    def stroke_rect(self, x: float, y: float, width: float, height: float, color: str) -> None: ...

    def fill_text(self, text: str, x: float, y: float, color: str, font: str) -> None: ...

    def stroke_line(
        self,
        start: Point,
        end: Point,
        color: str,
        dash: tuple[float, float] | None = None,
    ) -> None: ...

    def fill_polygon(self, points: Sequence[Point], color: str) -> None: ...

    def stroke_polygon(self, points: Sequence[Point], color: str) -> None: ...
