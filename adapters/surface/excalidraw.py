from __future__ import annotations

import random
import uuid
from collections.abc import Sequence
from typing import List

from domain.models import ExcalidrawDocument, Point
from domain.ports.surface import Surface

TRANSPARENT = "transparent"
DEFAULT_FONT_SIZE = 14.0


def _font_size(font: str) -> float:
    size = font.partition(" ")[0].removesuffix("px")
    try:
        return float(size)
    except ValueError:
        return DEFAULT_FONT_SIZE


class ExcalidrawSurface(Surface):
    """Collects drawing calls as Excalidraw scene elements."""

    def __init__(self, scene_name: str = "boxdraft", seed: int = 1) -> None:
        self.namespace = uuid.uuid5(uuid.NAMESPACE_DNS, scene_name)
        self.elements: List[dict] = []
        self.width = 0.0
        self.height = 0.0
        self.background_color = "#ffffff"
        self._random = random.Random(seed)

    def set_size(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def fill_background(self, color: str) -> None:
        self.background_color = color

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        self._add(
            self._base_shape(
                "rectangle",
                Point(x, y),
                width,
                height,
                extra={"strokeColor": TRANSPARENT, "backgroundColor": color},
            )
        )

    def stroke_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        self._add(
            self._base_shape(
                "rectangle",
                Point(x, y),
                width,
                height,
                extra={"strokeColor": color, "backgroundColor": TRANSPARENT},
            )
        )

    def fill_text(self, text: str, x: float, y: float, color: str, font: str) -> None:
        size = _font_size(font)
        height = size * 1.25
        # Excalidraw positions text by its top edge, the surface by baseline.
        element = self._base_shape(
            "text",
            Point(x, y - size),
            len(text) * size * 0.6,
            height,
            extra={
                "strokeColor": color,
                "backgroundColor": TRANSPARENT,
                "text": text,
                "originalText": text,
                "fontSize": size,
                "fontFamily": 1,
                "textAlign": "left",
                "verticalAlign": "top",
                "baseline": size,
                "containerId": None,
            },
        )
        self._add(element)

    def stroke_line(
        self,
        start: Point,
        end: Point,
        color: str,
        dash: tuple[float, float] | None = None,
    ) -> None:
        self._add(
            self._line_element(
                [start, end],
                stroke_color=color,
                background_color=TRANSPARENT,
                stroke_style="dashed" if dash else "solid",
            )
        )

    def fill_polygon(self, points: Sequence[Point], color: str) -> None:
        self._add(
            self._line_element(
                self._closed(points), stroke_color=TRANSPARENT, background_color=color
            )
        )

    def stroke_polygon(self, points: Sequence[Point], color: str) -> None:
        self._add(
            self._line_element(
                self._closed(points), stroke_color=color, background_color=TRANSPARENT
            )
        )

    def to_document(self) -> ExcalidrawDocument:
        app_state = {
            "viewBackgroundColor": self.background_color,
            "gridSize": None,
            "currentItemFontFamily": 1,
            "currentItemStrokeColor": "#1e1e1e",
        }
        return ExcalidrawDocument(elements=list(self.elements), app_state=app_state, files={})

    def _closed(self, points: Sequence[Point]) -> List[Point]:
        return [*points, points[0]] if points else []

    def _line_element(
        self,
        points: Sequence[Point],
        stroke_color: str,
        background_color: str,
        stroke_style: str = "solid",
    ) -> dict:
        origin = points[0]
        relative = [[point.x - origin.x, point.y - origin.y] for point in points]
        xs = [item[0] for item in relative]
        ys = [item[1] for item in relative]
        return self._base_shape(
            "line",
            origin,
            max(xs) - min(xs),
            max(ys) - min(ys),
            extra={
                "strokeColor": stroke_color,
                "backgroundColor": background_color,
                "strokeStyle": stroke_style,
                "points": relative,
                "startBinding": None,
                "endBinding": None,
                "startArrowhead": None,
                "endArrowhead": None,
            },
        )

    def _base_shape(
        self,
        type_name: str,
        position: Point,
        width: float,
        height: float,
        extra: dict | None = None,
    ) -> dict:
        return {
            "id": self._stable_id(type_name, str(len(self.elements))),
            "type": type_name,
            "x": position.x,
            "y": position.y,
            "width": width,
            "height": height,
            "angle": 0,
            "fillStyle": "solid",
            "strokeWidth": 1,
            "strokeStyle": "solid",
            "roughness": 0,
            "opacity": 100,
            "groupIds": [],
            "frameId": None,
            "roundness": None,
            "seed": self._rand_seed(),
            "version": 1,
            "versionNonce": self._rand_seed(),
            "isDeleted": False,
            "boundElements": [],
            "locked": False,
            **(extra or {}),
        }

    def _add(self, element: dict) -> None:
        self.elements.append(element)

    def _stable_id(self, *parts: str) -> str:
        return str(uuid.uuid5(self.namespace, "|".join(parts)))

    def _rand_seed(self) -> int:
        return self._random.randint(1, 2**31 - 1)
