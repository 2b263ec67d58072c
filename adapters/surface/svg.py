from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from collections.abc import Sequence

from domain.models import Point
from domain.ports.surface import Surface

SVG_NS = "http://www.w3.org/2000/svg"
ET.register_namespace("", SVG_NS)


def _q(tag: str) -> str:
    return f"{{{SVG_NS}}}{tag}"


def _fmt(value: float) -> str:
    if math.isclose(value, round(value)):
        return str(int(round(value)))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _points(points: Sequence[Point]) -> str:
    return " ".join(f"{_fmt(point.x)},{_fmt(point.y)}" for point in points)


def _font_attributes(font: str) -> dict[str, str]:
    size, _, family = font.partition(" ")
    attrs = {"font-size": size.removesuffix("px")}
    if family:
        attrs["font-family"] = family
    return attrs


class SvgSurface(Surface):
    def __init__(self) -> None:
        self.root = ET.Element(_q("svg"), {"version": "1.1"})
        self.width = 0.0
        self.height = 0.0

    def set_size(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.root.set("width", _fmt(width))
        self.root.set("height", _fmt(height))
        self.root.set("viewBox", f"0 0 {_fmt(width)} {_fmt(height)}")

    def fill_background(self, color: str) -> None:
        self._rect(0.0, 0.0, self.width, self.height, {"fill": color, "stroke": "none"})

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        self._rect(x, y, width, height, {"fill": color, "stroke": "none"})

    def stroke_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        self._rect(x, y, width, height, {"fill": "none", "stroke": color})

    def fill_text(self, text: str, x: float, y: float, color: str, font: str) -> None:
        element = ET.SubElement(
            self.root,
            _q("text"),
            {"x": _fmt(x), "y": _fmt(y), "fill": color, **_font_attributes(font)},
        )
        element.text = text

    def stroke_line(
        self,
        start: Point,
        end: Point,
        color: str,
        dash: tuple[float, float] | None = None,
    ) -> None:
        attrs = {
            "x1": _fmt(start.x),
            "y1": _fmt(start.y),
            "x2": _fmt(end.x),
            "y2": _fmt(end.y),
            "stroke": color,
        }
        if dash:
            attrs["stroke-dasharray"] = f"{_fmt(dash[0])} {_fmt(dash[1])}"
        ET.SubElement(self.root, _q("line"), attrs)

    def fill_polygon(self, points: Sequence[Point], color: str) -> None:
        ET.SubElement(
            self.root, _q("polygon"), {"points": _points(points), "fill": color, "stroke": "none"}
        )

    def stroke_polygon(self, points: Sequence[Point], color: str) -> None:
        ET.SubElement(
            self.root, _q("polygon"), {"points": _points(points), "fill": "none", "stroke": color}
        )

    def to_string(self) -> str:
        ET.indent(self.root, space="  ")
        return ET.tostring(self.root, encoding="unicode")

    def _rect(self, x: float, y: float, width: float, height: float, style: dict[str, str]) -> None:
        ET.SubElement(
            self.root,
            _q("rect"),
            {"x": _fmt(x), "y": _fmt(y), "width": _fmt(width), "height": _fmt(height), **style},
        )
