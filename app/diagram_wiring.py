from __future__ import annotations

from adapters.layout.scope_layout import ScopeLayoutEngine
from adapters.measurement.heuristic import HeuristicTextMeasurer
from adapters.measurement.pillow_measurer import PillowTextMeasurer
from app.config import AppSettings
from domain.ports.measurement import TextMeasurer
from domain.services.render_scene import SceneRenderer


def build_measurer(settings: AppSettings) -> TextMeasurer:
    diagram = settings.diagram
    if settings.measurer == "heuristic":
        return HeuristicTextMeasurer(font_size=diagram.font_size)
    return PillowTextMeasurer(font_size=diagram.font_size, font_family=diagram.font_family)


def build_scene_renderer(settings: AppSettings) -> SceneRenderer:
    measurer = build_measurer(settings)
    layout = ScopeLayoutEngine(measurer, settings.diagram.to_layout_config())
    return SceneRenderer(layout, measurer, settings.diagram.to_render_config())
