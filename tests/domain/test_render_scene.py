from __future__ import annotations

import pytest

from adapters.layout.scope_layout import ScopeLayoutEngine
from domain.models import Point, RenderConfig, Size
from domain.services.parse_source import parse_source
from domain.services.render_scene import InvalidDiagramError, SceneRenderer, render_text
from tests.helpers.diagram_fixtures import (
    FixedWidthMeasurer,
    RecordingSurface,
    load_diagram_fixture,
)


def _render(renderer: SceneRenderer, text: str) -> RecordingSurface:
    surface = RecordingSurface()
    renderer.render(parse_source(text), surface)
    return surface


def test_canvas_is_sized_and_filled_before_anything_else(
    scene_renderer: SceneRenderer, render_config: RenderConfig
) -> None:
    surface = _render(scene_renderer, "layout:\n[A][B]\n")

    assert surface.calls[0] == ("set_size", (240.0, 124.0))
    assert surface.calls[1] == ("fill_background", (render_config.background_color,))


def test_leaf_words_are_centered_and_stacked(
    scene_renderer: SceneRenderer, render_config: RenderConfig
) -> None:
    surface = _render(scene_renderer, "layout:\n[Two Words]\n")

    assert surface.named("stroke_rect") == [(45.0, 45.0, 60.0, 48.0, render_config.line_color)]
    assert surface.named("fill_text") == [
        ("Two", 55.0, 69.0, render_config.line_color, render_config.font),
        ("Words", 55.0, 83.0, render_config.line_color, render_config.font),
    ]


def test_scope_draws_shaded_caption_band_and_children(
    scene_renderer: SceneRenderer, render_config: RenderConfig
) -> None:
    surface = _render(scene_renderer, "layout:\n[Outer]\n[Outer]:\nlayout:\n[Inner]\n")

    assert ("fill_rect", (45.0, 45.0, 120.0, 34.0, render_config.shade_color)) in surface.calls
    texts = [args[0] for args in surface.named("fill_text")]
    assert texts == ["Outer", "Inner"]
    caption = surface.named("fill_text")[0]
    assert caption[1:3] == (55.0, 69.0)
    assert len(surface.named("stroke_rect")) == 2


def test_hollow_head_is_filled_with_background_then_outlined(
    scene_renderer: SceneRenderer, render_config: RenderConfig
) -> None:
    surface = _render(scene_renderer, "layout:\n[A][B]\nrelations:\n[A]--:>[B]\n")

    (line,) = surface.named("stroke_line")
    assert line[0] == Point(105.0, 62.0)
    assert line[1] == Point(135.0, 62.0)
    assert line[3] == render_config.line_dash
    (fill,) = surface.named("fill_polygon")
    (outline,) = surface.named("stroke_polygon")
    assert fill[1] == render_config.background_color
    assert outline[1] == render_config.line_color
    assert len(fill[0]) == 3
    fill_index = surface.calls.index(("fill_polygon", fill))
    assert surface.calls[fill_index + 1][0] == "stroke_polygon"


def test_plain_head_is_two_strokes(scene_renderer: SceneRenderer) -> None:
    surface = _render(scene_renderer, "layout:\n[A][B]\nrelations:\n[A]->[B]\n")

    lines = surface.named("stroke_line")
    assert len(lines) == 3
    assert lines[0][3] is None
    assert lines[1][0] == lines[2][0] == Point(135.0, 62.0)
    assert surface.named("fill_polygon") == []


def test_filled_diamond_uses_line_color(
    scene_renderer: SceneRenderer, render_config: RenderConfig
) -> None:
    surface = _render(scene_renderer, "layout:\n[A][B]\nrelations:\n[A]-+[B]\n")

    (fill,) = surface.named("fill_polygon")
    assert fill[1] == render_config.line_color
    assert len(fill[0]) == 4


def test_invalid_source_is_never_laid_out(scene_renderer: SceneRenderer) -> None:
    source = load_diagram_fixture("invalid/missing_layout.txt")

    with pytest.raises(InvalidDiagramError) as excinfo:
        scene_renderer.build_scene(source)

    assert excinfo.value.messages == ["Outer.Inner: No layout section."]


def test_render_text_skips_drawing_for_invalid_documents(
    layout_engine: ScopeLayoutEngine, measurer: FixedWidthMeasurer
) -> None:
    surface = RecordingSurface()

    source = render_text("relations:\n[A]->[B]\n", surface, layout_engine, measurer)

    assert source.has_errors is True
    assert surface.calls == []


def test_render_text_draws_valid_documents(
    layout_engine: ScopeLayoutEngine, measurer: FixedWidthMeasurer
) -> None:
    surface = RecordingSurface()

    source = render_text("layout:\n[A]\n", surface, layout_engine, measurer)

    assert source.has_errors is False
    assert surface.named("set_size") == [(150.0, 124.0)]


def test_pipeline_is_idempotent(scene_renderer: SceneRenderer) -> None:
    first = scene_renderer.build_scene(load_diagram_fixture("web_stack.boxdraft"))
    second = scene_renderer.build_scene(load_diagram_fixture("web_stack.boxdraft"))

    assert first == second
    assert first.size == second.size
    assert first.relations


def test_example_document_resolves_cross_scope_relations(scene_renderer: SceneRenderer) -> None:
    scene = scene_renderer.build_scene(load_diagram_fixture("web_stack.boxdraft"))

    pairs = {(item.relation.start_label, item.relation.end_label) for item in scene.relations}
    assert ("Billing", "Database Cluster") in pairs
    assert ("Queue", "Worker") in pairs
    assert ("Backend", "Cache") in pairs
    assert isinstance(scene.size, Size)


def test_single_level_document_with_capitalized_headers(scene_renderer: SceneRenderer) -> None:
    source = load_diagram_fixture("single_level.boxdraft")
    scene = scene_renderer.build_scene(source)

    labels = [node.label for node in scene.nodes]
    assert labels == ["Client", "Load Balancer", "Server", "Storage"]
    server = scene.nodes[2]
    assert server.is_right_aligned is True
    assert server.x + server.width == max(node.x + node.width for node in scene.nodes)
    assert len(scene.relations) == 3
