from __future__ import annotations

import logging
from typing import List

from domain.models import (
    HeadStyle,
    LineStyle,
    Node,
    RenderConfig,
    ResolvedRelation,
    Scene,
    Source,
)
from domain.ports.layout import LayoutEngine
from domain.ports.measurement import TextMeasurer
from domain.ports.surface import Surface
from domain.services.parse_source import parse_source
from domain.services.resolve_relations import RelationResolver

logger = logging.getLogger(__name__)


class InvalidDiagramError(ValueError):
    """Raised when asked to lay out a Source tree that failed validation."""

    def __init__(self, messages: List[str]) -> None:
        super().__init__("; ".join(messages) or "Invalid diagram")
        self.messages = list(messages)


class SceneRenderer:
    def __init__(
        self,
        layout_engine: LayoutEngine,
        measurer: TextMeasurer,
        config: RenderConfig | None = None,
    ) -> None:
        self.layout_engine = layout_engine
        self.measurer = measurer
        self.config = config or RenderConfig()
        self.resolver = RelationResolver(head_length=self.config.head_length)

    def build_scene(self, source: Source) -> Scene:
        if source.has_errors:
            raise InvalidDiagramError(source.error_messages)
        nodes = self.layout_engine.build_nodes(source)
        relations = self.resolver.resolve(source, nodes)
        return Scene(nodes=nodes, relations=relations, size=self.layout_engine.canvas_size(nodes))

    def render(self, source: Source, surface: Surface) -> Scene:
        scene = self.build_scene(source)
        self.draw(scene, surface)
        return scene

    def draw(self, scene: Scene, surface: Surface) -> None:
        config = self.config
        surface.set_size(scene.size.width, scene.size.height)
        surface.fill_background(config.background_color)
        for node in scene.nodes:
            self._draw_node(node, surface)
        for relation in scene.relations:
            self._draw_relation(relation, surface)
        logger.debug(
            "Drew %d top-level nodes and %d relations", len(scene.nodes), len(scene.relations)
        )

    def _draw_node(self, node: Node, surface: Surface) -> None:
        config = self.config
        line_height = self.measurer.line_height()
        if node.is_scope:
            surface.fill_rect(
                node.absolute_x,
                node.absolute_y,
                node.width,
                node.contents_origin.y,
                config.shade_color,
            )
            surface.fill_text(
                node.label,
                node.absolute_x + config.scope_padding,
                node.absolute_y + config.scope_padding + line_height,
                config.line_color,
                config.font,
            )
            surface.stroke_rect(
                node.absolute_x, node.absolute_y, node.width, node.height, config.line_color
            )
            for child in node.nodes:
                self._draw_node(child, surface)
            return

        surface.stroke_rect(node.absolute_x, node.absolute_y, node.width, node.height, config.line_color)
        y = node.absolute_y + config.scope_padding + line_height
        for word in node.label.split():
            width = self.measurer.measure(word)
            surface.fill_text(
                word,
                node.absolute_x + (node.width - width) / 2,
                y,
                config.line_color,
                config.font,
            )
            y += line_height

    def _draw_relation(self, relation: ResolvedRelation, surface: Surface) -> None:
        config = self.config
        dash = config.line_dash if relation.style.line == LineStyle.DASHED else None
        surface.stroke_line(relation.start, relation.end, config.line_color, dash)

        head = relation.style.head
        if head == HeadStyle.PLAIN:
            tip, corner_a, corner_b = relation.head
            surface.stroke_line(tip, corner_a, config.line_color)
            surface.stroke_line(tip, corner_b, config.line_color)
        elif head.is_hollow:
            surface.fill_polygon(relation.head, config.background_color)
            surface.stroke_polygon(relation.head, config.line_color)
        else:
            surface.fill_polygon(relation.head, config.line_color)
            surface.stroke_polygon(relation.head, config.line_color)


def render_text(
    text: str,
    surface: Surface,
    layout_engine: LayoutEngine,
    measurer: TextMeasurer,
    config: RenderConfig | None = None,
) -> Source:
    """Parse ``text`` and draw it on ``surface`` when it is valid.

    The parsed Source is returned either way; nothing is drawn when
    ``has_errors`` is set.
    """
    source = parse_source(text)
    if source.has_errors:
        logger.info("Not rendering invalid diagram: %s", "; ".join(source.error_messages))
        return source
    SceneRenderer(layout_engine, measurer, config).render(source, surface)
    return source
