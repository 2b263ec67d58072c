from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from domain.models import Node, Point, RenderConfig, Size, Source, join_path
from domain.ports.layout import LayoutEngine
from domain.ports.measurement import TextMeasurer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    margin: float = 30.0
    padding: float = 10.0
    canvas_padding: float = 15.0

    @classmethod
    def from_render_config(cls, config: RenderConfig) -> LayoutConfig:
        return cls(
            margin=config.scope_margin,
            padding=config.scope_padding,
            canvas_padding=config.canvas_padding,
        )


class ScopeLayoutEngine(LayoutEngine):
    """Rows of boxes, left-packed, with right-aligned groups sharing one edge.

    Nested scopes are laid out first and wrapped in a captioned container.
    Relative positions are final before any absolute position is computed.
    """

    def __init__(self, measurer: TextMeasurer, config: LayoutConfig | None = None) -> None:
        self.measurer = measurer
        self.config = config or LayoutConfig()

    def build_nodes(self, source: Source) -> List[Node]:
        nodes = self._layout(source, "")
        origin = Point(self.config.canvas_padding, self.config.canvas_padding)
        self._apply_absolute(nodes, origin)
        return nodes

    def canvas_size(self, nodes: List[Node]) -> Size:
        # Root content keeps the same trailing margin as a nested scope, so the
        # last box never touches the canvas padding.
        content = self.content_size(nodes, self.config.margin)
        padding = self.config.canvas_padding * 2
        return Size(content.width + padding, content.height + padding)

    def content_size(self, nodes: List[Node], trailing: float) -> Size:
        width = 0.0
        height = 0.0
        for node in nodes:
            width = max(width, node.x + node.width)
            height = max(height, node.y + node.height)
        return Size(width + trailing, height + trailing)

    def label_size(self, label: str) -> Size:
        words = label.split()
        line_height = self.measurer.line_height()
        width = max((self.measurer.measure(word) for word in words), default=0.0)
        height = line_height * len(words)
        return Size(width + self.config.padding * 2, height + self.config.padding * 2)

    def caption_size(self, label: str) -> Size:
        return Size(
            self.measurer.measure(label) + self.config.padding * 2,
            self.measurer.line_height() + self.config.padding * 2,
        )

    def _layout(self, source: Source, path: str) -> List[Node]:
        if source.layout is None:
            return []
        margin = self.config.margin
        rows: List[List[Node]] = []
        all_nodes: List[Node] = []
        y = margin
        max_x = 0.0
        for row in source.layout.rows:
            row_nodes: List[Node] = []
            x = margin
            row_height = 0.0
            left_count = len(row.left_align)
            for index, label in enumerate(row.all()):
                node = self._build_node(source, path, label, x, y)
                node.is_right_aligned = index >= left_count
                row_nodes.append(node)
                x += node.width + margin
                row_height = max(row_height, node.height)
            if row_nodes:
                max_x = max(max_x, x - margin)
            y += row_height + margin
            rows.append(row_nodes)
            all_nodes.extend(row_nodes)

        for row_nodes in rows:
            self._align_right(row_nodes, max_x)
        return all_nodes

    def _build_node(self, source: Source, path: str, label: str, x: float, y: float) -> Node:
        nested = source.find_nested_source(label)
        if nested is None:
            size = self.label_size(label)
            return Node(x=x, y=y, width=size.width, height=size.height, label=label, path=path)

        logger.debug("Laying out nested scope %r", join_path(path, label))
        children = self._layout(nested, join_path(path, label))
        content = self.content_size(children, self.config.margin)
        caption = self.caption_size(label)
        return Node(
            x=x,
            y=y,
            width=max(content.width, caption.width),
            height=caption.height + content.height,
            label=label,
            path=path,
            nodes=children,
            contents_origin=Point(0.0, caption.height),
        )

    def _align_right(self, row_nodes: List[Node], right_edge: float) -> None:
        x = right_edge
        for node in reversed(row_nodes):
            if not node.is_right_aligned:
                continue
            node.x = x - node.width
            x = node.x - self.config.margin

    def _apply_absolute(self, nodes: List[Node], origin: Point) -> None:
        for node in nodes:
            node.absolute_x = origin.x + node.x
            node.absolute_y = origin.y + node.y
            if node.nodes:
                self._apply_absolute(node.nodes, self._contents_origin(node))

    def _contents_origin(self, node: Node) -> Point:
        return Point(
            node.absolute_x + node.contents_origin.x,
            node.absolute_y + node.contents_origin.y,
        )
