from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from domain.models import (
    PATH_SEPARATOR,
    ArrowStyle,
    HeadStyle,
    LineStyle,
    Node,
    Point,
    Relation,
    ResolvedRelation,
    Source,
)

logger = logging.getLogger(__name__)

HEAD_TOKENS = {
    "->": HeadStyle.PLAIN,
    ":>": HeadStyle.HOLLOW_TRIANGLE,
    "-o": HeadStyle.HOLLOW_DIAMOND,
    "-+": HeadStyle.FILLED_DIAMOND,
}
DASHED_TOKEN = "--"
HEAD_ANGLE = math.pi / 6
DEFAULT_HEAD_LENGTH = 10.0


def decode_arrow(token: str) -> ArrowStyle:
    head = HEAD_TOKENS.get(token[-2:], HeadStyle.PLAIN)
    line = LineStyle.DASHED if token[:2] == DASHED_TOKEN else LineStyle.SOLID
    return ArrowStyle(line=line, head=head)


def find_node(nodes: Sequence[Node], label: str) -> Optional[Node]:
    """Match ``label`` against ``nodes`` one dotted segment at a time.

    A node whose label equals the whole of ``label`` wins; otherwise a node
    whose label is a dotted prefix is searched for the remainder among its
    children.
    """
    for node in nodes:
        if node.label == label:
            return node
    for node in nodes:
        prefix = node.label + PATH_SEPARATOR
        if label.startswith(prefix):
            found = find_node(node.nodes, label[len(prefix):])
            if found is not None:
                return found
    return None


def find_scope(nodes: Sequence[Node], path_label: str) -> Optional[Node]:
    for node in nodes:
        if node.path_label == path_label:
            return node
        found = find_scope(node.nodes, path_label)
        if found is not None:
            return found
    return None


def resolve_label(nodes: Sequence[Node], path: str, label: str) -> Optional[Node]:
    """Relative lookup inside the scope at ``path``, then absolute from the root."""
    if path:
        scope = find_scope(nodes, path)
        local = scope.nodes if scope is not None else []
    else:
        local = nodes
    found = find_node(local, label)
    if found is None and path:
        found = find_node(nodes, label)
    return found


def anchor_points(start: Node, end: Node) -> Tuple[Point, Point]:
    start_point = start.center()
    end_point = end.center()
    start_x, start_y = start_point.x, start_point.y
    end_x, end_y = end_point.x, end_point.y

    if start.is_above(end):
        start_y, end_y = start.bottom, end.absolute_y
    elif start.is_below(end):
        start_y, end_y = start.absolute_y, end.bottom
    if start.is_left_of(end):
        start_x, end_x = start.right, end.absolute_x
    elif start.is_right_of(end):
        start_x, end_x = start.absolute_x, end.right

    return Point(start_x, start_y), Point(end_x, end_y)


def arrow_head(
    start: Point, end: Point, head: HeadStyle, head_length: float = DEFAULT_HEAD_LENGTH
) -> Tuple[Point, ...]:
    """Head outline starting at the tip.

    Triangles and plain heads give (tip, corner_a, corner_b); diamonds give
    (tip, corner_a, back, corner_b).
    """
    angle = math.atan2(end.y - start.y, end.x - start.x)
    corner_a = Point(
        end.x - head_length * math.cos(angle - HEAD_ANGLE),
        end.y - head_length * math.sin(angle - HEAD_ANGLE),
    )
    corner_b = Point(
        end.x - head_length * math.cos(angle + HEAD_ANGLE),
        end.y - head_length * math.sin(angle + HEAD_ANGLE),
    )
    if head in (HeadStyle.HOLLOW_DIAMOND, HeadStyle.FILLED_DIAMOND):
        back = Point(
            corner_a.x - head_length * math.cos(angle + HEAD_ANGLE),
            corner_a.y - head_length * math.sin(angle + HEAD_ANGLE),
        )
        return (end, corner_a, back, corner_b)
    return (end, corner_a, corner_b)


class RelationResolver:
    def __init__(self, head_length: float = DEFAULT_HEAD_LENGTH) -> None:
        self.head_length = head_length

    def resolve(self, source: Source, nodes: List[Node]) -> List[ResolvedRelation]:
        resolved: List[ResolvedRelation] = []
        for path, scope in source.iter_with_paths():
            if scope.relations is None:
                continue
            for relation in scope.relations.relations:
                item = self.resolve_relation(nodes, path, relation)
                if item is not None:
                    resolved.append(item)
        return resolved

    def resolve_relation(
        self, nodes: List[Node], path: str, relation: Relation
    ) -> Optional[ResolvedRelation]:
        start_node = resolve_label(nodes, path, relation.start_label)
        end_node = resolve_label(nodes, path, relation.end_label)
        if start_node is None or end_node is None:
            logger.debug(
                "Dropping relation %r -> %r in scope %r: endpoint not found",
                relation.start_label,
                relation.end_label,
                path,
            )
            return None
        start, end = anchor_points(start_node, end_node)
        style = decode_arrow(relation.arrow_token)
        return ResolvedRelation(
            relation=relation,
            start=start,
            end=end,
            style=style,
            head=arrow_head(start, end, style.head, self.head_length),
        )
