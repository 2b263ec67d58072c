from __future__ import annotations

from typing import List, Protocol

from domain.models import Node, Size, Source


class LayoutEngine(Protocol):
    def build_nodes(self, source: Source) -> List[Node]:
        ...

    def canvas_size(self, nodes: List[Node]) -> Size:
        ...
