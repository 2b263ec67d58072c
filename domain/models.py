from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "."
LAYOUT_HEADER = "layout"
RELATIONS_HEADER = "relations"
MISSING_LAYOUT_MESSAGE = "No layout section."


def join_path(parent: str, label: str) -> str:
    if not parent:
        return label
    return f"{parent}{PATH_SEPARATOR}{label}"


@dataclass(frozen=True)
class Section:
    header: str
    body: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReferenceSection:
    reference: str
    sections: List[Section] = field(default_factory=list)


AnySection = Union[Section, ReferenceSection]


class LayoutRow(BaseModel):
    left_align: List[str] = Field(default_factory=list)
    right_align: List[str] = Field(default_factory=list)

    def all(self) -> List[str]:
        return self.left_align + self.right_align


class LayoutSection(BaseModel):
    rows: List[LayoutRow] = Field(default_factory=list)


class Relation(BaseModel):
    start_label: str
    arrow_token: str
    end_label: str


class RelationsSection(BaseModel):
    relations: List[Relation] = Field(default_factory=list)


class Source(BaseModel):
    """One diagram scope: its own layout and relations plus nested scopes.

    The tree is built by feeding split sections through ``add_sections``.
    Nested scopes are inserted by dotted path, but only as deep as existing
    children allow: ``"A.B.C"`` arriving before any ``"A"`` becomes a single
    child literally labeled ``"A.B.C"``.
    """

    label: str = ""
    layout: Optional[LayoutSection] = None
    relations: Optional[RelationsSection] = None
    nested_sources: List[Source] = Field(default_factory=list)
    has_errors: bool = False
    error_messages: List[str] = Field(default_factory=list)

    def add_sections(self, sections: List[AnySection]) -> None:
        for section in sections:
            if isinstance(section, ReferenceSection):
                self.add_nested_source(section.reference, section.sections)
            else:
                self.add_section(section)

    def add_section(self, section: Section) -> None:
        # Imported lazily: the body parsers build on these models.
        from domain.services.parse_source import parse_layout_section, parse_relations_section

        header = section.header.lower()
        if header == LAYOUT_HEADER:
            if self.layout is None:
                self.layout = parse_layout_section(section)
        elif header == RELATIONS_HEADER:
            if self.relations is None:
                self.relations = parse_relations_section(section)
        else:
            logger.debug("Ignoring unknown section header %r", section.header)

    def add_nested_source(self, label: str, sections: List[Section]) -> None:
        if not label:
            return
        for nested in self.nested_sources:
            if nested.label == label:
                logger.debug("Ignoring duplicate reference section %r", label)
                return
        for nested in self.nested_sources:
            prefix = nested.label + PATH_SEPARATOR
            if label.startswith(prefix):
                nested.add_nested_source(label[len(prefix):], sections)
                return
        nested = Source(label=label)
        nested.add_sections(list(sections))
        self.nested_sources.append(nested)

    def find_nested_source(self, label: str) -> Optional[Source]:
        for nested in self.nested_sources:
            if nested.label == label:
                return nested
        return None

    def validate_tree(self, path: str = "") -> List[str]:
        """Record missing layout sections here and in every nested scope.

        Returns the messages collected for this subtree; the same messages are
        stored on ``error_messages`` so the root carries the whole list.
        """
        messages: List[str] = []
        if self.layout is None:
            messages.append(f"{path}: {MISSING_LAYOUT_MESSAGE}" if path else MISSING_LAYOUT_MESSAGE)
        for nested in self.nested_sources:
            messages.extend(nested.validate_tree(join_path(path, nested.label)))
        self.error_messages = list(messages)
        self.has_errors = bool(messages)
        return messages

    def iter_with_paths(self, path: str = "") -> List[Tuple[str, Source]]:
        """Pre-order list of (dotted path, source) pairs for this subtree."""
        result: List[Tuple[str, Source]] = [(path, self)]
        for nested in self.nested_sources:
            result.extend(nested.iter_with_paths(join_path(path, nested.label)))
        return result


Source.model_rebuild()


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


ORIGIN = Point(0.0, 0.0)


@dataclass
class Node:
    x: float
    y: float
    width: float
    height: float
    label: str
    path: str = ""
    nodes: List[Node] = field(default_factory=list)
    is_right_aligned: bool = False
    contents_origin: Point = ORIGIN
    absolute_x: float = 0.0
    absolute_y: float = 0.0

    @property
    def path_label(self) -> str:
        return join_path(self.path, self.label)

    @property
    def is_scope(self) -> bool:
        return self.contents_origin != ORIGIN

    @property
    def right(self) -> float:
        return self.absolute_x + self.width

    @property
    def bottom(self) -> float:
        return self.absolute_y + self.height

    def center(self) -> Point:
        return Point(self.absolute_x + self.width / 2, self.absolute_y + self.height / 2)

    def is_above(self, other: Node) -> bool:
        return self.bottom < other.absolute_y

    def is_below(self, other: Node) -> bool:
        return self.absolute_y > other.bottom

    def is_left_of(self, other: Node) -> bool:
        return self.right < other.absolute_x

    def is_right_of(self, other: Node) -> bool:
        return self.absolute_x > other.right

    def walk(self) -> List[Node]:
        result: List[Node] = [self]
        for child in self.nodes:
            result.extend(child.walk())
        return result


class LineStyle(str, Enum):
    SOLID = "solid"
    DASHED = "dashed"


class HeadStyle(str, Enum):
    PLAIN = "plain"
    HOLLOW_TRIANGLE = "hollow_triangle"
    HOLLOW_DIAMOND = "hollow_diamond"
    FILLED_DIAMOND = "filled_diamond"

    @property
    def is_hollow(self) -> bool:
        return self in (HeadStyle.HOLLOW_TRIANGLE, HeadStyle.HOLLOW_DIAMOND)


@dataclass(frozen=True)
class ArrowStyle:
    line: LineStyle = LineStyle.SOLID
    head: HeadStyle = HeadStyle.PLAIN


@dataclass(frozen=True)
class ResolvedRelation:
    relation: Relation
    start: Point
    end: Point
    style: ArrowStyle
    head: Tuple[Point, ...]


@dataclass(frozen=True)
class Scene:
    nodes: List[Node]
    relations: List[ResolvedRelation]
    size: Size


@dataclass(frozen=True)
class RenderConfig:
    font_size: float = 14.0
    font_family: str = "Georgia"
    scope_margin: float = 30.0
    scope_padding: float = 10.0
    canvas_padding: float = 15.0
    background_color: str = "#CAFFF6"
    shade_color: str = "#9ED8CE"
    line_color: str = "#000000"
    line_dash_length: float = 5.0
    line_dash_spacing: float = 3.0
    head_length: float = 10.0

    @property
    def font(self) -> str:
        return f"{self.font_size:g}px {self.font_family}"

    @property
    def line_dash(self) -> Tuple[float, float]:
        return (self.line_dash_length, self.line_dash_spacing)


@dataclass(frozen=True)
class ExcalidrawDocument:
    elements: List[dict]
    app_state: dict
    files: dict

    def to_dict(self) -> dict:
        return {
            "type": "excalidraw",
            "version": 2,
            "source": "boxdraft",
            "elements": self.elements,
            "appState": self.app_state,
            "files": self.files,
        }
