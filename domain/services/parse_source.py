from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from domain.models import (
    LayoutRow,
    LayoutSection,
    Relation,
    RelationsSection,
    Section,
    Source,
)
from domain.services.split_sections import REFERENCE_CLOSE, REFERENCE_OPEN, parse_sections

logger = logging.getLogger(__name__)

RIGHT_ALIGN_SEPARATOR = "..."


@dataclass(frozen=True)
class BracketGroup:
    label: str
    start: int
    end: int


def scan_bracket_groups(text: str) -> List[BracketGroup]:
    """Find every ``[label]`` group in ``text`` from left to right.

    A group runs from an opening bracket to the next closing bracket; an
    opening bracket inside a group is part of the label. Empty groups and an
    unterminated trailing group are skipped.
    """
    groups: List[BracketGroup] = []
    index = 0
    while index < len(text):
        start = text.find(REFERENCE_OPEN, index)
        if start < 0:
            break
        end = text.find(REFERENCE_CLOSE, start + 1)
        if end < 0:
            break
        label = text[start + 1 : end]
        if label:
            groups.append(BracketGroup(label=label, start=start, end=end + 1))
        index = end + 1
    return groups


def bracket_labels(text: str) -> List[str]:
    return [group.label for group in scan_bracket_groups(text)]


def parse_layout_row(line: str) -> Optional[LayoutRow]:
    """Split a layout line into left and right groups; None if it names no box."""
    parts = line.split(RIGHT_ALIGN_SEPARATOR)
    left_align = bracket_labels(parts[0])
    right_align = bracket_labels(parts[1]) if len(parts) > 1 else []
    if not left_align and not right_align:
        return None
    return LayoutRow(left_align=left_align, right_align=right_align)


def parse_layout_section(section: Section) -> LayoutSection:
    layout = LayoutSection()
    for line in section.body:
        if not line.strip():
            continue
        row = parse_layout_row(line)
        if row is None:
            logger.debug("Skipping layout line %r", line)
            continue
        layout.rows.append(row)
    return layout


def parse_relation_line(line: str) -> List[Relation]:
    """Split ``[start]<arrow>[end1][end2]...`` into one relation per end.

    Returns an empty list when the line does not have that shape.
    """
    text = line.strip()
    groups = scan_bracket_groups(text)
    if len(groups) < 2 or groups[0].start != 0:
        return []
    start = groups[0]
    ends = groups[1:]
    arrow_token = text[start.end : ends[0].start]
    if REFERENCE_OPEN in arrow_token or REFERENCE_CLOSE in arrow_token:
        return []
    cursor = ends[0].start
    for group in ends:
        if text[cursor : group.start].strip():
            return []
        cursor = group.end
    if text[cursor:].strip():
        return []
    return [Relation(start_label=start.label, arrow_token=arrow_token, end_label=end.label) for end in ends]


def parse_relations_section(section: Section) -> RelationsSection:
    relations = RelationsSection()
    for line in section.body:
        parsed = parse_relation_line(line)
        if not parsed:
            logger.debug("Skipping relation line %r", line)
            continue
        relations.relations.extend(parsed)
    return relations


def parse_source(text: Optional[str]) -> Source:
    """Parse diagram text into a validated Source tree.

    Never raises for malformed input; inspect ``has_errors`` and
    ``error_messages`` on the result before rendering.
    """
    source = Source()
    source.add_sections(parse_sections(text or ""))
    source.validate_tree()
    return source
