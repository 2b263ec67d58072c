from __future__ import annotations

from typing import List

from domain.models import AnySection, ReferenceSection, Section

HEADER_TERMINATOR = ":"
REFERENCE_OPEN = "["
REFERENCE_CLOSE = "]"


def remove_indentation(text: str) -> List[str]:
    return [line.lstrip() for line in text.splitlines()]


def header_of(line: str) -> str | None:
    """Return the header text when ``line`` opens a section, else None."""
    stripped = line.rstrip()
    if len(stripped) < 2 or not stripped.endswith(HEADER_TERMINATOR):
        return None
    return stripped[:-1]


def is_reference_header(header: str) -> bool:
    return (
        len(header) >= 2
        and header.startswith(REFERENCE_OPEN)
        and header.endswith(REFERENCE_CLOSE)
    )


def split_sections(lines: List[str]) -> List[Section]:
    sections: List[Section] = []
    current: Section | None = None
    for line in lines:
        if not line.strip():
            continue
        header = header_of(line)
        if header is not None:
            current = Section(header=header)
            sections.append(current)
        elif current is not None:
            current.body.append(line)
    return sections


def collapse_reference_sections(sections: List[Section]) -> List[AnySection]:
    """Group plain sections under the bracketed header that precedes them."""
    result: List[AnySection] = []
    group: ReferenceSection | None = None
    for section in sections:
        if is_reference_header(section.header):
            group = ReferenceSection(reference=section.header[1:-1])
            result.append(group)
        elif group is not None:
            group.sections.append(section)
        else:
            result.append(section)
    return result


def parse_sections(text: str) -> List[AnySection]:
    return collapse_reference_sections(split_sections(remove_indentation(text)))
