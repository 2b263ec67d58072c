from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from domain.ports.repositories import DiagramRepository

DIAGRAM_PATTERNS = ("*.boxdraft", "*.txt")


class FileSystemDiagramRepository(DiagramRepository):
    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, str]]:
        return [(path, self.load_by_path(path)) for path in sorted(self._iter_paths(directory))]

    def load_by_path(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        for pattern in DIAGRAM_PATTERNS:
            yield from directory.glob(pattern)
