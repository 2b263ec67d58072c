from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

from adapters.measurement.heuristic import heuristic_width
from domain.ports.measurement import TextMeasurer

logger = logging.getLogger(__name__)

FONT_DIRS = [
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/Library/Fonts"),
    Path("~/Library/Fonts").expanduser(),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("C:/Windows/Fonts"),
]
GENERIC_FONT_FALLBACKS = {
    "sans-serif": ["Helvetica", "Arial", "Liberation Sans", "DejaVu Sans"],
    "serif": ["Georgia", "Times New Roman", "Liberation Serif", "DejaVu Serif"],
    "monospace": ["Courier New", "Liberation Mono", "DejaVu Sans Mono"],
}
FALLBACK_FONT = "DejaVuSans.ttf"

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


def _normalize(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", name, flags=re.IGNORECASE).lower()


def locate_font(family: str, font_dirs: List[Path] | None = None) -> Optional[str]:
    """Best matching .ttf/.ttc path for ``family`` in the system font dirs."""
    normalized = _normalize(family)
    aliases = {normalized, normalized + "mt", normalized + "psmt"}
    best_match: Optional[Tuple[int, str]] = None
    for directory in font_dirs if font_dirs is not None else FONT_DIRS:
        if not normalized or not directory.exists():
            continue
        for pattern in ("*.ttf", "*.ttc"):
            for path in directory.rglob(pattern):
                stem = _normalize(path.stem)
                if stem in aliases:
                    score = 0
                elif stem.startswith(normalized):
                    score = 1
                elif normalized in stem:
                    score = 2
                else:
                    continue
                if best_match is None or score < best_match[0]:
                    best_match = (score, str(path))
    return best_match[1] if best_match else None


def load_font(
    font_family: str,
    font_size: float,
    font_paths: Optional[Dict[str, Optional[str]]] = None,
) -> Optional[FontType]:
    """Load a TrueType font for ``font_family``.

    ``font_paths`` caches family lookups for the caller; nothing is cached
    at module level.
    """
    size = max(1, int(round(font_size)))
    cache = font_paths if font_paths is not None else {}
    candidates: List[str] = []
    for family in GENERIC_FONT_FALLBACKS.get(font_family.lower(), [font_family]):
        key = family.lower()
        if key not in cache:
            cache[key] = locate_font(family)
        resolved = cache[key]
        if resolved:
            candidates.append(resolved)
    candidates.append(FALLBACK_FONT)
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.debug("No TrueType font for %r, using Pillow's default font", font_family)
    try:
        return ImageFont.load_default(size=size)
    except OSError:
        return None


class PillowTextMeasurer(TextMeasurer):
    """Measures words with a Pillow font resolved from the configured family."""

    def __init__(self, font_size: float = 14.0, font_family: str = "Georgia") -> None:
        self.font_size = font_size
        self.font_family = font_family
        self.font_paths: Dict[str, Optional[str]] = {}
        self._font = load_font(font_family, font_size, self.font_paths)

    def measure(self, word: str) -> float:
        if self._font is None:
            return heuristic_width(word, self.font_size)
        return float(self._font.getlength(word))

    def line_height(self) -> float:
        if not isinstance(self._font, ImageFont.FreeTypeFont):
            return float(self.font_size)
        ascent, descent = self._font.getmetrics()
        return float(max(ascent + descent, self.font_size))
