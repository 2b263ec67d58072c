from __future__ import annotations

from typing import cast

import orjson
from lzstring import LZString  # type: ignore[import-untyped]

from domain.models import ExcalidrawDocument

DEFAULT_BASE_URL = "https://excalidraw.com/"


def encode_scene_payload(document: ExcalidrawDocument) -> str:
    payload = orjson.dumps(document.to_dict()).decode("utf-8")
    encoded = LZString().compressToEncodedURIComponent(payload)
    return cast(str, encoded)


def build_excalidraw_url(document: ExcalidrawDocument, base_url: str = DEFAULT_BASE_URL) -> str:
    clean_base = base_url.split("#", 1)[0]
    return f"{clean_base}#json={encode_scene_payload(document)}"
