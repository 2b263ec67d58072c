from __future__ import annotations

import json
from pathlib import Path

from lzstring import LZString  # type: ignore[import-untyped]

from adapters.excalidraw.repository import FileSystemExcalidrawRepository
from adapters.excalidraw.url_encoder import build_excalidraw_url, encode_scene_payload
from domain.models import ExcalidrawDocument


def _document() -> ExcalidrawDocument:
    return ExcalidrawDocument(elements=[], app_state={"viewBackgroundColor": "#CAFFF6"}, files={})


def test_encode_scene_payload_decodes_to_scene_dict() -> None:
    document = _document()

    encoded = encode_scene_payload(document)
    decoded = LZString().decompressFromEncodedURIComponent(encoded)

    assert json.loads(decoded) == document.to_dict()


def test_build_url_replaces_existing_fragment() -> None:
    url = build_excalidraw_url(_document(), "https://draw.example.com/#room=1")

    assert url.startswith("https://draw.example.com/#json=")
    assert "room=1" not in url


def test_repository_writes_scene_json(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "scene.excalidraw"

    FileSystemExcalidrawRepository().save(_document(), target)

    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["type"] == "excalidraw"
    assert payload["appState"]["viewBackgroundColor"] == "#CAFFF6"
    assert not target.with_suffix(".excalidraw.tmp").exists()
