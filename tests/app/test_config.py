from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from adapters.layout.scope_layout import LayoutConfig
from adapters.measurement.heuristic import HeuristicTextMeasurer
from adapters.measurement.pillow_measurer import PillowTextMeasurer
from app.config import AppSettings, DiagramSettings, load_settings
from app.diagram_wiring import build_measurer, build_scene_renderer
from domain.models import RenderConfig


def test_default_settings_match_render_defaults() -> None:
    settings = AppSettings()

    assert settings.diagram.to_render_config() == RenderConfig()
    assert settings.diagram.to_layout_config() == LayoutConfig(
        margin=30.0, padding=10.0, canvas_padding=15.0
    )
    assert settings.measurer == "pillow"


def test_env_overrides_nested_diagram_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOXDRAFT_DIAGRAM__SCOPE_MARGIN", "12")
    monkeypatch.setenv("BOXDRAFT_DIAGRAM__LINE_COLOR", "#333")
    monkeypatch.setenv("BOXDRAFT_MEASURER", "heuristic")

    settings = AppSettings()

    assert settings.diagram.scope_margin == 12.0
    assert settings.diagram.line_color == "#333"
    assert isinstance(build_measurer(settings), HeuristicTextMeasurer)


def test_yaml_config_file_is_loaded(tmp_path: Path) -> None:
    config_path = tmp_path / "boxdraft.yaml"
    config_path.write_text(
        "diagram:\n  font_family: \"'Courier New'\"\n  canvas_padding: 0\nmeasurer: heuristic\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.diagram.font_family == "Courier New"
    assert settings.diagram.canvas_padding == 0.0
    assert settings.measurer == "heuristic"


def test_config_path_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "env.yaml"
    config_path.write_text("diagram:\n  scope_padding: 4\n", encoding="utf-8")
    monkeypatch.setenv("BOXDRAFT_CONFIG_PATH", str(config_path))

    assert load_settings().diagram.scope_padding == 4.0


def test_missing_explicit_config_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.yaml")


@pytest.mark.parametrize("field", ["background_color", "shade_color", "line_color"])
def test_colors_must_be_hex(field: str) -> None:
    with pytest.raises(ValidationError):
        DiagramSettings(**{field: "seafoam"})


def test_sizes_are_validated() -> None:
    with pytest.raises(ValidationError):
        DiagramSettings(font_size=0)
    with pytest.raises(ValidationError):
        DiagramSettings(scope_margin=-1)


def test_wiring_builds_pillow_renderer_by_default() -> None:
    renderer = build_scene_renderer(AppSettings())

    assert isinstance(renderer.measurer, PillowTextMeasurer)
    assert renderer.config == RenderConfig()
