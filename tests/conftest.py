from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from adapters.layout.scope_layout import LayoutConfig, ScopeLayoutEngine
from domain.models import RenderConfig
from domain.services.render_scene import SceneRenderer
from tests.helpers.diagram_fixtures import FixedWidthMeasurer


def _clear_boxdraft_env() -> None:
    for key in list(os.environ):
        if key.startswith("BOXDRAFT_"):
            os.environ.pop(key, None)


_clear_boxdraft_env()


@pytest.fixture(autouse=True)
def clear_boxdraft_env() -> Generator[None, None, None]:
    _clear_boxdraft_env()
    yield
    _clear_boxdraft_env()


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    return FixedWidthMeasurer(word_width=40.0, height=14.0)


@pytest.fixture
def render_config() -> RenderConfig:
    return RenderConfig(scope_margin=30.0, scope_padding=10.0, canvas_padding=15.0)


@pytest.fixture
def layout_engine(measurer: FixedWidthMeasurer, render_config: RenderConfig) -> ScopeLayoutEngine:
    return ScopeLayoutEngine(measurer, LayoutConfig.from_render_config(render_config))


@pytest.fixture
def layout_engine_factory(
    measurer: FixedWidthMeasurer,
) -> Callable[..., ScopeLayoutEngine]:
    def _factory(**overrides: float) -> ScopeLayoutEngine:
        return ScopeLayoutEngine(measurer, LayoutConfig(**overrides))

    return _factory


@pytest.fixture
def scene_renderer(
    layout_engine: ScopeLayoutEngine,
    measurer: FixedWidthMeasurer,
    render_config: RenderConfig,
) -> SceneRenderer:
    return SceneRenderer(layout_engine, measurer, render_config)
