from __future__ import annotations

import os
import re
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.scope_layout import LayoutConfig
from domain.models import RenderConfig

DEFAULT_CONFIG_PATH = Path("config/boxdraft.yaml")
CONFIG_PATH_ENV = "BOXDRAFT_CONFIG_PATH"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class DiagramSettings(BaseModel):
    font_size: float = Field(default=14.0, gt=0)
    font_family: str = "Georgia"
    scope_margin: float = Field(default=30.0, ge=0)
    scope_padding: float = Field(default=10.0, ge=0)
    canvas_padding: float = Field(default=15.0, ge=0)
    background_color: str = "#CAFFF6"
    shade_color: str = "#9ED8CE"
    line_color: str = "#000000"
    line_dash_length: float = Field(default=5.0, gt=0)
    line_dash_spacing: float = Field(default=3.0, gt=0)
    head_length: float = Field(default=10.0, gt=0)

    @field_validator("background_color", "shade_color", "line_color", mode="before")
    @classmethod
    def validate_color(cls, value: object) -> str:
        color = str(value or "").strip()
        if not _HEX_COLOR.match(color):
            msg = f"Expected a #RGB or #RRGGBB color, got {value!r}"
            raise ValueError(msg)
        return color

    @field_validator("font_family", mode="before")
    @classmethod
    def normalize_font_family(cls, value: object) -> str:
        family = str(value or "").strip().strip("'").strip('"')
        return family or "Georgia"

    def to_render_config(self) -> RenderConfig:
        return RenderConfig(**self.model_dump())

    def to_layout_config(self) -> LayoutConfig:
        return LayoutConfig.from_render_config(self.to_render_config())


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BOXDRAFT_", env_nested_delimiter="__")

    diagram: DiagramSettings = DiagramSettings()
    measurer: Literal["pillow", "heuristic"] = "pillow"

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv(CONFIG_PATH_ENV)
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
