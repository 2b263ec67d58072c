from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.excalidraw.repository import SCENE_SUFFIX, FileSystemExcalidrawRepository
from adapters.excalidraw.url_encoder import DEFAULT_BASE_URL, build_excalidraw_url
from adapters.filesystem.diagram_repository import FileSystemDiagramRepository
from adapters.filesystem.json_utils import write_text_atomic
from adapters.surface.excalidraw import ExcalidrawSurface
from adapters.surface.svg import SvgSurface
from app.config import AppSettings, load_settings
from app.diagram_wiring import build_scene_renderer
from domain.models import Source
from domain.services.parse_source import parse_source

app = typer.Typer(no_args_is_help=True)
console = Console()
logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    svg = "svg"
    excalidraw = "excalidraw"

    @property
    def suffix(self) -> str:
        return ".svg" if self is OutputFormat.svg else SCENE_SUFFIX


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _load_settings(config_path: Optional[Path]) -> AppSettings:
    try:
        return load_settings(config_path)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc


def _parse_file(input_path: Path) -> Source:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    source = parse_source(FileSystemDiagramRepository().load_by_path(input_path))
    if source.has_errors:
        for message in source.error_messages:
            console.print(f"[red]{input_path}:[/] {message}")
        raise typer.Exit(code=1)
    return source


def _render_to(source: Source, settings: AppSettings, output_format: OutputFormat, target: Path) -> None:
    renderer = build_scene_renderer(settings)
    if output_format is OutputFormat.svg:
        svg = SvgSurface()
        renderer.render(source, svg)
        write_text_atomic(target, svg.to_string())
    else:
        scene = ExcalidrawSurface(scene_name=target.stem)
        renderer.render(source, scene)
        FileSystemExcalidrawRepository().save(scene.to_document(), target)
    console.print(f"[green]Wrote[/] {target}")


@app.command("render")
def render(
    input_path: Path = typer.Argument(..., help="Diagram text file."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
    output_format: OutputFormat = typer.Option(OutputFormat.svg, "--format", "-f"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = _load_settings(config_path)
    source = _parse_file(input_path)
    target = output or input_path.with_suffix(output_format.suffix)
    _render_to(source, settings, output_format, target)


@app.command("render-all")
def render_all(
    input_dir: Path = typer.Option(
        Path("examples/diagrams"), help="Directory with diagram text files.",
    ),
    output_dir: Path = typer.Option(Path("data/rendered"), help="Directory to write rendered files."),
    output_format: OutputFormat = typer.Option(OutputFormat.svg, "--format", "-f"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = _load_settings(config_path)
    pairs = FileSystemDiagramRepository().load_all_with_paths(input_dir)
    if not pairs:
        console.print(f"[yellow]No diagram files found in {input_dir}[/]")
        raise typer.Exit(code=0)

    output_dir.mkdir(parents=True, exist_ok=True)
    failures = 0
    for path, text in pairs:
        source = parse_source(text)
        if source.has_errors:
            failures += 1
            console.print(f"[red]Skipped[/] {path}: {'; '.join(source.error_messages)}")
            continue
        _render_to(source, settings, output_format, output_dir / f"{path.stem}{output_format.suffix}")
    if failures:
        raise typer.Exit(code=1)


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Diagram text file to validate.")) -> None:
    source = _parse_file(input_path)
    scopes = len(source.iter_with_paths())
    console.print(f"[green]Valid diagram:[/] {input_path} ({scopes} scopes)")


@app.command("url")
def url(
    input_path: Path = typer.Argument(..., help="Diagram text file."),
    base_url: str = typer.Option(DEFAULT_BASE_URL, help="Excalidraw instance URL."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = _load_settings(config_path)
    source = _parse_file(input_path)
    scene = ExcalidrawSurface(scene_name=input_path.stem)
    build_scene_renderer(settings).render(source, scene)
    logger.debug("Encoded %d scene elements", len(scene.elements))
    console.print(
        build_excalidraw_url(scene.to_document(), base_url),
        soft_wrap=True,
        markup=False,
        highlight=False,
    )


if __name__ == "__main__":
    app()
