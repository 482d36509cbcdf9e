from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console

from importmap_manifest.aggregation import AggregationState
from importmap_manifest.config import options_from_env
from importmap_manifest.diagnostics import Diagnostic
from importmap_manifest.emit import DirectorySink
from importmap_manifest.normalize import DEFAULT_TRANSFORM_EXTENSIONS, file_type
from importmap_manifest.pipeline import ImportMapPipeline, PassResult
from importmap_manifest.records import BuildPassInput
from importmap_manifest.runtime import initialize_runtime
from importmap_manifest.ui.render import render_diagnostics, render_import_map

app = typer.Typer(help="Build import maps from build output descriptors")

console = Console()
logger = logging.getLogger(__name__)

INPUT_OPTION = typer.Option(..., "--input", "-i", exists=True, dir_okay=False)
OUT_DIR_OPTION = typer.Option(None, "--out-dir", "--out")
BASE_URL_OPTION = typer.Option(None, "--base-url")
BASE_IMPORT_MAP_OPTION = typer.Option(None, "--base-import-map")
FILE_NAME_OPTION = typer.Option(None, "--file-name")
INCLUDE_OPTION = typer.Option(None, "--include")
EXCLUDE_OPTION = typer.Option(None, "--exclude")
STRICT_OPTION = typer.Option(False, "--strict")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v")
IMPORT_MAP_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False)


def parse_rule(value: str) -> str | re.Pattern[str]:
    if value.startswith("re:"):
        return re.compile(value[3:])
    return value


def _rules(values: list[str] | None) -> list[str | re.Pattern[str]] | None:
    if not values:
        return None
    return [parse_rule(value) for value in values]


def load_passes(path: Path) -> list[BuildPassInput]:
    text = path.read_text()
    if not text.strip():
        console.print(f"Build descriptor is empty: {path}")
        raise typer.BadParameter(f"Build descriptor is empty: {path}")
    raw: Any = json.loads(text)
    if isinstance(raw, dict) and "passes" in raw:
        raw = raw["passes"]
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list) or not raw:
        raise typer.BadParameter(f"Build descriptor has no passes: {path}")
    return [BuildPassInput.model_validate(item) for item in raw]


@app.command("build")
def build(
    input_path: Path = INPUT_OPTION,
    out_dir: Path | None = OUT_DIR_OPTION,
    base_url: str | None = BASE_URL_OPTION,
    base_import_map: str | None = BASE_IMPORT_MAP_OPTION,
    file_name: str | None = FILE_NAME_OPTION,
    include: list[str] | None = INCLUDE_OPTION,
    exclude: list[str] | None = EXCLUDE_OPTION,
    strict: bool = STRICT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    initialize_runtime(verbose=verbose, logger=logger)
    logger.info("build start input=%s out_dir=%s", input_path, out_dir)
    try:
        options = options_from_env(
            base_url=base_url,
            base_import_map=base_import_map,
            file_name=file_name,
            include=_rules(include),
            exclude=_rules(exclude),
        )
        passes = load_passes(input_path)
    except (ValidationError, ValueError) as exc:
        console.print(f"Invalid build configuration: {exc}")
        raise typer.Exit(code=2) from exc
    if out_dir is not None:
        passes = [item.model_copy(update={"output_dir": str(out_dir)}) for item in passes]

    pipeline = ImportMapPipeline(options)
    state = AggregationState()
    tokens = [pipeline.start(item, state) for item in passes]
    results: list[PassResult] = []
    for token, item in zip(tokens, passes, strict=True):
        sink = DirectorySink(Path(item.output_dir))
        results.append(pipeline.complete(token, item, state, sink))

    diagnostics: list[Diagnostic] = []
    for result in results:
        for diagnostic in result.diagnostics:
            if diagnostic not in diagnostics:
                diagnostics.append(diagnostic)
    render_diagnostics(diagnostics, console)
    for result in results:
        if result.emitted:
            console.print(f"Import map: {result.target}", markup=False)
    logger.info("build complete passes=%s diagnostics=%s", len(results), len(diagnostics))
    if strict and diagnostics:
        raise typer.Exit(code=1)


@app.command("show")
def show(import_map_path: Path = IMPORT_MAP_ARGUMENT) -> None:
    data = json.loads(import_map_path.read_text())
    if not isinstance(data, dict):
        console.print(f"Not an import map: {import_map_path}")
        raise typer.Exit(code=1)
    render_import_map(data, console)


@app.command("file-type")
def show_file_type(name: str) -> None:
    console.print(file_type(name, DEFAULT_TRANSFORM_EXTENSIONS))


if __name__ == "__main__":
    app()
