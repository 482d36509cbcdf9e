from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from importmap_manifest.diagnostics import Diagnostic


def render_import_map(import_map: dict[str, Any], console: Console | None = None) -> None:
    console = console or Console()
    imports = import_map.get("imports", {})
    if not isinstance(imports, dict):
        console.print(json.dumps(imports, indent=2))
        return
    table = Table(title=f"Import map ({len(imports)} entries)")
    table.add_column("Specifier")
    table.add_column("Location")
    for key, value in imports.items():
        table.add_row(str(key), value if isinstance(value, str) else json.dumps(value))
    console.print(table)


def render_diagnostics(diagnostics: list[Diagnostic], console: Console | None = None) -> None:
    console = console or Console()
    for diagnostic in diagnostics:
        console.print(f"{diagnostic.kind} error: {diagnostic}", markup=False)
