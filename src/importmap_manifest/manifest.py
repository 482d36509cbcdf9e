from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from importmap_manifest.records import ArtifactRecord

Generate = Callable[[dict[str, Any], list[ArtifactRecord], dict[str, list[str]]], Any]


def build_manifest(
    records: Iterable[ArtifactRecord],
    *,
    seed: Mapping[str, Any] | None = None,
    entrypoints: Mapping[str, list[str]] | None = None,
    generate: Generate | None = None,
) -> Any:
    base = dict(seed or {})
    files = list(records)
    if generate is not None:
        entries = {name: list(paths) for name, paths in (entrypoints or {}).items()}
        body = generate(base, files, entries)
        if isinstance(body, Mapping) and body.get("files"):
            body = body["files"]
    else:
        body = base
        for record in files:
            body[record.name] = record.path
    return body


def wrap_imports(body: Any) -> dict[str, Any]:
    if isinstance(body, Mapping):
        return {"imports": dict(body)}
    return {"imports": body}
