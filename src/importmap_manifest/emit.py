from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Serializer = Callable[[Any], str]


def serialize_json(import_map: Any) -> str:
    return json.dumps(import_map, indent=4)


class OutputSink(Protocol):
    def get_asset(self, name: str) -> bytes | None:
        ...

    def emit_asset(self, name: str, data: bytes) -> None:
        ...


class MemorySink:
    def __init__(self) -> None:
        self.assets: dict[str, bytes] = {}
        self.emit_count = 0

    def get_asset(self, name: str) -> bytes | None:
        return self.assets.get(name)

    def emit_asset(self, name: str, data: bytes) -> None:
        self.assets[name] = data
        self.emit_count += 1

    def read_json(self, name: str) -> Any:
        data = self.assets[name]
        return json.loads(data.decode("utf-8"))


class DirectorySink:
    def __init__(self, root: Path) -> None:
        self.root = root

    def _path_for(self, name: str) -> Path:
        return self.root / name

    def get_asset(self, name: str) -> bytes | None:
        path = self._path_for(name)
        if not path.is_file():
            return None
        return path.read_bytes()

    def emit_asset(self, name: str, data: bytes) -> None:
        path = self._path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


def emit_import_map(
    import_map: Any,
    sink: OutputSink,
    output_name: str,
    *,
    serialize: Serializer = serialize_json,
    write_to_file: Path | None = None,
) -> bytes:
    output = serialize(import_map).encode("utf-8")
    sink.emit_asset(output_name, output)
    logger.info("import map emitted name=%s bytes=%s", output_name, len(output))
    if write_to_file is not None:
        write_to_file.parent.mkdir(parents=True, exist_ok=True)
        write_to_file.write_bytes(output)
        logger.info("import map written path=%s", write_to_file)
    return output
