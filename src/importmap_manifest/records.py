from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class ArtifactRecord:
    path: str
    name: str
    group: Any = None
    is_initial: bool = False
    is_chunk: bool = False
    is_asset: bool = False
    is_module_asset: bool = False


class BuildUnit(BaseModel):
    name: str | None = None
    files: list[str] = Field(default_factory=list)
    auxiliary_files: list[str] = Field(default_factory=list)
    is_initial: bool = False


class AssetInfo(BaseModel):
    name: str | None = None
    chunks: list[str | int] = Field(default_factory=list)
    chunk_names: list[str] = Field(default_factory=list)
    source_filename: str | None = None
    related: dict[str, str | list[str]] = Field(default_factory=dict)

    @property
    def is_chunk_asset(self) -> bool:
        return bool(self.chunks or self.chunk_names)

    def related_paths(self) -> list[str]:
        paths: list[str] = []
        for value in self.related.values():
            if isinstance(value, str):
                paths.append(value)
            else:
                paths.extend(value)
        return paths


class BuildPassInput(BaseModel):
    units: list[BuildUnit] = Field(default_factory=list)
    assets: list[AssetInfo] = Field(default_factory=list)
    entrypoints: dict[str, list[str]] = Field(default_factory=dict)
    module_assets: dict[str, str] = Field(default_factory=dict)
    public_path: str | None = None
    output_dir: str = "."
