from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Iterable, Mapping

from importmap_manifest.paths import standardize_path, standardize_record
from importmap_manifest.records import ArtifactRecord, AssetInfo, BuildUnit

logger = logging.getLogger(__name__)

DEFAULT_TRANSFORM_EXTENSIONS = re.compile(r"^(gz|map)$", re.IGNORECASE)

_QUERY_RE = re.compile(r"\?.*", re.DOTALL)


def file_type(
    file_name: str, transform_extensions: re.Pattern[str] = DEFAULT_TRANSFORM_EXTENSIONS
) -> str:
    stripped = _QUERY_RE.sub("", file_name, count=1)
    parts = stripped.split(".")
    ext = parts.pop()
    if transform_extensions.search(ext) and parts:
        return f"{parts.pop()}.{ext}"
    return ext


class ModuleAssetTable:
    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(entries or {})

    def record(self, file: str, user_request: str | None) -> None:
        if not user_request or file in self._entries:
            return
        logical = posixpath.join(
            posixpath.dirname(standardize_path(file)),
            posixpath.basename(standardize_path(user_request)),
        )
        self._entries[file] = logical

    def get(self, file: str) -> str | None:
        return self._entries.get(file)

    def __contains__(self, file: object) -> bool:
        return file in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def records_from_unit(
    unit: BuildUnit,
    *,
    transform_extensions: re.Pattern[str] = DEFAULT_TRANSFORM_EXTENSIONS,
    use_entry_keys: bool = False,
) -> list[ArtifactRecord]:
    records: list[ArtifactRecord] = []
    for path in [*unit.files, *unit.auxiliary_files]:
        if not path:
            continue
        if unit.name:
            if use_entry_keys and not path.endswith(".map"):
                name = unit.name
            else:
                name = f"{unit.name}.{file_type(path, transform_extensions)}"
        else:
            name = path
        records.append(
            ArtifactRecord(
                path=path,
                name=name,
                group=unit,
                is_initial=unit.is_initial,
                is_chunk=True,
            )
        )
    return records


def records_from_asset(asset: AssetInfo, module_assets: ModuleAssetTable) -> list[ArtifactRecord]:
    if not asset.name:
        return []
    logical = module_assets.get(asset.name) or asset.source_filename
    if logical:
        return [
            ArtifactRecord(
                path=asset.name,
                name=logical,
                is_asset=True,
                is_module_asset=True,
            )
        ]
    if asset.is_chunk_asset:
        return [ArtifactRecord(path=related, name=related) for related in asset.related_paths()]
    return [ArtifactRecord(path=asset.name, name=asset.name, is_asset=True)]


def normalize_artifacts(
    units: Iterable[BuildUnit],
    assets: Iterable[AssetInfo],
    module_assets: ModuleAssetTable,
    *,
    transform_extensions: re.Pattern[str] = DEFAULT_TRANSFORM_EXTENSIONS,
    use_entry_keys: bool = False,
) -> list[ArtifactRecord]:
    records: list[ArtifactRecord] = []
    for unit in units:
        records.extend(
            records_from_unit(
                unit,
                transform_extensions=transform_extensions,
                use_entry_keys=use_entry_keys,
            )
        )
    for asset in assets:
        records.extend(records_from_asset(asset, module_assets))
    logger.debug("normalized artifacts count=%s", len(records))
    return [standardize_record(record) for record in records]
