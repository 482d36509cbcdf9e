from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import replace

from importmap_manifest.paths import is_full_url, join_base, standardize_record
from importmap_manifest.records import ArtifactRecord
from importmap_manifest.rules import RuleSet

logger = logging.getLogger(__name__)

Predicate = Callable[[ArtifactRecord], bool]
Rename = Callable[[str], str | None]
Comparator = Callable[[ArtifactRecord, ArtifactRecord], int]
RecordMap = Callable[[ArtifactRecord], ArtifactRecord]

HOT_UPDATE_MARKER = "hot-update"


def drop_build_noise(
    records: Iterable[ArtifactRecord],
    *,
    output_dir: str,
    is_tracked_target: Callable[[str], bool],
) -> list[ArtifactRecord]:
    kept: list[ArtifactRecord] = []
    for record in records:
        if HOT_UPDATE_MARKER in record.path:
            continue
        if is_tracked_target(os.path.join(output_dir, record.name)):
            logger.debug("skip self reference name=%s", record.name)
            continue
        kept.append(record)
    return kept


def filter_stage(
    records: Iterable[ArtifactRecord],
    rules: RuleSet,
    predicate: Predicate | None = None,
) -> list[ArtifactRecord]:
    kept = [record for record in records if rules.accepts(record.name)]
    if predicate is not None:
        kept = [record for record in kept if predicate(record)]
    return kept


def rename_stage(
    records: Iterable[ArtifactRecord],
    transform_keys: Rename | None = None,
    transform_values: Rename | None = None,
) -> list[ArtifactRecord]:
    renamed: list[ArtifactRecord] = []
    for record in records:
        name = record.name
        path = record.path
        if transform_keys is not None:
            name = transform_keys(name) or name
        if transform_values is not None:
            path = transform_values(path) or path
        renamed.append(replace(record, name=name, path=path))
    return renamed


def resolve_base(base_url: str | None, public_path: str | None) -> str:
    if base_url is not None:
        return base_url
    if public_path is not None and public_path != "auto":
        return public_path
    return ""


def prefix_stage(records: Iterable[ArtifactRecord], base: str) -> list[ArtifactRecord]:
    if not base:
        return list(records)
    prefixed: list[ArtifactRecord] = []
    for record in records:
        if is_full_url(record.path):
            prefixed.append(record)
            continue
        prefixed.append(replace(record, path=join_base(base, record.path)))
    return prefixed


def standardize_stage(records: Iterable[ArtifactRecord]) -> list[ArtifactRecord]:
    return [standardize_record(record) for record in records]


def map_stage(records: Iterable[ArtifactRecord], mapper: RecordMap | None) -> list[ArtifactRecord]:
    if mapper is None:
        return list(records)
    return [mapper(record) for record in records]


def sort_stage(
    records: Iterable[ArtifactRecord], comparator: Comparator | None
) -> list[ArtifactRecord]:
    if comparator is None:
        return list(records)
    return sorted(records, key=functools.cmp_to_key(comparator))
