from __future__ import annotations

from dataclasses import replace
from urllib.parse import urlsplit

from importmap_manifest.records import ArtifactRecord

_URL_SCHEMES = frozenset({"http", "https"})


def is_full_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme.lower() in _URL_SCHEMES and bool(parts.netloc)


def standardize_path(value: str) -> str:
    return value.replace("\\", "/")


def standardize_record(record: ArtifactRecord) -> ArtifactRecord:
    return replace(
        record,
        name=standardize_path(record.name),
        path=standardize_path(record.path),
    )


def join_base(base: str, path: str) -> str:
    if not base:
        return path
    if base.endswith("/") and path.startswith("/"):
        return base + path.lstrip("/")
    if base.endswith("/") or path.startswith("/"):
        return base + path
    return f"{base}/{path}"
