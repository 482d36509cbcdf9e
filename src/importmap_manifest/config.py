from __future__ import annotations

import os
import re
from collections.abc import Callable
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from importmap_manifest.emit import serialize_json
from importmap_manifest.normalize import DEFAULT_TRANSFORM_EXTENSIONS
from importmap_manifest.override import DEFAULT_TIMEOUT_S

DEFAULT_FILE_NAME = "import-map.json"


class ImportMapOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True, extra="forbid")

    include: Any = None
    exclude: Any = None
    filter: Callable[..., bool] | None = None
    transform_keys: Callable[[str], Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("transform_keys", "transformKeys", "map_keys", "mapKeys"),
    )
    transform_values: Callable[[str], Any] | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "transform_values", "transformValues", "map_values", "mapValues"
        ),
    )
    base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("base_url", "baseUrl", "public_path", "publicPath"),
    )
    file_name: str = Field(
        default=DEFAULT_FILE_NAME, validation_alias=AliasChoices("file_name", "fileName")
    )
    transform_extensions: Any = Field(
        default=DEFAULT_TRANSFORM_EXTENSIONS,
        validation_alias=AliasChoices("transform_extensions", "transformExtensions"),
    )
    use_entry_keys: bool = Field(
        default=False, validation_alias=AliasChoices("use_entry_keys", "useEntryKeys")
    )
    write_to_file_emit: bool = Field(
        default=False, validation_alias=AliasChoices("write_to_file_emit", "writeToFileEmit")
    )
    seed: dict[str, Any] | None = None
    generate: Callable[..., Any] | None = None
    map: Callable[..., Any] | None = None
    sort: Callable[..., int] | None = None
    serialize: Callable[[Any], str] = serialize_json
    base_import_map: str | None = Field(
        default=None, validation_alias=AliasChoices("base_import_map", "baseImportMap")
    )
    override_timeout_s: float | None = Field(
        default=DEFAULT_TIMEOUT_S,
        validation_alias=AliasChoices("override_timeout_s", "overrideTimeoutS"),
    )

    @field_validator("transform_extensions")
    @classmethod
    def _compile_transform_extensions(cls, value: Any) -> re.Pattern[str]:
        if isinstance(value, re.Pattern):
            return value
        if isinstance(value, str):
            return re.compile(value, re.IGNORECASE)
        raise ValueError("transform_extensions must be a regular expression or string")

    @field_validator("file_name")
    @classmethod
    def _require_file_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("file_name must not be empty")
        return value


def options_from_env(**overrides: Any) -> ImportMapOptions:
    values: dict[str, Any] = {}
    base_url_env = os.getenv("IMPORTMAP_BASE_URL", "").strip()
    base_import_map_env = os.getenv("IMPORTMAP_BASE_IMPORT_MAP", "").strip()
    file_name_env = os.getenv("IMPORTMAP_FILE_NAME", "").strip()
    if base_url_env:
        values["base_url"] = base_url_env
    if base_import_map_env:
        values["base_import_map"] = base_import_map_env
    if file_name_env:
        values["file_name"] = file_name_env
    values.update({key: value for key, value in overrides.items() if value is not None})
    return ImportMapOptions.model_validate(values)
