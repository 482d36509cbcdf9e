from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from importmap_manifest.config import DEFAULT_FILE_NAME, ImportMapOptions, options_from_env


def test_defaults() -> None:
    options = ImportMapOptions()
    assert options.file_name == DEFAULT_FILE_NAME
    assert options.transform_extensions.search("MAP")
    assert options.base_url is None
    assert options.override_timeout_s == 30.0
    assert options.serialize({"imports": {}}) == '{\n    "imports": {}\n}'


def test_camel_case_aliases() -> None:
    def upper(value: str) -> str:
        return value.upper()

    options = ImportMapOptions.model_validate(
        {
            "mapKeys": upper,
            "transformValues": upper,
            "publicPath": "/cdn/",
            "fileName": "importmap.json",
            "writeToFileEmit": True,
            "baseImportMap": "https://cdn.example.com/base.json",
            "transformExtensions": "^(br)$",
        }
    )
    assert options.transform_keys is upper
    assert options.transform_values is upper
    assert options.base_url == "/cdn/"
    assert options.file_name == "importmap.json"
    assert options.write_to_file_emit
    assert options.base_import_map == "https://cdn.example.com/base.json"
    assert options.transform_extensions == re.compile("^(br)$", re.IGNORECASE)


def test_unknown_option_rejected() -> None:
    with pytest.raises(ValidationError):
        ImportMapOptions.model_validate({"outputPath": "dist"})


def test_invalid_transform_extensions_rejected() -> None:
    with pytest.raises(ValidationError):
        ImportMapOptions(transform_extensions=42)


def test_options_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IMPORTMAP_BASE_URL", " /app/ ")
    monkeypatch.setenv("IMPORTMAP_BASE_IMPORT_MAP", "")
    monkeypatch.setenv("IMPORTMAP_FILE_NAME", "env-map.json")
    options = options_from_env(file_name="flag-map.json", base_import_map=None)
    assert options.base_url == "/app/"
    assert options.base_import_map is None
    assert options.file_name == "flag-map.json"
