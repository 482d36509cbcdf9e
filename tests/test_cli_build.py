from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from importmap_manifest.cli import app

CLEAN_ENV = {
    "IMPORTMAP_BASE_URL": "",
    "IMPORTMAP_BASE_IMPORT_MAP": "",
    "IMPORTMAP_FILE_NAME": "",
}


def _write_passes(tmp_path: Path) -> Path:
    payload = {
        "passes": [
            {
                "units": [{"name": "main", "files": ["main.legacy.js"], "is_initial": True}],
                "assets": [{"name": "main.legacy.js", "chunks": ["main"]}],
            },
            {
                "units": [
                    {"name": "main", "files": ["main.modern.js"], "is_initial": True},
                    {"files": ["vendors.chunk.js"]},
                ],
                "public_path": "/static/",
            },
        ]
    }
    descriptor = tmp_path / "passes.json"
    descriptor.write_text(json.dumps(payload))
    return descriptor


def test_cli_build_aggregates_passes(tmp_path: Path) -> None:
    descriptor = _write_passes(tmp_path)
    out_dir = tmp_path / "dist"
    runner = CliRunner(env=CLEAN_ENV)
    result = runner.invoke(
        app,
        ["build", "--input", str(descriptor), "--out-dir", str(out_dir), "--base-url", "/app"],
    )
    assert result.exit_code == 0, result.stdout
    payload = json.loads((out_dir / "import-map.json").read_text())
    assert payload == {
        "imports": {
            "main.js": "/app/main.modern.js",
            "vendors.chunk.js": "/app/vendors.chunk.js",
        }
    }
    assert "Import map:" in result.stdout


def test_cli_build_rules(tmp_path: Path) -> None:
    descriptor = _write_passes(tmp_path)
    out_dir = tmp_path / "dist"
    runner = CliRunner(env=CLEAN_ENV)
    result = runner.invoke(
        app,
        [
            "build",
            "--input",
            str(descriptor),
            "--out-dir",
            str(out_dir),
            "--exclude",
            "re:^vendors",
        ],
    )
    assert result.exit_code == 0, result.stdout
    payload = json.loads((out_dir / "import-map.json").read_text())
    assert payload == {"imports": {"main.js": "/static/main.modern.js"}}


def test_cli_strict_fails_on_diagnostics(tmp_path: Path) -> None:
    descriptor = _write_passes(tmp_path)
    out_dir = tmp_path / "dist"
    runner = CliRunner(env=CLEAN_ENV)
    result = runner.invoke(
        app,
        [
            "build",
            "--input",
            str(descriptor),
            "--out-dir",
            str(out_dir),
            "--base-import-map",
            "cdn.example.com/map.json",
            "--strict",
        ],
    )
    assert result.exit_code == 1
    assert "malformed URL" in result.stdout
    assert (out_dir / "import-map.json").exists()


def test_cli_rejects_empty_descriptor(tmp_path: Path) -> None:
    descriptor = tmp_path / "empty.json"
    descriptor.write_text("  \n")
    runner = CliRunner(env=CLEAN_ENV)
    result = runner.invoke(app, ["build", "--input", str(descriptor)])
    assert result.exit_code != 0
    assert "Build descriptor is empty" in result.stdout
    assert "Traceback" not in result.stdout


def test_cli_file_type() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["file-type", "bundle.js.map"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "js.map"


def test_cli_show(tmp_path: Path) -> None:
    import_map = tmp_path / "import-map.json"
    import_map.write_text(json.dumps({"imports": {"one.js": "/app/one.js"}}))
    runner = CliRunner()
    result = runner.invoke(app, ["show", str(import_map)])
    assert result.exit_code == 0
    assert "one.js" in result.stdout
