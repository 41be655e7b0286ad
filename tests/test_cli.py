import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lspbridge import __version__
from lspbridge.cli import main as cli_main

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep loguru's enqueued stderr sink away from the runner's captured streams
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)


def _json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _range(sl, sc, el, ec) -> dict:
    return {"start": {"line": sl, "column": sc}, "end": {"line": el, "column": ec}}


def test_version() -> None:
    result = runner.invoke(cli_main.app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_diagnostics_prints_groups(tmp_path: Path) -> None:
    (tmp_path / "A.java").write_text("class A {}", encoding="utf-8")
    (tmp_path / "B.java").write_text("class B {}", encoding="utf-8")
    snapshot = _json(tmp_path / "diags.json", [
        {"file": "A.java", "diagnostics": [{"range": _range(0, 0, 0, 5), "message": "missing semicolon"}]},
        {"file": "B.java", "diagnostics": [{"range": _range(2, 1, 2, 3), "severity": 2, "message": "unused"}]},
        {"file": "C.java", "diagnostics": []},
    ])

    result = runner.invoke(cli_main.app, ["diagnostics", str(snapshot), "--root", str(tmp_path), "--open", "B.java"])

    assert result.exit_code == 0, result.output
    assert "A.java" in result.output
    assert "missing semicolon" in result.output
    assert "WARNING" in result.output
    assert "2 of 3 file(s) shown." in result.output


def test_diagnostics_empty(tmp_path: Path) -> None:
    snapshot = _json(tmp_path / "diags.json", [])
    result = runner.invoke(cli_main.app, ["diagnostics", str(snapshot), "--root", str(tmp_path)])
    assert result.exit_code == 0
    assert "No diagnostics." in result.output


def test_diagnostics_rejects_malformed_input(tmp_path: Path) -> None:
    snapshot = _json(tmp_path / "diags.json", [{"file": "A.java", "diagnostics": [{"message": "no range"}]}])
    result = runner.invoke(cli_main.app, ["diagnostics", str(snapshot), "--root", str(tmp_path)])
    assert result.exit_code == 1


def test_locations_prints_previews(tmp_path: Path) -> None:
    (tmp_path / "Main.java").write_text("int a = 1;\nint foo = bar();\n", encoding="utf-8")
    locs = _json(tmp_path / "locs.json", [{"file": "Main.java", "range": _range(1, 4, 1, 7)}])

    result = runner.invoke(cli_main.app, ["locations", str(locs), "--root", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "int foo = bar();" in result.output
    assert "2:" in result.output


def test_locations_without_results_exits_nonzero(tmp_path: Path) -> None:
    locs = _json(tmp_path / "locs.json", [{"file": "Gone.java", "range": _range(0, 0, 0, 1)}])
    result = runner.invoke(cli_main.app, ["locations", str(locs), "--root", str(tmp_path)])
    assert result.exit_code == 1
    assert "No results." in result.output


def _action(tmp_path: Path, command=None) -> Path:
    (tmp_path / "A.java").write_text("class A {\n}\n", encoding="utf-8")
    data = {
        "title": "Make public",
        "changes": [{"file": "A.java", "edits": [{"range": _range(0, 0, 0, 0), "new_text": "public "}]}],
    }
    if command:
        data["command"] = command
    return _json(tmp_path / "action.json", data)


def test_apply_writes_files(tmp_path: Path) -> None:
    action = _action(tmp_path, {"title": "Format", "command": "editor.format"})

    result = runner.invoke(cli_main.app, ["apply", str(action), "--root", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "A.java").read_text(encoding="utf-8") == "public class A {\n}\n"
    assert "Updated" in result.output
    assert "editor.format" in result.output


def test_apply_dry_run_leaves_files_untouched(tmp_path: Path) -> None:
    action = _action(tmp_path)

    result = runner.invoke(cli_main.app, ["apply", str(action), "--root", str(tmp_path), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "public class A {" in result.output
    assert (tmp_path / "A.java").read_text(encoding="utf-8") == "class A {\n}\n"


def test_apply_without_changes_fails(tmp_path: Path) -> None:
    action = _json(tmp_path / "action.json", {"title": "Nothing"})
    result = runner.invoke(cli_main.app, ["apply", str(action), "--root", str(tmp_path)])
    assert result.exit_code == 1
    assert "Unable to perform code action" in result.output
