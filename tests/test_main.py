"""Tests for the command line interface."""

import io
import json

import pytest

from main import main


@pytest.fixture(autouse=True)
def no_reviewer(monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)


def test_single_file_json(tmp_path, capsys) -> None:
    path = tmp_path / "f.js"
    path.write_text("function f(n){ return n<=1?1:f(n-1); }\n", encoding="utf-8")

    assert main([str(path), "--json", "--hour", "12", "--region", "nordics", "--hardware", "mobile"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["files"] == [str(path)]
    assert data["metrics"]["recursionDetected"] is True
    assert data["metrics"]["gridIntensity"] == 138
    assert data["environment"]["hardwareProfile"] == "mobile"
    assert data["reviewSource"] == "fallback"


def test_directory_is_aggregated(tmp_path, capsys) -> None:
    (tmp_path / "a.js").write_text("const a = [];\n", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.go").write_text("for i := 0; i < n; i++ {}\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("for while do\n", encoding="utf-8")

    assert main([str(tmp_path), "-o", "json", "--hour", "3"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert len(data["files"]) == 2
    assert data["metrics"]["language"] == "mixed"


def test_stdin_text_report(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("items.forEach(x => x);\n"))
    assert main(["-", "--filename", "snippet.ts", "--hour", "12"]) == 0
    out = capsys.readouterr().out
    assert "CO2DE METER" in out
    assert "Language: ts" in out


def test_radon_extra_for_python(tmp_path, capsys) -> None:
    path = tmp_path / "m.py"
    path.write_text("def f(x):\n    if x:\n        return 1\n    return 2\n", encoding="utf-8")
    assert main([str(path), "--json", "--radon", "--hour", "12"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["extra"]["Cyclomatic Complexity (radon, max)"] == 2


def test_missing_path(tmp_path, capsys) -> None:
    assert main([str(tmp_path / "nope.js")]) == 1
    assert "path not found" in capsys.readouterr().err


def test_no_fallback_without_reviewer_fails(tmp_path, capsys) -> None:
    path = tmp_path / "a.js"
    path.write_text("const a = 1;\n", encoding="utf-8")
    assert main([str(path), "--no-fallback"]) == 1
    assert "review providers exhausted" in capsys.readouterr().err
