"""Tests for the language classifier."""

import pytest

from co2de_meter.classifier import LanguageClassifier, file_extension


@pytest.mark.parametrize(
    "name, tag, multiplier",
    [
        ("app.js", "js", 1.0),
        ("component.TSX", "tsx", 1.15),
        ("src/lib/energy.ts", "ts", 1.1),
        ("main.py", "py", 1.8),
        ("kernel.rs", "rs", 0.4),
        ("Main.java", "java", 1.4),
    ],
)
def test_known_extensions(name, tag, multiplier) -> None:
    language = LanguageClassifier().classify(name)
    assert language.tag == tag
    assert language.multiplier == multiplier


@pytest.mark.parametrize("name", ["notes.txt", "Makefile", "", None, ".bashrc", "archive.tar.gz"])
def test_unknown_extension_defaults_to_js(name) -> None:
    language = LanguageClassifier().classify(name)
    assert language.tag == "js"
    assert language.multiplier == 1.0


def test_file_extension_handles_windows_paths() -> None:
    assert file_extension("C:\\work\\app.Js") == "js"
    assert file_extension("dir.d/README") == ""


def test_custom_table_is_injected() -> None:
    classifier = LanguageClassifier(multipliers={"zig": 0.3}, default_tag="txt")
    assert classifier.classify("a.zig").multiplier == 0.3
    assert classifier.classify("a.js").tag == "txt"
    assert classifier.is_known("a.zig")
    assert not classifier.is_known("a.js")
