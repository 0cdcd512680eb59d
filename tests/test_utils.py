"""Tests for JSON file loading."""

import pytest

from unithereum_codegen.utils import JSONLoaderError, load_json_file, load_json_object


def test_load_json_object(tmp_path):
    path = tmp_path / "codegen.config.json"
    path.write_text('{"outputDir": "Out"}', encoding="utf-8")
    assert load_json_object(path) == {"outputDir": "Out"}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_json_file(tmp_path / "missing.json")


def test_invalid_json_reports_position(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{\n  "outputDir": \n}', encoding="utf-8")

    with pytest.raises(JSONLoaderError) as excinfo:
        load_json_file(path)

    assert excinfo.value.path == path
    assert excinfo.value.position.startswith("line 3")


def test_non_object_root(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(JSONLoaderError):
        load_json_object(path)


def test_non_utf8_file(tmp_path):
    path = tmp_path / "latin1.json"
    path.write_bytes(b"\xff{}")

    with pytest.raises(JSONLoaderError) as excinfo:
        load_json_file(path)

    assert "UTF-8" in str(excinfo.value)
    assert excinfo.value.position == "byte 0"
