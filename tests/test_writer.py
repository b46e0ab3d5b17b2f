"""Tests for the document writer and the top-level generate entry point."""

import json
import os
import stat

import pytest

import nvim_bindgen
from nvim_bindgen import GeneratorError, SourceUnavailable, generate, write_document


def test_write_document(tmp_path):
    target = tmp_path / "NvimAPI.generated.cs"

    written = write_document(target, "namespace X\n{\n}\n")

    assert written == target
    assert target.read_text(encoding="utf-8") == "namespace X\n{\n}\n"
    assert os.listdir(tmp_path) == ["NvimAPI.generated.cs"]


def test_write_document_replaces_previous_file(tmp_path):
    target = tmp_path / "out.cs"
    target.write_text("old", encoding="utf-8")

    write_document(target, "new")

    assert target.read_text(encoding="utf-8") == "new"


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_replaced_file_keeps_its_mode(tmp_path):
    target = tmp_path / "out.cs"
    target.write_text("old", encoding="utf-8")
    target.chmod(0o644)

    write_document(target, "new")

    assert stat.S_IMODE(target.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_new_file_mode_follows_umask(tmp_path):
    previous = os.umask(0o022)
    try:
        write_document(tmp_path / "out.cs", "text")
    finally:
        os.umask(previous)

    assert stat.S_IMODE((tmp_path / "out.cs").stat().st_mode) == 0o644


def test_failed_write_leaves_previous_file(tmp_path, monkeypatch):
    target = tmp_path / "out.cs"
    target.write_text("old", encoding="utf-8")

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(nvim_bindgen.writer.os, "replace", failing_replace)

    with pytest.raises(OSError, match="disk full"):
        write_document(target, "new")

    assert target.read_text(encoding="utf-8") == "old"
    assert os.listdir(tmp_path) == ["out.cs"]


def test_missing_directory(tmp_path):
    with pytest.raises(OSError):
        write_document(tmp_path / "missing" / "out.cs", "text")


class TestGenerate:
    def test_writes_generated_bindings(self, tmp_path, api_metadata):
        metadata_file = tmp_path / "api.json"
        metadata_file.write_text(json.dumps(api_metadata), encoding="utf-8")
        output = tmp_path / "NvimAPI.generated.cs"

        result = generate(output, file_path=metadata_file)

        assert result.success
        assert output.read_text(encoding="utf-8") == result.code
        assert "public partial class NvimAPI" in result.code

    def test_generation_failure_writes_nothing(self, tmp_path, api_metadata):
        api_metadata["functions"].append(
            {
                "name": "nvim_ui_attach",
                "parameters": [["Integer", "width"]],
                "return_type": "void",
                "method": True,
            }
        )
        metadata_file = tmp_path / "api.json"
        metadata_file.write_text(json.dumps(api_metadata), encoding="utf-8")
        output = tmp_path / "out.cs"
        output.write_text("previous", encoding="utf-8")

        with pytest.raises(GeneratorError, match="nvim_ui_attach"):
            generate(output, file_path=metadata_file)

        assert output.read_text(encoding="utf-8") == "previous"

    def test_source_failure_writes_nothing(self, tmp_path):
        output = tmp_path / "out.cs"

        with pytest.raises(SourceUnavailable):
            generate(output, file_path=tmp_path / "missing.json")

        assert not output.exists()

    def test_config_is_applied(self, tmp_path, api_metadata):
        metadata_file = tmp_path / "api.json"
        metadata_file.write_text(json.dumps(api_metadata), encoding="utf-8")
        output = tmp_path / "out.cs"

        generate(output, file_path=metadata_file, config={"class_name": "Api"})

        assert "public partial class Api" in output.read_text(encoding="utf-8")
