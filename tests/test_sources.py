"""Tests for the metadata sources."""

import json
import subprocess

import msgpack
import pytest
import requests

from nvim_bindgen import sources
from nvim_bindgen.sources import (
    SourceUnavailable,
    load_metadata,
    load_metadata_from_file,
    load_metadata_from_nvim,
    load_metadata_from_url,
)

DOCUMENT = {
    "functions": [
        {"name": "nvim_get_current_line", "parameters": [], "return_type": "String"}
    ],
    "ui_events": [],
    "types": {"Buffer": {"id": 0, "prefix": "nvim_buf_"}},
}


class FakeResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            response = requests.Response()
            response.status_code = self.status_code
            raise requests.exceptions.HTTPError(response=response)

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value")
        return self.payload


class TestNvimSource:
    def test_decodes_api_info(self, monkeypatch):
        calls = []

        def fake_run(command, **kwargs):
            calls.append((command, kwargs))
            return subprocess.CompletedProcess(command, 0, stdout=msgpack.packb(DOCUMENT))

        monkeypatch.setattr(sources.subprocess, "run", fake_run)

        source, data = load_metadata_from_nvim("/opt/nvim/bin/nvim")

        assert source == "/opt/nvim/bin/nvim --api-info"
        assert data == DOCUMENT
        assert calls == [
            (["/opt/nvim/bin/nvim", "--api-info"], {"capture_output": True, "check": True})
        ]

    def test_missing_executable(self, monkeypatch):
        def fake_run(command, **kwargs):
            raise FileNotFoundError(command[0])

        monkeypatch.setattr(sources.subprocess, "run", fake_run)

        with pytest.raises(SourceUnavailable, match="not found") as excinfo:
            load_metadata_from_nvim("no-such-nvim")

        assert isinstance(excinfo.value.__cause__, FileNotFoundError)

    def test_non_zero_exit(self, monkeypatch):
        def fake_run(command, **kwargs):
            raise subprocess.CalledProcessError(2, command, stderr=b"boom")

        monkeypatch.setattr(sources.subprocess, "run", fake_run)

        with pytest.raises(SourceUnavailable, match="status 2"):
            load_metadata_from_nvim()

    def test_undecodable_output(self, monkeypatch):
        def fake_run(command, **kwargs):
            return subprocess.CompletedProcess(command, 0, stdout=b"\xc1")

        monkeypatch.setattr(sources.subprocess, "run", fake_run)

        with pytest.raises(SourceUnavailable, match="Invalid msgpack"):
            load_metadata_from_nvim()


class TestFileSource:
    def test_json_file(self, tmp_path):
        path = tmp_path / "api.json"
        path.write_text(json.dumps(DOCUMENT), encoding="utf-8")

        source, data = load_metadata_from_file(path)

        assert source == str(path)
        assert data == DOCUMENT

    @pytest.mark.parametrize("name", ["api.msgpack", "api.mpack", "api-info"])
    def test_msgpack_file(self, tmp_path, name):
        path = tmp_path / name
        path.write_bytes(msgpack.packb(DOCUMENT))

        assert load_metadata_from_file(path)[1] == DOCUMENT

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailable, match="File not found"):
            load_metadata_from_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "api.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(SourceUnavailable, match="Invalid JSON"):
            load_metadata_from_file(path)

    def test_truncated_msgpack(self, tmp_path):
        path = tmp_path / "api.msgpack"
        path.write_bytes(msgpack.packb(DOCUMENT)[:-3])

        with pytest.raises(SourceUnavailable, match="Invalid msgpack"):
            load_metadata_from_file(path)


class TestURLSource:
    def test_fetches_json(self, monkeypatch):
        calls = []

        def fake_get(url, timeout):
            calls.append((url, timeout))
            return FakeResponse(DOCUMENT)

        monkeypatch.setattr(sources.requests, "get", fake_get)

        source, data = load_metadata_from_url("https://example.com/api.json", timeout=5)

        assert source == "https://example.com/api.json"
        assert data == DOCUMENT
        assert calls == [("https://example.com/api.json", 5)]

    def test_invalid_url(self):
        with pytest.raises(SourceUnavailable, match="Invalid URL"):
            load_metadata_from_url("not a url")

    @pytest.mark.parametrize(
        "error,message",
        [
            (requests.exceptions.Timeout(), "timeout"),
            (requests.exceptions.ConnectionError(), "Connection error"),
            (requests.exceptions.TooManyRedirects(), "Request error"),
        ],
    )
    def test_request_failures(self, monkeypatch, error, message):
        def fake_get(url, timeout):
            raise error

        monkeypatch.setattr(sources.requests, "get", fake_get)

        with pytest.raises(SourceUnavailable, match=message):
            load_metadata_from_url("https://example.com/api.json")

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(
            sources.requests, "get", lambda url, timeout: FakeResponse(status_code=404)
        )

        with pytest.raises(SourceUnavailable, match="HTTP error 404"):
            load_metadata_from_url("https://example.com/api.json")

    def test_invalid_json_response(self, monkeypatch):
        monkeypatch.setattr(
            sources.requests, "get", lambda url, timeout: FakeResponse(invalid_json=True)
        )

        with pytest.raises(SourceUnavailable, match="Invalid JSON response"):
            load_metadata_from_url("https://example.com/api.json")


class TestLoadMetadata:
    def test_file_and_url_are_exclusive(self, tmp_path):
        with pytest.raises(SourceUnavailable, match="both"):
            load_metadata(file_path=tmp_path / "api.json", url="https://example.com")

    def test_defaults_to_nvim(self, monkeypatch):
        monkeypatch.setattr(
            sources, "load_metadata_from_nvim", lambda nvim_path: (nvim_path, DOCUMENT)
        )

        assert load_metadata() == ("nvim", DOCUMENT)

    def test_prefers_file(self, tmp_path):
        path = tmp_path / "api.json"
        path.write_text(json.dumps(DOCUMENT), encoding="utf-8")

        assert load_metadata(file_path=path, nvim_path="unused") == (str(path), DOCUMENT)
