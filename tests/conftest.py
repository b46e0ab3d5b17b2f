"""Shared fixtures for nvim_bindgen tests."""

import copy

import pytest

from nvim_bindgen.codegen import load_config
from nvim_bindgen.codegen.languages.csharp import CSharpGenerator

API_METADATA = {
    "version": {
        "major": 0,
        "minor": 9,
        "patch": 5,
        "api_level": 11,
        "api_compatible": 0,
        "api_prerelease": False,
    },
    "functions": [
        {
            "name": "nvim_get_current_line",
            "parameters": [],
            "return_type": "String",
            "method": False,
            "since": 1,
        },
        {
            "name": "nvim_set_current_line",
            "parameters": [["String", "line"]],
            "return_type": "void",
            "method": False,
            "since": 1,
        },
        {
            "name": "nvim_list_bufs",
            "parameters": [],
            "return_type": "ArrayOf(Buffer)",
            "method": False,
            "since": 1,
        },
        {
            "name": "nvim_win_set_height",
            "parameters": [["Window", "window"], ["Integer", "height"]],
            "return_type": "void",
            "method": False,
            "since": 1,
        },
        {
            "name": "nvim_buf_line_count",
            "parameters": [["Buffer", "buffer"]],
            "return_type": "Integer",
            "method": True,
            "since": 1,
        },
        {
            "name": "nvim_buf_get_lines",
            "parameters": [
                ["Buffer", "buffer"],
                ["Integer", "start"],
                ["Integer", "end"],
                ["Boolean", "strict_indexing"],
            ],
            "return_type": "ArrayOf(String)",
            "method": True,
            "since": 1,
        },
        {
            "name": "nvim_win_get_buf",
            "parameters": [["Window", "window"]],
            "return_type": "Buffer",
            "method": True,
            "since": 1,
        },
        {
            "name": "buffer_line_count",
            "parameters": [["Buffer", "buffer"]],
            "return_type": "Integer",
            "method": False,
            "since": 0,
            "deprecated_since": 1,
        },
        {
            "name": "nvim_buf_get_number",
            "parameters": [["Buffer", "buffer"]],
            "return_type": "Integer",
            "method": True,
            "since": 1,
            "deprecated_since": 2,
        },
    ],
    "ui_events": [
        {
            "name": "resize",
            "parameters": [["Integer", "width"], ["Integer", "height"]],
            "since": 3,
        },
        {"name": "flush", "parameters": [], "since": 3},
        {
            "name": "update_menu",
            "parameters": [],
            "since": 3,
            "deprecated_since": 3,
        },
    ],
    "types": {
        "Buffer": {"id": 0, "prefix": "nvim_buf_"},
        "Window": {"id": 1, "prefix": "nvim_win_"},
        "Tabpage": {"id": 2, "prefix": "nvim_tabpage_"},
    },
}


@pytest.fixture
def api_metadata():
    """A small but representative API-metadata document."""
    return copy.deepcopy(API_METADATA)


@pytest.fixture
def empty_metadata():
    """A document with nothing in it."""
    return {"functions": [], "ui_events": [], "types": {}}


@pytest.fixture
def csharp_generator():
    """C# generator with default configuration."""
    return CSharpGenerator(load_config("csharp"))
