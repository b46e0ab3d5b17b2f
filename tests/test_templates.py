"""Tests for the Jinja2 template engine wrapper."""

import pytest

from nvim_bindgen.codegen.core.templates import (
    TemplateError,
    create_template_engine,
    indent_lines,
)


@pytest.fixture
def template_dir(tmp_path):
    def write(name, content):
        (tmp_path / name).write_text(content, encoding="utf-8")
        return create_template_engine(tmp_path)

    return write


def test_indent_lines_skips_blank_lines():
    assert indent_lines("a\n\nb", 2) == "  a\n\n  b"


def test_indent_lines_filter(template_dir):
    engine = template_dir("body.j2", "{{ body|indent_lines(2) }}")

    assert engine.render_template("body.j2", {"body": "a\nb"}) == "  a\n  b"


def test_file_templates(template_dir):
    engine = template_dir("stub.j2", "{% for m in methods %}\n{{ m }};\n{% endfor %}\n")

    assert engine.template_exists("stub.j2")
    assert not engine.template_exists("missing.j2")
    assert engine.render_template("stub.j2", {"methods": ["A", "B"]}) == "A;\nB;\n"


def test_undefined_variables_fail(template_dir):
    engine = template_dir("greeting.j2", "Hello {{ who }}\n")

    with pytest.raises(TemplateError, match="greeting.j2"):
        engine.render_template("greeting.j2", {})


def test_missing_template_fails(tmp_path):
    engine = create_template_engine(tmp_path)

    with pytest.raises(TemplateError, match="missing.j2"):
        engine.render_template("missing.j2", {})


def test_engine_without_directory_has_no_templates():
    engine = create_template_engine()

    assert not engine.template_exists("api.cs.j2")
    with pytest.raises(TemplateError):
        engine.render_template("api.cs.j2", {})


def test_output_is_not_escaped(template_dir):
    engine = template_dir("task.j2", "{{ t }}")

    assert engine.render_template("task.j2", {"t": "Task<string>"}) == "Task<string>"
