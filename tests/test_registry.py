"""Tests for the generator registry."""

import json

import pytest

from nvim_bindgen.codegen import (
    GeneratorConfig,
    get_generator,
    get_language_info,
    is_language_supported,
    list_supported_languages,
)
from nvim_bindgen.codegen.core.generator import CodeGenerator
from nvim_bindgen.codegen.languages.csharp import CSharpGenerator
from nvim_bindgen.codegen.registry import GeneratorRegistry, RegistryError


class StubGenerator(CodeGenerator):
    @property
    def language_name(self):
        return "stub"

    @property
    def file_extension(self):
        return ".stub"

    def generate(self, metadata):
        return ""


class TestGeneratorRegistry:
    def test_register_and_resolve_aliases(self):
        registry = GeneratorRegistry()
        registry.register("stub", StubGenerator, aliases=["st", "STUB2"])

        assert registry.get_generator_class("stub") is StubGenerator
        assert registry.get_generator_class("ST") is StubGenerator
        assert registry.get_generator_class("stub2") is StubGenerator
        assert registry.get_aliases_for_language("stub") == ["st", "stub2"]
        assert registry.is_supported("St")

    def test_rejects_non_generators(self):
        registry = GeneratorRegistry()

        with pytest.raises(RegistryError):
            registry.register("bad", dict)

    def test_alias_conflicts(self):
        registry = GeneratorRegistry()
        registry.register("stub", StubGenerator, aliases=["s"])

        with pytest.raises(RegistryError, match="already points to"):
            registry.register("other", CSharpGenerator, aliases=["s"])

        with pytest.raises(RegistryError, match="conflicts"):
            registry.register("third", CSharpGenerator, aliases=["stub"])

    def test_existing_registration_is_kept_unless_replaced(self):
        registry = GeneratorRegistry()
        registry.register("stub", StubGenerator)
        registry.register("stub", CSharpGenerator)

        assert registry.get_generator_class("stub") is StubGenerator

        registry.register("stub", CSharpGenerator, replace=True)
        assert registry.get_generator_class("stub") is CSharpGenerator

    def test_unregister_removes_aliases(self):
        registry = GeneratorRegistry()
        registry.register("stub", StubGenerator, aliases=["st"])
        registry.unregister("stub")

        assert not registry.is_supported("stub")
        assert not registry.is_supported("st")
        assert registry.list_languages() == []

    def test_unknown_language(self):
        registry = GeneratorRegistry()
        registry.register("stub", StubGenerator)

        with pytest.raises(RegistryError, match="Available: stub"):
            registry.create_generator("cobol")

    def test_create_generator_from_config_types(self, tmp_path):
        registry = GeneratorRegistry()
        registry.register("csharp", CSharpGenerator, aliases=["cs"])
        config_file = tmp_path / "bindgen.json"
        config_file.write_text(json.dumps({"class_name": "FromFile"}), encoding="utf-8")

        assert registry.create_generator("cs").config.class_name == "NvimAPI"
        assert (
            registry.create_generator("cs", {"class_name": "FromDict"}).config.class_name
            == "FromDict"
        )
        assert (
            registry.create_generator("cs", str(config_file)).config.class_name
            == "FromFile"
        )
        config = GeneratorConfig(class_name="FromObject")
        assert registry.create_generator("cs", config).config is config

    def test_bad_config_becomes_registry_error(self, tmp_path):
        registry = GeneratorRegistry()
        registry.register("csharp", CSharpGenerator)

        with pytest.raises(RegistryError, match="Failed to create"):
            registry.create_generator("csharp", tmp_path / "missing.json")

        with pytest.raises(RegistryError, match="Invalid config type"):
            registry.create_generator("csharp", 42)


class TestGlobalRegistry:
    def test_csharp_is_registered(self):
        assert list_supported_languages() == ["csharp"]
        assert is_language_supported("cs")
        assert is_language_supported("c#")
        assert not is_language_supported("go")

    def test_get_generator(self):
        generator = get_generator("C#")

        assert isinstance(generator, CSharpGenerator)

    def test_language_info(self):
        info = get_language_info("cs")

        assert info == {
            "name": "csharp",
            "class": "CSharpGenerator",
            "file_extension": ".cs",
            "aliases": ["c#", "cs"],
            "module": "nvim_bindgen.codegen.languages.csharp.generator",
        }
