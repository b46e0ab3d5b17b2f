"""
Registry of binding targets.

Maps target-language names and their aliases to CodeGenerator classes and
builds configured generator instances for them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from .core.config import ConfigError, GeneratorConfig, load_config
from .core.generator import CodeGenerator

ConfigSource = Union[GeneratorConfig, Dict[str, Any], str, Path, None]


class RegistryError(Exception):
    """Unknown target language, conflicting alias or unusable configuration."""

    pass


@dataclass
class TargetRegistration:
    """A registered binding target."""

    language: str
    generator_class: Type[CodeGenerator]
    aliases: List[str] = field(default_factory=list)


class GeneratorRegistry:
    """Binding targets by language name and alias."""

    def __init__(self):
        self._targets: Dict[str, TargetRegistration] = {}
        # Every accepted spelling (primary names included) -> primary name
        self._names: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator class for a target language.

        Args:
            language: Primary language name (e.g., 'csharp')
            generator_class: CodeGenerator subclass producing the bindings
            aliases: Other names accepted for this language
            replace: Overwrite an existing registration instead of keeping it

        Raises:
            RegistryError: If the class is not a CodeGenerator or an alias
                already belongs to another language
        """
        if not (isinstance(generator_class, type) and issubclass(generator_class, CodeGenerator)):
            raise RegistryError(
                f"{generator_class!r} is not a CodeGenerator subclass"
            )

        primary = language.lower()
        if primary in self._targets and not replace:
            return

        alias_keys = sorted({alias.lower() for alias in aliases or []} - {primary})
        if replace and primary in self._targets:
            self.unregister(primary)
        elif not replace:
            for alias in alias_keys:
                if alias in self._targets:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing primary language"
                    )
                owner = self._names.get(alias, primary)
                if owner != primary:
                    raise RegistryError(f"Alias '{alias}' already points to '{owner}'")

        self._targets[primary] = TargetRegistration(primary, generator_class, alias_keys)
        self._names[primary] = primary
        for alias in alias_keys:
            self._names[alias] = primary

    def unregister(self, language: str):
        """Remove a target language together with its aliases."""
        primary = self._names.get(language.lower())
        if primary is None:
            return

        del self._targets[primary]
        self._names = {
            name: target for name, target in self._names.items() if target != primary
        }

    def resolve(self, language: str) -> str:
        """
        Map a language name or alias to its primary name.

        Raises:
            RegistryError: If nothing is registered under that name
        """
        try:
            return self._names[language.lower()]
        except KeyError:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            ) from None

    def get_generator_class(self, language: str) -> Type[CodeGenerator]:
        """Generator class registered for a language name or alias."""
        return self._targets[self.resolve(language)].generator_class

    def create_generator(self, language: str, config: ConfigSource = None) -> CodeGenerator:
        """
        Build a configured generator.

        Args:
            language: Language name or alias
            config: GeneratorConfig used as is, a dict of overrides, or the
                path of a JSON configuration file; None for the defaults

        Raises:
            RegistryError: If the language is unknown or the configuration
                cannot be loaded
        """
        primary = self.resolve(language)

        if config is not None and not isinstance(config, (GeneratorConfig, dict, str, Path)):
            raise RegistryError(f"Invalid config type: {type(config)}")

        if isinstance(config, GeneratorConfig):
            final_config = config
        else:
            try:
                if isinstance(config, (str, Path)):
                    final_config = load_config(primary, config_file=config)
                else:
                    final_config = load_config(primary, custom_config=config)
            except ConfigError as e:
                raise RegistryError(f"Failed to create {language} generator: {e}") from e

        return self._targets[primary].generator_class(final_config)

    def list_languages(self) -> List[str]:
        """Primary names of all registered languages, sorted."""
        return sorted(self._targets)

    def get_aliases_for_language(self, language: str) -> List[str]:
        """Aliases of a registered language (empty for unknown names)."""
        primary = self._names.get(language.lower())
        if primary is None:
            return []
        return list(self._targets[primary].aliases)

    def is_supported(self, language: str) -> bool:
        """Check whether a name or alias is registered."""
        return language.lower() in self._names

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """
        Describe a registered language for listings.

        Raises:
            RegistryError: If the language is unknown
        """
        registration = self._targets[self.resolve(language)]
        generator = registration.generator_class(load_config(registration.language))

        return {
            "name": generator.language_name,
            "class": registration.generator_class.__name__,
            "file_extension": generator.file_extension,
            "aliases": list(registration.aliases),
            "module": registration.generator_class.__module__,
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Shared registry with the built-in targets registered on first use."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _register_builtin_targets(_global_registry)
    return _global_registry


def _register_builtin_targets(registry: GeneratorRegistry):
    from .languages.csharp import CSharpGenerator

    registry.register("csharp", CSharpGenerator, aliases=["cs", "c#"])


def get_generator(language: str, config: ConfigSource = None) -> CodeGenerator:
    """Configured generator from the shared registry."""
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)
