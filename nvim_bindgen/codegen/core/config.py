"""
Generator settings.

Settings are layered: built-in defaults for the target language, then an
optional JSON settings file, then explicit overrides. Keys that are not
GeneratorConfig fields end up in ``custom`` and are read by the language
generator (``int_type``, ``float_type``).
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, fields, asdict

from ...logging_config import get_logger

logger = get_logger(__name__)

# Entries deprecated before this API level are not exposed
OLDEST_SUPPORTED_API_LEVEL = 4

LANGUAGE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "csharp": {
        "namespace": "NvimClient.API",
        "class_name": "NvimAPI",
        "wrapper_prefix": "Nvim",
        "event_args_suffix": "EventArgs",
        "add_comments": True,
        "custom": {"int_type": "long", "float_type": "double"},
    },
}


class ConfigError(Exception):
    """Settings file missing, unreadable or malformed."""

    pass


@dataclass
class GeneratorConfig:
    """Settings shared by every binding generator."""

    namespace: str = "NvimClient.API"
    class_name: str = "NvimAPI"

    oldest_supported_api_level: int = OLDEST_SUPPORTED_API_LEVEL
    top_level_prefix: str = "nvim_"

    wrapper_prefix: str = "Nvim"
    event_args_suffix: str = "EventArgs"

    add_comments: bool = True

    custom: Dict[str, Any] = field(default_factory=dict)


def _layer(settings: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key == "custom" and isinstance(value, dict):
            settings["custom"].update(value)
        else:
            settings[key] = value


def read_settings_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a JSON settings file.

    Raises:
        ConfigError: If the file is missing, not ``.json``, unparsable or
            does not hold a JSON object
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")
    if path.suffix.lower() != ".json":
        raise ConfigError(f"Configuration file must be JSON: {path}")

    try:
        settings = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

    if not isinstance(settings, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {path}")

    logger.debug("Loaded configuration file %s", path)
    return settings


def config_from_dict(settings: Dict[str, Any]) -> GeneratorConfig:
    """Build a GeneratorConfig, moving unknown keys into ``custom``."""
    field_names = {f.name for f in fields(GeneratorConfig)}
    known = {k: v for k, v in settings.items() if k in field_names}
    extra = {k: v for k, v in settings.items() if k not in field_names}

    if extra:
        known["custom"] = {**known.get("custom", {}), **extra}

    return GeneratorConfig(**known)


class ConfigManager:
    """Per-language defaults plus file and override layering."""

    def __init__(self):
        self._configs: Dict[str, Dict[str, Any]] = {
            language: dict(defaults) for language, defaults in LANGUAGE_DEFAULTS.items()
        }

    def get_config(
        self,
        language: str = "csharp",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Resolve the settings for a language.

        Args:
            language: Target language; unknown names get the GeneratorConfig
                defaults
            custom_config: Overrides applied last
            config_file: JSON settings file applied before the overrides

        Raises:
            ConfigError: If the settings file cannot be used
        """
        defaults = self._configs.get(language, {})
        settings = {**defaults, "custom": dict(defaults.get("custom", {}))}

        if config_file:
            _layer(settings, read_settings_file(config_file))
        if custom_config:
            _layer(settings, custom_config)

        return config_from_dict(settings)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Write settings as a flat JSON object that get_config can read back."""
        path = Path(output_path)
        settings = asdict(config)
        settings.update(settings.pop("custom"))

        try:
            path.write_text(
                json.dumps(settings, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> list[str]:
        return list(self._configs)

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Check settings that would produce uncompilable or empty output.

        Returns:
            Human-readable problems; empty when the settings look usable
        """
        problems = []

        if not all(part.isidentifier() for part in config.namespace.split(".")):
            problems.append(f"Invalid namespace: {config.namespace}")

        if not config.class_name.isidentifier():
            problems.append(f"Invalid class name: {config.class_name}")

        if not config.top_level_prefix:
            problems.append("Empty top_level_prefix: every function name will match")

        if config.oldest_supported_api_level < 0:
            problems.append(
                f"Negative oldest_supported_api_level: {config.oldest_supported_api_level}"
            )

        return problems


_config_manager = None


def get_config_manager() -> ConfigManager:
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "csharp",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """Resolve settings through the shared ConfigManager."""
    return get_config_manager().get_config(language, custom_config, config_file)
