"""
nvim_bindgen code generation module.

Generates typed client bindings from Neovim API metadata.
"""

from typing import Any, Dict, Optional, Union

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    is_language_supported,
    list_supported_languages,
)
from .core.errors import AmbiguousReceiver, GeneratorError, SchemaViolation
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.schema import APIMetadata, filter_deprecated, load_api_metadata
from .core.config import GeneratorConfig, ConfigManager, ConfigError, load_config
from ..logging_config import get_logger

logger = get_logger(__name__)


def generate_from_metadata(
    metadata: Union[APIMetadata, Dict[str, Any]],
    language: str = "csharp",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str]] = None,
) -> GenerationResult:
    """
    Generate bindings from an API-metadata document.

    Args:
        metadata: Decoded metadata document, or an already loaded APIMetadata
        language: Target language name or alias
        config: Generator configuration object, dict or path

    Returns:
        GenerationResult with generated code; failed results carry no code

    Raises:
        RegistryError: If the language or configuration is unusable
    """
    generator = get_generator(language, config)

    if not isinstance(metadata, APIMetadata):
        try:
            metadata = load_api_metadata(metadata)
        except SchemaViolation as e:
            logger.error("Invalid API metadata: %s", e)
            return GenerationResult.error(f"Invalid API metadata: {e}", exception=e)

    return generate_code(generator, metadata)


__version__ = "0.1.0"

__all__ = [
    "APIMetadata",
    "AmbiguousReceiver",
    "CodeGenerator",
    "ConfigError",
    "ConfigManager",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "GeneratorRegistry",
    "RegistryError",
    "SchemaViolation",
    "filter_deprecated",
    "generate_code",
    "generate_from_metadata",
    "get_generator",
    "get_language_info",
    "get_registry",
    "is_language_supported",
    "list_supported_languages",
    "load_api_metadata",
    "load_config",
]
