"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .errors import AmbiguousReceiver, GeneratorError, SchemaViolation
from .generator import CodeGenerator, GenerationResult, generate_code
from .schema import (
    APIMetadata,
    APIVersion,
    ExtensionTypeDef,
    FunctionDef,
    Parameter,
    Primitive,
    UIEventDef,
    WireKind,
    WireType,
    filter_deprecated,
    is_deprecated,
    load_api_metadata,
    parse_wire_type,
)
from .naming import NameSanitizer, NamingCase, to_camel_case, to_pascal_case
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    # Errors
    "GeneratorError",
    "SchemaViolation",
    "AmbiguousReceiver",
    # Schema model
    "APIMetadata",
    "APIVersion",
    "ExtensionTypeDef",
    "FunctionDef",
    "Parameter",
    "Primitive",
    "UIEventDef",
    "WireKind",
    "WireType",
    "filter_deprecated",
    "is_deprecated",
    "load_api_metadata",
    "parse_wire_type",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "to_camel_case",
    "to_pascal_case",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
