"""
Generator contract shared by every binding target.

A generator turns loaded APIMetadata into one source document. The
``generate_code`` driver wraps a run: it collects warnings, normalizes the
output and reports failures as a GenerationResult instead of raising.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
from pathlib import Path

from ...logging_config import get_logger
from .config import GeneratorConfig
from .errors import GeneratorError
from .schema import APIMetadata, filter_deprecated
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)


class CodeGenerator(ABC):
    """Base class for binding generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self._template_engine: Optional[TemplateEngine] = None

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Primary registry name of the target language (e.g. 'csharp')."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Extension of the generated document, dot included."""

    def get_template_directory(self) -> Optional[Path]:
        """Directory holding this target's Jinja2 templates, if any."""
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        if self._template_engine is None:
            self._template_engine = create_template_engine(self.get_template_directory())
        return self._template_engine

    @abstractmethod
    def generate(self, metadata: APIMetadata) -> str:
        """
        Produce the binding document for ``metadata``.

        Raises:
            GeneratorError: If the metadata cannot be expressed as bindings
        """

    def exposed_functions(self, metadata: APIMetadata):
        """Functions that survive the configured deprecation cutoff."""
        return filter_deprecated(metadata.functions, self.config.oldest_supported_api_level)

    def exposed_ui_events(self, metadata: APIMetadata):
        return filter_deprecated(metadata.ui_events, self.config.oldest_supported_api_level)

    def validate_metadata(self, metadata: APIMetadata) -> List[str]:
        """
        Non-fatal oddities in the document. Subclasses extend the list.

        Returns:
            Warning messages, empty when nothing looks off
        """
        warnings = []

        if not metadata.functions:
            warnings.append("API metadata contains no functions")
        if not metadata.types:
            warnings.append("API metadata defines no extension types")

        methods = [f for f in self.exposed_functions(metadata) if f.method]
        for ext_type in metadata.types.values():
            if not any(m.name.startswith(ext_type.prefix) for m in methods):
                warnings.append(f"Extension type {ext_type.name} has no methods")

        return warnings

    def format_code(self, code: str) -> str:
        """Strip trailing whitespace and collapse runs of blank lines."""
        kept = []
        for line in code.split("\n"):
            line = line.rstrip()
            if line or (kept and kept[-1]):
                kept.append(line)

        return "\n".join(kept).strip("\n") + "\n"

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        return self.template_engine.template_exists(template_name)


@dataclass
class GenerationResult:
    """Outcome of one generation run. Failed runs carry no code."""

    code: str
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    error_message: Optional[str] = None
    exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Optional[Exception] = None) -> "GenerationResult":
        return cls(code="", success=False, error_message=message, exception=exception)


def generate_code(generator: CodeGenerator, metadata: APIMetadata) -> GenerationResult:
    """
    Run ``generator`` over ``metadata``.

    Returns:
        GenerationResult with the formatted code, warnings and run counts,
        or a failed result if the generator or a template raised
    """
    try:
        warnings = generator.validate_metadata(metadata)
        code = generator.format_code(generator.generate(metadata))
    except (GeneratorError, TemplateError) as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    for warning in warnings:
        logger.warning(warning)

    functions = generator.exposed_functions(metadata)
    ui_events = generator.exposed_ui_events(metadata)
    method_count = sum(1 for f in functions if f.method)

    counts = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "function_count": len(functions) - method_count,
        "method_count": method_count,
        "ui_event_count": len(ui_events),
        "type_count": len(metadata.types),
        "deprecated_skipped": (
            len(metadata.functions) - len(functions)
            + len(metadata.ui_events) - len(ui_events)
        ),
        "api_level": metadata.version.api_level if metadata.version else None,
    }

    logger.info(
        "Generated %s bindings: %d functions, %d methods, %d UI events",
        counts["language"],
        counts["function_count"],
        counts["method_count"],
        counts["ui_event_count"],
    )

    return GenerationResult(code, warnings, counts)
