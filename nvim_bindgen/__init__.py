"""
nvim_bindgen - Generate typed Neovim msgpack-RPC client bindings.

Reads the API metadata reported by ``nvim --api-info`` and emits the
request stubs, extension-type wrappers and UI event plumbing of a client
class.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .codegen import (
    APIMetadata,
    AmbiguousReceiver,
    GenerationResult,
    GeneratorConfig,
    GeneratorError,
    SchemaViolation,
    generate_from_metadata,
    list_supported_languages,
    load_api_metadata,
    load_config,
)
from .logging_config import get_logger, setup_logging
from .sources import SourceUnavailable, load_metadata
from .writer import write_document

logger = get_logger(__name__)


def generate(
    output_path: Union[str, Path],
    file_path: Optional[Union[str, Path]] = None,
    url: Optional[str] = None,
    nvim_path: str = "nvim",
    language: str = "csharp",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> GenerationResult:
    """
    Load API metadata, generate bindings and write them to ``output_path``.

    The output file is only touched when generation succeeds.

    Args:
        output_path: Destination of the generated source file
        file_path: Local metadata dump to read instead of running nvim
        url: URL of a JSON metadata dump to read instead of running nvim
        nvim_path: Neovim executable queried when no file or URL is given
        language: Target language name or alias
        config: Generator configuration object, dict or path

    Returns:
        The successful GenerationResult

    Raises:
        SourceUnavailable: If the metadata cannot be obtained
        GeneratorError: If the metadata cannot be turned into bindings
    """
    source, raw = load_metadata(file_path=file_path, url=url, nvim_path=nvim_path)
    logger.info("Generating %s bindings from %s", language, source)

    result = generate_from_metadata(raw, language, config)
    if not result.success:
        if isinstance(result.exception, GeneratorError):
            raise result.exception
        raise GeneratorError(result.error_message) from result.exception

    write_document(output_path, result.code)
    return result


__version__ = "0.1.0"

__all__ = [
    "APIMetadata",
    "AmbiguousReceiver",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "SchemaViolation",
    "SourceUnavailable",
    "generate",
    "generate_from_metadata",
    "get_logger",
    "list_supported_languages",
    "load_api_metadata",
    "load_config",
    "load_metadata",
    "setup_logging",
    "write_document",
]
