"""
Command-line interface for nvim_bindgen.

Usage:
  nvim-bindgen generate NvimAPI.generated.cs
  nvim-bindgen generate --metadata api-info.msgpack --namespace My.Client out.cs
  nvim-bindgen --list-languages
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .codegen import (
    ConfigError,
    GeneratorConfig,
    RegistryError,
    generate_from_metadata,
    get_language_info,
    is_language_supported,
    list_supported_languages,
    load_config,
)
from .codegen.core.config import get_config_manager
from .logging_config import get_logger, setup_logging
from .sources import SourceUnavailable, load_metadata
from .writer import write_document

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the ``generate`` subcommand."""
    parser = argparse.ArgumentParser(
        prog="nvim-bindgen",
        description="Generate typed Neovim msgpack-RPC client bindings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nvim-bindgen generate NvimAPI.generated.cs
  nvim-bindgen generate --nvim /opt/nvim/bin/nvim out.cs
  nvim-bindgen generate --metadata api-info.json --class-name Api out.cs
  nvim-bindgen --list-languages
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )

    subparsers = parser.add_subparsers(dest="command")
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the client bindings source file",
        description="Read Neovim API metadata and write the generated bindings",
    )
    generate_parser.add_argument("output", metavar="OUTPUT", help="File to write")

    # Input options (mutually exclusive)
    input_group = generate_parser.add_mutually_exclusive_group()
    input_group.add_argument(
        "--nvim",
        metavar="PATH",
        default="nvim",
        help="Neovim executable queried with --api-info (default: nvim)",
    )
    input_group.add_argument(
        "--metadata",
        metavar="FILE",
        help="Read a saved metadata dump (.json, otherwise msgpack)",
    )
    input_group.add_argument("--url", help="Fetch a JSON metadata dump from a URL")

    generate_parser.add_argument(
        "--language",
        "-l",
        default="csharp",
        help="Target language (default: csharp)",
    )
    generate_parser.add_argument(
        "--config", metavar="FILE", help="JSON configuration file"
    )
    generate_parser.add_argument("--namespace", help="Namespace of the generated class")
    generate_parser.add_argument("--class-name", help="Name of the generated class")
    generate_parser.add_argument(
        "--oldest-api-level",
        type=int,
        metavar="LEVEL",
        help="Skip entries deprecated before this API level",
    )
    generate_parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't write the header comment",
    )
    generate_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show progress logs and generation result metadata",
    )
    generate_parser.add_argument(
        "--debug", action="store_true", help="Show debug logs"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point of the ``nvim-bindgen`` command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.list_languages:
        return _list_languages()

    if args.command != "generate":
        parser.print_help()
        return 1

    if args.debug:
        setup_logging(logging.DEBUG, debug=True)
    elif args.verbose:
        setup_logging(logging.INFO)
    else:
        setup_logging(logging.WARNING)
    logger.debug("Parsed arguments: %s", args)

    try:
        return _handle_generate(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _list_languages() -> int:
    """List supported languages with details."""
    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in list_supported_languages():
        info = get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(language, info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    return 0


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the config file and command-line overrides."""
    overrides: Dict[str, Any] = {}

    if args.namespace:
        overrides["namespace"] = args.namespace
    if args.class_name:
        overrides["class_name"] = args.class_name
    if args.oldest_api_level is not None:
        overrides["oldest_supported_api_level"] = args.oldest_api_level
    if args.no_comments:
        overrides["add_comments"] = False

    try:
        language = get_language_info(args.language)["name"]
        config = load_config(language, custom_config=overrides, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    for warning in get_config_manager().validate_config(config):
        console.print(f"[yellow]⚠️  {warning}[/yellow]")

    return config


def _handle_generate(args: argparse.Namespace) -> int:
    """Load metadata, generate the bindings and write the output file."""
    if not is_language_supported(args.language):
        console.print(f"[red]✗ Unsupported language '{args.language}'[/red]")
        console.print(
            f"[dim]Supported languages: {', '.join(list_supported_languages())}[/dim]"
        )
        return 1

    config = _build_config(args)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        load_task = progress.add_task("[cyan]Loading API metadata...", total=None)
        try:
            source, raw = load_metadata(
                file_path=args.metadata, url=args.url, nvim_path=args.nvim
            )
        except SourceUnavailable as e:
            raise CLIError(f"Failed to load API metadata: {e}") from e
        progress.remove_task(load_task)

        gen_task = progress.add_task(
            f"[green]Generating {args.language} bindings...", total=None
        )
        try:
            result = generate_from_metadata(raw, args.language, config)
        except RegistryError as e:
            raise CLIError(str(e)) from e
        progress.remove_task(gen_task)

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    output_path = Path(args.output)
    try:
        write_document(output_path, result.code)
    except OSError as e:
        raise CLIError(f"Failed to write {output_path}: {e}") from e

    console.print(
        f"[green]✓[/green] Generated {args.language} bindings from {source} "
        f"saved to [cyan]{output_path}[/cyan]"
    )

    if args.verbose and result.metadata:
        _print_metadata(result.metadata)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    return 0


def _print_metadata(metadata: Dict[str, Any]) -> None:
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )

    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


if __name__ == "__main__":
    raise SystemExit(main())
