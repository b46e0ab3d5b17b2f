"""Metadata sources for the binding generator.

The API-metadata document can come from a running ``nvim --api-info``
(msgpack on stdout), a local dump (JSON or msgpack) or a URL serving a
JSON dump. Every loader returns a ``(source description, document)``
tuple and raises :class:`SourceUnavailable` on failure.
"""

import json
import subprocess
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import msgpack
import requests

from .logging_config import get_logger

logger = get_logger(__name__)

JSON_SUFFIXES = {".json"}
MSGPACK_SUFFIXES = {".msgpack", ".mpack", ".bin"}


class SourceUnavailable(Exception):
    """The metadata source could not be reached or returned an undecodable document."""

    pass


def decode_msgpack(payload: bytes, source: str) -> Any:
    """Decode a msgpack-encoded metadata document.

    Args:
        payload: Raw msgpack bytes.
        source: Description of where the bytes came from, for errors.

    Raises:
        SourceUnavailable: If the payload is not a single msgpack document.
    """
    try:
        return msgpack.unpackb(payload, raw=False, strict_map_key=False)
    except (ValueError, msgpack.exceptions.UnpackException) as e:
        logger.error("Invalid msgpack from %s: %s", source, e)
        raise SourceUnavailable(f"Invalid msgpack from {source}: {e}") from e


def load_metadata_from_nvim(nvim_path: str = "nvim") -> tuple[str, Any]:
    """Ask a Neovim executable for its API metadata.

    Runs ``nvim --api-info`` and decodes the msgpack it writes to stdout.
    The call blocks until the process exits.

    Args:
        nvim_path: Name or path of the Neovim executable.

    Returns:
        Tuple of (source description, decoded document).

    Raises:
        SourceUnavailable: If nvim cannot be started, fails, or prints garbage.
    """
    command = [nvim_path, "--api-info"]
    logger.debug("Running %s", " ".join(command))

    try:
        completed = subprocess.run(command, capture_output=True, check=True)
    except FileNotFoundError as e:
        logger.error("Neovim executable not found: %s", nvim_path)
        raise SourceUnavailable(f"Neovim executable not found: {nvim_path}") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
        logger.error("%s exited with status %d: %s", nvim_path, e.returncode, stderr)
        raise SourceUnavailable(
            f"{nvim_path} --api-info exited with status {e.returncode}"
        ) from e
    except OSError as e:
        logger.error("Could not start %s: %s", nvim_path, e)
        raise SourceUnavailable(f"Could not start {nvim_path}: {e}") from e

    source = f"{nvim_path} --api-info"
    data = decode_msgpack(completed.stdout, source)
    logger.info("Loaded API metadata from %s", source)
    return source, data


def load_metadata_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load an API-metadata dump from a local file.

    ``.json`` files are parsed as JSON; anything else is decoded as msgpack,
    which is what ``nvim --api-info > file`` produces.

    Args:
        file_path: Path to the dump.

    Returns:
        Tuple of (source description, decoded document).

    Raises:
        SourceUnavailable: If the file is missing, unreadable or undecodable.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load API metadata from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise SourceUnavailable(f"File not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in JSON_SUFFIXES | MSGPACK_SUFFIXES:
        logger.warning("Unknown metadata file extension %r, trying msgpack", suffix)

    try:
        payload = file_path.read_bytes()
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e, exc_info=True)
        raise SourceUnavailable(f"Error reading file {file_path}: {e}") from e

    if suffix in JSON_SUFFIXES:
        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Invalid JSON in file %s: %s", file_path, e)
            raise SourceUnavailable(f"Invalid JSON in file {file_path}: {e}") from e
    else:
        data = decode_msgpack(payload, str(file_path))

    logger.info("Loaded API metadata from %s", file_path)
    return str(file_path), data


def load_metadata_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a JSON API-metadata dump from a URL.

    Args:
        url: URL to fetch the dump from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, decoded document).

    Raises:
        SourceUnavailable: If the URL is invalid, the request fails, or the
            response isn't valid JSON.
    """
    logger.debug("Attempting to load API metadata from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise SourceUnavailable(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise SourceUnavailable(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise SourceUnavailable(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise SourceUnavailable(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.JSONDecodeError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise SourceUnavailable(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e, exc_info=True)
        raise SourceUnavailable(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise SourceUnavailable(f"Invalid JSON response from URL {url}: {e}") from e

    logger.info("Loaded API metadata from %s", url)
    return url, data


def load_metadata(
    file_path: str | Path | None = None,
    url: str | None = None,
    nvim_path: str = "nvim",
    timeout: int = 30,
) -> tuple[str, Any]:
    """Load API metadata from a file, a URL, or a Neovim executable.

    Args:
        file_path: Local dump (mutually exclusive with url).
        url: URL of a JSON dump (mutually exclusive with file_path).
        nvim_path: Executable queried when neither file_path nor url is given.
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, decoded document).

    Raises:
        SourceUnavailable: If both file_path and url are given, or loading fails.
    """
    if file_path and url:
        logger.error("Both file_path and url provided")
        raise SourceUnavailable("Cannot specify both file_path and url")

    if file_path:
        return load_metadata_from_file(file_path)
    if url:
        return load_metadata_from_url(url, timeout)
    return load_metadata_from_nvim(nvim_path)
