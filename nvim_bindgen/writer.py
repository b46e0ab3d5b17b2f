"""Document writer for generated bindings."""

import os
import stat
import tempfile
from pathlib import Path

from .logging_config import get_logger

logger = get_logger(__name__)


def _target_mode(path: Path) -> int:
    """Permission bits for the written file: the existing file's, else 0o666 minus umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_document(path: str | Path, text: str) -> Path:
    """Write generated source to ``path``, replacing any previous file atomically.

    The text goes to a temporary file in the target directory first and is
    moved into place with :func:`os.replace`. A failed write leaves the
    previous file (if any) untouched and removes the temporary file. The
    permission bits of a replaced file are kept; a new file gets the usual
    0o666 masked by the umask.

    Args:
        path: Destination file.
        text: Complete document text.

    Returns:
        The destination path.

    Raises:
        OSError: If the directory is missing or not writable.
    """
    path = Path(path)
    mode = _target_mode(path)
    fd, temp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
        os.chmod(temp_name, mode)
        os.replace(temp_name, path)
    except BaseException:
        logger.error("Failed to write %s", path)
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise

    logger.info("Wrote %d characters to %s", len(text), path)
    return path
