"""
Exceptions raised while turning API metadata into bindings.

Every error here is fatal for the run. Nothing is skipped or retried.
"""

from typing import Optional, Sequence


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class SchemaViolation(GeneratorError):
    """The metadata document does not match the shape the generator expects."""

    def __init__(self, message: str, entry: Optional[str] = None):
        super().__init__(message)
        self.entry = entry


class AmbiguousReceiver(GeneratorError):
    """A method-flagged function matches zero or several extension type prefixes."""

    def __init__(self, entry: str, candidates: Sequence[str]):
        if candidates:
            detail = f"matches several extension types: {', '.join(candidates)}"
        else:
            detail = "matches no extension type prefix"
        super().__init__(f"Method {entry} {detail}")
        self.entry = entry
        self.candidates = list(candidates)
