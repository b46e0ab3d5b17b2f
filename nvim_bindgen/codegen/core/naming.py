"""
Naming utilities for safe code generation.

Converts the snake_case names used by the API metadata into the
camelCase / PascalCase identifiers of the target language and escapes
identifiers that collide with target-language keywords.
"""

from typing import Dict, Iterable, Optional, Set
from enum import Enum


class NamingCase(Enum):
    """Naming case styles the generator can produce."""

    CAMEL_CASE = "camel"  # lineCount
    PASCAL_CASE = "pascal"  # LineCount


class NameSanitizer:
    """Handles case conversion and reserved-word escaping."""

    def __init__(
        self,
        reserved_words: Optional[Iterable[str]] = None,
        escape_prefix: str = "",
        escape_suffix: str = "",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Identifiers that may not be emitted verbatim
            escape_prefix: Text put in front of a reserved identifier
            escape_suffix: Text appended to a reserved identifier
        """
        if reserved_words and not (escape_prefix or escape_suffix):
            raise ValueError("Reserved words need an escape prefix or suffix")

        self.reserved_words: Set[str] = set(reserved_words or ())
        self.escape_prefix = escape_prefix
        self.escape_suffix = escape_suffix
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(
        self, name: str, target_case: NamingCase = NamingCase.PASCAL_CASE
    ) -> str:
        """
        Convert a wire-format name into a safe target identifier.

        Args:
            name: Original snake_case name
            target_case: Desired case style

        Returns:
            Converted and escaped identifier
        """
        cache_key = f"{name}_{target_case.value}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = self.to_camel_or_pascal(
            name, target_case == NamingCase.PASCAL_CASE
        )
        final_name = self.escape_if_reserved(converted)

        self._name_cache[cache_key] = final_name
        return final_name

    @staticmethod
    def to_camel_or_pascal(identifier: str, capitalize_first: bool) -> str:
        """
        Join underscore-separated segments into camelCase or PascalCase.

        Each segment keeps its first character upper-cased and the rest
        lower-cased. Empty segments (from doubled or edge underscores) are
        dropped.

        Args:
            identifier: snake_case identifier
            capitalize_first: PascalCase when True, camelCase otherwise

        Returns:
            Converted identifier
        """
        parts = [part for part in identifier.split("_") if part]
        words = [part[0].upper() + part[1:].lower() for part in parts]

        if words and not capitalize_first:
            words[0] = words[0][0].lower() + words[0][1:]

        return "".join(words)

    def escape_if_reserved(self, identifier: str) -> str:
        """Return the identifier decorated when it is a reserved word."""
        if identifier in self.reserved_words:
            return f"{self.escape_prefix}{identifier}{self.escape_suffix}"
        return identifier

    def is_reserved(self, identifier: str) -> bool:
        """Check whether an identifier collides with a reserved word."""
        return identifier in self.reserved_words


def to_pascal_case(name: str) -> str:
    """Convert snake_case to PascalCase without escaping."""
    return NameSanitizer.to_camel_or_pascal(name, True)


def to_camel_case(name: str) -> str:
    """Convert snake_case to camelCase without escaping."""
    return NameSanitizer.to_camel_or_pascal(name, False)
