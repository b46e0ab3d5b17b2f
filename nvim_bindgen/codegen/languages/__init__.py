"""
Language-specific binding generators.

Each subpackage provides a CodeGenerator for one target language.
"""

from .csharp import CSharpGenerator, create_csharp_generator

__all__ = ["CSharpGenerator", "create_csharp_generator"]
