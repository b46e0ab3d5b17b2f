"""
C# binding generator module.

Generates the partial NvimAPI client class for a msgpack-RPC C# client.
"""

from .generator import CSharpGenerator, create_csharp_generator
from .naming import CSHARP_RESERVED_WORDS, create_csharp_sanitizer
from .types import CSharpTypeConfig, CSharpTypeMapper

__all__ = [
    "CSharpGenerator",
    "CSharpTypeConfig",
    "CSharpTypeMapper",
    "CSHARP_RESERVED_WORDS",
    "create_csharp_generator",
    "create_csharp_sanitizer",
]
