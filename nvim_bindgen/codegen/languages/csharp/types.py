"""
C#-specific type system for code generation.

Maps wire-level type descriptors to C# type expressions.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from ...core.errors import SchemaViolation
from ...core.naming import to_pascal_case
from ...core.schema import Primitive, WireKind, WireType
from .naming import create_csharp_sanitizer


@dataclass
class CSharpTypeConfig:
    """Configuration for C# type mapping behavior."""

    int_type: str = "long"
    float_type: str = "double"
    bool_type: str = "bool"
    string_type: str = "string"
    binary_type: str = "byte[]"
    object_type: str = "object"
    void_type: str = "void"

    # Containers
    map_type: str = "IDictionary"
    task_type: str = "Task"

    # Wrapper classes are named <wrapper_prefix><PascalCase(type name)>
    wrapper_prefix: str = "Nvim"

    # Custom primitive overrides
    type_overrides: Dict[Primitive, str] = field(default_factory=dict)

    def primitive_names(self) -> Dict[Primitive, str]:
        """Get the C# name of every primitive, overrides applied."""
        names = {
            Primitive.INTEGER: self.int_type,
            Primitive.FLOAT: self.float_type,
            Primitive.BOOLEAN: self.bool_type,
            Primitive.STRING: self.string_type,
            Primitive.BINARY: self.binary_type,
            Primitive.OBJECT: self.object_type,
            Primitive.VOID: self.void_type,
        }
        names.update(self.type_overrides)
        return names


class CSharpTypeMapper:
    """
    Maps wire type descriptors to C# type expressions.

    The mapping is total over the known wire kinds and deterministic. An
    extension type name that the document does not define is a schema
    violation rather than a silent fallback to ``object``.
    """

    def __init__(
        self,
        config: Optional[CSharpTypeConfig] = None,
        extension_types: Iterable[str] = (),
    ):
        """
        Initialize with type configuration.

        Args:
            config: Type configuration
            extension_types: Names of the extension types in the document
        """
        self.config = config or CSharpTypeConfig()
        self.extension_types = set(extension_types)
        self._primitive_types = self.config.primitive_names()
        self._sanitizer = create_csharp_sanitizer()

    def wrapper_name(self, type_name: str) -> str:
        """
        Name of the generated wrapper class for an extension type.

        Both the class declaration and every reference to it in a signature
        use this name, keyword escaping included.
        """
        return self._sanitizer.escape_if_reserved(
            f"{self.config.wrapper_prefix}{to_pascal_case(type_name)}"
        )

    def map_type(self, wire_type: WireType, context: Optional[str] = None) -> str:
        """
        Map a wire type to a C# type expression.

        Args:
            wire_type: Descriptor to map
            context: Name of the entry being generated, for error messages

        Returns:
            C# type expression

        Raises:
            SchemaViolation: For unknown extension types or descriptor kinds
        """
        if wire_type.kind == WireKind.PRIMITIVE:
            if wire_type.primitive not in self._primitive_types:
                raise SchemaViolation(
                    f"Unrecognized primitive {wire_type.primitive} in {context}",
                    context,
                )
            return self._primitive_types[wire_type.primitive]

        elif wire_type.kind == WireKind.ARRAY:
            if wire_type.element is None:
                return f"{self.config.object_type}[]"
            return f"{self.map_type(wire_type.element, context)}[]"

        elif wire_type.kind == WireKind.MAP:
            key_type = self.map_type(wire_type.key, context)
            value_type = self.map_type(wire_type.value, context)
            return f"{self.config.map_type}<{key_type}, {value_type}>"

        elif wire_type.kind == WireKind.EXTENSION:
            if wire_type.name not in self.extension_types:
                raise SchemaViolation(
                    f"Unknown extension type '{wire_type.name}' in {context}",
                    context,
                )
            return self.wrapper_name(wire_type.name)

        raise SchemaViolation(
            f"Unrecognized wire type kind {wire_type.kind} in {context}", context
        )

    def task_type(self, wire_type: WireType, context: Optional[str] = None) -> str:
        """Asynchronous result type: ``Task<T>``, or bare ``Task`` for void."""
        if wire_type.is_void:
            return self.config.task_type
        return f"{self.config.task_type}<{self.map_type(wire_type, context)}>"
