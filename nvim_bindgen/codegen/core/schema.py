"""
Core schema representation for code generation.

Converts the decoded API-metadata document (as produced by
``nvim --api-info``) into immutable records that generators can work
with consistently.
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, TypeVar, Union

from .errors import AmbiguousReceiver, SchemaViolation


class WireKind(Enum):
    """Variants of a wire-level type descriptor."""

    PRIMITIVE = "primitive"
    ARRAY = "array"
    MAP = "map"
    EXTENSION = "extension"


class Primitive(Enum):
    """Primitive wire types."""

    INTEGER = "Integer"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    STRING = "String"
    BINARY = "Binary"
    OBJECT = "Object"
    VOID = "void"


@dataclass(frozen=True)
class WireType:
    """Tagged descriptor of a wire-level type."""

    kind: WireKind
    primitive: Optional[Primitive] = None
    name: Optional[str] = None

    # ARRAY
    element: Optional["WireType"] = None
    length: Optional[int] = None

    # MAP
    key: Optional["WireType"] = None
    value: Optional["WireType"] = None

    @classmethod
    def of_primitive(cls, primitive: Primitive) -> "WireType":
        return cls(WireKind.PRIMITIVE, primitive=primitive)

    @classmethod
    def array_of(
        cls, element: Optional["WireType"], length: Optional[int] = None
    ) -> "WireType":
        return cls(WireKind.ARRAY, element=element, length=length)

    @classmethod
    def map_of(cls, key: "WireType", value: "WireType") -> "WireType":
        return cls(WireKind.MAP, key=key, value=value)

    @classmethod
    def extension(cls, name: str) -> "WireType":
        return cls(WireKind.EXTENSION, name=name)

    @property
    def is_void(self) -> bool:
        return self.kind == WireKind.PRIMITIVE and self.primitive == Primitive.VOID


@dataclass(frozen=True)
class Parameter:
    """A named, typed parameter of a function or UI event."""

    name: str
    type: WireType


@dataclass(frozen=True)
class FunctionDef:
    """A remotely callable API function."""

    name: str
    parameters: Tuple[Parameter, ...]
    return_type: WireType
    method: bool = False
    since: Optional[int] = None
    deprecated_since: Optional[int] = None


@dataclass(frozen=True)
class UIEventDef:
    """A notification the editor sends to attached UIs."""

    name: str
    parameters: Tuple[Parameter, ...]
    since: Optional[int] = None
    deprecated_since: Optional[int] = None


@dataclass(frozen=True)
class ExtensionTypeDef:
    """A remote-handle type carried on the wire as a msgpack extension."""

    name: str
    id: int
    prefix: str


@dataclass(frozen=True)
class APIVersion:
    """Version record of the editor that produced the metadata."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    api_level: int = 0
    api_compatible: int = 0
    api_prerelease: bool = False

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class APIMetadata:
    """The whole API-metadata document."""

    functions: Tuple[FunctionDef, ...]
    ui_events: Tuple[UIEventDef, ...]
    types: Mapping[str, ExtensionTypeDef]
    version: Optional[APIVersion] = None

    def get_type(self, name: str) -> Optional[ExtensionTypeDef]:
        """Get extension type by name."""
        return self.types.get(name)

    def resolve_receiver(self, function: FunctionDef) -> ExtensionTypeDef:
        """
        Find the extension type a method-flagged function belongs to.

        Raises:
            AmbiguousReceiver: If zero or several type prefixes match
        """
        matches = [
            ext_type
            for ext_type in self.types.values()
            if function.name.startswith(ext_type.prefix)
        ]
        if len(matches) != 1:
            raise AmbiguousReceiver(function.name, [t.name for t in matches])
        return matches[0]


Entry = TypeVar("Entry", FunctionDef, UIEventDef)


def is_deprecated(entry: Union[FunctionDef, UIEventDef], oldest_supported_level: int) -> bool:
    """Check whether an entry was deprecated before the oldest supported level."""
    return (
        entry.deprecated_since is not None
        and entry.deprecated_since < oldest_supported_level
    )


def filter_deprecated(
    entries: Iterable[Entry], oldest_supported_level: int
) -> Tuple[Entry, ...]:
    """
    Drop entries deprecated before ``oldest_supported_level``.

    Entries without a deprecation marker are always kept. The input is
    left untouched.

    Args:
        entries: Functions or UI events
        oldest_supported_level: Oldest API level the bindings target

    Returns:
        Tuple of entries still exposed to clients
    """
    return tuple(
        entry for entry in entries if not is_deprecated(entry, oldest_supported_level)
    )


# Wire type grammar

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_PRIMITIVE_NAMES = {
    "Integer": Primitive.INTEGER,
    "Float": Primitive.FLOAT,
    "Boolean": Primitive.BOOLEAN,
    "String": Primitive.STRING,
    "Binary": Primitive.BINARY,
    "Object": Primitive.OBJECT,
    "LuaRef": Primitive.OBJECT,
    "void": Primitive.VOID,
}

_DICTIONARY_NAMES = {"Dictionary", "Dict"}


def _dictionary(value: Optional[WireType] = None) -> WireType:
    return WireType.map_of(
        WireType.of_primitive(Primitive.STRING),
        value or WireType.of_primitive(Primitive.OBJECT),
    )


def _split_arguments(inner: str, text: str, context: Optional[str]) -> List[str]:
    """Split generic arguments on top-level commas."""
    arguments = []
    depth = 0
    current = []

    for char in inner:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise SchemaViolation(
                    f"Unbalanced parentheses in wire type '{text}' of {context}",
                    context,
                )
        elif char == "," and depth == 0:
            arguments.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    if depth != 0:
        raise SchemaViolation(
            f"Unbalanced parentheses in wire type '{text}' of {context}", context
        )

    arguments.append("".join(current).strip())
    if any(not argument for argument in arguments):
        raise SchemaViolation(
            f"Empty type argument in wire type '{text}' of {context}", context
        )
    return arguments


def parse_wire_type(text: str, context: Optional[str] = None) -> WireType:
    """
    Parse a wire type string such as ``ArrayOf(Integer, 2)``.

    Bare identifiers that are not primitives are taken as extension type
    names; whether such a type exists is checked when it is mapped.

    Args:
        text: Type string from the metadata
        context: Name of the entry the type belongs to, for error messages

    Returns:
        Parsed WireType

    Raises:
        SchemaViolation: If the string does not follow the grammar
    """
    if not isinstance(text, str):
        raise SchemaViolation(
            f"Wire type of {context} must be a string, got {type(text).__name__}",
            context,
        )

    text = text.strip()
    open_index = text.find("(")

    if open_index == -1:
        if not _IDENTIFIER_RE.match(text):
            raise SchemaViolation(
                f"Unrecognized wire type '{text}' in {context}", context
            )
        if text in _PRIMITIVE_NAMES:
            return WireType.of_primitive(_PRIMITIVE_NAMES[text])
        if text == "Array":
            return WireType.array_of(WireType.of_primitive(Primitive.OBJECT))
        if text in _DICTIONARY_NAMES:
            return _dictionary()
        return WireType.extension(text)

    head = text[:open_index].strip()
    if not text.endswith(")") or not _IDENTIFIER_RE.match(head):
        raise SchemaViolation(f"Unrecognized wire type '{text}' in {context}", context)

    arguments = _split_arguments(text[open_index + 1 : -1], text, context)

    if head == "ArrayOf" and len(arguments) in (1, 2):
        element = parse_wire_type(arguments[0], context)
        length = None
        if len(arguments) == 2:
            if not arguments[1].isdigit():
                raise SchemaViolation(
                    f"Invalid array length '{arguments[1]}' in {context}", context
                )
            length = int(arguments[1])
        return WireType.array_of(element, length)

    if head == "Dict" and len(arguments) == 1 and _IDENTIFIER_RE.match(arguments[0]):
        # Keyset dictionaries (e.g. Dict(option)) are plain dictionaries on the wire
        return _dictionary()

    if head == "DictOf" and len(arguments) == 1:
        return _dictionary(parse_wire_type(arguments[0], context))

    raise SchemaViolation(f"Unrecognized wire type '{text}' in {context}", context)


# Document conversion


def _text(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def _record(raw: Any, what: str) -> Dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise SchemaViolation(f"{what} must be a mapping, got {type(raw).__name__}", what)
    return {_text(key): value for key, value in raw.items()}


def _require(record: Dict[str, Any], key: str, expected: type, context: str) -> Any:
    if key not in record:
        raise SchemaViolation(f"{context} is missing '{key}'", context)
    value = _text(record[key])
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise SchemaViolation(
            f"'{key}' of {context} must be {expected.__name__}, "
            f"got {type(value).__name__}",
            context,
        )
    return value


def _optional_int(record: Dict[str, Any], key: str, context: str) -> Optional[int]:
    value = record.get(key)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise SchemaViolation(f"'{key}' of {context} must be an integer", context)
    return value


def _convert_parameter(raw: Any, context: str) -> Parameter:
    """Convert a ``[type, name]`` pair or a ``{name, type}`` record."""
    if isinstance(raw, (list, tuple)):
        if len(raw) != 2:
            raise SchemaViolation(
                f"Parameter of {context} must be a [type, name] pair", context
            )
        type_text, name = _text(raw[0]), _text(raw[1])
    elif isinstance(raw, Mapping):
        record = _record(raw, context)
        type_text = _require(record, "type", str, context)
        name = _require(record, "name", str, context)
    else:
        raise SchemaViolation(f"Malformed parameter in {context}", context)

    if not isinstance(name, str) or not name:
        raise SchemaViolation(f"Parameter of {context} has no name", context)

    return Parameter(name=name, type=parse_wire_type(type_text, context))


def _convert_parameters(record: Dict[str, Any], context: str) -> Tuple[Parameter, ...]:
    raw_parameters = record.get("parameters") or []
    if not isinstance(raw_parameters, (list, tuple)):
        raise SchemaViolation(f"'parameters' of {context} must be a list", context)
    return tuple(_convert_parameter(raw, context) for raw in raw_parameters)


def convert_function(raw: Any) -> FunctionDef:
    """Convert one raw function record."""
    record = _record(raw, "function")
    name = _require(record, "name", str, "function")

    return FunctionDef(
        name=name,
        parameters=_convert_parameters(record, name),
        return_type=parse_wire_type(_require(record, "return_type", str, name), name),
        method=bool(record.get("method", False)),
        since=_optional_int(record, "since", name),
        deprecated_since=_optional_int(record, "deprecated_since", name),
    )


def convert_ui_event(raw: Any) -> UIEventDef:
    """Convert one raw UI event record."""
    record = _record(raw, "ui event")
    name = _require(record, "name", str, "ui event")

    return UIEventDef(
        name=name,
        parameters=_convert_parameters(record, name),
        since=_optional_int(record, "since", name),
        deprecated_since=_optional_int(record, "deprecated_since", name),
    )


def convert_types(raw: Any) -> Mapping[str, ExtensionTypeDef]:
    """
    Convert the ``types`` mapping and check tag/prefix uniqueness.

    Raises:
        SchemaViolation: On duplicate wire tags or overlapping prefixes
    """
    types: Dict[str, ExtensionTypeDef] = {}

    for type_name, type_data in _record(raw, "types").items():
        if not isinstance(type_name, str) or not type_name:
            raise SchemaViolation("Extension type names must be non-empty strings")
        record = _record(type_data, type_name)
        prefix = _require(record, "prefix", str, type_name)
        if not prefix:
            raise SchemaViolation(f"Extension type {type_name} has an empty prefix", type_name)
        types[type_name] = ExtensionTypeDef(
            name=type_name, id=_require(record, "id", int, type_name), prefix=prefix
        )

    seen_ids: Dict[int, str] = {}
    for ext_type in types.values():
        if ext_type.id in seen_ids:
            raise SchemaViolation(
                f"Extension types {seen_ids[ext_type.id]} and {ext_type.name} "
                f"share wire tag {ext_type.id}",
                ext_type.name,
            )
        seen_ids[ext_type.id] = ext_type.name

        for other in types.values():
            if other is not ext_type and ext_type.prefix.startswith(other.prefix):
                raise SchemaViolation(
                    f"Prefix '{ext_type.prefix}' of {ext_type.name} overlaps "
                    f"prefix '{other.prefix}' of {other.name}",
                    ext_type.name,
                )

    return MappingProxyType(types)


def convert_version(raw: Any) -> Optional[APIVersion]:
    """Convert the optional ``version`` record."""
    if raw is None:
        return None

    record = _record(raw, "version")
    return APIVersion(
        major=_optional_int(record, "major", "version") or 0,
        minor=_optional_int(record, "minor", "version") or 0,
        patch=_optional_int(record, "patch", "version") or 0,
        api_level=_optional_int(record, "api_level", "version") or 0,
        api_compatible=_optional_int(record, "api_compatible", "version") or 0,
        api_prerelease=bool(record.get("api_prerelease", False)),
    )


def load_api_metadata(raw: Any) -> APIMetadata:
    """
    Convert a decoded API-metadata document into an APIMetadata.

    Args:
        raw: Mapping decoded from msgpack or JSON

    Returns:
        APIMetadata: Immutable model of the document

    Raises:
        SchemaViolation: If the document is structurally invalid
    """
    record = _record(raw, "API metadata")

    raw_functions = _require(record, "functions", list, "API metadata")
    raw_events = record.get("ui_events") or []
    if not isinstance(raw_events, list):
        raise SchemaViolation("'ui_events' of API metadata must be a list")
    if "types" not in record:
        raise SchemaViolation("API metadata is missing 'types'")

    return APIMetadata(
        functions=tuple(convert_function(raw) for raw in raw_functions),
        ui_events=tuple(convert_ui_event(raw) for raw in raw_events),
        types=convert_types(record["types"]),
        version=convert_version(record.get("version")),
    )
