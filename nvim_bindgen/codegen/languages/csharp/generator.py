"""
C# binding generator implementation.

Generates the partial ``NvimAPI`` client class: UI event declarations,
top-level request stubs, one wrapper class per extension type, the
event-args classes and the two dispatch switches.
"""

from typing import Dict, Iterable, List, Optional, Any, Sequence, Tuple
from pathlib import Path

from ....logging_config import get_logger
from ...core.config import GeneratorConfig, load_config
from ...core.errors import SchemaViolation
from ...core.generator import CodeGenerator
from ...core.naming import NamingCase
from ...core.schema import APIMetadata, FunctionDef, UIEventDef
from .naming import create_csharp_sanitizer
from .types import CSharpTypeConfig, CSharpTypeMapper

logger = get_logger(__name__)

RECEIVER_ARGUMENT = "_msgPackExtObj"
API_ACCESS = "_api."


class CSharpGenerator(CodeGenerator):
    """Code generator for the C# msgpack-RPC client."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize C# generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_csharp_sanitizer()
        self.type_config = self._build_type_config()

        # Set per run, since extension types come from the document
        self.type_mapper: Optional[CSharpTypeMapper] = None

    def get_template_directory(self) -> Optional[Path]:
        """Return the C# templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def _build_type_config(self) -> CSharpTypeConfig:
        """Build CSharpTypeConfig from generator config."""
        custom = self.config.custom
        defaults = CSharpTypeConfig()

        return CSharpTypeConfig(
            int_type=custom.get("int_type", defaults.int_type),
            float_type=custom.get("float_type", defaults.float_type),
            bool_type=custom.get("bool_type", defaults.bool_type),
            string_type=custom.get("string_type", defaults.string_type),
            binary_type=custom.get("binary_type", defaults.binary_type),
            object_type=custom.get("object_type", defaults.object_type),
            map_type=custom.get("map_type", defaults.map_type),
            wrapper_prefix=self.config.wrapper_prefix,
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "csharp"

    @property
    def file_extension(self) -> str:
        """Return C# file extension."""
        return ".cs"

    def generate(self, metadata: APIMetadata) -> str:
        """Generate the complete C# client class using templates."""
        functions = self.exposed_functions(metadata)
        ui_events = self.exposed_ui_events(metadata)

        self.type_mapper = CSharpTypeMapper(self.type_config, metadata.types.keys())

        logger.debug(
            "Generating C# bindings for %d functions and %d UI events",
            len(functions),
            len(ui_events),
        )

        top_level_functions = [function for function in functions if not function.method]

        context = {
            "header": self._header_lines(metadata),
            "namespace": self.config.namespace,
            "class_name": self.config.class_name,
            "events": self._emit_events(ui_events),
            "methods": self._emit_methods(
                top_level_functions, self.config.top_level_prefix, False
            ),
            "wrappers": self._emit_wrapper_types(metadata, functions),
            "extension_cases": self._emit_extension_dispatch(metadata),
        }

        self._check_members(context)

        return self.render_template("api.cs.j2", context)

    def _header_lines(self, metadata: APIMetadata) -> List[str]:
        if not self.config.add_comments:
            return []

        lines = ["<auto-generated>", "  Generated by nvim-bindgen. Do not edit."]
        if metadata.version is not None:
            lines.append(
                f"  Neovim {metadata.version}, API level {metadata.version.api_level}."
            )
        lines.append("</auto-generated>")
        return lines

    def _identifier(self, name: str, target_case: NamingCase, context: str) -> str:
        identifier = self.sanitizer.sanitize_name(name, target_case)
        if not identifier.lstrip("@"):
            raise SchemaViolation(
                f"Name '{name}' in {context} yields an empty identifier", context
            )
        if not identifier.lstrip("@").isidentifier():
            raise SchemaViolation(
                f"Name '{name}' in {context} yields the invalid identifier {identifier}",
                context,
            )
        return identifier

    # Methods

    def _emit_methods(
        self,
        functions: Sequence[FunctionDef],
        prefix_to_remove: str,
        is_instance_method: bool,
    ) -> List[Dict[str, Any]]:
        """
        Build template data for request stubs.

        Args:
            functions: Non-deprecated functions to emit
            prefix_to_remove: Prefix every name must carry; stripped for the stub name
            is_instance_method: Drop the receiver parameter and send the handle instead

        Raises:
            SchemaViolation: If a function lacks the expected prefix
        """
        return [
            self._emit_method(function, prefix_to_remove, is_instance_method)
            for function in functions
        ]

    def _emit_method(
        self, function: FunctionDef, prefix_to_remove: str, is_instance_method: bool
    ) -> Dict[str, Any]:
        if not function.name.startswith(prefix_to_remove):
            raise SchemaViolation(
                f'Function {function.name} does not have expected prefix "{prefix_to_remove}"',
                function.name,
            )

        parameters = function.parameters
        if is_instance_method:
            if not parameters:
                raise SchemaViolation(
                    f"Method {function.name} has no receiver parameter", function.name
                )
            parameters = parameters[1:]

        declarations = []
        argument_names = [RECEIVER_ARGUMENT] if is_instance_method else []
        for parameter in parameters:
            name = self._identifier(parameter.name, NamingCase.CAMEL_CASE, function.name)
            param_type = self.type_mapper.map_type(parameter.type, function.name)
            declarations.append(f"{param_type} {name}")
            argument_names.append(name)

        if function.return_type.is_void:
            type_argument = ""
        else:
            type_argument = f"<{self.type_mapper.map_type(function.return_type, function.name)}>"

        return {
            "name": self._identifier(
                function.name[len(prefix_to_remove):], NamingCase.PASCAL_CASE, function.name
            ),
            "wire_name": function.name,
            "return_type": self.type_mapper.task_type(function.return_type, function.name),
            "type_argument": type_argument,
            "parameters": declarations,
            "arguments": argument_names,
            "send_access": API_ACCESS if is_instance_method else "",
        }

    # UI events

    def _emit_events(self, ui_events: Sequence[UIEventDef]) -> List[Dict[str, Any]]:
        """Build template data for event declarations, args classes and dispatch cases."""
        events = []

        for ui_event in ui_events:
            name = self._identifier(ui_event.name, NamingCase.PASCAL_CASE, ui_event.name)
            args_type = f"{name.lstrip('@')}{self.config.event_args_suffix}"

            fields = [
                {
                    "name": self._identifier(
                        parameter.name, NamingCase.PASCAL_CASE, ui_event.name
                    ),
                    "wire_name": f"{ui_event.name}({parameter.name})",
                    "type": self.type_mapper.map_type(parameter.type, ui_event.name),
                    "index": index,
                }
                for index, parameter in enumerate(ui_event.parameters)
            ]

            events.append(
                {
                    "name": name,
                    "wire_name": ui_event.name,
                    "args_type": args_type,
                    "handler_type": (
                        f"EventHandler<{args_type}>" if fields else "EventHandler"
                    ),
                    "fields": fields,
                }
            )

        return events

    # Extension types

    def _group_methods(
        self, metadata: APIMetadata, functions: Sequence[FunctionDef]
    ) -> Dict[str, List[FunctionDef]]:
        """Assign every method-flagged function to the one type owning it."""
        grouped: Dict[str, List[FunctionDef]] = {name: [] for name in metadata.types}

        for function in functions:
            if function.method:
                owner = metadata.resolve_receiver(function)
                grouped[owner.name].append(function)

        return grouped

    def _emit_wrapper_types(
        self, metadata: APIMetadata, functions: Sequence[FunctionDef]
    ) -> List[Dict[str, Any]]:
        """Build template data for the wrapper class of each extension type."""
        grouped = self._group_methods(metadata, functions)

        return [
            {
                "name": self.type_mapper.wrapper_name(ext_type.name),
                "wire_name": ext_type.name,
                "methods": self._emit_methods(grouped[ext_type.name], ext_type.prefix, True),
            }
            for ext_type in metadata.types.values()
        ]

    def _emit_extension_dispatch(self, metadata: APIMetadata) -> List[Dict[str, Any]]:
        """Build the wire tag to wrapper constructor cases."""
        return [
            {
                "id": ext_type.id,
                "wrapper": self.type_mapper.wrapper_name(ext_type.name),
            }
            for ext_type in metadata.types.values()
        ]

    # Member uniqueness

    def _check_members(self, context: Dict[str, Any]):
        """
        Reject output declaring one name twice in the same class.

        Covers the client class (events, stubs, nested classes and the two
        dispatch routines), every wrapper class and every event-args class.

        Raises:
            SchemaViolation: Naming both wire entries behind the clash
        """
        class_name = context["class_name"]
        client_members = [
            (wrapper["name"], wrapper["wire_name"]) for wrapper in context["wrappers"]
        ]
        client_members += [
            (event["args_type"], event["wire_name"])
            for event in context["events"]
            if event["fields"]
        ]
        client_members += [
            ("CallUIEventHandler", "UI event dispatch"),
            ("GetExtensionType", "extension type dispatch"),
        ]
        client_members += [(event["name"], event["wire_name"]) for event in context["events"]]
        client_members += [(method["name"], method["wire_name"]) for method in context["methods"]]
        self._require_unique(class_name, client_members)

        for wrapper in context["wrappers"]:
            self._require_unique(
                wrapper["name"],
                [("_api", "client field"), ("_msgPackExtObj", "handle field")]
                + [(method["name"], method["wire_name"]) for method in wrapper["methods"]],
            )

        for event in context["events"]:
            self._require_unique(
                event["args_type"],
                [(field["name"], field["wire_name"]) for field in event["fields"]],
            )

    @staticmethod
    def _require_unique(owner: str, members: Iterable[Tuple[str, str]]):
        # The enclosing type's own name is taken as well
        seen = {owner.lstrip("@"): f"class {owner}"}
        for name, wire_entry in members:
            key = name.lstrip("@")
            if key in seen:
                raise SchemaViolation(
                    f"{seen[key]} and {wire_entry} both generate {key} in {owner}",
                    wire_entry,
                )
            seen[key] = wire_entry


def create_csharp_generator(config: Optional[Dict[str, Any]] = None) -> CSharpGenerator:
    """Create a C# generator from a plain configuration dict."""
    return CSharpGenerator(load_config("csharp", custom_config=config))
