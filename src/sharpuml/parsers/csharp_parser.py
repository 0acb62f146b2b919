"""C# front end using tree-sitter.

Walks the tree-sitter syntax tree of each source file and produces raw
declarations: classes and records with their modifiers, base list, type
parameters, fields, properties, methods and nested classes. Every other
type declaration (interface, struct, enum, record struct) is recorded as a
DeclaredType so the project type index knows its kind.

There is no semantic model behind this front end. Type references are
kept as parsed TypeRefs and resolved by name within the project.
"""

import threading
from pathlib import Path
from typing import Optional

from ..config import Config, get_config
from ..constants import ErrorMessage
from ..logging import get_logger
from ..models.declarations import (
    ClassDeclaration,
    DeclaredType,
    FieldDeclaration,
    FileDeclarations,
    MethodDeclaration,
    ParameterDeclaration,
    PropertyDeclaration,
    TypeParameterDeclaration,
)
from ..models.descriptors import ClassDescriptor
from ..services.class_builder import ClassModelBuilder
from ..services.solution import ProjectHandle
from ..services.type_index import TypeIndex
from ..services.type_names import parse_type_reference

logger = get_logger(__name__)

_CLASS_NODE_TYPES = {"class_declaration", "record_declaration", "record_struct_declaration"}
_OTHER_TYPE_NODES = {
    "interface_declaration": "interface",
    "struct_declaration": "struct",
    "enum_declaration": "enum",
}
_ACCESSOR_KEYWORDS = ("get", "set", "init")

# Process-wide front-end state, initialized at most once
_init_lock = threading.Lock()
_initialized = False
_init_error: Optional[Exception] = None
_language = None


def initialize_frontend():
    """
    Load the tree-sitter C# grammar once per process.

    Safe to call from several threads; only the first call does any work.

    Returns:
        The tree-sitter Language for C#

    Raises:
        RuntimeError: If the grammar cannot be loaded. The failure is
                      remembered and raised again on later calls.
    """
    global _initialized, _init_error, _language

    with _init_lock:
        if _initialized:
            return _language
        if _init_error is not None:
            raise RuntimeError(ErrorMessage.FRONTEND_INIT_FAILED) from _init_error

        try:
            import tree_sitter_c_sharp as tscsharp
            from tree_sitter import Language

            _language = Language(tscsharp.language())
        except Exception as e:
            _init_error = e
            raise RuntimeError(ErrorMessage.FRONTEND_INIT_FAILED) from e

        _initialized = True
        logger.debug("C# front end initialized")
        return _language


def _split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split on separators that are not inside <>, () or []."""
    parts = []
    depth = 0
    current = []
    for char in text:
        if char in "<([":
            depth += 1
        elif char in ">)]":
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


class CSharpParser:
    """Parser for C# source files using tree-sitter."""

    def __init__(self):
        self._parser = None

    def _get_parser(self):
        """Lazy initialization of the tree-sitter parser."""
        if self._parser is None:
            from tree_sitter import Parser

            self._parser = Parser(initialize_frontend())
        return self._parser

    def parse_file(self, file_path: Path) -> FileDeclarations:
        """Parse one source file.

        Raises:
            OSError: If the file cannot be read
        """
        source_code = file_path.read_text(encoding="utf-8-sig", errors="replace")
        return self.parse_source(source_code, str(file_path))

    def parse_source(self, source_code: str, file_path: str = "") -> FileDeclarations:
        """Parse C# source text into raw declarations."""
        parser = self._get_parser()
        source = bytes(source_code, "utf-8")
        tree = parser.parse(source)

        result = FileDeclarations(file_path=file_path)
        self._walk(tree.root_node, source, namespace="", result=result)

        if tree.root_node.has_error:
            logger.debug("Syntax errors recovered", extra={"file_path": file_path})
        return result

    # =========================================================================
    # Namespace-level walker
    # =========================================================================

    def _walk(self, node, source: bytes, namespace: str, result: FileDeclarations) -> None:
        """Collect top-level declarations below a compilation unit or namespace."""
        for child in node.children:
            if child.type == "namespace_declaration":
                self._walk(child, source, self._qualify(namespace, child, source), result)

            elif child.type == "file_scoped_namespace_declaration":
                # Older grammars put the following declarations next to the
                # namespace node instead of inside it
                namespace = self._qualify(namespace, child, source)
                self._walk(child, source, namespace, result)

            elif child.type == "declaration_list":
                self._walk(child, source, namespace, result)

            elif child.type in _CLASS_NODE_TYPES:
                declaration = self._extract_type(child, source, namespace, result)
                if declaration is not None:
                    result.classes.append(declaration)

            elif child.type in _OTHER_TYPE_NODES:
                self._register_type(child, source, namespace, _OTHER_TYPE_NODES[child.type], result)

    def _qualify(self, namespace: str, node, source: bytes) -> str:
        name = self._field_text(node, "name", source)
        return f"{namespace}.{name}" if namespace and name else (name or namespace)

    def _register_type(self, node, source: bytes, namespace: str, kind: str, result: FileDeclarations):
        name = self._field_text(node, "name", source)
        if not name:
            return
        result.declared_types.append(DeclaredType(
            name=name,
            namespace=namespace,
            kind=kind,
            modifiers=tuple(self._modifiers(node, source)),
        ))

    # =========================================================================
    # Class and record extraction
    # =========================================================================

    def _extract_type(
        self, node, source: bytes, namespace: str, result: FileDeclarations
    ) -> Optional[ClassDeclaration]:
        """Extract a class or record; record structs are only registered."""
        is_record = node.type != "class_declaration"
        if node.type == "record_struct_declaration" or (
            is_record and any(child.type == "struct" for child in node.children)
        ):
            self._register_type(node, source, namespace, "record_struct", result)
            return None

        name = self._field_text(node, "name", source) or ""
        modifiers = tuple(self._modifiers(node, source))
        if name:
            result.declared_types.append(DeclaredType(
                name=name,
                namespace=namespace,
                kind="record" if is_record else "class",
                modifiers=modifiers,
            ))

        fields: list[FieldDeclaration] = []
        properties: list[PropertyDeclaration] = []
        methods: list[MethodDeclaration] = []
        nested: list[ClassDeclaration] = []

        if is_record:
            properties.extend(self._positional_properties(node, source))

        body = node.child_by_field_name("body") or self._child_of_type(node, "declaration_list")
        if body is not None:
            for child in body.children:
                if child.type == "field_declaration":
                    fields.extend(self._extract_fields(child, source))
                elif child.type == "property_declaration":
                    prop = self._extract_property(child, source)
                    if prop is not None:
                        properties.append(prop)
                elif child.type == "method_declaration":
                    method = self._extract_method(child, source)
                    if method is not None:
                        methods.append(method)
                elif child.type in _CLASS_NODE_TYPES:
                    declaration = self._extract_type(child, source, namespace, result)
                    if declaration is not None:
                        nested.append(declaration)
                elif child.type in _OTHER_TYPE_NODES:
                    self._register_type(child, source, namespace, _OTHER_TYPE_NODES[child.type], result)

        return ClassDeclaration(
            name=name,
            namespace=namespace,
            modifiers=modifiers,
            is_record=is_record,
            base_types=tuple(self._base_types(node, source)),
            type_parameters=tuple(self._type_parameters(node, source)),
            fields=tuple(fields),
            properties=tuple(properties),
            methods=tuple(methods),
            nested_classes=tuple(nested),
            file_path=result.file_path,
        )

    def _base_types(self, node, source: bytes):
        base_list = self._child_of_type(node, "base_list")
        if base_list is None:
            return
        for child in base_list.named_children:
            if child.type == "argument_list":
                continue
            if child.type == "primary_constructor_base_type":
                child = child.child_by_field_name("type") or child.named_children[0]
            yield parse_type_reference(self._text(child, source))

    def _type_parameters(self, node, source: bytes) -> list[TypeParameterDeclaration]:
        """Type parameters in declaration order with their ``where`` constraints."""
        parameter_list = self._child_of_type(node, "type_parameter_list")
        if parameter_list is None:
            return []

        names = []
        for child in parameter_list.named_children:
            if child.type != "type_parameter":
                continue
            name = self._field_text(child, "name", source)
            if not name:
                # variance keywords and attributes precede the name
                name = self._text(child, source).split()[-1]
            names.append(name)

        constraints: dict[str, tuple[str, ...]] = {}
        for child in node.children:
            if child.type != "type_parameter_constraints_clause":
                continue
            clause = self._text(child, source).strip()
            if clause.startswith("where"):
                clause = clause[len("where"):]
            target, _, rest = clause.partition(":")
            constraints[target.strip()] = tuple(_split_top_level(rest))

        return [
            TypeParameterDeclaration(name=name, constraints=constraints.get(name, ()))
            for name in names
        ]

    def _positional_properties(self, node, source: bytes) -> list[PropertyDeclaration]:
        """Primary constructor parameters of a record become init-only properties."""
        parameter_list = node.child_by_field_name("parameters") or self._child_of_type(
            node, "parameter_list"
        )
        if parameter_list is None:
            return []
        return [
            PropertyDeclaration(
                name=parameter.name,
                type=parameter.type,
                modifiers=("public",),
                accessors=("get", "init"),
            )
            for parameter in self._parameters(parameter_list, source)
        ]

    # =========================================================================
    # Member extraction
    # =========================================================================

    def _extract_fields(self, node, source: bytes) -> list[FieldDeclaration]:
        modifiers = tuple(self._modifiers(node, source))
        declaration = self._child_of_type(node, "variable_declaration")
        if declaration is None:
            return []

        type_node = declaration.child_by_field_name("type")
        type_ref = parse_type_reference(self._text(type_node, source)) if type_node else None

        fields = []
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = self._field_text(declarator, "name", source)
            if not name:
                identifier = self._child_of_type(declarator, "identifier")
                name = self._text(identifier, source) if identifier else ""
            if name:
                fields.append(FieldDeclaration(name=name, type=type_ref, modifiers=modifiers))
        return fields

    def _extract_property(self, node, source: bytes) -> Optional[PropertyDeclaration]:
        name = self._field_text(node, "name", source)
        if not name:
            return None

        type_node = node.child_by_field_name("type")
        accessors: list[str] = []
        accessor_list = node.child_by_field_name("accessors") or self._child_of_type(
            node, "accessor_list"
        )
        if accessor_list is not None:
            for accessor in accessor_list.named_children:
                if accessor.type != "accessor_declaration":
                    continue
                keyword = self._accessor_keyword(accessor, source)
                if keyword and keyword not in accessors:
                    accessors.append(keyword)
        elif self._child_of_type(node, "arrow_expression_clause") is not None:
            # expression-bodied property: int Total => a + b;
            accessors.append("get")

        return PropertyDeclaration(
            name=name,
            type=parse_type_reference(self._text(type_node, source)) if type_node else None,
            modifiers=tuple(self._modifiers(node, source)),
            accessors=tuple(keyword for keyword in _ACCESSOR_KEYWORDS if keyword in accessors),
        )

    def _accessor_keyword(self, accessor, source: bytes) -> Optional[str]:
        name = self._field_text(accessor, "name", source)
        if name in _ACCESSOR_KEYWORDS:
            return name
        for child in accessor.children:
            if child.type in _ACCESSOR_KEYWORDS:
                return child.type
        return None

    def _extract_method(self, node, source: bytes) -> Optional[MethodDeclaration]:
        name = self._field_text(node, "name", source)
        if not name:
            return None

        return_node = node.child_by_field_name("returns") or node.child_by_field_name("type")
        parameter_list = node.child_by_field_name("parameters") or self._child_of_type(
            node, "parameter_list"
        )

        return MethodDeclaration(
            name=name,
            return_type=parse_type_reference(self._text(return_node, source)) if return_node else None,
            modifiers=tuple(self._modifiers(node, source)),
            parameters=tuple(self._parameters(parameter_list, source)) if parameter_list else (),
            type_parameters=tuple(self._type_parameters(node, source)),
        )

    def _parameters(self, parameter_list, source: bytes) -> list[ParameterDeclaration]:
        parameters = []
        for child in parameter_list.named_children:
            if child.type != "parameter":
                continue
            name = self._field_text(child, "name", source)
            type_node = child.child_by_field_name("type")
            if name:
                parameters.append(ParameterDeclaration(
                    name=name,
                    type=parse_type_reference(self._text(type_node, source)) if type_node else None,
                ))
        return parameters

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _text(node, source: bytes) -> str:
        return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def _field_text(self, node, field_name: str, source: bytes) -> Optional[str]:
        child = node.child_by_field_name(field_name)
        if child is not None:
            return self._text(child, source)
        return None

    @staticmethod
    def _child_of_type(node, type_name: str):
        for child in node.children:
            if child.type == type_name:
                return child
        return None

    def _modifiers(self, node, source: bytes) -> list[str]:
        """Modifier keywords (public, static, sealed, ...) in source order."""
        return [
            self._text(child, source).strip()
            for child in node.children
            if child.type == "modifier"
        ]


def extract_classes(
    handle: ProjectHandle,
    cancel_event: Optional[threading.Event] = None,
    config: Optional[Config] = None,
) -> tuple[list[ClassDescriptor], list[str]]:
    """
    Extract the top-level class descriptors of one project.

    Files that fail to read or parse are logged, reported in the error list
    and contribute no classes. Extraction stops early with no classes when
    ``cancel_event`` is set.

    Args:
        handle: Opened project
        cancel_event: Cooperative cancellation signal
        config: Configuration to use. Defaults to the global config.

    Returns:
        (classes, errors) where errors holds one message per failed file
    """
    config = config or get_config()
    initialize_frontend()
    parser = CSharpParser()
    parsed: list[FileDeclarations] = []
    errors: list[str] = []

    for source_file in handle.source_files:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Extraction cancelled", extra={"project": handle.name})
            return [], errors
        try:
            parsed.append(parser.parse_file(source_file))
        except Exception as e:
            logger.warning(
                f"Failed to parse source file: {e}",
                extra={"file_path": str(source_file)},
            )
            errors.append(f"{source_file}: {e}")

    type_index = TypeIndex(
        declared for file_declarations in parsed for declared in file_declarations.declared_types
    )
    builder = ClassModelBuilder(type_index=type_index, config=config.classification)

    classes: list[ClassDescriptor] = []
    for file_declarations in parsed:
        classes.extend(builder.build_file(file_declarations))

    logger.info(
        f"Extracted {len(classes)} classes from {handle.name}",
        extra={"source_files": len(handle.source_files), "errors": len(errors)},
    )
    return classes, errors
