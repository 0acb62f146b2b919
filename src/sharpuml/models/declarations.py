"""Raw declarations produced by the C# front end.

These records hold what the parser saw in source (modifier keywords,
type references, accessor keywords) before normalization. The
ClassModelBuilder turns them into ClassDescriptors.
"""

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class TypeRef:
    """A parsed C# type reference.

    Attributes:
        name: Simple type name without namespace or generic arguments.
              Empty when the text could not be parsed.
        namespace: Dotted qualifier written in source (``System.Collections.Generic``)
        arguments: Generic type arguments, or tuple elements for tuple types
        suffixes: Array (``[]``, ``[,]``), nullable (``?``) and pointer (``*``)
                  markers in source order; the last one is the outermost
        is_tuple: True for ``(int, string)``
        source_text: The reference exactly as written
    """

    name: str
    namespace: str = ""
    arguments: tuple["TypeRef", ...] = ()
    suffixes: tuple[str, ...] = ()
    is_tuple: bool = False
    source_text: str = ""

    @property
    def is_resolved(self) -> bool:
        return bool(self.name) or self.is_tuple

    @property
    def is_generic(self) -> bool:
        return bool(self.arguments) and not self.is_tuple

    @property
    def array_rank(self) -> int:
        """Rank of the outermost array wrapper, 0 when it is not an array."""
        if self.suffixes and self.suffixes[-1].startswith("["):
            return self.suffixes[-1].count(",") + 1
        return 0

    @property
    def is_nullable(self) -> bool:
        return bool(self.suffixes) and self.suffixes[-1] == "?"

    def element(self) -> Optional["TypeRef"]:
        """Strip the outermost array, nullable or pointer wrapper; None if there is none."""
        if not self.suffixes:
            return None
        outer = self.suffixes[-1]
        source_text = self.source_text.rstrip()
        if source_text.replace(" ", "").endswith(outer):
            source_text = source_text[:source_text.rfind(outer[0])].rstrip()
        return replace(self, suffixes=self.suffixes[:-1], source_text=source_text)


@dataclass(frozen=True)
class TypeParameterDeclaration:
    """A generic parameter and the text of each of its constraints."""

    name: str
    constraints: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParameterDeclaration:
    name: str
    type: Optional[TypeRef] = None


@dataclass(frozen=True)
class FieldDeclaration:
    name: str
    type: Optional[TypeRef] = None
    modifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class PropertyDeclaration:
    """A property; ``accessors`` holds the accessor keywords (get/set/init)."""

    name: str
    type: Optional[TypeRef] = None
    modifiers: tuple[str, ...] = ()
    accessors: tuple[str, ...] = ()


@dataclass(frozen=True)
class MethodDeclaration:
    name: str
    return_type: Optional[TypeRef] = None
    modifiers: tuple[str, ...] = ()
    parameters: tuple[ParameterDeclaration, ...] = ()
    type_parameters: tuple[TypeParameterDeclaration, ...] = ()


@dataclass(frozen=True)
class ClassDeclaration:
    """A class or record declaration as written in source.

    A declaration whose ``name`` is empty could not be resolved (for
    example a malformed declaration recovered by the parser) and is
    skipped by the builder.
    """

    name: str
    namespace: str = ""
    modifiers: tuple[str, ...] = ()
    is_record: bool = False
    base_types: tuple[TypeRef, ...] = ()
    type_parameters: tuple[TypeParameterDeclaration, ...] = ()
    fields: tuple[FieldDeclaration, ...] = ()
    properties: tuple[PropertyDeclaration, ...] = ()
    methods: tuple[MethodDeclaration, ...] = ()
    nested_classes: tuple["ClassDeclaration", ...] = ()
    file_path: str = ""


@dataclass(frozen=True)
class DeclaredType:
    """Any type declared in a file, used to build the project type index.

    ``kind`` is one of: class, struct, interface, enum, record, record_struct.
    """

    name: str
    namespace: str = ""
    kind: str = "class"
    modifiers: tuple[str, ...] = ()


@dataclass
class FileDeclarations:
    """Result of parsing a single C# source file."""

    file_path: str
    classes: list[ClassDeclaration] = field(default_factory=list)
    declared_types: list[DeclaredType] = field(default_factory=list)
