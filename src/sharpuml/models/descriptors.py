"""
Class Descriptor Models - The Structural Model of a C# Solution.

This module defines the value objects consumed by the diagram synthesizer:

1. **ClassDescriptor**: The shape of one class (members, modifiers,
   relationships, nested classes). Nested classes form a tree owned by
   their parent.

2. **Relationship**: How a class relates to another named type.

3. **ProjectDependency**: One project with its references and classes.

Data Flow:
    .cs files → CSharpParser → ClassDeclaration
                                    ↓
                     ClassModelBuilder → ClassDescriptor
                                    ↓
           ProjectDependencyAggregator → ProjectDependency
                                    ↓
                     PlantUmlGenerator → diagram text

All entities are frozen dataclasses holding tuples, so they are built
once per analysis run and never mutated afterwards.

Example:
    descriptor = ClassDescriptor(
        name="OrderService",
        namespace="Shop.Services",
        visibility=Visibility.PUBLIC,
        is_sealed=True,
        base_types=("IOrderService",),
        relationships=(
            Relationship("IOrderService", RelationshipKind.IMPLEMENTATION),
        ),
    )

Author: SharpUML Team
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Visibility(str, Enum):
    """
    Accessibility of a declaration.

    C# has six accessibility levels; combinations of the ``private``,
    ``protected`` and ``internal`` keywords select the compound ones.
    """

    PUBLIC = "Public"
    PRIVATE = "Private"
    PROTECTED = "Protected"
    INTERNAL = "Internal"
    PROTECTED_INTERNAL = "ProtectedInternal"
    PRIVATE_PROTECTED = "PrivateProtected"


class RelationshipKind(str, Enum):
    """
    Semantic relationship between a class and a type it references.

    Values:
        INHERITANCE: The class extends the target (base class)
        IMPLEMENTATION: The class implements the target interface
        COMPOSITION: Strong ownership (value, sealed, record or read-only member)
        AGGREGATION: Weak ownership (replaceable reference member)
        DEPENDENCY: The class uses the target without holding it
    """

    INHERITANCE = "Inheritance"
    IMPLEMENTATION = "Implementation"
    COMPOSITION = "Composition"
    AGGREGATION = "Aggregation"
    DEPENDENCY = "Dependency"


@dataclass(frozen=True)
class TypeParameter:
    """A generic type parameter with its ``where`` constraints in source order."""

    name: str
    constraints: tuple[str, ...] = ()


@dataclass(frozen=True)
class Parameter:
    """A method parameter; ``type`` is already formatted for display."""

    name: str
    type: str


@dataclass(frozen=True)
class Property:
    """
    A property declaration.

    The accessor flags are independent: a get-only property has neither
    setter flag, an init-only property sets ``has_init_setter``.
    """

    name: str
    type: str
    visibility: Visibility = Visibility.PRIVATE
    is_static: bool = False
    is_virtual: bool = False
    is_override: bool = False
    has_getter: bool = False
    has_setter: bool = False
    has_init_setter: bool = False

    @property
    def accessors(self) -> tuple[str, ...]:
        """Accessor keywords in display order (get, set, init)."""
        names = []
        if self.has_getter:
            names.append("get")
        if self.has_setter:
            names.append("set")
        if self.has_init_setter:
            names.append("init")
        return tuple(names)


@dataclass(frozen=True)
class Method:
    """A method declaration with formatted return and parameter types."""

    name: str
    return_type: str
    visibility: Visibility = Visibility.PRIVATE
    is_static: bool = False
    is_virtual: bool = False
    is_override: bool = False
    is_abstract: bool = False
    is_async: bool = False
    parameters: tuple[Parameter, ...] = ()
    type_parameters: tuple[TypeParameter, ...] = ()


@dataclass(frozen=True)
class Relationship:
    """
    A classified reference from a class to another type.

    Attributes:
        target_type: Simple name of the referenced type (no namespace,
                     no generic arguments)
        kind: How the class relates to the target
    """

    target_type: str
    kind: RelationshipKind


@dataclass(frozen=True)
class ClassDescriptor:
    """
    Structured record of one class's shape.

    Attributes:
        name: Simple class name
        namespace: Containing namespace ("" for the global namespace)
        visibility: Declared accessibility
        is_sealed / is_record / is_abstract / is_static: Class modifiers
        base_types: Base list entries as written in source, before
                    classification into base class and interfaces
        properties: Property members in declaration order
        methods: Method members in declaration order
        type_parameters: Generic parameters of the class
        relationships: Classified relationships, one per target type name
        nested_classes: Classes declared inside this one
    """

    name: str
    namespace: str = ""
    visibility: Visibility = Visibility.PRIVATE
    is_sealed: bool = False
    is_record: bool = False
    is_abstract: bool = False
    is_static: bool = False
    base_types: tuple[str, ...] = ()
    properties: tuple[Property, ...] = ()
    methods: tuple[Method, ...] = ()
    type_parameters: tuple[TypeParameter, ...] = ()
    relationships: tuple[Relationship, ...] = ()
    nested_classes: tuple["ClassDescriptor", ...] = ()

    @property
    def full_name(self) -> str:
        """Namespace-qualified class name."""
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    def iter_nested(self) -> Iterator["ClassDescriptor"]:
        """Yield every nested class below this one, depth first."""
        for nested in self.nested_classes:
            yield nested
            yield from nested.iter_nested()


@dataclass(frozen=True)
class ProjectDependency:
    """
    A project, its declared references, and its top-level classes.

    Target framework and package names are passed through verbatim from
    the project file; nothing is resolved.
    """

    project_name: str
    project_path: str = ""
    target_framework: str = ""
    package_references: tuple[str, ...] = ()
    project_references: tuple[str, ...] = ()
    classes: tuple[ClassDescriptor, ...] = ()
