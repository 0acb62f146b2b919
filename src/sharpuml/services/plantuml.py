"""
PlantUML Diagram Synthesizer.

Renders a list of ProjectDependency values into one PlantUML document in a
single sequential pass:

    @startuml
    <style preamble>

    package "Project Dependencies" {      (omitted when there are no projects)
      component "Core" as Core
      note right of Core
        Packages:
        - LoggingLib
      end note
      component "Web" as Web
    }
    Web --> Core

    namespace Shop.Domain {              (only when classes exist)
      interface IFoo {
      }
      class Foo <<sealed>> {
        + Id : int { get init }
      }
      Foo --|> IFoo
    }

    @enduml

Output is deterministic: namespaces appear in first-encountered order and
edges in declaration order, so the same input always yields the same text.

Author: SharpUML Team
"""

import re
from collections.abc import Iterable, Sequence
from typing import Optional

from ..config import DiagramConfig, get_config
from ..constants import (
    END_MARKER,
    NESTING_ARROW,
    PROJECT_DEPENDENCY_ARROW,
    RELATIONSHIP_ARROWS,
    START_MARKER,
    VISIBILITY_SYMBOLS,
    ErrorMessage,
)
from ..logging import get_logger, log_operation_end, log_operation_start
from ..models.descriptors import (
    ClassDescriptor,
    Method,
    ProjectDependency,
    Property,
    RelationshipKind,
    TypeParameter,
)
from .diagram_writer import DiagramWriter

logger = get_logger(__name__)

_ALIAS_PATTERN = re.compile(r"[^A-Za-z0-9_]")


def component_alias(project_name: str) -> str:
    """PlantUML-safe identifier for a project component."""
    return _ALIAS_PATTERN.sub("_", project_name)


def format_type_parameters(type_parameters: Sequence[TypeParameter]) -> str:
    """Render ``<T: class & new(), U>``; empty when there are no parameters."""
    if not type_parameters:
        return ""
    rendered = []
    for parameter in type_parameters:
        if parameter.constraints:
            rendered.append(f"{parameter.name}: {' & '.join(parameter.constraints)}")
        else:
            rendered.append(parameter.name)
    return f"<{', '.join(rendered)}>"


def format_property(prop: Property) -> str:
    keywords = [
        keyword
        for keyword, present in (
            ("static", prop.is_static),
            ("virtual", prop.is_virtual),
            ("override", prop.is_override),
        )
        if present
    ]
    prefix = "".join(f"{keyword} " for keyword in keywords)
    accessors = prop.accessors
    suffix = f" {{ {' '.join(accessors)} }}" if accessors else ""
    return f"{VISIBILITY_SYMBOLS[prop.visibility]} {prefix}{prop.name} : {prop.type}{suffix}"


def format_method(method: Method) -> str:
    keywords = [
        keyword
        for keyword, present in (
            ("static", method.is_static),
            ("virtual", method.is_virtual),
            ("override", method.is_override),
            ("abstract", method.is_abstract),
            ("async", method.is_async),
        )
        if present
    ]
    prefix = "".join(f"{keyword} " for keyword in keywords)
    parameters = ", ".join(f"{p.name}: {p.type}" for p in method.parameters)
    type_parameters = format_type_parameters(method.type_parameters)
    return (
        f"{VISIBILITY_SYMBOLS[method.visibility]} {prefix}"
        f"{method.name}{type_parameters}({parameters}) : {method.return_type}"
    )


def format_class_header(descriptor: ClassDescriptor) -> str:
    stereotypes = [
        f"<<{name}>>"
        for name, present in (
            ("sealed", descriptor.is_sealed),
            ("record", descriptor.is_record),
            ("abstract", descriptor.is_abstract),
            ("static", descriptor.is_static),
        )
        if present
    ]
    tags = "".join(f" {tag}" for tag in stereotypes)
    return f"class {descriptor.name}{format_type_parameters(descriptor.type_parameters)}{tags} {{"


class PlantUmlGenerator:
    """
    Generates PlantUML text from project dependencies.

    The generator holds no state between calls; ``generate_diagram`` may be
    called repeatedly and always returns byte-identical text for equal input.
    """

    def __init__(self, config: Optional[DiagramConfig] = None):
        self.config = config or get_config().diagram

    def generate_diagram(self, dependencies: Optional[Iterable[ProjectDependency]]) -> str:
        """
        Render the full diagram document.

        Args:
            dependencies: Projects to render. An empty list is valid and
                          yields only the markers and the preamble.

        Returns:
            PlantUML text ending with ``@enduml`` and no trailing newline

        Raises:
            TypeError: If dependencies is None
        """
        if dependencies is None:
            raise TypeError(ErrorMessage.NULL_ARGUMENT.format(argument="dependencies"))

        projects = list(dependencies)
        start_time = log_operation_start(logger, "Diagram generation", projects=len(projects))

        writer = DiagramWriter()
        writer.line(START_MARKER)
        writer.lines(self.config.preamble)
        writer.blank()

        if projects:
            self._write_dependency_block(writer, projects)
            writer.blank()

        classes = [descriptor for project in projects for descriptor in project.classes]
        if classes:
            self._write_class_block(writer, classes)
            writer.blank()

        writer.line(END_MARKER)

        log_operation_end(logger, "Diagram generation", start_time, lines=len(writer))
        return writer.render()

    # ------------------------------------------------------------------
    # Dependency block
    # ------------------------------------------------------------------

    def _write_dependency_block(
        self, writer: DiagramWriter, projects: Sequence[ProjectDependency]
    ) -> None:
        writer.line(f'package "{self.config.dependency_package_title}" {{')
        with writer.indented():
            for project in projects:
                alias = component_alias(project.project_name)
                writer.line(f'component "{project.project_name}" as {alias}')
                if project.package_references:
                    writer.line(f"note right of {alias}")
                    with writer.indented():
                        writer.line("Packages:")
                        for package in project.package_references:
                            writer.line(f"- {package}")
                    writer.line("end note")
        writer.line("}")

        for project in projects:
            for reference in project.project_references:
                writer.line(
                    f"{component_alias(project.project_name)} "
                    f"{PROJECT_DEPENDENCY_ARROW} {component_alias(reference)}"
                )

    # ------------------------------------------------------------------
    # Class-structure block
    # ------------------------------------------------------------------

    def _write_class_block(self, writer: DiagramWriter, classes: Sequence[ClassDescriptor]) -> None:
        # equal descriptors may sit both at top level and nested elsewhere
        nested_ids = {id(child) for descriptor in classes for child in descriptor.iter_nested()}
        top_level = [descriptor for descriptor in classes if id(descriptor) not in nested_ids]

        by_namespace: dict[str, list[ClassDescriptor]] = {}
        for descriptor in top_level:
            by_namespace.setdefault(descriptor.namespace, []).append(descriptor)

        for namespace, members in by_namespace.items():
            if namespace:
                writer.line(f"namespace {namespace} {{")
                with writer.indented():
                    self._write_namespace(writer, members)
                writer.line("}")
            else:
                self._write_namespace(writer, members)

    def _write_namespace(self, writer: DiagramWriter, classes: Sequence[ClassDescriptor]) -> None:
        for name in self._interface_stubs(classes):
            writer.line(f"interface {name} {{")
            writer.line("}")

        for descriptor in classes:
            self._write_class_body(writer, descriptor)
            self._write_edges(writer, descriptor)

    def _interface_stubs(self, classes: Sequence[ClassDescriptor]) -> list[str]:
        declared = set()
        if not self.config.stub_declared_classes:
            for descriptor in classes:
                declared.add(descriptor.name)
                declared.update(child.name for child in descriptor.iter_nested())

        stubs: list[str] = []
        for descriptor in classes:
            for owner in (descriptor, *descriptor.iter_nested()):
                for base in owner.base_types:
                    if base not in stubs and base not in declared:
                        stubs.append(base)
        return stubs

    def _write_class_body(self, writer: DiagramWriter, descriptor: ClassDescriptor) -> None:
        writer.line(format_class_header(descriptor))
        with writer.indented():
            for prop in descriptor.properties:
                writer.line(format_property(prop))
            for method in descriptor.methods:
                writer.line(format_method(method))
            for child in descriptor.nested_classes:
                self._write_class_body(writer, child)
        writer.line("}")

    def _write_edges(self, writer: DiagramWriter, descriptor: ClassDescriptor) -> None:
        for relationship in descriptor.relationships:
            arrow = RELATIONSHIP_ARROWS[relationship.kind]
            if relationship.kind is RelationshipKind.IMPLEMENTATION:
                writer.line(f"{descriptor.name} {arrow} {relationship.target_type}")
            else:
                writer.line(f"{relationship.target_type} {arrow} {descriptor.name}")

        for child in descriptor.nested_classes:
            writer.line(f"{descriptor.name} {NESTING_ARROW} {child.name}")

        for child in descriptor.nested_classes:
            self._write_edges(writer, child)


def generate_diagram(dependencies: Optional[Iterable[ProjectDependency]]) -> str:
    """Render dependencies with a generator built from the global config."""
    return PlantUmlGenerator().generate_diagram(dependencies)
