"""
Tests for the PlantUML diagram generator.

Tests cover:
- Document markers, preamble and contract violations
- Project dependency block (components, package notes, edges, aliases)
- Class-structure block (namespaces, interface stubs, members, stereotypes)
- Relationship and nesting edges and their order
- Determinism
- DiagramWriter indentation

Author: SharpUML Team
"""

import pytest

from sharpuml.config import DiagramConfig, reset_config
from sharpuml.constants import DEFAULT_PREAMBLE
from sharpuml.models import (
    ClassDescriptor,
    Method,
    Parameter,
    ProjectDependency,
    Property,
    Relationship,
    RelationshipKind,
    TypeParameter,
    Visibility,
)
from sharpuml.services.diagram_writer import DiagramWriter
from sharpuml.services.plantuml import (
    PlantUmlGenerator,
    component_alias,
    format_method,
    format_property,
    generate_diagram,
)


@pytest.fixture(autouse=True)
def reset_config_fixture():
    """Reset config before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def generator():
    """Generator with default diagram settings."""
    return PlantUmlGenerator(DiagramConfig())


def project_with(*classes, name="App"):
    return ProjectDependency(project_name=name, classes=tuple(classes))


def lines_of(text):
    return text.split("\n")


class TestDocument:
    """Tests for the document frame."""

    def test_empty_input(self, generator):
        """Test an empty list yields markers and preamble only."""
        diagram = generator.generate_diagram([])

        assert diagram.startswith("@startuml\n")
        assert diagram.endswith("@enduml")
        assert lines_of(diagram) == ["@startuml", *DEFAULT_PREAMBLE, "", "@enduml"]

    def test_no_trailing_newline(self, generator):
        """Test nothing follows the closing marker."""
        diagram = generator.generate_diagram([project_with(ClassDescriptor(name="A"))])

        assert lines_of(diagram)[-1] == "@enduml"

    def test_none_is_rejected(self, generator):
        """Test a missing dependency list fails immediately."""
        with pytest.raises(TypeError, match="dependencies"):
            generator.generate_diagram(None)

    def test_module_level_function(self):
        """Test generate_diagram uses the global configuration."""
        assert generate_diagram([]).startswith("@startuml")

    def test_accepts_any_iterable(self, generator):
        """Test generators are consumed once."""
        diagram = generator.generate_diagram(p for p in [ProjectDependency(project_name="Core")])

        assert 'component "Core" as Core' in diagram

    def test_custom_preamble(self):
        """Test the preamble comes from configuration."""
        generator = PlantUmlGenerator(DiagramConfig(preamble=["skinparam monochrome true"]))

        assert lines_of(generator.generate_diagram([]))[:2] == [
            "@startuml",
            "skinparam monochrome true",
        ]

    def test_idempotent(self, generator):
        """Test the same input renders byte-identical output."""
        projects = [
            ProjectDependency(project_name="Core", package_references=("LoggingLib",)),
            ProjectDependency(
                project_name="Web",
                project_references=("Core",),
                classes=(
                    ClassDescriptor(
                        name="HomeController",
                        namespace="Web",
                        base_types=("Controller",),
                        relationships=(Relationship("Controller", RelationshipKind.INHERITANCE),),
                    ),
                ),
            ),
        ]

        assert generator.generate_diagram(projects) == generator.generate_diagram(projects)


class TestDependencyBlock:
    """Tests for project components and dependency edges."""

    def test_core_web_scenario(self, generator):
        """Test components, the package note and the Web to Core edge."""
        projects = [
            ProjectDependency(project_name="Core", package_references=("LoggingLib",)),
            ProjectDependency(project_name="Web", project_references=("Core",)),
        ]

        lines = lines_of(generator.generate_diagram(projects))
        start = lines.index('package "Project Dependencies" {')

        assert lines[start:start + 9] == [
            'package "Project Dependencies" {',
            '  component "Core" as Core',
            "  note right of Core",
            "    Packages:",
            "    - LoggingLib",
            "  end note",
            '  component "Web" as Web',
            "}",
            "Web --> Core",
        ]
        assert "namespace" not in "\n".join(lines)

    def test_packages_in_original_order(self, generator):
        """Test package names are listed as declared."""
        project = ProjectDependency(project_name="Api", package_references=("Zeta", "Alpha"))

        diagram = generator.generate_diagram([project])

        assert diagram.index("- Zeta") < diagram.index("- Alpha")

    def test_no_note_without_packages(self, generator):
        """Test projects without packages get no note."""
        diagram = generator.generate_diagram([ProjectDependency(project_name="Core")])

        assert "note right" not in diagram

    def test_edges_not_deduplicated(self, generator):
        """Test duplicate references produce duplicate edges in order."""
        projects = [
            ProjectDependency(project_name="Web", project_references=("Core", "Data", "Core")),
            ProjectDependency(project_name="Data", project_references=("Core",)),
        ]

        lines = lines_of(generator.generate_diagram(projects))
        edges = [line for line in lines if "-->" in line]

        assert edges == ["Web --> Core", "Web --> Data", "Web --> Core", "Data --> Core"]

    def test_aliases_are_sanitized(self, generator):
        """Test dotted and dashed project names get safe aliases."""
        projects = [
            ProjectDependency(project_name="Shop.Core"),
            ProjectDependency(project_name="Shop.Web-Api", project_references=("Shop.Core",)),
        ]

        diagram = generator.generate_diagram(projects)

        assert 'component "Shop.Core" as Shop_Core' in diagram
        assert 'component "Shop.Web-Api" as Shop_Web_Api' in diagram
        assert "Shop_Web_Api --> Shop_Core" in diagram

    def test_component_alias(self):
        """Test alias sanitization."""
        assert component_alias("My Project.v2") == "My_Project_v2"
        assert component_alias("Core") == "Core"

    def test_custom_package_title(self):
        """Test the package title comes from configuration."""
        generator = PlantUmlGenerator(DiagramConfig(dependency_package_title="Solution"))

        assert 'package "Solution" {' in generator.generate_diagram([ProjectDependency(project_name="A")])


class TestClassBlock:
    """Tests for the class-structure block."""

    def test_sealed_foo_scenario(self, generator):
        """Test stereotype, init accessor, interface stub and implementation edge."""
        foo = ClassDescriptor(
            name="Foo",
            namespace="Demo",
            visibility=Visibility.PUBLIC,
            is_sealed=True,
            base_types=("IFoo",),
            properties=(
                Property(
                    name="Id",
                    type="int",
                    visibility=Visibility.PUBLIC,
                    has_getter=True,
                    has_init_setter=True,
                ),
            ),
            relationships=(Relationship("IFoo", RelationshipKind.IMPLEMENTATION),),
        )

        lines = lines_of(generator.generate_diagram([project_with(foo)]))
        start = lines.index("namespace Demo {")

        assert lines[start:start + 8] == [
            "namespace Demo {",
            "  interface IFoo {",
            "  }",
            "  class Foo <<sealed>> {",
            "    + Id : int { get init }",
            "  }",
            "  Foo --|> IFoo",
            "}",
        ]

    def test_global_namespace_not_wrapped(self, generator):
        """Test classes without a namespace are emitted at top level."""
        lines = lines_of(generator.generate_diagram([project_with(ClassDescriptor(name="Program"))]))

        assert "class Program {" in lines
        assert not any(line.startswith("namespace") for line in lines)

    def test_namespaces_in_first_encountered_order(self, generator):
        """Test namespaces are not sorted."""
        projects = [
            project_with(ClassDescriptor(name="Z1", namespace="Zeta"), name="P1"),
            project_with(
                ClassDescriptor(name="A1", namespace="Alpha"),
                ClassDescriptor(name="Z2", namespace="Zeta"),
                name="P2",
            ),
        ]

        diagram = generator.generate_diagram(projects)

        assert diagram.index("namespace Zeta {") < diagram.index("namespace Alpha {")
        assert diagram.count("namespace Zeta {") == 1
        assert diagram.index("class Z1 {") < diagram.index("class Z2 {")

    def test_interface_stubs_are_distinct(self, generator):
        """Test each base type name is stubbed once per namespace."""
        classes = [
            ClassDescriptor(name="A", namespace="N", base_types=("IEntity", "IAudited")),
            ClassDescriptor(name="B", namespace="N", base_types=("IEntity",)),
        ]

        lines = lines_of(generator.generate_diagram([project_with(*classes)]))
        stubs = [line.strip() for line in lines if line.strip().startswith("interface")]

        assert stubs == ["interface IEntity {", "interface IAudited {"]

    def test_stubs_precede_classes(self, generator):
        """Test interface stubs are emitted before the first class."""
        diagram = generator.generate_diagram([
            project_with(ClassDescriptor(name="A", namespace="N", base_types=("IEntity",)))
        ])

        assert diagram.index("interface IEntity {") < diagram.index("class A {")

    def test_declared_classes_not_stubbed_when_disabled(self):
        """Test base types declared as classes can be left unstubbed."""
        generator = PlantUmlGenerator(DiagramConfig(stub_declared_classes=False))
        classes = [
            ClassDescriptor(name="EntityBase", namespace="N"),
            ClassDescriptor(name="Order", namespace="N", base_types=("EntityBase", "IEntity")),
        ]

        diagram = generator.generate_diagram([project_with(*classes)])

        assert "interface EntityBase {" not in diagram
        assert "interface IEntity {" in diagram

    def test_class_header(self, generator):
        """Test generic parameters and every stereotype."""
        repo = ClassDescriptor(
            name="Repository",
            is_sealed=True,
            is_record=True,
            is_abstract=True,
            is_static=True,
            type_parameters=(
                TypeParameter("T", ("class", "new()")),
                TypeParameter("TKey"),
            ),
        )

        diagram = generator.generate_diagram([project_with(repo)])

        assert (
            "class Repository<T: class & new(), TKey> "
            "<<sealed>> <<record>> <<abstract>> <<static>> {"
        ) in diagram

    def test_members(self, generator):
        """Test property and method lines inside the class body."""
        service = ClassDescriptor(
            name="OrderService",
            properties=(
                Property("Name", "string", Visibility.PUBLIC, has_getter=True, has_setter=True),
                Property("Cache", "Dictionary<string, Order>", Visibility.PRIVATE),
            ),
            methods=(
                Method(
                    name="FindAsync",
                    return_type="Task<Order>",
                    visibility=Visibility.PUBLIC,
                    is_async=True,
                    parameters=(Parameter("id", "int"), Parameter("token", "CancellationToken")),
                ),
            ),
        )

        lines = lines_of(generator.generate_diagram([project_with(service)]))
        start = lines.index("class OrderService {")

        assert lines[start:start + 5] == [
            "class OrderService {",
            "  + Name : string { get set }",
            "  - Cache : Dictionary<string, Order>",
            "  + async FindAsync(id: int, token: CancellationToken) : Task<Order>",
            "}",
        ]


class TestEdges:
    """Tests for relationship and nesting edges."""

    def test_arrow_per_kind(self, generator):
        """Test implementation points outward, every other kind points inward."""
        car = ClassDescriptor(
            name="Car",
            relationships=(
                Relationship("Vehicle", RelationshipKind.INHERITANCE),
                Relationship("IDriveable", RelationshipKind.IMPLEMENTATION),
                Relationship("Engine", RelationshipKind.COMPOSITION),
                Relationship("Driver", RelationshipKind.AGGREGATION),
                Relationship("Logger", RelationshipKind.DEPENDENCY),
            ),
        )

        lines = lines_of(generator.generate_diagram([project_with(car)]))
        start = lines.index("Vehicle <|-- Car")

        assert lines[start:start + 5] == [
            "Vehicle <|-- Car",
            "Car --|> IDriveable",
            "Engine *-- Car",
            "Driver o-- Car",
            "Logger <.. Car",
        ]

    def test_nesting_order(self, generator):
        """Test nested bodies render inside the parent, before its edges."""
        deep = ClassDescriptor(
            name="Deep",
            relationships=(Relationship("Money", RelationshipKind.COMPOSITION),),
        )
        inner = ClassDescriptor(
            name="Inner",
            properties=(Property("Count", "int", Visibility.PUBLIC, has_getter=True),),
            nested_classes=(deep,),
        )
        outer = ClassDescriptor(
            name="Outer",
            properties=(Property("Name", "string", Visibility.PUBLIC, has_getter=True),),
            relationships=(Relationship("Base", RelationshipKind.INHERITANCE),),
            nested_classes=(inner,),
        )

        lines = lines_of(generator.generate_diagram([project_with(outer)]))
        start = lines.index("class Outer {")

        assert lines[start:start + 13] == [
            "class Outer {",
            "  + Name : string { get }",
            "  class Inner {",
            "    + Count : int { get }",
            "    class Deep {",
            "    }",
            "  }",
            "}",
            "Base <|-- Outer",
            "Outer +-- Inner",
            "Inner +-- Deep",
            "Money *-- Deep",
            "",
        ]

    def test_nested_class_not_rendered_at_top_level(self, generator):
        """Test a nested class listed in the collection is rendered once."""
        inner = ClassDescriptor(name="Inner")
        outer = ClassDescriptor(name="Outer", nested_classes=(inner,))

        diagram = generator.generate_diagram([project_with(outer, inner)])

        assert diagram.count("class Inner {") == 1
        assert diagram.count("Outer +-- Inner") == 1

    def test_equal_top_level_and_nested_classes_both_rendered(self, generator):
        """Test a top-level class equal to another class's nested class is kept."""
        top = ClassDescriptor(name="Item", namespace="A")
        outer = ClassDescriptor(
            name="Outer", namespace="A", nested_classes=(ClassDescriptor(name="Item", namespace="A"),)
        )

        diagram = generator.generate_diagram([project_with(top, outer)])

        assert diagram.count("class Item {") == 2
        assert diagram.count("Outer +-- Item") == 1


class TestFormatting:
    """Tests for the member line helpers."""

    @pytest.mark.parametrize(
        "visibility, symbol",
        [
            (Visibility.PUBLIC, "+"),
            (Visibility.PRIVATE, "-"),
            (Visibility.PROTECTED, "#"),
            (Visibility.INTERNAL, "~"),
            (Visibility.PROTECTED_INTERNAL, "#"),
            (Visibility.PRIVATE_PROTECTED, "-#"),
        ],
    )
    def test_visibility_symbols(self, visibility, symbol):
        """Test the visibility symbol table."""
        assert format_property(Property("X", "int", visibility)) == f"{symbol} X : int"

    def test_property_modifiers(self):
        """Test property keywords in fixed order."""
        prop = Property(
            "Count", "int", Visibility.PROTECTED,
            is_static=True, is_virtual=True, is_override=True, has_getter=True,
        )

        assert format_property(prop) == "# static virtual override Count : int { get }"

    def test_method_modifiers_and_type_parameters(self):
        """Test method keywords in fixed order and generic parameters."""
        method = Method(
            name="Map",
            return_type="TOut",
            visibility=Visibility.INTERNAL,
            is_static=True,
            is_virtual=True,
            is_override=True,
            is_abstract=True,
            is_async=True,
            parameters=(Parameter("source", "TIn"),),
            type_parameters=(TypeParameter("TIn"), TypeParameter("TOut", ("struct",))),
        )

        assert format_method(method) == (
            "~ static virtual override abstract async Map<TIn, TOut: struct>(source: TIn) : TOut"
        )

    def test_method_without_parameters(self):
        """Test an empty parameter list."""
        assert format_method(Method("Run", "void", Visibility.PUBLIC)) == "+ Run() : void"


class TestDiagramWriter:
    """Tests for DiagramWriter."""

    def test_indentation_is_two_spaces(self):
        """Test each indented block adds exactly two spaces."""
        writer = DiagramWriter()
        writer.line("a")
        with writer.indented():
            writer.line("b")
            with writer.indented():
                writer.line("c")
        writer.line("d")

        assert writer.render() == "a\n  b\n    c\nd"

    def test_blank_lines_have_no_indent(self):
        """Test blank lines stay empty inside indented blocks."""
        writer = DiagramWriter()
        with writer.indented():
            writer.blank()
            writer.line("")

        assert writer.render() == "\n"
        assert len(writer) == 2

    def test_indent_restored_after_error(self):
        """Test the level is restored when the block raises."""
        writer = DiagramWriter()

        with pytest.raises(RuntimeError):
            with writer.indented():
                raise RuntimeError("fail")

        assert writer.level == 0
