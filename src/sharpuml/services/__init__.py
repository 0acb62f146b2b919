"""
Services Layer for SharpUML.

This module provides the core business logic used to turn C# declarations
into a PlantUML document. Each service encapsulates a specific capability:

**Modifier normalization** (``modifiers``):
    Maps access keyword combinations to one Visibility plus trait flags.

**Type name formatting** (``type_names``):
    Parses C# type syntax and renders canonical short display names.

**TypeIndex** (``type_index``):
    Per-project lookup of declared types (interface, struct, record, ...).

**RelationshipClassifier** (``relationships``):
    Assigns one relationship kind per referenced type using an ordered,
    injectable rule list.

**ClassModelBuilder** (``class_builder``):
    Builds ClassDescriptor trees from raw declarations.

**PlantUmlGenerator** (``plantuml``):
    Renders projects and classes into PlantUML text through a DiagramWriter.

**Solution reader** (``solution``):
    Reads ``.sln`` and ``.csproj`` files.

**ProjectDependencyAggregator** (``aggregator``):
    Bundles per-project classes with declared references.

The DependencyAnalyzer driver lives in ``services.analyzer`` and is
imported from there (it depends on the parsers package).

Architecture:
    Services hold no state between calls. Everything they produce is an
    immutable value built once per analysis run.
"""

from .aggregator import ProjectDependencyAggregator
from .class_builder import ClassModelBuilder
from .diagram_writer import DiagramWriter
from .modifiers import ModifierInfo, normalize_visibility
from .plantuml import PlantUmlGenerator, generate_diagram
from .relationships import (
    ClassificationRule,
    MemberReference,
    MemberType,
    RelationshipClassifier,
    default_rules,
)
from .solution import ProjectHandle, list_project_files, open_project, project_references
from .type_index import TypeIndex, TypeTraits
from .type_names import format_type_name, parse_type_reference

__all__ = [
    "ClassModelBuilder",
    "ClassificationRule",
    "DiagramWriter",
    "MemberReference",
    "MemberType",
    "ModifierInfo",
    "PlantUmlGenerator",
    "ProjectDependencyAggregator",
    "ProjectHandle",
    "RelationshipClassifier",
    "TypeIndex",
    "TypeTraits",
    "default_rules",
    "format_type_name",
    "generate_diagram",
    "list_project_files",
    "normalize_visibility",
    "open_project",
    "parse_type_reference",
    "project_references",
]
