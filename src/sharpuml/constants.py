"""
Constants and Configuration Values for SharpUML.

This module centralizes the magic strings used when turning a C# code model
into PlantUML text:

1. Application metadata
2. Type naming tables (primitive aliases, framework value types)
3. Diagram grammar tokens (markers, visibility symbols, arrows)
4. Standardized error messages

Usage:
    from sharpuml.constants import (
        START_MARKER,
        VISIBILITY_SYMBOLS,
        PRIMITIVE_TYPE_ALIASES,
    )

Naming Conventions:
    - ALL_CAPS for constants
    - Grouped by category with clear section headers

Author: SharpUML Team
"""

from .models.descriptors import RelationshipKind, Visibility


# ============================================================================
# Application Metadata
# ============================================================================

APPLICATION_NAME = "SharpUML"
APPLICATION_VERSION = "1.0.0"
APPLICATION_DESCRIPTION = "Generate PlantUML class and dependency diagrams from C# solutions"


# ============================================================================
# Source Discovery
# ============================================================================

SOLUTION_EXTENSION = ".sln"
PROJECT_EXTENSION = ".csproj"
SOURCE_EXTENSIONS = [".cs"]

# Build output folders never contain hand-written sources
DEFAULT_EXCLUDED_DIRECTORIES = ["bin", "obj", ".git", ".vs", "node_modules"]


# ============================================================================
# Type Naming
# ============================================================================

# Keyword, System-qualified and bare CLR names all collapse to the keyword
PRIMITIVE_TYPE_ALIASES = {
    "void": "void",
    "bool": "bool",
    "int": "int",
    "string": "string",
    "double": "double",
    "decimal": "decimal",
    "float": "float",
    "long": "long",
    "byte": "byte",
    "char": "char",
    "object": "object",
    "Void": "void",
    "Boolean": "bool",
    "Int32": "int",
    "String": "string",
    "Double": "double",
    "Decimal": "decimal",
    "Single": "float",
    "Int64": "long",
    "Byte": "byte",
    "Char": "char",
    "Object": "object",
}

# Framework value types that keep their canonical casing
FRAMEWORK_VALUE_TYPES = {
    "datetime": "DateTime",
    "datetimeoffset": "DateTimeOffset",
    "timespan": "TimeSpan",
    "guid": "Guid",
}

# C# keywords that denote value types but have no alias above
VALUE_TYPE_KEYWORDS = {
    "bool", "int", "double", "decimal", "float", "long", "byte", "char",
    "short", "ushort", "uint", "ulong", "sbyte", "nint", "nuint",
}

# Names that stand for System.Object, the universal root type
ROOT_OBJECT_NAMES = {"object", "Object", "System.Object"}

# Namespace prefixes that identify framework types
SYSTEM_NAMESPACE = "System"


# ============================================================================
# Diagram Grammar
# ============================================================================

START_MARKER = "@startuml"
END_MARKER = "@enduml"
INDENT_UNIT = "  "

DEFAULT_PREAMBLE = [
    "skinparam componentStyle rectangle",
    "skinparam packageStyle rectangle",
    "skinparam classAttributeIconSize 0",
    "skinparam component {",
    "  BackgroundColor White",
    "  ArrowColor Black",
    "  BorderColor Black",
    "}",
    "skinparam class {",
    "  BackgroundColor White",
    "  ArrowColor Black",
    "  BorderColor Black",
    "}",
    "skinparam package {",
    "  BackgroundColor LightGray",
    "  BorderColor Black",
    "}",
]

DEFAULT_DEPENDENCY_PACKAGE_TITLE = "Project Dependencies"

VISIBILITY_SYMBOLS = {
    Visibility.PUBLIC: "+",
    Visibility.PRIVATE: "-",
    Visibility.PROTECTED: "#",
    Visibility.INTERNAL: "~",
    Visibility.PROTECTED_INTERNAL: "#",
    Visibility.PRIVATE_PROTECTED: "-#",
}

# Implementation is rendered "Class --|> Target", all others "Target <arrow> Class"
RELATIONSHIP_ARROWS = {
    RelationshipKind.INHERITANCE: "<|--",
    RelationshipKind.IMPLEMENTATION: "--|>",
    RelationshipKind.COMPOSITION: "*--",
    RelationshipKind.AGGREGATION: "o--",
    RelationshipKind.DEPENDENCY: "<..",
}

NESTING_ARROW = "+--"
PROJECT_DEPENDENCY_ARROW = "-->"


# ============================================================================
# Error Messages
# ============================================================================

class ErrorMessage:
    """
    Standardized error messages for consistent user experience.

    Using a class instead of a dict provides:
    - IDE autocomplete
    - Easy documentation
    """

    NULL_ARGUMENT = "{argument} must not be None"
    USAGE = "Usage: sharpuml <solution-path> <output-path>"
    SOLUTION_NOT_FOUND = "Solution or project file does not exist: {path}"
    FRONTEND_INIT_FAILED = (
        "Failed to initialize the C# parser. "
        "Install tree-sitter and tree-sitter-c-sharp."
    )
    CONFIG_NOT_FOUND = "Configuration file does not exist: {path}"


# ============================================================================
# Success Messages
# ============================================================================

class SuccessMessage:
    """Standardized success messages for consistent user experience."""

    DIAGRAM_WRITTEN = "PlantUML diagram generated successfully at {path}"
