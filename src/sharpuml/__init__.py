"""
SharpUML - PlantUML Class and Dependency Diagrams for C# Solutions.

This package reads a Visual Studio solution, extracts the classes of every
C# project and renders one PlantUML document describing project
dependencies and class structure.

Key Features:
    - **Project Dependencies**: Components, package notes and project edges
    - **Class Structure**: Namespaces, members, generics and nested classes
    - **Relationship Inference**: Inheritance, implementation, composition,
      aggregation and dependency, with a configurable rule list
    - **No Build Required**: Project files are read as XML and sources are
      parsed with tree-sitter

Quick Start:
    1. Install: pip install sharpuml
    2. Generate: sharpuml Shop.sln shop.puml

Architecture:
    - cli.py: Command line entry point
    - parsers/: tree-sitter C# front end
    - services/: Classification, model building, rendering, solution reading
    - models/: Declarations and class descriptors
    - config.py: Classification, analysis and diagram settings

Author: SharpUML Team
"""

__version__ = "1.0.0"
__author__ = "SharpUML Team"
__description__ = "Generate PlantUML class and dependency diagrams from C# solutions"

# Public API
from sharpuml.constants import (
    APPLICATION_NAME,
    APPLICATION_VERSION,
)

from sharpuml.logging import (
    get_logger,
    setup_logging,
)

from sharpuml.services.analyzer import DependencyAnalyzer
from sharpuml.services.plantuml import PlantUmlGenerator, generate_diagram

__all__ = [
    # Metadata
    "__version__",
    "__author__",
    "__description__",

    # Constants
    "APPLICATION_NAME",
    "APPLICATION_VERSION",

    # Logging
    "get_logger",
    "setup_logging",

    # Pipeline
    "DependencyAnalyzer",
    "PlantUmlGenerator",
    "generate_diagram",
]
