"""
Configuration Module for SharpUML.

This module provides the configuration system for the SharpUML application,
including the relationship classification policy, source discovery and
diagram rendering settings.

The configuration follows a hierarchical structure:
    - ClassificationConfig: Composition/aggregation heuristics
    - AnalysisConfig: Solution and source file discovery
    - DiagramConfig: PlantUML rendering settings
    - Config: Main configuration aggregating all sub-configs

Example Usage:
    >>> from sharpuml.config import get_config, set_config, Config
    >>> config = Config.load_file(Path("sharpuml.json"))
    >>> set_config(config)
    >>> current_config = get_config()

Author: SharpUML Team
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_DEPENDENCY_PACKAGE_TITLE,
    DEFAULT_EXCLUDED_DIRECTORIES,
    DEFAULT_PREAMBLE,
    SOURCE_EXTENSIONS,
    ErrorMessage,
)


class ClassificationConfig(BaseModel):
    """
    Policy for classifying member types as composition or aggregation.

    Inheritance and implementation come straight from the base list; the
    split between composition and aggregation is a heuristic, so the
    name-based parts of it live here instead of in code.

    Attributes:
        composition_patterns: Type names that always mean composition,
                              matched exactly or as a name suffix
        aggregation_types: Type names that always mean aggregation (exact)
        collection_types: Generic containers matched on their element type
        dictionary_types: Generic maps matched on their value (last) type
        ignore_builtin_types: Skip primitives, string, object and framework
                              value types when collecting relationships
        ignore_type_parameters: Skip the class's own generic parameters
        include_method_dependencies: Classify unclassified parameter and
                                     return types as dependencies
    """

    composition_patterns: list[str] = Field(
        default=["HelperComponent", "DataElement"],
        description="Type names (exact or suffix) classified as composition",
    )
    aggregation_types: list[str] = Field(
        default=["OtherService"],
        description="Type names (exact) classified as aggregation",
    )
    collection_types: list[str] = Field(
        default=[
            "IEnumerable",
            "ICollection",
            "IList",
            "IReadOnlyCollection",
            "IReadOnlyList",
            "ISet",
            "IReadOnlySet",
            "List",
            "HashSet",
            "SortedSet",
            "LinkedList",
            "Queue",
            "Stack",
            "Collection",
            "ReadOnlyCollection",
            "ObservableCollection",
            "ImmutableArray",
            "ImmutableList",
            "ImmutableHashSet",
            "ConcurrentBag",
            "ConcurrentQueue",
            "ConcurrentStack",
            "IAsyncEnumerable",
            "Lazy",
            "Task",
            "ValueTask",
        ],
        description="Generic containers whose element type is the relationship target",
    )
    dictionary_types: list[str] = Field(
        default=[
            "IDictionary",
            "IReadOnlyDictionary",
            "Dictionary",
            "SortedDictionary",
            "ConcurrentDictionary",
            "ImmutableDictionary",
        ],
        description="Generic maps whose value type is the relationship target",
    )
    ignore_builtin_types: bool = Field(
        default=False,
        description="Do not relate classes to primitives, string, object and framework value types",
    )
    ignore_type_parameters: bool = Field(
        default=True,
        description="Do not relate a generic class to its own type parameters",
    )
    include_method_dependencies: bool = Field(
        default=False,
        description="Add dependency relationships for method parameter and return types",
    )


class AnalysisConfig(BaseModel):
    """Configuration for solution, project and source file discovery."""

    source_extensions: list[str] = Field(
        default_factory=lambda: list(SOURCE_EXTENSIONS),
        description="Extensions of source files to parse",
    )
    excluded_directories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_DIRECTORIES),
        description="Directory names skipped when collecting source files",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        description="Projects analyzed in parallel (1 = sequential)",
    )


class DiagramConfig(BaseModel):
    """
    Configuration for PlantUML rendering.

    Attributes:
        preamble: Lines emitted right after the start marker
        dependency_package_title: Title of the package wrapping project components
        stub_declared_classes: Emit interface stubs even for base types that
                               are declared as classes in the same diagram
    """

    preamble: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PREAMBLE),
        description="Style lines emitted after @startuml",
    )
    dependency_package_title: str = Field(
        default=DEFAULT_DEPENDENCY_PACKAGE_TITLE,
        description="Title of the project dependency package",
    )
    stub_declared_classes: bool = Field(
        default=True,
        description="Stub every base type name, including declared classes",
    )


class Config(BaseModel):
    """
    Main configuration for SharpUML.

    Aggregates all sub-configurations and provides the central
    configuration access point for the application.

    Example:
        >>> config = Config(
        ...     classification=ClassificationConfig(
        ...         composition_patterns=["Options"],
        ...         aggregation_types=["ILogger"],
        ...     )
        ... )
    """

    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    diagram: DiagramConfig = Field(default_factory=DiagramConfig)

    @classmethod
    def load_default(cls) -> "Config":
        """
        Load default configuration.

        Returns:
            Config instance with default values
        """
        return cls()

    @classmethod
    def load_file(cls, path: Path) -> "Config":
        """
        Load configuration from a JSON file.

        Keys missing from the file keep their defaults.

        Args:
            path: Path to a JSON document shaped like Config

        Returns:
            Validated Config instance

        Raises:
            FileNotFoundError: If the file does not exist
            pydantic.ValidationError: If the document does not match the schema
        """
        if not path.exists():
            raise FileNotFoundError(ErrorMessage.CONFIG_NOT_FOUND.format(path=path))

        data = json.loads(path.read_text(encoding="utf-8"))
        return cls.model_validate(data)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Creates a default configuration if none has been set.

    Returns:
        Current global Config instance
    """
    global _config
    if _config is None:
        _config = Config.load_default()
    return _config


def set_config(config: Config) -> None:
    """
    Set the global configuration instance.

    Args:
        config: Config instance to use globally
    """
    global _config
    _config = config


def reset_config() -> None:
    """
    Reset the global configuration to None.

    Useful for testing or reinitializing configuration.
    """
    global _config
    _config = None
