"""
Data models for SharpUML.

Provides the core data structures used throughout the application:

- **ClassDescriptor**: The shape of one class (members, modifiers,
  relationships, nested classes), built once per analysis run.
- **ProjectDependency**: A project with its references and top-level classes.
- **Relationship / RelationshipKind**: A classified reference to another type.
- **Property / Method / Parameter / TypeParameter**: Class members.
- **Visibility**: The six C# accessibility levels.
- **ClassDeclaration / TypeRef**: Raw front-end records before normalization.
"""

from .declarations import (
    ClassDeclaration,
    DeclaredType,
    FieldDeclaration,
    FileDeclarations,
    MethodDeclaration,
    ParameterDeclaration,
    PropertyDeclaration,
    TypeParameterDeclaration,
    TypeRef,
)
from .descriptors import (
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

__all__ = [
    "ClassDescriptor",
    "Method",
    "Parameter",
    "ProjectDependency",
    "Property",
    "Relationship",
    "RelationshipKind",
    "TypeParameter",
    "Visibility",
    "ClassDeclaration",
    "DeclaredType",
    "FieldDeclaration",
    "FileDeclarations",
    "MethodDeclaration",
    "ParameterDeclaration",
    "PropertyDeclaration",
    "TypeParameterDeclaration",
    "TypeRef",
]
