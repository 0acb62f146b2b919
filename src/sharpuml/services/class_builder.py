"""
Class Model Builder.

Turns raw ClassDeclarations from the front end into ClassDescriptors:
modifiers are normalized, member types formatted for display and the
relationship classifier run over the base list and member types. Nested
declarations are built recursively with the same extraction, so a nested
class is a full descriptor owned by its parent.

Failures are contained per declaration: a declaration that cannot be
built is logged and contributes nothing, siblings continue.

Author: SharpUML Team
"""

from collections.abc import Iterable
from typing import Optional

from ..config import ClassificationConfig
from ..logging import get_logger
from ..models.declarations import (
    ClassDeclaration,
    FileDeclarations,
    MethodDeclaration,
    PropertyDeclaration,
    TypeParameterDeclaration,
)
from ..models.descriptors import ClassDescriptor, Method, Parameter, Property, TypeParameter
from .modifiers import ModifierInfo
from .relationships import MemberReference, RelationshipClassifier
from .type_index import TypeIndex
from .type_names import format_type_name, is_root_object, simple_name

logger = get_logger(__name__)


def _type_parameters(declarations: Iterable[TypeParameterDeclaration]) -> tuple[TypeParameter, ...]:
    return tuple(
        TypeParameter(name=declaration.name, constraints=tuple(declaration.constraints))
        for declaration in declarations
    )


class ClassModelBuilder:
    """
    Builds ClassDescriptor trees for one project.

    Args:
        classifier: Relationship classifier to use. Defaults to one bound
                    to ``type_index`` and ``config``.
        type_index: Declared types of the project being built.
        config: Classification policy.

    Example:
        builder = ClassModelBuilder(type_index=TypeIndex(declared))
        descriptors = builder.build_all(file_declarations.classes)
    """

    def __init__(
        self,
        classifier: Optional[RelationshipClassifier] = None,
        type_index: Optional[TypeIndex] = None,
        config: Optional[ClassificationConfig] = None,
    ):
        self.classifier = classifier or RelationshipClassifier(
            config=config, type_index=type_index
        )

    def build(self, declaration: ClassDeclaration) -> Optional[ClassDescriptor]:
        """
        Build the descriptor for one declaration and its nested classes.

        Returns:
            The descriptor, or None if the declaration is unresolved or
            building it failed
        """
        return self._build_contained(declaration, scope=())

    def build_all(self, declarations: Iterable[ClassDeclaration]) -> list[ClassDescriptor]:
        """Build every declaration, dropping the ones that yield nothing."""
        descriptors = []
        for declaration in declarations:
            descriptor = self.build(declaration)
            if descriptor is not None:
                descriptors.append(descriptor)
        return descriptors

    def build_file(self, file_declarations: FileDeclarations) -> list[ClassDescriptor]:
        """Build the top-level classes of one parsed file. Never raises."""
        try:
            return self.build_all(file_declarations.classes)
        except Exception as e:
            logger.warning(
                f"Failed to build classes: {e}",
                extra={"file_path": file_declarations.file_path},
            )
            return []

    def _build_contained(
        self, declaration: ClassDeclaration, scope: tuple[str, ...]
    ) -> Optional[ClassDescriptor]:
        if not declaration.name:
            logger.debug(
                "Skipping unresolved class declaration",
                extra={"file_path": declaration.file_path},
            )
            return None

        try:
            return self._build(declaration, scope)
        except Exception as e:
            logger.warning(
                f"Failed to build class {declaration.name}: {e}",
                extra={"file_path": declaration.file_path},
            )
            return None

    def _build(self, declaration: ClassDeclaration, scope: tuple[str, ...]) -> ClassDescriptor:
        modifiers = ModifierInfo.from_keywords(declaration.modifiers)
        # Outer type parameters stay visible inside nested classes
        scope = scope + tuple(parameter.name for parameter in declaration.type_parameters)

        nested = []
        for nested_declaration in declaration.nested_classes:
            descriptor = self._build_contained(nested_declaration, scope)
            if descriptor is not None:
                nested.append(descriptor)

        base_types = tuple(
            simple_name(ref) for ref in declaration.base_types
            if simple_name(ref) and not is_root_object(ref)
        )

        return ClassDescriptor(
            name=declaration.name,
            namespace=declaration.namespace,
            visibility=modifiers.visibility,
            is_sealed=modifiers.is_sealed,
            is_record=declaration.is_record,
            is_abstract=modifiers.is_abstract,
            is_static=modifiers.is_static,
            base_types=base_types,
            properties=tuple(self._build_property(p) for p in declaration.properties),
            methods=tuple(self._build_method(m) for m in declaration.methods),
            type_parameters=_type_parameters(declaration.type_parameters),
            relationships=self._classify(declaration, scope),
            nested_classes=tuple(nested),
        )

    def _classify(self, declaration: ClassDeclaration, scope: tuple[str, ...]):
        base_class, interfaces = self.classifier.split_base_types(declaration.base_types)

        # a field has no set accessor
        members = [MemberReference(type=field.type, is_read_only=True) for field in declaration.fields]
        members.extend(
            MemberReference(
                type=prop.type,
                is_read_only="set" not in prop.accessors and "init" not in prop.accessors,
            )
            for prop in declaration.properties
        )

        dependencies = []
        method_scope = list(scope)
        for method in declaration.methods:
            dependencies.extend(parameter.type for parameter in method.parameters)
            dependencies.append(method.return_type)
            method_scope.extend(parameter.name for parameter in method.type_parameters)

        return self.classifier.classify(
            base_type=base_class,
            interfaces=interfaces,
            members=members,
            dependencies=dependencies,
            type_parameters=method_scope,
        )

    @staticmethod
    def _build_property(declaration: PropertyDeclaration) -> Property:
        modifiers = ModifierInfo.from_keywords(declaration.modifiers)
        return Property(
            name=declaration.name,
            type=format_type_name(declaration.type),
            visibility=modifiers.visibility,
            is_static=modifiers.is_static,
            is_virtual=modifiers.is_virtual,
            is_override=modifiers.is_override,
            has_getter="get" in declaration.accessors,
            has_setter="set" in declaration.accessors,
            has_init_setter="init" in declaration.accessors,
        )

    @staticmethod
    def _build_method(declaration: MethodDeclaration) -> Method:
        modifiers = ModifierInfo.from_keywords(declaration.modifiers)
        return Method(
            name=declaration.name,
            return_type=format_type_name(declaration.return_type),
            visibility=modifiers.visibility,
            is_static=modifiers.is_static,
            is_virtual=modifiers.is_virtual,
            is_override=modifiers.is_override,
            is_abstract=modifiers.is_abstract,
            is_async=modifiers.is_async,
            parameters=tuple(
                Parameter(name=parameter.name, type=format_type_name(parameter.type))
                for parameter in declaration.parameters
            ),
            type_parameters=_type_parameters(declaration.type_parameters),
        )
