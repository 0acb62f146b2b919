"""Relationship classification between a class and the types it references.

Inheritance and implementation come from the base list. Member types are
run through an ordered list of ClassificationRule objects; the first rule
whose predicate matches decides the kind. The default rule list mirrors
the ownership heuristic:

    1. composition name patterns (exact or suffix)   -> Composition
    2. aggregation type names (exact)                 -> Aggregation
    3. value, sealed or record types                  -> Composition
    4. read-only members                              -> Composition
    5. anything else                                  -> Aggregation

Every target type name is classified at most once; later references to an
already classified name are ignored.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from ..config import ClassificationConfig, get_config
from ..models.declarations import TypeRef
from ..models.descriptors import Relationship, RelationshipKind
from ..logging import get_logger
from .type_index import TypeIndex
from .type_names import format_type_name, is_builtin_type, is_root_object, simple_name

logger = get_logger(__name__)


@dataclass(frozen=True)
class MemberType:
    """A member's type as seen by the classification rules."""

    type_name: str
    is_value_type: bool = False
    is_sealed: bool = False
    is_record: bool = False
    is_read_only: bool = False


@dataclass(frozen=True)
class MemberReference:
    """A field or property type together with its assignability."""

    type: Optional[TypeRef]
    is_read_only: bool = False


@dataclass(frozen=True)
class ClassificationRule:
    """One step of the ordered classification policy."""

    name: str
    kind: RelationshipKind
    predicate: Callable[[MemberType], bool]

    def matches(self, member: MemberType) -> bool:
        return self.predicate(member)


def default_rules(config: Optional[ClassificationConfig] = None) -> list[ClassificationRule]:
    """Build the default ordered rule list from the classification config."""
    config = config or get_config().classification
    patterns = tuple(pattern for pattern in config.composition_patterns if pattern)
    aggregation_types = frozenset(config.aggregation_types)

    return [
        ClassificationRule(
            name="composition-pattern",
            kind=RelationshipKind.COMPOSITION,
            predicate=lambda member: any(member.type_name.endswith(p) for p in patterns),
        ),
        ClassificationRule(
            name="aggregation-type",
            kind=RelationshipKind.AGGREGATION,
            predicate=lambda member: member.type_name in aggregation_types,
        ),
        ClassificationRule(
            name="value-sealed-or-record",
            kind=RelationshipKind.COMPOSITION,
            predicate=lambda member: member.is_value_type or member.is_sealed or member.is_record,
        ),
        ClassificationRule(
            name="read-only-member",
            kind=RelationshipKind.COMPOSITION,
            predicate=lambda member: member.is_read_only,
        ),
        ClassificationRule(
            name="mutable-reference",
            kind=RelationshipKind.AGGREGATION,
            predicate=lambda member: True,
        ),
    ]


class RelationshipClassifier:
    """Assigns one relationship kind per referenced type name.

    Args:
        rules: Ordered member classification rules. Defaults to
               ``default_rules(config)``.
        config: Classification policy (collections, ignore switches).
        type_index: Declared types of the current project.
    """

    def __init__(
        self,
        rules: Optional[Sequence[ClassificationRule]] = None,
        config: Optional[ClassificationConfig] = None,
        type_index: Optional[TypeIndex] = None,
    ):
        self.config = config or get_config().classification
        self.rules = list(rules) if rules is not None else default_rules(self.config)
        self.type_index = type_index or TypeIndex()
        self._collection_types = frozenset(self.config.collection_types)
        self._dictionary_types = frozenset(self.config.dictionary_types)

    def split_base_types(
        self, base_types: Iterable[TypeRef]
    ) -> tuple[Optional[TypeRef], list[TypeRef]]:
        """Separate the base class from implemented interfaces.

        C# lists the base class first, so only the first entry can be a
        class; it is one unless the index (or the I-prefix convention)
        says it is an interface. ``object`` is never reported as a base.
        """
        base_class = None
        interfaces = []
        for position, ref in enumerate(base_types):
            if position == 0 and not self.type_index.is_interface(ref):
                if not is_root_object(ref):
                    base_class = ref
                continue
            interfaces.append(ref)
        return base_class, interfaces

    def relationship_target(self, ref: Optional[TypeRef]) -> Optional[TypeRef]:
        """Unwrap arrays, nullables and containers down to the element type."""
        while ref is not None:
            if not ref.is_resolved or ref.is_tuple:
                return None
            element = ref.element()
            if element is not None:
                ref = element
                continue
            if ref.is_generic and ref.name in self._collection_types:
                ref = ref.arguments[0]
                continue
            if ref.is_generic and (ref.name in self._dictionary_types or ref.name == "Nullable"):
                ref = ref.arguments[-1]
                continue
            if format_type_name(ref) == "void":
                return None
            return ref
        return None

    def classify(
        self,
        base_type: Optional[TypeRef] = None,
        interfaces: Sequence[TypeRef] = (),
        members: Sequence[MemberReference] = (),
        dependencies: Sequence[TypeRef] = (),
        type_parameters: Iterable[str] = (),
    ) -> tuple[Relationship, ...]:
        """Classify every type a class references.

        Args:
            base_type: Direct base class, if any
            interfaces: Implemented interfaces in declaration order
            members: Field types first, then property types
            dependencies: Method parameter and return types, classified only
                          when ``include_method_dependencies`` is enabled
            type_parameters: Generic parameter names in scope

        Returns:
            Relationships with at most one entry per target type name
        """
        relationships: list[Relationship] = []
        seen: set[str] = set()
        skipped = set(type_parameters) if self.config.ignore_type_parameters else set()

        def record(name: str, kind: RelationshipKind) -> None:
            seen.add(name)
            relationships.append(Relationship(target_type=name, kind=kind))

        if base_type is not None and not is_root_object(base_type):
            name = simple_name(base_type)
            if name:
                record(name, RelationshipKind.INHERITANCE)

        for interface in interfaces:
            name = simple_name(interface)
            if name and name not in seen:
                record(name, RelationshipKind.IMPLEMENTATION)

        for member in members:
            target = self._eligible_target(member.type, skipped, seen)
            if target is None:
                continue
            record(self.target_name(target), self._classify_member(target, member.is_read_only))

        if self.config.include_method_dependencies:
            for dependency in dependencies:
                target = self._eligible_target(dependency, skipped, seen)
                if target is not None:
                    record(self.target_name(target), RelationshipKind.DEPENDENCY)

        return tuple(relationships)

    def _eligible_target(
        self, ref: Optional[TypeRef], skipped: set[str], seen: set[str]
    ) -> Optional[TypeRef]:
        target = self.relationship_target(ref)
        if target is None or not target.name:
            return None
        name = self.target_name(target)
        if name in seen or name in skipped:
            return None
        if self.config.ignore_builtin_types and is_builtin_type(target):
            return None
        return target

    @staticmethod
    def target_name(target: TypeRef) -> str:
        """Relationship key of an unwrapped target; built-ins use their alias (int, string)."""
        return format_type_name(target) if is_builtin_type(target) else target.name

    def _classify_member(self, target: TypeRef, is_read_only: bool) -> RelationshipKind:
        traits = self.type_index.traits(target)
        member = MemberType(
            type_name=self.target_name(target),
            is_value_type=traits.is_value_type,
            is_sealed=traits.is_sealed,
            is_record=traits.is_record,
            is_read_only=is_read_only,
        )
        for rule in self.rules:
            if rule.matches(member):
                logger.debug(
                    f"Classified {member.type_name} as {rule.kind.value}",
                    extra={"rule": rule.name},
                )
                return rule.kind
        return RelationshipKind.AGGREGATION
