"""Per-project index of declared types.

The front end has no compiler behind it, so facts the classifier needs
(is this name an interface, a struct, a sealed class, a record?) come from
the declarations found in the same project. Names that are not declared
locally fall back to naming heuristics.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from ..models.declarations import DeclaredType, TypeRef
from .type_names import is_builtin_type, is_builtin_value_type, is_root_object, simple_name

INTERFACE_KIND = "interface"
VALUE_KINDS = frozenset({"struct", "enum", "record_struct"})
RECORD_KINDS = frozenset({"record", "record_struct"})


@dataclass(frozen=True)
class TypeTraits:
    """What is known about a referenced type."""

    is_interface: bool = False
    is_value_type: bool = False
    is_sealed: bool = False
    is_record: bool = False
    is_declared: bool = False


def looks_like_interface(name: str) -> bool:
    """Naming convention fallback: ``I`` followed by an uppercase letter."""
    return len(name) >= 2 and name[0] == "I" and name[1].isupper()


class TypeIndex:
    """Lookup of declared types by simple name.

    When two declarations share a simple name (same name in different
    namespaces, or partial classes) the first one registered wins.
    """

    def __init__(self, declared_types: Iterable[DeclaredType] = ()):
        self._types: dict[str, DeclaredType] = {}
        for declared in declared_types:
            self.add(declared)

    def add(self, declared: DeclaredType) -> None:
        self._types.setdefault(declared.name, declared)

    def get(self, name: str) -> Optional[DeclaredType]:
        return self._types.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def traits(self, ref: TypeRef) -> TypeTraits:
        """Resolve traits for a type reference (wrappers already stripped)."""
        if is_builtin_type(ref) and not is_root_object(ref) and ref.name != "dynamic":
            # string and the framework value types are all sealed
            return TypeTraits(is_value_type=is_builtin_value_type(ref), is_sealed=True)

        declared = self.get(simple_name(ref))
        if declared is None:
            return TypeTraits(is_interface=looks_like_interface(ref.name))

        return TypeTraits(
            is_interface=declared.kind == INTERFACE_KIND,
            is_value_type=declared.kind in VALUE_KINDS,
            is_sealed="sealed" in declared.modifiers or "static" in declared.modifiers,
            is_record=declared.kind in RECORD_KINDS,
            is_declared=True,
        )

    def is_interface(self, ref: TypeRef) -> bool:
        return self.traits(ref).is_interface
