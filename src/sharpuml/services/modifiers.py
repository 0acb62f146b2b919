"""Normalization of C# modifier keywords into visibility and trait flags."""

from collections.abc import Iterable
from dataclasses import dataclass

from ..models.descriptors import Visibility


def normalize_visibility(modifiers: Iterable[str]) -> Visibility:
    """Map the access keywords of a declaration to one Visibility.

    Precedence, first match wins:
        public                  -> Public
        private + protected     -> PrivateProtected
        protected + internal    -> ProtectedInternal
        protected               -> Protected
        internal                -> Internal
        private                 -> Private
        (none)                  -> Private, the C# default for members
    """
    keywords = set(modifiers)
    has_private = "private" in keywords
    has_protected = "protected" in keywords
    has_internal = "internal" in keywords

    if "public" in keywords:
        return Visibility.PUBLIC
    if has_private and has_protected:
        return Visibility.PRIVATE_PROTECTED
    if has_protected and has_internal:
        return Visibility.PROTECTED_INTERNAL
    if has_protected:
        return Visibility.PROTECTED
    if has_internal:
        return Visibility.INTERNAL
    return Visibility.PRIVATE


@dataclass(frozen=True)
class ModifierInfo:
    """Visibility plus independent presence flags for trait keywords."""

    visibility: Visibility = Visibility.PRIVATE
    is_static: bool = False
    is_virtual: bool = False
    is_override: bool = False
    is_abstract: bool = False
    is_sealed: bool = False
    is_async: bool = False
    is_readonly: bool = False

    @classmethod
    def from_keywords(cls, modifiers: Iterable[str]) -> "ModifierInfo":
        keywords = set(modifiers)
        return cls(
            visibility=normalize_visibility(keywords),
            is_static="static" in keywords,
            is_virtual="virtual" in keywords,
            is_override="override" in keywords,
            is_abstract="abstract" in keywords,
            is_sealed="sealed" in keywords,
            is_async="async" in keywords,
            is_readonly="readonly" in keywords,
        )
