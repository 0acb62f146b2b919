"""Type reference parsing and canonical display names.

C# type syntax is parsed into TypeRef records without any compiler
support; ``format_type_name`` then renders the short display form used in
diagrams:

    System.Int32                              -> int
    Dictionary<string, List<Order>>           -> Dictionary<string, List<Order>>
    global::Shop.Domain.Order                 -> Order
    Order[]                                   -> Order[]
    int?                                      -> int?

Both functions are total: anything that cannot be parsed falls back to
the raw source text, and a missing type formats as the empty string.
"""

import re
from dataclasses import replace
from typing import Optional

from ..constants import (
    FRAMEWORK_VALUE_TYPES,
    PRIMITIVE_TYPE_ALIASES,
    ROOT_OBJECT_NAMES,
    SYSTEM_NAMESPACE,
    VALUE_TYPE_KEYWORDS,
)
from ..models.declarations import TypeRef

_TOKEN_PATTERN = re.compile(
    r"\s*(?:(?P<ident>@?[A-Za-z_][A-Za-z0-9_]*)|(?P<punct>::|[<>,.()\[\]?*]))"
)


class _TypeParser:
    """Recursive descent parser over a tokenized type reference."""

    def __init__(self, text: str):
        self.tokens = self._tokenize(text)
        self.pos = 0

    @staticmethod
    def _tokenize(text: str) -> list[str]:
        tokens = []
        pos = 0
        while pos < len(text):
            match = _TOKEN_PATTERN.match(text, pos)
            if not match:
                raise ValueError(f"Unexpected character in type reference: {text[pos:]!r}")
            tokens.append(match.group("ident") or match.group("punct"))
            pos = match.end()
        return tokens

    def peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def advance(self) -> str:
        token = self.peek()
        if token is None:
            raise ValueError("Unexpected end of type reference")
        self.pos += 1
        return token

    def expect(self, token: str) -> None:
        if self.advance() != token:
            raise ValueError(f"Expected {token!r}")

    def expect_identifier(self) -> str:
        token = self.advance()
        if not (token[0].isalpha() or token[0] in "_@"):
            raise ValueError(f"Expected identifier, got {token!r}")
        return token.lstrip("@")

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def parse_type(self) -> TypeRef:
        if self.peek() == "(":
            ref = self.parse_tuple()
        else:
            ref = self.parse_named()
        return self.parse_suffixes(ref)

    def parse_named(self) -> TypeRef:
        parts = [self.expect_identifier()]
        if self.peek() == "::":
            # alias qualifier such as global::
            self.advance()
            parts = [self.expect_identifier()]
        arguments = self.parse_type_arguments()
        while self.peek() == ".":
            self.advance()
            parts.append(self.expect_identifier())
            arguments = self.parse_type_arguments()
        return TypeRef(name=parts[-1], namespace=".".join(parts[:-1]), arguments=arguments)

    def parse_type_arguments(self) -> tuple[TypeRef, ...]:
        if self.peek() != "<":
            return ()
        self.advance()
        arguments = [self.parse_type()]
        while self.peek() == ",":
            self.advance()
            arguments.append(self.parse_type())
        self.expect(">")
        return tuple(arguments)

    def parse_tuple(self) -> TypeRef:
        self.expect("(")
        elements = [self.parse_tuple_element()]
        while self.peek() == ",":
            self.advance()
            elements.append(self.parse_tuple_element())
        self.expect(")")
        return TypeRef(name="", arguments=tuple(elements), is_tuple=True)

    def parse_tuple_element(self) -> TypeRef:
        element = self.parse_type()
        token = self.peek()
        if token is not None and (token[0].isalpha() or token[0] in "_@"):
            self.advance()  # element name
        return element

    def parse_suffixes(self, ref: TypeRef) -> TypeRef:
        suffixes = []
        while True:
            token = self.peek()
            if token in ("?", "*"):
                suffixes.append(self.advance())
            elif token == "[":
                self.advance()
                rank = 1
                while self.peek() == ",":
                    self.advance()
                    rank += 1
                self.expect("]")
                suffixes.append(f"[{',' * (rank - 1)}]")
            else:
                break
        if suffixes:
            return replace(ref, suffixes=ref.suffixes + tuple(suffixes))
        return ref


def parse_type_reference(text: Optional[str]) -> TypeRef:
    """Parse C# type syntax into a TypeRef.

    Never raises: unparseable text yields an unresolved TypeRef that keeps
    the original text for display.
    """
    source_text = (text or "").strip()
    if not source_text:
        return TypeRef(name="", source_text=source_text)

    try:
        parser = _TypeParser(source_text)
        ref = parser.parse_type()
        if not parser.at_end():
            raise ValueError(f"Trailing tokens in type reference: {source_text!r}")
    except ValueError:
        return TypeRef(name="", source_text=source_text)

    return replace(ref, source_text=source_text)


def _is_framework_scope(ref: TypeRef) -> bool:
    return ref.namespace in ("", SYSTEM_NAMESPACE)


def format_type_name(ref: Optional[TypeRef]) -> str:
    """Render the canonical short display name of a type reference."""
    if ref is None:
        return ""
    if not ref.is_resolved:
        return ref.source_text

    if ref.suffixes:
        return f"{format_type_name(ref.element())}{ref.suffixes[-1]}"
    if ref.is_tuple:
        return f"({', '.join(format_type_name(arg) for arg in ref.arguments)})"
    if ref.is_generic:
        return f"{ref.name}<{', '.join(format_type_name(arg) for arg in ref.arguments)}>"

    if _is_framework_scope(ref):
        if ref.name in PRIMITIVE_TYPE_ALIASES:
            return PRIMITIVE_TYPE_ALIASES[ref.name]
        canonical = FRAMEWORK_VALUE_TYPES.get(ref.name.lower())
        if canonical:
            return canonical
    return ref.name


def simple_name(ref: Optional[TypeRef]) -> str:
    """Simple name without namespace, generic arguments or wrappers.

    This is the key under which relationships are recorded. Tuples have
    no simple name.
    """
    if ref is None:
        return ""
    if not ref.is_resolved:
        return ref.source_text
    return ref.name


def is_builtin_type(ref: TypeRef) -> bool:
    """True for primitives, string, object, dynamic and framework value types."""
    if not ref.is_resolved or ref.is_tuple:
        return False
    if not _is_framework_scope(ref):
        return False
    return (
        ref.name in PRIMITIVE_TYPE_ALIASES
        or ref.name in VALUE_TYPE_KEYWORDS
        or ref.name.lower() in FRAMEWORK_VALUE_TYPES
        or ref.name == "dynamic"
    )


def is_builtin_value_type(ref: TypeRef) -> bool:
    """True for C# value-type keywords and framework value types."""
    if not is_builtin_type(ref):
        return False
    alias = PRIMITIVE_TYPE_ALIASES.get(ref.name, ref.name)
    return alias in VALUE_TYPE_KEYWORDS or ref.name.lower() in FRAMEWORK_VALUE_TYPES


def is_root_object(ref: TypeRef) -> bool:
    """True when the reference names System.Object."""
    if ref.is_generic or ref.suffixes or ref.is_tuple:
        return False
    qualified = f"{ref.namespace}.{ref.name}" if ref.namespace else ref.name
    return qualified in ROOT_OBJECT_NAMES or ref.source_text in ROOT_OBJECT_NAMES
