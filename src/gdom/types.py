"""
Attribute Type System for gdom

Every attribute in a class schema declares a semantic type.
The set of types is closed: the embedder picks from AttributeType,
or names another registered class through ClassRef.

ARCHITECTURAL RULE:
    Types are checked structurally on the runtime value.
    No coercion happens: "1" is not numeric, True is not numeric.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


ANY = "ANY"
"""Wildcard class name used to register a fallback method for a generic."""


class AttributeType(Enum):
    """
    Built-in semantic attribute types.

    The values are the spellings accepted in schemas and config files.
    """

    TEXT = "text"
    TEXT_SEQUENCE = "text_sequence"
    NUMERIC = "numeric"
    NUMERIC_SEQUENCE = "numeric_sequence"
    LOGICAL = "logical"
    ANY = "any"

    def matches(self, value: Any) -> bool:
        """Return True if `value` structurally belongs to this type."""
        if self is AttributeType.ANY:
            return True
        if self is AttributeType.TEXT:
            return isinstance(value, str)
        if self is AttributeType.LOGICAL:
            return isinstance(value, bool)
        if self is AttributeType.NUMERIC:
            return _is_number(value)
        if self is AttributeType.TEXT_SEQUENCE:
            return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
        if self is AttributeType.NUMERIC_SEQUENCE:
            return isinstance(value, (list, tuple)) and all(_is_number(v) for v in value)
        return False

    def empty(self) -> Any:
        """Value an unset reference-class field starts with."""
        return {
            AttributeType.TEXT: "",
            AttributeType.TEXT_SEQUENCE: [],
            AttributeType.NUMERIC: 0,
            AttributeType.NUMERIC_SEQUENCE: [],
            AttributeType.LOGICAL: False,
            AttributeType.ANY: None,
        }[self]


@dataclass(frozen=True)
class ClassRef:
    """
    Declares that an attribute holds an instance of a registered class.

    Subclass instances are accepted too.

    Example:
        {"insert": ClassRef("DnaSeq")}
    """

    name: str


TypeSpec = Union[AttributeType, ClassRef]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_type(spec: Union[str, AttributeType, ClassRef]) -> TypeSpec:
    """
    Normalize a schema type declaration.

    Accepts an AttributeType, a ClassRef, the string spelling of an
    AttributeType ("text", "numeric", ...) or any other string, which is
    taken to be a class name.
    """
    if isinstance(spec, (AttributeType, ClassRef)):
        return spec
    if isinstance(spec, str):
        try:
            return AttributeType(spec)
        except ValueError:
            return ClassRef(spec)
    raise TypeError(f"Unsupported attribute type declaration: {spec!r}")


def type_name(spec: TypeSpec) -> str:
    """Spelling of a type used in messages and serialized schemas."""
    if isinstance(spec, ClassRef):
        return spec.name
    return spec.value
