"""
Error taxonomy for gdom.

All errors are raised synchronously to the caller of the operation
that triggered them. Nothing is retried or swallowed.

The one non-fatal condition, shadowing a built-in operation with an
incompatible generic, is reported as ShadowedBuiltinWarning.
"""

from typing import Optional


class ObjectModelError(Exception):
    """Base class for every error raised by the object model."""
    pass


class UnknownClassError(ObjectModelError):
    """Raised when a class name is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown class: {name!r}")
        self.name = name


class UnknownGenericError(ObjectModelError):
    """Raised when a generic name is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown generic: {name!r}")
        self.name = name


class SchemaConflictError(ObjectModelError):
    """Raised when a class declares an attribute its ancestors already declare."""
    pass


class InheritanceCycleError(SchemaConflictError):
    """Raised when a redefinition would make a class its own ancestor."""
    pass


class GenericConflictError(ObjectModelError):
    """Raised when a generic definition is incompatible with an existing one."""
    pass


class TypeMismatchError(ObjectModelError):
    """
    Raised when an attribute value does not match its declared type.

    Properties:
        class_name: Class being constructed or mutated
        attribute: Offending attribute name
    """

    def __init__(self, class_name: str, attribute: str, message: Optional[str] = None):
        super().__init__(message or f"Attribute {attribute!r} of class {class_name!r} has the wrong type")
        self.class_name = class_name
        self.attribute = attribute


class MissingAttributeError(TypeMismatchError):
    """Raised when construction omits an attribute of the effective schema."""

    def __init__(self, class_name: str, attribute: str):
        super().__init__(
            class_name,
            attribute,
            f"Missing attribute {attribute!r} for class {class_name!r}",
        )


class UnknownAttributeError(TypeMismatchError):
    """Raised when an attribute name is not part of the class schema."""

    def __init__(self, class_name: str, attribute: str):
        super().__init__(
            class_name,
            attribute,
            f"{attribute!r} is not an attribute of class {class_name!r}",
        )


class ValidityError(ObjectModelError):
    """Raised when a validity predicate rejects an object."""

    def __init__(self, class_name: str, reason: str):
        super().__init__(f"Invalid {class_name!r} object: {reason}")
        self.class_name = class_name
        self.reason = reason


class VirtualClassError(ObjectModelError):
    """Raised when constructing a class declared virtual."""

    def __init__(self, name: str):
        super().__init__(f"Cannot construct virtual class {name!r}")
        self.name = name


class NoApplicableMethodError(ObjectModelError):
    """Raised when no method of a generic applies to the receiver."""

    def __init__(self, generic: str, class_name: str):
        super().__init__(f"No method of generic {generic!r} applies to class {class_name!r}")
        self.generic = generic
        self.class_name = class_name


class MethodSignatureError(ObjectModelError):
    """Raised when a method cannot accept its generic's formal parameters."""
    pass


class ConfigError(ObjectModelError):
    """Raised when configuration values are invalid."""
    pass


class ShadowedBuiltinWarning(UserWarning):
    """Emitted when a generic masks a built-in operation it is incompatible with."""
    pass
