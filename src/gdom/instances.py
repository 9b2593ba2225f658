"""
Instance Model

The only way to bring an Instance into existence is construct():
schema check first, validity check second. Either a fully valid
Instance comes back or an error is raised and nothing is created.

get_attribute / set_attribute are low-level slot access for method
implementers. set_attribute still type-checks, but never runs the
validity predicate; user-facing mutators call the validity engine
themselves.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping

from gdom.errors import (
    MissingAttributeError,
    TypeMismatchError,
    UnknownAttributeError,
    VirtualClassError,
)
from gdom.model import Instance
from gdom.registry import ClassRegistry
from gdom.types import AttributeType, ClassRef, TypeSpec, type_name
from gdom.validity import validate

logger = logging.getLogger(__name__)


def value_matches(registry: ClassRegistry, spec: TypeSpec, value: Any) -> bool:
    """Structural type check of one value against a schema type."""
    if isinstance(spec, ClassRef):
        return isinstance(value, Instance) and registry.is_subclass_of(value.class_name, spec.name)
    return spec.matches(value)


def check_value(registry: ClassRegistry, class_name: str, attribute: str, spec: TypeSpec, value: Any) -> None:
    if not value_matches(registry, spec, value):
        actual = value.class_name if isinstance(value, Instance) else type(value).__name__
        raise TypeMismatchError(
            class_name,
            attribute,
            f"Attribute {attribute!r} of class {class_name!r} expects {type_name(spec)}, got {actual}",
        )


def _copy_value(value: Any) -> Any:
    if isinstance(value, (list, dict, set, Instance)):
        return copy.deepcopy(value)
    return value


def construct(
    registry: ClassRegistry,
    class_name: str,
    values: Mapping[str, Any],
    copy_values: bool = True,
) -> Instance:
    """
    Build a validated Instance of a registered class.

    Args:
        registry: Class registry
        class_name: Class to instantiate
        values: Attribute name -> value. Attributes with a prototype
            default may be omitted.
        copy_values: Deep-copy mutable values so the instance does not
            share them with the caller

    Raises:
        UnknownClassError, VirtualClassError, UnknownAttributeError,
        MissingAttributeError, TypeMismatchError, ValidityError
    """
    definition = registry.get(class_name)
    if definition.virtual:
        raise VirtualClassError(class_name)

    schema = registry.resolve_effective_schema(class_name)
    for name in values:
        if name not in schema:
            raise UnknownAttributeError(class_name, name)

    defaults = registry.effective_defaults(class_name)
    attributes: Dict[str, Any] = {}
    for name, spec in schema.items():
        if name in values:
            value = values[name]
        elif name in defaults:
            value = defaults[name]
        else:
            raise MissingAttributeError(class_name, name)
        check_value(registry, class_name, name, spec, value)
        attributes[name] = _copy_value(value) if copy_values or name not in values else value

    instance = Instance(definition=definition, attributes=attributes)
    validate(registry, instance)
    logger.debug("Constructed %s", class_name)
    return instance


def get_attribute(instance: Instance, name: str) -> Any:
    """Read one attribute. Raises UnknownAttributeError for names outside the schema."""
    try:
        return instance.attributes[name]
    except KeyError:
        raise UnknownAttributeError(instance.class_name, name) from None


def set_attribute(
    registry: ClassRegistry,
    instance: Instance,
    name: str,
    value: Any,
    copy_values: bool = True,
) -> Instance:
    """
    Return a copy of `instance` with one attribute replaced.

    The value is type-checked against the schema; the validity
    predicate is NOT run.
    """
    if name not in instance.attributes:
        raise UnknownAttributeError(instance.class_name, name)
    spec = registry.resolve_effective_schema(instance.class_name).get(name, AttributeType.ANY)
    check_value(registry, instance.class_name, name, spec, value)

    attributes = {
        k: (_copy_value(v) if copy_values else v) for k, v in instance.attributes.items()
    }
    attributes[name] = _copy_value(value) if copy_values else value
    return Instance(definition=instance.definition, attributes=attributes)


def is_instance(registry: ClassRegistry, obj: Any, class_name: str) -> bool:
    """True if obj is an Instance of class_name or one of its subclasses."""
    return isinstance(obj, Instance) and registry.is_subclass_of(obj.class_name, class_name)
