"""
Validity Engine

Runs a class's validity predicate against an instance.

Only the MOST SPECIFIC predicate on the inheritance chain runs.
Ancestor predicates are not chained automatically; a subclass that
wants its parent's rule must call it itself.
"""

from __future__ import annotations

import logging
from typing import Optional

from gdom.errors import ValidityError
from gdom.model import Instance, ValidityPredicate
from gdom.registry import ClassRegistry

logger = logging.getLogger(__name__)


def find_predicate(registry: ClassRegistry, class_name: str) -> Optional[ValidityPredicate]:
    """Nearest validity predicate walking up from class_name, or None."""
    for name in registry.linearize(class_name):
        predicate = registry.get(name).validity
        if predicate is not None:
            return predicate
    return None


def check_validity(registry: ClassRegistry, instance: Instance) -> Optional[str]:
    """
    Evaluate the applicable validity predicate.

    Returns:
        None if the instance is valid, otherwise the failure reason
    """
    predicate = find_predicate(registry, instance.class_name)
    if predicate is None:
        return None

    result = predicate(instance)
    if result is True or result is None:
        return None
    if result is False:
        return "validity check failed"
    if isinstance(result, str):
        return result
    raise TypeError(
        f"Validity predicate for {instance.class_name!r} returned {type(result).__name__}; "
        f"expected True, None, False or a message"
    )


def validate(registry: ClassRegistry, instance: Instance) -> Instance:
    """
    Raise ValidityError if the instance is invalid; return it otherwise.

    Mutator methods call this before returning the modified object.
    """
    reason = check_validity(registry, instance)
    if reason is not None:
        logger.debug("Validity failed for %s: %s", instance.class_name, reason)
        raise ValidityError(instance.class_name, reason)
    return instance
