"""
Dispatch Engine

Resolution algorithm for dispatch(generic, receiver, ...):

    1. Unknown generic -> UnknownGenericError
    2. Walk the receiver's class chain, most specific first;
       the first class with a method wins
    3. Otherwise use the ANY method if one is registered
    4. Otherwise NoApplicableMethodError

Receivers that are not Instances have an empty chain, so only the
ANY method can apply to them.

The selected method's result is returned unchanged. Validity is the
method's own business.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Tuple

from gdom.errors import NoApplicableMethodError
from gdom.generics import GenericTable
from gdom.model import Instance
from gdom.registry import ClassRegistry
from gdom.types import ANY

logger = logging.getLogger(__name__)

Method = Callable[..., Any]


def receiver_chain(registry: ClassRegistry, receiver: Any) -> List[str]:
    if isinstance(receiver, Instance):
        return registry.linearize(receiver.class_name)
    return []


def receiver_label(receiver: Any) -> str:
    if isinstance(receiver, Instance):
        return receiver.class_name
    return type(receiver).__name__


def select_method(table: GenericTable, generic_name: str, chain: List[str]) -> Tuple[str, Method]:
    """
    Pick the most specific method along `chain`, falling back to ANY.

    Returns:
        (class the method is registered for, implementation)
    """
    generic = table.get(generic_name)
    for class_name in chain:
        method = generic.methods.get(class_name)
        if method is not None:
            return class_name, method
    if ANY in generic.methods:
        return ANY, generic.methods[ANY]
    raise NoApplicableMethodError(generic_name, chain[0] if chain else ANY)


def resolve(registry: ClassRegistry, table: GenericTable, generic_name: str, receiver: Any) -> Tuple[str, Method]:
    table.get(generic_name)
    chain = receiver_chain(registry, receiver)
    try:
        return select_method(table, generic_name, chain)
    except NoApplicableMethodError:
        raise NoApplicableMethodError(generic_name, receiver_label(receiver)) from None


def dispatch(
    registry: ClassRegistry,
    table: GenericTable,
    generic_name: str,
    receiver: Any,
    *args: Any,
    **kwargs: Any,
) -> Any:
    """Resolve and invoke the applicable method of a generic."""
    owner, method = resolve(registry, table, generic_name, receiver)
    logger.debug("Dispatching %s on %s -> %s", generic_name, receiver_label(receiver), owner)
    return method(receiver, *args, **kwargs)


def call_next_method(
    registry: ClassRegistry,
    table: GenericTable,
    generic_name: str,
    from_class: str,
    receiver: Any,
    *args: Any,
    **kwargs: Any,
) -> Any:
    """
    Invoke the method the one registered on `from_class` overrides.

    Resolution starts at the parent of `from_class`, then ANY.
    Called from inside a method to extend rather than replace the
    inherited behavior.
    """
    table.get(generic_name)
    if from_class == ANY:
        raise NoApplicableMethodError(generic_name, ANY)
    chain = registry.linearize(from_class)[1:]
    try:
        _, method = select_method(table, generic_name, chain)
    except NoApplicableMethodError:
        raise NoApplicableMethodError(generic_name, from_class) from None
    return method(receiver, *args, **kwargs)
