"""
Generic/Method Table

Maps generic name -> Generic, and (generic, class) -> implementation.

Registration rules:
    - One implementation per (generic, class); re-registering replaces it
    - Methods may only be registered for known generics and known classes
      (or the ANY wildcard)
    - Masking a built-in operation is never silent
"""

from __future__ import annotations

import inspect
import logging
import warnings
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from gdom.builtins import BUILTINS, Builtin
from gdom.errors import (
    GenericConflictError,
    MethodSignatureError,
    ShadowedBuiltinWarning,
    UnknownClassError,
    UnknownGenericError,
)
from gdom.model import Generic
from gdom.registry import ClassRegistry
from gdom.types import ANY

logger = logging.getLogger(__name__)


class GenericTable:
    """
    Registry of generics and their methods.

    Args:
        classes: Class registry used to check method targets
        builtins: Operations a generic may shadow (defaults to BUILTINS)
        on_shadowed_builtin: "warn" or "error"
        check_signatures: Verify implementations accept the formal parameters
    """

    def __init__(
        self,
        classes: ClassRegistry,
        builtins: Optional[Mapping[str, Builtin]] = None,
        on_shadowed_builtin: str = "warn",
        check_signatures: bool = True,
    ) -> None:
        self._classes = classes
        self._generics: Dict[str, Generic] = {}
        self._builtins: Dict[str, Builtin] = dict(BUILTINS if builtins is None else builtins)
        self._on_shadowed_builtin = on_shadowed_builtin
        self._check_signatures = check_signatures

    def define_generic(self, name: str, parameters: Sequence[str], origin: str = "user") -> Generic:
        """
        Register a generic.

        Raises:
            GenericConflictError: If a generic of the same name from a different
                origin has a different formal shape, or if a built-in is masked
                while the shadowing policy is "error"
        """
        shape = tuple(parameters)
        if not shape or shape[0] == "...":
            raise GenericConflictError(f"Generic {name!r} needs a receiver parameter")

        existing = self._generics.get(name)
        if existing is not None:
            if existing.origin != origin:
                if existing.parameters != shape:
                    raise GenericConflictError(
                        f"Generic {name!r} from {existing.origin!r} has parameters "
                        f"{existing.parameters}, incompatible with {shape} from {origin!r}"
                    )
                logger.debug("Reusing generic %s from %s", name, existing.origin)
                return existing
            if existing.parameters == shape:
                generic = Generic(name=name, parameters=shape, origin=origin, methods=existing.methods)
                self._generics[name] = generic
                return generic
            if existing.methods:
                logger.info("Redefining generic %s with new parameters drops %d method(s)",
                            name, len(existing.methods))

        # A new shape is checked against the built-in again, even on redefinition.
        generic = Generic(name=name, parameters=shape, origin=origin)
        builtin = self._builtins.get(name)
        if builtin is not None:
            if builtin.parameters == shape:
                logger.info("Creating generic %s from built-in; built-in becomes the default", name)
                generic.methods[ANY] = builtin.implementation
            else:
                self._report_shadowed(builtin, shape)

        logger.debug("Defining generic %s%s", name, shape)
        self._generics[name] = generic
        return generic

    def _report_shadowed(self, builtin: Builtin, shape) -> None:
        message = (
            f"Generic {builtin.name!r}{shape} masks built-in {builtin.name!r}{builtin.parameters}; "
            f"plain values have no applicable method until an ANY fallback is registered"
        )
        if self._on_shadowed_builtin == "error":
            raise GenericConflictError(message)
        logger.warning(message)
        warnings.warn(message, ShadowedBuiltinWarning, stacklevel=4)

    def get(self, name: str) -> Generic:
        try:
            return self._generics[name]
        except KeyError:
            raise UnknownGenericError(name) from None

    def has_generic(self, name: str) -> bool:
        return name in self._generics

    def list_generics(self):
        return list(self._generics)

    def builtin(self, name: str) -> Builtin:
        try:
            return self._builtins[name]
        except KeyError:
            raise UnknownGenericError(name) from None

    def define_method(self, generic_name: str, class_name: str, implementation: Callable[..., Any]) -> None:
        """
        Register an implementation of a generic for one class (or ANY).

        Raises:
            UnknownGenericError: If the generic is not registered
            UnknownClassError: If the class is not registered
            MethodSignatureError: If the implementation cannot take the formal parameters
        """
        generic = self.get(generic_name)
        if class_name != ANY and not self._classes.has_class(class_name):
            raise UnknownClassError(class_name)
        if not callable(implementation):
            raise MethodSignatureError(f"Method for {generic_name!r} on {class_name!r} is not callable")
        if self._check_signatures:
            _check_signature(generic, class_name, implementation)

        if class_name in generic.methods:
            logger.debug("Replacing method %s(%s)", generic_name, class_name)
        else:
            logger.debug("Defining method %s(%s)", generic_name, class_name)
        generic.methods[class_name] = implementation

    def remove_method(self, generic_name: str, class_name: str) -> bool:
        """Remove a method. Returns False if there was none."""
        return self.get(generic_name).methods.pop(class_name, None) is not None

    def list_methods(self, generic_name: str) -> Dict[str, Callable[..., Any]]:
        return dict(self.get(generic_name).methods)

    def generics_for_class(self, class_name: str):
        """Names of generics with a method registered directly on class_name."""
        return [g.name for g in self._generics.values() if class_name in g.methods]


def _check_signature(generic: Generic, class_name: str, implementation: Callable[..., Any]) -> None:
    try:
        signature = inspect.signature(implementation)
    except (TypeError, ValueError):
        # Some C callables expose no signature.
        return
    try:
        signature.bind(*([None] * len(generic.positional)))
    except TypeError as e:
        raise MethodSignatureError(
            f"Method for {generic.name!r} on {class_name!r} must accept "
            f"parameters {generic.positional}: {e}"
        ) from None
