"""
Reference Classes

The second class system: objects are shared mutable handles.

    seq = model.new_ref("Seq", id="x1", sequence="ACGT")
    other = seq
    other.sequence = "TTTT"      # seq.sequence is now "TTTT" too
    clone = seq.copy()           # independent object

This is deliberately a separate type from Instance. Instances have
value semantics; a RefObject is only ever obtained through new_ref()
or copy().

Methods are plain functions taking the object as first argument.
They are looked up along the class chain, most specific first.
A method named "initialize", if present, replaces the default field
assignment in new_ref().
"""

from __future__ import annotations

import copy
import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from gdom.errors import (
    InheritanceCycleError,
    SchemaConflictError,
    TypeMismatchError,
    UnknownAttributeError,
    UnknownClassError,
)
from gdom.instances import value_matches
from gdom.registry import ClassRegistry
from gdom.types import AttributeType, ClassRef, TypeSpec, parse_type, type_name

logger = logging.getLogger(__name__)


@dataclass
class RefClassDefinition:
    """
    Describes one reference class.

    Properties:
        name: Class identifier
        fields: Own field name -> declared type
        methods: Own method name -> function(obj, *args)
        parent: Parent reference class name, or None
    """

    name: str
    fields: Dict[str, TypeSpec] = field(default_factory=dict)
    methods: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    parent: Optional[str] = None


class RefClassRegistry:
    """Arena of reference class definitions keyed by name."""

    def __init__(self, classes: ClassRegistry) -> None:
        # Formal classes, for fields that hold Instances.
        self._formal = classes
        self._classes: Dict[str, RefClassDefinition] = {}

    def define_ref_class(
        self,
        name: str,
        fields: Optional[Mapping[str, Any]] = None,
        methods: Optional[Mapping[str, Callable[..., Any]]] = None,
        parent: Optional[str] = None,
    ) -> RefClassDefinition:
        own = {k: parse_type(v) for k, v in (fields or {}).items()}
        if parent is not None:
            chain = self.linearize(parent)
            if name in chain:
                raise InheritanceCycleError(f"Reference class {name!r} cannot inherit from {parent!r}")
            clashes = sorted(set(own) & set(self.effective_fields(parent)))
            if clashes:
                raise SchemaConflictError(
                    f"Reference class {name!r} redeclares inherited fields: {', '.join(clashes)}"
                )
            hidden = sorted(f for f in own if self.find_method(parent, f) is not None)
            if hidden:
                raise SchemaConflictError(
                    f"Reference class {name!r} declares fields named like inherited methods: {', '.join(hidden)}"
                )

        reserved = sorted(n for n in set(own) | set(methods or {}) if n in RESERVED_NAMES)
        if reserved:
            raise SchemaConflictError(
                f"Reference class {name!r} uses reserved names: {', '.join(reserved)}"
            )

        definition = RefClassDefinition(name=name, fields=own, methods=dict(methods or {}), parent=parent)
        clashes = sorted(set(definition.methods) & set(self._merged_fields(definition)))
        if clashes:
            raise SchemaConflictError(
                f"Reference class {name!r} uses the same names for fields and methods: {', '.join(clashes)}"
            )

        logger.debug("Defining reference class %s (parent=%s)", name, parent)
        self._classes[name] = definition
        return definition

    def get(self, name: str) -> RefClassDefinition:
        try:
            return self._classes[name]
        except KeyError:
            raise UnknownClassError(name) from None

    def has_class(self, name: str) -> bool:
        return name in self._classes

    def linearize(self, name: str) -> List[str]:
        chain: List[str] = []
        current: Optional[str] = name
        while current is not None:
            chain.append(current)
            current = self.get(current).parent
        return chain

    def is_subclass_of(self, candidate: str, ancestor: str) -> bool:
        return self.has_class(candidate) and ancestor in self.linearize(candidate)

    def effective_fields(self, name: str) -> Dict[str, TypeSpec]:
        return self._merged_fields(self.get(name))

    def _merged_fields(self, definition: RefClassDefinition) -> Dict[str, TypeSpec]:
        merged: Dict[str, TypeSpec] = {}
        ancestors = self.linearize(definition.parent) if definition.parent else []
        for ancestor in reversed(ancestors):
            merged.update(self._classes[ancestor].fields)
        merged.update(definition.fields)
        return merged

    def find_method(self, name: str, method: str, start: int = 0) -> Optional[Tuple[str, Callable[..., Any]]]:
        """Method lookup along the chain, skipping the first `start` classes."""
        for class_name in self.linearize(name)[start:]:
            impl = self._classes[class_name].methods.get(method)
            if impl is not None:
                return class_name, impl
        return None

    def check_field(self, class_name: str, name: str, value: Any) -> None:
        spec = self.effective_fields(class_name).get(name)
        if spec is None:
            raise UnknownAttributeError(class_name, name)
        if isinstance(spec, ClassRef) and self.has_class(spec.name):
            ok = isinstance(value, RefObject) and self.is_subclass_of(value.class_name, spec.name)
        else:
            ok = value_matches(self._formal, spec, value)
        if not ok:
            raise TypeMismatchError(
                class_name,
                name,
                f"Field {name!r} of reference class {class_name!r} expects {type_name(spec)}, "
                f"got {type(value).__name__}",
            )

    def new(self, name: str, *args: Any, **values: Any) -> "RefObject":
        """Create a RefObject, running `initialize` if the class chain defines one."""
        schema = self.effective_fields(name)
        state = {
            k: (spec.empty() if isinstance(spec, AttributeType) else None)
            for k, spec in schema.items()
        }
        obj = RefObject(self, name, state)
        initializer = self.find_method(name, "initialize")
        if initializer is not None:
            initializer[1](obj, *args, **values)
        else:
            if args:
                raise TypeError(f"Reference class {name!r} takes field values as keywords only")
            obj.init_fields(**values)
        return obj


class RefObject:
    """
    A handle on a reference-class object.

    Every variable holding the same RefObject sees the same state.
    Fields and methods are reached as attributes.
    """

    __slots__ = ("_registry", "_class_name", "_state")

    def __init__(self, registry: RefClassRegistry, class_name: str, state: Dict[str, Any]):
        object.__setattr__(self, "_registry", registry)
        object.__setattr__(self, "_class_name", class_name)
        object.__setattr__(self, "_state", state)

    @property
    def class_name(self) -> str:
        return self._class_name

    def __getattr__(self, name: str) -> Any:
        state = object.__getattribute__(self, "_state")
        if name in state:
            return state[name]
        found = self._registry.find_method(self._class_name, name)
        if found is not None:
            return functools.partial(found[1], self)
        raise AttributeError(f"{self._class_name!r} object has no field or method {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        self._registry.check_field(self._class_name, name, value)
        self._state[name] = value

    def init_fields(self, **values: Any) -> "RefObject":
        """Assign several fields at once (the default initializer)."""
        for name, value in values.items():
            setattr(self, name, value)
        return self

    def call_super(self, from_class: str, method: str, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke the implementation `method` on `from_class` overrides.

        For "initialize" with no inherited implementation, falls back
        to assigning the keyword arguments as fields.
        """
        chain = self._registry.linearize(self._class_name)
        if from_class not in chain:
            raise UnknownClassError(from_class)
        found = self._registry.find_method(from_class, method, start=1)
        if found is None:
            if method == "initialize":
                return self.init_fields(**kwargs)
            raise AttributeError(f"No inherited method {method!r} above {from_class!r}")
        return found[1](self, *args, **kwargs)

    def copy(self) -> "RefObject":
        """Return an independent object. Nested RefObjects are copied too."""
        return RefObject(self._registry, self._class_name, copy.deepcopy(self._state))

    def __deepcopy__(self, memo) -> "RefObject":
        clone = RefObject(self._registry, self._class_name, {})
        memo[id(self)] = clone
        clone._state.update(copy.deepcopy(self._state, memo))
        return clone

    def fields(self) -> Dict[str, Any]:
        """Snapshot of the current field values."""
        return dict(self._state)

    def is_a(self, class_name: str) -> bool:
        return self._registry.is_subclass_of(self._class_name, class_name)

    def __repr__(self) -> str:
        found = self._registry.find_method(self._class_name, "show")
        if found is not None:
            return str(found[1](self))
        body = ", ".join(f"{k}={v!r}" for k, v in self._state.items())
        return f"<Reference class {self._class_name!r} {body}>"


RESERVED_NAMES = frozenset(
    name for name in dir(RefObject) if not name.startswith("__")
)
