"""
Class Registry

Holds every ClassDefinition, indexed by name.
Inheritance is a parent-name pointer walked on demand.

This is the leaf component: the generic table, dispatch engine,
instance model and validity engine all resolve classes through it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from gdom.errors import InheritanceCycleError, SchemaConflictError, UnknownClassError
from gdom.model import ClassDefinition, ValidityPredicate
from gdom.types import TypeSpec, parse_type, type_name

logger = logging.getLogger(__name__)


class ClassRegistry:
    """Arena of class definitions keyed by name."""

    def __init__(self) -> None:
        self._classes: Dict[str, ClassDefinition] = {}

    def define_class(
        self,
        name: str,
        attributes: Optional[Mapping[str, Any]] = None,
        parent: Optional[str] = None,
        validity: Optional[ValidityPredicate] = None,
        *,
        virtual: bool = False,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> ClassDefinition:
        """
        Register a class, replacing any previous definition of the same name.

        Args:
            name: Class identifier
            attributes: Own attribute name -> type declaration
            parent: Name of an already registered parent class
            validity: Optional validity predicate
            virtual: Disallow direct construction
            defaults: Prototype values for own or inherited attributes

        Returns:
            The registered ClassDefinition

        Raises:
            UnknownClassError: If parent is not registered
            SchemaConflictError: If an attribute collides with an inherited one
            InheritanceCycleError: If name already appears in parent's chain
        """
        own: Dict[str, TypeSpec] = {k: parse_type(v) for k, v in (attributes or {}).items()}

        if parent is not None:
            chain = self.linearize(parent)
            if name in chain:
                raise InheritanceCycleError(
                    f"Class {name!r} cannot inherit from {parent!r}: {' -> '.join(chain)} already contains it"
                )
            inherited = self.resolve_effective_schema(parent)
            clashes = sorted(set(own) & set(inherited))
            if clashes:
                raise SchemaConflictError(
                    f"Class {name!r} redeclares inherited attributes: {', '.join(clashes)}"
                )

        definition = ClassDefinition(
            name=name,
            attributes=own,
            parent=parent,
            validity=validity,
            virtual=virtual,
            defaults=dict(defaults or {}),
        )

        unknown_defaults = set(definition.defaults) - set(self._merged_schema(definition))
        if unknown_defaults:
            raise SchemaConflictError(
                f"Defaults for class {name!r} name unknown attributes: {', '.join(sorted(unknown_defaults))}"
            )

        if name in self._classes:
            self._check_descendants(definition)
            logger.debug("Replacing class definition %s", name)
        else:
            logger.debug("Defining class %s (parent=%s)", name, parent)
        self._classes[name] = definition
        return definition

    def _check_descendants(self, definition: ClassDefinition) -> None:
        """A redefined class must not collide with attributes its subclasses declare."""
        schema = self._merged_schema(definition)
        for other in self._classes:
            if other == definition.name:
                continue
            chain = self.linearize(other)
            if definition.name not in chain:
                continue
            below = chain[:chain.index(definition.name)]
            clashes = sorted({a for c in below for a in self._classes[c].attributes} & set(schema))
            if clashes:
                raise SchemaConflictError(
                    f"Redefining class {definition.name!r} collides with attributes of "
                    f"subclass {other!r}: {', '.join(clashes)}"
                )

    def get(self, name: str) -> ClassDefinition:
        try:
            return self._classes[name]
        except KeyError:
            raise UnknownClassError(name) from None

    def has_class(self, name: str) -> bool:
        return name in self._classes

    def list_classes(self) -> List[str]:
        return list(self._classes)

    def linearize(self, name: str) -> List[str]:
        """
        Return the inheritance chain of a class, most specific first.

        Example:
            linearize("DnaSeq") -> ["DnaSeq", "GenericSeq"]
        """
        chain: List[str] = []
        current: Optional[str] = name
        while current is not None:
            if current in chain:
                # Only reachable if the arena was edited outside define_class.
                raise InheritanceCycleError(f"Circular inheritance: {' -> '.join(chain + [current])}")
            chain.append(current)
            current = self.get(current).parent
        return chain

    def resolve_effective_schema(self, name: str) -> Dict[str, TypeSpec]:
        """
        Merge a class's own attributes with all its ancestors'.

        Root attributes come first, so the order matches declaration
        order walking down the hierarchy.
        """
        return self._merged_schema(self.get(name))

    def _merged_schema(self, definition: ClassDefinition) -> Dict[str, TypeSpec]:
        schema: Dict[str, TypeSpec] = {}
        ancestors = self.linearize(definition.parent) if definition.parent else []
        for ancestor in reversed(ancestors):
            schema.update(self._classes[ancestor].attributes)
        schema.update(definition.attributes)
        return schema

    def effective_defaults(self, name: str) -> Dict[str, Any]:
        """Prototype values along the chain; nearer classes override farther ones."""
        defaults: Dict[str, Any] = {}
        for ancestor in reversed(self.linearize(name)):
            defaults.update(self._classes[ancestor].defaults)
        return defaults

    def is_subclass_of(self, candidate: str, ancestor: str) -> bool:
        """True if `ancestor` is reachable from `candidate` along parent pointers."""
        if not self.has_class(candidate):
            return False
        return ancestor in self.linearize(candidate)

    def describe_class(self, name: str, generics: Iterable[str] = ()) -> Dict[str, Any]:
        """
        Introspect a class.

        Args:
            name: Class to describe
            generics: Names of generics with a method registered for this class

        Returns:
            Plain dict suitable for printing or serialization
        """
        definition = self.get(name)
        return {
            "name": definition.name,
            "parent": definition.parent,
            "ancestors": self.linearize(name)[1:],
            "virtual": definition.virtual,
            "attributes": {k: type_name(v) for k, v in definition.attributes.items()},
            "effective_attributes": {
                k: type_name(v) for k, v in self.resolve_effective_schema(name).items()
            },
            "defaults": dict(definition.defaults),
            "has_validity": definition.validity is not None,
            "methods": sorted(generics),
        }
