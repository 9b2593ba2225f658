"""
Core Object Model Objects

Defines the fundamental data structures of the formal class system.

These are plain data classes representing:
    - Class definitions (schema, parent, validity)
    - Generics (named polymorphic operations)
    - Instances (attribute values tagged with their class)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about dispatch or registries
        - Hold structure, not behavior
        - Are created through the registry and the instance model,
          never assembled by hand in user code
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Union

from gdom.types import TypeSpec


ValidityResult = Union[bool, str, None]
ValidityPredicate = Callable[["Instance"], ValidityResult]


@dataclass
class ClassDefinition:
    """
    Describes one registered class.

    Properties:
        name:
            Unique class identifier
            Examples: "GenericSeq", "DnaSeq"

        attributes:
            Ordered mapping of OWN attribute names to declared types.
            Inherited attributes live on the ancestors.

        parent:
            Name of the parent class, or None for a root class.
            Single inheritance only.

        validity:
            Optional predicate run against fully-constructed instances.
            Returns True/None when valid, or a message describing the failure.

        virtual:
            Virtual classes exist only to be inherited from;
            they cannot be constructed directly.

        defaults:
            Prototype values used when construction omits an attribute.
            May cover inherited attributes.

    INVARIANTS:
        - No own attribute shares a name with an ancestor's attribute
        - Redefining a class replaces it wholesale
    """

    name: str
    attributes: Dict[str, TypeSpec] = field(default_factory=dict)
    parent: Optional[str] = None
    validity: Optional[ValidityPredicate] = None
    virtual: bool = False
    defaults: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Generic:
    """
    A named polymorphic operation.

    Properties:
        name: Generic identifier (e.g. "length", "rev")
        parameters:
            Formal parameter names. The first one is the receiver.
            A trailing "..." accepts any extra arguments.
        origin: Who defined the generic ("user", a package name, ...)
        methods: Mapping of class name (or ANY) to implementation
    """

    name: str
    parameters: Tuple[str, ...]
    origin: str = "user"
    methods: Dict[str, Callable[..., Any]] = field(default_factory=dict)

    @property
    def receiver(self) -> str:
        return self.parameters[0]

    @property
    def variadic(self) -> bool:
        return "..." in self.parameters

    @property
    def positional(self) -> Tuple[str, ...]:
        """Formal parameters every implementation must accept positionally."""
        return tuple(p for p in self.parameters if p != "...")


@dataclass
class Instance:
    """
    A constructed object of a formal class.

    Instances have value semantics: mutators return a new Instance and
    leave the original untouched.

    Properties:
        definition: The concrete ClassDefinition this object was built from
        attributes: Mapping of attribute name to value (effective schema)
    """

    definition: ClassDefinition
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def class_name(self) -> str:
        return self.definition.name

    def __deepcopy__(self, memo):
        return Instance(self.definition, copy.deepcopy(self.attributes, memo))

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self.attributes.items())
        return f"<{self.class_name} {body}>"
