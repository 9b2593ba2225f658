"""
ObjectModel: one embedding of the object model.

Bundles a class registry, a generic table and a reference-class
registry behind a single object, so an application can hold several
independent models side by side.

Typical use:

    model = ObjectModel()
    model.define_class("Seq", {"alphabet": "text_sequence", "sequence": "text"},
                       validity=check_alphabet)
    model.define_generic("length", ["x"])
    model.define_method("length", "Seq", lambda x: len(x.attributes["sequence"]))

    s = model.construct("Seq", {"alphabet": ["A", "T"], "sequence": "ATTA"})
    model.dispatch("length", s)    # 4
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from gdom import dispatch as dispatch_engine
from gdom import instances, validity
from gdom.builtins import Builtin
from gdom.config import ModelConfig
from gdom.generics import GenericTable
from gdom.model import ClassDefinition, Generic, Instance, ValidityPredicate
from gdom.reference import RefClassDefinition, RefClassRegistry, RefObject
from gdom.registry import ClassRegistry
from gdom.types import ANY, TypeSpec


class GenericFunction:
    """Callable proxy for a generic: `length = model.generic("length"); length(s)`."""

    def __init__(self, model: "ObjectModel", name: str):
        self._model = model
        self.name = name

    def __call__(self, receiver: Any, *args: Any, **kwargs: Any) -> Any:
        return self._model.dispatch(self.name, receiver, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<generic {self.name}>"


class ObjectModel:
    """
    Facade over the class registry, generic table and validity engine.

    Args:
        config: Model settings (defaults to ModelConfig())
        builtins: Operations generics may shadow (defaults to gdom.builtins.BUILTINS)
    """

    def __init__(
        self,
        config: Optional[ModelConfig] = None,
        builtins: Optional[Mapping[str, Builtin]] = None,
    ) -> None:
        self.config = config or ModelConfig()
        self.classes = ClassRegistry()
        self.generics = GenericTable(
            self.classes,
            builtins=builtins,
            on_shadowed_builtin=self.config.on_shadowed_builtin,
            check_signatures=self.config.check_method_signatures,
        )
        self.ref_classes = RefClassRegistry(self.classes)

    # ------------------------------------------------------------------
    # Class registry
    # ------------------------------------------------------------------

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
        return self.classes.define_class(
            name, attributes, parent, validity, virtual=virtual, defaults=defaults
        )

    def resolve_effective_schema(self, name: str) -> Dict[str, TypeSpec]:
        return self.classes.resolve_effective_schema(name)

    def is_subclass_of(self, candidate: str, ancestor: str) -> bool:
        return self.classes.is_subclass_of(candidate, ancestor)

    def describe_class(self, name: str) -> Dict[str, Any]:
        self.classes.get(name)
        return self.classes.describe_class(name, self.generics.generics_for_class(name))

    def list_classes(self) -> List[str]:
        return self.classes.list_classes()

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    def construct(self, class_name: str, values: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Instance:
        """Build a validated instance. Values may be given as a mapping, keywords, or both."""
        merged = dict(values or {})
        merged.update(kwargs)
        return instances.construct(self.classes, class_name, merged, copy_values=self.config.copy_values)

    def get_attribute(self, instance: Instance, name: str) -> Any:
        return instances.get_attribute(instance, name)

    def set_attribute(self, instance: Instance, name: str, value: Any) -> Instance:
        """Low-level mutation: type-checked, NOT re-validated. Returns the updated copy."""
        return instances.set_attribute(
            self.classes, instance, name, value, copy_values=self.config.copy_values
        )

    def is_instance(self, obj: Any, class_name: str) -> bool:
        return instances.is_instance(self.classes, obj, class_name)

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------

    def check_validity(self, instance: Instance) -> Optional[str]:
        return validity.check_validity(self.classes, instance)

    def validate(self, instance: Instance) -> Instance:
        return validity.validate(self.classes, instance)

    # ------------------------------------------------------------------
    # Generics and dispatch
    # ------------------------------------------------------------------

    def define_generic(self, name: str, parameters: Sequence[str], origin: str = "user") -> Generic:
        return self.generics.define_generic(name, parameters, origin)

    def define_method(self, generic_name: str, class_name: str, implementation: Callable[..., Any]) -> None:
        self.generics.define_method(generic_name, class_name, implementation)

    def method(self, generic_name: str, class_name: str):
        """
        Decorator form of define_method.

            @model.method("rev", "DnaSeq")
            def rev_dna(x): ...
        """

        def register(fn):
            self.define_method(generic_name, class_name, fn)
            return fn

        return register

    def remove_method(self, generic_name: str, class_name: str) -> bool:
        return self.generics.remove_method(generic_name, class_name)

    def restore_builtin(self, name: str) -> None:
        """Register the masked built-in as the ANY fallback of the generic of the same name."""
        builtin = self.generics.builtin(name)
        self.generics.define_method(name, ANY, builtin.implementation)

    def list_methods(self, generic_name: str) -> Dict[str, Callable[..., Any]]:
        return self.generics.list_methods(generic_name)

    def has_method(self, generic_name: str, class_name: str, inherited: bool = False) -> bool:
        """
        True if a method is registered for class_name.

        With inherited=True, methods on ancestors and ANY count too.
        """
        methods = self.generics.get(generic_name).methods
        if not inherited:
            return class_name in methods
        chain = self.classes.linearize(class_name) if class_name != ANY else []
        return any(c in methods for c in chain) or ANY in methods

    def generic(self, name: str) -> GenericFunction:
        self.generics.get(name)
        return GenericFunction(self, name)

    def dispatch(self, generic_name: str, receiver: Any, *args: Any, **kwargs: Any) -> Any:
        return dispatch_engine.dispatch(self.classes, self.generics, generic_name, receiver, *args, **kwargs)

    def call_next_method(self, generic_name: str, from_class: str, receiver: Any, *args: Any, **kwargs: Any) -> Any:
        return dispatch_engine.call_next_method(
            self.classes, self.generics, generic_name, from_class, receiver, *args, **kwargs
        )

    # ------------------------------------------------------------------
    # Reference classes
    # ------------------------------------------------------------------

    def define_ref_class(
        self,
        name: str,
        fields: Optional[Mapping[str, Any]] = None,
        methods: Optional[Mapping[str, Callable[..., Any]]] = None,
        parent: Optional[str] = None,
    ) -> RefClassDefinition:
        return self.ref_classes.define_ref_class(name, fields, methods, parent)

    def new_ref(self, name: str, *args: Any, **values: Any) -> RefObject:
        return self.ref_classes.new(name, *args, **values)
