"""
Generic Dispatch Object Model (gdom) Package

A small in-process object model with two class systems:

    - Formal classes: typed attribute schemas, single inheritance,
      validity predicates and generics dispatched on the receiver's class.
      Instances have value semantics.
    - Reference classes: typed fields plus methods, where every holder of
      an object sees the same mutable state.

ARCHITECTURAL RULE:
-------------------
All definitions precede all uses.
Register classes, generics and methods first; construct and dispatch after.
"""

from gdom.errors import (
    ObjectModelError,
    UnknownClassError,
    UnknownGenericError,
    SchemaConflictError,
    InheritanceCycleError,
    GenericConflictError,
    TypeMismatchError,
    MissingAttributeError,
    UnknownAttributeError,
    ValidityError,
    VirtualClassError,
    NoApplicableMethodError,
    MethodSignatureError,
    ShadowedBuiltinWarning,
)
from gdom.types import ANY, AttributeType, ClassRef
from gdom.model import ClassDefinition, Generic, Instance
from gdom.reference import RefClassDefinition, RefObject
from gdom.config import ModelConfig, load_config
from gdom.session import ObjectModel

__version__ = "0.1.0"

__all__ = [
    "ANY",
    "AttributeType",
    "ClassDefinition",
    "ClassRef",
    "Generic",
    "GenericConflictError",
    "InheritanceCycleError",
    "Instance",
    "MethodSignatureError",
    "MissingAttributeError",
    "ModelConfig",
    "NoApplicableMethodError",
    "ObjectModel",
    "ObjectModelError",
    "RefClassDefinition",
    "RefObject",
    "SchemaConflictError",
    "ShadowedBuiltinWarning",
    "TypeMismatchError",
    "UnknownAttributeError",
    "UnknownClassError",
    "UnknownGenericError",
    "ValidityError",
    "VirtualClassError",
    "load_config",
]
