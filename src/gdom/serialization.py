"""
Serialization helpers for gdom objects (Instance, class schemas).

Provides JSON/YAML round-trip via an intermediate dict representation.
Deserialized instances are rebuilt through construct(), so they are
type-checked and validated like any other instance.

Instances encode as {"class": ..., "attributes": ...}. Plain dict
values are wrapped as {"mapping": ...}, so a user dict is never
mistaken for an instance.

Validity predicates and methods are code; they are not serialized.
A schema dict only restores names, parents, attribute types and defaults.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from gdom.model import Instance
from gdom.session import ObjectModel
from gdom.types import type_name

MAPPING_TAG = "mapping"


def value_to_dict(value: Any) -> Any:
    if isinstance(value, Instance):
        return instance_to_dict(value)
    if isinstance(value, (list, tuple)):
        return [value_to_dict(v) for v in value]
    if isinstance(value, dict):
        return {MAPPING_TAG: {k: value_to_dict(v) for k, v in value.items()}}
    return value


def value_from_dict(model: ObjectModel, d: Any) -> Any:
    if isinstance(d, dict):
        if set(d) == {MAPPING_TAG}:
            return {k: value_from_dict(model, v) for k, v in d[MAPPING_TAG].items()}
        if "class" in d and "attributes" in d:
            return instance_from_dict(model, d)
        return d
    if isinstance(d, list):
        return [value_from_dict(model, v) for v in d]
    return d


def instance_to_dict(instance: Instance) -> Dict[str, Any]:
    return {
        "class": instance.class_name,
        "attributes": {k: value_to_dict(v) for k, v in instance.attributes.items()},
    }


def instance_from_dict(model: ObjectModel, d: Dict[str, Any]) -> Instance:
    attributes = {k: value_from_dict(model, v) for k, v in d.get("attributes", {}).items()}
    return model.construct(d["class"], attributes)


def instance_to_json(instance: Instance) -> str:
    return json.dumps(instance_to_dict(instance), sort_keys=True)


def instance_from_json(model: ObjectModel, s: str) -> Instance:
    return instance_from_dict(model, json.loads(s))


def instance_to_yaml(instance: Instance) -> str:
    return yaml.safe_dump(instance_to_dict(instance))


def instance_from_yaml(model: ObjectModel, s: str) -> Instance:
    return instance_from_dict(model, yaml.safe_load(s))


def class_to_dict(model: ObjectModel, name: str) -> Dict[str, Any]:
    definition = model.classes.get(name)
    return {
        "name": definition.name,
        "parent": definition.parent,
        "virtual": definition.virtual,
        "attributes": {k: type_name(v) for k, v in definition.attributes.items()},
        "defaults": {k: value_to_dict(v) for k, v in definition.defaults.items()},
    }


def schema_to_dict(model: ObjectModel) -> Dict[str, Any]:
    """Every class of the model, parents before children."""
    ordered: List[str] = []
    for name in model.list_classes():
        for ancestor in reversed(model.classes.linearize(name)):
            if ancestor not in ordered:
                ordered.append(ancestor)
    return {"classes": [class_to_dict(model, name) for name in ordered]}


def schema_from_dict(model: ObjectModel, d: Dict[str, Any]) -> ObjectModel:
    """Register the classes of a schema dict into `model` (in order) and return it."""
    for c in d.get("classes", []):
        model.define_class(
            c["name"],
            c.get("attributes", {}),
            parent=c.get("parent"),
            virtual=c.get("virtual", False),
            defaults={k: value_from_dict(model, v) for k, v in (c.get("defaults") or {}).items()},
        )
    return model


def schema_to_yaml(model: ObjectModel) -> str:
    return yaml.safe_dump(schema_to_dict(model), sort_keys=False)


def schema_from_yaml(model: ObjectModel, s: str) -> ObjectModel:
    return schema_from_dict(model, yaml.safe_load(s) or {})
