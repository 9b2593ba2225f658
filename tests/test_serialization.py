"""
Tests for serialization and deserialization of gdom objects.

Deserialized instances go back through construct(), so invalid
payloads are rejected the same way direct construction is.
"""

import pytest

from gdom import ClassRef, ObjectModel, ValidityError
from gdom.examples import build_sequence_model
from gdom.serialization import (
    instance_from_dict,
    instance_from_json,
    instance_from_yaml,
    instance_to_dict,
    instance_to_json,
    instance_to_yaml,
    schema_from_yaml,
    schema_to_dict,
    schema_to_yaml,
)


@pytest.fixture
def seqs():
    return build_sequence_model()


def test_instance_to_dict(seqs):
    d = seqs.construct("DnaSeq", {"id": "s1", "sequence": "ACGT"})
    assert instance_to_dict(d) == {
        "class": "DnaSeq",
        "attributes": {"id": "s1", "alphabet": ["A", "C", "G", "T"], "sequence": "ACGT"},
    }


def test_json_roundtrip(seqs):
    d = seqs.construct("DnaSeq", {"id": "s1", "sequence": "ACGT"})
    restored = instance_from_json(seqs, instance_to_json(d))
    assert restored.class_name == "DnaSeq"
    assert restored.attributes == d.attributes


def test_yaml_roundtrip(seqs):
    r = seqs.construct("RnaSeq", {"id": "r1", "sequence": "ACGU"})
    restored = instance_from_yaml(seqs, instance_to_yaml(r))
    assert restored.attributes == r.attributes


def test_invalid_payload_rejected(seqs):
    payload = {"class": "DnaSeq", "attributes": {"id": "bad", "sequence": "ACGU"}}
    with pytest.raises(ValidityError):
        instance_from_dict(seqs, payload)


def test_nested_instances(seqs):
    seqs.define_class("Construct", {"name": "text", "insert": ClassRef("GenericSeq")})
    insert = seqs.construct("DnaSeq", {"id": "ins", "sequence": "GATC"})
    c = seqs.construct("Construct", {"name": "c1", "insert": insert})

    restored = instance_from_json(seqs, instance_to_json(c))

    assert restored.attributes["insert"].class_name == "DnaSeq"
    assert restored.attributes["insert"].attributes == insert.attributes


def test_schema_parents_first(seqs):
    names = [c["name"] for c in schema_to_dict(seqs)["classes"]]
    assert names.index("GenericSeq") < names.index("DnaSeq")
    assert names.index("GenericSeq") < names.index("RnaSeq")


def test_schema_yaml_roundtrip(seqs):
    fresh = schema_from_yaml(ObjectModel(), schema_to_yaml(seqs))

    assert fresh.list_classes() == ["GenericSeq", "DnaSeq", "RnaSeq"]
    assert fresh.classes.get("GenericSeq").virtual
    assert fresh.resolve_effective_schema("DnaSeq") == seqs.resolve_effective_schema("DnaSeq")
    # Predicates are code and do not survive serialization.
    unchecked = fresh.construct("DnaSeq", {"id": "x", "sequence": "XYZ"})
    assert fresh.check_validity(unchecked) is None


def test_dict_values_round_trip(seqs):
    """Dict values may hold instances, and plain dicts are never read as instances."""
    seqs.define_class("Library", {"name": "text", "entries": "any"})
    insert = seqs.construct("DnaSeq", {"id": "ins", "sequence": "GATC"})
    lookalike = {"class": "DnaSeq", "attributes": {"id": "not an instance"}}
    lib = seqs.construct("Library", {"name": "lib1", "entries": {"ins": insert, "note": lookalike}})

    restored = instance_from_yaml(seqs, instance_to_yaml(lib))

    entries = restored.attributes["entries"]
    assert entries["ins"].class_name == "DnaSeq"
    assert entries["ins"].attributes == insert.attributes
    assert entries["note"] == lookalike
