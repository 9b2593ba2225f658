"""
Tests for the Class Registry.

These tests verify:
    - Class definition and wholesale redefinition
    - Effective schema merging along the parent chain
    - Attribute collisions and inheritance cycles
    - Subclass reachability
    - Class introspection
"""

import pytest

from gdom import (
    AttributeType,
    InheritanceCycleError,
    SchemaConflictError,
    UnknownClassError,
)


class TestDefineClass:
    """Test class registration."""

    def test_define_root_class(self, model):
        definition = model.define_class("Seq", {"sequence": "text"})
        assert definition.name == "Seq"
        assert definition.parent is None
        assert definition.attributes == {"sequence": AttributeType.TEXT}
        assert "Seq" in model.list_classes()

    def test_unknown_parent(self, model):
        """Parent must be registered first."""
        with pytest.raises(UnknownClassError):
            model.define_class("DNASeq", {"adapter": "text"}, parent="Seq")

    def test_attribute_collision_with_parent(self, seq_model):
        with pytest.raises(SchemaConflictError):
            seq_model.define_class("RNASeq", {"sequence": "text"}, parent="Seq")

    def test_attribute_collision_with_grandparent(self, seq_model):
        with pytest.raises(SchemaConflictError):
            seq_model.define_class("Primer", {"alphabet": "text"}, parent="DNASeq")

    def test_redefinition_replaces_wholesale(self, model):
        """Redefining does not merge with the old attributes."""
        model.define_class("Seq", {"sequence": "text"})
        model.define_class("Seq", {"residues": "text_sequence"})
        assert model.resolve_effective_schema("Seq") == {"residues": AttributeType.TEXT_SEQUENCE}

    def test_redefinition_cannot_create_cycle(self, model):
        model.define_class("A", {"a": "text"})
        model.define_class("B", {"b": "text"}, parent="A")
        with pytest.raises(InheritanceCycleError):
            model.define_class("A", {"a": "text"}, parent="B")

    def test_redefinition_cannot_collide_with_subclass(self, seq_model):
        """A parent may not take over an attribute a subclass already declares."""
        with pytest.raises(SchemaConflictError):
            seq_model.define_class("Seq", {"alphabet": "text_sequence", "sequence": "text", "adapter": "numeric"})
        assert seq_model.resolve_effective_schema("DNASeq")["adapter"] is AttributeType.TEXT
        assert "adapter" not in seq_model.resolve_effective_schema("Seq")

    def test_redefinition_collision_through_new_grandparent(self, seq_model):
        seq_model.define_class("Tagged", {"adapter": "text"})
        with pytest.raises(SchemaConflictError):
            seq_model.define_class("Seq", {"alphabet": "text_sequence", "sequence": "text"}, parent="Tagged")
        assert seq_model.classes.get("Seq").parent is None

    def test_cycle_error_is_schema_conflict(self):
        assert issubclass(InheritanceCycleError, SchemaConflictError)

    def test_defaults_must_name_known_attributes(self, model):
        with pytest.raises(SchemaConflictError):
            model.define_class("Seq", {"sequence": "text"}, defaults={"alphabet": ["A"]})

    def test_defaults_may_cover_inherited_attributes(self, seq_model):
        definition = seq_model.define_class("RNASeq", parent="Seq", defaults={"alphabet": ["A", "C", "G", "U"]})
        assert definition.defaults == {"alphabet": ["A", "C", "G", "U"]}


class TestEffectiveSchema:
    """Test schema resolution along the inheritance chain."""

    def test_union_of_own_and_inherited(self, seq_model):
        schema = seq_model.resolve_effective_schema("DNASeq")
        assert set(schema) == {"alphabet", "sequence", "adapter"}

    def test_ancestors_first(self, seq_model):
        assert list(seq_model.resolve_effective_schema("DNASeq")) == ["alphabet", "sequence", "adapter"]

    def test_unknown_class(self, model):
        with pytest.raises(UnknownClassError):
            model.resolve_effective_schema("Nope")

    def test_linearize(self, seq_model):
        assert seq_model.classes.linearize("DNASeq") == ["DNASeq", "Seq"]


class TestIsSubclassOf:
    """Test inheritance reachability."""

    def test_class_is_its_own_subclass(self, seq_model):
        assert seq_model.is_subclass_of("Seq", "Seq")

    def test_child_of_parent(self, seq_model):
        assert seq_model.is_subclass_of("DNASeq", "Seq")

    def test_parent_is_not_child(self, seq_model):
        assert not seq_model.is_subclass_of("Seq", "DNASeq")

    def test_unknown_candidate(self, seq_model):
        assert not seq_model.is_subclass_of("Nope", "Seq")


class TestDescribeClass:
    """Test class introspection."""

    def test_describe(self, seq_model):
        seq_model.define_generic("length", ["x"])
        seq_model.define_method("length", "DNASeq", lambda x: 0)

        info = seq_model.describe_class("DNASeq")

        assert info["name"] == "DNASeq"
        assert info["parent"] == "Seq"
        assert info["ancestors"] == ["Seq"]
        assert info["attributes"] == {"adapter": "text"}
        assert info["effective_attributes"] == {
            "alphabet": "text_sequence",
            "sequence": "text",
            "adapter": "text",
        }
        assert info["has_validity"] is False
        assert info["methods"] == ["length"]

    def test_describe_unknown(self, model):
        with pytest.raises(UnknownClassError):
            model.describe_class("Nope")
