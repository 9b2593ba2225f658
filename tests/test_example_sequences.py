"""
Test the biological sequence example model.

Validates the class hierarchy, accessors, the validated replacement
method, and the reference-class variant.
"""

import pytest

from gdom import ObjectModel, ValidityError, VirtualClassError
from gdom.examples import DNA, RNA, build_ref_sequence_class, build_sequence_model


@pytest.fixture
def seqs():
    return build_sequence_model()


@pytest.fixture
def dna(seqs):
    return seqs.construct("DnaSeq", {"id": "s1", "sequence": "ATGC"})


class TestSequenceClasses:
    """Test the GenericSeq / DnaSeq / RnaSeq hierarchy."""

    def test_generic_seq_is_virtual(self, seqs):
        with pytest.raises(VirtualClassError):
            seqs.construct("GenericSeq", {"id": "x", "alphabet": DNA, "sequence": "A"})

    def test_prototype_alphabets(self, seqs, dna):
        assert dna.attributes["alphabet"] == DNA
        rna = seqs.construct("RnaSeq", {"id": "r", "sequence": "AUG"})
        assert rna.attributes["alphabet"] == RNA

    def test_rna_bases_rejected_in_dna(self, seqs):
        with pytest.raises(ValidityError) as exc:
            seqs.construct("DnaSeq", {"id": "s2", "sequence": "AUG"})
        assert "U" in exc.value.reason


class TestSequenceGenerics:
    """Test dispatch of the sequence generics."""

    def test_accessors(self, seqs, dna):
        assert seqs.dispatch("id", dna) == "s1"
        assert seqs.dispatch("seq", dna) == "ATGC"
        assert seqs.dispatch("alphabet", dna) == DNA

    def test_length(self, seqs, dna):
        assert seqs.dispatch("length", dna) == 4

    def test_length_builtin_default(self, seqs):
        """length keeps working on plain values."""
        assert seqs.dispatch("length", [1, 2, 3]) == 3

    def test_rev(self, seqs, dna):
        assert seqs.dispatch("rev", dna).attributes["sequence"] == "CGTA"
        assert dna.attributes["sequence"] == "ATGC"

    def test_rev_builtin_default(self, seqs):
        assert seqs.dispatch("rev", "abc") == "cba"
        assert seqs.dispatch("rev", [1, 2]) == [2, 1]

    def test_comp(self, seqs, dna):
        assert seqs.dispatch("comp", dna).attributes["sequence"] == "TACG"

    def test_comp_rna(self, seqs):
        rna = seqs.construct("RnaSeq", {"id": "r", "sequence": "AUGC"})
        assert seqs.dispatch("comp", rna).attributes["sequence"] == "UACG"

    def test_transcribe(self, seqs, dna):
        rna = seqs.dispatch("transcribe", dna)
        assert rna.class_name == "RnaSeq"
        assert rna.attributes["sequence"] == "AUGC"
        assert rna.attributes["id"] == "s1"

    def test_subseq(self, seqs, dna):
        assert seqs.dispatch("subseq", dna, 1, 3).attributes["sequence"] == "TG"

    def test_set_seq_validates(self, seqs, dna):
        updated = seqs.dispatch("set_seq", dna, "GGCC")
        assert updated.attributes["sequence"] == "GGCC"
        with pytest.raises(ValidityError):
            seqs.dispatch("set_seq", dna, "GGUU")

    def test_show(self, seqs, dna):
        text = seqs.dispatch("show", dna)
        assert "Object of class 'DnaSeq'" in text
        assert "Length: 4" in text
        assert "Alphabet: A C G T" in text

    def test_describe_dna(self, seqs):
        info = seqs.describe_class("DnaSeq")
        assert info["parent"] == "GenericSeq"
        assert info["methods"] == ["comp", "transcribe"]
        assert info["defaults"] == {"alphabet": DNA}


class TestRefSequence:
    """Test the reference-class sequence."""

    @pytest.fixture
    def refs(self):
        return build_ref_sequence_class(ObjectModel())

    def test_initialize_defaults_alphabet(self, refs):
        s = refs.new_ref("RefSeq", id="r1", sequence="ACGT")
        assert s.alphabet == DNA

    def test_initialize_validates(self, refs):
        with pytest.raises(ValidityError):
            refs.new_ref("RefSeq", id="r1", sequence="ACGU")

    def test_in_place_methods(self, refs):
        s = refs.new_ref("RefSeq", id="r1", sequence="AACG")
        holder = s
        s.rev()
        assert holder.sequence == "GCAA"
        s.comp()
        assert holder.sequence == "CGTT"

    def test_set_sequence_rolls_back(self, refs):
        s = refs.new_ref("RefSeq", id="r1", sequence="ACGT")
        with pytest.raises(ValidityError):
            s.set_sequence("ACGU")
        assert s.sequence == "ACGT"

    def test_show(self, refs):
        s = refs.new_ref("RefSeq", id="r1", sequence="ACGT")
        assert repr(s) == "Reference RefSeq r1: ACGT (4 bases)"
