"""
Example biological sequence model.

Builds the classic sequence hierarchy:

    GenericSeq (virtual: id, alphabet, sequence)
      ├── DnaSeq  (alphabet A C G T)
      └── RnaSeq  (alphabet A C G U)

with accessor generics, a validated replacement method, complement and
transcription, plus a reference-class variant whose methods mutate the
object in place.
"""
from gdom.errors import ValidityError
from gdom.model import Instance
from gdom.reference import RefObject
from gdom.session import ObjectModel

DNA = ["A", "C", "G", "T"]
RNA = ["A", "C", "G", "U"]

_COMPLEMENT = {
    "DnaSeq": str.maketrans("ACGT", "TGCA"),
    "RnaSeq": str.maketrans("ACGU", "UGCA"),
}


def alphabet_validity(obj: Instance):
    """Every character of the sequence must belong to the alphabet."""
    alphabet = set(obj.attributes["alphabet"])
    invalid = sorted(set(obj.attributes["sequence"]) - alphabet)
    if invalid:
        return f"Non-valid characters in sequence: {', '.join(invalid)}"
    return True


def build_sequence_model(model: ObjectModel = None) -> ObjectModel:
    model = model or ObjectModel()

    model.define_class(
        "GenericSeq",
        {"id": "text", "alphabet": "text_sequence", "sequence": "text"},
        validity=alphabet_validity,
        virtual=True,
    )
    model.define_class("DnaSeq", parent="GenericSeq", defaults={"alphabet": DNA})
    model.define_class("RnaSeq", parent="GenericSeq", defaults={"alphabet": RNA})

    # Accessors
    model.define_generic("id", ["object"])
    model.define_generic("seq", ["object"])
    model.define_generic("alphabet", ["object"])
    model.define_method("id", "GenericSeq", lambda obj: obj.attributes["id"])
    model.define_method("seq", "GenericSeq", lambda obj: obj.attributes["sequence"])
    model.define_method("alphabet", "GenericSeq", lambda obj: obj.attributes["alphabet"])

    # Replacement method: mutate, then check validity before returning.
    model.define_generic("set_seq", ["object", "value"])

    @model.method("set_seq", "GenericSeq")
    def set_seq(obj, value):
        return model.validate(model.set_attribute(obj, "sequence", value))

    # These match the built-ins' shapes, so the built-ins stay as ANY defaults.
    model.define_generic("length", ["x"])
    model.define_generic("rev", ["x"])
    model.define_generic("show", ["object"])

    model.define_method("length", "GenericSeq", lambda x: len(x.attributes["sequence"]))

    @model.method("rev", "GenericSeq")
    def rev_seq(x):
        return model.set_attribute(x, "sequence", x.attributes["sequence"][::-1])

    @model.method("show", "GenericSeq")
    def show_seq(obj):
        return "\n".join([
            f"Object of class {obj.class_name!r}",
            f" Id: {obj.attributes['id']}",
            f" Length: {model.dispatch('length', obj)}",
            f" Alphabet: {' '.join(obj.attributes['alphabet'])}",
            f" Sequence: {obj.attributes['sequence']}",
        ])

    model.define_generic("subseq", ["x", "start", "end"])

    @model.method("subseq", "GenericSeq")
    def subseq(x, start, end):
        return model.set_attribute(x, "sequence", x.attributes["sequence"][start:end])

    model.define_generic("comp", ["object"])

    @model.method("comp", "DnaSeq")
    def comp_dna(obj):
        return model.set_attribute(obj, "sequence", obj.attributes["sequence"].translate(_COMPLEMENT["DnaSeq"]))

    @model.method("comp", "RnaSeq")
    def comp_rna(obj):
        return model.set_attribute(obj, "sequence", obj.attributes["sequence"].translate(_COMPLEMENT["RnaSeq"]))

    model.define_generic("transcribe", ["object"])

    @model.method("transcribe", "DnaSeq")
    def transcribe(obj):
        return model.construct("RnaSeq", {
            "id": obj.attributes["id"],
            "sequence": obj.attributes["sequence"].replace("T", "U"),
        })

    return model


def _ref_initialize(self: RefObject, **values):
    values.setdefault("alphabet", list(DNA))
    self.call_super("RefSeq", "initialize", **values)
    _ref_validate(self)


def _ref_validate(self: RefObject):
    invalid = sorted(set(self.sequence) - set(self.alphabet))
    if invalid:
        raise ValidityError(self.class_name, f"Non-valid characters in sequence: {', '.join(invalid)}")


def _ref_set_sequence(self: RefObject, value: str):
    previous = self.sequence
    self.sequence = value
    try:
        _ref_validate(self)
    except ValidityError:
        self.sequence = previous
        raise
    return self


def _ref_rev(self: RefObject):
    self.sequence = self.sequence[::-1]
    return self


def _ref_comp(self: RefObject):
    self.sequence = self.sequence.translate(_COMPLEMENT["DnaSeq"])
    return self


def _ref_show(self: RefObject):
    return f"Reference {self.class_name} {self.id}: {self.sequence} ({len(self.sequence)} bases)"


def build_ref_sequence_class(model: ObjectModel) -> ObjectModel:
    """Add the reference-class variant `RefSeq` to a model."""
    model.define_ref_class(
        "RefSeq",
        fields={"id": "text", "alphabet": "text_sequence", "sequence": "text"},
        methods={
            "initialize": _ref_initialize,
            "validate": _ref_validate,
            "set_sequence": _ref_set_sequence,
            "rev": _ref_rev,
            "comp": _ref_comp,
            "show": _ref_show,
        },
    )
    return model
