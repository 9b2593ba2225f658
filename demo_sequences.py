#!/usr/bin/env python3
"""
Demo: the biological sequence model.

Shows construction with validity, dispatch along the class chain,
the shadowed built-in pitfall and its fix, and reference classes.
"""

import warnings

from gdom import NoApplicableMethodError, ObjectModel, ShadowedBuiltinWarning, ValidityError
from gdom.examples import build_ref_sequence_class, build_sequence_model
from gdom.serialization import instance_to_yaml


def main():
    model = build_sequence_model()

    print("=" * 70)
    print("FORMAL CLASSES")
    print("=" * 70)

    dna = model.construct("DnaSeq", {"id": "seq1", "sequence": "GATTACA"})
    print(model.dispatch("show", dna))
    print(f"\nrev:        {model.dispatch('seq', model.dispatch('rev', dna))}")
    print(f"comp:       {model.dispatch('seq', model.dispatch('comp', dna))}")
    print(f"transcribe: {model.dispatch('show', model.dispatch('transcribe', dna))}")

    try:
        model.construct("DnaSeq", {"id": "bad", "sequence": "GAUUACA"})
    except ValidityError as e:
        print(f"\nRejected: {e}")

    try:
        model.dispatch("set_seq", dna, "NNNN")
    except ValidityError as e:
        print(f"Rejected: {e}")

    print("\nYAML:")
    print(instance_to_yaml(dna))

    print("=" * 70)
    print("SHADOWING A BUILT-IN")
    print("=" * 70)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ShadowedBuiltinWarning)
        model.define_generic("sequence", ["object"])
    for w in caught:
        print(f"Warning: {w.message}")
    model.define_method("sequence", "GenericSeq", lambda obj: obj.attributes["sequence"])

    try:
        model.dispatch("sequence", [3, 2])
    except NoApplicableMethodError as e:
        print(f"Broken: {e}")

    model.restore_builtin("sequence")
    print(f"Restored: sequence([3, 2]) = {model.dispatch('sequence', [3, 2])}")

    print("=" * 70)
    print("REFERENCE CLASSES")
    print("=" * 70)

    refs = build_ref_sequence_class(ObjectModel())
    s = refs.new_ref("RefSeq", id="ref1", sequence="AACG")
    alias = s
    alias.rev()
    print(f"After alias.rev(): {s!r}")
    clone = s.copy()
    clone.comp()
    print(f"Original: {s!r}")
    print(f"Clone:    {clone!r}")


if __name__ == "__main__":
    main()
