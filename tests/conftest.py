"""Shared fixtures: the small Seq / DNASeq hierarchy used across tests."""

import pytest

from gdom import ObjectModel


def seq_validity(obj):
    missing = sorted(set(obj.attributes["sequence"]) - set(obj.attributes["alphabet"]))
    if missing:
        return f"Characters not in alphabet: {''.join(missing)}"
    return True


@pytest.fixture
def model():
    return ObjectModel()


@pytest.fixture
def seq_model(model):
    model.define_class(
        "Seq",
        {"alphabet": "text_sequence", "sequence": "text"},
        validity=seq_validity,
    )
    model.define_class("DNASeq", {"adapter": "text"}, parent="Seq")
    return model
