# Copyright 2017, Additive Regularization of Topic Models.

import numpy
import pytest

from mglda import CountStore, DocumentState, InvariantViolation, MGLDA, Region

from .helpers import assert_snapshots_equal, counted_words, make_config, make_corpus


def _model(**overrides):
    documents = [[[0, 1, 2], [3, 4]], [[5, 5, 1]], [[2], [0, 3], [4, 1, 1]], [[0, 0]]]
    states = [DocumentState.ACTIVE, DocumentState.ACTIVE, DocumentState.ACTIVE, DocumentState.HOLDOUT]
    return MGLDA(make_config(**overrides), make_corpus(documents, states), seed=17)


def _assert_consistent(store, model):
    numpy.testing.assert_allclose(store.global_topic_total, store.global_topic_word.sum(axis=1))
    numpy.testing.assert_allclose(store.local_topic_total, store.local_topic_word.sum(axis=1))
    numpy.testing.assert_allclose(store.doc_global_total, store.doc_global_topic.sum(axis=1))
    for d in range(store.num_documents):
        numpy.testing.assert_allclose(store.doc_sentence_total[d], store.doc_sentence_view[d].sum(axis=1))
        numpy.testing.assert_allclose(store.doc_view_total[d],
                                      store.doc_view_global[d] + store.doc_view_local[d])
        numpy.testing.assert_allclose(store.doc_view_local[d], store.doc_view_local_topic[d].sum(axis=1))
    assert store.num_assigned == counted_words(model.corpus)


def test_initial_counts_match_assignments():
    model = _model()
    store = model.store
    _assert_consistent(store, model)

    # holdout document contributes nothing until loaded
    assert store.doc_sentence_total[3].sum() == 0
    assert store.doc_global_total[3] == 0

    expected = numpy.zeros_like(store.global_topic_word)
    for d, doc in enumerate(model.corpus):
        if doc.state == DocumentState.HOLDOUT:
            continue
        for s, wd, view, region, topic in model.assignments.tokens(d, doc):
            if region is Region.GLOBAL:
                expected[topic, wd] += 1
    numpy.testing.assert_array_equal(store.global_topic_word, expected)


def test_load_unload_round_trip():
    model = _model()
    for d in range(len(model.corpus)):
        before = model.store.snapshot()
        model.load_document(d)
        model.unload_document(d)
        assert_snapshots_equal(before, model.store.snapshot())


def test_load_adds_document_tokens():
    model = _model()
    before = model.store.num_assigned
    model.load_document(3)
    assert model.store.num_assigned == before + model.corpus[3].num_words
    assert model.store.doc_sentence_total[3].sum() == model.corpus[3].num_words
    model.unload_document(3)
    assert model.store.num_assigned == before


def test_unload_of_missing_document_raises():
    model = _model()
    before = model.store.snapshot()
    with pytest.raises(InvariantViolation):
        model.unload_document(3)

    # the first token of the holdout document is refused before any cell is touched
    assert_snapshots_equal(before, model.store.snapshot())


def test_retract_and_commit_are_inverse():
    store = CountStore(make_config(), [2, 1])
    store.commit(0, 1, 4, 1, Region.LOCAL, 1)
    store.commit(0, 1, 4, 0, Region.GLOBAL, 0)

    assert store.local_topic_word[1, 4] == 1
    assert store.doc_view_local_topic[0][2, 1] == 1
    assert store.doc_view_global[0][1] == 1
    assert store.doc_global_topic[0, 0] == 1
    assert store.doc_sentence_view[0][1].tolist() == [1, 1]
    assert store.num_assigned == 2

    store.retract(0, 1, 4, 1, Region.LOCAL, 1)
    store.retract(0, 1, 4, 0, Region.GLOBAL, 0)
    for name, table in store.iter_tables():
        assert not table.any(), name

    with pytest.raises(InvariantViolation):
        store.retract(1, 0, 2, 0, Region.GLOBAL, 1)
    store.check_non_negative()


def test_inflation_applies_to_document_tables_once():
    store = CountStore(make_config(inflation=0.5, t=3), [2])
    assert store.doc_sentence_view[0].shape == (2, 3)
    assert store.doc_view_total[0].shape == (5,)
    assert store.doc_view_local_topic[0].shape == (5, 2)
    assert (store.doc_view_global[0] == 0.5).all()
    assert not store.global_topic_word.any()
    assert not store.doc_global_topic.any()

    store.commit(0, 0, 1, 2, Region.LOCAL, 0)
    store.retract(0, 0, 1, 2, Region.LOCAL, 0)
    assert (store.doc_view_local[0] == 0.5).all()
    assert (store.doc_sentence_total[0] == 0.5).all()


def test_check_non_negative():
    store = CountStore(make_config(), [1])
    store.check_non_negative()
    store.doc_view_total[0][1] = -1.0
    with pytest.raises(InvariantViolation):
        store.check_non_negative()
