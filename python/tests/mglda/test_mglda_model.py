# Copyright 2017, Additive Regularization of Topic Models.

import io
import math
import os
import shutil
import tempfile

import numpy
import pytest

import mglda
from mglda import DocumentState, MGLDA, Region, Vocabulary, load_mglda_model

from .helpers import (
    assert_snapshots_equal,
    make_config,
    make_corpus,
    synthetic_documents,
)


def test_two_document_scenario():
    config = make_config(global_k=1, local_k=1, t=1, w=5)
    model = MGLDA(config, make_corpus([[[0, 1, 2]], [[3, 4, 1]]]), seed=0)

    assert model.store.num_assigned == 6
    model.inference()
    assert model.store.num_assigned == 6
    assert model.num_passes == 1

    loglik = model.log_likelihood()
    assert math.isfinite(loglik)
    assert loglik < 0


def test_log_likelihood_trends_upward():
    num_passes = 60
    config = make_config(global_k=2, local_k=2, t=2, w=4, global_beta=0.01, local_beta=0.01)
    model = MGLDA(config, make_corpus(synthetic_documents()), seed=2017)

    initial = model.log_likelihood()
    model.fit_offline(num_passes)

    values = model.score_tracker.value
    assert len(values) == num_passes
    assert model.score_tracker.passes == list(range(1, num_passes + 1))

    averages = model.score_tracker.moving_average(10)
    assert averages[-1] > initial


def test_run_learning_report():
    config = make_config(global_k=2, local_k=1, w=4)
    model = MGLDA(config, make_corpus(synthetic_documents(num_docs=4)), seed=9)
    vocabulary = Vocabulary(['a', 'b', 'c', 'd'])

    sink = io.StringIO()
    reports = model.run_learning(2, vocabulary=vocabulary, sink=sink, num_tokens=3)
    lines = sink.getvalue().splitlines()

    assert lines[0] == '==== 0-th inference ===='
    assert '==== 1-th inference ====' in lines
    assert sum(line.startswith('-- global topic:') for line in lines) == 4
    assert sum(line.startswith('-- local topic:') for line in lines) == 2
    # pass header, then three topics of one header and three token lines each
    assert len(lines) == 2 * (1 + 3 * 4)

    assert len(reports) == 3
    assert sum(r.num_words for r in reports) == model.corpus.num_words
    assert len(model.score_tracker) == 2


def test_get_phi():
    config = make_config(global_k=3, local_k=2, w=5)
    model = MGLDA(config, make_corpus(synthetic_documents(num_docs=5, vocab_size=5)), seed=4)
    model.fit_offline(2)

    phi = model.get_phi()
    assert phi.shape == (5, 3)
    assert list(phi.columns) == ['global_0', 'global_1', 'global_2']
    assert list(phi.index) == [0, 1, 2, 3, 4]

    phi_local = model.get_phi(Region.LOCAL, vocabulary=Vocabulary(['v', 'w', 'x', 'y', 'z']))
    assert list(phi_local.columns) == ['local_0', 'local_1']
    assert list(phi_local.index) == ['v', 'w', 'x', 'y', 'z']
    numpy.testing.assert_allclose(phi_local.values.transpose(), model.word_dist()[1])


def test_clone_is_independent():
    model = MGLDA(make_config(), make_corpus(synthetic_documents(num_docs=4)), seed=8)
    clone = model.clone()
    clone.fit_offline(3)

    assert model.num_passes == 0
    assert clone.num_passes == 3

    other = MGLDA(make_config(), make_corpus(synthetic_documents(num_docs=4)), seed=8)
    other.fit_offline(3)
    assert other.assignments == clone.assignments


def test_invalid_arguments():
    with pytest.raises(mglda.ConfigError):
        MGLDA({'global_k': 1}, make_corpus([[[0]]]))
    with pytest.raises(mglda.ConfigError):
        MGLDA(make_config(), make_corpus([[[0]]]), seed=-5)
    with pytest.raises(mglda.ConfigError):
        MGLDA(make_config(), make_corpus([[[0]]]), random_state=42)


def test_dump_load():
    documents = synthetic_documents(num_docs=6)
    states = [DocumentState.ACTIVE] * 5 + [DocumentState.HOLDOUT]
    model = MGLDA(make_config(), make_corpus(documents, states), seed=21)
    model.fit_offline(3)

    folder = tempfile.mkdtemp()
    try:
        data_path = os.path.join(folder, 'model')
        model.dump_mglda_model(data_path)
        with pytest.raises(IOError):
            model.dump_mglda_model(data_path)

        loaded = load_mglda_model(data_path, make_corpus(documents))
        assert loaded.config == model.config
        assert loaded.assignments == model.assignments
        assert loaded.num_passes == 3
        assert loaded.score_tracker.value == model.score_tracker.value
        assert [doc.state for doc in loaded.corpus] == states
        assert_snapshots_equal(loaded.store.snapshot(), model.store.snapshot())

        # the random state continues where the dumped model stopped
        model.fit_offline(2)
        loaded.fit_offline(2)
        assert loaded.assignments == model.assignments

        with pytest.raises(mglda.ConfigError):
            load_mglda_model(data_path, make_corpus(documents[:5]))
    finally:
        shutil.rmtree(folder)
