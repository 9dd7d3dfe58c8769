# Copyright 2017, Additive Regularization of Topic Models.

import numpy

from mglda import Config, Corpus, Document, DocumentState


def make_config(**overrides):
    params = dict(global_k=2, local_k=2, gamma=0.1, global_alpha=0.1, local_alpha=0.1,
                  global_alpha_mix=0.1, local_alpha_mix=0.1, global_beta=0.1, local_beta=0.1,
                  t=2, w=6)
    params.update(overrides)
    return Config(**params)


def make_corpus(documents, states=None):
    """documents: list of lists of sentences; states: DocumentState per document, active by default"""
    if states is None:
        states = [DocumentState.ACTIVE] * len(documents)
    return Corpus(Document(sentences, state) for sentences, state in zip(documents, states))


def counted_words(corpus):
    return sum(doc.num_words for doc in corpus if doc.state != DocumentState.HOLDOUT)


def assert_snapshots_equal(first, second):
    assert set(first.keys()) == set(second.keys())
    for name in first:
        if isinstance(first[name], list):
            assert len(first[name]) == len(second[name])
            for a, b in zip(first[name], second[name]):
                numpy.testing.assert_array_equal(a, b)
        else:
            numpy.testing.assert_array_equal(first[name], second[name])


def synthetic_documents(num_docs=20, num_sentences=3, sentence_length=5, vocab_size=4):
    """every document repeats a single dominant word, cycling through the vocabulary"""
    documents = []
    for d in range(num_docs):
        wd = d % vocab_size
        documents.append([[wd] * sentence_length for _ in range(num_sentences)])
    return documents


class InterruptingRandomState(object):
    """Delegates to a generator, raising KeyboardInterrupt on the n-th uniform draw."""

    def __init__(self, random_state, interrupt_at):
        self._random_state = random_state
        self._interrupt_at = interrupt_at
        self.num_calls = 0

    def random(self):
        self.num_calls += 1
        if self.num_calls == self._interrupt_at:
            raise KeyboardInterrupt()
        return self._random_state.random()
