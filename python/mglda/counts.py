# Copyright 2017, Additive Regularization of Topic Models.

"""
Sufficient statistics of the collapsed Gibbs sampler.

Every table holds integer counts stored as float64, so that the inflation
pseudocount can be added once at construction. Tables of a document are
indexed by sentence (``doc_sentence_*``) or by absolute window position
``idx = s + v`` (``doc_view_*``), which ranges over ``num_sentences + T``.
"""

import numpy

from .constants import Region
from .exceptions import InvariantViolation

__all__ = [
    'CountStore'
]

TOPIC_WORD_TABLES = ('global_topic_word', 'global_topic_total',
                     'local_topic_word', 'local_topic_total')
DOCUMENT_TABLES = ('doc_sentence_view', 'doc_sentence_total',
                   'doc_view_global', 'doc_view_total', 'doc_view_local',
                   'doc_view_local_topic')


class CountStore(object):
    def __init__(self, config, num_sentences):
        """
        :param Config config: model hyperparameters
        :param num_sentences: number of sentences of each document
        :type num_sentences: list of int
        """
        self._config = config
        gk, lk, t, w = config.global_k, config.local_k, config.t, config.w
        inflation = float(config.inflation)
        num_docs = len(num_sentences)

        self.global_topic_word = numpy.zeros((gk, w))
        self.global_topic_total = numpy.zeros(gk)
        self.local_topic_word = numpy.zeros((lk, w))
        self.local_topic_total = numpy.zeros(lk)

        self.doc_sentence_view = [numpy.full((n, t), inflation) for n in num_sentences]
        self.doc_sentence_total = [numpy.full(n, inflation) for n in num_sentences]
        self.doc_view_global = [numpy.full(n + t, inflation) for n in num_sentences]
        self.doc_view_total = [numpy.full(n + t, inflation) for n in num_sentences]
        self.doc_view_local = [numpy.full(n + t, inflation) for n in num_sentences]
        self.doc_view_local_topic = [numpy.full((n + t, lk), inflation) for n in num_sentences]

        self.doc_global_topic = numpy.zeros((num_docs, gk))
        self.doc_global_total = numpy.zeros(num_docs)

    @property
    def config(self):
        return self._config

    @property
    def num_documents(self):
        return len(self.doc_sentence_total)

    @property
    def num_assigned(self):
        """Number of tokens currently assigned to some (region, topic)."""
        return float(self.global_topic_total.sum() + self.local_topic_total.sum())

    def _cells(self, d, s, wd, view, region, topic):
        idx = s + view
        cells = [
            (self.doc_sentence_view[d], (s, view)),
            (self.doc_sentence_total[d], s),
            (self.doc_view_total[d], idx),
        ]
        if region is Region.GLOBAL:
            cells.extend([
                (self.global_topic_word, (topic, wd)),
                (self.global_topic_total, topic),
                (self.doc_view_global[d], idx),
                (self.doc_global_topic, (d, topic)),
                (self.doc_global_total, d),
            ])
        else:
            cells.extend([
                (self.local_topic_word, (topic, wd)),
                (self.local_topic_total, topic),
                (self.doc_view_local[d], idx),
                (self.doc_view_local_topic[d], (idx, topic)),
            ])
        return cells

    def retract(self, d, s, wd, view, region, topic):
        """Removes one token with the given assignment from every table it contributes to."""
        cells = self._cells(d, s, wd, view, region, topic)
        for table, index in cells:
            if table[index] < 1.0:
                raise InvariantViolation(
                    'Count would go negative when retracting token (doc={0}, sentence={1}, word={2}, '
                    'view={3}, region={4}, topic={5})'.format(d, s, wd, view, region.name, topic))
        for table, index in cells:
            table[index] -= 1.0

    def commit(self, d, s, wd, view, region, topic):
        for table, index in self._cells(d, s, wd, view, region, topic):
            table[index] += 1.0

    def load_document(self, d, tokens):
        """
        :Description: adds a whole document to the counts without resampling

        :param int d: document index
        :param tokens: (sentence, word id, view, region, topic) for every token of d
        """
        for s, wd, view, region, topic in tokens:
            self.commit(d, s, wd, view, region, topic)

    def unload_document(self, d, tokens):
        """Exact reversal of load_document() for the same tokens."""
        for s, wd, view, region, topic in tokens:
            self.retract(d, s, wd, view, region, topic)

    def snapshot(self):
        """Deep copy of every table, keyed by table name."""
        result = {}
        for name in TOPIC_WORD_TABLES + ('doc_global_topic', 'doc_global_total'):
            result[name] = getattr(self, name).copy()
        for name in DOCUMENT_TABLES:
            result[name] = [table.copy() for table in getattr(self, name)]
        return result

    def iter_tables(self):
        for name in TOPIC_WORD_TABLES + ('doc_global_topic', 'doc_global_total'):
            yield name, getattr(self, name)
        for name in DOCUMENT_TABLES:
            for d, table in enumerate(getattr(self, name)):
                yield '{0}[{1}]'.format(name, d), table

    def check_non_negative(self):
        for name, table in self.iter_tables():
            if table.size and table.min() < 0:
                raise InvariantViolation('Negative count in table {0}'.format(name))
