# Copyright 2017, Additive Regularization of Topic Models.

import logging

import numpy

from .constants import Region
from .exceptions import IllegalTransitionError, InvariantViolation

__all__ = [
    'Assignments',
    'GibbsSampler',
]

logger = logging.getLogger(__name__)


class Assignments(object):
    """
    Latent state of every token, keyed by (document, sentence, word offset):
    ``view[d][s][w]``, ``region[d][s][w]`` and ``topic[d][s][w]``.
    """

    def __init__(self, view, region, topic):
        self.view = view
        self.region = region
        self.topic = topic

    @classmethod
    def random(cls, corpus, config, random_state):
        """
        :Description: draws an initial assignment for every token of every document,\
                      holdout documents included

        :param Corpus corpus: the documents
        :param Config config: model hyperparameters
        :param numpy.random.Generator random_state: source of randomness
        """
        view, region, topic = [], [], []
        for doc in corpus:
            vd, rd, zd = [], [], []
            for words in doc.sentences:
                vs, rs, zs = [], [], []
                for _ in words:
                    vs.append(int(random_state.integers(config.t)))
                    if random_state.integers(2) == 0:
                        rs.append(Region.GLOBAL)
                        zs.append(int(random_state.integers(config.global_k)))
                    else:
                        rs.append(Region.LOCAL)
                        zs.append(int(random_state.integers(config.local_k)))
                vd.append(vs)
                rd.append(rs)
                zd.append(zs)
            view.append(vd)
            region.append(rd)
            topic.append(zd)
        return cls(view, region, topic)

    def get(self, d, s, w):
        return self.view[d][s][w], self.region[d][s][w], self.topic[d][s][w]

    def set(self, d, s, w, view, region, topic):
        self.view[d][s][w] = view
        self.region[d][s][w] = region
        self.topic[d][s][w] = topic

    def tokens(self, d, document):
        """Yields (sentence, word id, view, region, topic) for every token of document d."""
        for s, words in enumerate(document.sentences):
            views, regions, topics = self.view[d][s], self.region[d][s], self.topic[d][s]
            for w, wd in enumerate(words):
                yield s, wd, views[w], regions[w], topics[w]

    def __eq__(self, other):
        return (isinstance(other, Assignments) and self.view == other.view and
                self.region == other.region and self.topic == other.topic)


class GibbsSampler(object):
    def __init__(self, config, store, assignments, random_state):
        """
        :param Config config: model hyperparameters
        :param CountStore store: counts, mutated in place
        :param Assignments assignments: token assignments, mutated in place
        :param numpy.random.Generator random_state: source of the uniform draws
        """
        self._config = config
        self._store = store
        self._assignments = assignments
        self._random_state = random_state

        self._num_candidates_per_view = config.global_k + config.local_k
        self._views = numpy.arange(config.t)
        self._global_beta_norm = config.w * config.global_beta
        self._local_beta_norm = config.w * config.local_beta
        self._gamma_norm = config.t * config.gamma
        self._alpha_mix_norm = config.global_alpha_mix + config.local_alpha_mix
        self._global_alpha_norm = config.global_k * config.global_alpha
        self._local_alpha_norm = config.local_k * config.local_alpha

    def candidate_weights(self, d, s, wd):
        """
        :Description: unnormalized probabilities of every (view, region, topic) candidate\
                      for word wd in sentence s of document d, given the current counts

        :return: numpy.ndarray of length T * (GlobalK + LocalK), view-major; within one view\
                 global topics ascending, then local topics ascending
        """
        c = self._config
        st = self._store
        idx = s + self._views

        window = (st.doc_sentence_view[d][s] + c.gamma) / (st.doc_sentence_total[d][s] + self._gamma_norm)
        mix_norm = st.doc_view_total[d][idx] + self._alpha_mix_norm

        global_word = ((st.global_topic_word[:, wd] + c.global_beta) /
                       (st.global_topic_total + self._global_beta_norm))
        global_mix = (st.doc_view_global[d][idx] + c.global_alpha_mix) / mix_norm
        global_topic = ((st.doc_global_topic[d] + c.global_alpha) /
                        (st.doc_global_total[d] + self._global_alpha_norm))
        global_weights = numpy.outer(window * global_mix, global_word * global_topic)

        local_word = ((st.local_topic_word[:, wd] + c.local_beta) /
                      (st.local_topic_total + self._local_beta_norm))
        local_view = st.doc_view_local[d][idx]
        local_mix = (local_view + c.local_alpha_mix) / mix_norm
        local_topic = ((st.doc_view_local_topic[d][idx] + c.local_alpha) /
                       (local_view + self._local_alpha_norm)[:, numpy.newaxis])
        local_weights = (window * local_mix)[:, numpy.newaxis] * local_word * local_topic

        return numpy.hstack([global_weights, local_weights]).ravel()

    def _decode(self, index):
        view, k = divmod(index, self._num_candidates_per_view)
        if k < self._config.global_k:
            return view, Region.GLOBAL, k
        return view, Region.LOCAL, k - self._config.global_k

    def _draw(self, weights):
        total = weights.sum()
        if not numpy.isfinite(total) or total <= 0.0:
            raise InvariantViolation('Invalid normalization mass {0} of candidate distribution'.format(total))

        cdf = numpy.cumsum(weights) / total
        threshold = self._random_state.random()
        # first candidate whose cumulative mass reaches the threshold
        index = int(numpy.searchsorted(cdf, threshold, side='left'))
        return min(index, len(weights) - 1)

    def resample(self, d, s, w, wd):
        """
        Retracts token (d, s, w), draws a new assignment for it and commits it.
        If the draw fails or is interrupted, the old assignment is committed back
        before the exception propagates.
        """
        view, region, topic = self._assignments.get(d, s, w)
        self._store.retract(d, s, wd, view, region, topic)

        try:
            new_view, new_region, new_topic = self._decode(self._draw(self.candidate_weights(d, s, wd)))
        except BaseException:
            self._store.commit(d, s, wd, view, region, topic)
            raise

        self._store.commit(d, s, wd, new_view, new_region, new_topic)
        self._assignments.set(d, s, w, new_view, new_region, new_topic)
        return new_view, new_region, new_topic

    def resample_document(self, d, document):
        if not document.is_active:
            raise IllegalTransitionError('Cannot resample document {0} in state {1}'.format(
                d, document.state.name))

        for s, words in enumerate(document.sentences):
            for w, wd in enumerate(words):
                self.resample(d, s, w, wd)

    def inference_pass(self, corpus):
        """
        :Description: one sweep of the kernel over every token of every active document,\
                      in document, sentence, word order

        :return: number of resampled tokens
        """
        num_tokens = 0
        for d, document in enumerate(corpus):
            if not document.is_active:
                continue
            self.resample_document(d, document)
            num_tokens += document.num_words
        logger.debug('inference pass resampled %d tokens', num_tokens)
        return num_tokens
