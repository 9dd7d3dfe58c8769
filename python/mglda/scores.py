# Copyright 2017, Additive Regularization of Topic Models.

import numpy

from scipy.special import gammaln

from .constants import DEFAULT_NUM_TOKENS, Region

__all__ = [
    'log_likelihood',
    'topic_log_likelihood',
    'word_dist',
    'top_tokens',
    'TopicReport',
    'format_topic_reports',
]


def topic_log_likelihood(topic_word, beta):
    """
    :Description: log of the Dirichlet-multinomial (Polya urn) marginal of a topic-word table

    For every topic the urn draws its words one by one: the n-th copy of word w, drawn
    after ss words of that topic were already drawn, contributes
    log((n + beta) / (ss + W * beta)). The telescoping product has the closed form
    sum_w [lgamma(N_zw + beta) - lgamma(beta)] - [lgamma(N_z + W * beta) - lgamma(W * beta)].

    :param numpy.ndarray topic_word: (num_topics, W) counts, truncated to integers
    :param float beta: topic-word concentration
    :return: float
    """
    counts = numpy.trunc(topic_word)
    vocab_size = counts.shape[1]
    totals = counts.sum(axis=1)

    words_term = (gammaln(counts + beta) - gammaln(beta)).sum()
    norm_term = (gammaln(totals + vocab_size * beta) - gammaln(vocab_size * beta)).sum()
    return float(words_term - norm_term)


def log_likelihood(store, config):
    """Log-likelihood of the global then the local topic-word tables of the store."""
    return (topic_log_likelihood(store.global_topic_word, config.global_beta) +
            topic_log_likelihood(store.local_topic_word, config.local_beta))


def word_dist(store):
    """
    :Description: smoothed topic-word distributions N_zw / (N_z + 1)

    :return: tuple (global, local) of numpy.ndarray of shape (num_topics, W)
    """
    phi_global = store.global_topic_word / (store.global_topic_total + 1.0)[:, numpy.newaxis]
    phi_local = store.local_topic_word / (store.local_topic_total + 1.0)[:, numpy.newaxis]
    return phi_global, phi_local


class TopicReport(object):
    def __init__(self, region, topic, num_words, tokens, weights, counts):
        self.region = region
        self.topic = topic
        self.num_words = num_words
        self.tokens = tokens
        self.weights = weights
        self.counts = counts

    def __repr__(self):
        return 'TopicReport(region={0}, topic={1}, num_words={2})'.format(
            self.region.name, self.topic, self.num_words)

    def lines(self):
        name = 'global' if self.region is Region.GLOBAL else 'local'
        yield '-- {0} topic: {1} ({2} words)\n'.format(name, self.topic, self.num_words)
        for token, weight, count in zip(self.tokens, self.weights, self.counts):
            yield '{0}: {1:f} ({2})\n'.format(token, weight, count)


def _region_reports(region, phi, topic_word, topic_total, vocabulary, num_tokens):
    reports = []
    for z in range(phi.shape[0]):
        # stable sort keeps ties in word id order
        order = numpy.argsort(-phi[z], kind='stable')[:num_tokens]
        reports.append(TopicReport(
            region=region,
            topic=z,
            num_words=int(topic_total[z]),
            tokens=[vocabulary.token(int(w)) if vocabulary is not None else str(w) for w in order],
            weights=[float(phi[z, w]) for w in order],
            counts=[int(topic_word[z, w]) for w in order]))
    return reports


def top_tokens(store, vocabulary=None, num_tokens=DEFAULT_NUM_TOKENS):
    """
    :Description: most probable tokens of every topic

    :param CountStore store: counts of the model
    :param Vocabulary vocabulary: maps word ids to tokens, ids are printed if None
    :param int num_tokens: number of tokens per topic

    :return: list of TopicReport, global topics first
    """
    phi_global, phi_local = word_dist(store)
    return (_region_reports(Region.GLOBAL, phi_global, store.global_topic_word,
                            store.global_topic_total, vocabulary, num_tokens) +
            _region_reports(Region.LOCAL, phi_local, store.local_topic_word,
                            store.local_topic_total, vocabulary, num_tokens))


def format_topic_reports(reports):
    return ''.join(line for report in reports for line in report.lines())
