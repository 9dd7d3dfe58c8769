# Copyright 2017, Additive Regularization of Topic Models.

"""
Held-out evaluation of a trained model by the harmonic-mean estimator.

The trained (active) documents are frozen, then every holdout document in turn
is loaded into the counts, sampled alone, and unloaded again, so that no
holdout document leaks into the evaluation of the next one.
"""

import logging
import math

from collections import namedtuple
from contextlib import contextmanager

import tqdm

from pandas import DataFrame

from .constants import (
    HARMONIC_MEAN_LOG_ZERO,
    LOGLIKELIHOOD_REPORT_EVERY,
    DocumentState,
)

__all__ = [
    'HoldoutDocument',
    'log_add',
    'frozen_documents',
    'loaded_document',
    'evaluate_holdout',
    'holdout_log_likelihood',
    'holdout_num_words',
    'holdout_perplexity',
    'results_to_dataframe',
]

logger = logging.getLogger(__name__)

HoldoutDocument = namedtuple('HoldoutDocument', ['doc_index', 'log_likelihood', 'num_words'])


def log_add(log_a, log_b):
    """log(exp(log_a) + exp(log_b)) without overflow."""
    if log_a > log_b:
        return log_a + math.log(1.0 + math.exp(log_b - log_a))
    return log_b + math.log(1.0 + math.exp(log_a - log_b))


def _write(sink, message):
    if sink is not None:
        sink.write(message)
        if hasattr(sink, 'flush'):
            sink.flush()


@contextmanager
def frozen_documents(corpus):
    """Freezes every active document, unfreezing them on exit."""
    frozen = corpus.indices(DocumentState.ACTIVE)
    for d in frozen:
        corpus[d].transition(DocumentState.FROZEN)
    try:
        yield frozen
    finally:
        for d in frozen:
            if corpus[d].state == DocumentState.FROZEN:
                corpus[d].transition(DocumentState.ACTIVE)


@contextmanager
def loaded_document(model, d):
    """
    Activates holdout document d and loads its counts; on exit unloads them and
    returns the document to holdout, whatever happened inside.
    """
    document = model.corpus[d]
    document.transition(DocumentState.ACTIVE)
    try:
        model.load_document(d)
    except BaseException:
        document.transition(DocumentState.HOLDOUT)
        raise

    try:
        yield document
    finally:
        try:
            model.unload_document(d)
        finally:
            document.transition(DocumentState.HOLDOUT)


def _evaluate_document(model, d, test_burnin, sample_space, before_loglik):
    hmloglik = HARMONIC_MEAN_LOG_ZERO
    with loaded_document(model, d):
        for i in range(test_burnin + sample_space):
            model.inference()
            if i >= test_burnin:
                after_loglik = model.log_likelihood()
                hmloglik = log_add(hmloglik, before_loglik - after_loglik)
    return math.log(sample_space) - hmloglik


def evaluate_holdout(model, train_burnin, test_burnin, sample_space, sink=None):
    """
    :Description: trains the model, then estimates the log-likelihood of every\
                  holdout document by the harmonic mean of likelihood ratios

    :param MGLDA model: model whose corpus has active and holdout documents
    :param int train_burnin: number of training passes over the active documents
    :param int test_burnin: number of passes over each holdout document before sampling
    :param int sample_space: number of passes over each holdout document that\
                             contribute to the harmonic mean
    :param sink: text stream for progress messages, nothing is written if None

    :return: list of HoldoutDocument(doc_index, log_likelihood, num_words) in document order

    :Note:
      * On return, and on any exception, frozen documents are active again and every\
        holdout document is in holdout state with its counts unloaded.
    """
    if train_burnin < 0 or test_burnin < 0:
        raise ValueError('Burn-in lengths should be non-negative')
    if sample_space <= 0:
        raise ValueError('sample_space should be positive')

    _write(sink, 'Running burnin....\n')
    for i in tqdm.trange(train_burnin, desc='Burn-in', disable=not model.show_progress_bars):
        _write(sink, 'iterate {0}.\n'.format(i))
        if i % LOGLIKELIHOOD_REPORT_EVERY == 0:
            loglik = model.log_likelihood()
            logger.info('burn-in pass %d, loglikelihood=%f', i, loglik)
            _write(sink, '    loglikelihood={0:f}.\n'.format(loglik))
        model.inference()
    before_loglik = model.log_likelihood()

    results = []
    _write(sink, 'Freeze the active documents ...\n')
    with frozen_documents(model.corpus) as frozen:
        logger.info('froze %d active documents', len(frozen))

        _write(sink, 'Evaluate holdout documents ...\n')
        for d in model.corpus.indices(DocumentState.HOLDOUT):
            _write(sink, 'Evaluate document {0}.\n'.format(d))
            loglik = _evaluate_document(model, d, test_burnin, sample_space, before_loglik)
            num_words = model.corpus[d].num_words
            logger.info('document %d: loglikelihood=%f, %d words', d, loglik, num_words)
            results.append(HoldoutDocument(d, loglik, num_words))

        _write(sink, 'Active the frozen documents...\n')
    return results


def holdout_log_likelihood(results):
    return sum(r.log_likelihood for r in results)


def holdout_num_words(results):
    return sum(r.num_words for r in results)


def holdout_perplexity(results):
    """exp(-loglikelihood / word count) over all evaluated documents."""
    num_words = holdout_num_words(results)
    if num_words == 0:
        raise ValueError('Perplexity is undefined for holdout documents without words')
    return math.exp(-holdout_log_likelihood(results) / num_words)


def results_to_dataframe(results):
    return DataFrame(data=[list(r) for r in results], columns=list(HoldoutDocument._fields))
