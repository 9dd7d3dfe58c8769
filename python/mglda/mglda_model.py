# Copyright 2017, Additive Regularization of Topic Models.

import datetime
import json
import logging
import os
import pickle

from copy import deepcopy

import numpy
import tqdm

from packaging.version import parse
from pandas import DataFrame

from . import scores
from .constants import (
    ASSIGNMENTS_FILENAME,
    COUNTS_FILENAME,
    DEFAULT_NUM_TOKENS,
    PARAMETERS_FILENAME_JSON,
    DocumentState,
    Region,
)
from .config import Config
from .corpus import Corpus, Document
from .counts import CountStore
from .exceptions import ConfigError, InvariantViolation
from .sampler import Assignments, GibbsSampler
from .score_tracker import LogLikelihoodScoreTracker

__all__ = [
    'MGLDA',
    'load_mglda_model',
    'version',
]

logger = logging.getLogger(__name__)

VERSION = '0.1.0'


def _make_random_state(seed, random_state):
    if random_state is not None:
        if not isinstance(random_state, numpy.random.Generator):
            raise ConfigError('random_state should be numpy.random.Generator')
        return random_state
    return numpy.random.default_rng(seed if seed >= 0 else None)


class MGLDA(object):
    def __init__(self, config, corpus, seed=-1, random_state=None, show_progress_bars=False,
                 assignments=None):
        """
        :param Config config: model hyperparameters
        :param Corpus corpus: documents, each tagged active or holdout
        :param seed: seed for random initialization and sampling, -1 means no seed
        :type seed: unsigned int or -1
        :param numpy.random.Generator random_state: generator to use instead of one\
                                 created from seed
        :param bool show_progress_bars: show a progress bar over passes in fit_offline()
        :param Assignments assignments: start from these assignments instead of random ones

        :Important public fields:
          * store: CountStore with the sufficient statistics
          * assignments: Assignments of every token
          * score_tracker: LogLikelihoodScoreTracker with log-likelihood after each\
               training pass

        :Note:
          * Counts of holdout documents are not loaded at construction, their\
            assignments are drawn nevertheless so that they can be loaded later.
        """
        if not isinstance(config, Config):
            raise ConfigError('config should be an instance of Config')
        if not isinstance(seed, int) or seed < -1:
            raise ConfigError('Random seed should be a non-negative integer or -1')

        config.validate()
        config.check_vocabulary(corpus.max_word_id)

        self._config = config
        self._corpus = corpus
        self._seed = seed
        self._random_state = _make_random_state(seed, random_state)
        self._show_progress_bars = show_progress_bars
        self._passes_processed = 0
        self._score_tracker = LogLikelihoodScoreTracker()

        if assignments is None:
            logger.info('random fitting MGLDA')
            assignments = Assignments.random(corpus, config, self._random_state)
        self._assignments = assignments

        logger.info('initializing')
        self._store = CountStore(config, [doc.num_sentences for doc in corpus])
        for d, doc in enumerate(corpus):
            if doc.state != DocumentState.HOLDOUT:
                self.load_document(d)

        self._sampler = GibbsSampler(config, self._store, self._assignments, self._random_state)

    def __repr__(self):
        return 'mglda.MGLDA(global_k={0}, local_k={1}, num_documents={2})'.format(
            self._config.global_k, self._config.local_k, len(self._corpus))

    def clone(self):
        """
        :Description: returns a deep copy of the model, its corpus and random state included
        """
        return deepcopy(self)

    # ========== PROPERTIES ==========
    @property
    def config(self):
        return self._config

    @property
    def corpus(self):
        return self._corpus

    @property
    def store(self):
        return self._store

    @property
    def assignments(self):
        return self._assignments

    @property
    def sampler(self):
        return self._sampler

    @property
    def seed(self):
        return self._seed

    @property
    def random_state(self):
        return self._random_state

    @property
    def show_progress_bars(self):
        return self._show_progress_bars

    @property
    def score_tracker(self):
        return self._score_tracker

    @property
    def num_passes(self):
        return self._passes_processed

    @show_progress_bars.setter
    def show_progress_bars(self, show_progress_bars):
        self._show_progress_bars = show_progress_bars

    # ========== METHODS ==========
    def load_document(self, d):
        """Adds the tokens of document d, with their stored assignments, to the counts."""
        self._store.load_document(d, self._assignments.tokens(d, self._corpus[d]))

    def unload_document(self, d):
        self._store.unload_document(d, self._assignments.tokens(d, self._corpus[d]))

    def inference(self):
        """
        :Description: one Gibbs sweep over the tokens of every active document

        :return: number of resampled tokens
        """
        num_tokens = self._sampler.inference_pass(self._corpus)
        self._passes_processed += 1
        return num_tokens

    def log_likelihood(self):
        return scores.log_likelihood(self._store, self._config)

    def fit_offline(self, num_collection_passes=1):
        """
        :Description: runs inference passes over the active documents and records\
                      log-likelihood after each of them in score_tracker

        :param int num_collection_passes: number of passes over the collection
        """
        for _ in tqdm.trange(num_collection_passes, desc='Pass', disable=not self._show_progress_bars):
            self.inference()
            self._score_tracker.add(self._passes_processed, self.log_likelihood())

    def word_dist(self):
        return scores.word_dist(self._store)

    def get_phi(self, region=Region.GLOBAL, vocabulary=None):
        """
        :Description: get smoothed topic-word distributions of one region

        :param Region region: Region.GLOBAL or Region.LOCAL
        :param Vocabulary vocabulary: names rows by tokens instead of word ids

        :return:
          * pandas.DataFrame: (data, columns, rows), where:
          * columns --- the names of topics, like 'global_0' or 'local_3';
          * rows --- the tokens (or word ids) of the vocabulary;
          * data --- content of Phi matrix.
        """
        phi_global, phi_local = self.word_dist()
        phi, prefix = (phi_global, 'global') if region is Region.GLOBAL else (phi_local, 'local')

        if vocabulary is not None:
            index = [vocabulary.token(w) for w in range(self._config.w)]
        else:
            index = list(range(self._config.w))

        return DataFrame(data=phi.transpose(),
                         columns=['{0}_{1}'.format(prefix, z) for z in range(phi.shape[0])],
                         index=index)

    def get_top_tokens(self, num_tokens=DEFAULT_NUM_TOKENS, vocabulary=None):
        """
        :Description: returns most probable tokens for each topic

        :return: list of scores.TopicReport, global topics first
        """
        return scores.top_tokens(self._store, vocabulary=vocabulary, num_tokens=num_tokens)

    def run_learning(self, iterations, vocabulary=None, sink=None, num_tokens=DEFAULT_NUM_TOKENS):
        """
        :Description: runs inference passes, writing the topic report after each of them

        :param int iterations: number of passes
        :param Vocabulary vocabulary: maps word ids to tokens in the report
        :param sink: text stream with write() for the report, nothing is written if None
        :param int num_tokens: number of tokens reported per topic

        :return: list of scores.TopicReport of the last pass
        """
        reports = []
        for i in range(iterations):
            header = '==== {0}-th inference ====\n'.format(i)
            logger.info(header.strip())
            if sink is not None:
                sink.write(header)

            self.inference()
            self._score_tracker.add(self._passes_processed, self.log_likelihood())
            logger.info('inference completed, loglikelihood=%f', self._score_tracker.last_value)

            reports = self.get_top_tokens(num_tokens=num_tokens, vocabulary=vocabulary)
            if sink is not None:
                sink.write(scores.format_topic_reports(reports))
        return reports

    def dump_mglda_model(self, data_path):
        """
        :Description: dump all necessary model files into given folder.

        :param str data_path: full path to folder (should unexist)
        """
        if os.path.exists(data_path):
            raise IOError('Folder {} already exists'.format(data_path))

        os.mkdir(data_path)

        # save parameters in human-readable format
        params = {}
        params['version'] = version()
        params['creation_time'] = str(datetime.datetime.now())
        params['config'] = self._config.to_dict()
        params['seed'] = self._seed
        params['show_progress_bars'] = self._show_progress_bars
        params['passes_processed'] = self._passes_processed
        params['score_tracker'] = self._score_tracker.to_dict()
        params['document_states'] = [doc.state.name.lower() for doc in self._corpus]
        params['num_sentences'] = [doc.num_sentences for doc in self._corpus]

        with open(os.path.join(data_path, PARAMETERS_FILENAME_JSON), 'w') as fout:
            json.dump(params, fout)

        numpy.savez(os.path.join(data_path, COUNTS_FILENAME),
                    global_topic_word=self._store.global_topic_word,
                    local_topic_word=self._store.local_topic_word,
                    doc_global_topic=self._store.doc_global_topic)

        with open(os.path.join(data_path, ASSIGNMENTS_FILENAME), 'wb') as fout:
            pickle.dump({'view': self._assignments.view,
                         'region': [[[r.value for r in rs] for rs in rd] for rd in self._assignments.region],
                         'topic': self._assignments.topic,
                         'random_state': self._random_state.bit_generator.state}, fout)


def load_mglda_model(data_path, corpus):
    """
    :Description: load all necessary files for model creation from given folder.

    :param str data_path: full path to folder (should exist)
    :param Corpus corpus: the corpus the model was trained on; lifecycle states\
                          are taken from the dump
    :return: mglda.MGLDA object, created using given dumped data
    """
    with open(os.path.join(data_path, PARAMETERS_FILENAME_JSON), 'r') as fin:
        params = json.load(fin)

    if parse(params['version']) > parse(version()):
        raise RuntimeError('File was generated with newer version of library ({}). '.format(params['version']) +
                           'Current library version is {}'.format(version()))

    if [doc.num_sentences for doc in corpus] != params['num_sentences']:
        raise ConfigError('Corpus does not match the dumped model in {0}'.format(data_path))

    with open(os.path.join(data_path, ASSIGNMENTS_FILENAME), 'rb') as fin:
        data = pickle.load(fin)

    region = [[[Region(r) for r in rs] for rs in rd] for rd in data['region']]
    assignments = Assignments(data['view'], region, data['topic'])

    state = data['random_state']
    random_state = numpy.random.Generator(getattr(numpy.random, state['bit_generator'])())
    random_state.bit_generator.state = state

    documents = [Document(doc.sentences, DocumentState[name.upper()])
                 for doc, name in zip(corpus, params['document_states'])]

    model = MGLDA(Config.from_dict(params['config']), Corpus(documents),
                  seed=params['seed'],
                  random_state=random_state,
                  show_progress_bars=params['show_progress_bars'],
                  assignments=assignments)
    model._passes_processed = params['passes_processed']
    model._score_tracker = LogLikelihoodScoreTracker.from_dict(params['score_tracker'])

    with numpy.load(os.path.join(data_path, COUNTS_FILENAME)) as counts:
        for name in counts.files:
            if not numpy.array_equal(counts[name], getattr(model.store, name)):
                raise InvariantViolation('Counts in {0} do not match the dumped assignments'.format(name))

    return model


def version():
    return VERSION
