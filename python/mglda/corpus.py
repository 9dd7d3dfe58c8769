# Copyright 2017, Additive Regularization of Topic Models.

import codecs
import json
import logging

from .constants import DocumentState, LEGAL_TRANSITIONS
from .exceptions import CorpusError, IllegalTransitionError

__all__ = [
    'Document',
    'Corpus',
    'load_corpus',
    'save_corpus',
    'parse_text_corpus',
]

logger = logging.getLogger(__name__)

_STATE_BY_NAME = {
    'active': DocumentState.ACTIVE,
    'holdout': DocumentState.HOLDOUT,
}


class Document(object):
    def __init__(self, sentences, state=DocumentState.ACTIVE):
        """
        :param sentences: word ids of each sentence
        :type sentences: list of lists of int
        :param DocumentState state: initial lifecycle state
        """
        self._sentences = [list(words) for words in sentences]
        self._state = DocumentState(state)

    def __repr__(self):
        return 'Document(num_sentences={0}, num_words={1}, state={2})'.format(
            self.num_sentences, self.num_words, self._state.name)

    @property
    def sentences(self):
        return self._sentences

    @property
    def state(self):
        return self._state

    @property
    def num_sentences(self):
        return len(self._sentences)

    @property
    def num_words(self):
        return sum(len(words) for words in self._sentences)

    @property
    def is_active(self):
        return self._state == DocumentState.ACTIVE

    def transition(self, state):
        state = DocumentState(state)
        if (self._state, state) not in LEGAL_TRANSITIONS:
            raise IllegalTransitionError('Illegal document transition {0} -> {1}'.format(
                self._state.name, state.name))
        self._state = state

    def to_dict(self):
        return {
            'sentences': [{'words': list(words)} for words in self._sentences],
            'state': self._state.name.lower(),
        }


class Corpus(object):
    def __init__(self, documents):
        self._documents = list(documents)

    def __len__(self):
        return len(self._documents)

    def __getitem__(self, index):
        return self._documents[index]

    def __iter__(self):
        return iter(self._documents)

    def __repr__(self):
        return 'Corpus(num_documents={0}, num_words={1})'.format(len(self), self.num_words)

    @property
    def documents(self):
        return self._documents

    @property
    def num_words(self):
        return sum(doc.num_words for doc in self._documents)

    @property
    def max_word_id(self):
        """Largest word id in the corpus, None for a corpus without words."""
        result = None
        for doc in self._documents:
            for words in doc.sentences:
                if words:
                    top = max(words)
                    result = top if result is None or top > result else result
        return result

    def indices(self, state):
        return [d for d, doc in enumerate(self._documents) if doc.state == state]

    def to_dict(self):
        return {'docs': [doc.to_dict() for doc in self._documents]}


def _parse_state(raw, doc_index):
    if raw is None:
        raise CorpusError('Document {0} has no lifecycle state'.format(doc_index))

    if isinstance(raw, str):
        state = _STATE_BY_NAME.get(raw.lower())
    elif isinstance(raw, int) and not isinstance(raw, bool):
        try:
            state = DocumentState(raw)
        except ValueError:
            state = None
    else:
        state = None

    if state not in (DocumentState.ACTIVE, DocumentState.HOLDOUT):
        raise CorpusError('Document {0} has invalid lifecycle state {1!r}'.format(doc_index, raw))
    return state


def _parse_document(record, doc_index, vocabulary_size):
    if not isinstance(record, dict):
        raise CorpusError('Document {0} should be a JSON object'.format(doc_index))

    # both spellings appear in corpora produced by older converters
    raw_sentences = record.get('sentences', record.get('sentenses'))
    if not isinstance(raw_sentences, list):
        raise CorpusError('Document {0} has no sentence list'.format(doc_index))

    sentences = []
    for s, raw_sentence in enumerate(raw_sentences):
        if not isinstance(raw_sentence, dict):
            raise CorpusError('Sentence {0} of document {1} should be a JSON object'.format(s, doc_index))
        words = raw_sentence.get('words')
        if words is None:
            words = []
        if not isinstance(words, list):
            raise CorpusError('Sentence {0} of document {1} has no word list'.format(s, doc_index))
        for wd in words:
            if isinstance(wd, bool) or not isinstance(wd, int) or wd < 0:
                raise CorpusError('Document {0}, sentence {1}: invalid word id {2!r}'.format(
                    doc_index, s, wd))
            if vocabulary_size is not None and wd >= vocabulary_size:
                raise CorpusError('Document {0}, sentence {1}: word id {2} is out of vocabulary '
                                  'of size {3}'.format(doc_index, s, wd, vocabulary_size))
        sentences.append(words)

    state = _parse_state(record.get('state', record.get('State')), doc_index)
    return Document(sentences, state)


def corpus_from_dict(data, vocabulary_size=None):
    if not isinstance(data, dict) or not isinstance(data.get('docs'), list):
        raise CorpusError('Corpus should be a JSON object with a "docs" list')

    return Corpus(_parse_document(record, d, vocabulary_size) for d, record in enumerate(data['docs']))


def load_corpus(filename, vocabulary_size=None):
    """
    :Description: loads the JSON corpus

    :param str filename: path to {"docs": [{"sentences": [{"words": [...]}, ...],\
                         "state": "active"|"holdout"}, ...]}
    :param int vocabulary_size: if set, word ids are checked to be below it

    :return: Corpus
    """
    with codecs.open(filename, 'r', 'utf-8') as fin:
        try:
            data = json.load(fin)
        except ValueError as e:
            raise CorpusError('Cannot parse corpus file {0}: {1}'.format(filename, e))

    corpus = corpus_from_dict(data, vocabulary_size=vocabulary_size)
    logger.info('loaded %d documents (%d words) from %s', len(corpus), corpus.num_words, filename)
    return corpus


def save_corpus(corpus, filename):
    with codecs.open(filename, 'w', 'utf-8') as fout:
        json.dump(corpus.to_dict(), fout)


def parse_text_corpus(lines, train_size=-1):
    """
    :Description: converts the plain text corpus format into Corpus

    :param lines: iterable of strings, one document per line, sentences separated\
                  by '|', word ids separated by whitespace
    :param int train_size: number of leading documents marked active, the rest are\
                           marked holdout; negative value marks every document active

    :return: Corpus
    """
    documents = []
    for line in lines:
        line = line.strip()
        if not line:
            continue

        sentences = []
        for chunk in line.split('|'):
            try:
                sentences.append([int(token) for token in chunk.split()])
            except ValueError as e:
                raise CorpusError('Line {0}: {1}'.format(len(documents) + 1, e))

        if any(wd < 0 for words in sentences for wd in words):
            raise CorpusError('Line {0}: negative word id'.format(len(documents) + 1))

        if train_size < 0 or len(documents) < train_size:
            state = DocumentState.ACTIVE
        else:
            state = DocumentState.HOLDOUT
        documents.append(Document(sentences, state))

    return Corpus(documents)
