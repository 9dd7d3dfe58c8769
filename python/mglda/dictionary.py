# Copyright 2017, Additive Regularization of Topic Models.

import codecs

__all__ = [
    'Vocabulary'
]


class Vocabulary(object):
    def __init__(self, tokens=None, vocabulary_path=None, encoding='utf-8'):
        """
        :param tokens: tokens in word id order
        :type tokens: list of str
        :param str vocabulary_path: can be used for default call of load() method\
          in constructor
        :param str encoding: encoding of the vocabulary file

        Note: all parameters are optional
        """
        self._tokens = list(tokens) if tokens is not None else []
        if vocabulary_path is not None:
            self.load(vocabulary_path, encoding=encoding)

    def __len__(self):
        return len(self._tokens)

    def __getitem__(self, word_id):
        return self.token(word_id)

    @property
    def tokens(self):
        return self._tokens

    def token(self, word_id):
        """Token of word_id, or the id itself as text when it is not in the vocabulary."""
        if 0 <= word_id < len(self._tokens):
            return self._tokens[word_id]
        return str(word_id)

    def load(self, vocabulary_path, encoding='utf-8'):
        """
        :Description: loads a vocabulary with one token per line,\
                      the line number (from 0) being the word id

        :param str vocabulary_path: full file name of the vocabulary
        :param str encoding: an encoding of text in vocabulary
        """
        with codecs.open(vocabulary_path, 'r', encoding) as fin:
            self._tokens = [line.rstrip('\r\n') for line in fin]

    def save(self, vocabulary_path, encoding='utf-8'):
        with codecs.open(vocabulary_path, 'w', encoding) as fout:
            for token in self._tokens:
                fout.write(u'{0}\n'.format(token))
