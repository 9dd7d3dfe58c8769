# Copyright 2017, Additive Regularization of Topic Models.

import json

from .exceptions import ConfigError

__all__ = [
    'Config',
    'load_config',
]

_INT_FIELDS = ('global_k', 'local_k', 't', 'w')
_FLOAT_FIELDS = ('gamma', 'global_alpha', 'local_alpha', 'global_alpha_mix',
                 'local_alpha_mix', 'global_beta', 'local_beta')


class Config(object):
    def __init__(self, global_k, local_k, gamma, global_alpha, local_alpha,
                 global_alpha_mix, local_alpha_mix, global_beta, local_beta,
                 t, w, inflation=0.0):
        """
        :param int global_k: number of global (document-wide) topics
        :param int local_k: number of local (sentence-window) topics
        :param float gamma: Dirichlet concentration of the window distribution
        :param float global_alpha: concentration of the document global-topic mixture
        :param float local_alpha: concentration of the window local-topic mixture
        :param float global_alpha_mix: pseudocount of the global region in a window
        :param float local_alpha_mix: pseudocount of the local region in a window
        :param float global_beta: concentration of global topic-word distributions
        :param float local_beta: concentration of local topic-word distributions
        :param int t: number of sentences covered by a sliding window
        :param int w: vocabulary size, must exceed the largest word id
        :param float inflation: pseudocount added once to the per-document\
                                window and sentence tables at initialization

        :Note:
          * Every parameter except inflation must be positive, otherwise\
            ConfigError is raised.
        """
        self.global_k = global_k
        self.local_k = local_k
        self.gamma = gamma
        self.global_alpha = global_alpha
        self.local_alpha = local_alpha
        self.global_alpha_mix = global_alpha_mix
        self.local_alpha_mix = local_alpha_mix
        self.global_beta = global_beta
        self.local_beta = local_beta
        self.t = t
        self.w = w
        self.inflation = inflation

        self.validate()

    def validate(self):
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError('Config.{0} should be int, got {1!r}'.format(name, value))
            if value <= 0:
                raise ConfigError('Config.{0} should be positive, got {1}'.format(name, value))

        for name in _FLOAT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError('Config.{0} should be float, got {1!r}'.format(name, value))
            if not value > 0:
                raise ConfigError('Config.{0} should be positive, got {1}'.format(name, value))

        if isinstance(self.inflation, bool) or not isinstance(self.inflation, (int, float)):
            raise ConfigError('Config.inflation should be float, got {0!r}'.format(self.inflation))
        if self.inflation < 0:
            raise ConfigError('Config.inflation should be non-negative, got {0}'.format(self.inflation))

    def check_vocabulary(self, max_word_id):
        if max_word_id is not None and self.w < max_word_id + 1:
            raise ConfigError('Vocabulary size w={0} is smaller than max word id + 1 = {1}'.format(
                self.w, max_word_id + 1))

    def to_dict(self):
        params = {name: getattr(self, name) for name in _INT_FIELDS + _FLOAT_FIELDS}
        params['inflation'] = self.inflation
        return params

    @classmethod
    def from_dict(cls, params):
        params = dict(params)
        unknown = set(params) - set(_INT_FIELDS + _FLOAT_FIELDS + ('inflation',))
        if unknown:
            raise ConfigError('Unknown config keys: {0}'.format(', '.join(sorted(unknown))))

        missing = [name for name in _INT_FIELDS + _FLOAT_FIELDS if name not in params]
        if missing:
            raise ConfigError('Missing config keys: {0}'.format(', '.join(missing)))

        return cls(**params)

    def __eq__(self, other):
        return isinstance(other, Config) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'Config({0})'.format(', '.join(
            '{0}={1!r}'.format(k, v) for k, v in sorted(self.to_dict().items())))


def load_config(filename):
    """
    :Description: reads the JSON configuration file of the sampler

    :param str filename: path to a JSON object with keys global_k, local_k, gamma,\
                         global_alpha, local_alpha, global_alpha_mix, local_alpha_mix,\
                         global_beta, local_beta, t, w and optionally inflation
    :return: Config
    """
    with open(filename, 'r') as fin:
        try:
            params = json.load(fin)
        except ValueError as e:
            raise ConfigError('Cannot parse config file {0}: {1}'.format(filename, e))

    if not isinstance(params, dict):
        raise ConfigError('Config file {0} should contain a JSON object'.format(filename))

    return Config.from_dict(params)
