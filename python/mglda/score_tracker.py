# Copyright 2017, Additive Regularization of Topic Models.

from pandas import Series

__all__ = [
    'ScoreTracker',
    'LogLikelihoodScoreTracker',
]


class ScoreTracker(object):
    def __init__(self, name):
        """
        :Properties:
        * value - list of score values, one per recorded pass.
        * passes - list of pass numbers the values were recorded after.
        * last_value - value of the last recorded pass.
        """
        self._name = name
        self._values = []
        self._passes = []

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return '{0}(name={1!r}, num_values={2})'.format(type(self).__name__, self._name, len(self))

    @property
    def name(self):
        return self._name

    @property
    def value(self):
        return list(self._values)

    @property
    def passes(self):
        return list(self._passes)

    @property
    def last_value(self):
        if not self._values:
            raise ValueError('No values were recorded for score {0}'.format(self._name))
        return self._values[-1]

    def add(self, pass_number, value):
        self._passes.append(pass_number)
        self._values.append(value)

    def moving_average(self, window):
        """Trailing moving average of the recorded values."""
        return Series(self._values, dtype=float).rolling(window, min_periods=1).mean().tolist()

    def to_dict(self):
        return {'name': self._name, 'passes': self.passes, 'value': self.value}

    @classmethod
    def from_dict(cls, data):
        tracker = cls(data['name'])
        for pass_number, value in zip(data['passes'], data['value']):
            tracker.add(pass_number, value)
        return tracker


class LogLikelihoodScoreTracker(ScoreTracker):
    def __init__(self, name='log_likelihood'):
        ScoreTracker.__init__(self, name)
