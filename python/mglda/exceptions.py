# Copyright 2017, Additive Regularization of Topic Models.

"""
Exceptions raised by the MGLDA sampler and its loaders
"""


class MgldaException(Exception):
    pass


class ConfigError(MgldaException):
    """Invalid hyperparameters or a vocabulary too small for the corpus."""
    pass


class CorpusError(MgldaException):
    """Malformed corpus: bad structure, word id out of range, bad state tag."""
    pass


class InvariantViolation(MgldaException):
    """Corrupted sampler state: negative count or zero normalization mass."""
    pass


class IllegalTransitionError(InvariantViolation):
    pass
