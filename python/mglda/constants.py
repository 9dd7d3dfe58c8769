# Copyright 2017, Additive Regularization of Topic Models.

"""
Constant values shared by the sampler, the evaluators and the loaders
"""

from enum import Enum, IntEnum


class Region(Enum):
    GLOBAL = 'gl'
    LOCAL = 'loc'


class DocumentState(IntEnum):
    ACTIVE = 0
    FROZEN = 1
    HOLDOUT = 2


# (from, to) pairs of the document lifecycle
LEGAL_TRANSITIONS = frozenset([
    (DocumentState.ACTIVE, DocumentState.FROZEN),
    (DocumentState.FROZEN, DocumentState.ACTIVE),
    (DocumentState.HOLDOUT, DocumentState.ACTIVE),
    (DocumentState.ACTIVE, DocumentState.HOLDOUT),
])

DEFAULT_NUM_TOKENS = 20
LOGLIKELIHOOD_REPORT_EVERY = 20
HARMONIC_MEAN_LOG_ZERO = -100.0

PARAMETERS_FILENAME_JSON = 'parameters.json'
COUNTS_FILENAME = 'counts.npz'
ASSIGNMENTS_FILENAME = 'assignments.bin'
