# Copyright 2017, Additive Regularization of Topic Models.

from .mglda_model import MGLDA, version, load_mglda_model
from .config import Config, load_config
from .constants import DocumentState, Region
from .corpus import *
from .counts import CountStore
from .dictionary import *
from .exceptions import *
from .holdout import *
from .sampler import Assignments, GibbsSampler
from .scores import *
from .score_tracker import *

__version__ = version()
