# Copyright 2017, Additive Regularization of Topic Models.

"""
Command line entry points: mglda-holdout, mglda-learn and mglda-convert
"""

import argparse
import codecs
import logging
import sys

from .config import load_config
from .corpus import load_corpus, parse_text_corpus, save_corpus
from .dictionary import Vocabulary
from .holdout import (
    evaluate_holdout,
    holdout_log_likelihood,
    holdout_num_words,
    holdout_perplexity,
)
from .mglda_model import MGLDA

logger = logging.getLogger(__name__)


def _configure_logging(verbose):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')


def _write_value(filename, text):
    with open(filename, 'w') as fout:
        fout.write(text)


def _load_model(args):
    config = load_config(args.config)
    corpus = load_corpus(args.data, vocabulary_size=config.w)
    return MGLDA(config, corpus, seed=args.seed, show_progress_bars=args.progress)


def _add_model_arguments(parser):
    parser.add_argument('--data', default='data.json', help='Data file in json')
    parser.add_argument('--config', default='conf.json',
                        help='Configuration file for the settings of parameters')
    parser.add_argument('--seed', type=int, default=-1, help='Random seed, -1 means no seed')
    parser.add_argument('--progress', action='store_true', help='Show progress bars')
    parser.add_argument('--verbose', action='store_true', help='Log every inference pass')


def holdout_main(argv=None):
    parser = argparse.ArgumentParser(description='Evaluate perplexity of holdout documents')
    _add_model_arguments(parser)
    parser.add_argument('--train_burnin', type=int, default=3000,
                        help='Number of burnin iterations for training data')
    parser.add_argument('--test_burnin', type=int, default=3000,
                        help='Number of burnin iterations for each test document')
    parser.add_argument('--sample_space', type=int, default=500,
                        help='Number of iterations for evaluating the harmonic mean for each holdout document')
    parser.add_argument('--loglikefile', default='loglikefile',
                        help='Output file for loglikelihood of holdout documents')
    parser.add_argument('--docnumfile', default='docnumfile',
                        help='Output file for number of words of holdout documents')
    parser.add_argument('--perplexityfile', default='perplexityfile',
                        help='Output file for perplexity of holdout documents')
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    logger.info('dataFile: %s configFile: %s', args.data, args.config)
    model = _load_model(args)

    results = evaluate_holdout(model, args.train_burnin, args.test_burnin, args.sample_space,
                               sink=sys.stdout)

    num_words = holdout_num_words(results)
    loglik = holdout_log_likelihood(results)
    perplexity = holdout_perplexity(results)
    logger.info('holdout loglikelihood=%f, words=%d, perplexity=%f', loglik, num_words, perplexity)

    _write_value(args.docnumfile, '{0:d}'.format(num_words))
    _write_value(args.loglikefile, '{0:f}'.format(loglik))
    _write_value(args.perplexityfile, '{0:f}'.format(perplexity))
    return 0


def learn_main(argv=None):
    parser = argparse.ArgumentParser(description='Train MGLDA and report top words of every topic')
    _add_model_arguments(parser)
    parser.add_argument('--iterations', type=int, default=100, help='Number of inference passes')
    parser.add_argument('--vocabulary', default=None, help='Vocabulary file, one token per line')
    parser.add_argument('--num_tokens', type=int, default=20, help='Number of top words per topic')
    parser.add_argument('--output_file', default=None, help='Report file, stdout if not set')
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    model = _load_model(args)
    vocabulary = Vocabulary(vocabulary_path=args.vocabulary) if args.vocabulary else None

    if args.output_file is None:
        model.run_learning(args.iterations, vocabulary=vocabulary, sink=sys.stdout,
                           num_tokens=args.num_tokens)
    else:
        with codecs.open(args.output_file, 'w', 'utf-8') as fout:
            model.run_learning(args.iterations, vocabulary=vocabulary, sink=fout,
                               num_tokens=args.num_tokens)
    return 0


def convert_main(argv=None):
    parser = argparse.ArgumentParser(description='Convert a text corpus into the json corpus')
    parser.add_argument('--corpus_file', default='corpus', help='Corpus file')
    parser.add_argument('--train_size', type=int, default=-1,
                        help='Number of documents for training, all documents if negative')
    parser.add_argument('--output_file', default='output.json', help='Output file in Json format')
    args = parser.parse_args(argv)
    _configure_logging(False)

    with codecs.open(args.corpus_file, 'r', 'utf-8') as fin:
        corpus = parse_text_corpus(fin, train_size=args.train_size)

    logger.info('Read %d lines.', len(corpus))
    save_corpus(corpus, args.output_file)
    return 0
