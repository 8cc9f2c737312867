#!/usr/bin/env python3
"""
viterbihmm decode CLI entry point.
Decodes the most likely hidden-state path of a two-state HMM for a
sequence file, optionally alongside a reference state file.
"""

import sys
import logging
import argparse
import numpy as np

from viterbihmm.core.errors import ViterbiError
from viterbihmm.core.hmm import TwoStateHMM, label_path
from viterbihmm.core.presets import MODEL_PRESETS
from viterbihmm.core.sequence_io import (
    read_sequence_file,
    read_state_file,
    format_wrapped,
    path_agreement,
)
from viterbihmm.cli.common import (
    UsageErrorParser,
    add_model_args, add_transition_args, add_start_args,
    add_output_args, add_verbose_args, add_version_args,
)


def parse_args(argv=None):
    parser = UsageErrorParser(
        prog='viterbihmm-decode',
        description='Decode the most likely hidden-state path of a two-state HMM',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Input:
  SEQUENCE_FILE  one integer per line (die face 1-6, or a count for --model poisson)
  STATE_FILE     optional reference labels, one per line ("F" or "12 2")

Examples:
  # Occasionally dishonest casino, compared with the true dice
  viterbihmm-decode rolls.txt dice.txt

  # Poisson counts with custom rates
  viterbihmm-decode counts.txt --model poisson --rates 2.0 6.0
'''
    )

    add_version_args(parser)

    parser.add_argument('sequence_file',
                        help='Observation sequence file')
    parser.add_argument('state_file', nargs='?', default=None,
                        help='Reference state file for comparison')

    add_model_args(parser, default='casino')
    add_transition_args(parser)
    add_start_args(parser, default='certain')
    add_output_args(parser, width=60)
    add_verbose_args(parser)

    args = parser.parse_args(argv)

    if args.width < 1:
        parser.error(f"--width must be positive, got {args.width}")
    if args.rates is not None and args.model != 'poisson':
        parser.error("--rates only applies to --model poisson")

    return args


def build_model(args) -> TwoStateHMM:
    """Instantiate the preset named by --model with any CLI overrides."""
    factory, _ = MODEL_PRESETS[args.model]

    kwargs = {'emit_initial': args.emit_initial}
    if args.transmat is not None:
        kwargs['transmat'] = np.array(args.transmat).reshape(2, 2)
    if args.start == 'uniform':
        kwargs['startprob'] = np.array([0.5, 0.5])
    if args.rates is not None:
        kwargs['rates'] = args.rates

    return factory(**kwargs)


def run(args) -> int:
    _, one_based = MODEL_PRESETS[args.model]

    obs = read_sequence_file(args.sequence_file, one_based=one_based)
    logging.info(f"Read {len(obs)} observations from {args.sequence_file}")

    reference = None
    if args.state_file:
        reference = read_state_file(args.state_file, expected_length=len(obs))

    model = build_model(args)
    logging.info(f"Model: {model!r}")

    path, log_prob = model.decode(obs)
    labels = label_path(path, model.labels)
    logging.info(f"Viterbi path log probability: {log_prob:.4f}")

    if reference is not None:
        print("State solution:")
        print(format_wrapped(reference, args.width))
        print()

    print("Viterbi output:")
    print(format_wrapped(labels, args.width))

    if reference is not None:
        matches, total = path_agreement(labels, reference)
        print()
        print(f"Agreement: {matches}/{total} ({100.0 * matches / total:.1f}%)")

    return 0


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(message)s', handlers=[logging.StreamHandler(sys.stderr)])

    try:
        return run(args)
    except OSError as e:
        logging.error(f"Cannot read input: {e}")
        return 1
    except ViterbiError as e:
        logging.error(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
