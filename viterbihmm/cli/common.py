"""Shared argparse argument factories for viterbihmm CLI tools.

Each function adds a group of related arguments to an ArgumentParser.
Default values can be overridden per-script where needed.
"""

import argparse
import sys


class UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 (not 2) on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def add_model_args(parser: argparse.ArgumentParser,
                   default: str = 'casino') -> None:
    """Add --model and --rates arguments."""
    parser.add_argument(
        '--model',
        choices=['casino', 'poisson'],
        default=default,
        help=f"Emission model: casino (1-based die faces) or poisson (counts) (default: {default})"
    )
    parser.add_argument(
        '--rates', type=float, nargs=2, metavar=('L0', 'L1'), default=None,
        help="Poisson rates for states 1 and 2 (default: preset rates)"
    )


def add_transition_args(parser: argparse.ArgumentParser) -> None:
    """Add --transmat argument (row-major, linear probabilities)."""
    parser.add_argument(
        '--transmat', type=float, nargs=4, metavar=('P00', 'P01', 'P10', 'P11'),
        default=None,
        help="Transition probabilities, row-major (default: preset matrix)"
    )


def add_start_args(parser: argparse.ArgumentParser,
                   default: str = 'certain') -> None:
    """Add --start and --emit-initial arguments."""
    parser.add_argument(
        '--start',
        choices=['certain', 'uniform'],
        default=default,
        help=f"Start distribution: first state certain, or uniform (default: {default})"
    )
    parser.add_argument(
        '--emit-initial', action='store_true',
        help="Score the first observation too (by default it only anchors the path)"
    )


def add_output_args(parser: argparse.ArgumentParser,
                    width: int = 60) -> None:
    """Add --width argument."""
    parser.add_argument(
        '--width', '-w', type=int, default=width,
        help=f"Wrap printed paths at this many characters (default: {width})"
    )


def add_verbose_args(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        '-v', '--verbose', action='store_true',
        help="Verbose output"
    )


def add_version_args(parser: argparse.ArgumentParser) -> None:
    """Add --version flag."""
    from viterbihmm import __version__
    parser.add_argument(
        '--version', action='version',
        version=f'%(prog)s {__version__}'
    )
