"""
CLI entry point. Run as: python -m metamorph <rule file> [options]
"""

import argparse
import sys

from .config import RunConfig, DEFAULT_SEED, DEFAULT_ROUNDS, DEFAULT_NAME
from .core.lattice import TransformationType
from .errors import MetamorphError
from .orchestrator import run_sequence


def _positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def _seed(text):
    value = int(text)
    if not 0 <= value < 2 ** 64:
        raise argparse.ArgumentTypeError(f"seed must fit in 64 bits, got {value}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog="metamorph",
        description="Metamorphic test-case generator for stratified rule programs",
    )
    parser.add_argument("source", help="Rule file to transform")
    parser.add_argument("--seed", type=_seed, default=DEFAULT_SEED,
                        help=f"Random seed (default {DEFAULT_SEED})")
    parser.add_argument("--rounds", type=_positive_int, default=DEFAULT_ROUNDS,
                        help=f"Number of transformation rounds (default {DEFAULT_ROUNDS})")
    parser.add_argument("--type", choices=[t.value for t in TransformationType],
                        default=TransformationType.CONTRACTIVE.value,
                        help="Intended transformation class")
    parser.add_argument("--name", default=DEFAULT_NAME,
                        help="Sequence name, used as the artifact folder")
    parser.add_argument("--output-dir", default=".",
                        help="Where the sequence folder is created")
    parser.add_argument("--quiet", action="store_true", help="Less output")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        sequence = run_sequence(RunConfig.from_args(args))
    except MetamorphError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130

    if sequence.aborted:
        rejected = sequence.rejected[0]
        print(f"error: {rejected.name}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
