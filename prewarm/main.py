"""
Command line entry point for the prewarm worker.
Usage: prewarm <job-id> <master-url> [parallel]
"""

import argparse
import logging
import sys

from prewarm.config import DEFAULT_PARALLEL, LOG_FILE
from prewarm.logger import setup_logger
from prewarm.orchestrator import PrewarmSession

logger = logging.getLogger("prewarm")


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid parallel value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"parallel must be at least 1, got {number}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(prog="prewarm", description="HLS edge cache prewarm worker")
    parser.add_argument("job_id", help="Job identifier; progress goes to <PREWARM_DIR>/running/<job_id>.job")
    parser.add_argument("master_url", help="URL of the master (or media) playlist")
    parser.add_argument("parallel", nargs="?", type=positive_int, default=DEFAULT_PARALLEL,
                        help=f"Concurrent probes (default: {DEFAULT_PARALLEL})")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logger(log_file=LOG_FILE)

    try:
        session = PrewarmSession(args.job_id, args.master_url, parallel=args.parallel)
        return session.run()
    except Exception as e:
        logger.error(f"{e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        return 1


if __name__ == "__main__":
    sys.exit(main())
