"""
Run one reduce task.

Usage:
    python -m mrreduce JOB REDUCE_TASK N_MAP --reduce-fn word_count
    python -m mrreduce wc 0 4 --reduce-fn myjobs.py:reduce_f --output out.json
"""

import argparse
import logging
import os
import sys

from .config import WorkerConfig
from .jobs import load_reduce_function
from .utils.naming import merge_name
from .worker.errors import ReduceTaskError
from .worker.executor import TaskExecutor


LOG = logging.getLogger('mrreduce')

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def build_parser():
    parser = argparse.ArgumentParser(
        prog='mrreduce',
        description='Run a single MapReduce reduce task over file-based intermediate data'
    )
    parser.add_argument('job_name', help='Name of the MapReduce job')
    parser.add_argument('reduce_task', type=int, help='Index of this reduce task')
    parser.add_argument('n_map', type=int, help='Number of map tasks (M)')
    parser.add_argument('--reduce-fn', required=True,
                        help="'module:function', 'file.py:function', "
                             "'word_count' or 'inverted_index'")
    parser.add_argument('--output', help='Output file (default: <output dir>/mrtmp.<job>-res-<r>)')
    parser.add_argument('--intermediate-dir', help='Directory of intermediate files')
    parser.add_argument('--log-level', help='Logging level (DEBUG, INFO, ...)')
    parser.add_argument('--no-fsync', action='store_true',
                        help='Do not fsync the output before renaming it into place')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config = WorkerConfig.from_env()
    if args.intermediate_dir:
        config.intermediate_dir = args.intermediate_dir
    if args.log_level:
        config.log_level = args.log_level.upper()
    if args.no_fsync:
        config.fsync = False

    if not isinstance(logging.getLevelName(config.log_level), int):
        parser.error(f"unknown log level {config.log_level!r}")
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

    if args.reduce_task < 0 or args.n_map < 0:
        parser.error('reduce_task and n_map must be non-negative')

    try:
        reduce_function = load_reduce_function(args.reduce_fn)
    except (ImportError, AttributeError, TypeError, ValueError) as e:
        parser.error(f"cannot load reduce function: {e}")

    out_file = args.output or os.path.join(
        config.output_dir, merge_name(args.job_name, args.reduce_task)
    )

    executor = TaskExecutor(intermediate_dir=config.intermediate_dir, fsync=config.fsync)
    try:
        result = executor.execute_reduce(
            args.job_name, args.reduce_task, out_file, args.n_map, reduce_function
        )
    except ReduceTaskError as e:
        LOG.error("Reduce task failed at stage %s: %s", e.stage.value, e)
        return 1

    print(result.output_path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
