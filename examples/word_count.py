#!/usr/bin/env python3
"""
Word count reduce example

Writes the intermediate files two map tasks would have produced for
reduce task 0, runs the reduce task over them and prints the output.

Usage:
    python3 examples/word_count.py
    python3 examples/word_count.py --workdir /tmp/wc
"""

import argparse
import logging
import os
import sys
import tempfile
from collections import Counter
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mrreduce.framework.records import KeyValue, read_records
from mrreduce.framework.reducer import word_count_reduce
from mrreduce.utils.naming import merge_name
from mrreduce.worker.executor import TaskExecutor
from mrreduce.worker.intermediate import IntermediateFileManager


DOCUMENTS = [
    "the quick brown fox jumps over the lazy dog",
    "the dog barks and the fox runs",
]


def main():
    parser = argparse.ArgumentParser(description='Word count reduce example')
    parser.add_argument('--workdir', help='Directory for intermediate and output files')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] [%(levelname)s] %(message)s")
    workdir = args.workdir or tempfile.mkdtemp(prefix='mrreduce-')
    intermediate_dir = os.path.join(workdir, 'intermediate')

    # Stand in for the map phase: one partition per document, all for reduce task 0
    manager = IntermediateFileManager(base_dir=intermediate_dir)
    for m, text in enumerate(DOCUMENTS):
        manager.write_partition('wc', m, 0, [KeyValue(w, '1') for w in text.split()])

    out_file = os.path.join(workdir, merge_name('wc', 0))
    executor = TaskExecutor(intermediate_dir=intermediate_dir)
    executor.execute_reduce('wc', 0, out_file, len(DOCUMENTS), word_count_reduce)

    with open(out_file, encoding='utf-8') as f:
        counts = {kv.key: int(kv.value) for kv in read_records(f)}

    expected = Counter(w for text in DOCUMENTS for w in text.split())
    assert counts == dict(expected), "reduce output does not match a direct count"

    for word, count in counts.items():
        print(f"{word}\t{count}")

    manager.cleanup_job_files('wc')


if __name__ == '__main__':
    main()
