import logging
import time
from contextlib import ExitStack
from dataclasses import dataclass

from ..framework.records import RecordFormatError, RecordReader, RecordWriter
from ..framework.reducer import ReduceFunctionFailed, ReducePhase
from ..framework.shuffler import ShufflePhase
from ..utils.atomic import AtomicFile
from .errors import (
    DecodeError,
    EncodeError,
    InputUnavailable,
    OutputCreateError,
    ReduceFunctionError,
    ReduceTaskError,
)
from .intermediate import IntermediateFileManager


LOG = logging.getLogger(__name__)


@dataclass
class ReduceTaskResult:
    """Summary of a finished reduce task, for reporting to the scheduler."""
    task_id: str
    output_path: str
    records_read: int
    keys_written: int
    elapsed: float


class TaskExecutor:
    """Executes reduce tasks.

    Based on Google MapReduce paper:
    - Each of the M map tasks left one intermediate file for this reduce task
    - Reduce tasks read all of them, sort by key, group, apply the reduce
      function once per key and write one output file
    """

    def __init__(self, intermediate_dir='./intermediate', fsync=True):
        """Initialize executor with framework components.

        Args:
            intermediate_dir: Directory holding intermediate files
            fsync: Whether to fsync output before making it visible
        """
        self.fsync = fsync
        self.shuffle_phase = ShufflePhase()
        self.intermediate_manager = IntermediateFileManager(
            base_dir=intermediate_dir,
            fsync=fsync
        )

    def execute_reduce(self, job_name, reduce_task, out_file, n_map, reduce_function):
        """Execute a reduce task.

        1. Open the intermediate file of every map task for this reduce task
        2. Decode all records, closing every file whatever happens
        3. Sort by key and group values by key (shuffle)
        4. Apply the reduce function once per key
        5. Write the results, in key order, to out_file atomically

        Args:
            job_name: Name of the MapReduce job
            reduce_task: Index of this reduce task
            out_file: Path of the output file
            n_map: Number of map tasks (M)
            reduce_function: User-defined reduce function(key, values) -> str

        Returns:
            ReduceTaskResult

        Raises:
            ReduceTaskError: any stage failed; out_file is left untouched
        """
        if n_map < 0:
            raise ValueError(f"n_map must be >= 0, got {n_map}")
        if reduce_task < 0:
            raise ValueError(f"reduce_task must be >= 0, got {reduce_task}")
        reduce_phase = ReducePhase(reduce_function)

        task_id = f"{job_name}-reduce-{reduce_task}"
        started = time.monotonic()
        LOG.info("Starting reduce task %s over %d map outputs", task_id, n_map)

        try:
            partitions = self._read_partitions(job_name, reduce_task, n_map)
            grouped = self.shuffle_phase.shuffle(partitions)
            keys_written = self._write_output(out_file, reduce_phase.execute(grouped))
        except ReduceTaskError as e:
            LOG.error("Reduce task %s failed: %s", task_id, e)
            raise

        result = ReduceTaskResult(
            task_id=task_id,
            output_path=out_file,
            records_read=sum(len(p) for p in partitions),
            keys_written=keys_written,
            elapsed=time.monotonic() - started,
        )
        LOG.info("Completed reduce task %s: %d records, %d keys in %.3fs",
                 task_id, result.records_read, result.keys_written, result.elapsed)
        return result

    def _read_partitions(self, job_name, reduce_task, n_map):
        """Open and decode the intermediate files of all map tasks.

        All files are opened first; each is closed as soon as it is decoded,
        and the ExitStack closes the rest if anything fails.

        Returns:
            List of record lists, indexed by map task
        """
        with ExitStack() as stack:
            opened = []
            for m in range(n_map):
                filepath = self.intermediate_manager.partition_path(job_name, m, reduce_task)
                try:
                    _, f = self.intermediate_manager.open_partition(job_name, m, reduce_task)
                except OSError as e:
                    raise InputUnavailable(filepath, e) from e
                stack.callback(f.close)
                opened.append((filepath, f))

            partitions = []
            for filepath, f in opened:
                partitions.append(self._decode_partition(filepath, f))
                f.close()
                LOG.debug("Read %d records from %s", len(partitions[-1]), filepath)

        return partitions

    def _decode_partition(self, filepath, f):
        try:
            return list(RecordReader(f))
        except RecordFormatError as e:
            raise DecodeError(filepath, e) from e
        except UnicodeDecodeError as e:
            raise DecodeError(filepath, e) from e
        except OSError as e:
            raise DecodeError(filepath, e) from e

    def _write_output(self, out_file, results):
        """Write reduced records to out_file via a temporary file.

        results is consumed lazily, so reduce function failures surface
        here too.

        Returns:
            Number of records written
        """
        atomic = AtomicFile(out_file, fsync=self.fsync)
        try:
            f = atomic.open()
        except OSError as e:
            raise OutputCreateError(out_file, e) from e

        try:
            with atomic:
                writer = RecordWriter(f)
                for kv in results:
                    writer.write(kv)
        except ReduceFunctionFailed as e:
            raise ReduceFunctionError(out_file, e) from e
        except (OSError, TypeError, ValueError) as e:
            raise EncodeError(out_file, e) from e

        return writer.count
