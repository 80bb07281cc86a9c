import os

from ..framework.records import RecordWriter
from ..utils.atomic import AtomicFile
from ..utils.naming import reduce_name


class IntermediateFileManager:
    """Manages the intermediate files map tasks hand to reduce tasks"""

    def __init__(self, base_dir='./intermediate', fsync=True):
        self.base_dir = base_dir
        self.fsync = fsync

    def partition_path(self, job_name, map_task, reduce_task):
        """Path of the file map task `map_task` wrote for reduce task `reduce_task`"""
        return os.path.join(self.base_dir, reduce_name(job_name, map_task, reduce_task))

    def open_partition(self, job_name, map_task, reduce_task):
        """Open an intermediate file for reading

        Returns:
            (file_path, file object)

        Raises:
            OSError: the file is missing or unreadable
        """
        filepath = self.partition_path(job_name, map_task, reduce_task)
        return filepath, open(filepath, 'r', encoding='utf-8')

    def write_partition(self, job_name, map_task, reduce_task, records):
        """Write one map task's records for one reduce task

        The file is written once and only appears when complete.

        Args:
            job_name: Name of the MapReduce job
            map_task: Index of the map task
            reduce_task: Index of the reduce task the records are for
            records: Iterable of KeyValue

        Returns:
            Path of the written file
        """
        os.makedirs(self.base_dir, exist_ok=True)
        filepath = self.partition_path(job_name, map_task, reduce_task)

        atomic = AtomicFile(filepath, fsync=self.fsync)
        f = atomic.open()
        with atomic:
            RecordWriter(f).write_all(records)

        return filepath

    def cleanup_job_files(self, job_name):
        """Clean up intermediate files for a job

        Returns:
            Number of files removed
        """
        if not os.path.isdir(self.base_dir):
            return 0

        prefix = reduce_name(job_name, '', '')[:-1]
        removed = 0
        for filename in os.listdir(self.base_dir):
            rest = filename[len(prefix):] if filename.startswith(prefix) else None
            # Only "<map>-<reduce>" suffixes belong to this job
            if rest is not None and _is_task_suffix(rest):
                os.remove(os.path.join(self.base_dir, filename))
                removed += 1
        return removed


def _is_task_suffix(rest):
    parts = rest.split('-')
    return len(parts) == 2 and all(p.isdigit() for p in parts)
