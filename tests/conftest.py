import pytest

from mrreduce.framework.records import KeyValue
from mrreduce.worker.executor import TaskExecutor
from mrreduce.worker.intermediate import IntermediateFileManager


@pytest.fixture
def intermediate_dir(tmp_path):
    path = tmp_path / 'intermediate'
    path.mkdir()
    return path


@pytest.fixture
def manager(intermediate_dir):
    return IntermediateFileManager(base_dir=str(intermediate_dir), fsync=False)


@pytest.fixture
def executor(intermediate_dir):
    return TaskExecutor(intermediate_dir=str(intermediate_dir), fsync=False)


@pytest.fixture
def write_partitions(manager):
    """Write one partition file per list of (key, value) pairs."""
    def _write(job_name, reduce_task, partitions):
        paths = []
        for m, pairs in enumerate(partitions):
            records = [KeyValue(k, v) for k, v in pairs]
            paths.append(manager.write_partition(job_name, m, reduce_task, records))
        return paths
    return _write
