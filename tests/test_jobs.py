import pytest

from mrreduce.config import WorkerConfig
from mrreduce.framework.reducer import word_count_reduce
from mrreduce.jobs import load_reduce_function


def test_builtin_names():
    assert load_reduce_function('word_count') is word_count_reduce


def test_module_reference():
    fn = load_reduce_function('mrreduce.framework.reducer:inverted_index_reduce')
    assert fn('w', ['d1']) == '1 d1'


def test_file_reference(tmp_path):
    job_file = tmp_path / 'job.py'
    job_file.write_text("def count(key, values):\n    return str(len(values))\n")
    fn = load_reduce_function(f'{job_file}:count')
    assert fn('k', ['a', 'b']) == '2'


@pytest.mark.parametrize('spec, error', [
    ('nocolon', ValueError),
    ('mrreduce.framework.reducer:', ValueError),
    ('no_such_module_xyz:f', ImportError),
    ('mrreduce.framework.reducer:missing', AttributeError),
])
def test_bad_references(spec, error):
    with pytest.raises(error):
        load_reduce_function(spec)


def test_non_callable_attribute(tmp_path):
    job_file = tmp_path / 'job.py'
    job_file.write_text("NOT_A_FUNCTION = 3\n")
    with pytest.raises(TypeError):
        load_reduce_function(f'{job_file}:NOT_A_FUNCTION')


def test_config_defaults():
    config = WorkerConfig.from_env({})
    assert config == WorkerConfig()
    assert config.fsync is True


def test_config_from_environment():
    config = WorkerConfig.from_env({
        'MR_INTERMEDIATE_DIR': '/data/mr',
        'MR_OUTPUT_DIR': '/data/out',
        'MR_LOG_LEVEL': 'debug',
        'MR_FSYNC': 'off',
    })
    assert config.intermediate_dir == '/data/mr'
    assert config.output_dir == '/data/out'
    assert config.log_level == 'DEBUG'
    assert config.fsync is False
