from mrreduce.worker.errors import DecodeError, ReduceTaskError, TaskStage


def test_subclass_message_names_stage_path_and_cause():
    err = DecodeError('/data/mrtmp.wc-0-1', ValueError('bad record'))
    assert str(err) == 'decode failed for /data/mrtmp.wc-0-1: bad record'
    assert err.stage is TaskStage.DECODE
    assert err.path == '/data/mrtmp.wc-0-1'


def test_base_class_can_be_raised_directly():
    err = ReduceTaskError('/out', OSError('boom'))
    assert err.stage is None
    assert str(err) == 'reduce task failed for /out: boom'
