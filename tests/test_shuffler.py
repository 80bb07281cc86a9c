from mrreduce.framework.records import KeyValue
from mrreduce.framework.shuffler import ShufflePhase


def kvs(*pairs):
    return [KeyValue(k, v) for k, v in pairs]


def test_sort_partition_is_stable():
    shuffle = ShufflePhase()
    records = kvs(('b', '1'), ('a', '2'), ('b', '3'), ('a', '4'))
    assert shuffle.sort_partition(records) == kvs(('a', '2'), ('a', '4'), ('b', '1'), ('b', '3'))


def test_shuffle_groups_across_partitions_in_key_order():
    shuffle = ShufflePhase()
    partitions = [
        kvs(('b', '2'), ('a', '1')),
        kvs(('a', '3'), ('c', '5')),
        kvs(('b', '4')),
    ]
    assert list(shuffle.shuffle(partitions)) == [
        ('a', ['1', '3']),
        ('b', ['2', '4']),
        ('c', ['5']),
    ]


def test_merge_prefers_earlier_partitions_on_ties():
    shuffle = ShufflePhase()
    merged = list(shuffle.merge_partitions([kvs(('k', 'm0')), kvs(('k', 'm1')), kvs(('k', 'm2'))]))
    assert [kv.value for kv in merged] == ['m0', 'm1', 'm2']


def test_shuffle_of_nothing_is_empty():
    assert list(ShufflePhase().shuffle([])) == []
    assert list(ShufflePhase().shuffle([[], []])) == []


def test_group_values_do_not_depend_on_partition_order():
    shuffle = ShufflePhase()
    p0 = kvs(('k', 'y'), ('j', '2'))
    p1 = kvs(('k', 'x'), ('j', '1'), ('k', 'z'))
    assert list(shuffle.shuffle([p0, p1])) == list(shuffle.shuffle([p1, p0])) == [
        ('j', ['1', '2']),
        ('k', ['x', 'y', 'z']),
    ]
