import heapq
from itertools import groupby
from operator import itemgetter


_by_key = itemgetter(0)


class ShufflePhase:
    """Handles the shuffle phase - sorting intermediate records and grouping them by key"""

    def sort_partition(self, records):
        """Sort one partition's records by key.

        The sort is stable, so values for the same key keep their order
        within the file.

        Args:
            records: Iterable of KeyValue

        Returns:
            List of KeyValue sorted by key
        """
        return sorted(records, key=_by_key)

    def merge_partitions(self, sorted_partitions):
        """Lazily k-way merge partitions that are already sorted by key.

        Ties are broken by partition order, so the result is the same as a
        stable sort over the concatenation of all partitions.

        Args:
            sorted_partitions: List of key-sorted KeyValue sequences,
                               ordered by map task index

        Returns:
            Iterator of KeyValue in key order
        """
        return heapq.merge(*sorted_partitions, key=_by_key)

    def group_by_key(self, sorted_records):
        """Group a key-sorted record stream into runs of equal keys.

        Args:
            sorted_records: Iterable of KeyValue sorted by key

        Values are sorted too, so a group does not depend on which map
        task a value came from.

        Yields:
            (key, [values]) tuples, one per distinct key, in key order
        """
        for key, run in groupby(sorted_records, key=_by_key):
            yield key, sorted(kv.value for kv in run)

    def shuffle(self, partitions):
        """Sort, merge and group the records of all partitions.

        Args:
            partitions: List of KeyValue sequences, one per map task

        Returns:
            Iterator of (key, [values]) tuples in key order
        """
        sorted_partitions = [self.sort_partition(p) for p in partitions]
        return self.group_by_key(self.merge_partitions(sorted_partitions))
