from .records import KeyValue


class ReduceFunctionFailed(Exception):
    """Raised when the user reduce function raises or returns a non-string.

    Attributes:
        key: The key being reduced when the failure happened
    """

    def __init__(self, key, message):
        super().__init__(message)
        self.key = key


class ReducePhase:
    """Handles the reduce phase of MapReduce"""

    def __init__(self, reduce_function):
        """
        Args:
            reduce_function: User-defined reduce function(key, values) -> str
        """
        if not callable(reduce_function):
            raise TypeError(f"reduce function must be callable, got {reduce_function!r}")
        self.reduce_function = reduce_function
        self.invocations = 0

    def execute(self, grouped_data):
        """Execute reduce function on grouped data

        The reduce function is called exactly once per item of grouped_data,
        which must hold each key only once.

        Args:
            grouped_data: Iterable of (key, [values]) tuples

        Yields:
            KeyValue(key, reduced_value), in the order of grouped_data
        """
        for key, values in grouped_data:
            self.invocations += 1
            try:
                result = self.reduce_function(key, values)
            except Exception as e:
                raise ReduceFunctionFailed(
                    key, f"reduce function raised {type(e).__name__} for key {key!r}: {e}"
                ) from e
            if not isinstance(result, str):
                raise ReduceFunctionFailed(
                    key, f"reduce function returned {type(result).__name__} for key {key!r}, expected str"
                )
            yield KeyValue(key, result)


# Example reduce function for word count
def word_count_reduce(word, counts):
    """Reduce function for word count

    Args:
        word: The word
        counts: List of counts as strings

    Returns:
        Total count as a string
    """
    return str(sum(int(c) for c in counts))


# Example reduce function for an inverted index
def inverted_index_reduce(word, documents):
    """Reduce function for an inverted index

    Args:
        word: The word
        documents: Names of the documents the word was seen in (may repeat)

    Returns:
        "<count> <doc1>,<doc2>,..." with distinct documents sorted by name
    """
    docs = sorted(set(documents))
    return f"{len(docs)} {','.join(docs)}"
