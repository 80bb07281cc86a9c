"""
Record codec for intermediate and output files.

Both files use the same self-describing format: a stream of JSON objects,
one per key/value pair, e.g.

    {"Key":"a","Value":"1"}
    {"Key":"b","Value":"2"}

The writer puts every record on its own line. The reader does not depend on
that: it decodes JSON values back to back, skipping any whitespace between
them, so a record may span lines.
"""

import json
from collections import namedtuple


KeyValue = namedtuple('KeyValue', ['key', 'value'])
KeyValue.__doc__ = "An immutable (key, value) pair of strings."

_SEPARATORS = (',', ':')
_WHITESPACE = ' \t\n\r'
_CHUNK_SIZE = 64 * 1024


class RecordFormatError(ValueError):
    """Raised when a byte stream does not parse as a record sequence.

    Attributes:
        ordinal: 0-based index of the record that failed to decode
    """

    def __init__(self, message, ordinal):
        super().__init__(f"record {ordinal}: {message}")
        self.ordinal = ordinal


def encode_record(kv):
    """Serialize one KeyValue as a single line of text (newline included)."""
    key, value = kv
    if not isinstance(key, str) or not isinstance(value, str):
        raise TypeError(
            f"record fields must be str, got {type(key).__name__}/{type(value).__name__}"
        )
    line = json.dumps({'Key': key, 'Value': value},
                      separators=_SEPARATORS, ensure_ascii=False) + '\n'
    try:
        line.encode('utf-8')
    except UnicodeEncodeError:
        # Lone surrogates only survive as \u escapes
        line = json.dumps({'Key': key, 'Value': value}, separators=_SEPARATORS) + '\n'
    return line


def _to_key_value(obj, ordinal):
    if not isinstance(obj, dict):
        raise RecordFormatError(f"expected an object, got {type(obj).__name__}", ordinal)
    try:
        key = obj['Key']
        value = obj['Value']
    except KeyError as e:
        raise RecordFormatError(f"missing field {e.args[0]!r}", ordinal) from None
    if not isinstance(key, str) or not isinstance(value, str):
        raise RecordFormatError("Key and Value must be strings", ordinal)
    return KeyValue(key, value)


class RecordWriter:
    """Appends records to an open text file."""

    def __init__(self, f):
        self.f = f
        self.count = 0

    def write(self, kv):
        self.f.write(encode_record(kv))
        self.count += 1

    def write_all(self, records):
        for kv in records:
            self.write(kv)
        return self.count


class RecordReader:
    """Decodes records one at a time from an open text file.

    Iterating yields KeyValue instances until the stream is exhausted.
    Anything that is not a complete, well-formed record raises
    RecordFormatError; nothing is skipped.
    """

    def __init__(self, f, chunk_size=_CHUNK_SIZE):
        self.f = f
        self.chunk_size = chunk_size
        self._decoder = json.JSONDecoder()

    def __iter__(self):
        buf = ''
        pos = 0
        ordinal = 0
        eof = False

        while True:
            # Skip whitespace between records
            while pos < len(buf) and buf[pos] in _WHITESPACE:
                pos += 1

            if pos == len(buf):
                if eof:
                    return
                buf, pos = self.f.read(self.chunk_size), 0
                eof = buf == ''
                continue

            try:
                obj, end = self._decoder.raw_decode(buf, pos)
            except json.JSONDecodeError as e:
                if eof:
                    raise RecordFormatError(e.msg, ordinal) from e
                # The record may continue in the next chunk
                more = self.f.read(self.chunk_size)
                eof = more == ''
                buf, pos = buf[pos:] + more, 0
                continue

            # A bare number or literal at the end of a chunk may be cut short
            if end == len(buf) and not eof and not isinstance(obj, (dict, list, str)):
                more = self.f.read(self.chunk_size)
                eof = more == ''
                buf, pos = buf[pos:] + more, 0
                continue

            yield _to_key_value(obj, ordinal)
            ordinal += 1
            pos = end


def read_records(f):
    """Return a list of all records in an open text file."""
    return list(RecordReader(f))
