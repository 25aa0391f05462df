"""
Record serialization.

Intermediate files written by the map phase and the output files written by
the reduce phase share one format: newline delimited JSON, one object per
record, like:

    {"Key": "word", "Value": "1"}

Anything that reads an intermediate file can also read an output file, which
is what the final merge relies on.
"""


from collections import namedtuple
import json
import logging

from tinyreduce.errors import DecodeError, EncodeError


__all__ = [
    "Record", "encode", "decode", "dump_records", "load_records",
    "read_records", "write_records", "NewlineJSON"]


logger = logging.getLogger('tinyreduce')


KEY_FIELD = 'Key'
VALUE_FIELD = 'Value'


class Record(namedtuple('Record', ['key', 'value'])):

    """
    A single ``(key, value)`` pair.  Both elements are always strings.
    """

    __slots__ = ()


def encode(record):

    """
    Serialize a single record to a line of JSON, without the trailing newline.

    Parameters
    ----------
    record : Record or tuple
        A ``(key, value)`` pair of strings.

    Raises
    ------
    tinyreduce.errors.EncodeError

    Returns
    -------
    str
    """

    try:
        key, value = record
    except (TypeError, ValueError):
        raise EncodeError("Expected a (key, value) pair, not: {!r}".format(
            record))

    if not isinstance(key, str) or not isinstance(value, str):
        raise EncodeError(
            "Keys and values must be strings, not {} and {}: {!r}".format(
                type(key).__name__, type(value).__name__, record))

    return json.dumps({KEY_FIELD: key, VALUE_FIELD: value})


def decode(line, path=None, lineno=None):

    """
    Parse a single line of JSON into a ``Record()``.

    Parameters
    ----------
    line : str
        One serialized record.
    path : str, optional
        Included in the exception if the line cannot be decoded.
    lineno : int, optional
        Like ``path``.

    Raises
    ------
    tinyreduce.errors.DecodeError

    Returns
    -------
    Record
    """

    where = "{}:{}".format(path or '<stream>', lineno or '?')

    try:
        obj = json.loads(line)
    except ValueError as e:
        raise DecodeError(
            "Invalid JSON at {}: {}".format(where, e),
            path=path, lineno=lineno) from e

    if not isinstance(obj, dict):
        raise DecodeError(
            "Expected a JSON object at {}, not: {}".format(
                where, type(obj).__name__),
            path=path, lineno=lineno)

    try:
        key = obj[KEY_FIELD]
        value = obj[VALUE_FIELD]
    except KeyError as e:
        raise DecodeError(
            "Record at {} is missing field {}".format(where, e),
            path=path, lineno=lineno) from e

    if not isinstance(key, str) or not isinstance(value, str):
        raise DecodeError(
            "Keys and values must be strings at {}".format(where),
            path=path, lineno=lineno)

    return Record(key, value)


def dump_records(records, f):

    """
    Write a stream of records to an open text file.

    Parameters
    ----------
    records : iter
        ``Record()``s or ``(key, value)`` tuples.
    f : file
        Open file-like object supporting ``f.write()``.

    Returns
    -------
    int
        Number of records written.
    """

    count = 0
    for record in records:
        f.write(encode(record) + '\n')
        count += 1
    return count


def load_records(stream, path=None):

    """
    Lazily decode records from an open file or any iterable of lines.  Blank
    lines are skipped.

    Parameters
    ----------
    stream : file or iter
        Lines of serialized records.
    path : str, optional
        Only used to produce better error messages.

    Yields
    ------
    Record
    """

    for lineno, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        yield decode(line, path=path, lineno=lineno)


def read_records(path):

    """
    Read every record from a file on disk.

    Returns
    -------
    list
    """

    with open(path, encoding='utf-8') as f:
        return list(load_records(f, path=path))


def write_records(records, path):

    """
    Write records to a file on disk, replacing anything that was already
    there.

    Returns
    -------
    int
        Number of records written.
    """

    with open(path, 'w', encoding='utf-8') as f:
        return dump_records(records, f)


class _RecordReader(object):

    def __init__(self, f, path):
        self._f = f
        self.path = path
        self._records = load_records(f, path=path)

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._records)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._f.close()


class _RecordWriter(object):

    def __init__(self, f, path):
        self._f = f
        self.path = path
        self.count = 0

    def write(self, record):
        self._f.write(encode(record) + '\n')
        self.count += 1

    def flush(self):
        self._f.flush()

    def fileno(self):
        return self._f.fileno()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._f.close()


class NewlineJSON(object):

    """
    Serializer for reading/writing records as newline delimited JSON.  This
    is the object the reduce phase is configured with, and can be swapped for
    anything providing the same ``open()`` method.
    """

    encoding = 'utf-8'

    def __repr__(self):
        return "{}()".format(self.__class__.__name__)

    def open(self, path, mode='r'):

        """
        Open a file for reading or writing records.

        Parameters
        ----------
        path : str
            File path.
        mode : str, optional
            ``r`` to read or ``w`` to write.  Opened in text mode.

        Raises
        ------
        ValueError
            For unsupported modes.

        Returns
        -------
        object
            In read mode an iterator producing ``Record()``s, and in write mode
            an object with a ``write(record)`` method.  Both are context
            managers.
        """

        if mode == 'r':
            logger.debug("NewlineJSON.open() - reading %s", path)
            return _RecordReader(
                open(path, 'r', encoding=self.encoding), path)
        elif mode == 'w':
            logger.debug("NewlineJSON.open() - writing %s", path)
            return _RecordWriter(
                open(path, 'w', encoding=self.encoding), path)
        else:
            raise ValueError(
                "Unsupported mode {!r} - use 'r' or 'w'".format(mode))
