"""The reduce phase.

Collects every record map tasks wrote for a single reduce partition, sorts
and groups them by key, calls a reduce function once per key, and publishes
one sorted output file.  See :class:`ReducePartitionProcessor`.
"""


from collections import namedtuple
import logging

from tinyreduce import naming as _naming
from tinyreduce import serialize
from tinyreduce.errors import (
    ClosedTaskError, DecodeError, InputUnavailableError, OutputError,
    ReduceFunctionError)
from tinyreduce.tinysort import group_by_key, sort_records
from tinyreduce.tools import atomic_open


__all__ = ["ReducePartitionProcessor", "ReduceResult", "do_reduce"]


logger = logging.getLogger('tinyreduce')


class ReduceResult(
        namedtuple('ReduceResult', [
            'output', 'records_in', 'records_out', 'missing'])):

    """
    Describes a finished reduce partition.

    Parameters
    ----------
    output : str
        Path to the published output file.
    records_in : int
        Number of records decoded from all intermediate files.
    records_out : int
        Number of records written, which is also the number of distinct keys.
    missing : tuple
        ``(map_task, path)`` for every intermediate file that could not be
        opened or read.  Always empty unless ``fail_fast`` is disabled.
    """

    __slots__ = ()

    @property
    def partial(self):
        """``True`` if some map task's contribution is absent."""
        return bool(self.missing)


class ReducePartitionProcessor(object):

    """Runs the reduce phase for one partition of a MapReduce job.

    Given ``n_map`` map tasks, partition ``reduce_task`` reads the
    intermediate file each map task wrote for it, so the processor opens
    ``naming(job_name, m, reduce_task)`` for every ``m`` in
    ``range(n_map)``.  Every record is held in memory, sorted by key, and the
    values for each distinct key are handed to the reduce function.  Results
    are written to ``out_file`` in ascending key order using the same
    serializer that decoded the input, so a later merge can read output files
    exactly like it reads intermediate files.

    Example Word Count Reducer
    --------------------------

    Map tasks emitted ``(word, "1")`` for every word they saw.  The reduce
    function receives a word and all of its ``"1"``'s:

        from tinyreduce import ReducePartitionProcessor

        def count(key, values):
            return str(len(values))

        with ReducePartitionProcessor() as proc:
            result = proc.process('wc', 0, 'mrtmp.wc-res-0', 3, count)

    The reduce function must return a string and must not depend on the order
    of ``values``.  Sorting only considers keys, so values for a key arrive
    in no particular order.

    Failures
    --------

    Every failure raises a :class:`tinyreduce.errors.ReduceError` and leaves
    no output behind.  Output is staged in a temporary file next to
    ``out_file`` and only renamed into place once every key has been reduced,
    so an existing file at ``out_file`` is left untouched when a run fails.

    Setting :attr:`fail_fast` to ``False`` makes unreadable intermediate files
    non-fatal.  They are logged and reported in :attr:`ReduceResult.missing`
    instead.  Decoding errors, reduce function errors, and output errors are
    always fatal.

    Configuration
    -------------

    All configuration happens through properties, which can also be passed
    as keyword arguments: :attr:`naming`, :attr:`serializer`,
    :attr:`fail_fast`, and :attr:`n_reduce`.
    """

    def __init__(self, naming=None, serializer=None, fail_fast=None,
                 n_reduce=None):
        if naming is not None:
            self.naming = naming
        if serializer is not None:
            self.serializer = serializer
        if fail_fast is not None:
            self.fail_fast = fail_fast
        if n_reduce is not None:
            self.n_reduce = n_reduce

    def __repr__(self):
        return "{}(fail_fast={}, n_reduce={})".format(
            self.__class__.__name__, self.fail_fast, self.n_reduce)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def naming(self):
        """Resolves ``(job_name, map_task, reduce_task)`` to the path of an
        intermediate file.
        """
        return getattr(self, '_rp_naming', _naming.reduce_name)

    @naming.setter
    def naming(self, value):
        self._rp_naming = value

    @property
    def serializer(self):
        """Reads intermediate files and writes the output file.  Anything
        with an ``open(path, mode)`` method like
        :class:`tinyreduce.serialize.NewlineJSON`.
        """
        return getattr(self, '_rp_serializer', serialize.NewlineJSON())

    @serializer.setter
    def serializer(self, value):
        self._rp_serializer = value

    @property
    def fail_fast(self):
        """Abort when an intermediate file cannot be opened or read."""
        return getattr(self, '_rp_fail_fast', True)

    @fail_fast.setter
    def fail_fast(self, value):
        self._rp_fail_fast = value

    @property
    def n_reduce(self):
        """Total number of reduce partitions in the job, if known.  Used to
        validate ``reduce_task``.
        """
        return getattr(self, '_rp_n_reduce', None)

    @n_reduce.setter
    def n_reduce(self, value):
        self._rp_n_reduce = value

    @property
    def closed(self):
        return getattr(self, '_rp_closed', False)

    @closed.setter
    def closed(self, value):
        self._rp_closed = value

    def close(self):
        """Called automatically when used as a context manager.  A closed
        processor refuses to run.
        """
        self.closed = True

    def _check_args(self, reduce_task, n_map, reduce_fn):

        if not isinstance(reduce_task, int) or isinstance(reduce_task, bool) \
                or reduce_task < 0:
            raise ValueError(
                "reduce_task must be a non-negative integer, not: {!r}".format(
                    reduce_task))
        if self.n_reduce is not None and reduce_task >= self.n_reduce:
            raise ValueError(
                "reduce_task {} is out of range for {} reduce "
                "partitions".format(reduce_task, self.n_reduce))
        if not isinstance(n_map, int) or isinstance(n_map, bool) or n_map < 0:
            raise ValueError(
                "n_map must be a non-negative integer, not: {!r}".format(
                    n_map))
        if not callable(reduce_fn):
            raise TypeError(
                "reduce_fn is not callable: {!r}".format(reduce_fn))

    def _collect(self, job_name, reduce_task, n_map):

        """Read every intermediate file for this partition.

        Returns
        -------
        tuple
            ``(records, missing)`` where ``records`` is a list of
            ``Record()``s and ``missing`` is a list of ``(map_task, path)``.
        """

        records = []
        missing = []

        for map_task in range(n_map):
            path = self.naming(job_name, map_task, reduce_task)

            try:
                src = self.serializer.open(path, 'r')
            except OSError as e:
                self._unavailable(e, path, map_task, missing)
                continue

            with src:
                try:
                    loaded = list(src)
                except UnicodeDecodeError as e:
                    raise DecodeError(
                        "Intermediate file {} is not valid UTF-8: {}".format(
                            path, e),
                        path=path) from e
                except OSError as e:
                    # Nothing from a partially read file is kept.
                    self._unavailable(e, path, map_task, missing)
                    continue

            records.extend(loaded)
            logger.debug("Read %s records from %s", len(loaded), path)

        return records, missing

    def _unavailable(self, error, path, map_task, missing):

        """An intermediate file could not be opened or read.  Raise, or
        record it in ``missing`` when not failing fast.
        """

        if self.fail_fast:
            raise InputUnavailableError(
                "Could not read intermediate file {} from map task "
                "{}: {}".format(path, map_task, error),
                path=path, map_task=map_task) from error
        logger.warning(
            "Skipping intermediate file %s from map task %s: %s",
            path, map_task, error)
        missing.append((map_task, path))

    def _reduce_one(self, reduce_fn, key, values):

        try:
            result = reduce_fn(key, values)
        except Exception as e:
            raise ReduceFunctionError(
                "Reduce function failed on key {!r}: {}".format(key, e),
                key=key) from e

        if not isinstance(result, str):
            raise ReduceFunctionError(
                "Reduce function must return a string, not {} for key "
                "{!r}".format(type(result).__name__, key),
                key=key)

        return result

    def _publish(self, out_file, records, reduce_fn):

        """Reduce sorted ``records`` into ``out_file``.

        Returns
        -------
        int
            Number of records written.
        """

        count = 0
        try:
            with atomic_open(out_file, opener=self.serializer.open) as dst:
                for key, values in group_by_key(records):
                    dst.write(serialize.Record(
                        key, self._reduce_one(reduce_fn, key, values)))
                    count += 1
        except OSError as e:
            raise OutputError(
                "Could not write output file {}: {}".format(out_file, e),
                path=out_file) from e

        return count

    def process(self, job_name, reduce_task, out_file, n_map, reduce_fn):

        """Reduce a single partition.

        Parameters
        ----------
        job_name : str
            Name of the whole MapReduce job.
        reduce_task : int
            Which reduce partition this is.
        out_file : str
            Write the output here.
        n_map : int
            Number of map tasks that ran.  May be 0, in which case an empty
            output file is produced.
        reduce_fn : callable
            Like ``reduce_fn(key, values)``.  Called once per distinct key
            with a list of strings and must return a string.

        Raises
        ------
        ValueError
            If ``reduce_task`` or ``n_map`` are invalid.
        tinyreduce.errors.ClosedTaskError
            If the processor has been closed.
        tinyreduce.errors.ReduceError
            A subclass describing what went wrong.  Nothing is written to
            ``out_file``.

        Returns
        -------
        ReduceResult
        """

        if self.closed:
            raise ClosedTaskError("Processor is closed.")

        self._check_args(reduce_task, n_map, reduce_fn)

        logger.debug(
            "Reducing partition %s of job %s from %s map tasks into %s",
            reduce_task, job_name, n_map, out_file)

        records, missing = self._collect(job_name, reduce_task, n_map)
        sort_records(records)
        count = self._publish(out_file, records, reduce_fn)

        logger.info(
            "Reduce partition %s of job %s: %s records in, %s keys out, "
            "%s missing inputs -> %s",
            reduce_task, job_name, len(records), count, len(missing),
            out_file)

        return ReduceResult(
            output=out_file,
            records_in=len(records),
            records_out=count,
            missing=tuple(missing))


def do_reduce(job_name, reduce_task, out_file, n_map, reduce_fn, **kwargs):

    """Run :meth:`ReducePartitionProcessor.process` with a freshly created
    processor.

    Parameters
    ----------
    kwargs : **kwargs, optional
        Configuration for :class:`ReducePartitionProcessor`.

    Returns
    -------
    ReduceResult
    """

    with ReducePartitionProcessor(**kwargs) as proc:
        return proc.process(job_name, reduce_task, out_file, n_map, reduce_fn)
