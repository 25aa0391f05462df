"""
Sort stuff.  Put every value for a key next to each other.
"""


import itertools as it
import logging
import operator as op


__all__ = ["sort_records", "group_by_key"]


logger = logging.getLogger('tinyreduce')


_getkey = op.itemgetter(0)
_getvalue = op.itemgetter(1)


def sort_records(records):

    """
    Sort a list of ``(key, value)`` records in place by key.

    Keys are compared as ``str``, which orders by code point and therefore
    matches the byte order of their UTF-8 encoding.  Values do not take part
    in the comparison, so the relative order of records sharing a key is not
    something callers can rely on.

    Parameters
    ----------
    records : list
        Records to sort.

    Returns
    -------
    list
        The same ``records`` object.
    """

    logger.debug("sort_records() - sorting %s records", len(records))
    records.sort(key=_getkey)
    return records


def group_by_key(records):

    """
    Collapse sorted records into one ``(key, [values])`` pair for every run of
    equal keys.

        >>> list(group_by_key([('a', '1'), ('a', '3'), ('b', '2')]))
        [('a', ['1', '3']), ('b', ['2'])]

    Parameters
    ----------
    records : iter
        ``(key, value)`` records where equal keys are adjacent.

    Yields
    ------
    tuple
        ``(key, [value, value, ...])``
    """

    for key, run in it.groupby(records, key=_getkey):
        yield key, list(map(_getvalue, run))
