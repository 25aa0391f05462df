"""
File naming shared by the map, reduce, and merge phases.

The scheduler decides where files live.  These are the default names, and
anything with the same signature as :func:`reduce_name` can be handed to
:class:`tinyreduce.ReducePartitionProcessor` instead.
"""


import os


__all__ = ["reduce_name", "merge_name"]


def reduce_name(job_name, map_task, reduce_task, directory=None):

    """
    Path to the intermediate file map task ``map_task`` wrote for reduce
    partition ``reduce_task``.

        >>> reduce_name('wc', 3, 1)
        'mrtmp.wc-3-1'

    Parameters
    ----------
    job_name : str
        Name of the whole MapReduce job.
    map_task : int
        Index of the map task that wrote the file.
    reduce_task : int
        Index of the reduce partition.
    directory : str, optional
        Prefix the name with this directory.

    Returns
    -------
    str
    """

    name = "mrtmp.{}-{}-{}".format(job_name, map_task, reduce_task)
    return os.path.join(directory, name) if directory else name


def merge_name(job_name, reduce_task, directory=None):

    """
    Path to the output file of reduce partition ``reduce_task``.

        >>> merge_name('wc', 1)
        'mrtmp.wc-res-1'
    """

    name = "mrtmp.{}-res-{}".format(job_name, reduce_task)
    return os.path.join(directory, name) if directory else name
