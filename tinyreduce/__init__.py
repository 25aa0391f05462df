"""The reduce phase of a MapReduce job, one partition at a time.

See :obj:`tinyreduce.ReducePartitionProcessor` for an example.
"""


from .errors import ReduceError
from .reduce import ReducePartitionProcessor, ReduceResult, do_reduce
from .serialize import Record


__all__ = [
    "ReduceError", "ReducePartitionProcessor", "ReduceResult", "Record",
    "do_reduce"]


__version__ = "0.1"
__author__ = "Kevin Wurster"
__email__ = "wursterk@gmail.com"
