"""Compare reducing one partition with tinyreduce to a more straightforward
word count using Python's builtins.

Pass a text file as the first argument.  Every line is treated as the output
of one map task, so the file is split into intermediate files in a temporary
directory before timing starts.
"""


from collections import Counter
from functools import partial
import itertools as it
import operator as op
import sys
import tempfile
import time

from tinyreduce import do_reduce
from tinyreduce import serialize
from tinyreduce.naming import merge_name, reduce_name


def builtin_wc(lines):

    """About as efficient as you can get.

    Parameters
    ----------
    lines : iter
        Iterator producing lines from a text file.

    Returns
    -------
    collections.Counter
    """

    words = map(op.methodcaller('lower'), lines)
    words = map(op.methodcaller('split'), words)
    concatenated = it.chain.from_iterable(words)
    return Counter(concatenated)


def count(key, values):
    return str(len(values))


if __name__ == '__main__':

    if len(sys.argv) == 1:
        print(__doc__.strip())
        exit(1)

    infile = sys.argv[1]
    print("Running wordcount tests on: {}".format(infile))

    with open(infile) as f:
        lines = f.readlines()

    with tempfile.TemporaryDirectory() as directory:

        naming = partial(reduce_name, directory=directory)
        for idx, line in enumerate(lines):
            words = line.lower().split()
            serialize.write_records(
                zip(words, it.repeat('1')), naming('bench', idx, 0))

        print("Running tinyreduce ...")
        start = time.perf_counter()
        do_reduce(
            'bench', 0, merge_name('bench', 0, directory=directory),
            len(lines), count, naming=naming)
        print(time.perf_counter() - start)

    print("Running builtin ...")
    start = time.perf_counter()
    builtin_wc(lines)
    print(time.perf_counter() - start)
