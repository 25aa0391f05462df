"""``pytest`` fixtures."""


from functools import partial

import pytest

from tinyreduce import serialize
from tinyreduce.naming import reduce_name


@pytest.fixture(scope='function')
def workdir(tmpdir):
    return str(tmpdir.mkdir('work'))


@pytest.fixture(scope='function')
def naming(workdir):
    """Default intermediate file names, but inside ``workdir``."""
    return partial(reduce_name, directory=workdir)


@pytest.fixture(scope='function')
def map_outputs(naming):

    """Returns a function that writes intermediate files like the map phase
    would:

        map_outputs('job', 0, [
            [('a', '1'), ('b', '2')],   # Map task 0
            [('a', '3')],               # Map task 1
        ])
    """

    def write(job_name, reduce_task, outputs):
        paths = []
        for map_task, records in enumerate(outputs):
            path = naming(job_name, map_task, reduce_task)
            serialize.write_records(records, path)
            paths.append(path)
        return paths

    return write
