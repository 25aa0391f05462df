import pytest

from tinyreduce import ReduceError
from tinyreduce import errors


@pytest.mark.parametrize("cls,builtin", [
    (errors.InputUnavailableError, IOError),
    (errors.DecodeError, ValueError),
    (errors.EncodeError, ValueError),
    (errors.ReduceFunctionError, Exception),
    (errors.OutputError, IOError),
    (errors.ClosedTaskError, ValueError)])
def test_hierarchy(cls, builtin):
    assert issubclass(cls, ReduceError)
    assert issubclass(cls, builtin)


def test_attributes():

    e = errors.InputUnavailableError('msg', path='p', map_task=3)
    assert str(e) == 'msg'
    assert (e.path, e.map_task) == ('p', 3)

    e = errors.DecodeError('msg', path='p', lineno=7)
    assert str(e) == 'msg'
    assert (e.path, e.lineno) == ('p', 7)

    e = errors.ReduceFunctionError('msg', key='k')
    assert e.key == 'k'

    e = errors.OutputError('msg', path='p')
    assert str(e) == 'msg'
    assert e.path == 'p'
