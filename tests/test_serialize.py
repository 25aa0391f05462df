"""
Unittests for tinyreduce.serialize
"""


import io
import json
import os
import pickle

import pytest

from tinyreduce import serialize
from tinyreduce.errors import DecodeError, EncodeError


def test_record():
    r = serialize.Record('k', 'v')
    assert r == ('k', 'v')
    assert r.key == 'k'
    assert r.value == 'v'
    key, value = r
    assert (key, value) == ('k', 'v')


def test_encode():
    line = serialize.encode(('word', '1'))
    assert '\n' not in line
    assert json.loads(line) == {'Key': 'word', 'Value': '1'}


@pytest.mark.parametrize("record", [
    ('', ''),
    ('multi\nline', 'tab\there'),
    ('"quoted"', '\\backslash\\'),
    ('café', '\U0001f600'),
    ('{"Key": "nested"}', '')])
def test_encode_decode_awkward_strings(record):
    line = serialize.encode(record)
    assert '\n' not in line
    assert serialize.decode(line) == record


@pytest.mark.parametrize("bad", [
    (1, 'v'),
    ('k', None),
    ('k',),
    ('a', 'b', 'c'),
    None])
def test_encode_bad(bad):
    with pytest.raises(EncodeError):
        serialize.encode(bad)


@pytest.mark.parametrize("line", [
    'not json',
    '[1, 2]',
    '"string"',
    '{"Key": "a"}',
    '{"Value": "a"}',
    '{"Key": 1, "Value": "a"}',
    '{"Key": "a", "Value": null}'])
def test_decode_bad(line):
    with pytest.raises(DecodeError) as e:
        serialize.decode(line, path='some/file', lineno=4)
    assert e.value.path == 'some/file'
    assert e.value.lineno == 4
    assert 'some/file:4' in str(e.value)


def test_decode_ignores_extra_fields():
    line = json.dumps({'Key': 'a', 'Value': 'b', 'Other': 1})
    assert serialize.decode(line) == ('a', 'b')


def test_dump_load_records():

    data = [
        ('key1', 'value1'),
        ('key2', 'value2')]

    f = io.StringIO()
    assert serialize.dump_records(data, f) == 2

    f.seek(0)
    assert list(serialize.load_records(f)) == data


def test_load_records_is_lazy():

    lines = iter([
        serialize.encode(('a', '1')),
        'garbage'])

    records = serialize.load_records(lines)
    assert next(records) == ('a', '1')
    with pytest.raises(DecodeError) as e:
        next(records)
    assert e.value.lineno == 2


def test_load_records_skips_blank_lines():
    lines = [
        '',
        serialize.encode(('a', '1')),
        '   ' + os.linesep,
        serialize.encode(('b', '2'))]
    assert list(serialize.load_records(lines)) == [('a', '1'), ('b', '2')]


def test_read_write_records(tmpdir):

    path = str(tmpdir.mkdir('test_read_write_records').join('data'))

    data = [
        ('b', '2'),
        ('a', 'café')]

    assert serialize.write_records(data, path) == 2
    assert serialize.read_records(path) == data

    with open(path, 'rb') as f:
        assert f.read().endswith(b'\n')


def test_read_empty(tmpdir):
    path = str(tmpdir.join('empty'))
    assert serialize.write_records([], path) == 0
    assert os.path.getsize(path) == 0
    assert serialize.read_records(path) == []


def test_NewlineJSON(tmpdir):

    path = str(tmpdir.mkdir('test_NewlineJSON').join('data'))

    data = [
        ('1', '2'),
        ('3', '4')]

    slz = serialize.NewlineJSON()

    assert isinstance(pickle.loads(pickle.dumps(slz)), type(slz))
    assert repr(slz).startswith(slz.__class__.__name__)

    with slz.open(path, 'w') as dst:
        for obj in data:
            dst.write(obj)
    assert dst._f.closed
    assert dst.count == 2

    with slz.open(path) as src:
        actual = list(src)
        assert actual == data
        assert all(isinstance(r, serialize.Record) for r in actual)
    assert src._f.closed

    assert serialize.read_records(path) == data

    with pytest.raises(ValueError):
        slz.open(path, 'a')


def test_NewlineJSON_missing_file(tmpdir):
    with pytest.raises(OSError):
        serialize.NewlineJSON().open(str(tmpdir.join('nope')))
