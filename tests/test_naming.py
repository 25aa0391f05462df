"""Unittests for ``tinyreduce.naming``."""


import os

from tinyreduce import naming


def test_reduce_name():
    assert naming.reduce_name('wc', 3, 1) == 'mrtmp.wc-3-1'
    assert naming.reduce_name('wc', 3, 1, directory='tmp') \
        == os.path.join('tmp', 'mrtmp.wc-3-1')


def test_merge_name():
    assert naming.merge_name('wc', 1) == 'mrtmp.wc-res-1'
    assert naming.merge_name('wc', 1, directory='tmp') \
        == os.path.join('tmp', 'mrtmp.wc-res-1')


def test_names_are_unique():
    names = {
        naming.reduce_name('job', m, r) for m in range(5) for r in range(5)}
    names.update(naming.merge_name('job', r) for r in range(5))
    assert len(names) == 30
