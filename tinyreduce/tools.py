"""Tools for working with files in a MapReduce context."""


from contextlib import contextmanager
import logging
import os
import stat
import tempfile


__all__ = ["delete_files", "publish_mode", "atomic_open"]


logger = logging.getLogger('tinyreduce')


@contextmanager
def delete_files(*paths):

    """
    Register file paths that are deleted on context exit.  Paths that no
    longer exist are ignored.
    """

    try:
        yield paths
    finally:
        for p in paths:
            logger.debug("delete_files() - deleting %s", p)
            try:
                os.remove(p)
            except FileNotFoundError:
                pass


def publish_mode(path):

    """
    Permission bits a file published at ``path`` should have.  An existing
    file keeps its mode, otherwise this is what ``open(path, 'w')`` would
    produce: ``0o666`` masked by the process umask.

    Parameters
    ----------
    path : str
        Final destination.

    Returns
    -------
    int
    """

    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        # The umask can only be read by setting it.
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


@contextmanager
def atomic_open(path, opener=open, **kwargs):

    """
    Like ``open(path, 'w')`` but data is written to a temporary file in the
    same directory and only renamed to ``path`` when the context exits
    cleanly.  If an exception is raised the temporary file is removed and
    anything already at ``path`` is left untouched.

    The published file is flushed to disk before the rename and gets the
    permissions from :func:`publish_mode`, so replacing an existing file
    does not change its mode.

        >>> with atomic_open('out.txt') as f:
        ...     f.write('data')

    Parameters
    ----------
    path : str
        Final destination.
    opener : callable, optional
        Called as ``opener(tmp_path, 'w', **kwargs)`` to produce the handle
        given to the caller.  Must return a context manager with
        ``flush()`` and ``fileno()`` methods, like a regular file.
    kwargs : **kwargs, optional
        Additional keyword arguments for ``opener``.

    Raises
    ------
    OSError
        If the temporary file cannot be created, synced, or renamed.

    Yields
    ------
    object
        Whatever ``opener`` returns.
    """

    directory, name = os.path.split(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(
        prefix='.{}.'.format(name), suffix='.tmp', dir=directory)
    os.close(fd)

    logger.debug("atomic_open() - staging %s in %s", path, tmp_path)

    with delete_files(tmp_path):
        with opener(tmp_path, 'w', **kwargs) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, publish_mode(path))
        os.replace(tmp_path, path)
        logger.debug("atomic_open() - published %s", path)
