"""``tinyreduce`` errors"""


__all__ = [
    "ReduceError", "InputUnavailableError", "DecodeError", "EncodeError",
    "ReduceFunctionError", "OutputError", "ClosedTaskError"]


class ReduceError(Exception):
    """Base class for anything that fails a reduce partition."""


class InputUnavailableError(ReduceError, IOError):

    """An intermediate file produced by a map task could not be opened."""

    def __init__(self, message, path=None, map_task=None):
        super(InputUnavailableError, self).__init__(message)
        self.path = path
        self.map_task = map_task


class DecodeError(ReduceError, ValueError):

    """A record could not be decoded.  ``lineno`` is 1-based."""

    def __init__(self, message, path=None, lineno=None):
        super(DecodeError, self).__init__(message)
        self.path = path
        self.lineno = lineno


class EncodeError(ReduceError, ValueError):
    """A record could not be encoded."""


class ReduceFunctionError(ReduceError):

    """The user's reduce function raised or produced something other than
    a string.
    """

    def __init__(self, message, key=None):
        super(ReduceFunctionError, self).__init__(message)
        self.key = key


class OutputError(ReduceError, IOError):

    """The output file could not be created, written, or published."""

    def __init__(self, message, path=None):
        super(OutputError, self).__init__(message)
        self.path = path


class ClosedTaskError(ReduceError, ValueError):
    """Raised when attempting to use a closed processor."""
