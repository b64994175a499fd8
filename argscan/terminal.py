"""
Interactive-terminal capability probe.

Terminal answers one question, once: is this stream attached to an
interactive terminal? The answer is computed on first access under a lock
and cached on the instance, so concurrent readers never probe twice.

Inject a Terminal (or any object with an 'interactive' attribute) wherever
the answer matters instead of querying the process streams directly; tests
can pass a Terminal over an in-memory stream.
"""
import sys
from threading import Lock

from .utils import *


class Terminal:
    """
    Once-initialized "is interactive" probe over a stream.

    Parameters
    - stream: Unset | file-like; defaults to sys.stdin at probe time.

    Streams without isatty(), or whose isatty() fails because the stream is
    closed or detached, are reported as not interactive.
    """

    def __init__(self, stream=Unset, /):
        self._stream = stream
        self._interactive = Unset
        self._lock = Lock()

    @property
    def stream(self):
        return coalesce(self._stream, sys.stdin)

    @property
    def interactive(self):
        if self._interactive is Unset:
            with self._lock:
                if self._interactive is Unset:
                    self._interactive = self._probe()
        return self._interactive

    def _probe(self):
        isatty = getattr(self.stream, "isatty", None)
        if not callable(isatty):
            return False
        try:
            return bool(isatty())
        except (OSError, ValueError):
            return False

    def __repr__(self):
        return "terminal(stream=%r, interactive=%r)" % (self.stream, self._interactive)


__all__ = (
    "Terminal",
)
