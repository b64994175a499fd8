"""
Argscan token scanner.

What this module provides
- Input: the scanned form of one invocation. Raw argv-like tokens are
  classified left to right into
  • ordered positional values,
  • long-option buckets   (name     -> ordered values),
  • shortcut buckets      (one char -> ordered values).
  An empty bucket means "present without values".
- scan(tokens): functional alias for Input(tokens).

Classification (no lookahead beyond "does this token start with '-'")
- "--"            ends option scanning; every later token is positional.
- "--name[=v]"    opens the long bucket 'name' (pre-seeded with 'v').
- "-abc"          records 'a' and 'b' as present flags and opens bucket 'c'.
- anything else   is positional, unless a bucket is open: then it is a value
                  for that bucket. A bucket stays open until the next
                  '-'-leading token, so "--tag a b -v" gives tag=[a, b].

Consequences worth knowing
- Once any option has been opened, later plain tokens never become
  positionals again (they accumulate into the last opened bucket).
- A value that itself starts with '-' (e.g. "-1") cannot be given to an
  option; it can only be passed as a positional after "--".

The scanner knows nothing about the schema: it cannot tell whether "-x" is a
declared shortcut or whether "--flag" takes values. That is decided later by
the resolver (see argscan.definition).
"""
import copy
import logging
import re
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


def _sanitize_tokens(tokens, /):
    """
    Normalize the accepted token sources into a list of strings.

    - Unset: the current process arguments (sys.argv[1:]).
    - str: a shell-like string, split with shlex.split.
    - Iterable[str]: used as-is, item by item (no trimming, empty strings kept).
    """
    if tokens is Unset:
        return sys.argv[1:]
    if isinstance(tokens, str):
        return shlex.split(tokens)
    if not isinstance(tokens, Iterable):
        raise TypeError("input tokens must be a string or an iterable of strings")
    sanitized = []
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("input tokens must be a string or an iterable of strings")
        sanitized.append(token)
    return sanitized


class Input:
    """
    Scanned input of one invocation.

    Properties (read-only snapshots)
    - arguments: tuple[str, ...] of positional tokens.
    - options: mapping long name -> tuple of values, in first-seen order.
    - shortcuts: mapping shortcut char -> tuple of values, in first-seen order.

    Scanning happens once, in the constructor, and raises a ScanError
    subclass on malformed tokens. Instances are never mutated afterwards;
    clone() builds independent copies.
    """

    arguments = mirror("arguments")
    options = mirror("options")
    shortcuts = mirror("shortcuts")

    def __init__(self, tokens=Unset, /):
        self._arguments = []
        self._options = {}
        self._shortcuts = {}
        self._scan(deque(_sanitize_tokens(tokens)))
        logger.debug(
            "scanned %d positional(s), long options %s, shortcuts %s",
            len(self._arguments), list(self._options), list(self._shortcuts)
        )

    def _scan(self, tokens):
        # 'bucket' is the value list of the most recently opened option, if any.
        bucket = None
        index = 0
        while tokens:
            token = tokens.popleft()
            index += 1

            if token == "--":
                # end of options: everything left is positional, unconditionally
                self._arguments.extend(tokens)
                return

            if token.startswith("--"):
                bucket = self._open_long(token, index)
            elif token.startswith("-"):
                bucket = self._open_short(token, index)
            elif bucket is not None:
                bucket.append(token)
            else:
                self._arguments.append(token)

    def _open_long(self, token, index):
        """
        Open (or reopen) the long bucket named by token ("--name" or "--name=value").

        The inline value, when present, is appended right away; the bucket then
        keeps accumulating following plain tokens like any spaced option.
        """
        name = token[2:]
        if "=" not in name:
            return self._options.setdefault(name, [])

        name, value = name.split("=", 1)
        if not re.fullmatch(r"[^\s=]+", name):
            raise MalformedAssignmentError(
                "invalid option assignment %r at %s position" % (token, ordinal(index)),
                title="malformed option assignment",
                code=FaultCode.MALFORMED_ASSIGNMENT,
                hint="option names must be non-empty and contain no spaces (for example: --name=value)",
                token=token,
                index=index,
                docs=getdoc(FaultCode.MALFORMED_ASSIGNMENT),
            )
        bucket = self._options.setdefault(name, [])
        bucket.append(value)
        return bucket

    def _open_short(self, token, index):
        """
        Record a shortcut cluster ("-x" or "-xyz").

        Every character but the last is a value-less flag; the last one opens a
        bucket that accumulates the following plain tokens.
        """
        cluster = token[1:]
        if not cluster:
            raise EmptyShortcutError(
                "the option shortcut cannot be empty at %s position" % ordinal(index),
                title="empty shortcut",
                code=FaultCode.EMPTY_SHORTCUT,
                hint="use '--' to pass the remaining tokens as positionals",
                token=token,
                index=index,
                docs=getdoc(FaultCode.EMPTY_SHORTCUT),
            )
        if "-" in cluster:
            raise InvalidShortcutError(
                "invalid shortcut cluster %r at %s position, a shortcut cannot be '-'" % (token, ordinal(index)),
                title="invalid shortcut",
                code=FaultCode.INVALID_SHORTCUT,
                hint="combine single-character shortcuts only (for example: -abc)",
                token=token,
                index=index,
                docs=getdoc(FaultCode.INVALID_SHORTCUT),
            )
        for shortcut in cluster[:-1]:
            self._shortcuts.setdefault(shortcut, [])
        return self._shortcuts.setdefault(cluster[-1], [])

    def has_argument(self, position, /):
        return 0 <= position < len(self._arguments)

    def argument(self, position, /):
        """
        Return the positional token at 'position', or None.
        """
        return self._arguments[position] if self.has_argument(position) else None

    def complex_arguments(self, position, /):
        """
        Return every positional token from 'position' on, or None when there are none.
        """
        return tuple(self._arguments[position:]) or None

    def has_option(self, option, /):
        """
        Tell whether the option was given, by its long name or by its shortcut.
        """
        if option.name in self._options:
            return True
        return option.shortcut is not None and option.shortcut in self._shortcuts

    def option_values(self, option, /):
        """
        Return the values given to an option, long-name values first.

        - neither form given: None
        - one form given: that bucket's values
        - both forms given: long values followed by shortcut values
        """
        long = self._options.get(option.name)
        short = self._shortcuts.get(option.shortcut) if option.shortcut is not None else None
        if long is None and short is None:
            return None
        return tuple(long or ()) + tuple(short or ())

    def clone(self, start=0, /, *options):
        """
        Return an independent copy without the first 'start' positionals and
        without the long and shortcut buckets of every given option.

        Typical use: forward the remaining input to a subcommand after the
        command name (position 0) and the host's own options were consumed.
        The source instance is never modified.
        """
        if isinstance(start, bool) or not isinstance(start, int) or start < 0:
            raise TypeError("clone() start must be a non-negative integer")
        names = {option.name for option in options}
        shortcuts = {option.shortcut for option in options if option.shortcut is not None}

        clone = copy.copy(self)
        clone._arguments = self._arguments[start:]
        clone._options = {
            name: list(values) for name, values in self._options.items() if name not in names
        }
        clone._shortcuts = {
            shortcut: list(values) for shortcut, values in self._shortcuts.items() if shortcut not in shortcuts
        }
        return clone

    def __eq__(self, other):
        if not isinstance(other, Input):
            return NotImplemented
        return (
            self._arguments == other._arguments and
            self._options == other._options and
            self._shortcuts == other._shortcuts
        )

    __hash__ = None

    def __rich_repr__(self):
        yield "arguments", self.arguments
        yield "options", dict(self.options)
        yield "shortcuts", dict(self.shortcuts)

    def __repr__(self):
        return "input(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def scan(tokens=Unset, /):
    """
    Scan raw tokens into an Input (see Input for the accepted token sources).
    """
    return Input(tokens)


__all__ = (
    "Input",
    "scan",
)
