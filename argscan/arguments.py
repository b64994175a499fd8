r"""
Argscan argument descriptors.

Overview
- Mode: IntFlag with the three mode bits shared by every descriptor.
  • COMPLEX  (0b001): more than one value accumulates into an ordered tuple.
  • REQUIRED (0b010): a value must be supplied.
  • OPTIONAL (0b100): a value may be supplied (options only).
- Argument: positional input identified by order.
- Option: named input introduced by "--name" or by a one-character shortcut "-x".

Both descriptors are immutable value specs: metadata is sanitized once at
construction, every violation raises a SchemaError immediately, and the
sanitized fields are exposed as read-only properties.

Metadata (sanitized on construction)
- Shared
  • name: Argument names match r"\w+"; Option names match r"[^\s=]+".
  • mode: Mode | int, restricted to the legal bits of each descriptor.
  • descr: Unset | str | Text (short help); trimmed, empty becomes None.
  • default: Unset | str | Iterable[str].
- Option only
  • shortcut: Unset | str, exactly one character that is neither "-" nor whitespace.

Mode legality
- Argument: any combination of COMPLEX and REQUIRED.
- Option: REQUIRED and OPTIONAL are mutually exclusive; COMPLEX needs one of them.

Default rules
- Argument: REQUIRED forbids a default.
- Option: a default is present if and only if the mode contains OPTIONAL.
- Both: non-COMPLEX descriptors accept at most one default value.
- Normalized shape: None (absent), str (non-COMPLEX) or tuple[str, ...] (COMPLEX).

Quick example:
    >>> from argscan.arguments import Argument, Option, Mode
    >>> Argument("files", Mode.COMPLEX, default=("a.txt", "b.txt")).default
    ('a.txt', 'b.txt')
    >>> Option("output", "o", Mode.OPTIONAL, default="-").optional
    True

Public API
- Classes: Mode, Argument, Option
"""
import functools
import operator
import re
from collections.abc import Iterable
from enum import IntFlag

from rich.text import Text

from .faults import *
from .utils import *


class Mode(IntFlag):
    """
    Mode bits for arguments and options.

    Values are fixed so that plain integers built by callers (e.g. 0b11 for
    a required complex argument) keep meaning the same thing.
    """
    COMPLEX = 0b001
    REQUIRED = 0b010
    OPTIONAL = 0b100


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable specs.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in fault messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(name='verbose', shortcut='v', mode=<Mode: 0>, ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers (e.g., rich).
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize shared descriptor metadata ('descr').

    - descr: optional short description. Unset becomes None; strings are
      trimmed and an empty result also becomes None. rich Text is kept as-is.

    Raises
    - TypeError: if 'descr' is not a string, Text or Unset.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str):
        descr = descr.strip() or Unset
    metadata["descr"] = coalesce(descr)


def _sanitize_mode(cls, metadata, allowed, /):
    """
    Internal: validate the mode bits against the descriptor's legal range.

    Parameters
    - allowed: Mode union of the bits this descriptor understands.

    Raises
    - TypeError: mode is not an integer (booleans are rejected too).
    - InvalidModeError: negative mode or any bit outside 'allowed'.
    """
    if isinstance(mode := metadata["mode"], bool) or not isinstance(mode, int):
        raise TypeError(f"{cls.__typename__} 'mode' must be an integer or a mode")
    if mode < 0 or mode & ~int(allowed):
        raise InvalidModeError(
            "%s mode %r is not valid" % (cls.__typename__, int(mode)),
            title="invalid mode",
            code=FaultCode.INVALID_MODE,
            mode=mode,
        )
    metadata["mode"] = Mode(mode)


def _sanitize_default(cls, metadata, /):
    """
    Internal: flatten 'default' into a tuple of strings for later arity checks.

    Accepted inputs
    - Unset           → ()
    - str             → (str,)
    - Iterable[str]   → tuple(iterable)

    Raises
    - TypeError: when the default (or any of its items) is not a string.

    The caller applies the per-descriptor presence/arity rules and stores the
    final normalized shape.
    """
    if (default := metadata["default"]) is Unset:
        return ()
    if isinstance(default, str):
        return default,
    if not isinstance(default, Iterable):
        raise TypeError(f"{cls.__typename__} 'default' must be a string or an iterable of strings")
    values = tuple(default)
    for value in values:
        if not isinstance(value, str):
            raise TypeError(f"{cls.__typename__} 'default' values must be strings")
    return values


def _normalize_default(mode, values, /):
    # COMPLEX keeps the whole tuple; otherwise the single value (or nothing).
    if Mode.COMPLEX in mode:
        return values or Unset
    return values[0] if values else Unset


class Argument(metaclass=ArgumentType):
    """
    Positional argument specification.

    An Argument binds to positional tokens by declaration order. A REQUIRED
    argument must be matched by a token; an optional one falls back to its
    default (or stays unbound). A COMPLEX argument swallows every remaining
    positional token into a tuple, which is why a schema allows only one and
    only as the last argument (enforced by the Definition, not here).

    Properties
    - name, mode, descr, default: sanitized metadata (read-only).
    - required, complex: mode shortcuts.
    """

    __introspectable__ = (
        "name",
        "mode",
        "descr",
        "default",
    )

    def __new__(cls, name, /, mode=0, descr=Unset, default=Unset):
        r"""
        Construct an Argument spec.

        Parameters
        - name: str matching r"\w+".
        - mode: Mode | int combining COMPLEX and REQUIRED.
        - descr: Unset | str | Text, short help line.
        - default: Unset | str | Iterable[str]; forbidden with REQUIRED, at most
          one value unless COMPLEX.

        Raises
        - TypeError for wrongly typed metadata; SchemaError subclasses for
          invalid names, modes and defaults.
        """
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not re.fullmatch(r"\w+", name):
            raise InvalidNameError(
                "%s name %r must consist of letters, digits and underscores" % (cls.__typename__, name),
                title="invalid argument name",
                code=FaultCode.INVALID_NAME,
                input=name,
            )

        metadata = {
            "name": name,
            "mode": mode,
            "descr": descr,
            "default": default,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_mode(cls, metadata, Mode.COMPLEX | Mode.REQUIRED)
        values = _sanitize_default(cls, metadata)

        mode = metadata["mode"]
        if Mode.REQUIRED in mode and values:
            raise InvalidDefaultError(
                "required %s %r cannot have a default value" % (cls.__typename__, name),
                title="invalid default",
                code=FaultCode.INVALID_DEFAULT,
                input=name,
            )
        if Mode.COMPLEX not in mode and len(values) > 1:
            raise InvalidDefaultError(
                "only a complex %s can have multiple default values, %r got %s" % (
                    cls.__typename__, name, pluralize(len(values), "value")
                ),
                title="invalid default",
                code=FaultCode.INVALID_DEFAULT,
                input=name,
            )
        metadata["default"] = _normalize_default(mode, values)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        return self

    @property
    def required(self):
        return Mode.REQUIRED in self._mode

    @property
    def complex(self):
        return Mode.COMPLEX in self._mode


class Option(metaclass=ArgumentType):
    """
    Named option specification.

    An Option is introduced on the command line by "--name" (or "--name=value")
    and, when it has a shortcut, by "-x" alone or inside a cluster ("-xyz").

    Value policy (from the mode)
    - no REQUIRED/OPTIONAL bit: a presence-only flag; supplying values is a fault.
    - REQUIRED: when present, at least one value must follow.
    - OPTIONAL: when present without values, the default is bound.
    - COMPLEX (with REQUIRED or OPTIONAL): every value is kept, in order.

    Properties
    - name, shortcut, mode, descr, default: sanitized metadata (read-only).
    - required, optional, complex, accepts_value: mode shortcuts.
    """

    __introspectable__ = (
        "name",
        "shortcut",
        "mode",
        "descr",
        "default",
    )

    def __new__(cls, name, /, shortcut=Unset, mode=0, descr=Unset, default=Unset):
        r"""
        Construct an Option spec.

        Parameters
        - name: str matching r"[^\s=]+" (no whitespace, no "=").
        - shortcut: Unset | str, one character, neither "-" nor whitespace.
        - mode: Mode | int combining COMPLEX, REQUIRED and OPTIONAL.
        - descr: Unset | str | Text, short help line.
        - default: Unset | str | Iterable[str]; present if and only if OPTIONAL,
          at most one value unless COMPLEX.

        Raises
        - TypeError for wrongly typed metadata; SchemaError subclasses for
          invalid names, shortcuts, mode combinations and defaults.
        """
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not re.fullmatch(r"[^\s=]+", name):
            raise InvalidNameError(
                "%s name %r must be a non-empty string without '=' and spaces" % (cls.__typename__, name),
                title="invalid option name",
                code=FaultCode.INVALID_NAME,
                input=name,
            )

        if not isinstance(shortcut, str | Unset):
            raise TypeError(f"{cls.__typename__} 'shortcut' must be a string")
        if isinstance(shortcut, str) and not re.fullmatch(r"[^\s-]", shortcut):
            raise InvalidShortcutNameError(
                "%s shortcut %r must be a single character other than '-'" % (cls.__typename__, shortcut),
                title="invalid shortcut",
                code=FaultCode.INVALID_SHORTCUT_NAME,
                input=shortcut,
            )

        metadata = {
            "name": name,
            "shortcut": shortcut,
            "mode": mode,
            "descr": descr,
            "default": default,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_mode(cls, metadata, Mode.COMPLEX | Mode.REQUIRED | Mode.OPTIONAL)

        mode = metadata["mode"]
        if Mode.REQUIRED in mode and Mode.OPTIONAL in mode:
            raise ConflictingModesError(
                "%s %r cannot be both REQUIRED and OPTIONAL" % (cls.__typename__, name),
                title="conflicting modes",
                code=FaultCode.CONFLICTING_MODES,
                input=name,
            )
        if Mode.COMPLEX in mode and not mode & (Mode.REQUIRED | Mode.OPTIONAL):
            raise ConflictingModesError(
                "complex %s %r must also be REQUIRED or OPTIONAL" % (cls.__typename__, name),
                title="conflicting modes",
                code=FaultCode.CONFLICTING_MODES,
                input=name,
            )

        values = _sanitize_default(cls, metadata)
        if (Mode.OPTIONAL in mode) != bool(values):
            raise InvalidDefaultError(
                "%s %r must have a default value if and only if it is OPTIONAL" % (cls.__typename__, name),
                title="invalid default",
                code=FaultCode.INVALID_DEFAULT,
                input=name,
            )
        if Mode.COMPLEX not in mode and len(values) > 1:
            raise InvalidDefaultError(
                "only a complex %s can have multiple default values, %r got %s" % (
                    cls.__typename__, name, pluralize(len(values), "value")
                ),
                title="invalid default",
                code=FaultCode.INVALID_DEFAULT,
                input=name,
            )
        metadata["default"] = _normalize_default(mode, values)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        return self

    @property
    def required(self):
        return Mode.REQUIRED in self._mode

    @property
    def optional(self):
        return Mode.OPTIONAL in self._mode

    @property
    def complex(self):
        return Mode.COMPLEX in self._mode

    @property
    def accepts_value(self):
        return bool(self._mode & (Mode.REQUIRED | Mode.OPTIONAL))


__all__ = (
    # Public API surface for consumers of argscan.arguments.
    # These names are re-exported from the package __init__.
    "Mode",
    "Argument",
    "Option",
)

# Not part of the public API.
del ArgumentType
