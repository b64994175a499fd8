"""
Argscan faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Values are
  small enough to double as process exit statuses.
- ConsoleException: base type that carries a message + options and knows how
  to render itself (rich) and how to surface itself (raise or print-and-exit).
- SchemaError / ScanError / ResolutionError: the three fault families.
- trigger(): central entry point to surface any fault with runtime options.
- getdoc(): optional description lookup for a code from the host application.

Families
- SchemaError (construction time): the declared schema itself is wrong. This
  is a defect in the program, never in user input. It is also a ValueError.
- ScanError (tokenizing time): a raw token is malformed (bad "--name=value",
  empty or broken short-option cluster).
- ResolutionError (binding time): tokens are well formed but do not satisfy
  the schema (argument count, option value rules, unknown options).

Integration
- The scanner and resolver raise faults directly; nothing is ever partially
  returned.
- A hosting command catches ScanError/ResolutionError and calls
  trigger(fault, shell=..., usage=..., ...). In non-shell mode the fault is
  re-raised; in shell mode it is printed to stderr with rich and the process
  exits with the fault's exit status.
"""
import copy
import logging
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

logger = logging.getLogger(__name__)

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    numeric ranges encode domains and every value is a valid exit status:
    - schema (1x)
      • INVALID_NAME, INVALID_SHORTCUT_NAME, INVALID_MODE, CONFLICTING_MODES,
        INVALID_DEFAULT, DUPLICATE_ARGUMENT, DUPLICATE_OPTION,
        DUPLICATE_SHORTCUT, ARGUMENT_ORDER
    - scanning (2x)
      • MALFORMED_ASSIGNMENT, EMPTY_SHORTCUT, INVALID_SHORTCUT
    - resolution (3x)
      • TOO_FEW_ARGUMENTS, TOO_MANY_ARGUMENTS, OPTION_VALUE_REQUIRED,
        OPTION_VALUE_FORBIDDEN, MULTIPLE_OPTION_VALUES, UNKNOWN_OPTION

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- schema errors (1x) ---
    INVALID_NAME           = 11
    INVALID_SHORTCUT_NAME  = 12
    INVALID_MODE           = 13
    CONFLICTING_MODES      = 14
    INVALID_DEFAULT        = 15
    DUPLICATE_ARGUMENT     = 16
    DUPLICATE_OPTION       = 17
    DUPLICATE_SHORTCUT     = 18
    ARGUMENT_ORDER         = 19

    # --- scanning errors (2x) ---
    MALFORMED_ASSIGNMENT   = 21
    EMPTY_SHORTCUT         = 22
    INVALID_SHORTCUT       = 23

    # --- resolution errors (3x) ---
    TOO_FEW_ARGUMENTS      = 31
    TOO_MANY_ARGUMENTS     = 32
    OPTION_VALUE_REQUIRED  = 33
    OPTION_VALUE_FORBIDDEN = 34
    MULTIPLE_OPTION_VALUES = 35
    UNKNOWN_OPTION         = 36

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    main = __import__("__main__")
    if hasattr(main, "__prog__"):
        return main.__prog__
    if (tool := options.get("tool")) is not None:
        return tool.name
    return os.path.basename(sys.argv[0]) or "argscan"


class ConsoleException(Exception):
    """
    base type for every argscan fault.

    state
    - message: one-sentence, lowercased description.
    - options: read-only mapping with at least 'code' and 'title'; usually
      'hint' and context (token, index, input, option, ...). runtime options
      merged by trigger() (shell, fancy, colorful, tool) live here too.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options["code"]

    @property
    def title(self):
        return self.options.get("title", "")

    @property
    def hint(self):
        return self.options.get("hint", "")

    @property
    def exitcode(self):
        """
        process exit status for this fault, clamped to 1..255.
        """
        return min(max(int(self.code), 1), 255)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "usage-label": "bold #00E6FF",  # cyan usage label
            "usage": "#36C5F0",  # sky-blue synopsis
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(_program(self.options), "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))
        if usage := self.options.get("usage"):
            renders.append(Text.assemble(text("usage: ", "usage-label"), text(usage, "usage")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(self.exitcode)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SchemaError(ConsoleException, ValueError): ...
class InvalidNameError(SchemaError): ...
class InvalidShortcutNameError(SchemaError): ...
class InvalidModeError(SchemaError): ...
class ConflictingModesError(SchemaError): ...
class InvalidDefaultError(SchemaError): ...
class DuplicateArgumentError(SchemaError): ...
class DuplicateOptionError(SchemaError): ...
class DuplicateShortcutError(SchemaError): ...
class ArgumentOrderError(SchemaError): ...


class ScanError(ConsoleException): ...
class MalformedAssignmentError(ScanError): ...
class EmptyShortcutError(ScanError): ...
class InvalidShortcutError(ScanError): ...


class ResolutionError(ConsoleException): ...
class TooFewArgumentsError(ResolutionError): ...
class TooManyArgumentsError(ResolutionError): ...
class OptionValueRequiredError(ResolutionError): ...
class OptionValueForbiddenError(ResolutionError): ...
class MultipleOptionValuesError(ResolutionError): ...
class UnknownOptionError(ResolutionError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ConsoleException).
    - options are merged into the fault via copy.replace(fault, **options).
    - in shell mode the fault is printed to stderr and the process exits with
      fault.exitcode; otherwise the (merged) fault is raised.

    typical options
    - tool, shell, fancy, colorful, hint, and any other context the renderer
      may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    logger.debug("surfacing %s (%s)", type(fault).__name__, getattr(fault, "message", fault))
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ConsoleException",
    "SchemaError",
    "InvalidNameError",
    "InvalidShortcutNameError",
    "InvalidModeError",
    "ConflictingModesError",
    "InvalidDefaultError",
    "DuplicateArgumentError",
    "DuplicateOptionError",
    "DuplicateShortcutError",
    "ArgumentOrderError",
    "ScanError",
    "MalformedAssignmentError",
    "EmptyShortcutError",
    "InvalidShortcutError",
    "ResolutionError",
    "TooFewArgumentsError",
    "TooManyArgumentsError",
    "OptionValueRequiredError",
    "OptionValueForbiddenError",
    "MultipleOptionValuesError",
    "UnknownOptionError",
    "FaultCode",
    "trigger",
    "getdoc",
)
