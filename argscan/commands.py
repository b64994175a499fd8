"""
Argscan command layer: own a schema, resolve an invocation, report faults.

What this module provides
- Command: wraps a Python callable that receives the Concrete of one
  invocation. The command owns:
  • its Definition, built lazily on first use, exactly once, under a lock;
  • its memoized usage synopses (short and full);
  • the mapping from faults to exit statuses.
- command(...): create a Command or a decorator that produces one.
- invoke(object, prompt): convenience runner returning the exit status.

Invocation flow (Command.__invoke__)
1. scan the prompt into an Input (argv, shell-like string or token list);
2. resolve it against the definition (strict by default);
3. call the callback with the Concrete and normalize its return value into
   an exit status (None -> 0, integers clamped to 0..255).

Faults
- ScanError / ResolutionError are surfaced with the command's usage attached:
  raised as-is in non-shell mode; printed to stderr with rich and turned into
  sys.exit(fault.exitcode) in shell mode.
- SchemaError is never caught: it means the declared schema is broken.

Quick start
    from argscan import command, invoke, Argument, Option, Mode

    @command(
        definitions=(
            Argument("source", Mode.REQUIRED),
            Option("verbose", "v"),
        ),
        shell=True,
    )
    def copy(concrete):
        print(concrete.argument(0), concrete.has_option("verbose"))

    if __name__ == "__main__":
        raise SystemExit(invoke(copy))

Out of scope here: command registries, routing and help rendering. Hosts
that forward to subcommands use Input.clone() to drop consumed positionals
and options.
"""
import functools
import inspect
import logging
import operator
import os.path
import re
import sys
from collections.abc import Iterable
from threading import Lock

from .definition import Definition
from .faults import *
from .terminal import Terminal
from .tokens import Input
from .utils import *

logger = logging.getLogger(__name__)


class CommandType(type):
    """
    Metaclass giving commands a stable __typename__, read-only mirrored
    properties (from __introspectable__) and readable __repr__/__rich_repr__.
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
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _normalize(code, /):
    """
    Turn a callback's return value into a process exit status (0..255).
    """
    if code is None:
        return 0
    if isinstance(code, bool) or not isinstance(code, int):
        raise TypeError("command callback must return an integer or None")
    return min(max(code, 0), 255)


class Command(metaclass=CommandType):
    """
    Callable command bound to an input definition.

    Properties
    - name, descr: identity used in usage lines and fault headers.
    - shell, fancy: runtime flags for fault surfacing/rendering.
    - colorful: explicit flag, or the injected Terminal's 'interactive' answer.
    - terminal: the capability probe in use.
    - definition: the lazily built, memoized Definition.
    - usages: extra usage lines registered with add_usage(), name-prefixed.

    Notes
    - 'definitions' may be an iterable of Argument/Option or a zero-argument
      callable returning one; either way the Definition is only built on first
      access, so a broken schema raises its SchemaError there.
    """

    __introspectable__ = (
        "name",
        "descr",
        "usages",
        "shell",
        "fancy",
    )

    def __init__(
            self,
            callback,
            /,
            definitions=(),
            name=Unset,
            descr=Unset,
            *,
            shell=False,
            fancy=False,
            colorful=Unset,
            terminal=Unset
    ):
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} callback must be callable")
        if not callable(definitions) and not isinstance(definitions, Iterable):
            raise TypeError(f"{type(self).__typename__} 'definitions' must be an iterable or a callable")
        if not isinstance(name, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} 'name' cannot be empty")
        if not isinstance(descr, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")

        self._callback = callback
        self._definitions = definitions if callable(definitions) else tuple(definitions)
        self._name = coalesce(name, getattr(callback, "__name__", None) or os.path.basename(sys.argv[0]))
        self._descr = coalesce(descr, inspect.getdoc(callback))
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = colorful if colorful is Unset else bool(colorful)
        self._terminal = coalesce(terminal, Terminal(sys.stderr))
        self._definition = Unset
        self._usages = []
        self._synopses = {}
        self._lock = Lock()

    @property
    def terminal(self):
        return self._terminal

    @property
    def colorful(self):
        return coalesce(self._colorful, self._terminal.interactive)

    @property
    def definition(self):
        if self._definition is Unset:
            with self._lock:
                if self._definition is Unset:
                    definitions = self._definitions() if callable(self._definitions) else self._definitions
                    self._definition = Definition(*definitions)
                    logger.debug("built definition for %r", self._name)
        return self._definition

    def synopsis(self, short=False):
        """
        Return "<name> <definition synopsis>" (trimmed), memoized per form.
        """
        short = bool(short)
        definition = self.definition
        if short not in self._synopses:
            with self._lock:
                if short not in self._synopses:
                    self._synopses[short] = ("%s %s" % (self._name, definition.synopsis(short))).strip()
        return self._synopses[short]

    def add_usage(self, usage, /):
        """
        Register an extra usage line for help renderers.

        The command name is prefixed unless the line already starts with it;
        lines keep their registration order (see 'usages').
        """
        if not isinstance(usage, str):
            raise TypeError("add_usage() argument must be a string")
        if not (usage := usage.strip()):
            raise ValueError("add_usage() argument cannot be empty")
        if usage != self._name and not usage.startswith(self._name + " "):
            usage = "%s %s" % (self._name, usage)
        with self._lock:
            self._usages.append(usage)

    def concrete(self, input, /, strict=True):
        """
        Resolve a scanned Input against this command's definition.
        """
        return self.definition.resolve(input, strict)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this command's runtime options and usage attached.
        """
        trigger(
            fault,
            **options,
            tool=self,
            usage=self.synopsis(),
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
        )

    def __call__(self, concrete, /):
        return self._callback(concrete)

    def __invoke__(self, prompt=Unset):
        """
        Execute this command with a token stream and return the exit status.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.
        """
        # built outside the fault handler: a broken schema must propagate
        definition = self.definition
        try:
            concrete = definition.resolve(Input(prompt))
        except (ScanError, ResolutionError) as fault:
            logger.debug("%r rejected its input: %s", self._name, fault.message)
            self.trigger(fault)
            raise  # trigger() always raises or exits
        logger.debug("invoking %r", self._name)
        return _normalize(self._callback(concrete))


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:  cmd = command(func, definitions=(...), name="x")
    - Decorator:        @command(definitions=(...), shell=True)
                        def func(concrete): ...

    Returns
    - Command | Callable[[Callable], Command]
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for commands.

    Behavior
    - If 'object' implements __invoke__, call it with prompt and return its
      exit status.
    - Otherwise, raise TypeError.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "Command",
    "command",
    "invoke",
)

# Not part of the public API.
del CommandType
