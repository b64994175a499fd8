"""
Argscan concrete results.

A Concrete is what a successful resolution hands back: the schema-validated
values of one invocation. It is a read-only snapshot; nothing in it can be
changed after construction.

Value shapes
- arguments: position (int) -> str, or tuple[str, ...] for a complex argument.
- options:   name (str)     -> str, tuple[str, ...] for a complex option, or
                               None for a flag that was given without values.

A key that is missing means "not bound": the input did not provide it and
the descriptor has no default. has_option() is the way to test a flag.
"""
from .utils import *


class Concrete:
    """
    Resolved arguments and options of one invocation.

    Example
        >>> concrete = Concrete({0: "build"}, {"verbose": None})
        >>> concrete.argument(0), concrete.has_option("verbose"), concrete.option("verbose")
        ('build', True, None)
    """

    arguments = mirror("arguments")
    options = mirror("options")

    def __init__(self, arguments=(), options=(), /):
        self._arguments = dict(arguments)
        self._options = dict(options)

    def has_argument(self, position, /):
        return position in self._arguments

    def argument(self, position, /):
        return freeze(self._arguments.get(position))

    def has_option(self, name, /):
        return name in self._options

    def option(self, name, /):
        return freeze(self._options.get(name))

    def __eq__(self, other):
        if not isinstance(other, Concrete):
            return NotImplemented
        return self._arguments == other._arguments and self._options == other._options

    __hash__ = None

    def __rich_repr__(self):
        yield "arguments", dict(self.arguments)
        yield "options", dict(self.options)

    def __repr__(self):
        return "concrete(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "Concrete",
)
