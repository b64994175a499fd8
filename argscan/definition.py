"""
Argscan input definitions: the schema registry and the resolver.

What this module provides
- Definition: the declared input of one command.
  • arguments: insertion-ordered name -> Argument (defines positional order)
  • options:   name -> Option
  • shortcuts: shortcut char -> option name
  Structural invariants are enforced while entries are added:
  • argument, option and shortcut names are unique,
  • nothing may follow a complex argument,
  • no required argument may follow an optional one.
- Definition.synopsis(short=False): one-line usage for help renderers.
- Definition.resolve(input, strict=True) / resolve(input, definition, strict=True):
  bind a scanned Input to the schema and return a Concrete.

Resolution phases
1. argument count: fewer positionals than required arguments is a fault;
   in strict mode, more positionals than declared slots is a fault unless a
   complex argument absorbs them.
2. positional binding, in declaration order (defaults fill missing slots).
3. option binding: long and shortcut buckets are merged (long first) and
   checked against each option's value policy.
4. leftovers (strict only): any bucket no declared option claimed is a fault.

Every failure raises a ResolutionError subclass; nothing partial escapes.
"""
import logging

from .arguments import Argument, Option
from .concrete import Concrete
from .faults import *
from .tokens import Input
from .utils import *

logger = logging.getLogger(__name__)


class Definition:
    """
    Declared arguments and options of a command (the schema).

    Construction
    - Definition(*definitions): Argument and Option instances in any mix;
      arguments keep their relative order.

    Properties (read-only snapshots)
    - arguments, options, shortcuts: see module docstring.
    - required_count: number of REQUIRED arguments.
    - has_complex / has_optional: whether a COMPLEX / non-REQUIRED argument exists.

    Faults
    - SchemaError subclasses on any structural violation; the definition is
      left with every entry added before the offending one.
    """

    arguments = mirror("arguments")
    options = mirror("options")
    shortcuts = mirror("shortcuts")
    required_count = mirror("required_count")
    has_complex = mirror("has_complex")
    has_optional = mirror("has_optional")

    def __init__(self, *definitions):
        self._arguments = {}
        self._options = {}
        self._shortcuts = {}
        self._required_count = 0
        self._has_complex = False
        self._has_optional = False
        if definitions:
            self.set_definitions(*definitions)

    def set_definitions(self, *definitions):
        """
        Replace every argument and option with the given descriptors.
        """
        arguments = []
        options = []
        for definition in definitions:
            if isinstance(definition, Argument):
                arguments.append(definition)
            elif isinstance(definition, Option):
                options.append(definition)
            else:
                raise TypeError("definitions must be arguments or options")
        self.set_arguments(*arguments)
        self.set_options(*options)

    def set_arguments(self, *arguments):
        self._arguments = {}
        self._required_count = 0
        self._has_complex = False
        self._has_optional = False
        for argument in arguments:
            self.add_argument(argument)

    def add_argument(self, argument, /):
        """
        Append a positional argument.

        Raises
        - DuplicateArgumentError: the name is already declared.
        - ArgumentOrderError: a complex argument is already declared (it must
          stay last), or a required argument follows an optional one.
        """
        if not isinstance(argument, Argument):
            raise TypeError("add_argument() argument must be an argument")

        if (name := argument.name) in self._arguments:
            raise DuplicateArgumentError(
                "an argument named %r already exists" % name,
                title="duplicate argument",
                code=FaultCode.DUPLICATE_ARGUMENT,
                input=name,
            )
        if self._has_complex:
            raise ArgumentOrderError(
                "cannot add argument %r after a complex argument" % name,
                title="argument order",
                code=FaultCode.ARGUMENT_ORDER,
                input=name,
            )
        if argument.required and self._has_optional:
            raise ArgumentOrderError(
                "cannot add required argument %r after an optional one" % name,
                title="argument order",
                code=FaultCode.ARGUMENT_ORDER,
                input=name,
            )

        if argument.complex:
            self._has_complex = True
        if argument.required:
            self._required_count += 1
        else:
            self._has_optional = True

        self._arguments[name] = argument

    def set_options(self, *options):
        self._options = {}
        self._shortcuts = {}
        for option in options:
            self.add_option(option)

    def add_option(self, option, /):
        """
        Register a named option.

        Raises
        - DuplicateOptionError: the name is already declared.
        - DuplicateShortcutError: the shortcut is already taken.
        """
        if not isinstance(option, Option):
            raise TypeError("add_option() argument must be an option")

        if (name := option.name) in self._options:
            raise DuplicateOptionError(
                "an option named %r already exists" % name,
                title="duplicate option",
                code=FaultCode.DUPLICATE_OPTION,
                input=name,
            )
        if (shortcut := option.shortcut) is not None:
            if shortcut in self._shortcuts:
                raise DuplicateShortcutError(
                    "an option with shortcut %r already exists" % shortcut,
                    title="duplicate shortcut",
                    code=FaultCode.DUPLICATE_SHORTCUT,
                    input=shortcut,
                )
            self._shortcuts[shortcut] = name

        self._options[name] = option

    def has_option(self, name, /):
        return name in self._options

    def has_shortcut(self, shortcut, /):
        return shortcut in self._shortcuts

    def option(self, name, /):
        """
        Return the declared option named 'name'.

        Raises
        - UnknownOptionError: no such option.
        """
        try:
            return self._options[name]
        except KeyError:
            raise UnknownOptionError(
                "the '--%s' option does not exist" % name,
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                input=name,
            ) from None

    def shortcut(self, shortcut, /):
        """
        Return the declared option behind a shortcut.

        Raises
        - UnknownOptionError: no option uses this shortcut.
        """
        try:
            return self._options[self._shortcuts[shortcut]]
        except KeyError:
            raise UnknownOptionError(
                "the '-%s' option does not exist" % shortcut,
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                input=shortcut,
            ) from None

    def synopsis(self, short=False):
        """
        Return the one-line usage of this definition.

        Forms
        - short: all options collapse to "[options]".
        - full: every option is listed, e.g. "[-o|--output=OUTPUT]",
          "[--level[=LEVEL]]" or "[-v|--verbose]".
        Arguments render as "<name>" ("<name>..." when complex); from the first
        optional argument on, each one opens a bracket that closes at the end:
        "<src> [<dst> [<extra>...]]". Options and arguments are separated by
        " [--] " when both exist.
        """
        options = self._options_synopsis(short)
        arguments = self._arguments_synopsis()
        if not options or not arguments:
            return options + arguments
        return options + " [--] " + arguments

    def _options_synopsis(self, short):
        if not self._options:
            return ""
        if short:
            return "[options]"

        synopses = []
        for name, option in self._options.items():
            value = ""
            if option.accepts_value:
                value = ("[=%s]" if option.optional else "=%s") % name.upper()
            shortcut = "-%s|" % option.shortcut if option.shortcut is not None else ""
            synopses.append("[%s--%s%s]" % (shortcut, name, value))
        return " ".join(synopses)

    def _arguments_synopsis(self):
        if not self._arguments:
            return ""

        synopses = []
        tail = ""
        for name, argument in self._arguments.items():
            synopsis = "<%s>" % name
            if argument.complex:
                synopsis += "..."
            if not argument.required:
                synopsis = "[" + synopsis
                tail += "]"
            synopses.append(synopsis)
        return " ".join(synopses) + tail

    def resolve(self, input, /, strict=True):
        """
        Bind a scanned Input to this definition and return a Concrete.

        Parameters
        - input: Input produced by the scanner.
        - strict: when True, undeclared positionals and options are faults;
          when False they are silently ignored.

        Raises (ResolutionError subclasses)
        - TooFewArgumentsError / TooManyArgumentsError
        - OptionValueRequiredError: a REQUIRED option is given without values.
        - OptionValueForbiddenError: a value-less option is given values.
        - MultipleOptionValuesError: a non-complex option is given several values.
        - UnknownOptionError (strict): the first unclaimed long, then shortcut, bucket.
        """
        if not isinstance(input, Input):
            raise TypeError("resolve() argument must be an input")

        given = input.arguments
        declared = len(self._arguments)

        if len(given) < self._required_count:
            raise TooFewArgumentsError(
                "at least %s required, only %d provided" % (
                    pluralize(self._required_count, "argument"), len(given)
                ),
                title="too few arguments",
                code=FaultCode.TOO_FEW_ARGUMENTS,
                expected=self._required_count,
                given=len(given),
                docs=getdoc(FaultCode.TOO_FEW_ARGUMENTS),
            )
        if strict and len(given) > declared and not self._has_complex:
            raise TooManyArgumentsError(
                "only %s expected, but %d provided" % (pluralize(declared, "argument"), len(given)),
                title="too many arguments",
                code=FaultCode.TOO_MANY_ARGUMENTS,
                expected=declared,
                given=len(given),
                docs=getdoc(FaultCode.TOO_MANY_ARGUMENTS),
            )

        arguments = {}
        for position, argument in enumerate(self._arguments.values()):
            if position < len(given):
                arguments[position] = given[position:] if argument.complex else given[position]
            elif argument.default is not None:
                arguments[position] = argument.default

        longs = dict(input.options)
        shorts = dict(input.shortcuts)
        options = {}
        for name, option in self._options.items():
            shortcut = option.shortcut
            if name not in longs and shortcut not in shorts:
                if option.default is not None:
                    options[name] = option.default
                continue

            values = longs.pop(name, ()) + shorts.pop(shortcut, ())
            if not values:
                if option.required:
                    raise OptionValueRequiredError(
                        "option %r must provide a value" % name,
                        title="option value required",
                        code=FaultCode.OPTION_VALUE_REQUIRED,
                        input=name,
                        option=option,
                        hint="pass a value after the option (for example: --%s=<value>)" % name,
                        docs=getdoc(FaultCode.OPTION_VALUE_REQUIRED),
                    )
                options[name] = option.default
            elif not option.accepts_value:
                raise OptionValueForbiddenError(
                    "option %r does not accept values" % name,
                    title="option value forbidden",
                    code=FaultCode.OPTION_VALUE_FORBIDDEN,
                    input=name,
                    option=option,
                    values=values,
                    hint="use '--' before positionals that follow a flag (for example: --%s -- <args>)" % name,
                    docs=getdoc(FaultCode.OPTION_VALUE_FORBIDDEN),
                )
            elif not option.complex and len(values) > 1:
                raise MultipleOptionValuesError(
                    "option %r cannot accept multiple values, %s given" % (name, pluralize(len(values), "value")),
                    title="multiple option values",
                    code=FaultCode.MULTIPLE_OPTION_VALUES,
                    input=name,
                    option=option,
                    values=values,
                    docs=getdoc(FaultCode.MULTIPLE_OPTION_VALUES),
                )
            else:
                options[name] = values if option.complex else values[0]

        # leftovers: report the first unclaimed long option, then shortcut
        if strict and longs:
            name = next(iter(longs))
            raise UnknownOptionError(
                "invalid option '--%s'" % name,
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                input=name,
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            )
        if strict and shorts:
            shortcut = next(iter(shorts))
            raise UnknownOptionError(
                "invalid option '-%s'" % shortcut,
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                input=shortcut,
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            )

        logger.debug("resolved %d argument(s) and %d option(s)", len(arguments), len(options))
        return Concrete(arguments, options)

    def __rich_repr__(self):
        yield "arguments", tuple(self._arguments.values())
        yield "options", tuple(self._options.values())

    def __repr__(self):
        return "definition(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def resolve(input, definition, /, strict=True):
    """
    Functional form of Definition.resolve(input, strict).
    """
    if not isinstance(definition, Definition):
        raise TypeError("resolve() second argument must be a definition")
    return definition.resolve(input, strict)


__all__ = (
    "Definition",
    "resolve",
)
