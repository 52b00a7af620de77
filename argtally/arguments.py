r"""
Argtally argument descriptors.

Overview
- Argument: one declared argument, either a cardinal (positional, identified by
  its slot) or an option (identified by a '-'/'--' prefixed name). It holds the
  declared properties plus the values collected by the most recent parse.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    selected fields via read-only properties declared in __introspectable__.

Metadata (sanitized on construction)
- name: non-empty string. Option syntax (r"--?[^\W\d_]" prefix) makes it an option.
- descr: Unset | str | Text (short help), "" when omitted.
- nargs: how many values the argument consumes.
  • cardinals: a positive integer.
  • options: 0 (pure flag), a positive integer, or unbounded (..., "*" or -1).
- required: bool. A pure flag is never required.
- default: stringified once; must be one of the choices when choices exist.
- choices: iterable of allowed values, stringified into a frozenset; empty means
  any value is accepted. Comparison is textual: "01" is not the choice "1".

Validation happens here, at declaration time, and raises ArgumentPropertyError
naming the argument and the violated property ("expectCount", "required", "defaultValue").
Wrong Python types (a non-string name, a non-iterable choices) raise TypeError.

Runtime state
- given: whether the argument appeared in the most recent parse.
- values: tuple of Value, in command-line order.
  reset() clears both; record()/mark()/pad() are driven by the parser.

Quick example:
    >>> argument = Argument("--level", "verbosity level", 1, False, 1, choices=(1, 2, 3))
    >>> argument.default, sorted(argument.choices)
    ('1', ['1', '2', '3'])
    >>> argument.ischoice("2"), argument.ischoice("02")
    (True, False)
"""
import functools
import operator
import re
from collections.abc import Iterable
from types import EllipsisType

from rich.text import Text

from .faults import ArgumentPropertyError, FaultCode, getdoc
from .utils import *
from .values import Value


class ArgumentType(type):
    """
    Metaclass that turns argument classes into introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printers.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - argument(name='--level', nargs=1, required=False, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the descriptive metadata.

    - name: must be a non-empty string; kept verbatim (tokens are matched exactly).
    - descr: Unset | str | Text; Unset becomes "".
    - required: coerced to bool.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name.strip():
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = coalesce(descr, "")

    metadata["required"] = bool(metadata["required"])


def _sanitize_nargs(cls, metadata, /):
    """
    Internal: validate and normalize the arity for the argument's role.

    Accepted spellings
    - int >= 0 (0 only for options)
    - ..., "*" or -1 for unbounded arity (options only); normalized to Ellipsis.

    Raises
    - TypeError: when nargs is neither an integer nor an unbounded marker.
    - ArgumentPropertyError(expectCount): when the arity is not valid for the role.
    """
    name = metadata["name"]
    nargs = metadata["nargs"]

    if isinstance(nargs, bool) or not isinstance(nargs, int | str | EllipsisType):
        raise TypeError(f"{cls.__typename__} 'nargs' must be an integer, '*' or ellipsis")
    if isinstance(nargs, str) and nargs != "*":
        raise ValueError(f"{cls.__typename__} 'nargs' string form must be '*'")
    if nargs == "*" or nargs == -1:
        nargs = Ellipsis

    if isinstance(nargs, int) and nargs < 0:
        raise ArgumentPropertyError(
            "argument %r cannot expect a negative number of values" % name,
            title="invalid arity",
            code=FaultCode.INVALID_ARITY,
            hint="use a positive count, 0 for a pure flag, or ... for any count",
            key=name,
            property="expectCount",
            docs=getdoc(FaultCode.INVALID_ARITY),
        )

    if not isoption(name) and (nargs is Ellipsis or nargs == 0):
        raise ArgumentPropertyError(
            "positional argument %r should not expect 0 or a variable number of values" % name,
            title="invalid arity",
            code=FaultCode.INVALID_ARITY,
            hint="give positional arguments a fixed, positive count",
            key=name,
            property="expectCount",
            docs=getdoc(FaultCode.INVALID_ARITY),
        )

    if isoption(name) and nargs == 0 and metadata["required"]:
        raise ArgumentPropertyError(
            "pure flag %r should not be required" % name,
            title="required flag",
            code=FaultCode.REQUIRED_FLAG,
            hint="declare %r with required=False" % name,
            key=name,
            property="required",
            docs=getdoc(FaultCode.REQUIRED_FLAG),
        )

    metadata["nargs"] = nargs


def _sanitize_choices(cls, metadata, /):
    """
    Internal: stringify default and choices, then check their agreement.

    - choices must be a non-string iterable; it becomes a frozenset of strings.
    - an omitted default becomes "" and, like any default, must be one of the
      choices when choices exist.
    """
    name = metadata["name"]

    if isinstance(choices := metadata["choices"], str) or not isinstance(choices, Iterable):
        raise TypeError(f"{cls.__typename__} 'choices' must be a non-string iterable")
    metadata["choices"] = frozenset(map(stringify, choices))

    metadata["default"] = stringify(coalesce(metadata["default"], ""))

    if not metadata["choices"]:
        return
    if metadata["default"] not in metadata["choices"]:
        raise ArgumentPropertyError(
            "default value %r is not a choice for %r" % (metadata["default"], name),
            title="default not a choice",
            code=FaultCode.DEFAULT_NOT_CHOICE,
            hint="pick a default among %s" % ", ".join(map(repr, sorted(metadata["choices"]))),
            key=name,
            property="defaultValue",
            docs=getdoc(FaultCode.DEFAULT_NOT_CHOICE),
        )


class Argument(metaclass=ArgumentType):
    """
    Declared argument plus the values gathered by the last parse.

    Arguments are reusable: the parser calls reset() before every parse, so the
    same declaration serves any number of command lines.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "name",
        "descr",
        "nargs",
        "required",
        "default",
        "choices",
        "given",
        "values",
    )

    __displayable__ = (
        "name",
        "nargs",
        "required",
        "default",
        "choices",
        "given",
        "values",
    )

    def __init__(self, name, descr=Unset, nargs=1, required=True, default=Unset, choices=()):
        """
        Construct an argument with the provided metadata.

        Parameters
        - name: str
          Option names start with '-' or '--' followed by a letter ("-n", "--count");
          any other name declares a positional argument.
        - descr: Unset | str | Text
          Help text, stored for formatters.
        - nargs: int | "*" | ...
          Number of values to consume (see module docs for per-role rules).
        - required: bool
          Whether the argument must be given (with exactly nargs values).
        - default: Any
          Fills missing slots of an optional, bounded argument. Stringified.
        - choices: Iterable
          Allowed values (stringified). Empty means unconstrained.

        Raises
        - ArgumentPropertyError for invalid arity, a required pure flag, or a
          default outside the choices.
        """
        metadata = {
            "name": name,
            "descr": descr,
            "nargs": nargs,
            "required": required,
            "default": default,
            "choices": choices,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_nargs(type(self), metadata)
        _sanitize_choices(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._given = False
        self._values = []

    @property
    def isoption(self):
        """
        Whether this argument is an option (named) rather than a cardinal.
        """
        return isoption(self._name)

    @property
    def bounded(self):
        """
        Whether the arity is a fixed count (pure flags included).
        """
        return self._nargs is not Ellipsis

    @property
    def count(self):
        """
        Number of values currently held.
        """
        return len(self._values)

    def ischoice(self, value, /):
        """
        Whether value is acceptable: choices are empty or contain it verbatim.
        """
        return not self._choices or value in self._choices

    def record(self, token, /):
        """
        Append a collected token. Choice membership is checked by the parser.
        """
        self._values.append(Value(token))

    def mark(self):
        """
        Flag the argument as given in the current parse.
        """
        self._given = True

    def reset(self):
        """
        Drop collected values and the given flag.
        """
        self._values.clear()
        self._given = False

    def pad(self):
        """
        Fill missing slots with the default up to nargs (bounded arity only).
        """
        if not self.bounded:
            return
        while len(self._values) < self._nargs:
            self._values.append(Value(self._default))

    def value(self, index=0, /):
        """
        Return the index-th collected Value, or an empty Value when out of range.
        """
        if not 0 <= index < len(self._values):
            return Value("")
        return self._values[index]


__all__ = (
    "Argument",
)

# Keep the metaclass out of star-imports; not part of the public API.
del ArgumentType
