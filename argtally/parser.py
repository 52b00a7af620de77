"""
Argtally command-line parser.

What this module provides
- ArgumentParser: declare arguments, parse argv-like token vectors, read typed
  values back.
- ParseState: the observable state of the most recent parse.

Quick start
    from argtally import ArgumentParser

    parser = ArgumentParser("copy files around")
    parser.add("source", "file to copy", 1)
    parser.add("target", "destination", 1, False, "out.txt")
    parser.add("--level", "compression level", 1, False, 1, choices=range(1, 10))
    parser.add("-v", "be chatty", 0, False, aliases=("--verbose",))

    parser.parse(["tool", "a.txt", "--level", "3", "-v"])
    parser.value(0)                 # 'a.txt' (positionals are read by slot)
    parser.value(1)                 # 'out.txt' (padded default)
    parser.value("--level", 0, int) # 3
    parser.given("--verbose")       # True

Parsing phases
- collection: walk the tokens after the program name. An option-spelled token
  selects that option (unknown ones fail with ArgumentKeyError); any other
  token selects the next positional slot (no slot left fails with
  ArgumentKeyError('@<slot>')). The selected argument is marked given and then
  greedily takes up to nargs values, stopping at the next option-spelled token
  or the end of input. For a positional the selecting token is its first value.
  Every value must be one of the argument's choices (ArgumentValueError).
- completion: every distinct argument, positionals first, is checked once.
  Required ones must be given and, when bounded, hold exactly nargs values
  (ArgumentPropertyError 'required' / 'expectCount'); optional bounded ones are
  padded with their default.

Faults
- parse() surfaces faults through trigger(): raised normally, or rendered on
  stderr (with the usage line) followed by exit status 1 when shell=True.
- attempt() returns the fault instead, or None on success.
- Registration faults are always raised.

Concurrency
- A parser mutates its arguments in place on every parse; share one instance
  across threads only under an external lock covering parse and reads.
"""
import functools
import os.path
import shlex
import sys
from enum import Enum

from rich.console import Console

from . import formatting
from .arguments import Argument
from .faults import *
from .registry import Registry
from .utils import *


class ParseState(Enum):
    """
    Lifecycle of one parse: IDLE → COLLECTING → VALIDATING → PARSED | FAILED.
    """
    IDLE = "idle"
    COLLECTING = "collecting"
    VALIDATING = "validating"
    PARSED = "parsed"
    FAILED = "failed"


@functools.cache
def _ordinal(number):
    """
    English ordinal for a 1-based position ("first", "second", ..., "21st").
    """
    words = {
        1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth",
        6: "sixth", 7: "seventh", 8: "eighth", 9: "ninth", 10: "tenth",
    }
    if number in words:
        return words[number]
    if 10 <= number % 100 <= 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


def _strkey(key):
    """
    Printable form of a lookup key: positional slots render as '@<index>'.
    """
    if isinstance(key, int) and not isinstance(key, bool):
        return "@%d" % key
    return str(key)


class ArgumentParser:
    """
    Declaration registry plus the two-phase parsing state machine.

    Options
    - descr: program description for help output.
    - prog: program name; defaults to __main__.__prog__, then to the basename of
      the first token of the last parse, then to the basename of sys.argv[0].
    - shell: render faults and exit instead of raising them.
    - fancy: render faults and help inside panels.
    - colorful: apply the rich palette.
    """

    descr = mirror("descr")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    state = mirror("state")

    def __init__(self, descr=Unset, /, *, prog=Unset, shell=False, fancy=False, colorful=True):
        if not isinstance(descr, str | Unset):
            raise TypeError("parser 'descr' must be a string")
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        self._descr = coalesce(descr, "")
        self._prog = prog
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._registry = Registry()
        self._state = ParseState.IDLE
        self._argv0 = Unset

    @property
    def prog(self):
        if self._prog is not Unset:
            return self._prog
        if (prog := getattr(__import__("__main__"), "__prog__", Unset)) is not Unset:
            return prog
        return os.path.basename(coalesce(self._argv0, sys.argv[0] if sys.argv else "")) or "prog"

    @property
    def registry(self):
        return self._registry

    @property
    def cardinals(self):
        """
        Positional arguments in slot order; len(parser.cardinals) is the slot count.
        """
        return self._registry.cardinals

    @property
    def switches(self):
        """
        Read-only mapping of every option name and alias to its Argument.
        """
        return self._registry.switches

    # --- registration ---

    def add(self, name, descr, nargs, required=True, default=Unset, choices=(), aliases=()):
        """
        Declare an argument.

        Parameters
        - name: option name ("-n", "--count") or positional name ("file").
        - descr: help text.
        - nargs: positional → positive int; option → 0 (pure flag), positive
          int, or unbounded (..., "*" or -1).
        - required: must be given with exactly nargs values (unbounded: given at all).
        - default: fills missing values of an optional, bounded argument.
        - choices: allowed values; compared textually after str().
        - aliases: extra option names resolving to the same argument.

        Returns
        - Argument: the registered descriptor.

        Raises
        - ArgumentPropertyError on any schema violation; nothing is registered then.
        """
        argument = Argument(name, descr, nargs, required, default, choices)
        self._registry.register(argument, aliases)
        return argument

    # --- parsing ---

    def parse(self, tokens=Unset, /):
        """
        Parse a command line; tokens[0] is the program name and is skipped.

        Accepts any iterable of strings, or a single shell-like string that is
        split with shlex. Defaults to sys.argv. Returns the parser itself.
        """
        if (fault := self.attempt(tokens)) is not None:
            self.trigger(fault)
        return self

    def attempt(self, tokens=Unset, /):
        """
        Parse like parse(), but return the fault (or None on success) instead of
        surfacing it.
        """
        try:
            self._parseargs(tokens)
        except ArgumentFault as fault:
            return fault
        return None

    def _parseargs(self, tokens):
        tokens = self._sanitize(tokens)

        self._registry.reset()
        self._argv0 = tokens[0] if tokens else Unset
        self._state = ParseState.COLLECTING
        try:
            self._collect(tokens[1:])
            self._state = ParseState.VALIDATING
            for argument in self._registry:
                self._complete(argument)
        except ArgumentFault:
            self._state = ParseState.FAILED
            raise
        self._state = ParseState.PARSED

    @staticmethod
    def _sanitize(tokens):
        if tokens is Unset:
            tokens = sys.argv
        if isinstance(tokens, str):
            tokens = shlex.split(tokens)
        tokens = list(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() tokens must be strings, not %s" % type(token).__name__)
        return tokens

    def _collect(self, tokens):
        index = 0
        slot = 0

        while index < len(tokens):
            token = tokens[index]
            start = index

            if isoption(token):
                if (argument := self._registry.lookup(token)) is None:
                    raise ArgumentKeyError(
                        "unknown option %r at %s position" % (token, _ordinal(index + 1)),
                        title="unknown option",
                        code=FaultCode.UNKNOWN_OPTION,
                        hint="known options are %s" % (", ".join(map(repr, self._registry.switches)) or "none"),
                        key=token,
                        index=index,
                        docs=getdoc(FaultCode.UNKNOWN_OPTION),
                    )
                index += 1
            else:
                if (argument := self._registry.lookup(slot)) is None:
                    raise ArgumentKeyError(
                        "unexpected positional argument %r at %s position" % (token, _ordinal(index + 1)),
                        title="too many positional arguments",
                        code=FaultCode.UNEXPECTED_CARDINAL,
                        hint="this program takes %d positional argument(s)" % len(self._registry.cardinals),
                        key=_strkey(slot),
                        index=index,
                        docs=getdoc(FaultCode.UNEXPECTED_CARDINAL),
                    )
                slot += 1

            argument.mark()

            taken = 0
            while (
                (not argument.bounded or taken < argument.nargs)
                and index < len(tokens)
                and not isoption(tokens[index])
            ):
                if not argument.ischoice(value := tokens[index]):
                    raise ArgumentValueError(
                        "value %r at %s position is not a choice for %r" % (value, _ordinal(index + 1), argument.name),
                        title="invalid choice",
                        code=FaultCode.INVALID_CHOICE,
                        hint="choose one of %s" % ", ".join(map(repr, sorted(argument.choices))),
                        value=value,
                        typename=None,
                        argument=argument.name,
                        index=index,
                        start=start,
                        docs=getdoc(FaultCode.INVALID_CHOICE),
                    )
                argument.record(value)
                index += 1
                taken += 1

    def _complete(self, argument):
        if argument.required:
            if not argument.given:
                raise ArgumentPropertyError(
                    "required argument %r was not given" % argument.name,
                    title="missing required argument",
                    code=FaultCode.MISSING_REQUIRED,
                    hint="pass %r on the command line" % argument.name,
                    key=argument.name,
                    property="required",
                    docs=getdoc(FaultCode.MISSING_REQUIRED),
                )
            if argument.bounded and argument.count != argument.nargs:
                raise ArgumentPropertyError(
                    "argument %r expects %d value(s) but got %d" % (argument.name, argument.nargs, argument.count),
                    title="wrong number of values",
                    code=FaultCode.NOT_ENOUGH_VALUES,
                    hint="pass exactly %d value(s) for %r" % (argument.nargs, argument.name),
                    key=argument.name,
                    property="expectCount",
                    docs=getdoc(FaultCode.NOT_ENOUGH_VALUES),
                )
        else:
            argument.pad()

    # --- queries ---

    def argument(self, key, /):
        """
        The Argument behind a key (slot index, option name or alias), or None.
        """
        return self._registry.lookup(key)

    def _resolve(self, key):
        if (argument := self._registry.lookup(key)) is None:
            raise ArgumentKeyError(
                "invalid argument name %r" % _strkey(key),
                title="unknown argument",
                code=FaultCode.UNKNOWN_ARGUMENT,
                hint="use a positional index or a registered option name",
                key=_strkey(key),
                docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
            )
        return argument

    def count(self, key, /):
        """
        Number of values held by an argument; 0 for unknown keys.
        """
        if (argument := self._registry.lookup(key)) is None:
            return 0
        return argument.count

    def value(self, key, index=0, /, type=str):
        """
        The index-th value of an argument converted to type.

        Out-of-range indexes read as an empty string (and convert from it).
        Unknown keys raise ArgumentKeyError; failed conversions are surfaced
        like parse faults (raised, or rendered in shell mode).
        """
        argument = self._resolve(key)
        try:
            return argument.value(index).value(type)
        except ArgumentValueError as fault:
            self.trigger(fault, argument=argument.name)

    def values(self, key, /, type=str):
        """
        Every value of an argument converted to type, as a list.
        """
        return [self.value(key, index, type) for index in range(self._resolve(key).count)]

    def given(self, key, /):
        """
        Whether an argument appeared in the last parse; unknown keys raise ArgumentKeyError.
        """
        return self._resolve(key).given

    # --- presentation ---

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's rendering settings.
        """
        trigger(fault, **{
            "prog": self.prog,
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
            "usage": self.usage() if self.shell else None,
        } | options)

    def usage(self):
        """
        Usage line as a rich Text.
        """
        return formatting.usage(self._registry, self.prog, colorful=self.colorful)

    def help(self):
        """
        Full help as a rich renderable.
        """
        return formatting.help(self._registry, self.prog, self.descr, colorful=self.colorful, fancy=self.fancy)

    def print_usage(self, *, stderr=False):
        Console(stderr=stderr).print(self.usage())

    def print_help(self, *, stderr=False):
        Console(stderr=stderr).print(self.help())

    def __rich__(self):
        return self.help()

    def __repr__(self):
        return f"argument-parser(prog={self.prog!r}, state={self._state.value!r}, arguments={len(self._registry)})"


__all__ = (
    "ArgumentParser",
    "ParseState",
)
