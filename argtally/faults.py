"""
Argtally faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the library
  raises. Codes are grouped by domain to keep searches predictable.
- ArgumentFault: base type that carries a message plus structured options
  (code, title, hint and the identifying data of the fault) and knows how to
  render itself with rich.
- ArgumentKeyError / ArgumentValueError / ArgumentPropertyError: the three fault
  kinds. Each exposes its identifying data as read-only attributes and supports
  structural pattern matching:

      match parser.attempt(argv):
          case None: ...
          case ArgumentKeyError(key): ...
          case ArgumentValueError(value, typename): ...
          case ArgumentPropertyError(key, property): ...

- trigger(): central entry point to surface a fault (raise, or render and exit
  in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Integration
- Registration faults are always raised: they are programmer errors.
- Parse faults go through ArgumentParser.trigger(), which merges the parser's
  shell/fancy/colorful settings before calling trigger().
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce, rename

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - parse and query faults (111xx), by kind:
      • key: UNKNOWN_ARGUMENT (11101), UNKNOWN_OPTION (11112),
        UNEXPECTED_CARDINAL (11121)
      • requirement: NOT_ENOUGH_VALUES (11122), MISSING_REQUIRED (11125)
      • value: INVALID_CHOICE (11124), UNCASTABLE_VALUE (11126)
    - schema (declaration) faults (131xx)
      • INVALID_ARITY, REQUIRED_FLAG, DEFAULT_NOT_CHOICE, INVALID_ALIAS,
        MISPLACED_REQUIRED, DUPLICATED_NAME

    normalize() allows host remapping to custom labels while keeping code stability.
    """
    # --- key faults (11xxx) ---
    UNKNOWN_ARGUMENT    = 11101
    UNKNOWN_OPTION      = 11112
    UNEXPECTED_CARDINAL = 11121

    # --- requirement faults (11xxx) ---
    NOT_ENOUGH_VALUES   = 11122
    MISSING_REQUIRED    = 11125

    # --- value faults (11xxx) ---
    INVALID_CHOICE      = 11124
    UNCASTABLE_VALUE    = 11126

    # --- schema faults (13xxx) ---
    INVALID_ARITY       = 13101
    REQUIRED_FLAG       = 13102
    DEFAULT_NOT_CHOICE  = 13103
    INVALID_ALIAS       = 13104
    MISPLACED_REQUIRED  = 13105
    DUPLICATED_NAME     = 13106

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _detail(name, /):
    """
    Read-only property exposing one entry of a fault's options.
    """
    return property(rename(lambda self: self.options.get(name), name))


class ArgumentFault(Exception):
    """
    Base type for every argtally fault.

    A fault is a message plus a read-only mapping of options. Options hold both
    the identifying data (key, value, property, ...) and the rendering context
    (code, title, hint, prog, shell, fancy, colorful, usage). Copies with
    updated options are produced with copy.replace(fault, **options).
    """
    __match_args__ = ()

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    code = _detail("code")
    title = _detail("title")
    hint = _detail("hint")
    argument = _detail("argument")

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
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
            "docs": "#737373",  # dim footer
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = getattr(main, "__prog__", self.options.get("prog") or os.path.basename(sys.argv[0]))

        header = Text.assemble(
            "[ ",
            text(prog, styler("prog-name")),
            " — ",
            text(self.code.normalize() if self.code else "", styler("code")),
            " | ",
            text((self.title or "argument fault").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("docs")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        if (usage := self.options.get("usage")) is not None:
            console.print(usage)
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ArgumentKeyError(ArgumentFault):
    """
    An argument reference that does not exist.

    Raised for unrecognized option tokens, lookups of unknown keys and
    positional overflow (pseudo-key "@<index>").
    """
    __match_args__ = ("key",)

    key = _detail("key")


class ArgumentValueError(ArgumentFault):
    """
    A supplied token that is not acceptable.

    Raised when a token is outside the choice set of its argument (typename is
    None) or when a typed conversion fails (typename names the target scalar).
    """
    __match_args__ = ("value", "typename")

    value = _detail("value")
    typename = _detail("typename")


class ArgumentPropertyError(ArgumentFault):
    """
    A violated argument property.

    Raised when a declaration is invalid (expectCount, defaultValue, required, alias, name)
    or when a requirement is not satisfied by the parsed tokens (required, expectCount).
    """
    __match_args__ = ("key", "property")

    key = _detail("key")
    property = _detail("property")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgumentFault).
    - options are merged into a copy of the fault via copy.replace(fault, **options).
    - outside shell mode the copy is raised; in shell mode it is rendered on
      stderr through rich and the process exits with status 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArgumentFault",
    "ArgumentKeyError",
    "ArgumentValueError",
    "ArgumentPropertyError",
    "trigger",
    "getdoc",
)
