"""
Argtally usage and help renderables.

Everything here reads the public metadata of a Registry (names, aliases, descr,
required, nargs, default, choices) and builds rich renderables; nothing feeds
back into parsing.

Usage line
- program name, then options (canonical names; optional ones in brackets), then
  positional arguments (optional ones in brackets);
- options show a metavar made of the first letter after the dashes, uppercased
  ("--count" -> "C"); positional arguments show their own name;
- a bounded arity repeats the metavar nargs times, an unbounded one renders
  "X ..." and a pure flag shows no metavar.

Help
- description, usage, then "positional arguments" and "options" sections laid
  out as two-column grids; the help column is wrapped by rich.

Palette keys
- usage-label, program-name, description-section, group-label,
  argument-name, option-name, metavar, argument-description, choice, default,
  panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
from collections import defaultdict

from rich.console import Group
from rich.padding import Padding
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def _styler(colorful):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "description-section": "italic #A3A3A3",  # Neutral gray
        "group-label": "bold #FFFFFF",  # Pure white headers
        "argument-name": "bold #36C5F0",  # SKY-BLUE for positionals
        "option-name": "bold #00E6FF",  # CYAN for options
        "metavar": "bold #FFD600",  # AMBER for parameters
        "argument-description": "#9CA3AF",  # Muted gray
        "choice": "bold #FF4D94",  # MAGENTA → choices stand out
        "default": "#737373",  # Dim gray
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def metavar(argument, /):
    """
    Placeholder shown for one value of an argument in the usage line.
    """
    if not argument.isoption:
        return argument.name
    return argument.name.lstrip("-")[:1].upper()


def _metavars(argument, styler):
    label = Text(metavar(argument), styler("metavar"))
    if not argument.bounded:
        return [label, Text("...")]
    return [label] * argument.nargs


def usage(registry, prog, /, *, colorful=True):
    """
    Build the usage line for a registry as a rich Text.

    Example
    - usage: tool [--cc C C C] -n N a a [b]
    """
    styler = _styler(colorful)
    inputs = []

    for option in registry.options:
        item = Text(" ").join([Text(option.name, styler("option-name")), *_metavars(option, styler)])
        inputs.append(item if option.required else Text.assemble("[", item, "]"))

    for cardinal in registry.cardinals:
        item = Text(" ").join(_metavars(cardinal, styler))
        inputs.append(item if cardinal.required else Text.assemble("[", item, "]"))

    line = Text()
    line.append("usage", styler("usage-label")).append(": ")
    line.append(prog, styler("program-name"))
    for input in inputs:
        line.append(" ").append(input)
    return line


def _describe(argument, styler):
    descr = argument.descr if isinstance(argument.descr, Text) else Text(argument.descr, styler("argument-description"))
    notes = []
    if argument.choices:
        notes.append(Text.assemble(
            "{", Text(",").join(Text(choice, styler("choice")) for choice in sorted(argument.choices)), "}"
        ))
    if not argument.required and argument.bounded and argument.nargs and argument.default:
        notes.append(Text("(default: %s)" % argument.default, styler("default")))
    if not notes:
        return descr
    return Text(" ").join([part for part in (descr, *notes) if part])


def help(registry, prog, /, descr="", *, colorful=True, fancy=False):
    """
    Build the full help renderable for a registry.

    Parameters
    - registry: Registry whose arguments are described.
    - prog: program name for the usage line.
    - descr: program description shown first (optional).
    - colorful: apply the palette.
    - fancy: wrap everything in a titled panel.
    """
    styler = _styler(colorful)
    renders = []

    if descr:
        renders.append(Text(descr, styler("description-section")) if isinstance(descr, str) else descr)
        renders.append(Text(""))

    renders.append(usage(registry, prog, colorful=colorful))

    sections = (
        ("positional arguments", registry.cardinals, "argument-name"),
        ("options", registry.options, "option-name"),
    )
    for label, arguments, style in sections:
        if not arguments:
            continue
        renders.append(Text(""))
        renders.append(Text.assemble(Text(label, styler("group-label")), ":"))

        table = Table.grid(padding=(0, 4))
        table.add_column(no_wrap=True)
        table.add_column(ratio=1)
        for argument in arguments:
            names = Text(", ").join(Text(name, styler(style)) for name in registry.names(argument))
            table.add_row(names, _describe(argument, styler))
        renders.append(Padding(table, (0, 0, 0, 4)))

    renderable = Group(*renders)

    if fancy:
        return Panel(
            renderable,
            title=Text.assemble("[", " ", f"{prog} HELP".upper(), " ", "]", style=styler("panel-title")),
            title_align="left",
        )
    return renderable


__all__ = (
    "metavar",
    "usage",
    "help",
)
