"""
Argtally argument registry.

The registry owns every declared Argument in an arena (a list indexed by a
stable integer id, in registration order) and two indexes over it:

- cardinals: ids of positional arguments, in slot order;
- switches: option name or alias -> id. An option and all of its aliases resolve
  to the same id, hence to the same Argument.

A separate alias -> canonical-name map serves formatters (listing aliases next
to the canonical name). Passes that must visit each argument once iterate the
arena, never the switch map.

Registration invariants
- once an optional cardinal is registered, no required cardinal may follow
  (it would be unreachable from the left);
- every alias is itself option syntax, and no name or alias is registered twice;
- cardinals take no aliases.
A rejected registration raises ArgumentPropertyError and leaves the registry
untouched.
"""
from types import MappingProxyType

from .arguments import Argument
from .faults import ArgumentPropertyError, FaultCode, getdoc
from .utils import isoption


class Registry:
    """
    Ordered store of declared arguments with option/alias resolution.
    """

    def __init__(self):
        self._arguments = []
        self._cardinals = []
        self._switches = {}
        self._aliases = {}

    def register(self, argument, /, aliases=()):
        """
        Insert an argument (and the aliases of an option).

        Returns
        - int: the arena id of the argument.

        Raises
        - TypeError: argument is not an Argument, or aliases is a bare string.
        - ArgumentPropertyError: a registration invariant is violated
          (property "name", "alias" or "required").
        """
        if not isinstance(argument, Argument):
            raise TypeError("register() argument must be an Argument")
        if isinstance(aliases, str):
            raise TypeError("register() aliases must be an iterable of strings, not a string")
        aliases = tuple(aliases)

        if argument.isoption:
            self._check_switches(argument, aliases)
        else:
            self._check_cardinal(argument, aliases)

        ident = len(self._arguments)
        self._arguments.append(argument)
        if argument.isoption:
            self._switches[argument.name] = ident
            for alias in aliases:
                self._switches[alias] = ident
                self._aliases[alias] = argument.name
        else:
            self._cardinals.append(ident)
        return ident

    def _check_switches(self, argument, aliases):
        if argument.name in self._switches:
            raise ArgumentPropertyError(
                "option %r is already registered" % argument.name,
                title="duplicated name",
                code=FaultCode.DUPLICATED_NAME,
                hint="give every option a distinct name",
                key=argument.name,
                property="name",
                docs=getdoc(FaultCode.DUPLICATED_NAME),
            )

        seen = {argument.name}
        for alias in aliases:
            if not isinstance(alias, str) or not isoption(alias):
                raise ArgumentPropertyError(
                    "alias %r for option %r must also be an option name" % (alias, argument.name),
                    title="invalid alias",
                    code=FaultCode.INVALID_ALIAS,
                    hint="spell aliases with a leading '-' or '--' followed by a letter",
                    key=argument.name,
                    property="alias",
                    docs=getdoc(FaultCode.INVALID_ALIAS),
                )
            if alias in seen or alias in self._switches:
                raise ArgumentPropertyError(
                    "alias %r for option %r is already registered" % (alias, argument.name),
                    title="duplicated alias",
                    code=FaultCode.DUPLICATED_NAME,
                    hint="remove the repeated alias",
                    key=argument.name,
                    property="alias",
                    docs=getdoc(FaultCode.DUPLICATED_NAME),
                )
            seen.add(alias)

    def _check_cardinal(self, argument, aliases):
        if aliases:
            raise ArgumentPropertyError(
                "positional argument %r cannot have aliases" % argument.name,
                title="invalid alias",
                code=FaultCode.INVALID_ALIAS,
                hint="only options take aliases",
                key=argument.name,
                property="alias",
                docs=getdoc(FaultCode.INVALID_ALIAS),
            )

        if any(self._arguments[ident].name == argument.name for ident in self._cardinals):
            raise ArgumentPropertyError(
                "positional argument %r is already registered" % argument.name,
                title="duplicated name",
                code=FaultCode.DUPLICATED_NAME,
                hint="give every positional argument a distinct name",
                key=argument.name,
                property="name",
                docs=getdoc(FaultCode.DUPLICATED_NAME),
            )

        if self._cardinals and not self._arguments[self._cardinals[-1]].required and argument.required:
            raise ArgumentPropertyError(
                "required positional argument %r cannot follow optional ones" % argument.name,
                title="misplaced required argument",
                code=FaultCode.MISPLACED_REQUIRED,
                hint="declare %r before the optional positional arguments, or make it optional" % argument.name,
                key=argument.name,
                property="required",
                docs=getdoc(FaultCode.MISPLACED_REQUIRED),
            )

    def lookup(self, key, /):
        """
        Resolve a key to its Argument, or None when there is none.

        - int: positional slot index (0-based).
        - str: option name or alias.
        """
        match key:
            case bool():
                return None
            case int():
                if 0 <= key < len(self._cardinals):
                    return self._arguments[self._cardinals[key]]
                return None
            case str():
                try:
                    return self._arguments[self._switches[key]]
                except KeyError:
                    return None
            case _:
                return None

    def reset(self):
        """
        Reset every distinct argument exactly once.
        """
        for argument in self._arguments:
            argument.reset()

    def names(self, argument, /):
        """
        Canonical name followed by the aliases of an argument, in registration order.
        """
        return (argument.name, *(alias for alias, name in self._aliases.items() if name == argument.name))

    def canonical(self, name, /):
        """
        Canonical option name for a name or alias (the name itself when it is not an alias).
        """
        return self._aliases.get(name, name)

    @property
    def cardinals(self):
        return tuple(self._arguments[ident] for ident in self._cardinals)

    @property
    def switches(self):
        return MappingProxyType({name: self._arguments[ident] for name, ident in self._switches.items()})

    @property
    def options(self):
        """
        Distinct options (no alias repetition), in registration order.
        """
        return tuple(argument for argument in self._arguments if argument.isoption)

    @property
    def aliases(self):
        return MappingProxyType(self._aliases)

    def __iter__(self):
        """
        Yield each distinct argument once: cardinals first, then options.
        """
        yield from self.cardinals
        yield from self.options

    def __len__(self):
        return len(self._arguments)

    def __contains__(self, key):
        return self.lookup(key) is not None

    def __repr__(self):
        return f"registry(cardinals={len(self._cardinals)}, options={len(self._arguments) - len(self._cardinals)})"


__all__ = (
    "Registry",
)
