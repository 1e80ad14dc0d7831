"""
Argtree command set: the registry at the root of an input tree.

What this module provides
- CommandSet: an ordered mapping of top-level inputs (usually features) with:
  • Dispatch: process_args(argv) resolves argv[0] to a feature, lets it consume
    the remaining tokens, verifies it when required and executes it.
  • Name resolution: get_input_name/get_top_level/is_top_level accept a name, a
    flag or a "flag=value" token.
  • Typed lookup: every try_get_*/get_* accessor of the Lookup mixin, searching
    the whole tree.
  • Help output: generic (top level), all (recursive) and single-entry help,
    including "did you mean" suggestions for unknown names.

Output
- Help lines and faults go to one injected rich console; its width drives the
  wrapping of long descriptions. With paging enabled and an interactive
  terminal, output pauses every (height - 3) lines and once at the end.

Example
    >>> commands = CommandSet("mytool 1.0", name="mytool")
    >>> help = commands.add(Help())
    >>> copy = commands.add(Copy("copy", ("cp", "copy"), "copy files"))
    >>> force = copy.add(FlagInput("force", ("-f", "--force"), "overwrite targets"))
    >>> commands.process_args(["cp", "-f", "a.txt", "b.txt"])
    True
    >>> commands.get_boolean("force")
    True
"""
import functools
import operator
from collections.abc import Iterable, Sequence

from rich.console import Console

from .faults import FaultCode, MissingRequiredInputError, UnresolvedTopLevelError, getdoc, trigger
from .features import Feature, Help
from .inputs import Input, Lookup
from .utils import *


def _sanitize_lines(cls, label, lines, /):
    """
    Internal: normalize header/footer text to a list of lines.

    Accepts a single string or an iterable of strings.
    """
    if isinstance(lines, str):
        return [lines]
    if not isinstance(lines, Iterable):
        raise TypeError(f"{cls.__typename__} '{label}' must be a string or an iterable of strings")
    lines = list(lines)
    if not all(isinstance(line, str) for line in lines):
        raise TypeError(f"{cls.__typename__} '{label}' lines must be strings")
    return lines


class CommandSet(Lookup):
    """
    Registry of top-level inputs plus the dispatch and help entry points.

    Parameters
    - header, footer: str | Iterable[str]
      Lines printed before and after the options in generic and full help.
    - name: str
      Program name shown in fault headers (overridden by __main__.__prog__).
    - console: rich.console.Console
      Sink for help lines and faults, and the width source for wrapping.
    - pre, midpoint: int
      Indentation of help entries and the column where descriptions start.
    - paging: bool
      Pause long help output on interactive terminals.
    - fancy, colorful: bool
      Fault rendering options (panel, palette).
    """
    __typename__ = "command-set"

    name = mirror("name")
    header = mirror("header")
    footer = mirror("footer")
    inputs = mirror("inputs")

    def __init__(
            self,
            header=(),
            footer=(),
            *,
            name=Unset,
            console=Unset,
            pre=2,
            midpoint=30,
            paging=False,
            fancy=False,
            colorful=False,
    ):
        cls = type(self)
        if not isinstance(name, str | Unset):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not isinstance(console, Console | Unset):
            raise TypeError(f"{cls.__typename__} 'console' must be a rich console")
        for label, object in (("pre", pre), ("midpoint", midpoint)):
            if not isinstance(object, int) or isinstance(object, bool):
                raise TypeError(f"{cls.__typename__} '{label}' must be an integer")
            if object < 0:
                raise ValueError(f"{cls.__typename__} '{label}' cannot be negative")

        self._header = _sanitize_lines(cls, "header", header)
        self._footer = _sanitize_lines(cls, "footer", footer)
        self._name = name
        self._console = coalesce(console, Console())
        self._pre = pre
        self._midpoint = midpoint
        self._paging = bool(paging)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._inputs = {}
        self._default_feature = None

    @property
    def console(self):
        return self._console

    @property
    def default_feature(self):
        """
        Feature whose children are listed at top level in generic and full help.
        """
        return self._default_feature

    @default_feature.setter
    def default_feature(self, feature):
        if not isinstance(feature, Feature | None):
            raise TypeError(f"{type(self).__typename__} 'default_feature' must be a feature or None")
        self._default_feature = feature

    def _entries(self):
        return self._inputs

    def add(self, input, /):
        """
        Register a top-level input under its name and return it.

        Raises
        - ValueError when another entry already uses that name.
        """
        if not isinstance(input, Input):
            raise TypeError(f"{type(self).__typename__} entries must be inputs")
        if input.name in self._inputs:
            raise ValueError(f"{type(self).__typename__} already has an entry named {input.name!r}")
        self._inputs[input.name] = input
        return input

    def add_from(self, input, /):
        """
        Register every child of input at top level; names must not be taken yet.

        Useful when an application has default behaviour whose options must be
        reachable (and listed) without naming a feature first.
        """
        if not isinstance(input, Input):
            raise TypeError(f"{type(self).__typename__} entries must be inputs")
        for child in input.children.values():
            self.add(child)

    def __getitem__(self, key, /):
        return self._inputs[key.name if isinstance(key, Input) else key]

    def __contains__(self, key, /):
        return (key.name if isinstance(key, Input) else key) in self._inputs

    def get(self, key, default=None, /):
        """
        Return the top-level entry named key (or carrying key's name), else default.
        """
        try:
            return self[key]
        except KeyError:
            return default

    def get_input_name(self, token, /):
        """
        Resolve a name, a flag or a "flag=value" token to a top-level entry name.

        Only the text before the first '=' is compared, against every entry's
        name and flags, in insertion order. Returns "" when nothing matches.
        """
        head = token.partition("=")[0]
        for key, input in self._inputs.items():
            if input.name == head or input.contains_flag(head):
                return key
        return ""

    def get_top_level(self, token, /):
        """
        Return the top-level entry resolved from token, or None.
        """
        if not (key := self.get_input_name(token)):
            return None
        return self._inputs.get(key)

    def is_top_level(self, token, /):
        return len(self.get_input_name(token)) > 0

    def _format(self, input, detailed, /, *, recursive=False):
        method = input.format_recursive if recursive else input.format
        return method(self._pre, self._midpoint, detailed, width=self._console.width)

    def _overview(self, detailed, /, *, recursive=False):
        lines = [*self._header, "Available options:"]
        for input in self._inputs.values():
            lines.extend(self._format(input, detailed, recursive=recursive))
        if self._default_feature is not None:
            for input in self._default_feature.children.values():
                lines.extend(self._format(input, detailed))
        lines.extend(self._footer)
        self._write(lines)

    def output_generic_help(self, detailed=False):
        """
        Print the header, every top-level entry, the default feature's children and the footer.
        """
        self._overview(detailed)

    def output_all_help(self, detailed=False):
        """
        Same as output_generic_help(), but every top-level entry is printed with its whole subtree.
        """
        self._overview(detailed, recursive=True)

    def output_feature_help(self, name, detailed=False):
        """
        Print the help of one top-level entry, or suggestions when it cannot be resolved.

        - A missing or punctuation-only name ("", "--") falls back to generic help.
        - A resolvable name prints "Available options for <name>:" and its subtree.
        - Otherwise every entry having a flag that starts with the first letter of
          the name (leading '-', '/' and '\\' ignored) is suggested; nothing is
          printed when there is no candidate.
        """
        if not isinstance(name, str | None):
            raise TypeError("output_feature_help() first argument must be a string or None")

        if not (trimmed := (name or "").lstrip("-/\\")):
            self.output_generic_help(detailed)
            return

        if key := self.get_input_name(name):
            self._write([
                f"Available options for {key}:",
                *self._format(self._inputs[key], detailed, recursive=True),
            ])
            return

        candidates = [input for input in self._inputs.values() if input.starts_with(trimmed[0])]
        if candidates:
            lines = [f"\"{name}\" not found. Did you mean:"]
            for input in candidates:
                lines.extend(self._format(input, detailed))
            self._write(lines)

    def _write(self, lines, /):
        """
        Print lines verbatim (no markup, no wrapping), pausing when paging applies.
        """
        console = self._console
        paging = self._paging and console.is_terminal
        page = console.height - 3
        for count, line in enumerate(lines, 1):
            console.out(line, highlight=False)
            if paging and page > 0 and count % page == 0 and count != len(lines):
                self._pause()
        if paging:
            self._pause()

    def _pause(self):
        self._console.out("", highlight=False)
        self._console.input("Press enter to continue...")

    def trigger(self, fault, /, **options):
        """
        Surface a fault on this command set's console with its rendering options.

        Explicit options take precedence over the command set's defaults.
        """
        trigger(fault, **{
            "tool": self,
            "console": self._console,
            "fancy": self._fancy,
            "colorful": self._colorful,
        } | options)

    def process_args(self, args, /):
        """
        Dispatch an argument vector (without the program name).

        Returns
        - True for an empty vector, after printing the full help.
        - True after a built-in help feature printed its help.
        - False when args[0] is not a top-level feature (a fault and suggestions
          are printed), when the feature rejects its tokens, or when a feature
          requiring inputs fails verify_inputs() (a fault and its help are printed).
        - Otherwise the result of the feature's execute().
        """
        if not isinstance(args, Sequence) or isinstance(args, str):
            raise TypeError(f"{type(self).__typename__} arguments must be a sequence of strings")

        if not args:
            self.output_all_help()
            return True

        feature = self.get_top_level(token := args[0])
        if not isinstance(feature, Feature):
            self.trigger(
                UnresolvedTopLevelError(f"'{token}' is not a valid feature flag"),
                title="unresolved feature",
                code=FaultCode.UNRESOLVED_TOP_LEVEL,
                hint="use one of the options listed by the help feature",
                docs=getdoc(FaultCode.UNRESOLVED_TOP_LEVEL),
                token=token,
            )
            self.output_feature_help(token)
            return False

        feature.commandset = self
        if isinstance(feature, Help):
            feature.process_args(args, 0, self)
            return True

        if len(args) > 1 and not feature.process_args(args, 1):
            self.output_feature_help(feature.name)
            return False

        if feature.requires_inputs and not feature.verify_inputs():
            self.trigger(
                MissingRequiredInputError(f"'{feature.name}' is missing required inputs"),
                title="missing required input",
                code=FaultCode.MISSING_REQUIRED_INPUT,
                hint=f"see the options for {feature.name} below",
                docs=getdoc(FaultCode.MISSING_REQUIRED_INPUT),
                feature=feature,
            )
            self.output_feature_help(feature.name)
            return False

        return bool(feature.execute())

    def __rich_repr__(self):
        if self._name is not Unset:
            yield "name", self._name
        yield "inputs", list(self._inputs)
        if self._default_feature is not None:
            yield "default_feature", self._default_feature.name

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__typename__,
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        )


__all__ = (
    "CommandSet",
)
