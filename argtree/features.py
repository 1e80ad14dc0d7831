"""
Argtree features: the command nodes of the input tree.

Overview
- Feature: a flag-kind input that can be dispatched to. Besides its typed
  children it collects every token it could not match (Feature.inputs), which is
  where positional values such as file paths end up.
- Built-ins
  • Help: "<prog> help [name]" prints generic help or the help of one entry.
  • HelpExtended: same, with long descriptions, recursively.
  • Version: prints "Version: <version>".

Lifecycle of a dispatched feature (see CommandSet.process_args)
1. process_args(args, 1): match the tokens after the feature flag.
2. verify_inputs(): only when requires_inputs is True.
3. execute(): the feature's work; its boolean result is the dispatch result.
"""
from abc import abstractmethod
from collections.abc import Sequence
from importlib import metadata

from rich.console import Console

from .inputs import FlagInput, InputKind
from .utils import *

console = Console()


class Feature(FlagInput, kind=InputKind.FEATURE):
    """
    A command node: a flag-kind input owning the unmatched tokens of its parse.

    Subclasses implement verify_inputs() and execute(), and set requires_inputs
    when verify_inputs() must pass before execute() runs.

    Example
        >>> class Copy(Feature):
        ...     requires_inputs = True
        ...     def verify_inputs(self):
        ...         return len(self.inputs) == 2
        ...     def execute(self):
        ...         source, target = self.inputs
        ...         ...
        ...         return True
        >>> copy = Copy("copy", ("cp", "copy"), "copy a file")
    """
    requires_inputs = False

    inputs = mirror("inputs")

    def __init__(self, name, flags, description=Unset, long_description=Unset, /):
        super().__init__(name, flags, description, long_description)
        self._inputs = []
        self._commandset = None

    @property
    def commandset(self):
        """
        Command set that dispatched this feature last, or None.

        Assigned by CommandSet.process_args() before the feature runs, so
        execute() can reach the set's console and lookups.
        """
        return self._commandset

    @commandset.setter
    def commandset(self, commandset):
        if commandset is not None and not hasattr(commandset, "console"):
            raise TypeError(f"{type(self).__typename__} 'commandset' must be a command set or None")
        self._commandset = commandset

    def process_args(self, args, index=0, /):
        """
        Offer every token from index on to process_input().

        Tokens that match (together with any value they consume) are skipped;
        every other token is appended verbatim to inputs.

        Returns
        - True for an empty args, and once the scan completes.
        - False when index is outside [0, len(args)); nothing is recorded.
        """
        if not isinstance(args, Sequence) or isinstance(args, str):
            raise TypeError(f"{type(self).__typename__} arguments must be a sequence of strings")
        if not args:
            return True
        if not 0 <= index < len(args):
            return False

        while index < len(args):
            matched, index = self.process_input(args, index)
            if not matched:
                self._inputs.append(args[index])
            index += 1
        return True

    @abstractmethod
    def verify_inputs(self):
        """
        Return True when the collected values and inputs are acceptable.
        """
        raise NotImplementedError

    @abstractmethod
    def execute(self):
        """
        Run the feature; the result is reported by CommandSet.process_args().
        """
        raise NotImplementedError

    def __rich_repr__(self):
        yield from super().__rich_repr__()
        if self._inputs:
            yield "inputs", self.inputs


class Help(Feature):
    """
    Built-in help: with a following token prints the help of that entry (or
    suggestions), otherwise the generic help of the command set.
    """
    __defaults__ = ("?", "h", "help")
    __display__ = (
        "Help",
        "Show this help",
        "Built-in to most of the programs is a basic help text.",
    )

    def __init__(self, flags=Unset, /):
        name, description, long_description = self.__display__
        super().__init__(name, coalesce(flags, self.__defaults__), description, long_description)

    def process_args(self, args, index=0, /, commandset=None):
        """
        Print help through commandset; always succeeds.

        Only args[1] is considered: it names the entry to describe.
        """
        if commandset is not None:
            if len(args) > 1:
                commandset.output_feature_help(args[1])
            else:
                commandset.output_generic_help()
        return True

    def verify_inputs(self):
        return True

    def execute(self):
        return True


class HelpExtended(Help):
    """
    Built-in detailed help: like Help, but with long descriptions, and the whole
    tree when no entry is named.
    """
    __defaults__ = ("??", "hd", "help-detailed")
    __display__ = (
        "Help (Detailed)",
        "Show this detailed help",
        "Display a detailed help text to the screen.",
    )

    def process_args(self, args, index=0, /, commandset=None):
        if commandset is not None:
            if len(args) > 1:
                commandset.output_feature_help(args[1], detailed=True)
            else:
                commandset.output_all_help(detailed=True)
        return True


class Version(Feature):
    """
    Built-in version report.

    The version is read from the installed distribution metadata when a
    distribution name is given, otherwise from __main__.__version__. Any failure
    to obtain it is printed in place of the version.

    Output goes to the console given here, else to the console of the command
    set that dispatched it, else to stdout.
    """
    __defaults__ = ("v", "version")

    def __init__(self, flags=Unset, /, *, distribution=Unset, console=Unset):
        super().__init__(
            "Version",
            coalesce(flags, self.__defaults__),
            "Prints version",
            "Prints current program version."
        )
        if not isinstance(distribution, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'distribution' must be a string")
        if not isinstance(console, Console | Unset):
            raise TypeError(f"{type(self).__typename__} 'console' must be a rich console")
        self._distribution = distribution
        self._console = console

    def version(self):
        """
        Return the program version, or the text of the error that prevented reading it.
        """
        try:
            if self._distribution is not Unset:
                return metadata.version(self._distribution)
            return str(__import__("__main__").__version__)
        except Exception as error:
            return str(error)

    def verify_inputs(self):
        return True

    def execute(self):
        if self._console is not Unset:
            target = self._console
        elif self._commandset is not None:
            target = self._commandset.console
        else:
            target = console
        target.out(f"Version: {self.version()}", highlight=False)
        return True


__all__ = (
    # Base types
    "Feature",

    # Built-ins
    "Help",
    "HelpExtended",
    "Version",
)
