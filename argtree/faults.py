"""
Argtree faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the command
  set reports. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- InputException: base type for user-facing faults; carries message + options and
  knows how to render itself with rich (plain, colorful, or inside a panel).
- StructuralMismatchError: programmer error raised by typed lookups when a name
  resolves to an input of another kind. It is raised, never rendered.
- trigger(): central entry point to surface a user-facing fault.
- getdoc(): optional description lookup for a code from the host application.

Policy
- User-input problems never raise. Malformed values only fail the single match
  attempt (the token is kept as unmatched input); unresolved features and missing
  required inputs are rendered to the command set's console and reported as a
  False result.
- Only mistakes in the host's tree definition raise.

Integration
- CommandSet.trigger(fault, **ctx) merges its console/fancy/colorful settings and
  calls trigger(fault, **options).
- Hosts may define __styles__, __codes__, __docs__ and __prog__ in __main__.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - dispatch (2110x)
      • UNRESOLVED_TOP_LEVEL, MISSING_REQUIRED_INPUT
    - tree definition (2310x)
      • STRUCTURAL_MISMATCH

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- dispatch errors (21xxx) ---
    UNRESOLVED_TOP_LEVEL        = 21101
    MISSING_REQUIRED_INPUT      = 21102

    # --- tree definition errors (23xxx) ---
    STRUCTURAL_MISMATCH         = 23101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class InputException(Exception):
    """
    user-facing fault with rich rendering.

    options (all optional, merged by trigger())
    - title, code, hint, docs: copy shown to the user.
    - tool: the reporting command set (its name is the fallback program name).
    - console: destination console; defaults to the module stderr console.
    - fancy: render inside a panel.
    - colorful: apply the palette (overridable through __main__.__styles__).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

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

        tool = self.options.get("tool")
        prog = text(getattr(main, "__prog__", getattr(tool, "name", None) or "argtree"), styler("prog-name"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " - ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(str(self.options.get("title", "error")).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" -> ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnresolvedTopLevelError(InputException): ...
class MissingRequiredInputError(InputException): ...


class StructuralMismatchError(TypeError):
    """
    a typed lookup found the requested name, but the stored input is of another kind.

    this signals a mistake in the host's tree definition (asking a string input
    for an integer, for example), so it is raised immediately instead of being
    rendered or silently defaulted.

    attributes
    - key: the requested input name.
    - expected: the requested kind.
    - actual: the kind that was found.
    """
    code = FaultCode.STRUCTURAL_MISMATCH

    def __init__(self, message, /, *, key=None, expected=None, actual=None):
        super().__init__(message)
        self.message = message
        self.key = key
        self.expected = expected
        self.actual = actual


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see InputException).
    - options are merged into the fault via __replace__(**options) before triggering.

    typical options
    - tool, console, fancy, colorful, title, code, hint, docs, and any other
      context the reporter may want to keep (e.g., input, args).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "InputException",
    "UnresolvedTopLevelError",
    "MissingRequiredInputError",
    "StructuralMismatchError",
    "FaultCode",
    "trigger",
    "getdoc",
)
