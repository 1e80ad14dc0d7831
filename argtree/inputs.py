r"""
Argtree input tree: nodes, kinds, matching, and typed lookup.

Overview
- InputKind: the tag carried by every node class (flag, boolean, the eight integer
  widths, string, string list, feature). Lookups match on this tag and never
  coerce between kinds.
- Input: the tree node. It owns a name, one or more flags, display descriptions,
  an ordered children mapping, and a value slot that starts Unset.
- Concrete inputs
  • FlagInput: presence-only switch (e.g., -v/--verbose); a match stores True.
  • BooleanInput: explicit true/false value (e.g., --color=false).
  • Int8Input .. Int64Input, UInt8Input .. UInt64Input: integers checked against
    the width and signedness of the kind.
  • StringInput: a single string, stored verbatim.
  • StringListInput: repeatable string, every match appends.
- Lookup: mixin shared by Input and CommandSet implementing the two-phase,
  first-match-wins search by name and the typed try_get_*/get_* accessors.

Token grammar (per input)
- flag only        : "--name"
- inline value     : "--name=value"  (value is everything after the first '=')
- spaced value     : "--name value"  (the next token is consumed verbatim)

Matching
- process_input(args, index) returns (matched, index). On a match of a spaced
  value the returned index points at the consumed value token; on a failure it is
  always the index that was passed in.
- When the token at index is not one of this node's flags, every child is tried in
  insertion order; the first child that accepts wins.

Example
    >>> tool = FlagInput("tool", ("-t", "--tool"), "run the tool")
    >>> depth = tool.add(Int32Input("depth", "--depth", "recursion depth"))
    >>> tool.process_input(["--depth", "3"], 0)
    (True, 1)
    >>> tool.get_int32("depth")
    3
"""
import functools
import operator
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum

from . import formatters
from .faults import StructuralMismatchError
from .utils import *


class InputKind(Enum):
    """
    tag identifying the value kind of an input node.

    the value is the user-facing label used in messages and help.
    """
    FLAG = "flag"
    BOOLEAN = "boolean"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    STRING = "string"
    STRING_LIST = "string-list"
    FEATURE = "feature"


# Boolean lookups read presence flags and features as well; every other kind only matches itself.
_accepts = {
    InputKind.BOOLEAN: frozenset({InputKind.FLAG, InputKind.BOOLEAN, InputKind.FEATURE}),
    InputKind.FLAG: frozenset({InputKind.FLAG, InputKind.BOOLEAN, InputKind.FEATURE}),
}

# Value returned when a lookup finds nothing (or finds an unset input).
_defaults = {
    InputKind.FLAG: lambda: False,
    InputKind.BOOLEAN: lambda: False,
    InputKind.INT8: lambda: -(1 << 7),
    InputKind.INT16: lambda: -(1 << 15),
    InputKind.INT32: lambda: -(1 << 31),
    InputKind.INT64: lambda: -(1 << 63),
    InputKind.UINT8: lambda: 0,
    InputKind.UINT16: lambda: 0,
    InputKind.UINT32: lambda: 0,
    InputKind.UINT64: lambda: 0,
    InputKind.STRING: lambda: None,
    InputKind.STRING_LIST: list,
    InputKind.FEATURE: lambda: None,
}


class Lookup:
    """
    Typed, fallible lookup over an ordered mapping of inputs.

    Subclasses provide _entries(), the mapping searched first. The search is
    explicitly two-phase and deterministic:
    1. the direct entries are checked for an exact name match, which ends the
       search at this level whether or not its value was set;
    2. otherwise each entry is searched recursively, in insertion order,
       and the first result that was found wins.

    Names are unique among siblings only, so a name repeated in two branches
    resolves to the branch that was added first.
    """

    def _entries(self):
        raise NotImplementedError

    def try_get(self, key, kind, default=Unset, /):
        """
        Look up the value of the input named key, expecting the given kind.

        Returns
        - (True, value) when the input exists and its value was set.
        - (False, default) when no input has that name, or when it exists but
          was never matched. The default falls back to the kind's sentinel
          (False, the lowest signed value, 0, None or an empty list).
        - Feature lookups return the feature node itself and are always found
          when the name exists.

        Raises
        - StructuralMismatchError when the name exists but the input is of a
          kind the requested kind cannot read.
        """
        if not isinstance(kind, InputKind):
            raise TypeError("try_get() second argument must be an input kind")

        default = coalesce(default, _defaults[kind]())
        entries = self._entries()
        if (input := entries.get(key)) is None:
            for entry in entries.values():
                found, value = entry.try_get(key, kind, default)
                if found:
                    return True, value
            return False, default

        if input.kind not in _accepts.get(kind, (kind,)):
            raise StructuralMismatchError(
                "input %r is a %s input, not a %s input" % (key, input.kind.value, kind.value),
                key=key,
                expected=kind,
                actual=input.kind,
            )
        if kind is InputKind.FEATURE:
            return True, input
        if input._value is Unset:
            return False, default
        return True, input.value

    def lookup(self, key, kind, default=Unset, /):
        """
        Same as try_get() but return only the value.
        """
        return self.try_get(key, kind, default)[1]


def _getters(kind, label, /):
    """
    Build the (try_get_<label>, get_<label>) pair bound to one input kind.
    """
    @rename("try_get_" + label)
    def try_getter(self, key, default=Unset, /):
        return self.try_get(key, kind, default)

    @rename("get_" + label)
    def getter(self, key, default=Unset, /):
        return self.try_get(key, kind, default)[1]

    try_getter.__doc__ = "Look up a %s input by name; return (found, value)." % kind.value
    getter.__doc__ = "Look up a %s input by name; return its value or the default." % kind.value
    return try_getter, getter


for _label, _kind in (
        ("boolean", InputKind.BOOLEAN),
        ("feature", InputKind.FEATURE),
        ("int8", InputKind.INT8),
        ("int16", InputKind.INT16),
        ("int32", InputKind.INT32),
        ("int64", InputKind.INT64),
        ("uint8", InputKind.UINT8),
        ("uint16", InputKind.UINT16),
        ("uint32", InputKind.UINT32),
        ("uint64", InputKind.UINT64),
        ("string", InputKind.STRING),
        ("string_list", InputKind.STRING_LIST),
):
    _try_getter, _getter = _getters(_kind, _label)
    setattr(Lookup, _try_getter.__name__, _try_getter)
    setattr(Lookup, _getter.__name__, _getter)

del _label, _kind, _try_getter, _getter


def _sanitize_identity(cls, metadata, /):
    """
    Internal: validate and normalize the identity fields of an input.

    - name: non-empty string (trimmed).
    - flags: a single string or an iterable of strings; non-empty, no blank or
      duplicated flags. Order is preserved because help prints flags in order.
    - description: string (Unset becomes "").
    - long_description: string (Unset becomes None).

    Raises
    - TypeError for wrong types, ValueError for empty or duplicated values.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if isinstance(flags := metadata["flags"], str):
        flags = (flags,)
    elif not isinstance(flags, Iterable):
        raise TypeError(f"{cls.__typename__} 'flags' must be a string or an iterable of strings")

    sanitized = []
    for flag in flags:
        if not isinstance(flag, str):
            raise TypeError(f"{cls.__typename__} flags must be strings")
        elif not flag.strip():
            raise ValueError(f"{cls.__typename__} flags cannot be empty-strings")
        elif flag in sanitized:
            raise ValueError(f"{cls.__typename__} flags cannot contain duplicates")
        sanitized.append(flag)
    if not sanitized:
        raise ValueError(f"{cls.__typename__} must specify at least one flag")
    metadata["flags"] = sanitized

    if not isinstance(description := metadata["description"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    metadata["description"] = coalesce(description, "")

    if not isinstance(long_description := metadata["long_description"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'long_description' must be a string")
    metadata["long_description"] = coalesce(long_description)


class Input(Lookup, ABC):
    """
    A named, flag-matchable node of the input tree.

    Responsibilities
    - Identity: name (unique among siblings), flags (aliases recognized on the
      command line), description and long_description (help only).
    - Ownership: children, keyed by name, in insertion order. Insertion order is
      the order used for matching, lookup and help output.
    - Matching: contains_flag() and process_input(); subclasses decide how a
      matched token is consumed through _consume().
    - Value: a slot that starts Unset (read as None through .value) and is
      written only by a successful match.

    Sibling flags must be disjoint; this is not enforced.
    """
    __kind__ = Unset
    __typename__ = "input"
    __valued__ = False

    name = mirror("name")
    flags = mirror("flags")
    description = mirror("description")
    long_description = mirror("long_description")
    children = mirror("children")
    value = mirror("value")

    def __init_subclass__(cls, /, kind=Unset, **options):
        super().__init_subclass__(**options)
        cls.__typename__ = re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__).lower()
        if kind is not Unset:
            if not isinstance(kind, InputKind):
                raise TypeError(f"{cls.__typename__} 'kind' must be an input kind")
            cls.__kind__ = kind

    def __init__(self, name, flags, description=Unset, long_description=Unset, /):
        """
        Build an input node.

        Parameters
        - name: str
          Key under which the node is stored in its parent and found by lookups.
        - flags: str | Iterable[str]
          Command-line aliases, e.g. "-o" or ("-o", "--output"). Matching is exact,
          plus the "<flag>=<value>" inline form.
        - description: str
          One-line help text.
        - long_description: str
          Detailed help text, wrapped to the terminal width in detailed help.
        """
        metadata = {
            "name": name,
            "flags": flags,
            "description": description,
            "long_description": long_description,
        }
        _sanitize_identity(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._children = {}
        self._value = Unset

    @property
    def kind(self):
        return type(self).__kind__

    def _entries(self):
        return self._children

    def __getitem__(self, key, /):
        """
        Directly address a child by name (or by an input carrying that name).
        """
        return self._children[key.name if isinstance(key, Input) else key]

    def __contains__(self, key, /):
        return (key.name if isinstance(key, Input) else key) in self._children

    def get(self, key, default=None, /):
        try:
            return self[key]
        except KeyError:
            return default

    def add(self, input, /):
        """
        Attach a child input under its name and return it.

        A child with the same name replaces the previous one. The tree must be
        complete before parsing starts.
        """
        if not isinstance(input, Input):
            raise TypeError(f"{type(self).__typename__} children must be inputs")
        if input is self:
            raise ValueError(f"{type(self).__typename__} cannot be its own child")
        self._children[input.name] = input
        return input

    def contains_flag(self, token, /):
        """
        Return True when token is one of the flags or starts with "<flag>=".
        """
        return any(token == flag or token.startswith(flag + "=") for flag in self._flags)

    def starts_with(self, char, /):
        """
        Return True when a flag, ignoring leading '-', '/' and '\\', starts with char.

        The comparison is case-insensitive; it drives "did you mean" suggestions.
        """
        if not isinstance(char, str) or len(char) != 1:
            raise TypeError("starts_with() argument must be a single character")
        return any(flag.lstrip("-/\\")[:1].lower() == char.lower() for flag in self._flags)

    def process_input(self, args, index, /):
        """
        Try to match args[index] against this node or, failing that, its children.

        Returns
        - (True, index') on a match, where index' is the position of the last token
          consumed (the flag itself, or its spaced value).
        - (False, index) when nothing in this subtree accepts the token or the
          value is malformed; neither the index nor any value is changed.
        """
        if not 0 <= index < len(args):
            return False, index

        if not self.contains_flag(args[index]):
            for child in self._children.values():
                matched, advanced = child.process_input(args, index)
                if matched:
                    return True, advanced
            return False, index

        return self._consume(args, index)

    @abstractmethod
    def _consume(self, args, index, /):
        """
        Consume the matched token at args[index]; same contract as process_input().
        """
        raise NotImplementedError

    def format(self, pre=0, midpoint=0, detailed=False, /, *, width=formatters.DEFAULT_WIDTH):
        """
        Return the help lines for this node alone (see argtree.formatters.format).
        """
        return formatters.format(self, pre, midpoint, detailed, width=width)

    def format_recursive(self, pre=0, midpoint=0, detailed=False, /, *, width=formatters.DEFAULT_WIDTH):
        """
        Return the help lines for this node and every descendant.
        """
        return formatters.format_recursive(self, pre, midpoint, detailed, width=width)

    def __rich_repr__(self):
        yield "name", self._name
        yield "flags", self.flags
        if self._value is not Unset:
            yield "value", self.value
        if self._children:
            yield "children", list(self._children)

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__typename__,
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        )


class FlagInput(Input, kind=InputKind.FLAG):
    """
    Presence-only switch. A matching token stores True and consumes nothing else.

    "--flag=anything" is also accepted as presence; the inline text is ignored.
    """

    def _consume(self, args, index, /):
        self._value = True
        return True, index


class ValueInput(Input):
    """
    Base for inputs that carry a value, given inline (--name=value) or spaced (--name value).

    Subclasses implement _convert(text), returning the converted value or Unset
    when the text is not acceptable; _store(value) writes the slot.
    """
    __valued__ = True

    def _consume(self, args, index, /):
        token = args[index]
        if "=" in token:
            # Everything after the first '=' so values may contain '=' themselves.
            text = token.partition("=")[2]
            consumed = index
        elif index + 1 < len(args):
            text = args[index + 1]
            consumed = index + 1
        else:
            return False, index

        if (value := self._convert(text)) is Unset:
            return False, index
        self._store(value)
        return True, consumed

    @abstractmethod
    def _convert(self, text, /):
        raise NotImplementedError

    def _store(self, value, /):
        self._value = value


class BooleanInput(ValueInput, kind=InputKind.BOOLEAN):
    """
    Explicit boolean value: "true" or "false", case-insensitive.
    """

    def _convert(self, text, /):
        return {"true": True, "false": False}.get(text.strip().lower(), Unset)


class IntegerInput(ValueInput):
    """
    Base for the fixed-width integer inputs.

    Subclasses declare their width and signedness as class keywords:
        class Int8Input(IntegerInput, kind=InputKind.INT8, bits=8, signed=True): ...

    Accepted text: optional surrounding whitespace, an optional sign and ASCII
    digits. Values outside [minimum, maximum] are rejected, as is an empty value.
    """
    minimum = Unset
    maximum = Unset

    def __init_subclass__(cls, /, bits=Unset, signed=Unset, **options):
        super().__init_subclass__(**options)
        if bits is Unset:
            return
        if not isinstance(bits, int) or bits < 1:
            raise TypeError(f"{cls.__typename__} 'bits' must be a positive integer")
        if signed:
            cls.minimum, cls.maximum = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            cls.minimum, cls.maximum = 0, (1 << bits) - 1

    def _convert(self, text, /):
        if not (match := re.fullmatch(r"\s*([+-]?[0-9]+)\s*", text)):
            return Unset
        if not self.minimum <= (value := int(match[1])) <= self.maximum:
            return Unset
        return value


class Int8Input(IntegerInput, kind=InputKind.INT8, bits=8, signed=True): ...
class Int16Input(IntegerInput, kind=InputKind.INT16, bits=16, signed=True): ...
class Int32Input(IntegerInput, kind=InputKind.INT32, bits=32, signed=True): ...
class Int64Input(IntegerInput, kind=InputKind.INT64, bits=64, signed=True): ...
class UInt8Input(IntegerInput, kind=InputKind.UINT8, bits=8, signed=False): ...
class UInt16Input(IntegerInput, kind=InputKind.UINT16, bits=16, signed=False): ...
class UInt32Input(IntegerInput, kind=InputKind.UINT32, bits=32, signed=False): ...
class UInt64Input(IntegerInput, kind=InputKind.UINT64, bits=64, signed=False): ...


class StringInput(ValueInput, kind=InputKind.STRING):
    """
    Single string value, stored verbatim. An empty inline value ("--name=") is kept as "".
    """

    def _convert(self, text, /):
        return text


class StringListInput(ValueInput, kind=InputKind.STRING_LIST):
    """
    Repeatable string value; every match appends, in command-line order.
    """

    def _convert(self, text, /):
        return text

    def _store(self, value, /):
        if self._value is Unset:
            self._value = []
        self._value.append(value)


__all__ = (
    # Tags
    "InputKind",

    # Base types
    "Lookup",
    "Input",
    "ValueInput",
    "IntegerInput",

    # Concrete inputs
    "FlagInput",
    "BooleanInput",
    "Int8Input",
    "Int16Input",
    "Int32Input",
    "Int64Input",
    "UInt8Input",
    "UInt16Input",
    "UInt32Input",
    "UInt64Input",
    "StringInput",
    "StringListInput",
)
