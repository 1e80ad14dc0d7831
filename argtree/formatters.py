"""
Argtree help formatting (pure functions over the input tree).

Every function returns plain strings; nothing here touches a console. The
command set decides where the lines go (see CommandSet._write).

Layout of one help entry
    <pre spaces><flags><padding up to midpoint><description>
        <long description, wrapped, indented pre + 4>   (detailed help only)
        <blank line>                                    (detailed help only)

- Flags are joined with ", "; inputs that carry a value show every flag as
  "<flag>=" so users can tell switches from options at a glance.
- Children are indented by four spaces per level, both the flags and the
  description column.
"""
DEFAULT_WIDTH = 80
"""Terminal width assumed when the real one is unknown (0 or None)."""

TAB = 4


def format_flags(node, /):
    """
    Join the flags of node with ", " ("--out=, -o=" for value-bearing inputs).
    """
    suffix = "=" if getattr(type(node), "__valued__", False) else ""
    return ", ".join(flag + suffix for flag in node.flags)


def format_standard(node, pre=0, midpoint=0, /):
    """
    Return the one-line help entry of node.

    The description starts at column midpoint; when the flags already reach or
    pass that column (or midpoint is 0) a single space separates them.
    """
    head = " " * max(pre, 0) + format_flags(node)
    padding = midpoint - len(head) if midpoint > len(head) else 1
    return head + " " * padding + node.description


def format_long_description(node, pre=0, /, *, width=DEFAULT_WIDTH):
    """
    Wrap the long description of node into indented lines.

    - Returns [] when there is no long description.
    - "\\r\\n" is normalized to "\\n"; every "\\n" forces a line break.
    - Words (split on single spaces, so runs of spaces survive) are packed while
      the line stays shorter than width - 1; a single over-long word still gets a
      line of its own.
    - Every line is indented pre + 4 spaces and a blank line closes the block.
    """
    if not (text := node.long_description):
        return []

    limit = (width or DEFAULT_WIDTH) - 1
    indent = " " * (max(pre, 0) + TAB)
    lines = []
    for paragraph in text.replace("\r\n", "\n").split("\n"):
        line, fresh = indent, True
        for word in paragraph.split(" "):
            if fresh:
                line, fresh = line + word, False
            elif len(line) + len(word) < limit:
                line += " " + word
            else:
                lines.append(line)
                line = indent + word
        lines.append(line)

    lines.append("")
    return lines


def format(node, pre=0, midpoint=0, detailed=False, /, *, width=DEFAULT_WIDTH):
    """
    Return the help lines of node alone: its standard line, plus the wrapped
    long description when detailed.
    """
    lines = [format_standard(node, pre, midpoint)]
    if detailed:
        lines.extend(format_long_description(node, pre, width=width))
    return lines


def format_recursive(node, pre=0, midpoint=0, detailed=False, /, *, width=DEFAULT_WIDTH, level=0):
    """
    Return the help lines of node followed by all of its descendants, depth-first
    in insertion order. Each level below the first shifts pre and midpoint by 4.
    """
    shift = TAB * level
    lines = format(node, pre + shift, midpoint + shift, detailed, width=width)
    for child in node.children.values():
        lines.extend(format_recursive(child, pre, midpoint, detailed, width=width, level=level + 1))
    return lines


__all__ = (
    # Functions
    "format_flags",
    "format_standard",
    "format_long_description",
    "format",
    "format_recursive",

    # Constants
    "DEFAULT_WIDTH",
)
