"""
Inline tokenizer.

Turns one line of response text into an ordered list of inline spans:
PlainText, BoldText, Link ([label](url)) and BareLink (scheme://...).

The tokenizer is pure and total.  It never raises; anything it cannot
recognize, including unterminated markers, comes back verbatim as PlainText.
"""

import re

from .schemas import BareLink, BoldText, InlineNode, Link, PlainText

# Alternatives are tried in this order at every position, so a link wins over
# a bare URL starting at the same place, and a URL wins over bold.
# The label excludes "]" so "[a] b [c](d)" yields the link "[c](d)" only.
INLINE_PATTERN = re.compile(
    r"(?P<link>\[(?P<label>[^\]]+?)\]\((?P<url>[^)\s]+?)\))"
    r"|(?P<bare>[A-Za-z][A-Za-z0-9+.\-]*://\S+)"
    r"|(?P<bold>\*\*(?P<strong>.+?)\*\*)"
)


def tokenize_inline(line: str) -> list[InlineNode]:
    """
    Split a line into inline nodes.

    Concatenating ``node.text`` over the result gives back the line with the
    marker syntax removed.

    Args:
        line: A single line of text (may be empty)

    Returns:
        Ordered list of inline nodes; empty for an empty line
    """
    nodes: list[InlineNode] = []
    position = 0

    for match in INLINE_PATTERN.finditer(line):
        if match.start() > position:
            nodes.append(PlainText(text=line[position:match.start()]))

        if match.group("link"):
            nodes.append(Link(label=match.group("label"), url=match.group("url")))
        elif match.group("bare"):
            nodes.append(BareLink(url=match.group("bare")))
        else:
            nodes.append(BoldText(text=match.group("strong")))

        position = match.end()

    if position < len(line):
        nodes.append(PlainText(text=line[position:]))

    return nodes
