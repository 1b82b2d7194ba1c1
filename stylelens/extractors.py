"""
Rule-based extractors for section bodies.

- extract_vibe_fields: labeled key/value lines of the Vibe section
- extract_list_items:  bullet lines of list sections (Updates, Shop, Next Looks)
- extract_fallback_lines: verbatim body lines, used when structure is missing

All three are pure functions over a list of lines and never raise.
"""

import re
from typing import Optional

from .schemas import ListItem, RichLine, VibeFields
from .tokenizer import tokenize_inline

BULLET_MARKER = "*"

# Matches the marker plus any whitespace after it ("* item" → "item")
BULLET_PATTERN = re.compile(r"^\*\s*")

# Field name on VibeFields → label as it appears in the response.
# Each label is scanned for independently; order here is only the order of
# the scans, not an expectation about the response layout.
VIBE_LABELS = {
    "detected_pieces": "Detected Pieces",
    "aesthetic": "Aesthetic",
    "advice": "Advice",
}


def _strip_label(line: str, label: str) -> str:
    """Remove bold markers and the first occurrence of the label (with its colon)."""
    text = line.replace("**", "")
    text = re.sub(rf"{re.escape(label)}\s*:?", "", text, count=1, flags=re.IGNORECASE)
    return text.strip()


def _find_field(lines: list[str], label: str) -> Optional[str]:
    """First line containing the label (case-insensitive), reduced to its value."""
    needle = label.lower()
    for line in lines:
        if needle in line.lower():
            return _strip_label(line, label) or None
    return None


def extract_vibe_fields(body_lines: list[str]) -> Optional[VibeFields]:
    """
    Extract Aesthetic / Detected Pieces / Advice from the Vibe body.

    Returns None when none of the labels is found, so the caller can fall back
    to rendering the raw lines.
    """
    values = {field: _find_field(body_lines, label) for field, label in VIBE_LABELS.items()}
    if not any(values.values()):
        return None
    return VibeFields(**values)


def extract_list_items(lines: list[str]) -> list[ListItem]:
    """
    Extract bullet items from a section.

    The first line is the heading and is always skipped.  Only lines whose
    trimmed text starts with the bullet marker are kept; prose, blank lines
    and anything before the first bullet are dropped silently.
    """
    items: list[ListItem] = []
    for line in lines[1:]:
        stripped = line.strip()
        if not stripped.startswith(BULLET_MARKER):
            continue
        content = BULLET_PATTERN.sub("", stripped)
        items.append(ListItem(nodes=tokenize_inline(content)))
    return items


def extract_fallback_lines(body_lines: list[str]) -> list[RichLine]:
    """Tokenize every non-blank body line as-is."""
    return [
        RichLine(nodes=tokenize_inline(line.strip()))
        for line in body_lines
        if line.strip()
    ]
