"""
Document parser: raw analysis text → ParsedDocument.

Splits the response on "## " heading markers, classifies every fragment into a
Category using an ordered rule list, then runs the extractor that fits the
category.

Pipeline position: RawResponse → DocumentParser → ParsedDocument.
The parser is a syntactic splitter; it never fails.  Missing structure is
reported in ParsedDocument.warnings and degrades to verbatim lines.
"""

import re
from typing import Callable, Optional

from .extractors import extract_fallback_lines, extract_list_items, extract_vibe_fields
from .logger import get_module_logger
from .schemas import Category, ParsedDocument, ParsedSection, RawResponse, Section

logger = get_module_logger("document")

# "##" followed by whitespace, anywhere in the text
HEADING_MARKER = re.compile(r"##\s+")


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    return lambda heading: any(keyword in heading for keyword in keywords)


# --- Classification rules ---
# Evaluated top to bottom against the lower-cased heading; first hit wins.
# "The Vibe Update" is therefore VIBE, not UPDATES.
CLASSIFICATION_RULES: list[tuple[Callable[[str], bool], Category]] = [
    (_contains_any("vibe"), Category.VIBE),
    (_contains_any("fix", "update", "quick"), Category.UPDATES),
    (_contains_any("shop"), Category.SHOP),
    (_contains_any("next", "looks"), Category.NEXT_LOOKS),
]

LIST_CATEGORIES = (Category.UPDATES, Category.SHOP, Category.NEXT_LOOKS)


def classify_heading(heading: str) -> Category:
    """Map a heading to its Category; anything unrecognized is OTHER."""
    lowered = heading.lower()
    for predicate, category in CLASSIFICATION_RULES:
        if predicate(lowered):
            return category
    return Category.OTHER


class DocumentParser:
    """Heading-based splitter for analysis responses."""

    def split_sections(self, text: str) -> dict[Category, Section]:
        """
        Split text into at most one Section per Category.

        Text before the first heading marker is a preamble and always lands in
        OTHER.  When two fragments classify to the same category the later
        one replaces the earlier one.
        """
        sections: dict[Category, Section] = {}
        fragments = HEADING_MARKER.split(text)

        for index, fragment in enumerate(fragments):
            if not fragment.strip():
                continue

            heading, _, body = fragment.partition("\n")
            heading = heading.strip()
            body_lines = body.split("\n") if body else []

            if index == 0:
                # re.split yields the text before the first marker at index 0;
                # it has no heading of its own.
                category = Category.OTHER
            else:
                category = classify_heading(heading)

            if category in sections:
                logger.debug(
                    f"Section '{heading}' replaces earlier '{sections[category].heading}' "
                    f"for category {category.value}"
                )

            sections[category] = Section(category=category, heading=heading, body_lines=body_lines)

        return sections

    def parse(self, raw: RawResponse) -> ParsedDocument:
        """Parse a RawResponse into a fully derived ParsedDocument."""
        warnings: list[str] = []
        parsed: dict[Category, ParsedSection] = {}

        sections = self.split_sections(raw.text)
        if not sections or set(sections) == {Category.OTHER}:
            warnings.append("No recognized headings in response; showing raw text.")

        for category, section in sections.items():
            parsed[category] = self._derive(section, warnings)

        if warnings:
            logger.warning(f"Parse fallback: {'; '.join(warnings)}")

        logger.info(
            f"Parsed {len(parsed)} sections: "
            f"{', '.join(category.value for category in parsed) or 'none'}"
        )
        return ParsedDocument(sections=parsed, citations=raw.citations, warnings=warnings)

    def _derive(self, section: Section, warnings: list[str]) -> ParsedSection:
        """Run the extractor that matches the section's category."""
        if section.category == Category.VIBE:
            vibe = extract_vibe_fields(section.body_lines)
            if vibe is None:
                warnings.append(f"Section '{section.heading}' has no labeled fields.")
                return ParsedSection(
                    section=section,
                    fallback_lines=extract_fallback_lines(section.body_lines)
                )
            return ParsedSection(section=section, vibe=vibe)

        if section.category in LIST_CATEGORIES:
            items = extract_list_items(section.lines)
            if not items:
                warnings.append(f"Section '{section.heading}' has no bullet items.")
                return ParsedSection(
                    section=section,
                    fallback_lines=extract_fallback_lines(section.body_lines)
                )
            return ParsedSection(section=section, items=items)

        return ParsedSection(
            section=section,
            fallback_lines=extract_fallback_lines(section.body_lines)
        )


def parse_response(text: str, citations: Optional[list] = None) -> ParsedDocument:
    """Convenience function to parse response text."""
    return DocumentParser().parse(RawResponse(text=text, citations=citations or []))
