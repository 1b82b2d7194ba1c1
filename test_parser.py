"""
Tests for the DocumentParser.

Covers heading classification, the one-section-per-category rule (last one
wins), the preamble rule, and the fallbacks recorded in
ParsedDocument.warnings when the response does not follow the expected
layout.
"""

import pytest

from stylelens.document import DocumentParser, classify_heading, parse_response
from stylelens.schemas import Category, Citation, RawResponse

SAMPLE = (
    "## Vibe\n"
    "**Aesthetic:** Minimalist\n"
    "**Detected Pieces:** white tee, jeans\n"
    "**Advice:** Fit is clean.\n"
    "## Quick Updates\n"
    "* Cuff the sleeves\n"
    "* Add a belt"
)


@pytest.mark.parametrize("heading, category", [
    ("🧥 The Vibe", Category.VIBE),
    ("Quick Updates", Category.UPDATES),
    ("Easy Fixes", Category.UPDATES),
    ("🛍️ Shop The Look", Category.SHOP),
    ("Next Outfits", Category.NEXT_LOOKS),
    ("🔮 Future Looks", Category.NEXT_LOOKS),
    ("Closing thoughts", Category.OTHER),
    ("", Category.OTHER),
    # Rule order decides ties
    ("Vibe Update", Category.VIBE),
    ("Quick Shop", Category.UPDATES),
    ("Shop the next looks", Category.SHOP),
])
def test_classify_heading(heading, category):
    assert classify_heading(heading) == category


def test_sample_document():
    document = parse_response(SAMPLE)

    vibe = document.vibe.vibe
    assert vibe.aesthetic == "Minimalist"
    assert vibe.detected_pieces == "white tee, jeans"
    assert vibe.advice == "Fit is clean."
    assert [item.plain_text for item in document.updates.items] == ["Cuff the sleeves", "Add a belt"]
    assert document.warnings == []


def test_section_heading_and_body():
    sections = DocumentParser().split_sections(SAMPLE)

    updates = sections[Category.UPDATES]
    assert updates.heading == "Quick Updates"
    assert updates.body_lines == ["* Cuff the sleeves", "* Add a belt"]
    assert updates.lines[0] == "Quick Updates"


@pytest.mark.parametrize("text", [
    "",
    "   \n\n",
    "Just a paragraph about the vibe of this outfit.",
    "Line one\n* bullet\n**bold**",
])
def test_text_without_headings_yields_at_most_other(text):
    sections = DocumentParser().split_sections(text)

    assert len(sections) <= 1
    assert set(sections) <= {Category.OTHER}


def test_preamble_goes_to_other():
    sections = DocumentParser().split_sections("Here is your critique.\n## Shop\n* Belt")

    assert sections[Category.OTHER].heading == "Here is your critique."
    assert Category.SHOP in sections


def test_later_section_overwrites_earlier_one():
    text = (
        "## Next Looks\n"
        "* Earlier idea\n"
        "## More Looks\n"
        "* Later idea\n"
    )
    document = parse_response(text)

    assert [item.plain_text for item in document.next_looks.items] == ["Later idea"]
    assert "Earlier idea" not in document.model_dump_json()


def test_empty_fragments_are_discarded():
    sections = DocumentParser().split_sections("## \n## Shop\n* Belt\n##   ")
    assert list(sections) == [Category.SHOP]


def test_vibe_without_labels_falls_back_to_lines():
    document = parse_response("## The Vibe\n**Hashtags:** #Denim\nRelaxed and casual.")

    vibe = document.vibe
    assert vibe.vibe is None
    assert [line.plain_text for line in vibe.fallback_lines] == ["Hashtags: #Denim", "Relaxed and casual."]
    assert any("no labeled fields" in warning for warning in document.warnings)


def test_list_section_without_bullets_falls_back_to_lines():
    document = parse_response("## Quick Updates\nWear a belt.")

    assert document.updates.items == []
    assert [line.plain_text for line in document.updates.fallback_lines] == ["Wear a belt."]
    assert any("no bullet items" in warning for warning in document.warnings)


def test_unstructured_text_is_reported():
    document = parse_response("No analysis could be generated.")

    assert document.get(Category.OTHER) is not None
    assert document.vibe is None
    assert document.warnings


def test_citations_are_carried_and_deduplicated():
    raw = RawResponse(text=SAMPLE, citations=[
        Citation(title="Shop A", uri="https://a.example"),
        Citation(title="Shop A again", uri="https://a.example"),
        Citation(title="No link"),
    ])
    document = DocumentParser().parse(raw)

    assert len(document.citations) == 3
    assert [c.uri for c in document.sources] == ["https://a.example"]


def test_full_response_with_links():
    text = (
        "Here is the breakdown.\n\n"
        "## 🧥 The Vibe\n"
        "**Aesthetic:** Dark Academia\n\n"
        "## 🚀 Quick Updates\n"
        "* Swap to loafers\n\n"
        "## 🛍️ Shop The Look\n"
        "* **Loafers**: Polished. [Buy Here](https://shop.example/loafers)\n"
        "* **Scarf**: Texture. https://shop.example/scarf\n\n"
        "## 🔮 Next Looks\n"
        "* **Library Day:** Tweed blazer, turtleneck, pleated trousers.\n"
    )
    document = parse_response(text)

    assert set(document.sections) == {
        Category.OTHER, Category.VIBE, Category.UPDATES, Category.SHOP, Category.NEXT_LOOKS
    }
    assert document.vibe.vibe.aesthetic == "Dark Academia"
    assert document.vibe.vibe.advice is None
    shop = document.shop.items
    assert shop[0].nodes[-1].url == "https://shop.example/loafers"
    assert shop[1].nodes[-1].url == "https://shop.example/scarf"
    assert document.next_looks.items[0].plain_text.startswith("Library Day:")
