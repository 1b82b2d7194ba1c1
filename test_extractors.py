"""
Tests for the Vibe field extractor and the bullet list extractor.
"""

from stylelens.extractors import extract_fallback_lines, extract_list_items, extract_vibe_fields
from stylelens.schemas import BoldText, Link, PlainText, VibeFields


def test_vibe_fields_from_bold_labels():
    fields = extract_vibe_fields([
        "**Aesthetic:** Minimalist",
        "**Detected Pieces:** white tee, jeans",
        "**Advice:** Fit is clean.",
    ])

    assert fields == VibeFields(
        aesthetic="Minimalist",
        detected_pieces="white tee, jeans",
        advice="Fit is clean.",
    )


def test_vibe_labels_in_any_order_and_case():
    fields = extract_vibe_fields([
        "ADVICE: Swap the sneakers.",
        "",
        "aesthetic : Streetwear",
    ])

    assert fields.advice == "Swap the sneakers."
    assert fields.aesthetic == "Streetwear"
    assert fields.detected_pieces is None


def test_vibe_first_matching_line_wins():
    fields = extract_vibe_fields([
        "**Aesthetic:** Preppy",
        "**Aesthetic:** Boho",
    ])
    assert fields.aesthetic == "Preppy"


def test_vibe_without_labels_is_absent():
    assert extract_vibe_fields(["**Hashtags:** #Denim", "A relaxed weekend outfit."]) is None
    assert extract_vibe_fields([]) is None


def test_list_items_skip_heading_and_prose():
    items = extract_list_items([
        "Quick Updates",
        "A few small changes:",
        "* Cuff the sleeves",
        "",
        "   *   Add a belt  ",
    ])

    assert [item.plain_text for item in items] == ["Cuff the sleeves", "Add a belt"]


def test_list_first_line_is_always_dropped():
    # Even when the first line is itself a bullet
    items = extract_list_items(["* heading-like bullet", "* kept"])
    assert [item.plain_text for item in items] == ["kept"]


def test_list_items_are_tokenized():
    items = extract_list_items([
        "Shop The Look",
        "* **Gold Hoops**: Adds warmth. [Buy Here](https://shop.example/hoops)",
    ])

    assert items[0].nodes == [
        BoldText(text="Gold Hoops"),
        PlainText(text=": Adds warmth. "),
        Link(label="Buy Here", url="https://shop.example/hoops"),
    ]


def test_list_without_bullets_is_empty():
    assert extract_list_items(["Heading", "no bullets here"]) == []
    assert extract_list_items([]) == []


def test_fallback_lines_skip_blank_lines():
    lines = extract_fallback_lines(["**Profile:** Normcore", "", "   ", "Clean palette."])

    assert [line.plain_text for line in lines] == ["Profile: Normcore", "Clean palette."]
