"""
Prompts sent to the analysis and visualization services.

ANALYSIS_PROMPT is the only contract the DocumentParser relies on: it pins the
heading phrases the classifier looks for ("Vibe", "Quick Updates", "Shop",
"Next Looks"), the bold labels the field extractor scans for, and the "*"
bullets the list extractor keeps.  Bump ANALYSIS_PROMPT_VERSION whenever the
wording of those conventions changes.
"""

from .schemas import ListItem

ANALYSIS_PROMPT_VERSION = "3"

ANALYSIS_PROMPT = """
Role: You are a high-end fashion editor and stylist.

Goal: Analyze the image and provide a concrete, objective style assessment.

Process & Output Rules:
1. **Visual Analysis:** Assess fit, color, and texture.
2. **Tone:** Be objective, editorial, and direct. Avoid cheesy praise like "stunning," "effortless," or "fabulous."
3. **Search:** Use the search tool to find real purchase links for the "Shop" section.

Output Format (Strict Markdown):

## The Vibe
**Aesthetic:** [One archetype, e.g. Minimalist, Normcore, Preppy, Streetwear, Y2K, Dark Academia, Boho, Corporate]
**Detected Pieces:** [Comma-separated list of the garments and accessories you see]
**Advice:** [One objective sentence about the fit or palette]

## Quick Updates
* [Concise actionable tip 1 (Max 10 words)]
* [Concise actionable tip 2 (Max 10 words)]

## Shop The Look
* **[Item Name]**: [Very brief reason]. [Link]
* **[Item Name]**: [Very brief reason]. [Link]

## Next Looks
* **[Name]:** [10 word description]
* **[Name]:** [10 word description]
* **[Name]:** [10 word description]

IMPORTANT:
- Be extremely concise. No fluff.
- Start every section heading with "## " exactly as shown.
- For "Shop The Look", find REAL items and embed the link directly in the text like: "Gold Hoops: Adds warmth. [Buy Here](url)" or just the raw url.
"""

# Separator between update tips inside the visualization prompt
UPDATE_DELIMITER = ". "

VISUALIZATION_PROMPT_TEMPLATE = (
    "Generate a realistic photo of a person wearing the outfit in the provided image, "
    "but modified with these specific updates: {updates}. "
    "Maintain the original pose, lighting, and background style as much as possible. "
    "High quality, photorealistic."
)


def join_updates(items: list[ListItem]) -> str:
    """Plain text of every update tip, joined with UPDATE_DELIMITER."""
    return UPDATE_DELIMITER.join(item.plain_text for item in items)


def build_visualization_prompt(items: list[ListItem]) -> str:
    """Visualization prompt for the given Quick Updates items."""
    return VISUALIZATION_PROMPT_TEMPLATE.format(updates=join_updates(items))
