"""
Pydantic schemas defining the contracts between modules.

RawResponse:    Contract from the Analysis Service to the DocumentParser
ParsedDocument: Output of the DocumentParser, consumed by the presentation layer
AnalysisState / VisualizationState: the session record exposed by StyleSession

Data flow:
  Analysis Service → RawResponse → DocumentParser → Section per Category
  Section → extractors + tokenizer → ParsedSection → ParsedDocument

Every model is frozen: a new response or a reset produces new objects, nothing
is patched in place.
"""

import mimetypes
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")


# --- Service contracts ---

class Citation(_Frozen):
    """A web source the analysis service grounded its answer on."""
    title: Optional[str] = None
    uri: Optional[str] = None


class RawResponse(_Frozen):
    """Text and citations of one successful analysis call."""
    text: str
    citations: list[Citation] = Field(default_factory=list)


class SourceImage(_Frozen):
    """The photo the user selected."""
    data: bytes
    mime_type: str = "image/jpeg"
    name: Optional[str] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceImage":
        path = Path(path)
        mime, _ = mimetypes.guess_type(str(path))
        return cls(data=path.read_bytes(), mime_type=mime or "image/jpeg", name=path.name)


class GeneratedImage(_Frozen):
    """The "after" picture returned by the visualization service."""
    data: bytes
    mime_type: str = "image/png"


# --- Inline spans ---
# The "kind" field is the tag of the union; every variant exposes .text,
# the literal content with marker syntax removed.

class PlainText(_Frozen):
    kind: Literal["text"] = "text"
    text: str


class BoldText(_Frozen):
    kind: Literal["bold"] = "bold"
    text: str


class Link(_Frozen):
    kind: Literal["link"] = "link"
    label: str
    url: str

    @property
    def text(self) -> str:
        return self.label


class BareLink(_Frozen):
    kind: Literal["bare_link"] = "bare_link"
    url: str

    @property
    def text(self) -> str:
        return self.url


InlineNode = Annotated[
    Union[PlainText, BoldText, Link, BareLink],
    Field(discriminator="kind")
]


class RichLine(_Frozen):
    """One tokenized line of text."""
    nodes: list[InlineNode] = Field(default_factory=list)

    @property
    def plain_text(self) -> str:
        return "".join(node.text for node in self.nodes)


class ListItem(RichLine):
    """One bullet line, marker removed."""


# --- Document model ---

class Category(str, Enum):
    """Closed set of section buckets."""
    VIBE = "vibe"
    UPDATES = "updates"
    SHOP = "shop"
    NEXT_LOOKS = "next"
    OTHER = "other"


class Section(_Frozen):
    """The text between one heading marker and the next."""
    category: Category
    heading: str
    body_lines: list[str] = Field(default_factory=list)

    @property
    def lines(self) -> list[str]:
        """Heading followed by the body, the shape the list extractor expects."""
        return [self.heading, *self.body_lines]


class VibeFields(_Frozen):
    aesthetic: Optional[str] = None
    detected_pieces: Optional[str] = None
    advice: Optional[str] = None


class ParsedSection(_Frozen):
    """A Section plus whatever structure could be derived from it."""
    section: Section
    vibe: Optional[VibeFields] = None
    items: list[ListItem] = Field(default_factory=list)
    # Verbatim non-empty body lines, for rendering when structure is missing
    fallback_lines: list[RichLine] = Field(default_factory=list)

    @property
    def category(self) -> Category:
        return self.section.category


class ParsedDocument(_Frozen):
    """Output from the DocumentParser — recomputed in full for each response."""
    sections: dict[Category, ParsedSection] = Field(default_factory=dict)
    citations: list[Citation] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)  # Parse fallbacks encountered

    def get(self, category: Category) -> Optional[ParsedSection]:
        """Missing category means "not available", never an error."""
        return self.sections.get(category)

    @property
    def vibe(self) -> Optional[ParsedSection]:
        return self.get(Category.VIBE)

    @property
    def updates(self) -> Optional[ParsedSection]:
        return self.get(Category.UPDATES)

    @property
    def shop(self) -> Optional[ParsedSection]:
        return self.get(Category.SHOP)

    @property
    def next_looks(self) -> Optional[ParsedSection]:
        return self.get(Category.NEXT_LOOKS)

    @property
    def sources(self) -> list[Citation]:
        """Citations with a URI, first occurrence of each URI only."""
        seen = set()
        unique = []
        for citation in self.citations:
            if citation.uri and citation.uri not in seen:
                seen.add(citation.uri)
                unique.append(citation)
        return unique


# --- Session record ---

class AnalysisStatus(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


class VisualizationStatus(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


class AnalysisState(_Frozen):
    """Exactly one status; document iff COMPLETE, error iff ERROR."""
    status: AnalysisStatus = AnalysisStatus.IDLE
    document: Optional[ParsedDocument] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_payload(self) -> "AnalysisState":
        if (self.document is not None) != (self.status == AnalysisStatus.COMPLETE):
            raise ValueError("document must be present exactly when status is complete")
        if (self.error is not None) != (self.status == AnalysisStatus.ERROR):
            raise ValueError("error must be present exactly when status is error")
        return self


class VisualizationState(_Frozen):
    """image iff READY; error only when FAILED."""
    status: VisualizationStatus = VisualizationStatus.IDLE
    image: Optional[GeneratedImage] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_payload(self) -> "VisualizationState":
        if (self.image is not None) != (self.status == VisualizationStatus.READY):
            raise ValueError("image must be present exactly when status is ready")
        if self.error is not None and self.status != VisualizationStatus.FAILED:
            raise ValueError("error is only allowed when status is failed")
        return self


# --- Requests issued by the session ---

class AnalysisRequest(_Frozen):
    token: int
    image: SourceImage
    prompt: str
    prompt_version: str


class VisualizationRequest(_Frozen):
    token: int
    image: SourceImage
    prompt: str
