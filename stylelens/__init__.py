"""
StyleLens

Turns a photo into a structured style critique and an optional "after"
visualization produced by a multimodal AI service.
- DocumentParser: splits the heading-delimited response into typed sections
- Tokenizer / extractors: inline spans, bullet items, Vibe fields
- StyleSession: request state machine with stale-response protection
- StyleLens: facade that runs requests against a service client

Public API surface:
  Core classes   — DocumentParser, StyleSession, StyleLens
  Service layer  — LLMClient, LLMProvider, BaseLLMClient
  Data models    — RawResponse, ParsedDocument, Category, Section, ...
  Error types    — InvalidStateError (fail fast), ServiceError (becomes state)
"""

# --- Parsing ---
from .tokenizer import tokenize_inline
from .extractors import extract_list_items, extract_vibe_fields
from .document import DocumentParser, classify_heading, parse_response

# --- Orchestration ---
from .session import StyleSession
from .main import StyleLens, critique_image_file
from .llm_client import LLMClient, LLMProvider, BaseLLMClient

# --- Data models ---
from .schemas import (
    AnalysisState,
    AnalysisStatus,
    BareLink,
    BoldText,
    Category,
    Citation,
    GeneratedImage,
    Link,
    ListItem,
    ParsedDocument,
    ParsedSection,
    PlainText,
    RawResponse,
    Section,
    SourceImage,
    VibeFields,
    VisualizationState,
    VisualizationStatus,
)

# --- Exceptions ---
from .exceptions import StyleLensError, InvalidStateError, ServiceError

__version__ = "0.1.0"
__all__ = [
    "tokenize_inline",
    "extract_list_items",
    "extract_vibe_fields",
    "DocumentParser",
    "classify_heading",
    "parse_response",
    "StyleSession",
    "StyleLens",
    "critique_image_file",
    "LLMClient",
    "LLMProvider",
    "BaseLLMClient",
    "AnalysisState",
    "AnalysisStatus",
    "BareLink",
    "BoldText",
    "Category",
    "Citation",
    "GeneratedImage",
    "Link",
    "ListItem",
    "ParsedDocument",
    "ParsedSection",
    "PlainText",
    "RawResponse",
    "Section",
    "SourceImage",
    "VibeFields",
    "VisualizationState",
    "VisualizationStatus",
    "StyleLensError",
    "InvalidStateError",
    "ServiceError",
]
