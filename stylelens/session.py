"""
Session state machine for one user's analysis flow.

StyleSession owns the whole session record (selected image, AnalysisState,
VisualizationState and the session token) and is the only thing that mutates
it.  It does not perform I/O: start_* methods hand back a request object and
the caller (normally the StyleLens facade) delivers the outcome through the
on_* handlers.

Staleness:
  select_image() and reset() bump the token.  A response carrying an older
  token is dropped without any observable effect; that is the only mechanism
  protecting against slow responses that arrive after the user moved on.

Analysis:      IDLE → ANALYZING → COMPLETE | ERROR
Visualization: IDLE → GENERATING → READY | FAILED   (only from COMPLETE)
"""

from typing import Optional

from .document import DocumentParser
from .exceptions import InvalidStateError
from .logger import get_module_logger
from .prompts import ANALYSIS_PROMPT, ANALYSIS_PROMPT_VERSION, build_visualization_prompt
from .schemas import (
    AnalysisRequest,
    AnalysisState,
    AnalysisStatus,
    GeneratedImage,
    RawResponse,
    SourceImage,
    VisualizationRequest,
    VisualizationState,
    VisualizationStatus,
)

logger = get_module_logger("session")

ANALYSIS_ERROR_FALLBACK = "Something went wrong with the style analysis. Please try again."
VISUALIZATION_ERROR_FALLBACK = "Could not generate visualization. Please try again."


class StyleSession:
    """Explicit, single-owner session record plus its transitions."""

    def __init__(
        self,
        parser: Optional[DocumentParser] = None,
        analysis_prompt: str = ANALYSIS_PROMPT,
        prompt_version: str = ANALYSIS_PROMPT_VERSION
    ):
        self.parser = parser or DocumentParser()
        self.analysis_prompt = analysis_prompt
        self.prompt_version = prompt_version

        self.token = 0
        self.image: Optional[SourceImage] = None
        self.analysis = AnalysisState()
        self.visualization = VisualizationState()

    # --- Derived flags for the presentation layer ---

    @property
    def can_analyze(self) -> bool:
        return self.image is not None and self.analysis.status == AnalysisStatus.IDLE

    @property
    def can_visualize(self) -> bool:
        document = self.analysis.document
        return (
            document is not None
            and document.updates is not None
            and self.visualization.status != VisualizationStatus.GENERATING
        )

    # --- User triggers ---

    def select_image(self, image: SourceImage) -> int:
        """Start a new session for the given image.  Returns the new token."""
        self._new_session(image)
        logger.info(f"Image selected ({image.name or image.mime_type}), session {self.token}")
        return self.token

    def reset(self) -> int:
        """Discard everything, including the image.  Returns the new token."""
        self._new_session(None)
        logger.info(f"Session reset, session {self.token}")
        return self.token

    def start_analysis(self) -> AnalysisRequest:
        """
        Move to ANALYZING and return the request to send.

        Raises:
            InvalidStateError: not IDLE, or no image selected
        """
        if self.analysis.status != AnalysisStatus.IDLE:
            raise InvalidStateError(
                f"Cannot start analysis while {self.analysis.status.value}",
                state=self.analysis.status.value
            )
        if self.image is None:
            raise InvalidStateError(
                "Cannot start analysis without an image",
                state=self.analysis.status.value
            )

        self.analysis = AnalysisState(status=AnalysisStatus.ANALYZING)
        logger.info(f"Analysis started, session {self.token}, prompt v{self.prompt_version}")
        return AnalysisRequest(
            token=self.token,
            image=self.image,
            prompt=self.analysis_prompt,
            prompt_version=self.prompt_version
        )

    def start_visualization(self) -> Optional[VisualizationRequest]:
        """
        Move to GENERATING and return the request to send.

        Returns None, changing nothing, while a visualization is already
        generating.

        Raises:
            InvalidStateError: analysis not COMPLETE, or no Quick Updates section
        """
        document = self.analysis.document
        if self.analysis.status != AnalysisStatus.COMPLETE or document is None:
            raise InvalidStateError(
                "Cannot visualize before the analysis is complete",
                state=self.analysis.status.value
            )
        if document.updates is None:
            raise InvalidStateError(
                "Cannot visualize without a Quick Updates section",
                state=self.analysis.status.value
            )
        if self.visualization.status == VisualizationStatus.GENERATING:
            logger.debug("Visualization already generating; ignoring request")
            return None

        prompt = build_visualization_prompt(document.updates.items)
        self.visualization = VisualizationState(status=VisualizationStatus.GENERATING)
        logger.info(f"Visualization started, session {self.token}")
        return VisualizationRequest(token=self.token, image=self.image, prompt=prompt)

    def dismiss_visualization(self) -> None:
        """Close a finished (READY or FAILED) visualization."""
        if self.visualization.status in (VisualizationStatus.READY, VisualizationStatus.FAILED):
            self.visualization = VisualizationState()

    # --- Service outcomes ---

    def on_analysis_success(self, token: int, raw: RawResponse) -> bool:
        """Accept an analysis result.  Returns False if it was stale."""
        if not self._accepts_analysis(token):
            return False

        document = self.parser.parse(raw)
        self.analysis = AnalysisState(status=AnalysisStatus.COMPLETE, document=document)
        logger.info(f"Analysis complete, session {token}")
        return True

    def on_analysis_failure(self, token: int, message: Optional[str]) -> bool:
        """Record an analysis failure.  Returns False if it was stale."""
        if not self._accepts_analysis(token):
            return False

        self.analysis = AnalysisState(
            status=AnalysisStatus.ERROR,
            error=message or ANALYSIS_ERROR_FALLBACK
        )
        logger.warning(f"Analysis failed, session {token}: {self.analysis.error}")
        return True

    def on_visualization_success(
        self,
        image_bytes: bytes,
        mime_type: str,
        token: Optional[int] = None
    ) -> bool:
        """Store the generated image.  Returns False if nothing was generating."""
        if not self._accepts_visualization(token):
            return False

        self.visualization = VisualizationState(
            status=VisualizationStatus.READY,
            image=GeneratedImage(data=image_bytes, mime_type=mime_type)
        )
        logger.info(f"Visualization ready ({mime_type}, {len(image_bytes)} bytes)")
        return True

    def on_visualization_failure(self, message: Optional[str], token: Optional[int] = None) -> bool:
        """Record a visualization failure; the analysis result is untouched."""
        if not self._accepts_visualization(token):
            return False

        self.visualization = VisualizationState(
            status=VisualizationStatus.FAILED,
            error=message or VISUALIZATION_ERROR_FALLBACK
        )
        logger.warning(f"Visualization failed: {self.visualization.error}")
        return True

    # --- Internals ---

    def _new_session(self, image: Optional[SourceImage]) -> None:
        self.token += 1
        self.image = image
        self.analysis = AnalysisState()
        self.visualization = VisualizationState()

    def _accepts_analysis(self, token: int) -> bool:
        if token != self.token:
            logger.debug(f"Dropping stale analysis response (token {token}, current {self.token})")
            return False
        if self.analysis.status != AnalysisStatus.ANALYZING:
            logger.debug(f"Dropping analysis response while {self.analysis.status.value}")
            return False
        return True

    def _accepts_visualization(self, token: Optional[int]) -> bool:
        if token is not None and token != self.token:
            logger.debug(f"Dropping stale visualization (token {token}, current {self.token})")
            return False
        if self.visualization.status != VisualizationStatus.GENERATING:
            logger.debug(f"Dropping visualization response while {self.visualization.status.value}")
            return False
        return True
