"""
Main orchestrator for StyleLens.

Wires one service client to one StyleSession:
  1. StyleSession decides whether a request may be issued and tags it with the
     session token
  2. The client performs the blocking SDK call in a worker thread
  3. The outcome is handed back to the session on the event-loop thread,
     where stale tokens are dropped

Because every session mutation happens on the loop thread, select_image() or
reset() may be called while a request is outstanding without any locking.
"""

import asyncio
from pathlib import Path
from typing import Optional, Union

from .exceptions import ServiceError
from .llm_client import BaseLLMClient, LLMClient, LLMProvider
from .logger import get_module_logger, setup_logger
from .schemas import AnalysisState, SourceImage, VisualizationState
from .session import StyleSession

logger = get_module_logger("main")


class StyleLens:
    """
    Facade over a service client and a StyleSession.

    analyze() and visualize() never raise on a failed service call; every
    client error ends up in the session's AnalysisState / VisualizationState.
    Cancellation is recorded as a failure and then re-raised.
    """

    def __init__(
        self,
        llm_client: Optional[BaseLLMClient] = None,
        provider: Optional[LLMProvider] = None,
        session: Optional[StyleSession] = None,
        log_level: int = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        # Lazy-create the client only if one wasn't injected (tests pass fakes)
        self.llm_client = llm_client or LLMClient.create(provider=provider)
        self.session = session or StyleSession()

        logger.info("StyleLens initialized")

    # --- User triggers, forwarded to the session ---

    def select_image(self, image: SourceImage) -> int:
        return self.session.select_image(image)

    def reset(self) -> int:
        return self.session.reset()

    def dismiss_visualization(self) -> None:
        self.session.dismiss_visualization()

    # --- Request drivers ---

    async def analyze(self) -> AnalysisState:
        """
        Run one analysis for the current image.

        Raises:
            InvalidStateError: the session is not IDLE with an image
        """
        request = self.session.start_analysis()

        try:
            raw = await asyncio.to_thread(
                self.llm_client.analyze_image,
                request.image.data,
                request.image.mime_type,
                request.prompt
            )
        except ServiceError as e:
            self.session.on_analysis_failure(request.token, e.message)
        except asyncio.CancelledError:
            self.session.on_analysis_failure(request.token, "Analysis was cancelled.")
            raise
        except Exception as e:
            logger.exception(f"Unexpected analysis error: {e}")
            self.session.on_analysis_failure(request.token, str(e))
        else:
            self.session.on_analysis_success(request.token, raw)

        return self.session.analysis

    async def visualize(self) -> VisualizationState:
        """
        Generate the "after" image from the Quick Updates.

        A call while a visualization is already generating returns the current
        state without issuing a second request.

        Raises:
            InvalidStateError: analysis not complete or no Quick Updates section
        """
        request = self.session.start_visualization()
        if request is None:
            return self.session.visualization

        try:
            image = await asyncio.to_thread(
                self.llm_client.generate_image,
                request.image.data,
                request.image.mime_type,
                request.prompt
            )
        except ServiceError as e:
            self.session.on_visualization_failure(e.message, token=request.token)
        except asyncio.CancelledError:
            self.session.on_visualization_failure("Visualization was cancelled.", token=request.token)
            raise
        except Exception as e:
            logger.exception(f"Unexpected visualization error: {e}")
            self.session.on_visualization_failure(str(e), token=request.token)
        else:
            self.session.on_visualization_success(image.data, image.mime_type, token=request.token)

        return self.session.visualization

    # --- Synchronous conveniences ---

    def critique(self, image: SourceImage) -> AnalysisState:
        """Select the image and run the analysis to completion."""
        self.select_image(image)
        return asyncio.run(self.analyze())

    def critique_file(self, file_path: Union[str, Path]) -> AnalysisState:
        """Critique an image file."""
        return self.critique(SourceImage.from_path(file_path))

    def visualize_sync(self) -> VisualizationState:
        return asyncio.run(self.visualize())


def critique_image_file(
    file_path: Union[str, Path],
    provider: Optional[LLMProvider] = None
) -> AnalysisState:
    """Convenience function to critique an image file."""
    return StyleLens(provider=provider).critique_file(file_path)
