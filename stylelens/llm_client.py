"""
Service clients with a Gemini/OpenAI/Anthropic provider switch.

Uses the Factory pattern (LLMClient.create) to instantiate the right provider
based on env vars or explicit argument.  Each provider implements
BaseLLMClient, which covers both external collaborators:

  analyze_image  → Analysis Service      (image + instruction → RawResponse)
  generate_image → Visualization Service (image + updates → GeneratedImage)

Every failure is raised as ServiceError so the facade only has one thing to
catch.
"""

import base64
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from .exceptions import ServiceError
from .logger import get_module_logger
from .schemas import Citation, GeneratedImage, RawResponse

logger = get_module_logger("llm_client")

# Returned by Gemini when a grounded answer comes back with no text parts
EMPTY_ANALYSIS_TEXT = "No analysis could be generated."


class LLMProvider(Enum):
    """Supported providers."""
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class BaseLLMClient(ABC):
    """Abstract base class for service clients."""

    provider: str = ""

    @abstractmethod
    def analyze_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> RawResponse:
        """
        Send the photo and the instruction prompt, return the critique text.

        Args:
            image_bytes: Raw image file content
            mime_type: MIME type of image_bytes
            prompt: Instruction prompt (normally prompts.ANALYSIS_PROMPT)

        Returns:
            RawResponse with the text and any citations
        """
        pass

    @abstractmethod
    def generate_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> GeneratedImage:
        """
        Send the photo and the visualization prompt, return the edited image.

        Args:
            image_bytes: Raw image file content
            mime_type: MIME type of image_bytes
            prompt: Visualization prompt built from the Quick Updates

        Returns:
            GeneratedImage with bytes and MIME type
        """
        pass


def _collect_citations(response) -> list[Citation]:
    """Read grounding chunks of the first candidate into Citations."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    citations = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        citations.append(Citation(title=getattr(web, "title", None), uri=getattr(web, "uri", None)))
    return citations


def _first_inline_image(response) -> Optional[GeneratedImage]:
    """First inline-data part of the first candidate, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or not getattr(candidates[0], "content", None):
        return None

    for part in candidates[0].content.parts or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return GeneratedImage(data=inline.data, mime_type=inline.mime_type or "image/png")
    return None


class GeminiClient(BaseLLMClient):
    """Google Gemini client (google-genai SDK)."""

    provider = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-2.5-flash",
        image_model: str = "gemini-2.5-flash-image"
    ):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ServiceError(
                "Gemini API key not provided",
                provider="gemini"
            )
        self.model = model
        self.image_model = image_model

        try:
            from google import genai
            from google.genai import types
            self.client = genai.Client(api_key=self.api_key)
            self.types = types
        except ImportError:
            raise ServiceError(
                "google-genai package not installed. Run: pip install google-genai",
                provider="gemini"
            )

    def _contents(self, image_bytes: bytes, mime_type: str, prompt: str) -> list:
        return [self.types.Part.from_bytes(data=image_bytes, mime_type=mime_type), prompt]

    def analyze_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> RawResponse:
        """Analyze with Google Search grounding so the Shop section gets real links."""
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=self._contents(image_bytes, mime_type, prompt),
                # Search grounding rules out response_mime_type / response_schema,
                # which is why the answer is free-form markdown to begin with.
                config=self.types.GenerateContentConfig(
                    tools=[self.types.Tool(google_search=self.types.GoogleSearch())]
                ),
            )
            text = response.text
            citations = _collect_citations(response)
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise ServiceError(
                f"Gemini API call failed: {str(e)}",
                provider="gemini",
                details={"error": str(e)}
            )

        return RawResponse(text=text or EMPTY_ANALYSIS_TEXT, citations=citations)

    def generate_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> GeneratedImage:
        try:
            response = self.client.models.generate_content(
                model=self.image_model,
                contents=self._contents(image_bytes, mime_type, prompt),
            )
            image = _first_inline_image(response)
        except Exception as e:
            logger.error(f"Gemini image generation error: {e}")
            raise ServiceError(
                f"Gemini image generation failed: {str(e)}",
                provider="gemini",
                details={"error": str(e)}
            )

        if image is None:
            raise ServiceError("No image was generated.", provider="gemini")
        return image


class OpenAIClient(BaseLLMClient):
    """OpenAI API client."""

    provider = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o",
        image_model: str = "gpt-image-1"
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ServiceError(
                "OpenAI API key not provided",
                provider="openai"
            )
        self.model = model
        self.image_model = image_model

        try:
            from openai import OpenAI
            self.client = OpenAI(api_key=self.api_key)
        except ImportError:
            raise ServiceError(
                "openai package not installed. Run: pip install openai",
                provider="openai"
            )

    def analyze_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> RawResponse:
        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('utf-8')}"
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{
                    "role": "user",
                    "content": [
                        {"type": "image_url", "image_url": {"url": data_url}},
                        {"type": "text", "text": prompt},
                    ],
                }],
            )
            text = response.choices[0].message.content
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise ServiceError(
                f"OpenAI API call failed: {str(e)}",
                provider="openai",
                details={"error": str(e)}
            )

        return RawResponse(text=text or EMPTY_ANALYSIS_TEXT)

    def generate_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> GeneratedImage:
        try:
            response = self.client.images.edit(
                model=self.image_model,
                image=("outfit", image_bytes, mime_type),
                prompt=prompt,
            )
            encoded = response.data[0].b64_json if response.data else None
            data = base64.b64decode(encoded) if encoded else b""
        except Exception as e:
            logger.error(f"OpenAI image edit error: {e}")
            raise ServiceError(
                f"OpenAI image generation failed: {str(e)}",
                provider="openai",
                details={"error": str(e)}
            )

        if not data:
            raise ServiceError("No image was generated.", provider="openai")
        return GeneratedImage(data=data, mime_type="image/png")


class AnthropicClient(BaseLLMClient):
    """Anthropic API client.  Analysis only; Claude does not generate images."""

    provider = "anthropic"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-sonnet-4-20250514"
    ):
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ServiceError(
                "Anthropic API key not provided",
                provider="anthropic"
            )
        self.model = model

        try:
            import anthropic
            self.client = anthropic.Anthropic(api_key=self.api_key)
        except ImportError:
            raise ServiceError(
                "anthropic package not installed. Run: pip install anthropic",
                provider="anthropic"
            )

    def analyze_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> RawResponse:
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=4096,
                messages=[{
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": mime_type,
                                "data": base64.b64encode(image_bytes).decode("utf-8"),
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }],
            )
            text = "".join(block.text for block in response.content if getattr(block, "text", None))
        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise ServiceError(
                f"Anthropic API call failed: {str(e)}",
                provider="anthropic",
                details={"error": str(e)}
            )

        return RawResponse(text=text or EMPTY_ANALYSIS_TEXT)

    def generate_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> GeneratedImage:
        raise ServiceError(
            "Image generation is not supported by the anthropic provider",
            provider="anthropic"
        )


class LLMClient:
    """
    Factory class for creating service clients with provider switch.

    Usage:
        # Using environment variable LLM_PROVIDER (default: gemini)
        client = LLMClient.create()

        # Explicit provider
        client = LLMClient.create(provider=LLMProvider.OPENAI)
    """

    @staticmethod
    def create(
        provider: Optional[LLMProvider] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        image_model: Optional[str] = None
    ) -> BaseLLMClient:
        """
        Create a client for the specified provider.

        Args:
            provider: Provider (defaults to env var LLM_PROVIDER or 'gemini')
            api_key: API key (defaults to provider-specific env var)
            model: Analysis model (defaults to STYLELENS_ANALYSIS_MODEL, then provider default)
            image_model: Image model (defaults to STYLELENS_IMAGE_MODEL, then provider default)

        Returns:
            Configured client
        """
        # Resolve provider: explicit arg > env var > default to Gemini
        if provider is None:
            provider_str = os.getenv("LLM_PROVIDER", "gemini").lower()
            try:
                provider = LLMProvider(provider_str)
            except ValueError:
                logger.warning(
                    f"Unknown LLM_PROVIDER '{provider_str}', defaulting to gemini"
                )
                provider = LLMProvider.GEMINI

        model = model or os.getenv("STYLELENS_ANALYSIS_MODEL")
        image_model = image_model or os.getenv("STYLELENS_IMAGE_MODEL")

        logger.info(f"Creating client for provider: {provider.value}")

        kwargs = {"api_key": api_key}
        if model:
            kwargs["model"] = model

        if provider == LLMProvider.GEMINI:
            if image_model:
                kwargs["image_model"] = image_model
            return GeminiClient(**kwargs)

        elif provider == LLMProvider.OPENAI:
            if image_model:
                kwargs["image_model"] = image_model
            return OpenAIClient(**kwargs)

        elif provider == LLMProvider.ANTHROPIC:
            return AnthropicClient(**kwargs)

        else:
            raise ServiceError(
                f"Unsupported provider: {provider}",
                provider=str(provider)
            )
