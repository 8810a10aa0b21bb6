"""Google Gemini client for product angle generation."""

import asyncio
import logging

from google import genai
from google.genai import errors, types

from photolab.config import GeminiConfig, get_config
from photolab.errors import (
    EmptyResponseError,
    InvalidCredentialsError,
    MissingCredentialsError,
    RateLimitError,
    SafetyBlockError,
)
from photolab.utils.file_handler import parse_data_uri, to_data_uri
from photolab.utils.prompt_builder import build_angle_prompt

logger = logging.getLogger(__name__)

# Finish/block reasons that mean the content filter stopped generation
SAFETY_REASONS = frozenset(
    {
        "SAFETY",
        "IMAGE_SAFETY",
        "PROHIBITED_CONTENT",
        "IMAGE_PROHIBITED_CONTENT",
        "BLOCKLIST",
        "SPII",
    }
)

INVALID_KEY_MARKERS = ("API_KEY_INVALID", "API key not valid", "API key expired")


def _reason_name(reason: object) -> str:
    """Normalize an SDK enum (or raw string) to its upper-case name."""
    if reason is None:
        return ""
    name = getattr(reason, "name", None) or getattr(reason, "value", None) or str(reason)
    return str(name).upper()


def classify_api_error(error: errors.APIError) -> Exception:
    """Map a provider error to a studio error, or return it unchanged.

    Args:
        error: Error raised by the google-genai SDK

    Returns:
        Exception to raise to the caller
    """
    code = getattr(error, "code", None)
    status = (getattr(error, "status", None) or "").upper()
    message = getattr(error, "message", None) or str(error)

    if code == 429 or status == "RESOURCE_EXHAUSTED":
        return RateLimitError()
    if code in (401, 403) or status in ("UNAUTHENTICATED", "PERMISSION_DENIED"):
        return InvalidCredentialsError()
    if code == 400 and any(marker in message for marker in INVALID_KEY_MARKERS):
        return InvalidCredentialsError()
    return error


class GeminiClient:
    """Client for Google Gemini image generation."""

    def __init__(self, config: GeminiConfig | None = None):
        """Initialize Gemini client.

        Args:
            config: Gemini configuration. If None, uses global config.

        Raises:
            MissingCredentialsError: If no API key is configured
        """
        self.config = config or get_config().gemini
        if not self.config.has_api_key:
            raise MissingCredentialsError()

        self.client = genai.Client(
            api_key=self.config.api_key,
            http_options=types.HttpOptions(timeout=self.config.timeout * 1000),
        )
        logger.info(f"Gemini Client initialized: model={self.config.model}")

    async def generate_angle(
        self,
        source_image: str,
        angle_prompt: str,
        style_prompt: str = "",
    ) -> str:
        """Generate one product photograph from a specific angle.

        Args:
            source_image: Product image as a data URI
            angle_prompt: Fixed per-angle camera instruction
            style_prompt: Optional user backdrop/lighting description

        Returns:
            Generated image as a data URI

        Raises:
            RateLimitError: On HTTP 429
            SafetyBlockError: If the content filter blocked the output
            EmptyResponseError: If no inline image was returned
            InvalidCredentialsError: If the API key was rejected
        """
        image_bytes, mime_type = parse_data_uri(source_image)
        prompt = build_angle_prompt(angle_prompt, style_prompt)

        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    types.Part.from_text(text=prompt),
                ],
            ),
        ]
        generate_content_config = types.GenerateContentConfig(
            response_modalities=["IMAGE", "TEXT"],
        )

        logger.info(
            f"Requesting angle '{angle_prompt[:40]}' "
            f"({len(image_bytes)} bytes {mime_type}, custom style: {bool(style_prompt and style_prompt.strip())})"
        )

        try:
            loop = asyncio.get_event_loop()
            response = await loop.run_in_executor(
                None, self._generate_sync, contents, generate_content_config
            )
        except errors.APIError as e:
            mapped = classify_api_error(e)
            logger.error(f"Gemini API error {e.code}: {e}")
            if mapped is e:
                raise
            raise mapped from e

        return self._extract_image(response)

    def _extract_image(self, response: types.GenerateContentResponse) -> str:
        """Return the first inline image of the response as a data URI."""
        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and _reason_name(feedback.block_reason) in SAFETY_REASONS:
            logger.warning(f"Prompt blocked: {_reason_name(feedback.block_reason)}")
            raise SafetyBlockError()

        if not response.candidates:
            logger.warning("Gemini response has no candidates")
            raise EmptyResponseError()

        candidate = response.candidates[0]
        finish_reason = _reason_name(candidate.finish_reason)
        if finish_reason in SAFETY_REASONS:
            logger.warning(f"Generation stopped by safety filter: {finish_reason}")
            raise SafetyBlockError()

        parts = candidate.content.parts if candidate.content else None
        for part in parts or []:
            # Handle inline image data
            if part.inline_data and part.inline_data.data:
                mime_type = part.inline_data.mime_type or self.config.output_mime_type
                logger.info(f"Generated image received: {len(part.inline_data.data)} bytes")
                return to_data_uri(part.inline_data.data, mime_type)

            # Handle text response (log it)
            if part.text:
                logger.debug(f"Gemini text response: {part.text}")

        logger.warning(f"No inline image in Gemini response (finish_reason={finish_reason or 'NONE'})")
        raise EmptyResponseError()

    def _generate_sync(
        self,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
    ) -> types.GenerateContentResponse:
        """Generate content (synchronous)."""
        return self.client.models.generate_content(
            model=self.config.model,
            contents=contents,
            config=config,
        )


# Singleton instance
_gemini_client: GeminiClient | None = None


def get_gemini_client() -> GeminiClient:
    """Get Gemini client singleton instance."""
    global _gemini_client
    if _gemini_client is None:
        _gemini_client = GeminiClient()
    return _gemini_client
