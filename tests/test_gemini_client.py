"""Tests for the Gemini generation wrapper."""

import base64
from unittest.mock import MagicMock

import pytest
from google.genai import errors, types

from photolab.config import GeminiConfig
from photolab.errors import (
    EmptyResponseError,
    InvalidCredentialsError,
    MissingCredentialsError,
    RateLimitError,
    SafetyBlockError,
)
from photolab.services import gemini_client
from photolab.services.gemini_client import GeminiClient, classify_api_error

GENERATED = b"\x89PNG\r\n\x1a\ngenerated-image"


def _response(parts=None, finish_reason=types.FinishReason.STOP, prompt_feedback=None):
    candidates = None
    if parts is not None:
        candidates = [
            types.Candidate(
                content=types.Content(role="model", parts=parts),
                finish_reason=finish_reason,
            )
        ]
    return types.GenerateContentResponse(candidates=candidates, prompt_feedback=prompt_feedback)


def _image_part(data: bytes = GENERATED, mime_type: str = "image/png") -> types.Part:
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


def _api_error(cls, code: int, message: str, status: str):
    return cls(code, {"error": {"code": code, "message": message, "status": status}})


@pytest.fixture
def sdk_client(monkeypatch):
    """Replace genai.Client so no network client is built."""
    client = MagicMock()
    factory = MagicMock(return_value=client)
    monkeypatch.setattr(gemini_client.genai, "Client", factory)
    return client


@pytest.fixture
def client(sdk_client) -> GeminiClient:
    return GeminiClient(GeminiConfig(api_key="test-key", model="gemini-2.5-flash-image"))


def test_missing_api_key_raises_before_client_creation(monkeypatch):
    factory = MagicMock()
    monkeypatch.setattr(gemini_client.genai, "Client", factory)

    with pytest.raises(MissingCredentialsError):
        GeminiClient(GeminiConfig(api_key="  "))

    factory.assert_not_called()


@pytest.mark.asyncio
async def test_returns_first_inline_image_as_data_uri(client, sdk_client, source_uri, png_bytes):
    sdk_client.models.generate_content.return_value = _response(
        [types.Part(text="Here is your photo"), _image_part(), _image_part(b"second")]
    )

    result = await client.generate_angle(source_uri, "Three-quarter dynamic view.", "soft sun")

    assert result == "data:image/png;base64," + base64.b64encode(GENERATED).decode()

    kwargs = sdk_client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash-image"
    image_part, text_part = kwargs["contents"][0].parts
    assert image_part.inline_data.data == png_bytes
    assert image_part.inline_data.mime_type == "image/png"
    assert "ANGLE: Three-quarter dynamic view." in text_part.text
    assert "STYLE INSTRUCTIONS: soft sun" in text_part.text


@pytest.mark.asyncio
async def test_blank_style_uses_default_instructions(client, sdk_client, source_uri):
    sdk_client.models.generate_content.return_value = _response([_image_part()])

    await client.generate_angle(source_uri, "Frontal view.", "")

    text_part = sdk_client.models.generate_content.call_args.kwargs["contents"][0].parts[1]
    assert "natural lighting, realistic indoor background" in text_part.text


@pytest.mark.asyncio
async def test_safety_finish_reason_raises_safety_block(client, sdk_client, source_uri):
    sdk_client.models.generate_content.return_value = _response(
        [], finish_reason=types.FinishReason.SAFETY
    )

    with pytest.raises(SafetyBlockError):
        await client.generate_angle(source_uri, "Frontal view.")


@pytest.mark.asyncio
async def test_blocked_prompt_raises_safety_block(client, sdk_client, source_uri):
    sdk_client.models.generate_content.return_value = _response(
        prompt_feedback=types.GenerateContentResponsePromptFeedback(
            block_reason=types.BlockedReason.SAFETY
        )
    )

    with pytest.raises(SafetyBlockError):
        await client.generate_angle(source_uri, "Frontal view.")


@pytest.mark.asyncio
async def test_text_only_response_raises_empty_response(client, sdk_client, source_uri):
    sdk_client.models.generate_content.return_value = _response(
        [types.Part(text="I cannot do that.")]
    )

    with pytest.raises(EmptyResponseError):
        await client.generate_angle(source_uri, "Frontal view.")


@pytest.mark.asyncio
async def test_no_candidates_raises_empty_response(client, sdk_client, source_uri):
    sdk_client.models.generate_content.return_value = _response()

    with pytest.raises(EmptyResponseError):
        await client.generate_angle(source_uri, "Frontal view.")


@pytest.mark.asyncio
async def test_http_429_raises_rate_limit(client, sdk_client, source_uri):
    sdk_client.models.generate_content.side_effect = _api_error(
        errors.ClientError, 429, "Resource has been exhausted", "RESOURCE_EXHAUSTED"
    )

    with pytest.raises(RateLimitError) as exc_info:
        await client.generate_angle(source_uri, "Frontal view.")

    assert isinstance(exc_info.value.__cause__, errors.ClientError)
    assert sdk_client.models.generate_content.call_count == 1


@pytest.mark.asyncio
async def test_invalid_key_raises_invalid_credentials(client, sdk_client, source_uri):
    sdk_client.models.generate_content.side_effect = _api_error(
        errors.ClientError, 400, "API key not valid. Please pass a valid API key.", "INVALID_ARGUMENT"
    )

    with pytest.raises(InvalidCredentialsError):
        await client.generate_angle(source_uri, "Frontal view.")


@pytest.mark.asyncio
async def test_other_provider_errors_pass_through(client, sdk_client, source_uri):
    original = _api_error(errors.ServerError, 500, "Internal error encountered.", "INTERNAL")
    sdk_client.models.generate_content.side_effect = original

    with pytest.raises(errors.ServerError) as exc_info:
        await client.generate_angle(source_uri, "Frontal view.")

    assert exc_info.value is original


def test_classify_permission_denied_as_credentials():
    error = _api_error(errors.ClientError, 403, "Permission denied", "PERMISSION_DENIED")

    assert isinstance(classify_api_error(error), InvalidCredentialsError)


def test_classify_bad_request_passes_through():
    error = _api_error(errors.ClientError, 400, "Image too small", "INVALID_ARGUMENT")

    assert classify_api_error(error) is error
