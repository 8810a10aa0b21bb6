"""Exceptions surfaced to the studio UI."""

import math


class StudioError(Exception):
    """Base class for errors with a user-facing message."""

    default_message = "An unexpected error occurred. Please check your connection."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


# Input validation (rejected locally, before any API call)


class InputValidationError(StudioError):
    default_message = "The provided image could not be used."


class MissingSourceImageError(InputValidationError):
    default_message = "Please upload or capture a product image first."


class ImageTooLargeError(InputValidationError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Image exceeds {limit // (1024 * 1024)}MB limit.")


class ImageDimensionsTooLargeError(InputValidationError):
    default_message = "Image resolution is too large. Please upload a smaller photo."


class UnsupportedImageError(InputValidationError):
    default_message = "Unsupported file. Please upload a JPEG, PNG, GIF or WEBP image."


class InvalidDataURIError(InputValidationError):
    default_message = "Image data is malformed. Please upload the image again."


# Credentials


class CredentialsError(StudioError):
    default_message = "Gemini API credentials are not configured correctly."


class MissingCredentialsError(CredentialsError):
    default_message = (
        "Gemini API key is not set. Add GEMINI_API_KEY to your environment or .env file."
    )


class InvalidCredentialsError(CredentialsError):
    default_message = "Gemini API key was rejected. Check that GEMINI_API_KEY is valid."


# Provider responses


class RateLimitError(StudioError):
    default_message = "Rate limit reached. Please wait for the cooldown before resuming."


class SafetyBlockError(StudioError):
    default_message = (
        "The image was blocked by the safety filter. "
        "Try a different photo or a less sensitive style prompt."
    )


class EmptyResponseError(StudioError):
    default_message = "The model returned no image. Please try again."


# Resume


class ResumeError(StudioError):
    default_message = "Generation cannot be resumed right now."


class CooldownActiveError(ResumeError):
    def __init__(self, remaining: float):
        self.remaining = remaining
        super().__init__(f"Cooldown active. You can resume in {math.ceil(remaining)}s.")


class NothingToResumeError(ResumeError):
    default_message = "There is no interrupted generation to resume."
