"""Domain models for the photo studio."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GenerationState(str, Enum):
    """Lifecycle of a generation session."""

    IDLE = "IDLE"  # Waiting for input
    LOADING = "LOADING"  # Sequence in flight
    SUCCESS = "SUCCESS"  # All angles rendered
    ERROR = "ERROR"  # Sequence aborted


class Angle(BaseModel):
    """Camera-perspective preset requested once per sequence."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    prompt: str


class ProductImage(BaseModel):
    """Generated result for one angle."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Angle identifier")
    url: str = Field(..., description="Generated image as a data URI")
    angle: str = Field(..., description="Camera angle label")
    description: str = Field("", description="Human-readable description")

    @classmethod
    def from_angle(cls, angle: Angle, url: str) -> "ProductImage":
        return cls(
            id=angle.id,
            url=url,
            angle=angle.label,
            description=f"Generated {angle.label}",
        )


ANGLES: tuple[Angle, ...] = (
    Angle(
        id="1",
        label="Frontal Master",
        prompt="Perfect centered frontal view, professional lighting.",
    ),
    Angle(
        id="2",
        label="Hero Perspective",
        prompt="Three-quarter dynamic view, premium depth.",
    ),
    Angle(
        id="3",
        label="Detail View",
        prompt="Close-up texture focus or side-profile view.",
    ),
)

# Preset backdrops offered next to the free-text style prompt
STYLE_PRESETS: dict[str, str] = {
    "Natural indoor": "",
    "Minimalist concrete loft": "Minimalist concrete loft, soft daylight from a large window.",
    "Marble countertop": "White marble countertop, bright kitchen, soft morning sun.",
    "Wooden table": "Warm oak wooden table, cozy living room, golden hour light.",
    "Pure white studio": "Seamless pure white studio backdrop, softbox lighting, gentle shadow.",
    "Outdoor lifestyle": "Outdoor terrace, blurred greenery background, natural sunlight.",
}
