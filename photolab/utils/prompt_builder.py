"""Prompt builder utilities for Gemini."""

import logging

logger = logging.getLogger(__name__)

DEFAULT_STYLE = (
    "Clean professional smartphone photo, natural lighting, realistic indoor background."
)

CRITICAL_RULES = (
    "Preserve the product's core identity (shape, color, texture).",
    "Make it look like a real photo taken on an iPhone/Smartphone.",
    "Product should occupy 60-80% of the frame.",
    "Sharp focus on the entire product.",
    "Authentic shadows and realistic surface reflections.",
    "No AI artifacts, no impossible geometry, no blurry edges.",
    "Do NOT create a collage. Single image output.",
)


def resolve_style(style_prompt: str | None) -> str:
    """Return the user style, or the default style when it is blank.

    Args:
        style_prompt: Free-text style from the user

    Returns:
        Style instructions to embed in the prompt
    """
    if style_prompt and style_prompt.strip():
        return style_prompt.strip()
    return DEFAULT_STYLE


def build_angle_prompt(angle_prompt: str, style_prompt: str | None = "") -> str:
    """Build the composite instruction for one angle.

    Args:
        angle_prompt: Fixed per-angle camera instruction
        style_prompt: Optional backdrop/lighting description

    Returns:
        Instruction text sent alongside the source image
    """
    parts = [
        "You are a professional smartphone photographer for an e-commerce marketplace.",
        "TASK: Take the provided source image and generate a new high-quality "
        "photograph from a specific angle.",
        f"ANGLE: {angle_prompt.strip()}",
        f"STYLE INSTRUCTIONS: {resolve_style(style_prompt)}",
        "",
        "CRITICAL RULES:",
    ]
    parts.extend(f"- {rule}" for rule in CRITICAL_RULES)

    prompt = "\n".join(parts)
    logger.debug(f"Built angle prompt ({len(prompt)} chars): {angle_prompt[:50]}")
    return prompt
