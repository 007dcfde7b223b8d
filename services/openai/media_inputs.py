"""Utilities to build multimodal input payloads for the Responses API."""

from typing import Any, Dict, List

from models.analysis_models import PromptPayload

IMAGE_DETAIL = "high"


def build_image_content(image_url: str) -> Dict[str, Any]:
    """Return an input_image entry for a data URI or HTTP URL."""
    return {"type": "input_image", "image_url": image_url, "detail": IMAGE_DETAIL}


def build_inputs(prompt: PromptPayload) -> List[Dict[str, Any]]:
    """Build the Responses API input array: one user message, text first, then images."""
    content: List[Dict[str, Any]] = [{"type": "input_text", "text": prompt.text}]
    content.extend(build_image_content(image) for image in prompt.images)
    return [{"type": "message", "role": "user", "content": content}]
