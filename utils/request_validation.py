"""Validation helpers for incoming analysis requests.

Checks here are syntactic only: image references are never fetched or
decoded, so a request is rejected before any model call is paid for.
"""

import json
import logging
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError as PydanticValidationError

from models.analysis_models import AnalysisRequest, AnalyzeBody, InteractionMode
from models.errors import InvalidRequest, MethodNotAllowed

LOGGER = logging.getLogger(__name__)

DATA_URI_IMAGE_PREFIX = "data:image/"
HTTP_PREFIX = "http"


def ensure_post(method: str) -> None:
    """Reject every HTTP method other than POST."""
    if (method or "").upper() != "POST":
        raise MethodNotAllowed("Only POST is supported.")


def parse_body(raw: Any) -> Dict[str, Any]:
    """Decode the request body into a JSON object.

    An empty body is treated as an empty object, matching the behaviour of
    clients that post without a payload.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidRequest("body not JSON") from exc
    text = raw or "{}"
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidRequest("body not JSON") from exc
    if not isinstance(payload, dict):
        raise InvalidRequest("body not JSON object")
    return payload


def is_valid_image_reference(value: Any) -> bool:
    """Return True for an embedded image data URI or an HTTP(S) URL."""
    if not isinstance(value, str):
        return False
    return value.startswith(DATA_URI_IMAGE_PREFIX) or value.startswith(HTTP_PREFIX)


def _submitted_images(payload: Dict[str, Any]) -> Any:
    images = payload.get("images")
    if images is None and payload.get("image") is not None:
        # Single-image bodies from older clients.
        images = [payload["image"]]
    return images


def _has_images(images: Any) -> bool:
    return isinstance(images, list) and bool(images) and all(isinstance(image, str) for image in images)


def _load_body(payload: Dict[str, Any]) -> AnalyzeBody:
    try:
        return AnalyzeBody.model_validate(payload)
    except PydanticValidationError as exc:
        fields = sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")})
        raise InvalidRequest("invalid field(s): " + ", ".join(fields)) from exc


def _check_images(images: List[Any]) -> Tuple[str, ...]:
    for index, image in enumerate(images):
        if not is_valid_image_reference(image):
            LOGGER.info("Rejected image %d: unsupported reference format", index)
            raise InvalidRequest(
                f"bad image format: images[{index}] must be a data:image/ URI or an HTTP URL"
            )
    return tuple(images)


def validate_request(payload: Dict[str, Any]) -> AnalysisRequest:
    """Build an AnalysisRequest from a parsed body, or raise InvalidRequest.

    The presence of `priorImageDescriptions` selects follow-up mode; every
    other body is an initial analysis and must carry a non-empty list of
    image strings. Field types are then checked by `AnalyzeBody`.
    """
    follow_up = payload.get("priorImageDescriptions") is not None
    if not follow_up and not _has_images(_submitted_images(payload)):
        raise InvalidRequest("no images")

    body = _load_body(payload)
    images = body.images
    if images is None:
        images = [body.image] if body.image is not None else []
    description = (body.description or "").strip() or None

    if not follow_up:
        return AnalysisRequest(images=_check_images(images), description=description)

    if body.previousAnalysis is None:
        raise InvalidRequest("missing previousAnalysis")

    return AnalysisRequest(
        images=_check_images(images),
        description=description,
        mode=InteractionMode.FOLLOW_UP,
        prior_image_descriptions=tuple(body.priorImageDescriptions),
        prior_analysis=body.previousAnalysis,
    )
