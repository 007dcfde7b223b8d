"""Description: Single-call gateway to a vision-capable model through the Responses API."""

import logging
import os
import time
from typing import Any, Optional, Tuple

from openai import AsyncOpenAI, OpenAIError

from models.analysis_models import PromptPayload
from models.errors import ModelError
from services.openai.media_inputs import build_inputs
from services.openai.usage import estimate_cost

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")


def extract_output_text(response: Any) -> str:
    """Return the concatenated output text of a Responses API result."""
    text = getattr(response, "output_text", None)
    if text:
        return text

    parts = []
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) == "output_text":
                parts.append(getattr(content, "text", "") or "")
    return "".join(parts)


def extract_usage(response: Any) -> Tuple[Optional[int], Optional[int]]:
    """Return (input_tokens, output_tokens), with None where usage is not reported."""
    usage = getattr(response, "usage", None)
    return getattr(usage, "input_tokens", None), getattr(usage, "output_tokens", None)


class ModelGateway:
    """Send a built prompt to the model and return its raw text.

    Exactly one provider call is made per `complete`; failures are not retried.
    """

    def __init__(self, client: AsyncOpenAI, model: str = DEFAULT_MODEL) -> None:
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model

    async def complete(self, prompt: PromptPayload) -> str:
        """Return the model's raw text for the prompt.

        Raises:
            ModelError: If the provider call fails or returns no text.
        """
        start_time = time.time()
        response = await self._create_response(prompt)
        latency = time.time() - start_time

        input_tokens, output_tokens = extract_usage(response)
        LOGGER.info(
            "Model %s answered in %.3fs (input_tokens=%s, output_tokens=%s, est_cost=%s)",
            self.model,
            latency,
            input_tokens,
            output_tokens,
            estimate_cost(input_tokens, output_tokens, self.model),
        )

        text = extract_output_text(response)
        if not text or not text.strip():
            LOGGER.error("Model %s returned no output text.", self.model)
            raise ModelError("empty output")
        return text

    async def _create_response(self, prompt: PromptPayload) -> Any:
        """Send the multimodal request to the OpenAI Responses API."""
        try:
            return await self.client.responses.create(model=self.model, input=build_inputs(prompt))
        except OpenAIError as exc:
            status = getattr(exc, "status_code", None)
            error_type = getattr(exc, "type", None) or type(exc).__name__
            LOGGER.error("Error during OpenAI Responses API call (status=%s, type=%s): %s", status, error_type, exc)
            raise ModelError(str(exc), error_type=error_type, provider_status=status) from exc
