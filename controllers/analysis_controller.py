import logging
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from models.errors import AnalysisError, ConfigurationError
from services.openai.analysis_prompts import build_prompt
from services.openai.model_gateway import ModelGateway
from services.openai.response_parser import extract_json
from services.openai.result_schema import ensure_valid_result
from utils.request_validation import ensure_post, parse_body, validate_request

LOGGER = logging.getLogger(__name__)


async def run_analysis(method: str, body: bytes, gateway: Optional[ModelGateway]) -> Dict[str, Any]:
    """Run one request through the full pipeline and return the validated result.

    Args:
        method: HTTP method of the incoming request.
        body: Raw request body.
        gateway: Model gateway, or None when no provider credential is configured.

    Returns:
        The AnalysisResult object exactly as recovered from the model.

    Raises:
        AnalysisError: For any rejected request or failed pipeline stage.
    """
    ensure_post(method)
    if gateway is None:
        raise ConfigurationError("OpenAI API key is not configured")

    request = validate_request(parse_body(body))
    LOGGER.info("Analyzing %d image(s) in %s mode", len(request.images), request.mode.value)

    prompt = build_prompt(request)
    raw_text = await gateway.complete(prompt)
    return ensure_valid_result(extract_json(raw_text))


async def analyze(method: str, body: bytes, gateway: Optional[ModelGateway]) -> JSONResponse:
    """Controller for the analyze route: always answers with a JSON body."""
    try:
        result = await run_analysis(method, body, gateway)
        return JSONResponse(status_code=200, content=result)
    except AnalysisError as exc:
        log = LOGGER.warning if exc.status_code < 500 else LOGGER.error
        log("Analysis failed with %s: %s", type(exc).__name__, exc.to_payload().get("details", exc.details))
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    except Exception as exc:  # pylint: disable=broad-exception-caught
        LOGGER.exception("Unexpected error during analysis")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "details": str(exc), "type": type(exc).__name__},
        )
