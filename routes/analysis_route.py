"""FastAPI routes for home repair image analysis."""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from controllers.analysis_controller import analyze
from services.openai.model_gateway import DEFAULT_MODEL, ModelGateway

router = APIRouter(tags=["analysis"])

# Every method is routed here so that non-POST requests get the JSON 405 body.
ANALYZE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_model_gateway(request: Request) -> Optional[ModelGateway]:
    """Return a gateway over the shared OpenAI client, or None when unconfigured."""
    openai_client = getattr(request.app.state, "openai_client", None)
    if openai_client is None:
        return None
    model = getattr(request.app.state, "openai_model", None) or DEFAULT_MODEL
    return ModelGateway(openai_client, model=model)


@router.api_route("/api/analyze", methods=ANALYZE_METHODS, summary="Diagnose a home repair issue from photos")
@router.api_route("/.netlify/functions/analyze", methods=ANALYZE_METHODS, include_in_schema=False)
async def analyze_route(request: Request, gateway: Optional[ModelGateway] = Depends(get_model_gateway)):
    """Validate the body, query the model once, and return the structured diagnosis."""
    body = await request.body()
    return await analyze(request.method, body, gateway)
