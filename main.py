import inspect
import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from openai import AsyncOpenAI

from routes.analysis_route import router as analysis_router
from services.openai.model_gateway import DEFAULT_MODEL

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize the OpenAI async client and attach it to
    `app.state`. A missing OPENAI_API_KEY does not stop startup: the analyze
    route answers with a configuration error instead.
    """
    app.state.openai_model = os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
    app.state.openai_client = None

    if os.getenv("OPENAI_API_KEY"):
        try:
            app.state.openai_client = AsyncOpenAI()
        except Exception as exc:
            raise RuntimeError("Failed to initialize OpenAI Async client") from exc
    else:
        LOGGER.warning("OPENAI_API_KEY environment variable is not set; analysis requests will fail.")

    try:
        yield
    finally:
        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    result = aclose()
                    if inspect.isawaitable(result):
                        await result
                except Exception as exc:
                    LOGGER.warning("Error while closing OpenAI client: %s", exc)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(title="Home Repair Diagnosis", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check reporting whether the OpenAI client is available.
        """
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        model = getattr(request.app.state, "openai_model", DEFAULT_MODEL)
        return {"ok": True, "openai_available": has_openai, "model": model}

    app.include_router(analysis_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
