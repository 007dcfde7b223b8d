from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from main import create_app
from models.errors import ModelError
from routes.analysis_route import get_model_gateway
from tests.helpers import PNG_DATA_URI, StubGateway, complete_result


@pytest.fixture
def app():
    return create_app()


def client_with(app, gateway):
    app.dependency_overrides[get_model_gateway] = lambda: gateway
    return TestClient(app)


def test_initial_request_end_to_end(app):
    expected = complete_result()
    gateway = StubGateway(json.dumps(expected))
    client = client_with(app, gateway)

    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})

    assert response.status_code == 200
    assert response.json() == expected
    assert gateway.calls == 1
    assert gateway.prompts[0].images == (PNG_DATA_URI,)


def test_legacy_function_path(app):
    client = client_with(app, StubGateway())
    response = client.post("/.netlify/functions/analyze", json={"image": PNG_DATA_URI})
    assert response.status_code == 200


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_non_post_is_405_json(app, method):
    gateway = StubGateway()
    client = client_with(app, gateway)
    response = getattr(client, method)("/api/analyze")
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}
    assert gateway.calls == 0


def test_missing_images_rejected_before_model_call(app, stub_gateway):
    client = client_with(app, stub_gateway)
    response = client.post("/api/analyze", json={"description": "Leaky faucet"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid Request"
    assert body["details"] == "no images"
    assert body["type"] == "InvalidRequest"
    assert stub_gateway.calls == 0


def test_bad_image_rejected_before_model_call(app, stub_gateway):
    client = client_with(app, stub_gateway)
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI, "c:/photos/leak.jpg"]})
    assert response.status_code == 400
    assert "images[1]" in response.json()["details"]
    assert stub_gateway.calls == 0


def test_body_not_json(app, stub_gateway):
    client = client_with(app, stub_gateway)
    response = client.post("/api/analyze", content=b"images=leak.jpg", headers={"Content-Type": "text/plain"})
    assert response.status_code == 400
    assert response.json()["details"] == "body not JSON"


def test_follow_up_without_previous_analysis(app, stub_gateway):
    client = client_with(app, stub_gateway)
    response = client.post(
        "/api/analyze",
        json={"description": "Do I need a permit?", "priorImageDescriptions": ["A cracked foundation wall."]},
    )
    assert response.status_code == 400
    assert stub_gateway.calls == 0


def test_follow_up_end_to_end(app):
    answer = complete_result(summary="Regarding your question about permits, most cities require one.")
    gateway = StubGateway("```json\n" + json.dumps(answer) + "\n```")
    client = client_with(app, gateway)

    response = client.post(
        "/api/analyze",
        json={
            "description": "Do I need a permit?",
            "priorImageDescriptions": answer["imageDescriptions"],
            "previousAnalysis": complete_result(),
        },
    )

    assert response.status_code == 200
    assert response.json() == answer
    assert gateway.prompts[0].images == ()


def test_missing_configuration(app):
    # No lifespan run and no override: the OpenAI client was never created.
    client = TestClient(app)
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    assert response.json()["error"] == "Configuration Error"
    assert response.json()["type"] == "ConfigurationError"


def test_missing_configuration_is_checked_before_body(app):
    client = TestClient(app)
    response = client.post("/api/analyze", content=b"not json")
    assert response.status_code == 500
    assert response.json()["type"] == "ConfigurationError"


def test_model_error_is_500(app):
    gateway = StubGateway(error=ModelError("Rate limit reached", error_type="rate_limit_exceeded"))
    client = client_with(app, gateway)
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    assert response.json() == {
        "error": "API Error",
        "details": "Rate limit reached",
        "type": "rate_limit_exceeded",
    }


def test_empty_model_output_is_500(app):
    client = client_with(app, StubGateway(""))
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    assert response.json()["details"] == "empty output"


def test_unparseable_model_output_is_500(app):
    client = client_with(app, StubGateway("I cannot help with that image."))
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    assert response.json()["type"] == "ExtractionError"


def test_incomplete_model_output_is_500_without_partial_result(app):
    partial = complete_result()
    del partial["safetyWarnings"]
    client = client_with(app, StubGateway(json.dumps(partial)))
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    body = response.json()
    assert body["type"] == "ValidationError"
    assert "safetyWarnings" in body["details"]
    assert "summary" not in body


def test_unexpected_error_still_returns_json(app):
    client = client_with(app, StubGateway(error=RuntimeError("boom")))
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error", "details": "boom", "type": "RuntimeError"}


def test_health_reports_openai_unavailable(app):
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json()["openai_available"] is False


def test_nan_in_model_output_returns_json_error(app):
    text = json.dumps(complete_result())[:-1] + ', "confidence": NaN}'
    client = client_with(app, StubGateway(text))
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json()["type"] == "ExtractionError"


def test_unencodable_result_still_returns_json(app, monkeypatch):
    monkeypatch.setattr(
        "controllers.analysis_controller.ensure_valid_result",
        lambda value: complete_result(confidence=float("inf")),
    )
    client = client_with(app, StubGateway())
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    assert response.json()["error"] == "Internal Server Error"


def test_provider_status_is_reported(app):
    error = ModelError("Rate limit reached", error_type="rate_limit_exceeded", provider_status=429)
    client = client_with(app, StubGateway(error=error))
    response = client.post("/api/analyze", json={"images": [PNG_DATA_URI]})
    assert response.status_code == 500
    assert response.json()["details"] == "Rate limit reached (provider status 429)"
