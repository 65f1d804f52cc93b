import json

import pytest
from fastapi.testclient import TestClient

from holiday_planner.agents.recommendation_agent.gemini_client import (
    CompletionServiceError,
    GeminiCompletionClient,
)
from holiday_planner.api.main import app
from holiday_planner.api.route import get_completion_client
from holiday_planner.utils.config import Settings, get_settings

REQUEST = {"temperature": "warm", "type": "summer", "budgetMin": 1000, "budgetMax": 5000}


class FakeCompletionClient:
    def __init__(self, text="", exc=None):
        self.text = text
        self.exc = exc
        self.prompts = []

    async def complete(self, prompt):
        self.prompts.append(prompt)
        if self.exc:
            raise self.exc
        return self.text


def destinations(n):
    return {
        "destinations": [
            {
                "name": f"Beach {i}",
                "country": "Greece",
                "description": "Whitewashed villages above a turquoise sea.",
                "estimatedCost": 1500 + i * 100,
                "bestTimeToVisit": "May to September",
                "highlights": ["Sunsets", "Boat trips"],
            }
            for i in range(n)
        ]
    }


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key", env="development")


@pytest.fixture
def client_for(settings):
    def _make(fake):
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_completion_client] = lambda: fake
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def test_default_request_returns_five_destinations(client_for):
    fake = FakeCompletionClient(json.dumps(destinations(5)))
    resp = client_for(fake).post("/api/recommendations", json=REQUEST)

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["destinations"]) == 5
    for dest in body["destinations"]:
        assert set(dest) == {"name", "country", "description", "estimatedCost", "bestTimeToVisit", "highlights"}
        assert dest["highlights"]
    assert "Provide exactly 5 holiday destinations" in fake.prompts[0]


def test_valid_json_is_returned_unchanged(client_for):
    payload = destinations(3)
    payload["destinations"][0]["rating"] = 4.5
    resp = client_for(FakeCompletionClient(json.dumps(payload))).post(
        "/api/recommendations", json={**REQUEST, "count": 3}
    )

    assert resp.status_code == 200
    assert resp.json() == payload


def test_embedded_json_is_extracted(client_for):
    payload = destinations(2)
    text = "Here you go:\n" + json.dumps(payload) + "\nEnjoy!"
    resp = client_for(FakeCompletionClient(text)).post("/api/recommendations", json=REQUEST)

    assert resp.status_code == 200
    assert resp.json() == payload


def test_refusal_text_returns_500(client_for):
    resp = client_for(FakeCompletionClient("Sorry, I can't help with that.")).post(
        "/api/recommendations", json=REQUEST
    )

    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Failed to generate recommendations"
    assert body["details"] == "Could not parse AI response as JSON"
    assert body["debug"]["message"] == "Could not parse AI response as JSON"
    assert "Traceback" in body["debug"]["stack"]


def test_production_mode_hides_debug(client_for, settings):
    settings.env = "production"
    resp = client_for(FakeCompletionClient("no json here")).post("/api/recommendations", json=REQUEST)

    assert resp.status_code == 500
    assert "debug" not in resp.json()


def test_missing_cost_with_lenient_fallback_is_returned(client_for, settings):
    settings.lenient_fallback = True
    payload = destinations(1)
    del payload["destinations"][0]["estimatedCost"]
    resp = client_for(FakeCompletionClient(json.dumps(payload))).post("/api/recommendations", json=REQUEST)

    assert resp.status_code == 200
    assert resp.json() == payload


def test_missing_cost_is_rejected_by_default(client_for):
    payload = destinations(1)
    del payload["destinations"][0]["estimatedCost"]
    resp = client_for(FakeCompletionClient(json.dumps(payload))).post("/api/recommendations", json=REQUEST)

    assert resp.status_code == 500
    assert resp.json()["details"] == "Could not parse AI response as JSON"


def test_completion_failure_collapses_to_500(client_for):
    fake = FakeCompletionClient(exc=CompletionServiceError("Gemini request failed: boom"))
    resp = client_for(fake).post("/api/recommendations", json=REQUEST)

    assert resp.status_code == 500
    assert resp.json()["details"] == "Gemini request failed: boom"


def test_missing_credential_collapses_to_500(client_for):
    fake = GeminiCompletionClient(Settings(gemini_api_key=None))
    resp = client_for(fake).post("/api/recommendations", json=REQUEST)

    assert resp.status_code == 500
    assert "GEMINI_API_KEY" in resp.json()["details"]


def test_unreadable_body_collapses_to_500(client_for):
    resp = client_for(FakeCompletionClient("{}")).post(
        "/api/recommendations", content=b"not json", headers={"Content-Type": "application/json"}
    )

    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to generate recommendations"


def test_health(client_for):
    resp = client_for(FakeCompletionClient()).get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({"temperature": 5}, "Temperature preference: 5"),
        ({"count": None}, "Provide exactly None holiday destinations"),
        ({"budgetMin": "cheap"}, "Budget range: $cheap - $5000"),
        ({"count": 2.5}, "Provide exactly 2.5 holiday destinations"),
    ],
)
def test_unvalidated_values_reach_the_prompt(client_for, overrides, expected):
    fake = FakeCompletionClient(json.dumps(destinations(2)))
    resp = client_for(fake).post("/api/recommendations", json={**REQUEST, **overrides})

    assert resp.status_code == 200
    assert len(fake.prompts) == 1
    assert expected in fake.prompts[0]
