"""Test fixtures for CropCast: in-memory SQLite, TestClient, fake upstream APIs."""
from __future__ import annotations

import json
import os
from typing import Callable, Dict

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GOOGLE_AI_API_KEY"] = ""
os.environ["OPENWEATHER_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from cropcast.database import Base, SessionLocal, engine  # noqa: E402
from cropcast.main import app  # noqa: E402
from cropcast.services.generator import GeneratorClient, get_generator  # noqa: E402
from cropcast.services.weather import WeatherClient, get_weather_client  # noqa: E402


GOOD_REPLY = {
    "recommendations": [
        {
            "crop": name,
            "suitability": score,
            "factors": {
                "soil": f"{name} suits the soil",
                "climate": f"{name} suits the climate",
                "rotation": f"{name} rotates well",
                "water": "Moderate",
            },
        }
        for name, score in [("Rice", 92), ("Barley", 88), ("Oats", 81), ("Peas", 75), ("Canola", 70)]
    ]
}


class FakeGemini:
    """Records prompts and answers like the generateContent endpoint."""

    def __init__(self):
        self.prompts: list[str] = []
        self.reply_text: str | None = json.dumps(GOOD_REPLY)
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.prompts.append(body["contents"][0]["parts"][0]["text"])
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": {"message": "boom"}})
        if self.reply_text is None:
            return httpx.Response(200, json={"candidates": []})
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": self.reply_text}]}}]}
        )

    def client(self, api_key: str | None = "test-key") -> GeneratorClient:
        return GeneratorClient(api_key=api_key, transport=httpx.MockTransport(self.handler))


class FakeWeather:
    def __init__(self):
        self.locations: list[str] = []
        self.status_code = 200
        self.payload = {"main": {"temp": 18.5, "humidity": 71}, "rain": {"1h": 2.2}}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.locations.append(request.url.params["q"])
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "city not found"})
        return httpx.Response(200, json=self.payload)

    def client(self) -> WeatherClient:
        return WeatherClient(api_key="weather-key", transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gemini() -> FakeGemini:
    fake = FakeGemini()
    app.dependency_overrides[get_generator] = fake.client
    yield fake
    app.dependency_overrides.pop(get_generator, None)


@pytest.fixture
def weather() -> FakeWeather:
    fake = FakeWeather()
    app.dependency_overrides[get_weather_client] = fake.client
    yield fake
    app.dependency_overrides.pop(get_weather_client, None)


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client: TestClient) -> Callable[..., Dict[str, str]]:
    """Sign up and log in a user; return bearer headers."""

    def _register(email: str = "farmer@example.com", password: str = "Harvest2024", full_name: str | None = None):
        resp = client.post("/auth/signup", json={"email": email, "password": password, "full_name": full_name})
        assert resp.status_code == 201, resp.text
        resp = client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _register


@pytest.fixture
def auth_headers(register) -> Dict[str, str]:
    return register()


@pytest.fixture
def farm(client: TestClient, auth_headers: Dict[str, str]) -> dict:
    resp = client.post("/farms", json={"name": "Hill Farm", "location": "Nakuru", "area_size": 10}, headers=auth_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def field(client: TestClient, auth_headers: Dict[str, str], farm: dict) -> dict:
    resp = client.post(
        f"/farms/{farm['id']}/fields",
        json={"field_name": "East Block", "soil_type": "Clay", "field_location": "", "previous_crops": ["Wheat"]},
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def anyio_backend():
    return "asyncio"
