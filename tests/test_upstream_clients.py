"""Generator and weather HTTP clients against mocked transports."""
import json

import httpx
import pytest

from cropcast.services.errors import GeneratorConfigError, GeneratorUpstreamError
from cropcast.services.generator import GeneratorClient, extract_text
from cropcast.services.weather import WeatherClient, WeatherReading, synthetic_snapshot

pytestmark = pytest.mark.anyio


def _reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


async def test_generate_posts_prompt_with_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_reply("Plant early."))

    client = GeneratorClient(api_key="secret", model="gemini-pro", transport=httpx.MockTransport(handler))
    text = await client.generate("When should I plant?")

    assert text == "Plant early."
    assert seen["url"].path.endswith("/models/gemini-pro:generateContent")
    assert seen["url"].params["key"] == "secret"
    assert seen["body"] == {"contents": [{"parts": [{"text": "When should I plant?"}]}]}


async def test_generate_without_key_never_calls_out():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=_reply("x"))

    client = GeneratorClient(api_key=None, transport=httpx.MockTransport(handler))
    with pytest.raises(GeneratorConfigError):
        await client.generate("hello")
    assert calls == []


async def test_generate_non_success_status():
    client = GeneratorClient(
        api_key="k", transport=httpx.MockTransport(lambda request: httpx.Response(429, json={}))
    )
    with pytest.raises(GeneratorUpstreamError):
        await client.generate("hello")


async def test_generate_network_failure():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = GeneratorClient(api_key="k", transport=httpx.MockTransport(handler))
    with pytest.raises(GeneratorUpstreamError):
        await client.generate("hello")


def test_extract_text_tolerates_missing_parts():
    assert extract_text({"candidates": []}) is None
    assert extract_text({}) is None
    assert extract_text({"candidates": [{"content": {"parts": [{"text": ""}]}}]}) is None
    assert extract_text(_reply("ok")) == "ok"


async def test_weather_reading_described():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["q"] == "Nakuru"
        assert request.url.params["units"] == "metric"
        return httpx.Response(200, json={"main": {"temp": 21.4, "humidity": 58}, "rain": {"1h": 0.6}})

    client = WeatherClient(api_key="w", transport=httpx.MockTransport(handler))
    reading = await client.current("Nakuru")

    assert reading.describe() == "Temperature: 21.4°C, Humidity: 58%, Recent rainfall: 0.6mm"
    assert reading.raw["main"]["temp"] == 21.4


def test_weather_defaults_for_missing_values():
    reading = WeatherReading.from_openweather({})
    assert (reading.temperature, reading.humidity, reading.rainfall_mm) == (25, 60, 0)


async def test_weather_failure_is_absorbed():
    client = WeatherClient(
        api_key="w", transport=httpx.MockTransport(lambda request: httpx.Response(404, json={}))
    )
    assert await client.current("Atlantis") is None


async def test_weather_skipped_without_location_or_key():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    assert await WeatherClient(api_key="w", transport=httpx.MockTransport(handler)).current("  ") is None
    assert await WeatherClient(api_key=None, transport=httpx.MockTransport(handler)).current("Nairobi") is None
    assert calls == []


def test_synthetic_snapshot():
    snapshot = synthetic_snapshot("Kitale")
    assert snapshot.location == "Kitale"
    assert snapshot.condition == "Partly Cloudy"


def test_weather_tolerates_odd_shapes():
    reading = WeatherReading.from_openweather({"main": "n/a", "rain": [1, 2]})
    assert (reading.temperature, reading.humidity, reading.rainfall_mm) == (25, 60, 0)


def test_generator_configured_only_with_key():
    assert GeneratorClient(api_key="k").configured
    assert not GeneratorClient(api_key=None).configured
    assert not GeneratorClient(api_key="").configured
