"""Shared fixtures for the NGSI proxy tests."""

import random

import httpx
import pytest

from backends import BackendRegistry, RandomBackend, StaticBackend, TwitterBackend, WeatherBackend
from ngsi_proxy.service import NGSIProxyService
from services.twitter_client import TwitterClient
from services.weather_client import WeatherClient

WEATHER_KEY = "test-key"
TWITTER_TOKEN = "test-token"

BERLIN_CONDITIONS = {
    "current_observation": {
        "temp_c": 12.4,
        "relative_humidity": "71%",
        "weather": "Overcast",
        "display_location": {"city": "Berlin"},
    }
}

FIWARE_TWEETS = {
    "data": [
        {"id": "1", "text": "first tweet about FIWARE", "lang": "en"},
        {"id": "2", "text": "second tweet about FIWARE", "lang": "en"},
        {"id": "3", "text": "third tweet about FIWARE", "lang": "de"},
    ],
    "meta": {"result_count": 3},
}


def weather_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith(f"/{WEATHER_KEY}/conditions/q/Germany/Berlin.json"):
        return httpx.Response(200, json=BERLIN_CONDITIONS)
    return httpx.Response(200, json={
        "response": {"error": {"type": "querynotfound", "description": "No cities match your search query"}}
    })


def twitter_handler(request: httpx.Request) -> httpx.Response:
    if request.headers.get("Authorization") != f"Bearer {TWITTER_TOKEN}":
        return httpx.Response(401, json={"title": "Unauthorized"})
    if request.url.params.get("query") == "FIWARE":
        return httpx.Response(200, json=FIWARE_TWEETS)
    return httpx.Response(200, json={"meta": {"result_count": 0}})


def timeout_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


def make_registry(weather=weather_handler, twitter=twitter_handler, max_workers=1, seed=42):
    """Registry with all four backends; live clients go through MockTransport."""
    weather_client = WeatherClient(
        base_url="http://weather.test/api",
        api_key=WEATHER_KEY,
        timeout=1.0,
        transport=httpx.MockTransport(weather)
    )
    twitter_client = TwitterClient(
        base_url="http://twitter.test/2",
        bearer_token=TWITTER_TOKEN,
        timeout=1.0,
        transport=httpx.MockTransport(twitter)
    )
    return BackendRegistry({
        "random": RandomBackend(rng=random.Random(seed), max_workers=max_workers),
        "static": StaticBackend(max_workers=max_workers),
        "twitter": TwitterBackend(twitter_client, max_workers=max_workers),
        "weather": WeatherBackend(weather_client, max_workers=max_workers),
    })


@pytest.fixture
def registry():
    registry = make_registry()
    yield registry
    registry.close()


@pytest.fixture
def service(registry):
    return NGSIProxyService(registry=registry)


@pytest.fixture
def timeout_service():
    registry = make_registry(weather=timeout_handler, twitter=timeout_handler)
    yield NGSIProxyService(registry=registry)
    registry.close()
