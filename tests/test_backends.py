"""Tests for the attribute backends."""

import json
import random

import httpx
import pytest

from backends import RandomBackend, StaticBackend, TwitterBackend, WeatherBackend
from backends.random_backend import DEFAULT_RANGE, FIELD_RANGES
from backends.static_backend import DEFAULT_SELECTOR, load_fixtures
from backends.weather_backend import coerce_number, parse_location
from ngsi_proxy.errors import (
    FixtureNotFound,
    InvalidMapping,
    InvalidSelector,
    SourceFieldNotFound,
    UnsupportedShape,
    UpstreamError,
)
from ngsi_proxy.mapping import parse_mapping
from services.twitter_client import TwitterClient
from services.weather_client import WeatherClient
from tests.conftest import (
    TWITTER_TOKEN,
    WEATHER_KEY,
    timeout_handler,
    twitter_handler,
    weather_handler,
)


def _weather(handler=weather_handler, api_key=WEATHER_KEY):
    return WeatherBackend(WeatherClient(
        base_url="http://weather.test/api",
        api_key=api_key,
        timeout=1.0,
        transport=httpx.MockTransport(handler)
    ))


def _twitter(handler=twitter_handler, bearer_token=TWITTER_TOKEN):
    return TwitterBackend(TwitterClient(
        base_url="http://twitter.test/2",
        bearer_token=bearer_token,
        timeout=1.0,
        transport=httpx.MockTransport(handler)
    ))


class TestRandomBackend:
    """Tests for RandomBackend."""

    def test_scalar_values_within_range(self):
        backend = RandomBackend(rng=random.Random(7))
        specs = parse_mapping("number", "temperature,relativeHumidity,unknownField")

        for _ in range(50):
            values = backend.fetch_attributes(specs)
            for spec, raw in zip(specs, values):
                low, high = FIELD_RANGES.get(spec.source_field, DEFAULT_RANGE)
                assert low <= raw.value <= high

    def test_range_follows_source_field(self):
        backend = RandomBackend(rng=random.Random(7))
        specs = parse_mapping("number", "temperature:relative_humidity")

        values = [backend.fetch_attributes(specs)[0].value for _ in range(50)]

        assert all(0.0 <= value <= 100.0 for value in values)

    def test_list_length(self):
        backend = RandomBackend(list_length=5, rng=random.Random(7))

        values = backend.fetch_attributes(parse_mapping("list", "tweets"))

        assert len(values[0].value) == 5
        assert all(isinstance(item, str) for item in values[0].value)

    def test_seeded_rng_is_reproducible(self):
        specs = parse_mapping("number", "temperature,pressure")

        first = RandomBackend(rng=random.Random(3)).fetch_attributes(specs)
        second = RandomBackend(rng=random.Random(3)).fetch_attributes(specs)

        assert first == second

    def test_invalid_list_length(self):
        with pytest.raises(ValueError):
            RandomBackend(list_length=0)

    def test_empty_specs(self):
        with pytest.raises(InvalidMapping):
            RandomBackend().fetch_attributes(())


class TestStaticBackend:
    """Tests for StaticBackend."""

    def test_default_selector(self):
        backend = StaticBackend()

        values = backend.fetch_attributes(parse_mapping("number", "temperature,relativeHumidity"))

        assert [raw.value for raw in values] == [21.7, 64]

    def test_deterministic(self):
        backend = StaticBackend()
        specs = parse_mapping("list", "tweets:array")

        assert backend.fetch_attributes(specs) == backend.fetch_attributes(specs)

    def test_selector(self):
        backend = StaticBackend()

        values = backend.fetch_attributes(parse_mapping("number", "temperature:temp_c"), "Spain/Madrid")

        assert values[0].value == 24.1

    def test_fixture_not_found(self):
        backend = StaticBackend()

        with pytest.raises(FixtureNotFound) as exc_info:
            backend.fetch_attributes(parse_mapping("number", "windSpeed"))

        assert exc_info.value.status_code == 404

    def test_shape_mismatch(self):
        backend = StaticBackend()

        with pytest.raises(UnsupportedShape):
            backend.fetch_attributes(parse_mapping("number", "tweets"))

    def test_returned_lists_do_not_alias_fixtures(self):
        backend = StaticBackend()
        specs = parse_mapping("list", "tweets")

        backend.fetch_attributes(specs)[0].value.append("mutated")

        assert "mutated" not in backend.fetch_attributes(specs)[0].value

    def test_from_file_overlays_defaults(self, tmp_path):
        path = tmp_path / "fixtures.json"
        path.write_text(json.dumps({
            DEFAULT_SELECTOR: {"windSpeed": 4.2},
            "France/Paris": {"temp_c": 17.0},
        }))

        backend = StaticBackend.from_file(path)

        assert backend.lookup("windSpeed", None) == 4.2
        assert backend.lookup("temp_c", "France/Paris") == 17.0
        assert backend.lookup("temperature", None) == 21.7

    def test_load_fixtures_rejects_bad_shape(self, tmp_path):
        path = tmp_path / "fixtures.json"
        path.write_text(json.dumps({"default": [1, 2, 3]}))

        with pytest.raises(ValueError):
            load_fixtures(path)


class TestWeatherBackend:
    """Tests for WeatherBackend."""

    def test_conditions(self):
        backend = _weather()
        specs = parse_mapping("number", "temperature:temp_c,relativeHumidity:relative_humidity")

        values = backend.fetch_attributes(specs, "Germany/Berlin")

        assert [raw.value for raw in values] == [12.4, 71]

    def test_single_upstream_call_for_all_fields(self):
        calls = []

        def counting_handler(request):
            calls.append(request.url.path)
            return weather_handler(request)

        backend = _weather(counting_handler)
        specs = parse_mapping("number", "temperature:temp_c,relativeHumidity:relative_humidity,weather")

        backend.fetch_attributes(specs, "Germany/Berlin")

        assert len(calls) == 1

    @pytest.mark.parametrize("selector", [None, "", "Berlin", "Germany/", "a/b/c"])
    def test_invalid_selector(self, selector):
        with pytest.raises(InvalidSelector):
            _weather().fetch_attributes(parse_mapping("number", "temperature:temp_c"), selector)

    def test_list_unsupported(self):
        with pytest.raises(UnsupportedShape):
            _weather().fetch_attributes(parse_mapping("list", "temperature"), "Germany/Berlin")

    def test_missing_field(self):
        with pytest.raises(SourceFieldNotFound):
            _weather().fetch_attributes(parse_mapping("number", "temperature"), "Germany/Berlin")

    def test_nested_field_is_not_scalar(self):
        with pytest.raises(UnsupportedShape):
            _weather().fetch_attributes(parse_mapping("number", "display_location"), "Germany/Berlin")

    def test_api_error_response(self):
        with pytest.raises(UpstreamError) as exc_info:
            _weather().fetch_attributes(parse_mapping("number", "temperature:temp_c"), "Atlantis/Nowhere")

        assert exc_info.value.status_code == 500
        assert "No cities match" not in exc_info.value.public_message

    def test_timeout(self):
        with pytest.raises(UpstreamError) as exc_info:
            _weather(timeout_handler).fetch_attributes(
                parse_mapping("number", "temperature:temp_c"), "Germany/Berlin"
            )

        assert isinstance(exc_info.value.cause, httpx.TimeoutException)

    def test_not_configured(self):
        with pytest.raises(UpstreamError):
            _weather(api_key=None).fetch_attributes(
                parse_mapping("number", "temperature:temp_c"), "Germany/Berlin"
            )

    def test_malformed_payload(self):
        backend = _weather(lambda request: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(UpstreamError):
            backend.fetch_attributes(parse_mapping("number", "temperature:temp_c"), "Germany/Berlin")

    @pytest.mark.parametrize("content", [
        b'{"current_observation": {"temp_c": NaN}}',
        b'{"current_observation": {"temp_c": Infinity}}',
        b'{"current_observation": {"temp_c": "nan"}}',
        b'{"current_observation": {"temp_c": "-inf"}}',
    ])
    def test_non_finite_number(self, content):
        backend = _weather(lambda request: httpx.Response(200, content=content))

        with pytest.raises(UpstreamError) as exc_info:
            backend.fetch_attributes(parse_mapping("number", "temperature:temp_c"), "Germany/Berlin")

        assert exc_info.value.backend == "weather"

    def test_boolean_field_kept(self):
        backend = _weather(lambda request: httpx.Response(200, json={"current_observation": {"raining": True}}))

        values = backend.fetch_attributes(parse_mapping("number", "raining"), "Germany/Berlin")

        assert values[0].value is True

    def test_parse_location(self):
        assert parse_location(" Germany / Berlin ") == ("Germany", "Berlin")

    @pytest.mark.parametrize("value,expected", [
        ("71%", 71),
        (" 12.4 ", 12.4),
        ("-3", -3),
        (12.4, 12.4),
        ("Overcast", "Overcast"),
    ])
    def test_coerce_number(self, value, expected):
        assert coerce_number(value) == expected


class TestTwitterBackend:
    """Tests for TwitterBackend."""

    def test_tweets_in_upstream_order(self):
        values = _twitter().fetch_attributes(parse_mapping("list", "tweets:array"), "FIWARE")

        assert values[0].value == [
            "first tweet about FIWARE",
            "second tweet about FIWARE",
            "third tweet about FIWARE",
        ]

    def test_aliased_field(self):
        values = _twitter().fetch_attributes(parse_mapping("list", "languages:lang"), "FIWARE")

        assert values[0].value == ["en", "en", "de"]

    def test_aliased_field_missing(self):
        with pytest.raises(SourceFieldNotFound):
            _twitter().fetch_attributes(parse_mapping("list", "authors:author_id"), "FIWARE")

    def test_no_results(self):
        values = _twitter().fetch_attributes(parse_mapping("list", "tweets"), "nothing-matches")

        assert values[0].value == []

    def test_scalar_unsupported(self):
        with pytest.raises(UnsupportedShape):
            _twitter().fetch_attributes(parse_mapping("number", "tweets"), "FIWARE")

    def test_missing_search_term(self):
        with pytest.raises(InvalidSelector):
            _twitter().fetch_attributes(parse_mapping("list", "tweets"), "  ")

    def test_unauthorized(self):
        with pytest.raises(UpstreamError) as exc_info:
            _twitter(bearer_token="wrong").fetch_attributes(parse_mapping("list", "tweets"), "FIWARE")

        assert exc_info.value.backend == "twitter"

    def test_rate_limited(self):
        backend = _twitter(lambda request: httpx.Response(429, json={"title": "Too Many Requests"}))

        with pytest.raises(UpstreamError) as exc_info:
            backend.fetch_attributes(parse_mapping("list", "tweets"), "FIWARE")

        assert "rate limit" in exc_info.value.message

    def test_timeout(self):
        with pytest.raises(UpstreamError):
            _twitter(timeout_handler).fetch_attributes(parse_mapping("list", "tweets"), "FIWARE")

    def test_non_json_body(self):
        backend = _twitter(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(UpstreamError):
            backend.fetch_attributes(parse_mapping("list", "tweets"), "FIWARE")
