"""Tests for NGSI response assembly."""

import random
import time

import pytest

from backends.base import BackendAdapter, RawAttributeValue
from ngsi_proxy.assembler import ResponseAssembler, attribute_type
from ngsi_proxy.errors import FixtureNotFound, InvalidMapping, UpstreamError
from ngsi_proxy.mapping import parse_mapping


class SlowBackend(BackendAdapter):
    """Backend whose per-attribute extraction finishes in random order."""

    name = "slow"

    def __init__(self, max_workers):
        super().__init__(max_workers=max_workers)
        self._rng = random.Random(11)
        self.delays = {}

    def extract_value(self, spec, payload, selector):
        delay = self.delays.setdefault(spec.source_field, self._rng.uniform(0.0, 0.02))
        time.sleep(delay)
        return float(len(spec.source_field))


class BrokenBackend(BackendAdapter):
    name = "broken"

    def extract_value(self, spec, payload, selector):
        raise KeyError(spec.source_field)


@pytest.fixture
def assembler():
    return ResponseAssembler()


class TestAssemble:
    """Tests for ResponseAssembler.assemble."""

    def test_success_envelope(self, assembler):
        specs = parse_mapping("number", "temperature:temp_c,relativeHumidity:relative_humidity")
        values = [RawAttributeValue("temp_c", 12.4), RawAttributeValue("relative_humidity", 71)]

        response = assembler.assemble("Room", specs, values, "Room1")
        body = response.to_dict()

        element = body["contextResponses"][0]["contextElement"]
        assert element == {
            "type": "Room",
            "isPattern": "false",
            "id": "Room1",
            "attributes": [
                {"name": "temperature", "type": "number", "value": 12.4},
                {"name": "relativeHumidity", "type": "number", "value": 71},
            ],
        }
        assert body["contextResponses"][0]["statusCode"] == {"code": "200", "reasonPhrase": "OK"}

    def test_id_defaults_to_type(self, assembler):
        specs = parse_mapping("number", "temperature")

        response = assembler.assemble("Room", specs, [RawAttributeValue("temperature", 1)])

        assert response.contextResponses[0].contextElement.id == "Room"

    def test_list_attribute(self, assembler):
        specs = parse_mapping("list", "tweets:array")

        response = assembler.assemble("Thing", specs, [RawAttributeValue("tweets", ["a", "b"])])

        assert response.attributes[0].type == "array"
        assert response.attributes[0].value == ["a", "b"]

    def test_length_mismatch(self, assembler):
        specs = parse_mapping("number", "temperature,pressure")

        response = assembler.assemble("Thing", specs, [RawAttributeValue("temperature", 1)])

        assert response.status_code == 500
        assert response.attributes == []

    def test_field_mismatch(self, assembler):
        specs = parse_mapping("number", "temperature:temp_c")

        response = assembler.assemble("Thing", specs, [RawAttributeValue("temperature", 1)])

        assert response.status_code == 500

    def test_shape_mismatch(self, assembler):
        specs = parse_mapping("number", "temperature")

        response = assembler.assemble("Thing", specs, [RawAttributeValue("temperature", [1, 2])])

        assert response.status_code == 500

    def test_unencodable_value(self, assembler):
        specs = parse_mapping("number", "temperature")

        response = assembler.assemble("Thing", specs, [RawAttributeValue("temperature", {"deep": 1})])

        assert response.status_code == 500
        assert response.attributes == []

    @pytest.mark.parametrize("value,expected", [
        (12.4, "number"),
        (71, "number"),
        ("Overcast", "string"),
        (True, "boolean"),
        (False, "boolean"),
    ])
    def test_attribute_type(self, assembler, value, expected):
        specs = parse_mapping("number", "x")

        attribute = assembler.assemble("Thing", specs, [RawAttributeValue("x", value)]).to_dict()[
            "contextResponses"][0]["contextElement"]["attributes"][0]

        assert attribute_type(specs[0], value) == expected
        assert attribute["type"] == expected
        assert attribute["value"] == value
        assert type(attribute["value"]) is type(value)

    def test_list_of_booleans_keeps_values(self, assembler):
        specs = parse_mapping("list", "flags")

        response = assembler.assemble("Thing", specs, [RawAttributeValue("flags", [True, False, 1])])

        assert response.to_dict()["contextResponses"][0]["contextElement"]["attributes"][0]["value"] == [True, False, 1]
        assert [type(item) for item in response.attributes[0].value] == [bool, bool, int]

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), [1.0, float("-inf")]])
    def test_non_finite_value(self, assembler, value):
        shape = "list" if isinstance(value, list) else "number"
        specs = parse_mapping(shape, "x")

        response = assembler.assemble("Thing", specs, [RawAttributeValue("x", value)])

        assert response.status_code == 500
        assert response.attributes == []


class TestAssembleError:
    """Tests for ResponseAssembler.assemble_error."""

    @pytest.mark.parametrize("error,code", [
        (InvalidMapping("bad"), "400"),
        (FixtureNotFound("missing"), "404"),
        (UpstreamError("socket closed", backend="weather"), "500"),
    ])
    def test_status_codes(self, assembler, error, code):
        response = assembler.assemble_error("Thing", error)

        assert response.contextResponses[0].statusCode.code == code
        assert response.attributes == []

    def test_upstream_details_are_hidden(self, assembler):
        error = UpstreamError("connect to 10.0.0.7 refused", backend="weather")

        response = assembler.assemble_error("Thing", error)

        assert response.contextResponses[0].statusCode.details == "Upstream weather request failed"


class TestConcurrentFetch:
    """Attribute order must not depend on extraction completion order."""

    def test_order_preserved_with_thread_pool(self, assembler):
        specs = parse_mapping("number", "a,bbbbbb,cc,ddddddddd,eee,f,gggg,hhhhhhh")
        backend = SlowBackend(max_workers=8)

        values = backend.fetch_attributes(specs)
        response = assembler.assemble("Thing", specs, values)

        assert [attr.name for attr in response.attributes] == [spec.ngsi_name for spec in specs]
        assert [attr.value for attr in response.attributes] == [float(len(s.source_field)) for s in specs]

    def test_unexpected_error_becomes_upstream_error(self):
        backend = BrokenBackend(max_workers=4)

        with pytest.raises(UpstreamError) as exc_info:
            backend.fetch_attributes(parse_mapping("number", "a,b"))

        assert isinstance(exc_info.value.cause, KeyError)
