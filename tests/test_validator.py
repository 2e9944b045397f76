from pathlib import Path

from api_discovery_client.generator.validator import validate_parameters, validate_value
from api_discovery_client.parser.base import Parameter
from api_discovery_client.parser.discovery import build_api
from api_discovery_client.parser.document import parse_document

FIXTURES = Path(__file__).parent / "fixtures"


def _api(name: str):
    return build_api(parse_document((FIXTURES / name).read_bytes()))


class TestValidateParameters:
    def test_valid_parameters(self):
        method = _api("plus-v1.json").activities.list
        errors = validate_parameters(method, {"userId": "107807692475771887386", "collection": "public"})
        assert errors == {}

    def test_missing_required(self):
        method = _api("plus-v1.json").activities.list
        errors = validate_parameters(method, {"alt": "json"})
        assert set(errors) == {"userId", "collection"}
        assert "missing" in errors["userId"]

    def test_enum_mismatch(self):
        method = _api("plus-v1.json").activities.list
        errors = validate_parameters(method, {"userId": "1", "collection": "bogus"})
        assert list(errors) == ["collection"]
        assert "bogus" in errors["collection"]

    def test_unknown_parameter(self):
        method = _api("plus-v1.json").people.get
        errors = validate_parameters(method, {"userId": "me", "bogus": "1"})
        assert list(errors) == ["bogus"]

    def test_pattern_mismatch(self):
        method = _api("analytics-v3.json").data.ga.get
        errors = validate_parameters(
            method,
            {"ids": "666", "start-date": "2014-12-12", "end-date": "today", "metrics": "ga:users"},
        )
        assert list(errors) == ["ids"]

    def test_none_counts_as_absent(self):
        method = _api("plus-v1.json").people.get
        assert "userId" in validate_parameters(method, {"userId": None})


class TestValidateValue:
    def test_integer(self):
        param = Parameter(name="maxResults", location="query", param_type="integer")
        assert validate_value(param, 20) is None
        assert validate_value(param, "20") is None
        assert validate_value(param, "twenty") is not None
        assert validate_value(param, True) is not None

    def test_number(self):
        param = Parameter(name="ratio", location="query", param_type="number")
        assert validate_value(param, 0.5) is None
        assert validate_value(param, "1e3") is None
        assert validate_value(param, "half") is not None

    def test_boolean(self):
        param = Parameter(name="prettyPrint", location="query", param_type="boolean")
        assert validate_value(param, False) is None
        assert validate_value(param, "true") is None
        assert validate_value(param, "yes") is not None

    def test_list_for_non_repeated_parameter(self):
        param = Parameter(name="q", location="query")
        assert "not repeated" in validate_value(param, ["a", "b"])

    def test_repeated_items_each_checked(self):
        param = Parameter(name="lang", location="query", repeated=True, enum=["en", "fr"])
        assert validate_value(param, ["en", "fr"]) is None
        assert validate_value(param, ["en", "xx"]) is not None
