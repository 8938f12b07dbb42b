"""
Tests for the Country Data Provider and the Analysis Aggregator.

Core promise: the aggregator ALWAYS returns all six categories, whatever
happens to the country lookup.
"""

import pytest
import requests
from unittest.mock import MagicMock

from data_models import (
    CATEGORY_KEYS, Coordinates, CountryRecord, FeasibilityLevel, ModelSubType, RocketType,
)
from backend.services.analysis_service import (
    parse_model_sub_type, parse_rocket_type, run_analysis,
)
from backend.services.country_lookup import CountryDataProvider

CAPE_CANAVERAL = Coordinates(lat=28.39, lng=-80.61)

US_PAYLOAD = {
    "name": {"common": "United States"},
    "cca2": "US",
    "independent": True,
    "unMember": True,
    "landlocked": False,
    "population": 329484123,
    "area": 9372610,
}


def _response(status_code=200, payload=None, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def _provider_returning(response=None, error=None):
    session = MagicMock()
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return CountryDataProvider(base_url="https://countries.test/v3.1", timeout=2.0, session=session), session


class TestCountryDataProvider:
    """Best-effort country lookup."""

    def test_first_element_is_used(self):
        other = dict(US_PAYLOAD, name={"common": "Other"})
        provider, session = _provider_returning(_response(payload=[US_PAYLOAD, other]))

        record = provider.lookup(CAPE_CANAVERAL)

        assert record.name == "United States"
        assert record.un_member is True
        session.get.assert_called_once_with(
            "https://countries.test/v3.1/latlng/28.39,-80.61", timeout=2.0,
        )

    def test_non_2xx_yields_none(self):
        provider, _ = _provider_returning(_response(status_code=404, payload={"message": "Not Found"}))
        assert provider.lookup(CAPE_CANAVERAL) is None

    def test_empty_list_yields_none(self):
        provider, _ = _provider_returning(_response(payload=[]))
        assert provider.lookup(CAPE_CANAVERAL) is None

    def test_non_list_payload_yields_none(self):
        provider, _ = _provider_returning(_response(payload={"status": 404}))
        assert provider.lookup(CAPE_CANAVERAL) is None

    def test_malformed_element_yields_none(self):
        provider, _ = _provider_returning(_response(payload=["not a country"]))
        assert provider.lookup(CAPE_CANAVERAL) is None

    def test_infinite_population_yields_none(self):
        payload = dict(US_PAYLOAD, population=float("inf"))
        provider, _ = _provider_returning(_response(payload=[payload]))
        assert provider.lookup(CAPE_CANAVERAL) is None

    def test_invalid_json_yields_none(self):
        provider, _ = _provider_returning(_response(json_error=ValueError("Expecting value")))
        assert provider.lookup(CAPE_CANAVERAL) is None

    def test_timeout_yields_none_without_retry(self):
        provider, session = _provider_returning(error=requests.exceptions.Timeout("timed out"))
        assert provider.lookup(CAPE_CANAVERAL) is None
        assert session.get.call_count == 1

    def test_user_agent_is_set(self):
        _, session = _provider_returning(_response(payload=[]))
        assert session.headers["User-Agent"].startswith("RocketFeasibilityCalculator")


class TestRunAnalysis:
    """Aggregator contract."""

    def setup_method(self):
        """Set up a provider stub."""
        self.provider = MagicMock(spec=CountryDataProvider)

    def _assert_complete(self, report):
        payload = report.to_dict()
        assert tuple(payload.keys()) == CATEGORY_KEYS
        for category in payload.values():
            assert set(category.keys()) == {"level", "description", "details"}
            assert len(category["details"]) > 0

    def test_cape_canaveral_industrial(self):
        self.provider.lookup.return_value = CountryRecord.from_api(US_PAYLOAD)

        report = run_analysis("Cape Canaveral", CAPE_CANAVERAL, "industrial", provider=self.provider)

        self._assert_complete(report)
        assert report.resources.level == FeasibilityLevel.HIGH
        assert report.geography.level == FeasibilityLevel.HIGH
        self.provider.lookup.assert_called_once_with(CAPE_CANAVERAL)

    def test_provider_exception_degrades_to_no_country(self):
        self.provider.lookup.side_effect = RuntimeError("provider exploded")

        report = run_analysis("Cape Canaveral", CAPE_CANAVERAL, "industrial", provider=self.provider)

        self._assert_complete(report)
        assert report.resources.level == FeasibilityLevel.LOW
        assert report.geopolitics.level == FeasibilityLevel.MEDIUM
        assert self.provider.lookup.call_count == 1

    def test_empty_lookup_result_still_complete(self):
        provider, _ = _provider_returning(_response(payload=[]))

        report = run_analysis("Somewhere", CAPE_CANAVERAL, "model", "hobby", provider=provider)

        self._assert_complete(report)
        assert report.resources.level == FeasibilityLevel.HIGH
        assert report.government.level == FeasibilityLevel.HIGH

    def test_network_failure_still_complete(self):
        provider, _ = _provider_returning(error=requests.exceptions.ConnectionError("offline"))

        report = run_analysis("Somewhere", CAPE_CANAVERAL, RocketType.INDUSTRIAL, provider=provider)

        self._assert_complete(report)

    def test_model_rocket_ignores_country(self):
        self.provider.lookup.return_value = None
        report = run_analysis("Nowhere", Coordinates(lat=-45.0, lng=170.0), "model", "project", provider=self.provider)
        assert report.resources.level == FeasibilityLevel.HIGH
        assert report.government.level == FeasibilityLevel.HIGH
        assert report.practicality.details[0] == "Timeline: 2-4 weeks to first launch"

    def test_unknown_rocket_type_rejected_before_lookup(self):
        with pytest.raises(ValueError):
            run_analysis("Cape Canaveral", CAPE_CANAVERAL, "orbital", provider=self.provider)
        self.provider.lookup.assert_not_called()


class TestParsing:

    def test_rocket_type_case_insensitive(self):
        assert parse_rocket_type(" Industrial ") == RocketType.INDUSTRIAL
        assert parse_rocket_type(RocketType.MODEL) == RocketType.MODEL

    def test_sub_type_blank_is_none(self):
        assert parse_model_sub_type(None) is None
        assert parse_model_sub_type("") is None
        assert parse_model_sub_type("HOBBY") == ModelSubType.HOBBY

    def test_unknown_sub_type_rejected(self):
        with pytest.raises(ValueError):
            parse_model_sub_type("professional")
