"""
Tests for the Google Analytics connector and credential helpers.

The discovery client is replaced with a small fake, so no network access
is needed.
"""
import asyncio
import json
from datetime import date

import pytest

from analytics_overview.config import Settings
from analytics_overview.connectors.google_analytics_connector import GoalDefinition, GoogleAnalyticsConnector
from analytics_overview.utils.credentials import DEFAULT_CREDENTIALS_PATH, GoogleClientHelper, bootstrap_credentials
from analytics_overview.utils.helpers import calculate_date_range, serialize_series


class _Request:
    def __init__(self, response):
        self.response = response

    def execute(self):
        return self.response


class _Resource:
    """Records keyword arguments and returns a canned response"""

    def __init__(self, response, calls):
        self.response = response
        self.calls = calls

    def get(self, **params):
        self.calls.append(params)
        return _Request(self.response)

    def list(self, **params):
        self.calls.append(params)
        return _Request(self.response)


class FakeService:
    def __init__(self, report=None, goals=None):
        self.report = report if report is not None else {}
        self.goal_response = goals if goals is not None else {}
        self.report_calls = []
        self.goal_calls = []
        self.summary_calls = []
        self.summaries_error = None

    def data(self):
        return self

    def ga(self):
        return _Resource(self.report, self.report_calls)

    def management(self):
        return self

    def goals(self):
        return _Resource(self.goal_response, self.goal_calls)

    def accountSummaries(self):
        if self.summaries_error:
            raise self.summaries_error
        return _Resource({"items": []}, self.summary_calls)


def _settings(tmp_path, **overrides):
    values = {
        "ga_credentials_path": str(tmp_path / "ga-credentials.json"),
        "ga_account_id": "1111",
        "ga_property_id": "UA-1111-1",
        "ga_profile_id": "2222",
    }
    values.update(overrides)
    return Settings(**values)


def _connector(tmp_path, service):
    connector = GoogleAnalyticsConnector(GoogleClientHelper(_settings(tmp_path)))
    connector.service = service
    return connector


class TestGetResults:

    def test_builds_report_request(self, tmp_path):
        service = FakeService(report={"rows": [["organic", "12"]]})
        connector = _connector(tmp_path, service)

        rows = asyncio.run(connector.get_results(
            7, 1, "ga:visits",
            dimensions="ga:medium", sort="ga:medium",
            filters="ga:medium==referral", max_results=3,
        ))

        assert rows == [["organic", "12"]]
        start_date, end_date = calculate_date_range(7, 1)
        assert service.report_calls == [{
            "ids": "ga:2222",
            "start_date": start_date,
            "end_date": end_date,
            "metrics": "ga:visits",
            "dimensions": "ga:medium",
            "sort": "ga:medium",
            "filters": "ga:medium==referral",
            "max_results": 3,
        }]
        assert connector.get_status()["query_count"] == 1

    def test_omits_unset_options(self, tmp_path):
        service = FakeService(report={"rows": [["15"]]})
        connector = _connector(tmp_path, service)

        asyncio.run(connector.get_results(30, 0, "ga:pageviews"))

        assert set(service.report_calls[0]) == {"ids", "start_date", "end_date", "metrics"}

    def test_report_without_rows_is_empty(self, tmp_path):
        connector = _connector(tmp_path, FakeService(report={"totalResults": 0}))

        assert asyncio.run(connector.get_results(7, 0, "ga:visits")) == []

    def test_connection_failure_raises(self, tmp_path):
        # No credential file exists at the configured path
        connector = GoogleAnalyticsConnector(GoogleClientHelper(_settings(tmp_path)))

        with pytest.raises(ConnectionError):
            asyncio.run(connector.get_results(7, 0, "ga:visits"))


class TestListGoals:

    def test_goals_in_remote_order(self, tmp_path):
        service = FakeService(goals={"items": [
            {"id": "1", "name": "Signup"},
            {"id": "2", "name": "Contact"},
        ]})
        connector = _connector(tmp_path, service)

        goals = asyncio.run(connector.list_goals())

        assert goals == [GoalDefinition(name="Signup", goal_id="1"), GoalDefinition(name="Contact", goal_id="2")]
        assert service.goal_calls == [{
            "accountId": "1111",
            "webPropertyId": "UA-1111-1",
            "profileId": "2222",
        }]

    def test_no_goals(self, tmp_path):
        connector = _connector(tmp_path, FakeService(goals={}))

        assert asyncio.run(connector.list_goals()) == []


class TestValidateConnection:

    def test_lists_one_account_summary(self, tmp_path):
        service = FakeService()
        connector = _connector(tmp_path, service)

        assert asyncio.run(connector.validate_connection()) is True
        assert service.summary_calls == [{"max_results": 1}]

    def test_api_error_is_reported_as_invalid(self, tmp_path):
        service = FakeService()
        service.summaries_error = RuntimeError("403 Forbidden")
        connector = _connector(tmp_path, service)

        assert asyncio.run(connector.validate_connection()) is False


class TestDateRange:

    def test_window_from_timespan_to_offset(self):
        assert calculate_date_range(7, 0, today=date(2023, 1, 15)) == ("2023-01-08", "2023-01-15")

    def test_offset_moves_end_date(self):
        assert calculate_date_range(2, 1, today=date(2023, 3, 1)) == ("2023-02-27", "2023-02-28")


def test_serialize_series_is_compact():
    assert serialize_series([{"key": "0h", "data": 2}]) == '[{"key":"0h","data":2}]'
    assert serialize_series([{"key": "a/b", "data": 1}]) == '[{"key":"a/b","data":1}]'


class TestCredentials:

    def test_token_requires_file_and_profile(self, tmp_path):
        settings = _settings(tmp_path)
        assert GoogleClientHelper(settings).token_is_set() is False

        (tmp_path / "ga-credentials.json").write_text("{}")
        assert GoogleClientHelper(settings).token_is_set() is True

        assert GoogleClientHelper(_settings(tmp_path, ga_profile_id=None)).token_is_set() is False

    def test_bootstrap_writes_file_from_env(self, tmp_path, monkeypatch):
        settings = _settings(tmp_path, ga_credentials_path=str(tmp_path / "creds" / "ga.json"))
        payload = {"type": "service_account", "client_email": "svc@example.iam.gserviceaccount.com"}
        monkeypatch.setenv("GA_CREDENTIALS_JSON", json.dumps(payload))

        assert bootstrap_credentials(settings) is True
        assert json.loads((tmp_path / "creds" / "ga.json").read_text()) == payload

    def test_json_in_path_variable_goes_to_default_file(self, tmp_path, monkeypatch):
        payload = {"type": "service_account", "token_uri": "https://oauth2.googleapis.com/token"}
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GA_CREDENTIALS_JSON", raising=False)
        monkeypatch.setenv("GA_CREDENTIALS_PATH", json.dumps(payload))
        settings = Settings(ga_profile_id="2222")

        assert bootstrap_credentials(settings) is True
        assert json.loads((tmp_path / "credentials" / "ga-credentials.json").read_text()) == payload
        assert GoogleClientHelper(settings).credentials_path == DEFAULT_CREDENTIALS_PATH
        assert GoogleClientHelper(settings).token_is_set() is True
        assert sorted(p.name for p in tmp_path.iterdir()) == ["credentials"]

    def test_bootstrap_keeps_existing_file(self, tmp_path, monkeypatch):
        settings = _settings(tmp_path)
        (tmp_path / "ga-credentials.json").write_text('{"existing": true}')
        monkeypatch.setenv("GA_CREDENTIALS_JSON", '{"new": true}')

        assert bootstrap_credentials(settings) is True
        assert json.loads((tmp_path / "ga-credentials.json").read_text()) == {"existing": True}

    def test_bootstrap_rejects_invalid_json(self, tmp_path, monkeypatch):
        settings = _settings(tmp_path)
        for var in ("GA_CREDENTIALS_JSON", "GA_CREDENTIALS_PATH", "GOOGLE_SA_JSON"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("GA_CREDENTIALS_JSON", "{not json}")

        assert bootstrap_credentials(settings) is False
        assert not (tmp_path / "ga-credentials.json").exists()
