"""
Tests for the mock scenario table.
"""
from datetime import date, timedelta

import pytest
from dateutil import tz

from forecast_core.models import ScenarioSummary
from forecast_core.normalize import local_date
from forecast_core.scenarios import (
    DEFAULT_SCENARIO_ID,
    MOCK_SCENARIOS,
    get_scenario,
    scenario_summaries,
)

SCENARIO_IDS = ["normal-chicago", "extreme-heat", "extreme-cold", "hurricane", "missing-data"]


class TestScenarioTable:
    def test_ids_unique_and_ordered(self):
        assert [s.id for s in MOCK_SCENARIOS] == SCENARIO_IDS

    def test_default_exists(self):
        assert get_scenario(DEFAULT_SCENARIO_ID) is not None

    def test_unknown_returns_none(self):
        assert get_scenario("volcano") is None

    @pytest.mark.parametrize("scenario_id", SCENARIO_IDS)
    def test_scenario_shape(self, scenario_id):
        scenario = get_scenario(scenario_id)

        assert 1 <= len(scenario.hourly_forecast) <= 24
        assert 1 <= len(scenario.daily_forecast) <= 7
        assert tz.gettz(scenario.timezone) is not None
        assert -90 <= scenario.location.lat <= 90
        assert -180 <= scenario.location.lng <= 180

    @pytest.mark.parametrize("scenario_id", SCENARIO_IDS)
    def test_values_are_whole_numbers(self, scenario_id):
        scenario = get_scenario(scenario_id)

        for hour in scenario.hourly_forecast:
            assert float(hour.temperature).is_integer()
            assert float(hour.wind_speed).is_integer()
        for day in scenario.daily_forecast:
            assert float(day.temperature_high).is_integer()
            assert float(day.temperature_low).is_integer()

    @pytest.mark.parametrize("scenario_id", SCENARIO_IDS)
    def test_daily_dates_in_scenario_timezone(self, scenario_id):
        scenario = get_scenario(scenario_id)
        zone = tz.gettz(scenario.timezone)
        first = scenario.daily_forecast[0]

        assert first.date == local_date(first.timestamp, zone)
        start = date.fromisoformat(first.date)
        assert [day.date for day in scenario.daily_forecast] == [
            (start + timedelta(days=i)).isoformat()
            for i in range(len(scenario.daily_forecast))
        ]

    def test_extremes(self):
        assert get_scenario("extreme-heat").current_weather.temperature == 118
        assert get_scenario("extreme-cold").current_weather.temperature < 0
        assert get_scenario("hurricane").current_weather.wind_speed > 70

    def test_missing_data_is_sparse(self):
        scenario = get_scenario("missing-data")

        assert len(scenario.hourly_forecast) == 8
        assert len(scenario.daily_forecast) == 3


class TestScenarioSummaries:
    def test_summaries_omit_payloads(self):
        summaries = scenario_summaries()

        assert all(isinstance(s, ScenarioSummary) for s in summaries)
        assert set(summaries[0].model_dump()) == {"id", "name", "description"}
        assert summaries[1].name == "Extreme Heat Wave"
