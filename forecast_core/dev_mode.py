"""
Operating mode selector for the forecast orchestrator.
"""
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from .config import Settings
from .errors import UnknownScenarioError
from .models import MockScenario, ScenarioSummary
from .scenarios import DEFAULT_SCENARIO_ID, get_scenario, scenario_summaries


class OperatingMode(str, Enum):
    PRODUCTION = "production"
    CACHE_FIRST = "cache-first"
    MOCK = "mock"
    OFFLINE = "offline"


class DevModeConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: OperatingMode = OperatingMode.PRODUCTION
    scenario_id: str = DEFAULT_SCENARIO_ID
    logging: bool = False


def default_dev_mode_config(settings: Settings) -> DevModeConfig:
    """
    Startup config: an explicit WEATHER_DEV_MODE wins, otherwise local
    environments run cache-first with logging and everything else production.
    """
    if settings.dev_mode:
        mode = OperatingMode(settings.dev_mode)
    elif settings.is_local:
        mode = OperatingMode.CACHE_FIRST
    else:
        mode = OperatingMode.PRODUCTION

    return DevModeConfig(
        mode=mode,
        scenario_id=settings.mock_scenario or DEFAULT_SCENARIO_ID,
        logging=settings.is_local,
    )


class DevModeSelector:
    """Holds the current mode and mock scenario; swappable at runtime."""

    def __init__(self, config: Optional[DevModeConfig] = None):
        config = config or DevModeConfig()
        self._check_scenario(config.scenario_id)
        self._config = config

    @staticmethod
    def _check_scenario(scenario_id: str) -> None:
        if get_scenario(scenario_id) is None:
            raise UnknownScenarioError(scenario_id)

    def set_mode(self, **changes: Any) -> None:
        """
        Merge ``changes`` (mode, scenario_id, logging) over the current config.

        Validation happens before anything is applied, so a rejected update
        leaves the previous config in place. None values are ignored.
        """
        updates = {k: v for k, v in changes.items() if v is not None}
        merged = DevModeConfig.model_validate({**self._config.model_dump(), **updates})
        self._check_scenario(merged.scenario_id)
        self._config = merged

    def current_config(self) -> DevModeConfig:
        return self._config.model_copy()

    def available_scenarios(self) -> List[ScenarioSummary]:
        return scenario_summaries()

    def active_scenario(self) -> MockScenario:
        scenario = get_scenario(self._config.scenario_id)
        if scenario is None:
            raise UnknownScenarioError(self._config.scenario_id)
        return scenario
