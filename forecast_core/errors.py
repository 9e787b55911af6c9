"""
Exception types raised by the forecast core.

Transport failures from the weather provider are not listed here: they
surface as the original ``requests`` exceptions.
"""
from typing import Optional


class InvalidLocationError(ValueError):
    """Coordinates are missing, non-finite or out of range."""


class InvalidDateError(ValueError):
    """Date is not a real calendar date in YYYY-MM-DD form."""


class NoCachedDataError(LookupError):
    """Raised in offline mode when no fresh cache entry exists."""

    def __init__(self, kind: str, key: Optional[str] = None):
        self.kind = kind
        self.key = key
        super().__init__(f"No cached data available in offline mode ({kind})")


class UnknownScenarioError(KeyError):
    def __init__(self, scenario_id: str):
        self.scenario_id = scenario_id
        super().__init__(scenario_id)

    def __str__(self) -> str:
        return f"Unknown mock scenario: {self.scenario_id}"


class MalformedPayloadError(ValueError):
    """Provider answered, but the body does not have the expected shape."""


class ProviderNotConfiguredError(RuntimeError):
    pass


class GeocodingError(RuntimeError):
    pass
