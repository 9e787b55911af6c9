"""
Cache implementation for forecast data with TTL support.
"""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from .models import Location

Clock = Callable[[], int]


def epoch_ms() -> int:
    """Wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


class ForecastKind(str, Enum):
    CURRENT_WEATHER = "currentWeather"
    DAILY_FORECAST = "dailyForecast"
    HOURLY_FORECAST_BY_DATE = "hourlyForecastByDate"


FORECAST_TTL_MS = 10 * 60 * 1000  # 10 minutes


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    timestamp: int
    location: Optional[Location] = None


class TemporalCacheStore:
    """
    Keyed store holding at most one entry per (kind, key).

    Entries are never mutated; a put replaces the previous entry. Staleness
    is decided on read: an entry is fresh while ``now - timestamp <= ttl``.
    Stale entries stay in the store (they still count in ``stats`` totals)
    but ``get`` reports them as absent.
    """

    def __init__(
        self,
        kinds: Iterable[Union[str, Enum]],
        ttl_ms: Union[int, Mapping[str, int]],
        clock: Optional[Clock] = None,
    ):
        self._kinds = [self._kind_name(kind) for kind in kinds]
        if isinstance(ttl_ms, Mapping):
            self._ttl_ms = {self._kind_name(k): v for k, v in ttl_ms.items()}
            missing = [kind for kind in self._kinds if kind not in self._ttl_ms]
            if missing:
                raise ValueError(f"No TTL configured for kinds: {missing}")
        else:
            self._ttl_ms = {kind: ttl_ms for kind in self._kinds}
        self._clock = clock or epoch_ms
        self._entries: Dict[str, Dict[str, CacheEntry]] = {
            kind: {} for kind in self._kinds
        }

    @staticmethod
    def _kind_name(kind: Union[str, Enum]) -> str:
        return kind.value if isinstance(kind, Enum) else str(kind)

    def _bucket(self, kind: Union[str, Enum]) -> Dict[str, CacheEntry]:
        name = self._kind_name(kind)
        if name not in self._entries:
            raise ValueError(f"Unknown cache kind: {name}")
        return self._entries[name]

    def _now(self, now: Optional[int]) -> int:
        return self._clock() if now is None else now

    def ttl_for(self, kind: Union[str, Enum]) -> int:
        self._bucket(kind)
        return self._ttl_ms[self._kind_name(kind)]

    def is_fresh(self, kind: Union[str, Enum], entry: CacheEntry, now: Optional[int] = None) -> bool:
        return self._now(now) - entry.timestamp <= self.ttl_for(kind)

    def put(
        self,
        kind: Union[str, Enum],
        key: str,
        data: Any,
        now: Optional[int] = None,
        location: Optional[Location] = None,
    ) -> None:
        """Insert or replace the entry at key."""
        self._bucket(kind)[key] = CacheEntry(
            data=data, timestamp=self._now(now), location=location
        )

    def get(self, kind: Union[str, Enum], key: str, now: Optional[int] = None) -> Optional[Any]:
        """Return the cached payload, or None when absent or stale."""
        entry = self._bucket(kind).get(key)
        if entry is None or not self.is_fresh(kind, entry, now):
            return None
        return entry.data

    def clear(self) -> None:
        """Drop every entry of every kind."""
        for bucket in self._entries.values():
            bucket.clear()

    def stats(self, now: Optional[int] = None) -> Dict[str, Dict[str, int]]:
        """Per-kind total and fresh entry counts."""
        current = self._now(now)
        return {
            kind: {
                "total": len(bucket),
                "fresh": sum(
                    1 for entry in bucket.values() if self.is_fresh(kind, entry, current)
                ),
            }
            for kind, bucket in self._entries.items()
        }


def create_forecast_cache(clock: Optional[Clock] = None) -> TemporalCacheStore:
    """Store with one bucket per forecast kind, all on the 10 minute TTL."""
    return TemporalCacheStore(ForecastKind, FORECAST_TTL_MS, clock=clock)
