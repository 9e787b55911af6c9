"""
Current and recently used locations, kept in a string key/value store.
"""
import json
import logging
import math
import os
import time
from pathlib import Path
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Union

from pydantic import BaseModel, ValidationError

from .errors import InvalidLocationError
from .keys import RECENT_LOCATION_TOLERANCE, HasCoordinates, same_location
from .models import Location, RecentLocation

logger = logging.getLogger(__name__)

CURRENT_LOCATION_KEY = "weather-app-current-location"
RECENT_LOCATIONS_KEY = "weather-app-recent-locations"
MAX_RECENT_LOCATIONS = 5


class JsonFileStore(MutableMapping):
    """String mapping persisted as a single JSON object on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read location store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def __getitem__(self, key: str) -> str:
        return self._read()[key]

    def __setitem__(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def __delitem__(self, key: str) -> None:
        data = self._read()
        del data[key]
        self._write(data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._read())

    def __len__(self) -> int:
        return len(self._read())


class LocationBackup(BaseModel):
    current_location: Optional[Location] = None
    recent_locations: List[RecentLocation] = []
    exported_at: int


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def validate_stored_location(location: Any) -> None:
    lat = getattr(location, "lat", None)
    lng = getattr(location, "lng", None)
    if (
        not isinstance(lat, (int, float))
        or not isinstance(lng, (int, float))
        or not getattr(location, "name", None)
        or not math.isfinite(lat)
        or not math.isfinite(lng)
        or not (-90 <= lat <= 90 and -180 <= lng <= 180)
    ):
        raise InvalidLocationError("Invalid location data")


class LocationStorageService:
    def __init__(self, storage: Optional[MutableMapping] = None, clock=_epoch_ms):
        self.storage = storage if storage is not None else {}
        self._clock = clock

    def get_current_location(self) -> Optional[Location]:
        raw = self.storage.get(CURRENT_LOCATION_KEY)
        if not raw:
            return None
        try:
            location = Location.model_validate_json(raw)
            validate_stored_location(location)
            return location
        except (ValidationError, InvalidLocationError) as e:
            logger.warning(f"Failed to parse current location: {e}")
            return None

    def set_current_location(self, location: Location) -> None:
        validate_stored_location(location)
        self.storage[CURRENT_LOCATION_KEY] = location.model_dump_json()

    def get_recent_locations(self) -> List[RecentLocation]:
        """Stored recent locations, most recently used first; invalid entries dropped."""
        raw = self.storage.get(RECENT_LOCATIONS_KEY)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse recent locations: {e}")
            return []
        if not isinstance(items, list):
            return []
        return sorted(self._valid_recent(items), key=lambda loc: loc.last_used, reverse=True)

    @staticmethod
    def _valid_recent(items: List[Any]) -> List[RecentLocation]:
        valid = []
        for item in items:
            try:
                location = RecentLocation.model_validate(item)
                validate_stored_location(location)
            except (ValidationError, InvalidLocationError):
                continue
            valid.append(location)
        return valid

    def _save_recent(self, locations: List[RecentLocation]) -> None:
        self.storage[RECENT_LOCATIONS_KEY] = json.dumps(
            [location.model_dump() for location in locations]
        )

    def add_recent_location(self, location: Location) -> None:
        """
        Record a use of ``location``. A location within tolerance of an
        existing entry updates that entry instead of adding a new one.
        """
        validate_stored_location(location)
        recent = self.get_recent_locations()
        now = self._clock()

        for index, existing in enumerate(recent):
            if self.are_locations_same(location, existing):
                recent[index] = existing.model_copy(
                    update={
                        "name": location.name,
                        "last_used": now,
                        "usage_count": existing.usage_count + 1,
                    }
                )
                break
        else:
            recent.insert(
                0,
                RecentLocation(
                    lat=location.lat,
                    lng=location.lng,
                    name=location.name,
                    last_used=now,
                    usage_count=1,
                ),
            )

        recent.sort(key=lambda loc: loc.last_used, reverse=True)
        self._save_recent(recent[:MAX_RECENT_LOCATIONS])

    def are_locations_same(self, a: HasCoordinates, b: HasCoordinates) -> bool:
        return same_location(a, b, RECENT_LOCATION_TOLERANCE)

    def clear_all_data(self) -> None:
        self.storage.pop(CURRENT_LOCATION_KEY, None)
        self.storage.pop(RECENT_LOCATIONS_KEY, None)

    def export_data(self) -> LocationBackup:
        return LocationBackup(
            current_location=self.get_current_location(),
            recent_locations=self.get_recent_locations(),
            exported_at=self._clock(),
        )

    def import_data(self, backup: LocationBackup) -> None:
        if backup.current_location is not None:
            try:
                self.set_current_location(backup.current_location)
            except InvalidLocationError as e:
                logger.warning(f"Failed to import current location: {e}")

        self._save_recent(self._valid_recent([loc.model_dump() for loc in backup.recent_locations]))
