# league_history/store.py
from __future__ import annotations

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from pydantic import ValidationError

from .errors import SeasonAlreadyExists, SeasonNotFound, StorageError
from .models import Matchup, Season, Week
from .services.weeks import parse_week_number

SEASONS_DATA_FILE = os.getenv("SEASONS_DATA_FILE", "./data/seasons.json")

logger = logging.getLogger("league_history.store")


def _year_sort_key(year: str) -> tuple:
    try:
        return (0, int(year), year)
    except ValueError:
        return (1, 0, year)


class SeasonStore:
    """
    Flat-file JSON store: { "<year>": {teams, weeks, standings}, ... }.

    Reads are served from the last-written snapshot without locking. Each write
    builds a new top-level dict, replaces the file atomically, then swaps the
    snapshot reference, so readers see either the old or the new state.
    Read-modify-write of one season is serialized by a per-season lock.
    """

    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        self._data: Optional[Dict[str, Any]] = None
        self._load_lock = Lock()
        self._write_lock = Lock()
        self._locks_guard = Lock()
        self._season_locks: Dict[str, Lock] = {}

    # ---------- snapshot ----------
    def _read_file(self) -> Dict[str, Any]:
        if not self.path.exists():
            logger.info("No seasons file at %s; starting empty", self.path)
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Could not load %s: %s", self.path, exc)
            raise StorageError(f"Could not load {self.path}") from exc
        if not isinstance(raw, dict):
            raise StorageError(f"{self.path} must hold an object keyed by year")
        logger.info("Seasons data loaded. Years: %s", sorted(raw, key=_year_sort_key))
        return raw

    def _snapshot(self) -> Dict[str, Any]:
        data = self._data
        if data is None:
            with self._load_lock:
                if self._data is None:
                    self._data = self._read_file()
                data = self._data
        return data

    def _write_file(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".seasons-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.error("Error writing %s: %s", self.path, exc)
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise StorageError(f"Failed to write {self.path}") from exc

    # ---------- reads ----------
    def list_years(self) -> List[str]:
        return sorted(self._snapshot().keys(), key=_year_sort_key)

    def has_season(self, year: str) -> bool:
        return str(year) in self._snapshot()

    def get_season(self, year: str) -> Season:
        raw = self._snapshot().get(str(year))
        if raw is None:
            raise SeasonNotFound(str(year))
        try:
            return Season.model_validate(raw)
        except ValidationError as exc:
            raise StorageError(f"Season {year} is not in the season format") from exc

    # ---------- writes ----------
    @contextmanager
    def lock(self, year: str) -> Iterator[None]:
        """Hold the per-season lock for a read-modify-write cycle."""
        with self._locks_guard:
            season_lock = self._season_locks.setdefault(str(year), Lock())
        with season_lock:
            yield

    def save_season(self, year: str, season: Season) -> None:
        payload = season.model_dump(mode="json")
        with self._write_lock:
            new_data = dict(self._snapshot())
            new_data[str(year)] = payload
            self._write_file(new_data)
            self._data = new_data

    def modify(self, year: str, change: Callable[[Season], None]) -> Season:
        """
        Load a season, apply `change` in memory, persist. If `change` raises,
        nothing is written and the snapshot stays as it was.
        """
        with self.lock(year):
            season = self.get_season(year)
            change(season)
            self.save_season(year, season)
        return season

    def create_season(self, year: str, season: Season) -> Season:
        with self.lock(year):
            if self.has_season(year):
                raise SeasonAlreadyExists(str(year))
            self.save_season(year, season)
        return season

    def put_week(
        self,
        year: str,
        week_number: int,
        matchups: Sequence[Matchup],
        on_change: Optional[Callable[[Season], None]] = None,
    ) -> Season:
        """
        Replace (not merge) one week's matchups. `on_change` runs on the updated
        season before it is written, e.g. to refresh derived standings.
        """

        def _apply(season: Season) -> None:
            # drop aliases ("01") of the same week so it is never counted twice
            for key in [k for k in season.weeks if parse_week_number(k) == week_number]:
                del season.weeks[key]
            season.weeks[str(week_number)] = Week(matchups=list(matchups))
            if on_change is not None:
                on_change(season)

        return self.modify(year, _apply)


_default_store: Optional[SeasonStore] = None
_default_lock = Lock()


def get_store() -> SeasonStore:
    """Dependency for FastAPI routes to get the process-wide season store."""
    global _default_store
    if _default_store is None:
        with _default_lock:
            if _default_store is None:
                _default_store = SeasonStore(SEASONS_DATA_FILE)
    return _default_store
