# league_history/errors.py
from __future__ import annotations


class LeagueHistoryError(Exception):
    """Base class for domain errors raised by the store and services."""


class SeasonNotFound(LeagueHistoryError):
    def __init__(self, year: str):
        super().__init__(f"Season {year} not found")
        self.year = year


class WeekNotFound(LeagueHistoryError):
    def __init__(self, year: str, week: int):
        super().__init__(f"Week {week} of season {year} not found")
        self.year = year
        self.week = week


class TeamNotFound(LeagueHistoryError):
    def __init__(self, year: str, team_id: str):
        super().__init__(f"Team {team_id!r} not in the {year} roster")
        self.year = year
        self.team_id = team_id


class SeasonAlreadyExists(LeagueHistoryError):
    def __init__(self, year: str):
        super().__init__(f"Season {year} already exists")
        self.year = year


class WeekAlreadyExists(LeagueHistoryError):
    def __init__(self, year: str, week: int):
        super().__init__(f"Week {week} of season {year} already exists")
        self.year = year
        self.week = week


class SeasonValidationError(LeagueHistoryError):
    """Input rejected before any state was touched."""


class StorageError(LeagueHistoryError):
    """The season file could not be read or written."""
