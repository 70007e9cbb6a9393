# league_history/routers/http_errors.py
from __future__ import annotations

from fastapi import HTTPException

from ..errors import (
    LeagueHistoryError,
    SeasonAlreadyExists,
    SeasonNotFound,
    SeasonValidationError,
    StorageError,
    TeamNotFound,
    WeekAlreadyExists,
    WeekNotFound,
)

_STATUS: list[tuple[type[LeagueHistoryError], int, str | None]] = [
    (SeasonNotFound, 404, "Season not found"),
    (WeekNotFound, 404, "Week not found"),
    (TeamNotFound, 404, "Team not found"),
    (SeasonAlreadyExists, 409, "Season already exists"),
    (WeekAlreadyExists, 409, "Week already exists"),
    (SeasonValidationError, 400, None),  # None => pass the message through
    (StorageError, 500, "Failed to save data"),
]


def http_error(exc: LeagueHistoryError) -> HTTPException:
    """Map a domain error onto the HTTP status the dashboard expects."""
    for kind, status, detail in _STATUS:
        if isinstance(exc, kind):
            return HTTPException(status_code=status, detail=detail or str(exc))
    return HTTPException(status_code=500, detail=str(exc))
