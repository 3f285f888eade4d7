"""Installed team storage.

Teams are written by the install flow (outside this service) and read once
at start-up. ``DATABASE_URL`` selects the backend:

- ``memory://``: process-local, empty at start
- ``file:///path/to/teams.json``: a JSON document holding the team records
"""

import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlparse

from pydantic import BaseModel

from alert_relay.models.alert import Team

logger = logging.getLogger(__name__)


class TeamRecords(BaseModel):
    """On-disk layout of the file store."""

    teams: list[Team] = []


class TeamStore(Protocol):
    async def all(self) -> list[Team]: ...

    async def save(self, team: Team) -> None: ...


class MemoryTeamStore:
    """Team records held in a dict keyed by team id."""

    def __init__(self, teams: list[Team] | None = None) -> None:
        self._teams: dict[str, Team] = {t.team_id: t for t in teams or []}

    async def all(self) -> list[Team]:
        return list(self._teams.values())

    async def save(self, team: Team) -> None:
        self._teams[team.team_id] = team


class FileTeamStore:
    """Team records persisted as a JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def all(self) -> list[Team]:
        if not self.path.exists():
            logger.warning("Team store %s does not exist yet", self.path)
            return []
        return TeamRecords.model_validate_json(self.path.read_bytes()).teams

    async def save(self, team: Team) -> None:
        teams = {t.team_id: t for t in await self.all()}
        teams[team.team_id] = team
        self.path.parent.mkdir(parents=True, exist_ok=True)
        records = TeamRecords(teams=list(teams.values()))
        self.path.write_text(records.model_dump_json(indent=2), encoding="utf-8")


def create_team_store(database_url: str) -> TeamStore:
    """Build the team store named by a database URL.

    Raises ValueError for unsupported schemes.
    """
    parsed = urlparse(database_url)
    if parsed.scheme == "memory":
        return MemoryTeamStore()
    if parsed.scheme == "file":
        return FileTeamStore(Path(unquote(parsed.netloc + parsed.path)))
    raise ValueError(f"Unsupported DATABASE_URL scheme: {parsed.scheme or database_url!r}")
