from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from teamsorter.core.errors import UnknownTeam
from teamsorter.core.settings import TeamConfig, config_settings


@dataclass(frozen=True)
class Team:
    name: str
    color: str
    emoji: Optional[str] = None


class TeamRoster:
    """
    The fixed, ordered set of teams a visitor can be assigned to.

    Built once at startup and never mutated; iteration follows configuration
    order so statistics and the admin view render deterministically.
    """

    def __init__(self, teams: Iterable[Team]):
        self._teams = tuple(teams)
        if not self._teams:
            raise ValueError("A team roster needs at least one team.")

        self._by_name = {team.name: team for team in self._teams}
        if len(self._by_name) != len(self._teams):
            raise ValueError("Team names must be unique.")

    @classmethod
    def from_config(cls, team_configs: Iterable[TeamConfig]) -> "TeamRoster":
        return cls(
            Team(name=config.name, color=config.color, emoji=config.emoji)
            for config in team_configs
        )

    def __iter__(self) -> Iterator[Team]:
        return iter(self._teams)

    def __len__(self) -> int:
        return len(self._teams)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def names(self) -> list[str]:
        return [team.name for team in self._teams]

    def get(self, name: str) -> Team:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownTeam(name) from None


def get_team_roster() -> TeamRoster:
    """Dependency returning the roster built from the process settings."""
    return _default_roster


_default_roster = TeamRoster.from_config(config_settings.TEAMS)
