import pytest
from pydantic import ValidationError

from teamsorter.core.errors import UnknownTeam
from teamsorter.core.settings import DEFAULT_TEAMS, Settings, TeamConfig
from teamsorter.core.teams import Team, TeamRoster


class TestTeamRoster:
    def test_preserves_configuration_order(self, roster):
        assert roster.names == ["Red", "Blue"]
        assert [team.name for team in roster] == ["Red", "Blue"]
        assert len(roster) == 2

    def test_membership(self, roster):
        assert "Red" in roster
        assert "red" not in roster

    def test_get_unknown_team(self, roster):
        with pytest.raises(UnknownTeam, match="Purple"):
            roster.get("Purple")

    def test_empty_roster_rejected(self):
        with pytest.raises(ValueError):
            TeamRoster([])

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="unique"):
            TeamRoster([Team("Red", "#f00"), Team("Red", "#e00")])

    def test_teams_are_immutable(self, roster):
        with pytest.raises(AttributeError):
            roster.get("Red").color = "#000"

    def test_from_config(self):
        roster = TeamRoster.from_config(DEFAULT_TEAMS)
        assert roster.names == ["Red", "Blue", "Green", "Yellow"]
        assert roster.get("Green").color == "#4CAF50"
        assert roster.get("Yellow").emoji == "🟡"


class TestSettings:
    def test_teams_from_environment(self, monkeypatch):
        monkeypatch.setenv(
            "TEAMS", '[{"name": "Cats", "color": "#111"}, {"name": "Dogs", "color": "#222", "emoji": "🐶"}]'
        )

        settings = Settings(_env_file=None)

        assert settings.TEAMS == [
            TeamConfig(name="Cats", color="#111"),
            TeamConfig(name="Dogs", color="#222", emoji="🐶"),
        ]

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TEAMS", raising=False)
        monkeypatch.delenv("PORT", raising=False)

        settings = Settings(_env_file=None)

        assert [t.name for t in settings.TEAMS] == ["Red", "Blue", "Green", "Yellow"]
        assert settings.PORT == 3000
        assert settings.ASSIGNMENT_PATH == "/team"

    def test_empty_team_list_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, TEAMS=[])

    def test_duplicate_team_names_rejected(self):
        with pytest.raises(ValidationError):
            Settings(
                _env_file=None,
                TEAMS=[TeamConfig(name="Red", color="#f00"), TeamConfig(name="Red", color="#e00")],
            )

    def test_postgres_scheme_rewritten(self):
        settings = Settings(_env_file=None, DATABASE_URL="postgres://u:p@db:5432/teams")
        assert settings.DATABASE_URL == "postgresql://u:p@db:5432/teams"
