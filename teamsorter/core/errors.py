class TeamSorterError(Exception):
    """Base class for every error raised by the assignment domain."""


class InvalidInput(TeamSorterError):
    """The identity key is missing, empty or whitespace-only."""


class Conflict(TeamSorterError):
    """An assignment for this identity key already exists."""

    def __init__(self, identity_key: str):
        super().__init__(f"Assignment already exists for '{identity_key}'.")
        self.identity_key = identity_key


class UnknownTeam(TeamSorterError):
    """A team name that is not part of the configured roster."""

    def __init__(self, team: str):
        super().__init__(f"Team '{team}' is not configured.")
        self.team = team


class StorageError(TeamSorterError):
    """Any failure of the underlying database."""
