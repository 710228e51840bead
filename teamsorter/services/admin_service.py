from dataclasses import dataclass
from datetime import datetime

from teamsorter.core.teams import Team
from teamsorter.services.assignment_service import AssignmentService


@dataclass(frozen=True)
class TeamTotal:
    team: Team
    count: int


@dataclass(frozen=True)
class AdminRow:
    position: int
    identity_key: str
    team: Team
    created_at: datetime


@dataclass(frozen=True)
class AdminOverview:
    total: int
    team_totals: list[TeamTotal]
    rows: list[AdminRow]


class AdminService:
    """Builds the read-only overview rendered by the /admin page."""

    def __init__(self, assignment_service: AssignmentService):
        self.assignment_service = assignment_service

    def overview(self) -> AdminOverview:
        teams = self.assignment_service.teams
        assignments = self.assignment_service.list_assignments()
        stats = self.assignment_service.statistics()

        rows = [
            AdminRow(
                position=position,
                identity_key=assignment.identity_key,
                team=teams.get(assignment.team),
                created_at=assignment.created_at,
            )
            for position, assignment in enumerate(assignments, start=1)
        ]
        team_totals = [TeamTotal(team=team, count=stats[team.name]) for team in teams]

        return AdminOverview(total=len(rows), team_totals=team_totals, rows=rows)
