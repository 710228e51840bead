# services/assignment_service.py

import random
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from teamsorter.core.errors import Conflict, InvalidInput, StorageError
from teamsorter.core.teams import TeamRoster
from teamsorter.models.orm.assignment import AssignmentORM
from teamsorter.repositories.assignment_repo import AssignmentRepository


@dataclass(frozen=True)
class AssignmentResult:
    identity_key: str
    team: str
    color: str
    emoji: Optional[str]
    is_new: bool


class AssignmentService:
    def __init__(
        self,
        assignment_repo: AssignmentRepository,
        teams: TeamRoster,
        rng: Optional[random.Random] = None,
    ):
        self.assignment_repo = assignment_repo
        self.teams = teams
        # Any object with a random.Random-style choice() will do
        self.rng = rng or random.SystemRandom()

    def _pick_team(self) -> str:
        return self.rng.choice(self.teams.names)

    def _to_result(self, assignment: AssignmentORM, is_new: bool) -> AssignmentResult:
        team = self.teams.get(assignment.team)
        return AssignmentResult(
            identity_key=assignment.identity_key,
            team=team.name,
            color=team.color,
            emoji=team.emoji,
            is_new=is_new,
        )

    def assign(self, identity_key: Optional[str]) -> AssignmentResult:
        """
        Gets a visitor's team, ensuring idempotency.

        1. Check for an existing assignment under the trimmed key.
        2. If none, pick a team uniformly at random and persist it.
        3. If a concurrent request won the insert, return its team instead.
        """
        if identity_key is None or not identity_key.strip():
            raise InvalidInput("Name is required")

        clean_key = identity_key.strip()

        existing = self.assignment_repo.find_by_key(clean_key)
        if existing:
            logger.info("Returning existing assignment: {} -> {}", clean_key, existing.team)
            return self._to_result(existing, is_new=False)

        team_name = self._pick_team()
        try:
            created = self.assignment_repo.create(clean_key, team_name)
        except Conflict:
            winner = self.assignment_repo.find_by_key(clean_key)
            if winner is None:
                raise StorageError(
                    f"Assignment for '{clean_key}' conflicted but could not be re-read."
                )
            logger.info("Lost assignment race for {}, using {}", clean_key, winner.team)
            return self._to_result(winner, is_new=False)

        logger.info("New assignment created: {} -> {}", clean_key, created.team)
        return self._to_result(created, is_new=True)

    def statistics(self) -> dict[str, int]:
        """Assignment count for every configured team, in configuration order."""
        counts = self.assignment_repo.count_by_team()
        return {name: counts.get(name, 0) for name in self.teams.names}

    def list_assignments(self) -> list[AssignmentORM]:
        return self.assignment_repo.list_all()
