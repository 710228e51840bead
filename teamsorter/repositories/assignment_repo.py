# repositories/assignment_repo.py
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from teamsorter.core.errors import Conflict, InvalidInput, StorageError, UnknownTeam
from teamsorter.core.teams import TeamRoster
from teamsorter.models.orm.assignment import AssignmentORM


class AssignmentRepository:
    def __init__(self, db: Session, teams: TeamRoster):
        self.db = db
        self.teams = teams

    def find_by_key(self, identity_key: str) -> Optional[AssignmentORM]:
        """Retrieves the persistent assignment for an identity key, or None."""
        stmt = select(AssignmentORM).where(AssignmentORM.identity_key == identity_key)
        try:
            return self.db.scalars(stmt).one_or_none()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to look up assignment.") from e

    def create(self, identity_key: str, team: str) -> AssignmentORM:
        """
        Inserts a new assignment record.

        The unique constraint on identity_key is the only guard against two
        concurrent first-time requests; losing that race raises Conflict and
        the caller is expected to re-read the winning row.
        """
        if identity_key is None or not identity_key.strip():
            raise InvalidInput("Identity key must not be empty.")
        if team not in self.teams:
            raise UnknownTeam(team)

        db_assignment = AssignmentORM(
            identity_key=identity_key,
            team=team,
            created_at=datetime.utcnow(),
        )
        try:
            self.db.add(db_assignment)
            self.db.commit()
            self.db.refresh(db_assignment)

            return db_assignment

        except IntegrityError:
            self.db.rollback()
            raise Conflict(identity_key)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database error creating assignment for {!r}", identity_key)
            raise StorageError("Failed to save assignment.") from e

    def list_all(self) -> list[AssignmentORM]:
        """All assignments, most recently created first."""
        stmt = select(AssignmentORM).order_by(
            AssignmentORM.created_at.desc(), AssignmentORM.id.desc()
        )
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to list assignments.") from e

    def count_by_team(self) -> dict[str, int]:
        """Assignment count per team, only for teams with at least one record."""
        stmt = select(AssignmentORM.team, func.count(AssignmentORM.id)).group_by(
            AssignmentORM.team
        )
        try:
            return {team: count for team, count in self.db.execute(stmt).all()}
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to count assignments.") from e
