import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teamsorter.core.db import get_db, init_db
from teamsorter.core.teams import Team, TeamRoster, get_team_roster
from teamsorter.main import app
from teamsorter.repositories.assignment_repo import AssignmentRepository
from teamsorter.services.assignment_service import AssignmentService


class FixedChoice:
    """Random source stand-in that always picks the given team."""

    def __init__(self, team: str):
        self.team = team
        self.calls = 0

    def choice(self, seq):
        self.calls += 1
        assert self.team in seq
        return self.team


@pytest.fixture
def fixed_choice():
    """Factory for a random source pinned to one team: fixed_choice("Red")."""
    return FixedChoice


@pytest.fixture
def roster():
    return TeamRoster(
        [
            Team(name="Red", color="#FF5252", emoji="🔴"),
            Team(name="Blue", color="#2196F3"),
        ]
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repo(db, roster):
    return AssignmentRepository(db, roster)


@pytest.fixture
def service(repo, roster):
    return AssignmentService(repo, roster)


@pytest.fixture
def client(session_factory, roster):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_team_roster] = lambda: roster
    # No context manager: the app lifespan would touch the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()
