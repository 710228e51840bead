"""Concurrent first-time requests for the same identity key."""

import threading

import pytest
from sqlalchemy.orm import Session

from teamsorter.core.db import build_engine, init_db
from teamsorter.models.orm.assignment import AssignmentORM
from teamsorter.repositories.assignment_repo import AssignmentRepository
from teamsorter.services.assignment_service import AssignmentService

WORKERS = 8


@pytest.fixture
def file_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'teams.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


def test_concurrent_assign_persists_single_record(file_engine, roster, fixed_choice):
    barrier = threading.Barrier(WORKERS)
    results = []
    errors = []
    lock = threading.Lock()

    def worker(index: int):
        # Alternate the random pick so duplicate inserts would show up as different teams
        rng = fixed_choice(roster.names[index % len(roster)])
        with Session(file_engine) as session:
            service = AssignmentService(AssignmentRepository(session, roster), roster, rng=rng)
            barrier.wait()
            try:
                result = service.assign("carol")
            except Exception as e:  # collected and asserted on below
                with lock:
                    errors.append(e)
                return
            with lock:
                results.append(result)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(WORKERS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(results) == WORKERS
    assert len({r.team for r in results}) == 1
    assert sum(r.is_new for r in results) == 1

    with Session(file_engine) as session:
        rows = session.query(AssignmentORM).filter_by(identity_key="carol").all()
    assert len(rows) == 1
    assert rows[0].team == results[0].team
