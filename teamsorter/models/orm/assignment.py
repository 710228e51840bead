from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from .base import Base


class AssignmentORM(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Visitor name or device fingerprint, already trimmed by the service
    identity_key = Column(String, nullable=False)

    team = Column(String, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("identity_key", name="uq_assignments_identity_key"),
    )
