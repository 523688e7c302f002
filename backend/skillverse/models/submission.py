"""
Modèle SQLAlchemy pour les rendus des élèves.
Un seul rendu par (devoir, élève) : une nouvelle soumission écrase la précédente.
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid, func

from skillverse.database import Base

STATUS_PENDING = "pending"
STATUS_GRADED = "graded"


class Submission(Base):
    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    assignment_id = Column(Uuid, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    code = Column(Text, nullable=False)
    language = Column(String(20), nullable=False)
    submitted_at = Column(DateTime, server_default=func.now())
    grade = Column(Integer, nullable=True)  # NULL tant que non corrigé, sinon 0..100
    feedback = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=STATUS_PENDING)  # pending, graded
    graded_at = Column(DateTime, nullable=True)
    graded_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    # Cache du dernier passage des tests : success, error ou NULL (jamais exécuté)
    compilation_status = Column(String(20), nullable=True)
    output = Column(Text, nullable=True)
