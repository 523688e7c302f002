"""
Modèle SQLAlchemy pour les devoirs de programmation.
"""

import uuid
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Uuid, func

from skillverse.database import Base


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    language = Column(String(20), nullable=False)  # javascript, python, java, cpp, c
    starter_code = Column(Text, nullable=False, default="")
    # Liste de {"input": str, "expected_output": str, "hidden": bool}
    test_cases = Column(JSON, nullable=False, default=list)
    due_date = Column(DateTime, nullable=False)
    points = Column(Integer, nullable=False, default=100)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
