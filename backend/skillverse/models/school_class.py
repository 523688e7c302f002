"""
Modèles SQLAlchemy pour les classes et leurs inscriptions.
Nommé school_class pour éviter le conflit avec le mot-clé Python 'class'.
"""

import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid, func

from skillverse.database import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    subject = Column(String(100), nullable=True)
    code = Column(String(6), unique=True, nullable=False)  # code d'accès, ex. "K3X9QA"
    teacher_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)  # False = archivée
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class ClassStudent(Base):
    """Association classe ↔ élèves inscrits. La clé composite interdit les doublons."""
    __tablename__ = "class_students"

    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), primary_key=True)
    student_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    enrolled_at = Column(DateTime, server_default=func.now())
