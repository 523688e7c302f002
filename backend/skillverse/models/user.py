"""
Modèle SQLAlchemy pour les utilisateurs (enseignants et élèves).
"""

import uuid
from sqlalchemy import Column, DateTime, String, Uuid, func

from skillverse.database import Base

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(150), nullable=False)
    role = Column(String(20), nullable=False)  # student, teacher ; immuable après création
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
