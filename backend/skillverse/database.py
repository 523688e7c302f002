"""
Connexion à la base de données relationnelle.
PostgreSQL en production, SQLite accepté pour les tests et la démo locale.
Sessions SQLAlchemy synchrones, une par requête.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from skillverse.config import settings


def _engine_options(url: str) -> dict:
    # Les routes synchrones tournent dans le pool de threads de FastAPI
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI : ouvre une session pour la requête et la ferme ensuite."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
