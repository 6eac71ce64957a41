# clinic_backend/database.py
from __future__ import annotations
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from .config import settings

DATABASE_URL: str | None = settings.DATABASE_URL
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL no está configurada (revisa tu .env).")


def build_engine(url: str):
    """
    Crea el engine según el tipo de base. SQLite necesita check_same_thread=False
    porque FastAPI sirve cada request en su propio hilo.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            future=True,
        )
    # Postgres u otros (producción)
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        future=True,
    )


def build_sessionmaker(bind):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=bind,
        future=True,
    )


engine = build_engine(DATABASE_URL)
SessionLocal = build_sessionmaker(engine)

Base = declarative_base()


def init_db(bind=None):
    """
    Crea las tablas si no existen. Importa modelos antes para que SQLAlchemy
    conozca todos los metadatos.
    """
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
