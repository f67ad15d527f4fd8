# dailyledger/persistence/db.py
# -*- coding: utf-8 -*-
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


def make_engine(url: str, echo: bool = False):
    """Crée l'engine (pool de connexions partagé par toutes les requêtes)."""
    return create_engine(url, echo=echo, future=True)


def make_session_factory(engine):
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,  # important pour éviter DetachedInstanceError
        future=True,
    )


@contextmanager
def session_scope(session_factory):
    """Contexte gérant automatiquement commit/rollback."""
    s = session_factory()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()


def init_db(engine, Base, drop_and_recreate=False):
    """Crée les tables (et les recrée si demandé)."""
    if drop_and_recreate:
        Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
