# tests/conftest.py
# -*- coding: utf-8 -*-
"""
Fixtures partagées : une base SQLite temporaire par test (fichier dans tmp_path),
tables créées à neuf, et une session factory liée à cette base.
"""

import datetime as dt

import pytest

from dailyledger.persistence.db import init_db, make_engine, make_session_factory
from dailyledger.persistence.models import Base


@pytest.fixture
def engine(tmp_path):
    db_path = tmp_path / "test_dailyledger.db"
    eng = make_engine(f"sqlite:///{db_path}")
    init_db(eng, Base, drop_and_recreate=True)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def T():
    """Instant de référence, UTC."""
    return dt.datetime(2025, 3, 10, 12, 0, tzinfo=dt.timezone.utc)
