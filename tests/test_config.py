# tests/test_config.py
# -*- coding: utf-8 -*-
"""
Tests de dailyledger/config.py et de l'assemblage dailyledger/wiring.py

Ce fichier couvre :
- valeurs par défaut sans variables d'environnement,
- lecture des variables (monkeypatch),
- handler de log installé une seule fois,
- build_services sur une base SQLite temporaire (tables créées, services branchés).
"""

import logging

import pytest

from dailyledger.config import Settings, configure_logging
from dailyledger.schemas.entries import CreateMoodEntriesRequest, NewMoodEntry, ReadEntriesRequest
from dailyledger.wiring import build_services


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ["DB_URL", "DB_ECHO", "LOG_LEVEL", "LEDGER_DEFAULT_LIMIT", "DEFAULT_EMAIL"]:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    s = Settings.from_env()
    assert s.db_url == "sqlite:///dailyledger.db"
    assert s.db_echo is False
    assert s.log_level == "INFO"
    assert s.default_limit == 10000
    assert s.default_email == "demo@example.com"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DB_URL", f"sqlite:///{tmp_path / 'x.db'}")
    monkeypatch.setenv("DB_ECHO", "true")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LEDGER_DEFAULT_LIMIT", "250")
    monkeypatch.setenv("DEFAULT_EMAIL", "Me@Example.com ")

    s = Settings.from_env()
    assert s.db_url.endswith("x.db")
    assert s.db_echo is True
    assert s.log_level == "DEBUG"
    assert s.default_limit == 250
    assert s.default_email == "me@example.com"


def test_explicit_mapping_ignores_process_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert Settings.from_env({}).log_level == "INFO"


def test_configure_logging_is_idempotent():
    logger = logging.getLogger("dailyledger")
    configure_logging("DEBUG")
    configure_logging("WARNING")
    ours = [h for h in logger.handlers if getattr(h, "_dailyledger", False)]
    assert len(ours) == 1
    assert logger.level == logging.WARNING


def test_build_services_on_temporary_db(tmp_path):
    settings = Settings(db_url=f"sqlite:///{tmp_path / 'wired.db'}", default_limit=2)
    services = build_services(settings)
    try:
        u = services.users.get_or_create(settings.default_email)
        services.mood.create_entries(CreateMoodEntriesRequest(
            user_id=u.id, mood_entries=tuple(NewMoodEntry() for _ in range(3))
        ))

        page = services.mood.read_entries(ReadEntriesRequest(user_id=u.id))
        assert page.found_mood_entries == 2  # limite par défaut configurée
        ratings = page.ratings_result
        assert (ratings.mood_entries_without_mood, ratings.mood_entries_without_energy) == (2, 2)
        assert ratings.mood_entries_without_sleep == 2
    finally:
        services.engine.dispose()
