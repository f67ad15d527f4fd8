# dailyledger/config.py
# -*- coding: utf-8 -*-
"""
Configuration par variables d'environnement.

Variables supportées:
    DB_URL                : URL SQLAlchemy (défaut: sqlite:///dailyledger.db)
    DB_ECHO               : 1 pour tracer le SQL émis (défaut: 0)
    LOG_LEVEL             : niveau de log (défaut: INFO)
    LEDGER_DEFAULT_LIMIT  : taille de page par défaut en lecture (défaut: 10000)
    DEFAULT_EMAIL         : utilisateur de repli de l'UI (défaut: demo@example.com)

Lue une seule fois aux bords (UI, scripts) ; le cœur reçoit ses dépendances
par constructeur et ne consulte jamais l'environnement.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    db_url: str = "sqlite:///dailyledger.db"
    db_echo: bool = False
    log_level: str = "INFO"
    default_limit: int = 10000
    default_email: str = "demo@example.com"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            db_url=env.get("DB_URL", cls.db_url).strip(),
            db_echo=env.get("DB_ECHO", "0").strip().lower() in ("1", "true", "yes"),
            log_level=env.get("LOG_LEVEL", cls.log_level).strip().upper(),
            default_limit=int(env.get("LEDGER_DEFAULT_LIMIT", str(cls.default_limit))),
            default_email=env.get("DEFAULT_EMAIL", cls.default_email).strip().lower(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Installe un handler console unique sur le logger `dailyledger`."""
    logger = logging.getLogger("dailyledger")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(getattr(h, "_dailyledger", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._dailyledger = True
        logger.addHandler(handler)
