# dailyledger/persistence/repositories/users_repo.py
# -*- coding: utf-8 -*-
import logging

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError

from dailyledger.errors import DatabaseError
from dailyledger.persistence.db import session_scope
from dailyledger.persistence.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Annuaire des utilisateurs ; sert de garde d'existence avant toute écriture/lecture du ledger."""

    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    def create(self, email: str) -> User:
        with session_scope(self._session_factory) as s:
            u = User(email=email.strip().lower())
            s.add(u)
            s.flush(); s.refresh(u); s.expunge(u)
            logger.info("created user id=%s", u.id)
            return u

    def get(self, user_id: int) -> User | None:
        with session_scope(self._session_factory) as s:
            u = s.get(User, user_id)
            if not u:
                return None
            s.expunge(u)
            return u

    def get_by_email(self, email: str) -> User | None:
        with session_scope(self._session_factory) as s:
            u = s.scalar(select(User).where(User.email == email.strip().lower()))
            if not u:
                return None
            s.expunge(u)
            return u

    def get_or_create(self, email: str) -> User:
        u = self.get_by_email(email)
        return u or self.create(email=email)

    def exists(self, user_id: int) -> bool:
        logger.debug("checking user id=%s", user_id)
        try:
            with session_scope(self._session_factory) as s:
                c = s.scalar(select(func.count(User.id)).where(User.id == user_id)) or 0
                return c > 0
        except SQLAlchemyError as e:
            logger.error("database error while finding user id=%s: %s", user_id, e)
            raise DatabaseError("failed to find user", cause=e) from e
