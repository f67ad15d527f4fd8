# dailyledger/persistence/models.py
# -*- coding: utf-8 -*-
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer, SmallInteger, String, Float, Text, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.types import TypeDecorator
import datetime as dt


class UtcDateTime(TypeDecorator):
    """Stocke de l'UTC naïf (SQLite n'a pas de fuseau) et relit de l'UTC "aware"."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.timezone.utc)
        return value.astimezone(dt.timezone.utc)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    created_at: Mapped[dt.datetime] = mapped_column(UtcDateTime, default=_utcnow, nullable=False)


# --- Ledger : une table par type d'entrée ----------------------------------

class FoodRecord(Base):
    __tablename__ = "food_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    calories: Mapped[float | None] = mapped_column(Float, nullable=True)
    carbs: Mapped[float | None] = mapped_column(Float, nullable=True)
    protein: Mapped[float | None] = mapped_column(Float, nullable=True)
    fats: Mapped[float | None] = mapped_column(Float, nullable=True)
    micronutrients: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    logged_at: Mapped[dt.datetime] = mapped_column(UtcDateTime, index=True, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(UtcDateTime, nullable=False)
    updated_at: Mapped[dt.datetime | None] = mapped_column(UtcDateTime, nullable=True)


class MoodRecord(Base):
    __tablename__ = "mood_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    mood: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    energy: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    sleep: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    logged_at: Mapped[dt.datetime] = mapped_column(UtcDateTime, index=True, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(UtcDateTime, nullable=False)
    updated_at: Mapped[dt.datetime | None] = mapped_column(UtcDateTime, nullable=True)


class ActivityRecord(Base):
    __tablename__ = "activity_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    activity: Mapped[str] = mapped_column(Text, nullable=False)
    activity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    activity_info: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    logged_at: Mapped[dt.datetime] = mapped_column(UtcDateTime, index=True, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(UtcDateTime, nullable=False)
    updated_at: Mapped[dt.datetime | None] = mapped_column(UtcDateTime, nullable=True)


# --- Assignations : une table par type, 1 ligne par (user, index) ----------

class _AssignmentColumns:
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    rating_index: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(UtcDateTime, default=_utcnow, nullable=False)
    updated_at: Mapped[dt.datetime | None] = mapped_column(UtcDateTime, nullable=True)


class MoodAssignmentRecord(_AssignmentColumns, Base):
    __tablename__ = "mood_assignments"
    __table_args__ = (UniqueConstraint("user_id", "rating_index", name="uq_mood_assignment_user_index"),)


class EnergyAssignmentRecord(_AssignmentColumns, Base):
    __tablename__ = "energy_assignments"
    __table_args__ = (UniqueConstraint("user_id", "rating_index", name="uq_energy_assignment_user_index"),)


class SleepAssignmentRecord(_AssignmentColumns, Base):
    __tablename__ = "sleep_assignments"
    __table_args__ = (UniqueConstraint("user_id", "rating_index", name="uq_sleep_assignment_user_index"),)
