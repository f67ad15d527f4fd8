# dailyledger/schemas/base.py
# -*- coding: utf-8 -*-
"""
Socle des schémas pydantic (payloads entrants / réponses sortantes).

- `LedgerModel` : modèle gelé ; toute erreur de validation pydantic ressort
  en erreur du ledger (ValidationError 400, ou l'erreur métier levée par un
  validateur, ex: RatingError avec son message de borne).
- `RatingValue` : note 0..10, décodée par `Rating.decode`, sérialisée en int.
- `Timestamp` : datetime / date / chaîne ISO-8601 -> datetime UTC "aware".
"""

import datetime as dt
from typing import Annotated, Any

import pydantic
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, PlainSerializer, PlainValidator

from dailyledger.domain.entries import to_utc
from dailyledger.domain.rating import Rating
from dailyledger.errors import LedgerError, ValidationError


def as_ledger_error(exc: pydantic.ValidationError) -> LedgerError:
    """L'erreur métier levée dans un validateur si elle existe, sinon une ValidationError lisible."""
    errors = exc.errors()
    for err in errors:
        cause = (err.get("ctx") or {}).get("error")
        if isinstance(cause, LedgerError):
            return cause
    first = errors[0]
    where = ".".join(str(p) for p in first["loc"])
    return ValidationError(f"{where}: {first['msg']}" if where else first["msg"])


class LedgerModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except pydantic.ValidationError as e:
            raise as_ledger_error(e) from e

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any):
        try:
            return super().model_validate(obj, **kwargs)
        except pydantic.ValidationError as e:
            raise as_ledger_error(e) from e


def _as_rating(value) -> Rating:
    return value if isinstance(value, Rating) else Rating.decode(value)


def _date_at_midnight(value):
    # une date seule = minuit UTC
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        return dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc)
    return value


RatingValue = Annotated[
    Rating,
    PlainValidator(_as_rating),
    PlainSerializer(Rating.encode, return_type=int),
]

Timestamp = Annotated[dt.datetime, BeforeValidator(_date_at_midnight), AfterValidator(to_utc)]
