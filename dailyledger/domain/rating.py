# dailyledger/domain/rating.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import operator
from dataclasses import dataclass

from dailyledger.errors import ConversionError, RatingError

MIN_RATING = 0
MAX_RATING = 10


def _check_bounds(value: int) -> int:
    if value < MIN_RATING:
        raise RatingError(
            f"rating too small: ratings cannot be negative, but got {value} instead",
            value=value,
            bound="too small",
        )
    if value > MAX_RATING:
        raise RatingError(
            f"rating too large: must be between {MIN_RATING} and {MAX_RATING}, but got {value} instead",
            value=value,
            bound="too large",
        )
    return value


@dataclass(frozen=True, order=True)
class Rating:
    """
    Note bornée 0..10 (bornes incluses).

    - Construction stricte : `Rating(11)` lève RatingError.
    - Décodage tolérant (`Rating.decode`) : accepte toute représentation entière
      (int Python, numpy int16/uint32/int64..., tout objet avec `__index__`).
    - Sérialisation : entier positif simple (`encode()` / `int(r)`).
    """
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise RatingError(f"expected an integer rating, got {self.value!r}", value=self.value)
        _check_bounds(self.value)

    @classmethod
    def decode(cls, wire) -> "Rating":
        """Décode une valeur "entière" reçue du fil, quelle que soit sa largeur/signature."""
        if isinstance(wire, bool):
            raise RatingError(f"expected an integer rating between 0 and 10, got {wire!r}", value=wire)
        try:
            n = operator.index(wire)
        except TypeError:
            raise RatingError(
                f"expected an integer rating between 0 and 10, got {wire!r}", value=wire
            ) from None
        return cls(_check_bounds(int(n)))

    @classmethod
    def from_column(cls, value, field: str = "rating") -> "Rating":
        """Relit une colonne smallint : une valeur hors bornes en base est une erreur interne."""
        try:
            return cls.decode(value)
        except RatingError as e:
            raise ConversionError(f"failed to parse {field} - {e}") from e

    def encode(self) -> int:
        return self.value

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
