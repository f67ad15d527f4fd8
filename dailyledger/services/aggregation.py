# dailyledger/services/aggregation.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from dailyledger.domain.rating import Rating

# Champs suivis par type d'entrée, avec le zéro de départ de leur somme
FOOD_FIELDS: dict[str, float] = {"calories": 0.0, "carbs": 0.0, "protein": 0.0, "fats": 0.0}
MOOD_FIELDS: dict[str, int] = {"mood": 0, "energy": 0, "sleep": 0}
ACTIVITY_FIELDS: dict[str, int] = {}


@dataclass
class FoldResult:
    """Sommes par champ, nombre d'entrées sans valeur par champ, lignes projetées."""
    totals: dict[str, float] = field(default_factory=dict)
    missing: dict[str, int] = field(default_factory=dict)
    entries: list[Any] = field(default_factory=list)


def _numeric(value):
    return value.encode() if isinstance(value, Rating) else value


def fold_entries(
    records: Iterable[Any],
    fields: Mapping[str, float] | Sequence[str],
    project: Callable[[Any], Any] = lambda r: r,
) -> FoldResult:
    """
    Réduction en UNE seule traversée de `records` :
    - pour chaque champ suivi : somme des valeurs présentes et compteur des
      enregistrements où le champ vaut None ;
    - projection simultanée de chaque enregistrement vers sa forme publique.

    `fields` est soit un mapping champ -> zéro de départ (0.0 pour les macros,
    0 pour les notes), soit une simple liste de champs (départ à 0).

    Un None ne touche que le compteur de SON champ : les autres champs du même
    enregistrement sont comptés normalement. Pas d'arrondi ni de bornage.
    """
    zeros = dict(fields) if isinstance(fields, Mapping) else dict.fromkeys(fields, 0)
    totals: dict[str, float] = dict(zeros)
    missing: dict[str, int] = dict.fromkeys(zeros, 0)
    projected: list[Any] = []

    for record in records:
        for f in zeros:
            value = getattr(record, f)
            if value is None:
                missing[f] += 1
            else:
                totals[f] += _numeric(value)
        projected.append(project(record))

    return FoldResult(totals=totals, missing=missing, entries=projected)
