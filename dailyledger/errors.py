# dailyledger/errors.py
# -*- coding: utf-8 -*-
"""
Erreurs métier de DailyLedger.

Chaque erreur expose :
- `status_code` : code HTTP suggéré pour la couche transport,
- `public_message` : message affichable côté client.

Les erreurs de validation / not-found sont distinguables des erreurs internes
(base de données, conversion) : "corrige ta saisie" vs "réessaie plus tard".
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base de toutes les erreurs du ledger."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message


class ValidationError(LedgerError, ValueError):
    """Entrée invalide (rejetée avant toute I/O, jamais réessayée automatiquement)."""

    status_code = 400


class RatingError(ValidationError):
    """Note hors de [0, 10] ou valeur non entière."""

    def __init__(self, message: str, *, value=None, bound: str | None = None) -> None:
        super().__init__(f"invalid rating: {message}")
        self.value = value
        self.bound = bound  # "too small" | "too large" | None (pas un entier)


class NotFound(LedgerError):
    status_code = 404


class DatabaseError(LedgerError):
    """
    Échec côté stockage. La transaction est déjà annulée quand on la lève ;
    la cause d'origine reste accessible via `cause` (et `__cause__`).
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def public_message(self) -> str:
        return "internal error occurred"


class ContextError(LedgerError):
    """Échec annoté avec l'étape logique concernée."""

    def __init__(self, context: str, *, error: BaseException) -> None:
        super().__init__(context)
        self.context = context
        self.error = error

    def __str__(self) -> str:
        return f"{self.context}: {self.error}"


class ConversionError(LedgerError):
    """Donnée stockée impossible à remonter dans le modèle du domaine."""

    def __init__(self, message: str) -> None:
        super().__init__(f"failed conversion: {message}")

    @property
    def public_message(self) -> str:
        return "internal error occurred"
