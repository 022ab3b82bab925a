"""Error taxonomy for the dashboard.

Every error carries a short ``title`` and a user-facing ``message``; the API
renders both as a toast-style body. Resolution failures (dangling references
in loaded collections) are not errors: the board drops those records.
"""

from __future__ import annotations


class SalonError(Exception):
    """Base class for all dashboard errors."""

    title = "Erro"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SalonError):
    """Missing or invalid input, raised before any write."""

    title = "Dados inválidos"


class InsufficientStockError(ValidationError):
    """A sale or stock-out asks for more units than are available."""

    title = "Estoque insuficiente"


class BookingConflictError(SalonError):
    """The professional already has an overlapping booking on that date."""

    title = "Conflito de horário"


class NotFoundError(SalonError):
    """Record does not exist for the current tenant."""

    title = "Não encontrado"


class PersistenceError(SalonError):
    """A data-store call failed. No automatic retry."""


class BoardRollbackError(PersistenceError):
    """A batch of board moves failed and the local state was reverted."""


class AuthenticationError(SalonError):
    """Login e-mail and password do not match an owner account."""

    title = "Acesso negado"
