# app/domain/errors.py
"""
Bledy domenowe. Kazdy typ niesie kod HTTP, router nie interpretuje tresci komunikatu.
"""


class DomainError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 400


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Operacja niedozwolona w obecnym stanie (np. anulowanie dostarczonego zamówienia)."""

    status_code = 400


class ConcurrencyError(ConflictError):
    """Nie udało się uzyskać locka użytkownika albo wersja koszyka się zmieniła."""


class StorageError(DomainError):
    status_code = 500

    # szczegóły błędu bazy nie wychodzą poza serwis
    public_message = "Data storage error"


class AuthError(DomainError):
    status_code = 401
