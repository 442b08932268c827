"""
Erreurs métier.

Les services lèvent ces exceptions ; la couche HTTP (handlers enregistrés
dans ``medsupply.app.main``) décide du status code et du format de log.
"""
from __future__ import annotations


class MedSupplyError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"message": self.message}


class ValidationError(MedSupplyError):
    """Client-side error: the request is incomplete or malformed."""

    status_code = 400


class LineItemError(ValidationError):
    def __init__(self, message: str = "Each item must have a product and quantity.", *, index: int | None = None):
        super().__init__(message)
        self.index = index


class TransactionError(MedSupplyError):
    """A write inside the issuance transaction failed; everything was rolled back."""

    def __init__(self, error: str, message: str = "Failed to create issuance."):
        super().__init__(message)
        self.error = error

    def to_body(self) -> dict:
        return {"message": self.message, "error": self.error}


class ConnectionUnavailable(MedSupplyError):
    def __init__(self, error: str, message: str = "Database connection unavailable."):
        super().__init__(message)
        self.error = error

    def to_body(self) -> dict:
        return {"message": self.message, "error": self.error}


class InvalidCredentials(MedSupplyError):
    status_code = 401

    def __init__(self, message: str = "Invalid credentials."):
        super().__init__(message)


class UpstreamUnavailable(MedSupplyError):
    def __init__(self, service: str):
        super().__init__(f"Could not connect to {service} service.")
        self.service = service


class CatalogUnavailable(MedSupplyError):
    pass


class DuplicateProduct(MedSupplyError):
    status_code = 409

    def __init__(self, message: str = "A medicine with the same name already exists."):
        super().__init__(message)


class NotFound(MedSupplyError):
    status_code = 404
