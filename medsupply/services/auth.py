from __future__ import annotations

import secrets

from passlib.context import CryptContext

from medsupply.app.core.exceptions import InvalidCredentials, ValidationError
from medsupply.services.directory import Directory

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, stored: str | None) -> bool:
    """
    Hash passlib reconnu -> verify.
    Sinon valeur en clair (annuaire externe) -> comparaison à temps constant.
    """
    if stored is None:
        return False
    stored = str(stored)
    if pwd_context.identify(stored):
        try:
            return pwd_context.verify(plain, stored)
        except ValueError:
            return False
    return secrets.compare_digest(str(plain).encode("utf-8"), stored.encode("utf-8"))


async def authenticate(directory: Directory, email: str | None, password: str | None) -> int:
    if not email or not password:
        raise ValidationError("Email and password are required.")

    user = await directory.find_user_by_email(email)
    if not user or not verify_password(password, user.password):
        raise InvalidCredentials()
    return user.user_id
