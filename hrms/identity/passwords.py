"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Hashing de passwords (Argon2id)

Responsabilidades:
    - Hashear passwords con salt aleatorio (argon2-cffi).
    - Verificar password vs digest almacenado.
    - Exponer la política mínima de longitud.

Colaboradores:
    - application/usecases/credentials/*: login, registro, reset.
    - application/usecases/admin/update_user_password.py

Reglas:
    - Mismatch => False (nunca excepción).
    - Digest malformado (InvalidHashError) => se propaga: es corrupción de
      datos, no un password incorrecto.
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, VerifyMismatchError

MIN_PASSWORD_LENGTH: int = 8

_password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hashea un password usando Argon2id (salt por llamada)."""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verifica password vs hash almacenado."""
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError):
        return False


def is_password_long_enough(
    password: str | None, minimum: int = MIN_PASSWORD_LENGTH
) -> bool:
    return bool(password) and len(password) >= minimum
