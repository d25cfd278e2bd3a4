"""Infra DB: handle del pool + errores tipados."""

from .errors import (
    DatabasePoolError,
    PoolAlreadyOpenError,
    PoolNotOpenError,
    duplicate_key_from,
)
from .pool import DatabasePool

__all__ = [
    "DatabasePool",
    "DatabasePoolError",
    "PoolAlreadyOpenError",
    "PoolNotOpenError",
    "duplicate_key_from",
]
