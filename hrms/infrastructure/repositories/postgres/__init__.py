"""
PostgreSQL Repository Implementations.

Raw SQL over psycopg 3; every repository receives the DatabasePool handle.
"""

from .account import PostgresAccountRepository
from .company import PostgresCompanyRepository
from .employee import PostgresEmployeeRepository
from .tokens import PostgresPasswordResetTokenRepository, PostgresRefreshTokenRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresAccountRepository",
    "PostgresCompanyRepository",
    "PostgresEmployeeRepository",
    "PostgresPasswordResetTokenRepository",
    "PostgresRefreshTokenRepository",
    "PostgresUserRepository",
]
