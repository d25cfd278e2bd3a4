"""
===============================================================================
CREDENTIAL USE CASES PACKAGE (Public API / Exports)
===============================================================================

Responsibilities:
    - Re-exportar los casos de uso de sesión, registro y reset de password.
    - Re-exportar DTOs de entrada y resultados compartidos.

Collaborators:
    - login, logout, refresh_session, register_initial_admin,
      get_current_user, request_password_reset, reset_password,
      session_tokens, credential_results
===============================================================================
"""

from __future__ import annotations

from .credential_results import (
    AccessTokenResult,
    AuthSessionResult,
    CredentialActionResult,
    CredentialError,
    CredentialErrorCode,
    UserListResult,
    UserResult,
)
from .get_current_user import GetCurrentUserInput, GetCurrentUserUseCase
from .login import LoginInput, LoginUseCase
from .logout import LogoutInput, LogoutUseCase
from .refresh_session import RefreshSessionInput, RefreshSessionUseCase
from .register_initial_admin import (
    RegisterInitialAdminInput,
    RegisterInitialAdminUseCase,
    split_full_name,
)
from .request_password_reset import (
    RequestPasswordResetInput,
    RequestPasswordResetUseCase,
)
from .reset_password import ResetPasswordInput, ResetPasswordUseCase
from .session_tokens import SessionTokenIssuer, SessionTokens

__all__ = [
    # Use cases
    "GetCurrentUserUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "RefreshSessionUseCase",
    "RegisterInitialAdminUseCase",
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    # Inputs
    "GetCurrentUserInput",
    "LoginInput",
    "LogoutInput",
    "RefreshSessionInput",
    "RegisterInitialAdminInput",
    "RequestPasswordResetInput",
    "ResetPasswordInput",
    # Results
    "AccessTokenResult",
    "AuthSessionResult",
    "CredentialActionResult",
    "CredentialError",
    "CredentialErrorCode",
    "UserListResult",
    "UserResult",
    # Helpers
    "SessionTokenIssuer",
    "SessionTokens",
    "split_full_name",
]
