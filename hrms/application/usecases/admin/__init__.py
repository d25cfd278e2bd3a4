"""Admin use cases: listado de usuarios, envío de credenciales, cambio de password."""

from .list_users import ListUsersUseCase
from .send_credentials import SendCredentialsInput, SendCredentialsUseCase
from .update_user_password import UpdateUserPasswordInput, UpdateUserPasswordUseCase

__all__ = [
    "ListUsersUseCase",
    "SendCredentialsInput",
    "SendCredentialsUseCase",
    "UpdateUserPasswordInput",
    "UpdateUserPasswordUseCase",
]
