"""
===============================================================================
TARJETA CRC — hrms/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer repositorios, codec, generador de IDs y notificador según Settings.
  - Construir los casos de uso con sus dependencias (DIP).
  - Elegir adapters in-memory en entornos de test (APP_ENV=test|testing|ci).

Colaboradores:
  - crosscutting.config.Settings
  - infrastructure.db.pool.DatabasePool (handle inyectado, lo abre el lifespan)
  - infrastructure.repositories.* / infrastructure.notifications.*
  - application.usecases.*

Patrones aplicados:
  - Composition Root
  - Dependency Inversion (use cases dependen de puertos)

Notas:
  - Una instancia por app (app.state.container), sin singletons de módulo.
  - Este archivo NO depende de FastAPI.
===============================================================================
"""

from __future__ import annotations

from datetime import timedelta

from .application.usecases.admin import (
    ListUsersUseCase,
    SendCredentialsUseCase,
    UpdateUserPasswordUseCase,
)
from .application.usecases.credentials import (
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
    RegisterInitialAdminUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
    SessionTokenIssuer,
)
from .crosscutting.config import Settings
from .domain.repositories import (
    AccountRepository,
    CompanyRepository,
    EmployeeRepository,
    PasswordResetTokenRepository,
    RefreshTokenRepository,
    UserRepository,
)
from .domain.services import CredentialNotifier
from .identity.identifiers import IdentifierGenerator
from .identity.tokens import TokenCodec
from .infrastructure.db.pool import DatabasePool
from .infrastructure.notifications import LoggingEmailNotifier, SmtpEmailNotifier
from .infrastructure.repositories.in_memory import InMemoryIdentityStore
from .infrastructure.repositories.postgres import (
    PostgresAccountRepository,
    PostgresCompanyRepository,
    PostgresEmployeeRepository,
    PostgresPasswordResetTokenRepository,
    PostgresRefreshTokenRepository,
    PostgresUserRepository,
)


class Container:
    """Dependencias de una instancia de la app."""

    def __init__(
        self,
        *,
        settings: Settings,
        users: UserRepository,
        companies: CompanyRepository,
        employees: EmployeeRepository,
        accounts: AccountRepository,
        refresh_tokens: RefreshTokenRepository,
        reset_tokens: PasswordResetTokenRepository,
        notifier: CredentialNotifier,
        codec: TokenCodec,
        pool: DatabasePool | None = None,
    ) -> None:
        self.settings = settings
        self.users = users
        self.companies = companies
        self.employees = employees
        self.accounts = accounts
        self.refresh_tokens = refresh_tokens
        self.reset_tokens = reset_tokens
        self.notifier = notifier
        self.codec = codec
        self.pool = pool

    # ------------------------------------------------------------------
    # Construcción
    # ------------------------------------------------------------------
    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        pool: DatabasePool | None = None,
        notifier: CredentialNotifier | None = None,
    ) -> "Container":
        """
        Arma el container según el entorno.

        - Test: un InMemoryIdentityStore implementa todos los puertos.
        - Resto: repositorios Postgres sobre el pool inyectado.
        """
        notifier = notifier or build_notifier(settings)
        codec = TokenCodec.from_settings(settings)

        if settings.is_test() or pool is None:
            store = InMemoryIdentityStore()
            return cls(
                settings=settings,
                users=store,
                companies=store,
                employees=store,
                accounts=store,
                refresh_tokens=store,
                reset_tokens=store,
                notifier=notifier,
                codec=codec,
            )

        return cls(
            settings=settings,
            users=PostgresUserRepository(pool),
            companies=PostgresCompanyRepository(pool),
            employees=PostgresEmployeeRepository(pool),
            accounts=PostgresAccountRepository(pool),
            refresh_tokens=PostgresRefreshTokenRepository(pool),
            reset_tokens=PostgresPasswordResetTokenRepository(pool),
            notifier=notifier,
            codec=codec,
            pool=pool,
        )

    # ------------------------------------------------------------------
    # Servicios compartidos
    # ------------------------------------------------------------------
    def session_issuer(self) -> SessionTokenIssuer:
        return SessionTokenIssuer(self.codec, self.refresh_tokens)

    def identifier_generator(self) -> IdentifierGenerator:
        return IdentifierGenerator(
            self.companies,
            self.employees,
            max_attempts=self.settings.identifier_max_attempts,
        )

    @property
    def reset_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.password_reset_ttl_minutes)

    # ------------------------------------------------------------------
    # Casos de uso
    # ------------------------------------------------------------------
    def login_use_case(self) -> LoginUseCase:
        return LoginUseCase(self.users, self.companies, self.session_issuer())

    def logout_use_case(self) -> LogoutUseCase:
        return LogoutUseCase(self.refresh_tokens)

    def refresh_session_use_case(self) -> RefreshSessionUseCase:
        return RefreshSessionUseCase(self.codec, self.refresh_tokens)

    def register_initial_admin_use_case(self) -> RegisterInitialAdminUseCase:
        return RegisterInitialAdminUseCase(
            users=self.users,
            companies=self.companies,
            accounts=self.accounts,
            identifiers=self.identifier_generator(),
            sessions=self.session_issuer(),
            min_password_length=self.settings.registration_password_min_length,
            max_attempts=self.settings.identifier_max_attempts,
        )

    def get_current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(self.codec, self.users, self.companies)

    def request_password_reset_use_case(self) -> RequestPasswordResetUseCase:
        return RequestPasswordResetUseCase(
            users=self.users,
            reset_tokens=self.reset_tokens,
            notifier=self.notifier,
            token_ttl=self.reset_token_ttl,
        )

    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            users=self.users,
            reset_tokens=self.reset_tokens,
            refresh_tokens=self.refresh_tokens,
            min_password_length=self.settings.password_min_length,
        )

    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(self.users)

    def send_credentials_use_case(self) -> SendCredentialsUseCase:
        return SendCredentialsUseCase(
            users=self.users,
            reset_tokens=self.reset_tokens,
            notifier=self.notifier,
            token_ttl=self.reset_token_ttl,
        )

    def update_user_password_use_case(self) -> UpdateUserPasswordUseCase:
        return UpdateUserPasswordUseCase(
            self.users, min_password_length=self.settings.password_min_length
        )


def build_notifier(settings: Settings) -> CredentialNotifier:
    if settings.email_enabled and not settings.is_test():
        return SmtpEmailNotifier.from_settings(settings)
    return LoggingEmailNotifier()
