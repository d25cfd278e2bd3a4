"""
===============================================================================
USE CASE: Register Initial Admin
===============================================================================

Name:
    Register Initial Admin Use Case

Business Goal:
    Dar de alta el PRIMER tenant del sistema: empresa + usuario admin +
    registro de empleado, y devolver una sesión abierta.

Why (Context / Intención):
    - El registro público sólo existe para el setup inicial. Con al menos una
      empresa creada, las cuentas nuevas las provisiona HR/Admin.
    - El employee_id generado ES el login ID del admin.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    RegisterInitialAdminUseCase

Responsibilities:
    - Cerrar el registro si ya existe alguna empresa (antes de validar input)
      y re-verificarlo dentro de la escritura atómica (carreras concurrentes).
    - Validar nombre de empresa, nombre completo, email y password.
    - Rechazar emails ya registrados.
    - Generar código de empresa y employee ID únicos.
    - Persistir empresa (si es nueva) + usuario + empleado en UNA transacción.
    - Reintentar ante colisiones concurrentes de identificadores (acotado).
    - Emitir el par de tokens como en login.

Collaborators:
    - CompanyRepository: has_companies(), get_company_by_name()
    - UserRepository: get_user_by_email()
    - AccountRepository: create_account() (atómico)
    - identity.identifiers.IdentifierGenerator
    - identity.passwords.hash_password
    - SessionTokenIssuer

-------------------------------------------------------------------------------
INPUTS / OUTPUTS
-------------------------------------------------------------------------------
Inputs:
    RegisterInitialAdminInput(company_name, full_name, email, phone,
                              password, company_logo)
Outputs:
    AuthSessionResult (user + company + tokens)

Error Mapping:
    - FORBIDDEN: ya existe una empresa (registro cerrado, también si otra
      alta concurrente hace commit primero)
    - VALIDATION_ERROR: empresa < 2, nombre/apellido < 2, email vacío,
      password corto
    - CONFLICT: email ya registrado (pre-chequeo o carrera en el INSERT)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable
from uuid import uuid4

from ....crosscutting.exceptions import (
    DuplicateKeyError,
    IdentifierGenerationError,
    RegistrationClosedError,
)
from ....crosscutting.logger import logger
from ....domain.entities import Company, Employee, EmployeeStatus
from ....domain.repositories import (
    AccountRepository,
    CompanyRepository,
    UserRepository,
)
from ....identity.identifiers import IdentifierGenerator
from ....identity.passwords import MIN_PASSWORD_LENGTH, hash_password
from ....identity.tokens import utcnow
from ....identity.users import User, UserRole, normalize_email
from .credential_results import AuthSessionResult, CredentialErrorCode, error_of
from .session_tokens import SessionTokenIssuer

REGISTRATION_CLOSED_MESSAGE = (
    "Registration is disabled. Please contact your HR or Admin to create an account."
)
OWNER_DEPARTMENT = "General"
OWNER_POSITION = "Owner"

_IDENTIFIER_FIELDS = {"employee_id", "company_code", "company_name"}


@dataclass(frozen=True)
class RegisterInitialAdminInput:
    company_name: str
    full_name: str
    email: str
    password: str
    phone: str | None = None
    company_logo: str | None = None


def split_full_name(full_name: str) -> tuple[str, str]:
    """
    Primer token = nombre; resto = apellido.

    Un nombre de una sola palabra se repite como apellido ("Cher" -> Cher Cher).
    """
    parts = (full_name or "").split()
    first_name = parts[0] if parts else ""
    last_name = " ".join(parts[1:]) or first_name
    return first_name, last_name


class RegisterInitialAdminUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        companies: CompanyRepository,
        accounts: AccountRepository,
        identifiers: IdentifierGenerator,
        sessions: SessionTokenIssuer,
        min_password_length: int = MIN_PASSWORD_LENGTH,
        max_attempts: int = 5,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = users
        self._companies = companies
        self._accounts = accounts
        self._identifiers = identifiers
        self._sessions = sessions
        self._min_password_length = min_password_length
        self._max_attempts = max_attempts
        self._clock = clock

    def execute(self, input_data: RegisterInitialAdminInput) -> AuthSessionResult:
        # ---------------------------------------------------------------------
        # 1) Registro cerrado si ya hay tenants (antes de validar input).
        # ---------------------------------------------------------------------
        if self._companies.has_companies():
            return self._error(CredentialErrorCode.FORBIDDEN, REGISTRATION_CLOSED_MESSAGE)

        # ---------------------------------------------------------------------
        # 2) Validación de input.
        # ---------------------------------------------------------------------
        company_name = (input_data.company_name or "").strip()
        if len(company_name) < 2:
            return self._validation_error(
                "Company name is required and must be at least 2 characters"
            )

        first_name, last_name = split_full_name(input_data.full_name)
        if len(first_name) < 2 or len(last_name) < 2:
            return self._validation_error(
                "First name and last name must each be at least 2 characters long"
            )

        email = normalize_email(input_data.email)
        if not email:
            return self._validation_error("Email is required")

        password = input_data.password or ""
        if len(password) < self._min_password_length:
            return self._validation_error(
                f"Password must be at least {self._min_password_length} characters long"
            )

        # ---------------------------------------------------------------------
        # 3) Unicidad de email.
        # ---------------------------------------------------------------------
        if self._users.get_user_by_email(email) is not None:
            return self._conflict()

        password_hash = hash_password(password)
        phone = (input_data.phone or "").strip() or None
        logo = (input_data.company_logo or "").strip() or None

        # ---------------------------------------------------------------------
        # 4-6) Identificadores + escritura atómica, con reintento acotado.
        # ---------------------------------------------------------------------
        next_serial: int | None = None
        for attempt in range(self._max_attempts):
            if attempt > 0 and self._companies.has_companies():
                # Otro registro ganó la carrera.
                return self._error(
                    CredentialErrorCode.FORBIDDEN, REGISTRATION_CLOSED_MESSAGE
                )

            now = self._clock()
            company = self._companies.get_company_by_name(company_name)
            new_company: Company | None = None
            if company is None:
                new_company = Company(
                    id=uuid4(),
                    name=company_name,
                    code=self._identifiers.generate_company_code(company_name),
                    logo=logo,
                    created_at=now,
                )
                company = new_company

            identifier = self._identifiers.generate_employee_id(
                company_code=company.code,
                first_name=first_name,
                last_name=last_name,
                reference_date=now,
                company_id=company.id,
                start_serial=next_serial,
            )

            user = User(
                id=uuid4(),
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                role=UserRole.ADMIN,
                company_id=company.id,
                employee_id=identifier.value,
                phone=phone,
                department=OWNER_DEPARTMENT,
                position=OWNER_POSITION,
                created_at=now,
                updated_at=now,
            )
            employee = Employee(
                id=uuid4(),
                employee_id=identifier.value,
                user_id=user.id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                phone=phone,
                department=OWNER_DEPARTMENT,
                position=OWNER_POSITION,
                status=EmployeeStatus.ACTIVE,
                hire_date=now,
                salary=Decimal("0"),
                company_id=company.id,
            )

            try:
                self._accounts.create_account(
                    user=user,
                    employee=employee,
                    company=new_company,
                    only_if_no_companies=True,
                )
            except RegistrationClosedError:
                logger.info("Registro rechazado: otra empresa se creó primero")
                return self._error(
                    CredentialErrorCode.FORBIDDEN, REGISTRATION_CLOSED_MESSAGE
                )
            except DuplicateKeyError as exc:
                if exc.field == "email":
                    return self._conflict()
                if exc.field not in _IDENTIFIER_FIELDS:
                    raise
                logger.warning(
                    "Colisión de identificador en registro; reintentando",
                    extra={"field": exc.field, "attempt": attempt + 1},
                )
                if exc.field == "employee_id":
                    next_serial = identifier.serial + 1
                continue

            logger.info(
                "Registro inicial completado",
                extra={
                    "user_id": str(user.id),
                    "company_id": str(company.id),
                    "employee_id": identifier.value,
                },
            )
            tokens = self._sessions.issue(user.id)
            return AuthSessionResult(
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                user=user,
                company=company,
            )

        raise IdentifierGenerationError(
            f"Could not persist registration after {self._max_attempts} attempts"
        )

    @staticmethod
    def _error(code: CredentialErrorCode, message: str) -> AuthSessionResult:
        return AuthSessionResult(error=error_of(code, message))

    def _validation_error(self, message: str) -> AuthSessionResult:
        return self._error(CredentialErrorCode.VALIDATION_ERROR, message)

    def _conflict(self) -> AuthSessionResult:
        return self._error(
            CredentialErrorCode.CONFLICT, "User with this email already exists"
        )
