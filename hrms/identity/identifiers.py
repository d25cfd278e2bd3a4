"""
===============================================================================
TARJETA CRC — identity/identifiers.py
===============================================================================

Módulo:
    Generación de identificadores (código de empresa / employee ID)

Responsabilidades:
    - Derivar el código base de una empresa a partir de su nombre.
    - Resolver colisiones con sufijo temporal de 4 dígitos (intentos acotados).
    - Generar el employee ID (= login ID) con serial por prefijo.

Colaboradores:
    - domain.repositories.CompanyRepository: company_code_exists()
    - domain.repositories.EmployeeRepository: employee_id_exists(), count_*()
    - application/usecases/credentials/register_initial_admin.py

Formato del employee ID:
    {CODE}{FIRST[:2]}{LAST[:2]}{YYYY}{serial:04d}
    ej: ACJADO20250001 (Acme Corp / Jane Doe / 2025 / primer serial)

Concurrencia:
    - Los chequeos son optimistas. Si el INSERT choca igual (otro request
      ganó la carrera), el caso de uso vuelve a llamar con start_serial + 1.
===============================================================================
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID

from ..crosscutting.exceptions import IdentifierGenerationError
from ..crosscutting.logger import logger
from ..domain.repositories import CompanyRepository, EmployeeRepository

_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_PAD = "X"
MAX_SERIAL = 9999


def _alnum_upper(value: str) -> str:
    return _NON_ALNUM.sub("", (value or "").upper())


def _two_chars(value: str) -> str:
    return _alnum_upper(value)[:2].ljust(2, _PAD)


def base_company_code(company_name: str) -> str:
    """
    Código determinístico de 2 caracteres.

    - 2+ palabras: inicial de las dos primeras ("Acme Corp" -> "AC")
    - 1 palabra: sus dos primeros caracteres ("Globex" -> "GL", "Q" -> "QX")
    """
    words = [w for w in (_alnum_upper(p) for p in (company_name or "").split()) if w]
    if len(words) >= 2:
        return words[0][0] + words[1][0]
    if words:
        return _two_chars(words[0])
    return _PAD * 2


def employee_id_prefix(
    company_code: str, first_name: str, last_name: str, reference_date: datetime
) -> str:
    return (
        f"{company_code}{_two_chars(first_name)}{_two_chars(last_name)}"
        f"{reference_date.year:04d}"
    )


@dataclass(frozen=True, slots=True)
class EmployeeIdentifier:
    value: str
    serial: int


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class IdentifierGenerator:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      IdentifierGenerator

    Responsabilidades:
      - generate_company_code(name) -> str único (pre-chequeado)
      - generate_employee_id(...) -> EmployeeIdentifier único (pre-chequeado)

    Colaboradores:
      - CompanyRepository, EmployeeRepository
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        companies: CompanyRepository,
        employees: EmployeeRepository,
        *,
        max_attempts: int = 5,
        millis: Callable[[], int] = _epoch_millis,
    ) -> None:
        self._companies = companies
        self._employees = employees
        self._max_attempts = max_attempts
        self._millis = millis

    def generate_company_code(self, company_name: str) -> str:
        base = base_company_code(company_name)
        if not self._companies.company_code_exists(base):
            return base

        stamp = self._millis()
        for attempt in range(self._max_attempts):
            candidate = f"{base}{(stamp + attempt) % 10_000:04d}"
            if not self._companies.company_code_exists(candidate):
                logger.info(
                    "Código de empresa con sufijo",
                    extra={"base_code": base, "company_code": candidate},
                )
                return candidate

        raise IdentifierGenerationError(
            f"Could not generate a unique company code for '{company_name}' "
            f"after {self._max_attempts} attempts"
        )

    def generate_employee_id(
        self,
        *,
        company_code: str,
        first_name: str,
        last_name: str,
        reference_date: datetime,
        company_id: UUID | None = None,
        start_serial: int | None = None,
    ) -> EmployeeIdentifier:
        """
        Serial inicial = 1 + cantidad de IDs existentes con el prefijo
        (o start_serial si el caller reintenta), luego avanza mientras el
        ID ya exista.
        """
        prefix = employee_id_prefix(
            company_code, first_name, last_name, reference_date
        )

        serial = start_serial
        if serial is None:
            serial = (
                self._employees.count_employee_ids_with_prefix(
                    prefix, company_id=company_id
                )
                + 1
            )

        while serial <= MAX_SERIAL:
            candidate = f"{prefix}{serial:04d}"
            if not self._employees.employee_id_exists(candidate):
                return EmployeeIdentifier(value=candidate, serial=serial)
            serial += 1

        raise IdentifierGenerationError(
            f"Employee id serials exhausted for prefix '{prefix}'"
        )
