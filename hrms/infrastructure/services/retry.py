"""hrms.infrastructure.services.retry

Name: Retry Helper with Exponential Backoff + Jitter (SMTP)

Qué es
------
Utilidad de **resiliencia** para el envío de emails:
  - Clasificación de errores SMTP: **transient** (reintentar) vs **permanent**
  - Decorator de `tenacity` con **exponential backoff + jitter**
  - Logging estructurado de cada reintento

CRC (Component Card)
--------------------
Component: retry helper
Responsibilities:
  - Decidir qué errores de SMTP/red son reintentables
  - Proveer un decorator estándar (tenacity) configurado desde Settings
  - Loguear intentos
Collaborators:
  - tenacity (motor de retry)
  - crosscutting.config.get_settings (attempts / delays)
  - infrastructure.notifications.smtp_notifier (consumidor)
Constraints:
  - Reintentar SOLO errores transitorios (códigos SMTP 4xx, desconexión, timeouts)
  - No reintentar permanentes (5xx, autenticación, destinatario rechazado)
"""

from __future__ import annotations

import smtplib
from typing import Callable, Optional, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ...crosscutting.config import get_settings
from ...crosscutting.logger import logger

T = TypeVar("T")

# R: Fallas permanentes: reintentar no cambia el resultado.
_PERMANENT_SMTP_ERRORS: tuple[type[BaseException], ...] = (
    smtplib.SMTPAuthenticationError,
    smtplib.SMTPRecipientsRefused,
    smtplib.SMTPSenderRefused,
    smtplib.SMTPNotSupportedError,
)

# R: Fallas de conexión: el servidor puede volver.
_TRANSIENT_SMTP_ERRORS: tuple[type[BaseException], ...] = (
    smtplib.SMTPServerDisconnected,
    smtplib.SMTPConnectError,
)


def get_smtp_code(exception: BaseException) -> int | None:
    """R: Código de respuesta SMTP si la excepción lo trae (SMTPResponseException)."""
    code = getattr(exception, "smtp_code", None)
    return code if isinstance(code, int) else None


def is_transient_error(exception: BaseException) -> bool:
    """R: Decide si un error es transitorio (reintentar) o permanente (fail-fast).

    Reglas (en orden):
      1) Errores SMTP permanentes conocidos: False.
      2) Desconexión / conexión fallida: True.
      3) Código SMTP: 4xx => True, 5xx => False.
      4) Timeouts / errores de socket: True.
      5) Default: False.
    """
    if isinstance(exception, _PERMANENT_SMTP_ERRORS):
        return False

    if isinstance(exception, _TRANSIENT_SMTP_ERRORS):
        return True

    code = get_smtp_code(exception)
    if code is not None:
        return 400 <= code < 500

    # R: SMTPException hereda de OSError; los SMTP ya se clasificaron arriba.
    if isinstance(exception, smtplib.SMTPException):
        return False

    if isinstance(exception, (TimeoutError, ConnectionError, OSError)):
        return True

    return False


def _log_retry(retry_state: RetryCallState) -> None:
    """R: Loguea cada intento antes de dormir (before_sleep)."""
    fn = getattr(retry_state, "fn", None)
    wait_time = (
        retry_state.next_action.sleep
        if getattr(retry_state, "next_action", None) is not None
        else 0
    )

    exc: Optional[BaseException] = None
    if getattr(retry_state, "outcome", None) is not None:
        exc = retry_state.outcome.exception()

    logger.warning(
        "Reintentando envío de email",
        extra={
            "function": getattr(fn, "__name__", "unknown"),
            "attempt": getattr(retry_state, "attempt_number", 0),
            "wait_seconds": round(float(wait_time), 2),
            "error": str(exc) if exc else None,
            "error_type": type(exc).__name__ if exc else None,
        },
    )


def create_retry_decorator(
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """R: Crea un decorator `tenacity` con exponential backoff + jitter.

    Los overrides explícitos ganan sobre Settings.
    """
    settings = get_settings()

    _max_attempts = (
        settings.retry_max_attempts if max_attempts is None else max_attempts
    )
    _base_delay = (
        settings.retry_base_delay_seconds if base_delay is None else float(base_delay)
    )
    _max_delay = (
        settings.retry_max_delay_seconds if max_delay is None else float(max_delay)
    )

    if _max_attempts <= 0:
        raise ValueError("max_attempts must be > 0")
    if _base_delay < 0:
        raise ValueError("base_delay must be >= 0")
    if _max_delay <= 0:
        raise ValueError("max_delay must be > 0")

    return retry(
        stop=stop_after_attempt(_max_attempts),
        wait=wait_exponential_jitter(
            initial=_base_delay, max=_max_delay, jitter=_base_delay
        ),
        retry=retry_if_exception(is_transient_error),
        before_sleep=_log_retry,
        reraise=True,
    )
