"""
===============================================================================
TARJETA CRC — hrms/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Mantener contexto "request-scoped" usando ContextVars (async-safe).
  - Permitir correlación de logs sin pasar request_id por todo el stack.

Colaboradores:
  - hrms.crosscutting.middleware: setea request_id/method/path al inicio.
  - hrms.crosscutting.logger: enriquece logs leyendo get_context_dict().

Restricciones:
  - Solo strings; "" significa "no disponible".
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def get_context_dict() -> dict[str, str]:
    """Contexto actual como dict, omitiendo claves vacías."""
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx["request_id"] = val
    if val := http_method_var.get():
        ctx["method"] = val
    if val := http_path_var.get():
        ctx["path"] = val

    return ctx


def clear_context() -> None:
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
