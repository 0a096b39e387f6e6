# zebra_settings/services/log_service.py
import json
import logging
import threading
from pathlib import Path
from flask import has_request_context, request

# Loggers configurados no bootstrap
SERVICE_LOGGER: logging.Logger | None = None
AUDIT_LOGGER:   logging.Logger | None = None
ERROR_LOGGER:   logging.Logger | None = None

AUDIT_JSONL: Path | None = None
_AUDIT_LOCK = threading.Lock()


# ---------------------------------------------------------
# Insere dados do contexto HTTP automaticamente
# ---------------------------------------------------------
def _with_request_context(data: dict) -> dict:
    if has_request_context():
        data.setdefault("client_ip", request.remote_addr)
        data.setdefault("method", request.method)
        data.setdefault("path", request.path)
    return data


# ---------------------------------------------------------
# Inicialização feita no bootstrap
# ---------------------------------------------------------
def init_loggers(service, audit, error, audit_jsonl: Path | None):
    global SERVICE_LOGGER, AUDIT_LOGGER, ERROR_LOGGER, AUDIT_JSONL
    SERVICE_LOGGER = service
    AUDIT_LOGGER   = audit
    ERROR_LOGGER   = error
    AUDIT_JSONL    = audit_jsonl


# ---------------------------------------------------------
# Logs gerais do sistema (INFO)
# ---------------------------------------------------------
def log_service(message: str, **meta):
    if SERVICE_LOGGER:
        SERVICE_LOGGER.info(message, extra=_with_request_context(meta))


# ---------------------------------------------------------
# Logs de auditoria — registra JSON e arquivo audit.jsonl
# ---------------------------------------------------------
def log_audit(action: str, **meta):
    if AUDIT_LOGGER:
        AUDIT_LOGGER.info(action, extra=_with_request_context(meta))

    if "trace" in meta and AUDIT_JSONL:
        AUDIT_JSONL.parent.mkdir(parents=True, exist_ok=True)
        with _AUDIT_LOCK, AUDIT_JSONL.open("a", encoding="utf-8") as f:
            f.write(json.dumps(meta["trace"], ensure_ascii=False, default=str) + "\n")


# ---------------------------------------------------------
# Logs de erro
# ---------------------------------------------------------
def log_error(message: str, **meta):
    if ERROR_LOGGER:
        ERROR_LOGGER.error(message, extra=_with_request_context(meta))


def log_exception(message: str, **meta):
    if ERROR_LOGGER:
        ERROR_LOGGER.exception(message, extra=_with_request_context(meta))
