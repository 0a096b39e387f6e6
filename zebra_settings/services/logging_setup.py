# zebra_settings/services/logging_setup.py
import os, json, socket, logging, time
from pathlib import Path
from logging.handlers import TimedRotatingFileHandler

APP_NAME      = "ZebraSettings"
APP_VERSION   = os.environ.get("ZEBRA_APP_VERSION", "dev")
ENVIRONMENT   = os.environ.get("ZEBRA_ENV", "prd")   # prd|hml|dev
HOSTNAME      = socket.gethostname()
PROCESS_ID    = os.getpid()

LOGGER_NAMES = ("app.service", "app.audit", "app.error")

# Atributos padrão do LogRecord que não entram como "extra"
_RESERVED = frozenset(("msg", "args", "levelno", "levelname", "name",
                       "created", "msecs", "relativeCreated", "pathname",
                       "filename", "module", "lineno", "funcName",
                       "thread", "threadName", "process", "processName",
                       "exc_info", "exc_text", "stack_info", "stacklevel",
                       "taskName", "message"))


class JsonFormatter(logging.Formatter):
    # Gera uma linha JSON por registro
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts":        time.strftime("%Y-%m-%dT%H:%M:%S%z", time.localtime(record.created)),
            "level":     record.levelname,
            "logger":    record.name,
            "message":   record.getMessage(),
            "app":       APP_NAME,
            "version":   APP_VERSION,
            "env":       ENVIRONMENT,
            "host":      HOSTNAME,
            "pid":       PROCESS_ID,
            "module":    record.module,
            "func":      record.funcName,
        }
        # logger.info("msg", extra={"key": "val"})
        for k, v in record.__dict__.items():
            if k not in base and k not in _RESERVED:
                base[k] = v
        if record.exc_info:
            base["exception"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


def _make_handler(path: Path) -> TimedRotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    h = TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=7,           # mantém 7 dias
        encoding="utf-8",
        utc=False
    )
    h.setFormatter(JsonFormatter())
    return h


def setup_logging(logs_dir: Path) -> dict:
    """
    Cria 3 loggers:
      - app.service → consultas, startup/shutdown
      - app.audit   → mudanças em printers.csv, traces de polling
      - app.error   → impressoras que falharam e exceções
    Retorna os loggers em um dict.
    """
    logs_dir = Path(logs_dir)

    # Evita duplicar handlers se setup_logging for chamado 2x
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()
        logger.propagate = False
        logger.setLevel(logging.INFO)

    service_logger = logging.getLogger("app.service")
    audit_logger   = logging.getLogger("app.audit")
    error_logger   = logging.getLogger("app.error")
    service_logger.addHandler(_make_handler(logs_dir / "service.log"))
    audit_logger.addHandler(_make_handler(logs_dir / "audit.log"))
    error_logger.addHandler(_make_handler(logs_dir / "error.log"))
    error_logger.setLevel(logging.WARNING)

    # Também espelha no console fora de produção
    if ENVIRONMENT != "prd":
        console = logging.StreamHandler()
        console.setFormatter(JsonFormatter())
        for lg in (service_logger, audit_logger, error_logger):
            lg.addHandler(console)

    return {
        "service": service_logger,
        "audit":   audit_logger,
        "error":   error_logger,
    }
