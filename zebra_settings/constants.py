import os, sys

BASE_DIR = (
    os.path.dirname(sys.executable)
    if getattr(sys, "frozen", False)
    else os.path.dirname(__file__)
)


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    # Valor inválido ou abaixo do mínimo cai no padrão
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


# Arquivos
PRINTERS_CSV = "printers.csv"

# Rede
DEFAULT_PORTA      = 9100
CONNECT_TIMEOUT_MS = _env_int("ZEBRA_CONNECT_TIMEOUT_MS", 2000)
READ_TIMEOUT_MS    = _env_int("ZEBRA_READ_TIMEOUT_MS", 2000)   # silêncio consecutivo
POLL_INTERVAL_MS   = _env_int("ZEBRA_POLL_INTERVAL_MS", 50)
DEADLINE_MS        = _env_int("ZEBRA_DEADLINE_MS", 0, minimum=0) or None  # 0 = sem limite absoluto
CHUNK_SIZE         = 1024
LINE_TERMINATOR    = "\r\n"
ENCODING           = "latin1"

# Enquadramento da resposta
STX = 0x02
ETX = 0x03

# Consulta de configurações (^HZS devolve o XML de "saved settings")
SETTINGS_COMMAND  = "^XA^HZS^XZ"
SETTINGS_END_TEXT = "</ZEBRA-ELTRON-PERSONALITY>"

# Polling
MAX_WORKERS = _env_int("ZEBRA_MAX_WORKERS", 8)
NOT_AVAILABLE = "N/A"
