"""
Erros da consulta às impressoras.

Todos herdam de PrinterError, para que quem orquestra possa isolar
a falha por impressora com um único except.
"""


class PrinterError(Exception):
    """Base de todas as falhas de consulta."""


class PrinterConnectionError(PrinterError, ConnectionError):
    """Não foi possível abrir a conexão TCP (recusada, inalcançável ou timeout)."""

    def __init__(self, host: str, port: int, reason: str = ""):
        self.host = host
        self.port = port
        msg = f"Falha ao conectar em {host}:{port}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class PrinterTimeoutError(PrinterError, TimeoutError):
    """Conectou, mas a impressora ficou em silêncio além do limite."""

    def __init__(self, host: str, port: int, waited_ms: int):
        self.host = host
        self.port = port
        self.waited_ms = waited_ms
        super().__init__(f"Timeout aguardando resposta de {host}:{port} ({waited_ms} ms)")


class SettingsParseError(PrinterError, ValueError):
    """A resposta não é um XML bem formado. Guarda o texto bruto para diagnóstico."""

    def __init__(self, raw_text: str, cause: Exception):
        self.raw_text = raw_text
        self.cause = cause
        super().__init__(f"Resposta inválida da impressora: {cause}")


class FieldMissingError(PrinterError, KeyError):
    """O documento foi lido, mas falta um dos nós esperados."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(path)

    def __str__(self):
        return f"Campo ausente: {self.path}"
