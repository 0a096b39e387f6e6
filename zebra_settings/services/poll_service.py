from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, NamedTuple, Optional

from ..constants import MAX_WORKERS, NOT_AVAILABLE
from ..exceptions import PrinterError
from .inventory_service import PrinterTarget
from .settings_service import SettingsDocument, get_settings
from .log_service import log_error, log_service
from .trace_service import RequestTrace

Fetcher = Callable[[str, int], SettingsDocument]


class PollResult(NamedTuple):
    target: PrinterTarget
    name: str = NOT_AVAILABLE
    current_mode: str = NOT_AVAILABLE
    stored_mode: str = NOT_AVAILABLE
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_json(self) -> dict:
        return {
            "loja": self.target.loja,
            "nome": self.target.nome,
            "ip": self.target.ip,
            "porta": self.target.porta,
            "name": self.name,
            "current_mode": self.current_mode,
            "stored_mode": self.stored_mode,
            "error": self.error,
        }


def describe_error(e: Exception) -> str:
    return f"{type(e).__name__}: {e}"


def poll_printer(target: PrinterTarget, fetch: Fetcher = get_settings) -> PollResult:
    """
    Consulta uma impressora. Falhas de rede/parse/campo viram um PollResult
    com "N/A" e a descrição do erro; qualquer outra exceção sobe.
    """
    try:
        doc = fetch(target.ip, target.porta)
        fields = doc.as_dict()
    except PrinterError as e:
        log_error("poll_falha", ip=target.ip, porta=target.porta, erro=describe_error(e))
        return PollResult(target, error=describe_error(e))
    return PollResult(target, **fields)


def poll_printers(targets: Iterable[PrinterTarget], fetch: Fetcher = get_settings,
                  max_workers: int = MAX_WORKERS,
                  trace: Optional[RequestTrace] = None,
                  on_result: Optional[Callable[[PollResult], None]] = None) -> List[PollResult]:
    """
    Consulta todas as impressoras em paralelo (uma conexão por impressora).
    O resultado mantém a ordem da lista de entrada.
    """
    targets = tuple(targets)
    if not targets:
        return []

    def _one(t: PrinterTarget) -> PollResult:
        res = poll_printer(t, fetch)
        if on_result:
            on_result(res)
        return res

    workers = max(1, min(max_workers, len(targets)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(_one, targets))

    if trace is not None:
        for r in results:
            trace.add("poll_ok" if r.ok else "poll_falha", ip=r.target.ip, porta=r.target.porta,
                      name=r.name, erro=r.error)

    falhas = sum(1 for r in results if not r.ok)
    log_service("poll_concluido", total=len(results), falhas=falhas)
    return results
