import csv
from pathlib import Path
from typing import Iterable, NamedTuple, Optional, Tuple

from ..constants import DEFAULT_PORTA, PRINTERS_CSV

FIELDNAMES = ['loja', 'nome', 'ip', 'porta']


class PrinterTarget(NamedTuple):
    loja: str
    nome: str
    ip: str
    porta: int = DEFAULT_PORTA

    @property
    def label(self) -> str:
        return self.nome or f"{self.ip}:{self.porta}"


def _resolve_data_dir(data_dir: Optional[Path]) -> Path:
    """Retorna o diretório de dados, tentando detectar o ProgramData automaticamente."""
    if data_dir is not None:
        return Path(data_dir)
    try:
        from flask import current_app
        return current_app.config["DIRS"]["data"]
    except RuntimeError:
        # fora de um contexto Flask
        from ..bootstrap import get_programdata_root
        return get_programdata_root() / "data"


def parse_porta(raw) -> int:
    raw = str(raw or "").strip()
    if not raw:
        return DEFAULT_PORTA
    porta = int(raw)
    if not 0 < porta < 65536:
        raise ValueError(f"porta fora da faixa: {porta}")
    return porta


def load_printers_from(data_dir: Optional[Path] = None) -> Tuple[PrinterTarget, ...]:
    """
    Lê printers.csv e devolve a lista (imutável) de impressoras.
    - Ignora linhas sem IP
    - Porta vazia vira 9100
    """
    path = _resolve_data_dir(data_dir) / PRINTERS_CSV
    if not path.exists():
        return ()

    targets = []
    with path.open(newline='', encoding='utf-8') as f:
        for row in csv.DictReader(f):
            ip = (row.get('ip') or '').strip()
            if not ip:
                continue
            targets.append(PrinterTarget(
                loja=str(row.get('loja') or '').strip(),
                nome=(row.get('nome') or '').strip(),
                ip=ip,
                porta=parse_porta(row.get('porta')),
            ))
    return tuple(targets)


def save_printers_to(data_dir: Optional[Path], targets: Iterable[PrinterTarget]):
    """Salva a lista de impressoras em printers.csv (sobrescreve o arquivo)."""
    path = _resolve_data_dir(data_dir) / PRINTERS_CSV
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open('w', newline='', encoding='utf-8') as f:
        w = csv.DictWriter(f, fieldnames=FIELDNAMES)
        w.writeheader()
        for t in targets:
            w.writerow(t._asdict())
