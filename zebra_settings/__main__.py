import argparse
import sys
import threading
from pathlib import Path

from .constants import MAX_WORKERS
from .bootstrap import init_data_layout, init_logging
from .app import REPO_BASE, create_app
from .services.inventory_service import load_printers_from
from .services.log_service import log_service
from .services.poll_service import poll_printers

COLUMNS = (("Loja", 5), ("Nome", 18), ("IP", 21), ("Nome impressora", 18),
           ("Modo atual", 12), ("Modo salvo", 12))


def format_table(results) -> str:
    def _row(values):
        return "  ".join(str(v)[:w].ljust(w) for v, (_, w) in zip(values, COLUMNS)).rstrip()

    lines = [_row(c for c, _ in COLUMNS), _row("-" * w for _, w in COLUMNS)]
    for r in results:
        t = r.target
        lines.append(_row((t.loja, t.nome, f"{t.ip}:{t.porta}", r.name, r.current_mode, r.stored_mode)))
        if r.error:
            lines.append(f"      ↳ {r.error}")
    return "\n".join(lines)


def _progress(total: int):
    done = 0
    lock = threading.Lock()

    def _tick(_result):
        nonlocal done
        with lock:
            done += 1
            print(f"\rConsultando impressoras... {done}/{total}", end="", file=sys.stderr, flush=True)
    return _tick


def cmd_poll(args) -> int:
    root = Path(args.data_dir) if args.data_dir else None
    dirs = init_data_layout(REPO_BASE, root=root)
    init_logging(dirs)

    targets = load_printers_from(dirs["data"])
    if not targets:
        print(f"Nenhuma impressora em {dirs['data'] / 'printers.csv'}", file=sys.stderr)
        return 1

    results = poll_printers(targets, max_workers=args.workers, on_result=_progress(len(targets)))
    print(file=sys.stderr)
    print(format_table(results))
    return 0 if all(r.ok for r in results) else 2


def cmd_serve(args) -> int:
    root = Path(args.data_dir) if args.data_dir else None
    app = create_app(dirs=init_data_layout(REPO_BASE, root=root))
    log_service("startup")
    try:
        app.run(host=args.host, port=args.port, debug=False, use_reloader=False)
    finally:
        log_service("shutdown")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="zebra_settings",
                                     description="Consulta as configurações salvas das impressoras Zebra")
    parser.add_argument("--data-dir", help="pasta de dados (padrão: ProgramData/ZebraSettings)")
    # Sem subcomando sobe o servidor
    parser.set_defaults(func=cmd_serve, host="0.0.0.0", port=8000)
    sub = parser.add_subparsers(dest="command")

    p_serve = sub.add_parser("serve", help="sobe a interface web")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=cmd_serve)

    p_poll = sub.add_parser("poll", help="consulta todas as impressoras e imprime a tabela")
    p_poll.add_argument("--workers", type=int, default=MAX_WORKERS)
    p_poll.set_defaults(func=cmd_poll)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
