import os, shutil
from pathlib import Path

from .services.logging_setup import setup_logging
from .services.log_service import init_loggers

APP_DIR_NAME = "ZebraSettings"


def get_programdata_root() -> Path:
    override = os.environ.get("ZEBRA_DATA_ROOT")
    if override:
        return Path(override)
    base = os.environ.get("PROGRAMDATA") or ("/var/lib" if os.name != "nt" else r"C:\ProgramData")
    return Path(base) / APP_DIR_NAME


def _copy_if_missing(src: Path, dst: Path):
    if src.is_file() and not dst.exists():
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)


def init_data_layout(repo_base_dir: str, root: Path | None = None) -> dict:
    root = Path(root) if root is not None else get_programdata_root()
    dirs = {
        "root": root,
        "config": root / "config",
        "logs": root / "logs",
        "data": root / "data",
    }
    for p in dirs.values():
        p.mkdir(parents=True, exist_ok=True)

    # Seeds (só na primeira execução)
    seeds_dir = Path(repo_base_dir) / "seeds"
    if seeds_dir.is_dir():
        _copy_if_missing(seeds_dir / "printers.csv", dirs["data"] / "printers.csv")

    return dirs


def init_logging(dirs: dict) -> dict:
    loggers = setup_logging(dirs["logs"])
    init_loggers(loggers["service"], loggers["audit"], loggers["error"],
                 audit_jsonl=dirs["logs"] / "audit.jsonl")
    return loggers
