from flask import Blueprint, render_template, current_app

from ..services.inventory_service import load_printers_from
from ..services.poll_service import poll_printers
from ..services.log_service import log_audit
from ..services.trace_service import start_trace

bp = Blueprint("main", __name__)


@bp.route("/", methods=["GET"])
def index():
    DIRS = current_app.config["DIRS"]
    targets = load_printers_from(DIRS["data"])

    trace = start_trace("poll_tela")
    results = poll_printers(
        targets,
        fetch=current_app.config["FETCHER"],
        max_workers=current_app.config["MAX_WORKERS"],
        trace=trace,
    )
    log_audit("poll", trace=trace.finish())

    # Ordena por loja e depois pelo nome, como na planilha
    results.sort(key=lambda r: (int(r.target.loja) if r.target.loja.isdigit() else 0, r.target.nome))
    falhas = sum(1 for r in results if not r.ok)

    return render_template("index.html", results=results, falhas=falhas)
