# zebra_settings/routes/api.py
"""
API JSON.
Endpoints:
  GET    /api/printers                  → impressoras cadastradas
  POST   /api/printers                  → cadastra impressora
  DELETE /api/printers                  → remove impressora (ip + porta)
  GET    /api/printers/settings         → consulta todas as impressoras
  GET    /api/printers/<ip>/settings    → consulta uma impressora
"""
from flask import Blueprint, request, jsonify, current_app

from ..exceptions import PrinterError
from ..services.inventory_service import (
    PrinterTarget, load_printers_from, save_printers_to, parse_porta,
)
from ..services.poll_service import describe_error, poll_printers
from ..services.log_service import log_audit, log_error
from ..services.trace_service import start_trace

bp = Blueprint("api", __name__, url_prefix="/api")


# ---------------------------------------------------------
# CORS básico para dev local (frontend em porta diferente)
# ---------------------------------------------------------
@bp.after_request
def _add_cors(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
    return response


def _data_dir():
    return current_app.config["DIRS"]["data"]


@bp.route("/printers", methods=["GET", "OPTIONS"])
def list_printers():
    """Lista todas as impressoras cadastradas."""
    if request.method == "OPTIONS":
        return "", 204

    return jsonify([t._asdict() for t in load_printers_from(_data_dir())])


@bp.route("/printers", methods=["POST"])
def add_printer():
    """Adiciona uma nova impressora."""
    data = request.get_json(force=True, silent=True) or {}

    loja = str(data.get("loja", "")).strip()
    ip = str(data.get("ip", "")).strip()
    if not loja.isdigit():
        return jsonify({"success": False, "error": "Loja inválida"}), 400
    if not ip:
        return jsonify({"success": False, "error": "IP obrigatório"}), 400
    try:
        porta = parse_porta(data.get("porta"))
    except ValueError:
        return jsonify({"success": False, "error": "Porta inválida"}), 400

    targets = load_printers_from(_data_dir())
    if any(t.ip == ip and t.porta == porta for t in targets):
        return jsonify({"success": False, "error": "Impressora já cadastrada"}), 409

    new_printer = PrinterTarget(loja=loja, nome=str(data.get("nome", "")).strip(), ip=ip, porta=porta)
    save_printers_to(_data_dir(), targets + (new_printer,))
    log_audit("printer_add", detalhes=f"loja={loja}, ip={ip}:{porta}")

    return jsonify({"success": True, "printer": new_printer._asdict()})


@bp.route("/printers", methods=["DELETE"])
def delete_printer():
    """Remove uma impressora."""
    data = request.get_json(force=True, silent=True) or {}
    ip = str(data.get("ip", "")).strip()
    try:
        porta = parse_porta(data.get("porta"))
    except ValueError:
        return jsonify({"success": False, "error": "Porta inválida"}), 400

    targets = load_printers_from(_data_dir())
    remaining = tuple(t for t in targets if not (t.ip == ip and t.porta == porta))
    if len(remaining) == len(targets):
        return jsonify({"success": False, "error": "Impressora não encontrada"}), 404

    save_printers_to(_data_dir(), remaining)
    log_audit("printer_delete", detalhes=f"ip={ip}:{porta}")

    return jsonify({"success": True})


@bp.route("/printers/settings", methods=["GET", "OPTIONS"])
def all_settings():
    """Consulta as configurações de todas as impressoras cadastradas."""
    if request.method == "OPTIONS":
        return "", 204

    trace = start_trace("poll_api")
    targets = load_printers_from(_data_dir())
    trace.add("inicio", total=len(targets))

    results = poll_printers(
        targets,
        fetch=current_app.config["FETCHER"],
        max_workers=current_app.config["MAX_WORKERS"],
        trace=trace,
    )
    log_audit("poll", trace=trace.finish())

    return jsonify([r.to_json() for r in results])


@bp.route("/printers/<ip>/settings", methods=["GET", "OPTIONS"])
def printer_settings(ip):
    """Consulta uma impressora (não precisa estar cadastrada)."""
    if request.method == "OPTIONS":
        return "", 204

    try:
        porta = parse_porta(request.args.get("porta"))
    except ValueError:
        return jsonify({"success": False, "error": "Porta inválida"}), 400

    fetch = current_app.config["FETCHER"]
    try:
        fields = fetch(ip, porta).as_dict()
    except PrinterError as e:
        log_error("Erro consulta impressora", ip=ip, porta=porta, erro=describe_error(e))
        return jsonify({"success": False, "ip": ip, "porta": porta, "error": describe_error(e)}), 502

    return jsonify({"success": True, "ip": ip, "porta": porta, **fields})
