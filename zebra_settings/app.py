import os, sys
from flask import Flask

from .constants import BASE_DIR, MAX_WORKERS
from .bootstrap import init_data_layout, init_logging
from .services.log_service import log_exception
from .services.settings_service import get_settings
from .routes.main import bp as main_bp
from .routes.api import bp as api_bp

# --- Paths de templates + base para seeds ---
if getattr(sys, "frozen", False):
    # Executável
    REPO_BASE = os.path.join(os.path.dirname(sys.executable), "zebra_settings")
else:
    REPO_BASE = BASE_DIR
TEMPLATE_DIR = os.path.join(REPO_BASE, "templates")


def create_app(dirs: dict | None = None, fetcher=None) -> Flask:
    """
    Monta a aplicação. dirs e fetcher podem ser trocados (testes,
    outra pasta de dados, consulta simulada).
    """
    # --- ProgramData + semeadura de seeds ---
    if dirs is None:
        dirs = init_data_layout(REPO_BASE)
    init_logging(dirs)  # logger -> ProgramData/ZebraSettings/logs

    app = Flask(__name__, template_folder=TEMPLATE_DIR)
    app.config["DIRS"]        = dirs
    app.config["FETCHER"]     = fetcher or get_settings
    app.config["MAX_WORKERS"] = MAX_WORKERS

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp)

    # Handler simples pra logar 500 com stack
    @app.errorhandler(500)
    def _err500(e):
        log_exception("Erro 500 na requisição")
        return "Erro interno. Consulte o log em ProgramData/ZebraSettings/logs/error.log", 500

    return app
