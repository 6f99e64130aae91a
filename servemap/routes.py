from __future__ import annotations
from types import SimpleNamespace
from urllib.parse import quote

from flask import Blueprint, current_app, render_template_string, request, send_file, url_for
from werkzeug.exceptions import HTTPException, NotFound

from .scanning import find_latest_save, list_save_names
from .settings import ServerConfig
from .templates import CATALOG_HTML

bp = Blueprint("servemap", __name__)

MAP_VIEWER_URL = "https://satisfactory-calculator.com/en/interactive-map"

# Fixed single-origin policy, applied to every response.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "https://satisfactory-calculator.com",
    "Access-Control-Allow-Methods": "POST, GET, PATCH, OPTIONS",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Credentials": "true",
}

def _cfg() -> ServerConfig:
    return current_app.config["SERVER_CONFIG"]

def _base_url() -> str:
    return _cfg().base_url or request.url_root.rstrip("/")

def map_viewer_link(base_url: str, name: str) -> str:
    return f"{MAP_VIEWER_URL}?url={base_url}/map/{quote(name)}"

@bp.before_app_request
def answer_preflight():
    # Any path, known route or not.
    if request.method == "OPTIONS":
        return ("", 200)
    return None

@bp.after_app_request
def add_cors_headers(response):
    for k, v in CORS_HEADERS.items():
        response.headers[k] = v
    return response

@bp.app_errorhandler(HTTPException)
def plain_text_error(e: HTTPException):
    response = e.get_response()
    response.set_data(e.description or "")
    response.mimetype = "text/plain"
    return response

@bp.get("/map")
def catalog():
    base = _base_url()
    entries = [
        SimpleNamespace(
            name=n,
            map_url=map_viewer_link(base, n),
            download_url=url_for("servemap.serve_map", name=n),
        )
        for n in sorted(list_save_names(_cfg().save_dir))
    ]
    return render_template_string(
        CATALOG_HTML,
        app_title=current_app.config["APP_TITLE"],
        entries=entries,
    )

@bp.get("/map/<path:name>")
def serve_map(name):
    path = find_latest_save(name, _cfg().save_dir)
    try:
        return send_file(path.absolute(), mimetype="application/octet-stream")
    except OSError as e:
        raise NotFound(f"Failed to open file: {e}") from e

@bp.get("/favicon.ico")
def favicon():
    return ("", 204)
