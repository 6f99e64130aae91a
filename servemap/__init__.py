import dataclasses
from pathlib import Path
from flask import Flask
from .routes import bp as routes_bp
from .settings import ServerConfig

def ensure_save_dir(save_dir) -> None:
    p = Path(save_dir)
    if not p.is_dir():
        raise SystemExit(f"Save directory doesn't exist or is not a directory: {p}")

def create_app(config: ServerConfig) -> Flask:
    app = Flask(__name__)
    # Flask resolves relative send_file paths against the package, not the cwd.
    config = dataclasses.replace(config, save_dir=Path(config.save_dir).absolute())
    app.config["SERVER_CONFIG"] = config
    app.config["APP_TITLE"] = "Satisfactory Save Maps"

    app.register_blueprint(routes_bp)
    return app
