from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from . import create_app, ensure_save_dir
from .settings import ConfigError, ServerConfig, build_config

logger = logging.getLogger("servemap")

def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="satisfactory-serve-map",
        description="Serve the latest Satisfactory save files to the interactive map.",
    )
    p.add_argument("-c", "--config", help="TOML config file (default: config.dev.toml, then config.toml)")
    p.add_argument("-s", "--save-dir", help="Directory containing save files (default: saves)")
    p.add_argument("-p", "--port", type=int, help="Port to run the server on (default: 7778)")
    p.add_argument("--base-url", help="Public URL of this server, used in map links")
    p.add_argument("--bind", help="Address to listen on (default: 127.0.0.1)")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    return p

def _banner(config: ServerConfig) -> None:
    logger.info("Server starting with configuration:")
    logger.info("  Save directory: %s", config.save_dir)
    logger.info("  Listening on: %s:%s", config.bind, config.port)
    logger.info("  Base URL: %s", config.base_url or "(from request)")
    logger.info("Endpoints available:")
    logger.info("  - /map/<name>     : Serves the latest save file")
    logger.info("  - /map            : Lists saves with interactive map links")

def main(argv: Optional[List[str]] = None) -> None:
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(
            config_file=args.config,
            overrides={
                "save_dir": args.save_dir,
                "port": args.port,
                "base_url": args.base_url,
                "bind": args.bind,
            },
        )
    except ConfigError as e:
        logger.error("%s", e)
        raise SystemExit(1) from e

    ensure_save_dir(config.save_dir)
    app = create_app(config)
    _banner(config)
    app.run(host=config.bind, port=config.port, debug=False)
