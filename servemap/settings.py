from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_SAVE_DIR = "saves"
DEFAULT_PORT = 7778
DEFAULT_BIND = "127.0.0.1"

# Looked up in the working directory, first hit wins.
CONFIG_CANDIDATES = ("config.dev.toml", "config.toml")

ENV_PREFIX = "SERVEMAP_"

class ConfigError(ValueError):
    pass

@dataclass(frozen=True)
class ServerConfig:
    save_dir: Path
    port: int = DEFAULT_PORT
    base_url: Optional[str] = None
    bind: str = DEFAULT_BIND

def _as_port(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"port must be an integer, got {value!r}")
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"port must be an integer, got {value!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"port out of range: {port}")
    return port

def discover_config_path(cwd: Optional[Path] = None) -> Optional[Path]:
    base = Path(cwd) if cwd is not None else Path.cwd()
    for name in CONFIG_CANDIDATES:
        p = base / name
        if p.is_file():
            return p
    return None

def load_toml(path: Path) -> Dict[str, Any]:
    """Read a config file, keeping only the keys ServerConfig knows about."""
    try:
        with path.open("rb") as f:
            doc = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    allowed = {f.name for f in fields(ServerConfig)}
    out: Dict[str, Any] = {}
    for k, v in doc.items():
        if k in allowed:
            out[k] = v
        else:
            logger.warning("Ignoring unknown config key %r in %s", k, path)
    return out

def from_env(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if env is None else env
    out: Dict[str, Any] = {}
    for name in ("save_dir", "port", "base_url", "bind"):
        value = env.get(ENV_PREFIX + name.upper())
        if value:
            out[name] = value
    return out

def build_config(
    *,
    config_file: Optional[Path | str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> ServerConfig:
    """Merge defaults < TOML file < environment < explicit overrides.

    An explicit ``config_file`` must exist. Without one, ``config.dev.toml``
    and then ``config.toml`` are tried; if neither is present the defaults
    apply. ``None`` values in ``overrides`` are treated as "not given".
    """
    data: Dict[str, Any] = {"save_dir": DEFAULT_SAVE_DIR}

    if config_file is not None:
        path: Optional[Path] = Path(config_file).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = discover_config_path(cwd)

    if path is not None:
        logger.info("Loading configuration from %s", path)
        data.update(load_toml(path))
    else:
        logger.debug("No config file found, using defaults")

    data.update(from_env(env))
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})

    base_url = data.get("base_url")
    if base_url is not None:
        if not isinstance(base_url, str):
            raise ConfigError(f"base_url must be a string, got {base_url!r}")
        base_url = base_url.rstrip("/") or None

    save_dir = data["save_dir"]
    if not isinstance(save_dir, (str, Path)):
        raise ConfigError(f"save_dir must be a string, got {save_dir!r}")

    return ServerConfig(
        save_dir=Path(save_dir).expanduser(),
        port=_as_port(data.get("port", DEFAULT_PORT)),
        base_url=base_url,
        bind=str(data.get("bind", DEFAULT_BIND)),
    )
