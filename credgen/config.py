# credgen/config.py
"""
Server settings for credgen.
Defaults, overlaid by an optional JSON file, overlaid by environment variables.
"""

import os
import json
from typing import Any, Dict, Mapping, Optional

DEFAULTS: Dict[str, Any] = {
    "host": "127.0.0.1",
    "port": 3000,
    "allowed_origins": [],
    "static_dir": None,  # no static files served when None
    "rate_limit": 100,
    "rate_window_seconds": 15 * 60,
    "log_level": "INFO",
}

# environment variable -> settings key
ENV_KEYS = {
    "HOST": "host",
    "PORT": "port",
    "ALLOWED_ORIGINS": "allowed_origins",
    "CREDGEN_STATIC_DIR": "static_dir",
    "CREDGEN_LOG_LEVEL": "log_level",
}

_INT_KEYS = ("port", "rate_limit", "rate_window_seconds")


class ConfigError(Exception):
    pass


def _split_origins(value: str):
    return [o.strip() for o in value.split(",") if o.strip()]


def _read_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"config file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    unknown = set(data) - set(DEFAULTS)
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {', '.join(sorted(unknown))}")
    return data


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    out = DEFAULTS.copy()
    out["allowed_origins"] = []

    path = path or env.get("CREDGEN_CONFIG")
    if path:
        out.update(_read_file(path))

    for var, key in ENV_KEYS.items():
        value = env.get(var)
        if value is None or value == "":
            continue
        out[key] = _split_origins(value) if key == "allowed_origins" else value

    for key in _INT_KEYS:
        try:
            out[key] = int(out[key])
        except (TypeError, ValueError):
            raise ConfigError(f"{key} must be an integer, got {out[key]!r}") from None
    if isinstance(out["allowed_origins"], str):
        out["allowed_origins"] = _split_origins(out["allowed_origins"])
    out["log_level"] = str(out["log_level"]).upper()
    return out
