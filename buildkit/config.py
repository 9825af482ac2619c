from __future__ import annotations
"""
Configuration loader for build-kit.

Environment variables (all optional, env wins over the config file):

- BUILDKIT_SHELL=/bin/sh            # shell used to run assembled lines (`<shell> -c <line>`)
- BUILDKIT_TIMEOUT_SEC=600          # per-invocation timeout; unset/empty means no timeout
- BUILDKIT_SWIFT_PROGRAM=swift      # program token placed before the encoded command
- BUILDKIT_MAX_WORKERS=4            # worker pool size for non-blocking runs
- BUILDKIT_LOG_LEVEL=WARNING
- BUILDKIT_LOG_JSON=0               # 1 -> single-line JSON logs (CLI only)

Project config file: `<project_root>/.buildkit/config.json`, deep-merged onto
DEFAULT_CONFIG. A `.env` in the working directory is loaded without clobbering
variables that are already set.
"""

import functools
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jsonschema
from dotenv import find_dotenv, load_dotenv

from buildkit.errors import ConfigError

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

DEFAULT_SHELL = "/bin/sh"
DEFAULT_PROGRAM = "swift"
CONFIG_RELPATH = Path(".buildkit") / "config.json"


def load_env_variables() -> None:
    """Load a .env from the working directory (or its parents) without overriding set variables."""
    load_dotenv(find_dotenv(usecwd=True), override=False)


DEFAULT_CONFIG: Dict[str, Any] = {
    "shell": {
        "type": DEFAULT_SHELL,
        "timeout_sec": None,
    },
    "swift": {
        "program": DEFAULT_PROGRAM,
    },
    "executor": {
        "max_workers": 4,
    },
    "logging": {
        "level": "WARNING",
        "json": False,
    },
}


CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "shell": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "minLength": 1},
                "timeout_sec": {"type": ["number", "null"], "exclusiveMinimum": 0},
            },
            "required": ["type"],
        },
        "swift": {
            "type": "object",
            "properties": {
                "program": {"type": "string", "minLength": 1},
            },
            "required": ["program"],
        },
        "executor": {
            "type": "object",
            "properties": {
                "max_workers": {"type": "integer", "minimum": 1},
            },
            "required": ["max_workers"],
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {"enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
                "json": {"type": "boolean"},
            },
        },
    },
    "required": ["shell", "swift", "executor"],
    "additionalProperties": True,
}


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_str(name: str) -> Optional[str]:
    val = os.getenv(name)
    if val is None or not val.strip():
        return None
    return val.strip()


def _env_bool(name: str) -> Optional[bool]:
    """Read an environment variable as a boolean; None when unset or unrecognized."""
    val = _env_str(name)
    if val is None:
        return None
    v = val.lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    logger.warning("ignoring unrecognized boolean for %s: %r", name, val)
    return None


def _env_number(name: str, cast):
    val = _env_str(name)
    if val is None:
        return None
    try:
        return cast(val)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {val!r}") from None


def _apply_env_overrides(cfg: Dict[str, Any]) -> None:
    shell = cfg.setdefault("shell", {})
    swift = cfg.setdefault("swift", {})
    executor = cfg.setdefault("executor", {})
    log_cfg = cfg.setdefault("logging", {})

    shell_type = _env_str("BUILDKIT_SHELL")
    if shell_type:
        shell["type"] = shell_type

    timeout = _env_number("BUILDKIT_TIMEOUT_SEC", float)
    if timeout is not None:
        shell["timeout_sec"] = timeout

    program = _env_str("BUILDKIT_SWIFT_PROGRAM")
    if program:
        swift["program"] = program

    workers = _env_number("BUILDKIT_MAX_WORKERS", int)
    if workers is not None:
        executor["max_workers"] = workers

    level = _env_str("BUILDKIT_LOG_LEVEL")
    if level:
        log_cfg["level"] = level.upper()

    as_json = _env_bool("BUILDKIT_LOG_JSON")
    if as_json is not None:
        log_cfg["json"] = as_json


def _validate(cfg: Dict[str, Any], source: Path) -> None:
    try:
        jsonschema.validate(cfg, CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"invalid config ({source}): {where}: {e.message}") from e


def load_config(project_root: Path | str = ".", explicit_path: str | None = None) -> Tuple[Dict[str, Any], Path]:
    """
    Load `.buildkit/config.json` if present, deep-merge onto defaults,
    then apply BUILDKIT_* env overrides and validate the result.
    Returns (config, path_used).
    """
    root = Path(project_root).resolve()
    path = Path(explicit_path).resolve() if explicit_path else (root / CONFIG_RELPATH)

    cfg = json.loads(json.dumps(DEFAULT_CONFIG))
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"could not read config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must contain a JSON object")
        cfg = _deep_merge(cfg, data)
    elif explicit_path:
        raise ConfigError(f"config file not found: {path}")

    _apply_env_overrides(cfg)
    _validate(cfg, path)
    logger.debug("config loaded", extra={"meta": {"path": str(path), "exists": path.exists()}})
    return cfg, path


def save_default_config(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(DEFAULT_CONFIG, indent=2, ensure_ascii=False)
    path.write_text(text, encoding="utf-8")


@functools.lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """Process-wide config (current directory), loaded once."""
    load_env_variables()
    cfg, _ = load_config(Path("."))
    return cfg


__all__ = [
    "DEFAULT_SHELL",
    "DEFAULT_PROGRAM",
    "DEFAULT_CONFIG",
    "CONFIG_SCHEMA",
    "load_env_variables",
    "load_config",
    "save_default_config",
    "get_config",
]
