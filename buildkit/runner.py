# buildkit/runner.py
"""
Canonical subprocess runner for the buildkit package.

Goals:
- One implementation used by every shell (no per-call-site Popen handling).
- PATH resolution of argv[0] so a missing shell is reported, not raised from Popen.
- Environment overrides are merged over the current process environment.
- Timeouts return a structured result (no uncaught TimeoutExpired).
- stdout is kept as raw bytes so callers decide how to decode it.

Return shape (always a dict):
  {
    "returncode": int | None,
    "stdout": bytes,
    "stderr": str,
    "timed_out": bool,
    "missing_executable": bool,
    "resolved_path": str | None,
    "elapsed_sec": float,
    "ok": bool,
    "error": str | None,
  }
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def _resolve_binary(argv: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Resolve argv[0] to an absolute path if possible.

    Returns (resolved_path, error_msg). If resolved_path is None, error_msg is set.
    """
    if not argv:
        return None, "empty command provided"

    exe = argv[0]
    if os.path.sep in exe:
        abs_path = os.path.abspath(exe)
        resolved = abs_path if os.access(abs_path, os.X_OK) and os.path.isfile(abs_path) else None
    else:
        resolved = shutil.which(exe)

    if not resolved:
        return None, f"executable not found: {exe}"
    return os.path.abspath(resolved), None


def _decode_stderr(val: Any) -> str:
    if not val:
        return ""
    return bytes(val).decode("utf-8", errors="replace")


def run_command(
    argv: Sequence[str],
    *,
    timeout: Optional[float] = None,
    env: Optional[Mapping[str, str]] = None,
    subprocess_module=None,
) -> Dict[str, Any]:
    """
    Run argv and return a structured result; never raises for a missing executable
    or a timeout. stdout holds the raw captured bytes, stderr is decoded with
    invalid UTF-8 replaced.

    `subprocess_module` is injectable for tests (defaults to stdlib subprocess).
    """
    if subprocess_module is None:
        import subprocess as subprocess_module  # type: ignore

    t0 = time.time()

    result: Dict[str, Any] = {
        "returncode": None,
        "stdout": b"",
        "stderr": "",
        "timed_out": False,
        "missing_executable": False,
        "resolved_path": None,
        "elapsed_sec": 0.0,
        "ok": False,
        "error": None,
    }

    def _finish() -> Dict[str, Any]:
        result["elapsed_sec"] = round(time.time() - t0, 6)
        result["ok"] = (
            result["returncode"] == 0
            and not result["timed_out"]
            and not result["missing_executable"]
        )
        return result

    def _store(out: Any, err: Any) -> None:
        result["stdout"] = bytes(out or b"")
        result["stderr"] = _decode_stderr(err)

    proc_env = os.environ.copy()
    if env:
        proc_env.update({str(k): str(v) for k, v in env.items()})

    args = [str(a) for a in argv]
    resolved, err = _resolve_binary(args)
    if not resolved:
        result["missing_executable"] = bool(args)
        result["error"] = err
        return _finish()

    result["resolved_path"] = resolved
    args[0] = resolved

    try:
        proc = subprocess_module.Popen(
            args,
            env=proc_env,
            stdout=subprocess_module.PIPE,
            stderr=subprocess_module.PIPE,
        )
    except FileNotFoundError as e:
        # the binary disappeared between resolution and exec
        result["missing_executable"] = True
        result["error"] = str(e)
        return _finish()
    except OSError as e:
        result["error"] = str(e)
        return _finish()

    try:
        out, err_out = proc.communicate(timeout=timeout)
        result["returncode"] = proc.returncode
        _store(out, err_out)
    except subprocess_module.TimeoutExpired:
        result["timed_out"] = True
        result["error"] = "timeout"
        proc.kill()
        try:
            out, err_out = proc.communicate(timeout=1)
            _store(out, err_out)
        except subprocess_module.TimeoutExpired:
            logger.debug("process did not exit after kill: %s", args[0])

    return _finish()


__all__ = ["run_command"]
