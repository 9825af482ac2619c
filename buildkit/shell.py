# buildkit/shell.py
"""
Shell executor: runs one command line through `<shell> -c <line>`.

Blocking:
    Shell().execute("echo hi")              -> "hi"

Non-blocking (worker pool, completion called exactly once):
    def done(output, error): ...
    future = Shell().execute_async("echo hi", done)

Output is decoded as UTF-8 and returned without trailing newlines. A non-zero
exit raises GenericShellError(exit_code, message), where message is the
captured stderr (or stdout when stderr is empty). Undecodable output from a
successful command raises OutputDataError.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Mapping, Optional

from buildkit.config import get_config
from buildkit.errors import (
    GenericShellError,
    OutputDataError,
    ShellTimeoutError,
    UnresolvedShellError,
)
from buildkit.runner import run_command
from buildkit.utils import trim_trailing_newlines

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

Completion = Callable[[Optional[str], Optional[BaseException]], None]

# Exit status used when the shell exists but could not be executed.
_CANNOT_EXECUTE = 126

# Marks "no timeout argument given"; an explicit None means no timeout.
_UNSET: Any = object()

_pool_lock = threading.Lock()
_default_pool: Optional[ThreadPoolExecutor] = None


def default_pool() -> ThreadPoolExecutor:
    """Process-wide worker pool for non-blocking runs, created on first use."""
    global _default_pool
    with _pool_lock:
        if _default_pool is None:
            workers = int(get_config()["executor"]["max_workers"])
            _default_pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="buildkit")
        return _default_pool


def _deliver(completion: Optional[Completion], output: Optional[str], error: Optional[BaseException]) -> None:
    if completion is None:
        return
    try:
        completion(output, error)
    except Exception:
        logger.exception("completion callback raised")


class Shell:
    """A shell binary plus extra environment variables; immutable after construction."""

    def __init__(
        self,
        shell_type: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        *,
        timeout: Optional[float] = _UNSET,
        pool: Optional[ThreadPoolExecutor] = None,
        config: Optional[Dict[str, Any]] = None,
        subprocess_module=None,
    ):
        cfg = config if config is not None else get_config()
        self._config = cfg
        self._type = shell_type or cfg["shell"]["type"]
        self._env: Dict[str, str] = dict(env or {})
        self._timeout = cfg["shell"].get("timeout_sec") if timeout is _UNSET else timeout
        self._pool = pool
        self._subprocess = subprocess_module

    @property
    def type(self) -> str:
        return self._type

    @property
    def env(self) -> Dict[str, str]:
        return dict(self._env)

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @property
    def pool(self) -> ThreadPoolExecutor:
        return self._pool or default_pool()

    def execute(self, line: str) -> str:
        """Run `line` and return its output; raises a ShellError subclass on failure."""
        logger.debug("running command", extra={"line": line, "shell": self._type})
        res = run_command(
            [self._type, "-c", line],
            env=self._env,
            timeout=self._timeout,
            subprocess_module=self._subprocess,
        )
        stderr = trim_trailing_newlines(res["stderr"])

        if res["missing_executable"]:
            logger.warning("shell not found: %s", self._type)
            raise UnresolvedShellError(self._type)
        if res["timed_out"]:
            logger.warning("command timed out after %ss", self._timeout, extra={"line": line})
            raise ShellTimeoutError(self._timeout, stderr)
        if res["returncode"] is None:
            raise GenericShellError(_CANNOT_EXECUTE, res.get("error") or "could not execute shell")

        raw = res["stdout"] or b""
        if res["returncode"] != 0:
            message = stderr or trim_trailing_newlines(raw.decode("utf-8", errors="replace"))
            logger.info(
                "command failed",
                extra={"line": line, "returncode": res["returncode"], "elapsed": res["elapsed_sec"]},
            )
            raise GenericShellError(res["returncode"], message)

        try:
            output = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise OutputDataError(str(e)) from e

        logger.debug(
            "command finished",
            extra={"line": line, "returncode": 0, "elapsed": res["elapsed_sec"]},
        )
        return trim_trailing_newlines(output)

    def execute_async(self, line: str, completion: Optional[Completion] = None) -> "Future[str]":
        """Schedule `line` on the worker pool and return immediately.

        `completion(output, error)` is invoked exactly once from the worker thread,
        with exactly one of the two arguments set. The returned Future resolves to
        the same output, or raises the same error. If the pool refuses the task
        (e.g. it has been shut down) the completion receives that error instead.
        """

        def _task() -> str:
            try:
                output = self.execute(line)
            except Exception as exc:
                _deliver(completion, None, exc)
                raise
            _deliver(completion, output, None)
            return output

        try:
            return self.pool.submit(_task)
        except RuntimeError as exc:
            logger.warning("worker pool rejected command: %s", exc, extra={"line": line})
            _deliver(completion, None, exc)
            failed: "Future[str]" = Future()
            failed.set_exception(exc)
            return failed


__all__ = ["Shell", "Completion", "default_pool"]
