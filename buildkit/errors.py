# buildkit/errors.py
"""
Failures surfaced by the shell executor.

Every failure raised by `Shell.execute` (and delivered to async completion
callbacks) is a ShellError:

  ShellError
  ├── OutputDataError          exit status 0, but stdout could not be captured as text
  └── GenericShellError        non-zero exit status (exit_code + message)
      ├── UnresolvedShellError the shell executable itself was not found (127)
      └── ShellTimeoutError    the executor's timeout expired (124)
"""

from __future__ import annotations

from typing import Optional


class ShellError(Exception):
    """Base class for executor failures."""


class OutputDataError(ShellError):
    """The command succeeded but its output data is missing or not decodable."""

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        msg = "output data missing"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class GenericShellError(ShellError):
    """The command exited with a non-zero status."""

    def __init__(self, exit_code: int, message: str = ""):
        self.exit_code = int(exit_code)
        self.message = message or ""
        text = f"command failed with exit code {self.exit_code}"
        if self.message:
            text = f"{text}: {self.message}"
        super().__init__(text)


class UnresolvedShellError(GenericShellError):
    """Raised when the configured shell binary cannot be resolved."""

    EXIT_CODE = 127

    def __init__(self, shell_type: str):
        self.shell_type = shell_type
        super().__init__(self.EXIT_CODE, f"shell not found: {shell_type}")


class ShellTimeoutError(GenericShellError):
    EXIT_CODE = 124

    def __init__(self, timeout: float, message: str = ""):
        self.timeout = timeout
        text = f"timed out after {timeout:g}s"
        if message:
            text = f"{text}: {message}"
        super().__init__(self.EXIT_CODE, text)


class ConfigError(ValueError):
    """Raised when a config file cannot be read or fails schema validation."""


__all__ = [
    "ShellError",
    "OutputDataError",
    "GenericShellError",
    "UnresolvedShellError",
    "ShellTimeoutError",
    "ConfigError",
]
