# buildkit/project.py
"""
A Swift package on disk and the commands you can run against it.

    project = Project(path="./demo")
    project.run(Command.package(Subcommand.initialize(PackageType.EXECUTABLE)))
    # mkdir -p ./demo && cd ./demo && swift package init --type executable

    project.run(Command.run(), [Flag.config(BuildConfig.RELEASE)])
    # cd ./demo && swift run -c release

    project.run(Command.build(), completion=lambda out, err: ...)   # non-blocking

When `path` is set every command changes into it first; `package init`
additionally creates it (recursively) so a new package can be bootstrapped
into a directory that does not exist yet.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Future
from typing import List, Mapping, Optional, Sequence

from buildkit.commands import Command
from buildkit.flags import Flag, encode_flags
from buildkit.shell import Completion, Shell

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class Project(Shell):
    """Execution context for one package location."""

    def __init__(
        self,
        path: Optional[str] = None,
        shell_type: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        *,
        program: Optional[str] = None,
        **shell_options,
    ):
        super().__init__(shell_type, env, **shell_options)
        self._path = path
        self._program = program or self._config["swift"]["program"]

    @property
    def path(self) -> Optional[str]:
        """Working directory; when set, commands `cd` into it before running."""
        return self._path

    @property
    def program(self) -> str:
        return self._program

    def command_line(self, command: Command, flags: Optional[Sequence[Flag]] = None) -> str:
        """Assemble the single shell line for `command` and `flags` (flags keep caller order)."""
        cmd: List[str] = []
        if self._path:
            if command.creates_package:
                cmd += ["mkdir", "-p", self._path, "&&"]
            cmd += ["cd", self._path, "&&"]
        cmd += [self._program, command.encode()]
        cmd += encode_flags(flags)
        return " ".join(cmd)

    def run(
        self,
        command: Command,
        flags: Optional[Sequence[Flag]] = None,
        completion: Optional[Completion] = None,
    ):
        """Run a command through the shell.

        Without `completion`, blocks and returns the output (trailing newlines removed).
        Raises OutputDataError if the command succeeded but its output could not be
        captured, otherwise GenericShellError carrying the exit code and message.

        With `completion`, schedules the run on the worker pool and returns a
        Future immediately; `completion(output, error)` is called exactly once.
        """
        line = self.command_line(command, flags)
        logger.debug("assembled command", extra={"line": line, "path": self._path})
        if completion is None:
            return self.execute(line)
        return self.execute_async(line, completion)

    def run_async(self, command: Command, flags: Optional[Sequence[Flag]] = None) -> "Future[str]":
        """Non-blocking run without a callback; wait on or poll the returned Future."""
        return self.execute_async(self.command_line(command, flags))

    async def arun(self, command: Command, flags: Optional[Sequence[Flag]] = None) -> str:
        """Awaitable run: executes on the worker pool, returns output or raises."""
        line = self.command_line(command, flags)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.pool, self.execute, line)

    def __repr__(self) -> str:
        return f"Project(path={self._path!r}, shell_type={self.type!r})"


__all__ = ["Project"]
