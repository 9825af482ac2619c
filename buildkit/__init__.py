# buildkit/__init__.py
"""
buildkit package public surface.

Typed Swift package manager commands and flags, assembled into a single shell
line and executed either blocking or through a completion callback.

    from buildkit import Project, Command, Subcommand, PackageType, Flag, BuildConfig

    project = Project(path="./demo")
    project.run(Command.package(Subcommand.initialize(PackageType.EXECUTABLE)))
    print(project.run(Command.run(), [Flag.config(BuildConfig.RELEASE)]))
"""

from __future__ import annotations

from .commands import Command, CommandKind, PackageType, Subcommand, SubcommandKind
from .errors import (
    ConfigError,
    GenericShellError,
    OutputDataError,
    ShellError,
    ShellTimeoutError,
    UnresolvedShellError,
)
from .flags import BuildConfig, Flag, FlagKind
from .project import Project
from .shell import Shell

__version__ = "1.0.0"

__all__ = [
    "BuildConfig",
    "Command",
    "CommandKind",
    "ConfigError",
    "Flag",
    "FlagKind",
    "GenericShellError",
    "OutputDataError",
    "PackageType",
    "Project",
    "Shell",
    "ShellError",
    "ShellTimeoutError",
    "Subcommand",
    "SubcommandKind",
    "UnresolvedShellError",
]
