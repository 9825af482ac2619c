# buildkit/commands.py
"""
Swift package manager commands and subcommands.

    Command.build()                                          ->  build
    Command.run()                                            ->  run
    Command.test()                                           ->  test
    Command.package(Subcommand.clean())                      ->  package clean
    Command.package(Subcommand.initialize(PackageType.LIBRARY))
                                                             ->  package init --type library
    Command.package(Subcommand.edit("swift-nio"))            ->  package edit swift-nio

Encoding is a pure function of the variant and its payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union


class PackageType(str, Enum):
    """`--type` of `swift package init`."""

    EMPTY = "empty"
    LIBRARY = "library"
    EXECUTABLE = "executable"
    SYSTEM_MODULE = "system-module"


class SubcommandKind(str, Enum):
    # values are the keywords passed to `swift package`
    INITIALIZE = "init"
    UPDATE = "update"
    GENERATE_XCODE_PROJECT = "generate-xcodeproj"
    CLEAN = "clean"
    COMPLETION_TOOL = "completion-tool"
    DESCRIBE = "describe"
    DUMP_PACKAGE = "dump-package"
    EDIT = "edit"
    RESET = "reset"
    RESOLVE = "resolve"
    SHOW_DEPENDENCIES = "show-dependencies"
    TOOLS_VERSION = "tools-version"
    UNEDIT = "unedit"


_SUBCOMMAND_PAYLOADS: Dict[SubcommandKind, Optional[type]] = {
    SubcommandKind.INITIALIZE: PackageType,
    SubcommandKind.EDIT: str,
    SubcommandKind.UNEDIT: str,
}


@dataclass(frozen=True)
class Subcommand:
    kind: SubcommandKind
    value: Union[None, str, PackageType] = None

    def __post_init__(self) -> None:
        kind = SubcommandKind(self.kind)
        object.__setattr__(self, "kind", kind)
        expected = _SUBCOMMAND_PAYLOADS.get(kind)

        if expected is None:
            if self.value is not None:
                raise ValueError(f"subcommand '{kind.value}' takes no value (got {self.value!r})")
            return
        if self.value is None:
            raise ValueError(f"subcommand '{kind.value}' requires a {expected.__name__} value")
        if expected is PackageType:
            try:
                object.__setattr__(self, "value", PackageType(self.value))
            except ValueError:
                raise ValueError(
                    f"unknown package type {self.value!r}; expected one of {[t.value for t in PackageType]}"
                ) from None
        elif not isinstance(self.value, str):
            raise TypeError(f"subcommand '{kind.value}' expects a package name, got {type(self.value).__name__}")

    @property
    def is_initialize(self) -> bool:
        return self.kind is SubcommandKind.INITIALIZE

    def encode(self) -> str:
        if self.kind is SubcommandKind.INITIALIZE:
            return f"init --type {PackageType(self.value).value}"
        if self.kind in (SubcommandKind.EDIT, SubcommandKind.UNEDIT):
            return f"{self.kind.value} {self.value}"
        return self.kind.value

    def __str__(self) -> str:
        return self.encode()

    @classmethod
    def initialize(cls, package_type: Union[PackageType, str]) -> "Subcommand":
        return cls(SubcommandKind.INITIALIZE, package_type)

    @classmethod
    def update(cls) -> "Subcommand":
        return cls(SubcommandKind.UPDATE)

    @classmethod
    def generate_xcode_project(cls) -> "Subcommand":
        return cls(SubcommandKind.GENERATE_XCODE_PROJECT)

    @classmethod
    def clean(cls) -> "Subcommand":
        return cls(SubcommandKind.CLEAN)

    @classmethod
    def completion_tool(cls) -> "Subcommand":
        return cls(SubcommandKind.COMPLETION_TOOL)

    @classmethod
    def describe(cls) -> "Subcommand":
        return cls(SubcommandKind.DESCRIBE)

    @classmethod
    def dump_package(cls) -> "Subcommand":
        return cls(SubcommandKind.DUMP_PACKAGE)

    @classmethod
    def edit(cls, name: str) -> "Subcommand":
        return cls(SubcommandKind.EDIT, name)

    @classmethod
    def reset(cls) -> "Subcommand":
        return cls(SubcommandKind.RESET)

    @classmethod
    def resolve(cls) -> "Subcommand":
        return cls(SubcommandKind.RESOLVE)

    @classmethod
    def show_dependencies(cls) -> "Subcommand":
        return cls(SubcommandKind.SHOW_DEPENDENCIES)

    @classmethod
    def tools_version(cls) -> "Subcommand":
        return cls(SubcommandKind.TOOLS_VERSION)

    @classmethod
    def unedit(cls, name: str) -> "Subcommand":
        return cls(SubcommandKind.UNEDIT, name)


class CommandKind(str, Enum):
    BUILD = "build"
    RUN = "run"
    TEST = "test"
    PACKAGE = "package"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    subcommand: Optional[Subcommand] = None

    def __post_init__(self) -> None:
        kind = CommandKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind is CommandKind.PACKAGE:
            if not isinstance(self.subcommand, Subcommand):
                raise TypeError("the 'package' command requires a Subcommand")
        elif self.subcommand is not None:
            raise ValueError(f"command '{kind.value}' takes no subcommand")

    @property
    def creates_package(self) -> bool:
        """True only for `package init`, the one command that may target a missing directory."""
        return self.kind is CommandKind.PACKAGE and self.subcommand is not None and self.subcommand.is_initialize

    def encode(self) -> str:
        if self.kind is CommandKind.PACKAGE:
            return f"package {self.subcommand.encode()}"  # type: ignore[union-attr]
        return self.kind.value

    def __str__(self) -> str:
        return self.encode()

    @classmethod
    def build(cls) -> "Command":
        return cls(CommandKind.BUILD)

    @classmethod
    def run(cls) -> "Command":
        return cls(CommandKind.RUN)

    @classmethod
    def test(cls) -> "Command":
        return cls(CommandKind.TEST)

    @classmethod
    def package(cls, subcommand: Subcommand) -> "Command":
        return cls(CommandKind.PACKAGE, subcommand)


def encode_command(command: Command) -> str:
    return command.encode()


__all__ = [
    "PackageType",
    "SubcommandKind",
    "Subcommand",
    "CommandKind",
    "Command",
    "encode_command",
]
