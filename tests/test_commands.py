import pytest

from buildkit.commands import Command, CommandKind, PackageType, Subcommand, SubcommandKind, encode_command


@pytest.mark.parametrize(
    "command, expected",
    [
        (Command.build(), "build"),
        (Command.run(), "run"),
        (Command.test(), "test"),
        (Command.package(Subcommand.update()), "package update"),
        (Command.package(Subcommand.generate_xcode_project()), "package generate-xcodeproj"),
        (Command.package(Subcommand.clean()), "package clean"),
        (Command.package(Subcommand.completion_tool()), "package completion-tool"),
        (Command.package(Subcommand.describe()), "package describe"),
        (Command.package(Subcommand.dump_package()), "package dump-package"),
        (Command.package(Subcommand.reset()), "package reset"),
        (Command.package(Subcommand.resolve()), "package resolve"),
        (Command.package(Subcommand.show_dependencies()), "package show-dependencies"),
        (Command.package(Subcommand.tools_version()), "package tools-version"),
        (Command.package(Subcommand.edit("swift-nio")), "package edit swift-nio"),
        (Command.package(Subcommand.unedit("swift-nio")), "package unedit swift-nio"),
    ],
)
def test_command_encoding(command, expected):
    assert encode_command(command) == expected
    assert str(command) == expected


@pytest.mark.parametrize(
    "package_type, keyword",
    [
        (PackageType.EMPTY, "empty"),
        (PackageType.LIBRARY, "library"),
        (PackageType.EXECUTABLE, "executable"),
        (PackageType.SYSTEM_MODULE, "system-module"),
    ],
)
def test_initialize_encoding(package_type, keyword):
    command = Command.package(Subcommand.initialize(package_type))
    assert command.encode() == f"package init --type {keyword}"


def test_initialize_accepts_keyword_strings():
    assert Subcommand.initialize("system-module") == Subcommand.initialize(PackageType.SYSTEM_MODULE)


def test_only_initialize_creates_a_package():
    assert Command.package(Subcommand.initialize(PackageType.EMPTY)).creates_package
    assert not Command.package(Subcommand.edit("dep")).creates_package
    assert not Command.package(Subcommand.unedit("dep")).creates_package
    assert not Command.build().creates_package


def test_every_subcommand_kind_encodes():
    payloads = {SubcommandKind.INITIALIZE: PackageType.LIBRARY, SubcommandKind.EDIT: "a", SubcommandKind.UNEDIT: "a"}
    for kind in SubcommandKind:
        encoded = Subcommand(kind, payloads.get(kind)).encode()
        assert encoded.split()[0] == kind.value


def test_package_requires_a_subcommand():
    with pytest.raises(TypeError):
        Command(CommandKind.PACKAGE)


def test_plain_commands_reject_subcommands():
    with pytest.raises(ValueError):
        Command(CommandKind.BUILD, Subcommand.clean())


@pytest.mark.parametrize(
    "kind, value, exc",
    [
        (SubcommandKind.CLEAN, "extra", ValueError),
        (SubcommandKind.EDIT, None, ValueError),
        (SubcommandKind.EDIT, 3, TypeError),
        (SubcommandKind.INITIALIZE, "app", ValueError),
    ],
)
def test_invalid_subcommand_payloads(kind, value, exc):
    with pytest.raises(exc):
        Subcommand(kind, value)
