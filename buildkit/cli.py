# buildkit/cli.py
from __future__ import annotations

"""
Command-line front end for build-kit.

Examples:
  $ buildkit -C ./demo package init --type executable
  $ buildkit -C ./demo run -F config=release
  $ buildkit -C ./demo test -F parallel -F filter=demoTests.demoTests
  $ buildkit --dry-run build -F verbose -F stdlib=true

Flags are given as -F/--flag NAME[=VALUE], where NAME is a flag kind in kebab
case (see `buildkit.flags.FlagKind`). --dry-run prints the assembled line
without running it. --init-config writes the default config file and exits.
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from buildkit.commands import Command, PackageType, Subcommand, SubcommandKind
from buildkit.config import CONFIG_RELPATH, get_config, load_config, load_env_variables, save_default_config
from buildkit.errors import ConfigError, GenericShellError, ShellError
from buildkit.flags import PAYLOAD_TYPES, Flag, FlagKind
from buildkit.logging_utils import configure_logging
from buildkit.project import Project

_NAMED_SUBCOMMANDS = (SubcommandKind.EDIT, SubcommandKind.UNEDIT)


def _parse_bool_token(tok: str) -> bool:
    t = tok.strip().lower()
    if t in {"1", "true", "yes", "on"}:
        return True
    if t in {"0", "false", "no", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got {tok!r}")


def parse_flag(spec: str) -> Flag:
    """Turn `NAME[=VALUE]` into a Flag, e.g. `config=release` or `verbose`."""
    name, sep, value = spec.partition("=")
    try:
        kind = FlagKind(name.strip())
    except ValueError:
        known = ", ".join(k.value for k in FlagKind)
        raise argparse.ArgumentTypeError(f"unknown flag {name!r} (known: {known})") from None

    expected = PAYLOAD_TYPES[kind]
    if expected is None:
        if sep:
            raise argparse.ArgumentTypeError(f"flag {kind.value!r} takes no value")
        return Flag(kind)
    if not sep:
        raise argparse.ArgumentTypeError(f"flag {kind.value!r} requires a value ({kind.value}=...)")
    if expected is bool:
        return Flag(kind, _parse_bool_token(value))
    try:
        return Flag(kind, value)
    except (TypeError, ValueError) as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _parse_env(pairs: List[str], parser: argparse.ArgumentParser) -> Dict[str, str]:
    env: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            parser.error(f"--env expects KEY=VALUE, got {pair!r}")
        env[key] = value
    return env


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("buildkit", description="Assemble and run Swift package manager commands.")
    p.add_argument("-C", "--path", default=None, help="Package directory (cd into it before running)")
    p.add_argument("--shell", default=None, help="Shell used to run the command line (default: /bin/sh)")
    p.add_argument("--env", action="append", default=[], metavar="KEY=VALUE", help="Extra environment variable")
    p.add_argument("--config", default="", help="Path to a .buildkit/config.json (optional)")
    p.add_argument("--dry-run", action="store_true", help="Print the assembled command line and exit")
    p.add_argument("--log-level", default=None, help="Logging level (default from config)")
    p.add_argument("--json-logs", action="store_true", help="Emit logs as single-line JSON")
    p.add_argument(
        "--init-config", action="store_true",
        help="Write the default config (to --config, or .buildkit/config.json) and exit",
    )

    flag_opts = argparse.ArgumentParser(add_help=False)
    flag_opts.add_argument(
        "-F", "--flag", dest="flags", action="append", default=[], type=parse_flag,
        metavar="FLAG[=VALUE]", help="Swift package manager flag (repeatable, order preserved)",
    )

    commands = p.add_subparsers(dest="command", metavar="COMMAND")
    commands.add_parser("build", parents=[flag_opts], help="swift build")
    commands.add_parser("run", parents=[flag_opts], help="swift run")
    commands.add_parser("test", parents=[flag_opts], help="swift test")

    package = commands.add_parser("package", help="swift package <subcommand>")
    subcommands = package.add_subparsers(dest="subcommand", required=True, metavar="SUBCOMMAND")
    for kind in SubcommandKind:
        sp = subcommands.add_parser(kind.value, parents=[flag_opts])
        if kind is SubcommandKind.INITIALIZE:
            sp.add_argument(
                "--type", dest="package_type", default=PackageType.LIBRARY.value,
                choices=[t.value for t in PackageType],
            )
        elif kind in _NAMED_SUBCOMMANDS:
            sp.add_argument("name", help="Package name")
    return p


def command_from_args(args: argparse.Namespace) -> Command:
    if args.command != "package":
        return Command(args.command)
    kind = SubcommandKind(args.subcommand)
    if kind is SubcommandKind.INITIALIZE:
        return Command.package(Subcommand.initialize(args.package_type))
    if kind in _NAMED_SUBCOMMANDS:
        return Command.package(Subcommand(kind, args.name))
    return Command.package(Subcommand(kind))


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        target = Path(args.config) if args.config else Path(".") / CONFIG_RELPATH
        if target.exists():
            print(f"buildkit: refusing to overwrite existing config {target}", file=sys.stderr)
            return 1
        save_default_config(target)
        print(f"wrote default config to {target}")
        return 0
    if args.command is None:
        parser.error("a command is required (build, run, test, package)")

    try:
        if args.config:
            load_env_variables()
            cfg = load_config(".", args.config)[0]
        else:
            cfg = get_config()
    except ConfigError as e:
        print(f"buildkit: {e}", file=sys.stderr)
        return 2

    log_cfg = cfg.get("logging") or {}
    configure_logging(args.log_level or log_cfg.get("level", "WARNING"), args.json_logs or bool(log_cfg.get("json")))

    project = Project(
        path=args.path,
        shell_type=args.shell or cfg["shell"]["type"],
        env=_parse_env(args.env, parser),
        config=cfg,
    )
    command = command_from_args(args)

    if args.dry_run:
        print(project.command_line(command, args.flags))
        return 0

    try:
        output = project.run(command, args.flags)
    except GenericShellError as e:
        print(f"buildkit: {e}", file=sys.stderr)
        return e.exit_code if 0 < e.exit_code < 256 else 1
    except ShellError as e:
        print(f"buildkit: {e}", file=sys.stderr)
        return 1

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
