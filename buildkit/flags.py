# buildkit/flags.py
"""
Swift package manager flags and their command-line encoding.

A Flag is a tagged value: a FlagKind discriminant plus an optional payload.
Build them through the named constructors:

    Flag.verbose()
    Flag.config(BuildConfig.RELEASE)
    Flag.macro("DEBUG")            ->  -Xswiftc "-D" -Xswiftc DEBUG
    Flag.stdlib(False)             ->  --no-static-swift-stdlib
    Flag.raw("--jobs 4")           ->  --jobs 4

Payloads are interpolated verbatim: no quoting or escaping is applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union


class BuildConfig(str, Enum):
    DEBUG = "debug"
    RELEASE = "release"


class FlagKind(str, Enum):
    HELP = "help"
    CONFIG = "config"
    C = "c"
    CXX = "cxx"
    LINKER = "linker"
    SWIFT = "swift"
    MACRO = "macro"
    TARGET = "target"
    STDLIB = "stdlib"
    BUILD_PATH = "build-path"
    SHOW_BINARY_PATH = "show-binary-path"
    VERBOSE = "verbose"
    FILTER = "filter"
    PARALLEL = "parallel"
    LIST_TESTS = "list-tests"
    GENERATE_LINUX_MAIN = "generate-linux-main"
    ENABLE_CODE_COVERAGE = "enable-code-coverage"
    DISABLE_PREFETCHING = "disable-prefetching"
    DISABLE_SANDBOX = "disable-sandbox"
    ENABLE_BUILD_MANIFEST_CACHING = "enable-build-manifest-caching"
    PACKAGE_PATH = "package-path"
    SANITIZE = "sanitize"
    SKIP_BUILD = "skip-build"
    SKIP_UPDATE = "skip-update"
    RAW = "raw"


FlagValue = Union[None, str, bool, BuildConfig]

# Expected payload type per kind; None means the kind carries no payload.
PAYLOAD_TYPES: Dict[FlagKind, Optional[type]] = {
    FlagKind.HELP: None,
    FlagKind.CONFIG: BuildConfig,
    FlagKind.C: str,
    FlagKind.CXX: str,
    FlagKind.LINKER: str,
    FlagKind.SWIFT: str,
    FlagKind.MACRO: str,
    FlagKind.TARGET: str,
    FlagKind.STDLIB: bool,
    FlagKind.BUILD_PATH: str,
    FlagKind.SHOW_BINARY_PATH: None,
    FlagKind.VERBOSE: None,
    FlagKind.FILTER: str,
    FlagKind.PARALLEL: None,
    FlagKind.LIST_TESTS: None,
    FlagKind.GENERATE_LINUX_MAIN: None,
    FlagKind.ENABLE_CODE_COVERAGE: None,
    FlagKind.DISABLE_PREFETCHING: None,
    FlagKind.DISABLE_SANDBOX: None,
    FlagKind.ENABLE_BUILD_MANIFEST_CACHING: None,
    FlagKind.PACKAGE_PATH: str,
    FlagKind.SANITIZE: None,
    FlagKind.SKIP_BUILD: None,
    FlagKind.SKIP_UPDATE: None,
    FlagKind.RAW: str,
}


@dataclass(frozen=True)
class Flag:
    kind: FlagKind
    value: FlagValue = None

    def __post_init__(self) -> None:
        kind = FlagKind(self.kind)
        object.__setattr__(self, "kind", kind)
        expected = PAYLOAD_TYPES[kind]

        if expected is None:
            if self.value is not None:
                raise ValueError(f"flag '{kind.value}' takes no value (got {self.value!r})")
            return
        if self.value is None:
            raise ValueError(f"flag '{kind.value}' requires a {expected.__name__} value")

        if expected is BuildConfig:
            # accept the plain strings "debug"/"release" too
            try:
                object.__setattr__(self, "value", BuildConfig(self.value))
            except ValueError:
                raise ValueError(
                    f"flag 'config' expects one of {[c.value for c in BuildConfig]}, got {self.value!r}"
                ) from None
        elif not isinstance(self.value, expected):
            raise TypeError(
                f"flag '{kind.value}' expects {expected.__name__}, got {type(self.value).__name__}"
            )

    def encode(self) -> str:
        return encode_flag(self)

    def __str__(self) -> str:
        return self.encode()

    # --- named constructors ---

    @classmethod
    def help(cls) -> "Flag":
        return cls(FlagKind.HELP)

    @classmethod
    def config(cls, config: Union[BuildConfig, str]) -> "Flag":
        return cls(FlagKind.CONFIG, config)

    @classmethod
    def c(cls, value: str) -> "Flag":
        return cls(FlagKind.C, value)

    @classmethod
    def cxx(cls, value: str) -> "Flag":
        return cls(FlagKind.CXX, value)

    @classmethod
    def linker(cls, value: str) -> "Flag":
        return cls(FlagKind.LINKER, value)

    @classmethod
    def swift(cls, value: str) -> "Flag":
        return cls(FlagKind.SWIFT, value)

    @classmethod
    def macro(cls, name: str) -> "Flag":
        return cls(FlagKind.MACRO, name)

    @classmethod
    def target(cls, triple: str) -> "Flag":
        return cls(FlagKind.TARGET, triple)

    @classmethod
    def stdlib(cls, static: bool) -> "Flag":
        return cls(FlagKind.STDLIB, static)

    @classmethod
    def build_path(cls, path: str) -> "Flag":
        return cls(FlagKind.BUILD_PATH, path)

    @classmethod
    def show_binary_path(cls) -> "Flag":
        return cls(FlagKind.SHOW_BINARY_PATH)

    @classmethod
    def verbose(cls) -> "Flag":
        return cls(FlagKind.VERBOSE)

    @classmethod
    def filter(cls, expression: str) -> "Flag":
        return cls(FlagKind.FILTER, expression)

    @classmethod
    def parallel(cls) -> "Flag":
        return cls(FlagKind.PARALLEL)

    @classmethod
    def list_tests(cls) -> "Flag":
        return cls(FlagKind.LIST_TESTS)

    @classmethod
    def generate_linux_main(cls) -> "Flag":
        return cls(FlagKind.GENERATE_LINUX_MAIN)

    @classmethod
    def enable_code_coverage(cls) -> "Flag":
        return cls(FlagKind.ENABLE_CODE_COVERAGE)

    @classmethod
    def disable_prefetching(cls) -> "Flag":
        return cls(FlagKind.DISABLE_PREFETCHING)

    @classmethod
    def disable_sandbox(cls) -> "Flag":
        return cls(FlagKind.DISABLE_SANDBOX)

    @classmethod
    def enable_build_manifest_caching(cls) -> "Flag":
        return cls(FlagKind.ENABLE_BUILD_MANIFEST_CACHING)

    @classmethod
    def package_path(cls, path: str) -> "Flag":
        return cls(FlagKind.PACKAGE_PATH, path)

    @classmethod
    def sanitize(cls) -> "Flag":
        return cls(FlagKind.SANITIZE)

    @classmethod
    def skip_build(cls) -> "Flag":
        return cls(FlagKind.SKIP_BUILD)

    @classmethod
    def skip_update(cls) -> "Flag":
        return cls(FlagKind.SKIP_UPDATE)

    @classmethod
    def raw(cls, text: str) -> "Flag":
        return cls(FlagKind.RAW, text)


def _literal(token: str) -> Callable[[Any], str]:
    return lambda _value: token


def _prefixed(prefix: str) -> Callable[[Any], str]:
    return lambda value: f"{prefix} {value}"


def _swiftc_pair(option: str) -> Callable[[Any], str]:
    return lambda value: f'-Xswiftc "{option}" -Xswiftc {value}'


_ENCODERS: Dict[FlagKind, Callable[[Any], str]] = {
    FlagKind.HELP: _literal("--help"),
    FlagKind.CONFIG: lambda value: f"-c {BuildConfig(value).value}",
    FlagKind.C: _prefixed("-Xcc"),
    FlagKind.CXX: _prefixed("-Xcxx"),
    FlagKind.LINKER: _prefixed("-Xlinker"),
    FlagKind.SWIFT: _prefixed("-Xswiftc"),
    FlagKind.MACRO: _swiftc_pair("-D"),
    FlagKind.TARGET: _swiftc_pair("-target"),
    FlagKind.STDLIB: lambda value: "--static-swift-stdlib" if value else "--no-static-swift-stdlib",
    FlagKind.BUILD_PATH: _prefixed("--build-path"),
    FlagKind.SHOW_BINARY_PATH: _literal("--show-bin-path"),
    FlagKind.VERBOSE: _literal("-v"),
    FlagKind.FILTER: _prefixed("--filter"),
    FlagKind.PARALLEL: _literal("-parallel"),
    FlagKind.LIST_TESTS: _literal("--list-tests"),
    FlagKind.GENERATE_LINUX_MAIN: _literal("--generate-linuxmain"),
    FlagKind.ENABLE_CODE_COVERAGE: _literal("--enable-code-coverage"),
    FlagKind.DISABLE_PREFETCHING: _literal("--disable-prefetching"),
    FlagKind.DISABLE_SANDBOX: _literal("--disable-sandbox"),
    FlagKind.ENABLE_BUILD_MANIFEST_CACHING: _literal("--enable-build-manifest-caching"),
    FlagKind.PACKAGE_PATH: _prefixed("--package-path"),
    FlagKind.SANITIZE: _literal("--sanitize"),
    FlagKind.SKIP_BUILD: _literal("--skip-build"),
    FlagKind.SKIP_UPDATE: _literal("--skip-update"),
    FlagKind.RAW: lambda value: str(value),
}

_unencoded = set(FlagKind) - set(_ENCODERS)
if _unencoded:
    raise RuntimeError(f"flag kinds without an encoder: {sorted(k.value for k in _unencoded)}")


def encode_flag(flag: Flag) -> str:
    """Return the literal command-line text for a single flag."""
    return _ENCODERS[flag.kind](flag.value)


def encode_flags(flags: Optional[Iterable[Flag]]) -> List[str]:
    """Encode flags preserving the caller's order."""
    return [encode_flag(f) for f in (flags or ())]


__all__ = [
    "BuildConfig",
    "FlagKind",
    "Flag",
    "PAYLOAD_TYPES",
    "encode_flag",
    "encode_flags",
]
