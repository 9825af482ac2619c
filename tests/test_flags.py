import pytest

from buildkit.flags import PAYLOAD_TYPES, BuildConfig, Flag, FlagKind, encode_flag, encode_flags


@pytest.mark.parametrize(
    "flag, expected",
    [
        (Flag.help(), "--help"),
        (Flag.config(BuildConfig.DEBUG), "-c debug"),
        (Flag.config(BuildConfig.RELEASE), "-c release"),
        (Flag.c("-DFOO"), "-Xcc -DFOO"),
        (Flag.cxx("-std=c++17"), "-Xcxx -std=c++17"),
        (Flag.linker("-lz"), "-Xlinker -lz"),
        (Flag.swift("-Onone"), "-Xswiftc -Onone"),
        (Flag.macro("DEBUG"), '-Xswiftc "-D" -Xswiftc DEBUG'),
        (Flag.target("x86_64-apple-macosx10.12"), '-Xswiftc "-target" -Xswiftc x86_64-apple-macosx10.12'),
        (Flag.stdlib(True), "--static-swift-stdlib"),
        (Flag.stdlib(False), "--no-static-swift-stdlib"),
        (Flag.build_path("./.build"), "--build-path ./.build"),
        (Flag.show_binary_path(), "--show-bin-path"),
        (Flag.verbose(), "-v"),
        (Flag.filter("demoTests.demoTests/testExample"), "--filter demoTests.demoTests/testExample"),
        (Flag.parallel(), "-parallel"),
        (Flag.list_tests(), "--list-tests"),
        (Flag.generate_linux_main(), "--generate-linuxmain"),
        (Flag.enable_code_coverage(), "--enable-code-coverage"),
        (Flag.disable_prefetching(), "--disable-prefetching"),
        (Flag.disable_sandbox(), "--disable-sandbox"),
        (Flag.enable_build_manifest_caching(), "--enable-build-manifest-caching"),
        (Flag.package_path("../pkg"), "--package-path ../pkg"),
        (Flag.sanitize(), "--sanitize"),
        (Flag.skip_build(), "--skip-build"),
        (Flag.skip_update(), "--skip-update"),
        (Flag.raw("--jobs 4"), "--jobs 4"),
    ],
)
def test_flag_encoding(flag, expected):
    assert encode_flag(flag) == expected
    assert flag.encode() == expected
    assert str(flag) == expected


def test_every_kind_encodes():
    # each kind, given a payload of its expected type, encodes to a non-empty token
    for kind in FlagKind:
        value = {None: None, str: "x", bool: True, BuildConfig: BuildConfig.DEBUG}[PAYLOAD_TYPES[kind]]
        assert Flag(kind, value).encode()


def test_encoding_is_deterministic():
    flag = Flag.target("arm64-apple-macosx")
    assert flag.encode() == flag.encode()
    assert Flag.target("arm64-apple-macosx").encode() == flag.encode()


def test_payload_is_not_quoted_or_escaped():
    assert Flag.filter("a b|c").encode() == "--filter a b|c"
    assert Flag.raw("'quoted' && echo").encode() == "'quoted' && echo"


def test_config_accepts_plain_strings():
    flag = Flag.config("release")
    assert flag.value is BuildConfig.RELEASE
    assert flag == Flag.config(BuildConfig.RELEASE)


def test_flags_are_hashable_values():
    assert len({Flag.verbose(), Flag.verbose(), Flag.parallel()}) == 2


def test_encode_flags_preserves_order():
    flags = [Flag.verbose(), Flag.parallel(), Flag.config(BuildConfig.DEBUG)]
    assert encode_flags(flags) == ["-v", "-parallel", "-c debug"]
    assert encode_flags(None) == []


@pytest.mark.parametrize(
    "kind, value, exc",
    [
        (FlagKind.VERBOSE, "yes", ValueError),
        (FlagKind.FILTER, None, ValueError),
        (FlagKind.CONFIG, "fast", ValueError),
        (FlagKind.STDLIB, "true", TypeError),
        (FlagKind.STDLIB, 1, TypeError),
        (FlagKind.BUILD_PATH, 42, TypeError),
    ],
)
def test_invalid_payloads_are_rejected(kind, value, exc):
    with pytest.raises(exc):
        Flag(kind, value)


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        Flag("no-such-flag")
