"""
Tests for domain models — generator config, sandbox filesystem, output.
"""

import pytest
from pydantic import ValidationError

from witdart.core.models import (
    FileSystemPaths,
    GeneratedFile,
    GeneratorConfig,
    InMemoryFiles,
    Int64Type,
    PreopenedDir,
    WasiConfig,
    WasiDirectory,
    WasiFile,
    WitFile,
    default_generator_config,
    wasi_config_from_path,
)


# ═══════════════════════════════════════════════════════════════════
#  GeneratorConfig
# ═══════════════════════════════════════════════════════════════════


class TestGeneratorConfig:
    def test_defaults(self):
        config = default_generator_config(FileSystemPaths(input_path="wit/file.wit"))
        assert config.json_serialization is True
        assert config.copy_with is True
        assert config.equality_and_hash_code is True
        assert config.to_string is True
        assert config.generate_docs is True
        assert config.file_header is None
        assert config.int64_type == Int64Type.ARBITRARY_PRECISION
        assert config.use_null_for_option is True
        assert config.required_option is False
        assert config.typed_number_lists is True
        assert config.async_worker is False
        assert config.same_class_union is True

    def test_default_function_matches_field_defaults(self):
        inputs = FileSystemPaths(input_path="a.wit")
        assert default_generator_config(inputs) == GeneratorConfig(inputs=inputs)

    def test_structural_equality_includes_inputs(self):
        a = default_generator_config(FileSystemPaths(input_path="a.wit"))
        b = default_generator_config(FileSystemPaths(input_path="a.wit"))
        c = default_generator_config(FileSystemPaths(input_path="b.wit"))
        assert a == b
        assert a != c

    def test_frozen(self):
        config = default_generator_config(FileSystemPaths(input_path="a.wit"))
        with pytest.raises(ValidationError):
            config.copy_with = False

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            GeneratorConfig(inputs=FileSystemPaths(input_path="a.wit"), colour=True)

    def test_inputs_discriminated_by_kind(self):
        config = GeneratorConfig.model_validate({
            "inputs": {
                "kind": "in-memory",
                "world_file": {"path": "host.wit", "contents": "package a:b"},
            },
        })
        assert isinstance(config.inputs, InMemoryFiles)
        assert config.inputs.pkg_files == ()

    def test_int64_type_from_string(self):
        config = GeneratorConfig.model_validate({
            "inputs": {"kind": "file-system", "input_path": "a.wit"},
            "int64_type": "nativeFixed64",
        })
        assert config.int64_type == Int64Type.NATIVE_FIXED64


class TestGeneratedFile:
    def test_fields(self):
        f = GeneratedFile(path="lib/host.dart", contents="// x\n")
        assert f.path == "lib/host.dart"
        assert f.reason == ""


# ═══════════════════════════════════════════════════════════════════
#  Sandbox filesystem
# ═══════════════════════════════════════════════════════════════════


class TestPreopenedDir:
    def test_guest_to_host(self):
        d = PreopenedDir(guest_path="/wit/", host_path="/home/me/project/wit")
        assert d.to_host_path("/wit/host.wit") == "/home/me/project/wit/host.wit"
        assert d.to_host_path("/wit") == "/home/me/project/wit"
        assert d.to_host_path("/other/host.wit") is None

    def test_guest_path_without_leading_slash(self):
        d = PreopenedDir(guest_path="/host/", host_path="host")
        assert d.to_host_path("host/host.wit") == "host/host.wit"
        assert d.to_host_path("host") == "host"
        assert d.to_host_path("hostile/host.wit") is None

    def test_guest_prefix_normalized(self):
        assert PreopenedDir(guest_path="/wit", host_path="x").guest_prefix == "/wit/"
        assert PreopenedDir(guest_path="/wit//", host_path="x").guest_prefix == "/wit/"

    def test_host_to_guest(self):
        d = PreopenedDir(guest_path="/wit/", host_path="/home/me/wit")
        assert d.to_guest_path("/home/me/wit/deps/a.wit") == "/wit/deps/a.wit"
        assert d.to_guest_path("/home/me/witness/a.wit") is None

    def test_windows_separators(self):
        d = PreopenedDir(guest_path="/wit/", host_path="C:\\proj\\wit")
        assert d.to_guest_path("C:\\proj\\wit\\host.wit") == "/wit/host.wit"


class TestWasiConfig:
    def test_native_by_default(self):
        assert not WasiConfig().is_sandboxed

    def test_sandboxed_with_tree(self):
        tree = {"wit": WasiDirectory({"host.wit": WasiFile(b"x")})}
        assert WasiConfig(web_browser_file_system=tree).is_sandboxed

    def test_longest_prefix_wins(self):
        config = WasiConfig(preopened_dirs=(
            PreopenedDir(guest_path="/", host_path="root"),
            PreopenedDir(guest_path="/wit/", host_path="wit-host"),
        ))
        assert config.to_host_path("/wit/a.wit") == "wit-host/a.wit"
        assert config.to_host_path("/b.wit") == "root/b.wit"

    def test_lookup(self):
        tree = {"wit": WasiDirectory({"deps": WasiDirectory({"a.wit": WasiFile(b"a")})})}
        config = WasiConfig(web_browser_file_system=tree)
        assert config.lookup("wit/deps/a.wit") == WasiFile(b"a")
        assert config.lookup("./wit/../wit/deps") == tree["wit"].items["deps"]
        assert config.lookup("wit/missing.wit") is None
        assert config.lookup("wit/deps/a.wit/nested") is None

    def test_list_directory(self):
        tree = {"wit": WasiDirectory({"b.wit": WasiFile(b""), "a.wit": WasiFile(b"")})}
        config = WasiConfig(web_browser_file_system=tree)
        assert config.list_directory("wit") == ["a.wit", "b.wit"]
        assert config.list_directory("wit/a.wit") is None


class TestWasiConfigFromPath:
    def test_preopens_parent(self):
        config = wasi_config_from_path("/home/me/wit/host.wit")
        (preopen,) = config.preopened_dirs
        assert preopen.guest_path == "/wit/"
        assert preopen.host_path == "/home/me/wit"
        assert config.to_host_path("/wit/host.wit") == "/home/me/wit/host.wit"

    def test_relative_path(self):
        config = wasi_config_from_path("host/host.wit")
        assert config.preopened_dirs[0].guest_path == "/host/"
        assert config.preopened_dirs[0].host_path == "host"
        assert config.to_host_path("host/host.wit") == "host/host.wit"

    def test_bare_file_name(self):
        config = wasi_config_from_path("host.wit")
        assert config.preopened_dirs[0].guest_path == "/root/"
        assert config.preopened_dirs[0].host_path == "."

    def test_keeps_virtual_tree(self):
        tree = {"host": WasiDirectory({"host.wit": WasiFile(b"")})}
        config = wasi_config_from_path("host/host.wit", web_browser_file_system=tree)
        assert config.is_sandboxed

    def test_wit_file_model(self):
        f = WitFile(path="a.wit", contents="")
        assert f.contents == ""
