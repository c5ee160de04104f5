"""
CLI tests — generate, build and config check through the click entrypoint.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from witdart import __version__
from witdart.main import cli
from witdart.ui.cli.generate import default_output_path


def _write_build_config(root: Path, text: str) -> Path:
    path = root / "witdart.yml"
    path.write_text(text, encoding="utf-8")
    return path


class TestBootstrap:
    """Verify the entrypoint is healthy."""

    def test_cli_help(self):
        """--help should list the commands."""
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "build" in result.output

    def test_cli_version(self):
        """--version should print the version."""
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_generate_help(self):
        result = CliRunner().invoke(cli, ["generate", "--help"])
        assert result.exit_code == 0
        assert "witInputPath" in result.output


class TestDefaultOutputPath:
    def test_replaces_suffix(self):
        assert default_output_path("wit/host.wit") == "wit/host.dart"

    def test_appends_when_no_suffix(self):
        assert default_output_path("wit/host") == "wit/host.dart"


# ═══════════════════════════════════════════════════════════════════
#  generate
# ═══════════════════════════════════════════════════════════════════


class TestGenerate:
    def test_writes_explicit_output(self, host_wit_file: Path, host_dart: str, tmp_path: Path):
        out = tmp_path / "lib" / "src" / "host.dart"
        result = CliRunner().invoke(cli, ["generate", str(host_wit_file), str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8") == host_dart
        assert "✅ Generated" in result.output

    def test_default_output_next_to_input(self, host_wit_file: Path, host_dart: str):
        result = CliRunner().invoke(cli, ["generate", str(host_wit_file)])
        assert result.exit_code == 0, result.output
        assert (host_wit_file.parent / "host.dart").read_text(encoding="utf-8") == host_dart
        assert host_wit_file.read_text(encoding="utf-8") != host_dart

    def test_flags_are_applied(self, host_wit_file: Path, tmp_path: Path):
        out = tmp_path / "host.dart"
        result = CliRunner().invoke(
            cli,
            ["generate", str(host_wit_file), str(out), "--no-copy-with", "--json-serialization=false"],
        )
        assert result.exit_code == 0, result.output
        contents = out.read_text(encoding="utf-8")
        assert "copyWith" not in contents
        assert "toJson" not in contents

    def test_quiet(self, host_wit_file: Path, tmp_path: Path):
        result = CliRunner().invoke(cli, ["-q", "generate", str(host_wit_file), str(tmp_path / "o.dart")])
        assert result.exit_code == 0
        assert "✅" not in result.output

    def test_argument_error(self):
        result = CliRunner().invoke(cli, ["generate", "a.wit", "--colour"])
        assert result.exit_code == 1
        assert "❌ Invalid argument (1, --colour). Unknown argument name `colour`." in result.output

    def test_missing_positional(self):
        result = CliRunner().invoke(cli, ["generate"])
        assert result.exit_code == 1
        assert "Missing positional argument `witInputPath`." in result.output

    def test_duplicate_flag(self):
        result = CliRunner().invoke(cli, ["generate", "a.wit", "--copy-with", "--no-copy-with"])
        assert result.exit_code == 1
        assert "Duplicate argument (2, --no-copy-with)." in result.output

    def test_missing_input_file(self, tmp_path: Path):
        missing = tmp_path / "missing.wit"
        result = CliRunner().invoke(cli, ["generate", str(missing)])
        assert result.exit_code == 1
        assert "WIT input not found" in result.output
        assert not (tmp_path / "missing.dart").exists()


# ═══════════════════════════════════════════════════════════════════
#  build / config check
# ═══════════════════════════════════════════════════════════════════


class TestBuild:
    def test_build_from_config(self, host_wit_file: Path, host_dart: str, tmp_path: Path):
        config = _write_build_config(tmp_path, "input: wit/host.wit\noutput: lib/host.dart\n")
        result = CliRunner().invoke(cli, ["-c", str(config), "build"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "lib" / "host.dart").read_text(encoding="utf-8") == host_dart

    def test_build_applies_options(self, host_wit_file: Path, tmp_path: Path):
        config = _write_build_config(
            tmp_path,
            "input: wit/host.wit\noutput: out.dart\noptions:\n  to_string: false\n",
        )
        result = CliRunner().invoke(cli, ["-c", str(config), "build"])
        assert result.exit_code == 0, result.output
        assert "toString" not in (tmp_path / "out.dart").read_text(encoding="utf-8")

    def test_build_default_output_next_to_input(self, host_wit_file: Path, host_dart: str, tmp_path: Path):
        config = _write_build_config(tmp_path, "input: wit/host.wit\n")
        result = CliRunner().invoke(cli, ["-c", str(config), "build"])
        assert result.exit_code == 0, result.output
        assert (host_wit_file.parent / "host.dart").read_text(encoding="utf-8") == host_dart

    def test_build_missing_config(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["-c", str(tmp_path / "witdart.yml"), "build"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestConfigCheck:
    def test_valid(self, host_wit_file: Path, tmp_path: Path):
        config = _write_build_config(tmp_path, "input: wit/host.wit\n")
        result = CliRunner().invoke(cli, ["-c", str(config), "config", "check"])
        assert result.exit_code == 0, result.output
        assert "✅ Configuration is valid" in result.output
        assert str(host_wit_file.resolve()) in result.output
        assert "(next to input)" in result.output
        assert "Enabled: copy_with, equality_and_hash_code" in result.output

    def test_invalid(self, tmp_path: Path):
        config = _write_build_config(tmp_path, "input: a.wit\nextra: 1\n")
        result = CliRunner().invoke(cli, ["-c", str(config), "config", "check"])
        assert result.exit_code == 1
        assert "❌ Configuration errors:" in result.output
        assert "Unknown key(s)" in result.output

    def test_json(self, host_wit_file: Path, tmp_path: Path):
        config = _write_build_config(tmp_path, "input: wit/host.wit\noptions:\n  async_worker: true\n")
        result = CliRunner().invoke(cli, ["-c", str(config), "config", "check", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["output"] is None
        assert data["options"]["async_worker"] is True
        assert "inputs" not in data["options"]
