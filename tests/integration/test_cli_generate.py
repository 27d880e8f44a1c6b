"""Tests for the petiteplatypus command line."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from petiteplatypus.cli.__main__ import main
from petiteplatypus.cli.cli_common import ExitCode, exit_code_for
from petiteplatypus.core.errors import (
    ConfigDirUnavailable,
    DirectoryCreateError,
    RandomnessUnavailable,
    RegistryCorrupt,
    RegistryLockTimeout,
    VaultCreationError,
)

VAULT_ID_PATTERN = re.compile(r"[0-9a-f]{16}")


@pytest.fixture
def cli_config_dir(config_dir: Path, monkeypatch) -> Path:
    monkeypatch.setenv("PETITEPLATYPUS_CONFIG_DIR", str(config_dir))
    return config_dir


class TestGenerateCommand:
    def test_prints_path_and_id(self, tmp_path: Path, cli_config_dir: Path, registry_file: Path, capsys):
        vault_path = tmp_path / "myvault"

        exit_code = main(["generate", str(vault_path)])

        assert exit_code == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == f"Successfully created vault at: {vault_path}"
        assert lines[1].startswith("Vault ID: ")
        vault_id = lines[1].removeprefix("Vault ID: ")
        assert VAULT_ID_PATTERN.fullmatch(vault_id)
        registry = json.loads(registry_file.read_text())
        assert registry["vaults"][vault_id]["path"] == str(vault_path)

    def test_json_output(self, tmp_path: Path, cli_config_dir: Path, capsys):
        exit_code = main(["generate", str(tmp_path / "v"), "--json"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["status"] == "success"
        assert output["data"]["path"] == str(tmp_path / "v")
        assert VAULT_ID_PATTERN.fullmatch(output["data"]["vault_id"])

    def test_default_config_dir_from_xdg(self, tmp_path: Path, capsys):
        exit_code = main(["generate", str(tmp_path / "v")])

        assert exit_code == 0
        # The autouse fixture points XDG_CONFIG_HOME at tmp_path/home/.config
        assert (tmp_path / "home" / ".config" / "obsidian" / "obsidian.json").is_file()

    def test_no_lock_flag(self, tmp_path: Path, cli_config_dir: Path, registry_file: Path):
        assert main(["generate", "--no-lock", str(tmp_path / "v")]) == 0

        assert registry_file.is_file()
        assert not (registry_file.parent / "obsidian.json.lock").exists()

    def test_custom_templates_dir(self, tmp_path: Path, cli_config_dir: Path):
        templates_dir = tmp_path / "templates"
        templates_dir.mkdir()
        for name in ("app.json", "appearance.json", "core-plugins.json", "graph.json", "workspace.json"):
            (templates_dir / name).write_text("{}")
        (templates_dir / "Welcome.md").write_text("# Custom\n")

        assert main(["generate", "--templates-dir", str(templates_dir), str(tmp_path / "v")]) == 0

        assert (tmp_path / "v" / "Welcome.md").read_text() == "# Custom\n"

    def test_corrupt_registry_exit_code(self, tmp_path: Path, cli_config_dir: Path, registry_file: Path, capsys):
        registry_file.parent.mkdir(parents=True)
        registry_file.write_text("{broken")

        exit_code = main(["generate", str(tmp_path / "v")])

        assert exit_code == ExitCode.REGISTRY_CORRUPT
        err = capsys.readouterr().err
        assert "failed to update global config: failed to parse existing config" in err
        assert registry_file.read_text() == "{broken"

    def test_corrupt_registry_json_error(self, tmp_path: Path, cli_config_dir: Path, registry_file: Path, capsys):
        registry_file.parent.mkdir(parents=True)
        registry_file.write_text("[]")

        exit_code = main(["generate", "--json", str(tmp_path / "v")])

        assert exit_code == ExitCode.REGISTRY_CORRUPT
        output = json.loads(capsys.readouterr().out)
        assert output["status"] == "error"
        assert output["phase"] == "update global config"
        assert output["error_type"] == "RegistryCorrupt"
        assert output["exit_code"] == 8

    def test_missing_argument_is_usage_error(self, capsys):
        assert main(["generate"]) == 2
        assert "VAULT_PATH" in capsys.readouterr().err

    def test_too_many_arguments_is_usage_error(self, tmp_path: Path):
        assert main(["generate", str(tmp_path / "a"), str(tmp_path / "b")]) == 2
        assert not (tmp_path / "a").exists()

    def test_verbose_logging_goes_to_stderr(self, tmp_path: Path, cli_config_dir: Path, capsys):
        assert main(["-vv", "generate", str(tmp_path / "v")]) == 0

        captured = capsys.readouterr()
        assert "Starting vault generation" in captured.err
        assert "Starting vault generation" not in captured.out

    def test_quiet_by_default(self, tmp_path: Path, cli_config_dir: Path, capsys):
        assert main(["generate", str(tmp_path / "v")]) == 0

        assert "Starting vault generation" not in capsys.readouterr().err

    def test_invalid_settings_exit_code(self, tmp_path: Path, monkeypatch, capsys):
        monkeypatch.setenv("PETITEPLATYPUS_CONFIG_DIR", "relative/dir")

        assert main(["generate", str(tmp_path / "v")]) == ExitCode.CONFIG_ERROR
        assert "CONFIG_DIR" in capsys.readouterr().err
        assert not (tmp_path / "v").exists()

    def test_unusable_log_file_reports_io_error(self, tmp_path: Path, cli_config_dir: Path, monkeypatch, capsys):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        monkeypatch.setenv("PETITEPLATYPUS_LOG_FILE", str(blocker / "sub" / "log.jsonl"))

        assert main(["generate", str(tmp_path / "v")]) == ExitCode.IO_LOCK_ERROR
        assert "❌ " in capsys.readouterr().err
        assert not (tmp_path / "v").exists()

    def test_unexpected_error_exit_code(self, tmp_path: Path, cli_config_dir: Path, monkeypatch, capsys):
        def explode(*args, **kwargs):
            raise RuntimeError("unexpected failure")

        monkeypatch.setattr("petiteplatypus.cli.__main__.create_vault", explode)

        assert main(["generate", str(tmp_path / "v")]) == ExitCode.UNKNOWN_ERROR
        assert "❌ unexpected failure" in capsys.readouterr().err

    def test_env_file_option(self, tmp_path: Path, config_dir: Path, registry_file: Path, monkeypatch):
        env_file = tmp_path / "settings.env"
        env_file.write_text(f"PETITEPLATYPUS_CONFIG_DIR={config_dir}\n")
        # Register the variable with monkeypatch so the value loaded from the file is removed afterwards
        monkeypatch.setenv("PETITEPLATYPUS_CONFIG_DIR", "")
        monkeypatch.delenv("PETITEPLATYPUS_CONFIG_DIR")

        assert main(["--env-file", str(env_file), "generate", str(tmp_path / "v")]) == 0

        assert registry_file.is_file()


class TestVaultsCommand:
    def test_empty(self, cli_config_dir: Path, capsys):
        assert main(["vaults"]) == 0
        assert capsys.readouterr().out.strip() == "No vaults registered"

    def test_lists_generated_vaults(self, tmp_path: Path, cli_config_dir: Path, capsys):
        main(["generate", "--json", str(tmp_path / "a")])
        vault_id = json.loads(capsys.readouterr().out)["data"]["vault_id"]

        assert main(["vaults"]) == 0

        out = capsys.readouterr().out
        assert vault_id in out
        assert str(tmp_path / "a") in out

    def test_json(self, tmp_path: Path, cli_config_dir: Path, capsys):
        main(["generate", str(tmp_path / "a")])
        capsys.readouterr()

        assert main(["vaults", "--json"]) == 0

        vaults = json.loads(capsys.readouterr().out)["data"]["vaults"]
        assert [record["path"] for record in vaults.values()] == [str(tmp_path / "a")]

    def test_corrupt_registry(self, cli_config_dir: Path, registry_file: Path):
        registry_file.parent.mkdir(parents=True)
        registry_file.write_text("nope")

        assert main(["vaults"]) == ExitCode.REGISTRY_CORRUPT


class TestExitCodes:
    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (RegistryCorrupt("/r", "bad"), ExitCode.REGISTRY_CORRUPT),
            (RegistryLockTimeout("/r", "held"), ExitCode.IO_LOCK_ERROR),
            (DirectoryCreateError("/d", "denied"), ExitCode.IO_LOCK_ERROR),
            (ConfigDirUnavailable("no home"), ExitCode.CONFIG_ERROR),
            (RandomnessUnavailable("no entropy"), ExitCode.UNKNOWN_ERROR),
        ],
    )
    def test_mapping(self, exc, expected):
        assert exit_code_for(exc) == expected

    def test_unwraps_vault_creation_error(self):
        wrapped = VaultCreationError("update global config", RegistryCorrupt("/r", "bad"))

        assert exit_code_for(wrapped) == ExitCode.REGISTRY_CORRUPT
