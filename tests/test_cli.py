"""Tests for poly_watcher.cli module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from poly_watcher.cli import build_config, main, parse_args
from poly_watcher.config import DEFAULT_CONFIG_TEMPLATE
from poly_watcher.models import DEFAULT_BUILD_COMMAND, DEFAULT_RUN_COMMAND, WatcherConfig


class TestParseArgs:
    """Tests for parse_args function."""

    def test_parse_args_default(self):
        args = parse_args([])
        assert args.config is None
        assert args.build is None
        assert args.init is False

    def test_parse_args_all_flags(self):
        args = parse_args(
            [
                "--root=./myapp",
                "--interval=500ms",
                "--build=go build -o myapp .",
                "--run=./myapp",
                "--depfile=go.mod",
                "--depcommand=go mod tidy",
                "--include=.go",
                "--exclude=.git,.polycode",
            ]
        )
        assert args.root == "./myapp"
        assert args.interval == 0.5
        assert args.build == "go build -o myapp ."
        assert args.depcommand == "go mod tidy"
        assert args.exclude == ".git,.polycode"

    def test_parse_args_bad_interval_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--interval=soon"])
        assert exc_info.value.code == 2

    def test_parse_args_version_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_verbose_and_quiet_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["-v", "-q"])


class TestBuildConfig:
    """Tests for layering defaults, config file and flags."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = build_config(parse_args([]))
        assert config == WatcherConfig()
        assert config.build_command == DEFAULT_BUILD_COMMAND
        assert config.run_command == DEFAULT_RUN_COMMAND
        assert config.interval == 1.0

    def test_flags(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = build_config(parse_args(["--include=.go,services", "--exclude=.git", "--build=make"]))
        assert config.includes == (".go", "services")
        assert config.excludes == (".git",)
        assert config.build_command == "make"

    def test_flags_override_config_file(self, tmp_path):
        config_path = tmp_path / "custom.toml"
        config_path.write_text('[watcher]\nbuild = "make"\nrun = "./server"\ninclude = [".c"]\n')

        config = build_config(parse_args(["-c", str(config_path), "--build=make all", "--include="]))

        assert config.build_command == "make all"
        assert config.run_command == "./server"
        assert config.includes == ()

    def test_default_config_file_is_picked_up(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "poly-watcher.toml").write_text('[watcher]\nrun = "./server"\n')
        assert build_config(parse_args([])).run_command == "./server"

    def test_missing_explicit_config(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            build_config(parse_args(["-c", str(tmp_path / "missing.toml")]))


class TestMain:
    """Tests for main function."""

    def test_main_init_creates_config(self, tmp_path, capsys):
        config_path = tmp_path / "poly-watcher.toml"
        assert main(["--init", "-c", str(config_path)]) == 0
        assert config_path.read_text() == DEFAULT_CONFIG_TEMPLATE
        assert "Created default config" in capsys.readouterr().out

    def test_main_init_keeps_existing_config(self, tmp_path, capsys):
        config_path = tmp_path / "poly-watcher.toml"
        config_path.write_text("# mine")
        assert main(["--init", "-c", str(config_path)]) == 0
        assert config_path.read_text() == "# mine"
        assert "already exists" in capsys.readouterr().out

    def test_main_init_permission_error(self, tmp_path, capsys):
        with patch("poly_watcher.cli.create_default_config", side_effect=PermissionError("Access denied")):
            assert main(["--init", "-c", str(tmp_path / "x.toml")]) == 1
        assert "Failed to create config" in capsys.readouterr().err

    def test_main_runs_watch_loop(self, tmp_path):
        with patch("poly_watcher.cli.WatchLoop") as loop_cls:
            assert main([f"--root={tmp_path}", "--build=make"]) == 0

        config = loop_cls.call_args.args[0]
        assert config.root == Path(str(tmp_path))
        assert config.build_command == "make"
        loop_cls.return_value.run.assert_called_once()
        loop_cls.return_value.supervisor.stop.assert_called_once()

    def test_main_keyboard_interrupt(self, tmp_path):
        with patch("poly_watcher.cli.WatchLoop") as loop_cls:
            loop_cls.return_value.run.side_effect = KeyboardInterrupt
            assert main([f"--root={tmp_path}"]) == 130
        loop_cls.return_value.supervisor.stop.assert_called_once()

    def test_main_missing_config(self, tmp_path, capsys):
        assert main(["-c", str(tmp_path / "missing.toml")]) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_main_missing_root(self, tmp_path, capsys):
        with patch("poly_watcher.cli.WatchLoop") as loop_cls:
            assert main([f"--root={tmp_path / 'missing'}"]) == 1
        loop_cls.assert_not_called()
        assert "Root directory not found" in capsys.readouterr().err

    def test_main_prints_banner(self, tmp_path, capsys):
        with patch("poly_watcher.cli.WatchLoop"):
            main([f"--root={tmp_path}"])
        assert "poly-watcher" in capsys.readouterr().out
