"""Tests for the CLI entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from pollqueue.cli import build_parser, resolve_config, run


class TestCliErrorHandling:
    """Tests for clean error reporting in the CLI entry point."""

    def test_keyboard_interrupt_exits_cleanly(self):
        """KeyboardInterrupt exits without traceback."""
        with patch("pollqueue.cli.asyncio.run", side_effect=KeyboardInterrupt):
            run()

    def test_file_not_found_prints_error(self, capsys):
        """FileNotFoundError prints clean message and exits 1."""
        with patch("pollqueue.cli.asyncio.run", side_effect=FileNotFoundError("Config file not found: config.yaml")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Config file not found" in captured.err

    def test_yaml_error_prints_message(self, capsys):
        """yaml.YAMLError prints clean message and exits 1."""
        with patch("pollqueue.cli.asyncio.run", side_effect=yaml.YAMLError("bad yaml")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Invalid YAML" in captured.err

    def test_value_error_prints_config_error(self, capsys):
        """ValueError (e.g., from env var validation) prints config error and exits 1."""
        with patch(
            "pollqueue.cli.asyncio.run",
            side_effect=ValueError("Unresolved environment variable(s) in config.yaml: ${POLLQUEUE_PORT}"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Configuration error" in captured.err
        assert "POLLQUEUE_PORT" in captured.err

    def test_generic_exception_prints_startup_failed(self, capsys):
        """Unknown exceptions print generic message with -v hint."""
        with patch("pollqueue.cli.asyncio.run", side_effect=RuntimeError("address in use")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Startup failed" in captured.err
        assert "-v" in captured.err


class TestResolveConfig:
    """Tests for combining config files with command-line flags."""

    def test_defaults_without_config_file(self, tmp_path, monkeypatch):
        """Without config.yaml in the working directory, defaults are used."""
        monkeypatch.chdir(tmp_path)
        config = resolve_config(build_parser().parse_args([]))
        assert config.server.port == 3000

    def test_default_config_file_is_picked_up(self, tmp_path, monkeypatch):
        """config.yaml in the working directory is loaded when present."""
        monkeypatch.chdir(tmp_path)
        Path("config.yaml").write_text("server:\n  port: 4000\n")
        config = resolve_config(build_parser().parse_args([]))
        assert config.server.port == 4000

    def test_explicit_missing_config_raises(self, tmp_path):
        """An explicit --config that does not exist is an error."""
        args = build_parser().parse_args(["-c", str(tmp_path / "missing.yaml")])
        with pytest.raises(FileNotFoundError):
            resolve_config(args)

    def test_flags_override_file(self, tmp_path):
        """--host and --port take precedence over the file."""
        path = tmp_path / "custom.yaml"
        path.write_text("server:\n  host: 10.0.0.1\n  port: 4000\n")
        args = build_parser().parse_args(["-c", str(path), "--host", "0.0.0.0", "--port", "9000"])

        config = resolve_config(args)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 9000

    def test_verbose_sets_debug(self, tmp_path, monkeypatch):
        """-v switches logging to DEBUG."""
        monkeypatch.chdir(tmp_path)
        config = resolve_config(build_parser().parse_args(["-v"]))
        assert config.logging.level == "DEBUG"
