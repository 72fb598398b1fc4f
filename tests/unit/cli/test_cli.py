"""
Unit tests for the godotino command-line interface.

Commands are driven through main() with a patched sys.argv; the build
pipeline and external tools are mocked.
"""

import json
import logging
import sys
from unittest.mock import Mock, patch

import pytest

from godotino import __version__, cli
from godotino.build import (
    BuildResult,
    CheckOutcome,
    CheckReport,
    NoSourceFilesError,
    ToolNotFoundError,
    TranspileError,
)
from godotino.cli_utils import ErrorFormatter
from godotino.deploy import DeploymentResult
from godotino.diagnostics import SourceKind, normalize


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point the user config at an empty temp directory, colors off."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    config_file = config_home / "godotino" / "config.json"
    config_file.parent.mkdir(parents=True)
    config_file.write_text(json.dumps({"color": False}))
    yield config_file
    ErrorFormatter.set_color(True)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_godotino", False):
            root.removeHandler(handler)


@pytest.fixture
def project(tmp_path):
    project_dir = tmp_path / "blink"
    (project_dir / "src").mkdir(parents=True)
    (project_dir / "src" / "main.go").write_text("package main\n")
    (project_dir / "goduino.json").write_text(json.dumps({"name": "blink", "board": "uno"}))
    return project_dir


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["godotino", *args])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    return exc_info.value.code


class TestBuildCommand:
    """Tests for `godotino build`."""

    def test_success(self, monkeypatch, capsys, project):
        result = BuildResult(
            cpp_files=[project / "build" / "blink" / "main.cpp"],
            sketch_dir=project / "build" / "blink",
            board="uno",
            warnings=["warning: unused import"],
        )
        with patch("godotino.cli.BuildOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.build.return_value = result
            code = run_cli(monkeypatch, "build", str(project), "--board", "esp32", "--source-map")

        assert code == 0
        request = orchestrator_cls.return_value.build.call_args.args[0]
        assert request.board == "esp32"
        assert request.source_map is True
        assert request.compile is False
        assert request.manifest.name == "blink"

        out = capsys.readouterr().out
        assert f"godotino v{__version__}" in out
        assert "⚠ warning: unused import" in out
        assert "✓ Build finished!" in out
        assert f"Sketch: {project / 'build' / 'blink'}" in out

    def test_transpile_error_prints_traceback(self, monkeypatch, capsys, project):
        error = TranspileError(
            "transpilation failed: main.go",
            traceback=normalize("error[E001]: bad\n  --> src/main.go:3:1\n", SourceKind.TRANSPILER),
        )
        with patch("godotino.cli.BuildOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.build.side_effect = error
            code = run_cli(monkeypatch, "build", str(project))

        assert code == 1
        captured = capsys.readouterr()
        assert "Traceback (most recent call last):" in captured.err
        assert "error[E001]: bad" in captured.err
        assert "✗ Build failed!" in captured.out

    def test_orchestrator_error_hint(self, monkeypatch, capsys, project):
        with patch("godotino.cli.BuildOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.build.side_effect = ToolNotFoundError(
                "godotino-core not found", hint="godotino config set core_binary /path"
            )
            code = run_cli(monkeypatch, "build", str(project), "-c")

        assert code == 1
        assert "Hint: godotino config set core_binary /path" in capsys.readouterr().out

    def test_missing_manifest(self, monkeypatch, capsys, tmp_path):
        code = run_cli(monkeypatch, "build", str(tmp_path))
        assert code == 1
        assert "Manifest not found" in capsys.readouterr().out

    def test_missing_project_dir(self, monkeypatch, tmp_path):
        assert run_cli(monkeypatch, "build", str(tmp_path / "nope")) == 2

    def test_interrupt(self, monkeypatch, project):
        with patch("godotino.cli.BuildOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.build.side_effect = KeyboardInterrupt
            assert run_cli(monkeypatch, "build", str(project)) == 130


class TestCheckCommand:
    """Tests for `godotino check`."""

    def test_errors_exit_nonzero(self, monkeypatch, capsys, project):
        report = CheckReport(
            board="uno",
            files=[CheckOutcome(project / "src" / "main.go", errors=["error: bad pin"], success=False)],
        )
        with patch("godotino.cli.run_check", return_value=report):
            code = run_cli(monkeypatch, "check", str(project))

        assert code == 1
        out = capsys.readouterr().out
        assert "✗ main.go" in out
        assert "error: bad pin" in out
        assert "1 error(s) found" in out

    def test_clean(self, monkeypatch, capsys, project):
        report = CheckReport(board="uno", files=[CheckOutcome(project / "src" / "main.go")])
        with patch("godotino.cli.run_check", return_value=report) as check:
            assert run_cli(monkeypatch, "check", str(project), "-b", "nano") == 0

        assert check.call_args.kwargs["board"] == "nano"
        assert check.call_args.kwargs["verbose"] is False
        assert "No errors" in capsys.readouterr().out

    def test_verbose_passed_through(self, monkeypatch, project):
        report = CheckReport(board="uno", files=[CheckOutcome(project / "src" / "main.go")])
        with patch("godotino.cli.run_check", return_value=report) as check:
            assert run_cli(monkeypatch, "check", str(project), "-v") == 0

        assert check.call_args.kwargs["verbose"] is True

    def test_no_sources(self, monkeypatch, capsys, project):
        with patch("godotino.cli.run_check", side_effect=NoSourceFilesError("no .go files found")):
            assert run_cli(monkeypatch, "check", str(project)) == 1
        assert "no .go files found" in capsys.readouterr().out


class TestUploadCommand:
    """Tests for `godotino upload`."""

    def test_success(self, monkeypatch, capsys, project):
        with patch("godotino.cli.Deployer") as deployer_cls:
            deployer_cls.return_value.deploy.return_value = DeploymentResult(
                True, "Firmware uploaded to COM3", port="COM3"
            )
            code = run_cli(monkeypatch, "upload", str(project), "-p", "COM3")

        assert code == 0
        options = deployer_cls.return_value.deploy.call_args.args[0]
        assert options.port == "COM3"
        assert "Firmware uploaded to COM3" in capsys.readouterr().out

    def test_failure_with_traceback(self, monkeypatch, capsys, project):
        traceback = normalize("Error: port busy", SourceKind.UPLOADER, origin="COM3")
        with patch("godotino.cli.Deployer") as deployer_cls:
            deployer_cls.return_value.deploy.return_value = DeploymentResult(
                False, "upload failed", port="COM3", traceback=traceback
            )
            code = run_cli(monkeypatch, "upload", str(project))

        assert code == 1
        captured = capsys.readouterr()
        assert "FlashError: Error: port busy" in captured.err
        assert "Upload failed!" in captured.out


class TestBoardsCommand:
    """Tests for `godotino boards`."""

    def test_list(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["godotino", "boards", "list"])
        cli.main()

        out = capsys.readouterr().out
        assert "uno" in out
        assert "arduino:avr:uno" in out
        assert "esp32:esp32:esp32" in out

    def test_detect(self, monkeypatch, capsys):
        with patch("godotino.cli.Deployer") as deployer_cls:
            deployer_cls.return_value.detect_serial_port.return_value = "/dev/ttyACM0"
            monkeypatch.setattr(sys, "argv", ["godotino", "boards", "detect"])
            cli.main()

        assert "Found board on /dev/ttyACM0" in capsys.readouterr().out

    def test_detect_nothing(self, monkeypatch):
        with patch("godotino.cli.Deployer") as deployer_cls:
            deployer_cls.return_value.detect_serial_port.return_value = None
            assert run_cli(monkeypatch, "boards", "detect") == 1


class TestCleanCommand:
    """Tests for `godotino clean`."""

    def test_removes_build_dir(self, monkeypatch, capsys, project):
        (project / "build" / "blink").mkdir(parents=True)
        monkeypatch.setattr(sys, "argv", ["godotino", "clean", str(project)])
        cli.main()

        assert not (project / "build").exists()
        assert (project / "src" / "main.go").exists()

    def test_nothing_to_clean(self, monkeypatch, capsys, project):
        monkeypatch.setattr(sys, "argv", ["godotino", "clean", str(project)])
        cli.main()
        assert "nothing to clean" in capsys.readouterr().out


class TestConfigCommand:
    """Tests for `godotino config`."""

    def test_set_then_get(self, monkeypatch, capsys, isolated_config):
        monkeypatch.setattr(sys, "argv", ["godotino", "config", "set", "default_board", "esp32"])
        cli.main()
        assert json.loads(isolated_config.read_text())["default_board"] == "esp32"

        capsys.readouterr()
        monkeypatch.setattr(sys, "argv", ["godotino", "config", "get", "default_board"])
        cli.main()
        assert capsys.readouterr().out.strip() == "esp32"

    def test_list(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["godotino", "config"])
        cli.main()
        out = capsys.readouterr().out
        assert "core_binary" in out
        assert "# path to godotino-core binary" in out

    def test_unknown_key(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "config", "get", "nope") == 1
        assert "Unknown config key" in capsys.readouterr().out

    def test_get_requires_key(self, monkeypatch):
        assert run_cli(monkeypatch, "config", "get") == 2

    def test_invalid_config_file(self, monkeypatch, isolated_config):
        isolated_config.write_text("{broken")
        assert run_cli(monkeypatch, "boards") == 1


class TestVersionCommand:
    """Tests for `godotino version`."""

    def test_core_not_detected(self, monkeypatch, capsys):
        with patch("godotino.cli.Transpiler") as transpiler_cls:
            transpiler_cls.return_value.version.side_effect = ToolNotFoundError("missing")
            monkeypatch.setattr(sys, "argv", ["godotino", "version"])
            cli.main()

        out = capsys.readouterr().out
        assert f"cli   {__version__}" in out
        assert "core  (not detected)" in out

    def test_core_version(self, monkeypatch, capsys):
        transpiler = Mock()
        transpiler.version.return_value = "0.4.1"
        with patch("godotino.cli.Transpiler", return_value=transpiler):
            monkeypatch.setattr(sys, "argv", ["godotino", "version"])
            cli.main()

        assert "core  0.4.1" in capsys.readouterr().out


def test_no_command_shows_help(monkeypatch, capsys):
    assert run_cli(monkeypatch) == 0
    assert "usage: godotino" in capsys.readouterr().out
