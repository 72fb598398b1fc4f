"""
Firmware upload for godotino projects.

This module uploads previously compiled firmware with arduino-cli:

    arduino-cli upload --fqbn <fqbn> --port <port> --input-dir <build/.cache>

When no port is given, `arduino-cli board list` is used to find the first
serial device that looks like a board.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from ..build.compiler import DEFAULT_ARDUINO_CLI
from ..build.orchestrator import CACHE_DIR_NAME
from ..config import BoardCatalogError, Manifest, UserConfig, board_fqbn
from ..diagnostics import SourceKind, Traceback, normalize
from ..process_utils import run_tool

# Linux/macOS device nodes and Windows COM ports
SERIAL_PORT_PREFIXES: Tuple[str, ...] = ("/dev/", "COM")


@dataclass
class UploadOptions:
    """Inputs for an upload."""

    project_dir: Path
    manifest: Manifest
    port: Optional[str] = None
    board: Optional[str] = None
    build_dir: Optional[Path] = None


@dataclass
class DeploymentResult:
    """Result of a firmware deployment operation."""

    success: bool
    message: str
    port: Optional[str] = None
    hint: Optional[str] = None
    traceback: Optional[Traceback] = None


class DeploymentError(Exception):
    """Raised when deployment operations fail."""

    def __init__(self, message: str, hint: Optional[str] = None, port: Optional[str] = None):
        super().__init__(message)
        self.hint = hint
        self.port = port


class Deployer:
    """Handles firmware upload to connected boards."""

    def __init__(self, config: Optional[UserConfig] = None, verbose: bool = False):
        """Initialize deployer.

        Args:
            config: User configuration (arduino-cli path, default board)
            verbose: Whether to show verbose output
        """
        self.config = config or UserConfig()
        self.verbose = verbose
        self.arduino_cli = self.config.arduino_cli or DEFAULT_ARDUINO_CLI

    def deploy(self, options: UploadOptions) -> DeploymentResult:
        """Upload firmware to a board.

        Args:
            options: Upload inputs

        Returns:
            DeploymentResult with success status and message
        """
        try:
            return self._deploy(options)
        except DeploymentError as e:
            return DeploymentResult(success=False, message=str(e), port=e.port, hint=e.hint)
        except FileNotFoundError:
            return DeploymentResult(
                success=False,
                message=f"{self.arduino_cli} not found",
                hint="install arduino-cli or run: godotino config set arduino_cli /path/to/arduino-cli",
            )

    def _deploy(self, options: UploadOptions) -> DeploymentResult:
        manifest = options.manifest
        board = options.board or manifest.board or self.config.default_board
        build_dir = Path(
            options.build_dir
            or Path(options.project_dir) / manifest.build.output_dir / CACHE_DIR_NAME
        )

        port = options.port
        if not port and not self.config.auto_detect:
            raise DeploymentError(
                "no serial port given and auto-detection is disabled",
                hint="pass --port /dev/ttyUSBx or run: godotino config set auto_detect true",
            )
        if not port:
            print("Auto-detecting board on serial ports...")
            port = self.detect_serial_port()
            if not port:
                raise DeploymentError(
                    "no board detected on any serial port",
                    hint="connect the board and try again, or pass --port /dev/ttyUSBx",
                )
            print(f"Found board on {port}")

        try:
            fqbn = board_fqbn(board)
        except BoardCatalogError as e:
            raise DeploymentError(
                f"unknown board {board!r}",
                hint="run 'godotino boards list' for the full list",
                port=port,
            ) from e

        if not build_dir.exists():
            logging.warning(f"Build directory {build_dir} does not exist")

        cmd = [
            self.arduino_cli,
            "upload",
            "--fqbn",
            fqbn,
            "--port",
            port,
            "--input-dir",
            str(build_dir),
        ]
        if self.verbose:
            cmd.append("--verbose")
            print(f"Running: {' '.join(cmd)}")

        logging.info(f"Uploading {build_dir} to {port} [{fqbn}]")
        output = run_tool(cmd, merge_output=True)

        if not output.success:
            traceback = normalize(output.stdout, SourceKind.UPLOADER, origin=port)
            return DeploymentResult(
                success=False,
                message="upload failed",
                port=port,
                traceback=traceback,
            )

        return DeploymentResult(
            success=True, message=f"Firmware uploaded to {port}", port=port
        )

    def detect_serial_port(self) -> Optional[str]:
        """Auto-detect the serial port of a connected board.

        Returns:
            First port from `arduino-cli board list` matching
            SERIAL_PORT_PREFIXES, or None if nothing matched

        Raises:
            DeploymentError: If the board listing itself fails
        """
        output = run_tool([self.arduino_cli, "board", "list"])
        if not output.success:
            raise DeploymentError(
                f"arduino-cli board list failed: {output.stderr.strip()}",
                hint="connect the board and try again, or pass --port /dev/ttyUSBx",
            )

        for line in output.stdout.splitlines():
            tokens = line.split()
            if tokens and tokens[0].startswith(SERIAL_PORT_PREFIXES):
                return tokens[0]
        return None
