"""
arduino-cli compile stage.

Compiles a validated sketch directory:

    arduino-cli compile --fqbn <fqbn> --build-path <cache> --warnings all <sketch_dir>

Build artifacts (objects, .elf, .hex/.bin) go to the cache directory so the
sketch directory only ever holds translator output and the .ino stub.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from ..diagnostics import SourceKind, normalize
from ..process_utils import run_tool
from .errors import CompileError, ToolNotFoundError
from .sketch import CompilationUnit

DEFAULT_ARDUINO_CLI = "arduino-cli"

# Searched in order; the first extension with a match wins
FIRMWARE_EXTENSIONS: Tuple[str, ...] = (".hex", ".bin", ".uf2")


class ArduinoCompiler:
    """Invokes arduino-cli compile for a sketch."""

    def __init__(self, arduino_cli: Optional[str] = None, verbose: bool = False):
        self.arduino_cli = arduino_cli or DEFAULT_ARDUINO_CLI
        self.verbose = verbose

    def compile(self, sketch: CompilationUnit, fqbn: str, build_path: Path) -> Optional[Path]:
        """
        Compile the sketch into build_path.

        Args:
            sketch: Validated sketch directory
            fqbn: Fully-qualified board name
            build_path: Directory for arduino-cli's private artifacts

        Returns:
            Path to the firmware artifact, or None if none was recognized

        Raises:
            CompileError: If arduino-cli exits non-zero
            ToolNotFoundError: If arduino-cli is not installed
        """
        build_path.mkdir(parents=True, exist_ok=True)

        cmd = [
            self.arduino_cli,
            "compile",
            "--fqbn",
            fqbn,
            "--build-path",
            str(build_path),
            "--warnings",
            "all",
        ]
        if self.verbose:
            cmd.append("--verbose")
        cmd.append(str(sketch.sketch_dir))

        logging.info(
            f"Compiling sketch {sketch.name} ({len(sketch.cpp_files())} .cpp files) for {fqbn}"
        )
        try:
            output = run_tool(cmd, cwd=sketch.sketch_dir, merge_output=True)
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                f"{self.arduino_cli} not found",
                hint="install arduino-cli or run: godotino config set arduino_cli /path/to/arduino-cli",
            ) from e

        if not output.success:
            traceback = normalize(output.stdout, SourceKind.COMPILER)
            raise CompileError("arduino-cli compile failed", traceback=traceback)

        if self.verbose and output.stdout:
            print(output.stdout)

        return find_firmware(build_path)


def find_firmware(build_path: Path) -> Optional[Path]:
    """First firmware artifact in build_path, by FIRMWARE_EXTENSIONS order."""
    for extension in FIRMWARE_EXTENSIONS:
        matches = sorted(build_path.glob(f"*{extension}"))
        if matches:
            return matches[0]
    return None
