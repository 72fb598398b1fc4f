"""
godotino-core wrapper.

godotino-core translates one .go source into one .cpp file:

    godotino-core <input.go> <output.cpp> --board <id> [--source-map]
    godotino-core <input.go> --board <id> --check
    godotino-core --version

Diagnostics arrive on stderr; warnings are any lines mentioning "warning".
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..diagnostics import SourceKind, normalize
from ..process_utils import ToolOutput, find_executable, run_tool
from .errors import ToolNotFoundError, TranspileError

DEFAULT_CORE_BINARY = "godotino-core"


@dataclass
class TranslationOutcome:
    """Result of translating one source file."""

    input_file: Path
    output_file: Path
    warnings: List[str] = field(default_factory=list)


@dataclass
class CheckOutcome:
    """Result of `--check` on one source file."""

    input_file: Path
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    success: bool = True


class Transpiler:
    """Runs godotino-core on individual source files."""

    def __init__(self, binary: Optional[str] = None, verbose: bool = False):
        """
        Args:
            binary: godotino-core path or name (empty = search PATH)
            verbose: Echo each command before running it
        """
        self.binary = binary or DEFAULT_CORE_BINARY
        self.verbose = verbose

    def is_installed(self) -> bool:
        return find_executable(self.binary) is not None

    def transpile(
        self,
        input_file: Path,
        output_file: Path,
        board: str,
        source_map: bool = False,
    ) -> TranslationOutcome:
        """
        Translate a single source file.

        Raises:
            TranspileError: If godotino-core exits non-zero; carries the
                normalized Traceback for this file
            ToolNotFoundError: If the binary disappears between checks
        """
        cmd = [self.binary, str(input_file), str(output_file), "--board", board]
        if source_map:
            cmd.append("--source-map")

        output = self._run(cmd)
        if not output.success:
            traceback = normalize(output.stderr, SourceKind.TRANSPILER, origin=str(input_file))
            raise TranspileError(
                f"transpilation failed: {Path(input_file).name}",
                traceback=traceback,
                source_file=str(input_file),
            )

        return TranslationOutcome(
            input_file=Path(input_file),
            output_file=Path(output_file),
            warnings=parse_warnings(output.stderr),
        )

    def check(self, input_file: Path, board: str) -> CheckOutcome:
        """Validate a source file without producing output."""
        output = self._run([self.binary, str(input_file), "--board", board, "--check"])
        return CheckOutcome(
            input_file=Path(input_file),
            warnings=parse_warnings(output.combined),
            errors=parse_errors(output.stderr),
            success=output.success,
        )

    def version(self) -> str:
        output = self._run([self.binary, "--version"])
        if not output.success:
            raise ToolNotFoundError(f"cannot run {self.binary}: {output.stderr.strip()}")
        return output.stdout.strip()

    def _run(self, cmd: List[str]) -> ToolOutput:
        if self.verbose:
            print(f"  core  {' '.join(cmd)}")
        logging.info(f"godotino-core: {' '.join(cmd)}")
        try:
            return run_tool(cmd)
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                f"{self.binary} not found",
                hint="godotino config set core_binary /path/to/godotino-core",
            ) from e


def parse_warnings(output: str) -> List[str]:
    """Lines mentioning 'warning' (case-insensitive), trimmed, in order."""
    return [line.strip() for line in output.splitlines() if "warning" in line.lower()]


def parse_errors(output: str) -> List[str]:
    """Lines mentioning 'error' (case-insensitive), trimmed, in order."""
    return [line.strip() for line in output.splitlines() if "error" in line.lower()]
