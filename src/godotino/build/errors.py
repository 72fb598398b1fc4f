"""Exceptions raised by the build pipeline."""

from typing import TYPE_CHECKING, Optional

from ..diagnostics import Traceback

if TYPE_CHECKING:
    from .orchestrator import BuildResult


class BuildOrchestratorError(Exception):
    """Base exception for build pipeline failures.

    Attributes:
        hint: Optional remediation shown to the user below the message
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class EnvironmentSetupError(BuildOrchestratorError):
    """The output directory could not be created."""

    pass


class ToolNotFoundError(BuildOrchestratorError):
    """A required external binary is not installed or not on PATH."""

    pass


class NoSourceFilesError(BuildOrchestratorError):
    """The project has no source files to translate."""

    pass


class UnknownBoardError(BuildOrchestratorError):
    """The requested board id is not in the board catalog."""

    def __init__(self, board: str):
        super().__init__(
            f"unknown board {board!r}",
            hint="run 'godotino boards list' to see supported boards",
        )
        self.board = board


class TranspileError(BuildOrchestratorError):
    """godotino-core failed on one source file."""

    def __init__(self, message: str, traceback: Traceback, source_file: Optional[str] = None):
        super().__init__(message)
        self.traceback = traceback
        self.source_file = source_file


class CompileError(BuildOrchestratorError):
    """arduino-cli compile exited non-zero.

    Attributes:
        traceback: Normalized compiler diagnostics
        result: Partial BuildResult (translation succeeded, no firmware)
    """

    def __init__(self, message: str, traceback: Traceback, result: Optional["BuildResult"] = None):
        super().__init__(message)
        self.traceback = traceback
        self.result = result
