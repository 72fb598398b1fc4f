"""
Build pipeline for godotino.

This module provides:
- Sketch name sanitization and sketch directory validation
- godotino-core translation
- arduino-cli compilation
- Build orchestration and source checking
"""

from .checker import CheckReport, run_check
from .compiler import FIRMWARE_EXTENSIONS, ArduinoCompiler, find_firmware
from .errors import (
    BuildOrchestratorError,
    CompileError,
    EnvironmentSetupError,
    NoSourceFilesError,
    ToolNotFoundError,
    TranspileError,
    UnknownBoardError,
)
from .orchestrator import BuildOrchestrator, BuildRequest, BuildResult
from .sanitizer import DEFAULT_SKETCH_NAME, sanitize_sketch_name, sketch_name_for
from .sketch import (
    CompilationUnit,
    CompilationUnitError,
    remove_stale_outputs,
    write_entry_point,
)
from .transpiler import CheckOutcome, TranslationOutcome, Transpiler

__all__ = [
    "CheckReport",
    "run_check",
    "FIRMWARE_EXTENSIONS",
    "ArduinoCompiler",
    "find_firmware",
    "BuildOrchestratorError",
    "CompileError",
    "EnvironmentSetupError",
    "NoSourceFilesError",
    "ToolNotFoundError",
    "TranspileError",
    "UnknownBoardError",
    "BuildOrchestrator",
    "BuildRequest",
    "BuildResult",
    "DEFAULT_SKETCH_NAME",
    "sanitize_sketch_name",
    "sketch_name_for",
    "CompilationUnit",
    "CompilationUnitError",
    "remove_stale_outputs",
    "write_entry_point",
    "CheckOutcome",
    "TranslationOutcome",
    "Transpiler",
]
