"""
Build orchestration for godotino projects.

This module coordinates the build pipeline, from the project manifest to an
optional firmware artifact:
- Board and output directory resolution
- Sketch directory setup
- Per-file translation with godotino-core
- Entry-point (.ino) generation
- Compilation with arduino-cli
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..config import BoardCatalogError, Manifest, UserConfig, board_fqbn
from .compiler import ArduinoCompiler
from .errors import (
    BuildOrchestratorError,
    CompileError,
    EnvironmentSetupError,
    NoSourceFilesError,
    ToolNotFoundError,
    UnknownBoardError,
)
from .sanitizer import sketch_name_for
from .sketch import (
    CompilationUnit,
    CompilationUnitError,
    remove_stale_outputs,
    write_entry_point,
)
from .transpiler import Transpiler

SOURCE_EXTENSION = ".go"
CACHE_DIR_NAME = ".cache"


@dataclass(frozen=True)
class BuildRequest:
    """Inputs for one build run.

    Attributes:
        project_dir: Project root (contains goduino.json and src/)
        manifest: Parsed goduino.json
        board: Board override (manifest board is used when None)
        output_dir: Output root override (manifest build.output_dir otherwise)
        source_map: Ask godotino-core for #line metadata
        compile: Run arduino-cli after translation
        source_files: Explicit inputs (src/*.go is discovered when None)
    """

    project_dir: Path
    manifest: Manifest
    board: Optional[str] = None
    output_dir: Optional[Path] = None
    source_map: bool = False
    compile: bool = False
    source_files: Optional[List[Path]] = None


@dataclass
class BuildResult:
    """Result of a successful build."""

    cpp_files: List[Path]
    sketch_dir: Path
    board: str
    firmware_path: Optional[Path] = None
    fqbn: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


class BuildOrchestrator:
    """
    Orchestrates the build pipeline for a godotino project.

    Phases:
    1. Resolve target board
    2. Create the sketch directory (<output>/<sanitized-name>)
    3. Verify godotino-core is installed
    4. Discover source files
    5. Translate each file into the sketch directory (stops at first failure)
    6. Remove stale outputs and write the <name>.ino entry point
    7. Resolve the board FQBN (compile only)
    8. Compile with arduino-cli into <output>/.cache (compile only)

    Example usage:
        orchestrator = BuildOrchestrator(UserConfig.load())
        result = orchestrator.build(BuildRequest(project_dir, manifest, compile=True))
        print(result.firmware_path)
    """

    def __init__(
        self,
        config: Optional[UserConfig] = None,
        verbose: bool = False,
        transpiler: Optional[Transpiler] = None,
        compiler: Optional[ArduinoCompiler] = None,
    ):
        """
        Initialize build orchestrator.

        Args:
            config: User configuration (tool paths, default board)
            verbose: Enable verbose output
            transpiler: godotino-core wrapper (built from config if omitted)
            compiler: arduino-cli wrapper (built from config if omitted)
        """
        self.config = config or UserConfig()
        self.verbose = verbose
        self.transpiler = transpiler or Transpiler(self.config.core_binary, verbose=verbose)
        self.compiler = compiler or ArduinoCompiler(self.config.arduino_cli, verbose=verbose)

    def build(self, request: BuildRequest) -> BuildResult:
        """
        Execute the build pipeline.

        Args:
            request: Build inputs

        Returns:
            BuildResult with generated files and optional firmware path

        Raises:
            BuildOrchestratorError: If any phase fails; later phases are skipped
        """
        manifest = request.manifest
        project_dir = Path(request.project_dir)

        # Phase 1: Resolve board. Validity is only checked before compiling
        # so that godotino-core can still report board-specific errors.
        board = request.board or manifest.board or self.config.default_board
        self._step(1, f"Target board: {board}")

        # Phase 2: Sketch directory
        output_root = Path(request.output_dir or project_dir / manifest.build.output_dir)
        sketch_dir = output_root / sketch_name_for(manifest.name)
        self._step(2, f"Sketch directory: {sketch_dir}")
        try:
            sketch_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EnvironmentSetupError(f"creating sketch dir {sketch_dir}: {e}") from e

        # Phase 3: Translator available
        if not self.transpiler.is_installed():
            raise ToolNotFoundError(
                f"{self.transpiler.binary} not found - install it or set core_binary in config",
                hint="godotino config set core_binary /path/to/godotino-core",
            )

        # Phase 4: Sources
        source_files = self._discover_sources(project_dir, request.source_files)
        self._step(3, f"Transpiling {len(source_files)} file(s) [board: {board}]")

        # Phase 5: Translate, in input order, stopping at the first failure
        source_map = request.source_map or manifest.build.source_map
        result = BuildResult(cpp_files=[], sketch_dir=sketch_dir, board=board)
        for source_file in source_files:
            cpp_file = sketch_dir / f"{source_file.stem}.cpp"
            outcome = self.transpiler.transpile(source_file, cpp_file, board, source_map)
            logging.info(f"Transpiled {source_file.name} -> {cpp_file.name}")
            print(f"  {source_file.name}  ->  {cpp_file.name}")
            result.cpp_files.append(outcome.output_file)
            result.warnings.extend(outcome.warnings)

        # Phase 6: Entry point. Outputs of sources removed since the last
        # build would otherwise be compiled into the firmware.
        for stale in remove_stale_outputs(sketch_dir, result.cpp_files):
            logging.info(f"Removed stale output {stale.name}")
        stub_path = write_entry_point(sketch_dir)
        self._step(4, f"Wrote {sketch_dir.name}/{stub_path.name}")

        if not request.compile:
            return result

        # Phase 7: Board FQBN
        try:
            result.fqbn = board_fqbn(board)
        except BoardCatalogError as e:
            raise UnknownBoardError(board) from e
        self._step(5, f"FQBN: {result.fqbn}")

        # Phase 8: Compile
        try:
            sketch = CompilationUnit.from_directory(sketch_dir, expected_outputs=result.cpp_files)
        except CompilationUnitError as e:
            raise BuildOrchestratorError(
                str(e), hint=f"remove stray .ino/.cpp files from {sketch_dir} and rebuild"
            ) from e
        cache_dir = output_root / CACHE_DIR_NAME
        self._step(6, f"Compiling into {cache_dir}")
        try:
            result.firmware_path = self.compiler.compile(sketch, result.fqbn, cache_dir)
        except CompileError as e:
            e.result = result
            raise

        if result.firmware_path is None:
            logging.warning(f"No firmware artifact found in {cache_dir}")
        return result

    def _discover_sources(self, project_dir: Path, explicit: Optional[List[Path]]) -> List[Path]:
        if explicit is not None:
            source_files = [Path(p) for p in explicit]
            where = "the build request"
        else:
            src_dir = project_dir / "src"
            source_files = sorted(src_dir.glob(f"*{SOURCE_EXTENSION}"))
            where = str(src_dir)

        if not source_files:
            raise NoSourceFilesError(f"no {SOURCE_EXTENSION} files found in {where}")

        # Each source translates to <stem>.cpp in one flat sketch directory
        seen: Dict[str, Path] = {}
        for source_file in source_files:
            other = seen.setdefault(source_file.stem, source_file)
            if other is not source_file:
                raise BuildOrchestratorError(
                    f"{other} and {source_file} would both translate to {source_file.stem}.cpp",
                    hint="rename one of the source files",
                )
        return source_files

    def _step(self, number: int, message: str) -> None:
        logging.debug(message)
        if self.verbose:
            print(f"[{number}/6] {message}")
