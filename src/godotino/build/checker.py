"""Source validation (`godotino check`).

Runs godotino-core in --check mode over every project source. Unlike the
build pipeline, checking continues past failing files so the report lists
every problem at once.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config import Manifest, UserConfig
from .errors import NoSourceFilesError, ToolNotFoundError
from .orchestrator import SOURCE_EXTENSION
from .transpiler import CheckOutcome, Transpiler


@dataclass
class CheckReport:
    """Warnings and errors for every checked file, in input order."""

    board: str
    files: List[CheckOutcome] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [w for outcome in self.files for w in outcome.warnings]

    @property
    def errors(self) -> List[str]:
        return [e for outcome in self.files for e in outcome.errors]

    @property
    def success(self) -> bool:
        return all(outcome.success for outcome in self.files) and not self.errors


def run_check(
    project_dir: Path,
    manifest: Manifest,
    config: UserConfig,
    board: Optional[str] = None,
    transpiler: Optional[Transpiler] = None,
    verbose: bool = False,
) -> CheckReport:
    """
    Check every source file of a project.

    Raises:
        ToolNotFoundError: If godotino-core is not installed
        NoSourceFilesError: If the project has no sources
    """
    board = board or manifest.board or config.default_board
    transpiler = transpiler or Transpiler(config.core_binary, verbose=verbose or config.verbose)

    if not transpiler.is_installed():
        raise ToolNotFoundError(
            f"{transpiler.binary} not found",
            hint="godotino config set core_binary /path/to/godotino-core",
        )

    src_dir = Path(project_dir) / "src"
    source_files = sorted(src_dir.glob(f"*{SOURCE_EXTENSION}"))
    if not source_files:
        raise NoSourceFilesError(f"no {SOURCE_EXTENSION} files found in {src_dir}")

    report = CheckReport(board=board)
    for source_file in source_files:
        outcome = transpiler.check(source_file, board)
        logging.info(
            f"Checked {source_file.name}: {len(outcome.errors)} error(s), "
            + f"{len(outcome.warnings)} warning(s)"
        )
        report.files.append(outcome)
    return report
