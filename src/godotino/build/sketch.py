"""
Arduino sketch directory handling.

arduino-cli compile only accepts a *sketch directory*: a folder containing an
entry-point `.ino` file whose base name matches the folder name:

    build/
    ├── .cache/              # arduino-cli --build-path (objects, firmware)
    └── blink/               # sketch directory
        ├── blink.ino        # generated entry-point stub
        ├── main.cpp         # godotino-core output
        └── sensor.cpp

CompilationUnit makes that rule explicit: it can only be constructed for a
directory that satisfies it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

INO_STUB = (
    "// Auto-generated by godotino - do not edit.\n"
    "// arduino-cli compiles the .cpp files in this directory automatically.\n"
)


class CompilationUnitError(Exception):
    """Raised when a directory is not a valid sketch directory."""

    pass


@dataclass(frozen=True)
class CompilationUnit:
    """A validated sketch directory."""

    sketch_dir: Path
    entry_point: Path

    @property
    def name(self) -> str:
        return self.sketch_dir.name

    def cpp_files(self) -> List[Path]:
        return sorted(self.sketch_dir.glob("*.cpp"))

    @classmethod
    def from_directory(
        cls, sketch_dir: Path, expected_outputs: Optional[Iterable[Path]] = None
    ) -> "CompilationUnit":
        """
        Validate a sketch directory.

        Args:
            sketch_dir: Directory expected to hold <name>/<name>.ino
            expected_outputs: Translated .cpp files of the current build. When
                given, the directory must hold exactly these .cpp files.

        Returns:
            CompilationUnit for the directory

        Raises:
            CompilationUnitError: If the directory is missing, has no entry
                point, has more than one, the entry point's name doesn't
                match the directory name, or the .cpp files differ from
                expected_outputs
        """
        sketch_dir = Path(sketch_dir)
        if not sketch_dir.is_dir():
            raise CompilationUnitError(f"Sketch directory not found: {sketch_dir}")

        ino_files = sorted(sketch_dir.glob("*.ino"))
        if not ino_files:
            raise CompilationUnitError(f"No .ino entry point in {sketch_dir}")
        if len(ino_files) > 1:
            names = ", ".join(p.name for p in ino_files)
            raise CompilationUnitError(
                f"Sketch directory {sketch_dir} has more than one .ino file: {names}"
            )

        entry_point = ino_files[0]
        if entry_point.stem != sketch_dir.name:
            raise CompilationUnitError(
                f"Entry point {entry_point.name} does not match sketch directory "
                + f"name '{sketch_dir.name}' (expected {sketch_dir.name}.ino)"
            )

        if expected_outputs is not None:
            expected = {Path(p).name for p in expected_outputs}
            present = {p.name for p in sketch_dir.glob("*.cpp")}
            if present != expected:
                unexpected = ", ".join(sorted(present - expected)) or "-"
                missing = ", ".join(sorted(expected - present)) or "-"
                raise CompilationUnitError(
                    f"Sketch directory {sketch_dir} does not match the build inputs "
                    + f"(unexpected: {unexpected}; missing: {missing})"
                )

        return cls(sketch_dir=sketch_dir, entry_point=entry_point)


def write_entry_point(sketch_dir: Path) -> Path:
    """
    Write the <name>.ino stub arduino-cli needs inside the sketch directory.

    Overwrites any existing stub, so repeated builds are safe.

    Returns:
        Path to the written stub
    """
    stub_path = Path(sketch_dir) / f"{Path(sketch_dir).name}.ino"
    stub_path.write_text(INO_STUB, encoding="utf-8")
    return stub_path


def remove_stale_outputs(sketch_dir: Path, keep: Iterable[Path]) -> List[Path]:
    """
    Delete translated .cpp files left over from sources that no longer exist.

    Args:
        sketch_dir: Sketch directory
        keep: Outputs of the current build

    Returns:
        Paths that were removed
    """
    keep_names = {Path(p).name for p in keep}
    removed = []
    for cpp_file in sorted(Path(sketch_dir).glob("*.cpp")):
        if cpp_file.name not in keep_names:
            cpp_file.unlink()
            removed.append(cpp_file)
    return removed
