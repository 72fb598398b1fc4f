"""
goduino.json project manifest.

This module loads the per-project manifest that supplies the project name,
default board and build settings to the build pipeline.

Example goduino.json:
    {
      "name": "blink",
      "version": "0.1.0",
      "board": "uno",
      "go_version": "1.21",
      "dependencies": [],
      "build": {"output_dir": "build", "source_map": false}
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

MANIFEST_FILENAME = "goduino.json"


class ManifestError(Exception):
    """Exception raised for goduino.json errors."""

    pass


@dataclass
class Dependency:
    """A declared project dependency."""

    name: str
    version: str = ""
    kind: str = "go"  # "go" | "arduino" | "local"


@dataclass
class BuildSettings:
    """The "build" section of goduino.json."""

    output_dir: str = "build"
    cpp_std: str = "c++11"
    optimize: str = "Os"
    extra_flags: List[str] = field(default_factory=list)
    source_map: bool = False


@dataclass
class Manifest:
    """Parsed goduino.json."""

    name: str
    board: str = ""
    version: str = "0.1.0"
    go_version: str = "1.21"
    description: str = ""
    dependencies: List[Dependency] = field(default_factory=list)
    build: BuildSettings = field(default_factory=BuildSettings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        """Create a Manifest from decoded JSON.

        Raises:
            ManifestError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise ManifestError(f"{MANIFEST_FILENAME} must contain a JSON object")
        if not data.get("name"):
            raise ManifestError(f"{MANIFEST_FILENAME} is missing required field: name")

        build_data = data.get("build") or {}
        if not isinstance(build_data, dict):
            raise ManifestError(f"'build' in {MANIFEST_FILENAME} must be an object")

        try:
            dependencies = [Dependency(**dep) for dep in data.get("dependencies") or []]
            build = BuildSettings(**build_data)
        except TypeError as e:
            raise ManifestError(f"Invalid field in {MANIFEST_FILENAME}: {e}") from e

        return cls(
            name=str(data["name"]),
            board=str(data.get("board", "")),
            version=str(data.get("version", "0.1.0")),
            go_version=str(data.get("go_version", "1.21")),
            description=str(data.get("description", "")),
            dependencies=dependencies,
            build=build,
        )


def load_manifest(project_dir: Path) -> Manifest:
    """
    Load goduino.json from a project directory.

    Args:
        project_dir: Directory containing goduino.json

    Returns:
        Parsed Manifest

    Raises:
        ManifestError: If the file is missing or cannot be parsed
    """
    path = Path(project_dir) / MANIFEST_FILENAME
    if not path.exists():
        raise ManifestError(
            f"No {MANIFEST_FILENAME} found in {project_dir}. Create one with at least a \"name\" field."
        )

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Failed to parse {path}: {e}") from e

    return Manifest.from_dict(data)


def find_manifest(start_dir: Path) -> Tuple[Path, Manifest]:
    """
    Search upward from start_dir for goduino.json.

    Returns:
        Tuple of (project directory, parsed Manifest)

    Raises:
        ManifestError: If no manifest exists in start_dir or any parent
    """
    start_dir = Path(start_dir).resolve()
    for directory in [start_dir, *start_dir.parents]:
        if (directory / MANIFEST_FILENAME).is_file():
            return directory, load_manifest(directory)

    raise ManifestError(
        f"No {MANIFEST_FILENAME} found (searched from {start_dir} upward)"
    )
