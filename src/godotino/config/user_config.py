"""
Persistent user-level configuration.

Stored as JSON at:
    $XDG_CONFIG_HOME/godotino/config.json   (if XDG_CONFIG_HOME is set)
    ~/.config/godotino/config.json          (otherwise)

The loaded UserConfig is handed explicitly to the build orchestrator and the
deployer; neither reads the file or the environment on its own.
"""

import json
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, List, Optional, Tuple


class UserConfigError(Exception):
    """Exception raised for configuration file errors."""

    pass


@dataclass
class UserConfig:
    """User-level settings for the godotino CLI."""

    core_binary: str = field(default="", metadata={"comment": "path to godotino-core binary"})
    arduino_cli: str = field(default="arduino-cli", metadata={"comment": "path to arduino-cli binary"})
    default_board: str = field(default="uno", metadata={"comment": "default target board"})
    default_baud: int = field(default=9600, metadata={"comment": "default serial baud rate"})
    color: bool = field(default=True, metadata={"comment": "enable colored output"})
    verbose: bool = field(default=False, metadata={"comment": "verbose command output"})
    auto_detect: bool = field(default=True, metadata={"comment": "auto-detect connected boards"})

    @staticmethod
    def default_path() -> Path:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"
        return base / "godotino" / "config.json"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "UserConfig":
        """
        Load the config file, falling back to defaults if it doesn't exist.

        Args:
            path: Config file path (defaults to default_path())

        Raises:
            UserConfigError: If the file exists but cannot be parsed
        """
        path = path or cls.default_path()
        if not path.exists():
            return cls()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise UserConfigError(f"Failed to parse config {path}: {e}") from e

        if not isinstance(data, dict):
            raise UserConfigError(f"Config {path} must contain a JSON object")

        # Unknown keys are ignored so older CLIs can read newer files
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def save(self, path: Optional[Path] = None) -> Path:
        path = path or self.default_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2) + "\n", encoding="utf-8")
        return path

    def get(self, key: str) -> Any:
        return getattr(self, self._field_for(key).name)

    def set(self, key: str, value: str) -> None:
        """
        Set a config key from its string form.

        Raises:
            UserConfigError: If the key is unknown or the value doesn't convert
        """
        f = self._field_for(key)
        current = getattr(self, f.name)

        if isinstance(current, bool):
            lowered = value.strip().lower()
            if lowered in ("1", "true", "yes", "on"):
                converted: Any = True
            elif lowered in ("0", "false", "no", "off"):
                converted = False
            else:
                raise UserConfigError(f"Invalid bool value {value!r} for key {key!r}")
        elif isinstance(current, int):
            try:
                converted = int(value)
            except ValueError as e:
                raise UserConfigError(f"Invalid int value {value!r} for key {key!r}") from e
        else:
            converted = value

        setattr(self, f.name, converted)

    def entries(self) -> List[Tuple[str, Any, str]]:
        """All (key, value, comment) triples, in declaration order."""
        return [(f.name, getattr(self, f.name), f.metadata.get("comment", "")) for f in fields(self)]

    def _field_for(self, key: str):
        normalized = key.strip().lower().replace("-", "_")
        for f in fields(self):
            if f.name == normalized:
                return f
        raise UserConfigError(f"Unknown config key {key!r}")
