"""
Structured diagnostic model shared by all external tools.

Every diagnostic, whether it came from godotino-core, the arduino-cli compiler
or the uploader, is normalized into a Traceback made of Frames, each with the
relevant source lines.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class SourceKind(Enum):
    """Which external tool produced a diagnostic stream."""

    TRANSPILER = "transpiler"
    COMPILER = "compiler"
    UPLOADER = "uploader"


@dataclass
class CodeLine:
    """One line of source context inside a frame."""

    number: int  # 1-based, 0 if unknown
    text: str
    is_pointer: bool = False  # True for the line the diagnostic points at


@dataclass
class Frame:
    """One location-anchored segment of a traceback."""

    file: str
    line: int = 0
    label: str = ""  # Pipeline stage that produced the frame
    code: List[CodeLine] = field(default_factory=list)


@dataclass
class Traceback:
    """Normalized diagnostic. Always holds at least one frame."""

    kind: str
    message: str
    frames: List[Frame]

    def __post_init__(self) -> None:
        if not self.frames:
            raise ValueError("Traceback requires at least one frame")
