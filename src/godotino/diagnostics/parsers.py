"""
Diagnostic parsers for the three external tools.

godotino-core, the arduino-cli compiler and the arduino-cli uploader agree on
no common output format, so each gets its own parser. All of them return the
shared Traceback model. normalize() dispatches on an explicit SourceKind and
never guesses the format from the text.

Formats handled:

    godotino-core (stderr):
        error[E001]: undefined function `Delay`
          --> src/main.go:14:5
           |
        14 |     Delay(1000)
           |     ^^^^^ not found

    arduino-cli compile (combined output):
        src/main.cpp:14:5: error: 'Delay' was not declared in this scope

    arduino-cli upload (combined output):
        free text; only lines mentioning "error" or "not found" are kept
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Type

from .models import CodeLine, Frame, SourceKind, Traceback

_HEADER_RE = re.compile(r"^(?P<tag>error\S*?):\s*(?P<message>.*)$")
_LOCATION_RE = re.compile(r"^(?P<file>.+?):(?P<line>\d+)(?::(?P<column>\d+))?$")
_CONTEXT_RE = re.compile(r"^\s*(?P<number>\d+)\s+\|(?P<rest>.*)$")


class DiagnosticParser(ABC):
    """Turns one tool's raw diagnostic text into a Traceback."""

    # Kind used when nothing structured could be extracted
    generic_kind: str = "Error"
    # Frame label for the pipeline stage
    label: str = ""
    # Message used when the raw text is empty
    default_message: str = "failed"

    def __init__(self, origin: Optional[str] = None):
        """
        Args:
            origin: Input file (translator) or serial port (uploader) the
                diagnostic relates to
        """
        self.origin = origin

    @abstractmethod
    def parse(self, raw_text: str) -> Traceback:
        pass

    def fallback(self, raw_text: str, message: Optional[str] = None) -> Traceback:
        """Single synthetic frame holding the whole trimmed text."""
        text = (raw_text or "").strip()
        frame = Frame(
            file=self.origin or "",
            line=0,
            label=self.label,
            code=[CodeLine(number=0, text=text, is_pointer=True)],
        )
        return Traceback(
            kind=self.generic_kind,
            message=message or text or self.default_message,
            frames=[frame],
        )


class TranspilerDiagnosticParser(DiagnosticParser):
    """Parser for godotino-core's rustc-style error output."""

    generic_kind = "TranspileError"
    label = "transpile"
    default_message = "transpilation failed"

    def parse(self, raw_text: str) -> Traceback:
        kind: Optional[str] = None
        message: Optional[str] = None
        frames: List[Frame] = []
        current: Optional[Frame] = None

        for line in (raw_text or "").splitlines():
            line = line.rstrip("\r")

            header = _HEADER_RE.match(line)
            if header:
                # Only the first header describes the failure
                if kind is None:
                    kind = header.group("tag")
                    message = header.group("message").strip()
                continue

            if "-->" in line:
                if current is not None:
                    frames.append(current)
                current = self._start_frame(line)
                continue

            if current is None:
                continue

            trimmed = line.strip()
            if not trimmed or trimmed[0] in "|^":
                continue

            context = _CONTEXT_RE.match(line)
            if context:
                number = int(context.group("number"))
                rest = context.group("rest")
                if rest.startswith(" "):
                    rest = rest[1:]
                current.code.append(
                    CodeLine(number=number, text=rest, is_pointer=number == current.line)
                )

        if current is not None:
            frames.append(current)

        if not frames:
            return self.fallback(raw_text, message)

        return Traceback(
            kind=kind or self.generic_kind,
            message=message if message is not None else (raw_text or "").strip(),
            frames=frames,
        )

    def _start_frame(self, line: str) -> Frame:
        location = line.split("-->", 1)[1].strip().lstrip("·").strip()
        file_name, line_number = _split_location(location)
        return Frame(
            file=file_name or self.origin or "",
            line=line_number,
            label=self.label,
        )


class CompilerDiagnosticParser(DiagnosticParser):
    """Parser for gcc-style `file:line:col: error: message` lines."""

    generic_kind = "CompileError"
    label = "compile"
    default_message = "compilation failed"

    MARKER = ": error:"

    def parse(self, raw_text: str) -> Traceback:
        frames: List[Frame] = []
        message: Optional[str] = None

        for line in (raw_text or "").splitlines():
            if self.MARKER not in line:
                continue

            location, _, error_text = line.partition(self.MARKER)
            error_text = error_text.strip()
            file_name, line_number = _split_gcc_location(location.strip())

            frames.append(
                Frame(
                    file=file_name,
                    line=line_number,
                    label=self.label,
                    code=[CodeLine(number=line_number, text=error_text, is_pointer=True)],
                )
            )
            if message is None:
                message = error_text

        if not frames:
            return self.fallback(raw_text, self.default_message)

        return Traceback(kind=self.generic_kind, message=message or "", frames=frames)

    def fallback(self, raw_text: str, message: Optional[str] = None) -> Traceback:
        traceback = super().fallback(raw_text, message)
        traceback.frames[0].file = self.origin or "sketch"
        return traceback


class UploaderDiagnosticParser(DiagnosticParser):
    """Parser for arduino-cli upload output, which has no fixed format."""

    generic_kind = "FlashError"
    label = "upload"
    default_message = "upload failed"

    def parse(self, raw_text: str) -> Traceback:
        relevant = []
        for line in (raw_text or "").splitlines():
            line = line.strip()
            lowered = line.lower()
            if line and ("error" in lowered or "not found" in lowered):
                relevant.append(line)

        if not relevant:
            return self.fallback(raw_text)

        message = "; ".join(relevant)
        frame = Frame(
            file=self.origin or "",
            line=0,
            label=self.label,
            code=[CodeLine(number=0, text=message, is_pointer=True)],
        )
        return Traceback(kind=self.generic_kind, message=message, frames=[frame])


PARSERS: Dict[SourceKind, Type[DiagnosticParser]] = {
    SourceKind.TRANSPILER: TranspilerDiagnosticParser,
    SourceKind.COMPILER: CompilerDiagnosticParser,
    SourceKind.UPLOADER: UploaderDiagnosticParser,
}


def normalize(raw_text: str, source_kind: SourceKind, origin: Optional[str] = None) -> Traceback:
    """
    Parse raw diagnostic text from an external tool into a Traceback.

    Args:
        raw_text: Captured output of the tool (may be empty)
        source_kind: Which tool produced the text
        origin: Input file or serial port the diagnostic relates to

    Returns:
        Traceback with at least one frame
    """
    parser_class = PARSERS[source_kind]
    return parser_class(origin).parse(raw_text)


def _split_location(location: str) -> Tuple[str, int]:
    """Split `file:line[:column]`, parsing from the right."""
    match = _LOCATION_RE.match(location)
    if match:
        return match.group("file"), int(match.group("line"))
    return location, 0


def _split_gcc_location(location: str) -> Tuple[str, int]:
    """Best-effort split of the part before `: error:`."""
    parts = location.split(":")
    # Keep Windows drive letters attached to the path (C:\src\main.cpp)
    if len(parts) > 1 and len(parts[0]) == 1 and parts[0].isalpha() and parts[1][:1] in ("\\", "/"):
        parts = [parts[0] + ":" + parts[1]] + parts[2:]

    file_name = parts[0]
    line_number = 0
    if len(parts) >= 2:
        try:
            line_number = int(parts[1].strip())
        except ValueError:
            line_number = 0
    return file_name, line_number
