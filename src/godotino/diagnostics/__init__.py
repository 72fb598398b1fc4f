"""Diagnostic normalization for translator, compiler and uploader output."""

from .models import CodeLine, Frame, SourceKind, Traceback
from .parsers import (
    CompilerDiagnosticParser,
    DiagnosticParser,
    TranspilerDiagnosticParser,
    UploaderDiagnosticParser,
    normalize,
)

__all__ = [
    "CodeLine",
    "Frame",
    "SourceKind",
    "Traceback",
    "DiagnosticParser",
    "TranspilerDiagnosticParser",
    "CompilerDiagnosticParser",
    "UploaderDiagnosticParser",
    "normalize",
]
