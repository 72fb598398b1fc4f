"""CLI utility functions for godotino.

This module provides common utilities used across CLI commands including:
- Error handling and formatting
- Traceback rendering for translator/compiler/uploader diagnostics
- Logging setup
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from godotino.diagnostics import Traceback


class ErrorFormatter:
    """Formats and displays messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    CYAN = "\033[1;36m"
    DIM = "\033[2m"
    RESET = "\033[0m"

    @classmethod
    def set_color(cls, enabled: bool) -> None:
        """Enable or disable ANSI colors for all output."""
        for name, code in _ANSI_CODES.items():
            setattr(cls, name, code if enabled else "")

    @staticmethod
    def print_error(title: str, message: str, hint: Optional[str] = None) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Build failed")
            message: Error message details
            hint: Optional remediation line
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        if message:
            print(message)
        if hint:
            print(f"  {ErrorFormatter.CYAN}Hint:{ErrorFormatter.RESET} {hint}")
        print()

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message.

        Args:
            message: Success message
        """
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message.

        Args:
            message: Warning message
        """
        print(f"{ErrorFormatter.YELLOW}⚠ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        print()
        print(f"{ErrorFormatter.YELLOW}✗ Interrupted{ErrorFormatter.RESET}")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


# Captured before set_color() can blank them
_ANSI_CODES = {
    name: getattr(ErrorFormatter, name) for name in ("RED", "GREEN", "YELLOW", "CYAN", "DIM", "RESET")
}


class TracebackRenderer:
    """Renders a normalized Traceback in a Python-traceback-like layout.

    Example output:
        Traceback (most recent call last):
          File "src/main.go", line 14, in transpile
            14 │     Delay(1000)
        error[E001]: undefined function `Delay`
    """

    @staticmethod
    def render(traceback: Traceback) -> str:
        c = ErrorFormatter
        lines: List[str] = [f"{c.DIM}Traceback (most recent call last):{c.RESET}"]

        for frame in traceback.frames:
            location = f'  File "{c.CYAN}{frame.file}{c.RESET}"'
            if frame.line:
                location += f", line {frame.line}"
            if frame.label:
                location += f", in {frame.label}"
            lines.append(location)

            width = max((len(str(code.number)) for code in frame.code if code.number), default=1)
            for code in frame.code:
                number = str(code.number) if code.number else ""
                text = code.text if code.number else code.text.strip()
                if code.is_pointer:
                    lines.append(f"  {c.RED}→ {number:>{width}} │ {text}{c.RESET}")
                else:
                    lines.append(f"    {c.DIM}{number:>{width}} │{c.RESET} {text}")

        lines.append(f"{c.RED}{traceback.kind}{c.RESET}: {traceback.message}")
        return "\n".join(lines)

    @staticmethod
    def print_traceback(traceback: Traceback) -> None:
        print(TracebackRenderer.render(traceback), file=sys.stderr)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Args:
            project_dir: Path to validate

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path does not exist: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
        if not project_dir.is_dir():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for CLI use.

    Args:
        verbose: Log DEBUG and above instead of WARNING and above
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if getattr(handler, "_godotino", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    console_handler.setFormatter(console_formatter)
    console_handler._godotino = True  # type: ignore[attr-defined]
    logger.addHandler(console_handler)
