"""
Command-line interface for godotino.

This module provides the `godotino` CLI tool for translating, compiling and
uploading Go-on-Arduino projects.
"""

import argparse
import shutil
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from godotino import __version__
from godotino.build import (
    BuildOrchestrator,
    BuildOrchestratorError,
    BuildRequest,
    CompileError,
    ToolNotFoundError,
    TranspileError,
    Transpiler,
    run_check,
)
from godotino.cli_utils import (
    ErrorFormatter,
    PathValidator,
    TracebackRenderer,
    setup_logging,
)
from godotino.config import (
    BOARD_CATALOG,
    Manifest,
    ManifestError,
    UserConfig,
    UserConfigError,
    find_manifest,
)
from godotino.deploy import Deployer, DeploymentError, UploadOptions


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    board: Optional[str] = None
    output_dir: Optional[Path] = None
    compile: bool = False
    source_map: bool = False
    verbose: bool = False


@dataclass
class CheckArgs:
    """Arguments for the check command."""

    project_dir: Path
    board: Optional[str] = None
    verbose: bool = False


@dataclass
class UploadArgs:
    """Arguments for the upload command."""

    project_dir: Path
    port: Optional[str] = None
    board: Optional[str] = None
    build_dir: Optional[Path] = None
    verbose: bool = False


def load_config() -> UserConfig:
    """Load the user config, exiting with an error if it is unreadable."""
    try:
        return UserConfig.load()
    except UserConfigError as e:
        ErrorFormatter.print_error("Invalid configuration", str(e))
        sys.exit(1)


def load_project(project_dir: Path) -> Tuple[Path, Manifest]:
    """Find goduino.json from project_dir upward, exiting if none exists."""
    try:
        return find_manifest(project_dir)
    except ManifestError as e:
        ErrorFormatter.print_error("Error: Manifest not found", str(e))
        sys.exit(1)


def build_command(args: BuildArgs, config: UserConfig) -> None:
    """Transpile the project and optionally compile it to firmware.

    Examples:
        godotino build                     # Transpile only
        godotino build --board esp32       # Override the manifest board
        godotino build --compile           # Transpile + arduino-cli compile
    """
    print(f"godotino v{__version__}")
    print()

    try:
        project_dir, manifest = load_project(args.project_dir)
        orchestrator = BuildOrchestrator(config, verbose=args.verbose)
        request = BuildRequest(
            project_dir=project_dir,
            manifest=manifest,
            board=args.board,
            output_dir=args.output_dir,
            source_map=args.source_map,
            compile=args.compile,
        )

        start_time = time.time()
        result = orchestrator.build(request)
        build_time = time.time() - start_time

        for warning in result.warnings:
            ErrorFormatter.print_warning(warning)

        ErrorFormatter.print_success("Build finished!")
        print()
        print(f"Sketch: {result.sketch_dir}")
        if result.firmware_path:
            print(f"Firmware: {result.firmware_path}")
        print(f"Build time: {build_time:.2f}s")
        sys.exit(0)

    except (TranspileError, CompileError) as e:
        TracebackRenderer.print_traceback(e.traceback)
        ErrorFormatter.print_error("Build failed!", str(e), e.hint)
        sys.exit(1)
    except BuildOrchestratorError as e:
        ErrorFormatter.print_error("Build failed!", str(e), e.hint)
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def check_command(args: CheckArgs, config: UserConfig) -> None:
    """Validate sources without producing output.

    Examples:
        godotino check
        godotino check --board esp32
    """
    try:
        project_dir, manifest = load_project(args.project_dir)
        report = run_check(project_dir, manifest, config, board=args.board, verbose=args.verbose)

        print(f"Checking {len(report.files)} file(s) [board: {report.board}]")
        for outcome in report.files:
            ok = outcome.success and not outcome.errors
            mark = f"{ErrorFormatter.GREEN}✓" if ok else f"{ErrorFormatter.RED}✗"
            print(f"  {mark} {outcome.input_file.name}{ErrorFormatter.RESET}")
            for error in outcome.errors:
                print(f"      {ErrorFormatter.RED}{error}{ErrorFormatter.RESET}")
            for warning in outcome.warnings:
                print(f"      {ErrorFormatter.YELLOW}{warning}{ErrorFormatter.RESET}")

        if not report.success:
            count = len(report.errors)
            ErrorFormatter.print_error(
                f"{count} error(s) found" if count else "Check failed", ""
            )
            sys.exit(1)

        ErrorFormatter.print_success(f"No errors ({len(report.warnings)} warning(s))")
        sys.exit(0)

    except BuildOrchestratorError as e:
        ErrorFormatter.print_error("Check failed!", str(e), e.hint)
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def upload_command(args: UploadArgs, config: UserConfig) -> None:
    """Upload compiled firmware to a connected board.

    Examples:
        godotino upload
        godotino upload --port /dev/ttyUSB0
        godotino upload --port COM3 --board uno
    """
    try:
        project_dir, manifest = load_project(args.project_dir)
        deployer = Deployer(config, verbose=args.verbose)
        result = deployer.deploy(
            UploadOptions(
                project_dir=project_dir,
                manifest=manifest,
                port=args.port,
                board=args.board,
                build_dir=args.build_dir,
            )
        )

        if result.success:
            ErrorFormatter.print_success(result.message)
            sys.exit(0)

        if result.traceback:
            TracebackRenderer.print_traceback(result.traceback)
        ErrorFormatter.print_error("Upload failed!", result.message, result.hint)
        sys.exit(1)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def boards_list_command() -> None:
    """Print the board catalog."""
    print("Supported Boards")
    print()
    print(f"  {'ID':<12}  {'NAME':<34}  {'FLASH':>7}  {'RAM':>6}  FQBN")
    print("  " + "─" * 90)
    for board in BOARD_CATALOG:
        print(
            f"  {ErrorFormatter.CYAN}{board.id:<12}{ErrorFormatter.RESET}"
            + f"  {board.name:<34}"
            + f"  {board.flash_kb:>6}K"
            + f"  {board.ram_kb:>5}K"
            + f"  {ErrorFormatter.DIM}{board.fqbn}{ErrorFormatter.RESET}"
        )
    print()


def boards_detect_command(config: UserConfig) -> None:
    """Report the first serial port that looks like a board."""
    print("Scanning serial ports...")
    try:
        port = Deployer(config).detect_serial_port()
    except DeploymentError as e:
        ErrorFormatter.print_error("Detection failed", str(e), e.hint)
        sys.exit(1)
    except FileNotFoundError:
        ErrorFormatter.print_error(
            "Detection failed",
            f"{config.arduino_cli} not found",
            "godotino config set arduino_cli /path/to/arduino-cli",
        )
        sys.exit(1)

    if not port:
        ErrorFormatter.print_error(
            "No board detected", "", "connect the board and try again"
        )
        sys.exit(1)
    ErrorFormatter.print_success(f"Found board on {port}")


def clean_command(project_dir: Path) -> None:
    """Remove the project's build output directory."""
    root, manifest = load_project(project_dir)
    build_dir = root / manifest.build.output_dir
    if not build_dir.exists():
        print(f"{manifest.build.output_dir} does not exist - nothing to clean")
        return

    shutil.rmtree(build_dir)
    ErrorFormatter.print_success(f"Removed {build_dir}")


def config_command(action: str, key: Optional[str], value: Optional[str], config: UserConfig) -> None:
    """List, read or update the user config."""
    try:
        if action == "list":
            print(f"# {UserConfig.default_path()}")
            for entry_key, entry_value, comment in config.entries():
                print(f"{entry_key:<14} = {entry_value!s:<20} {ErrorFormatter.DIM}# {comment}{ErrorFormatter.RESET}")
        elif action == "get":
            print(config.get(key or ""))
        elif action == "set":
            config.set(key or "", value if value is not None else "")
            path = config.save()
            ErrorFormatter.print_success(f"{key} = {config.get(key or '')}  ({path})")
    except UserConfigError as e:
        ErrorFormatter.print_error("Config error", str(e))
        sys.exit(1)


def version_command(config: UserConfig) -> None:
    """Print CLI and godotino-core versions."""
    try:
        core_version = Transpiler(config.core_binary).version()
    except ToolNotFoundError:
        core_version = "(not detected)"
    print(f"cli   {__version__}")
    print(f"core  {core_version}")


def _add_project_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )


def _add_board(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-b",
        "--board",
        default=None,
        help="Target board (default: from goduino.json)",
    )


def _add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="godotino",
        description="godotino - Go for Arduino build tool",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"godotino {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Transpile and optionally compile the project",
    )
    _add_project_dir(build_parser)
    _add_board(build_parser)
    build_parser.add_argument(
        "-o",
        "--out",
        dest="output_dir",
        type=Path,
        default=None,
        help="Output directory (default: build_dir from goduino.json)",
    )
    build_parser.add_argument(
        "-c",
        "--compile",
        action="store_true",
        help="Compile to firmware after transpiling",
    )
    build_parser.add_argument(
        "--source-map",
        action="store_true",
        help="Emit #line directives mapping C++ back to Go sources",
    )
    _add_verbose(build_parser)

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Validate source files for errors and warnings (no output produced)",
    )
    _add_project_dir(check_parser)
    _add_board(check_parser)
    _add_verbose(check_parser)

    # Upload command
    upload_parser = subparsers.add_parser(
        "upload",
        help="Upload compiled firmware to a connected board",
    )
    _add_project_dir(upload_parser)
    upload_parser.add_argument(
        "-p",
        "--port",
        default=None,
        help="Serial port (default: auto-detect)",
    )
    _add_board(upload_parser)
    upload_parser.add_argument(
        "--build-dir",
        type=Path,
        default=None,
        help="Directory with compiled firmware (default: <output_dir>/.cache)",
    )
    _add_verbose(upload_parser)

    # Boards command
    boards_parser = subparsers.add_parser("boards", help="List and detect supported boards")
    boards_parser.add_argument("action", choices=["list", "detect"], nargs="?", default="list")

    # Clean command
    clean_parser = subparsers.add_parser("clean", help="Remove the build directory")
    _add_project_dir(clean_parser)

    # Config command
    config_parser = subparsers.add_parser("config", help="Show or change user configuration")
    config_parser.add_argument("action", choices=["list", "get", "set"], nargs="?", default="list")
    config_parser.add_argument("key", nargs="?", default=None)
    config_parser.add_argument("value", nargs="?", default=None)

    # Version command
    subparsers.add_parser("version", help="Print version information")

    return parser


def main() -> None:
    """godotino - Go for Arduino build tool."""
    parser = create_parser()
    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    config = load_config()
    ErrorFormatter.set_color(config.color)
    verbose = getattr(parsed_args, "verbose", False) or config.verbose
    setup_logging(verbose)

    # Validate project directory exists
    if hasattr(parsed_args, "project_dir"):
        PathValidator.validate_project_dir(parsed_args.project_dir)

    if parsed_args.command == "config" and parsed_args.action in ("get", "set") and not parsed_args.key:
        parser.error(f"config {parsed_args.action} requires a key")

    # Execute command
    if parsed_args.command == "build":
        build_command(
            BuildArgs(
                project_dir=parsed_args.project_dir,
                board=parsed_args.board,
                output_dir=parsed_args.output_dir,
                compile=parsed_args.compile,
                source_map=parsed_args.source_map,
                verbose=verbose,
            ),
            config,
        )
    elif parsed_args.command == "check":
        check_command(
            CheckArgs(project_dir=parsed_args.project_dir, board=parsed_args.board, verbose=verbose),
            config,
        )
    elif parsed_args.command == "upload":
        upload_command(
            UploadArgs(
                project_dir=parsed_args.project_dir,
                port=parsed_args.port,
                board=parsed_args.board,
                build_dir=parsed_args.build_dir,
                verbose=verbose,
            ),
            config,
        )
    elif parsed_args.command == "boards":
        if parsed_args.action == "detect":
            boards_detect_command(config)
        else:
            boards_list_command()
    elif parsed_args.command == "clean":
        clean_command(parsed_args.project_dir)
    elif parsed_args.command == "config":
        config_command(parsed_args.action, parsed_args.key, parsed_args.value, config)
    elif parsed_args.command == "version":
        version_command(config)


if __name__ == "__main__":
    main()
