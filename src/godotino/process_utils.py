"""
External process helpers.

All external tools (godotino-core, arduino-cli) are run through run_tool(),
which blocks until the process exits and fully drains its output. If the user
interrupts a run, the tool's whole process tree is torn down before the
KeyboardInterrupt propagates, so no orphaned compiler keeps the sketch
directory busy.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import psutil


@dataclass
class ToolOutput:
    """Captured result of an external tool invocation."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def combined(self) -> str:
        """stdout followed by stderr."""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr


def find_executable(binary: str) -> Optional[Path]:
    """
    Resolve a tool binary name or path.

    Args:
        binary: Bare name (searched on PATH) or explicit path

    Returns:
        Path to the executable, or None if it cannot be found
    """
    if not binary:
        return None
    found = shutil.which(binary)
    return Path(found) if found else None


def run_tool(
    cmd: Sequence[str],
    cwd: Optional[Path] = None,
    merge_output: bool = False,
) -> ToolOutput:
    """
    Run an external tool and capture its output.

    Args:
        cmd: Command and arguments
        cwd: Working directory
        merge_output: Send stderr into stdout (arduino-cli diagnostics)

    Returns:
        ToolOutput with exit code and decoded output

    Raises:
        FileNotFoundError: If the executable doesn't exist
        KeyboardInterrupt: After the process tree has been terminated
    """
    cmd = [str(part) for part in cmd]
    logging.debug(f"Running: {' '.join(cmd)}")

    proc = subprocess.Popen(
        cmd,
        cwd=str(cwd) if cwd else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT if merge_output else subprocess.PIPE,
    )
    try:
        stdout, stderr = proc.communicate()
    except KeyboardInterrupt:
        logging.warning(f"Interrupted, terminating {cmd[0]} (pid {proc.pid})")
        terminate_process_tree(proc.pid)
        raise

    result = ToolOutput(
        returncode=proc.returncode,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )
    logging.debug(f"{Path(cmd[0]).name} exited with code {result.returncode}")
    return result


def terminate_process_tree(root_pid: int, timeout: float = 3) -> int:
    """
    Terminate a process and all of its children.

    Children are terminated before their parents. Processes still alive
    after `timeout` seconds are force killed.

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(root_pid)
    except psutil.NoSuchProcess:
        return 0

    try:
        children = root.children(recursive=True)
    except psutil.NoSuchProcess:
        children = []

    processes: List[psutil.Process] = list(reversed(children)) + [root]
    signalled: List[psutil.Process] = []
    for proc in processes:
        try:
            proc.terminate()
            signalled.append(proc)
        except psutil.NoSuchProcess:
            pass  # Already gone

    _gone, alive = psutil.wait_procs(signalled, timeout=timeout)
    for proc in alive:
        try:
            proc.kill()
            logging.warning(f"Force killed stubborn process {proc.pid}")
        except psutil.NoSuchProcess:
            pass

    return len(signalled)


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    # Tools may emit binary noise (serial uploaders); never fail on decoding
    return data.decode("utf-8", errors="replace")
