"""
Static board catalog.

Maps the short board ids used in goduino.json and on the command line to the
fully-qualified board names (FQBN) that arduino-cli expects, along with the
flash and RAM sizes shown by `godotino boards list`.
"""

from dataclasses import dataclass
from typing import List


class BoardCatalogError(Exception):
    """Raised when a board id is not present in the catalog."""

    pass


@dataclass(frozen=True)
class BoardInfo:
    """Catalog entry for a supported board."""

    id: str
    name: str
    flash_kb: int  # Flash size in KB
    ram_kb: int  # RAM size in KB
    fqbn: str  # Passed verbatim to arduino-cli


BOARD_CATALOG: List[BoardInfo] = [
    BoardInfo("uno", "Arduino Uno", 32, 2, "arduino:avr:uno"),
    BoardInfo("nano", "Arduino Nano", 32, 2, "arduino:avr:nano"),
    BoardInfo("mega", "Arduino Mega 2560", 256, 8, "arduino:avr:mega"),
    BoardInfo("leonardo", "Arduino Leonardo", 32, 2, "arduino:avr:leonardo"),
    BoardInfo("micro", "Arduino Micro", 32, 2, "arduino:avr:micro"),
    BoardInfo("due", "Arduino Due (SAM3X8E)", 512, 96, "arduino:sam:arduino_due_x"),
    BoardInfo("mkr1000", "Arduino MKR1000 (SAMD21)", 256, 32, "arduino:samd:mkr1000"),
    BoardInfo("esp32", "ESP32 Dev Module", 4096, 520, "esp32:esp32:esp32"),
    BoardInfo("esp8266", "ESP8266 Generic", 4096, 80, "esp8266:esp8266:generic"),
    BoardInfo("pico", "Raspberry Pi Pico (RP2040)", 2048, 264, "rp2040:rp2040:rpipico"),
    BoardInfo("teensy40", "Teensy 4.0 (iMXRT1062)", 1984, 1024, "teensy:avr:teensy40"),
]

_BOARDS_BY_ID = {board.id: board for board in BOARD_CATALOG}


def get_board(board_id: str) -> BoardInfo:
    """
    Look up a board by its short id (case-insensitive).

    Args:
        board_id: Short board identifier (e.g., 'uno', 'ESP32')

    Returns:
        BoardInfo for the board

    Raises:
        BoardCatalogError: If the board is not in the catalog
    """
    board = _BOARDS_BY_ID.get((board_id or "").strip().lower())
    if board is None:
        raise BoardCatalogError(f"Unknown board: {board_id!r}")
    return board


def board_fqbn(board_id: str) -> str:
    """Return the fully-qualified board name for a short board id."""
    return get_board(board_id).fqbn
