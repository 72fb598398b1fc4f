"""Unit tests for the static board catalog."""

import pytest

from godotino.config.board_catalog import (
    BOARD_CATALOG,
    BoardCatalogError,
    board_fqbn,
    get_board,
)


class TestBoardCatalog:
    """Tests for board lookup."""

    def test_get_board(self):
        board = get_board("uno")
        assert board.name == "Arduino Uno"
        assert board.fqbn == "arduino:avr:uno"
        assert board.flash_kb == 32
        assert board.ram_kb == 2

    def test_case_insensitive(self):
        assert get_board("ESP32") is get_board("esp32")
        assert get_board("  Mega ").id == "mega"

    @pytest.mark.parametrize(
        "board_id,fqbn",
        [
            ("nano", "arduino:avr:nano"),
            ("due", "arduino:sam:arduino_due_x"),
            ("esp8266", "esp8266:esp8266:generic"),
            ("pico", "rp2040:rp2040:rpipico"),
        ],
    )
    def test_board_fqbn(self, board_id, fqbn):
        assert board_fqbn(board_id) == fqbn

    @pytest.mark.parametrize("board_id", ["nonexistent", "", None])
    def test_unknown_board(self, board_id):
        with pytest.raises(BoardCatalogError):
            get_board(board_id)

    def test_ids_unique_and_lowercase(self):
        ids = [board.id for board in BOARD_CATALOG]
        assert len(ids) == len(set(ids))
        assert all(board_id == board_id.lower() for board_id in ids)

    def test_entries_immutable(self):
        with pytest.raises(AttributeError):
            get_board("uno").fqbn = "x"
