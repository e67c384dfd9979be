# Area: Shared Tests
"""Tests for error payloads and logging setup."""

import json
import logging

import pytest

from trap_grid.errors import (
    AlreadyEndedError,
    ConflictError,
    RejectedProofError,
    TrapGridError,
)
from trap_grid._shared.logging_config import log_game_error, setup_logging
from trap_grid._shared.logging_formatters import JSONFormatter


@pytest.fixture
def reset_logger():
    yield
    pkg_logger = logging.getLogger("trap_grid")
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers.clear()


class TestErrors:
    """Tests for the error hierarchy."""

    def test_to_dict(self):
        """Test the client payload carries kind, field and value."""
        error = RejectedProofError("nope", field="proof", value=2144, session_id=4)
        assert error.to_dict() == {
            "kind": "RejectedProof",
            "message": "nope",
            "field": "proof",
            "value": 2144,
            "session_id": 4,
            "details": {},
        }

    def test_already_ended_is_conflict(self):
        """Test AlreadyEnded is a Conflict with its own kind."""
        error = AlreadyEndedError("done")
        assert isinstance(error, ConflictError)
        assert isinstance(error, TrapGridError)
        assert error.kind == "AlreadyEnded"

    def test_str_names_kind_and_field(self):
        """Test the exception text shows the kind and offending field."""
        assert str(ConflictError("taken", field="cell", value=(1, 2))) == "[Conflict] taken (cell=(1, 2))"

    def test_error_block(self):
        """Test the formatted block lists session, field and details."""
        block = ConflictError("taken", field="cell", value=(1, 2), session_id=9, details={"x": 1}).format_error_log()
        assert "TRAP GRID ERROR" in block
        assert "Error Kind:   Conflict" in block
        assert "Session:      9" in block
        assert '"x": 1' in block


class TestLogging:
    """Tests for setup_logging and log_game_error."""

    def test_json_log_file(self, tmp_path, reset_logger):
        """Test records reach the JSON file with their context fields."""
        log_file = tmp_path / "logs" / "trap.log"
        setup_logging(str(log_file), "debug")

        log_game_error(ConflictError("taken", field="cell", value=(0, 0), session_id=3))
        for handler in logging.getLogger("trap_grid").handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert lines[-1]["level"] == "ERROR"
        assert lines[-1]["session_id"] == 3
        assert lines[-1]["error_kind"] == "Conflict"

    def test_error_block_goes_to_stderr(self, capsys, reset_logger):
        """Test log_game_error prints the block on stderr."""
        setup_logging(None)
        log_game_error(RejectedProofError("nope", session_id=1))
        assert "RejectedProof" in capsys.readouterr().err

    def test_json_formatter_plain_record(self):
        """Test records without context produce the base fields only."""
        record = logging.LogRecord("trap_grid.x", logging.INFO, __file__, 1, "hello %s", ("there",), None)
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "hello there"
        assert data["logger"] == "trap_grid.x"
        assert "session_id" not in data
