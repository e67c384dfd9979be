# Area: Shared Tests
"""Tests for configuration loading."""

import json
import os

import pytest

from trap_grid.errors import InvalidArgumentError
from trap_grid._config import TrapGridConfig, load_config
from trap_grid._proof.gateway import CommandGateway, TransparentGateway
from trap_grid._proof.variants import CircuitVariant
from trap_grid._session.enums import Role
from trap_grid._session.game_session import GameSessionService
from trap_grid._session.registry import InMemorySessionRegistry
from trap_grid._session.winner_policy import HitThresholdPolicy


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from TRAP_GRID_* variables and stray .env files."""
    for key in list(os.environ):
        if key.startswith("TRAP_GRID_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestTrapGridConfig:
    """Tests for the TrapGridConfig model."""

    def test_defaults(self):
        """Test the reference deployment defaults."""
        config = TrapGridConfig()
        assert config.grid_size == 8
        assert config.circuit_variant is CircuitVariant.MERKLE_BOUND
        assert config.winner_policy == "hit_ratio"
        assert config.tie_winner is Role.HOLDER
        assert config.auto_end_when_exhausted is True

    def test_command_string_is_split(self):
        """Test a verifier command string becomes argv."""
        config = TrapGridConfig(verifier_command="bb verify -p {proof}")
        assert config.verifier_command == ["bb", "verify", "-p", "{proof}"]

    def test_build_gateway(self):
        """Test the gateway follows the verifier command setting."""
        gateway = TrapGridConfig(verifier_command=["verify"], verifier_timeout_seconds=2).build_gateway()
        assert isinstance(gateway, CommandGateway)
        assert gateway.timeout_seconds == 2

    def test_transparent_gateway_is_opt_in(self):
        """Test the transparent gateway is never chosen without asking."""
        with pytest.raises(InvalidArgumentError) as exc:
            TrapGridConfig().build_gateway()
        assert exc.value.field == "verifier_command"
        gateway = TrapGridConfig(use_transparent_gateway=True).build_gateway()
        assert isinstance(gateway, TransparentGateway)

    def test_build_winner_policy(self):
        """Test the winner policy is built from its settings."""
        config = TrapGridConfig(winner_policy="hit_threshold", winner_threshold=5)
        policy = config.build_winner_policy()
        assert isinstance(policy, HitThresholdPolicy)
        assert policy.min_hits == 5

    def test_build_service(self, tmp_path):
        """Test a service is wired from the settings."""
        config = TrapGridConfig(
            db_path=str(tmp_path / "g.db"), grid_size=4, circuit_variant="position_only",
            use_transparent_gateway=True,
        )
        service = config.build_service(InMemorySessionRegistry())
        assert isinstance(service, GameSessionService)
        assert service.grid_size == 4
        assert service.variant is CircuitVariant.POSITION_ONLY


class TestLoadConfig:
    """Tests for load_config()."""

    def test_file_values(self, tmp_path):
        """Test values are read from the JSON file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"grid_size": 4, "circuit_variant": "commitment_bound"}))
        config = load_config(path)
        assert config.grid_size == 4
        assert config.circuit_variant is CircuitVariant.COMMITMENT_BOUND

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Test TRAP_GRID_* variables win over the file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"grid_size": 4}))
        monkeypatch.setenv("TRAP_GRID_GRID_SIZE", "6")
        monkeypatch.setenv("TRAP_GRID_AUTO_END", "false")
        config = load_config(path)
        assert config.grid_size == 6
        assert config.auto_end_when_exhausted is False

    def test_dotenv_file_is_loaded(self, tmp_path):
        """Test values from a .env file are applied."""
        env_file = tmp_path / "custom.env"
        env_file.write_text("TRAP_GRID_WINNER_POLICY=move_count\n")
        config = load_config(env_file=env_file)
        os.environ.pop("TRAP_GRID_WINNER_POLICY", None)
        assert config.winner_policy == "move_count"

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing config file falls back to defaults."""
        config = load_config(tmp_path / "absent.json")
        assert config.grid_size == 8

    def test_invalid_value(self, monkeypatch):
        """Test an invalid value is reported as InvalidArgument."""
        monkeypatch.setenv("TRAP_GRID_CIRCUIT_VARIANT", "groth16")
        with pytest.raises(InvalidArgumentError) as exc:
            load_config()
        assert exc.value.field == "circuit_variant"

    def test_invalid_json(self, tmp_path):
        """Test a broken config file is InvalidArgument."""
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(InvalidArgumentError):
            load_config(path)
