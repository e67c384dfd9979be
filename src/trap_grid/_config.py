# Area: Shared
"""
trap_grid._config — Deployment configuration
============================================

Loads and validates the settings one deployment runs with: grid size,
circuit variant, storage, logging, winner policy and verifier command.

Sources, later ones win:
    1. Model defaults
    2. JSON config file
    3. Environment variables (TRAP_GRID_*), with .env loaded first
"""

import json
import logging
import os
import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import InvalidArgumentError
from ._proof.gateway import CommandGateway, MoveVerificationGateway, TransparentGateway
from ._proof.variants import CircuitVariant
from ._session.enums import Role
from ._session.registry import SessionRegistry
from ._session.game_session import GameSessionService
from ._session.winner_policy import POLICY_NAMES, WinnerPolicy, build_winner_policy

logger = logging.getLogger("trap_grid.config")

# Environment variable -> config key
ENV_MAPPINGS = {
    "TRAP_GRID_GRID_SIZE": "grid_size",
    "TRAP_GRID_CIRCUIT_VARIANT": "circuit_variant",
    "TRAP_GRID_GAME_CONTRACT_ID": "game_contract_id",
    "TRAP_GRID_DB_PATH": "db_path",
    "TRAP_GRID_LOG_FILE": "log_file",
    "TRAP_GRID_LOG_LEVEL": "log_level",
    "TRAP_GRID_AUTO_END": "auto_end_when_exhausted",
    "TRAP_GRID_WINNER_POLICY": "winner_policy",
    "TRAP_GRID_WINNER_THRESHOLD": "winner_threshold",
    "TRAP_GRID_TIE_WINNER": "tie_winner",
    "TRAP_GRID_VERIFIER_COMMAND": "verifier_command",
    "TRAP_GRID_VERIFIER_TIMEOUT": "verifier_timeout_seconds",
    "TRAP_GRID_USE_TRANSPARENT_GATEWAY": "use_transparent_gateway",
}


class TrapGridConfig(BaseModel):
    """Validated deployment settings."""

    grid_size: int = Field(default=8, ge=1, le=64)
    circuit_variant: CircuitVariant = CircuitVariant.MERKLE_BOUND
    game_contract_id: str = Field(default="trap-grid", min_length=1)
    db_path: str = "trap_grid.db"
    log_file: Optional[str] = "trap_grid.log"
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    auto_end_when_exhausted: bool = True
    winner_policy: str = "hit_ratio"
    winner_threshold: Optional[float] = 0.5
    tie_winner: Role = Role.HOLDER
    verifier_command: Optional[List[str]] = None
    verifier_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    use_transparent_gateway: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("winner_policy")
    @classmethod
    def _known_policy(cls, value: str) -> str:
        if value not in POLICY_NAMES:
            raise ValueError(f"winner_policy must be one of {POLICY_NAMES}")
        return value

    @field_validator("verifier_command", mode="before")
    @classmethod
    def _split_command(cls, value: Any) -> Any:
        if isinstance(value, str):
            return shlex.split(value) or None
        return value

    def build_winner_policy(self) -> WinnerPolicy:
        return build_winner_policy(self.winner_policy, self.winner_threshold, self.tie_winner)

    def build_gateway(self) -> MoveVerificationGateway:
        """
        CommandGateway when a verifier command is set.

        The transparent gateway is only built when ``use_transparent_gateway``
        asks for it; with neither setting there is no verifier to use.
        """
        if self.verifier_command:
            return CommandGateway(self.verifier_command, self.verifier_timeout_seconds)
        if self.use_transparent_gateway:
            logger.warning("Using the transparent gateway; proofs are not zero-knowledge")
            return TransparentGateway(self.circuit_variant, self.grid_size)
        raise InvalidArgumentError(
            "no verifier configured; set verifier_command or use_transparent_gateway",
            field="verifier_command",
            value=None,
        )

    def build_service(
        self,
        registry: SessionRegistry,
        gateway: Optional[MoveVerificationGateway] = None,
        winner_policy: Optional[WinnerPolicy] = None,
    ) -> GameSessionService:
        """Wire a GameSessionService from these settings."""
        return GameSessionService(
            db_path=self.db_path,
            gateway=gateway or self.build_gateway(),
            registry=registry,
            winner_policy=winner_policy or self.build_winner_policy(),
            variant=self.circuit_variant,
            grid_size=self.grid_size,
            game_contract_id=self.game_contract_id,
            auto_end_when_exhausted=self.auto_end_when_exhausted,
        )


def _env_overrides(environ) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in environ:
            overrides[config_key] = environ[env_key]
    return overrides


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
) -> TrapGridConfig:
    """
    Load config from file and environment.

    Args:
        config_path: JSON config file, optional
        env_file: .env file to load; defaults to the nearest one above the cwd

    Returns:
        Validated TrapGridConfig

    Raises:
        InvalidArgumentError: If the file is unreadable or a value is invalid
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    data: Dict[str, Any] = {}
    if config_path:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidArgumentError(f"config file is not valid JSON: {e}", field="config", value=str(path))
        else:
            logger.warning(f"Config file not found: {path}, using defaults")

    data.update(_env_overrides(os.environ))

    try:
        return TrapGridConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or None
        raise InvalidArgumentError(
            f"invalid configuration: {first['msg']}",
            field=field,
            value=first.get("input"),
            details={"errors": len(e.errors())},
        )
