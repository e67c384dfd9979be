# Area: Proof
"""
trap_grid._proof.gateway — Move verification gateway
====================================================

The verifier is an external collaborator keyed to one verification
key per circuit variant. It answers a single question: is this proof
valid for these public input bytes?

Outcomes:
- True                              proof accepted
- False                             proof cryptographically invalid
- VerificationBudgetExceededError   the verifier ran out of metered
                                    compute; a cheaper circuit is needed
- GatewayError                      the verifier could not be run

Implementations:
- CommandGateway: shells out to a verifier CLI
- TransparentGateway: test double paired with TransparentProver
"""

from __future__ import annotations
import logging
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import GatewayError, InvalidArgumentError, VerificationBudgetExceededError
from .._commitment.field import hash_leaf
from .._commitment.merkle import verify_merkle
from .codec import decode_public_inputs
from .prover import read_transparent_witness
from .variants import CircuitVariant, CommitmentBoundInputs, MerkleBoundInputs

logger = logging.getLogger("trap_grid.proof.gateway")

BUDGET_MARKERS = ("ExceededLimit", "Budget")


class MoveVerificationGateway(ABC):
    """Abstract proof verifier for one circuit variant."""

    @abstractmethod
    def verify(self, proof: bytes, public_inputs: bytes) -> bool:
        """
        Verify a proof against its public input bytes.

        Args:
            proof: Proof bytes (prover output minus the public input prefix)
            public_inputs: k concatenated 32-byte fields

        Returns:
            True if the proof is valid, False otherwise

        Raises:
            VerificationBudgetExceededError: Verification did not fit the compute budget
            GatewayError: The verifier could not be run
        """


class TransparentGateway(MoveVerificationGateway):
    """
    Test-double verifier for TransparentProver proofs.

    Checks the circuit relation directly from the witness carried in
    the proof. An optional metered budget charges ``cost_per_field``
    for every public input field.
    """

    def __init__(
        self,
        variant: CircuitVariant,
        grid_size: int,
        budget: Optional[int] = None,
        cost_per_field: int = 1,
    ):
        self.variant = variant
        self.grid_size = grid_size
        self.budget = budget
        self.cost_per_field = cost_per_field
        self.calls = 0

    def verify(self, proof: bytes, public_inputs: bytes) -> bool:
        self.calls += 1
        k = self.variant.field_count(self.grid_size)
        cost = k * self.cost_per_field
        if self.budget is not None and cost > self.budget:
            raise VerificationBudgetExceededError(
                f"verification needs {cost} units, budget is {self.budget}",
                field="circuit_variant",
                value=self.variant.value,
                details={"cost": cost, "budget": self.budget},
            )

        try:
            public = decode_public_inputs(public_inputs, self.variant, self.grid_size)
            value, index, salt = read_transparent_witness(proof)
        except InvalidArgumentError as e:
            logger.info("Malformed proof or inputs: %s", e)
            return False

        if value not in (0, 1) or bool(value) != public.claim:
            return False
        if index != public.x * self.grid_size + public.y:
            return False

        if isinstance(public, CommitmentBoundInputs):
            return hash_leaf(index, value, salt) == public.leaf_commitment
        if isinstance(public, MerkleBoundInputs):
            return verify_merkle(public.root, hash_leaf(index, value, salt), index, public.proof, self.grid_size)
        return True


class CommandGateway(MoveVerificationGateway):
    """
    Verifier backed by an external command.

    The command template may reference ``{proof}`` and
    ``{public_inputs}``; both are replaced by temp file paths holding
    the respective bytes. Exit code 0 means accepted.
    """

    def __init__(self, command: Sequence[str], timeout_seconds: Optional[float] = None):
        if not command:
            raise InvalidArgumentError("verifier command must not be empty", field="verifier_command", value=command)
        self.command = list(command)
        self.timeout_seconds = timeout_seconds

    def _render(self, proof_path: Path, inputs_path: Path) -> List[str]:
        return [
            part.format(proof=str(proof_path), public_inputs=str(inputs_path))
            for part in self.command
        ]

    def verify(self, proof: bytes, public_inputs: bytes) -> bool:
        with tempfile.TemporaryDirectory(prefix="trap-grid-verify-") as tmp:
            proof_path = Path(tmp) / "proof"
            inputs_path = Path(tmp) / "public_inputs"
            proof_path.write_bytes(proof)
            inputs_path.write_bytes(public_inputs)
            argv = self._render(proof_path, inputs_path)
            logger.debug("Running verifier: %s", argv)
            try:
                completed = subprocess.run(
                    argv, capture_output=True, text=True, timeout=self.timeout_seconds
                )
            except subprocess.TimeoutExpired:
                raise VerificationBudgetExceededError(
                    f"verifier did not finish within {self.timeout_seconds}s",
                    field="verifier_timeout_seconds",
                    value=self.timeout_seconds,
                )
            except OSError as e:
                raise GatewayError(
                    f"verifier could not be started: {e}",
                    field="verifier_command",
                    value=argv[0],
                ) from e

        output = (completed.stdout or "") + (completed.stderr or "")
        if completed.returncode == 0:
            return completed.stdout.strip().lower() != "false"
        if any(marker in output for marker in BUDGET_MARKERS):
            raise VerificationBudgetExceededError(
                "verifier exceeded its compute budget",
                field="verifier_output",
                value=output.strip()[-200:],
            )
        logger.info("Verifier rejected proof (exit %d)", completed.returncode)
        return False
