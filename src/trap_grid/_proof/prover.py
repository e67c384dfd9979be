# Area: Proof
"""
trap_grid._proof.prover — Proof generation boundary
===================================================

The external prover is a pure function ``(public, private) -> bytes``
whose output is ``public_inputs || proof``. Generation can take a long
time, so it runs off the critical path as a cancellable job; nothing
here puts a time bound on it.

TransparentProver is a test double. Its "proof" simply carries the
witness, so it offers no zero knowledge at all. It must be wired in
explicitly together with TransparentGateway and is never picked as a
fallback for a missing real prover.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional, Tuple

from ..errors import InvalidArgumentError
from .._commitment.field import FIELD_BYTES, be32, from_be32
from .codec import encode_public_inputs, split_prover_output
from .request_builder import ProofRequest

logger = logging.getLogger("trap_grid.proof.prover")

# Size of an UltraHonk proof for the reference circuits
DEFAULT_PROOF_SIZE = 2144
WITNESS_MAGIC = b"TGWITNS1"


class Prover(ABC):
    """
    Abstract proof generator.

    Subclass this to drive a real proving backend. ``prove`` may block
    for a long time; callers run it through ProofJob.
    """

    @abstractmethod
    def prove(self, request: ProofRequest) -> bytes:
        """
        Produce the combined prover output for one move.

        Args:
            request: Public and private inputs

        Returns:
            ``public_inputs || proof`` bytes
        """


class ProofJob:
    """
    One in-flight proof generation.

    Wraps a Future so the holder can wait on, poll, or cancel it.
    """

    def __init__(self, request: ProofRequest, future: Future, grid_size: int):
        self.request = request
        self.grid_size = grid_size
        self._future = future

    @classmethod
    def start(
        cls,
        prover: Prover,
        request: ProofRequest,
        grid_size: int,
        executor: Optional[Executor] = None,
    ) -> "ProofJob":
        """Submit ``prover.prove(request)`` to an executor."""
        if executor is None:
            executor = _default_executor()
        logger.info("Starting %s proof job", request.variant.value)
        return cls(request, executor.submit(prover.prove, request), grid_size)

    def cancel(self) -> bool:
        return self._future.cancel()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> bytes:
        return self._future.result(timeout=timeout)

    def split(self, timeout: Optional[float] = None) -> Tuple[bytes, bytes]:
        """Wait for the output and split it into (public_inputs, proof)."""
        k = self.request.variant.field_count(self.grid_size)
        return split_prover_output(self.result(timeout=timeout), k)


_EXECUTOR: Optional[ThreadPoolExecutor] = None


def _default_executor() -> ThreadPoolExecutor:
    global _EXECUTOR
    if _EXECUTOR is None:
        _EXECUTOR = ThreadPoolExecutor(max_workers=2, thread_name_prefix="trap-grid-prover")
    return _EXECUTOR


class TransparentProver(Prover):
    """Test-double prover whose proof bytes expose the witness."""

    def __init__(self, proof_size: int = DEFAULT_PROOF_SIZE):
        minimum = len(WITNESS_MAGIC) + 3 * FIELD_BYTES
        if proof_size < minimum:
            raise InvalidArgumentError(
                f"proof size must be at least {minimum} bytes", field="proof_size", value=proof_size
            )
        self.proof_size = proof_size

    def prove(self, request: ProofRequest) -> bytes:
        private = request.private
        witness = (
            WITNESS_MAGIC
            + be32(int(private.cell_value))
            + be32(private.leaf_index)
            + be32(private.salt)
        )
        proof = witness.ljust(self.proof_size, b"\x00")
        return encode_public_inputs(request.public) + proof


def read_transparent_witness(proof: bytes) -> Tuple[int, int, int]:
    """Extract (cell_value, leaf_index, salt) from a TransparentProver proof."""
    start = len(WITNESS_MAGIC)
    if len(proof) < start + 3 * FIELD_BYTES or not proof.startswith(WITNESS_MAGIC):
        raise InvalidArgumentError("not a transparent witness proof", field="proof", value=len(proof))
    words = [
        from_be32(proof[start + i * FIELD_BYTES:start + (i + 1) * FIELD_BYTES]) for i in range(3)
    ]
    return words[0], words[1], words[2]
