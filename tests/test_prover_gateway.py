# Area: Proof Tests
"""Tests for proof jobs, the transparent pair and the command gateway."""

import subprocess
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest

from trap_grid.errors import GatewayError, InvalidArgumentError, VerificationBudgetExceededError
from trap_grid._commitment.grid import Grid
from trap_grid._commitment.merkle import build_commitment
from trap_grid._proof.codec import encode_fields
from trap_grid._proof.gateway import CommandGateway, TransparentGateway
from trap_grid._proof.prover import (
    DEFAULT_PROOF_SIZE,
    ProofJob,
    Prover,
    TransparentProver,
    read_transparent_witness,
)
from trap_grid._proof.request_builder import build_inputs
from trap_grid._proof.variants import CircuitVariant


@pytest.fixture
def grid():
    return Grid.from_traps([(3, 3), (5, 0)])


@pytest.fixture
def commitment(grid):
    return build_commitment(grid, salt=31337)


def prove(grid, commitment, variant, x, y):
    """Run the transparent prover synchronously and split its output."""
    request = build_inputs(x, y, grid.cell(x, y), grid, variant, commitment)
    output = TransparentProver().prove(request)
    k = variant.field_count(grid.size)
    return output[:k * 32], output[k * 32:]


class TestTransparentProver:
    """Tests for TransparentProver."""

    def test_output_is_public_inputs_then_proof(self, grid):
        """Test output = k*32 public bytes followed by a 2144-byte proof."""
        request = build_inputs(3, 3, True, grid, CircuitVariant.POSITION_ONLY)
        output = TransparentProver().prove(request)
        assert len(output) == 96 + DEFAULT_PROOF_SIZE

    def test_witness_is_readable(self, grid, commitment):
        """Test the proof carries (value, index, salt)."""
        _, proof = prove(grid, commitment, CircuitVariant.COMMITMENT_BOUND, 5, 0)
        assert read_transparent_witness(proof) == (1, 40, 31337)

    def test_witness_reader_rejects_other_bytes(self):
        """Test arbitrary bytes are not mistaken for a witness."""
        with pytest.raises(InvalidArgumentError):
            read_transparent_witness(b"\x00" * 2144)

    def test_minimum_proof_size(self):
        """Test that the proof must have room for the witness."""
        with pytest.raises(InvalidArgumentError):
            TransparentProver(proof_size=16)


class TestProofJob:
    """Tests for ProofJob."""

    def test_job_result_and_split(self, grid):
        """Test a job completes and splits at k*32."""
        request = build_inputs(3, 3, True, grid, CircuitVariant.POSITION_ONLY)
        with ThreadPoolExecutor(max_workers=1) as executor:
            job = ProofJob.start(TransparentProver(), request, 8, executor=executor)
            public_inputs, proof = job.split(timeout=5)
        assert job.done()
        assert public_inputs == encode_fields([3, 3, 1])
        assert len(proof) == DEFAULT_PROOF_SIZE

    def test_queued_job_can_be_cancelled(self, grid):
        """Test a job that has not started yet can be cancelled."""
        release = threading.Event()

        class BlockingProver(Prover):
            def prove(self, request):
                release.wait(5)
                return b""

        request = build_inputs(0, 0, False, grid, CircuitVariant.POSITION_ONLY)
        with ThreadPoolExecutor(max_workers=1) as executor:
            running = ProofJob.start(BlockingProver(), request, 8, executor=executor)
            queued = ProofJob.start(BlockingProver(), request, 8, executor=executor)
            assert queued.cancel() is True
            assert queued.cancelled()
            release.set()
            running.result(timeout=5)


class TestTransparentGateway:
    """Tests for TransparentGateway."""

    @pytest.mark.parametrize("variant", list(CircuitVariant))
    def test_accepts_honest_proof(self, grid, commitment, variant):
        """Test an honest proof verifies under every variant."""
        public_inputs, proof = prove(grid, commitment, variant, 3, 3)
        assert TransparentGateway(variant, 8).verify(proof, public_inputs) is True

    def test_rejects_proof_for_other_cell(self, grid, commitment):
        """Test a proof made for one cell fails against another cell's inputs."""
        _, proof = prove(grid, commitment, CircuitVariant.POSITION_ONLY, 3, 3)
        public_inputs = encode_fields([3, 4, 1])
        assert TransparentGateway(CircuitVariant.POSITION_ONLY, 8).verify(proof, public_inputs) is False

    def test_rejects_flipped_claim(self, grid, commitment):
        """Test flipping the public claim invalidates the proof."""
        _, proof = prove(grid, commitment, CircuitVariant.POSITION_ONLY, 3, 3)
        public_inputs = encode_fields([3, 3, 0])
        assert TransparentGateway(CircuitVariant.POSITION_ONLY, 8).verify(proof, public_inputs) is False

    def test_rejects_wrong_root(self, grid, commitment):
        """Test a Merkle proof against another grid's root fails."""
        _, proof = prove(grid, commitment, CircuitVariant.MERKLE_BOUND, 3, 3)
        other = build_commitment(Grid.from_traps([(3, 3)]), salt=4242)
        public_inputs, _ = prove(Grid.from_traps([(3, 3)]), other, CircuitVariant.MERKLE_BOUND, 3, 3)
        assert TransparentGateway(CircuitVariant.MERKLE_BOUND, 8).verify(proof, public_inputs) is False

    def test_rejects_garbage_proof(self):
        """Test malformed proof bytes are a rejection, not an error."""
        gateway = TransparentGateway(CircuitVariant.POSITION_ONLY, 8)
        assert gateway.verify(b"\x00" * 2144, encode_fields([0, 0, 0])) is False

    def test_budget_exceeded(self, grid, commitment):
        """Test a verification costing more than the budget raises."""
        public_inputs, proof = prove(grid, commitment, CircuitVariant.MERKLE_BOUND, 3, 3)
        gateway = TransparentGateway(CircuitVariant.MERKLE_BOUND, 8, budget=10)
        with pytest.raises(VerificationBudgetExceededError) as exc:
            gateway.verify(proof, public_inputs)
        assert exc.value.details == {"cost": 17, "budget": 10}

    def test_cheaper_variant_fits_budget(self, grid, commitment):
        """Test the same budget admits the position-only circuit."""
        public_inputs, proof = prove(grid, commitment, CircuitVariant.POSITION_ONLY, 3, 3)
        gateway = TransparentGateway(CircuitVariant.POSITION_ONLY, 8, budget=10)
        assert gateway.verify(proof, public_inputs) is True
        assert gateway.calls == 1


class TestCommandGateway:
    """Tests for CommandGateway with a mocked subprocess."""

    def completed(self, returncode=0, stdout="", stderr=""):
        result = MagicMock()
        result.returncode = returncode
        result.stdout = stdout
        result.stderr = stderr
        return result

    def test_empty_command_rejected(self):
        """Test a verifier command is required."""
        with pytest.raises(InvalidArgumentError):
            CommandGateway([])

    def test_placeholders_are_temp_files(self):
        """Test {proof} and {public_inputs} become files with the bytes."""
        seen = {}

        def fake_run(argv, **kwargs):
            with open(argv[2], "rb") as f:
                seen["proof"] = f.read()
            with open(argv[4], "rb") as f:
                seen["inputs"] = f.read()
            seen["argv"] = argv
            return self.completed(0)

        gateway = CommandGateway(["bb", "-p", "{proof}", "-i", "{public_inputs}"], timeout_seconds=3)
        with patch("trap_grid._proof.gateway.subprocess.run", side_effect=fake_run):
            assert gateway.verify(b"PROOF", b"INPUTS") is True

        assert seen["proof"] == b"PROOF"
        assert seen["inputs"] == b"INPUTS"
        assert seen["argv"][0:2] == ["bb", "-p"]

    def test_exit_zero_with_false_output(self):
        """Test a verifier printing 'false' counts as a rejection."""
        with patch("trap_grid._proof.gateway.subprocess.run", return_value=self.completed(0, "false\n")):
            assert CommandGateway(["verify"]).verify(b"p", b"i") is False

    def test_nonzero_exit_is_rejection(self):
        """Test a failing verifier rejects the proof."""
        with patch("trap_grid._proof.gateway.subprocess.run", return_value=self.completed(1, "", "invalid proof")):
            assert CommandGateway(["verify"]).verify(b"p", b"i") is False

    def test_budget_marker_raises(self):
        """Test a budget marker in the output maps to budget exceeded."""
        result = self.completed(1, "", "Error: ExceededLimit (Budget)")
        with patch("trap_grid._proof.gateway.subprocess.run", return_value=result):
            with pytest.raises(VerificationBudgetExceededError):
                CommandGateway(["verify"]).verify(b"p", b"i")

    def test_timeout_raises_budget_exceeded(self):
        """Test a verifier that runs past its timeout exceeded its budget."""
        error = subprocess.TimeoutExpired(cmd=["verify"], timeout=1)
        with patch("trap_grid._proof.gateway.subprocess.run", side_effect=error):
            with pytest.raises(VerificationBudgetExceededError) as exc:
                CommandGateway(["verify"], timeout_seconds=1).verify(b"p", b"i")
        assert exc.value.field == "verifier_timeout_seconds"

    def test_unstartable_verifier_raises_gateway_error(self):
        """Test a verifier binary that cannot be executed is a typed gateway failure."""
        error = FileNotFoundError(2, "No such file or directory", "verify")
        with patch("trap_grid._proof.gateway.subprocess.run", side_effect=error):
            with pytest.raises(GatewayError) as exc:
                CommandGateway(["verify", "{proof}"]).verify(b"p", b"i")
        assert exc.value.field == "verifier_command"
        assert exc.value.value == "verify"
        assert exc.value.__cause__ is error
