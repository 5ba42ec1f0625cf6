# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""High-level simulator module for using MPSim.

This module implements the simulation session that owns a matrix product state for the duration of a circuit
evaluation. Instructions are consumed one at a time and dispatched on their gate name:
  - single-qubit gates are contracted into the leg tensor of their qubit,
  - two-qubit gates are applied on neighboring sites, routed through adjacent SWAPs when the qubits are apart,
  - measurements sample an outcome, record it in the classical register and collapse the state.

Expectation values in the Z basis are computed on a snapshot of the state, so that querying them never changes the
trajectory used by subsequent gates. The `run` function executes a Qiskit circuit for a number of shots and
aggregates the measurement outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tqdm import tqdm

from .circuits.utils.dag_utils import convert_circuit_to_instructions
from .core.data_structures.networks import MPS
from .core.data_structures.simulation_parameters import SimParams
from .digital.gate_application import apply_single_qubit_gate
from .digital.measurement import average_zs, measure
from .digital.permutation import apply_long_range_gate
from .general import set_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    import numpy as np
    from numpy.typing import NDArray
    from qiskit.circuit import QuantumCircuit

    from .core.libraries.gate_library import BaseGate

__all__ = ["MPSSimulator", "SimulationResult", "run"]

SINGLE_QUBIT_GATES = frozenset({"id", "h", "x", "y", "z", "rx", "ry", "rz", "u"})
TWO_QUBIT_GATES = frozenset({"cx", "swap"})
UNIMPLEMENTED_GATES = frozenset({"cz", "cp"})


class MPSSimulator:
    """Simulation session on a matrix product state.

    Attributes:
        num_qubits: The number of qubits.
        sim_params: The simulation parameters.
        state: The canonical state evolved by the gates.
        snapshot: Copy of the state taken by the first measurement of a batch, or None.
        cbits: Measured outcome per qubit, None until the qubit is measured.
        measured: The qubits measured in the current batch.
        exp_val_z: Joint Z expectation over the measured qubits, evaluated on the snapshot.
        elapsed_time: Accumulated simulated gate duration.
        rng: Random number generator used for measurement sampling.
    """

    def __init__(
        self,
        num_qubits: int,
        sim_params: SimParams | None = None,
        rng: np.random.Generator | None = None,
        *,
        init_by_svd: bool = False,
    ) -> None:
        """Initializes the session in the |0...0⟩ state.

        Args:
            num_qubits: The number of qubits.
            sim_params: Simulation parameters. Defaults to SimParams().
            rng: Random number generator for measurements. Defaults to `sim_params.rng()`.
            init_by_svd: Build the initial state as a dense tensor and reduce it by sequential SVDs.
        """
        self.sim_params = sim_params if sim_params is not None else SimParams()
        self.num_qubits = num_qubits
        self.state = MPS(num_qubits, by_svd=init_by_svd)
        self.rng = rng if rng is not None else self.sim_params.rng()
        self._logger = set_logger("MPSSimulator", level=self.sim_params.loglevel)

        self.snapshot: MPS | None = None
        self.cbits: list[int | None] = [None] * num_qubits
        self.measured: set[int] = set()
        self.exp_val_z: float | None = None
        self.elapsed_time = 0.0

    def apply(self, gate: BaseGate, svd_cutoff: float | None = None) -> None:
        """Apply a single instruction.

        Args:
            gate: The instruction. Disabled instructions are skipped.
            svd_cutoff: Overrides the configured SVD cutoff for this instruction.

        Raises:
            NotImplementedError: If the gate is declared but cannot be simulated (CZ, CPhase), unknown, or acts on
                more than two qubits.
        """
        if not gate.enabled:
            self._logger.debug(f"skipping disabled {gate!r}")
            return
        if len(gate.sites) > 2:
            msg = f"Gate '{gate.name}' acts on {len(gate.sites)} qubits; at most two are supported."
            raise NotImplementedError(msg)
        for site in gate.sites:
            self.state.check_qubit(site)

        name = gate.name
        if name in SINGLE_QUBIT_GATES:
            self._logger.info(f"applying {gate!r}")
            apply_single_qubit_gate(self.state, gate.sites[0], gate.matrix)
            self.elapsed_time += self.sim_params.single_qubit_gate_time
        elif name in TWO_QUBIT_GATES:
            self._logger.info(f"applying {gate!r}")
            cutoff = self.sim_params.svd_cutoff if svd_cutoff is None else svd_cutoff
            first, second = gate.sites
            apply_long_range_gate(self.state, gate.matrix, first, second, cutoff, self._logger)
            self.elapsed_time += self.sim_params.two_qubit_gate_time
        elif name == "measure":
            self.measure(gate.sites[0])
        elif name in UNIMPLEMENTED_GATES:
            msg = f"Gate '{name}' is not supported by the MPS simulator."
            raise NotImplementedError(msg)
        else:
            msg = f"Unknown gate '{name}'."
            raise NotImplementedError(msg)

    def execute(self, instructions: Iterable[BaseGate]) -> None:
        """Apply an ordered instruction sequence.

        Args:
            instructions: The instructions in execution order.
        """
        for gate in instructions:
            self.apply(gate)

    def snap_wavefunc(self) -> None:
        """Take a snapshot of the state unless one exists for the current batch."""
        if self.snapshot is None:
            self.snapshot = self.state.copy()

    def measure(self, qubit: int) -> int:
        """Measure a qubit in the computational basis.

        The joint Z expectation over all qubits measured in the current batch is evaluated on the snapshot before
        the canonical state is collapsed.

        Args:
            qubit: The measured qubit.

        Returns:
            int: The outcome written to the classical register.
        """
        self.state.check_qubit(qubit)
        self.snap_wavefunc()
        assert self.snapshot is not None
        self.measured.add(qubit)
        self.exp_val_z = average_zs(self.snapshot, self.measured)

        outcome, p0 = measure(self.state, qubit, self.rng)
        self.cbits[qubit] = outcome
        self._logger.info(f"applying measure @ {qubit}, p0={p0:.6f}, outcome={outcome}, <Z>={self.exp_val_z:.6f}")
        self.elapsed_time += self.sim_params.two_qubit_gate_time
        return outcome

    def average_zs(self, qubits: Iterable[int]) -> float:
        """Joint Z expectation value over a set of qubits of the current state.

        Args:
            qubits: The qubits carrying a Pauli-Z.

        Returns:
            float: The normalized expectation value.
        """
        return average_zs(self.state, qubits)

    def get_expectation_value_z(self, instructions: Iterable[BaseGate]) -> float:
        """Evaluate a Z-basis expectation value without changing the trajectory.

        The instructions (typically basis changes followed by measurements) are applied to the current state. The
        query starts a new measurement batch, so the snapshot and the measured qubits of earlier measurements are
        discarded first. The joint Z expectation over the qubits measured by the instructions is read, then the state
        and the elapsed time are restored, and the snapshot, the classical register and the set of measured qubits
        are cleared.

        Args:
            instructions: The measurement kernel.

        Returns:
            float: The joint Z expectation value.

        Raises:
            ValueError: If the instructions do not contain any measurement.
        """
        saved = self.state.copy()
        elapsed_time = self.elapsed_time
        self.snapshot = None
        self.measured.clear()
        self.exp_val_z = None
        try:
            self.execute(instructions)
            exp_val = self.exp_val_z
        finally:
            self.state.restore(saved)
            self.elapsed_time = elapsed_time
            self.snapshot = None
            self.cbits = [None] * self.num_qubits
            self.measured.clear()

        if exp_val is None:
            msg = "The observable kernel does not measure any qubit."
            raise ValueError(msg)
        return exp_val

    def get_state(self) -> NDArray[np.complex128]:
        """Dense normalized state vector (qubit 0 is the least significant bit)."""
        return self.state.to_vec()


@dataclass
class SimulationResult:
    """Outcome of `run`.

    Attributes:
        counts: Number of shots per classical register value. The key lists the measured qubits from the highest
            to the lowest index (qubit 0 rightmost).
        cbits: Classical register of the last shot.
        elapsed_time: Simulated duration of one shot.
        exp_val_z: Joint Z expectation over the measured qubits of the last shot, or None.
        state: Final dense state vector of the last shot if requested.
    """

    counts: dict[str, int] = field(default_factory=dict)
    cbits: list[int | None] = field(default_factory=list)
    elapsed_time: float = 0.0
    exp_val_z: float | None = None
    state: NDArray[np.complex128] | None = None


def register_key(cbits: list[int | None]) -> str:
    """Bitstring of the measured qubits, qubit 0 rightmost."""
    return "".join(str(bit) for bit in reversed(cbits) if bit is not None)


def run(circuit: QuantumCircuit, sim_params: SimParams | None = None) -> SimulationResult:
    """Simulate a Qiskit circuit.

    Every shot starts from |0...0⟩ and applies the whole circuit. All shots share one random number generator, so a
    seeded SimParams reproduces the full sequence of outcomes.

    Args:
        circuit: The circuit to simulate.
        sim_params: Simulation parameters. Defaults to SimParams().

    Returns:
        SimulationResult: The aggregated results.
    """
    sim_params = sim_params if sim_params is not None else SimParams()
    instructions = convert_circuit_to_instructions(circuit)
    rng = sim_params.rng()

    result = SimulationResult()
    simulator = None
    for _ in tqdm(range(sim_params.shots), desc="Running shots", ncols=80, disable=not sim_params.verbose):
        simulator = MPSSimulator(circuit.num_qubits, sim_params, rng=rng)
        simulator.execute(instructions)
        key = register_key(simulator.cbits)
        result.counts[key] = result.counts.get(key, 0) + 1

    assert simulator is not None
    result.cbits = simulator.cbits
    result.elapsed_time = simulator.elapsed_time
    result.exp_val_z = simulator.exp_val_z
    if sim_params.get_state:
        result.state = simulator.get_state()
    return result
