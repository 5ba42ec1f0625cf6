# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Sample a GHZ circuit whose CNOTs connect distant qubits."""

from __future__ import annotations

from qiskit.circuit import QuantumCircuit

from mqt.mpsim.core.data_structures.simulation_parameters import SimParams
from mqt.mpsim.simulator import run

# Define the circuit
num_qubits = 8
circuit = QuantumCircuit(num_qubits, num_qubits)
circuit.h(0)
for qubit in range(1, num_qubits):
    circuit.cx(0, qubit)
circuit.measure(range(num_qubits), range(num_qubits))

# Define the simulation parameters
sim_params = SimParams(shots=1024, seed=42, svd_cutoff=1e-6)

if __name__ == "__main__":
    result = run(circuit, sim_params)
    for bitstring, count in sorted(result.counts.items()):
        print(f"{bitstring}: {count}")
    print(f"<Z...Z> of the last shot: {result.exp_val_z:.4f}")
    print(f"Simulated duration per shot: {result.elapsed_time:.2e} s")
