# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Track single-site magnetizations of a layered circuit without disturbing it."""

from __future__ import annotations

import numpy as np

from mqt.mpsim.core.data_structures.simulation_parameters import SimParams
from mqt.mpsim.core.libraries.gate_library import GateLibrary
from mqt.mpsim.simulator import MPSSimulator

num_qubits = 10
layers = 6
sim_params = SimParams(svd_cutoff=1e-8, seed=0, verbose=False)

if __name__ == "__main__":
    sim = MPSSimulator(num_qubits, sim_params)
    for layer in range(layers):
        for qubit in range(num_qubits):
            sim.apply(GateLibrary.rx([0.3 * (layer + 1)]).set_sites(qubit))
        for qubit in range(layer % 2, num_qubits - 1, 2):
            sim.apply(GateLibrary.cx().set_sites(qubit, qubit + 1))

        magnetization = [
            sim.get_expectation_value_z([GateLibrary.measure().set_sites(qubit)]) for qubit in range(num_qubits)
        ]
        print(f"layer {layer}: max bond {sim.state.get_max_bond()}, <Z> = {np.round(magnetization, 3)}")
