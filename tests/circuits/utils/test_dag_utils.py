# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for the conversion of Qiskit circuits into simulator instructions.

This module verifies that gates are mapped onto the GateLibrary with bound parameters and the correct qubit
indices, that barriers are dropped and that unsupported operations or unbound parameters are rejected.
"""

from __future__ import annotations

import numpy as np
import pytest
from qiskit.circuit import Parameter, QuantumCircuit, QuantumRegister
from qiskit.converters import circuit_to_dag

from mqt.mpsim.circuits.utils.dag_utils import bind_parameter, convert_circuit_to_instructions, convert_node


def test_convert_circuit_to_instructions() -> None:
    """Test names, sites and parameters of a converted circuit."""
    qc = QuantumCircuit(3, 3)
    qc.h(0)
    qc.cx(0, 2)
    qc.barrier()
    qc.rz(0.5, 1)
    qc.u(0.1, 0.2, 0.3, 2)
    qc.measure(2, 0)

    instructions = convert_circuit_to_instructions(qc)
    assert [gate.name for gate in instructions] == ["h", "cx", "rz", "u", "measure"]
    assert instructions[1].sites == [0, 2]
    assert instructions[2].params == [0.5]
    assert instructions[3].params == [0.1, 0.2, 0.3]
    assert instructions[4].sites == [2]


def test_topological_order_respects_dependencies() -> None:
    """Test that gates on the same qubit keep their circuit order."""
    qc = QuantumCircuit(2)
    qc.x(1)
    qc.h(1)
    qc.cx(1, 0)
    instructions = convert_circuit_to_instructions(qc)
    assert [gate.name for gate in instructions] == ["x", "h", "cx"]
    assert instructions[2].sites == [1, 0]


def test_multiple_registers() -> None:
    """Test that qubit indices are global across registers."""
    first = QuantumRegister(2, "a")
    second = QuantumRegister(2, "b")
    qc = QuantumCircuit(first, second)
    qc.x(second[1])
    instructions = convert_circuit_to_instructions(qc)
    assert instructions[0].sites == [3]


def test_declared_but_unsimulated_gates_convert() -> None:
    """Test that CZ and CPhase are converted; the simulator rejects them later."""
    qc = QuantumCircuit(2)
    qc.cz(0, 1)
    qc.cp(np.pi / 4, 0, 1)
    instructions = convert_circuit_to_instructions(qc)
    assert [gate.name for gate in instructions] == ["cz", "cp"]
    assert np.isclose(instructions[1].params[0], np.pi / 4)


def test_unsupported_operation() -> None:
    """Test that operations outside the GateLibrary raise ValueError."""
    qc = QuantumCircuit(3)
    qc.ccx(0, 1, 2)
    with pytest.raises(ValueError, match="Unsupported operation 'ccx'"):
        convert_circuit_to_instructions(qc)


def test_unbound_parameter() -> None:
    """Test that free parameters are rejected and bound ones are converted."""
    theta = Parameter("theta")
    qc = QuantumCircuit(1)
    qc.rx(theta, 0)
    with pytest.raises(ValueError, match="Invalid parameter 0 for gate 'rx'"):
        convert_circuit_to_instructions(qc)

    bound = qc.assign_parameters({theta: 0.25})
    instructions = convert_circuit_to_instructions(bound)
    assert instructions[0].params == [0.25]


def test_bind_parameter() -> None:
    """Test that plain numbers pass through unchanged."""
    assert bind_parameter(0.5, "rx", 0) == 0.5
    theta = Parameter("theta")
    assert bind_parameter(theta.bind({theta: 1.5}), "rx", 0) == 1.5


def test_convert_node() -> None:
    """Test conversion of a single DAG node."""
    qc = QuantumCircuit(2)
    qc.swap(1, 0)
    dag = circuit_to_dag(qc)
    node = next(iter(dag.topological_op_nodes()))
    gate = convert_node(dag, node)
    assert gate.name == "swap"
    assert gate.sites == [1, 0]
