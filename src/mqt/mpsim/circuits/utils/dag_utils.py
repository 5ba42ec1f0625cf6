# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Conversion of Qiskit circuits into simulator instructions.

The circuit is turned into its DAG representation and walked in topological order. Every operation is mapped onto
a gate object from the GateLibrary with its parameters bound to floats and its qubit indices set as sites.
Barriers are dropped; any other operation without a counterpart in the GateLibrary is rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from qiskit.circuit import ParameterExpression
from qiskit.converters import circuit_to_dag

from ...core.libraries.gate_library import GateLibrary

if TYPE_CHECKING:
    from qiskit.circuit import QuantumCircuit
    from qiskit.dagcircuit import DAGCircuit, DAGOpNode

    from ...core.libraries.gate_library import BaseGate

# Qiskit names that map onto a differently named library gate
GATE_ALIASES = {"u3": "u", "cnot": "cx", "i": "id"}

IGNORED_OPERATIONS = {"barrier"}


def bind_parameter(value: object, gate_name: str, index: int) -> object:
    """Resolve a Qiskit parameter expression to a number.

    Args:
        value: The raw operation parameter.
        gate_name: The name of the operation.
        index: Position of the parameter.

    Returns:
        object: A float for bound expressions, the unchanged value otherwise.

    Raises:
        ValueError: If the expression still contains free parameters.
    """
    if isinstance(value, ParameterExpression):
        if value.parameters:
            msg = f"Invalid parameter {index} for gate '{gate_name}': unbound expression {value}"
            raise ValueError(msg)
        return float(value)
    return value


def convert_node(dag: DAGCircuit, node: DAGOpNode) -> BaseGate:
    """Convert a single DAG node into a gate object.

    Args:
        dag: The DAG the node belongs to.
        node: The operation node.

    Returns:
        BaseGate: The gate with parameters and sites set.

    Raises:
        ValueError: If the operation is not part of the GateLibrary.
    """
    name = GATE_ALIASES.get(node.op.name, node.op.name)
    if not hasattr(GateLibrary, name):
        msg = f"Unsupported operation '{node.op.name}'"
        raise ValueError(msg)

    attr = getattr(GateLibrary, name)
    params = [bind_parameter(p, name, i) for i, p in enumerate(node.op.params)]
    gate_object = attr(params) if params else attr()

    sites = [dag.find_bit(qubit).index for qubit in node.qargs]
    gate_object.set_sites(*sites)
    return gate_object


def convert_circuit_to_instructions(circuit: QuantumCircuit) -> list[BaseGate]:
    """Convert a QuantumCircuit into an ordered list of gate objects.

    Args:
        circuit: The circuit to convert.

    Returns:
        list[BaseGate]: The instruction stream in execution order.
    """
    dag = circuit_to_dag(circuit)
    algorithm = []
    for node in dag.topological_op_nodes():
        if node.op.name in IGNORED_OPERATIONS:
            continue
        algorithm.append(convert_node(dag, node))
    return algorithm
