# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Projective measurement and Z-basis expectation values.

The marginal probability of |0⟩ on a qubit is ⟨ψ|P0|ψ⟩ / ⟨ψ|ψ⟩, computed by a left-to-right sweep over the chain
with the projector inserted at the measured site. A uniform random draw selects the outcome and the matching
projector collapses the leg tensor. The state is not renormalized after the collapse, so every probability or
expectation value is divided by the squared norm explicitly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import opt_einsum as oe

from ..core.data_structures.networks import real_part
from ..core.libraries.gate_library import P0, P1, Measure

if TYPE_CHECKING:
    from collections.abc import Iterable

    import numpy as np
    from numpy.typing import NDArray

    from ..core.data_structures.networks import MPS

PROJECTORS = (P0().matrix, P1().matrix)
# Observable of a computational-basis measurement (Pauli-Z)
Z_MATRIX = Measure().matrix


def probability_zero(state: MPS, qubit: int) -> float:
    """Marginal probability of observing |0⟩ on a qubit.

    Args:
        state: The matrix product state.
        qubit: The measured qubit.

    Returns:
        float: ⟨ψ|P0|ψ⟩ / ⟨ψ|ψ⟩.
    """
    inner = state.wavefunc_inner()
    assert inner > 0, "Cannot measure the zero state."
    return float(state.average(qubit, PROJECTORS[0]) / inner)


def collapse(state: MPS, qubit: int, outcome: int) -> MPS:
    """Project a qubit onto a computational basis state without renormalizing.

    Args:
        state: The matrix product state.
        qubit: The measured qubit.
        outcome: 0 or 1.

    Returns:
        MPS: The collapsed state.
    """
    assert outcome in {0, 1}
    projector: NDArray[np.complex128] = PROJECTORS[outcome]
    if state.wavefunction is not None:
        state.reduce_to_mps()
    state.legs[qubit] = oe.contract("ab, bcd->acd", projector, state.legs[qubit])
    return state


def measure(state: MPS, qubit: int, rng: np.random.Generator) -> tuple[int, float]:
    """Projective measurement of a single qubit.

    Args:
        state: The matrix product state. It is collapsed in place.
        qubit: The measured qubit.
        rng: Random number generator for the outcome draw.

    Returns:
        tuple[int, float]: The outcome and the probability of |0⟩ before the collapse.
    """
    state.check_qubit(qubit)
    p0 = probability_zero(state, qubit)
    outcome = 0 if rng.random() < p0 else 1
    collapse(state, qubit, outcome)
    return outcome, p0


def average_zs(state: MPS, qubits: Iterable[int]) -> float:
    """Joint Z-basis expectation value ⟨Z...Z⟩ over a set of qubits.

    Args:
        state: The matrix product state. It is not modified.
        qubits: The qubits carrying a Pauli-Z. An empty set gives 1.

    Returns:
        float: The normalized expectation value.
    """
    operators = {}
    for qubit in qubits:
        state.check_qubit(qubit)
        operators[qubit] = Z_MATRIX
    value = real_part(state.sandwich(operators), f"Z expectation on qubits {sorted(operators)}")
    return float(value / state.wavefunc_inner())
