# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Qubit routing for long-range two-qubit gates.

A two-qubit gate on qubits that are not neighbors in the chain is applied by moving the lower of the two qubits,
one adjacent SWAP at a time, to the site just left of its partner. The gate is then applied on the neighboring pair
and the mirror chain of SWAPs moves the qubit back, so that every logical qubit ends up on the site it started from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.libraries.gate_library import SWAP
from .gate_application import apply_two_qubit_gate

if TYPE_CHECKING:
    from logging import Logger

    import numpy as np
    from numpy.typing import NDArray

    from ..core.data_structures.networks import MPS

SWAP_MATRIX = SWAP().matrix


def permute_to(state: MPS, qubit: int, target: int, cutoff: float, logger: Logger | None = None) -> MPS:
    """Move a qubit to a target site with a chain of adjacent SWAPs.

    Args:
        state: The matrix product state.
        qubit: The current site of the qubit.
        target: The site the qubit is moved to.
        cutoff: Relative SVD truncation threshold of every SWAP.
        logger: Optional logger for the routing steps.

    Returns:
        MPS: The updated state.
    """
    if logger is not None:
        logger.info(f"permute {qubit} to {target}")
    delta = 1 if qubit < target else -1
    while qubit != target:
        apply_two_qubit_gate(state, SWAP_MATRIX, qubit, qubit + delta, cutoff)
        qubit += delta
    return state


def apply_long_range_gate(
    state: MPS,
    matrix: NDArray[np.complex128],
    first_qubit: int,
    second_qubit: int,
    cutoff: float,
    logger: Logger | None = None,
) -> MPS:
    """Apply a two-qubit gate on arbitrary qubits.

    Neighboring qubits are updated directly. Otherwise the lower qubit is moved next to the higher one, the gate is
    applied on the neighboring pair and the move is undone.

    Args:
        state: The matrix product state.
        matrix: The 4x4 gate matrix in the basis |q_first q_second⟩.
        first_qubit: The first gate qubit (the control of a controlled gate).
        second_qubit: The second gate qubit.
        cutoff: Relative SVD truncation threshold.
        logger: Optional logger for the routing steps.

    Returns:
        MPS: The updated state.
    """
    assert first_qubit != second_qubit, "A two-qubit gate needs two distinct qubits."
    if first_qubit < second_qubit - 1:
        permute_to(state, first_qubit, second_qubit - 1, cutoff, logger)
        apply_two_qubit_gate(state, matrix, second_qubit - 1, second_qubit, cutoff)
        permute_to(state, second_qubit - 1, first_qubit, cutoff, logger)
    elif second_qubit < first_qubit - 1:
        permute_to(state, second_qubit, first_qubit - 1, cutoff, logger)
        apply_two_qubit_gate(state, matrix, first_qubit, first_qubit - 1, cutoff)
        permute_to(state, first_qubit - 1, second_qubit, cutoff, logger)
    else:
        apply_two_qubit_gate(state, matrix, first_qubit, second_qubit, cutoff)
    return state
