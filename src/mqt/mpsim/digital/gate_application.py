# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Local gate updates on a matrix product state.

Single-qubit gates are contracted directly into the leg tensor of their qubit. Two-qubit gates on neighboring
qubits merge both legs and the bond between them into one tensor, apply the gate and split the result again with a
truncated SVD. The lower site receives the left isometry, the bond the retained singular values, and the higher site
the remaining factor after its indices have been brought back into leg order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import opt_einsum as oe

from ..core.methods.decompositions import split_two_site_tensor

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from ..core.data_structures.networks import MPS


def apply_single_qubit_gate(state: MPS, qubit: int, matrix: NDArray[np.complex128]) -> MPS:
    """Apply single qubit gate.

    The gate input index is contracted with the current physical index of the qubit and the gate output index
    becomes the new physical index. The matrix is indexed as matrix[out, in].

    Args:
        state: The matrix product state.
        qubit: The qubit the gate acts on.
        matrix: The 2x2 gate matrix.

    Returns:
        MPS: The updated state.
    """
    assert matrix.shape == (2, 2), f"Single-qubit gate needs a 2x2 matrix, got {matrix.shape}"
    axis = state.ind_for_qbit(qubit)
    if state.wavefunction is not None:
        updated = np.tensordot(matrix, state.wavefunction, axes=([1], [axis]))
        state.wavefunction = np.moveaxis(updated, 0, axis)
        return state
    state.legs[qubit] = oe.contract("ab, bcd->acd", matrix, state.legs[qubit])
    return state


def kickback_index(rest: NDArray[np.complex128]) -> NDArray[np.complex128]:
    """Restore the leg index order of the right SVD factor.

    The right factor of a two-site split has the index order (chi_new, sigma, chi_r). Moving the physical index
    back to the front turns it into a regular leg tensor.

    Args:
        rest: The right factor (chi_new, sigma, chi_r).

    Returns:
        NDArray[np.complex128]: The leg tensor (sigma, chi_new, chi_r).
    """
    leg = np.transpose(rest, (1, 0, 2))
    assert leg.ndim == 3
    return leg


def apply_two_qubit_gate(
    state: MPS,
    matrix: NDArray[np.complex128],
    first_site: int,
    second_site: int,
    cutoff: float,
) -> MPS:
    """Apply two-qubit gate on neighboring sites.

    The matrix is written in the basis |q_first q_second⟩. Its tensor is oriented so that the lower site's input
    index contracts with the lower leg, which makes the update independent of whether the first qubit sits left or
    right of the second.

    Args:
        state: The matrix product state.
        matrix: The 4x4 gate matrix.
        first_site: Site of the first gate qubit (the control of a controlled gate).
        second_site: Site of the second gate qubit.
        cutoff: Relative SVD truncation threshold.

    Returns:
        MPS: The updated state.
    """
    assert matrix.shape == (4, 4), f"Two-qubit gate needs a 4x4 matrix, got {matrix.shape}"
    assert abs(first_site - second_site) == 1, f"Sites {first_site} and {second_site} are not adjacent."
    if state.wavefunction is not None:
        state.reduce_to_mps()

    # (out_first, out_second, in_first, in_second)
    tensor = np.reshape(matrix, (2, 2, 2, 2))
    if first_site > second_site:
        tensor = np.transpose(tensor, (1, 0, 3, 2))
    lower = min(first_site, second_site)
    higher = lower + 1

    theta = oe.contract(
        "xyij, ilm, mn, jnr->xlyr", tensor, state.legs[lower], state.bonds[lower], state.legs[higher]
    )
    leg, s_vec, rest = split_two_site_tensor(theta, cutoff)

    state.legs[lower] = leg
    state.bonds[lower] = np.diag(s_vec).astype(np.complex128)
    state.legs[higher] = kickback_index(rest)
    return state
