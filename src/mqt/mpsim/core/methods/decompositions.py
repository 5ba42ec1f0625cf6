# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tensor Network Decompositions.

This module implements the truncated singular value decompositions used to split merged tensors back into
matrix product state form. Truncation follows a relative-weight cutoff: the smallest singular values are discarded
as long as their summed squares, divided by the summed squares of all singular values, stay below the cutoff.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


def truncation_rank(s_vec: NDArray[np.float64], cutoff: float) -> int:
    """Number of singular values kept for a given cutoff.

    Args:
        s_vec: Singular values in descending order.
        cutoff: Maximum relative weight of the discarded singular values.

    Returns:
        int: The number of leading singular values to keep (at least one).
    """
    total = float(np.sum(s_vec**2))
    if total == 0.0:
        return 1
    discard = 0.0
    keep = len(s_vec)
    for idx, s_val in enumerate(np.flip(s_vec)):
        discard += float(s_val) ** 2
        if discard / total > cutoff:
            keep = len(s_vec) - idx
            break
    return max(keep, 1)


def truncated_svd(
    matrix: NDArray[np.complex128], cutoff: float
) -> tuple[NDArray[np.complex128], NDArray[np.float64], NDArray[np.complex128]]:
    """Truncated SVD.

    Performs the singular value decomposition of a matrix and drops the singular values below the cutoff.

    Args:
        matrix: The matrix to be decomposed.
        cutoff: Relative truncation threshold.

    Returns:
        u_mat: The left isometry (rows, keep).
        s_vec: The retained singular values.
        v_mat: The right isometry (keep, columns).
    """
    u_mat, s_vec, v_mat = np.linalg.svd(matrix, full_matrices=False)
    keep = truncation_rank(s_vec, cutoff)
    return u_mat[:, :keep], s_vec[:keep], v_mat[:keep, :]


def split_two_site_tensor(
    theta: NDArray[np.complex128], cutoff: float
) -> tuple[NDArray[np.complex128], NDArray[np.float64], NDArray[np.complex128]]:
    """Split a merged two-site tensor.

    The tensor theta has the index order (sigma_i, chi_l, sigma_j, chi_r). The cut separates the lower site's
    physical leg and left bond from the higher site's physical leg and right bond.

    Args:
        theta: The merged two-site tensor.
        cutoff: Relative truncation threshold.

    Returns:
        u_tensor: The lower site tensor (sigma_i, chi_l, keep).
        s_vec: The retained singular values.
        v_tensor: The remaining tensor (keep, sigma_j, chi_r).
    """
    assert theta.ndim == 4, f"Expected a rank-4 two-site tensor, got rank {theta.ndim}"
    phys_i, left, phys_j, right = theta.shape
    theta_mat = np.reshape(theta, (phys_i * left, phys_j * right))
    u_mat, s_vec, v_mat = truncated_svd(theta_mat, cutoff)
    keep = len(s_vec)
    u_tensor = np.reshape(u_mat, (phys_i, left, keep))
    v_tensor = np.reshape(v_mat, (keep, phys_j, right))
    return u_tensor, s_vec, v_tensor


def sequential_svd(
    tensor: NDArray[np.complex128], cutoff: float
) -> tuple[list[NDArray[np.complex128]], list[NDArray[np.complex128]]]:
    """Reduce a dense tensor to a chain of site and bond tensors.

    The dense tensor has one axis per site (axis i belongs to site i). Starting from the left, each step splits off
    one site by a truncated SVD. The site tensor receives the left isometry, the bond tensor the singular values and
    the remainder is carried on to the next step.

    Args:
        tensor: The dense tensor with one axis per site.
        cutoff: Relative truncation threshold.

    Returns:
        legs: Site tensors with the index order (sigma, chi_l, chi_r).
        bonds: Diagonal bond tensors (chi_l, chi_r).
    """
    dims = tensor.shape
    length = len(dims)
    legs: list[NDArray[np.complex128]] = []
    bonds: list[NDArray[np.complex128]] = []

    # Dummy head bond of dimension 1
    rest = np.reshape(tensor, (1, *dims))
    for i in range(length - 1):
        left = rest.shape[0]
        # (chi_l, sigma_i, ...) -> (sigma_i, chi_l, ...)
        rest = np.moveaxis(rest, 1, 0)
        mat = np.reshape(rest, (dims[i] * left, -1))
        u_mat, s_vec, v_mat = truncated_svd(mat, cutoff)
        keep = len(s_vec)
        legs.append(np.reshape(u_mat, (dims[i], left, keep)))
        bonds.append(np.diag(s_vec).astype(np.complex128))
        rest = np.reshape(v_mat, (keep, *dims[i + 1 :]))

    # Dummy tail bond of dimension 1
    last = np.moveaxis(rest, 1, 0)
    legs.append(np.reshape(last, (dims[-1], last.shape[1], 1)))
    return legs, bonds
