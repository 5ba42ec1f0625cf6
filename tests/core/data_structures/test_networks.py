# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for the MPS class.

This module provides unit tests for the matrix product state used by the circuit simulator. It verifies:
- Construction of product states with the correct leg and bond shapes.
- The dense initialization path and its reduction to legs and bonds.
- Norms, single-site averages and multi-site sandwiches.
- The dense state vector ordering (qubit 0 is the least significant bit) and zero snapping.
- Copying, restoring and validity checks.
"""

from __future__ import annotations

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy.stats import unitary_group

from mqt.mpsim.core.data_structures.networks import MPS, real_part
from mqt.mpsim.core.libraries.gate_library import X, Z


def random_state(num_qubits: int, seed: int = 0) -> np.ndarray:
    """Normalized random dense state vector."""
    rng = np.random.default_rng(seed)
    vec = rng.normal(size=2**num_qubits) + 1j * rng.normal(size=2**num_qubits)
    return vec / np.linalg.norm(vec)


@pytest.mark.parametrize("state", ["zeros", "ones", "x+", "x-", "y+", "y-"])
def test_mps_initialization(state: str) -> None:
    """Test that product states have rank-3 legs with trivial bonds and unit norm."""
    length = 4
    mps = MPS(length, state=state)

    assert mps.length == length
    assert len(mps.legs) == length
    assert len(mps.bonds) == length - 1
    for leg in mps.legs:
        assert leg.shape == (2, 1, 1)
    for bond in mps.bonds:
        assert bond.shape == (1, 1)
    assert mps.wavefunction is None
    mps.check_if_valid_mps()
    assert np.isclose(mps.wavefunc_inner(), 1.0)


def test_mps_initialization_vectors() -> None:
    """Test the local vectors of the named product states."""
    assert_allclose(MPS(1, state="zeros").legs[0][:, 0, 0], [1, 0])
    assert_allclose(MPS(1, state="ones").legs[0][:, 0, 0], [0, 1])
    assert_allclose(MPS(1, state="x-").legs[0][:, 0, 0], np.array([1, -1]) / np.sqrt(2))
    assert_allclose(MPS(1, state="y+").legs[0][:, 0, 0], np.array([1, 1j]) / np.sqrt(2))


def test_mps_basis_state() -> None:
    """Test that a basis string places qubit i in the i-th character's state."""
    mps = MPS(3, state="basis", basis_string="100")
    vec = mps.to_vec()
    expected = np.zeros(8)
    # qubit 0 is |1⟩ and the least significant bit
    expected[1] = 1
    assert_allclose(vec, expected)


def test_mps_invalid_initialization() -> None:
    """Test that invalid constructor arguments raise ValueError."""
    with pytest.raises(ValueError, match="Invalid state string"):
        MPS(2, state="plus")
    with pytest.raises(ValueError, match="at least one site"):
        MPS(0)
    with pytest.raises(ValueError, match="Invalid basis string"):
        MPS(2, state="basis", basis_string="012")


def test_init_by_svd() -> None:
    """Test that the dense path yields the same |0...0⟩ chain as the direct construction."""
    direct = MPS(5)
    reduced = MPS(5, by_svd=True)
    reduced.check_if_valid_mps()
    assert reduced.wavefunction is None
    assert reduced.get_max_bond() == 1
    assert_allclose(reduced.to_vec(), direct.to_vec())


def test_wavefunction_before_reduction() -> None:
    """Test the dense wavefunction helpers before the reduction."""
    mps = MPS(3)
    mps.init_wavefunction()
    assert mps.wavefunction is not None
    assert mps.wavefunction.shape == (2, 2, 2)
    assert mps.ind_for_qbit(2) == 2
    assert np.isclose(mps.wavefunc_inner(), 1.0)
    assert np.isclose(mps.average(1, Z().matrix), 1.0)

    mps.reduce_to_mps()
    assert mps.ind_for_qbit(2) == 0
    mps.check_if_valid_mps()


def test_check_qubit() -> None:
    """Test that out-of-range qubits are rejected."""
    mps = MPS(3)
    mps.check_qubit(0)
    mps.check_qubit(2)
    with pytest.raises(ValueError, match="outside of the register"):
        mps.check_qubit(3)
    with pytest.raises(ValueError, match="outside of the register"):
        mps.check_qubit(-1)


def test_from_vector_round_trip() -> None:
    """Test that a random state survives the reduction with a tight cutoff."""
    vec = random_state(4, seed=3)
    mps = MPS.from_vector(vec)
    mps.check_if_valid_mps()
    assert np.isclose(mps.wavefunc_inner(), 1.0)
    assert_allclose(mps.to_vec(), vec, atol=1e-10)


def test_from_vector_invalid_length() -> None:
    """Test that vectors whose length is not a power of two are rejected."""
    with pytest.raises(ValueError, match="power of two"):
        MPS.from_vector(np.ones(3))


def test_bell_state_bonds() -> None:
    """Test the bond dimensions of an entangled state."""
    vec = np.array([1, 0, 0, 1]) / np.sqrt(2)
    mps = MPS.from_vector(vec)
    assert mps.get_bond_dimensions() == [2]
    assert mps.get_max_bond() == 2
    assert_allclose(np.diag(mps.bonds[0]).real, [1 / np.sqrt(2), 1 / np.sqrt(2)])


def test_average_matches_dense() -> None:
    """Test single-site averages against the dense expectation value."""
    vec = random_state(3, seed=7)
    mps = MPS.from_vector(vec)
    op = unitary_group.rvs(2, random_state=11)
    hermitian = op + op.conj().T

    for qubit in range(3):
        # qubit q is axis (n-1-q) of the C-ordered dense tensor
        dense = np.reshape(vec, (2, 2, 2))
        axis = 2 - qubit
        applied = np.moveaxis(np.tensordot(hermitian, dense, axes=([1], [axis])), 0, axis)
        expected = np.vdot(dense, applied).real
        assert np.isclose(mps.average(qubit, hermitian), expected)


def test_sandwich_product_of_z() -> None:
    """Test a multi-site sandwich on a basis state."""
    mps = MPS(3, state="basis", basis_string="110")
    z = Z().matrix
    assert np.isclose(mps.sandwich({0: z}), -1)
    assert np.isclose(mps.sandwich({0: z, 1: z}), 1)
    assert np.isclose(mps.sandwich({0: z, 1: z, 2: z}), 1)
    assert np.isclose(mps.sandwich(), 1)


def test_to_vec_ordering() -> None:
    """Test that qubit 0 is the least significant bit of the amplitude index."""
    mps = MPS(3)
    mps.legs[2] = np.reshape(X().matrix @ np.array([1, 0]), (2, 1, 1)).astype(complex)
    vec = mps.to_vec()
    assert vec[4] == 1
    assert np.count_nonzero(vec) == 1


def test_to_vec_normalizes_and_snaps() -> None:
    """Test that the dense vector is normalized and tiny components are zeroed."""
    mps = MPS(2)
    mps.legs[0] = np.reshape(np.array([2.0, 1e-14j]), (2, 1, 1)).astype(complex)
    vec = mps.to_vec()
    assert np.isclose(np.linalg.norm(vec), 1.0)
    assert vec[1] == 0
    assert vec[0] == 1


def test_copy_and_restore() -> None:
    """Test that copies are independent and restore brings back the saved tensors."""
    mps = MPS.from_vector(random_state(3, seed=5))
    saved = mps.copy()
    assert saved.almost_equal(mps)

    mps.legs[1] = mps.legs[1] * 0.5
    assert not saved.almost_equal(mps)

    mps.restore(saved)
    assert saved.almost_equal(mps)
    mps.legs[0][0, 0, 0] = 42
    assert saved.legs[0][0, 0, 0] != 42


def test_check_if_valid_mps_detects_mismatch() -> None:
    """Test that inconsistent bond dimensions fail the validity check."""
    mps = MPS(3)
    mps.bonds[0] = np.eye(2, dtype=complex)
    with pytest.raises(AssertionError):
        mps.check_if_valid_mps()


def test_real_part_warns_on_imaginary_residual() -> None:
    """Test that a significant imaginary residual raises a RuntimeWarning."""
    assert real_part(1.0 + 1e-14j, "test") == 1.0
    with pytest.warns(RuntimeWarning, match="Imaginary residual"):
        value = real_part(0.5 + 1e-3j, "test")
    assert value == 0.5
