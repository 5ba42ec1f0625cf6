# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for projective measurements and Z-basis expectation values."""

from __future__ import annotations

from unittest.mock import MagicMock

import numpy as np
import pytest

from mqt.mpsim.core.data_structures.networks import MPS
from mqt.mpsim.core.libraries.gate_library import CX, H
from mqt.mpsim.digital.gate_application import apply_single_qubit_gate, apply_two_qubit_gate
from mqt.mpsim.digital.measurement import average_zs, collapse, measure, probability_zero


def bell_state() -> MPS:
    """(|00⟩ + |11⟩)/√2 on two qubits."""
    mps = MPS(2)
    apply_single_qubit_gate(mps, 0, H().matrix)
    apply_two_qubit_gate(mps, CX().matrix, 0, 1, 1e-4)
    return mps


def fixed_rng(value: float) -> MagicMock:
    """Random number generator stub whose draws always return `value`."""
    rng = MagicMock()
    rng.random.return_value = value
    return rng


def test_probability_zero() -> None:
    """Test marginal probabilities of basis and superposition states."""
    assert np.isclose(probability_zero(MPS(2), 0), 1.0)
    assert np.isclose(probability_zero(MPS(2, state="ones"), 1), 0.0)
    assert np.isclose(probability_zero(MPS(2, state="x+"), 1), 0.5)
    assert np.isclose(probability_zero(bell_state(), 1), 0.5)


def test_probability_zero_is_normalized() -> None:
    """Test that the probability is divided by the squared norm."""
    mps = MPS(2, state="x+")
    mps.legs[0] = mps.legs[0] * 3
    assert np.isclose(probability_zero(mps, 0), 0.5)


@pytest.mark.parametrize("draw", [0.0, 0.5, 0.999])
def test_deterministic_collapse(draw: float) -> None:
    """Test that basis states are measured with certainty regardless of the draw."""
    mps = MPS(2, state="basis", basis_string="10")
    outcome, p0 = measure(mps, 0, fixed_rng(draw))
    assert outcome == 1
    assert np.isclose(p0, 0.0)
    outcome, p0 = measure(mps, 1, fixed_rng(draw))
    assert outcome == 0
    assert np.isclose(p0, 1.0)


def test_outcome_selected_by_draw() -> None:
    """Test that a draw below p0 yields 0 and a draw above yields 1."""
    assert measure(MPS(1, state="x+"), 0, fixed_rng(0.49))[0] == 0
    assert measure(MPS(1, state="x+"), 0, fixed_rng(0.51))[0] == 1


@pytest.mark.parametrize("draw", [0.25, 0.75])
def test_bell_state_correlations(draw: float) -> None:
    """Test that both halves of a Bell pair give the same outcome."""
    mps = bell_state()
    first, _ = measure(mps, 0, fixed_rng(draw))
    # the collapsed state is not renormalized
    assert np.isclose(mps.wavefunc_inner(), 0.5)
    second, p0 = measure(mps, 1, np.random.default_rng(0))
    assert first == second
    assert np.isclose(p0, 1.0 - first)


def test_collapse_without_renormalization() -> None:
    """Test that the projector is applied to the leg without rescaling."""
    mps = MPS(1, state="x+")
    collapse(mps, 0, 1)
    assert np.isclose(mps.legs[0][0, 0, 0], 0)
    assert np.isclose(mps.legs[0][1, 0, 0], 1 / np.sqrt(2))


def test_collapse_reduces_dense_wavefunction() -> None:
    """Test that a collapse on the dense tensor first reduces it."""
    mps = MPS(2)
    mps.init_wavefunction()
    collapse(mps, 0, 0)
    assert mps.wavefunction is None
    mps.check_if_valid_mps()


def test_average_zs() -> None:
    """Test joint Z expectation values."""
    mps = bell_state()
    assert np.isclose(average_zs(mps, [0]), 0.0)
    assert np.isclose(average_zs(mps, [0, 1]), 1.0)
    assert np.isclose(average_zs(mps, []), 1.0)
    assert np.isclose(average_zs(MPS(3, state="ones"), {0, 2}), 1.0)
    assert np.isclose(average_zs(MPS(3, state="ones"), {1}), -1.0)


def test_average_zs_is_normalized() -> None:
    """Test that the expectation value is divided by the squared norm."""
    mps = MPS(2, state="ones")
    mps.legs[1] = mps.legs[1] * 0.1
    assert np.isclose(average_zs(mps, [0]), -1.0)


def test_measure_rejects_invalid_qubit() -> None:
    """Test that measuring outside of the register raises ValueError."""
    with pytest.raises(ValueError, match="outside of the register"):
        measure(MPS(2), 2, np.random.default_rng(0))
