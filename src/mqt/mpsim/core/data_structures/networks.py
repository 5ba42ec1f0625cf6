# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tensor Network Data Structures.

This module implements the Matrix Product State (MPS) used by the circuit simulator. The state is stored as a chain
of site (leg) tensors linked by diagonal bond tensors holding the singular values of the most recent decomposition
across each cut:

    L_0 -- B_0 -- L_1 -- B_1 -- ... -- B_{n-2} -- L_{n-1}

Besides construction and validity checks, the class provides the read-side contractions of the simulator: the
squared norm, single- and multi-site operator sandwiches computed by a left-to-right sweep, and the reconstruction
of the dense state vector.
"""

from __future__ import annotations

import copy
import warnings
from typing import TYPE_CHECKING

import numpy as np
import opt_einsum as oe

from ..methods.decompositions import sequential_svd

if TYPE_CHECKING:
    from collections.abc import Mapping

    from numpy.typing import NDArray

# Cutoff used when a dense wavefunction is reduced to an MPS
REDUCTION_CUTOFF = 1e-4

# Largest imaginary residual accepted silently in a real-valued contraction
IMAGINARY_TOLERANCE = 1e-10

# Amplitude components below this magnitude are snapped to zero in the dense state
AMPLITUDE_ZERO = 1e-12


def real_part(value: complex, what: str) -> np.float64:
    """Real part of a contraction result that should be real.

    Args:
        value: The scalar result of a contraction.
        what: Description of the quantity used in the warning.

    Returns:
        np.float64: The real part of the value.
    """
    if abs(np.imag(value)) > IMAGINARY_TOLERANCE:
        warnings.warn(
            f"Imaginary residual {np.imag(value):.3e} in {what}; using the real part {np.real(value):.6f}.",
            RuntimeWarning,
            stacklevel=3,
        )
    return np.float64(np.real(value))


class MPS:
    """Matrix Product State (MPS) class for representing quantum states.

    The index order of a leg tensor is (sigma, chi_l, chi_r). The first and the last leg carry dummy boundary bonds
    of dimension 1, so every stored leg is rank 3. The bond tensor between sites i and i+1 has the index order
    (chi_l, chi_r) and is diagonal.

    Attributes:
    length (int): The number of sites (qubits) in the MPS.
    legs (list[NDArray[np.complex128]]): The site tensors.
    bonds (list[NDArray[np.complex128]]): The length - 1 bond tensors.
    wavefunction (NDArray[np.complex128] | None): Dense tensor with one axis per qubit. Only set during the
        dense initialization path, before the reduction to an MPS.

    Methods:
    init_wavefunction() -> None:
        Creates the dense |0...0⟩ tensor.
    reduce_to_mps(cutoff: float) -> None:
        Reduces the dense tensor to legs and bonds by sequential truncated SVDs.
    ind_for_qbit(qubit: int) -> int:
        Returns the axis carrying the physical index of a qubit.
    wavefunc_inner() -> np.float64:
        Computes ⟨ψ|ψ⟩.
    average(qubit: int, operator: NDArray) -> np.float64:
        Computes ⟨ψ|O_qubit|ψ⟩.
    to_vec() -> NDArray[np.complex128]:
        Reconstructs the normalized dense state vector.
    """

    def __init__(
        self,
        length: int,
        state: str = "zeros",
        basis_string: str | None = None,
        *,
        by_svd: bool = False,
    ) -> None:
        """Initializes a Matrix Product State (MPS).

        Args:
            length: Number of qubits in the MPS.
            state: Initial product state. Valid options include:
                - "zeros": Initializes all qubits to |0⟩.
                - "ones": Initializes all qubits to |1⟩.
                - "x+": Initializes each qubit to (|0⟩ + |1⟩)/√2.
                - "x-": Initializes each qubit to (|0⟩ - |1⟩)/√2.
                - "y+": Initializes each qubit to (|0⟩ + i|1⟩)/√2.
                - "y-": Initializes each qubit to (|0⟩ - i|1⟩)/√2.
                - "basis": Initializes the computational basis state given by `basis_string`.
                Default is "zeros".
            basis_string: String of 0s and 1s used for the "basis" state. Character i belongs to qubit i.
            by_svd: Build the |0...0⟩ state as a dense tensor first and reduce it to an MPS by sequential SVDs.

        Raises:
            ValueError: If the length is not positive.
            ValueError: If the provided `state` parameter does not match any valid initialization string.
        """
        if length < 1:
            msg = f"An MPS needs at least one site, got {length}"
            raise ValueError(msg)
        self.length = length
        self.legs: list[NDArray[np.complex128]] = []
        self.bonds: list[NDArray[np.complex128]] = []
        self.wavefunction: NDArray[np.complex128] | None = None

        if by_svd:
            self.init_wavefunction()
            self.reduce_to_mps()
            return

        if state == "basis":
            assert basis_string is not None, "basis_string must be provided for 'basis' state initialization."
            if len(basis_string) != length or set(basis_string) - {"0", "1"}:
                msg = f"Invalid basis string {basis_string!r} for {length} qubits"
                raise ValueError(msg)

        for i in range(length):
            vector = np.zeros(2, dtype=complex)
            if state == "zeros":
                vector[0] = 1
            elif state == "ones":
                vector[1] = 1
            elif state == "x+":
                vector[0] = 1 / np.sqrt(2)
                vector[1] = 1 / np.sqrt(2)
            elif state == "x-":
                vector[0] = 1 / np.sqrt(2)
                vector[1] = -1 / np.sqrt(2)
            elif state == "y+":
                vector[0] = 1 / np.sqrt(2)
                vector[1] = 1j / np.sqrt(2)
            elif state == "y-":
                vector[0] = 1 / np.sqrt(2)
                vector[1] = -1j / np.sqrt(2)
            elif state == "basis":
                assert basis_string is not None
                vector[int(basis_string[i])] = 1
            else:
                msg = "Invalid state string"
                raise ValueError(msg)

            self.legs.append(np.reshape(vector, (2, 1, 1)))
            if i < length - 1:
                self.bonds.append(np.ones((1, 1), dtype=complex))

    @classmethod
    def from_vector(cls, vector: NDArray[np.complex128], cutoff: float = 1e-12) -> MPS:
        """Builds an MPS from a dense state vector.

        The vector uses the same ordering as `to_vec`: qubit 0 is the least significant bit of the amplitude index.

        Args:
            vector: Dense state vector of length 2**n.
            cutoff: Relative truncation threshold of the reduction.

        Returns:
            MPS: The reduced state.

        Raises:
            ValueError: If the length of the vector is not a power of two.
        """
        vector = np.asarray(vector, dtype=np.complex128).ravel()
        length = int(np.log2(vector.size)) if vector.size > 0 else 0
        if length < 1 or 2**length != vector.size:
            msg = f"State vector length must be a power of two (>= 2), got {vector.size}"
            raise ValueError(msg)
        mps = cls(length)
        # C-order reshape puts the most significant qubit first
        mps.wavefunction = np.transpose(np.reshape(vector, (2,) * length))
        mps.legs = []
        mps.bonds = []
        mps.reduce_to_mps(cutoff)
        return mps

    def init_wavefunction(self) -> None:
        """Creates the dense |0...0⟩ tensor with one axis per qubit."""
        wavefunction = np.zeros((2,) * self.length, dtype=complex)
        wavefunction[(0,) * self.length] = 1
        self.wavefunction = wavefunction
        self.legs = []
        self.bonds = []

    def reduce_to_mps(self, cutoff: float = REDUCTION_CUTOFF) -> None:
        """Reduces the dense wavefunction to a chain of legs and bonds.

        Args:
            cutoff: Relative truncation threshold used for every split.
        """
        assert self.wavefunction is not None, "No dense wavefunction to reduce."
        self.legs, self.bonds = sequential_svd(self.wavefunction, cutoff)
        self.wavefunction = None
        self.check_if_valid_mps()

    def ind_for_qbit(self, qubit: int) -> int:
        """Axis of the physical index of a qubit.

        Once the chain exists, the physical index is axis 0 of the qubit's leg tensor. Before the dense
        wavefunction has been reduced, it is the qubit's axis of the dense tensor.

        Args:
            qubit: The qubit index.

        Returns:
            int: The axis carrying the qubit's |0⟩/|1⟩ index.
        """
        self.check_qubit(qubit)
        if len(self.legs) <= qubit:
            assert self.wavefunction is not None
            return qubit
        return 0

    def check_qubit(self, qubit: int) -> None:
        """Validates a qubit index.

        Args:
            qubit: The qubit index.

        Raises:
            ValueError: If the qubit is outside the chain.
        """
        if not 0 <= qubit < self.length:
            msg = f"Qubit {qubit} outside of the register of {self.length} qubits"
            raise ValueError(msg)

    def get_bond_dimensions(self) -> list[int]:
        """Returns the dimension of every internal bond."""
        return [bond.shape[0] for bond in self.bonds]

    def get_max_bond(self) -> int:
        """Returns the maximum internal bond dimension (1 for product states)."""
        return max(self.get_bond_dimensions(), default=1)

    def check_if_valid_mps(self) -> None:
        """MPS validity check.

        Verifies the chain lengths, the rank of every tensor and that neighboring bond dimensions agree.
        """
        assert len(self.legs) == self.length
        assert len(self.bonds) == self.length - 1
        assert self.legs[0].shape[1] == 1
        assert self.legs[-1].shape[2] == 1
        for i, leg in enumerate(self.legs):
            assert leg.ndim == 3, f"Leg {i} has rank {leg.ndim}"
            assert leg.shape[0] == 2
            if i < self.length - 1:
                bond = self.bonds[i]
                assert bond.ndim == 2, f"Bond {i} has rank {bond.ndim}"
                assert leg.shape[2] == bond.shape[0]
                assert bond.shape[1] == self.legs[i + 1].shape[1]

    def copy(self) -> MPS:
        """Returns an independent deep copy of the state."""
        return copy.deepcopy(self)

    def restore(self, snapshot: MPS) -> None:
        """Restores the tensors from a snapshot taken with `copy`.

        Args:
            snapshot: The saved state.
        """
        assert snapshot.length == self.length
        self.legs = [leg.copy() for leg in snapshot.legs]
        self.bonds = [bond.copy() for bond in snapshot.bonds]
        self.wavefunction = None if snapshot.wavefunction is None else snapshot.wavefunction.copy()

    def almost_equal(self, other: MPS) -> bool:
        """Checks if the tensors of this MPS are almost equal to the other MPS.

        Args:
            other (MPS): The other MPS to compare with.

        Returns:
            bool: True if all legs and bonds agree in shape and value.
        """
        if self.length != other.length:
            return False
        for mine, theirs in zip(self.legs + self.bonds, other.legs + other.bonds):
            if mine.shape != theirs.shape:
                return False
            if not np.allclose(mine, theirs):
                return False
        return True

    def site_tensor(self, site: int) -> NDArray[np.complex128]:
        """Leg tensor with the bond to its right absorbed.

        Args:
            site: The site index.

        Returns:
            NDArray[np.complex128]: Tensor with the index order (sigma, chi_l, chi_r).
        """
        if site == self.length - 1:
            return self.legs[site]
        return oe.contract("abc, cd->abd", self.legs[site], self.bonds[site])

    def sandwich(self, operators: Mapping[int, NDArray[np.complex128]] | None = None) -> np.complex128:
        """Contraction ⟨ψ|O|ψ⟩ for a product of single-site operators.

        The contraction walks the chain from left to right and keeps a (bra, ket) environment, so no tensor with
        more than four legs ever appears. Operators act on the ket, O[s, t] = ⟨s|O|t⟩.

        Args:
            operators: Map from site to the 2x2 operator acting there. Sites without an entry get the identity.

        Returns:
            np.complex128: The value of the sandwich.
        """
        operators = operators or {}
        if self.wavefunction is not None:
            ket = self.wavefunction
            for site, operator in operators.items():
                ket = np.moveaxis(np.tensordot(operator, ket, axes=([1], [site])), 0, site)
            return np.complex128(np.vdot(self.wavefunction, ket))

        env = np.ones((1, 1), dtype=complex)
        for site in range(self.length):
            tensor = self.site_tensor(site)
            if site in operators:
                env = oe.contract("ab, sac, st, tbd->cd", env, np.conj(tensor), operators[site], tensor)
            else:
                env = oe.contract("ab, sac, sbd->cd", env, np.conj(tensor), tensor)
        return np.complex128(env[0, 0])

    def wavefunc_inner(self) -> np.float64:
        """Squared norm ⟨ψ|ψ⟩ of the state."""
        if self.wavefunction is not None:
            return np.float64(np.vdot(self.wavefunction, self.wavefunction).real)
        return real_part(self.sandwich(), "wavefunction inner product")

    def average(self, qubit: int, operator: NDArray[np.complex128]) -> np.float64:
        """Un-normalized expectation ⟨ψ|O|ψ⟩ of a single-qubit operator.

        Args:
            qubit: The qubit the operator acts on.
            operator: The 2x2 operator.

        Returns:
            np.float64: The real part of the sandwich.
        """
        self.check_qubit(qubit)
        return real_part(self.sandwich({qubit: operator}), f"average on qubit {qubit}")

    def to_tensor(self) -> NDArray[np.complex128]:
        """Contracts the whole chain into a dense tensor with one axis per qubit (axis i is qubit i)."""
        if self.wavefunction is not None:
            return self.wavefunction.copy()
        # Drop the dummy head bond
        tensor = self.legs[0][:, 0, :]
        for site in range(1, self.length):
            tensor = np.tensordot(tensor, self.bonds[site - 1], axes=([-1], [0]))
            tensor = np.tensordot(tensor, self.legs[site], axes=([-1], [1]))
        # Drop the dummy tail bond
        return tensor[..., 0]

    def to_vec(self) -> NDArray[np.complex128]:
        """Converts the MPS to a normalized dense state vector.

        The amplitude index is built by shifting the qubit bits into a running integer (qubit 0 first) and
        bit-reversing the result, so qubit 0 ends up as the least significant bit. Real and imaginary parts below
        1e-12 are snapped to zero. The cost is exponential in the number of qubits.

        Returns:
            NDArray[np.complex128]: The state vector of length 2**n.
        """
        tensor = self.to_tensor()
        norm = np.linalg.norm(tensor)
        assert norm > 0, "Cannot normalize the zero state."
        tensor = tensor / norm

        # Reversing the axes turns C order into qubit 0 = least significant bit
        vec = np.transpose(tensor).reshape(-1)
        real = np.where(np.abs(vec.real) < AMPLITUDE_ZERO, 0.0, vec.real)
        imag = np.where(np.abs(vec.imag) < AMPLITUDE_ZERO, 0.0, vec.imag)
        return real + 1j * imag
