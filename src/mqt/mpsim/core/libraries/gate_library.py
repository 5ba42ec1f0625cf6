# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Library of quantum gates.

This module defines the closed set of circuit instructions understood by the MPS simulator.
Each gate is implemented as a class derived from BaseGate and carries its name, matrix representation,
interaction level (number of qubits), the qubits it acts on, its real-valued parameters and an enabled flag.
The GateLibrary class maps the lower-case gate names onto these classes so that a circuit walker can dispatch
on the name alone.

Two-qubit matrices are written in the computational basis |q_first q_second⟩, where the first qubit is the
first entry of `sites` (the control qubit for controlled gates).
"""

from __future__ import annotations

from numbers import Real
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray


def to_real_parameter(value: object, gate_name: str, index: int) -> float:
    """Converts a gate parameter to a float.

    Only real numbers (Python or NumPy integers and floats) are valid gate parameters.

    Args:
        value: The raw parameter value.
        gate_name: The name of the gate the parameter belongs to.
        index: The position of the parameter in the gate's parameter list.

    Returns:
        float: The parameter as a float.

    Raises:
        ValueError: If the parameter is not a real number.
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (Real, np.integer, np.floating)):
        msg = f"Invalid parameter {index} for gate '{gate_name}': {value!r} ({type(value).__name__})"
        raise ValueError(msg)
    return float(value)


def to_real_parameters(params: Sequence[object], gate_name: str, count: int) -> list[float]:
    """Converts the parameter list of a gate to floats.

    Args:
        params: The raw parameter values.
        gate_name: The name of the gate the parameters belong to.
        count: The number of parameters the gate expects.

    Returns:
        list[float]: The parameters as floats.

    Raises:
        ValueError: If a parameter is missing, superfluous or not a real number.
    """
    if len(params) < count:
        msg = f"Invalid parameter {len(params)} for gate '{gate_name}': missing (expects {count} parameters)"
        raise ValueError(msg)
    if len(params) > count:
        msg = f"Invalid parameter {count} for gate '{gate_name}': unexpected (expects {count} parameters)"
        raise ValueError(msg)
    return [to_real_parameter(p, gate_name, i) for i, p in enumerate(params)]


class BaseGate:
    """Base class representing a quantum gate.

    Attributes:
        name: The name of the gate.
        matrix: The matrix representation of the gate.
        interaction: The interaction level (number of qubits) of the gate.
        sites: The qubits the gate acts on.
        params: The real-valued parameters of the gate.
        enabled: Disabled gates are skipped by the simulator.

    Methods:
        set_sites(*sites: int) -> None:
            Sets the sites on which the gate acts.
    """

    name: str
    matrix: NDArray[np.complex128]
    interaction: int
    sites: list[int]
    params: list[float]

    def __init__(self, mat: NDArray[np.complex128]) -> None:
        """Initializes a BaseGate instance with the given matrix.

        Args:
            mat: The matrix representation of the gate.

        Raises:
            ValueError: If the matrix is not square.
            ValueError: If the matrix size is not a power of 2.
        """
        if mat.shape[0] != mat.shape[1]:
            msg = "Matrix must be square"
            raise ValueError(msg)

        log = np.log2(mat.shape[0])
        if log != int(log):
            msg = "Matrix size must be a power of 2"
            raise ValueError(msg)

        self.matrix = np.asarray(mat, dtype=np.complex128)
        self.interaction = int(log)
        self.sites = []
        if not hasattr(self, "params"):
            self.params = []
        self.enabled = True

    def set_sites(self, *sites: int | list[int]) -> BaseGate:
        """Sets the sites for the gate.

        Args:
            *sites: Variable-length argument list specifying site indices.

        Returns:
            BaseGate: The gate itself, so that construction and placement can be chained.

        Raises:
            ValueError: If the number of sites does not match the interaction level of the gate.
            ValueError: If a site is negative or a two-qubit gate acts twice on the same qubit.
        """
        sites_list = []
        for s in sites:
            if isinstance(s, (int, np.integer)):
                sites_list.append(int(s))
            else:
                sites_list.extend(int(x) for x in s)

        # enforce the right number of sites
        if len(sites_list) != self.interaction:
            msg = f"Number of sites {len(sites_list)} must be equal to the interaction level {self.interaction}"
            raise ValueError(msg)
        if any(s < 0 for s in sites_list):
            msg = f"Sites must be non-negative, got {sites_list}"
            raise ValueError(msg)
        if len(set(sites_list)) != len(sites_list):
            msg = f"Gate '{self.name}' cannot act twice on the same qubit: {sites_list}"
            raise ValueError(msg)

        self.sites = sites_list
        return self

    def __repr__(self) -> str:
        """Compact representation used in log messages."""
        if self.params:
            args = ", ".join(f"{p:g}" for p in self.params)
            return f"{self.name}({args}) @ {self.sites}"
        return f"{self.name} @ {self.sites}"


class Id(BaseGate):
    """Class representing the identity gate."""

    name = "id"

    def __init__(self) -> None:
        """Initializes the identity gate."""
        mat = np.array([[1, 0], [0, 1]])
        super().__init__(mat)


class H(BaseGate):
    """Class representing the Hadamard gate.

    Attributes:
        name: The name of the gate ("h").
        matrix: The 2x2 matrix representation of the gate.
        interaction: The interaction level (1 for single-qubit gates).
    """

    name = "h"

    def __init__(self) -> None:
        """Initializes the Hadamard gate."""
        mat = np.array([[1, 1], [1, -1]]) / np.sqrt(2)
        super().__init__(mat)


class X(BaseGate):
    """Class representing the Pauli-X (NOT) gate.

    Attributes:
        name: The name of the gate ("x").
        matrix: The 2x2 matrix representation of the gate.
        interaction: The interaction level (1 for single-qubit gates).
    """

    name = "x"

    def __init__(self) -> None:
        """Initializes the Pauli-X gate."""
        mat = np.array([[0, 1], [1, 0]])
        super().__init__(mat)


class Y(BaseGate):
    """Class representing the Pauli-Y gate.

    Attributes:
        name: The name of the gate ("y").
        matrix: The 2x2 matrix representation of the gate.
        interaction: The interaction level (1 for single-qubit gates).
    """

    name = "y"

    def __init__(self) -> None:
        """Initializes the Pauli-Y gate."""
        mat = np.array([[0, -1j], [1j, 0]])
        super().__init__(mat)


class Z(BaseGate):
    """Class representing the Pauli-Z gate.

    Attributes:
        name: The name of the gate ("z").
        matrix: The 2x2 matrix representation of the gate.
        interaction: The interaction level (1 for single-qubit gates).
    """

    name = "z"

    def __init__(self) -> None:
        """Initializes the Pauli-Z gate."""
        mat = np.array([[1, 0], [0, -1]])
        super().__init__(mat)


class Rx(BaseGate):
    """Class representing a rotation gate about the x-axis.

    Attributes:
        name: The name of the gate ("rx").
        matrix: The 2x2 matrix representation of the gate.
        theta: The rotation angle parameter.
    """

    name = "rx"

    def __init__(self, params: Sequence[object]) -> None:
        """Initializes the rotation gate about the x-axis.

        Args:
            params: A list containing a single rotation angle (`theta`) parameter.
        """
        self.params = to_real_parameters(params, self.name, 1)
        self.theta = self.params[0]
        mat = np.array([
            [np.cos(self.theta / 2), -1j * np.sin(self.theta / 2)],
            [-1j * np.sin(self.theta / 2), np.cos(self.theta / 2)],
        ])
        super().__init__(mat)


class Ry(BaseGate):
    """Class representing a rotation gate about the y-axis.

    Attributes:
        name: The name of the gate ("ry").
        matrix: The 2x2 matrix representation of the gate.
        theta: The rotation angle parameter.
    """

    name = "ry"

    def __init__(self, params: Sequence[object]) -> None:
        """Initializes the rotation gate about the y-axis.

        Args:
            params: A list containing a single rotation angle (`theta`) parameter.
        """
        self.params = to_real_parameters(params, self.name, 1)
        self.theta = self.params[0]
        mat = np.array([
            [np.cos(self.theta / 2), -np.sin(self.theta / 2)],
            [np.sin(self.theta / 2), np.cos(self.theta / 2)],
        ])
        super().__init__(mat)


class Rz(BaseGate):
    """Class representing a rotation gate about the z-axis.

    Attributes:
        name: The name of the gate ("rz").
        matrix: The 2x2 matrix representation of the gate.
        theta: The rotation angle parameter.
    """

    name = "rz"

    def __init__(self, params: Sequence[object]) -> None:
        """Initializes the rotation gate about the z-axis.

        Args:
            params: A list containing a single rotation angle (`theta`) parameter.
        """
        self.params = to_real_parameters(params, self.name, 1)
        self.theta = self.params[0]
        mat = np.array([
            [np.exp(-1j * self.theta / 2), 0],
            [0, np.exp(1j * self.theta / 2)],
        ])
        super().__init__(mat)


class U(BaseGate):
    """Class representing the general single-qubit unitary U(theta, phi, lambda).

    Attributes:
        name: The name of the gate ("u").
        matrix: The 2x2 matrix representation of the gate.
        theta: The first rotation parameter.
        phi: The second rotation parameter.
        lam: The third rotation parameter.
    """

    name = "u"

    def __init__(self, params: Sequence[object]) -> None:
        """Initializes the U gate.

        Args:
            params: A list containing the three angles (theta, phi, lambda).

        Raises:
            ValueError: If not exactly three parameters are given.
        """
        self.params = to_real_parameters(params, self.name, 3)
        self.theta, self.phi, self.lam = self.params
        mat = np.array([
            [np.cos(self.theta / 2), -np.exp(1j * self.lam) * np.sin(self.theta / 2)],
            [
                np.exp(1j * self.phi) * np.sin(self.theta / 2),
                np.exp(1j * (self.phi + self.lam)) * np.cos(self.theta / 2),
            ],
        ])
        super().__init__(mat)


class CX(BaseGate):
    """Class representing the controlled-NOT (CX) gate.

    The first site is the control, the second site the target.

    Attributes:
        name: The name of the gate ("cx").
        matrix: The 4x4 matrix representation of the gate.
        interaction: The interaction level (2 for two-qubit gates).
    """

    name = "cx"

    def __init__(self) -> None:
        """Initializes the controlled-NOT (CX) gate."""
        mat = np.array([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]])
        super().__init__(mat)


class SWAP(BaseGate):
    """Class representing the SWAP gate.

    Attributes:
        name: The name of the gate ("swap").
        matrix: The 4x4 matrix representation of the gate.
        interaction: The interaction level (2 for two-qubit gates).
    """

    name = "swap"

    def __init__(self) -> None:
        """Initializes the SWAP gate."""
        mat = np.array([[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]])
        super().__init__(mat)


class CZ(BaseGate):
    """Class representing the controlled-Z (CZ) gate.

    The gate is part of the instruction set but cannot be applied by the simulator.
    """

    name = "cz"

    def __init__(self) -> None:
        """Initializes the controlled-Z gate."""
        mat = np.array([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, -1]])
        super().__init__(mat)


class CPhase(BaseGate):
    """Class representing the controlled phase gate.

    The gate is part of the instruction set but cannot be applied by the simulator.

    Attributes:
        theta: The phase parameter.
    """

    name = "cp"

    def __init__(self, params: Sequence[object]) -> None:
        """Initializes the controlled phase gate.

        Args:
            params: A list containing the phase angle.
        """
        self.params = to_real_parameters(params, self.name, 1)
        self.theta = self.params[0]
        mat = np.array([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, np.exp(1j * self.theta)]])
        super().__init__(mat)


class P0(BaseGate):
    """Class representing the projector onto |0⟩⟨0|."""

    name = "p0"

    def __init__(self) -> None:
        """Initializes the |0⟩⟨0| projector."""
        mat = np.array([[1, 0], [0, 0]], dtype=complex)
        super().__init__(mat)


class P1(BaseGate):
    """Class representing the projector onto |1⟩⟨1|."""

    name = "p1"

    def __init__(self) -> None:
        """Initializes the |1⟩⟨1| projector."""
        mat = np.array([[0, 0], [0, 1]], dtype=complex)
        super().__init__(mat)


class Measure(BaseGate):
    """Class representing a projective measurement in the computational basis.

    Attributes:
        name: The name of the instruction ("measure").
        matrix: The measured observable (Pauli-Z).
        interaction: The interaction level (1 for single-qubit measurements).
    """

    name = "measure"

    def __init__(self) -> None:
        """Initializes the measurement."""
        mat = np.array([[1, 0], [0, -1]])
        super().__init__(mat)


class GateLibrary:
    """A collection of quantum gate classes for use in simulations.

    Attributes:
        id: Class for the identity gate.
        h: Class for the Hadamard gate.
        x: Class for the X gate.
        y: Class for the Y gate.
        z: Class for the Z gate.
        rx: Class for the rotation gate about the x-axis.
        ry: Class for the rotation gate about the y-axis.
        rz: Class for the rotation gate about the z-axis.
        u: Class for the general single-qubit unitary.
        cx: Class for the controlled-NOT gate.
        swap: Class for the SWAP gate.
        cz: Class for the controlled-Z gate.
        cp: Class for the controlled phase gate.
        measure: Class for the computational-basis measurement.
    """

    id = Id
    h = H
    x = X
    y = Y
    z = Z
    rx = Rx
    ry = Ry
    rz = Rz
    u = U
    cx = CX
    swap = SWAP
    cz = CZ
    cp = CPhase
    p0 = P0
    p1 = P1
    measure = Measure
