# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""MPSim init file.

MPSim is a package for simulating quantum circuits on a matrix product state (MPS). The state is stored as a chain
of site tensors linked by singular-value bond tensors, so that the cost of a simulation grows with the entanglement
of the circuit rather than with the number of qubits.
"""

from __future__ import annotations

from ._version import version as __version__
from ._version import version_tuple as version_info

__all__ = ["__version__", "version_info"]
