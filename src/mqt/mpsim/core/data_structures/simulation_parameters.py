# Copyright (c) 2023 - 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Simulation Parameters for the MPS circuit simulator.

This module provides the SimParams class which configures a simulation run: verbosity, the durations charged per
gate for the elapsed-time bookkeeping, the SVD cutoff used when two-qubit gates are split back into MPS form, the
number of shots and the seed of the random number generator used for measurement sampling.
"""

from __future__ import annotations

import logging

import numpy as np


class SimParams:
    """Simulation Parameters.

    A class to represent the parameters of a circuit simulation.

    Attributes:
    -----------
    verbose :
        If True, every applied instruction is logged at INFO level.
    single_qubit_gate_time :
        Duration added to the elapsed time for every single-qubit gate (default is 1e-8).
    two_qubit_gate_time :
        Duration added to the elapsed time for every two-qubit gate and measurement (default is 1e-7).
    svd_cutoff :
        Relative truncation threshold for the singular values of every two-qubit update (default is 1e-4).
    shots :
        Number of times a circuit is executed by `simulator.run` (default is 1).
    seed :
        Seed of the measurement random number generator. None draws fresh entropy.
    get_state :
        If True, the final dense state vector is returned by `simulator.run`.
    """

    def __init__(
        self,
        single_qubit_gate_time: float = 1e-8,
        two_qubit_gate_time: float = 1e-7,
        svd_cutoff: float = 1e-4,
        shots: int = 1,
        seed: int | None = None,
        *,
        verbose: bool = False,
        get_state: bool = False,
    ) -> None:
        """Circuit simulation parameters initialization.

        Parameters
        ----------
        single_qubit_gate_time :
            Simulated duration of a single-qubit gate.
        two_qubit_gate_time :
            Simulated duration of a two-qubit gate or measurement.
        svd_cutoff :
            Relative truncation threshold in [0, 1).
        shots :
            Number of circuit executions.
        seed :
            Seed for the measurement random number generator.
        verbose :
            Log every applied instruction.
        get_state :
            Return the final state vector.

        Raises:
        ------
        ValueError
            If a gate time is negative, the cutoff is outside [0, 1) or shots is smaller than 1.
        """
        if single_qubit_gate_time < 0 or two_qubit_gate_time < 0:
            msg = "Gate times must be non-negative."
            raise ValueError(msg)
        if not 0 <= svd_cutoff < 1:
            msg = f"The SVD cutoff must be in [0, 1), got {svd_cutoff}."
            raise ValueError(msg)
        if shots < 1:
            msg = f"At least one shot is required, got {shots}."
            raise ValueError(msg)

        self.verbose = verbose
        self.single_qubit_gate_time = single_qubit_gate_time
        self.two_qubit_gate_time = two_qubit_gate_time
        self.svd_cutoff = svd_cutoff
        self.shots = shots
        self.seed = seed
        self.get_state = get_state

    @property
    def loglevel(self) -> int:
        """Logger output level selected by the verbose flag."""
        return logging.INFO if self.verbose else logging.WARNING

    def rng(self) -> np.random.Generator:
        """Creates the random number generator used for measurement sampling.

        Returns:
            np.random.Generator: A generator seeded with `seed`.
        """
        return np.random.default_rng(self.seed)
