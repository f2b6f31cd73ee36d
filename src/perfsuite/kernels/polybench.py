# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Polybench linear algebra kernels.

Matrices are square with side isqrt(run_size); each forall iterates over
rows, and a row is updated with one matrix-vector or vector-matrix product.
"""

import math

import numpy as np

from ..forall import forall
from ..registry import KernelID
from .base import ForallKernel

POLYBENCH_ALPHA = 1.5
POLYBENCH_BETA = 1.2


class _MatrixKernel(ForallKernel):
    @property
    def extent(self) -> int:
        return max(1, math.isqrt(self.run_size))

    def alloc_matrix(self, name: str, init: bool = True):
        n = self.extent
        if init:
            return self.alloc_and_init_data(name, n * n, shape=(n, n))
        self._data[name] = np.zeros((n, n))
        return self._data[name]


class TwoMM(_MatrixKernel):
    """D = alpha * A @ B @ C + beta * D"""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Polybench_2MM, run_params, 4096, 3, backend_config, logger)

    def _set_up(self, vid):
        self.alloc_matrix("tmp", init=False)
        self.alloc_matrix("A")
        self.alloc_matrix("B")
        self.alloc_matrix("C")
        self.alloc_matrix("D")
        self.alpha = POLYBENCH_ALPHA
        self.beta = POLYBENCH_BETA

    def kernel_rep(self, policy, data):
        tmp, A, B, C, D = data["tmp"], data["A"], data["B"], data["C"], data["D"]
        alpha, beta = self.alpha, self.beta

        def tmp_rows(i):
            tmp[i, :] = alpha * (A[i, :] @ B)

        def d_rows(i):
            D[i, :] = beta * D[i, :] + tmp[i, :] @ C

        forall(policy, 0, self.extent, tmp_rows)
        forall(policy, 0, self.extent, d_rows)

    def _compute_checksum(self, vid):
        return self.checksum_of("D")


class ThreeMM(_MatrixKernel):
    """G = (A @ B) @ (C @ D)"""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Polybench_3MM, run_params, 4096, 3, backend_config, logger)

    def _set_up(self, vid):
        self.alloc_matrix("A")
        self.alloc_matrix("B")
        self.alloc_matrix("C")
        self.alloc_matrix("D")
        self.alloc_matrix("E", init=False)
        self.alloc_matrix("F", init=False)
        self.alloc_matrix("G", init=False)

    def kernel_rep(self, policy, data):
        A, B, C, D = data["A"], data["B"], data["C"], data["D"]
        E, F, G = data["E"], data["F"], data["G"]

        def e_rows(i):
            E[i, :] = A[i, :] @ B

        def f_rows(i):
            F[i, :] = C[i, :] @ D

        def g_rows(i):
            G[i, :] = E[i, :] @ F

        forall(policy, 0, self.extent, e_rows)
        forall(policy, 0, self.extent, f_rows)
        forall(policy, 0, self.extent, g_rows)

    def _compute_checksum(self, vid):
        return self.checksum_of("G")


class Gemmver(_MatrixKernel):
    """Rank-2 update of A followed by two matrix-vector products."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Polybench_GEMMVER, run_params, 4096, 3, backend_config, logger)

    def _set_up(self, vid):
        n = self.extent
        self.alloc_matrix("A")
        for name in ("u1", "v1", "u2", "v2", "y", "z"):
            self.alloc_and_init_data(name, n)
        self.alloc_and_init_data_const("w", n, 0.0)
        self.alloc_and_init_data_const("x", n, 0.0)
        self.alpha = POLYBENCH_ALPHA
        self.beta = POLYBENCH_BETA

    def kernel_rep(self, policy, data):
        A, w, x, y, z = data["A"], data["w"], data["x"], data["y"], data["z"]
        u1, v1, u2, v2 = data["u1"], data["v1"], data["u2"], data["v2"]
        alpha, beta = self.alpha, self.beta

        def rank2_update(i):
            A[i, :] = A[i, :] + u1[i, None] * v1 + u2[i, None] * v2

        def transposed_product(i):
            x[i] = x[i] + beta * (y @ A[:, i])

        def add_z(i):
            x[i] = x[i] + z[i]

        def product(i):
            w[i] = w[i] + alpha * (A[i, :] @ x)

        n = self.extent
        forall(policy, 0, n, rank2_update)
        forall(policy, 0, n, transposed_product)
        forall(policy, 0, n, add_z)
        forall(policy, 0, n, product)

    def _compute_checksum(self, vid):
        return self.checksum_of("w")
