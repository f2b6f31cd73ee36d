# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""Livermore Compiler Analysis Loop Suite kernels."""

from ..forall import forall
from ..registry import KernelID
from .base import ForallKernel


class Hydro1D(ForallKernel):
    """Hydro fragment: x[i] = q + y[i] * (r * z[i + 10] + t * z[i + 11])"""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Lcals_HYDRO_1D, run_params, 100000, 5, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data_const("x", n, 0.0)
        self.alloc_and_init_data("y", n)
        self.alloc_and_init_data("z", n + 12)
        self.q = 0.5
        self.r = 0.25
        self.t = 0.125

    def kernel_rep(self, policy, data):
        x, y, z = data["x"], data["y"], data["z"]
        q, r, t = self.q, self.r, self.t

        def body(i):
            x[i] = q + y[i] * (r * z[i + 10] + t * z[i + 11])

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("x")


class Eos(ForallKernel):
    """Equation of state fragment over a 7-point stencil of u."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Lcals_EOS, run_params, 50000, 5, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data_const("x", n, 0.0)
        self.alloc_and_init_data("y", n)
        self.alloc_and_init_data("z", n)
        self.alloc_and_init_data("u", n + 7)
        self.q = 0.5
        self.r = 0.25
        self.t = 0.125

    def kernel_rep(self, policy, data):
        x, y, z, u = data["x"], data["y"], data["z"], data["u"]
        q, r, t = self.q, self.r, self.t

        def body(i):
            x[i] = (
                u[i]
                + r * (z[i] + r * y[i])
                + t * (u[i + 3] + r * (u[i + 2] + r * u[i + 1]) + t * (u[i + 6] + q * (u[i + 5] + q * u[i + 4])))
            )

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("x")


class FirstDiff(ForallKernel):
    """x[i] = y[i + 1] - y[i]"""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Lcals_FIRST_DIFF, run_params, 100000, 5, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data_const("x", n, 0.0)
        self.alloc_and_init_data("y", n + 1)

    def kernel_rep(self, policy, data):
        x, y = data["x"], data["y"]

        def body(i):
            x[i] = y[i + 1] - y[i]

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("x")
