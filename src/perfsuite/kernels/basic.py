# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""Basic kernels: simple loops, reductions and nested initialisation."""

from ..forall import ReduceMax, ReduceMin, ReduceSum, forall
from ..registry import KernelID
from .base import ForallKernel

INT_MAX = 2**31 - 1
INT_MIN = -(2**31)


class MulAddSub(ForallKernel):
    """out1 = in1 * in2, out2 = in1 + in2, out3 = in1 - in2"""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Basic_MULADDSUB, run_params, 100000, 5, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data_const("out1", n, 0.0)
        self.alloc_and_init_data_const("out2", n, 0.0)
        self.alloc_and_init_data_const("out3", n, 0.0)
        self.alloc_and_init_data("in1", n)
        self.alloc_and_init_data("in2", n)

    def kernel_rep(self, policy, data):
        out1, out2, out3 = data["out1"], data["out2"], data["out3"]
        in1, in2 = data["in1"], data["in2"]

        def body(i):
            out1[i] = in1[i] * in2[i]
            out2[i] = in1[i] + in2[i]
            out3[i] = in1[i] - in2[i]

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("out1", "out2", "out3")


class IfQuad(ForallKernel):
    """Roots of a*x^2 + b*x + c, zero where the discriminant is negative."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Basic_IF_QUAD, run_params, 50000, 5, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data_rand_sign("a", n)
        self.alloc_and_init_data("b", n)
        self.alloc_and_init_data_rand_sign("c", n)
        self.alloc_and_init_data_const("x1", n, 0.0)
        self.alloc_and_init_data_const("x2", n, 0.0)

    def kernel_rep(self, policy, data):
        a, b, c = data["a"], data["b"], data["c"]
        x1, x2 = data["x1"], data["x2"]
        sp = policy.space

        def body(i):
            s = b[i] * b[i] - 4.0 * a[i] * c[i]
            real_roots = s >= 0.0
            s = sp.sqrt(sp.where(real_roots, s, 0.0))
            x2[i] = sp.where(real_roots, (-b[i] + s) / (2.0 * a[i]), 0.0)
            x1[i] = sp.where(real_roots, (-b[i] - s) / (2.0 * a[i]), 0.0)

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("x1", "x2")


class TrapInt(ForallKernel):
    """Trapezoid rule integration of 1 / sqrt((x - xp)^2 + (y - yp)^2)."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Basic_TRAP_INT, run_params, 100000, 5, backend_config, logger)

    def _set_up(self, vid):
        self.x0 = 0.0
        self.xp = 1.5
        self.y = 0.3
        self.yp = 0.1
        self.h = (self.xp - self.x0) / self.run_size
        self.sumx_init = 0.5
        self.sumx = 0.0

    def kernel_rep(self, policy, data):
        x0, xp, y, yp, h = self.x0, self.xp, self.y, self.yp, self.h
        sp = policy.space
        sumx = ReduceSum(policy, self.sumx_init)

        def body(i):
            x = x0 + sp.real_index(i) * h
            denom = (x - xp) * (x - xp) + (y - yp) * (y - yp)
            sumx.add(1.0 / sp.sqrt(denom))

        forall(policy, 0, self.run_size, body)
        self.sumx += sumx.get() * h

    def _compute_checksum(self, vid):
        return self.sumx


class Init3(ForallKernel):
    """out1 = out2 = out3 = -in1 - in2"""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Basic_INIT3, run_params, 100000, 5, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data_const("out1", n, 0.0)
        self.alloc_and_init_data_const("out2", n, 0.0)
        self.alloc_and_init_data_const("out3", n, 0.0)
        self.alloc_and_init_data("in1", n)
        self.alloc_and_init_data("in2", n)

    def kernel_rep(self, policy, data):
        out1, out2, out3 = data["out1"], data["out2"], data["out3"]
        in1, in2 = data["in1"], data["in2"]

        def body(i):
            out1[i] = out2[i] = out3[i] = -in1[i] - in2[i]

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("out1", "out2", "out3")


class Reduce3Int(ForallKernel):
    """Sum, min and max of an integer vector in one pass."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Basic_REDUCE3_INT, run_params, 100000, 5, backend_config, logger)

    def _set_up(self, vid):
        self.alloc_and_init_data_int("vec", self.run_size)
        self.vsum = 0
        self.vsum_init = 0
        self.vmin = INT_MAX
        self.vmin_init = INT_MAX
        self.vmax = INT_MIN
        self.vmax_init = INT_MIN

    def kernel_rep(self, policy, data):
        vec = data["vec"]
        vsum = ReduceSum(policy, self.vsum_init)
        vmin = ReduceMin(policy, self.vmin_init)
        vmax = ReduceMax(policy, self.vmax_init)

        def body(i):
            vsum.add(vec[i])
            vmin.min(vec[i])
            vmax.max(vec[i])

        forall(policy, 0, self.run_size, body)
        self.vsum += vsum.get()
        self.vmin = min(self.vmin, vmin.get())
        self.vmax = max(self.vmax, vmax.get())

    def _compute_checksum(self, vid):
        return float(self.vsum + self.vmin + self.vmax)


class NestedInit(ForallKernel):
    """array[i, j, k] = 1e-8 * i * j * k over a cube, one flat loop."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Basic_NESTED_INIT, run_params, 64000, 3, backend_config, logger)

    @property
    def extent(self) -> int:
        return max(1, round(self.run_size ** (1.0 / 3.0)))

    def _set_up(self, vid):
        n = self.extent
        self.alloc_and_init_data_const("array", n * n * n, 0.0)

    def kernel_rep(self, policy, data):
        array = data["array"]
        n = self.extent
        sp = policy.space

        def body(idx):
            i = idx % n
            j = (idx // n) % n
            k = idx // (n * n)
            array[idx] = 1.0e-8 * sp.real_index(i) * j * k

        forall(policy, 0, n * n * n, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("array")
