# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""STREAM memory bandwidth kernels."""

from ..forall import ReduceSum, forall
from ..registry import KernelID
from .base import ForallKernel

STREAM_DEFAULT_SIZE = 100000
STREAM_DEFAULT_REPS = 5
STREAM_SCALAR = 3.14159


class _StreamKernel(ForallKernel):
    kernel_id: KernelID

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(
            self.kernel_id,
            run_params,
            default_size=STREAM_DEFAULT_SIZE,
            default_reps=STREAM_DEFAULT_REPS,
            backend_config=backend_config,
            logger=logger,
        )


class Copy(_StreamKernel):
    """c[i] = a[i]"""

    kernel_id = KernelID.Stream_COPY

    def _set_up(self, vid):
        self.alloc_and_init_data("a", self.run_size)
        self.alloc_and_init_data_const("c", self.run_size, 0.0)

    def kernel_rep(self, policy, data):
        a, c = data["a"], data["c"]

        def body(i):
            c[i] = a[i]

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("c")


class Mul(_StreamKernel):
    """b[i] = alpha * c[i]"""

    kernel_id = KernelID.Stream_MUL

    def _set_up(self, vid):
        self.alloc_and_init_data_const("b", self.run_size, 0.0)
        self.alloc_and_init_data("c", self.run_size)
        self.alpha = STREAM_SCALAR

    def kernel_rep(self, policy, data):
        b, c = data["b"], data["c"]
        alpha = self.alpha

        def body(i):
            b[i] = alpha * c[i]

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("b")


class Add(_StreamKernel):
    """c[i] = a[i] + b[i]"""

    kernel_id = KernelID.Stream_ADD

    def _set_up(self, vid):
        self.alloc_and_init_data("a", self.run_size)
        self.alloc_and_init_data("b", self.run_size)
        self.alloc_and_init_data_const("c", self.run_size, 0.0)

    def kernel_rep(self, policy, data):
        a, b, c = data["a"], data["b"], data["c"]

        def body(i):
            c[i] = a[i] + b[i]

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("c")


class Triad(_StreamKernel):
    """a[i] = b[i] + alpha * c[i]"""

    kernel_id = KernelID.Stream_TRIAD

    def _set_up(self, vid):
        self.alloc_and_init_data_const("a", self.run_size, 0.0)
        self.alloc_and_init_data("b", self.run_size)
        self.alloc_and_init_data("c", self.run_size)
        self.alpha = STREAM_SCALAR

    def kernel_rep(self, policy, data):
        a, b, c = data["a"], data["b"], data["c"]
        alpha = self.alpha

        def body(i):
            a[i] = b[i] + alpha * c[i]

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("a")


class Dot(_StreamKernel):
    """dot += a[i] * b[i], accumulated over repetitions."""

    kernel_id = KernelID.Stream_DOT

    def _set_up(self, vid):
        self.alloc_and_init_data("a", self.run_size)
        self.alloc_and_init_data("b", self.run_size)
        self.dot = 0.0
        self.dot_init = 0.0

    def kernel_rep(self, policy, data):
        a, b = data["a"], data["b"]
        dot = ReduceSum(policy, self.dot_init)

        def body(i):
            dot.add(a[i] * b[i])

        forall(policy, 0, self.run_size, body)
        self.dot += dot.get()

    def _compute_checksum(self, vid):
        return self.dot
