# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Unit tests for the kernel lifecycle

Uses small hand-written kernels so every path of the state machine can be
driven directly.
"""

import itertools

import numpy as np
import pytest

from perfsuite.exceptions import LifecycleError
from perfsuite.forall import forall
from perfsuite.kernels import ForallKernel, KernelBase, VariantStatus, variant
from perfsuite.kernels import base as kernel_base
from perfsuite.registry import KernelID, VariantID
from perfsuite.run_params import RunParams


class ScaleKernel(ForallKernel):
    """b[i] = 2 * a[i], records every tear-down"""

    def __init__(self, run_params, backend_config=None, default_size=100, default_reps=3):
        super().__init__(KernelID.Stream_MUL, run_params, default_size, default_reps, backend_config)
        self.torn_down = []

    def _set_up(self, vid):
        self.alloc_and_init_data("a", self.run_size)
        self.alloc_and_init_data_const("b", self.run_size, 0.0)

    def kernel_rep(self, policy, data):
        a, b = data["a"], data["b"]

        def body(i):
            b[i] = 2.0 * a[i]

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("b")

    def _tear_down(self, vid):
        self.torn_down.append(vid)


class PartialKernel(ScaleKernel):
    """RAJA_Seq is declared but unsupported, Base_OpenMP always raises"""

    @variant(VariantID.RAJA_Seq, unsupported_reason="no vector form")
    def _run_raja_seq(self, vid):
        raise AssertionError("must not run")

    @variant(VariantID.Base_OpenMP)
    def _run_broken(self, vid):
        self.start_timer()
        raise RuntimeError("backend exploded")


class LateFailureKernel(ScaleKernel):
    """Base_Seq raises after its timed region from the second pass on"""

    @variant(VariantID.Base_Seq)
    def _run_then_fail(self, vid):
        self._run_with_policy(vid)
        if self.pass_times[vid][:-1]:
            raise RuntimeError("copy back failed")


class SetUpFailsKernel(ScaleKernel):
    def _set_up(self, vid):
        self.alloc_and_init_data("a", self.run_size)
        raise MemoryError("out of memory")


class BareKernel(KernelBase):
    """No variants at all"""

    def __init__(self, run_params, backend_config=None):
        super().__init__(KernelID.Basic_INIT3, run_params, 10, 1, backend_config)

    def _set_up(self, vid):
        self.alloc_data("x", self.run_size)

    def _compute_checksum(self, vid):
        return 0.0


@pytest.fixture
def params():
    return RunParams([])


@pytest.fixture
def kernel(params, host_config):
    return ScaleKernel(params, host_config)


class TestSizing:
    def test_defaults(self, kernel):
        assert kernel.run_size == 100
        assert kernel.run_reps == 3

    def test_size_fraction_truncates(self, host_config):
        k = ScaleKernel(RunParams(["--sizefrac", "0.5"]), host_config, default_size=1001)
        assert k.run_size == 500

    def test_never_below_one(self, host_config):
        k = ScaleKernel(RunParams(["--sizefrac", "0.001", "--sampfrac", "0.01"]), host_config)
        assert k.run_size == 1
        assert k.run_reps == 1

    def test_constructor_allocates_nothing(self, kernel):
        assert kernel.buffers == {}
        assert kernel.name == "Stream_MUL"

    def test_checksum_table_covers_all_variants(self, kernel):
        assert set(kernel.checksum) == set(VariantID)
        assert all(v == 0.0 for v in kernel.checksum.values())


class TestLifecycleOrder:
    """Misordered calls are programming errors"""

    def test_run_before_set_up(self, kernel):
        with pytest.raises(LifecycleError):
            kernel.run_kernel(VariantID.Base_Seq)

    def test_checksum_before_run(self, kernel):
        kernel.set_up(VariantID.Base_Seq)
        with pytest.raises(LifecycleError):
            kernel.update_checksum(VariantID.Base_Seq)

    def test_second_set_up_while_active(self, kernel):
        kernel.set_up(VariantID.Base_Seq)
        with pytest.raises(LifecycleError):
            kernel.set_up(VariantID.RAJA_Seq)

    def test_run_for_other_variant(self, kernel):
        kernel.set_up(VariantID.Base_Seq)
        with pytest.raises(LifecycleError) as exc_info:
            kernel.run_kernel(VariantID.RAJA_Seq)
        assert exc_info.value.kernel == "Stream_MUL"
        assert exc_info.value.variant == "RAJA_Seq"

    def test_checksum_twice(self, kernel):
        vid = VariantID.Base_Seq
        kernel.set_up(vid)
        kernel.run_kernel(vid)
        kernel.update_checksum(vid)
        with pytest.raises(LifecycleError):
            kernel.update_checksum(vid)

    def test_tear_down_without_set_up(self, kernel):
        with pytest.raises(LifecycleError):
            kernel.tear_down(VariantID.Base_Seq)

    @pytest.mark.parametrize("bad", [0, 6, "Base_Seq", None, KernelID.Stream_DOT])
    def test_non_variant_id(self, kernel, bad):
        with pytest.raises(LifecycleError):
            kernel.set_up(bad)
        with pytest.raises(LifecycleError):
            kernel.execute(bad)

    def test_execute_while_active(self, kernel):
        kernel.set_up(VariantID.Base_Seq)
        with pytest.raises(LifecycleError):
            kernel.execute(VariantID.Base_Seq)
        assert kernel.active_variant == VariantID.Base_Seq

    def test_manual_sequence(self, kernel):
        vid = VariantID.RAJA_Seq
        kernel.set_up(vid)
        assert set(kernel.buffers) == {"a", "b"}
        assert kernel.run_kernel(vid) == VariantStatus.RAN
        kernel.update_checksum(vid)
        kernel.tear_down(vid)
        assert kernel.buffers == {}
        assert kernel.active_variant is None
        assert kernel.checksum[vid] != 0.0


class TestExecute:
    def test_ran(self, kernel):
        assert kernel.execute(VariantID.Base_Seq) == VariantStatus.RAN
        assert kernel.checksum[VariantID.Base_Seq] > 0.0
        assert kernel.tot_time[VariantID.Base_Seq] > 0.0
        assert len(kernel.pass_times[VariantID.Base_Seq]) == 1
        assert kernel.buffers == {}
        assert kernel.torn_down == [VariantID.Base_Seq]

    def test_checksum_accumulates_across_passes(self, kernel):
        kernel.execute(VariantID.Base_Seq)
        once = kernel.checksum[VariantID.Base_Seq]
        kernel.execute(VariantID.Base_Seq)
        assert kernel.checksum[VariantID.Base_Seq] == pytest.approx(2 * once)

    def test_variants_agree(self, kernel):
        for vid in (VariantID.Base_Seq, VariantID.RAJA_Seq, VariantID.Base_OpenMP, VariantID.RAJA_OpenMP):
            assert kernel.execute(vid) == VariantStatus.RAN
        ref = kernel.checksum[VariantID.Base_Seq]
        for vid in (VariantID.RAJA_Seq, VariantID.Base_OpenMP, VariantID.RAJA_OpenMP):
            assert abs(kernel.checksum[vid] - ref) <= 1e-9 * abs(ref)

    def test_set_up_does_not_depend_on_previous_variant(self, kernel):
        kernel.execute(VariantID.Base_Seq)
        kernel.execute(VariantID.RAJA_Seq)
        assert kernel.checksum[VariantID.Base_Seq] == kernel.checksum[VariantID.RAJA_Seq]


class TestUnsupportedAndFailed:
    """Tri-state results never touch checksum or timer unless the variant ran"""

    def test_unsupported_on_kernel(self, params, host_config):
        k = PartialKernel(params, host_config)
        assert k.execute(VariantID.RAJA_Seq) == VariantStatus.NOT_APPLICABLE
        assert k.checksum[VariantID.RAJA_Seq] == 0.0
        assert k.tot_time[VariantID.RAJA_Seq] == 0.0
        assert k.torn_down == [VariantID.RAJA_Seq]
        assert k.get_unsupported_reason(VariantID.RAJA_Seq) == "no vector form"

    def test_not_enabled_in_process(self, params, seq_config):
        k = ScaleKernel(params, seq_config)
        assert k.execute(VariantID.Base_OpenMP) == VariantStatus.NOT_APPLICABLE
        assert k.checksum[VariantID.Base_OpenMP] == 0.0
        assert "not enabled" in k.get_unsupported_reason(VariantID.Base_OpenMP)

    def test_gpu_variant_without_gpu(self, kernel):
        assert kernel.execute(VariantID.Base_CUDA) == VariantStatus.NOT_APPLICABLE
        assert kernel.execute(VariantID.RAJA_CUDA) == VariantStatus.NOT_APPLICABLE

    def test_missing_from_dispatch_table(self, params, host_config):
        k = BareKernel(params, host_config)
        assert k.get_implemented_variants() == []
        assert k.execute(VariantID.Base_Seq) == VariantStatus.NOT_APPLICABLE
        assert k.buffers == {}

    def test_backend_failure(self, params, host_config, caplog):
        k = PartialKernel(params, host_config)
        assert k.execute(VariantID.Base_OpenMP) == VariantStatus.FAILED
        assert k.checksum[VariantID.Base_OpenMP] == 0.0
        assert k.tot_time[VariantID.Base_OpenMP] == 0.0
        assert k.pass_times[VariantID.Base_OpenMP] == []
        assert k.torn_down == [VariantID.Base_OpenMP]
        assert "backend exploded" in caplog.text

    def test_failure_after_timer_discards_timing(self, params, host_config):
        k = LateFailureKernel(params, host_config)
        assert k.execute(VariantID.Base_Seq) == VariantStatus.RAN
        first_time = k.tot_time[VariantID.Base_Seq]
        first_checksum = k.checksum[VariantID.Base_Seq]

        assert k.execute(VariantID.Base_Seq) == VariantStatus.FAILED
        assert k.tot_time[VariantID.Base_Seq] == first_time
        assert k.pass_times[VariantID.Base_Seq] == [first_time]
        assert k.checksum[VariantID.Base_Seq] == first_checksum

    def test_set_up_failure_still_tears_down(self, params, host_config):
        k = SetUpFailsKernel(params, host_config)
        assert k.execute(VariantID.Base_Seq) == VariantStatus.FAILED
        assert k.buffers == {}
        assert k.torn_down == [VariantID.Base_Seq]
        assert k.active_variant is None

    def test_subclass_entry_overrides_base_table(self, params, host_config):
        k = PartialKernel(params, host_config)
        assert VariantID.RAJA_Seq not in k.get_implemented_variants()
        assert VariantID.Base_Seq in k.get_implemented_variants()
        assert k.has_variant_defined(VariantID.Base_Seq)


class TestTimer:
    def test_passes_are_additive(self, kernel, monkeypatch):
        """Three passes accumulate to the sum of three single-pass timings"""
        ticks = itertools.chain([10.0, 10.5, 20.0, 21.0, 30.0, 32.0])
        monkeypatch.setattr(kernel_base, "perf_counter", lambda: next(ticks))
        for _ in range(3):
            kernel.execute(VariantID.RAJA_Seq)
        assert kernel.pass_times[VariantID.RAJA_Seq] == [0.5, 1.0, 2.0]
        assert kernel.tot_time[VariantID.RAJA_Seq] == pytest.approx(3.5)

    def test_timed_region_covers_all_reps(self, params, host_config, monkeypatch):
        reps_seen = []

        class CountingKernel(ScaleKernel):
            def kernel_rep(self, policy, data):
                reps_seen.append(self._timer_start is not None)
                super().kernel_rep(policy, data)

        k = CountingKernel(params, host_config, default_reps=4)
        k.execute(VariantID.Base_Seq)
        assert reps_seen == [True] * 4

    def test_stop_without_start(self, kernel):
        kernel.set_up(VariantID.Base_Seq)
        with pytest.raises(LifecycleError):
            kernel.stop_timer()

    def test_buffers_are_host_arrays(self, kernel):
        kernel.set_up(VariantID.Base_Seq)
        assert all(isinstance(v, np.ndarray) for v in kernel.buffers.values())
        kernel.tear_down(VariantID.Base_Seq)
