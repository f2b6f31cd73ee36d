# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Unit tests for execution policies and reducers

Bodies are written once and must give the same answer under every host policy.
"""

import threading

import numpy as np
import pytest

from perfsuite.forall import (
    TORCH_AVAILABLE,
    CudaExec,
    OmpParallelForExec,
    ReduceMax,
    ReduceMin,
    ReduceSum,
    SeqExec,
    SimdExec,
    forall,
    gpu_device_available,
    make_policy,
)
from perfsuite.registry import VariantID


@pytest.fixture(params=["seq", "simd", "omp_static", "omp_dynamic"])
def policy(request):
    """Every host policy"""
    policies = {
        "seq": lambda: SeqExec(),
        "simd": lambda: SimdExec(),
        "omp_static": lambda: OmpParallelForExec(3),
        "omp_dynamic": lambda: OmpParallelForExec(3, chunk_size=7),
    }
    with policies[request.param]() as p:
        yield p


class TestForall:
    def test_body_writes_every_element(self, policy):
        a = np.arange(50, dtype=np.float64)
        c = np.zeros(50)

        def body(i):
            c[i] = 2.0 * a[i]

        forall(policy, 0, 50, body)
        np.testing.assert_array_equal(c, 2.0 * a)

    def test_sub_range(self, policy):
        c = np.zeros(20)

        def body(i):
            c[i] = 1.0

        forall(policy, 5, 15, body)
        assert c.sum() == 10.0
        assert c[:5].sum() == 0.0 and c[15:].sum() == 0.0

    def test_empty_range_does_nothing(self, policy):
        calls = []
        forall(policy, 4, 4, calls.append)
        assert calls == []

    def test_exception_propagates(self, policy):
        def body(i):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            forall(policy, 0, 10, body)

    def test_seq_visits_in_order(self):
        seen = []
        forall(SeqExec(), 0, 5, seen.append)
        assert seen == [0, 1, 2, 3, 4]

    def test_simd_single_call(self):
        seen = []
        forall(SimdExec(), 2, 6, seen.append)
        assert len(seen) == 1
        assert seen[0].tolist() == [2, 3, 4, 5]


class TestChunks:
    def test_static_chunks_cover_range(self):
        with OmpParallelForExec(4) as p:
            chunks = p.chunks(0, 10)
        assert chunks == [(0, 3), (3, 6), (6, 8), (8, 10)]

    def test_static_skips_empty_chunks(self):
        with OmpParallelForExec(8) as p:
            assert p.chunks(0, 3) == [(0, 1), (1, 2), (2, 3)]

    def test_dynamic_chunks(self):
        with OmpParallelForExec(2, chunk_size=4) as p:
            assert p.chunks(1, 11) == [(1, 5), (5, 9), (9, 11)]

    def test_runs_on_worker_threads(self):
        names = set()
        lock = threading.Lock()

        def body(i):
            with lock:
                names.add(threading.current_thread().name)

        with OmpParallelForExec(2) as p:
            forall(p, 0, 100, body)
        assert all(name.startswith("perfsuite-omp") for name in names)

    def test_close_shuts_down_pool(self):
        p = OmpParallelForExec(2)
        with p:
            pass
        with pytest.raises(RuntimeError):
            forall(p, 0, 10, lambda i: None)


class TestReducers:
    def test_sum(self, policy):
        a = np.arange(1, 101, dtype=np.float64)
        total = ReduceSum(policy, 0.5)

        def body(i):
            total.add(a[i])

        forall(policy, 0, 100, body)
        assert total.get() == pytest.approx(5050.5)

    def test_min_max_int(self, policy):
        v = np.array([5, -7, 3, 12, 0, -2], dtype=np.int64)
        vmin = ReduceMin(policy, 2**31 - 1)
        vmax = ReduceMax(policy, -(2**31))

        def body(i):
            vmin.min(v[i])
            vmax.max(v[i])

        forall(policy, 0, len(v), body)
        assert vmin.get() == -7
        assert vmax.get() == 12
        assert isinstance(vmin.get(), int)

    def test_init_value_kept_when_nothing_reduced(self, policy):
        total = ReduceSum(policy, 3.0)
        forall(policy, 0, 0, lambda i: total.add(i))
        assert total.get() == 3.0


class TestMakePolicy:
    def test_host_variants(self, host_config):
        assert isinstance(make_policy(VariantID.Base_Seq, host_config), SeqExec)
        assert isinstance(make_policy(VariantID.RAJA_Seq, host_config), SimdExec)
        with make_policy(VariantID.Base_OpenMP, host_config) as p:
            assert isinstance(p, OmpParallelForExec)
            assert p.chunk_size is None
            assert p.num_threads == 2
        with make_policy(VariantID.RAJA_OpenMP, host_config) as p:
            assert p.chunk_size is not None

    def test_rejects_non_variant(self, host_config):
        with pytest.raises(ValueError):
            make_policy(17, host_config)

    def test_gpu_probe_rejects_non_cuda_device(self):
        assert gpu_device_available("cpu") is False


@pytest.mark.gpu
@pytest.mark.skipif(not (TORCH_AVAILABLE and gpu_device_available()), reason="requires a torch-visible GPU")
class TestCudaExec:
    def test_dot_matches_host(self):
        a = np.linspace(0.0, 1.0, 1000)
        with CudaExec("cuda:0", asynchronous=True) as policy:
            bound = policy.space.bind({"a": a})
            dot = ReduceSum(policy, 0.0)

            def body(i):
                dot.add(bound["a"][i] * bound["a"][i])

            forall(policy, 0, 1000, body)
            assert dot.get() == pytest.approx(float(a @ a))
