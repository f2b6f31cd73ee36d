# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

import pytest

from perfsuite.config import BackendConfig, get_backend_config
from perfsuite.run_params import RunParams


@pytest.fixture(autouse=True)
def host_only_environment(monkeypatch):
    """Keep tests on the host backends and recompute the process config per test"""
    monkeypatch.setenv("PERFSUITE_DISABLE_CUDA", "1")
    monkeypatch.setenv("PERFSUITE_NUM_THREADS", "2")
    monkeypatch.delenv("PERFSUITE_DISABLE_OPENMP", raising=False)
    get_backend_config.cache_clear()
    yield
    get_backend_config.cache_clear()


@pytest.fixture
def host_config():
    """Sequential and thread variants, no GPU"""
    return BackendConfig(openmp=True, cuda=False, num_threads=2, cuda_device="cuda:0")


@pytest.fixture
def seq_config():
    """Sequential variants only"""
    return BackendConfig(openmp=False, cuda=False, num_threads=1, cuda_device="cuda:0")


@pytest.fixture
def small_params():
    """Reduced sizes and repetitions so scalar loops stay fast"""
    return RunParams(["--sizefrac", "0.01", "--sampfrac", "0.4"])
