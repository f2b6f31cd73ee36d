# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

from unittest.mock import patch

import pytest

from perfsuite.config import BackendConfig, get_backend_config, load_backend_config, supported_variants
from perfsuite.registry import VariantID


class TestLoadBackendConfig:
    """Environment-driven configuration"""

    def test_thread_count_from_environment(self, monkeypatch):
        monkeypatch.setenv("PERFSUITE_NUM_THREADS", "3")
        assert load_backend_config().num_threads == 3

    @pytest.mark.parametrize("value", ["many", "0", "-2"])
    def test_bad_thread_count(self, monkeypatch, value):
        monkeypatch.setenv("PERFSUITE_NUM_THREADS", value)
        with pytest.raises(ValueError) as exc_info:
            load_backend_config()
        assert "PERFSUITE_NUM_THREADS" in str(exc_info.value)

    def test_disable_openmp(self, monkeypatch):
        monkeypatch.setenv("PERFSUITE_DISABLE_OPENMP", "1")
        config = load_backend_config()
        assert config.openmp is False
        assert VariantID.Base_OpenMP not in config.supported_variants

    def test_cuda_disabled_by_environment(self, monkeypatch):
        with patch("perfsuite.config.gpu_device_available", return_value=True):
            config = load_backend_config()
        assert config.cuda is False

    def test_cuda_requires_device(self, monkeypatch):
        monkeypatch.delenv("PERFSUITE_DISABLE_CUDA")
        with patch("perfsuite.config.gpu_device_available", return_value=False):
            assert load_backend_config().cuda is False
        with patch("perfsuite.config.gpu_device_available", return_value=True):
            assert load_backend_config().cuda is True

    def test_device_string(self, monkeypatch):
        monkeypatch.setenv("PERFSUITE_CUDA_DEVICE", "cuda:1")
        assert load_backend_config().cuda_device == "cuda:1"


class TestSupportedVariants:
    """Runtime set of runnable variants"""

    def test_sequential_always_supported(self, seq_config):
        assert seq_config.supported_variants == (VariantID.Base_Seq, VariantID.RAJA_Seq)

    def test_all_backends(self):
        config = BackendConfig(openmp=True, cuda=True, num_threads=4, cuda_device="cuda:0")
        assert config.supported_variants == tuple(VariantID)

    def test_process_config_is_cached(self):
        assert get_backend_config() is get_backend_config()
        assert supported_variants() == get_backend_config().supported_variants
        assert VariantID.Base_CUDA not in supported_variants()
