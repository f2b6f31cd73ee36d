# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Tests for the kernel factory and the kernel catalogue

Every kernel must produce the same checksum in every host variant.
"""

import pytest

from perfsuite.kernels import KERNEL_CLASSES, ForallKernel, VariantStatus, get_kernel_object
from perfsuite.registry import KernelID, VariantID

HOST_VARIANTS = [VariantID.Base_Seq, VariantID.RAJA_Seq, VariantID.Base_OpenMP, VariantID.RAJA_OpenMP]


class TestFactory:
    def test_every_kernel_has_a_class(self):
        assert set(KERNEL_CLASSES) == set(KernelID)

    @pytest.mark.parametrize("kid", list(KernelID))
    def test_builds_kernel(self, kid, small_params, host_config):
        kernel = get_kernel_object(kid, small_params, backend_config=host_config)
        assert kernel.kernel_id == kid
        assert kernel.name == kid.name
        assert kernel.buffers == {}
        assert kernel.default_size > 0 and kernel.default_reps > 0

    @pytest.mark.parametrize("bad", [len(KernelID), -1, "Stream_DOT", VariantID.Base_Seq])
    def test_rejects_non_kernel_id(self, bad, small_params):
        with pytest.raises(ValueError):
            get_kernel_object(bad, small_params)

    def test_fresh_instance_each_call(self, small_params, host_config):
        a = get_kernel_object(KernelID.Stream_DOT, small_params, backend_config=host_config)
        b = get_kernel_object(KernelID.Stream_DOT, small_params, backend_config=host_config)
        assert a is not b


@pytest.mark.timeout(120)
@pytest.mark.parametrize("kid", list(KernelID))
def test_host_variants_agree(kid, small_params, host_config):
    """All host variants produce checksums within 1e-9 of Base_Seq"""
    kernel = get_kernel_object(kid, small_params, backend_config=host_config)
    assert isinstance(kernel, ForallKernel)
    for vid in HOST_VARIANTS:
        assert kernel.execute(vid) == VariantStatus.RAN, kernel.name

    reference = kernel.checksum[VariantID.Base_Seq]
    assert reference == reference, "reference checksum is NaN"
    for vid in HOST_VARIANTS[1:]:
        delta = abs(reference - kernel.checksum[vid])
        scale = abs(reference) if reference != 0.0 else 1.0
        assert delta / scale <= 1e-9, f"{kernel.name} {vid.name}: {kernel.checksum[vid]} vs {reference}"


@pytest.mark.parametrize("kid", list(KernelID))
def test_device_variants_not_applicable_without_gpu(kid, small_params, host_config):
    kernel = get_kernel_object(kid, small_params, backend_config=host_config)
    assert kernel.execute(VariantID.Base_CUDA) == VariantStatus.NOT_APPLICABLE
    assert kernel.checksum[VariantID.Base_CUDA] == 0.0


def test_dot_checksum_value(host_config):
    """DOT accumulates the dot product once per repetition"""
    from perfsuite.data_utils import init_data, reset_data_init_count
    from perfsuite.run_params import RunParams

    params = RunParams(["--sizefrac", "0.001", "--sampfrac", "0.4"])
    kernel = get_kernel_object(KernelID.Stream_DOT, params, backend_config=host_config)
    kernel.execute(VariantID.RAJA_Seq)

    reset_data_init_count()
    a = init_data(kernel.run_size)
    b = init_data(kernel.run_size)
    assert kernel.checksum[VariantID.RAJA_Seq] == pytest.approx(kernel.run_reps * float(a @ b))


def test_reduce3_int_checksum_is_exact(small_params, host_config):
    kernel = get_kernel_object(KernelID.Basic_REDUCE3_INT, small_params, backend_config=host_config)
    kernel.execute(VariantID.Base_Seq)
    kernel.execute(VariantID.RAJA_OpenMP)
    assert kernel.checksum[VariantID.Base_Seq] == kernel.checksum[VariantID.RAJA_OpenMP]
