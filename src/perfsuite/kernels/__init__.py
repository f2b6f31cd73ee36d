# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Kernel catalogue and factory.

Usage:
    from perfsuite.kernels import get_kernel_object
    from perfsuite.registry import KernelID, VariantID

    kernel = get_kernel_object(KernelID.Stream_DOT, run_params)
    kernel.execute(VariantID.Base_Seq)
"""

from typing import Dict, Type

from ..registry import KernelID
from .apps import Couple, DelDotVec2D, Energy, Fir, Pressure, Vol3D
from .base import ForallKernel, KernelBase, VariantStatus
from .basic import IfQuad, Init3, MulAddSub, NestedInit, Reduce3Int, TrapInt
from .decorator import variant
from .lcals import Eos, FirstDiff, Hydro1D
from .polybench import Gemmver, ThreeMM, TwoMM
from .stream import Add, Copy, Dot, Mul, Triad

# Must cover every KernelID member.
KERNEL_CLASSES: Dict[KernelID, Type[KernelBase]] = {
    KernelID.Basic_MULADDSUB: MulAddSub,
    KernelID.Basic_IF_QUAD: IfQuad,
    KernelID.Basic_TRAP_INT: TrapInt,
    KernelID.Basic_INIT3: Init3,
    KernelID.Basic_REDUCE3_INT: Reduce3Int,
    KernelID.Basic_NESTED_INIT: NestedInit,
    KernelID.Lcals_HYDRO_1D: Hydro1D,
    KernelID.Lcals_EOS: Eos,
    KernelID.Lcals_FIRST_DIFF: FirstDiff,
    KernelID.Polybench_2MM: TwoMM,
    KernelID.Polybench_3MM: ThreeMM,
    KernelID.Polybench_GEMMVER: Gemmver,
    KernelID.Stream_COPY: Copy,
    KernelID.Stream_MUL: Mul,
    KernelID.Stream_ADD: Add,
    KernelID.Stream_TRIAD: Triad,
    KernelID.Stream_DOT: Dot,
    KernelID.Apps_PRESSURE: Pressure,
    KernelID.Apps_ENERGY: Energy,
    KernelID.Apps_VOL3D: Vol3D,
    KernelID.Apps_DEL_DOT_VEC_2D: DelDotVec2D,
    KernelID.Apps_COUPLE: Couple,
    KernelID.Apps_FIR: Fir,
}


def get_kernel_object(kid: KernelID, run_params, backend_config=None, logger=None) -> KernelBase:
    """
    Construct the kernel for a KernelID

    Constructors only record sizes; buffers are allocated in set_up.

    Args:
        kid: Kernel to construct
        run_params: RunParams providing the size and sample fractions
        backend_config: Optional BackendConfig (defaults to the process config)
        logger: Optional logger for the kernel

    Raises:
        ValueError: If kid is not a KernelID member
    """
    if not isinstance(kid, KernelID) or kid not in KERNEL_CLASSES:
        raise ValueError(f"Invalid KernelID value: {kid!r}")
    return KERNEL_CLASSES[kid](run_params, backend_config=backend_config, logger=logger)


__all__ = [
    "KERNEL_CLASSES",
    "ForallKernel",
    "KernelBase",
    "VariantStatus",
    "get_kernel_object",
    "variant",
]
