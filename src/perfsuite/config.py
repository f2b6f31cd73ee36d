# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Backend configuration.

Which variants can run is decided once per process from the environment and
from what the host offers:

    PERFSUITE_NUM_THREADS     thread team size for the OpenMP-style variants
                              (default: os.cpu_count())
    PERFSUITE_DISABLE_OPENMP  disable the thread-parallel variants
    PERFSUITE_DISABLE_CUDA    disable the GPU variants
    PERFSUITE_CUDA_DEVICE     torch device for the GPU variants (default: cuda:0)
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from .forall import gpu_device_available
from .registry import CUDA_VARIANTS, OPENMP_VARIANTS, SEQUENTIAL_VARIANTS, VariantID

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class BackendConfig:
    """Capabilities of the current process.

    Attributes:
        openmp (bool): Thread-parallel variants are enabled.
        cuda (bool): GPU variants are enabled.
        num_threads (int): Worker threads per thread team.
        cuda_device (str): torch device string used by the GPU variants.
    """

    openmp: bool
    cuda: bool
    num_threads: int
    cuda_device: str

    @property
    def supported_variants(self) -> Tuple[VariantID, ...]:
        """Variants that can run with this configuration, in enumeration order."""
        variants = list(SEQUENTIAL_VARIANTS)
        if self.openmp:
            variants.extend(OPENMP_VARIANTS)
        if self.cuda:
            variants.extend(CUDA_VARIANTS)
        return tuple(sorted(variants))


def load_backend_config() -> BackendConfig:
    """Build a `BackendConfig` from the environment."""
    num_threads = os.getenv("PERFSUITE_NUM_THREADS")
    try:
        threads = int(num_threads) if num_threads else (os.cpu_count() or 1)
    except ValueError:
        msg = f"PERFSUITE_NUM_THREADS must be an integer, got '{num_threads}'"
        raise ValueError(msg) from None
    if threads < 1:
        msg = f"PERFSUITE_NUM_THREADS must be positive, got {threads}"
        raise ValueError(msg)

    device = os.getenv("PERFSUITE_CUDA_DEVICE", "cuda:0")
    return BackendConfig(
        openmp=not _env_flag("PERFSUITE_DISABLE_OPENMP"),
        cuda=(not _env_flag("PERFSUITE_DISABLE_CUDA")) and gpu_device_available(device),
        num_threads=threads,
        cuda_device=device,
    )


@lru_cache(maxsize=None)
def get_backend_config() -> BackendConfig:
    """Process-wide backend configuration, computed on first use."""
    return load_backend_config()


def supported_variants() -> Tuple[VariantID, ...]:
    """Variants available in this process."""
    return get_backend_config().supported_variants
