# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""perfsuite - Kernel performance suite with cross-variant checksum validation."""

from importlib.metadata import version

__version__ = version("perfsuite")

from .config import BackendConfig, get_backend_config, supported_variants
from .exceptions import ConfigurationError, LifecycleError, PerfSuiteError, ReportError
from .executor import DEFAULT_CHECKSUM_TOLERANCE, Executor
from .kernels import KernelBase, VariantStatus, get_kernel_object
from .registry import GroupID, KernelID, VariantID
from .results import ChecksumComparison, KernelResult, RunResult, VariantResult
from .run_params import InputState, RunParams

__all__ = [
    "DEFAULT_CHECKSUM_TOLERANCE",
    "BackendConfig",
    "ChecksumComparison",
    "ConfigurationError",
    "Executor",
    "GroupID",
    "InputState",
    "KernelBase",
    "KernelID",
    "KernelResult",
    "LifecycleError",
    "PerfSuiteError",
    "ReportError",
    "RunParams",
    "RunResult",
    "VariantID",
    "VariantResult",
    "VariantStatus",
    "__version__",
    "get_backend_config",
    "get_kernel_object",
    "supported_variants",
]
