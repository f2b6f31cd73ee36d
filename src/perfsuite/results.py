# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""Result structures produced by the suite driver."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .kernels.base import VariantStatus


@dataclass
class VariantResult:
    """
    Outcome of every pass of one variant of one kernel.

    Attributes:
        variant: Variant name (e.g., "RAJA_Seq")
        status: RAN if every pass ran, otherwise the first non-RAN status seen
        total_time: Accumulated seconds over all passes (None unless RAN)
        pass_times: Seconds of each timed region, in execution order (empty unless RAN)
        checksum: Accumulated checksum over all passes (None unless RAN)
        speedup: Reference total time / this total time (None unless both RAN)
    """

    variant: str
    status: VariantStatus
    total_time: Optional[float] = None
    pass_times: List[float] = field(default_factory=list)
    checksum: Optional[float] = None
    speedup: Optional[float] = None

    @property
    def ran(self) -> bool:
        return self.status == VariantStatus.RAN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variant": self.variant,
            "status": self.status.value,
            "total_time": self.total_time,
            "pass_times": list(self.pass_times),
            "checksum": self.checksum,
            "speedup": self.speedup,
        }


@dataclass
class ChecksumComparison:
    """
    Checksum of one variant against the reference variant.

    Attributes:
        variant: Compared variant name
        delta: reference checksum minus variant checksum
        relative_delta: |delta| / |reference|, or |delta| when the reference is 0
        within_tolerance: relative_delta <= tolerance
    """

    variant: str
    delta: float
    relative_delta: float
    within_tolerance: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variant": self.variant,
            "delta": self.delta,
            "relative_delta": self.relative_delta,
            "within_tolerance": self.within_tolerance,
        }


@dataclass
class KernelResult:
    """
    All variants of one kernel plus their cross-check against the reference.

    Attributes:
        kernel: Full kernel name
        run_size: Problem size actually used
        run_reps: Repetitions per pass
        variants: Per-variant results, in variant order
        reference_variant: Variant the comparisons are relative to, or None if it did not run
        comparisons: One entry per non-reference variant that ran
        warnings: Correctness warnings for this kernel
    """

    kernel: str
    run_size: int
    run_reps: int
    variants: List[VariantResult] = field(default_factory=list)
    reference_variant: Optional[str] = None
    comparisons: List[ChecksumComparison] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def get_variant(self, name: str) -> Optional[VariantResult]:
        for result in self.variants:
            if result.variant == name:
                return result
        return None

    def get_comparison(self, name: str) -> Optional[ChecksumComparison]:
        for comparison in self.comparisons:
            if comparison.variant == name:
                return comparison
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kernel": self.kernel,
            "run_size": self.run_size,
            "run_reps": self.run_reps,
            "reference_variant": self.reference_variant,
            "variants": [v.to_dict() for v in self.variants],
            "comparisons": [c.to_dict() for c in self.comparisons],
            "warnings": list(self.warnings),
        }


@dataclass
class RunResult:
    """
    Everything one suite run produced.

    Attributes:
        kernels: Per-kernel results, in kernel order
        variants: Variant names that were run
        reference_variant: Requested reference variant after fallback
        npasses: Passes per variant
        tolerance: Relative checksum tolerance used for the comparisons
        unavailable_variants: Requested variants this process cannot run
        invalid_kernel_input: Kernel tokens that did not resolve
        invalid_variant_input: Variant tokens that did not resolve
    """

    kernels: List[KernelResult] = field(default_factory=list)
    variants: List[str] = field(default_factory=list)
    reference_variant: Optional[str] = None
    npasses: int = 1
    tolerance: float = 0.0
    unavailable_variants: List[str] = field(default_factory=list)
    invalid_kernel_input: List[str] = field(default_factory=list)
    invalid_variant_input: List[str] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [w for k in self.kernels for w in k.warnings]

    def get_kernel(self, name: str) -> Optional[KernelResult]:
        for result in self.kernels:
            if result.kernel == name:
                return result
        return None

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "reference_variant": self.reference_variant,
            "npasses": self.npasses,
            "tolerance": self.tolerance,
            "variants": list(self.variants),
            "unavailable_variants": list(self.unavailable_variants),
            "invalid_kernel_input": list(self.invalid_kernel_input),
            "invalid_variant_input": list(self.invalid_variant_input),
            "kernels": [k.to_dict() for k in self.kernels],
        }
