# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Suite driver.

Usage:
    params = RunParams(["-k", "Stream", "-v", "Base_Seq", "RAJA_Seq"])
    executor = Executor(params)
    result = executor.run_suite()
    for warning in result.warnings:
        print(warning)
"""

import logging
from typing import Callable, List, Optional, TextIO

from .config import BackendConfig, get_backend_config
from .exceptions import ConfigurationError
from .kernels import KernelBase, VariantStatus, get_kernel_object
from .registry import KernelID, VariantID, get_variant_name
from .results import ChecksumComparison, KernelResult, RunResult, VariantResult
from .run_params import InputState, RunParams

# Relative checksum difference above which a variant is reported.
DEFAULT_CHECKSUM_TOLERANCE = 1.0e-9


class Executor:
    """
    Runs the selected kernels in the selected variants and cross-checks checksums.

    Kernels and variants run one at a time: for each kernel, for each variant,
    `npasses` full lifecycles. Checksums and times accumulate across passes.

    Args:
        run_params: Parsed run parameters (GoodToRun or DryRun)
        tolerance: Relative checksum tolerance for the correctness check
        backend_config: Backend capabilities (defaults to the process config)
        reporter: Called with the RunResult at the end of run_suite()
        logger: Logger (defaults to "perfsuite.<class name>")

    Raises:
        ConfigurationError: If run_params is not runnable
    """

    def __init__(
        self,
        run_params: RunParams,
        *,
        tolerance: float = DEFAULT_CHECKSUM_TOLERANCE,
        backend_config: Optional[BackendConfig] = None,
        reporter: Optional[Callable[[RunResult], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        state = run_params.input_state
        if state not in (InputState.GoodToRun, InputState.DryRun):
            msg = f"Cannot run with input state {state.value}"
            if run_params.errors:
                msg += ": " + "; ".join(run_params.errors)
            raise ConfigurationError(msg)
        if tolerance < 0:
            raise ValueError(f"Checksum tolerance must be non-negative, got {tolerance}")

        self.run_params = run_params
        self.tolerance = tolerance
        self.backend_config = backend_config or get_backend_config()
        self.reporter = reporter
        self.logger = logger or logging.getLogger(f"perfsuite.{self.__class__.__name__}")

        self.kernel_ids: List[KernelID] = []
        self.kernels: List[KernelBase] = []
        self.variant_ids: List[VariantID] = []
        self.unavailable_variants: List[VariantID] = []
        self.reference_variant: Optional[VariantID] = None
        self._is_set_up = False

    def setup_suite(self) -> None:
        """Resolve kernels, variants and the reference variant, and build the kernels."""
        params = self.run_params
        for token in params.invalid_kernel_input:
            self.logger.warning("Ignoring unknown kernel '%s'", token)
        for token in params.invalid_variant_input:
            self.logger.warning("Ignoring unknown variant '%s'", token)

        kernel_ids = list(params.kernel_ids) or list(KernelID)
        requested = list(params.variant_ids) or list(VariantID)
        supported = self.backend_config.supported_variants
        self.variant_ids = [vid for vid in requested if vid in supported]
        self.unavailable_variants = [vid for vid in requested if vid not in supported]

        if self.unavailable_variants:
            names = ", ".join(get_variant_name(vid) for vid in self.unavailable_variants)
            if params.variant_ids:
                self.logger.warning("Requested variants not available in this process: %s", names)
            else:
                self.logger.info("Variants not available in this process: %s", names)
        if not self.variant_ids:
            self.logger.warning("None of the selected variants can run in this process")

        requested_reference = VariantID[params.reference_variant]
        if requested_reference in self.variant_ids:
            self.reference_variant = requested_reference
        elif self.variant_ids:
            self.reference_variant = self.variant_ids[0]
            self.logger.warning(
                "Reference variant %s is not being run; using %s instead",
                params.reference_variant,
                get_variant_name(self.reference_variant),
            )
        else:
            self.reference_variant = None

        self.kernel_ids = kernel_ids
        self.kernels = self._build_kernels()
        self._is_set_up = True

    def _build_kernels(self) -> List[KernelBase]:
        return [
            get_kernel_object(kid, self.run_params, backend_config=self.backend_config) for kid in self.kernel_ids
        ]

    def run_suite(self) -> RunResult:
        """Run every kernel in every variant `npasses` times and compare checksums."""
        if not self._is_set_up:
            self.setup_suite()
        # One set of kernel instances per run.
        self.kernels = self._build_kernels()

        result = RunResult(
            variants=[get_variant_name(vid) for vid in self.variant_ids],
            reference_variant=get_variant_name(self.reference_variant) if self.reference_variant is not None else None,
            npasses=self.run_params.npasses,
            tolerance=self.tolerance,
            unavailable_variants=[get_variant_name(vid) for vid in self.unavailable_variants],
            invalid_kernel_input=list(self.run_params.invalid_kernel_input),
            invalid_variant_input=list(self.run_params.invalid_variant_input),
        )
        total = len(self.kernels)
        for index, kernel in enumerate(self.kernels, start=1):
            if self.run_params.show_progress:
                self.logger.info("[%d/%d] Running %s", index, total, kernel.name)
            result.kernels.append(self._run_kernel(kernel))

        if result.warnings:
            self.logger.warning("%d correctness warning(s)", len(result.warnings))
        if self.reporter is not None:
            self.reporter(result)
        return result

    def _run_kernel(self, kernel: KernelBase) -> KernelResult:
        kernel_result = KernelResult(kernel=kernel.name, run_size=kernel.run_size, run_reps=kernel.run_reps)

        for vid in self.variant_ids:
            status = VariantStatus.RAN
            for _ in range(self.run_params.npasses):
                pass_status = kernel.execute(vid)
                if status == VariantStatus.RAN and pass_status != VariantStatus.RAN:
                    status = pass_status
                if self.run_params.show_progress:
                    self.logger.info("  %s %s: %s", kernel.name, get_variant_name(vid), pass_status.value)
            ran = status == VariantStatus.RAN
            kernel_result.variants.append(
                VariantResult(
                    variant=get_variant_name(vid),
                    status=status,
                    total_time=kernel.tot_time[vid] if ran else None,
                    pass_times=list(kernel.pass_times[vid]) if ran else [],
                    checksum=kernel.checksum[vid] if ran else None,
                )
            )

        self._compare_to_reference(kernel, kernel_result)
        return kernel_result

    def _compare_to_reference(self, kernel: KernelBase, kernel_result: KernelResult) -> None:
        """Checksum deltas and speedups of every variant that ran, relative to the reference."""
        if self.reference_variant is None:
            return
        reference_name = get_variant_name(self.reference_variant)
        reference = kernel_result.get_variant(reference_name)
        if reference is None or not reference.ran:
            self.logger.warning("%s: reference variant %s did not run, skipping comparison", kernel.name, reference_name)
            return

        kernel_result.reference_variant = reference_name
        ref_checksum = reference.checksum
        for variant_result in kernel_result.variants:
            if not variant_result.ran:
                continue
            if variant_result.total_time > 0.0:
                variant_result.speedup = reference.total_time / variant_result.total_time
            if variant_result.variant == reference_name:
                continue
            delta = ref_checksum - variant_result.checksum
            if ref_checksum != 0.0:
                relative_delta = abs(delta) / abs(ref_checksum)
            else:
                relative_delta = abs(delta)
            within = relative_delta <= self.tolerance
            kernel_result.comparisons.append(
                ChecksumComparison(
                    variant=variant_result.variant,
                    delta=delta,
                    relative_delta=relative_delta,
                    within_tolerance=within,
                )
            )
            if not within:
                msg = (
                    f"{kernel.name}: {variant_result.variant} checksum differs from {reference_name} "
                    f"by {relative_delta:.3e} relative (tolerance {self.tolerance:.1e})"
                )
                kernel_result.warnings.append(msg)
                self.logger.warning(msg)

    def print_plan(self, stream: TextIO) -> None:
        """Write the resolved kernel and variant plan (used for dry runs)."""
        if not self._is_set_up:
            self.setup_suite()
        stream.write(f"Kernels to run ({len(self.kernels)}):\n")
        for kernel in self.kernels:
            stream.write(f"  {kernel.name:<24} size={kernel.run_size:<8} reps={kernel.run_reps}\n")
        names = " ".join(get_variant_name(vid) for vid in self.variant_ids) or "(none)"
        stream.write(f"Variants to run: {names}\n")
        if self.unavailable_variants:
            unavailable = " ".join(get_variant_name(vid) for vid in self.unavailable_variants)
            stream.write(f"Variants not available: {unavailable}\n")
        reference = get_variant_name(self.reference_variant) if self.reference_variant is not None else "(none)"
        stream.write(f"Reference variant: {reference}\n")
        stream.write(f"Passes: {self.run_params.npasses}\n")
