# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Kernel base classes.

Every kernel runs each variant through the same four calls, in order:

    set_up(vid) -> run_kernel(vid) -> update_checksum(vid) -> tear_down(vid)

`execute(vid)` drives one such sequence and returns a `VariantStatus`.
Derived kernels implement `_set_up` (allocate buffers through the
`alloc_*` helpers), `_compute_checksum` and the variant bodies, registered
with the `@variant` decorator.
"""

import logging
from enum import Enum
from time import perf_counter
from typing import Callable, Dict, List, Optional

import numpy as np

from .. import data_utils
from ..config import BackendConfig, get_backend_config
from ..exceptions import LifecycleError
from ..forall import make_policy
from ..registry import KernelID, VariantID, get_full_kernel_name, get_variant_name
from .decorator import variant


class VariantStatus(Enum):
    """Outcome of one variant execution."""

    RAN = "ran"
    NOT_APPLICABLE = "not_applicable"
    FAILED = "failed"


class _Phase(Enum):
    IDLE = "idle"
    SET_UP = "set_up"
    RAN = "ran"
    CHECKSUMMED = "checksummed"


class KernelBase:
    """
    Base class for all kernels

    Owns the per-variant checksum and timing tables and the buffers of the
    variant currently set up. Instances are reused across all variants and
    passes of one suite run, so checksums and times accumulate.
    """

    def __init__(
        self,
        kernel_id: KernelID,
        run_params,
        default_size: int,
        default_reps: int,
        backend_config: Optional[BackendConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if not isinstance(kernel_id, KernelID):
            raise ValueError(f"Invalid KernelID value: {kernel_id!r}")
        self.kernel_id = kernel_id
        self.name = get_full_kernel_name(kernel_id)
        self.default_size = default_size
        self.default_reps = default_reps
        self.run_params = run_params
        self._backend_config = backend_config
        self.logger = logger or logging.getLogger(f"perfsuite.{self.__class__.__name__}")

        self.checksum: Dict[VariantID, float] = {vid: 0.0 for vid in VariantID}
        self.tot_time: Dict[VariantID, float] = {vid: 0.0 for vid in VariantID}
        self.pass_times: Dict[VariantID, List[float]] = {vid: [] for vid in VariantID}

        self._variants: Dict[VariantID, Callable] = {}
        self._unsupported_variants: Dict[VariantID, str] = {}
        self._discover_variants()

        self._data: Dict[str, np.ndarray] = {}
        self._active_variant: Optional[VariantID] = None
        self._phase = _Phase.IDLE
        self._last_status: Optional[VariantStatus] = None
        self._timer_start: Optional[float] = None

    def _discover_variants(self) -> None:
        """
        Build the dispatch table from @variant decorated methods

        Classes later in the MRO override earlier ones, so a kernel can replace
        or disable a single entry of a base class table.
        """
        for klass in reversed(type(self).__mro__):
            for attr_name, attr in vars(klass).items():
                vids = getattr(attr, "_variant_ids", None)
                if not vids:
                    continue
                reason = getattr(attr, "_unsupported_reason", None)
                method = getattr(self, attr_name)
                for vid in vids:
                    if reason:
                        self._variants.pop(vid, None)
                        self._unsupported_variants[vid] = reason
                    else:
                        self._unsupported_variants.pop(vid, None)
                        self._variants[vid] = method

    # Sizing

    @property
    def backend_config(self) -> BackendConfig:
        if self._backend_config is None:
            self._backend_config = get_backend_config()
        return self._backend_config

    @property
    def run_size(self) -> int:
        """Default size scaled by the size fraction, truncated, at least 1."""
        return max(1, int(self.default_size * self.run_params.size_fraction))

    @property
    def run_reps(self) -> int:
        """Default repetitions scaled by the sample fraction, truncated, at least 1."""
        return max(1, int(self.default_reps * self.run_params.sample_fraction))

    @property
    def buffers(self) -> Dict[str, np.ndarray]:
        return self._data

    @property
    def active_variant(self) -> Optional[VariantID]:
        return self._active_variant

    @property
    def last_status(self) -> Optional[VariantStatus]:
        return self._last_status

    def get_implemented_variants(self) -> List[VariantID]:
        return sorted(self._variants)

    def get_unsupported_reason(self, vid: VariantID) -> Optional[str]:
        """Return why `vid` cannot run for this kernel, or None if it can."""
        if vid in self._unsupported_variants:
            return self._unsupported_variants[vid]
        if vid not in self._variants:
            return f"{self.name} has no {get_variant_name(vid)} implementation"
        if vid not in self.backend_config.supported_variants:
            return f"{get_variant_name(vid)} is not enabled in this process"
        return None

    def has_variant_defined(self, vid: VariantID) -> bool:
        return self.get_unsupported_reason(vid) is None

    # Lifecycle

    def _check_variant_id(self, vid, operation: str) -> None:
        if not isinstance(vid, VariantID):
            raise LifecycleError(f"{operation} called with invalid VariantID {vid!r}", kernel=self.name)

    def _check_active(self, vid: VariantID, operation: str, phase: _Phase) -> None:
        if self._active_variant != vid or self._phase != phase:
            active = get_variant_name(self._active_variant) if self._active_variant is not None else "none"
            raise LifecycleError(
                f"{operation} for {get_variant_name(vid)} out of order "
                f"(active variant: {active}, phase: {self._phase.value})",
                kernel=self.name,
                variant=get_variant_name(vid),
            )

    def set_up(self, vid: VariantID) -> None:
        """Allocate and initialise the buffers for `vid`."""
        self._check_variant_id(vid, "set_up")
        if self._phase != _Phase.IDLE:
            self._check_active(vid, "set_up", _Phase.IDLE)
        data_utils.reset_data_init_count()
        self._active_variant = vid
        self._phase = _Phase.SET_UP
        self._last_status = None
        self._set_up(vid)

    def run_kernel(self, vid: VariantID) -> VariantStatus:
        """Run the timed repetitions of `vid` and return the outcome."""
        self._check_variant_id(vid, "run_kernel")
        self._check_active(vid, "run_kernel", _Phase.SET_UP)
        reason = self.get_unsupported_reason(vid)
        if reason:
            self.logger.info("Skipping %s %s: %s", self.name, get_variant_name(vid), reason)
            status = VariantStatus.NOT_APPLICABLE
        else:
            tot_time = self.tot_time[vid]
            num_pass_times = len(self.pass_times[vid])
            try:
                self._variants[vid](vid)
                status = VariantStatus.RAN
            except LifecycleError:
                raise
            except Exception:
                self.logger.exception("%s %s failed", self.name, get_variant_name(vid))
                # Timing of a failed run is discarded even if the timer already stopped.
                self._timer_start = None
                self.tot_time[vid] = tot_time
                del self.pass_times[vid][num_pass_times:]
                status = VariantStatus.FAILED
        self._last_status = status
        self._phase = _Phase.RAN
        return status

    def update_checksum(self, vid: VariantID) -> None:
        """Add the checksum of the outputs to checksum[vid] if the variant ran."""
        self._check_variant_id(vid, "update_checksum")
        self._check_active(vid, "update_checksum", _Phase.RAN)
        if self._last_status == VariantStatus.RAN:
            self.checksum[vid] += self._compute_checksum(vid)
        self._phase = _Phase.CHECKSUMMED

    def tear_down(self, vid: VariantID) -> None:
        """Release every buffer allocated by set_up. Safe after a partial set-up."""
        self._check_variant_id(vid, "tear_down")
        if self._active_variant != vid:
            self._check_active(vid, "tear_down", self._phase)
        try:
            self._tear_down(vid)
        finally:
            self._data.clear()
            self._active_variant = None
            self._phase = _Phase.IDLE

    def execute(self, vid: VariantID) -> VariantStatus:
        """Run one full lifecycle of `vid`. tear_down always runs."""
        self._check_variant_id(vid, "execute")
        if self._phase != _Phase.IDLE:
            self._check_active(vid, "execute", _Phase.IDLE)
        try:
            try:
                self.set_up(vid)
            except LifecycleError:
                raise
            except Exception:
                self.logger.exception("Set-up of %s %s failed", self.name, get_variant_name(vid))
                self._last_status = VariantStatus.FAILED
                return VariantStatus.FAILED
            status = self.run_kernel(vid)
            self.update_checksum(vid)
            return status
        finally:
            if self._active_variant == vid:
                self.tear_down(vid)

    # Timer

    def start_timer(self) -> None:
        self._timer_start = perf_counter()

    def stop_timer(self) -> None:
        if self._timer_start is None or self._active_variant is None:
            raise LifecycleError("stop_timer called without start_timer", kernel=self.name)
        elapsed = perf_counter() - self._timer_start
        self._timer_start = None
        self.tot_time[self._active_variant] += elapsed
        self.pass_times[self._active_variant].append(elapsed)

    # Buffers

    def alloc_data(self, name: str, n: int, dtype=np.float64) -> np.ndarray:
        self._data[name] = np.zeros(n, dtype=dtype)
        return self._data[name]

    def alloc_and_init_data(self, name: str, n: int, shape=None) -> np.ndarray:
        values = data_utils.init_data(n)
        self._data[name] = values.reshape(shape) if shape is not None else values
        return self._data[name]

    def alloc_and_init_data_const(self, name: str, n: int, value: float) -> np.ndarray:
        self._data[name] = data_utils.init_data_const(n, value)
        return self._data[name]

    def alloc_and_init_data_rand_sign(self, name: str, n: int) -> np.ndarray:
        self._data[name] = data_utils.init_data_rand_sign(n)
        return self._data[name]

    def alloc_and_init_data_random(self, name: str, n: int) -> np.ndarray:
        self._data[name] = data_utils.init_data_random(n)
        return self._data[name]

    def alloc_and_init_data_int(self, name: str, n: int) -> np.ndarray:
        self._data[name] = data_utils.init_data_int(n)
        return self._data[name]

    def alloc_and_init_data_complex(self, name: str, n: int) -> np.ndarray:
        self._data[name] = data_utils.init_data_complex(n)
        return self._data[name]

    def checksum_of(self, *names: str) -> float:
        """Sum of `calc_checksum` over the named buffers."""
        return sum(data_utils.calc_checksum(self._data[name]) for name in names)

    # Hooks for derived kernels

    def _set_up(self, vid: VariantID) -> None:
        raise NotImplementedError

    def _compute_checksum(self, vid: VariantID) -> float:
        raise NotImplementedError

    def _tear_down(self, vid: VariantID) -> None:
        """Release resources beyond the registered buffers."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self.run_size}, reps={self.run_reps})"


class ForallKernel(KernelBase):
    """
    Kernel whose repetition is a sequence of forall loops

    Subclasses implement `kernel_rep(policy, data)`, one repetition written
    against `perfsuite.forall`. Every variant runs the same body with its own
    execution policy; buffers are bound to the policy's memory space before
    the timer starts and copied back after it stops.
    """

    def kernel_rep(self, policy, data: Dict) -> None:
        raise NotImplementedError

    def _run_with_policy(self, vid: VariantID) -> None:
        with make_policy(vid, self.backend_config) as policy:
            bound = policy.space.bind(self._data)
            self.start_timer()
            for _ in range(self.run_reps):
                self.kernel_rep(policy, bound)
            policy.synchronize()
            self.stop_timer()
            policy.space.copy_back(bound, self._data)

    @variant(VariantID.Base_Seq, VariantID.RAJA_Seq)
    def _run_sequential(self, vid: VariantID) -> None:
        self._run_with_policy(vid)

    @variant(VariantID.Base_OpenMP, VariantID.RAJA_OpenMP)
    def _run_openmp(self, vid: VariantID) -> None:
        self._run_with_policy(vid)

    @variant(VariantID.Base_CUDA, VariantID.RAJA_CUDA)
    def _run_cuda(self, vid: VariantID) -> None:
        self._run_with_policy(vid)
