# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""Exception hierarchy for perfsuite."""


class PerfSuiteError(Exception):
    """Base class for all perfsuite errors."""


class LifecycleError(PerfSuiteError):
    """A kernel lifecycle call was made out of order or with a corrupted id.

    This is a programming error in a kernel or a driver and is never recovered from.
    """

    def __init__(self, message: str, kernel: str | None = None, variant: str | None = None):
        super().__init__(message)
        self.kernel = kernel
        self.variant = variant


class ConfigurationError(PerfSuiteError):
    """A run was requested from run parameters that are not runnable."""


class ReportError(PerfSuiteError):
    """Results could not be written."""
