# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Variant decorator for kernel implementations

Each method decorated with @variant is the timed body of one variant
"""

from typing import Callable, Optional

from ..registry import VariantID


def variant(*vids: VariantID, unsupported_reason: Optional[str] = None):
    """
    Decorator that registers a method as the implementation of one or more variants

    Usage:
        @variant(VariantID.Base_Seq)
        def _run_base_seq(self, vid):
            ...

        # Declared, but known not to apply to this kernel:
        @variant(VariantID.RAJA_CUDA, unsupported_reason="No device scan")
        def _run_raja_cuda(self, vid):
            ...

    KernelBase collects decorated methods into its dispatch table at
    construction; run_kernel() looks the variant up there.

    Args:
        vids: Variants implemented by the decorated method
        unsupported_reason: If set, the variants are reported as not applicable

    Returns:
        The original function, tagged with its variants
    """
    if not vids:
        raise ValueError("@variant needs at least one VariantID")
    for vid in vids:
        if not isinstance(vid, VariantID):
            raise ValueError(f"@variant expects VariantID members, got {vid!r}")

    def decorator(func: Callable) -> Callable:
        func._variant_ids = vids
        func._unsupported_reason = unsupported_reason
        return func

    return decorator
