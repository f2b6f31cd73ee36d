# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""Result output: a JSON file and a plain-text summary."""

import json
from pathlib import Path
from typing import Union

from .exceptions import ReportError
from .kernels.base import VariantStatus
from .logger import logger
from .results import RunResult

_STATUS_LABELS = {
    VariantStatus.NOT_APPLICABLE: "N/A",
    VariantStatus.FAILED: "FAILED",
}


def results_path(outdir: Union[str, Path], prefix: str) -> Path:
    """Path of the JSON results file for an output directory and file prefix."""
    return Path(outdir) / f"{prefix}-results.json"


def write_json(result: RunResult, path: Union[str, Path]) -> Path:
    """
    Write a RunResult as JSON.

    Raises:
        ReportError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(result.to_json_dict(), f, indent=2)
    except OSError as e:
        raise ReportError(f"Failed to write results to {path}: {e}") from e
    logger.info("Wrote results to %s", path)
    return path


def format_summary(result: RunResult) -> str:
    """Render timings, checksum deltas and speedups as a fixed-width table.

    Variants that did not run show N/A or FAILED instead of a time.
    """
    lines = []
    header = f"{'Kernel':<24} {'Variant':<12} {'Time (s)':>12} {'Checksum':>24} {'Rel. delta':>12} {'Speedup':>9}"
    lines.append(header)
    lines.append("-" * len(header))
    for kernel in result.kernels:
        for variant in kernel.variants:
            if variant.ran:
                time_text = f"{variant.total_time:.6f}"
                checksum_text = f"{variant.checksum:.15g}"
            else:
                time_text = _STATUS_LABELS[variant.status]
                checksum_text = "-"
            comparison = kernel.get_comparison(variant.variant)
            if variant.variant == kernel.reference_variant:
                delta_text = "ref"
            elif comparison is not None:
                delta_text = f"{comparison.relative_delta:.3e}"
            else:
                delta_text = "-"
            speedup_text = f"{variant.speedup:.2f}x" if variant.speedup is not None else "-"
            lines.append(
                f"{kernel.kernel:<24} {variant.variant:<12} {time_text:>12} "
                f"{checksum_text:>24} {delta_text:>12} {speedup_text:>9}"
            )

    if result.unavailable_variants:
        lines.append("")
        lines.append(f"Not available in this process: {', '.join(result.unavailable_variants)}")
    warnings = result.warnings
    if warnings:
        lines.append("")
        lines.append(f"Correctness warnings ({len(warnings)}):")
        lines.extend(f"  {w}" for w in warnings)
    return "\n".join(lines)
