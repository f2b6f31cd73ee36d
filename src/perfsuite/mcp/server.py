# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.utilities.logging import get_logger
from pydantic import Field

from perfsuite.config import supported_variants
from perfsuite.executor import Executor
from perfsuite.registry import GroupID, KernelID, VariantID, get_full_kernel_name, get_kernels_in_group, get_variant_name
from perfsuite.reporting import format_summary
from perfsuite.run_params import InputState, RunParams

# initialize server
mcp = FastMCP(
    name="perfsuite",
    instructions=(
        "MCP server for running performance kernels in several execution variants "
        "and cross-checking their checksums against a reference variant."
    ),
)
logger = get_logger(mcp.name)


@mcp.tool()
async def list_kernels(
    ctx: Annotated[Context, Field(description="MCP context.")],
    group: Annotated[
        str | None, Field(description="Only list kernels of this group (e.g. 'Stream'). If None, list all.")
    ] = None,
) -> str:
    """List the full names of the kernels in the suite.

    Returns:
        str: One kernel name per line, or an error message.
    """
    if group is None:
        kernels = list(KernelID)
    elif group in GroupID.__members__:
        kernels = get_kernels_in_group(GroupID[group])
    else:
        msg = f"Unknown group '{group}'. Available groups: {', '.join(GroupID.__members__)}"
        await ctx.error(msg)
        return msg
    return "\n".join(get_full_kernel_name(kid) for kid in kernels)


@mcp.tool()
async def list_variants(
    ctx: Annotated[Context, Field(description="MCP context.")],
) -> str:
    """List the execution variants and whether each can run on this machine.

    Returns:
        str: One variant per line, marked available or not available.
    """
    available = supported_variants()
    lines = []
    for vid in VariantID:
        state = "available" if vid in available else "not available"
        lines.append(f"{get_variant_name(vid)}: {state}")
    return "\n".join(lines)


@mcp.tool()
async def run_suite(
    ctx: Annotated[Context, Field(description="MCP context.")],
    kernels: Annotated[
        list[str] | None,
        Field(description="Kernels to run: group, kernel or full kernel names. If None, run all kernels."),
    ] = None,
    variants: Annotated[
        list[str] | None, Field(description="Variants to run. If None, run every available variant.")
    ] = None,
    npasses: Annotated[int, Field(description="Number of passes per variant.", ge=1)] = 1,
    size_fraction: Annotated[
        float, Field(description="Fraction of the default problem sizes, in (0, 1].", gt=0.0, le=1.0)
    ] = 1.0,
    sample_fraction: Annotated[
        float, Field(description="Fraction of the default repetitions, in (0, 1].", gt=0.0, le=1.0)
    ] = 1.0,
) -> str:
    """Run kernels in the requested variants and report timings and checksum deltas.

    Returns:
        str: Summary table with per-variant times, relative checksum deltas and speedups, followed by
        any correctness warnings, or an error message.
    """
    argv = ["--npasses", str(npasses), "--sizefrac", str(size_fraction), "--sampfrac", str(sample_fraction)]
    if kernels:
        argv += ["--kernels", *kernels]
    if variants:
        argv += ["--variants", *variants]

    params = RunParams(argv)
    if params.input_state != InputState.GoodToRun:
        msg = f"Invalid run parameters: {'; '.join(params.errors)}"
        await ctx.error(msg)
        return msg

    try:
        result = Executor(params, logger=logger).run_suite()
    except Exception as e:
        msg = f"Suite run failed: {e!s}"
        await ctx.error(msg)
        return msg

    summary = format_summary(result)
    skipped = list(params.invalid_kernel_input) + list(params.invalid_variant_input)
    if skipped:
        summary += f"\n\nIgnored unknown names: {', '.join(skipped)}"
    await ctx.info(f"Ran {len(result.kernels)} kernel(s) in {len(result.variants)} variant(s)")
    return summary


def main() -> None:
    """Main function to run the perfsuite MCP server."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
