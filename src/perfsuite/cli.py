# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""perfsuite command-line entry point."""

import sys

from .exceptions import ReportError
from .executor import Executor
from .logger import configure_logging, logger
from .reporting import format_summary, results_path, write_json
from .run_params import InputState, RunParams


def main(argv=None):
    """Main entry point."""
    params = RunParams(argv)
    configure_logging("INFO" if params.show_progress else None)

    state = params.input_state
    if state == InputState.InfoRequest:
        params.print_info(sys.stdout)
        return 0
    if state == InputState.BadInput:
        params.print_params(sys.stderr)
        print("\nRun with --help for usage.", file=sys.stderr)
        return 1

    params.print_params(sys.stdout)
    executor = Executor(params)

    if state == InputState.DryRun:
        executor.print_plan(sys.stdout)
        return 0

    result = executor.run_suite()
    print()
    print(format_summary(result))

    try:
        path = write_json(result, results_path(params.outdir, params.outfile_prefix))
    except ReportError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"\nResults written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
