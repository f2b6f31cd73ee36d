# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Run parameters parsed from the command line.

A `RunParams` is built once from the argument list and is read-only
afterwards. Parsing never exits the process: problems are collected in
`errors` and reflected in `input_state`.
"""

import argparse
import sys
from enum import Enum
from typing import List, Optional, Sequence, TextIO, Tuple

from .config import supported_variants
from .registry import (
    GroupID,
    KernelID,
    VariantID,
    get_full_kernel_name,
    get_group_name,
    get_kernel_name,
    get_variant_name,
    resolve_kernel_tokens,
    resolve_variant_tokens,
)

DEFAULT_NPASSES = 1
DEFAULT_OUTDIR = "."
DEFAULT_OUTFILE_PREFIX = "perfsuite"
DEFAULT_REFERENCE_VARIANT = "Base_Seq"


class InputState(Enum):
    """What the command line asks for."""

    InfoRequest = "InfoRequest"
    DryRun = "DryRun"
    GoodToRun = "GoodToRun"
    BadInput = "BadInput"


_INFO_ORDER = ("help", "print_kernels", "print_full_kernels", "print_variants", "print_groups")
_INFO_FLAGS = {
    "-h": "help",
    "--help": "help",
    "-pk": "print_kernels",
    "--print-kernels": "print_kernels",
    "-pfk": "print_full_kernels",
    "--print-full-kernels": "print_full_kernels",
    "-pv": "print_variants",
    "--print-variants": "print_variants",
    "-pg": "print_groups",
    "--print-groups": "print_groups",
}


class _ParseError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting."""

    def error(self, message):
        raise _ParseError(message)


def _build_parser() -> _ArgumentParser:
    parser = _ArgumentParser(
        prog="perfsuite",
        description="Run performance kernels in several execution variants and cross-check their checksums",
        add_help=False,
    )
    info = parser.add_argument_group("information")
    info.add_argument("-h", "--help", action="store_true", help="Show this message and exit")
    info.add_argument("-pk", "--print-kernels", action="store_true", help="List kernel names")
    info.add_argument("-pfk", "--print-full-kernels", action="store_true", help="List full kernel names")
    info.add_argument("-pv", "--print-variants", action="store_true", help="List variant names")
    info.add_argument("-pg", "--print-groups", action="store_true", help="List group names")

    run = parser.add_argument_group("run")
    run.add_argument("--dryrun", action="store_true", help="Print the run plan without executing kernels")
    run.add_argument("--npasses", default=str(DEFAULT_NPASSES), help="Number of passes (default: %(default)s)")
    run.add_argument("--sampfrac", default="1.0", help="Fraction of default repetitions, in (0, 1]")
    run.add_argument("--sizefrac", default="1.0", help="Fraction of default problem sizes, in (0, 1]")
    run.add_argument("-od", "--outdir", default=DEFAULT_OUTDIR, help="Output directory (default: %(default)s)")
    run.add_argument(
        "-of", "--outfile", default=DEFAULT_OUTFILE_PREFIX, help="Output file prefix (default: %(default)s)"
    )
    run.add_argument(
        "-rv",
        "--refvar",
        default=DEFAULT_REFERENCE_VARIANT,
        help="Reference variant for checksum comparison and speedup (default: %(default)s)",
    )
    run.add_argument("-sp", "--show-progress", action="store_true", help="Log progress per kernel")

    select = parser.add_argument_group("selection")
    select.add_argument(
        "-k",
        "--kernels",
        nargs="+",
        action="extend",
        metavar="KERNEL",
        help="Kernels to run: group names, kernel names or full kernel names",
    )
    select.add_argument(
        "-v", "--variants", nargs="+", action="extend", metavar="VARIANT", help="Variants to run"
    )
    return parser


class RunParams:
    """
    Validated run configuration

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])

    Example:
        >>> params = RunParams(["-k", "Stream", "--npasses", "3"])
        >>> params.input_state
        <InputState.GoodToRun: 'GoodToRun'>
    """

    def __init__(self, argv: Optional[Sequence[str]] = None):
        self._argv = list(sys.argv[1:] if argv is None else argv)
        self._parser = _build_parser()

        self._npasses = DEFAULT_NPASSES
        self._sample_fraction = 1.0
        self._size_fraction = 1.0
        self._outdir = DEFAULT_OUTDIR
        self._outfile_prefix = DEFAULT_OUTFILE_PREFIX
        self._reference_variant = DEFAULT_REFERENCE_VARIANT
        self._show_progress = False
        self._dryrun = False

        self._info_requests: List[str] = []
        self._kernel_input: List[str] = []
        self._invalid_kernel_input: List[str] = []
        self._variant_input: List[str] = []
        self._invalid_variant_input: List[str] = []
        self._kernel_ids: List[KernelID] = []
        self._variant_ids: List[VariantID] = []
        self._errors: List[str] = []

        self._input_state = self._parse()

    def _parse(self) -> InputState:
        # Informational flags win over anything else on the line, malformed or not.
        for flag, request in _INFO_FLAGS.items():
            if flag in self._argv and request not in self._info_requests:
                self._info_requests.append(request)
        if self._info_requests:
            self._info_requests.sort(key=_INFO_ORDER.index)
            return InputState.InfoRequest

        try:
            args, unknown = self._parser.parse_known_args(self._argv)
        except _ParseError as e:
            self._errors.append(str(e))
            return InputState.BadInput

        if unknown:
            self._errors.append(f"Unrecognized arguments: {' '.join(unknown)}")

        self._dryrun = args.dryrun
        self._show_progress = args.show_progress
        self._outdir = args.outdir
        self._outfile_prefix = args.outfile

        self._npasses = self._parse_positive_int("--npasses", args.npasses, DEFAULT_NPASSES)
        self._sample_fraction = self._parse_fraction("--sampfrac", args.sampfrac)
        self._size_fraction = self._parse_fraction("--sizefrac", args.sizefrac)

        if args.refvar in VariantID.__members__:
            self._reference_variant = args.refvar
        else:
            available = ", ".join(get_variant_name(vid) for vid in VariantID)
            self._errors.append(f"--refvar: unknown variant '{args.refvar}'. Available variants: {available}")

        if args.kernels:
            self._kernel_ids, self._invalid_kernel_input = resolve_kernel_tokens(args.kernels)
            self._kernel_input = [t for t in args.kernels if t not in self._invalid_kernel_input]
            if not self._kernel_ids:
                self._errors.append(f"No valid kernels in: {' '.join(args.kernels)}")
        if args.variants:
            self._variant_ids, self._invalid_variant_input = resolve_variant_tokens(args.variants)
            self._variant_input = [t for t in args.variants if t not in self._invalid_variant_input]
            if not self._variant_ids:
                self._errors.append(f"No valid variants in: {' '.join(args.variants)}")

        if self._errors:
            return InputState.BadInput
        return InputState.DryRun if self._dryrun else InputState.GoodToRun

    def _parse_positive_int(self, option: str, text: str, default: int) -> int:
        try:
            value = int(text)
        except ValueError:
            self._errors.append(f"{option}: expected a positive integer, got '{text}'")
            return default
        if value < 1:
            self._errors.append(f"{option}: expected a positive integer, got {value}")
            return default
        return value

    def _parse_fraction(self, option: str, text: str) -> float:
        try:
            value = float(text)
        except ValueError:
            self._errors.append(f"{option}: expected a number in (0, 1], got '{text}'")
            return 1.0
        if not 0.0 < value <= 1.0:
            self._errors.append(f"{option}: expected a number in (0, 1], got {value}")
            return 1.0
        return value

    # Read-only accessors

    def get_input_state(self) -> InputState:
        return self._input_state

    @property
    def input_state(self) -> InputState:
        return self._input_state

    @property
    def argv(self) -> Tuple[str, ...]:
        return tuple(self._argv)

    @property
    def npasses(self) -> int:
        return self._npasses

    @property
    def sample_fraction(self) -> float:
        return self._sample_fraction

    @property
    def size_fraction(self) -> float:
        return self._size_fraction

    @property
    def outdir(self) -> str:
        return self._outdir

    @property
    def outfile_prefix(self) -> str:
        return self._outfile_prefix

    @property
    def reference_variant(self) -> str:
        return self._reference_variant

    @property
    def show_progress(self) -> bool:
        return self._show_progress

    @property
    def kernel_input(self) -> Tuple[str, ...]:
        return tuple(self._kernel_input)

    @property
    def invalid_kernel_input(self) -> Tuple[str, ...]:
        return tuple(self._invalid_kernel_input)

    @property
    def variant_input(self) -> Tuple[str, ...]:
        return tuple(self._variant_input)

    @property
    def invalid_variant_input(self) -> Tuple[str, ...]:
        return tuple(self._invalid_variant_input)

    @property
    def kernel_ids(self) -> Tuple[KernelID, ...]:
        """Kernels resolved from --kernels, empty when no selection was given."""
        return tuple(self._kernel_ids)

    @property
    def variant_ids(self) -> Tuple[VariantID, ...]:
        """Variants resolved from --variants, empty when no selection was given."""
        return tuple(self._variant_ids)

    @property
    def errors(self) -> Tuple[str, ...]:
        return tuple(self._errors)

    @property
    def info_requests(self) -> Tuple[str, ...]:
        return tuple(self._info_requests)

    # Rendering

    def print_params(self, stream: TextIO) -> None:
        """Write the resolved configuration as a run manifest."""
        lines = [
            "Run parameters:",
            f"  input state           {self._input_state.value}",
            f"  arguments             {' '.join(self._argv) or '(none)'}",
            f"  npasses               {self._npasses}",
            f"  sample fraction       {self._sample_fraction}",
            f"  size fraction         {self._size_fraction}",
            f"  reference variant     {self._reference_variant}",
            f"  output directory      {self._outdir}",
            f"  output file prefix    {self._outfile_prefix}",
            f"  kernel input          {' '.join(self._kernel_input) or '(all)'}",
            f"  invalid kernel input  {' '.join(self._invalid_kernel_input) or '(none)'}",
            f"  variant input         {' '.join(self._variant_input) or '(all)'}",
            f"  invalid variant input {' '.join(self._invalid_variant_input) or '(none)'}",
        ]
        for error in self._errors:
            lines.append(f"  error: {error}")
        stream.write("\n".join(lines) + "\n")

    def print_info(self, stream: TextIO) -> None:
        """Write whatever the informational flags asked for."""
        if "help" in self._info_requests:
            stream.write(self._parser.format_help())
        if "print_kernels" in self._info_requests:
            stream.write("Kernels:\n")
            for kid in KernelID:
                stream.write(f"  {get_kernel_name(kid)}\n")
        if "print_full_kernels" in self._info_requests:
            stream.write("Kernels (full names):\n")
            for kid in KernelID:
                stream.write(f"  {get_full_kernel_name(kid)}\n")
        if "print_variants" in self._info_requests:
            available = supported_variants()
            stream.write("Variants:\n")
            for vid in VariantID:
                marker = "" if vid in available else "  (not available)"
                stream.write(f"  {get_variant_name(vid)}{marker}\n")
        if "print_groups" in self._info_requests:
            stream.write("Groups:\n")
            for gid in GroupID:
                stream.write(f"  {get_group_name(gid)}\n")

    def __repr__(self) -> str:
        return f"RunParams(state={self._input_state.value}, npasses={self._npasses})"
