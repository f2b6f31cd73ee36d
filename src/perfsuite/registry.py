# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Identity registry: groups, kernels and variants of the suite.

Display names are derived from the enumeration member names, so the
enumerations are the single source of truth:

    KernelID.Stream_DOT  ->  full name "Stream_DOT", short name "DOT", group Stream

IMPORTANT: kernel members must keep the "<group>_<kernel>" form and stay
ordered by group, then kernel within group.
"""

from enum import IntEnum
from typing import Iterable, List, Tuple, Type, TypeVar


class GroupID(IntEnum):
    """Thematic families of kernels."""

    Basic = 0
    Lcals = 1
    Polybench = 2
    Stream = 3
    Apps = 4


class KernelID(IntEnum):
    """One member per kernel, ordered by group then kernel."""

    # Basic kernels
    Basic_MULADDSUB = 0
    Basic_IF_QUAD = 1
    Basic_TRAP_INT = 2
    Basic_INIT3 = 3
    Basic_REDUCE3_INT = 4
    Basic_NESTED_INIT = 5

    # Lcals kernels
    Lcals_HYDRO_1D = 6
    Lcals_EOS = 7
    Lcals_FIRST_DIFF = 8

    # Polybench kernels
    Polybench_2MM = 9
    Polybench_3MM = 10
    Polybench_GEMMVER = 11

    # Stream kernels
    Stream_COPY = 12
    Stream_MUL = 13
    Stream_ADD = 14
    Stream_TRIAD = 15
    Stream_DOT = 16

    # Apps kernels
    Apps_PRESSURE = 17
    Apps_ENERGY = 18
    Apps_VOL3D = 19
    Apps_DEL_DOT_VEC_2D = 20
    Apps_COUPLE = 21
    Apps_FIR = 22


class VariantID(IntEnum):
    """Execution strategies.

    Every member has a name, but only the members in the supported-variant set
    (see `perfsuite.config.supported_variants`) can run in a given process.
    """

    Base_Seq = 0
    RAJA_Seq = 1
    Base_OpenMP = 2
    RAJA_OpenMP = 3
    Base_CUDA = 4
    RAJA_CUDA = 5


NUM_GROUPS = len(GroupID)
NUM_KERNELS = len(KernelID)
NUM_VARIANTS = len(VariantID)

SEQUENTIAL_VARIANTS = (VariantID.Base_Seq, VariantID.RAJA_Seq)
OPENMP_VARIANTS = (VariantID.Base_OpenMP, VariantID.RAJA_OpenMP)
CUDA_VARIANTS = (VariantID.Base_CUDA, VariantID.RAJA_CUDA)

_E = TypeVar("_E", bound=IntEnum)


def _check_member(value, enum_cls: Type[_E]) -> _E:
    if not isinstance(value, enum_cls):
        raise ValueError(f"Invalid {enum_cls.__name__} value: {value!r}")
    return value


def get_group_name(gid: GroupID) -> str:
    """Return the display name of a group."""
    return _check_member(gid, GroupID).name


def get_full_kernel_name(kid: KernelID) -> str:
    """Return the full kernel name, "<group>_<kernel>"."""
    return _check_member(kid, KernelID).name


def get_kernel_name(kid: KernelID) -> str:
    """Return the kernel name with the group prefix removed."""
    return get_full_kernel_name(kid).split("_", 1)[1]


def get_kernel_group(kid: KernelID) -> GroupID:
    """Return the group a kernel belongs to."""
    return GroupID[get_full_kernel_name(kid).split("_", 1)[0]]


def get_variant_name(vid: VariantID) -> str:
    """Return the display name of a variant."""
    return _check_member(vid, VariantID).name


def get_kernels_in_group(gid: GroupID) -> List[KernelID]:
    """Return the kernels of a group in enumeration order."""
    _check_member(gid, GroupID)
    return [kid for kid in KernelID if get_kernel_group(kid) == gid]


def get_kernel_id(name: str) -> KernelID:
    """Look up a kernel by its full name.

    Raises:
        ValueError: If no kernel has that full name.
    """
    try:
        return KernelID[name]
    except KeyError:
        available = ", ".join(get_full_kernel_name(kid) for kid in KernelID)
        raise ValueError(f"Unknown kernel '{name}'. Available kernels: {available}") from None


def get_variant_id(name: str) -> VariantID:
    """Look up a variant by its name.

    Raises:
        ValueError: If no variant has that name.
    """
    try:
        return VariantID[name]
    except KeyError:
        available = ", ".join(get_variant_name(vid) for vid in VariantID)
        raise ValueError(f"Unknown variant '{name}'. Available variants: {available}") from None


def _resolve_kernel_token(token: str) -> List[KernelID]:
    if token in GroupID.__members__:
        return get_kernels_in_group(GroupID[token])
    if token in KernelID.__members__:
        return [KernelID[token]]
    return [kid for kid in KernelID if get_kernel_name(kid) == token]


def resolve_kernel_tokens(tokens: Iterable[str]) -> Tuple[List[KernelID], List[str]]:
    """Resolve user tokens to kernels.

    A token may be a group name (every kernel in the group), a full kernel
    name or a short kernel name.

    Args:
        tokens: Tokens in the order they were given.

    Returns:
        (kernels, invalid) where kernels is de-duplicated and in enumeration
        order, and invalid holds the unresolvable tokens in input order.
    """
    found = set()
    invalid = []
    for token in tokens:
        matches = _resolve_kernel_token(token)
        if matches:
            found.update(matches)
        else:
            invalid.append(token)
    return sorted(found), invalid


def resolve_variant_tokens(tokens: Iterable[str]) -> Tuple[List[VariantID], List[str]]:
    """Resolve user tokens to variants (same contract as `resolve_kernel_tokens`)."""
    found = set()
    invalid = []
    for token in tokens:
        if token in VariantID.__members__:
            found.add(VariantID[token])
        else:
            invalid.append(token)
    return sorted(found), invalid
