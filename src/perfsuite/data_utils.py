# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Deterministic data initialisation and checksums.

Every initialiser bumps a per-execution counter so that successive arrays of
one kernel get different contents; `reset_data_init_count()` is called at the
start of each kernel execution so the same kernel always sees the same data.
"""

import numpy as np

_data_init_count = 0


def reset_data_init_count() -> None:
    global _data_init_count
    _data_init_count = 0


def increment_data_init_count() -> int:
    """Advance the counter and return its previous value."""
    global _data_init_count
    count = _data_init_count
    _data_init_count += 1
    return count


def get_data_init_count() -> int:
    return _data_init_count


def init_data(n: int) -> np.ndarray:
    """Smooth positive values, v[i] = factor * (i + 1.1) / (i + 1.12345).

    factor alternates between 0.1 and 0.2 with the init counter.
    """
    factor = 0.1 if increment_data_init_count() % 2 else 0.2
    i = np.arange(n, dtype=np.float64)
    return factor * (i + 1.1) / (i + 1.12345)


def init_data_const(n: int, value: float) -> np.ndarray:
    increment_data_init_count()
    return np.full(n, value, dtype=np.float64)


def init_data_rand_sign(n: int) -> np.ndarray:
    """Like `init_data`, with signs drawn from a seeded generator."""
    values = init_data(n)
    rng = np.random.default_rng(4793 + get_data_init_count())
    signs = np.where(rng.random(n) < 0.5, -1.0, 1.0)
    return values * signs


def init_data_random(n: int) -> np.ndarray:
    """Uniform values in [0, 1) from a seeded generator."""
    rng = np.random.default_rng(4793 + increment_data_init_count())
    return rng.random(n)


def init_data_int(n: int) -> np.ndarray:
    """Integers in [-32, 32] from a seeded generator."""
    rng = np.random.default_rng(4793 + increment_data_init_count())
    return rng.integers(-32, 33, size=n, dtype=np.int64)


def init_data_complex(n: int) -> np.ndarray:
    """Complex values whose real and imaginary parts follow `init_data`."""
    real = init_data(n)
    imag = init_data(n)
    return real + 1j * imag


def calc_checksum(values) -> float:
    """Position-weighted sum, sum((j + 1) * v[j]).

    Complex values contribute real + imaginary part. Accumulates in float64.
    """
    values = np.asarray(values).ravel()
    if np.iscomplexobj(values):
        values = values.real + values.imag
    weights = np.arange(1, values.size + 1, dtype=np.float64)
    return float(np.dot(weights, values.astype(np.float64)))
