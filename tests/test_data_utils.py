# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

import numpy as np
import pytest

from perfsuite import data_utils


@pytest.fixture(autouse=True)
def reset_counter():
    data_utils.reset_data_init_count()
    yield
    data_utils.reset_data_init_count()


class TestInitData:
    def test_formula_and_alternating_factor(self):
        first = data_utils.init_data(4)
        second = data_utils.init_data(4)
        i = np.arange(4)
        np.testing.assert_allclose(first, 0.2 * (i + 1.1) / (i + 1.12345))
        np.testing.assert_allclose(second, 0.1 * (i + 1.1) / (i + 1.12345))

    def test_reset_reproduces_data(self):
        a = data_utils.init_data_rand_sign(100)
        data_utils.reset_data_init_count()
        b = data_utils.init_data_rand_sign(100)
        np.testing.assert_array_equal(a, b)

    def test_rand_sign_has_both_signs(self):
        values = data_utils.init_data_rand_sign(1000)
        assert (values > 0).any() and (values < 0).any()
        assert not (values == 0).any()

    def test_int_range(self):
        values = data_utils.init_data_int(10000)
        assert values.dtype == np.int64
        assert values.min() >= -32
        assert values.max() <= 32

    def test_const(self):
        values = data_utils.init_data_const(5, 2.5)
        assert values.tolist() == [2.5] * 5
        assert data_utils.get_data_init_count() == 1

    def test_random_in_unit_interval(self):
        values = data_utils.init_data_random(1000)
        assert values.min() >= 0.0 and values.max() < 1.0

    def test_complex(self):
        values = data_utils.init_data_complex(3)
        assert np.iscomplexobj(values)
        assert data_utils.get_data_init_count() == 2


class TestChecksum:
    def test_position_weighted(self):
        assert data_utils.calc_checksum(np.array([1.0, 2.0, 3.0])) == 1.0 + 4.0 + 9.0

    def test_complex_adds_real_and_imaginary(self):
        values = np.array([1.0 + 2.0j, 3.0 - 1.0j])
        assert data_utils.calc_checksum(values) == 3.0 + 2 * 2.0

    def test_int_and_matrix_input(self):
        assert data_utils.calc_checksum(np.array([[1, 2], [3, 4]])) == 1 + 4 + 9 + 16

    def test_empty(self):
        assert data_utils.calc_checksum(np.array([])) == 0.0

    def test_returns_python_float(self):
        assert isinstance(data_utils.calc_checksum(np.ones(3)), float)
