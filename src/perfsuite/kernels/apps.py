# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Kernels extracted from application codes.

PRESSURE and ENERGY are the equation-of-state loops of a Lagrangian
hydrodynamics proxy, VOL3D and DEL_DOT_VEC_2D are mesh kernels over node
centred coordinates, COUPLE is a laser-plasma coupling update on complex
amplitudes and FIR is a finite impulse response filter.

Conditionals are written with `space.where` so each body runs unchanged
on scalars, arrays and tensors.
"""

import math

import numpy as np

from ..forall import forall
from ..registry import KernelID
from .base import ForallKernel

SSC_FLOOR = 0.1111111e-36
SSC_MIN = 0.3333333e-18
VNORMQ = 0.083333333333333333


def _sound_speed(sp, ssc):
    floor = ssc <= SSC_FLOOR
    return sp.where(floor, SSC_MIN, sp.sqrt(sp.where(floor, 1.0, ssc)))


def _cut(sp, value, cut, minimum=None):
    value = sp.where(sp.abs(value) < cut, 0.0, value)
    if minimum is not None:
        value = sp.where(value < minimum, minimum, value)
    return value


class Pressure(ForallKernel):
    """Pressure from compression and energy, clamped by cut-off and bounds."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Apps_PRESSURE, run_params, 50000, 5, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data("compression", n)
        self.alloc_and_init_data("bvc", n)
        self.alloc_and_init_data_const("p_new", n, 0.0)
        self.alloc_and_init_data_rand_sign("e_old", n)
        self.alloc_and_init_data("vnewc", n)
        self.cls = 2.0 / 3.0
        self.p_cut = 1.0e-7
        self.pmin = -0.05
        self.eosvmax = 0.15

    def kernel_rep(self, policy, data):
        compression, bvc = data["compression"], data["bvc"]
        p_new, e_old, vnewc = data["p_new"], data["e_old"], data["vnewc"]
        cls, p_cut, pmin, eosvmax = self.cls, self.p_cut, self.pmin, self.eosvmax
        sp = policy.space

        def compute_bvc(i):
            bvc[i] = cls * (compression[i] + 1.0)

        def compute_pressure(i):
            p = _cut(sp, bvc[i] * e_old[i], p_cut)
            p = sp.where(vnewc[i] >= eosvmax, 0.0, p)
            p_new[i] = sp.where(p < pmin, pmin, p)

        forall(policy, 0, self.run_size, compute_bvc)
        forall(policy, 0, self.run_size, compute_pressure)

    def _compute_checksum(self, vid):
        return self.checksum_of("p_new")


class Energy(ForallKernel):
    """Six-stage energy and artificial viscosity update."""

    ARRAYS = (
        "e_old",
        "delvc",
        "p_old",
        "q_old",
        "work",
        "comp_half_step",
        "p_half_step",
        "bvc",
        "pbvc",
        "ql_old",
        "qq_old",
        "vnewc",
    )

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Apps_ENERGY, run_params, 20000, 3, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data_const("e_new", n, 0.0)
        self.alloc_and_init_data_const("q_new", n, 0.0)
        self.alloc_and_init_data("p_new", n)
        for name in self.ARRAYS:
            if name == "delvc":
                self.alloc_and_init_data_rand_sign(name, n)
            else:
                self.alloc_and_init_data(name, n)
        self.rho0 = 0.5
        self.e_cut = 1.0e-7
        self.emin = -1.0e15
        self.q_cut = 1.0e-7

    def kernel_rep(self, policy, data):
        e_new, q_new, p_new = data["e_new"], data["q_new"], data["p_new"]
        e_old, delvc, p_old, q_old, work = (data[k] for k in ("e_old", "delvc", "p_old", "q_old", "work"))
        comp_half_step, p_half_step = data["comp_half_step"], data["p_half_step"]
        bvc, pbvc, ql_old, qq_old, vnewc = (data[k] for k in ("bvc", "pbvc", "ql_old", "qq_old", "vnewc"))
        rho0, e_cut, emin, q_cut = self.rho0, self.e_cut, self.emin, self.q_cut
        sp = policy.space
        sixth = 1.0 / 6.0

        def stage1(i):
            e = e_old[i] - 0.5 * delvc[i] * (p_old[i] + q_old[i]) + 0.5 * work[i]
            e_new[i] = sp.where(e < emin, emin, e)

        def stage2(i):
            vhalf = 1.0 / (1.0 + comp_half_step[i])
            ssc = (pbvc[i] * e_new[i] + vhalf * vhalf * bvc[i] * p_half_step[i]) / rho0
            ssc = _sound_speed(sp, ssc)
            q_new[i] = sp.where(delvc[i] > 0.0, 0.0, ssc * ql_old[i] + qq_old[i])

        def stage3(i):
            e_new[i] = e_new[i] + 0.5 * delvc[i] * (
                3.0 * (p_old[i] + q_old[i]) - 4.0 * (p_half_step[i] + q_new[i])
            )

        def stage4(i):
            e_new[i] = _cut(sp, e_new[i] + 0.5 * work[i], e_cut, emin)

        def stage5(i):
            ssc = (pbvc[i] * e_new[i] + vnewc[i] * vnewc[i] * bvc[i] * p_new[i]) / rho0
            ssc = _sound_speed(sp, ssc)
            q_tilde = sp.where(delvc[i] > 0.0, 0.0, ssc * ql_old[i] + qq_old[i])
            e = e_new[i] - (
                7.0 * (p_old[i] + q_old[i]) - 8.0 * (p_half_step[i] + q_new[i]) + (p_new[i] + q_tilde)
            ) * delvc[i] * sixth
            e_new[i] = _cut(sp, e, e_cut, emin)

        def stage6(i):
            ssc = (pbvc[i] * e_new[i] + vnewc[i] * vnewc[i] * bvc[i] * p_new[i]) / rho0
            ssc = _sound_speed(sp, ssc)
            q = _cut(sp, ssc * ql_old[i] + qq_old[i], q_cut)
            q_new[i] = sp.where(delvc[i] <= 0.0, q, q_new[i])

        for stage in (stage1, stage2, stage3, stage4, stage5, stage6):
            forall(policy, 0, self.run_size, stage)

    def _compute_checksum(self, vid):
        return self.checksum_of("e_new", "q_new")


class _MeshKernel(ForallKernel):
    """Regular mesh of `extent` zones per side with node coordinates in [0, 1]."""

    dims = 3

    @property
    def extent(self) -> int:
        return max(1, round(self.run_size ** (1.0 / self.dims)))

    def set_mesh_positions(self, names):
        n = self.extent
        jp = n + 1
        nodes = np.arange(jp**self.dims)
        h = 1.0 / n
        for axis, name in enumerate(names):
            self._data[name] = ((nodes // jp**axis) % jp) * h


class Vol3D(_MeshKernel):
    """Hexahedral zone volumes from node coordinates."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Apps_VOL3D, run_params, 27000, 3, backend_config, logger)

    def _set_up(self, vid):
        n = self.extent
        self.jp = n + 1
        self.kp = (n + 1) ** 2
        self.set_mesh_positions(("x", "y", "z"))
        self.alloc_and_init_data_const("vol", (n + 1) ** 3, 0.0)
        self.vnormq = VNORMQ

    def kernel_rep(self, policy, data):
        x, y, z, vol = data["x"], data["y"], data["z"], data["vol"]
        jp, kp, vnormq = self.jp, self.kp, self.vnormq

        def corners(arr, i):
            return (
                arr[i],
                arr[i + 1],
                arr[i + jp],
                arr[i + 1 + jp],
                arr[i + kp],
                arr[i + 1 + kp],
                arr[i + jp + kp],
                arr[i + 1 + jp + kp],
            )

        def body(i):
            x0, x1, x2, x3, x4, x5, x6, x7 = corners(x, i)
            y0, y1, y2, y3, y4, y5, y6, y7 = corners(y, i)
            z0, z1, z2, z3, z4, z5, z6, z7 = corners(z, i)

            x71, x72, x74 = x7 - x1, x7 - x2, x7 - x4
            x30, x50, x60 = x3 - x0, x5 - x0, x6 - x0
            y71, y72, y74 = y7 - y1, y7 - y2, y7 - y4
            y30, y50, y60 = y3 - y0, y5 - y0, y6 - y0
            z71, z72, z74 = z7 - z1, z7 - z2, z7 - z4
            z30, z50, z60 = z3 - z0, z5 - z0, z6 - z0

            xps, yps, zps = x71 + x60, y71 + y60, z71 + z60
            cyz = y72 * z30 - z72 * y30
            czx = z72 * x30 - x72 * z30
            cxy = x72 * y30 - y72 * x30
            v = xps * cyz + yps * czx + zps * cxy

            xps, yps, zps = x72 + x50, y72 + y50, z72 + z50
            cyz = y74 * z60 - z74 * y60
            czx = z74 * x60 - x74 * z60
            cxy = x74 * y60 - y74 * x60
            v = v + xps * cyz + yps * czx + zps * cxy

            xps, yps, zps = x74 + x30, y74 + y30, z74 + z30
            cyz = y71 * z50 - z71 * y50
            czx = z71 * x50 - x71 * z50
            cxy = x71 * y50 - y71 * x50
            v = v + xps * cyz + yps * czx + zps * cxy

            vol[i] = v * vnormq

        # Zones whose far corner is still inside the node arrays.
        forall(policy, 0, (self.extent + 1) ** 3 - (1 + jp + kp), body)

    def _compute_checksum(self, vid):
        return self.checksum_of("vol")


class DelDotVec2D(_MeshKernel):
    """Divergence of a node centred vector field on a 2D quad mesh."""

    dims = 2

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Apps_DEL_DOT_VEC_2D, run_params, 40000, 3, backend_config, logger)

    def _set_up(self, vid):
        n = self.extent
        self.jp = n + 1
        self.set_mesh_positions(("x", "y"))
        self.alloc_and_init_data("xdot", (n + 1) ** 2)
        self.alloc_and_init_data("ydot", (n + 1) ** 2)
        self.alloc_and_init_data_const("div", (n + 1) ** 2, 0.0)
        self._data["real_zones"] = np.array([j * self.jp + i for j in range(n) for i in range(n)], dtype=np.int64)
        self.ptiny = 1.0e-50
        self.half = 0.5

    def kernel_rep(self, policy, data):
        x, y, fx, fy = data["x"], data["y"], data["xdot"], data["ydot"]
        div, real_zones = data["div"], data["real_zones"]
        jp, ptiny, half = self.jp, self.ptiny, self.half

        def quad(arr, i):
            return arr[i], arr[i + 1], arr[i + 1 + jp], arr[i + jp]

        def body(ii):
            i = real_zones[ii]
            x1, x2, x3, x4 = quad(x, i)
            y1, y2, y3, y4 = quad(y, i)
            fx1, fx2, fx3, fx4 = quad(fx, i)
            fy1, fy2, fy3, fy4 = quad(fy, i)

            xi = half * (x1 + x2 - x3 - x4)
            xj = half * (x2 + x3 - x4 - x1)
            yi = half * (y1 + y2 - y3 - y4)
            yj = half * (y2 + y3 - y4 - y1)
            fxi = half * (fx1 + fx2 - fx3 - fx4)
            fxj = half * (fx2 + fx3 - fx4 - fx1)
            fyi = half * (fy1 + fy2 - fy3 - fy4)
            fyj = half * (fy2 + fy3 - fy4 - fy1)

            rarea = 1.0 / (xi * yj - xj * yi + ptiny)
            dfxdx = rarea * (fxi * yj - fxj * yi)
            dfydy = rarea * (fyj * xi - fyi * xj)
            affine = (fy1 + fy2 + fy3 + fy4) / (y1 + y2 + y3 + y4)
            div[i] = dfxdx + dfydy + affine

        forall(policy, 0, self.extent * self.extent, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("div")


class Couple(ForallKernel):
    """Three-wave coupling update of complex amplitudes t0, t1, t2."""

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Apps_COUPLE, run_params, 20000, 3, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        for name in ("t0", "t1", "t2", "denac", "denlw"):
            self.alloc_and_init_data_complex(name, n)
        clight = 3.0e10
        csound = 3.09e7
        omega0 = 0.9
        omegar = 0.9
        self.dt = 0.208
        self.c10 = 0.25 * (clight / csound)
        self.fratio = math.sqrt(omegar / omega0)
        self.r_fratio = 1.0 / self.fratio
        self.c20 = 0.25 * (clight / csound) * self.r_fratio
        self.ireal = complex(0.0, 1.0)

    def kernel_rep(self, policy, data):
        t0, t1, t2 = data["t0"], data["t1"], data["t2"]
        denac, denlw = data["denac"], data["denlw"]
        dt, c10, c20 = self.dt, self.c10, self.c20
        fratio, r_fratio, ireal = self.fratio, self.r_fratio, self.ireal
        sp = policy.space

        def zabs2(c):
            return sp.real(c) * sp.real(c) + sp.imag(c) * sp.imag(c)

        def body(i):
            c1 = c10 * denac[i]
            c2 = c20 * denlw[i]

            zlam = sp.sqrt(zabs2(c1) + zabs2(c2) + 1.0e-34)
            snlamt = sp.sin(zlam * dt * 0.5)
            cslamt = sp.cos(zlam * dt * 0.5)

            a0t = t0[i]
            a1t = t1[i]
            a2t = t2[i] * fratio

            r_zlam = 1.0 / zlam
            c1 = c1 * r_zlam
            c2 = c2 * r_zlam
            zac1 = zabs2(c1)
            zac2 = zabs2(c2)

            z3 = (c1 * a1t + c2 * a2t) * snlamt
            t0[i] = a0t * cslamt - ireal * z3

            r = zac1 * cslamt + zac2
            z5 = c2 * a2t
            z4 = sp.conj(c1) * z5 * (cslamt - 1.0)
            z3 = sp.conj(c1) * a0t * snlamt
            t1[i] = a1t * r + z4 - ireal * z3

            r = zac1 + zac2 * cslamt
            z5 = c1 * a1t
            z4 = sp.conj(c2) * z5 * (cslamt - 1.0)
            z3 = sp.conj(c2) * a0t * snlamt
            t2[i] = (a2t * r + z4 - ireal * z3) * r_fratio

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("t0", "t1", "t2")


class Fir(ForallKernel):
    """16-tap finite impulse response filter."""

    COEFF = (3.0, -1.0, -1.0, -1.0, -1.0, 3.0, -1.0, -1.0, -1.0, -1.0, 3.0, -1.0, -1.0, -1.0, -1.0, 3.0)

    def __init__(self, run_params, backend_config=None, logger=None):
        super().__init__(KernelID.Apps_FIR, run_params, 50000, 3, backend_config, logger)

    def _set_up(self, vid):
        n = self.run_size
        self.alloc_and_init_data("in", n + len(self.COEFF) - 1)
        self.alloc_and_init_data_const("out", n, 0.0)

    def kernel_rep(self, policy, data):
        in_, out = data["in"], data["out"]
        coeff = self.COEFF

        def body(i):
            acc = 0.0
            for j, c in enumerate(coeff):
                acc = acc + c * in_[i + j]
            out[i] = acc

        forall(policy, 0, self.run_size, body)

    def _compute_checksum(self, vid):
        return self.checksum_of("out")
