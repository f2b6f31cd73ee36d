# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Advanced Micro Devices, Inc. All rights reserved.

"""
Portable loop execution.

Kernels write each loop once, as a body over an index:

    def body(i):
        a[i] = b[i] + alpha * c[i]

    forall(policy, 0, n, body)

The policy decides what `i` is and where the arrays live:

    SeqExec              one Python int at a time, host arrays
    SimdExec             one index array covering the whole range, host arrays
    OmpParallelForExec   one index array per chunk, chunks run on a thread team
    CudaExec             one index tensor on a torch device

Bodies must therefore only use indexing, arithmetic and the math functions of
`policy.space`, which exist for numpy and torch alike.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .registry import VariantID

try:
    import torch

    TORCH_AVAILABLE = True
except ImportError:
    torch = None
    TORCH_AVAILABLE = False

# Chunk size of the dynamically scheduled thread policy.
OMP_DYNAMIC_CHUNK = 8192


def gpu_device_available(device: str = "cuda:0") -> bool:
    """Return True if torch is importable and can see a GPU for `device`."""
    if not TORCH_AVAILABLE or not device.startswith("cuda"):
        return False
    return torch.cuda.is_available()


class HostSpace:
    """numpy arrays in host memory."""

    name = "host"

    sqrt = staticmethod(np.sqrt)
    abs = staticmethod(np.abs)
    sin = staticmethod(np.sin)
    cos = staticmethod(np.cos)
    exp = staticmethod(np.exp)
    real = staticmethod(np.real)
    imag = staticmethod(np.imag)
    conj = staticmethod(np.conj)
    where = staticmethod(np.where)

    def bind(self, buffers: Dict[str, np.ndarray]) -> Dict[str, np.ndarray]:
        return dict(buffers)

    def copy_back(self, bound: Dict[str, np.ndarray], buffers: Dict[str, np.ndarray]) -> None:
        pass

    def index_range(self, ibegin: int, iend: int) -> np.ndarray:
        return np.arange(ibegin, iend)

    def real_index(self, i):
        # Python ints and int64 arrays both promote to float64 under numpy.
        return i

    def is_empty(self, value) -> bool:
        return isinstance(value, np.ndarray) and value.size == 0

    def reduce(self, value, op: str):
        if isinstance(value, np.ndarray):
            return getattr(np, op)(value)
        return value

    def combine(self, current, partial, op: str):
        if op == "sum":
            return current + partial
        if op == "min":
            return min(current, partial)
        return max(current, partial)

    def to_scalar(self, value):
        if isinstance(value, (np.ndarray, np.generic)):
            return value.item()
        return value


class DeviceSpace:
    """torch tensors on a GPU device."""

    name = "device"

    def __init__(self, device: str):
        if not TORCH_AVAILABLE:
            msg = "torch is required for device execution. Install it with: pip install perfsuite[gpu]"
            raise RuntimeError(msg)
        self.device = torch.device(device)
        self.sqrt = torch.sqrt
        self.abs = torch.abs
        self.sin = torch.sin
        self.cos = torch.cos
        self.exp = torch.exp
        self.real = torch.real
        self.imag = torch.imag
        self.conj = torch.conj

    def _as_tensor(self, value, like=None):
        if torch.is_tensor(value):
            return value
        dtype = like.dtype if like is not None and torch.is_tensor(like) else torch.float64
        return torch.as_tensor(value, dtype=dtype, device=self.device)

    def where(self, cond, x, y):
        x = self._as_tensor(x, like=y)
        return torch.where(cond, x, self._as_tensor(y, like=x))

    def bind(self, buffers: Dict[str, np.ndarray]) -> Dict[str, "torch.Tensor"]:
        return {name: torch.from_numpy(arr).to(self.device) for name, arr in buffers.items()}

    def copy_back(self, bound: Dict[str, "torch.Tensor"], buffers: Dict[str, np.ndarray]) -> None:
        for name, arr in buffers.items():
            arr[...] = bound[name].cpu().numpy()

    def index_range(self, ibegin: int, iend: int) -> "torch.Tensor":
        return torch.arange(ibegin, iend, device=self.device)

    def real_index(self, i):
        return i.to(torch.float64)

    def is_empty(self, value) -> bool:
        return torch.is_tensor(value) and value.numel() == 0

    def reduce(self, value, op: str):
        if not torch.is_tensor(value):
            return value
        if op == "sum":
            return value.sum()
        return value.amin() if op == "min" else value.amax()

    def combine(self, current, partial, op: str):
        if op == "sum":
            return current + partial
        current = self._as_tensor(current, like=partial)
        partial = self._as_tensor(partial, like=current)
        return torch.minimum(current, partial) if op == "min" else torch.maximum(current, partial)

    def to_scalar(self, value):
        if torch.is_tensor(value):
            return value.item()
        return value


class ExecPolicy:
    """Base execution policy. Use as a context manager so worker resources are released."""

    name = "policy"

    def __init__(self, space=None):
        self.space = space if space is not None else HostSpace()

    def forall(self, ibegin: int, iend: int, body: Callable) -> None:
        raise NotImplementedError

    def synchronize(self) -> None:
        """Block until all work issued by this policy has completed."""

    def close(self) -> None:
        """Release worker resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(space={self.space.name})"


class SeqExec(ExecPolicy):
    """Element-at-a-time sequential loop."""

    name = "seq_exec"

    def forall(self, ibegin, iend, body):
        for i in range(ibegin, iend):
            body(i)


class SimdExec(ExecPolicy):
    """Whole range at once as a vectorised numpy operation."""

    name = "simd_exec"

    def forall(self, ibegin, iend, body):
        if iend > ibegin:
            body(self.space.index_range(ibegin, iend))


class OmpParallelForExec(ExecPolicy):
    """Thread team over contiguous chunks of the range.

    With `chunk_size=None` each thread gets one contiguous chunk (static
    schedule); otherwise the range is cut in `chunk_size` pieces that the team
    pulls as it goes (dynamic schedule). Each forall joins the team before
    returning.
    """

    name = "omp_parallel_for_exec"

    def __init__(self, num_threads: int, chunk_size: Optional[int] = None):
        super().__init__(HostSpace())
        self.num_threads = num_threads
        self.chunk_size = chunk_size
        self._pool = ThreadPoolExecutor(max_workers=num_threads, thread_name_prefix="perfsuite-omp")

    def chunks(self, ibegin: int, iend: int) -> List[Tuple[int, int]]:
        length = iend - ibegin
        if length <= 0:
            return []
        if self.chunk_size is None:
            step, extra = divmod(length, self.num_threads)
            bounds = []
            lo = ibegin
            for tid in range(self.num_threads):
                hi = lo + step + (1 if tid < extra else 0)
                if hi > lo:
                    bounds.append((lo, hi))
                lo = hi
            return bounds
        return [(lo, min(lo + self.chunk_size, iend)) for lo in range(ibegin, iend, self.chunk_size)]

    def forall(self, ibegin, iend, body):
        futures = [
            self._pool.submit(body, self.space.index_range(lo, hi)) for lo, hi in self.chunks(ibegin, iend)
        ]
        for future in futures:
            future.result()

    def close(self):
        self._pool.shutdown(wait=True)


class CudaExec(ExecPolicy):
    """Whole range as one launch on a torch device.

    Synchronous launches wait for the device after every forall; asynchronous
    ones only at `synchronize()` and when a reducer is read.
    """

    name = "cuda_exec"

    def __init__(self, device: str, asynchronous: bool = False):
        super().__init__(DeviceSpace(device))
        self.asynchronous = asynchronous

    def forall(self, ibegin, iend, body):
        if iend > ibegin:
            body(self.space.index_range(ibegin, iend))
        if not self.asynchronous:
            self.synchronize()

    def synchronize(self):
        torch.cuda.synchronize(self.space.device)


def forall(policy: ExecPolicy, ibegin: int, iend: int, body: Callable) -> None:
    """Run `body` over [ibegin, iend) with the given policy."""
    policy.forall(ibegin, iend, body)


def make_policy(vid: VariantID, config) -> ExecPolicy:
    """Return the execution policy a variant runs its loops with.

    Args:
        vid: Variant to run.
        config: `perfsuite.config.BackendConfig` with thread count and device.

    Raises:
        ValueError: If `vid` is not a VariantID.
    """
    if vid == VariantID.Base_Seq:
        return SeqExec()
    if vid == VariantID.RAJA_Seq:
        return SimdExec()
    if vid == VariantID.Base_OpenMP:
        return OmpParallelForExec(config.num_threads)
    if vid == VariantID.RAJA_OpenMP:
        return OmpParallelForExec(config.num_threads, chunk_size=OMP_DYNAMIC_CHUNK)
    if vid == VariantID.Base_CUDA:
        return CudaExec(config.cuda_device)
    if vid == VariantID.RAJA_CUDA:
        return CudaExec(config.cuda_device, asynchronous=True)
    raise ValueError(f"No execution policy for variant {vid!r}")


class _Reducer:
    """Reduction variable usable from forall bodies under any policy."""

    _op = "sum"

    def __init__(self, policy: ExecPolicy, init=0):
        self._space = policy.space
        self._lock = threading.Lock()
        self._value = init

    def _combine(self, value) -> None:
        if self._space.is_empty(value):
            return
        partial = self._space.reduce(value, self._op)
        with self._lock:
            self._value = self._space.combine(self._value, partial, self._op)

    def get(self):
        """Return the reduced value as a Python scalar (waits for device work)."""
        return self._space.to_scalar(self._value)


class ReduceSum(_Reducer):
    _op = "sum"

    def add(self, value) -> None:
        self._combine(value)


class ReduceMin(_Reducer):
    _op = "min"

    def min(self, value) -> None:
        self._combine(value)


class ReduceMax(_Reducer):
    _op = "max"

    def max(self, value) -> None:
        self._combine(value)
