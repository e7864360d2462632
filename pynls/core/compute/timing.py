"""
Wall-clock timing for backends.

Each backend records a total plus named sections (decomposition,
optimization, covariance, ...) into Result.timing. GPU backends pass
sync_cuda=True so queued kernels finish before the clock is read.
"""

import time
from contextlib import contextmanager
from typing import Iterator


def _cuda_synchronize() -> None:
    try:
        import torch
    except ImportError:
        return
    if torch.cuda.is_available():
        torch.cuda.synchronize()


class Timer:
    """
    Accumulating section timer.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('optimization'):
            opt = least_squares(residual_fn, theta0)
        with timer.section('covariance'):
            cov = unscaled_covariance(opt.jac)
        timer.stop()
        timer.result()
        # {'total_seconds': 0.004, 'optimization': 0.003, 'covariance': 0.0001}
    """

    def __init__(self, sync_cuda: bool = False):
        self._sync_cuda = sync_cuda
        self._sections: dict[str, float] = {}
        self._t0: float | None = None
        self._total: float | None = None

    def _now(self) -> float:
        if self._sync_cuda:
            _cuda_synchronize()
        return time.perf_counter()

    def start(self) -> None:
        self._t0 = self._now()

    def stop(self) -> None:
        if self._t0 is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = self._now() - self._t0

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time a block; repeated names accumulate."""
        t0 = self._now()
        try:
            yield
        finally:
            self._sections[name] = self._sections.get(name, 0.0) + (self._now() - t0)

    def result(self) -> dict[str, float]:
        """
        {'total_seconds': ..., <section>: ...}

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}


@contextmanager
def timed(sync_cuda: bool = False) -> Iterator[Timer]:
    """
    Time a block of user code.

    Usage:
        with timed() as timer:
            solution = nls('decay', x, y)
        print(f"{timer.result()['total_seconds']:.3f}s")
    """
    timer = Timer(sync_cuda=sync_cuda)
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
