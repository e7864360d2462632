"""
Numerical tolerances and solver defaults.

Two kinds of configuration live here:

- ToleranceTier: how closely results from different compute paths are
  expected to agree (CPU fp64 reference vs GPU fp32). Used by the GPU
  backend's condition check and by the test suite.
- NLSControl: termination settings handed to scipy.optimize.least_squares,
  the analogue of R's nls.control().
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision reference',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='gpu_fp32',
    description='GPU single precision, statistically equivalent',
)

# NLS estimates agree with other optimizers only to the termination tolerance.
NLS_FP64 = ToleranceTier(
    rtol=1e-5,
    atol=1e-7,
    name='nls_fp64',
    description='Iterative least squares, agreement up to termination tolerance',
)

# At cond(X) = 1e6, cond(X'X) = 1e12: the normal equations lose
# float64 accuracy and are meaningless in float32.
GPU_CONDITION_THRESHOLD = 1e6


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select the tolerance tier for results produced by a backend."""
    if backend_name.startswith('gpu'):
        return GPU_FP64 if 'fp64' in backend_name else GPU_FP32
    if backend_name in ('cpu_trf', 'cpu_dogbox', 'cpu_lm'):
        return NLS_FP64
    return CPU_FP64


NLS_METHODS = ('trf', 'dogbox', 'lm')


@dataclass(frozen=True)
class NLSControl:
    """
    Termination settings for non-linear least squares.

    Attributes:
        max_iter: Maximum number of residual evaluations (scipy max_nfev)
        ftol: Relative change in the cost function that stops iteration
        xtol: Relative change in the parameters that stops iteration
        gtol: Gradient norm that stops iteration
        method: 'trf' (trust region reflective, supports bounds),
            'dogbox', or 'lm' (Levenberg-Marquardt, no bounds)
        diff_step: Relative finite-difference step for the Jacobian,
            None for scipy's default
    """
    max_iter: int = 200
    ftol: float = 1e-8
    xtol: float = 1e-8
    gtol: float = 1e-8
    method: str = 'trf'
    diff_step: float | None = None

    def __post_init__(self):
        if self.method not in NLS_METHODS:
            raise ValueError(
                f"Unknown method: {self.method!r}. Use one of {', '.join(NLS_METHODS)}."
            )
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        for name in ('ftol', 'xtol', 'gtol'):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be > 0, got {value}")

    def with_overrides(
        self,
        *,
        method: str | None = None,
        max_iter: int | None = None,
        tol: float | None = None,
    ) -> 'NLSControl':
        """Copy with the keyword overrides accepted by nls() applied."""
        changes: dict = {}
        if method is not None:
            changes['method'] = method
        if max_iter is not None:
            changes['max_iter'] = max_iter
        if tol is not None:
            changes.update(ftol=tol, xtol=tol, gtol=tol)
        return replace(self, **changes) if changes else self


DEFAULT_CONTROL = NLSControl()
