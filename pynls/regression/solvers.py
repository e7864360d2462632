"""
Solver dispatch for linear least squares.

Public API:
    fit(X, y, ...) -> LinearSolution
    polyfit(x, y, degree, ...) -> LinearSolution
"""

from typing import Any, Literal
from numpy.typing import ArrayLike

from pynls.core.compute.device import select_device
from pynls.core.datasource import get_xy
from pynls.regression.design import RegressionDesign
from pynls.regression.solution import LinearSolution
from pynls.regression.backends.cpu import CPUQRBackend


BackendChoice = Literal['auto', 'cpu', 'cpu_qr', 'gpu', 'gpu_fp64']

# backend='auto' stays on CPU QR below this many observations.
GPU_AUTO_MIN_ROWS = 50_000


def fit(
    X_or_design: ArrayLike | RegressionDesign,
    y: ArrayLike | None = None,
    *,
    backend: BackendChoice = 'auto',
    force: bool = False,
    verbose: bool = False,
) -> LinearSolution:
    """
    Fit a linear least squares model.

    Solves:
        min_β ||y - Xβ||²

    Args:
        X_or_design: Design matrix (n x p) or a RegressionDesign
        y: Response vector (n,). Required when X is an array.
        backend: Computational backend:
            - 'auto': CUDA GPU for large problems when available, else CPU
            - 'cpu' / 'cpu_qr': QR decomposition (reference)
            - 'gpu': PyTorch Cholesky, float32
            - 'gpu_fp64': PyTorch Cholesky, float64
        force: Let the GPU backend proceed on ill-conditioned designs
        verbose: Print progress information

    Returns:
        LinearSolution

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent dimensions
        SingularMatrixError: If X is rank-deficient

    Example:
        >>> import numpy as np
        >>> from pynls.regression import fit
        >>> X = np.column_stack([np.ones(50), np.arange(50.0)])
        >>> result = fit(X, 2.0 + 0.5 * np.arange(50.0))
        >>> result.coefficients
        array([2. , 0.5])
    """
    if isinstance(X_or_design, RegressionDesign):
        design = X_or_design
    else:
        if y is None:
            raise ValueError("y required when X is an array")
        design = RegressionDesign.from_arrays(X_or_design, y)

    return _solve(design, backend, force, verbose)


def polyfit(
    x: Any,
    y: Any,
    degree: int = 1,
    *,
    data: Any = None,
    backend: BackendChoice = 'auto',
    force: bool = False,
    verbose: bool = False,
) -> LinearSolution:
    """
    Fit a polynomial y = a0 + a1*x + ... + a_d*x^d by least squares.

    Degrees 1, 2 and 3 give the parameters of the library models
    linear (a, b), poly2 (a0, a1, a2) and poly3 (a0, a1, a2, a3); see
    LinearSolution.params.

    Args:
        x: Predictor values, or a column name in data
        y: Response values, or a column name in data
        degree: Polynomial degree (0 fits the mean)
        data: Optional DataFrame / mapping holding the named columns
        backend, force, verbose: As for fit()

    Returns:
        LinearSolution

    Example:
        >>> sol = polyfit(x, y, degree=2)
        >>> sol.params
        {'a0': ..., 'a1': ..., 'a2': ...}
    """
    x_data, y_data = get_xy(data, x, y)
    design = RegressionDesign.polynomial(x_data, y_data, degree)
    return _solve(design, backend, force, verbose)


def _solve(
    design: RegressionDesign,
    backend: BackendChoice,
    force: bool,
    verbose: bool,
) -> LinearSolution:
    backend_impl = _get_backend(backend, design, force=force)

    if verbose:
        print(f"Linear least squares: {design.n} observations, {design.p} coefficients")
        print(f"Backend: {backend_impl.name}")

    result = backend_impl.solve(design)

    if verbose:
        print(f"RSS: {result.params.rss:.6g} on {result.params.df_residual} DF")

    return LinearSolution(_result=result, _design=design)


def _get_backend(choice: BackendChoice, design: RegressionDesign, force: bool = False):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
        RuntimeError: If GPU requested but unavailable
    """
    if choice == 'auto':
        # MPS is never auto-selected: fp32 only
        if design.n >= GPU_AUTO_MIN_ROWS:
            device = select_device('auto')
            if device.device_type == 'cuda':
                from pynls.regression.backends.gpu import GPUCholeskyBackend
                return GPUCholeskyBackend(device='cuda', force=force)
        return CPUQRBackend()

    elif choice in ('cpu', 'cpu_qr'):
        return CPUQRBackend()

    elif choice in ('gpu', 'gpu_fp64'):
        device = select_device('gpu')
        from pynls.regression.backends.gpu import GPUCholeskyBackend
        return GPUCholeskyBackend(
            use_fp64=(choice == 'gpu_fp64'),
            device=device.device_type,
            force=force,
        )

    else:
        raise ValueError(f"Unknown backend: {choice!r}")
