"""
GPU backend for linear least squares using PyTorch.

For large polynomial / design-matrix fits. Results are checked against
the CPU QR reference in the test suite. Runs on CUDA or Apple MPS.
"""

from typing import Any
import numpy as np

from pynls.core.result import Result
from pynls.core.exceptions import NumericalError, SingularMatrixError
from pynls.core.compute.timing import Timer
from pynls.core.compute.tolerances import GPU_CONDITION_THRESHOLD
from pynls.regression.design import RegressionDesign
from pynls.regression.solution import LinearParams


def _condition_number(X) -> float:
    import torch

    # svdvals has no MPS kernel
    try:
        s = torch.linalg.svdvals(X)
    except (NotImplementedError, RuntimeError):
        s = torch.linalg.svdvals(X.cpu())
    s_max, s_min = float(s[0]), float(s[-1])
    return s_max / s_min if s_min > 0 else float('inf')


def _to_host(t) -> np.ndarray:
    return t.detach().cpu().numpy().astype(np.float64)


class GPUCholeskyBackend:
    """
    Normal equations X'X β = X'y solved by Cholesky on the GPU.

    Faster than QR but squares the condition number, so ill-conditioned
    designs (high-degree polynomials on unscaled x are the usual culprit)
    are refused unless force=True. float32 unless use_fp64=True.
    """

    def __init__(self, use_fp64: bool = False, device: str = 'cuda', force: bool = False):
        """
        Args:
            use_fp64: Compute in float64 (slow on consumer GPUs, not on MPS)
            device: 'cuda', 'cuda:N' or 'mps'
            force: Skip the condition number check
        """
        import torch

        self.device = torch.device(device)
        if self.device.type == 'cuda':
            if not torch.cuda.is_available():
                raise RuntimeError(
                    "CUDA requested but torch reports no CUDA device; use backend='cpu'."
                )
            self.device_name = torch.cuda.get_device_name(self.device)
        elif self.device.type == 'mps':
            mps = getattr(torch.backends, 'mps', None)
            if mps is None or not mps.is_available():
                raise RuntimeError(
                    "MPS requested but unavailable (needs Apple Silicon and an MPS build of torch)."
                )
            if use_fp64:
                raise RuntimeError(
                    "MPS has no float64 support; use backend='gpu' (float32) or backend='cpu'."
                )
            self.device_name = 'Apple Silicon GPU (MPS)'
        else:
            raise ValueError(f"Unknown GPU device: {device!r}. Use 'cuda' or 'mps'.")

        self.use_fp64 = use_fp64
        self.dtype = torch.float64 if use_fp64 else torch.float32
        self.force = force

    @property
    def name(self) -> str:
        return f"gpu_cholesky_{'fp64' if self.use_fp64 else 'fp32'}"

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Raises:
            NumericalError: If cond(X) exceeds GPU_CONDITION_THRESHOLD and
                force=False
            SingularMatrixError: If the Cholesky factorization of X'X fails
        """
        import torch

        timer = Timer(sync_cuda=self.device.type == 'cuda')
        timer.start()

        with timer.section('to_device'):
            X = torch.as_tensor(design.X, device=self.device, dtype=self.dtype)
            y = torch.as_tensor(design.y, device=self.device, dtype=self.dtype)

        with timer.section('condition'):
            cond = _condition_number(X)

        if cond > GPU_CONDITION_THRESHOLD and not self.force:
            timer.stop()
            raise NumericalError(
                f"Design matrix is ill-conditioned (cond(X) = {cond:.2e}); "
                f"the normal equations would lose most significant digits. "
                f"Use backend='cpu' (QR), center and scale x before a "
                f"high-degree polynomial fit, or pass force=True."
            )

        with timer.section('normal_equations'):
            XtX = X.T @ X
            Xty = X.T @ y

        with timer.section('cholesky'):
            L, info = torch.linalg.cholesky_ex(XtX)
            failed_at = int(info.item())
            if failed_at != 0:
                timer.stop()
                raise SingularMatrixError(
                    f"X'X is not positive definite (Cholesky failed at column "
                    f"{failed_at}); the design is rank-deficient.",
                    matrix_name="X'X",
                    condition_number=cond,
                    expected_rank=design.p,
                )
            beta = torch.cholesky_solve(Xty.unsqueeze(1), L).squeeze(1)
            XtX_inv = torch.cholesky_inverse(L)

        with timer.section('residuals'):
            fitted = X @ beta
            resid = y - fitted
            centered = y - y.mean()
            rss = float(resid.dot(resid))
            tss = float(centered.dot(centered))

        with timer.section('to_host'):
            params = LinearParams(
                coefficients=_to_host(beta),
                residuals=_to_host(resid),
                fitted_values=_to_host(fitted),
                rss=rss,
                tss=tss,
                rank=design.p,
                df_residual=design.n - design.p,
                cov_unscaled=_to_host(XtX_inv),
            )

        timer.stop()

        info_dict: dict[str, Any] = {
            'method': 'cholesky',
            'device': str(self.device),
            'device_name': self.device_name,
            'dtype': str(self.dtype),
            'condition_number': cond,
        }
        return Result(
            params=params,
            info=info_dict,
            timing=timer.result(),
            backend_name=self.name,
        )
