"""
GPU tests for linear least squares.

Validates the Cholesky backend against the CPU QR reference:
    - fp32 agrees to GPU_FP32 tolerance
    - fp64 agrees to GPU_FP64 tolerance
    - Ill-conditioned designs are refused unless force=True

Skipped automatically when no CUDA GPU is available.
"""

import numpy as np
import pytest

from pynls.core.compute.tolerances import GPU_FP32, GPU_FP64
from pynls.core.exceptions import NumericalError
from pynls.regression import fit, polyfit


def _cuda_available():
    try:
        import torch
    except ImportError:
        return False
    return torch.cuda.is_available()


pytestmark = [
    pytest.mark.gpu,
    pytest.mark.skipif(not _cuda_available(), reason="CUDA GPU not available"),
]


class TestGPUCholesky:

    def test_fp32_matches_cpu(self, simple_regression_data):
        X, y, _ = simple_regression_data
        cpu = fit(X, y, backend='cpu')
        gpu = fit(X, y, backend='gpu')
        assert gpu.backend_name == 'gpu_cholesky_fp32'
        np.testing.assert_allclose(
            gpu.coefficients, cpu.coefficients, rtol=GPU_FP32.rtol, atol=GPU_FP32.atol
        )

    def test_fp64_matches_cpu(self, simple_regression_data):
        X, y, _ = simple_regression_data
        cpu = fit(X, y, backend='cpu')
        gpu = fit(X, y, backend='gpu_fp64')
        assert gpu.backend_name == 'gpu_cholesky_fp64'
        np.testing.assert_allclose(
            gpu.coefficients, cpu.coefficients, rtol=GPU_FP64.rtol, atol=GPU_FP64.atol
        )
        np.testing.assert_allclose(gpu.standard_errors, cpu.standard_errors, rtol=1e-8)

    def test_ill_conditioned_refused(self):
        x = np.linspace(100, 200, 500)
        y = np.sin(x / 30)
        with pytest.raises(NumericalError, match="ill-conditioned"):
            polyfit(x, y, degree=5, backend='gpu')

    def test_force_proceeds(self):
        x = np.linspace(100, 200, 500)
        y = np.sin(x / 30)
        sol = polyfit(x, y, degree=5, backend='gpu_fp64', force=True)
        assert sol.info['condition_number'] > 1e6

    def test_auto_uses_gpu_for_large_problems(self, rng):
        n = 60_000
        x = rng.uniform(-1, 1, n)
        y = 1.0 + 2.0 * x + rng.standard_normal(n) * 0.1
        assert polyfit(x, y, backend='auto').backend_name.startswith('gpu')
