"""
Regression backends.

Available backends:
    CPUQRBackend: CPU reference implementation using QR decomposition
    GPUCholeskyBackend: PyTorch normal-equations solver (pynls.regression.backends.gpu,
        imported lazily so torch stays optional)
"""

from pynls.regression.backends.cpu import CPUQRBackend

__all__ = [
    "CPUQRBackend",
]
