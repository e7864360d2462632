"""
NLS backends.

Available backends:
    CPULeastSquaresBackend: scipy.optimize.least_squares ('trf', 'dogbox', 'lm')
"""

from pynls.nls.backends.cpu import CPULeastSquaresBackend

__all__ = [
    "CPULeastSquaresBackend",
]
