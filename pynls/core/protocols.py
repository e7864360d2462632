"""
Core protocols for PyNLS.

Structural interfaces shared by the regression and NLS backends. Backends
satisfy them by shape; none inherit from them.
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

P = TypeVar('P', covariant=True)  # Parameter payload type
D = TypeVar('D', contravariant=True)  # Design type


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    A backend takes a validated design (RegressionDesign, NLSDesign) and
    produces a Result wrapping a parameter payload. Backends are stateless
    apart from construction-time configuration (device, precision,
    termination control) and are created per call.

    Convention for name: '{device}_{algorithm}', e.g. 'cpu_qr',
    'gpu_cholesky_fp32', 'cpu_trf'.
    """

    @property
    def name(self) -> str:
        ...

    def solve(self, design: D) -> Any:
        """
        Execute the fit.

        Returns:
            Result envelope containing the parameter payload

        Raises:
            NumericalError: If numerical issues prevent a solution
            ValidationError: If design is invalid for this backend
        """
        ...
