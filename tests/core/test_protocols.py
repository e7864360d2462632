"""
Backends satisfy the Backend protocol.
"""

from pynls.core.protocols import Backend
from pynls.core.compute.tolerances import NLSControl
from pynls.nls.backends import CPULeastSquaresBackend
from pynls.regression.backends import CPUQRBackend


class TestBackendProtocol:

    def test_cpu_qr(self):
        backend = CPUQRBackend()
        assert isinstance(backend, Backend)
        assert backend.name == 'cpu_qr'

    def test_least_squares(self):
        backend = CPULeastSquaresBackend(control=NLSControl(method='dogbox'))
        assert isinstance(backend, Backend)
        assert backend.name == 'cpu_dogbox'

    def test_plain_object_is_not_backend(self):
        assert not isinstance(object(), Backend)
