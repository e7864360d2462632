"""
Shared compute infrastructure for PyNLS.

Hardware detection, timing, tolerances and linear algebra kernels shared
by the regression and NLS backends. Domain-specific backends live in
{domain}/backends/, not here.

Submodules:
    device: Hardware detection and device selection
    timing: Execution timing utilities
    tolerances: Comparison tolerances and NLS termination settings
    linalg: QR and Jacobian covariance kernels
"""

from pynls.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pynls.core.compute.timing import Timer, timed
from pynls.core.compute.tolerances import (
    DEFAULT_CONTROL,
    NLSControl,
    ToleranceTier,
    select_tolerance,
)

__all__ = [
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    "Timer",
    "timed",
    "DEFAULT_CONTROL",
    "NLSControl",
    "ToleranceTier",
    "select_tolerance",
]
