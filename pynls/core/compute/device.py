"""
Accelerator discovery for the linear least squares GPU backend.

Model evaluation and NLS always run on the CPU. torch is imported on
demand so the base install does not need it.
"""

from dataclasses import dataclass
from typing import Literal
import platform


@dataclass(frozen=True)
class DeviceInfo:
    """
    A compute device.

    Attributes:
        device_type: 'cpu', 'cuda' or 'mps'
        device_index: Index for GPUs, None for the CPU
        name: Human-readable name
        memory_bytes: Total memory, None where torch does not report it
    """
    device_type: Literal['cpu', 'cuda', 'mps']
    device_index: int | None
    name: str
    memory_bytes: int | None = None

    @property
    def is_gpu(self) -> bool:
        return self.device_type != 'cpu'

    def __str__(self) -> str:
        if not self.is_gpu:
            return f"CPU ({self.name})"
        label = f"{self.device_type.upper()}:{self.device_index} ({self.name}"
        if self.memory_bytes is not None:
            label += f", {self.memory_bytes / 2**30:.1f}GB"
        return label + ")"


def _import_torch():
    try:
        import torch
    except ImportError:
        return None
    return torch


def detect_gpu() -> DeviceInfo | None:
    """
    The available accelerator, preferring CUDA over Apple MPS.

    None when torch is missing or sees no GPU.
    """
    torch = _import_torch()
    if torch is None:
        return None

    if torch.cuda.is_available():
        index = torch.cuda.current_device()
        props = torch.cuda.get_device_properties(index)
        return DeviceInfo('cuda', index, props.name, props.total_memory)

    mps = getattr(torch.backends, 'mps', None)
    if mps is not None and mps.is_available():
        return DeviceInfo('mps', 0, 'Apple Silicon GPU')

    return None


def get_cpu_info() -> DeviceInfo:
    name = platform.processor() or platform.machine() or "Unknown CPU"
    return DeviceInfo('cpu', None, name)


_PREFERENCES = ('cpu', 'gpu', 'auto')


def select_device(prefer: Literal['cpu', 'gpu', 'auto'] = 'auto') -> DeviceInfo:
    """
    Pick the device for a fit.

    'cpu' always gives the CPU, 'auto' a GPU when one is present, and
    'gpu' requires one.

    Raises:
        ValueError: If prefer is not 'cpu', 'gpu' or 'auto'
        RuntimeError: If 'gpu' is requested and none is available
    """
    if prefer not in _PREFERENCES:
        raise ValueError(
            f"Unknown device preference: {prefer!r}. Use one of {', '.join(_PREFERENCES)}."
        )
    if prefer == 'cpu':
        return get_cpu_info()

    gpu = detect_gpu()
    if gpu is not None:
        return gpu
    if prefer == 'gpu':
        raise RuntimeError(
            "GPU requested but no GPU available. "
            "Install PyTorch with CUDA or MPS support (pip install pynls[gpu])."
        )
    return get_cpu_info()
