from __future__ import annotations

import platform
from typing import Optional

from ..errors import UnsupportedArchitectureError

# Kernel machine type -> Canonical cloud image arch suffix.
_ARCH_MAP = {
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armhf",
    "armv8l": "armhf",
    "arm": "armhf",
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "i386",
    "i686": "i386",
}


def normalize_arch(machine: str) -> str:
    arch = _ARCH_MAP.get(machine.strip().lower())
    if arch is None:
        raise UnsupportedArchitectureError(f"Unsupported architecture: {machine}")
    return arch


def detect_architecture(machine: Optional[str] = None) -> str:
    return normalize_arch(machine if machine is not None else platform.machine())
