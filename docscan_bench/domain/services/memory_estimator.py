"""
Domain Service: Memory Estimator

Heuristic resident-memory prediction from model identifiers, and the
headroom-aware availability gate applied before any model is loaded.

Unknown model names are assumed free: the gate is permissive by default and
only fails closed on models whose names reveal they are large.
"""

import os
import re
from typing import Callable, Optional

from docscan_bench.domain.errors import InsufficientMemory

PARAM_BILLIONS_PATTERN = re.compile(r"(\d+\.?\d*)\s*[Bb](?:\b|-)")
QUANTIZATION_BITS_PATTERN = re.compile(r"(\d+)\s*-?bit", re.IGNORECASE)

DEFAULT_BYTES_PER_PARAM = 0.5  # 4-bit weights
DEFAULT_OVERHEAD_FACTOR = 1.2  # KV cache and runtime buffers
DEFAULT_HEADROOM_FACTOR = 0.8
BYTES_PER_MB = 1_000_000


def parse_param_billions(model_name: str) -> float:
    """Parameter count in billions ("Qwen2-VL-7B" -> 7.0), 0.0 when absent."""
    match = PARAM_BILLIONS_PATTERN.search(model_name or "")
    if not match:
        return 0.0
    return float(match.group(1))


def parse_bytes_per_param(model_name: str, default: float = DEFAULT_BYTES_PER_PARAM) -> float:
    """Bytes per weight from a quantization token ("8bit" -> 1.0)."""
    match = QUANTIZATION_BITS_PATTERN.search(model_name or "")
    if not match:
        return default
    bits = int(match.group(1))
    if bits <= 0:
        return default
    return bits / 8


def physical_memory_bytes() -> int:
    """Total physical memory reported by the OS, 0 when unavailable."""
    try:
        return os.sysconf("SC_PAGE_SIZE") * os.sysconf("SC_PHYS_PAGES")
    except (ValueError, OSError, AttributeError):
        return 0


class MemoryEstimator:
    """
    Estimates model memory needs and checks them against available RAM.

    The physical memory source and headroom factor are injected so callers
    and tests do not depend on the host machine.
    """

    def __init__(
        self,
        memory_source: Optional[Callable[[], int]] = None,
        headroom_factor: float = DEFAULT_HEADROOM_FACTOR,
        overhead_factor: float = DEFAULT_OVERHEAD_FACTOR,
        default_bytes_per_param: float = DEFAULT_BYTES_PER_PARAM,
    ):
        if not 0.0 < headroom_factor <= 1.0:
            raise ValueError(f"headroom_factor must be in (0.0, 1.0], got {headroom_factor}")
        self._memory_source = memory_source or physical_memory_bytes
        self._headroom_factor = headroom_factor
        self._overhead_factor = overhead_factor
        self._default_bytes_per_param = default_bytes_per_param

    @classmethod
    def from_system(cls, headroom_factor: float = DEFAULT_HEADROOM_FACTOR) -> "MemoryEstimator":
        return cls(memory_source=physical_memory_bytes, headroom_factor=headroom_factor)

    def estimate_model_mb(self, model_name: str) -> int:
        params = parse_param_billions(model_name)
        if params <= 0:
            return 0
        bytes_per_param = parse_bytes_per_param(model_name, self._default_bytes_per_param)
        total_bytes = params * bytes_per_param * self._overhead_factor * 1_000_000_000
        return round(total_bytes / BYTES_PER_MB)

    def estimate_memory_mb(self, visual_model_name: str = "", text_model_name: str = "") -> int:
        """
        Estimate combined memory for a visual + text model pair in MB.

        Either name may be empty when only one model type is benchmarked.

        Returns:
            Estimated MB, 0 when neither name carries a parameter count
        """
        return sum(
            self.estimate_model_mb(name)
            for name in (visual_model_name, text_model_name)
            if name
        )

    def available_memory_mb(self) -> int:
        return int(self._memory_source() * self._headroom_factor / BYTES_PER_MB)

    def insufficient_memory_reason(
        self, visual_model_name: str = "", text_model_name: str = ""
    ) -> Optional[str]:
        """
        Apply the memory gate.

        Returns:
            A reason naming "Insufficient memory" when the models will not fit,
            otherwise None
        """
        estimated_mb = self.estimate_memory_mb(visual_model_name, text_model_name)
        available_mb = self.available_memory_mb()
        if estimated_mb > 0 and available_mb > 0 and estimated_mb > available_mb:
            return str(InsufficientMemory(estimated_mb, available_mb))
        return None
