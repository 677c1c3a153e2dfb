"""Persistence adapters."""

from .ground_truth_store import SidecarGroundTruthStore, SIDECAR_SUFFIX

__all__ = ['SidecarGroundTruthStore', 'SIDECAR_SUFFIX']
