"""On-disk model cache."""

from .model_cache import ModelCache, directory_size, is_concrete_model, resolve_cache_root

__all__ = ["ModelCache", "directory_size", "is_concrete_model", "resolve_cache_root"]
