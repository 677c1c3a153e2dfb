"""
Hugging Face model cache.

Downloaded models live under <cache root>/models--<org>--<repo>. The cache
root is resolved from the environment only in from_environment(); the
cache itself works on the explicit root it is given.
"""

import os
import shutil
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Set, Union

from docscan_bench.domain.interfaces import IModelCache
from docscan_bench.logging_utils import ComponentType, StructuredLogger


def is_concrete_model(model_name: str) -> bool:
    """True for "org/repo" identifiers: exactly one slash, both sides non-empty."""
    parts = model_name.split("/")
    return len(parts) == 2 and all(parts)


def resolve_cache_root(environ: Optional[Mapping[str, str]] = None) -> Path:
    """HUGGINGFACE_HUB_CACHE, then HF_HOME/hub, then ~/.cache/huggingface/hub."""
    environ = os.environ if environ is None else environ
    if environ.get("HUGGINGFACE_HUB_CACHE"):
        return Path(environ["HUGGINGFACE_HUB_CACHE"]).expanduser()
    if environ.get("HF_HOME"):
        return Path(environ["HF_HOME"]).expanduser() / "hub"
    return Path.home() / ".cache" / "huggingface" / "hub"


def directory_size(path: Union[str, Path]) -> int:
    """Total size in bytes of all files below path, 0 if it does not exist."""
    root = Path(path)
    if not root.exists():
        return 0
    if root.is_file():
        return root.stat().st_size
    total = 0
    for dirpath, _, filenames in os.walk(root):
        for filename in filenames:
            file_path = os.path.join(dirpath, filename)
            if not os.path.islink(file_path):
                total += os.path.getsize(file_path)
    return total


class ModelCache(IModelCache):

    def __init__(self, cache_root: Union[str, Path], logger: Optional[StructuredLogger] = None):
        self.cache_root = Path(cache_root)
        self._logger = logger or StructuredLogger(ComponentType.CLEANUP)

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "ModelCache":
        return cls(resolve_cache_root(environ))

    def model_directory(self, model_name: str) -> str:
        return str(self.cache_root / ("models--" + model_name.replace("/", "--")))

    def cleanup(self, model_names: Iterable[str], keep: Set[str]) -> List[str]:
        deleted = []
        for model_name in model_names:
            if model_name in keep or not is_concrete_model(model_name):
                continue
            directory = self.model_directory(model_name)
            if not os.path.isdir(directory):
                continue
            size = directory_size(directory)
            try:
                shutil.rmtree(directory)
            except OSError as e:
                self._logger.warning("cache_delete_failed", model=model_name, error=str(e))
                continue
            self._logger.log_event("cache_deleted", model=model_name, freed_bytes=size)
            deleted.append(model_name)
        return deleted
