"""
Model Cache Interface

On-disk cache of downloaded model files, keyed by model name.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Set


class IModelCache(ABC):

    @abstractmethod
    def model_directory(self, model_name: str) -> str:
        pass

    @abstractmethod
    def cleanup(self, model_names: Iterable[str], keep: Set[str]) -> List[str]:
        """
        Delete cached files of every model in model_names not in keep.

        Missing cache directories are ignored.

        Returns:
            Names of the models whose cache was deleted
        """
        pass
