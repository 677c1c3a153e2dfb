"""
Sidecar Ground Truth Store

Keeps each document's ground truth in a JSON file next to it, named
<document path>.json. Files are pretty-printed with sorted keys so
regenerating a corpus gives deterministic diffs.
"""

import json
import os
from typing import Optional

from pydantic import ValidationError

from docscan_bench.domain.errors import DecodingFailed, DocumentFileNotFound
from docscan_bench.domain.interfaces import IGroundTruthStore
from docscan_bench.domain.value_objects import GroundTruth
from docscan_bench.logging_utils import ComponentType, StructuredLogger

SIDECAR_SUFFIX = ".json"


class SidecarGroundTruthStore(IGroundTruthStore):
    """
    Filesystem implementation of IGroundTruthStore.

    Writes go through a temporary file and an atomic rename so an
    interrupted run never leaves a truncated sidecar.
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._logger = logger or StructuredLogger(ComponentType.GROUND_TRUTH)

    def sidecar_path(self, document_path: str) -> str:
        return document_path + SIDECAR_SUFFIX

    def exists(self, document_path: str) -> bool:
        return os.path.isfile(self.sidecar_path(document_path))

    def load(self, document_path: str) -> GroundTruth:
        path = self.sidecar_path(document_path)
        if not os.path.isfile(path):
            raise DocumentFileNotFound(path)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return GroundTruth.from_json_dict(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError, TypeError) as e:
            raise DecodingFailed(f"{path}: {e}") from e

    def save(self, ground_truth: GroundTruth, document_path: str) -> str:
        path = self.sidecar_path(document_path)
        tmp_path = path + ".tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(ground_truth.to_json_dict(), f, indent=2, sort_keys=True, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_path, path)

        self._logger.log_event(
            "sidecar_saved",
            file=os.path.basename(path),
            is_match=ground_truth.is_match,
            verified=ground_truth.is_verified,
        )
        return path
