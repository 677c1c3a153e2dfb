"""Data Transfer Objects - Request/Response and worker contracts"""
from .worker_io import (
    BenchmarkPhase,
    BenchmarkWorkerInput,
    BenchmarkWorkerOutput,
    TextPhaseData,
    VisualPhaseOutput,
    TextPhaseOutput,
)
from .worker_outcome import (
    WorkerCompleted,
    WorkerCrashed,
    WorkerDecodingFailed,
    WorkerTimedOut,
    WorkerOutcome,
    outcome_to_output,
)
from .sweep import RunSweepRequest, RunSweepResponse

__all__ = [
    "BenchmarkPhase",
    "BenchmarkWorkerInput",
    "BenchmarkWorkerOutput",
    "TextPhaseData",
    "VisualPhaseOutput",
    "TextPhaseOutput",
    "WorkerCompleted",
    "WorkerCrashed",
    "WorkerDecodingFailed",
    "WorkerTimedOut",
    "WorkerOutcome",
    "outcome_to_output",
    "RunSweepRequest",
    "RunSweepResponse",
]
