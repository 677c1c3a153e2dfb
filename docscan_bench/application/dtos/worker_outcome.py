"""
Worker Outcomes

How one isolated worker run ended. A run either completed with a decoded
output or failed in one of three ways; failures never cross the process
boundary as exceptions.
"""

from dataclasses import dataclass
from typing import Optional, Union

from docscan_bench.application.dtos.worker_io import BenchmarkWorkerInput, BenchmarkWorkerOutput


@dataclass(frozen=True)
class WorkerCompleted:
    output: BenchmarkWorkerOutput


@dataclass(frozen=True)
class WorkerCrashed:
    """
    Abnormal termination.

    Attributes:
        exit_code: Process exit code, -1 when terminated by a signal
        signal: Terminating signal number, None for a plain non-zero exit
    """
    exit_code: int
    signal: Optional[int] = None

    @property
    def reason(self) -> str:
        if self.signal is not None:
            return f"Worker crashed (signal {self.signal})"
        return f"Worker crashed (exit code {self.exit_code})"


@dataclass(frozen=True)
class WorkerDecodingFailed:
    message: str

    @property
    def reason(self) -> str:
        return f"Worker output could not be decoded: {self.message}"


@dataclass(frozen=True)
class WorkerTimedOut:
    timeout_seconds: float

    @property
    def reason(self) -> str:
        return f"Worker exceeded {int(self.timeout_seconds)}s timeout"


WorkerOutcome = Union[WorkerCompleted, WorkerCrashed, WorkerDecodingFailed, WorkerTimedOut]


def outcome_to_output(worker_input: BenchmarkWorkerInput, outcome: WorkerOutcome) -> BenchmarkWorkerOutput:
    """Result for the requested phase; every failed outcome becomes a disqualification."""
    if isinstance(outcome, WorkerCompleted):
        return outcome.output
    if isinstance(outcome, (WorkerCrashed, WorkerDecodingFailed, WorkerTimedOut)):
        return worker_input.make_disqualified_output(outcome.reason)
    raise TypeError(f"Unknown worker outcome: {outcome!r}")
