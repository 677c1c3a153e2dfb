"""
IWorkerRunner Interface

Runs one benchmark phase for one model outside the calling process.
"""

from abc import ABC, abstractmethod

from docscan_bench.application.dtos.worker_io import BenchmarkWorkerInput
from docscan_bench.application.dtos.worker_outcome import WorkerOutcome


class IWorkerRunner(ABC):
    """
    Interface for isolated worker execution.

    Implementations must be fault-tolerant: a crashed, hung or garbled
    worker is reported as an outcome, never raised.
    """

    @abstractmethod
    async def run(self, worker_input: BenchmarkWorkerInput) -> WorkerOutcome:
        pass
