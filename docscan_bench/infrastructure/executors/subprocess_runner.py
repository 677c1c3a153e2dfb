"""
Subprocess Runner

Runs one benchmark phase for one model in an isolated worker process. The
model runtime can abort the whole process (out of memory, unsupported
hardware), so every run happens out of process and its outcome is reported
as a value rather than an exception:

    WorkerCompleted | WorkerCrashed | WorkerDecodingFailed | WorkerTimedOut

Input and output travel as JSON files passed to the worker as
`benchmark-worker --input <path> --output <path>`. Both files are removed
before run() returns, and the worker process is always reaped.
"""

import asyncio
import os
import signal
import sys
import tempfile
from typing import List, Optional, Sequence

from pydantic import ValidationError

from docscan_bench.application.dtos.worker_io import BenchmarkWorkerInput, BenchmarkWorkerOutput
from docscan_bench.application.dtos.worker_outcome import (
    WorkerCompleted,
    WorkerCrashed,
    WorkerDecodingFailed,
    WorkerOutcome,
    WorkerTimedOut,
)
from docscan_bench.application.interfaces import IWorkerRunner
from docscan_bench.logging_utils import ComponentType, StructuredLogger

MODEL_LOADING_BUFFER_SECONDS = 300.0
KILL_ESCALATION_SECONDS = 5.0

DEFAULT_WORKER_COMMAND = [sys.executable, "-m", "docscan_bench.presentation.cli.worker_cli"]


class SubprocessRunner(IWorkerRunner):
    """
    Spawns exactly one worker process per run() call.

    Args:
        worker_command: Command prefix that starts the worker entry point
        model_loading_buffer_seconds: Fixed allowance for loading the model
        kill_escalation_seconds: Grace period between SIGTERM and SIGKILL
    """

    def __init__(
        self,
        worker_command: Optional[Sequence[str]] = None,
        model_loading_buffer_seconds: float = MODEL_LOADING_BUFFER_SECONDS,
        kill_escalation_seconds: float = KILL_ESCALATION_SECONDS,
        logger: Optional[StructuredLogger] = None,
    ):
        self.worker_command: List[str] = list(worker_command or DEFAULT_WORKER_COMMAND)
        self.model_loading_buffer_seconds = model_loading_buffer_seconds
        self.kill_escalation_seconds = kill_escalation_seconds
        self._logger = logger or StructuredLogger(ComponentType.RUNNER)

    def overall_timeout(self, worker_input: BenchmarkWorkerInput) -> float:
        """Per-document timeout times document count, plus the loading buffer."""
        return worker_input.document_count * worker_input.timeout_seconds + self.model_loading_buffer_seconds

    async def run(self, worker_input: BenchmarkWorkerInput) -> WorkerOutcome:
        with tempfile.TemporaryDirectory(prefix="docscan-worker-") as work_dir:
            input_path = os.path.join(work_dir, "input.json")
            # The worker signals success by creating the output file
            output_path = os.path.join(work_dir, "output.json")
            with open(input_path, "w", encoding="utf-8") as f:
                f.write(worker_input.model_dump_json())

            outcome = await self._run_worker(worker_input, input_path, output_path)

        self._logger.log_event(
            "worker_finished",
            model=worker_input.model_name,
            phase=worker_input.phase.value,
            outcome=type(outcome).__name__,
        )
        return outcome

    async def _run_worker(
        self, worker_input: BenchmarkWorkerInput, input_path: str, output_path: str
    ) -> WorkerOutcome:
        command = self.worker_command + ["benchmark-worker", "--input", input_path, "--output", output_path]
        timeout = self.overall_timeout(worker_input)
        self._logger.log_event(
            "worker_started",
            model=worker_input.model_name,
            phase=worker_input.phase.value,
            timeout_seconds=timeout,
        )

        process = await asyncio.create_subprocess_exec(*command)
        try:
            returncode = await asyncio.wait_for(process.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            await self._terminate(process)
            return WorkerTimedOut(timeout_seconds=timeout)
        except asyncio.CancelledError:
            await self._terminate(process)
            raise

        if returncode < 0:
            return WorkerCrashed(exit_code=-1, signal=-returncode)
        if returncode != 0:
            return WorkerCrashed(exit_code=returncode)

        return self._read_output(worker_input, output_path)

    def _read_output(self, worker_input: BenchmarkWorkerInput, output_path: str) -> WorkerOutcome:
        if not os.path.exists(output_path):
            return WorkerDecodingFailed("Worker exited 0 but output file not found")
        try:
            with open(output_path, "r", encoding="utf-8") as f:
                output = BenchmarkWorkerOutput.model_validate_json(f.read())
        except (OSError, ValueError, ValidationError) as e:
            return WorkerDecodingFailed(f"Failed to decode worker output: {e}")

        if output.phase is not worker_input.phase:
            return WorkerDecodingFailed(
                f"Worker answered phase {output.phase.value}, expected {worker_input.phase.value}"
            )
        return WorkerCompleted(output=output)

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """SIGTERM, then SIGKILL after the grace period; always reaps."""
        if process.returncode is not None:
            return
        try:
            process.send_signal(signal.SIGTERM)
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=self.kill_escalation_seconds)
        except asyncio.TimeoutError:
            self._logger.warning("worker_killed", pid=process.pid)
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
