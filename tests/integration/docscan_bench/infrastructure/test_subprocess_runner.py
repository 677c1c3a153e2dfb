"""
Integration tests for SubprocessRunner against real child processes.

Each test writes a tiny worker script that behaves in one specific way and
points the runner at it, so the process handling is exercised for real
without any model runtime.
"""

import os
import signal
import sys
import textwrap

import pytest

from docscan_bench.application.dtos import (
    BenchmarkPhase,
    BenchmarkWorkerInput,
    BenchmarkWorkerOutput,
    WorkerCompleted,
    WorkerCrashed,
    WorkerDecodingFailed,
    WorkerTimedOut,
    outcome_to_output,
)
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.value_objects import VisualBenchmarkResult, VisualDocumentResult
from docscan_bench.infrastructure.executors import SubprocessRunner

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals required")

ARGUMENT_PARSING = """
import os, shutil, signal, sys, time
args = sys.argv[1:]
assert args[0] == "benchmark-worker", args
input_path = args[args.index("--input") + 1]
output_path = args[args.index("--output") + 1]
"""


def write_worker(tmp_path, body):
    script = tmp_path / "fake_worker.py"
    script.write_text(ARGUMENT_PARSING + textwrap.dedent(body), encoding="utf-8")
    return [sys.executable, str(script)]


def make_input(phase=BenchmarkPhase.VISUAL, documents=1, timeout_seconds=1.0):
    return BenchmarkWorkerInput(
        phase=phase,
        model_name="acme/vision-2B",
        positive_pdfs=[f"/docs/invoice_{i}.pdf" for i in range(documents)],
        timeout_seconds=timeout_seconds,
        document_type=DocumentType.INVOICE,
    )


def visual_output_file(tmp_path):
    output = BenchmarkWorkerOutput.visual(
        VisualBenchmarkResult.from_results(
            "acme/vision-2B",
            [VisualDocumentResult(filename="invoice_0.pdf", is_positive_sample=True, predicted_is_match=True)],
            elapsed_seconds=1.5,
        )
    )
    path = tmp_path / "canned_output.json"
    path.write_text(output.model_dump_json(), encoding="utf-8")
    return path


class TestOverallTimeout:

    def test_scales_with_document_count(self):
        """Per-document timeout times documents plus the loading buffer."""
        runner = SubprocessRunner(model_loading_buffer_seconds=300.0)

        assert runner.overall_timeout(make_input(documents=4, timeout_seconds=30)) == 420.0

    def test_empty_corpus_gets_only_the_buffer(self):
        """No documents still allows the model to load."""
        runner = SubprocessRunner(model_loading_buffer_seconds=12.0)

        assert runner.overall_timeout(make_input(documents=0)) == 12.0

    @pytest.mark.parametrize("documents,expected", [(0, 300.0), (1, 310.0), (10, 400.0)])
    def test_default_buffer(self, documents, expected):
        """The default runner allows five minutes for loading on top of the documents."""
        runner = SubprocessRunner()

        assert runner.overall_timeout(make_input(documents=documents, timeout_seconds=10)) == expected


class TestRunOutcomes:

    @pytest.mark.asyncio
    async def test_completed_output_is_decoded(self, tmp_path):
        """A worker that writes a valid output and exits 0 completes."""
        canned = visual_output_file(tmp_path)
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, f"""
            shutil.copyfile({str(canned)!r}, output_path)
        """))

        outcome = await runner.run(make_input())

        assert isinstance(outcome, WorkerCompleted)
        assert outcome.output.visual_result.total_score == 1
        assert outcome.output.visual_result.elapsed_seconds == 1.5

    @pytest.mark.asyncio
    async def test_worker_receives_the_serialized_input(self, tmp_path):
        """The input file holds the request as JSON."""
        seen = tmp_path / "seen_input.json"
        canned = visual_output_file(tmp_path)
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, f"""
            shutil.copyfile(input_path, {str(seen)!r})
            shutil.copyfile({str(canned)!r}, output_path)
        """))
        worker_input = make_input(documents=2)

        await runner.run(worker_input)

        assert BenchmarkWorkerInput.model_validate_json(seen.read_text(encoding="utf-8")) == worker_input

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_a_crash(self, tmp_path):
        """A plain non-zero exit reports its exit code."""
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, """
            sys.exit(3)
        """))

        outcome = await runner.run(make_input())

        assert outcome == WorkerCrashed(exit_code=3)
        assert outcome.reason == "Worker crashed (exit code 3)"

    @pytest.mark.asyncio
    async def test_signal_death_is_a_crash(self, tmp_path):
        """Death by signal reports the signal number."""
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, """
            os.kill(os.getpid(), signal.SIGKILL)
        """))

        outcome = await runner.run(make_input())

        assert outcome == WorkerCrashed(exit_code=-1, signal=signal.SIGKILL)
        assert outcome.reason == f"Worker crashed (signal {int(signal.SIGKILL)})"

    @pytest.mark.asyncio
    async def test_missing_output_fails_decoding(self, tmp_path):
        """Exiting 0 without an output file is a decoding failure."""
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, """
            pass
        """))

        outcome = await runner.run(make_input())

        assert isinstance(outcome, WorkerDecodingFailed)
        assert "output file not found" in outcome.message

    @pytest.mark.asyncio
    async def test_garbage_output_fails_decoding(self, tmp_path):
        """An output file that is not a worker output is a decoding failure."""
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, """
            with open(output_path, "w") as f:
                f.write("{\\"payload\\": 42}")
        """))

        outcome = await runner.run(make_input())

        assert isinstance(outcome, WorkerDecodingFailed)
        assert outcome.message.startswith("Failed to decode worker output")

    @pytest.mark.asyncio
    async def test_wrong_phase_fails_decoding(self, tmp_path):
        """A visual answer to a text request is rejected."""
        canned = visual_output_file(tmp_path)
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, f"""
            shutil.copyfile({str(canned)!r}, output_path)
        """))

        outcome = await runner.run(make_input(phase=BenchmarkPhase.TEXT))

        assert isinstance(outcome, WorkerDecodingFailed)
        assert "expected text" in outcome.message


class TestTimeoutAndCleanup:

    @pytest.mark.asyncio
    async def test_hanging_worker_times_out(self, tmp_path):
        """A worker that outlives its budget is terminated."""
        runner = SubprocessRunner(
            worker_command=write_worker(tmp_path, """
                time.sleep(60)
            """),
            model_loading_buffer_seconds=0.5,
            kill_escalation_seconds=2.0,
        )

        outcome = await runner.run(make_input(documents=0))

        assert outcome == WorkerTimedOut(timeout_seconds=0.5)

    @pytest.mark.asyncio
    async def test_sigterm_ignoring_worker_is_killed(self, tmp_path):
        """A worker ignoring SIGTERM is killed after the grace period."""
        runner = SubprocessRunner(
            worker_command=write_worker(tmp_path, """
                signal.signal(signal.SIGTERM, signal.SIG_IGN)
                time.sleep(60)
            """),
            model_loading_buffer_seconds=1.0,
            kill_escalation_seconds=0.5,
        )

        outcome = await runner.run(make_input(documents=0))

        assert isinstance(outcome, WorkerTimedOut)

    @pytest.mark.asyncio
    async def test_temporary_files_are_removed(self, tmp_path):
        """Input and output files are gone once run() returns."""
        recorded = tmp_path / "paths.txt"
        canned = visual_output_file(tmp_path)
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, f"""
            with open({str(recorded)!r}, "w") as f:
                f.write(input_path + "\\n" + output_path)
            shutil.copyfile({str(canned)!r}, output_path)
        """))

        await runner.run(make_input())

        input_path, output_path = recorded.read_text(encoding="utf-8").splitlines()
        assert not os.path.exists(input_path)
        assert not os.path.exists(output_path)
        assert not os.path.exists(os.path.dirname(input_path))

    @pytest.mark.asyncio
    async def test_failed_run_becomes_disqualification(self, tmp_path):
        """Crashes surface as a disqualified result for the requested phase."""
        runner = SubprocessRunner(worker_command=write_worker(tmp_path, """
            sys.exit(1)
        """))
        worker_input = make_input(phase=BenchmarkPhase.TEXT)

        outcome = await runner.run(worker_input)
        result = outcome_to_output(worker_input, outcome).text_result

        assert result.is_disqualified
        assert result.model_name == "acme/vision-2B"
        assert result.disqualification_reason == "Worker crashed (exit code 1)"
