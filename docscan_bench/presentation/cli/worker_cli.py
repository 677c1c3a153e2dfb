#!/usr/bin/env python3
"""
Benchmark Worker CLI

Runs one benchmark phase for one model and exits. Started by the sweep's
subprocess runner, never by hand:

    docscan-worker benchmark-worker --input request.json --output result.json

Exit status 0 means the output file holds a result, possibly a
disqualification. Any other status, or death by signal, is a crash.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from docscan_bench.application.dtos import BenchmarkPhase, BenchmarkWorkerInput, BenchmarkWorkerOutput
from docscan_bench.application.use_cases import BenchmarkEngine, TextBenchmarkContext, describe_error
from docscan_bench.logging_utils import ComponentType, StructuredLogger

logger = StructuredLogger(ComponentType.WORKER)


async def execute_worker(worker_input: BenchmarkWorkerInput) -> BenchmarkWorkerOutput:
    """Benchmark the requested model with the transformers runtime."""
    # Loads torch and transformers
    from docscan_bench.infrastructure.factories import BenchmarkFactory
    from docscan_bench.infrastructure.models import TransformersTextModelFactory, TransformersVisualModelFactory

    engine = BenchmarkFactory.create_engine(
        worker_input.configuration, worker_input.document_type, verbose=worker_input.verbose
    )
    return await run_phase(
        engine,
        worker_input,
        visual_factory=TransformersVisualModelFactory(),
        text_factory=TransformersTextModelFactory(),
    )


async def run_phase(engine: BenchmarkEngine, worker_input: BenchmarkWorkerInput, visual_factory, text_factory):
    if worker_input.phase is BenchmarkPhase.VISUAL:
        result = await engine.benchmark_visual(
            worker_input.model_name,
            worker_input.positive_pdfs,
            worker_input.negative_pdfs,
            worker_input.timeout_seconds,
            visual_factory,
        )
        return BenchmarkWorkerOutput.visual(result)

    text_data = worker_input.text_data
    context = TextBenchmarkContext(
        text_factory=text_factory,
        timeout_seconds=worker_input.timeout_seconds,
        ocr_texts=dict(text_data.ocr_texts) if text_data else {},
        ground_truths=dict(text_data.ground_truths) if text_data else {},
    )
    result = await engine.benchmark_text(
        worker_input.model_name,
        worker_input.positive_pdfs,
        worker_input.negative_pdfs,
        context,
    )
    return BenchmarkWorkerOutput.text(result)


def run_worker(input_path: str, output_path: str) -> int:
    """
    Read the request, benchmark, write the answer.

    A request that cannot be read is a crash (exit 1). Once it has been
    read, every failure is answered with a disqualified result.
    """
    try:
        worker_input = BenchmarkWorkerInput.model_validate_json(Path(input_path).read_text(encoding="utf-8"))
    except Exception as e:
        print(f"Error: cannot read worker input {input_path}: {e}", file=sys.stderr)
        return 1

    logger.log_event("worker_started", model=worker_input.model_name, phase=worker_input.phase.value)
    try:
        output = asyncio.run(execute_worker(worker_input))
    except Exception as e:
        logger.warning("worker_failed", model=worker_input.model_name, error=describe_error(e))
        output = worker_input.make_disqualified_output(f"Worker error: {describe_error(e)}")

    Path(output_path).write_text(output.model_dump_json(), encoding="utf-8")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(description="DocScan benchmark worker")
    subparsers = parser.add_subparsers(dest="command", required=True)

    worker = subparsers.add_parser("benchmark-worker", help="Run one benchmark phase for one model")
    worker.add_argument("--input", required=True, help="Path of the JSON worker input")
    worker.add_argument("--output", required=True, help="Path to write the JSON worker output to")

    args = parser.parse_args(argv)
    return run_worker(args.input, args.output)


if __name__ == "__main__":
    sys.exit(main())
