#!/usr/bin/env python3
"""
Benchmark CLI

Benchmarks candidate visual and text models against a labeled corpus and
recommends the best pair.

The corpus is two directories: documents of the benchmarked type and
documents of any other type. Missing ground truth sidecars are generated
with the configured models first.

Usage:
    # Benchmark the default candidates on invoices
    docscan-benchmark ~/corpus/invoices ~/corpus/other

    # Specific candidates, 60s per document, save the winners
    docscan-benchmark ~/corpus/rx ~/corpus/other --type prescription \\
        --visual-model Qwen/Qwen2-VL-2B-Instruct \\
        --text-model Qwen/Qwen2.5-3B-Instruct \\
        --timeout 60 --apply-recommendation

    # Benchmark one full pair in-process and delete the losers' caches
    docscan-benchmark pos neg --pair Qwen/Qwen2-VL-7B-Instruct Qwen/Qwen2.5-7B-Instruct --cleanup
"""

import argparse
import asyncio
import sys
import traceback
from typing import List, Optional, Sequence

from docscan_bench.application.dtos import RunSweepRequest, RunSweepResponse
from docscan_bench.config import (
    DEFAULT_USER_CONFIG_PATH,
    get_benchmark_setting,
    load_configuration,
    save_configuration,
)
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.errors import DocScanError
from docscan_bench.domain.value_objects import ModelPair


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docscan-benchmark",
        description="Benchmark visual and text models for document categorization and extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument("positive_dir", help="Directory of documents of the benchmarked type")
    parser.add_argument("negative_dir", help="Directory of documents of other types")

    parser.add_argument(
        "--type",
        dest="document_type",
        choices=[t.value for t in DocumentType],
        default=DocumentType.INVOICE.value,
        help="Document type to benchmark (default: invoice)"
    )

    parser.add_argument(
        "--config",
        help=f"Configuration file (default: {DEFAULT_USER_CONFIG_PATH} if present)"
    )

    timeout_choices = get_benchmark_setting("timeout_choices")
    default_timeout = get_benchmark_setting("default_timeout_seconds")
    parser.add_argument(
        "--timeout",
        type=int,
        choices=timeout_choices,
        default=default_timeout,
        help=f"Per-document timeout in seconds (default: {default_timeout})"
    )

    # Candidates
    parser.add_argument(
        "--visual-model",
        dest="visual_models",
        action="append",
        default=[],
        metavar="MODEL",
        help="Visual model candidate, repeatable"
    )
    parser.add_argument(
        "--text-model",
        dest="text_models",
        action="append",
        default=[],
        metavar="MODEL",
        help="Text model candidate, repeatable"
    )
    parser.add_argument(
        "--pair",
        dest="pairs",
        nargs=2,
        action="append",
        default=[],
        metavar=("VISUAL", "TEXT"),
        help="Benchmark a visual + text pair in-process, repeatable"
    )

    # Ground truth
    skip = parser.add_mutually_exclusive_group()
    skip.add_argument(
        "--skip-existing",
        dest="skip_existing",
        action="store_true",
        default=True,
        help="Keep existing ground truth sidecars (default)"
    )
    skip.add_argument(
        "--regenerate",
        dest="skip_existing",
        action="store_false",
        help="Regenerate unverified ground truth sidecars"
    )

    parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Delete cached files of every candidate except the recommended models"
    )
    parser.add_argument(
        "--apply-recommendation",
        action="store_true",
        help="Write the recommended models into the configuration file"
    )
    parser.add_argument("--verbose", action="store_true", help="Print per-document progress")

    return parser


def build_request(args: argparse.Namespace, configuration) -> RunSweepRequest:
    """Without any explicit candidate, sweep the configured candidate lists."""
    visual_models: List[str] = list(args.visual_models)
    text_models: List[str] = list(args.text_models)
    pairs = [ModelPair(visual, text) for visual, text in args.pairs]
    if not (visual_models or text_models or pairs):
        visual_models = configuration.candidate_visual_models()
        text_models = configuration.candidate_text_models()

    return RunSweepRequest(
        positive_dir=args.positive_dir,
        negative_dir=args.negative_dir,
        document_type=DocumentType.parse(args.document_type),
        timeout_seconds=float(args.timeout),
        visual_models=visual_models,
        text_models=text_models,
        pairs=pairs,
        skip_existing=args.skip_existing,
        cleanup=args.cleanup,
    )


def format_elapsed(seconds: float) -> str:
    return f"{seconds:.1f}s"


def print_leaderboard(title: str, results) -> None:
    print()
    print(title)
    print("-" * 60)
    if not results:
        print("  (none)")
        return
    rank = 0
    for result in results:
        if result.is_disqualified:
            print(f"   -  {result.model_name}  DISQUALIFIED: {result.disqualification_reason}")
            continue
        rank += 1
        print(
            f"  {rank:2d}. {result.model_name}  "
            f"{result.total_score}/{result.max_score} ({result.score:.0%})  "
            f"{format_elapsed(result.elapsed_seconds)}"
        )


def print_response(response: RunSweepResponse) -> None:
    print_leaderboard("VISUAL MODELS (categorization)", response.visual_results)
    print_leaderboard("TEXT MODELS (categorization + extraction)", response.text_results)
    if response.pair_results:
        print_leaderboard("MODEL PAIRS", response.pair_results)

    print()
    print("=" * 60)
    print("RECOMMENDATION")
    print("=" * 60)
    print(f"Visual model: {response.recommended_visual_model or '(no qualifying model)'}")
    print(f"Text model:   {response.recommended_text_model or '(no qualifying model)'}")
    if response.deleted_models:
        print()
        print("Deleted model caches:")
        for name in response.deleted_models:
            print(f"  {name}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    try:
        configuration = load_configuration(args.config)
        if args.verbose:
            configuration = configuration.model_copy(update={"verbose": True})
        request = build_request(args, configuration)

        print("=" * 60)
        print("DocScan Model Benchmark")
        print("=" * 60)
        print(f"Document type: {request.document_type.display_name}")
        print(f"Positive documents: {request.positive_dir}")
        print(f"Negative documents: {request.negative_dir}")
        print(f"Timeout per document: {int(request.timeout_seconds)}s")
        print(f"Visual candidates: {len(request.visual_models)}")
        print(f"Text candidates: {len(request.text_models)}")
        if request.pairs:
            print(f"Pairs: {len(request.pairs)}")
        print("=" * 60)

        # Imports torch and transformers
        from docscan_bench.infrastructure.factories import BenchmarkFactory

        use_case = BenchmarkFactory.create_run_sweep_use_case(configuration, request.document_type)
        response = asyncio.run(use_case.execute(request))
        print_response(response)

        if args.apply_recommendation and response.recommended_pair is not None:
            pair = response.recommended_pair
            path = save_configuration(
                configuration.with_models(pair.visual_model_name, pair.text_model_name).model_copy(
                    update={"verbose": False}
                ),
                args.config or DEFAULT_USER_CONFIG_PATH,
            )
            print()
            print(f"Saved recommendation to {path}")
        return 0

    except DocScanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
