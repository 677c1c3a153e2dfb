"""
Unit tests for the benchmark CLI.

The sweep itself is replaced by a mock use case; only argument handling,
request building and result reporting run for real.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docscan_bench.application.dtos import RunSweepResponse
from docscan_bench.config import Configuration, get_benchmark_setting, load_configuration
from docscan_bench.domain.document_type import DocumentType
from docscan_bench.domain.errors import BenchmarkError
from docscan_bench.domain.value_objects import ModelPair, VisualBenchmarkResult, VisualDocumentResult
from docscan_bench.infrastructure.factories import BenchmarkFactory
from docscan_bench.presentation.cli.benchmark_cli import build_parser, build_request, main, print_leaderboard


def parse(*argv):
    return build_parser().parse_args(["/pos", "/neg", *argv])


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "docscan-config.yaml"
    path.write_text("verbose: false\n")
    return path


@pytest.fixture
def sweep():
    """Patches the factory to return a use case with a canned response."""
    response = RunSweepResponse(
        visual_results=[VisualBenchmarkResult.disqualified("org/vision-72B", "Insufficient memory")],
        recommended_visual_model="org/vision-2B",
        recommended_text_model="org/text-3B",
    )
    use_case = MagicMock()
    use_case.execute = AsyncMock(return_value=response)
    with patch.object(BenchmarkFactory, "create_run_sweep_use_case", return_value=use_case) as create:
        yield create, use_case


class TestParser:

    def test_defaults(self):
        """Defaults: invoices, packaged timeout, keep existing sidecars."""
        args = parse()

        assert args.document_type == "invoice"
        assert args.timeout == get_benchmark_setting("default_timeout_seconds")
        assert args.skip_existing is True
        assert args.cleanup is False
        assert args.visual_models == []

    def test_repeatable_candidates_and_pairs(self):
        """Candidates and pairs accumulate."""
        args = parse(
            "--visual-model", "org/v1", "--visual-model", "org/v2",
            "--text-model", "org/t1",
            "--pair", "org/v1", "org/t1",
        )

        assert args.visual_models == ["org/v1", "org/v2"]
        assert args.text_models == ["org/t1"]
        assert args.pairs == [["org/v1", "org/t1"]]

    def test_regenerate(self):
        """--regenerate turns skip_existing off."""
        assert parse("--regenerate").skip_existing is False

    def test_skip_and_regenerate_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse("--skip-existing", "--regenerate")

    def test_timeout_must_be_a_listed_choice(self):
        """Only the supported per-document timeouts are accepted."""
        with pytest.raises(SystemExit):
            parse("--timeout", "45")

    def test_unknown_type_rejected(self):
        with pytest.raises(SystemExit):
            parse("--type", "receipt")


class TestBuildRequest:

    def test_explicit_candidates(self):
        """Explicit candidates are used as given."""
        request = build_request(parse("--text-model", "org/t1", "--pair", "org/v", "org/t", "--type", "prescription"), Configuration())

        assert request.document_type is DocumentType.PRESCRIPTION
        assert request.visual_models == []
        assert request.text_models == ["org/t1"]
        assert request.pairs == [ModelPair("org/v", "org/t")]

    def test_configured_candidates_when_none_given(self):
        """Without candidates the configured lists are swept."""
        configuration = Configuration.model_validate({"benchmark": {"visual_models": ["org/v9"]}})

        request = build_request(parse("--timeout", "60"), configuration)

        assert request.visual_models == ["org/v9"]
        assert request.text_models == configuration.candidate_text_models()
        assert request.timeout_seconds == 60.0


class TestMain:

    def test_successful_sweep(self, sweep, config_file, capsys):
        """A sweep prints leaderboards and the recommendation."""
        create, use_case = sweep

        assert main(["/pos", "/neg", "--config", str(config_file), "--visual-model", "org/vision-72B"]) == 0

        out = capsys.readouterr().out
        assert "DISQUALIFIED: Insufficient memory" in out
        assert "Visual model: org/vision-2B" in out
        assert create.call_args.args[1] is DocumentType.INVOICE
        request = use_case.execute.call_args.args[0]
        assert request.visual_models == ["org/vision-72B"]

    def test_apply_recommendation_writes_config(self, sweep, config_file):
        """The recommended pair is saved into the given configuration file."""
        assert main(["/pos", "/neg", "--config", str(config_file), "--apply-recommendation", "--verbose"]) == 0

        saved = load_configuration(config_file)
        assert saved.visual_model_name == "org/vision-2B"
        assert saved.text_model_name == "org/text-3B"
        assert saved.verbose is False

    def test_benchmark_error_exits_nonzero(self, sweep, config_file, capsys):
        """Corpus-level errors are reported on stderr with exit status 1."""
        _, use_case = sweep
        use_case.execute.side_effect = BenchmarkError("No PDF files found in /pos")

        assert main(["/pos", "/neg", "--config", str(config_file)]) == 1
        assert "No PDF files found in /pos" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        """An explicit configuration path that does not exist fails cleanly."""
        assert main(["/pos", "/neg", "--config", str(tmp_path / "missing.yaml")]) == 1
        assert "File not found" in capsys.readouterr().err


class TestLeaderboard:

    def test_ranks_skip_disqualified(self, capsys):
        """Ranks count only qualifying results."""
        ranked = VisualBenchmarkResult.from_results(
            "org/vision-2B",
            [VisualDocumentResult(filename="a.pdf", is_positive_sample=True, predicted_is_match=True)],
            2.5,
        )
        print_leaderboard("VISUAL", [ranked, VisualBenchmarkResult.disqualified("org/x", "Worker crashed (signal 9)")])

        out = capsys.readouterr().out
        assert " 1. org/vision-2B  1/1 (100%)  2.5s" in out
        assert "DISQUALIFIED: Worker crashed (signal 9)" in out

    def test_empty(self, capsys):
        print_leaderboard("TEXT", [])

        assert "(none)" in capsys.readouterr().out
