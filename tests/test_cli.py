"""
End-to-end tests: configuration, artifacts and the command line.
"""

from pathlib import Path

import pytest

from metamorph.__main__ import main, build_parser
from metamorph.config import RunConfig, DEFAULT_ROUNDS
from metamorph.core.lattice import TransformationType
from metamorph.orchestrator import run_sequence
from metamorph.program.parser import load_program
from metamorph.visualization import dot_source


EXAMPLE = Path(__file__).resolve().parent.parent / "examples" / "permissions.rls"

ARTIFACTS = [
    "input/input_adg.dot", "input/input_program.rls",
    "output/output_adg.dot", "output/output_program.rls",
]


# ── Helpers ──────────────────────────────────────────────────────────────────

def config(tmp_path, **overrides):
    values = dict(source=str(EXAMPLE), seed=7, rounds=6, name="seq",
                  output_dir=str(tmp_path), verbose=False)
    values.update(overrides)
    return RunConfig(**values)


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestRunConfig:
    def test_type_from_string(self, tmp_path):
        assert config(tmp_path, transformation_type="expansive").transformation_type \
            is TransformationType.EXPANSIVE

    def test_rounds_must_be_positive(self, tmp_path):
        with pytest.raises(ValueError, match="rounds"):
            config(tmp_path, rounds=0)

    def test_seed_must_fit_64_bits(self, tmp_path):
        with pytest.raises(ValueError, match="seed"):
            config(tmp_path, seed=2 ** 64)

    def test_name_required(self, tmp_path):
        with pytest.raises(ValueError, match="name"):
            config(tmp_path, name="")

    def test_from_args_defaults(self):
        args = build_parser().parse_args(["prog.rls"])
        cfg = RunConfig.from_args(args)
        assert cfg.rounds == DEFAULT_ROUNDS
        assert cfg.transformation_type is TransformationType.CONTRACTIVE
        assert cfg.verbose


class TestArtifacts:
    def test_all_artifacts_written(self, tmp_path):
        run_sequence(config(tmp_path))
        for artifact in ARTIFACTS:
            assert (tmp_path / "seq" / artifact).is_file()

    def test_same_seed_byte_identical(self, tmp_path):
        run_sequence(config(tmp_path / "a"))
        run_sequence(config(tmp_path / "b"))
        for artifact in ARTIFACTS:
            first = (tmp_path / "a" / "seq" / artifact).read_bytes()
            second = (tmp_path / "b" / "seq" / artifact).read_bytes()
            assert first == second, artifact

    def test_different_seed_differs(self, tmp_path):
        run_sequence(config(tmp_path / "a", seed=1))
        run_sequence(config(tmp_path / "b", seed=2))
        first = (tmp_path / "a" / "seq" / "output" / "output_program.rls").read_text()
        second = (tmp_path / "b" / "seq" / "output" / "output_program.rls").read_text()
        assert first != second

    def test_written_programs_parse_back(self, tmp_path):
        sequence = run_sequence(config(tmp_path))
        output = load_program(tmp_path / "seq" / "output" / "output_program.rls")
        assert output == sequence.program
        assert len(output.exports()) == 1 and output.outputs() == []

    def test_dot_marks_output_and_negation(self, tmp_path):
        sequence = run_sequence(config(tmp_path))
        dot = (tmp_path / "seq" / "output" / "output_adg.dot").read_text()
        assert dot == dot_source(sequence.adg)
        assert dot.startswith("digraph adg {")
        assert "fillcolor=lightblue" in dot
        assert "style=dashed" in dot

    def test_verbose_run_reports(self, tmp_path, capsys):
        run_sequence(config(tmp_path, verbose=True))
        out = capsys.readouterr().out
        assert "Using seed: 7" in out
        assert "Transformation history:" in out


class TestMain:
    def test_success(self, tmp_path):
        assert main([str(EXAMPLE), "--rounds", "3", "--output-dir", str(tmp_path),
                     "--name", "cli", "--quiet"]) == 0
        assert (tmp_path / "cli" / "output" / "output_program.rls").is_file()

    def test_missing_source(self, tmp_path, capsys):
        assert main([str(tmp_path / "absent.rls"), "--quiet"]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_parse_error(self, tmp_path, capsys):
        source = tmp_path / "broken.rls"
        source.write_text("p(a) .\nq(?X) :- \n")
        assert main([str(source), "--quiet", "--output-dir", str(tmp_path)]) == 1
        assert "line" in capsys.readouterr().err

    def test_bad_rounds_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            main([str(EXAMPLE), "--rounds", "0"])

    def test_bad_type_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            main([str(EXAMPLE), "--type", "sideways"])
