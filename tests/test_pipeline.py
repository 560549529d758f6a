"""Tests for batch processing, parser config and the CLI."""

import hashlib
import json
import shutil
from pathlib import Path

from osu_parser.cli import main
from osu_parser.config import ParserConfig
from osu_parser.pipeline.batch import PipelineConfig, run_pipeline
from osu_parser.pipeline.processor import compute_file_hash, process_osu_file

FIXTURES = Path(__file__).parent / "fixtures"
SAMPLE = FIXTURES / "sample.osu"


def _make_input_dir(root: Path) -> Path:
    input_dir = root / "raw"
    (input_dir / "set_1").mkdir(parents=True)
    shutil.copy(SAMPLE, input_dir / "set_1" / "normal.osu")
    (input_dir / "set_1" / "broken.osu").write_text("[General]\nMode: 0\n")
    (input_dir / "set_1" / "notes.txt").write_text("not a beatmap")
    return input_dir


class TestProcessor:
    def test_hash(self):
        assert compute_file_hash(SAMPLE) == hashlib.sha256(SAMPLE.read_bytes()).hexdigest()

    def test_process_file(self):
        content_hash, beatmap = process_osu_file(SAMPLE)
        assert content_hash == compute_file_hash(SAMPLE)
        assert beatmap.title == "Test Song"

    def test_failure_returns_none(self, tmp_path):
        bad = tmp_path / "bad.osu"
        bad.write_text("osu file format v14\n")
        assert process_osu_file(bad) is None


class TestRunPipeline:
    def test_counts_and_errors(self, tmp_path):
        config = PipelineConfig(
            input_dir=_make_input_dir(tmp_path),
            output_dir=tmp_path / "processed",
        )
        result = run_pipeline(config)
        assert result.total_files == 2
        assert result.total_beatmaps == 1
        assert result.total_hit_objects == 5
        assert len(result.errors) == 1
        assert result.errors[0].endswith("broken.osu")
        assert (tmp_path / "processed" / "metadata.json").exists()


class TestParserConfig:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "cfg" / "parser.json"
        ParserConfig(default_slider_multiplier=1.8).save(path)
        assert ParserConfig.load(path).default_slider_multiplier == 1.8

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "parser.json"
        path.write_text(json.dumps({"default_slider_tick_rate": 2.0, "obsolete": 1}))
        config = ParserConfig.load(path)
        assert config.default_slider_tick_rate == 2.0
        assert config.default_slider_multiplier == 1.4


class TestCli:
    def test_parse_prints_json(self, capsys):
        assert main(["parse", str(SAMPLE)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["properties"]["Version"] == "Normal"
        assert data["nb_sliders"] == 2
        assert data["max_combo"] == 10

    def test_parse_invalid_file(self, tmp_path, capsys):
        bad = tmp_path / "bad.osu"
        bad.write_text("[General]\n")
        assert main(["parse", str(bad)]) == 1
        assert "missing section 'Metadata'" in capsys.readouterr().err

    def test_parse_with_config(self, tmp_path, capsys):
        cfg = tmp_path / "parser.json"
        ParserConfig(default_slider_multiplier=2.0).save(cfg)
        assert main(["--config", str(cfg), "parse", str(SAMPLE)]) == 0
        # The sample defines SliderMultiplier itself
        assert json.loads(capsys.readouterr().out)["slider_multiplier"] == 1.0

    def test_process(self, tmp_path, capsys):
        input_dir = _make_input_dir(tmp_path)
        output_dir = tmp_path / "out"
        assert main(["process", "--input", str(input_dir), "--output", str(output_dir)]) == 0
        assert "Processed 1/2 files" in capsys.readouterr().out
        assert list(output_dir.glob("hit_objects_*.parquet"))
