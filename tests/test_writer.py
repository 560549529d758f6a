"""Tests for JSON conversion and the Parquet writer."""

import json
import math
from pathlib import Path

import pyarrow.parquet as pq
import pytest

from osu_parser.parsers.beatmap_parser import parse_file
from osu_parser.schemas.beatmap import Beatmap, Circle, TimingPoint
from osu_parser.storage.writer import (
    beatmap_to_dict,
    read_hit_objects_parquet,
    write_parquet,
)

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample() -> Beatmap:
    return parse_file(FIXTURES / "sample.osu")


def _make_beatmap(n_objects: int = 10, version: str = "Normal") -> Beatmap:
    """Create a minimal beatmap with *n_objects* circles."""
    return Beatmap(
        properties={"Version": version},
        timing_points=[TimingPoint(offset=0, beat_length=500, bpm=120)],
        hit_objects=[
            Circle(start_time=i * 100, position=(i, i)) for i in range(n_objects)
        ],
        nb_circles=n_objects,
        max_combo=n_objects,
    )


class TestBeatmapToDict:
    def test_is_json_serializable(self, sample):
        data = json.loads(json.dumps(beatmap_to_dict(sample)))
        assert data["bg_filename"] == "bg.jpg"
        assert data["max_combo"] == 10

    def test_hit_objects_named(self, sample):
        data = beatmap_to_dict(sample)
        names = [h["object_name"] for h in data["hit_objects"]]
        assert names == ["circle", "slider", "slider", "circle", "spinner"]

    def test_enums_and_sets_converted(self, sample):
        slider = beatmap_to_dict(sample)["hit_objects"][1]
        assert slider["curve_type"] == "bezier"
        assert slider["edges"][0]["sound_types"] == ["whistle"]
        assert slider["points"][0] == [100, 100]

    def test_nan_becomes_none(self):
        beatmap = _make_beatmap(1)
        beatmap.total_time = math.nan
        assert beatmap_to_dict(beatmap)["total_time"] is None


class TestWriteParquet:
    def test_produces_numbered_files(self, tmp_path, sample):
        write_parquet([("a", sample), ("b", _make_beatmap())], tmp_path)

        files = sorted(tmp_path.glob("hit_objects_*.parquet"))
        assert files[0].name == "hit_objects_0000.parquet"
        assert list(tmp_path.glob("timing_points_*.parquet"))

    def test_one_row_group_per_beatmap(self, tmp_path):
        records = [(h, _make_beatmap(5)) for h in ("aaa", "bbb", "ccc")]
        write_parquet(records, tmp_path)

        pf = pq.ParquetFile(tmp_path / "hit_objects_0000.parquet")
        assert pf.metadata.num_row_groups == 3
        for i in range(pf.metadata.num_row_groups):
            hashes = set(pf.read_row_group(i).column("beatmap_hash").to_pylist())
            assert len(hashes) == 1

    def test_slider_columns(self, tmp_path, sample):
        write_parquet([("s", sample)], tmp_path)
        table = read_hit_objects_parquet(tmp_path)
        rows = table.to_pylist()
        assert [r["object_type"] for r in rows] == [
            "circle", "slider", "slider", "circle", "spinner",
        ]
        assert rows[1]["duration"] == 1500
        assert rows[2]["end_x"] == 400
        assert rows[0]["end_time"] is None
        assert rows[4]["end_time"] == 14000

    def test_metadata_json(self, tmp_path, sample):
        write_parquet([("x", sample), ("x", sample)], tmp_path)
        meta = json.loads((tmp_path / "metadata.json").read_text())
        assert len(meta) == 1
        assert meta[0]["hash"] == "x"
        assert meta[0]["title"] == "Test Song"
        assert meta[0]["bpm_max"] == 240

    def test_splits_at_max_size(self, tmp_path):
        records = [(f"song_{i}", _make_beatmap(50)) for i in range(3)]
        write_parquet(records, tmp_path, max_file_bytes=1)

        files = sorted(tmp_path.glob("hit_objects_*.parquet"))
        assert len(files) == 3
        assert read_hit_objects_parquet(tmp_path).num_rows == 150


class TestReadHitObjectsParquet:
    def test_reads_single_file_path(self, tmp_path):
        write_parquet([("direct", _make_beatmap(5))], tmp_path)
        single = sorted(tmp_path.glob("hit_objects_*.parquet"))[0]
        assert read_hit_objects_parquet(single).num_rows == 5

    def test_raises_on_empty_dir(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_hit_objects_parquet(tmp_path)
