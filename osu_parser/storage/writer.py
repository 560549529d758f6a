"""Write parsed beatmaps to Parquet files and JSON metadata."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from osu_parser.schemas.beatmap import Beatmap, HitObject, Slider, Spinner

logger = logging.getLogger(__name__)

# Maximum Parquet file size in bytes before starting a new file.
MAX_FILE_BYTES: int = 1_000_000_000  # 1 GB

# --- Arrow schemas -----------------------------------------------------------

HIT_OBJECTS_SCHEMA = pa.schema(
    [
        pa.field("beatmap_hash", pa.string()),
        pa.field("version", pa.string()),
        pa.field("object_type", pa.string()),
        pa.field("start_time", pa.float64()),
        pa.field("x", pa.float32()),
        pa.field("y", pa.float32()),
        pa.field("new_combo", pa.bool_()),
        pa.field("sound_types", pa.list_(pa.string())),
        pa.field("end_time", pa.float64()),  # null for circles
        pa.field("duration", pa.float64()),  # sliders only
        pa.field("repeat_count", pa.float32()),
        pa.field("pixel_length", pa.float32()),
        pa.field("curve_type", pa.string()),
        pa.field("end_x", pa.float32()),
        pa.field("end_y", pa.float32()),
    ]
)

TIMING_POINTS_SCHEMA = pa.schema(
    [
        pa.field("beatmap_hash", pa.string()),
        pa.field("version", pa.string()),
        pa.field("offset", pa.float64()),
        pa.field("beat_length", pa.float64()),
        pa.field("velocity", pa.float64()),
        pa.field("bpm", pa.float32()),
        pa.field("timing_signature", pa.float32()),
        pa.field("sample_volume", pa.float32()),
        pa.field("timing_change", pa.bool_()),
        pa.field("kiai_time_active", pa.bool_()),
    ]
)


# --- JSON conversion ---------------------------------------------------------


def _jsonable(value: Any) -> Any:
    """Recursively convert model values to JSON primitives. nan becomes None."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(_jsonable(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def hit_object_to_dict(hit_object: HitObject) -> dict[str, Any]:
    return {"object_name": hit_object.object_name, **_jsonable(asdict(hit_object))}


def beatmap_to_dict(beatmap: Beatmap) -> dict[str, Any]:
    """Convert a Beatmap into a JSON-serializable dict."""
    data = _jsonable(asdict(beatmap))
    data["hit_objects"] = [hit_object_to_dict(h) for h in beatmap.hit_objects]
    return data


def _metadata_entry(beatmap_hash: str, beatmap: Beatmap) -> dict[str, Any]:
    return _jsonable({
        "hash": beatmap_hash,
        "file_format": beatmap.file_format,
        "title": beatmap.title,
        "artist": beatmap.artist,
        "creator": beatmap.creator,
        "version": beatmap.version,
        "bg_filename": beatmap.bg_filename,
        "tags": beatmap.tags,
        "bpm_min": beatmap.bpm_min,
        "bpm_max": beatmap.bpm_max,
        "nb_circles": beatmap.nb_circles,
        "nb_sliders": beatmap.nb_sliders,
        "nb_spinners": beatmap.nb_spinners,
        "total_time": beatmap.total_time,
        "draining_time": beatmap.draining_time,
        "max_combo": beatmap.max_combo,
    })


# --- Public API --------------------------------------------------------------


def _write_tables_chunked(
    tables_by_hash: dict[str, pa.Table],
    output_dir: Path,
    prefix: str,
    schema: pa.Schema,
    max_file_bytes: int = MAX_FILE_BYTES,
) -> list[Path]:
    """Write Arrow tables as one-row-group-per-beatmap files, splitting at *max_file_bytes*.

    Returns the list of written file paths.
    """
    written: list[Path] = []
    file_idx = 0
    writer: pq.ParquetWriter | None = None
    current_path: Path | None = None

    def _open_writer() -> tuple[pq.ParquetWriter, Path]:
        nonlocal file_idx
        p = output_dir / f"{prefix}_{file_idx:04d}.parquet"
        w = pq.ParquetWriter(p, schema, compression="snappy")
        file_idx += 1
        return w, p

    for _hash, table in sorted(tables_by_hash.items()):
        if table.num_rows == 0:
            continue

        if writer is None:
            writer, current_path = _open_writer()

        writer.write_table(table)

        assert current_path is not None
        current_size = current_path.stat().st_size
        if current_size >= max_file_bytes:
            writer.close()
            written.append(current_path)
            logger.debug("Closed %s (%d bytes)", current_path.name, current_size)
            writer, current_path = None, None

    if writer is not None:
        writer.close()
        assert current_path is not None
        written.append(current_path)

    return written


def _hit_object_columns(beatmap_hash: str, beatmap: Beatmap) -> dict[str, list]:
    cols: dict[str, list] = {k: [] for k in HIT_OBJECTS_SCHEMA.names}
    for h in beatmap.hit_objects:
        is_slider = isinstance(h, Slider)
        end_position = h.end_position if is_slider and h.end_position else (None, None)
        end_time = h.end_time if isinstance(h, (Slider, Spinner)) else None

        cols["beatmap_hash"].append(beatmap_hash)
        cols["version"].append(beatmap.version)
        cols["object_type"].append(h.object_name)
        cols["start_time"].append(h.start_time)
        cols["x"].append(h.position[0])
        cols["y"].append(h.position[1])
        cols["new_combo"].append(h.new_combo)
        cols["sound_types"].append(sorted(s.value for s in h.sound_types))
        cols["end_time"].append(end_time)
        cols["duration"].append(h.duration if is_slider else None)
        cols["repeat_count"].append(h.repeat_count if is_slider else None)
        cols["pixel_length"].append(h.pixel_length if is_slider else None)
        cols["curve_type"].append(h.curve_type.value if is_slider else None)
        cols["end_x"].append(end_position[0])
        cols["end_y"].append(end_position[1])
    return cols


def _timing_point_columns(beatmap_hash: str, beatmap: Beatmap) -> dict[str, list]:
    cols: dict[str, list] = {k: [] for k in TIMING_POINTS_SCHEMA.names}
    for tp in beatmap.timing_points:
        cols["beatmap_hash"].append(beatmap_hash)
        cols["version"].append(beatmap.version)
        cols["offset"].append(tp.offset)
        cols["beat_length"].append(tp.beat_length)
        cols["velocity"].append(tp.velocity)
        cols["bpm"].append(tp.bpm)
        cols["timing_signature"].append(tp.timing_signature)
        cols["sample_volume"].append(tp.sample_volume)
        cols["timing_change"].append(tp.timing_change)
        cols["kiai_time_active"].append(tp.kiai_time_active)
    return cols


def write_parquet(
    records: list[tuple[str, Beatmap]],
    output_dir: Path,
    max_file_bytes: int = MAX_FILE_BYTES,
) -> None:
    """Write parsed beatmaps to Parquet files and JSON metadata.

    Each beatmap hash gets its own row group. When a Parquet file exceeds
    *max_file_bytes* (default 1 GB), a new numbered file is started.

    Produces inside *output_dir*:
      - hit_objects_NNNN.parquet  (one or more)
      - timing_points_NNNN.parquet  (one or more)
      - metadata.json

    Parameters
    ----------
    records:
        ``(content hash, Beatmap)`` pairs.
    output_dir:
        Directory to write output files into. Created if it doesn't exist.
    max_file_bytes:
        Maximum size in bytes per Parquet file before splitting.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    hit_object_tables: dict[str, pa.Table] = {}
    timing_point_tables: dict[str, pa.Table] = {}
    metadata: dict[str, dict] = {}

    for beatmap_hash, beatmap in records:
        if beatmap_hash in metadata:
            logger.debug("Skipping duplicate beatmap %s", beatmap_hash)
            continue
        hit_object_tables[beatmap_hash] = pa.table(
            _hit_object_columns(beatmap_hash, beatmap), schema=HIT_OBJECTS_SCHEMA,
        )
        timing_point_tables[beatmap_hash] = pa.table(
            _timing_point_columns(beatmap_hash, beatmap), schema=TIMING_POINTS_SCHEMA,
        )
        metadata[beatmap_hash] = _metadata_entry(beatmap_hash, beatmap)

    hit_object_files = _write_tables_chunked(
        hit_object_tables, output_dir, "hit_objects", HIT_OBJECTS_SCHEMA, max_file_bytes,
    )
    timing_point_files = _write_tables_chunked(
        timing_point_tables, output_dir, "timing_points", TIMING_POINTS_SCHEMA, max_file_bytes,
    )

    logger.info(
        "Wrote %d hit object files, %d timing point files to %s",
        len(hit_object_files), len(timing_point_files), output_dir,
    )

    with open(output_dir / "metadata.json", "w", encoding="utf-8") as f:
        json.dump(list(metadata.values()), f, indent=2)


def read_hit_objects_parquet(path: Path) -> pa.Table:
    """Read hit object Parquet file(s) and return a single Arrow table.

    Accepts either a single ``.parquet`` file or a directory containing
    ``hit_objects_*.parquet`` files.
    """
    path = Path(path)
    if path.is_dir():
        files = sorted(path.glob("hit_objects_*.parquet"))
        if not files:
            raise FileNotFoundError(f"No hit object Parquet files in {path}")
        return pa.concat_tables([pq.read_table(f) for f in files])
    return pq.read_table(path)
