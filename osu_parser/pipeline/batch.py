"""Parse a directory tree of .osu files and write the results."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from osu_parser.config import ParserConfig
from osu_parser.pipeline.processor import process_osu_file
from osu_parser.schemas.beatmap import Beatmap
from osu_parser.storage.writer import write_parquet

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    input_dir: Path = Path("data/raw")
    output_dir: Path = Path("data/processed")
    pattern: str = "*.osu"
    parser: ParserConfig = field(default_factory=ParserConfig)


@dataclass
class PipelineResult:
    total_files: int = 0
    total_beatmaps: int = 0
    total_hit_objects: int = 0
    errors: list[str] = field(default_factory=list)


def run_pipeline(config: PipelineConfig) -> PipelineResult:
    """Parse every matching file under the input dir and write Parquet output."""
    result = PipelineResult()
    records: list[tuple[str, Beatmap]] = []

    logger.info("Scanning %s for %s...", config.input_dir, config.pattern)
    for path in sorted(config.input_dir.rglob(config.pattern)):
        if not path.is_file():
            continue
        result.total_files += 1
        record = process_osu_file(path, config.parser)
        if record is None:
            result.errors.append(str(path))
            continue
        records.append(record)
        result.total_hit_objects += len(record[1].hit_objects)

    result.total_beatmaps = len(records)

    logger.info("Writing %d beatmaps to %s...", len(records), config.output_dir)
    write_parquet(records, config.output_dir)

    logger.info(
        "Pipeline complete: %d files, %d beatmaps, %d hit objects, %d errors",
        result.total_files,
        result.total_beatmaps,
        result.total_hit_objects,
        len(result.errors),
    )
    return result
