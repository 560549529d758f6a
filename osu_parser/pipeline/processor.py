"""Process individual .osu files into parsed beatmaps."""

import hashlib
import logging
from pathlib import Path

from osu_parser.config import ParserConfig
from osu_parser.parsers.beatmap_parser import parse_file
from osu_parser.schemas.beatmap import Beatmap

logger = logging.getLogger(__name__)


def compute_file_hash(path: Path) -> str:
    """Compute a SHA-256 hash of a file's bytes."""
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()


def process_osu_file(
    path: Path, config: ParserConfig | None = None,
) -> tuple[str, Beatmap] | None:
    """Parse one .osu file, returning (hash, beatmap) or None on failure."""
    try:
        content_hash = compute_file_hash(path)
        beatmap = parse_file(path, config)
        return content_hash, beatmap
    except Exception:
        logger.exception("Failed to process %s", path)
        return None
