"""Split ``.osu`` text into named sections and validate required ones."""

import logging
import re

logger = logging.getLogger(__name__)

SECTION_RE = re.compile(r"^\[([^\]]+)\]$")
FILE_FORMAT_RE = re.compile(r"^osu file format (v\d+)$")

REQUIRED_SECTIONS = (
    "General",
    "Metadata",
    "Difficulty",
    "Colours",
    "Editor",
    "Events",
    "TimingPoints",
    "HitObjects",
)


class BeatmapValidationError(ValueError):
    """Raised when a required section is absent from the input."""

    def __init__(self, section: str):
        super().__init__(f"Invalid beatmap: missing section '{section}'")
        self.section = section


def split_lines(text: str) -> list[str]:
    """Split raw text into trimmed, non-empty lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def split_sections(lines: list[str]) -> tuple[dict[str, list[str]], str | None]:
    """Group lines under their ``[Section]`` header.

    Returns (section name -> lines, file format tag). A repeated header
    replaces the earlier section's lines.
    """
    sections: dict[str, list[str]] = {}
    file_format = None
    current: str | None = None

    for line in lines:
        match = SECTION_RE.match(line)
        if match:
            current = match.group(1)
            sections[current] = []
            continue

        if current is None:
            version = FILE_FORMAT_RE.match(line)
            if version:
                file_format = version.group(1)
            continue

        sections[current].append(line)

    logger.debug("Split %d lines into %d sections", len(lines), len(sections))
    return sections, file_format


def validate_sections(sections: dict[str, list[str]]) -> None:
    """Raise BeatmapValidationError naming the first missing required section."""
    for name in REQUIRED_SECTIONS:
        if name not in sections:
            raise BeatmapValidationError(name)
