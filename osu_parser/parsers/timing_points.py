"""Parse the ``[TimingPoints]`` section into an offset-ordered timeline.

Line layout:
    offset,beatLength,meter,sampleSet,sampleIndex,volume,uninherited,effects

A positive beatLength is milliseconds per beat and defines tempo. A negative
beatLength encodes a slider velocity multiplier of ``|100 / beatLength|`` and
takes its tempo from the preceding point.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

from osu_parser.parsers.values import field_at, parse_float, parse_int, safe_floor
from osu_parser.schemas.beatmap import TimingPoint

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> float:
    return safe_floor(value + 0.5)


def parse_timing_point(line: str) -> TimingPoint:
    """Decode one timing line. ``bpm`` is set only for a positive beatLength."""
    members = line.split(",")

    point = TimingPoint(
        offset=parse_int(field_at(members, 0)),
        beat_length=parse_float(field_at(members, 1)),
        timing_signature=parse_int(field_at(members, 2)),
        sample_set_id=parse_int(field_at(members, 3)),
        custom_sample_index=parse_int(field_at(members, 4)),
        sample_volume=parse_int(field_at(members, 5)),
        timing_change=parse_int(field_at(members, 6)) == 1,
        kiai_time_active=parse_int(field_at(members, 7)) == 1,
    )

    beat_length = point.beat_length
    if not math.isnan(beat_length) and beat_length != 0:
        if beat_length > 0:
            point.bpm = _round_half_up(60000 / beat_length)
        else:
            point.velocity = abs(100 / beat_length)

    return point


def inherit_tempo(points: list[TimingPoint]) -> list[TimingPoint]:
    """Fill in beatLength and bpm of points that do not define their own tempo.

    Each such point (other than the first) copies its predecessor's resolved
    tempo. Returns a new list; the input records are left untouched.
    """
    resolved: list[TimingPoint] = []
    for point in points:
        if resolved and point.bpm is None:
            previous = resolved[-1]
            point = replace(point, beat_length=previous.beat_length, bpm=previous.bpm)
        resolved.append(point)
    return resolved


def parse_timing_points(
    lines: list[str],
) -> tuple[list[TimingPoint], int | None, int | None]:
    """Parse, sort and resolve all timing lines.

    Returns (timing points sorted by offset, minimum bpm, maximum bpm).
    """
    points = [parse_timing_point(line) for line in lines]

    bpms = [p.bpm for p in points if p.bpm is not None]
    bpm_min = min(bpms) if bpms else None
    bpm_max = max(bpms) if bpms else None

    points.sort(key=lambda p: p.offset)
    points = inherit_tempo(points)

    logger.debug(
        "Parsed %d timing points (bpm %s-%s)", len(points), bpm_min, bpm_max,
    )
    return points, bpm_min, bpm_max


def governing_timing_point(
    points: list[TimingPoint], offset: float,
) -> TimingPoint | None:
    """Latest point with ``point.offset <= offset``, else the first, else None."""
    for point in reversed(points):
        if point.offset <= offset:
            return point
    return points[0] if points else None
