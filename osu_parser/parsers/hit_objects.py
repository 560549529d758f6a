"""Parse the ``[HitObjects]`` section.

Common layout: ``x,y,time,type,hitSound,...`` followed by per-type fields:

    circle   ``...,hitSample``
    spinner  ``...,endTime,hitSample``
    slider   ``...,curveType|x:y|...,slides,length,edgeSounds,edgeSets,hitSample``

Slider duration depends on the timing point in effect at the slider's start,
so the timing timeline must already be sorted and tempo-resolved.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from osu_parser.geometry.curves import EndpointResolver, get_end_point
from osu_parser.parsers.timing_points import governing_timing_point
from osu_parser.parsers.values import field_at, parse_int, safe_ceil, safe_div
from osu_parser.schemas.additions import parse_additions
from osu_parser.schemas.beatmap import (
    Circle,
    CurveType,
    Edge,
    HitObject,
    ObjectType,
    Point,
    Slider,
    SoundType,
    Spinner,
    TimingPoint,
    UnknownObject,
)
from osu_parser.schemas.flags import decode_object_type, decode_sound_types

logger = logging.getLogger(__name__)

CURVE_TYPES = {
    "C": CurveType.CATMULL,
    "B": CurveType.BEZIER,
    "L": CurveType.LINEAR,
    "P": CurveType.PASS_THROUGH,
}

# Field positions within a hit object line
X, Y, TIME, TYPE, SOUND = 0, 1, 2, 3, 4
CIRCLE_ADDITIONS = 5
SPINNER_END_TIME, SPINNER_ADDITIONS = 5, 6
(
    SLIDER_POINTS,
    SLIDER_REPEATS,
    SLIDER_LENGTH,
    SLIDER_EDGE_SOUNDS,
    SLIDER_EDGE_ADDITIONS,
    SLIDER_ADDITIONS,
) = range(5, 11)


def _parse_control_points(text: str | None, head: Point) -> tuple[CurveType, list[Point]]:
    tokens = (text or "").split("|")
    curve_type = CURVE_TYPES.get(tokens[0], CurveType.UNKNOWN)
    if curve_type is CurveType.UNKNOWN:
        logger.debug("Unknown curve type %r", tokens[0])

    points = [head]
    for token in tokens[1:]:
        coordinates = token.split(":")
        points.append((
            parse_int(field_at(coordinates, 0)),
            parse_int(field_at(coordinates, 1)),
        ))
    return curve_type, points


def _parse_edges(members: list[str], repeat_count: float) -> list[Edge]:
    """Expand the pipe-separated edge fields into ``repeat_count + 1`` edges."""
    if not isinstance(repeat_count, int):
        return []

    sounds_field = field_at(members, SLIDER_EDGE_SOUNDS)
    additions_field = field_at(members, SLIDER_EDGE_ADDITIONS)
    edge_sounds = sounds_field.split("|") if sounds_field else []
    edge_additions = additions_field.split("|") if additions_field else []

    edges = []
    for i in range(repeat_count + 1):
        sound = field_at(edge_sounds, i)
        edges.append(Edge(
            sound_types=decode_sound_types(sound) if sound else frozenset({SoundType.NORMAL}),
            additions=parse_additions(field_at(edge_additions, i)),
        ))
    return edges


def _is_usable(point: Point | None) -> bool:
    return (
        point is not None
        and len(point) == 2
        and all(math.isfinite(v) for v in point)
    )


def slider_duration(
    pixel_length: float,
    repeat_count: float,
    timing: TimingPoint,
    slider_multiplier: float,
) -> float:
    """Slider duration in ms: ceil(beats * beatLength)."""
    px_per_beat = slider_multiplier * 100 * timing.velocity
    beats = safe_div(pixel_length * repeat_count, px_per_beat)
    return safe_ceil(beats * timing.beat_length)


def _parse_slider(
    members: list[str],
    slider: Slider,
    timing_points: Sequence[TimingPoint],
    slider_multiplier: float,
    endpoint_resolver: EndpointResolver,
) -> None:
    slider.repeat_count = parse_int(field_at(members, SLIDER_REPEATS))
    slider.pixel_length = parse_int(field_at(members, SLIDER_LENGTH))
    slider.additions = parse_additions(field_at(members, SLIDER_ADDITIONS))

    timing = governing_timing_point(timing_points, slider.start_time)
    if timing is not None:
        slider.duration = slider_duration(
            slider.pixel_length, slider.repeat_count, timing, slider_multiplier,
        )
        slider.end_time = slider.start_time + slider.duration

    slider.curve_type, slider.points = _parse_control_points(
        field_at(members, SLIDER_POINTS), slider.position,
    )
    slider.edges = _parse_edges(members, slider.repeat_count)

    end = endpoint_resolver(slider.curve_type, slider.pixel_length, slider.points)
    if _is_usable(end):
        slider.end_position = (math.floor(end[0] + 0.5), math.floor(end[1] + 0.5))
    else:
        slider.end_position = slider.points[-1]


def parse_hit_object(
    line: str,
    timing_points: Sequence[TimingPoint],
    slider_multiplier: float,
    endpoint_resolver: EndpointResolver = get_end_point,
) -> HitObject:
    """Decode one hit object line into its typed record."""
    members = line.split(",")

    object_type, new_combo = decode_object_type(field_at(members, TYPE))
    common = dict(
        start_time=parse_int(field_at(members, TIME)),
        position=(
            parse_int(field_at(members, X)),
            parse_int(field_at(members, Y)),
        ),
        new_combo=new_combo,
        sound_types=decode_sound_types(field_at(members, SOUND)),
    )

    if object_type is ObjectType.CIRCLE:
        return Circle(
            **common,
            additions=parse_additions(field_at(members, CIRCLE_ADDITIONS)),
        )

    if object_type is ObjectType.SPINNER:
        return Spinner(
            **common,
            end_time=parse_int(field_at(members, SPINNER_END_TIME)),
            additions=parse_additions(field_at(members, SPINNER_ADDITIONS)),
        )

    if object_type is ObjectType.SLIDER:
        slider = Slider(**common)
        _parse_slider(members, slider, timing_points, slider_multiplier, endpoint_resolver)
        return slider

    logger.debug("Unknown hit object type in line %r", line)
    return UnknownObject(**common)


def parse_hit_objects(
    lines: list[str],
    timing_points: Sequence[TimingPoint],
    slider_multiplier: float,
    endpoint_resolver: EndpointResolver = get_end_point,
) -> list[HitObject]:
    """Parse every hit object line and sort by start time.

    Args:
        lines: Lines of the ``[HitObjects]`` section.
        timing_points: Final timing timeline (sorted, tempo inherited).
        slider_multiplier: Resolved ``SliderMultiplier`` difficulty value.
        endpoint_resolver: Curve collaborator used for slider end positions.
    """
    hit_objects = [
        parse_hit_object(line, timing_points, slider_multiplier, endpoint_resolver)
        for line in lines
    ]
    hit_objects.sort(key=lambda h: h.start_time)
    logger.debug("Parsed %d hit objects", len(hit_objects))
    return hit_objects
