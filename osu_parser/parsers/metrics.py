"""Metrics derived from the finalized objects and timing timeline."""

from __future__ import annotations

from typing import Sequence

from osu_parser.parsers.values import safe_ceil, safe_div, safe_floor
from osu_parser.schemas.beatmap import BreakTime, HitObject, Slider, TimingPoint


def compute_duration(
    hit_objects: Sequence[HitObject], break_times: Sequence[BreakTime],
) -> tuple[float, float]:
    """Return (total time, draining time) in whole seconds.

    Every break is subtracted from the draining time, including breaks that
    fall outside the first-to-last object span.
    """
    if not hit_objects:
        return 0, 0

    first = hit_objects[0]
    last = hit_objects[-1]
    total_break_time = sum(b.duration for b in break_times)

    total_time = safe_floor(last.start_time / 1000)
    draining_time = safe_floor(
        (last.start_time - first.start_time - total_break_time) / 1000
    )
    return total_time, draining_time


def slider_tick_combo(
    slider: Slider,
    timing: TimingPoint,
    slider_multiplier: float,
    slider_tick_rate: float,
) -> float:
    """Combo from a slider's ticks and repeats, excluding the slider itself."""
    osupx_per_beat = slider_multiplier * 100 * timing.velocity
    tick_length = safe_div(osupx_per_beat, slider_tick_rate)
    ticks_per_side = safe_ceil(
        safe_floor(safe_div(slider.pixel_length, tick_length) * 100) / 100 - 1
    )
    return (len(slider.edges) - 1) * (ticks_per_side + 1)


def compute_max_combo(
    hit_objects: Sequence[HitObject],
    timing_points: Sequence[TimingPoint],
    slider_multiplier: float,
    slider_tick_rate: float,
) -> float | None:
    """Maximum achievable combo, or None without timing points.

    Objects are walked in start-time order while a cursor follows the
    governing timing point.
    """
    if not timing_points:
        return None

    max_combo = 0
    cursor = 0
    current = timing_points[0]

    for hit_object in hit_objects:
        while (
            cursor + 1 < len(timing_points)
            and timing_points[cursor + 1].offset <= hit_object.start_time
        ):
            cursor += 1
            current = timing_points[cursor]

        if isinstance(hit_object, Slider):
            max_combo += slider_tick_combo(
                hit_object, current, slider_multiplier, slider_tick_rate,
            )
        max_combo += 1

    return max_combo
