"""Top-level orchestrator: parse ``.osu`` content into a Beatmap.

Stages run in a fixed order. Each stage takes the previous stages' output
as explicit arguments; in particular hit objects are parsed against the
timing timeline only after it has been sorted and tempo-resolved.
"""

import logging
from pathlib import Path

from osu_parser.config import ParserConfig
from osu_parser.geometry.curves import EndpointResolver, get_end_point
from osu_parser.parsers.events import parse_events
from osu_parser.parsers.hit_objects import parse_hit_objects
from osu_parser.parsers.metrics import compute_duration, compute_max_combo
from osu_parser.parsers.osu_reader import decode_osu_bytes, read_osu_file
from osu_parser.parsers.properties import numeric_property, parse_properties
from osu_parser.parsers.sections import split_lines, split_sections, validate_sections
from osu_parser.parsers.timing_points import parse_timing_points
from osu_parser.schemas.beatmap import Beatmap, ObjectType

logger = logging.getLogger(__name__)


def parse_content(
    data: str | bytes,
    config: ParserConfig | None = None,
    endpoint_resolver: EndpointResolver = get_end_point,
) -> Beatmap:
    """Parse the full text of a .osu file.

    Raises:
        BeatmapValidationError: If a required section is missing.
    """
    config = config or ParserConfig()
    if isinstance(data, bytes):
        data = decode_osu_bytes(data, config.encoding)

    # 1. Sections
    sections, file_format = split_sections(split_lines(data))
    validate_sections(sections)

    # 2. Properties and tags
    properties, tags = parse_properties(sections)
    slider_multiplier = numeric_property(
        properties, "SliderMultiplier", config.default_slider_multiplier,
    )
    slider_tick_rate = numeric_property(
        properties, "SliderTickRate", config.default_slider_tick_rate,
    )

    # 3. Events (breaks come back sorted)
    bg_filename, break_times = parse_events(sections["Events"])

    # 4. Timing points, sorted and tempo-resolved
    timing_points, bpm_min, bpm_max = parse_timing_points(sections["TimingPoints"])

    # 5. Hit objects against the final timeline
    hit_objects = parse_hit_objects(
        sections["HitObjects"], timing_points, slider_multiplier, endpoint_resolver,
    )

    # 6. Derived metrics
    max_combo = compute_max_combo(
        hit_objects, timing_points, slider_multiplier, slider_tick_rate,
    )
    total_time, draining_time = compute_duration(hit_objects, break_times)

    object_types = [h.object_type for h in hit_objects]
    beatmap = Beatmap(
        file_format=file_format,
        properties=properties,
        tags=tags,
        bg_filename=bg_filename,
        break_times=break_times,
        timing_points=timing_points,
        hit_objects=hit_objects,
        slider_multiplier=slider_multiplier,
        slider_tick_rate=slider_tick_rate,
        nb_circles=object_types.count(ObjectType.CIRCLE),
        nb_sliders=object_types.count(ObjectType.SLIDER),
        nb_spinners=object_types.count(ObjectType.SPINNER),
        bpm_min=bpm_min,
        bpm_max=bpm_max,
        total_time=total_time,
        draining_time=draining_time,
        max_combo=max_combo,
    )
    logger.debug(
        "Parsed beatmap %r: %d objects, max combo %s",
        beatmap.version, len(hit_objects), max_combo,
    )
    return beatmap


def parse_file(
    filepath: Path,
    config: ParserConfig | None = None,
    endpoint_resolver: EndpointResolver = get_end_point,
) -> Beatmap:
    """Read and parse a .osu file."""
    config = config or ParserConfig()
    text = read_osu_file(Path(filepath), config.encoding)
    return parse_content(text, config, endpoint_resolver)
