"""Parsed osu! beatmap data model.

Dataclasses for the structured form of a ``.osu`` file. Parsers build these
records in a single pass; once ``parse_content`` returns, the model is
treated as read-only output.

Numeric fields that could not be decoded from the source text hold
``math.nan`` instead of failing the parse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

Point = tuple[float, float]


class SoundType(str, Enum):
    NORMAL = "normal"
    WHISTLE = "whistle"
    FINISH = "finish"
    CLAP = "clap"


class CurveType(str, Enum):
    CATMULL = "catmull"
    BEZIER = "bezier"
    LINEAR = "linear"
    PASS_THROUGH = "pass-through"
    UNKNOWN = "unknown"


class ObjectType(str, Enum):
    CIRCLE = "circle"
    SLIDER = "slider"
    SPINNER = "spinner"
    UNKNOWN = "unknown"


@dataclass
class BreakTime:
    """A break period, in milliseconds."""

    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass
class TimingPoint:
    """A tempo or velocity directive effective from ``offset`` onward."""

    offset: float
    beat_length: float  # >0: ms per beat; <0: velocity factor encoding
    velocity: float = 1.0
    timing_signature: float = 4
    sample_set_id: float = 0
    custom_sample_index: float = 0
    sample_volume: float = 100
    timing_change: bool = True
    kiai_time_active: bool = False
    bpm: int | None = None  # set once tempo is resolved (own or inherited)


@dataclass
class Additions:
    """Per-hit sample customization. Unset fields stay ``None``."""

    sample: str | None = None  # "normal", "soft" or "drum"
    additional_sample: str | None = None
    custom_sample_index: int | None = None
    hitsound_volume: int | None = None
    hitsound: str | None = None  # custom sample filename


@dataclass
class Edge:
    """Sound data for one slider edge (head, each repeat, tail)."""

    sound_types: frozenset[SoundType] = frozenset({SoundType.NORMAL})
    additions: Additions = field(default_factory=Additions)


@dataclass
class HitObject:
    """Fields shared by every hit object variant."""

    object_type: ClassVar[ObjectType] = ObjectType.UNKNOWN

    start_time: float
    position: Point
    new_combo: bool = False
    sound_types: frozenset[SoundType] = frozenset({SoundType.NORMAL})
    additions: Additions = field(default_factory=Additions)

    @property
    def object_name(self) -> str:
        return self.object_type.value


@dataclass
class Circle(HitObject):
    object_type: ClassVar[ObjectType] = ObjectType.CIRCLE


@dataclass
class Spinner(HitObject):
    object_type: ClassVar[ObjectType] = ObjectType.SPINNER

    end_time: float = 0


@dataclass
class Slider(HitObject):
    object_type: ClassVar[ObjectType] = ObjectType.SLIDER

    repeat_count: float = 1
    pixel_length: float = 0
    curve_type: CurveType = CurveType.UNKNOWN
    points: list[Point] = field(default_factory=list)  # first point is the head
    edges: list[Edge] = field(default_factory=list)  # repeat_count + 1 entries
    duration: float | None = None  # None when no timing point governs the slider
    end_time: float | None = None
    end_position: Point | None = None


@dataclass
class UnknownObject(HitObject):
    object_type: ClassVar[ObjectType] = ObjectType.UNKNOWN


@dataclass
class Beatmap:
    """Complete parsed result for one ``.osu`` file."""

    file_format: str | None = None  # e.g. "v14"
    properties: dict[str, str] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    bg_filename: str | None = None
    break_times: list[BreakTime] = field(default_factory=list)  # sorted by start_time
    timing_points: list[TimingPoint] = field(default_factory=list)  # sorted by offset
    hit_objects: list[HitObject] = field(default_factory=list)  # sorted by start_time
    slider_multiplier: float = 1.4
    slider_tick_rate: float = 1.0
    nb_circles: int = 0
    nb_sliders: int = 0
    nb_spinners: int = 0
    bpm_min: int | None = None
    bpm_max: int | None = None
    total_time: float = 0  # seconds
    draining_time: float = 0  # seconds
    max_combo: float | None = None  # None when there are no timing points

    @property
    def title(self) -> str | None:
        return self.properties.get("Title")

    @property
    def artist(self) -> str | None:
        return self.properties.get("Artist")

    @property
    def creator(self) -> str | None:
        return self.properties.get("Creator")

    @property
    def version(self) -> str | None:
        return self.properties.get("Version")
