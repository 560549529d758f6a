"""Decode the bit-flag enums used by hit objects and slider edges.

Object type flags:
    bit 0 (1)  circle
    bit 1 (2)  slider
    bit 2 (4)  new combo
    bit 3 (8)  spinner

Sound type flags:
    bit 1 (2)  whistle
    bit 2 (4)  finish
    bit 3 (8)  clap
    none set   normal
"""

from osu_parser.parsers.values import parse_flags
from osu_parser.schemas.beatmap import ObjectType, SoundType

CIRCLE_FLAG = 1
SLIDER_FLAG = 2
NEW_COMBO_FLAG = 4
SPINNER_FLAG = 8

_SOUND_FLAGS = (
    (2, SoundType.WHISTLE),
    (4, SoundType.FINISH),
    (8, SoundType.CLAP),
)


def decode_object_type(text: str | None) -> tuple[ObjectType, bool]:
    """Decode an object-type field into (object type, new combo).

    Circle is tested first, then spinner, then slider.
    """
    flags = parse_flags(text)
    new_combo = bool(flags & NEW_COMBO_FLAG)

    if flags & CIRCLE_FLAG:
        return ObjectType.CIRCLE, new_combo
    if flags & SPINNER_FLAG:
        return ObjectType.SPINNER, new_combo
    if flags & SLIDER_FLAG:
        return ObjectType.SLIDER, new_combo
    return ObjectType.UNKNOWN, new_combo


def decode_sound_types(text: str | None) -> frozenset[SoundType]:
    """Decode a sound-type field into a non-empty set of sound types."""
    flags = parse_flags(text)
    sounds = frozenset(sound for bit, sound in _SOUND_FLAGS if flags & bit)
    return sounds or frozenset({SoundType.NORMAL})
