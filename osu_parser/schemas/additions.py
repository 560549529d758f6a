"""Decode the colon-separated hit sample ("additions") field.

Layout: ``sample:additionalSample:customSampleIndex:volume:filename``.
A ``0`` or empty entry leaves the corresponding attribute unset.
"""

from osu_parser.parsers.values import parse_int
from osu_parser.schemas.beatmap import Additions

SAMPLE_SETS = {
    1: "normal",
    2: "soft",
    3: "drum",
}


def _sample_name(text: str) -> str | None:
    return SAMPLE_SETS.get(parse_int(text))


def parse_additions(text: str | None) -> Additions:
    """Parse an additions field. Empty or missing input gives empty Additions."""
    additions = Additions()
    if not text:
        return additions

    parts = text.split(":")
    parts += [""] * (5 - len(parts))

    if parts[0] and parts[0] != "0":
        additions.sample = _sample_name(parts[0])
    if parts[1] and parts[1] != "0":
        additions.additional_sample = _sample_name(parts[1])
    if parts[2] and parts[2] != "0":
        additions.custom_sample_index = parse_int(parts[2])
    if parts[3] and parts[3] != "0":
        additions.hitsound_volume = parse_int(parts[3])
    if parts[4]:
        additions.hitsound = parts[4]

    return additions
