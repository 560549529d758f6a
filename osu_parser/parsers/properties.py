"""Parse ``key: value`` lines of the simple property sections."""

import re

from osu_parser.parsers.values import parse_float

PROPERTY_SECTIONS = ("General", "Metadata", "Difficulty", "Colours", "Editor")

KEY_VALUE_RE = re.compile(r"^([^:\s]+)\s*:\s*(.+)$")


def parse_properties(sections: dict[str, list[str]]) -> tuple[dict[str, str], list[str]]:
    """Collect every property into one flat map (last write wins).

    Returns (properties, tags). Tags come from splitting ``Tags`` on whitespace.
    """
    properties: dict[str, str] = {}
    for name in PROPERTY_SECTIONS:
        for line in sections.get(name, []):
            match = KEY_VALUE_RE.match(line)
            if match:
                properties[match.group(1)] = match.group(2)

    tags = properties["Tags"].split() if "Tags" in properties else []
    return properties, tags


def numeric_property(properties: dict[str, str], key: str, default: float) -> float:
    """Read a property as a float, using *default* when the key is absent.

    A present but malformed value is nan.
    """
    if key not in properties:
        return default
    return parse_float(properties[key])
