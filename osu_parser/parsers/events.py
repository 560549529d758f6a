"""Parse background and break directives from the ``[Events]`` section.

Background line: ``0,0,"bg.jpg"``
Break line:      ``2,start,end``
"""

import re

from osu_parser.parsers.values import parse_int
from osu_parser.schemas.beatmap import BreakTime

_DIGITS_RE = re.compile(r"^\d+$")


def _strip_quotes(name: str) -> str:
    if name.startswith('"') and name.endswith('"'):
        return name[1:-1]
    return name


def parse_events(lines: list[str]) -> tuple[str | None, list[BreakTime]]:
    """Return (background filename, break times sorted by start time)."""
    bg_filename = None
    break_times: list[BreakTime] = []

    for line in lines:
        members = line.split(",")
        if len(members) < 3:
            continue

        if members[0] == "0" and members[1] == "0" and members[2]:
            bg_filename = _strip_quotes(members[2].strip())
        elif (
            members[0] == "2"
            and _DIGITS_RE.match(members[1])
            and _DIGITS_RE.match(members[2])
        ):
            break_times.append(BreakTime(
                start_time=parse_int(members[1]),
                end_time=parse_int(members[2]),
            ))

    break_times.sort(key=lambda b: b.start_time)
    return bg_filename, break_times
