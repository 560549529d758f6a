"""Parser configuration: defaults for values a beatmap may omit."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path


@dataclass
class ParserConfig:
    """Defaults applied when a beatmap does not define a value itself."""

    # Difficulty defaults used by slider duration and max combo
    default_slider_multiplier: float = 1.4
    default_slider_tick_rate: float = 1.0

    # File reading
    encoding: str = "utf-8-sig"  # strips a leading BOM

    def save(self, path: Path) -> None:
        """Save config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> ParserConfig:
        """Load config from JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        # Only pass known fields to handle forward/backward compat
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
