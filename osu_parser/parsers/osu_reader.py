"""Read ``.osu`` files into text."""

from pathlib import Path

UTF8_BOM = b"\xef\xbb\xbf"


def decode_osu_bytes(raw: bytes, encoding: str = "utf-8-sig") -> str:
    """Decode file content, dropping a BOM and replacing undecodable bytes."""
    if raw[:3] == UTF8_BOM:
        raw = raw[3:]
    return raw.decode(encoding, errors="replace")


def read_osu_file(filepath: Path, encoding: str = "utf-8-sig") -> str:
    """Read a .osu file and return its text."""
    return decode_osu_bytes(Path(filepath).read_bytes(), encoding)
