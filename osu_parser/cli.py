"""Command-line interface for the osu! beatmap parser."""

import argparse
import json
import logging
import sys
from pathlib import Path

from osu_parser.config import ParserConfig


def _load_config(args: argparse.Namespace) -> ParserConfig:
    if args.config:
        return ParserConfig.load(Path(args.config))
    return ParserConfig()


def cmd_parse(args: argparse.Namespace) -> int:
    from osu_parser.parsers.beatmap_parser import parse_file
    from osu_parser.parsers.sections import BeatmapValidationError
    from osu_parser.storage.writer import beatmap_to_dict

    try:
        beatmap = parse_file(Path(args.file), _load_config(args))
    except (FileNotFoundError, BeatmapValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(beatmap_to_dict(beatmap), indent=args.indent))
    return 0


def cmd_process(args: argparse.Namespace) -> int:
    from osu_parser.pipeline.batch import PipelineConfig, run_pipeline

    config = PipelineConfig(
        input_dir=Path(args.input),
        output_dir=Path(args.output),
        pattern=args.pattern,
        parser=_load_config(args),
    )
    result = run_pipeline(config)
    print(
        f"Processed {result.total_beatmaps}/{result.total_files} files "
        f"({result.total_hit_objects} hit objects) to {args.output}"
    )
    if result.errors:
        print(f"{len(result.errors)} files failed to parse", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="osu-parser",
        description="Parse osu! beatmap files",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--config", default=None, help="Optional JSON parser config")
    sub = parser.add_subparsers(dest="command")

    # parse
    parse_cmd = sub.add_parser("parse", help="Parse one .osu file and print it as JSON")
    parse_cmd.add_argument("file", help="Path to a .osu file")
    parse_cmd.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")

    # process
    proc = sub.add_parser("process", help="Parse a directory of .osu files into Parquet")
    proc.add_argument("--input", default="data/raw")
    proc.add_argument("--output", default="data/processed")
    proc.add_argument("--pattern", default="*.osu",
                      help="Glob pattern for beatmap files (default: *.osu)")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "parse": cmd_parse,
        "process": cmd_process,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
