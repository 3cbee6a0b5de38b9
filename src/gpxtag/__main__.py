"""
Command-line interface for gpxtag.
Geotags photos from GPX tracks and inspects track files.
"""

import argparse
import sys
from pathlib import Path

import yaml

from gpxtag.core.config import Config, LOG_LEVELS, create_default_config
from gpxtag.core.exceptions import NoTrackDataError
from gpxtag.core.timestamps import parse_timestamp
from gpxtag.processors.geotagger import Geotagger, expand_geo_paths
from gpxtag.processors.gpx_reader import load_tracks
from gpxtag.utils.logger import setup_logger


def _load_config(args) -> Config:
    config_path = getattr(args, "config", None)
    if config_path:
        return Config.from_yaml(config_path)
    return Config()


def cmd_tag(args):
    """Geotag all photos of a folder."""
    try:
        config = _load_config(args)
        if args.dry_run:
            config.media.dry_run = True
        if args.log_level:
            config.log_level = args.log_level
        config.validate()
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"❌ Invalid configuration: {e}")
        return 1

    setup_logger("gpxtag", level=config.log_level, log_file=config.log_file)

    geotagger = Geotagger(config)
    return geotagger.run(expand_geo_paths(args.geo), args.folder)


def cmd_init(args):
    """Initialize a new configuration file."""
    output_path = Path(args.output)

    if output_path.exists() and not args.force:
        print(f"❌ Configuration file already exists: {output_path}")
        print("💡 Use --force to overwrite")
        return 1

    try:
        create_default_config(str(output_path))
    except OSError as e:
        print(f"❌ Error creating configuration: {e}")
        return 1

    print(f"✅ Configuration file created: {output_path}")
    print(f"   Run: python -m gpxtag tag --geo track.gpx --folder photos --config {output_path}")
    return 0


def _load_track_or_report(patterns):
    setup_logger("gpxtag", level="WARNING")
    try:
        return load_tracks([str(p) for p in expand_geo_paths(patterns)])
    except NoTrackDataError as e:
        print(f"❌ {e}")
        return None


def cmd_info(args):
    """Display track statistics."""
    track = _load_track_or_report(args.geo)
    if track is None:
        return 1

    stats = track.get_statistics()
    print("📍 Track Information")
    print("=" * 60)
    print(f"Points:   {stats['num_points']}")
    print(f"Start:    {stats['start_time'].isoformat()}")
    print(f"End:      {stats['end_time'].isoformat()}")
    print(f"Duration: {stats['duration_s']:.1f} s")
    print(f"Distance: {stats['total_distance_m']:.1f} m")
    if stats['min_elevation_m'] is not None:
        print(f"Elevation: {stats['min_elevation_m']:.1f} .. {stats['max_elevation_m']:.1f} m")
    return 0


def cmd_locate(args):
    """Print the track position at a timestamp."""
    timestamp = parse_timestamp(args.time)
    if timestamp is None:
        print(f"❌ Could not parse timestamp: {args.time}")
        return 1

    track = _load_track_or_report(args.geo)
    if track is None:
        return 1

    sample = track.locate(timestamp)
    if sample is None:
        print(f"No match: {timestamp.isoformat()} is outside "
              f"{track.start_time.isoformat()} .. {track.end_time.isoformat()}")
        return 1

    elevation = f", {sample.elevation:.1f} m" if sample.elevation is not None else ""
    print(f"{sample.timestamp.isoformat()}: {sample.latitude:.6f}, {sample.longitude:.6f}{elevation}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gpxtag",
        description="Apply GPX track data to image metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Geotag photos from two tracks
  python -m gpxtag tag --geo day1.gpx day2.gpx --folder photos

  # Tracks by pattern, without touching the photos
  python -m gpxtag tag --geo "tracks/*.gpx" --folder photos --dry-run

  # Where was I at noon?
  python -m gpxtag locate --geo day1.gpx --time "2024-05-06T12:00:00Z"
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_tag = subparsers.add_parser("tag", help="Geotag photos in a folder")
    parser_tag.add_argument(
        "--geo", "-g",
        nargs="+",
        required=True,
        help="One or more GPX files (wildcards allowed) providing track data"
    )
    parser_tag.add_argument(
        "--folder", "-f",
        required=True,
        help="Folder containing media files to geotag"
    )
    parser_tag.add_argument(
        "--config", "-c",
        help="Configuration file path"
    )
    parser_tag.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Match photos without writing metadata"
    )
    parser_tag.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        help="Override log level from config"
    )
    parser_tag.set_defaults(func=cmd_tag)

    parser_init = subparsers.add_parser("init", help="Create default configuration file")
    parser_init.add_argument(
        "--output", "-o",
        default="gpxtag.yaml",
        help="Output configuration file path (default: gpxtag.yaml)"
    )
    parser_init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing configuration file"
    )
    parser_init.set_defaults(func=cmd_init)

    parser_info = subparsers.add_parser("info", help="Display track statistics")
    parser_info.add_argument("--geo", "-g", nargs="+", required=True, help="GPX files")
    parser_info.set_defaults(func=cmd_info)

    parser_locate = subparsers.add_parser("locate", help="Position at a given time")
    parser_locate.add_argument("--geo", "-g", nargs="+", required=True, help="GPX files")
    parser_locate.add_argument(
        "--time", "-t",
        required=True,
        help="Query time, e.g. 2024-05-06T12:00:00Z"
    )
    parser_locate.set_defaults(func=cmd_locate)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
