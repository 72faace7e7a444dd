import argparse
import logging
import os
import sys

import yaml

from paceindex.config import DEFAULT_LAYOUT, PACE_TABLE_PATH, RACE_DISTANCES


def _setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def cmd_build(args):
    from paceindex.table import build_table, get_column_map, write_table

    _setup_logging(args.verbose)

    try:
        column_map = get_column_map(args.layout, args.map_file)
        rows, build_log = build_table(args.source, column_map)
    except (FileNotFoundError, KeyError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not build_log["success"]:
        print(f"No rows built from {args.source} (layout {column_map.name})")
        sys.exit(1)

    out = args.output or PACE_TABLE_PATH
    write_table(rows, out)
    _print_build_summary(build_log, out)


def _print_build_summary(build_log: dict, out: str):
    print(f"\nBuild complete ({build_log['layout']}):")
    print(f"  Source rows:  {build_log['source_rows']}")
    print(f"  Rows written: {build_log['rows']}")
    print(f"  Dropped:      {len(build_log['dropped'])}")
    print(f"  Duplicates:   {len(build_log['duplicates'])}")
    print(f"  Out of range: {len(build_log['out_of_range'])}")
    print(f"  Output:       {out}")


def cmd_lookup(args):
    from paceindex.table import PaceQuery, load_table, resolve_query

    path = args.table or PACE_TABLE_PATH
    if not os.path.exists(path):
        print(f"Pace table not found: {path} (run `paceindex build` first)")
        sys.exit(1)

    try:
        rows = load_table(path)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        print(f"Could not read pace table {path}: {e}")
        sys.exit(1)

    if args.pi is not None:
        query = PaceQuery(mode="pi", pace_index_text=args.pi)
    elif args.time is not None:
        query = PaceQuery(
            mode="time",
            distance=args.distance,
            time_text=args.time,
            policy="interpolate" if args.interpolate else "nearest",
        )
    else:
        print("Specify --pi or --time.")
        sys.exit(1)

    resolution = resolve_query(rows, query)
    if resolution is None:
        print("No result for that input.")
        sys.exit(1)

    _print_pace_card(resolution)


def _print_pace_card(resolution):
    result = resolution.paces
    paces = result["paces"]
    row = resolution.row

    title = f"Pace Index {row.pace_index}"
    if row.is_synthetic:
        title += " (interpolated)"
    print(f"\n{title}")

    print("\nRace predictions:")
    for item in result["race_predictions"]:
        print(f"  {item['label']:<14} {item['display']:>8}  ({item['pace_display']}/mi)")

    print("\nTraining paces:")
    for key, label in (("recovery", "Recovery"), ("steady", "Steady"),
                       ("threshold", "Threshold"), ("power_run", "Power run")):
        if key in paces:
            print(f"  {label:<14} {paces[key]['display']}/mi")
    for key in ("threshold_400", "threshold_100"):
        if key in paces:
            print(f"  {'T ' + key.split('_')[1]:<14} {paces[key]['display']}")

    for heading, key in (("Critical velocity repeats", "critical_velocity"),
                         ("5k pace repeats", "fivek_repeats"),
                         ("2 mile pace repeats", "two_mile_repeats")):
        print(f"\n{heading}:")
        for item in result[key]:
            print(f"  {str(item['meters']) + 'm':<14} {item['display']}")


def cmd_layouts(args):
    from paceindex.table import load_column_maps

    try:
        maps = load_column_maps(args.map_file)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    for name, column_map in maps.items():
        pi_range = ""
        if column_map.pace_index_range:
            pi_range = f", PI {column_map.pace_index_range[0]}-{column_map.pace_index_range[1]}"
        print(f"{name}: {column_map.title} (skip {column_map.skip_rows} rows, "
              f"pace index column {column_map.columns['pace_index']}{pi_range})")


def main(argv=None):
    parser = argparse.ArgumentParser(prog="paceindex", description="Pace index table builder and calculator")
    subparsers = parser.add_subparsers(dest="command")

    build_parser = subparsers.add_parser("build", help="Build the pace table from a spreadsheet export")
    build_parser.add_argument("source", help="CSV export of the pace chart")
    build_parser.add_argument("-l", "--layout", default=DEFAULT_LAYOUT, help="Column map name")
    build_parser.add_argument("-m", "--map-file", help="YAML file with column maps")
    build_parser.add_argument("-o", "--output", help="Output JSON (default data/paces.json)")
    build_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    build_parser.set_defaults(func=cmd_build)

    lookup_parser = subparsers.add_parser("lookup", help="Look up training paces")
    lookup_parser.add_argument("--pi", help="Pace index")
    lookup_parser.add_argument("--distance", default="5k", choices=list(RACE_DISTANCES), help="Race distance")
    lookup_parser.add_argument("--time", help="Race time (mm:ss or h:mm:ss)")
    lookup_parser.add_argument("--interpolate", action="store_true",
                               help="Blend the two neighbouring rows instead of taking the nearest one")
    lookup_parser.add_argument("-t", "--table", help="Pace table JSON (default data/paces.json)")
    lookup_parser.set_defaults(func=cmd_lookup)

    layouts_parser = subparsers.add_parser("layouts", help="List known spreadsheet layouts")
    layouts_parser.add_argument("-m", "--map-file", help="YAML file with column maps")
    layouts_parser.set_defaults(func=cmd_layouts)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)
    args.func(args)


if __name__ == "__main__":
    main()
