#!/usr/bin/env python3
"""
PlotPlace CLI

Command-line interface for the city layout optimizer.

Usage:
    plotplace optimize <request.yaml|json> [options]
    plotplace place --preset NAME -b NAME[:COUNT] ... [options]
    plotplace buildings [--catalog FILE]
    plotplace strategies
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from . import __version__


def configure_logging(verbose: bool):
    """Enable debug logging for -v; otherwise only warnings reach stderr."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def load_catalog(path: Optional[str]):
    """Load the bundled or a custom building catalog, printing any error."""
    from .buildings.catalog import BuildingCatalog

    try:
        return BuildingCatalog(path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return None


def parse_plot_size(value: str):
    """Parse a ``WxH`` plot size."""
    from .grid.abstraction import Size

    width, sep, height = value.lower().partition("x")
    if not sep:
        raise ValueError(f"Plot size must look like WxH, got '{value}'")
    return Size(int(width), int(height))


def parse_road(value: str):
    """Parse an ``X,Y`` road tile."""
    from .grid.abstraction import Position

    x, sep, y = value.partition(",")
    if not sep:
        raise ValueError(f"Road position must look like X,Y, got '{value}'")
    return Position(int(x), int(y))


def print_result(output: Dict[str, Any]):
    """Print a readable summary of a planner result."""
    metadata = output.get("metadata", {})

    print(f"\nLayout {'succeeded' if output['success'] else 'FAILED'}")
    if metadata.get("strategy"):
        print(f"  Road strategy: {metadata['strategy']}")
    print(f"  Buildings: {metadata.get('foundBuildings', 0)} found "
          f"of {metadata.get('requestedBuildings', 0)} requested")
    if metadata.get("missingBuildings"):
        print(f"  Missing: {', '.join(metadata['missingBuildings'])}")
    print(f"  Placed: {len(output['placedBuildings'])}")
    print(f"  Failed: {len(output['failedBuildings'])}")

    print("\nRevenue:")
    print(f"  Coins: {output['totalCoinsRevenue']} "
          f"({output['coinsRevenuePerHour']:.1f}/h)")
    print(f"  Passengers: {output['totalPassengersRevenue']} "
          f"({output['passengersRevenuePerHour']:.1f}/h)")

    for candidate in metadata.get("candidates", []):
        marker = "*" if candidate["strategy"] == metadata.get("strategy") else " "
        status = "ok" if candidate["success"] else "failed"
        print(f"  {marker} {candidate['strategy']:<16} revenue={candidate['totalRevenue']:<8} "
              f"placed={candidate['placed']} ({status})")

    if output["gridVisualization"]:
        print("\nGrid:")
        print(output["gridVisualization"], end="")

    validation = output["validation"]
    if not validation["isValid"]:
        print("\nValidation errors:")
        for error in validation["errors"]:
            print(f"  - {error}")


def run_request(request, args) -> int:
    """Run a layout request through the planner and report the result."""
    from .api.planner import LayoutPlanner
    from .errors import PlanningError

    catalog = load_catalog(args.catalog)
    if catalog is None:
        return 1

    try:
        output = LayoutPlanner(catalog).plan(request)
    except PlanningError as e:
        print(f"Error: {e.message}")
        for detail in e.details:
            print(f"  - {detail}")
        return 1

    if args.json:
        print(json.dumps(output, indent=2))
    else:
        print_result(output)

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(json.dumps(output, indent=2))
        if not args.json:
            print(f"\nResult saved to: {output_path}")

    return 0 if output["success"] else 1


def cmd_optimize(args):
    """Optimize a layout described by a request file."""
    from .api.planner import LayoutRequest
    from .errors import PlanningError

    path = Path(args.request)
    if not path.exists():
        print(f"Error: Request file not found: {path}")
        return 1

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        print(f"Error: Could not parse {path}: {e}")
        return 1

    if not isinstance(data, dict):
        print(f"Error: Request file {path} must contain a mapping")
        return 1

    try:
        request = LayoutRequest.from_dict(data)
    except PlanningError as e:
        print(f"Error: {e.message}")
        for detail in e.details:
            print(f"  - {detail}")
        return 1

    if args.search:
        request.search = True

    if not args.json:
        print(f"Loaded request: {path}")
    return run_request(request, args)


def cmd_place(args):
    """Lay out buildings given on the command line."""
    from .api.planner import LayoutRequest
    from .buildings.catalog import parse_building_spec
    from .grid.abstraction import PlotConfiguration
    from .placement.roads import get_strategy
    from .presets.profiles import get_preset

    try:
        if args.preset:
            config = get_preset(args.preset).config
        elif None not in (args.plots_x, args.plots_y, args.plot_size):
            config = PlotConfiguration(args.plots_x, args.plots_y,
                                       parse_plot_size(args.plot_size))
        else:
            print("Error: Use --preset or all of --plots-x, --plots-y and --plot-size")
            return 1

        names: List[str] = []
        for spec in args.building or []:
            name, count = parse_building_spec(spec)
            names.extend([name] * count)

        roads = [parse_road(r) for r in args.road] if args.road else None
        strategy = get_strategy(args.road_strategy) if args.road_strategy else None
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if not names:
        print("Error: No buildings requested (use -b NAME[:COUNT])")
        return 1

    request = LayoutRequest(
        building_names=names,
        plot_configuration=config,
        road_positions=roads,
        search=args.search,
        strategy=strategy,
    )
    return run_request(request, args)


def cmd_buildings(args):
    """List catalog building names."""
    catalog = load_catalog(args.catalog)
    if catalog is None:
        return 1

    names = catalog.names()
    print(f"{len(names)} buildings available:")
    for name in names:
        record = catalog.get_record(name)
        print(f"  {name:<20} {record.get('type', '?'):<12} "
              f"{record.get('width')}x{record.get('height')}")
    return 0


def cmd_strategies(args):
    """List road strategies."""
    from .placement.roads import DEFAULT_SEARCH_ORDER, list_strategies

    searched = {s.value for s in DEFAULT_SEARCH_ORDER}
    print("Road strategies (* = part of the default search):")
    for name in list_strategies():
        print(f"  {'*' if name in searched else ' '} {name}")
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="PlotPlace - City Layout Optimizer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  plotplace optimize request.yaml
  plotplace optimize request.json --search --json -o result.json
  plotplace place --preset airport_city -b House:3 -b Shop -b Fountain --search
  plotplace place --plots-x 2 --plots-y 1 --plot-size 4x4 -b House --road 2,2
  plotplace buildings
        """,
    )

    parser.add_argument('--version', action='version', version=f'plotplace {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Optimize command
    optimize_parser = subparsers.add_parser('optimize', help='Optimize a layout request file')
    optimize_parser.add_argument('request', help='Path to a YAML or JSON request file')
    optimize_parser.add_argument('--search', action='store_true',
                                 help='Search road strategies for the best revenue')
    optimize_parser.add_argument('--catalog', help='Custom building catalog YAML file')
    optimize_parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    optimize_parser.add_argument('-o', '--output', help='Save the JSON result to a file')
    optimize_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    # Place command
    place_parser = subparsers.add_parser('place', help='Lay out buildings given on the command line')
    place_parser.add_argument('--preset', help='Plot preset (e.g. airport_city)')
    place_parser.add_argument('--plots-x', type=int, help='Number of plot columns')
    place_parser.add_argument('--plots-y', type=int, help='Number of plot rows')
    place_parser.add_argument('--plot-size', help='Plot size as WxH tiles')
    place_parser.add_argument('-b', '--building', action='append',
                              help='Building to place as NAME[:COUNT] (repeatable)')
    place_parser.add_argument('--road', action='append', help='Road tile as X,Y (repeatable)')
    place_parser.add_argument('--road-strategy', help='Road strategy to lay before placement')
    place_parser.add_argument('--search', action='store_true',
                              help='Search road strategies for the best revenue')
    place_parser.add_argument('--catalog', help='Custom building catalog YAML file')
    place_parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    place_parser.add_argument('-o', '--output', help='Save the JSON result to a file')
    place_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    # Buildings command
    buildings_parser = subparsers.add_parser('buildings', help='List catalog buildings')
    buildings_parser.add_argument('--catalog', help='Custom building catalog YAML file')

    # Strategies command
    subparsers.add_parser('strategies', help='List road strategies')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(getattr(args, 'verbose', False))

    # Dispatch command
    commands = {
        'optimize': cmd_optimize,
        'place': cmd_place,
        'buildings': cmd_buildings,
        'strategies': cmd_strategies,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
