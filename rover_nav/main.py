#!/usr/bin/env python3
"""
Rover Search - Main Entry Point
===============================

Usage:
    # One strategy on the demo grid
    rover-nav run --strategy bfs --battery 30

    # One strategy on a grid file, JSON output
    rover-nav run --strategy best-first --grid maps/canyon.txt --start 0 0 --json

    # All strategies on one grid
    rover-nav compare --grid maps/canyon.txt --battery 40

    # Random scenario suite
    rover-nav suite --num_scenarios 30 --seed_base 42 --rows 10 --cols 10

    # Print a random grid
    rover-nav generate --seed 7 --rows 8 --cols 8

Grid files hold one row per line, e.g. "F H D G" or "FHDG".

From Python:
    from rover_nav import GridMap, breadth_first_search

    result = breadth_first_search(GridMap.from_text(text), start=(0, 0), battery=25)
"""

import argparse
import sys
import json


def _load_grid(args):
    from rover_nav import GridMap, default_grid

    if args.grid:
        return GridMap.from_file(args.grid)
    return GridMap.from_symbols(default_grid())


def _build_config(args):
    from rover_nav import Config, SearchConfig

    config = Config()
    config.verbose = getattr(args, 'verbose', False)
    goal = tuple(args.goal) if getattr(args, 'goal', None) else None
    config.search = SearchConfig(
        battery=args.battery,
        start=tuple(args.start),
        goal=goal,
    )
    return config


def _format_result(result) -> str:
    lines = [
        f"Strategy:       {result.strategy}",
        f"Nodes expanded: {result.nodes_expanded}",
        f"Path length:    {len(result.path)}",
        f"Final battery:  {result.final_battery if result.final_battery is not None else 'N/A'}",
    ]
    if result.path:
        lines.append("Path:           " + " -> ".join(f"({r},{c})" for r, c in result.path))
    else:
        lines.append("No path found.")
    return "\n".join(lines)


def run_single(args):
    """Run one strategy on one grid"""
    from rover_nav import run_search

    # GridValidationError and SearchInputError are ValueErrors
    try:
        grid = _load_grid(args)
        config = _build_config(args)
        result = run_search(args.strategy, grid, config.search.start,
                            config.search.battery, config.search.goal)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(_format_result(result))

    return 0 if result.found else 1


def run_compare(args):
    """Run all strategies on one grid"""
    from rover_nav import ExperimentRunner

    try:
        grid = _load_grid(args)
        config = _build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    runner = ExperimentRunner(config)
    methods = args.methods.split(',') if args.methods else None

    try:
        result = runner.run_on_grid(grid, config.search.start, config.search.battery,
                                    config.search.goal, methods=methods,
                                    verbose=config.verbose)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
        return 0 if result.success else 1

    print("\n" + "=" * 60)
    print(f"COMPARISON (battery={config.search.battery}, start={config.search.start})")
    print("=" * 60)

    for method, data in result.methods.items():
        status = data.get('status', 'unknown')
        expanded = data.get('nodes_expanded', 'N/A')
        battery = data.get('final_battery')
        battery_str = battery if battery is not None else 'N/A'

        status_icon = "✓" if status == 'success' else "✗"
        print(f"{status_icon} {method:15s}: {status:9s} expanded={expanded!s:>5} "
              f"path={data.get('path_length', 0):>3}  battery={battery_str}")

    print("=" * 60)

    return 0 if result.success else 1


def run_suite(args):
    """Run random scenario suite"""
    from rover_nav import Config, MapConfig, SearchConfig, ExperimentRunner

    try:
        config = Config(
            search=SearchConfig(battery=args.battery),
            map=MapConfig(rows=args.rows, cols=args.cols, goal_count=args.goals),
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    runner = ExperimentRunner(config)
    methods = args.methods.split(',') if args.methods else None

    results = runner.run_suite(
        num_scenarios=args.num_scenarios,
        seed_base=args.seed_base,
        methods=methods,
        verbose=args.verbose or not args.json,
    )

    if args.json:
        print(json.dumps(results.to_dict(), indent=2))

    return 0


def run_generate(args):
    """Print a random grid"""
    from rover_nav import MapConfig, MapGenerator, GridMap

    try:
        map_config = MapConfig(rows=args.rows, cols=args.cols, goal_count=args.goals)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    generated = MapGenerator(map_config, seed=args.seed).generate()
    print(f"# seed={args.seed} start={generated.start}")
    print(GridMap(generated.terrain).to_text())
    return 0


def _add_request_args(parser):
    parser.add_argument('--grid', type=str, help='Grid text file (default: demo grid)')
    parser.add_argument('--start', type=int, nargs=2, default=[0, 0], metavar=('ROW', 'COL'),
                        help='Start cell')
    parser.add_argument('--goal', type=int, nargs=2, metavar=('ROW', 'COL'),
                        help='Fallback goal for the heuristic when the grid has no G cell')
    parser.add_argument('--battery', type=int, default=25, help='Initial battery')
    parser.add_argument('--json', action='store_true', help='Print JSON')


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Battery-bounded rover grid search',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run one strategy')
    run_parser.add_argument('--strategy', '-s', type=str, default='breadth-first',
                            help='depth-first | breadth-first | best-first (or dfs, bfs, best)')
    _add_request_args(run_parser)

    # Compare command
    cmp_parser = subparsers.add_parser('compare', help='Run all strategies on one grid')
    cmp_parser.add_argument('--methods', type=str, help='Comma-separated strategies')
    cmp_parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    _add_request_args(cmp_parser)

    # Suite command
    suite_parser = subparsers.add_parser('suite', help='Run random scenario suite')
    suite_parser.add_argument('--num_scenarios', type=int, default=30, help='Number of scenarios')
    suite_parser.add_argument('--seed_base', type=int, default=None, help='Base seed (default: 42)')
    suite_parser.add_argument('--rows', type=int, default=6, help='Grid rows')
    suite_parser.add_argument('--cols', type=int, default=6, help='Grid columns')
    suite_parser.add_argument('--goals', type=int, default=1, help='Goal cells per grid')
    suite_parser.add_argument('--battery', type=int, default=25, help='Initial battery')
    suite_parser.add_argument('--methods', type=str, help='Comma-separated strategies')
    suite_parser.add_argument('--json', action='store_true', help='Print aggregated JSON')
    suite_parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    # Generate command
    gen_parser = subparsers.add_parser('generate', help='Print a random grid')
    gen_parser.add_argument('--seed', type=int, default=42, help='Random seed')
    gen_parser.add_argument('--rows', type=int, default=6, help='Grid rows')
    gen_parser.add_argument('--cols', type=int, default=6, help='Grid columns')
    gen_parser.add_argument('--goals', type=int, default=1, help='Goal cells')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == 'run':
        return run_single(args)
    elif args.command == 'compare':
        return run_compare(args)
    elif args.command == 'suite':
        return run_suite(args)
    elif args.command == 'generate':
        return run_generate(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
