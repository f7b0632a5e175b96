"""
Pipeline Runner Module
======================

Experiment runner comparing the search strategies on generated or
supplied grids. Results are returned in memory; nothing is written to disk.
"""

import time
import traceback
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field, asdict

from ..config import Config
from ..terrain import MapGenerator
from ..environment import GridMap
from ..planning import run_search, resolve_strategy
from ..metrics import compute_path_metrics, summarize, RunClassifier, RunStatus


@dataclass
class ScenarioResult:
    """Result from a single scenario run"""
    seed: Optional[int]
    grid: List[List[str]] = field(default_factory=list)
    start: Tuple[int, int] = (0, 0)
    goal: Optional[Tuple[int, int]] = None
    battery: int = 0
    methods: Dict[str, Dict] = field(default_factory=dict)
    runtimes: Dict[str, float] = field(default_factory=dict)
    success: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class AggregatedResults:
    """Aggregated results from multiple scenarios"""
    num_scenarios: int = 0
    methods: List[str] = field(default_factory=list)
    summary: Dict[str, Dict] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return asdict(self)


class ExperimentRunner:
    """
    Runs the configured strategies on the same scenario and compares them.

    Features:
    - Seeded scenario generation
    - Per-method metrics and outcome classification
    - Per-method error capture (one failing method does not stop the rest)
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize experiment runner.

        Args:
            config: Configuration object (uses default if None)
        """
        self.config = config or Config()
        self.classifier = RunClassifier()

    def run_on_grid(self,
                    grid: GridMap,
                    start: Tuple[int, int],
                    battery: int,
                    goal: Optional[Tuple[int, int]] = None,
                    methods: Optional[List[str]] = None,
                    seed: Optional[int] = None,
                    verbose: bool = False) -> ScenarioResult:
        """
        Run the given methods on one grid.

        Args:
            grid: Grid snapshot
            start: Start cell
            battery: Initial battery
            goal: Heuristic fallback goal
            methods: Strategy names (default: config.search.strategies)
            seed: Seed recorded with the result
            verbose: Print progress

        Returns:
            ScenarioResult with one entry per method
        """
        methods = [resolve_strategy(m) for m in (methods or self.config.search.strategies)]
        result = ScenarioResult(
            seed=seed,
            grid=grid.to_symbols(),
            start=tuple(start),
            goal=tuple(goal) if goal is not None else None,
            battery=battery,
        )

        for method in methods:
            t0 = time.perf_counter()
            try:
                result.methods[method] = self._run_method(grid, start, battery, goal, method)
            except Exception as e:
                result.methods[method] = {
                    'status': RunStatus.ERROR,
                    'error': str(e)
                }
                if verbose:
                    print(f"[Seed {seed}] {method}: ERROR - {e}")
            result.runtimes[method] = time.perf_counter() - t0

            if verbose:
                m = result.methods[method]
                print(f"[Seed {seed}] {method}: {m['status']} "
                      f"(expanded={m.get('nodes_expanded', 'N/A')}, "
                      f"{result.runtimes[method] * 1000:.2f} ms)")

        result.success = all(m['status'] != RunStatus.ERROR for m in result.methods.values())
        return result

    def run_single_scenario(self,
                            seed: int,
                            methods: Optional[List[str]] = None,
                            verbose: bool = False) -> ScenarioResult:
        """
        Generate a scenario from `seed` and run the configured methods on it.

        Returns:
            ScenarioResult with all method results
        """
        try:
            generated = MapGenerator(self.config.map, seed=seed).generate()
            grid = GridMap(generated.terrain)
        except Exception as e:
            if verbose:
                print(f"[Seed {seed}] SCENARIO ERROR: {e}")
                traceback.print_exc()
            return ScenarioResult(seed=seed, error=str(e))

        if verbose:
            print(f"[Seed {seed}] Grid {grid.rows}x{grid.cols}: "
                  f"start={generated.start}, goals={grid.goal_cells()}")

        return self.run_on_grid(
            grid,
            start=generated.start,
            battery=self.config.search.battery,
            goal=generated.goal,
            methods=methods,
            seed=seed,
            verbose=verbose,
        )

    def _run_method(self, grid: GridMap, start, battery: int, goal, method: str) -> Dict:
        """Run a single strategy and summarize it"""
        search_result = run_search(method, grid, start, battery, goal)
        status, failure_type = self.classifier.classify(search_result, grid, battery)
        metrics = compute_path_metrics(search_result, grid, battery)

        return {
            'status': status,
            'failure_type': failure_type,
            'path': search_result.path,
            'path_length': len(search_result.path),
            'nodes_expanded': search_result.nodes_expanded,
            'final_battery': search_result.final_battery,
            'metrics': metrics.to_dict(),
        }

    def run_suite(self,
                  num_scenarios: int = 30,
                  seed_base: Optional[int] = None,
                  methods: Optional[List[str]] = None,
                  verbose: bool = True) -> AggregatedResults:
        """
        Run scenarios `seed_base .. seed_base + num_scenarios - 1` sequentially.

        `seed_base` defaults to `config.random_seed`, or 42 when that is unset.

        Returns:
            AggregatedResults with all statistics
        """
        if seed_base is None:
            seed_base = self.config.random_seed if self.config.random_seed is not None else 42
        methods = [resolve_strategy(m) for m in (methods or self.config.search.strategies)]

        if verbose:
            print(f"Running {num_scenarios} scenarios...")
            print(f"Methods: {methods}")

        all_results: List[ScenarioResult] = []
        for i in range(num_scenarios):
            seed = seed_base + i
            if verbose:
                print(f"\n[{i+1}/{num_scenarios}] Running seed {seed}...")
            all_results.append(self.run_single_scenario(seed, methods=methods, verbose=verbose))

        aggregated = self.aggregate_results(all_results, methods)

        if verbose:
            self.print_summary(aggregated)

        return aggregated

    def aggregate_results(self,
                          results: List[ScenarioResult],
                          methods: List[str]) -> AggregatedResults:
        """Aggregate results from multiple scenarios"""
        agg = AggregatedResults(
            num_scenarios=len(results),
            methods=list(methods)
        )

        for method in methods:
            expanded = []
            lengths = []
            batteries = []
            runtimes = []
            successes = 0
            failures = {'no_path': 0, 'error': 0}

            for result in results:
                if method not in result.methods:
                    continue
                m = result.methods[method]
                status = m.get('status', RunStatus.ERROR)
                if 'nodes_expanded' in m:
                    expanded.append(m['nodes_expanded'])
                if status == RunStatus.SUCCESS:
                    successes += 1
                    lengths.append(m['path_length'])
                    batteries.append(m['final_battery'])
                elif status == RunStatus.NO_PATH:
                    failures['no_path'] += 1
                else:
                    failures['error'] += 1
                rt = result.runtimes.get(method)
                if rt is not None:
                    runtimes.append(float(rt))

            n = len(results)
            expanded_stats = summarize(expanded)
            agg.summary[method] = {
                'success_rate': successes / n if n > 0 else 0,
                'nodes_expanded_mean': expanded_stats['mean'],
                'nodes_expanded_std': expanded_stats['std'],
                'path_length_mean': summarize(lengths)['mean'],
                'final_battery_mean': summarize(batteries)['mean'],
                'runtime_mean_s': summarize(runtimes)['mean'],
                'n_success': successes,
                'n_total': n,
                'failures': failures,
            }

        return agg

    def print_summary(self, agg: AggregatedResults):
        """Print summary table"""
        print("\n" + "=" * 70)
        print("EXPERIMENT SUMMARY")
        print("=" * 70)
        print(f"Total scenarios: {agg.num_scenarios}")
        print()

        print(f"{'Method':<16} {'Success':>10} {'Expanded':>10} {'PathLen':>9} {'Battery':>9}")
        print("-" * 70)

        for method in agg.methods:
            s = agg.summary.get(method, {})
            rate = s.get('success_rate', 0) * 100
            expanded = s.get('nodes_expanded_mean')
            length = s.get('path_length_mean')
            battery = s.get('final_battery_mean')

            expanded_str = f"{expanded:.1f}" if expanded is not None else "N/A"
            length_str = f"{length:.1f}" if length is not None else "N/A"
            battery_str = f"{battery:.1f}" if battery is not None else "N/A"

            print(f"{method:<16} {rate:>9.1f}% {expanded_str:>10} {length_str:>9} {battery_str:>9}")

        print("=" * 70)
