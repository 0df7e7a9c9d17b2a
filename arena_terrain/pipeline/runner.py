"""
Pipeline Runner Module
======================

Multi-seed terrain survey: generate many arenas, measure reachability
and slope statistics, and aggregate the results into a JSON report.
Used offline when tuning generation parameters.
"""

import json
import time
import traceback
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from ..config import Config
from ..environment import TerrainQuery, spawn_points
from ..metrics import analyze_reachability, terrain_stats
from ..terrain import TerrainGenerator


@dataclass
class SeedResult:
    """Result from a single seed"""
    seed: int
    reachability: Dict = field(default_factory=dict)
    stats: Dict = field(default_factory=dict)
    spawns_walkable: bool = False
    runtime: float = 0.0
    success: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class SurveySummary:
    """Aggregated results from multiple seeds"""
    num_seeds: int = 0
    num_failed: int = 0
    summit_reachable_rate: float = 0.0
    spawns_walkable_rate: float = 0.0
    summary: Dict[str, Dict] = field(default_factory=dict)
    failed_seeds: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)


class SurveyRunner:
    """
    Batch runner over consecutive seeds.

    Features:
    - Parallel execution on a process pool
    - Optional snapshot export per seed
    - Aggregated JSON summary
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize survey runner.

        Args:
            config: Configuration object (uses default if None)
        """
        self.config = config or Config()

    def run_single_seed(self, seed: int, output_dir: Optional[str] = None,
                        verbose: bool = False) -> SeedResult:
        """
        Generate and measure one seed.

        Errors are captured in the result so one bad seed does not stop
        a batch.
        """
        result = SeedResult(seed=seed)
        started = time.perf_counter()
        try:
            config = self.config.with_seed(seed)
            terrain = TerrainGenerator(config).generate()
            max_slope = config.locomotion.max_traversable_slope

            report = analyze_reachability(terrain, max_slope=max_slope)
            result.reachability = report.to_dict()
            result.stats = terrain_stats(terrain, max_slope,
                                         config.locomotion.slide_threshold_slope)

            query = TerrainQuery(terrain, max_slope)
            spawns = spawn_points(query, config.arena, config.placement, team_count=2)
            result.spawns_walkable = all(query.is_traversable(s.x, s.z) for s in spawns)
            result.success = report.summit_reachable

            if output_dir:
                path = Path(output_dir) / f'terrain_seed_{seed}.npz'
                path.parent.mkdir(parents=True, exist_ok=True)
                terrain.save_to_npz(str(path))
        except Exception as e:
            result.error = f"{type(e).__name__}: {e}"
            if verbose:
                traceback.print_exc()
        result.runtime = time.perf_counter() - started

        if verbose:
            status = "✓" if result.success else "✗"
            reach = result.reachability.get('reachable_fraction', 0.0) * 100
            print(f"Seed {seed}: {status} reachable={reach:.1f}% ({result.runtime:.2f}s)")
        return result

    def run_survey(self,
                   num_seeds: int = 20,
                   seed_base: int = 1,
                   output_dir: str = 'survey',
                   save_terrain: bool = False,
                   parallel: bool = False,
                   max_workers: int = 4,
                   verbose: bool = True) -> SurveySummary:
        """
        Run a survey over ``num_seeds`` consecutive seeds.

        Args:
            num_seeds: Number of seeds to run
            seed_base: First seed (0 is skipped, it means "random")
            output_dir: Output directory
            save_terrain: Export each snapshot as NPZ
            parallel: Use parallel execution
            max_workers: Number of parallel workers
            verbose: Print progress

        Returns:
            SurveySummary with all statistics
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        snapshot_dir = str(output_path) if save_terrain else None
        seeds = [max(1, seed_base + i) for i in range(num_seeds)]

        results: List[SeedResult] = []

        if verbose:
            print(f"Surveying {num_seeds} seeds from {seeds[0] if seeds else seed_base}...")
            print(f"Output: {output_path}")

        if parallel and max_workers > 1:
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                futures = {
                    executor.submit(self.run_single_seed, seed, snapshot_dir): seed
                    for seed in seeds
                }
                for future in as_completed(futures):
                    seed = futures[future]
                    try:
                        result = future.result()
                    except Exception as e:
                        result = SeedResult(seed=seed, error=f"{type(e).__name__}: {e}")
                    results.append(result)
                    if verbose:
                        status = "✓" if result.success else "✗"
                        print(f"[{len(results)}/{num_seeds}] Seed {seed}: {status}")
        else:
            for i, seed in enumerate(seeds):
                if verbose:
                    print(f"[{i+1}/{num_seeds}] ", end='')
                results.append(self.run_single_seed(seed, snapshot_dir, verbose=verbose))

        results.sort(key=lambda r: r.seed)
        summary = self.aggregate(results)

        with open(output_path / 'seed_results.json', 'w') as f:
            json.dump([r.to_dict() for r in results], f, indent=2, default=str)
        with open(output_path / 'survey_summary.json', 'w') as f:
            json.dump(summary.to_dict(), f, indent=2, default=str)

        if verbose:
            self.print_summary(summary)

        return summary

    @staticmethod
    def aggregate(results: List[SeedResult]) -> SurveySummary:
        """Aggregate per-seed results"""
        completed = [r for r in results if r.error is None]
        summary = SurveySummary(
            num_seeds=len(results),
            num_failed=len(results) - len(completed),
            failed_seeds=[r.seed for r in results if not r.success],
        )
        if not completed:
            return summary

        summary.summit_reachable_rate = float(np.mean([
            r.reachability.get('summit_reachable', False) for r in completed]))
        summary.spawns_walkable_rate = float(np.mean([r.spawns_walkable for r in completed]))

        columns = {
            'reachable_fraction': [r.reachability['reachable_fraction'] for r in completed],
            'max_height': [r.stats['elevation']['max'] for r in completed],
            'mean_slope': [r.stats['slope']['mean'] for r in completed],
            'traversable_pct': [r.stats['slope']['traversable_pct'] for r in completed],
            'runtime_s': [r.runtime for r in completed],
        }
        for name, values in columns.items():
            summary.summary[name] = {
                'mean': float(np.mean(values)),
                'std': float(np.std(values)) if len(values) > 1 else 0.0,
                'min': float(np.min(values)),
                'max': float(np.max(values)),
            }
        return summary

    @staticmethod
    def print_summary(summary: SurveySummary):
        """Print summary table"""
        print("\n" + "=" * 60)
        print("TERRAIN SURVEY SUMMARY")
        print("=" * 60)
        print(f"Seeds: {summary.num_seeds}  (errors: {summary.num_failed})")
        print(f"Summit reachable: {summary.summit_reachable_rate * 100:.1f}%")
        print(f"Spawns walkable:  {summary.spawns_walkable_rate * 100:.1f}%")
        print()
        print(f"{'Metric':<22} {'Mean':>10} {'Std':>10} {'Min':>10} {'Max':>10}")
        print("-" * 60)
        for name, s in summary.summary.items():
            print(f"{name:<22} {s['mean']:>10.3f} {s['std']:>10.3f} "
                  f"{s['min']:>10.3f} {s['max']:>10.3f}")
        print("=" * 60)
