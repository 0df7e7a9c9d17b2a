#!/usr/bin/env python3
"""
Arena Terrain - Command Line Entry Point
========================================

Usage:
    # Generate a terrain snapshot
    arena-terrain generate --seed 42 --output terrain.npz --verbose

    # Print statistics for a saved snapshot
    arena-terrain inspect terrain.npz

    # Render heightmap / slope / reachability figure
    arena-terrain plot terrain.npz --output terrain.png

    # Drive a few entities across the terrain and report falls
    arena-terrain simulate --seed 42 --ticks 600

    # Survey many seeds in parallel
    arena-terrain batch --count 50 --seed_base 1 --parallel --output survey/
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def load_config(args):
    """Config from --config JSON plus command line overrides"""
    from arena_terrain import Config

    if getattr(args, 'config', None):
        with open(args.config) as f:
            config = Config.from_dict(json.load(f))
    else:
        config = Config()
    if getattr(args, 'seed', None) is not None:
        config = config.with_seed(args.seed)
    if getattr(args, 'resolution', None):
        from dataclasses import replace
        config.terrain = replace(config.terrain, resolution=args.resolution)
    config.verbose = getattr(args, 'verbose', False)
    return config.validate()


def run_generate(args):
    """Generate one snapshot"""
    from arena_terrain import TerrainGenerator, analyze_reachability

    config = load_config(args)
    result = TerrainGenerator(config).build()
    terrain = result.terrain
    report = analyze_reachability(terrain, max_slope=config.locomotion.max_traversable_slope)

    print("\n" + "=" * 60)
    print(f"TERRAIN (seed={terrain.seed}, {terrain.resolution}x{terrain.resolution})")
    print("=" * 60)
    print(f"Height range:   {terrain.heights.min():.2f} .. {terrain.heights.max():.2f}")
    print(f"Plateaus:       {len(result.plateaus)}")
    print(f"Peaks:          {len(result.peaks)}")
    print(f"Ramps:          {len(result.ramps)}")
    print(f"Reachable:      {report.reachable_fraction * 100:.1f}%")
    status_icon = "✓" if report.summit_reachable else "✗"
    print(f"Summit reached: {status_icon} (max {report.max_normalized_height:.2f})")
    print(f"Generated in:   {result.elapsed:.2f}s")
    print("=" * 60)

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        terrain.save_to_npz(args.output)
        print(f"\nSnapshot saved to: {args.output}")

    return 0 if report.summit_reachable else 1


def run_inspect(args):
    """Print statistics for a saved snapshot"""
    from arena_terrain import TerrainData, analyze_reachability, terrain_stats

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input path does not exist: {input_path}")
        return 1

    terrain = TerrainData.load_from_npz(str(input_path))
    stats = terrain_stats(terrain, args.max_slope)
    stats['reachability'] = analyze_reachability(terrain, max_slope=args.max_slope).to_dict()

    if args.json:
        print(json.dumps(stats, indent=2))
        return 0

    print("\n" + "=" * 60)
    print(f"SNAPSHOT {input_path.name}")
    print("=" * 60)
    print(f"Seed: {stats['seed']}  Resolution: {stats['resolution']}  "
          f"Extent: {stats['extent'][0]:g} x {stats['extent'][1]:g}")
    e = stats['elevation']
    print(f"Elevation  min={e['min']:.2f} max={e['max']:.2f} mean={e['mean']:.2f} std={e['std']:.2f}")
    s = stats['slope']
    print(f"Slope      mean={s['mean']:.1f}° max={s['max']:.1f}° "
          f"walkable={s['traversable_pct']:.1f}% sliding={s['sliding_pct']:.1f}%")
    b = stats['bands']
    print(f"Bands      low={b['low_pct']:.1f}% mid={b['mid_pct']:.1f}% high={b['high_pct']:.1f}%")
    r = stats['reachability']
    print(f"Reachable  {r['reachable_fraction'] * 100:.1f}% of cells, "
          f"summit {'yes' if r['summit_reachable'] else 'no'}")
    print("=" * 60)
    return 0


def run_plot(args):
    """Render an overview figure"""
    import matplotlib.pyplot as plt
    from arena_terrain import (ArenaConfig, Config, TerrainData, TerrainQuery, TerrainGenerator,
                               TerrainVisualizer, reachable_mask, spawn_points)

    if args.input:
        terrain = TerrainData.load_from_npz(args.input)
        config = Config(terrain=terrain.config,
                        arena=ArenaConfig(width=terrain.width, depth=terrain.depth))
        plateaus, peaks, ramps = (), (), ()
    else:
        config = load_config(args)
        result = TerrainGenerator(config).build()
        terrain = result.terrain
        plateaus, peaks, ramps = result.plateaus, result.peaks, result.ramps

    if args.output:
        plt.switch_backend('Agg')

    max_slope = config.locomotion.max_traversable_slope
    query = TerrainQuery(terrain, max_slope)
    spawns = spawn_points(query, config.arena, config.placement, team_count=args.teams)

    visualizer = TerrainVisualizer(terrain)
    fig = visualizer.create_overview_figure(
        reachable=reachable_mask(terrain, max_slope=max_slope),
        plateaus=plateaus, peaks=peaks, ramps=ramps,
        spawns=spawns, max_slope=max_slope,
    )
    if args.output:
        visualizer.save_figure(fig, args.output)
        plt.close(fig)
    else:
        plt.show()
    return 0


def run_simulate(args):
    """Walk entities from their spawns toward the center"""
    import numpy as np
    from arena_terrain import (MovementIntent, SimulationRegistry, TerrainService,
                               spawn_points)
    from arena_terrain.simulation import GravityIntegrator

    config = load_config(args)
    rng = np.random.default_rng(args.seed)
    delta = 1.0 / args.tick_rate

    with TerrainService(config) as service:
        terrain = service.generate_now()
        print(f"Terrain ready (seed {terrain.seed})")

        registry = SimulationRegistry(config, service=service)
        physics = GravityIntegrator(args.gravity)
        for spawn in spawn_points(service.query(), config.arena, config.placement,
                                  team_count=args.teams, squad_size=args.squad):
            registry.spawn(f"team{spawn.team_id}-{spawn.slot}", spawn.x, spawn.z,
                           team_id=spawn.team_id)

        trajectories = {record.entity_id: [] for record in registry}
        falls = {record.entity_id: 0 for record in registry}

        for tick in range(args.ticks):
            query = service.query()
            for record in registry.alive():
                state = record.locomotion
                bearing = math.atan2(-state.x, -state.z)
                if args.wander:
                    bearing += float(rng.normal(0.0, 0.6))
                intent = MovementIntent(
                    forward=1.0,
                    reference_angle=bearing,
                    sprint=bool(state.stamina > config.locomotion.stamina_max / 2),
                )
                y = physics.advance(record, query, delta)
                report = registry.tick(record.entity_id, intent, delta, y=y)
                trajectories[record.entity_id].append((report.locomotion.x, report.locomotion.z))
                if report.impact is not None and report.impact.damage > 0:
                    falls[record.entity_id] += 1
                    if args.verbose:
                        print(f"tick {tick}: {record.entity_id} fell "
                              f"{report.impact.fall_distance:.1f} units "
                              f"(-{report.impact.damage} hp)")

        print("\n" + "=" * 70)
        print(f"SIMULATION RESULT ({args.ticks} ticks @ {args.tick_rate} Hz)")
        print("=" * 70)
        print(f"{'Entity':<12} {'Position':>18} {'Height':>8} {'Stamina':>8} "
              f"{'Health':>7} {'Falls':>6}")
        print("-" * 70)
        for record in registry:
            s = record.locomotion
            status_icon = "✗" if record.vitals.eliminated else "✓"
            print(f"{status_icon} {record.entity_id:<10} ({s.x:7.1f}, {s.z:7.1f}) {s.y:8.2f} "
                  f"{s.stamina:8.1f} {record.vitals.health:7.0f} {falls[record.entity_id]:>6}")
        print("=" * 70)

        if args.plot:
            import matplotlib.pyplot as plt
            from arena_terrain import TerrainVisualizer

            plt.switch_backend('Agg')
            visualizer = TerrainVisualizer(terrain)
            ax = visualizer.plot_heightmap()
            visualizer.plot_trajectories(ax, trajectories)
            ax.legend(loc='lower left', fontsize=8)
            visualizer.save_figure(ax.figure, args.plot)
            plt.close(ax.figure)

    return 0


def run_batch(args):
    """Survey many seeds"""
    from arena_terrain import SurveyRunner

    config = load_config(args)
    runner = SurveyRunner(config)
    summary = runner.run_survey(
        num_seeds=args.count,
        seed_base=args.seed_base,
        output_dir=args.output,
        save_terrain=args.save_terrain,
        parallel=args.parallel,
        max_workers=args.workers,
        verbose=True,
    )
    print(f"\nResults saved to: {args.output}")
    return 0 if summary.num_failed == 0 else 1


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Arena Terrain Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_config_args(p, seed_default=None):
        p.add_argument('--seed', type=int, default=seed_default, help='Terrain seed (0 = random)')
        p.add_argument('--resolution', type=int, help='Grid resolution')
        p.add_argument('--config', type=str, help='JSON config file')
        p.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    # Generate command
    gen_parser = subparsers.add_parser('generate', help='Generate a terrain snapshot')
    add_config_args(gen_parser, seed_default=42)
    gen_parser.add_argument('--output', '-o', type=str, help='NPZ output file')

    # Inspect command
    inspect_parser = subparsers.add_parser('inspect', help='Print snapshot statistics')
    inspect_parser.add_argument('input', type=str, help='NPZ snapshot')
    inspect_parser.add_argument('--max_slope', type=float, default=45.0, help='Walkable slope limit')
    inspect_parser.add_argument('--json', action='store_true', help='Print raw JSON')
    inspect_parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    # Plot command
    plot_parser = subparsers.add_parser('plot', help='Render an overview figure')
    plot_parser.add_argument('input', type=str, nargs='?', help='NPZ snapshot (generates if omitted)')
    add_config_args(plot_parser, seed_default=42)
    plot_parser.add_argument('--output', '-o', type=str, help='Image file (shows a window if omitted)')
    plot_parser.add_argument('--teams', type=int, default=2, help='Teams to mark spawns for')

    # Simulate command
    sim_parser = subparsers.add_parser('simulate', help='Drive entities across a terrain')
    add_config_args(sim_parser, seed_default=42)
    sim_parser.add_argument('--ticks', type=int, default=600, help='Ticks to simulate')
    sim_parser.add_argument('--tick_rate', type=float, default=60.0, help='Ticks per second')
    sim_parser.add_argument('--teams', type=int, default=2, help='Number of teams')
    sim_parser.add_argument('--squad', type=int, default=1, help='Entities per team')
    sim_parser.add_argument('--gravity', type=float, default=20.0, help='Gravity (units/s^2)')
    sim_parser.add_argument('--wander', action='store_true', help='Add heading noise')
    sim_parser.add_argument('--plot', type=str, help='Save trajectories figure')

    # Batch command
    batch_parser = subparsers.add_parser('batch', help='Survey many seeds')
    add_config_args(batch_parser)
    batch_parser.add_argument('--count', type=int, default=20, help='Number of seeds')
    batch_parser.add_argument('--seed_base', type=int, default=1, help='First seed')
    batch_parser.add_argument('--output', type=str, default='survey', help='Output directory')
    batch_parser.add_argument('--save_terrain', action='store_true', help='Export NPZ snapshots')
    batch_parser.add_argument('--parallel', action='store_true', help='Use parallel execution')
    batch_parser.add_argument('--workers', type=int, default=4, help='Number of workers')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging(getattr(args, 'verbose', False))

    commands = {
        'generate': run_generate,
        'inspect': run_inspect,
        'plot': run_plot,
        'simulate': run_simulate,
        'batch': run_batch,
    }
    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
