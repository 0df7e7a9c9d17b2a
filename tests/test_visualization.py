"""Tests for terrain figures"""

import matplotlib.pyplot as plt

from arena_terrain.environment import TerrainQuery, spawn_points
from arena_terrain.metrics import reachable_mask
from arena_terrain.visualization import TerrainVisualizer, VisualizationConfig


def test_overview_figure(generation, config, tmp_path):
    terrain = generation.terrain
    spawns = spawn_points(TerrainQuery(terrain), config.arena, config.placement)
    visualizer = TerrainVisualizer(terrain)
    fig = visualizer.create_overview_figure(
        reachable=reachable_mask(terrain),
        plateaus=generation.plateaus,
        peaks=generation.peaks,
        ramps=generation.ramps,
        spawns=spawns,
    )
    assert len(fig.axes) >= 4

    path = tmp_path / 'figures' / 'overview.png'
    visualizer.save_figure(fig, str(path), dpi=40)
    plt.close(fig)
    assert path.exists()
    assert path.stat().st_size > 0


def test_extent_matches_arena(terrain):
    visualizer = TerrainVisualizer(terrain)
    left, right, bottom, top = visualizer.extent
    assert right - left == terrain.width
    assert top - bottom == terrain.depth


def test_trajectory_plot(flat_query):
    visualizer = TerrainVisualizer(flat_query.terrain, VisualizationConfig(figure_size=(4, 4)))
    ax = visualizer.plot_heightmap(contours=False)
    visualizer.plot_trajectories(ax, {
        'a': [(0.0, 0.0), (1.0, 1.0), (2.0, 3.0)],
        'b': [(5.0, 5.0)],  # too short to draw
    })
    assert len(ax.lines) == 2
    plt.close(ax.figure)
