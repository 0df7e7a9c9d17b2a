"""
Visualization Module
====================

Static terrain figures: heightmaps, slope maps, reachability overlays and
entity trajectories. Helps check where the arena is walkable and why.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.patches import Circle

from ..terrain import TerrainData, TerrainFeature, RampPath, slope_map


@dataclass
class VisualizationConfig:
    """Configuration for visualization"""
    height_cmap: str = 'terrain'
    slope_cmap: str = 'magma'
    reach_colors: tuple = ('black', 'lightgreen')
    marker_colors: Dict[str, str] = None
    figure_size: Tuple[int, int] = (14, 12)
    dpi: int = 100

    def __post_init__(self):
        if self.marker_colors is None:
            self.marker_colors = {
                'plateau': 'white',
                'peak': 'red',
                'ramp': 'cyan',
                'spawn': 'yellow',
                'trajectory': 'blue',
            }


class TerrainVisualizer:
    """
    Static terrain visualization.

    All plots use world coordinates: x to the right, z up the page.
    """

    def __init__(self, terrain: TerrainData, config: Optional[VisualizationConfig] = None):
        """
        Initialize visualizer.

        Args:
            terrain: Terrain snapshot to draw
            config: Visualization configuration
        """
        self.terrain = terrain
        self.config = config or VisualizationConfig()
        self.reach_cmap = ListedColormap(self.config.reach_colors)

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        hw = self.terrain.width / 2
        hd = self.terrain.depth / 2
        return (-hw, hw, -hd, hd)

    def _axes(self, ax):
        if ax is None:
            _, ax = plt.subplots(figsize=self.config.figure_size)
        ax.set_xlabel('X (units)')
        ax.set_ylabel('Z (units)')
        return ax

    def plot_heightmap(self, ax=None, contours: bool = True) -> plt.Axes:
        """
        Plot the height field.

        Args:
            ax: Matplotlib axes (creates new if None)
            contours: Overlay elevation contours

        Returns:
            Matplotlib axes
        """
        ax = self._axes(ax)
        im = ax.imshow(self.terrain.heights, cmap=self.config.height_cmap,
                       origin='lower', extent=self.extent)
        plt.colorbar(im, ax=ax, label='Height')

        if contours:
            ax.contour(self.terrain.heights, levels=10, colors='white',
                       alpha=0.3, linewidths=0.5, origin='lower', extent=self.extent)

        ax.set_title(f'Height Map (seed {self.terrain.seed})')
        return ax

    def plot_slope(self, ax=None, max_slope: float = 45.0) -> plt.Axes:
        """Plot slope in degrees with the traversable limit contoured"""
        ax = self._axes(ax)
        slopes = slope_map(self.terrain.normals)
        im = ax.imshow(slopes, cmap=self.config.slope_cmap, origin='lower',
                       extent=self.extent, vmin=0, vmax=90)
        plt.colorbar(im, ax=ax, label='Slope (deg)')
        if slopes.max() > max_slope:
            ax.contour(slopes, levels=[max_slope], colors='cyan',
                       linewidths=0.8, origin='lower', extent=self.extent)
        ax.set_title('Slope Map')
        return ax

    def plot_reachability(self, mask: np.ndarray, ax=None) -> plt.Axes:
        """Plot the reachable region (True cells in green)"""
        ax = self._axes(ax)
        ax.imshow(mask.astype(int), cmap=self.reach_cmap, origin='lower',
                  extent=self.extent, vmin=0, vmax=1)
        ax.set_title(f'Reachable Area ({100.0 * mask.mean():.1f}%)')
        return ax

    def plot_features(self, ax, plateaus: Sequence[TerrainFeature] = (),
                      peaks: Sequence[TerrainFeature] = (),
                      ramps: Sequence[RampPath] = ()):
        """Outline landmarks and ramp corridors on existing axes"""
        colors = self.config.marker_colors
        for feature in plateaus:
            ax.add_patch(Circle((feature.x, feature.z), feature.radius,
                                fill=False, color=colors['plateau'], linewidth=1.2))
        for feature in peaks:
            ax.add_patch(Circle((feature.x, feature.z), feature.radius,
                                fill=False, color=colors['peak'], linewidth=1.5))
        for i, ramp in enumerate(ramps):
            ax.plot([ramp.start_x, ramp.end_x], [ramp.start_z, ramp.end_z],
                    color=colors['ramp'], linewidth=1.5, alpha=0.8,
                    label='Ramps' if i == 0 else None)

    def plot_spawns(self, ax, spawns: Sequence):
        """Mark spawn points (anything with x and z attributes)"""
        if not spawns:
            return
        xs = [s.x for s in spawns]
        zs = [s.z for s in spawns]
        ax.scatter(xs, zs, c=self.config.marker_colors['spawn'], marker='o', s=60,
                   edgecolors='black', label='Spawns', zorder=3)

    def plot_trajectories(self, ax, trajectories: Dict[str, List[Tuple[float, float]]]):
        """Plot (x, z) traces keyed by entity id"""
        for entity_id, trace in trajectories.items():
            if len(trace) < 2:
                continue
            arr = np.asarray(trace)
            line, = ax.plot(arr[:, 0], arr[:, 1], linewidth=1.5, alpha=0.9, label=entity_id)
            ax.plot(arr[-1, 0], arr[-1, 1], 'o', color=line.get_color(), markersize=6)

    def create_overview_figure(self, reachable: Optional[np.ndarray] = None,
                               plateaus: Sequence[TerrainFeature] = (),
                               peaks: Sequence[TerrainFeature] = (),
                               ramps: Sequence[RampPath] = (),
                               spawns: Sequence = (),
                               max_slope: float = 45.0,
                               title: Optional[str] = None) -> plt.Figure:
        """
        Create a four-panel overview.

        Panels: heightmap with layout, slope, reachability, height histogram.
        """
        fig = plt.figure(figsize=self.config.figure_size)
        gs = fig.add_gridspec(2, 2, hspace=0.3, wspace=0.3)

        ax_height = fig.add_subplot(gs[0, 0])
        self.plot_heightmap(ax_height)
        self.plot_features(ax_height, plateaus, peaks, ramps)
        self.plot_spawns(ax_height, spawns)
        if ramps or spawns:
            ax_height.legend(loc='lower left', fontsize=8)

        ax_slope = fig.add_subplot(gs[0, 1])
        self.plot_slope(ax_slope, max_slope)

        if reachable is not None:
            ax_reach = fig.add_subplot(gs[1, 0])
            self.plot_reachability(reachable, ax_reach)
            self.plot_spawns(ax_reach, spawns)

        ax_hist = fig.add_subplot(gs[1, 1])
        ax_hist.hist(self.terrain.heights.ravel(), bins=50, color='steelblue', alpha=0.8)
        ax_hist.set_xlabel('Height')
        ax_hist.set_ylabel('Cells')
        ax_hist.set_title('Height Distribution')

        plt.suptitle(title or f'Arena Terrain - seed {self.terrain.seed}',
                     fontsize=14, fontweight='bold')
        return fig

    def save_figure(self, fig: plt.Figure, filename: str, dpi: int = None):
        """Save figure to file"""
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.savefig(filename, dpi=dpi or self.config.dpi, bbox_inches='tight')
        print(f"Saved figure to {filename}")
