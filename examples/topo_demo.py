#!/usr/bin/env python3
"""
Demo script showing terrain synthesis and SVG export.
"""

import numpy as np
import matplotlib.pyplot as plt
from py_topo.config import TerrainSettings
from py_topo.core.topographic_map import TopographicMap
from py_topo.core.vector_path import count_groups


def visualize_heights(heights: np.ndarray, segments: int, title: str):
    """Visualize a height field as a heatmap."""
    grid = heights.reshape(segments + 1, segments + 1)

    plt.figure(figsize=(6, 6))
    plt.imshow(grid, cmap='terrain', vmin=-1.75, vmax=1.75)
    plt.colorbar(label='Height')
    plt.title(title)
    plt.xlabel('X')
    plt.ylabel('Y')


def main():
    """Demonstrate terrain generation and export."""
    print("py-topo Terrain Demo")
    print("=" * 40)

    segments = 100
    width, height = 1200, 800
    terrain = TerrainSettings(segments_x=segments, segments_y=segments)

    topo = TopographicMap.create(seed=42.0, terrain=terrain, aspect=width / height)
    print(f"Seed: {topo.seed}")
    print(f"Vertices: {topo.mesh.vertex_count}, triangles: {topo.mesh.triangle_count}")

    heights = np.array(topo.mesh.heights)
    print(f"Height range: {heights.min():.3f} to {heights.max():.3f}")
    visualize_heights(heights, segments, f"Seed {topo.seed}")

    svg = topo.export_vector(width, height)
    with open("topo_demo.svg", "w") as f:
        f.write(svg)
    print(f"Saved topo_demo.svg with {count_groups(svg)} outlines")

    # New map: same grid and camera, new seed
    new_seed = topo.regenerate()
    print(f"\nRegenerated with seed {new_seed:.3f}")
    visualize_heights(np.array(topo.mesh.heights), segments, f"Seed {new_seed:.3f}")

    plt.show()


if __name__ == "__main__":
    main()
