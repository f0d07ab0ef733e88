"""
Basic example of using the arterial tree viewer.

This example demonstrates:
1. Generating the procedural arterial tree
2. Reconstructing its topology and hierarchy metrics
3. Rendering it in every color mode
"""

import matplotlib.pyplot as plt

from arterial_tree import reconstruct_topology, analyze_hierarchy, map_attributes
from arterial_tree.visualization import ColorMode, RenderConfig, plot_render_data
from generators.arterial import generate_procedural_tree

print("Generating procedural arterial tree...")

soup = generate_procedural_tree()
topology = reconstruct_topology(soup)
metrics = analyze_hierarchy(topology, forest=True)

print("\n=== Reconstruction ===")
print(f"Segments: {len(soup)}")
print(f"Root: {topology.root} ({topology.root_status.value})")
print(f"Components: {len(topology.components())}")
print(f"Max depth: {metrics.max_depth}")

fig, axes = plt.subplots(2, 2, figsize=(12, 9))
for ax, mode in zip(axes.flat, ColorMode):
    config = RenderConfig(color_mode=mode, thickness_mode=(mode == ColorMode.DESCENDANT_GRADIENT))
    plot_render_data(map_attributes(soup, metrics, config), ax=ax, show=False, title=mode.value)

plt.tight_layout()
plt.show()
