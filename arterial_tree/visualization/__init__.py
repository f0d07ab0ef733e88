from .attributes import (
    ColorMode,
    UnreachablePolicy,
    RenderConfig,
    RenderData,
    segment_color,
    segment_thickness,
    map_attributes,
)
from .tree_plots import plot_render_data, save_render

__all__ = [
    'ColorMode',
    'UnreachablePolicy',
    'RenderConfig',
    'RenderData',
    'segment_color',
    'segment_thickness',
    'map_attributes',
    'plot_render_data',
    'save_render',
]
