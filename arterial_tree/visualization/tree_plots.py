"""Reference line renderer for RenderData, built on matplotlib."""

from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from .attributes import RenderData


def plot_render_data(
    data: RenderData,
    ax: Optional[plt.Axes] = None,
    show: bool = True,
    title: Optional[str] = None,
    background: Sequence[float] = (0.1, 0.1, 0.1),
    limits: float = 1.0,
) -> plt.Axes:
    """
    Draw render buffers as 2D line segments.

    In thickness mode every segment is drawn with its own clamped width,
    otherwise all segments share ``data.default_width`` in one batch.

    Parameters
    ----------
    data : RenderData
        Output of ``map_attributes``
    ax : matplotlib Axes, optional
        Existing axes
    show : bool
        Whether to call plt.show()
    title : str, optional
        Plot title
    background : sequence of float
        Axes face color (RGB)
    limits : float
        Half-extent of the square view, display coordinates are in
        [-limits, limits]

    Returns
    -------
    ax : matplotlib Axes
        Axes object
    """
    if ax is None:
        fig = plt.figure(figsize=(9, 6))
        ax = fig.add_subplot(111)

    ax.set_facecolor(tuple(background))

    if not data.is_empty():
        widths = data.draw_widths() if data.thickness_mode else data.default_width
        lc = LineCollection(
            data.line_segments(),
            colors=np.asarray(data.segment_colors()),
            linewidths=widths,
            capstyle="round",
        )
        ax.add_collection(lc)

    ax.set_xlim(-limits, limits)
    ax.set_ylim(-limits, limits)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])

    if title:
        ax.set_title(title)

    if show:
        plt.show()

    return ax


def save_render(
    data: RenderData,
    path: Union[str, Path],
    title: Optional[str] = None,
    dpi: int = 150,
) -> Path:
    """
    Render to an image file and close the figure.

    Returns
    -------
    path : Path
        Path of the written image
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig = plt.figure(figsize=(9, 6))
    ax = fig.add_subplot(111)
    plot_render_data(data, ax=ax, show=False, title=title)
    fig.savefig(path, dpi=dpi, facecolor=ax.get_facecolor())
    plt.close(fig)

    return path
