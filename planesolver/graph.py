"""
3-D preview figure for PlaneSolver.

Draws the planes of one matrix snapshot as translucent square patches,
together with the lines where pairs of planes meet and the points where
three planes meet. Returns a matplotlib Figure that can be saved or embedded.
"""

import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import Patch
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401  (registers "3d")

from planesolver.constants import LINE_SEGMENT_LENGTH
from planesolver.geometry import X_AXIS, build_scene, rotate_vector

# ── palette ────────────────────────────────────────────────────────────────
_DARK_GRAPH = {
    "C_BG":    "#0f0f0f",
    "C_AX":    "#181818",
    "C_GRID":  "#252525",
    "C_TICK":  "#666666",
    "C_LINE":  "#ffffff",   # intersection lines
    "C_DOT":   "#4caf50",   # intersection point
    "C_TEXT":  "#cccccc",
}
_LIGHT_GRAPH = {
    "C_BG":    "#ffffff",
    "C_AX":    "#f5f5f5",
    "C_GRID":  "#dddddd",
    "C_TICK":  "#555555",
    "C_LINE":  "#222222",
    "C_DOT":   "#2e7d32",
    "C_TEXT":  "#222222",
}
PLANE_COLORS = ("#1a8cff", "#ff8c42", "#e040fb", "#ffd740")

_palette = dict(_DARK_GRAPH)

# Half the side of the square patch drawn for each plane.
PLANE_HALF_SIZE = 4.0


def set_theme(name: str) -> None:
    """Switch the module palette to ``"dark"`` or ``"light"``."""
    _palette.update(_LIGHT_GRAPH if name == "light" else _DARK_GRAPH)


def palette() -> dict:
    """Copy of the colours currently in use."""
    return dict(_palette)


def _style_axes(ax, fig):
    fig.patch.set_facecolor(_palette["C_BG"])
    ax.set_facecolor(_palette["C_AX"])
    ax.tick_params(colors=_palette["C_TICK"], labelsize=8)
    for axis in (ax.xaxis, ax.yaxis, ax.zaxis):
        axis.label.set_color(_palette["C_TEXT"])
        axis.set_pane_color(_palette["C_AX"])
    ax.title.set_color(_palette["C_TEXT"])
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_zlabel("z")


def _text_figure(title: str, message: str) -> Figure:
    """Small placeholder figure when there is nothing to draw."""
    fig = Figure(figsize=(6, 2), dpi=100)
    fig.patch.set_facecolor(_palette["C_BG"])
    fig.text(0.5, 0.62, title, ha="center", va="center",
             color=_palette["C_TEXT"], fontsize=12, fontweight="bold")
    fig.text(0.5, 0.35, message, ha="center", va="center",
             color=_palette["C_TEXT"], fontsize=9)
    return fig


def plane_patch(pose: dict, half_size: float = PLANE_HALF_SIZE):
    """Return ``(X, Y, Z)`` grids of a square centred on the plane position."""
    u = rotate_vector(pose["orientation"], X_AXIS)
    v = np.cross(pose["normal"], u)
    s = np.linspace(-half_size, half_size, 2)
    ss, tt = np.meshgrid(s, s)
    origin = pose["position"]
    grid = (origin[:, None, None]
            + u[:, None, None] * ss[None, :, :]
            + v[:, None, None] * tt[None, :, :])
    return grid[0], grid[1], grid[2]


def build_figure(matrix, title: str = "", segment_length: float = LINE_SEGMENT_LENGTH,
                 show_intersections: bool = True) -> Figure:
    """
    Build a 3-D Figure for the equation rows of *matrix*.

    Rows that do not describe a plane (``0 = 0`` or ``0 = k``) are listed in
    the legend text only.
    """
    scene = build_scene(matrix, segment_length)
    drawable = [p for p in scene["planes"]
                if not p["is_degenerate"] and not p["is_identity"]]
    if not drawable:
        return _text_figure(title or "Nothing to draw",
                            "No row of this matrix describes a plane.")

    fig = Figure(figsize=(7, 5.5), dpi=100)
    ax = fig.add_subplot(111, projection="3d")
    _style_axes(ax, fig)

    handles = []
    for pose in drawable:
        X, Y, Z = plane_patch(pose)
        color = PLANE_COLORS[pose["row"] % len(PLANE_COLORS)]
        ax.plot_surface(X, Y, Z, color=color, alpha=0.35, linewidth=0)
        # surfaces have no legend entry of their own
        handles.append(Patch(color=color, alpha=0.6,
                             label=f"R{pose['row'] + 1}: {pose['equation']}"))

    if show_intersections:
        for line in scene["lines"]:
            start, end = line["start"], line["end"]
            ax.plot([start[0], end[0]], [start[1], end[1]], [start[2], end[2]],
                    color=_palette["C_LINE"], linewidth=1.5)
        for item in scene["points"]:
            p = item["point"]
            handles.append(ax.scatter(
                [p[0]], [p[1]], [p[2]], color=_palette["C_DOT"], s=60,
                label=f"({p[0]:.2f}, {p[1]:.2f}, {p[2]:.2f})",
            ))

    lim = PLANE_HALF_SIZE * 2
    ax.set_xlim(-lim, lim)
    ax.set_ylim(-lim, lim)
    ax.set_zlim(-lim, lim)
    if title:
        ax.set_title(title, color=_palette["C_TEXT"], fontsize=10)
    ax.legend(handles=handles, fontsize=8, facecolor=_palette["C_AX"],
              edgecolor=_palette["C_GRID"], labelcolor=_palette["C_TEXT"], loc="upper left")
    return fig
