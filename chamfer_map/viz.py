# region Imports
import io
import numpy as np
import matplotlib
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from matplotlib.patches import Patch
from PIL import Image
from chamfer_map.config import ORTHO_WEIGHT
# endregion

# region Helpers
def _distance_image(bmap) -> np.ma.MaskedArray:
    return bmap.distance_map().astype(np.float32) / ORTHO_WEIGHT


def _extent(bmap):
    # pixel edges in caller coordinates, origin at the top-left
    x0, y0 = bmap.origin()
    return (x0 - 0.5, x0 + bmap.width() - 0.5, y0 + bmap.height() - 0.5, y0 - 0.5)
# endregion

# region PNG Rendering
def render_distance_png(bmap) -> bytes:
    """
    Grayscale PNG of the distance field: features black, farthest reachable
    cell white. Unreachable cells are white as well.
    """
    img = _distance_image(bmap)
    hi = float(img.max()) if img.count() else 0.0
    scaled = np.clip(img / max(hi, 1e-6), 0, 1).filled(1.0)
    buf = io.BytesIO()
    Image.fromarray((scaled * 255).astype("uint8"), "L").save(buf, "PNG")
    return buf.getvalue()
# endregion

# region Heatmap
def show_distance_heatmap(bmap, coords=None, title="Chamfer distance field", show=True):
    """
    Distance field with the nearest-feature regions outlined and, if coords is
    given, the feature points on top. Returns (fig, ax).
    """
    img = _distance_image(bmap)
    regions = bmap.index_map().astype(np.float32)
    extent = _extent(bmap)

    fig, ax = plt.subplots(figsize=(8, 8))
    cmap = matplotlib.colormaps["viridis"].with_extremes(bad="white")
    heat = ax.imshow(img, origin="upper", cmap=cmap, extent=extent)
    cbar = fig.colorbar(heat, ax=ax, fraction=0.046, pad=0.04)
    cbar.set_label("distance (cells, 3-4 chamfer)")

    # region Region Boundaries
    labels = np.unique(regions.compressed())
    if len(labels) > 1:
        ax.contour(regions.filled(-1), levels=labels[:-1] + 0.5,
                   colors="black", linewidths=0.6, origin="upper", extent=extent)
    # endregion

    # region Feature Overlay
    if coords is not None and len(coords):
        pts = np.asarray(coords).reshape(-1, 2)
        ax.scatter(pts[:, 0], pts[:, 1], s=40, edgecolors="black", facecolors="red", zorder=3)
    # endregion

    legend_elements = [
        Line2D([0], [0], marker="o", color="w", label="Feature",
               markerfacecolor="red", markeredgecolor="black", markersize=8),
        Line2D([0], [0], color="black", lw=1, label="Nearest-feature boundary"),
        Patch(facecolor="white", edgecolor="black", label="Unreachable"),
    ]
    ax.legend(handles=legend_elements, loc="lower right", fontsize=8, framealpha=0.85)
    ax.set_title(title)
    plt.tight_layout()
    if show:
        plt.show()
    return fig, ax
# endregion
