"""Static figures for fishbio summary tables.

Renders each summary with the matplotlib Agg backend. The figure layout
(size, dpi, margins, panel columns) comes from configuration as an explicit
FigureLayout and is applied per figure; global rcParams are never touched.
"""

import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

try:
    import contextily as ctx
    CONTEXTILY_AVAILABLE = True
except ImportError:
    CONTEXTILY_AVAILABLE = False

from fishbio.summary.length_weight import predict_weight
from fishbio.summary.summarizer import MaturitySummary, ProvinceSpeciesSummary

if TYPE_CHECKING:
    from fishbio.schemas import InternalConfig
    from fishbio.schemas.param import FigureLayout

__all__ = ['SummaryPlotter']

logger = logging.getLogger(__name__)


def _period_axis(values) -> np.ndarray:
    """Monthly periods as timestamps matplotlib can place on an axis."""
    index = pd.Index(values)
    if isinstance(index.dtype, pd.PeriodDtype):
        return index.to_timestamp().to_numpy()
    return index.to_numpy()


class SummaryPlotter:
    """Render fishbio summaries to image files.

    **Figures:**

    - GSI: mean index over time, one line per sex
    - Length frequency: histogram bars at bin midpoints, one panel per group
    - Maturity: percentage-stacked bars of stages I..V per date, one panel
      per sex (iterating the densified sex levels)
    - Province species: one pie of species shares per province, drawn at the
      province's configured lon/lat, optional basemap
    - Length-weight: observations with the fitted ``W = a * L^b`` curve

    **Layout:**

    Every figure is built from ``config.visualization.layout`` (FigureLayout):
    figure size, dpi, subplot margins and number of panel columns.

    Example usage::

        plotter = SummaryPlotter(config)
        path = plotter.plot_maturity(summary, Path("plots/maturity.png"))
    """

    def __init__(self, config: "InternalConfig"):
        viz = config.visualization
        self.layout: "FigureLayout" = viz.layout
        self.output_format = viz.output_format
        self.use_basemap = viz.use_basemap
        self.basemap_alpha = viz.basemap_alpha
        self.pie_radius = viz.pie_radius
        self.measurement = config.binning.measurement

        if self.use_basemap and not CONTEXTILY_AVAILABLE:
            logger.warning("Basemap requested but contextily not installed")
            self.use_basemap = False

        logger.debug("SummaryPlotter initialized (format=%s, dpi=%d)", self.output_format, self.layout.dpi)

    # ------------------------------------------------------------------
    # Figure helpers
    # ------------------------------------------------------------------

    def _setup_figure(self, n_panels: int = 1) -> Tuple[plt.Figure, np.ndarray]:
        """Create a figure with ``n_panels`` axes laid out per FigureLayout."""
        n_panels = max(1, n_panels)
        ncols = min(n_panels, self.layout.ncols)
        nrows = math.ceil(n_panels / ncols)
        fig, axes = plt.subplots(
            nrows, ncols,
            figsize=self.layout.figsize,
            dpi=self.layout.dpi,
            squeeze=False,
        )
        fig.subplots_adjust(
            left=self.layout.left,
            right=self.layout.right,
            bottom=self.layout.bottom,
            top=self.layout.top,
        )
        axes = axes.ravel()
        for ax in axes[n_panels:]:
            ax.set_visible(False)
        return fig, axes[:n_panels]

    def _save_figure(self, fig: plt.Figure, output_path: Path) -> str:
        """Save figure in configured format."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        output_file = output_path.with_suffix(f'.{self.output_format}')

        fig.savefig(
            output_file,
            dpi=self.layout.dpi,
            format=self.output_format,
        )

        plt.close(fig)
        logger.info("Plot saved: %s", output_file)

        return str(output_file)

    # ------------------------------------------------------------------
    # (a) GSI
    # ------------------------------------------------------------------

    def plot_gsi(self, gsi: pd.Series, output_path: Path) -> str:
        """Mean GSI by date, one line per sex."""
        fig, (ax,) = self._setup_figure(1)
        for sex, series in gsi.groupby(level="sex", observed=True, sort=False):
            series = series.droplevel("sex")
            ax.plot(_period_axis(series.index), series.to_numpy(), marker="o", label=str(sex))
        ax.set_xlabel("Date")
        ax.set_ylabel("Mean GSI")
        ax.set_title("Gonado-somatic index by sex")
        ax.legend()
        fig.autofmt_xdate()
        return self._save_figure(fig, output_path)

    # ------------------------------------------------------------------
    # (b) Length frequency
    # ------------------------------------------------------------------

    def plot_length_frequency(self, table: pd.DataFrame, output_path: Path) -> str:
        """Bars of counts at bin midpoints; one panel per group column level."""
        group = next((c for c in table.columns if c not in ("bin", "lower", "upper", "midpoint", "count")), None)
        panels = [(None, table)] if group is None else list(table.groupby(group, observed=True, sort=False))

        fig, axes = self._setup_figure(len(panels))
        for ax, (level, part) in zip(axes, panels):
            ax.bar(
                part["midpoint"], part["count"],
                width=(part["upper"] - part["lower"]) * 0.9,
                edgecolor="black", linewidth=0.5,
            )
            ax.set_xlabel(self.measurement.capitalize())
            ax.set_ylabel("Count")
            ax.set_title("Frequency" if level is None else f"{group}: {level}")
        return self._save_figure(fig, output_path)

    # ------------------------------------------------------------------
    # (c) Maturity
    # ------------------------------------------------------------------

    def plot_maturity(self, summary: MaturitySummary, output_path: Path) -> str:
        """Percentage-stacked maturity stages by date, one panel per sex."""
        panels = list(summary.percentages.items())
        fig, axes = self._setup_figure(len(panels))
        cmap = plt.get_cmap("viridis")

        for ax, (sex, percent) in zip(axes, panels):
            labels = [str(c) for c in percent.columns]
            x = np.arange(len(labels))
            bottom = np.zeros(len(labels))
            n_stages = len(percent.index)
            for i, (stage, row) in enumerate(percent.iterrows()):
                values = row.to_numpy(dtype=float)
                ax.bar(x, values, bottom=bottom, label=str(stage),
                       color=cmap(i / max(1, n_stages - 1)))
                bottom += values
            ax.set_xticks(x)
            ax.set_xticklabels(labels, rotation=45, ha="right")
            ax.set_ylim(0, 100)
            ax.set_ylabel("Percent")
            ax.set_title(str(sex))
        axes[0].legend(title="Maturity", loc="upper left", fontsize="small")
        return self._save_figure(fig, output_path)

    # ------------------------------------------------------------------
    # (d) Province species pies
    # ------------------------------------------------------------------

    def _pie_positions(self, totals: pd.DataFrame) -> Tuple[np.ndarray, np.ndarray]:
        if {"lon", "lat"} <= set(totals.columns):
            return totals["lon"].to_numpy(dtype=float), totals["lat"].to_numpy(dtype=float)
        # No coordinates configured: a row of pies
        n = len(totals)
        return np.arange(n, dtype=float) * 3 * self.pie_radius, np.zeros(n)

    def _add_basemap(self, ax: plt.Axes) -> None:
        """Add OpenStreetMap basemap to a lon/lat axis."""
        if not self.use_basemap or not CONTEXTILY_AVAILABLE:
            return

        try:
            ctx.add_basemap(
                ax,
                crs="EPSG:4326",
                source=ctx.providers.OpenStreetMap.Mapnik,
                alpha=self.basemap_alpha,
                attribution=False,
            )
        except Exception as e:
            logger.warning("Could not add basemap: %s", e)

    def plot_province_pies(self, summary: ProvinceSpeciesSummary, output_path: Path) -> str:
        """One pie of species shares per province, placed at its coordinates."""
        shares = summary.shares
        xs, ys = self._pie_positions(summary.totals)
        r = self.pie_radius
        colors = [plt.get_cmap("tab20")(i % 20) for i in range(len(shares.columns))]

        fig, (ax,) = self._setup_figure(1)
        ax.set_xlim(xs.min() - 2 * r, xs.max() + 2 * r)
        ax.set_ylim(ys.min() - 2 * r, ys.max() + 2 * r)
        ax.set_aspect("equal", adjustable="datalim")
        self._add_basemap(ax)

        for (province, row), x, y in zip(shares.iterrows(), xs, ys):
            values = row.to_numpy(dtype=float)
            pie_ax = ax.inset_axes([x - r, y - r, 2 * r, 2 * r], transform=ax.transData)
            if values.sum() > 0:
                pie_ax.pie(values, colors=colors, wedgeprops={"linewidth": 0.5, "edgecolor": "white"})
            pie_ax.set_aspect("equal")
            pie_ax.axis("off")
            ax.annotate(str(province), (x, y - 1.2 * r), ha="center", va="top", fontsize="small")

        handles = [plt.Rectangle((0, 0), 1, 1, color=c) for c in colors]
        ax.legend(handles, [str(s) for s in shares.columns], title="Species",
                  loc="upper left", bbox_to_anchor=(1.0, 1.0), fontsize="small")
        ax.set_xlabel("Longitude")
        ax.set_ylabel("Latitude")
        ax.set_title("Catch composition by province")
        return self._save_figure(fig, output_path)

    # ------------------------------------------------------------------
    # (e) Length-weight
    # ------------------------------------------------------------------

    def plot_length_weight(
        self,
        fits: pd.DataFrame,
        output_path: Path,
        observations: Optional[pd.DataFrame] = None,
    ) -> str:
        """Fitted ``W = a * L^b`` curves, over the observations when given."""
        by = fits.index.name
        fig, (ax,) = self._setup_figure(1)

        if observations is not None and len(observations):
            lengths = observations["length"].to_numpy(dtype=float)
            lengths = lengths[np.isfinite(lengths) & (lengths > 0)]
        else:
            lengths = np.array([])
        lo = lengths.min() if lengths.size else 1.0
        hi = lengths.max() if lengths.size else 100.0
        grid = np.linspace(lo, hi, 200)

        for label, fit in fits.iterrows():
            line, = ax.plot(
                grid, predict_weight(grid, fit["a"], fit["b"]),
                label=f"{label}: W = {fit['a']:.3g} L^{fit['b']:.2f}",
            )
            if observations is not None and len(observations):
                points = observations if by not in observations.columns else observations[observations[by] == label]
                ax.scatter(points["length"], points["weight"], s=8, alpha=0.4, color=line.get_color())

        ax.set_xlabel("Length")
        ax.set_ylabel("Weight")
        ax.set_title("Length-weight relationship")
        ax.legend(fontsize="small")
        return self._save_figure(fig, output_path)
