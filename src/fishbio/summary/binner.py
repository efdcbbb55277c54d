"""Fixed-width binning of continuous measurements.

Bins are half-open ``[lower, upper)`` intervals of width ``class_interval``
starting at ``origin``. The last bin is closed by default so the maximum
measurement always lands in it.
"""

import logging
import math

import numpy as np

from fishbio.contracts import InvalidConfiguration

__all__ = ['Binner']

logger = logging.getLogger(__name__)

# Significant digits kept below the class interval when snapping edges
_EDGE_DIGITS = 10


class Binner:
    """Compute bin edges and bin assignments for one measurement.

    Parameters
    ----------
    class_interval : float
        Bin width in measurement units. Must be positive and finite.
    origin : float, default 0.0
        Left edge of the first bin.
    close_last : bool, default True
        If True the last bin is ``[lower, upper]`` and its upper edge is the
        smallest edge >= the maximum. If False every bin is half-open and the
        last edge is strictly greater than the maximum.

    Raises
    ------
    InvalidConfiguration
        If ``class_interval`` is not a positive finite number.

    Examples
    --------
    >>> binner = Binner(10)
    >>> edges = binner.edges([5, 15, 25])
    >>> edges
    array([ 0., 10., 20., 30.])
    >>> binner.assign([5, 15, 25], edges)
    array([0, 1, 2])
    """

    def __init__(self, class_interval: float, origin: float = 0.0, close_last: bool = True):
        try:
            width = float(class_interval)
        except (TypeError, ValueError):
            raise InvalidConfiguration(f"Class interval must be a number, got {class_interval!r}") from None
        if not math.isfinite(width) or width <= 0:
            raise InvalidConfiguration(f"Class interval must be positive, got {class_interval!r}")
        self.class_interval = width
        self.origin = float(origin)
        self.close_last = close_last
        self._decimals = _EDGE_DIGITS + max(0, -math.floor(math.log10(width)))

    def _edge(self, i) -> float:
        """Edge ``i``, snapped so decimal widths give exact decimal edges."""
        return round(self.origin + i * self.class_interval, self._decimals)

    def _clean(self, values) -> np.ndarray:
        values = np.asarray(values, dtype=float).ravel()
        values = values[~np.isnan(values)]
        if values.size == 0:
            raise InvalidConfiguration("Cannot bin an empty measurement set")
        vmin = values.min()
        if vmin < self.origin:
            raise InvalidConfiguration(
                f"Value {vmin} lies below the bin origin {self.origin}"
            )
        return values

    def edges(self, values) -> np.ndarray:
        """Bin edges from ``origin`` up to the smallest edge covering the maximum.

        Parameters
        ----------
        values : array-like
            Measurements. NaN is ignored.

        Returns
        -------
        np.ndarray
            Strictly increasing edges, ``len == n_bins + 1`` with ``n_bins >= 1``.

        Raises
        ------
        InvalidConfiguration
            If no finite value remains or a value lies below the origin.
        """
        values = self._clean(values)
        vmax = float(values.max())
        width = self.class_interval

        n_bins = max(1, math.ceil((vmax - self.origin) / width))
        # Float rounding can push the count one bin too far either way
        while n_bins > 1 and self._edge(n_bins - 1) >= vmax:
            n_bins -= 1
        while self._edge(n_bins) < vmax:
            n_bins += 1
        if not self.close_last and self._edge(n_bins) <= vmax:
            n_bins += 1

        edges = np.round(self.origin + width * np.arange(n_bins + 1, dtype=float), self._decimals)
        edges[0] = self.origin
        logger.debug("Binning %d values into %d bins of width %g", values.size, n_bins, width)
        return edges

    def assign(self, values, edges) -> np.ndarray:
        """Index of the bin holding each value.

        ``i`` satisfies ``edges[i] <= v < edges[i + 1]``; with ``close_last``
        a value equal to the last edge goes to the last bin.

        Parameters
        ----------
        values : array-like
            Measurements with NaN already removed.
        edges : array-like
            Output of :meth:`edges`.

        Returns
        -------
        np.ndarray of int
        """
        values = np.asarray(values, dtype=float).ravel()
        edges = np.asarray(edges, dtype=float)
        n_bins = len(edges) - 1

        index = np.searchsorted(edges, values, side="right") - 1
        if self.close_last:
            index = np.where(values == edges[-1], n_bins - 1, index)
        outside = (index < 0) | (index >= n_bins)
        if outside.any():
            raise InvalidConfiguration(
                f"{int(outside.sum())} value(s) fall outside edges [{edges[0]}, {edges[-1]}]"
            )
        return index.astype(int)

    def bin_table(self, edges) -> dict:
        """Lower, upper and midpoint arrays for a set of edges."""
        edges = np.asarray(edges, dtype=float)
        lower = edges[:-1]
        upper = edges[1:]
        return {"lower": lower, "upper": upper, "midpoint": (lower + upper) / 2}
