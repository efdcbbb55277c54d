"""Visualization and plotting module for summary tables."""

from .plotter import SummaryPlotter

__all__ = ['SummaryPlotter']
