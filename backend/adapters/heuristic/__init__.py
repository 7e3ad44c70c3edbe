"""Heuristic speaker clustering without audio features."""

from .gap_clusterer import GapHeuristicClusterer

__all__ = ["GapHeuristicClusterer"]
