"""Minefield: a mine-clearing puzzle engine served over Temporal and Flask."""
