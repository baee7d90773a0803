"""Core scan pipeline."""
