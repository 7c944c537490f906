"""Logging and metrics for kubeinformer."""
