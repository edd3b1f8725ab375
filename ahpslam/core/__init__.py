"""Core landmark math, models and map state."""
