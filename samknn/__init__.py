"""Self-adjusting memory k-nearest-neighbour classifier for drifting data streams."""

__version__ = "0.1.0"