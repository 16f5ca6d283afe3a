"""Formation geometry and show simulation for drone light shows."""

__version__ = "0.1.0"
