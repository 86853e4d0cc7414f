"""HTTP load generation with a fixed-size worker pool."""

__version__ = "1.0.0"
