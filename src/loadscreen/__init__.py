"""Loading-screen sequencing for tick-driven games."""

__version__ = "0.1.0"
